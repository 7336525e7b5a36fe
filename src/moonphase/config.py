import json
from dataclasses import asdict
from pathlib import Path
from typing import Optional

from appdirs import user_config_dir

from .paths import APP_ID, APP_AUTHOR, DEFAULT_LAT, DEFAULT_LON, DEFAULT_SHADOW, DEFAULT_SIZE
from .types import Settings


_config_file = Path(user_config_dir(APP_ID, APP_AUTHOR)) / "config.json"


def default_settings() -> Settings:
    return Settings(lat=DEFAULT_LAT, lon=DEFAULT_LON, shadow=DEFAULT_SHADOW, size=DEFAULT_SIZE)


def load_settings(path: Optional[Path] = None) -> Settings:
    """Read the saved settings, falling back to defaults for anything missing or broken."""
    settings = default_settings()
    try:
        data = json.loads((path or _config_file).read_text(encoding="utf-8"))
    except FileNotFoundError:
        return settings
    except json.JSONDecodeError:
        return settings
    if not isinstance(data, dict):
        return settings

    for key, convert in (("lat", float), ("lon", float), ("shadow", float), ("size", int)):
        if key not in data:
            continue
        try:
            setattr(settings, key, convert(data[key]))
        except (TypeError, ValueError):
            continue
    return settings


def save_settings(settings: Settings, path: Optional[Path] = None) -> None:
    config_file = path or _config_file
    config_file.parent.mkdir(parents=True, exist_ok=True)
    config_file.write_text(json.dumps(asdict(settings), ensure_ascii=False), encoding="utf-8")
