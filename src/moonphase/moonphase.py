# -*- coding: utf-8 -*-
import argparse
from datetime import datetime, timedelta
import logging
import sys
from typing import List, Optional

from PIL import Image

from .astro import get_information, illumination_to_phase
from .catalog import TextureCatalog, default_catalog
from .config import load_settings, save_settings
from .paths import DEFAULT_DARK_COLOR, DEFAULT_LIGHT_COLOR, DEFAULT_OUTLINE_COLOR
from .render.draw import draw, fill_moon_icon, stroke_moon_icon
from .render.mask import validate_phase, validate_shadow
from .types import MoonInformation


logger = logging.getLogger(__name__)


def setup_logging(level: str = "WARNING") -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parses command-line arguments."""
    parser = argparse.ArgumentParser(description="Render the moon at any phase")
    parser.add_argument("output", type=str, nargs="?", default="", help="PNG file to write")
    parser.add_argument(
        "-p", "--phase",
        type=float,
        default=None,
        help="Phase in [-1, 1]: negative waxing, positive waning, 0 new, +/-1 full (default: the current phase)",
    )
    parser.add_argument("-s", "--size", type=int, default=None, help="Image width and height in pixels (default: from config, 128)")
    parser.add_argument("-S", "--shadow", type=float, default=None, help="Brightness of the dark side, 0 black to 1 unshaded (default: from config, 0.33)")
    parser.add_argument("-i", "--icon", action="store_true", help="Draw a flat two colour icon instead of a photo")
    parser.add_argument("--light", type=str, default=DEFAULT_LIGHT_COLOR, help=f"Icon colour of the lit part (default: {DEFAULT_LIGHT_COLOR})")
    parser.add_argument("--dark", type=str, default=DEFAULT_DARK_COLOR, help=f"Icon colour of the dark part (default: {DEFAULT_DARK_COLOR})")
    parser.add_argument("--outline", type=str, default=DEFAULT_OUTLINE_COLOR, help=f"Icon outline colour (default: {DEFAULT_OUTLINE_COLOR})")
    parser.add_argument("-t", "--textures", type=str, default=None, help="Directory of moon-<size>.png textures (default: generated textures)")
    parser.add_argument("-H", "--hours", type=float, default=0, help="Number of hours to add to current time (default: 0)")
    parser.add_argument("-D", "--days", type=float, default=0, help="Number of days to add to current time (default: 0)")
    parser.add_argument("--lat", type=float, default=None, help="Observer latitude [deg] (saved for later runs)")
    parser.add_argument("--lon", type=float, default=None, help="Observer longitude [deg] (saved for later runs)")
    parser.add_argument("--info", action="store_true", help="Print rise/set times, position and illumination")
    parser.add_argument("--show", action="store_true", help="Open a window showing the current moon")
    parser.add_argument("--log-level", type=str, default="WARNING", help="Logging level (default: WARNING)")
    return parser.parse_args(argv)


def print_information(info: MoonInformation) -> None:
    def iso(dt: Optional[datetime]) -> str:
        return dt.isoformat(timespec="minutes") if dt is not None else "none"

    print(f"Phase: {info.phase.value}")
    print(f"Illumination: {info.illumination:+.3f}")
    print(f"Moonrise: {iso(info.moonrise)}")
    print(f"Moonset: {iso(info.moonset)}")
    print(f"Direction: {info.direction:.1f}")
    print(f"Elevation: {info.elevation:.1f}")


def load_catalog(textures: Optional[str]) -> TextureCatalog:
    return TextureCatalog.from_directory(textures) if textures else default_catalog()


def render_icon(size: int, phase: float, light: str, dark: str, outline: str) -> Image.Image:
    img = Image.new("RGBA", (size, size), (0, 0, 0, 0))
    fill_moon_icon(img, light, dark, phase)
    stroke_moon_icon(img, outline, (0, 0, 0, 0), 1.0)
    return img


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the moon renderer."""
    args = parse_args(argv)
    setup_logging(args.log_level)

    settings = load_settings()
    logger.debug("Settings: %s", settings)
    if args.lat is not None or args.lon is not None:
        settings.lat = args.lat if args.lat is not None else settings.lat
        settings.lon = args.lon if args.lon is not None else settings.lon
        save_settings(settings)
    size = args.size if args.size is not None else settings.size
    shadow = args.shadow if args.shadow is not None else settings.shadow
    delta_t = timedelta(days=args.days, hours=args.hours)

    if size <= 0:
        print(f"Error: size must be positive: {size}", file=sys.stderr)
        return 2
    try:
        validate_shadow(shadow)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    if args.show:
        from .ui.window import run_viewer

        return run_viewer(load_catalog(args.textures), (settings.lat, settings.lon), size, shadow, delta_t)

    if not args.output and not args.info:
        print("Error: nothing to do, give an output file or --info", file=sys.stderr)
        return 2

    info: Optional[MoonInformation] = None
    if args.info or args.phase is None:
        now = datetime.now().astimezone() + delta_t
        info = get_information(now, settings.lat, settings.lon)
        if args.info:
            print_information(info)
    if not args.output:
        return 0

    phase = args.phase if args.phase is not None else illumination_to_phase(info)
    try:
        validate_phase(phase)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    if args.icon:
        img = render_icon(size, phase, args.light, args.dark, args.outline)
    else:
        img = draw(size, phase, shadow, load_catalog(args.textures))
        if img is None:
            print("Error: no moon texture available", file=sys.stderr)
            return 1

    img.save(args.output)
    print(f"Wrote: {args.output}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
