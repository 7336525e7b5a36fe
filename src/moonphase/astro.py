import logging
from datetime import datetime, timedelta
from functools import lru_cache
from pathlib import Path
from typing import Any, Optional, Tuple, Union

from appdirs import user_cache_dir
import astropy.time
from skyfield import almanac
from skyfield.api import Loader, wgs84
import skyfield.timelib

from .paths import APP_AUTHOR, APP_ID, EPHEMERIS_FILE, PRINCIPAL_PHASE_HALF_WIDTH_DEG
from .types import MoonInformation, MoonPhase


logger = logging.getLogger(__name__)

TimeLike = Union[astropy.time.Time, datetime]

# Principal phases by sun-moon ecliptic elongation (deg); the others fill the gaps.
_PRINCIPAL_PHASES = (
    (0.0, MoonPhase.NEW_MOON),
    (90.0, MoonPhase.FIRST_QUARTER),
    (180.0, MoonPhase.FULL_MOON),
    (270.0, MoonPhase.THIRD_QUARTER),
    (360.0, MoonPhase.NEW_MOON),
)
_INTERMEDIATE_PHASES = (
    MoonPhase.WAXING_CRESCENT,
    MoonPhase.WAXING_GIBBOUS,
    MoonPhase.WANING_GIBBOUS,
    MoonPhase.WANING_CRESCENT,
)


def _skyfield_loader() -> Loader:
    cache_path = Path(user_cache_dir(appname=APP_ID, appauthor=APP_AUTHOR))
    cache_path.mkdir(parents=True, exist_ok=True)
    return Loader(str(cache_path))


@lru_cache(maxsize=1)
def load_ephemeris() -> Tuple[Any, skyfield.timelib.Timescale]:
    """Load (and download on first use) the planetary ephemeris and a timescale."""
    load = _skyfield_loader()
    logger.info("Loading ephemeris %s from %s", EPHEMERIS_FILE, load.directory)
    return (load(EPHEMERIS_FILE), load.timescale())


def phase_category(elongation_deg: float) -> MoonPhase:
    """Name the phase for a sun-moon elongation in degrees (0 new, 180 full)."""
    angle = elongation_deg % 360.0
    h = PRINCIPAL_PHASE_HALF_WIDTH_DEG
    for center, phase in _PRINCIPAL_PHASES:
        if abs(angle - center) < h:
            return phase
    return _INTERMEDIATE_PHASES[int(angle // 90.0)]


def signed_illumination(fraction: float, phase: MoonPhase) -> float:
    """Negative while waxing (new moon included), positive otherwise."""
    return -fraction if phase.is_waxing else fraction


def illumination_to_phase(info: MoonInformation) -> float:
    """Render phase for info; both use the same sign convention."""
    return max(-1.0, min(1.0, info.illumination))


def to_skyfield_time(ts: skyfield.timelib.Timescale, time_obj: TimeLike) -> skyfield.timelib.Time:
    if isinstance(time_obj, datetime):
        if time_obj.tzinfo is None:
            raise ValueError("datetime must be timezone-aware")
        return ts.from_datetime(time_obj)
    return ts.from_astropy(time_obj)


def to_local_datetime(ts: skyfield.timelib.Timescale, time_obj: TimeLike) -> datetime:
    """time_obj as an aware datetime; astropy times come back in UTC."""
    if isinstance(time_obj, datetime):
        return time_obj
    return to_skyfield_time(ts, time_obj).utc_datetime()


def find_moon_events(
    ephemeris: Any,
    ts: skyfield.timelib.Timescale,
    when: datetime,
    lat: float,
    lon: float,
) -> Tuple[Optional[datetime], Optional[datetime]]:
    """First moonrise and moonset of the calendar day containing when, in when's time zone.

    The returned times carry when's tzinfo. Either is None if the moon
    does not rise (or set) that day.
    """
    if when.tzinfo is None:
        raise ValueError("datetime must be timezone-aware")
    tz = when.tzinfo
    start = datetime(when.year, when.month, when.day, tzinfo=tz)
    t0 = ts.from_datetime(start)
    t1 = ts.from_datetime(start + timedelta(days=1))
    f = almanac.risings_and_settings(ephemeris, ephemeris["moon"], wgs84.latlon(lat, lon))
    times, events = almanac.find_discrete(t0, t1, f)
    logger.debug("Moon events between %s and %s: %d", start, start + timedelta(days=1), len(events))

    moonrise: Optional[datetime] = None
    moonset: Optional[datetime] = None
    for ti, event in zip(times, events):
        if event == 1 and moonrise is None:
            moonrise = ti.utc_datetime().astimezone(tz)
        elif event == 0 and moonset is None:
            moonset = ti.utc_datetime().astimezone(tz)
    return (moonrise, moonset)


def get_information(
    time_obj: TimeLike,
    lat: float,
    lon: float,
    ephemeris: Any = None,
    ts: Optional[skyfield.timelib.Timescale] = None,
) -> MoonInformation:
    """Return where the moon is and how lit it is for an observer at lat/lon."""
    if ephemeris is None or ts is None:
        ephemeris, ts = load_ephemeris()
    t = to_skyfield_time(ts, time_obj)

    observer = ephemeris["earth"] + wgs84.latlon(lat, lon)
    alt, az, _ = observer.at(t).observe(ephemeris["moon"]).apparent().altaz()

    phase = phase_category(almanac.moon_phase(ephemeris, t).degrees)
    fraction = float(almanac.fraction_illuminated(ephemeris, "moon", t))
    moonrise, moonset = find_moon_events(ephemeris, ts, to_local_datetime(ts, time_obj), lat, lon)

    return MoonInformation(
        moonrise=moonrise,
        moonset=moonset,
        direction=float(az.degrees) % 360.0,
        elevation=float(alt.degrees),
        illumination=signed_illumination(fraction, phase),
        phase=phase,
    )
