from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional

from PIL import Image


class MoonPhase(Enum):
    NEW_MOON = "new moon"
    WAXING_CRESCENT = "waxing crescent"
    FIRST_QUARTER = "first quarter"
    WAXING_GIBBOUS = "waxing gibbous"
    FULL_MOON = "full moon"
    WANING_GIBBOUS = "waning gibbous"
    THIRD_QUARTER = "third quarter"
    WANING_CRESCENT = "waning crescent"

    @property
    def is_waxing(self) -> bool:
        """New moon counts as the start of the waxing half of the cycle."""
        return self in WAXING_PHASES


WAXING_PHASES = frozenset(
    {
        MoonPhase.NEW_MOON,
        MoonPhase.WAXING_CRESCENT,
        MoonPhase.FIRST_QUARTER,
        MoonPhase.WAXING_GIBBOUS,
    }
)


@dataclass(frozen=True)
class MoonTexture:
    """A base image of the full moon registered under its nominal size."""

    size: int
    image: Image.Image


@dataclass
class MoonInformation:
    """Where the moon is and how much of it is lit.

    illumination is in [-1.0, 1.0]: the absolute value is the lit fraction,
    negative while waxing and positive while waning.
    """

    moonrise: Optional[datetime]
    moonset: Optional[datetime]
    direction: float  # azimuth, degrees from north
    elevation: float  # degrees above the horizon
    illumination: float
    phase: MoonPhase


@dataclass
class Settings:
    """Persisted user defaults for the command line."""

    lat: float
    lon: float
    shadow: float
    size: int
