"""Phase mask geometry.

The phase of the moon is a number in [-1.0, 1.0]. Its absolute value is the
lit fraction of the disc; negative values are waxing and positive values are
waning. Both -1.0 and 1.0 are a full moon and 0.0 is a new moon, so a whole
cycle runs 0.0 -> -1.0 while waxing and 1.0 -> 0.0 while waning.
"""

import math
from typing import Optional, Tuple

from .path import MaskPath


def validate_size(width: int, height: int) -> None:
    if width <= 0 or height <= 0:
        raise ValueError(f"canvas size must be positive, got {width}x{height}")


def validate_phase(phase: float) -> None:
    if not math.isfinite(phase) or not -1.0 <= phase <= 1.0:
        raise ValueError(f"phase must be within [-1.0, 1.0], got {phase!r}")


def validate_shadow(shadow: float) -> None:
    if not math.isfinite(shadow) or not 0.0 <= shadow <= 1.0:
        raise ValueError(f"shadow must be within [0.0, 1.0], got {shadow!r}")


def terminator_geometry(phase: float) -> Tuple[float, float]:
    """Map a phase onto the arc sweep and the terminator x-radius scale.

    The arcs sweep clockwise while the lit edge grows to the right, which is
    the opposite of the phase sign, so the phase is negated first. The
    returned scale multiplies the disc x-radius: 1.0 puts the terminator on
    the far edge (full), -1.0 folds it onto the near edge (new) and 0.0 makes
    it the vertical centreline (half).
    """
    q = -phase
    if q < 0:
        return (math.pi, 2 * ((-1 - q) + 0.5))
    return (-math.pi, 2 * (q - 0.5))


def draw_phase_mask(path: MaskPath, width: int, height: int, phase: float) -> None:
    """Append the lit region of the moon for phase to path.

    The mask is drawn in the box (0, 0, width, height) with the centre of the
    moon at (width // 2, height // 2). Nothing is filled or stroked; the
    caller decides what to do with the path.
    """
    validate_size(width, height)
    cx = float(width // 2)
    cy = float(height // 2)
    sweep, scale = terminator_geometry(phase)
    path.move_to(cx, cy * 2)
    # Disc edge on the lit side, bottom to top.
    path.arc_to(cx, cy, cx, cy, math.pi / 2, sweep)
    # Terminator, top back to bottom.
    path.arc_to(cx, cy, cx * scale, cy, -math.pi / 2, sweep)
    path.close()


def phase_mask_path(width: int, height: int, phase: float, path: Optional[MaskPath] = None) -> MaskPath:
    validate_phase(phase)
    if path is None:
        path = MaskPath()
    draw_phase_mask(path, width, height, phase)
    return path
