from typing import Optional, Tuple

from PIL import Image, ImageChops

from ..catalog import TextureCatalog
from .mask import phase_mask_path, validate_phase, validate_shadow, validate_size
from .raster import Color, Painter


FULL = 1.0


def fill_moon_icon(canvas: Image.Image, light: Color, shadow: Color, phase: float) -> Image.Image:
    """Draw a two colour moon onto canvas and return it.

    The whole disc is painted in shadow first, then the lit part in light.
    Both are solid fills that replace the pixels underneath.
    """
    width, height = canvas.size
    painter = Painter(canvas)
    painter.fill_path(phase_mask_path(width, height, FULL), shadow)
    painter.fill_path(phase_mask_path(width, height, phase), light)
    return canvas


def stroke_moon_icon(canvas: Image.Image, light: Color, shadow: Color, phase: float) -> None:
    """Like fill_moon_icon but only draws outlines.

    The full circle is always stroked first in shadow, then the outline of
    the lit part in light.
    """
    width, height = canvas.size
    painter = Painter(canvas)
    painter.stroke_path(phase_mask_path(width, height, FULL), shadow)
    painter.stroke_path(phase_mask_path(width, height, phase), light)


def build_alpha_mask(size: Tuple[int, int], phase: float, shadow: float) -> Image.Image:
    """Return the "L" mask that lets the texture through.

    The dark side gets shadow*255 and the lit side 255; outside the disc
    stays 0.
    """
    width, height = size
    validate_size(width, height)
    validate_phase(phase)
    validate_shadow(shadow)

    w = -1.0 if phase < 0 else 1.0
    p = abs(phase)

    mask = Image.new("L", (width, height), 0)
    painter = Painter(mask)
    painter.fill_path(phase_mask_path(width, height, -w * (1 - p)), int(shadow * 255))
    painter.fill_path(phase_mask_path(width, height, w * p), 255)
    return mask


def draw_from_image(moon: Image.Image, phase: float, shadow: float) -> Image.Image:
    """Return a new RGBA image of moon at phase.

    shadow is how much light the dark side keeps: 0.0 makes it pure black,
    1.0 does not shade it at all. moon itself is not modified.
    """
    mask = build_alpha_mask(moon.size, phase, shadow)
    width, height = moon.size

    result = Image.new("RGBA", moon.size, (0, 0, 0, 0))
    Painter(result).fill_path(phase_mask_path(width, height, FULL), (0, 0, 0, 255))

    src = moon.convert("RGBA")
    src.putalpha(ImageChops.multiply(src.getchannel("A"), mask))
    result.alpha_composite(src)
    return result


def draw(size: int, phase: float, shadow: float, catalog: TextureCatalog) -> Optional[Image.Image]:
    """Return a size x size image of the moon, or None if catalog is empty.

    The texture is the smallest one in catalog that is at least size pixels,
    scaled down to size.
    """
    validate_size(size, size)
    validate_phase(phase)
    validate_shadow(shadow)
    moon = catalog.texture_for(size)
    if moon is None:
        return None
    return draw_from_image(moon, phase, shadow)
