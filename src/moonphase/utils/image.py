from __future__ import annotations

import numpy as np
from PIL import Image
from typing import Sequence, Tuple


# Dark maria as (x, y, radius) on the unit disc, x to the right and y down.
MARIA: Sequence[Tuple[float, float, float]] = (
    (-0.30, -0.42, 0.30),  # Imbrium
    (0.08, -0.38, 0.17),  # Serenitatis
    (0.24, -0.08, 0.22),  # Tranquillitatis
    (0.62, -0.28, 0.12),  # Crisium
    (-0.58, -0.02, 0.34),  # Procellarum
    (-0.16, 0.36, 0.16),  # Nubium
    (0.48, 0.22, 0.14),  # Fecunditatis
)


def generate_moon_texture(
    size: int,
    moon_color: Tuple[int, int, int] = (226, 224, 214),
    maria_color: Tuple[int, int, int] = (128, 126, 120),
    limb_darkening: float = 0.35,
) -> Image.Image:
    """Generate a full moon disc with limb darkening and a few maria.

    Returns a PIL Image (RGBA) of dimensions (size, size), transparent
    outside the disc.
    """
    if size <= 0:
        raise ValueError(f"texture size must be positive, got {size}")
    r = size / 2
    yy, xx = np.mgrid[0:size, 0:size].astype(np.float64)
    dx = (xx + 0.5 - r) / r
    dy = (yy + 0.5 - r) / r
    d2 = dx**2 + dy**2
    inside = d2 <= 1.0

    dz = np.sqrt(np.clip(1.0 - d2, 0.0, 1.0))
    light = 1.0 - limb_darkening * (1.0 - dz)

    maria = np.zeros_like(d2)
    for mx, my, mr in MARIA:
        blob = 1.0 - ((dx - mx) ** 2 + (dy - my) ** 2) / mr**2
        maria = np.maximum(maria, np.clip(blob, 0.0, 1.0))
    maria = np.sqrt(maria)[..., None]

    c = np.array(moon_color, dtype=np.float64) * (1.0 - maria) + np.array(maria_color, dtype=np.float64) * maria
    c = c * light[..., None]

    img_array = np.zeros((size, size, 4), dtype=np.uint8)
    img_array[..., :3] = np.clip(c, 0, 255).astype(np.uint8)
    img_array[..., 3] = np.where(inside, 255, 0)
    return Image.fromarray(img_array)


def resize_box(img: Image.Image, size: int) -> Image.Image:
    """Scale img to size x size with an area-averaging filter."""
    return img.resize((size, size), resample=Image.Resampling.BOX)
