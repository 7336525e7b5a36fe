from typing import Tuple, Union

import numpy as np
from PIL import Image, ImageColor, ImageDraw

from .path import MaskPath


Color = Union[str, int, Tuple[int, ...]]

# Scanlines intersected with the edge list at once in Painter.coverage.
ROW_BAND = 128


def to_ink(color: Color, mode: str) -> Union[int, Tuple[int, ...]]:
    """Convert a colour name or tuple into a pixel value for an image mode."""
    if isinstance(color, str):
        return ImageColor.getcolor(color, mode)
    if isinstance(color, tuple):
        if Image.getmodebands(mode) == 1:
            r, g, b, _ = to_rgba(color)
            # ITU-R 601-2 luma, as Image.convert("L") does.
            return (r * 299 + g * 587 + b * 114) // 1000
        if mode == "RGBA" and len(color) == 3:
            return color + (255,)
    return color


def to_rgba(color: Color) -> Tuple[int, int, int, int]:
    if isinstance(color, str):
        return ImageColor.getcolor(color, "RGBA")
    if isinstance(color, int):
        return (color, color, color, 255)
    if len(color) == 1:
        return (color[0], color[0], color[0], 255)
    if len(color) == 3:
        return tuple(color) + (255,)
    return tuple(color)


class Painter:
    """Fills and strokes mask paths on a Pillow image owned by the caller."""

    def __init__(self, image: Image.Image):
        self.image = image

    def coverage(self, path: MaskPath) -> np.ndarray:
        """Boolean (height, width) array of the pixels whose centre is inside path.

        Uses the even-odd rule on scanlines through the pixel centres, so a
        path of zero area covers nothing. Each pixel is either in or out;
        edges are not anti-aliased.
        """
        width, height = self.image.size
        covered = np.zeros((height, width), dtype=bool)
        edges = path.edges()
        if len(edges) == 0:
            return covered

        x0, y0, x1, y1 = edges.T
        y_lo = np.minimum(y0, y1)
        y_hi = np.maximum(y0, y1)
        dy = y1 - y0
        slope = (x1 - x0) / np.where(dy == 0, 1.0, dy)
        centers = np.arange(width, dtype=np.float64) + 0.5

        for top in range(0, height, ROW_BAND):
            ys = np.arange(top, min(top + ROW_BAND, height), dtype=np.float64) + 0.5
            # Half-open spans so a vertex shared by two edges counts once.
            active = (ys[:, None] >= y_lo[None, :]) & (ys[:, None] < y_hi[None, :])
            crossings = x0[None, :] + (ys[:, None] - y0[None, :]) * slope[None, :]
            for i in np.flatnonzero(active.any(axis=1)):
                xs = np.sort(crossings[i, active[i]])
                covered[top + i] = np.searchsorted(xs, centers, side="left") % 2 == 1
        return covered

    def fill_path(self, path: MaskPath, color: Color) -> None:
        """Paint the inside of path with a solid colour, without blending."""
        covered = self.coverage(path)
        if not covered.any():
            return
        mask = Image.fromarray(covered.astype(np.uint8) * 255)
        self.image.paste(to_ink(color, self.image.mode), None, mask)

    def stroke_path(self, path: MaskPath, color: Color, width: int = 1) -> None:
        """Draw the outline of path composited over the image."""
        layer = Image.new("RGBA", self.image.size, (0, 0, 0, 0))
        draw = ImageDraw.Draw(layer)
        ink = to_rgba(color)
        for points in path.subpaths():
            if len(points) < 2:
                continue
            draw.line([(float(x), float(y)) for x, y in points], fill=ink, width=width, joint="curve" if width > 1 else None)

        if self.image.mode == "RGBA":
            self.image.alpha_composite(layer)
        else:
            self.image.paste(layer.convert(self.image.mode), None, layer.getchannel("A"))
