import math
from typing import List, Optional, Tuple

import numpy as np

from ..paths import ARC_SEGMENT_LENGTH, MIN_ARC_SEGMENTS


Point = Tuple[float, float]


class MaskPath:
    """A path made of straight segments, built with move/arc/close calls.

    Angles are in radians and follow the screen convention: a point at angle a
    on an arc is (cx + rx*cos(a), cy + ry*sin(a)) with y pointing down, so
    positive sweeps turn clockwise on screen.
    """

    def __init__(self) -> None:
        self._subpaths: List[List[Point]] = []
        self._closed: List[bool] = []

    @property
    def current_point(self) -> Optional[Point]:
        if not self._subpaths or not self._subpaths[-1]:
            return None
        return self._subpaths[-1][-1]

    def move_to(self, x: float, y: float) -> None:
        self._subpaths.append([(float(x), float(y))])
        self._closed.append(False)

    def line_to(self, x: float, y: float) -> None:
        if self.current_point is None:
            self.move_to(x, y)
            return
        self._subpaths[-1].append((float(x), float(y)))

    def arc_to(self, cx: float, cy: float, rx: float, ry: float, start_angle: float, angle: float) -> None:
        """Append an elliptical arc, joined to the current point by a line."""
        radius = max(abs(rx), abs(ry))
        n = max(MIN_ARC_SEGMENTS, int(math.ceil(abs(angle) * radius / ARC_SEGMENT_LENGTH)))
        angles = start_angle + angle * np.linspace(0.0, 1.0, n + 1)
        xs = cx + rx * np.cos(angles)
        ys = cy + ry * np.sin(angles)
        for x, y in zip(xs, ys):
            self.line_to(x, y)

    def close(self) -> None:
        if self._closed:
            self._closed[-1] = True

    def subpaths(self) -> List[np.ndarray]:
        """Return each subpath as an (n, 2) array; closed ones repeat their first point."""
        result = []
        for points, closed in zip(self._subpaths, self._closed):
            arr = np.asarray(points, dtype=np.float64)
            if closed and len(arr) > 1 and not np.array_equal(arr[0], arr[-1]):
                arr = np.vstack([arr, arr[:1]])
            result.append(arr)
        return result

    def edges(self) -> np.ndarray:
        """All segments of the path as an (m, 4) array of x0, y0, x1, y1.

        Open subpaths are closed implicitly, as a fill would close them.
        """
        chunks = []
        for points in self.subpaths():
            if len(points) < 2:
                continue
            if not np.array_equal(points[0], points[-1]):
                points = np.vstack([points, points[:1]])
            chunks.append(np.hstack([points[:-1], points[1:]]))
        if not chunks:
            return np.empty((0, 4), dtype=np.float64)
        return np.vstack(chunks)

    def is_closed(self) -> bool:
        return bool(self._closed) and all(self._closed)

    def area(self) -> float:
        """Signed shoelace area summed over the subpaths."""
        e = self.edges()
        return float(np.sum(e[:, 0] * e[:, 3] - e[:, 2] * e[:, 1])) / 2.0

    def bounds(self) -> Tuple[float, float, float, float]:
        """(min_x, min_y, max_x, max_y) of all points."""
        if len(self) == 0:
            raise ValueError("empty path has no bounds")
        points = np.vstack([p for p in self.subpaths() if len(p)])
        return (float(points[:, 0].min()), float(points[:, 1].min()), float(points[:, 0].max()), float(points[:, 1].max()))

    def __len__(self) -> int:
        return sum(len(p) for p in self._subpaths)
