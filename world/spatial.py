"""
bugsim module: world/spatial.py

Uniform hash grid for nearest-entity queries on a toroidal world.

- Cells are keyed by floor(position / cell_size) and rebuilt once per tick
- Distances and directions use the shortest wrapped offset
- Ties on distance go to the lower id so results replay deterministically
"""

from __future__ import annotations
from collections import defaultdict
from typing import Any, Callable, Dict, Iterable, List, NamedTuple, Optional, Sequence, Tuple
import math

from world.physics import torus_delta, wrap_angle


class GridEntry(NamedTuple):
    id: int
    x: float
    y: float
    item: Any


class Hit(NamedTuple):
    entry: GridEntry
    distance: float
    direction: float  # signed radians relative to the query heading


Accept = Callable[[GridEntry], bool]


def proximity(distance: float, vision_range: float) -> float:
    """1.0 when touching, 0.0 at the edge of vision or beyond."""
    if vision_range <= 0.0:
        return 0.0
    return max(0.0, 1.0 - distance / vision_range)


def direction_signal(relative_angle: float) -> float:
    """Signed relative angle scaled onto [-1, 1]."""
    return max(-1.0, min(1.0, relative_angle / math.pi))


def _candidate(
    entry: GridEntry,
    x: float,
    y: float,
    width: float,
    height: float,
    radius: float,
    heading: float,
    half_arc: float,
) -> Optional[Tuple[float, float]]:
    dx = torus_delta(x, entry.x, width)
    dy = torus_delta(y, entry.y, height)
    d = math.hypot(dx, dy)
    if d > radius:
        return None
    rel = wrap_angle(math.atan2(dy, dx) - heading) if d > 0.0 else 0.0
    if half_arc < math.pi and abs(rel) > half_arc:
        return None
    return d, rel


class SpatialGrid:
    def __init__(self, width: float, height: float, cell_size: float):
        if cell_size <= 0:
            raise ValueError(f"cell_size must be positive, got {cell_size}")
        self.width = width
        self.height = height
        self.cell_size = cell_size
        self.cols = max(1, math.ceil(width / cell_size))
        self.rows = max(1, math.ceil(height / cell_size))
        self.cells: Dict[Tuple[int, int], List[GridEntry]] = {}
        self.count = 0
        self._built = False

    def _cell_of(self, x: float, y: float) -> Tuple[int, int]:
        cx = min(self.cols - 1, max(0, int(x // self.cell_size)))
        cy = min(self.rows - 1, max(0, int(y // self.cell_size)))
        return cx, cy

    def _span(self, centre: float, radius: float, extent: float, count: int) -> Sequence[int]:
        if 2 * radius >= extent:
            return range(count)
        lo = (centre - radius) % extent
        hi = (centre + radius) % extent
        first = min(count - 1, int(lo // self.cell_size))
        last = min(count - 1, int(hi // self.cell_size))
        if lo <= hi:
            return range(first, last + 1)
        # wrapped interval; the two halves may share a cell on coarse grids
        return list(dict.fromkeys([*range(first, count), *range(0, last + 1)]))

    def rebuild(self, entries: Iterable[GridEntry]) -> None:
        cells: Dict[Tuple[int, int], List[GridEntry]] = defaultdict(list)
        count = 0
        for e in entries:
            cells[self._cell_of(e.x, e.y)].append(e)
            count += 1
        self.cells = dict(cells)
        self.count = count
        self._built = True

    def __len__(self) -> int:
        return self.count

    def _entries_near(self, x: float, y: float, radius: float) -> Iterable[GridEntry]:
        if not self._built:
            raise RuntimeError("spatial grid queried before rebuild()")
        for cx in self._span(x, radius, self.width, self.cols):
            for cy in self._span(y, radius, self.height, self.rows):
                yield from self.cells.get((cx, cy), ())

    def nearest(
        self,
        x: float,
        y: float,
        radius: float,
        heading: float = 0.0,
        half_arc: float = math.pi,
        exclude_id: Optional[int] = None,
        accept: Optional[Accept] = None,
    ) -> Optional[Hit]:
        """
        Nearest entry within ``radius`` (inclusive) and within ``half_arc`` of
        ``heading``. Returns None when nothing qualifies.
        """
        best: Optional[Hit] = None
        for e in self._entries_near(x, y, radius):
            if e.id == exclude_id:
                continue
            found = _candidate(e, x, y, self.width, self.height, radius, heading, half_arc)
            if found is None:
                continue
            if accept is not None and not accept(e):
                continue
            d, rel = found
            if best is None or (d, e.id) < (best.distance, best.entry.id):
                best = Hit(entry=e, distance=d, direction=rel)
        return best

    def within(self, x: float, y: float, radius: float) -> List[GridEntry]:
        """All entries within ``radius`` (inclusive), in id order."""
        out = []
        for e in self._entries_near(x, y, radius):
            d = math.hypot(torus_delta(x, e.x, self.width), torus_delta(y, e.y, self.height))
            if d <= radius:
                out.append(e)
        out.sort(key=lambda e: e.id)
        return out


def brute_force_nearest(
    entries: Sequence[GridEntry],
    x: float,
    y: float,
    radius: float,
    width: float,
    height: float,
    heading: float = 0.0,
    half_arc: float = math.pi,
    exclude_id: Optional[int] = None,
) -> Optional[Hit]:
    """
    Reference O(n) scan per query (O(n^2) per tick). Only used to check the grid.
    """
    best: Optional[Hit] = None
    for e in entries:
        if e.id == exclude_id:
            continue
        found = _candidate(e, x, y, width, height, radius, heading, half_arc)
        if found is None:
            continue
        d, rel = found
        if best is None or (d, e.id) < (best.distance, best.entry.id):
            best = Hit(entry=e, distance=d, direction=rel)
    return best
