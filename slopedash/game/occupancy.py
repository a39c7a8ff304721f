# slopedash/game/occupancy.py
from __future__ import annotations
import math
import random
from dataclasses import dataclass, field
from typing import List, Set, Tuple

from .config import CELL_SIZE, HORIZONTAL_RADIUS, LANE_MARGIN, LANE_INSET


@dataclass
class OccupancyGrid:
    """
    Sparse set of claimed (cell_x, cell_y) keys, built during one spawner run.
    A position counts as occupied when any claimed cell lies inside the
    window [cx-h, cx+h] x [cy-v, cy+v] around its own cell.
    """
    vertical_radius: int
    horizontal_radius: int = HORIZONTAL_RADIUS
    cell_size: int = CELL_SIZE
    cells: Set[Tuple[int, int]] = field(default_factory=set)

    def cell_of(self, x: float, y: float) -> Tuple[int, int]:
        return (math.floor(x / self.cell_size), math.floor(y / self.cell_size))

    def is_occupied(self, x: float, y: float) -> bool:
        gx, gy = self.cell_of(x, y)
        h, v = self.horizontal_radius, self.vertical_radius
        for dx in range(-h, h + 1):
            for dy in range(-v, v + 1):
                if (gx + dx, gy + dy) in self.cells:
                    return True
        return False

    def claim(self, x: float, y: float) -> None:
        self.cells.add(self.cell_of(x, y))

    def free_columns(self, y: float, x_min: float, x_max: float) -> List[float]:
        """Centres of the cells on row y (inside [x_min, x_max]) that are not blocked."""
        first = math.floor(x_min / self.cell_size)
        last = math.floor(x_max / self.cell_size)
        xs = []
        for col in range(first, last + 1):
            cx = (col + 0.5) * self.cell_size
            cx = min(max(cx, x_min), x_max)
            if not self.is_occupied(cx, y):
                xs.append(cx)
        return xs

    def __contains__(self, cell: Tuple[int, int]) -> bool:
        return cell in self.cells

    def __len__(self) -> int:
        return len(self.cells)


@dataclass(frozen=True)
class Lane:
    index: int
    start: float
    end: float

    @property
    def width(self) -> float:
        return self.end - self.start

    def random_x(self, rng: random.Random, inset: float = LANE_INSET) -> float:
        """x strictly inside the lane, `inset` px away from both edges."""
        lo, hi = self.start + inset, self.end - inset
        if hi <= lo:
            return (self.start + self.end) / 2.0
        x = rng.uniform(lo, hi)
        # uniform() may return hi itself
        return x if x < hi else (lo + hi) / 2.0

    def contains(self, x: float) -> bool:
        return self.start <= x < self.end


def partition_lanes(width: float, lane_count: int, margin: float = LANE_MARGIN) -> List[Lane]:
    """Split [margin, width - margin) into `lane_count` equal lanes."""
    assert lane_count >= 1, "lane_count must be >= 1"
    lane_w = (width - 2 * margin) / lane_count
    return [Lane(i, margin + i * lane_w, margin + (i + 1) * lane_w) for i in range(lane_count)]
