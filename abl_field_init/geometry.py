"""
Structured-grid geometry: index boxes and cell-center coordinates.

A Box holds inclusive integer cell bounds in global index space, so a tile of
a larger domain keeps the same indices it has in the full grid. That is what
lets every per-cell computation depend only on global position.
"""

from dataclasses import dataclass
from itertools import product
from typing import List, Tuple

import numpy as np

IntVect = Tuple[int, int, int]
RealVect = Tuple[float, float, float]


@dataclass(frozen=True)
class Box:
    """Inclusive cell-index bounds [lo, hi] on each axis"""
    lo: IntVect
    hi: IntVect

    def __post_init__(self):
        object.__setattr__(self, 'lo', tuple(int(v) for v in self.lo))
        object.__setattr__(self, 'hi', tuple(int(v) for v in self.hi))

    @property
    def is_empty(self) -> bool:
        return any(h < l for l, h in zip(self.lo, self.hi))

    @property
    def shape(self) -> IntVect:
        return tuple(max(h - l + 1, 0) for l, h in zip(self.lo, self.hi))

    @property
    def num_cells(self) -> int:
        return int(np.prod(self.shape))

    def slices(self, origin: IntVect = (0, 0, 0)) -> Tuple[slice, slice, slice]:
        """Array slices selecting this box from an array whose first cell is `origin`"""
        return tuple(slice(l - o, l - o + n) for l, o, n in zip(self.lo, origin, self.shape))

    def indices(self, axis: int) -> np.ndarray:
        """Global cell indices covered along one axis"""
        return np.arange(self.lo[axis], self.lo[axis] + self.shape[axis])

    def contains(self, other: "Box") -> bool:
        if other.is_empty:
            return True
        return all(sl <= ol and oh <= sh
                   for sl, sh, ol, oh in zip(self.lo, self.hi, other.lo, other.hi))

    def chop(self, max_tile: IntVect) -> List["Box"]:
        """
        Split into disjoint tiles no larger than max_tile cells per axis.

        The tiles cover the box exactly; an empty box yields no tiles.
        """
        if self.is_empty:
            return []
        starts = [range(l, h + 1, max(int(t), 1))
                  for l, h, t in zip(self.lo, self.hi, max_tile)]
        tiles = []
        for start in product(*starts):
            hi = tuple(min(s + max(int(t), 1) - 1, h)
                       for s, t, h in zip(start, max_tile, self.hi))
            tiles.append(Box(start, hi))
        return tiles


@dataclass(frozen=True)
class Geometry:
    """Uniform Cartesian grid over the domain [prob_lo, prob_hi]"""
    prob_lo: RealVect
    prob_hi: RealVect
    n_cells: IntVect

    def __post_init__(self):
        object.__setattr__(self, 'prob_lo', tuple(float(v) for v in self.prob_lo))
        object.__setattr__(self, 'prob_hi', tuple(float(v) for v in self.prob_hi))
        object.__setattr__(self, 'n_cells', tuple(int(v) for v in self.n_cells))
        if len(self.prob_lo) != 3 or len(self.prob_hi) != 3 or len(self.n_cells) != 3:
            raise ValueError("Geometry needs three axes for prob_lo, prob_hi and n_cells")
        if any(n <= 0 for n in self.n_cells):
            raise ValueError(f"Cell counts must be positive, got {self.n_cells}")
        if any(h <= l for l, h in zip(self.prob_lo, self.prob_hi)):
            raise ValueError(f"Domain upper bounds {self.prob_hi} must exceed {self.prob_lo}")

    @property
    def dx(self) -> RealVect:
        return tuple((h - l) / n for l, h, n in zip(self.prob_lo, self.prob_hi, self.n_cells))

    @property
    def domain_box(self) -> Box:
        return Box((0, 0, 0), tuple(n - 1 for n in self.n_cells))

    @property
    def extents(self) -> RealVect:
        return tuple(h - l for l, h in zip(self.prob_lo, self.prob_hi))

    def cell_centers(self, box: Box, axis: int) -> np.ndarray:
        """Cell-center coordinates along one axis for the cells of `box`"""
        return self.prob_lo[axis] + (box.indices(axis) + 0.5) * self.dx[axis]

    def cell_center_mesh(self, box: Box) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
        """Broadcastable x, y, z cell-center arrays shaped for `box`"""
        x = self.cell_centers(box, 0)[:, None, None]
        y = self.cell_centers(box, 1)[None, :, None]
        z = self.cell_centers(box, 2)[None, None, :]
        return x, y, z

    def flat_index(self, i, j, k):
        """Global row-major (x slowest, z fastest) index of cell (i, j, k)"""
        nx, ny, nz = self.n_cells
        return (np.asarray(i, dtype=np.int64) * ny + j) * nz + k
