"""
Position-keyed Gaussian noise for parallel field passes.

Each vertical column (fixed global i, j) owns a numpy random stream seeded
from SeedSequence(run seed, spawn_key=(pass id, flat index of the column's
first cell)). Cells are laid out z-fastest, so cell (i, j, k) has flat index
column start + k and takes the k-th draw of its column's stream. The sample
therefore depends only on the run seed, the pass and the cell's global
index: tiles can be evaluated in any order, on any number of workers, with
any partitioning, and produce the same bits.
"""

import operator

import numpy as np

from .errors import ConfigValidationError
from .geometry import Box, Geometry

TEMPERATURE_PASS = 1


def check_seed(seed) -> int:
    """Return seed as a non-negative int, raising ConfigValidationError otherwise"""
    try:
        value = operator.index(seed)
    except TypeError:
        raise ConfigValidationError('seed', f"must be an integer, got {seed!r}") from None
    if value < 0:
        raise ConfigValidationError('seed', f"must be non-negative, got {value}")
    return value


def column_generator(seed: int, pass_id: int, column_start: int) -> np.random.Generator:
    """Independent generator for the column whose bottom cell has flat index column_start"""
    seq = np.random.SeedSequence(check_seed(seed), spawn_key=(int(pass_id), int(column_start)))
    return np.random.default_rng(seq)


def position_keyed_normal(geometry: Geometry, box: Box, seed: int, pass_id: int,
                          mean: float = 0.0, std: float = 1.0,
                          k_indices=None) -> np.ndarray:
    """
    Normal(mean, std) samples for every cell of `box`

    Args:
        geometry: Domain geometry (defines the global flat index)
        box: Cells to sample, in global index space
        seed: Run seed
        pass_id: Identifier of the calling pass, so passes never share streams
        mean, std: Distribution parameters
        k_indices: Optional subset of global k indices to sample (default: all of box)

    Returns:
        Array shaped (nx_box, ny_box, len(k_indices))
    """
    if k_indices is None:
        k_indices = box.indices(2)
    k_indices = np.asarray(k_indices, dtype=np.int64)

    out = np.empty((box.shape[0], box.shape[1], len(k_indices)))
    if out.size == 0:
        return out

    # Only the leading part of each column stream is needed
    ndraw = int(k_indices.max()) + 1
    for ii, i in enumerate(box.indices(0)):
        for jj, j in enumerate(box.indices(1)):
            column_start = geometry.flat_index(i, j, 0)
            column = column_generator(seed, pass_id, column_start).normal(mean, std, size=ndraw)
            out[ii, jj, :] = column[k_indices]
    return out
