"""Height-keyed piecewise-linear profile tables."""

from typing import Sequence

import numpy as np

from .errors import ConfigValidationError


class ProfileTable:
    """
    Piecewise-linear scalar profile (e.g. potential temperature vs. height)

    The breakpoints are kept twice: as host tuples fixed at construction, and
    as a read-only array buffer filled by a single sync() step. Evaluation only
    reads the synchronized buffer, so tiles evaluated on different workers all
    see the same immutable data.

    Note the lookup rule: a height above the last breakpoint matches no
    segment and falls back to values[0], not to the last tabulated value.
    """

    def __init__(self, heights: Sequence[float], values: Sequence[float],
                 height_key: str = 'ABL.temperature_heights',
                 value_key: str = 'ABL.temperature_values'):
        if len(heights) != len(values):
            raise ConfigValidationError(
                (height_key, value_key),
                f"lengths differ ({len(heights)} heights, {len(values)} values)")
        if len(heights) == 0:
            raise ConfigValidationError((height_key, value_key), "profile table is empty")
        self.heights = tuple(float(h) for h in heights)
        self.values = tuple(float(v) for v in values)
        self._heights_d = None
        self._values_d = None

    def __len__(self):
        return len(self.heights)

    @property
    def is_synced(self) -> bool:
        return self._heights_d is not None

    def sync(self) -> "ProfileTable":
        """Copy host breakpoints into the read-only evaluation buffer (once)"""
        if not self.is_synced:
            heights = np.array(self.heights, dtype=np.float64)
            values = np.array(self.values, dtype=np.float64)
            heights.flags.writeable = False
            values.flags.writeable = False
            self._heights_d, self._values_d = heights, values
        return self

    def evaluate(self, z):
        """
        Evaluate the profile at height(s) z

        Args:
            z: Scalar height or array of heights

        Returns:
            Profile value(s) with the same shape as z
        """
        self.sync()
        th = self._heights_d
        tv = self._values_d
        z = np.asarray(z, dtype=np.float64)

        result = np.full(z.shape, tv[0])
        for iz in range(len(th) - 1):
            inside = (z > th[iz]) & (z <= th[iz + 1])
            if not np.any(inside):
                continue
            slope = (tv[iz + 1] - tv[iz]) / (th[iz + 1] - th[iz])
            result = np.where(inside, tv[iz] + (z - th[iz]) * slope, result)

        if result.ndim == 0:
            return float(result)
        return result
