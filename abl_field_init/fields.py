"""Caller-owned field arrays and sub-region views over them."""

import numpy as np

from .geometry import Box, Geometry

# Number of components per field
FIELD_COMPONENTS = {
    'velocity': 3,
    'density': 1,
    'temperature': 1,
    'tke': 1,
}


class ABLFields:
    """
    Velocity, density, temperature and TKE arrays over the whole domain

    Scalar fields have shape (nx, ny, nz); velocity has a trailing
    component axis of length 3. Arrays start zeroed so the additive
    temperature profile lands on a clean field.
    """

    def __init__(self, geometry: Geometry, dtype=np.float64):
        self.geometry = geometry
        nx, ny, nz = geometry.n_cells
        self.arrays = {}
        for name, ncomp in FIELD_COMPONENTS.items():
            shape = (nx, ny, nz, ncomp) if ncomp > 1 else (nx, ny, nz)
            self.arrays[name] = np.zeros(shape, dtype=dtype)

    def __getitem__(self, name: str) -> np.ndarray:
        return self.arrays[name]

    @property
    def velocity(self) -> np.ndarray:
        return self.arrays['velocity']

    @property
    def density(self) -> np.ndarray:
        return self.arrays['density']

    @property
    def temperature(self) -> np.ndarray:
        return self.arrays['temperature']

    @property
    def tke(self) -> np.ndarray:
        return self.arrays['tke']

    def view(self, name: str, box: Box) -> np.ndarray:
        """Mutable view (never a copy) of one field over `box`"""
        if not self.geometry.domain_box.contains(box):
            raise ValueError(f"Box {box} lies outside the domain {self.geometry.domain_box}")
        return self.arrays[name][box.slices()]
