"""
ABL initial conditions: mean fields, velocity streaks, temperature noise and TKE.

The temperature perturbation follows the stochastic cell perturbation method
of:

    D. Munoz-Esparza, B. Kosovic, J. van Beeck, J. D. Mirocha, A stochastic
    perturbation method to generate inflow turbulence in large-eddy
    simulation models: Application to neutrally stratified atmospheric
    boundary layers. Physics of Fluids, Vol. 27, 2015.
"""

import logging

import numpy as np

from .config import ABLConfig
from .geometry import Box, Geometry
from .noise import TEMPERATURE_PASS, check_seed, position_keyed_normal
from .profile import ProfileTable
from .velocity import resolve_velocity

logger = logging.getLogger(__name__)


def _check_view(name: str, array: np.ndarray, box: Box, ncomp: int = 1):
    expected = box.shape + ((ncomp,) if ncomp > 1 else ())
    if array.shape != expected:
        raise ValueError(f"{name} view has shape {array.shape}, expected {expected} for {box}")


class ABLFieldInit:
    """
    Initial condition generator for atmospheric boundary layer runs

    Construction validates the configuration, builds the temperature profile
    table and resolves the mean velocity once. The passes below only read
    that state, so one instance can serve any number of tiles concurrently.
    """

    def __init__(self, config: ABLConfig):
        config.validate()

        temp = config.temperature
        self.theta_table = ProfileTable(temp.heights, temp.values).sync()

        pert = config.velocity_perturbation
        self.perturb_vel = bool(pert.perturb_velocity)
        self.ref_height = float(pert.perturb_ref_height)
        self.Uperiods = float(pert.Uperiods)
        self.Vperiods = float(pert.Vperiods)
        self.deltaU = float(pert.deltaU)
        self.deltaV = float(pert.deltaV)

        tpert = config.temperature_perturbation
        self.perturb_theta = bool(tpert.perturb_temperature)
        self.theta_gauss_mean = float(tpert.random_gauss_mean)
        self.theta_gauss_var = float(tpert.random_gauss_var)
        self.theta_cutoff_height = float(tpert.cutoff_height)
        self.deltaT = float(tpert.theta_amplitude)

        self.tke_init = float(config.turbulence.init_tke)
        self.rho = float(config.velocity.density)

        self.velocity_state = resolve_velocity(config.velocity)

    @property
    def mean_velocity(self):
        return self.velocity_state.mean

    def velocity_perturbation(self, x, y, z, geom: Geometry):
        """
        Height-damped streaks added to u and v

        u' = deltaU e^0.5 / h * exp(-(z/h)^2 / 2) * z * cos(2 pi Uperiods (y - ylo) / Ly)
        v' = deltaV e^0.5 / h * exp(-(z/h)^2 / 2) * z * cos(2 pi Vperiods (x - xlo) / Lx)

        Zero at z = 0, peaks at z = h with amplitude deltaU (deltaV).
        """
        problo = geom.prob_lo
        probhi = geom.prob_hi
        aval = self.Uperiods * 2.0 * np.pi / (probhi[1] - problo[1])
        bval = self.Vperiods * 2.0 * np.pi / (probhi[0] - problo[0])
        ufac = self.deltaU * np.exp(0.5) / self.ref_height
        vfac = self.deltaV * np.exp(0.5) / self.ref_height

        xl = np.asarray(x) - problo[0]
        yl = np.asarray(y) - problo[1]
        zl = np.asarray(z) / self.ref_height
        damp = np.exp(-0.5 * zl * zl)

        du = ufac * damp * z * np.cos(aval * yl)
        dv = vfac * damp * z * np.cos(bval * xl)
        return du, dv

    def __call__(self, box: Box, geom: Geometry, velocity: np.ndarray,
                 density: np.ndarray, temperature: np.ndarray):
        """
        Fill mean density, velocity and temperature over one box

        Args:
            box: Cells to initialize (global indices)
            geom: Grid geometry
            velocity: Mutable (nx, ny, nz, 3) view over box
            density: Mutable (nx, ny, nz) view over box
            temperature: Mutable (nx, ny, nz) view over box; the profile is
                added to whatever it already holds
        """
        _check_view('velocity', velocity, box, 3)
        _check_view('density', density, box)
        _check_view('temperature', temperature, box)

        x, y, z = geom.cell_center_mesh(box)
        umean, vmean, wmean = self.velocity_state.mean

        density[...] = self.rho
        velocity[..., 0] = umean
        velocity[..., 1] = vmean
        velocity[..., 2] = wmean

        temperature += self.theta_table.evaluate(z)

        if self.perturb_vel:
            du, dv = self.velocity_perturbation(x, y, z, geom)
            velocity[..., 0] += du
            velocity[..., 1] += dv

        logger.debug(f"Mean fields initialized on {box} ({box.num_cells} cells)")

    def perturb_temperature(self, box: Box, geom: Geometry, temperature: np.ndarray,
                            seed: int = 0) -> int:
        """
        Overwrite temperature below the cutoff height with scaled Gaussian noise

        Cells at or above the cutoff are untouched.

        Returns:
            Number of cells overwritten
        """
        _check_view('temperature', temperature, box)
        seed = check_seed(seed)
        if box.is_empty:
            return 0

        z = geom.cell_centers(box, 2)
        below = z < self.theta_cutoff_height
        if not np.any(below):
            return 0

        samples = position_keyed_normal(
            geom, box, seed, TEMPERATURE_PASS,
            mean=self.theta_gauss_mean,
            std=np.sqrt(self.theta_gauss_var),
            k_indices=box.indices(2)[below])
        temperature[:, :, below] = self.deltaT * samples

        count = samples.size
        logger.debug(f"Temperature perturbed on {count} cells of {box}")
        return count

    def init_tke(self, box: Box, tke: np.ndarray):
        """Set the subfilter TKE to its initial constant over one box"""
        _check_view('tke', tke, box)
        tke[...] = self.tke_init
