from dataclasses import dataclass
from typing import Any, Mapping, Sequence

import numpy as np

from .errors import ConfigValidationError


@dataclass
class TemperatureProfileConfig:
    """Potential temperature as a piecewise-linear function of height"""
    heights: Sequence[float] = None   # Breakpoint heights (m), ascending
    values: Sequence[float] = None    # Temperature at each breakpoint (K)


@dataclass
class VelocityConfig:
    """Mean inflow velocity and fluid density"""
    velocity: Sequence[float] = None       # Fixed (u, v, w) vector (m/s)
    velocity_timetable: str = None         # Path to a "time speed direction" file
    density: float = None                  # Fluid density (kg/m^3)


@dataclass
class VelocityPerturbationConfig:
    """Damped sinusoidal streaks used to trip shear-layer instability"""
    perturb_velocity: bool = False
    perturb_ref_height: float = 50.0   # Height of peak perturbation (m)
    Uperiods: float = 4.0              # Periods of u streaks across the y extent
    Vperiods: float = 4.0              # Periods of v streaks across the x extent
    deltaU: float = 1.0                # u perturbation amplitude (m/s)
    deltaV: float = 1.0                # v perturbation amplitude (m/s)


@dataclass
class TemperaturePerturbationConfig:
    """Gaussian temperature noise below a cutoff height"""
    perturb_temperature: bool = False
    random_gauss_mean: float = 0.0
    random_gauss_var: float = 1.0
    cutoff_height: float = 1.0e-3      # Cells below this height are perturbed (m)
    theta_amplitude: float = 0.8       # Scales every Gaussian sample (K)


@dataclass
class TurbulenceConfig:
    """Subfilter turbulence initial state"""
    init_tke: float = 0.1              # Initial TKE (m^2/s^2)


# Flat parameter keys understood by ABLConfig.from_parameters,
# mapped to (section attribute, field name)
PARAMETER_KEYS = {
    'ABL.temperature_heights': ('temperature', 'heights'),
    'ABL.temperature_values': ('temperature', 'values'),
    'ABL.velocity_timetable': ('velocity', 'velocity_timetable'),
    'incflo.velocity': ('velocity', 'velocity'),
    'incflo.density': ('velocity', 'density'),
    'ABL.perturb_velocity': ('velocity_perturbation', 'perturb_velocity'),
    'ABL.perturb_ref_height': ('velocity_perturbation', 'perturb_ref_height'),
    'ABL.Uperiods': ('velocity_perturbation', 'Uperiods'),
    'ABL.Vperiods': ('velocity_perturbation', 'Vperiods'),
    'ABL.deltaU': ('velocity_perturbation', 'deltaU'),
    'ABL.deltaV': ('velocity_perturbation', 'deltaV'),
    'ABL.perturb_temperature': ('temperature_perturbation', 'perturb_temperature'),
    'ABL.random_gauss_mean': ('temperature_perturbation', 'random_gauss_mean'),
    'ABL.random_gauss_var': ('temperature_perturbation', 'random_gauss_var'),
    'ABL.cutoff_height': ('temperature_perturbation', 'cutoff_height'),
    'ABL.theta_amplitude': ('temperature_perturbation', 'theta_amplitude'),
    'ABL.init_tke': ('turbulence', 'init_tke'),
}

REQUIRED_KEYS = ('ABL.temperature_heights', 'ABL.temperature_values', 'incflo.density')


@dataclass
class ABLConfig:
    """Complete configuration for ABL field initialization"""
    temperature: TemperatureProfileConfig = None
    velocity: VelocityConfig = None
    velocity_perturbation: VelocityPerturbationConfig = None
    temperature_perturbation: TemperaturePerturbationConfig = None
    turbulence: TurbulenceConfig = None

    def __post_init__(self):
        if self.temperature is None:
            self.temperature = TemperatureProfileConfig()
        if self.velocity is None:
            self.velocity = VelocityConfig()
        if self.velocity_perturbation is None:
            self.velocity_perturbation = VelocityPerturbationConfig()
        if self.temperature_perturbation is None:
            self.temperature_perturbation = TemperaturePerturbationConfig()
        if self.turbulence is None:
            self.turbulence = TurbulenceConfig()

    @classmethod
    def from_parameters(cls, params: Mapping[str, Any]) -> "ABLConfig":
        """
        Build a configuration from flat solver-style key/value parameters

        Args:
            params: Mapping such as {'ABL.temperature_heights': [0, 100], ...}.
                Keys not listed in PARAMETER_KEYS are ignored.

        Returns:
            Validated ABLConfig
        """
        for key in REQUIRED_KEYS:
            if key not in params:
                raise ConfigValidationError(key, "required parameter is missing")

        config = cls()
        for key, value in params.items():
            if key not in PARAMETER_KEYS:
                continue
            section, name = PARAMETER_KEYS[key]
            if isinstance(value, (list, tuple, np.ndarray)):
                value = tuple(value)
            setattr(getattr(config, section), name, value)

        config.validate()
        return config

    def validate(self) -> "ABLConfig":
        """Check the snapshot for consistency, raising ConfigValidationError"""
        temp = self.temperature
        if temp.heights is None or temp.values is None:
            raise ConfigValidationError(
                ('ABL.temperature_heights', 'ABL.temperature_values'),
                "temperature profile table is required")
        if len(temp.heights) != len(temp.values):
            raise ConfigValidationError(
                ('ABL.temperature_heights', 'ABL.temperature_values'),
                f"lengths differ ({len(temp.heights)} heights, {len(temp.values)} values)")
        if len(temp.heights) == 0:
            raise ConfigValidationError(
                ('ABL.temperature_heights', 'ABL.temperature_values'),
                "temperature profile table is empty")

        vel = self.velocity
        if vel.density is None:
            raise ConfigValidationError('incflo.density', "required parameter is missing")
        has_vector = vel.velocity is not None
        has_timetable = bool(vel.velocity_timetable)
        if has_vector == has_timetable:
            raise ConfigValidationError(
                ('incflo.velocity', 'ABL.velocity_timetable'),
                "exactly one velocity source must be given")
        if has_vector and len(vel.velocity) != 3:
            raise ConfigValidationError(
                'incflo.velocity', f"expected 3 components, got {len(vel.velocity)}")

        pert = self.velocity_perturbation
        if pert.perturb_velocity and pert.perturb_ref_height <= 0.0:
            raise ConfigValidationError(
                'ABL.perturb_ref_height', "must be positive when perturb_velocity is set")

        if self.temperature_perturbation.random_gauss_var < 0.0:
            raise ConfigValidationError('ABL.random_gauss_var', "variance must be non-negative")

        return self

    def to_parameters(self) -> dict:
        """Flatten back to solver-style keys, skipping unset entries"""
        params = {}
        for key, (section, name) in PARAMETER_KEYS.items():
            value = getattr(getattr(self, section), name)
            if value is not None:
                params[key] = value
        return params
