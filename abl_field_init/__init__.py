"""Initial conditions for atmospheric boundary layer simulations."""

import logging

from .config import (
    ABLConfig,
    TemperatureProfileConfig,
    TemperaturePerturbationConfig,
    TurbulenceConfig,
    VelocityConfig,
    VelocityPerturbationConfig,
)
from .errors import ABLInitError, ConfigValidationError, TimetableUnavailableError
from .field_init import ABLFieldInit
from .fields import ABLFields
from .geometry import Box, Geometry
from .profile import ProfileTable
from .velocity import TimetableRecord, VelocityState, read_velocity_timetable, resolve_velocity
from .workflow import initialize_abl_fields, plot_initial_profiles

logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = "0.1.0"

__all__ = [
    "ABLConfig",
    "ABLFieldInit",
    "ABLFields",
    "ABLInitError",
    "Box",
    "ConfigValidationError",
    "Geometry",
    "ProfileTable",
    "TemperaturePerturbationConfig",
    "TemperatureProfileConfig",
    "TimetableRecord",
    "TimetableUnavailableError",
    "TurbulenceConfig",
    "VelocityConfig",
    "VelocityPerturbationConfig",
    "VelocityState",
    "initialize_abl_fields",
    "plot_initial_profiles",
    "read_velocity_timetable",
    "resolve_velocity",
]
