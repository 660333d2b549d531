"""Resolve the mean inflow velocity from a fixed vector or a timetable file."""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple

import numpy as np

from .config import VelocityConfig
from .errors import TimetableUnavailableError

logger = logging.getLogger(__name__)

CONSTANT = 'constant'
TIMETABLE = 'timetable'


@dataclass(frozen=True)
class TimetableRecord:
    """One `time speed direction` record; direction in degrees"""
    time: float
    speed: float
    direction: float


@dataclass(frozen=True)
class VelocityState:
    """Mean velocity resolved once at construction"""
    mode: str
    mean: Tuple[float, float, float]
    record: Optional[TimetableRecord] = None


def read_velocity_timetable(file_path) -> TimetableRecord:
    """
    Read the single record of a velocity timetable

    The first three whitespace-separated fields are taken as time, wind speed
    and direction in degrees; anything after them is ignored.

    Args:
        file_path: Path to the timetable file

    Returns:
        TimetableRecord
    """
    path = Path(file_path)
    try:
        with open(path, 'r') as f:
            text = f.read()
    except OSError as e:
        raise TimetableUnavailableError(str(path), e.strerror) from e
    except UnicodeDecodeError as e:
        raise TimetableUnavailableError(str(path), "not a text file") from e

    tokens = text.split()
    if len(tokens) < 3:
        raise TimetableUnavailableError(
            str(path), f"expected 'time speed direction', found {len(tokens)} field(s)")
    try:
        time, speed, direction = (float(t) for t in tokens[:3])
    except ValueError as e:
        raise TimetableUnavailableError(str(path), f"non-numeric field: {e}") from e

    return TimetableRecord(time=time, speed=speed, direction=direction)


def velocity_from_record(record: TimetableRecord) -> Tuple[float, float, float]:
    """Horizontal wind vector for a speed and direction (degrees from +x, counter-clockwise)"""
    dir_rad = np.radians(record.direction)
    return (float(record.speed * np.cos(dir_rad)),
            float(record.speed * np.sin(dir_rad)),
            0.0)


def resolve_velocity(config: VelocityConfig) -> VelocityState:
    """
    Pick the mean velocity source and resolve it

    A configured timetable path takes the timetable mode; otherwise the
    fixed velocity vector is used as-is.
    """
    if config.velocity_timetable:
        record = read_velocity_timetable(config.velocity_timetable)
        state = VelocityState(TIMETABLE, velocity_from_record(record), record)
        logger.info(
            f"Mean velocity from timetable {config.velocity_timetable}: "
            f"speed={record.speed} dir={record.direction}deg -> {state.mean}")
    else:
        state = VelocityState(CONSTANT, tuple(float(v) for v in config.velocity))
        logger.info(f"Mean velocity from configuration: {state.mean}")
    return state
