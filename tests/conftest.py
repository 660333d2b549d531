"""Shared pytest fixtures."""

import matplotlib

matplotlib.use("Agg")

import pytest

from abl_field_init import ABLConfig, Geometry


@pytest.fixture
def base_params():
    """Minimal valid solver-style parameters with a fixed velocity vector."""
    return {
        'ABL.temperature_heights': [0.0, 100.0, 500.0],
        'ABL.temperature_values': [290.0, 300.0, 310.0],
        'incflo.velocity': [6.0, 2.0, 0.5],
        'incflo.density': 1.225,
        'ABL.init_tke': 0.4,
    }


@pytest.fixture
def config(base_params):
    return ABLConfig.from_parameters(base_params)


@pytest.fixture
def geometry():
    """12 x 10 x 8 cells over 1200 m x 1000 m x 800 m."""
    return Geometry((0.0, 0.0, 0.0), (1200.0, 1000.0, 800.0), (12, 10, 8))


@pytest.fixture
def timetable_file(tmp_path):
    path = tmp_path / "velocity_timetable.txt"
    path.write_text("120.5 8.0 270.0\n")
    return path
