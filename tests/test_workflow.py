"""Tests for the one-shot initialization driver."""

import matplotlib.pyplot as plt
import numpy as np
import pytest

from abl_field_init import (
    ABLConfig,
    ABLFields,
    ConfigValidationError,
    initialize_abl_fields,
    plot_initial_profiles,
)


@pytest.fixture
def full_config(base_params):
    base_params.update({
        'ABL.perturb_velocity': True,
        'ABL.perturb_temperature': True,
        'ABL.cutoff_height': 200.0,
    })
    return ABLConfig.from_parameters(base_params)


class TestInitializeFields:
    def test_every_field_written(self, config, geometry):
        fields = initialize_abl_fields(config, geometry)
        np.testing.assert_array_equal(fields.density, 1.225)
        np.testing.assert_array_equal(fields.tke, 0.4)
        np.testing.assert_array_equal(fields.velocity[..., 0], 6.0)
        assert fields.temperature.min() >= 290.0

    def test_temperature_noise_skipped_when_disabled(self, base_params, geometry):
        base_params['ABL.cutoff_height'] = 10000.0
        fields = initialize_abl_fields(ABLConfig.from_parameters(base_params), geometry)
        assert fields.temperature[0, 0, 0] == 295.0

    def test_tiling_and_threads_do_not_change_result(self, full_config, geometry):
        whole = initialize_abl_fields(full_config, geometry, seed=42)
        tiled = initialize_abl_fields(full_config, geometry, seed=42,
                                      max_tile=(5, 4, 3), max_workers=4)
        for name in ('velocity', 'density', 'temperature', 'tke'):
            np.testing.assert_array_equal(tiled[name], whole[name])

    def test_initializes_existing_fields_in_place(self, config, geometry):
        fields = ABLFields(geometry)
        returned = initialize_abl_fields(config, geometry, fields=fields)
        assert returned is fields
        assert fields.density.min() == 1.225


class TestPlot:
    def test_saves_profile_plot(self, full_config, geometry, tmp_path):
        fields = initialize_abl_fields(full_config, geometry)
        fig = plot_initial_profiles(fields, geometry, save_dir=str(tmp_path))
        assert (tmp_path / 'initial_profiles.png').exists()
        assert len(fig.axes) == 3
        plt.close(fig)


class TestSeed:
    def test_negative_seed_rejected_before_any_pass(self, full_config, geometry):
        fields = ABLFields(geometry)
        with pytest.raises(ConfigValidationError, match="seed"):
            initialize_abl_fields(full_config, geometry, seed=-1, fields=fields)
        assert not fields.density.any()
        assert not fields.temperature.any()
