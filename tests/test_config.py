"""Tests for configuration loading and validation."""

import pytest

from abl_field_init import ABLConfig, ConfigValidationError


class TestFromParameters:
    def test_maps_solver_keys(self, base_params):
        base_params.update({
            'ABL.perturb_velocity': True,
            'ABL.deltaU': 0.5,
            'ABL.cutoff_height': 50.0,
        })
        config = ABLConfig.from_parameters(base_params)
        assert config.temperature.heights == (0.0, 100.0, 500.0)
        assert config.velocity.velocity == (6.0, 2.0, 0.5)
        assert config.velocity.density == 1.225
        assert config.velocity_perturbation.perturb_velocity is True
        assert config.velocity_perturbation.deltaU == 0.5
        assert config.temperature_perturbation.cutoff_height == 50.0
        assert config.turbulence.init_tke == 0.4

    def test_defaults_for_optional_keys(self, config):
        assert config.velocity_perturbation.perturb_velocity is False
        assert config.velocity_perturbation.perturb_ref_height == 50.0
        assert config.velocity_perturbation.Uperiods == 4.0
        assert config.temperature_perturbation.perturb_temperature is False
        assert config.temperature_perturbation.theta_amplitude == 0.8

    def test_sequences_copied_on_load(self, base_params):
        heights = base_params['ABL.temperature_heights']
        config = ABLConfig.from_parameters(base_params)
        heights.append(900.0)
        assert config.temperature.heights == (0.0, 100.0, 500.0)
        assert isinstance(config.velocity.velocity, tuple)

    def test_unknown_keys_ignored(self, base_params):
        base_params['ABL.bndry_file'] = 'inflow.nc'
        ABLConfig.from_parameters(base_params)

    @pytest.mark.parametrize('key', ['ABL.temperature_heights', 'ABL.temperature_values', 'incflo.density'])
    def test_missing_required_key(self, base_params, key):
        del base_params[key]
        with pytest.raises(ConfigValidationError) as exc_info:
            ABLConfig.from_parameters(base_params)
        assert key in exc_info.value.parameters

    def test_to_parameters_keeps_set_values(self, config, base_params):
        params = config.to_parameters()
        for key, value in base_params.items():
            assert params[key] == (tuple(value) if isinstance(value, list) else value)
        assert 'ABL.velocity_timetable' not in params


class TestValidate:
    def test_table_length_mismatch(self, base_params):
        base_params['ABL.temperature_values'] = [290.0, 300.0]
        with pytest.raises(ConfigValidationError) as exc_info:
            ABLConfig.from_parameters(base_params)
        assert exc_info.value.parameters == ('ABL.temperature_heights', 'ABL.temperature_values')

    def test_both_velocity_sources_rejected(self, base_params, timetable_file):
        base_params['ABL.velocity_timetable'] = str(timetable_file)
        with pytest.raises(ConfigValidationError, match="exactly one velocity source"):
            ABLConfig.from_parameters(base_params)

    def test_no_velocity_source_rejected(self, base_params):
        del base_params['incflo.velocity']
        with pytest.raises(ConfigValidationError):
            ABLConfig.from_parameters(base_params)

    def test_timetable_alone_accepted(self, base_params, timetable_file):
        del base_params['incflo.velocity']
        base_params['ABL.velocity_timetable'] = str(timetable_file)
        config = ABLConfig.from_parameters(base_params)
        assert config.velocity.velocity is None

    def test_velocity_needs_three_components(self, base_params):
        base_params['incflo.velocity'] = [6.0, 2.0]
        with pytest.raises(ConfigValidationError, match="3 components"):
            ABLConfig.from_parameters(base_params)

    def test_reference_height_positive_when_perturbing(self, base_params):
        base_params['ABL.perturb_velocity'] = True
        base_params['ABL.perturb_ref_height'] = 0.0
        with pytest.raises(ConfigValidationError):
            ABLConfig.from_parameters(base_params)

    def test_negative_variance_rejected(self, base_params):
        base_params['ABL.random_gauss_var'] = -1.0
        with pytest.raises(ConfigValidationError):
            ABLConfig.from_parameters(base_params)

    def test_default_config_is_incomplete(self):
        with pytest.raises(ConfigValidationError):
            ABLConfig().validate()
