"""Tests for sex-specific parameter resolution."""

import numpy as np
import pytest

from cbw_pkg.contracts.errors import ConfigError
from cbw_pkg.domain.parameters import SEX_COEFFICIENTS, ChildParameters, resolve_parameters


class TestResolveParameters:
    def test_male_and_female_values(self):
        params = resolve_parameters([0.0, 1.0])

        np.testing.assert_allclose(params.K, [800.0, 700.0])
        np.testing.assert_allclose(params.deltamax, [19.0, 17.0])
        np.testing.assert_allclose(params.tD, [15.0, 16.2])
        np.testing.assert_allclose(params.tauA_EB, [15.0, 7.0])

    def test_fractional_sex_blends_linearly(self):
        params = resolve_parameters([0.25])

        for name, (male, female) in SEX_COEFFICIENTS.items():
            assert getattr(params, name)[0] == pytest.approx(0.75 * male + 0.25 * female)

    def test_every_coefficient_resolved(self):
        params = resolve_parameters([0.0, 1.0, 0.5])

        assert set(params.to_dict()) == set(SEX_COEFFICIENTS)
        assert params.nind == 3

    def test_parameter_groups(self):
        params = resolve_parameters([1.0])

        assert len(params.growth_terms()) == 9
        assert params.eb_terms()[0][0] == 16.5
        assert params.growth_impact_terms()[-1][0] == 0.69

    def test_resolved_values_are_immutable(self):
        params = resolve_parameters([0.0])

        assert isinstance(params, ChildParameters)
        with pytest.raises(ValueError):
            params.K[0] = 1.0
        with pytest.raises(AttributeError):
            params.K = np.array([1.0])


class TestCoefficientOverrides:
    def test_scalar_override_applies_to_both_sexes(self):
        params = resolve_parameters([0.0, 1.0], {"A": 0.0})

        np.testing.assert_allclose(params.A, [0.0, 0.0])
        np.testing.assert_allclose(params.B, [9.6, 8.4])

    def test_pair_override(self):
        params = resolve_parameters([0.0, 1.0], {"K": (850.0, 650.0)})

        np.testing.assert_allclose(params.K, [850.0, 650.0])

    def test_unknown_coefficient(self):
        with pytest.raises(ConfigError, match="Unknown model coefficients"):
            resolve_parameters([0.0], {"not_a_coefficient": 1.0})

    def test_malformed_pair(self):
        with pytest.raises(ConfigError, match="male, female"):
            resolve_parameters([0.0], {"K": [1.0, 2.0, 3.0]})

    def test_overrides_do_not_leak(self):
        resolve_parameters([0.0], {"K": 1.0})

        assert SEX_COEFFICIENTS["K"] == (800.0, 700.0)
        assert resolve_parameters([0.0]).K[0] == 800.0
