# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Settings, enums and error taxonomy tests.
"""

import warnings

import pytest
from pydantic import ValidationError

from immofi.core.primitives import (
    CalculationSettings,
    ConfigurationError,
    FiscalSettings,
    GlobalSettings,
    IncompleteDataWarning,
    NumericNonConvergence,
    TaxRegimeEnum,
    round_currency,
    warn_incomplete,
    warn_non_convergence,
)


class TestSettings:
    def test_defaults(self):
        settings = GlobalSettings()

        assert settings.reporting.decimal_precision == 2
        assert settings.calculation.newton_seed_rate == 0.005
        assert settings.calculation.newton_max_iterations == 100
        assert settings.fiscal.micro_foncier_allowance == 0.30
        assert settings.fiscal.micro_bic_threshold == 72_600

    def test_settings_are_immutable(self):
        settings = GlobalSettings()

        with pytest.raises(ValidationError):
            settings.fiscal.micro_bic_allowance = 0.71

    def test_unknown_fields_rejected(self):
        with pytest.raises(ValidationError):
            FiscalSettings(micro_foncier_rate=0.3)

    def test_empty_clamp_interval(self):
        with pytest.raises(ValidationError):
            CalculationSettings(newton_rate_floor=0.1, newton_rate_ceiling=0.01)

    def test_allowance_years_ordering(self):
        with pytest.raises(ValidationError):
            FiscalSettings(ir_exemption_year=35)

    def test_rates_bounded(self):
        with pytest.raises(ValidationError):
            FiscalSettings(capital_gain_income_tax_rate=1.9)


class TestTaxRegimeEnum:
    def test_classification(self):
        assert TaxRegimeEnum.MICRO_BIC.is_furnished
        assert TaxRegimeEnum.MICRO_BIC.is_micro
        assert not TaxRegimeEnum.REEL_FONCIER.is_furnished
        assert not TaxRegimeEnum.REEL_BIC.is_micro

    def test_display_order(self):
        assert [r.value for r in TaxRegimeEnum.ordered()] == [
            "micro-foncier",
            "reel-foncier",
            "micro-bic",
            "reel-bic",
        ]


class TestErrorTaxonomy:
    def test_configuration_error_is_a_value_error(self):
        assert issubclass(ConfigurationError, ValueError)

    def test_warnings_are_logged_and_emitted(self, caplog):
        with pytest.warns(IncompleteDataWarning):
            warn_incomplete("no record")
        with pytest.warns(NumericNonConvergence):
            warn_non_convergence("no root")

        assert "no record" in caplog.text
        assert "no root" in caplog.text

    def test_warnings_can_be_escalated(self):
        with warnings.catch_warnings():
            warnings.simplefilter("error", NumericNonConvergence)
            with pytest.raises(NumericNonConvergence):
                warn_non_convergence("no root")

    def test_round_currency(self):
        assert round_currency(1109.2031) == 1109.2
        assert round_currency(1109.2051, 3) == 1109.205
