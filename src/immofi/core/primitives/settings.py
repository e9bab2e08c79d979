# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

from pydantic import Field, model_validator

from .model import Model
from .types import FloatBetween0And1, PositiveFloat, PositiveInt


class ReportingSettings(Model):
    """Settings related to report generation and display."""

    decimal_precision: PositiveInt = Field(
        default=2, description="Number of decimal places for currency values."
    )


class CalculationSettings(Model):
    """
    Knobs for the iterative rate solver used to reconstruct an interest rate
    from an imported amortization schedule.

    The solver works on the monthly rate. Each Newton iterate is clamped into
    ``[rate_floor, rate_ceiling]`` so that a bad seed cannot diverge.
    """

    newton_seed_rate: PositiveFloat = Field(
        default=0.005, description="Initial monthly rate guess (0.5%)."
    )
    newton_max_iterations: PositiveInt = Field(
        default=100, description="Iteration budget before giving up."
    )
    newton_tolerance: PositiveFloat = Field(
        default=1e-7, description="Convergence threshold on the Newton step size."
    )
    newton_rate_floor: PositiveFloat = Field(default=0.001)
    newton_rate_ceiling: PositiveFloat = Field(default=0.1)
    min_schedule_rows: PositiveInt = Field(
        default=3,
        description="Minimum number of imported rows required to infer a rate.",
    )

    @model_validator(mode="after")
    def check_rate_bounds(self) -> "CalculationSettings":
        """The clamp interval must not be empty."""
        if self.newton_rate_floor >= self.newton_rate_ceiling:
            raise ValueError(
                f"newton_rate_floor ({self.newton_rate_floor}) must be below "
                f"newton_rate_ceiling ({self.newton_rate_ceiling})"
            )
        return self


class FiscalSettings(Model):
    """
    Policy constants of the French rental-income and capital-gain tax rules.

    These are parameters of the jurisdiction, not of a given investment.
    All rates are decimals.
    """

    # --- Rental income ---
    micro_foncier_allowance: FloatBetween0And1 = Field(
        default=0.30, description="Flat allowance of the micro-foncier regime."
    )
    micro_bic_allowance: FloatBetween0And1 = Field(
        default=0.50, description="Flat allowance of the micro-BIC regime."
    )
    micro_foncier_threshold: PositiveFloat = Field(
        default=15_000.0, description="Revenue ceiling for micro-foncier eligibility."
    )
    micro_bic_threshold: PositiveFloat = Field(
        default=72_600.0, description="Revenue ceiling for micro-BIC eligibility."
    )

    # --- Capital gains ---
    capital_gain_income_tax_rate: FloatBetween0And1 = Field(
        default=0.19, description="Flat income tax on private real-estate gains."
    )
    capital_gain_social_charges_rate: FloatBetween0And1 = Field(
        default=0.172, description="Social charges on real-estate gains."
    )
    lmp_long_term_income_tax_rate: FloatBetween0And1 = Field(
        default=0.128, description="Flat income tax on LMP long-term gains."
    )
    lmp_short_term_max_years: PositiveInt = Field(
        default=2, description="Holding years up to which an LMP gain is entirely short-term."
    )

    # --- Holding-period allowances ---
    allowance_start_year: PositiveInt = Field(
        default=6, description="First holding year that earns an allowance."
    )
    ir_allowance_per_year: FloatBetween0And1 = Field(default=0.06)
    ir_exemption_year: PositiveInt = Field(
        default=22, description="Holding year from which the gain is exempt of income tax."
    )
    ps_allowance_per_year: FloatBetween0And1 = Field(default=0.0165)
    ps_allowance_year_22: FloatBetween0And1 = Field(
        default=0.016, description="One-off social-charges allowance of the 22nd year."
    )
    ps_allowance_per_year_after_22: FloatBetween0And1 = Field(default=0.09)
    ps_exemption_year: PositiveInt = Field(
        default=30, description="Holding year from which the gain is exempt of social charges."
    )

    # --- Early repayment ---
    early_repayment_penalty_months: PositiveInt = Field(
        default=6, description="Months of interest capping the early-repayment penalty."
    )
    early_repayment_penalty_cap: FloatBetween0And1 = Field(
        default=0.03, description="Share of outstanding balance capping the penalty."
    )

    @model_validator(mode="after")
    def check_allowance_years(self) -> "FiscalSettings":
        """Exemption years must come after the first allowance year."""
        if not (
            self.allowance_start_year < self.ir_exemption_year <= self.ps_exemption_year
        ):
            raise ValueError(
                "Expected allowance_start_year < ir_exemption_year <= ps_exemption_year, "
                f"got {self.allowance_start_year}, {self.ir_exemption_year}, "
                f"{self.ps_exemption_year}"
            )
        return self


# --- Main Global Settings Class ---


class GlobalSettings(Model):
    """Global model settings

    Groups the jurisdiction constants, the solver configuration and the
    presentation settings. A change of any of them is expressed by passing a
    new instance; nothing is read from ambient state.
    """

    reporting: ReportingSettings = Field(default_factory=ReportingSettings)
    calculation: CalculationSettings = Field(default_factory=CalculationSettings)
    fiscal: FiscalSettings = Field(default_factory=FiscalSettings)
