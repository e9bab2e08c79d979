# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""Holding-period allowances on real-estate capital gains"""

from __future__ import annotations

from typing import Optional, Tuple

from ..core.primitives import FiscalSettings


def income_tax_allowance(holding_years: int, fiscal: Optional[FiscalSettings] = None) -> float:
    """
    Income-tax allowance: 6% per year from the 6th to the 21st holding year,
    full exemption from the 22nd.
    """
    fiscal = fiscal or FiscalSettings()
    if holding_years < fiscal.allowance_start_year:
        return 0.0
    if holding_years >= fiscal.ir_exemption_year:
        return 1.0
    years = holding_years - fiscal.allowance_start_year + 1
    return min(1.0, years * fiscal.ir_allowance_per_year)


def social_charges_allowance(
    holding_years: int, fiscal: Optional[FiscalSettings] = None
) -> float:
    """
    Social-charges allowance: 1.65% per year from the 6th to the 21st holding
    year, 1.6% for the 22nd, then 9% per year, full exemption from the 30th.
    """
    fiscal = fiscal or FiscalSettings()
    if holding_years < fiscal.allowance_start_year:
        return 0.0
    if holding_years >= fiscal.ps_exemption_year:
        return 1.0

    # The first band closes where income tax becomes exempt (22nd year)
    band_switch = fiscal.ir_exemption_year
    if holding_years < band_switch:
        years = holding_years - fiscal.allowance_start_year + 1
        return min(1.0, years * fiscal.ps_allowance_per_year)

    first_band = (band_switch - fiscal.allowance_start_year) * fiscal.ps_allowance_per_year
    later_years = holding_years - band_switch
    allowance = (
        first_band
        + fiscal.ps_allowance_year_22
        + later_years * fiscal.ps_allowance_per_year_after_22
    )
    return min(1.0, allowance)


def holding_period_allowances(
    holding_years: int, fiscal: Optional[FiscalSettings] = None
) -> Tuple[float, float]:
    """(income-tax allowance, social-charges allowance) as decimals."""
    return (
        income_tax_allowance(holding_years, fiscal),
        social_charges_allowance(holding_years, fiscal),
    )
