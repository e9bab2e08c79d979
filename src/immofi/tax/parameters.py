# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""Investor-level tax parameters"""

from __future__ import annotations

from typing import Optional, Tuple

from pydantic import Field, model_validator

from ..core.primitives import (
    AssetClassEnum,
    FiscalSettings,
    FloatBetween0And1,
    Model,
    PositiveFloat,
    PositiveInt,
)

DEFAULT_DEPRECIATION_PRIORITY: Tuple[AssetClassEnum, ...] = (
    AssetClassEnum.BUILDING,
    AssetClassEnum.FURNITURE,
    AssetClassEnum.WORKS,
)


class TaxParameters(Model):
    """
    Tax situation of the investor, set once and edited between runs.

    Attributes:
        marginal_tax_rate: Marginal income tax bracket (decimal)
        social_charges_rate: Social charges on rental income (decimal)
        building_value: Depreciable part of the property (land excluded)
        furniture_value: Depreciable furniture
        works_value: Depreciable renovation works
        previous_deficit: Reel-foncier deficit carried into the first project year
        deficit_ceiling: Part of a yearly reel-foncier deficit imputable on global income
        micro_foncier_allowance: Elected flat allowance overriding the statutory one
        micro_bic_allowance: Elected flat allowance overriding the statutory one
        depreciation_priority: Order in which asset classes absorb the taxable base

    Example:
        >>> params = TaxParameters(
        ...     marginal_tax_rate=0.30,
        ...     building_value=150_000.0,
        ...     building_amortization_years=25,
        ...     furniture_value=10_000.0,
        ...     furniture_amortization_years=5,
        ... )
        >>> params.annual_depreciation(AssetClassEnum.BUILDING)
        6000.0
    """

    marginal_tax_rate: FloatBetween0And1 = Field(
        default=0.30, description="Marginal income tax rate (e.g., 0.30 for 30%)"
    )
    social_charges_rate: FloatBetween0And1 = Field(
        default=0.172, description="Social charges rate on rental income"
    )

    # === DEPRECIATION (reel-BIC) ===
    building_value: PositiveFloat = 0.0
    building_amortization_years: PositiveInt = 25
    furniture_value: PositiveFloat = 0.0
    furniture_amortization_years: PositiveInt = 10
    works_value: PositiveFloat = 0.0
    works_amortization_years: PositiveInt = 10
    depreciation_priority: Tuple[AssetClassEnum, ...] = Field(
        default=DEFAULT_DEPRECIATION_PRIORITY,
        description="Asset classes in the order they absorb the available taxable base",
    )

    # === DEFICITS (reel-foncier) ===
    previous_deficit: PositiveFloat = 0.0
    deficit_ceiling: PositiveFloat = 10_700.0

    # === ELECTED FLAT RATES (micro regimes) ===
    micro_foncier_allowance: Optional[FloatBetween0And1] = None
    micro_bic_allowance: Optional[FloatBetween0And1] = None

    @model_validator(mode="after")
    def validate_depreciation(self) -> "TaxParameters":
        """Every asset class appears once in the priority and valued assets have a duration."""
        if sorted(self.depreciation_priority) != sorted(AssetClassEnum):
            raise ValueError(
                "depreciation_priority must list each asset class exactly once, "
                f"got {[a.value for a in self.depreciation_priority]}"
            )
        for asset in AssetClassEnum:
            if self.asset_value(asset) > 0 and self.asset_amortization_years(asset) == 0:
                raise ValueError(
                    f"{asset.value} has a value but a zero amortization duration"
                )
        return self

    def asset_value(self, asset: AssetClassEnum) -> float:
        return getattr(self, f"{asset.value}_value")

    def asset_amortization_years(self, asset: AssetClassEnum) -> int:
        return getattr(self, f"{asset.value}_amortization_years")

    @property
    def has_depreciable_assets(self) -> bool:
        return any(self.asset_value(asset) > 0 for asset in AssetClassEnum)

    def annual_depreciation(self, asset: AssetClassEnum) -> float:
        """Straight-line yearly depreciation of one asset class."""
        years = self.asset_amortization_years(asset)
        if years == 0:
            return 0.0
        return self.asset_value(asset) / years

    def micro_allowance(self, furnished: bool, fiscal: FiscalSettings) -> float:
        """Flat allowance of a micro regime, elected rate first."""
        if furnished:
            elected = self.micro_bic_allowance
            return fiscal.micro_bic_allowance if elected is None else elected
        elected = self.micro_foncier_allowance
        return fiscal.micro_foncier_allowance if elected is None else elected
