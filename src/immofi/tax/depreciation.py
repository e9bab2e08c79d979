# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Reel-BIC depreciation ledger.

Each asset class depreciates straight-line. The depreciation actually used in
a year cannot exceed the taxable base before depreciation; the unused part
joins a per-asset backlog that later profitable years absorb, with no expiry.

The ledger is an explicit accumulator: ``advance_year`` takes the state at the
end of year Y-1 and returns the state at the end of year Y. It must be driven
once per year in chronological order; the used amount of a year depends on
the backlog of every earlier year.
"""

from __future__ import annotations

import logging
from typing import List, Sequence, Tuple

import pandas as pd

from ..core.primitives import AssetClassEnum, Model, PositiveFloat, PositiveInt
from .parameters import TaxParameters

logger = logging.getLogger(__name__)


class AssetLedger(Model):
    """Running depreciation account of one asset class."""

    asset_class: AssetClassEnum
    value: PositiveFloat
    amortization_years: PositiveInt
    cumulative_theoretical: float = 0.0
    cumulative_used: float = 0.0
    backlog: float = 0.0

    @property
    def theoretical_next_year(self) -> float:
        """Straight-line charge of the coming year; 0 once fully depreciated."""
        if self.amortization_years == 0:
            return 0.0
        remaining = self.value - self.cumulative_theoretical
        if remaining <= 0:
            return 0.0
        return min(self.value / self.amortization_years, remaining)


class DepreciationLedger(Model):
    """
    Depreciation state of a project at the end of ``years_elapsed`` years.

    ``assets`` is ordered by allocation priority.
    """

    assets: Tuple[AssetLedger, ...] = ()
    years_elapsed: int = 0

    @classmethod
    def from_parameters(cls, params: TaxParameters) -> "DepreciationLedger":
        """Opening ledger, assets in ``params.depreciation_priority`` order."""
        return cls(
            assets=tuple(
                AssetLedger(
                    asset_class=asset,
                    value=params.asset_value(asset),
                    amortization_years=params.asset_amortization_years(asset),
                )
                for asset in params.depreciation_priority
            )
        )

    @property
    def cumulative_used(self) -> float:
        return sum(asset.cumulative_used for asset in self.assets)

    @property
    def cumulative_theoretical(self) -> float:
        return sum(asset.cumulative_theoretical for asset in self.assets)

    @property
    def backlog(self) -> float:
        return sum(asset.backlog for asset in self.assets)


class DepreciationLedgerEntry(Model):
    """What happened to one asset class during one year."""

    year_index: int
    asset_class: AssetClassEnum
    theoretical: float
    used: float
    carried_forward: float
    backlog_after: float


class DepreciationStep(Model):
    """Result of advancing the ledger by one year."""

    used: float
    theoretical: float
    entries: Tuple[DepreciationLedgerEntry, ...]
    ledger: DepreciationLedger


def advance_year(
    ledger: DepreciationLedger, taxable_income_before_depreciation: float
) -> DepreciationStep:
    """
    Charge one year of depreciation against the available taxable base.

    For each asset class, in priority order:
    ``used = min(theoretical + backlog, remaining base)`` and
    ``backlog' = theoretical + backlog - used``. A negative income leaves no
    base, so the whole charge is deferred.

    Args:
        ledger: State at the end of the previous year
        taxable_income_before_depreciation: Taxable base of the year

    Returns:
        DepreciationStep with the total used, per-asset entries and the new ledger
    """
    remaining_base = max(0.0, taxable_income_before_depreciation)
    year_index = ledger.years_elapsed + 1
    assets = []
    entries = []

    for asset in ledger.assets:
        theoretical = asset.theoretical_next_year
        available = theoretical + asset.backlog
        used = min(available, remaining_base)
        remaining_base -= used
        backlog = available - used

        assets.append(
            asset.model_copy(
                update={
                    "cumulative_theoretical": asset.cumulative_theoretical + theoretical,
                    "cumulative_used": asset.cumulative_used + used,
                    "backlog": backlog,
                }
            )
        )
        entries.append(
            DepreciationLedgerEntry(
                year_index=year_index,
                asset_class=asset.asset_class,
                theoretical=theoretical,
                used=used,
                carried_forward=theoretical - used,
                backlog_after=backlog,
            )
        )

    used_total = sum(entry.used for entry in entries)
    theoretical_total = sum(entry.theoretical for entry in entries)
    logger.debug(
        f"Depreciation year {year_index}: theoretical {theoretical_total:,.2f}, "
        f"used {used_total:,.2f}, backlog {sum(a.backlog for a in assets):,.2f}"
    )
    return DepreciationStep(
        used=used_total,
        theoretical=theoretical_total,
        entries=tuple(entries),
        ledger=DepreciationLedger(assets=tuple(assets), years_elapsed=year_index),
    )


def replay_depreciation(
    params: TaxParameters, incomes_before_depreciation: Sequence[float]
) -> List[DepreciationStep]:
    """Drive the ledger from the opening state through every year in order."""
    ledger = DepreciationLedger.from_parameters(params)
    steps = []
    for income in incomes_before_depreciation:
        step = advance_year(ledger, income)
        steps.append(step)
        ledger = step.ledger
    return steps


def depreciation_table(steps: Sequence[DepreciationStep]) -> pd.DataFrame:
    """One row per year and asset class."""
    records = [entry.model_dump() for step in steps for entry in step.entries]
    columns = list(DepreciationLedgerEntry.model_fields)
    if not records:
        return pd.DataFrame(columns=columns)
    df = pd.DataFrame.from_records(records, columns=columns)
    df["asset_class"] = df["asset_class"].map(lambda a: AssetClassEnum(a).value)
    return df
