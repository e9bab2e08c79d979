# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Depreciation ledger tests.

The ledger is replayed year by year; invariants are checked against the
straight-line charge computed inline.
"""

import pytest
from pydantic import ValidationError

from immofi.core.primitives import AssetClassEnum
from immofi.tax import (
    DepreciationLedger,
    TaxParameters,
    advance_year,
    depreciation_table,
    replay_depreciation,
)


@pytest.fixture
def params() -> TaxParameters:
    """Building 4 000/year over 25 years, furniture 2 000/year over 5 years."""
    return TaxParameters(
        building_value=100_000.0,
        building_amortization_years=25,
        furniture_value=10_000.0,
        furniture_amortization_years=5,
    )


def asset(ledger: DepreciationLedger, asset_class: AssetClassEnum):
    return next(a for a in ledger.assets if a.asset_class == asset_class)


class TestAdvanceYear:
    def test_enough_income(self, params):
        step = advance_year(DepreciationLedger.from_parameters(params), 10_000.0)

        assert step.theoretical == pytest.approx(6_000.0)
        assert step.used == pytest.approx(6_000.0)
        assert step.ledger.backlog == 0.0
        assert step.ledger.years_elapsed == 1

    def test_building_absorbs_base_first(self, params):
        step = advance_year(DepreciationLedger.from_parameters(params), 3_000.0)

        building = asset(step.ledger, AssetClassEnum.BUILDING)
        furniture = asset(step.ledger, AssetClassEnum.FURNITURE)
        assert building.cumulative_used == pytest.approx(3_000.0)
        assert building.backlog == pytest.approx(1_000.0)
        assert furniture.cumulative_used == 0.0
        assert furniture.backlog == pytest.approx(2_000.0)
        assert step.used == pytest.approx(3_000.0)

    def test_backlog_absorbed_later(self, params):
        first = advance_year(DepreciationLedger.from_parameters(params), 3_000.0)
        second = advance_year(first.ledger, 10_000.0)

        # 4 000 + 1 000 building, then 2 000 + 2 000 furniture
        assert second.used == pytest.approx(9_000.0)
        assert second.ledger.backlog == 0.0

    def test_negative_income_defers_everything(self, params):
        step = advance_year(DepreciationLedger.from_parameters(params), -5_000.0)

        assert step.used == 0.0
        assert step.ledger.backlog == pytest.approx(6_000.0)
        assert all(entry.carried_forward == entry.theoretical for entry in step.entries)

    def test_priority_override(self):
        params = TaxParameters(
            building_value=100_000.0,
            furniture_value=10_000.0,
            furniture_amortization_years=5,
            depreciation_priority=(
                AssetClassEnum.FURNITURE,
                AssetClassEnum.BUILDING,
                AssetClassEnum.WORKS,
            ),
        )

        step = advance_year(DepreciationLedger.from_parameters(params), 3_000.0)

        assert asset(step.ledger, AssetClassEnum.FURNITURE).cumulative_used == pytest.approx(2_000.0)
        assert asset(step.ledger, AssetClassEnum.BUILDING).cumulative_used == pytest.approx(1_000.0)

    def test_incomplete_priority_rejected(self):
        with pytest.raises(ValidationError):
            TaxParameters(
                depreciation_priority=(AssetClassEnum.BUILDING, AssetClassEnum.BUILDING)
            )


class TestReplay:
    INCOMES = [
        5_000.0, -2_000.0, 0.0, 12_000.0, 1_500.0, 30_000.0, -8_000.0, 7_000.0,
        2_500.0, 9_000.0, 0.0, 4_000.0, 15_000.0, -1.0, 6_000.0, 3_000.0,
        20_000.0, 500.0, 8_000.0, 8_000.0, 1_000.0, 40_000.0, 2_000.0, 5_500.0,
        -3_000.0, 10_000.0, 3_500.0, 6_500.0, 0.0, 25_000.0,
    ]

    def test_cumulative_invariants(self, params):
        for step in replay_depreciation(params, self.INCOMES):
            for a in step.ledger.assets:
                assert a.cumulative_used <= a.cumulative_theoretical + 1e-9
                assert a.cumulative_theoretical <= a.value + 1e-9
                # nothing is lost: every charge is either used or in the backlog
                assert a.cumulative_used + a.backlog == pytest.approx(a.cumulative_theoretical)

    def test_straight_line_stops_at_asset_value(self, params):
        steps = replay_depreciation(params, [50_000.0] * 30)

        furniture = asset(steps[5].ledger, AssetClassEnum.FURNITURE)
        assert furniture.cumulative_theoretical == pytest.approx(10_000.0)
        assert steps[5].theoretical == pytest.approx(4_000.0)
        assert steps[-1].ledger.cumulative_theoretical == pytest.approx(110_000.0)

    def test_replay_is_deterministic(self, params):
        assert replay_depreciation(params, self.INCOMES) == replay_depreciation(params, self.INCOMES)

    def test_table(self, params):
        df = depreciation_table(replay_depreciation(params, [1_000.0, 2_000.0]))

        assert len(df) == 6
        assert set(df["asset_class"]) == {"building", "furniture", "works"}
        assert df["used"].sum() == pytest.approx(3_000.0)
