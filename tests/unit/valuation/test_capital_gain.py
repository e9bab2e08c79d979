# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Capital-gain taxation tests.

Reference scenario: bought 200 000, sold 250 000 after 10 years, so the
gross gain is 50 000 and the allowances are 30% (income tax) and 8.25%
(social charges).
"""

import pytest
from pydantic import ValidationError

from immofi.core.primitives import (
    AppreciationTypeEnum,
    ConfigurationError,
    TaxRegimeEnum,
)
from immofi.valuation import SaleParameters, compute_sale, sale_balance

MARGINAL = 0.30
PURCHASE_YEAR = 2024


def manual_private_gain_tax(gain: float, ir_allowance: float, ps_allowance: float) -> float:
    return gain * (1 - ir_allowance) * 0.19 + gain * (1 - ps_allowance) * 0.172


@pytest.fixture
def sale() -> SaleParameters:
    return SaleParameters(
        purchase_price=200_000.0,
        appreciation_type=AppreciationTypeEnum.AMOUNT,
        sale_price=250_000.0,
    )


def sell(regime, sale, holding_years=10, used_depreciation=0.0, **kwargs):
    return compute_sale(
        regime=regime,
        purchase_year=PURCHASE_YEAR,
        sale_year=PURCHASE_YEAR + holding_years,
        sale=sale,
        marginal_tax_rate=MARGINAL,
        cumulative_used_depreciation=used_depreciation,
        **kwargs,
    )


class TestPrivateGain:
    @pytest.mark.parametrize(
        "regime",
        [TaxRegimeEnum.MICRO_FONCIER, TaxRegimeEnum.REEL_FONCIER, TaxRegimeEnum.MICRO_BIC],
    )
    def test_allowances_applied(self, regime, sale):
        result = sell(regime, sale, used_depreciation=60_000.0)

        assert result.gross_capital_gain == pytest.approx(50_000.0)
        assert result.ir_allowance == pytest.approx(0.30)
        assert result.ps_allowance == pytest.approx(0.0825)
        assert result.taxable_capital_gain_ir == pytest.approx(35_000.0)
        assert result.income_tax == pytest.approx(35_000.0 * 0.19)
        assert result.social_charges == pytest.approx(50_000.0 * 0.9175 * 0.172)
        assert result.depreciation_tax == 0.0
        assert result.total_tax == pytest.approx(manual_private_gain_tax(50_000.0, 0.30, 0.0825))
        assert result.net_capital_gain == pytest.approx(50_000.0 - result.total_tax)
        assert result.short_term_gain is None

    def test_income_tax_exempt_after_22_years(self, sale):
        result = sell(TaxRegimeEnum.REEL_FONCIER, sale, holding_years=22)

        assert result.income_tax == 0.0
        assert result.social_charges == pytest.approx(50_000.0 * 0.72 * 0.172)

    def test_fully_exempt_after_30_years(self, sale):
        assert sell(TaxRegimeEnum.MICRO_FONCIER, sale, holding_years=30).total_tax == 0.0

    def test_no_tax_on_a_loss(self):
        sale = SaleParameters(
            purchase_price=200_000.0,
            notary_fees=15_000.0,
            appreciation_type=AppreciationTypeEnum.AMOUNT,
            sale_price=210_000.0,
        )
        result = sell(TaxRegimeEnum.REEL_BIC, sale, used_depreciation=40_000.0)

        assert result.gross_capital_gain == 0.0
        assert result.total_tax == 0.0


class TestNonProfessionalRecapture:
    def test_recapture_at_marginal_rate(self, sale):
        result = sell(TaxRegimeEnum.REEL_BIC, sale, used_depreciation=60_000.0)

        assert result.depreciation_taxable == pytest.approx(50_000.0)
        assert result.depreciation_tax == pytest.approx(15_000.0)
        assert result.total_tax == pytest.approx(
            manual_private_gain_tax(50_000.0, 0.30, 0.0825) + 15_000.0
        )

    def test_recapture_limited_to_used_depreciation(self, sale):
        result = sell(TaxRegimeEnum.REEL_BIC, sale, used_depreciation=12_000.0)

        assert result.depreciation_taxable == pytest.approx(12_000.0)
        assert result.depreciation_tax == pytest.approx(3_600.0)


class TestProfessionalLessor:
    @pytest.fixture
    def lmp_sale(self, sale) -> SaleParameters:
        return sale.model_copy(update={"is_professional_lessor": True})

    @pytest.mark.parametrize("holding_years", [1, 2])
    def test_short_term_only(self, lmp_sale, holding_years):
        result = sell(TaxRegimeEnum.REEL_BIC, lmp_sale, holding_years, used_depreciation=5_000.0)

        assert result.short_term_gain == pytest.approx(50_000.0)
        assert result.long_term_gain == 0.0
        assert result.total_tax == pytest.approx(50_000.0 * MARGINAL)

    def test_split_after_two_years(self, lmp_sale):
        result = sell(TaxRegimeEnum.REEL_BIC, lmp_sale, 10, used_depreciation=20_000.0)

        assert result.short_term_gain == pytest.approx(20_000.0)
        assert result.long_term_gain == pytest.approx(30_000.0)
        assert result.short_term_tax == pytest.approx(6_000.0)
        assert result.long_term_income_tax == pytest.approx(30_000.0 * 0.128)
        assert result.long_term_social_charges == pytest.approx(30_000.0 * 0.172)
        assert result.total_tax == pytest.approx(15_000.0)
        # no holding-period allowance for a professional lessor
        assert result.ir_allowance == 0.0

    def test_professional_status_only_matters_for_reel_bic(self, lmp_sale, sale):
        assert sell(TaxRegimeEnum.MICRO_BIC, lmp_sale) == sell(TaxRegimeEnum.MICRO_BIC, sale)


class TestProjectedValue:
    def test_annual_compounding(self):
        sale = SaleParameters(purchase_price=200_000.0, appreciation_rate=0.02)

        assert sale.projected_value(10) == pytest.approx(200_000.0 * 1.02**10)

    def test_global_rate(self):
        sale = SaleParameters(
            purchase_price=200_000.0,
            appreciation_type=AppreciationTypeEnum.GLOBAL,
            appreciation_rate=0.15,
        )

        assert sale.projected_value(3) == pytest.approx(230_000.0)
        assert sale.projected_value(12) == pytest.approx(230_000.0)

    def test_amount_requires_a_price(self):
        with pytest.raises(ValidationError):
            SaleParameters(appreciation_type=AppreciationTypeEnum.AMOUNT)

    def test_net_selling_price_and_acquisition_cost(self):
        sale = SaleParameters(
            purchase_price=200_000.0,
            notary_fees=15_000.0,
            acquisition_agency_fees=5_000.0,
            improvement_works=10_000.0,
            appreciation_type=AppreciationTypeEnum.AMOUNT,
            sale_price=300_000.0,
            sale_agency_fees=9_000.0,
        )
        result = sell(TaxRegimeEnum.MICRO_FONCIER, sale)

        assert result.corrected_acquisition_cost == pytest.approx(230_000.0)
        assert result.net_selling_price == pytest.approx(291_000.0)
        assert result.gross_capital_gain == pytest.approx(61_000.0)


class TestSaleBalance:
    def test_proceeds_after_loan_and_tax(self, sale):
        result = sell(
            TaxRegimeEnum.MICRO_FONCIER,
            sale,
            outstanding_loan_balance=120_000.0,
            early_repayment_penalty=1_800.0,
        )

        assert result.sale_balance == pytest.approx(
            250_000.0 - (120_000.0 + 1_800.0) - result.total_tax
        )
        assert sale_balance(250_000.0, 120_000.0, 1_800.0, 0.0) == pytest.approx(128_200.0)

    @pytest.mark.parametrize("sale_year", [PURCHASE_YEAR, PURCHASE_YEAR - 1])
    def test_sale_not_after_purchase(self, sale, sale_year):
        with pytest.raises(ConfigurationError):
            compute_sale(
                TaxRegimeEnum.MICRO_FONCIER,
                purchase_year=PURCHASE_YEAR,
                sale_year=sale_year,
                sale=sale,
                marginal_tax_rate=MARGINAL,
            )
