# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""Loan amortization calculations"""

from __future__ import annotations

import logging
from datetime import date
from typing import List, Optional, Tuple

import pandas as pd

from ..core.primitives import (
    ConfigurationError,
    DeferralKindEnum,
    FiscalSettings,
    Model,
    PositiveFloat,
    PositiveInt,
)
from .payment import annuity_payment

logger = logging.getLogger(__name__)


class LoanTerms(Model):
    """
    Parameters of an amortizing bank loan.

    A loan with a zero principal, rate or term is a valid "not yet configured"
    state and yields an empty schedule. Negative values and a deferral that
    consumes the whole term are configuration errors, detected by
    ``check_configuration``.

    Attributes:
        principal: Amount borrowed
        annual_rate_pct: Nominal annual rate in percent (3.0 for 3%)
        term_years: Loan term in years, deferral months included
        deferral_kind: Repayment deferral at loan opening
        deferral_months: Length of the deferral window in months
        start_date: Disbursement date; first instalment falls in that month.
            Required to generate a schedule of configured terms
        insurance_rate_pct: Annual borrower insurance in percent of principal

    Example:
        >>> terms = LoanTerms(
        ...     principal=200_000.0,
        ...     annual_rate_pct=3.0,
        ...     term_years=20,
        ...     start_date=date(2024, 1, 1),
        ... )
        >>> schedule = generate_schedule(terms)
        >>> round(schedule.monthly_payment, 2)
        1109.2
    """

    principal: float = 0.0
    annual_rate_pct: float = 0.0
    term_years: int = 0
    deferral_kind: DeferralKindEnum = DeferralKindEnum.NONE
    deferral_months: int = 0
    start_date: Optional[date] = None
    insurance_rate_pct: PositiveFloat = 0.0

    @property
    def monthly_rate(self) -> float:
        return self.annual_rate_pct / 1200

    @property
    def total_months(self) -> int:
        return self.term_years * 12

    @property
    def effective_deferral_months(self) -> int:
        """Deferral length, ignored when no deferral kind is selected."""
        if self.deferral_kind == DeferralKindEnum.NONE:
            return 0
        return self.deferral_months

    @property
    def is_configured(self) -> bool:
        return self.principal > 0 and self.annual_rate_pct > 0 and self.term_years > 0

    @property
    def monthly_insurance(self) -> float:
        return self.principal * self.insurance_rate_pct / 100 / 12

    def check_configuration(self) -> None:
        """
        Raise ``ConfigurationError`` for structurally invalid terms.

        A deferral equal to or longer than the term leaves no month to amortize
        the loan and is rejected rather than clamped.
        """
        if self.principal < 0:
            raise ConfigurationError(f"Loan principal cannot be negative ({self.principal})")
        if self.annual_rate_pct < 0:
            raise ConfigurationError(
                f"Loan rate cannot be negative ({self.annual_rate_pct}%)"
            )
        if self.term_years < 0:
            raise ConfigurationError(f"Loan term cannot be negative ({self.term_years} years)")
        if self.deferral_months < 0:
            raise ConfigurationError(
                f"Deferral length cannot be negative ({self.deferral_months} months)"
            )
        if self.is_configured and self.effective_deferral_months >= self.total_months:
            raise ConfigurationError(
                f"Deferral of {self.effective_deferral_months} months leaves no "
                f"amortization period in a {self.total_months}-month loan"
            )


class AmortizationRow(Model):
    """
    One monthly line of an amortization schedule.

    ``principal_before`` and ``balance_before`` differ only while interest
    capitalizes during a total deferral.
    """

    month: PositiveInt
    due_date: date
    principal_before: float = 0.0
    balance_before: float = 0.0
    interest: float = 0.0
    payment: float = 0.0
    principal_paid: float = 0.0
    balance_after: float = 0.0
    cumulative_paid: float = 0.0
    is_deferred: bool = False


class AmortizationSchedule(Model):
    """
    Ordered monthly schedule plus the interest capitalized during deferral.

    Either generated from ``LoanTerms`` or supplied wholesale by the caller
    (``is_override``); the two are never merged.
    """

    rows: Tuple[AmortizationRow, ...] = ()
    deferred_interest_total: float = 0.0
    monthly_payment: float = 0.0
    is_override: bool = False

    @property
    def is_empty(self) -> bool:
        return len(self.rows) == 0

    def rows_in_year(self, year: int) -> List[AmortizationRow]:
        return [row for row in self.rows if row.due_date.year == year]

    def outstanding_balance_at_year_end(self, year: int) -> float:
        """
        Balance still owed after the last instalment of ``year``.

        Before the first instalment the full opening balance is owed; after
        the last one nothing is.
        """
        if self.is_empty:
            return 0.0
        if year < self.rows[0].due_date.year:
            return self.rows[0].balance_before
        paid = [row for row in self.rows if row.due_date.year <= year]
        return paid[-1].balance_after

    def interest_paid_in_year(self, year: int) -> float:
        """Interest actually paid in ``year``; capitalized interest is excluded."""
        return sum(
            row.interest for row in self.rows_in_year(year) if row.payment > 0
        )

    def payments_in_year(self, year: int) -> float:
        return sum(row.payment for row in self.rows_in_year(year))

    def to_dataframe(self, rounded: bool = False, decimals: int = 2) -> pd.DataFrame:
        """
        Tabular view of the schedule indexed by monthly period.

        Currency columns are rounded only when ``rounded`` is set; the
        schedule itself always keeps full precision.
        """
        columns = [
            "Month",
            "Date",
            "Principal Before",
            "Begin Balance",
            "Interest",
            "Payment",
            "Principal",
            "End Balance",
            "Cumulative Paid",
            "Deferred",
        ]
        if self.is_empty:
            return pd.DataFrame(columns=columns)

        df = pd.DataFrame(
            {
                "Month": [row.month for row in self.rows],
                "Date": [row.due_date for row in self.rows],
                "Principal Before": [row.principal_before for row in self.rows],
                "Begin Balance": [row.balance_before for row in self.rows],
                "Interest": [row.interest for row in self.rows],
                "Payment": [row.payment for row in self.rows],
                "Principal": [row.principal_paid for row in self.rows],
                "End Balance": [row.balance_after for row in self.rows],
                "Cumulative Paid": [row.cumulative_paid for row in self.rows],
                "Deferred": [row.is_deferred for row in self.rows],
            }
        )
        periods = pd.to_datetime(df["Date"]).dt.to_period("M")
        df.index = pd.PeriodIndex(periods, name="Period")
        if rounded:
            currency = columns[2:9]
            df[currency] = df[currency].round(decimals)
        return df

    def summary(self) -> pd.Series:
        """Summary statistics of the schedule."""
        if self.is_empty:
            return pd.Series(dtype=float)
        deferred = sum(1 for row in self.rows if row.is_deferred)
        return pd.Series(
            {
                "Payoff Date": self.rows[-1].due_date,
                "Total Payments": sum(row.payment for row in self.rows),
                "Total Principal Paid": sum(row.principal_paid for row in self.rows),
                "Total Interest": sum(row.interest for row in self.rows),
                "Deferred Interest": self.deferred_interest_total,
                "Deferred Periods": deferred,
                "Amortizing Periods": len(self.rows) - deferred,
            }
        )


def calculate_monthly_payment(terms: LoanTerms) -> float:
    """
    Instalment of the amortizing phase of the loan.

    After a total deferral the instalment is computed on the balance inflated
    by capitalized interest. Returns 0 for unset terms.
    """
    terms.check_configuration()
    if not terms.is_configured:
        return 0.0
    deferral = terms.effective_deferral_months
    balance = terms.principal
    if terms.deferral_kind == DeferralKindEnum.TOTAL:
        balance = terms.principal * (1 + terms.monthly_rate) ** deferral
    return annuity_payment(balance, terms.monthly_rate, terms.total_months - deferral)


def _instalment_dates(start_date: date, n_months: int) -> List[date]:
    start = pd.Timestamp(start_date)
    return [(start + pd.DateOffset(months=i)).date() for i in range(n_months)]


def generate_schedule(terms: LoanTerms) -> AmortizationSchedule:
    """
    Generate the month-by-month schedule of a loan, deferral included.

    Handles three phases:
    1. Partial deferral: payment = interest on the unchanged principal
    2. Total deferral: no payment; interest capitalizes monthly onto the balance
    3. Amortizing phase: fixed annuity over the remaining months, computed on
       the balance at the end of the deferral

    Figures are kept at full precision; rounding belongs to presentation.

    Raises:
        ConfigurationError: For negative inputs, a deferral >= term or a
            missing start date
    """
    terms.check_configuration()
    if not terms.is_configured:
        logger.debug("Loan terms not configured; returning an empty schedule")
        return AmortizationSchedule()
    if terms.start_date is None:
        raise ConfigurationError("Loan start_date is required to date the schedule")

    total_months = terms.total_months
    deferral = terms.effective_deferral_months
    monthly_rate = terms.monthly_rate
    dates = _instalment_dates(terms.start_date, total_months)

    principal = float(terms.principal)
    balance = principal
    cumulative_paid = 0.0
    deferred_interest = 0.0
    rows: List[AmortizationRow] = []

    for i in range(deferral):
        balance_before = balance
        if terms.deferral_kind == DeferralKindEnum.TOTAL:
            interest = balance * monthly_rate
            payment = 0.0
            balance += interest
            deferred_interest += interest
        else:
            interest = principal * monthly_rate
            payment = interest
            cumulative_paid += payment
        rows.append(
            AmortizationRow(
                month=i + 1,
                due_date=dates[i],
                principal_before=principal,
                balance_before=balance_before,
                interest=interest,
                payment=payment,
                principal_paid=0.0,
                balance_after=balance,
                cumulative_paid=cumulative_paid,
                is_deferred=True,
            )
        )

    remaining_months = total_months - deferral
    instalment = annuity_payment(balance, monthly_rate, remaining_months)
    logger.debug(
        f"Amortizing {balance:,.2f} over {remaining_months} months "
        f"at {terms.annual_rate_pct}%: instalment {instalment:,.2f}"
    )

    for i in range(deferral, total_months):
        balance_before = balance
        interest = balance * monthly_rate
        if i == total_months - 1:
            # Final instalment clears whatever float drift remains
            principal_paid = balance
            payment = balance + interest
        else:
            principal_paid = instalment - interest
            payment = instalment
        balance = balance - principal_paid
        cumulative_paid += payment
        rows.append(
            AmortizationRow(
                month=i + 1,
                due_date=dates[i],
                principal_before=balance_before,
                balance_before=balance_before,
                interest=interest,
                payment=payment,
                principal_paid=principal_paid,
                balance_after=0.0 if i == total_months - 1 else balance,
                cumulative_paid=cumulative_paid,
                is_deferred=False,
            )
        )

    return AmortizationSchedule(
        rows=tuple(rows),
        deferred_interest_total=deferred_interest,
        monthly_payment=instalment,
    )


def statutory_early_repayment_penalty(
    outstanding_balance: float,
    annual_rate_pct: float,
    fiscal: Optional[FiscalSettings] = None,
) -> float:
    """
    Legal ceiling of the early-repayment penalty on a residential loan.

    The lender may charge at most the lower of six months of interest on the
    repaid balance and 3% of that balance.
    """
    fiscal = fiscal or FiscalSettings()
    if outstanding_balance <= 0:
        return 0.0
    months_of_interest = (
        outstanding_balance * annual_rate_pct / 1200 * fiscal.early_repayment_penalty_months
    )
    return min(months_of_interest, outstanding_balance * fiscal.early_repayment_penalty_cap)
