# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Externally supplied amortization schedules.

A schedule imported from a lender document replaces the generated one
wholesale. It is kept verbatim for display and persistence; when a rate is
needed downstream it is reconstructed with the Newton solver.
"""

from __future__ import annotations

import logging
from typing import Optional, Sequence

from ..core.primitives import CalculationSettings
from .amortization import AmortizationRow, AmortizationSchedule
from .payment import solve_monthly_rate

logger = logging.getLogger(__name__)


def schedule_from_rows(rows: Sequence[AmortizationRow]) -> AmortizationSchedule:
    """Wrap caller-supplied rows into an override schedule, unchanged."""
    rows = tuple(rows)
    amortizing = [row for row in rows if not row.is_deferred]
    deferred_interest = sum(
        row.interest for row in rows if row.is_deferred and row.payment == 0
    )
    return AmortizationSchedule(
        rows=rows,
        deferred_interest_total=deferred_interest,
        monthly_payment=amortizing[0].payment if amortizing else 0.0,
        is_override=True,
    )


def infer_annual_rate_pct(
    rows: Sequence[AmortizationRow],
    settings: Optional[CalculationSettings] = None,
) -> float:
    """
    Reconstruct the nominal annual rate (percent) of an imported schedule.

    Uses the opening balance and instalment of the first amortizing row and
    the count of amortizing rows. Returns 0.0 when fewer than
    ``settings.min_schedule_rows`` rows are supplied, when the inputs are
    degenerate, or when the solver does not converge.
    """
    settings = settings or CalculationSettings()
    if len(rows) < settings.min_schedule_rows:
        logger.debug(
            f"Only {len(rows)} imported rows; at least "
            f"{settings.min_schedule_rows} are needed to infer a rate"
        )
        return 0.0

    amortizing = [row for row in rows if not row.is_deferred]
    if not amortizing:
        return 0.0

    first = amortizing[0]
    opening_balance = first.balance_before or (first.balance_after + first.principal_paid)
    monthly_rate = solve_monthly_rate(
        payment=first.payment,
        principal=opening_balance,
        n_months=len(amortizing),
        settings=settings,
    )
    return monthly_rate * 1200
