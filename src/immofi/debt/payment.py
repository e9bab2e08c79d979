# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Monthly payment calculations.

Closed-form annuity payment used by the amortization engine, and the inverse
Newton-Raphson solver that reconstructs a monthly rate from a payment, a
principal and a number of instalments.
"""

from __future__ import annotations

import logging
from typing import Optional

from pyxirr import pmt

from ..core.primitives import CalculationSettings, warn_non_convergence

logger = logging.getLogger(__name__)


def annuity_payment(principal: float, monthly_rate: float, n_months: int) -> float:
    """
    Fixed instalment that fully repays ``principal`` over ``n_months``.

    ``M = P * r * (1 + r)^n / ((1 + r)^n - 1)`` for ``r > 0`` and ``M = P / n``
    for a zero rate. Returns 0 when there is nothing to amortize.
    """
    if principal <= 0 or n_months <= 0:
        return 0.0
    if monthly_rate == 0:
        return principal / n_months
    return -pmt(monthly_rate, n_months, principal)


def _annuity_residual(rate: float, payment: float, principal: float, n_months: int):
    """Return ``f(r) = M - r*P / (1 - (1+r)^-n)`` and its derivative."""
    discount = (1 + rate) ** -n_months
    denominator = 1 - discount
    f = payment - (rate * principal) / denominator
    f_prime = -principal / denominator + (
        rate * principal * n_months * (1 + rate) ** (-n_months - 1)
    ) / denominator**2
    return f, f_prime


def solve_monthly_rate(
    payment: float,
    principal: float,
    n_months: int,
    settings: Optional[CalculationSettings] = None,
) -> float:
    """
    Solve the monthly rate of an annuity by Newton-Raphson.

    The iterate starts at ``settings.newton_seed_rate`` and is clamped into
    ``[newton_rate_floor, newton_rate_ceiling]`` after every step. Convergence
    is declared when the step size falls below ``newton_tolerance``.

    Args:
        payment: Constant monthly instalment
        principal: Amount borrowed
        n_months: Number of instalments
        settings: Solver configuration (defaults apply when omitted)

    Returns:
        The monthly rate as a decimal, or 0.0 for degenerate inputs or when the
        solver does not converge within its iteration budget.
    """
    settings = settings or CalculationSettings()
    if payment <= 0 or principal <= 0 or n_months <= 0:
        return 0.0

    rate = settings.newton_seed_rate
    for iteration in range(settings.newton_max_iterations):
        f, f_prime = _annuity_residual(rate, payment, principal, n_months)
        if abs(f_prime) < 1e-10:
            warn_non_convergence(
                f"Rate solver hit a flat derivative at r={rate:.6f} "
                f"(iteration {iteration}); rate reported as unknown"
            )
            return 0.0

        delta = f / f_prime
        rate = rate - delta
        rate = max(settings.newton_rate_floor, min(settings.newton_rate_ceiling, rate))

        if abs(delta) < settings.newton_tolerance:
            logger.debug(
                f"Rate solver converged to r={rate:.8f} after {iteration + 1} iterations"
            )
            return rate

    warn_non_convergence(
        f"Rate solver did not converge within {settings.newton_max_iterations} "
        f"iterations (payment={payment:.2f}, principal={principal:.2f}, n={n_months})"
    )
    return 0.0
