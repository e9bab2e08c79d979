# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Error taxonomy shared by every engine.

- ``ConfigurationError`` is raised for structurally invalid parameters and
  aborts the affected computation.
- ``IncompleteDataWarning`` and ``NumericNonConvergence`` are warnings: the
  engine proceeds with zero-valued defaults (or a zero rate) and the caller
  decides whether to surface them.
"""

from __future__ import annotations

import logging
import warnings

logger = logging.getLogger(__name__)


class ConfigurationError(ValueError):
    """Structurally invalid parameters (negative term, deferral >= term, sale before purchase)."""


class IncompleteDataWarning(UserWarning):
    """A requested year has no expense record or a parameter is unset; zeros were used."""


class NumericNonConvergence(RuntimeWarning):
    """An iterative solver exhausted its iteration budget; the result is reported as 0."""


def warn_incomplete(message: str) -> None:
    """Log and emit an ``IncompleteDataWarning``."""
    logger.warning(message)
    warnings.warn(message, IncompleteDataWarning, stacklevel=3)


def warn_non_convergence(message: str) -> None:
    """Log and emit a ``NumericNonConvergence`` warning."""
    logger.warning(message)
    warnings.warn(message, NumericNonConvergence, stacklevel=3)


def round_currency(value: float, decimals: int = 2) -> float:
    """Round a currency amount for presentation or persistence."""
    return round(float(value), decimals)
