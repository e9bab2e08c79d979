# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

from enum import Enum
from typing import List


class DeferralKindEnum(str, Enum):
    """
    Repayment deferral applied at the opening of a loan.

    - NONE: amortization starts with the first instalment
    - PARTIAL: interest is paid during the deferral, principal is not
    - TOTAL: nothing is paid; interest capitalizes onto the balance
    """

    NONE = "none"
    PARTIAL = "partial"
    TOTAL = "total"


class TaxRegimeEnum(str, Enum):
    """
    The four mutually exclusive tax treatments for rental income.

    Bare letting (location nue) is taxed as property income (revenus fonciers);
    furnished letting (location meublée) is taxed as commercial profit (BIC).
    """

    MICRO_FONCIER = "micro-foncier"
    REEL_FONCIER = "reel-foncier"
    MICRO_BIC = "micro-bic"
    REEL_BIC = "reel-bic"

    @property
    def is_furnished(self) -> bool:
        """True for the furnished-letting (BIC) regimes."""
        return self in (TaxRegimeEnum.MICRO_BIC, TaxRegimeEnum.REEL_BIC)

    @property
    def is_micro(self) -> bool:
        """True for the flat-allowance regimes."""
        return self in (TaxRegimeEnum.MICRO_FONCIER, TaxRegimeEnum.MICRO_BIC)

    @classmethod
    def ordered(cls) -> List["TaxRegimeEnum"]:
        """Regimes in display order."""
        return [cls.MICRO_FONCIER, cls.REEL_FONCIER, cls.MICRO_BIC, cls.REEL_BIC]


class AssetClassEnum(str, Enum):
    """Depreciable asset classes under the reel-BIC regime."""

    BUILDING = "building"
    FURNITURE = "furniture"
    WORKS = "works"


class AppreciationTypeEnum(str, Enum):
    """How the projected sale value is derived from the purchase price."""

    ANNUAL = "annual"  # Percentage compounded once per holding year
    GLOBAL = "global"  # Single percentage over the whole holding period
    AMOUNT = "amount"  # Explicit sale price
