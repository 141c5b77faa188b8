from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from .services.utils import ZERO


@dataclass
class ArticlePrice:
    base_price: Decimal
    selling_price: Decimal
    margin_amount: Decimal = ZERO
    # tier | profile | role
    source: str = "role"
    pricing_profile_id: Optional[int] = None
    pricing_tier_id: Optional[int] = None

    @property
    def margin_pct(self) -> Decimal:
        if not self.base_price:
            return ZERO
        return (self.margin_amount / self.base_price * Decimal("100")).quantize(Decimal("0.01"))
