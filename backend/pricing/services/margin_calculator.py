"""
Margin calculation over pricing-profile rules.

Rule lookup falls through four tiers, most specific first:
exact (category + unit basis) -> category only -> unit basis only -> global.
"""
from __future__ import annotations

import logging
from decimal import Decimal
from typing import Iterable, Optional

from pricing.services.utils import ZERO, d

logger = logging.getLogger(__name__)


def _norm(value) -> Optional[str]:
    if value is None:
        return None
    value = str(value).strip().upper()
    return value or None


class MarginCalculator:
    def find_rule(self, rules: Iterable, category: Optional[str], unit_basis: Optional[str]):
        """
        Pick the most specific active rule for a category / unit basis pair.

        Args:
            rules: PricingRule rows (or objects with the same attributes), already in priority order
            category: Vehicle category of the article (e.g. CAR, SVAN, LM)
            unit_basis: Unit basis of the article (e.g. UNIT, LM, CBM)

        Returns:
            The matching rule or None
        """
        category = _norm(category)
        unit_basis = _norm(unit_basis)
        active = [r for r in rules if r.is_active]

        def scope(rule):
            # blank and NULL both mean "any"
            return _norm(rule.vehicle_category), _norm(rule.unit_basis)

        tiers = (
            lambda c, b: category and unit_basis and c == category and b == unit_basis,
            lambda c, b: category and c == category and b is None,
            lambda c, b: unit_basis and c is None and b == unit_basis,
            lambda c, b: c is None and b is None,
        )
        for matches in tiers:
            for rule in active:
                if matches(*scope(rule)):
                    return rule
        return None

    def calculate_margin(self, rules: Iterable, base_price, category: Optional[str],
                         unit_basis: Optional[str]) -> Decimal:
        """Margin amount for a base price over a rule list; 0 when no rule applies."""
        rule = self.find_rule(rules, category, unit_basis)
        if rule is None:
            logger.debug(f"No margin rule for {category}/{unit_basis}")
            return ZERO
        return rule.margin_for(d(base_price))

    def margin_for_profile(self, profile, base_price, category: Optional[str], unit_basis: Optional[str]) -> Decimal:
        if profile is None:
            return ZERO
        return self.calculate_margin(profile.rules.all(), base_price, category, unit_basis)
