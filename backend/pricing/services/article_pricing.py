"""
Selling price of a cached Robaws article inside a quotation request.

Precedence:
  1. the quotation's pricing tier, else its customer's default tier (markup or discount on the base price)
  2. the pricing profile resolved for carrier/client, when one of its rules applies
  3. the customer-role margin (article override -> settings table -> default 15%)
"""
from __future__ import annotations

import logging

from pricing.dataclasses import ArticlePrice
from pricing.services.margin_calculator import MarginCalculator
from pricing.services.profile_resolver import PricingProfileResolver
from pricing.services.utils import q2

logger = logging.getLogger(__name__)


def _tier_for(quotation):
    """The quotation's own tier, else the customer user's default tier."""
    if quotation is None:
        return None
    tier = getattr(quotation, "pricing_tier", None)
    if tier is None and getattr(quotation, "customer_user_id", None):
        tier = quotation.customer_user.pricing_tier
    return tier


def selling_price_for(article, quotation=None, formula_inputs=None,
                      resolver: PricingProfileResolver = None,
                      calculator: MarginCalculator = None) -> ArticlePrice:
    base = q2(article.base_price(formula_inputs))

    tier = _tier_for(quotation)
    if tier is not None and tier.is_active:
        selling = article.price_for_tier(tier, formula_inputs)
        return ArticlePrice(
            base_price=base,
            selling_price=selling,
            margin_amount=selling - base,
            source="tier",
            pricing_tier_id=tier.pk,
        )

    resolver = resolver or PricingProfileResolver()
    calculator = calculator or MarginCalculator()
    carrier_id = article.shipping_carrier_id
    client_id = None
    if quotation is not None:
        carrier_id = carrier_id or quotation.selected_carrier_id
        client_id = quotation.robaws_client_id or None

    profile = resolver.resolve(carrier_id, client_id)
    if profile is not None:
        category = article.vehicle_category or article.category
        rule = calculator.find_rule(profile.rules.all(), category, article.unit_type)
        if rule is not None:
            margin = q2(rule.margin_for(base))
            logger.debug(f"Article {article.pk}: profile {profile.pk} margin {margin}")
            return ArticlePrice(
                base_price=base,
                selling_price=q2(base + margin),
                margin_amount=margin,
                source="profile",
                pricing_profile_id=profile.pk,
            )

    role = getattr(quotation, "customer_role", None) if quotation is not None else None
    selling = article.price_for_role(role, formula_inputs)
    return ArticlePrice(base_price=base, selling_price=selling, margin_amount=selling - base, source="role")
