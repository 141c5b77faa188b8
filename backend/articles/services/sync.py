from __future__ import annotations

import logging
from decimal import InvalidOperation
from typing import Dict

from django.utils import timezone

from articles.models import RobawsArticleCache
from pricing.services.utils import ZERO, parse_decimal

logger = logging.getLogger(__name__)

PARENT_ITEM_FIELD = "C965754A-4523-4916-A127-3522DE1A7001"


def _price(value):
    try:
        return parse_decimal(value)
    except InvalidOperation:
        logger.warning(f"Ignoring non-numeric Robaws price {value!r}")
        return None


def is_parent_item(data: Dict) -> bool:
    custom = data.get("custom_fields") or {}
    if "parent_item" in custom:
        return bool(custom["parent_item"])
    extra = data.get("extraFields") or {}
    for key in (PARENT_ITEM_FIELD, "parent_item"):
        field = extra.get(key)
        if isinstance(field, dict):
            return bool(field.get("booleanValue", field.get("value", False)))
    return False


def article_defaults(data: Dict) -> Dict:
    """Cache columns for one article as returned by GET /api/v2/articles."""
    price = next((p for p in (_price(data.get(k)) for k in ("salePrice", "price", "unitPrice")) if p is not None), ZERO)
    code = data.get("code") or data.get("articleNumber") or data.get("id")
    return {
        "article_code": str(code)[:100],
        "article_name": str(data.get("name") or data.get("description") or "Unnamed Article")[:255],
        "description": data.get("description") or data.get("notes") or "",
        "category": str(data.get("category") or "general")[:50],
        "unit_price": price,
        "cost_price": _price(data.get("costPrice")),
        "currency": str(data.get("currency") or "EUR")[:3],
        "unit_type": str(data.get("unit") or data.get("unitType") or "UNIT")[:20],
        "is_active": bool(data.get("active", True)),
        "is_parent_item": is_parent_item(data),
        "last_synced_at": timezone.now(),
    }


class ArticleSyncService:
    """Upserts the local article cache from the Robaws articles endpoint."""

    def __init__(self, client):
        self.client = client

    def sync(self, page_size=100, deactivate_missing=False) -> Dict[str, int]:
        created = updated = skipped = 0
        seen = set()
        for data in self.client.iter_articles(size=page_size):
            if not data.get("id"):
                skipped += 1
                continue
            robaws_id = str(data["id"])
            seen.add(robaws_id)
            _, was_created = RobawsArticleCache.objects.update_or_create(
                robaws_article_id=robaws_id, defaults=article_defaults(data)
            )
            if was_created:
                created += 1
            else:
                updated += 1

        deactivated = 0
        if deactivate_missing and seen:
            deactivated = (
                RobawsArticleCache.objects.filter(is_active=True)
                .exclude(robaws_article_id__in=seen)
                .update(is_active=False, updated_at=timezone.now())
            )

        logger.info(
            f"Robaws article sync: {created} created, {updated} updated, {skipped} skipped, {deactivated} deactivated"
        )
        return {"created": created, "updated": updated, "skipped": skipped, "deactivated": deactivated}
