from __future__ import annotations

import logging

from django.conf import settings
from django.utils import timezone

logger = logging.getLogger(__name__)

MAX_ATTEMPTS = 100


def request_number_prefix(now=None) -> str:
    now = now or timezone.localtime()
    prefix = settings.QUOTATION.get("request_number_prefix", "QR")
    return f"{prefix}-{now.year}-"


def _sequence(number: str) -> int:
    tail = number.rsplit("-", 1)[-1]
    return int(tail) if tail.isdigit() else 0


def next_request_number(now=None) -> str:
    """
    Next free request number of the year, e.g. QR-2026-0042.

    Soft-deleted quotations are included so a number is never handed out twice.
    After MAX_ATTEMPTS collisions a timestamp suffix (mdHis) is used instead.
    """
    from quotes.models import QuotationRequest

    now = now or timezone.localtime()
    prefix = request_number_prefix(now)
    last = (
        QuotationRequest.all_objects.filter(request_number__startswith=prefix)
        .order_by("-request_number")
        .values_list("request_number", flat=True)
        .first()
    )
    start = _sequence(last) + 1 if last else 1

    for offset in range(MAX_ATTEMPTS):
        candidate = f"{prefix}{start + offset:04d}"
        if not QuotationRequest.all_objects.filter(request_number=candidate).exists():
            return candidate

    fallback = f"{prefix}{now.strftime('%m%d%H%M%S')}"
    logger.warning(f"Request number sequence exhausted, using {fallback}")
    return fallback
