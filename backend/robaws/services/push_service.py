from __future__ import annotations

import hashlib
import json
import logging
import time
from dataclasses import dataclass
from typing import Any, Dict, Optional

from django.conf import settings
from django.utils import timezone

from robaws.client import RobawsApiClient, RobawsApiError
from robaws.mapper import build_extra_fields, is_empty

logger = logging.getLogger(__name__)


@dataclass
class PushResult:
    success: bool
    offer_id: Optional[str] = None
    offer_number: Optional[str] = None
    action: Optional[str] = None
    error: Optional[str] = None


def _as_id(value):
    text = str(value).strip()
    return int(text) if text.isdigit() else text


def _drop_empty(payload: Dict[str, Any]) -> Dict[str, Any]:
    return {k: v for k, v in payload.items() if not is_empty(v)}


class RobawsQuotationPushService:
    """Creates or updates the Robaws offer that mirrors a quotation request."""

    offer_number_attempts = 3
    offer_number_delay = 1.0

    def __init__(self, client=None):
        self._client = client

    @property
    def client(self):
        if self._client is None:
            self._client = RobawsApiClient()
        return self._client

    def resolve_client_id(self, quotation):
        if quotation.robaws_client_id:
            return quotation.robaws_client_id
        user = quotation.customer_user
        if user is not None and user.robaws_client_id:
            return user.robaws_client_id
        return None

    def extra_field_values(self, quotation) -> Dict[str, Any]:
        values = {
            "CUSTOMER": quotation.client_name or quotation.contact_name,
            "CONTACT": quotation.contact_name,
            "CONTACT_EMAIL": quotation.contact_email or quotation.client_email,
            "POR": quotation.por,
            "POL": quotation.pol,
            "POD": quotation.pod,
            "FDEST": quotation.fdest,
            "CARGO": quotation.cargo_description,
            "METHOD": quotation.simple_service_type or quotation.service_type,
        }
        if quotation.selected_carrier_id:
            values["SHIPPING_LINE"] = quotation.selected_carrier.name
        return values

    def build_payload(self, quotation, client_id) -> Dict[str, Any]:
        line_items = []
        for item in quotation.articles.select_related("article").order_by("id"):
            article_id = item.article.robaws_article_id if item.article_id else None
            if not article_id:
                logger.warning(f"Quotation {quotation.request_number}: skipping line {item.pk} without Robaws article id")
                continue
            line_items.append({
                "articleId": _as_id(article_id),
                "quantity": max(1, int(item.quantity or 0)),
            })

        client_id = _as_id(client_id)
        payload = {
            "title": quotation.request_number or quotation.customer_reference,
            "project": quotation.request_number,
            "clientReference": quotation.customer_reference or quotation.request_number,
            "contactEmail": quotation.contact_email,
            "customerId": client_id,
            "clientId": client_id,
            "companyId": _as_id(settings.ROBAWS.get("company_id") or 1),
            "currency": quotation.pricing_currency or settings.QUOTATION.get("default_currency", "EUR"),
            "status": "Draft",
            "externalId": f"bconnect_quotation_{quotation.pk}",
            "lineItems": line_items,
            "extraFields": build_extra_fields(self.extra_field_values(quotation)),
        }
        return _drop_empty(payload)

    @staticmethod
    def idempotency_key(quotation, payload) -> str:
        digest = hashlib.md5(json.dumps(payload, sort_keys=True, default=str).encode("utf-8")).hexdigest()
        return f"quotation_{quotation.pk}_{digest}"

    def _mark(self, quotation, status, **fields):
        quotation.robaws_sync_status = status
        quotation.robaws_synced_at = timezone.now()
        for name, value in fields.items():
            setattr(quotation, name, value)
        quotation.save(update_fields=["robaws_sync_status", "robaws_synced_at", *fields.keys(), "updated_at"])

    def fetch_offer_number(self, offer_id) -> Optional[str]:
        for attempt in range(1, self.offer_number_attempts + 1):
            try:
                data = self.client.get_offer(offer_id)
            except RobawsApiError as exc:
                logger.warning(f"Could not fetch Robaws offer {offer_id}: {exc}")
                data = {}
            number = data.get("logicId") or data.get("offerNumber") or data.get("number")
            if number:
                return str(number)
            if attempt < self.offer_number_attempts and self.offer_number_delay:
                time.sleep(self.offer_number_delay)
        return None

    def push(self, quotation) -> PushResult:
        if not quotation.articles.exists():
            return PushResult(False, error="Quotation has no articles to push.")

        client_id = self.resolve_client_id(quotation)
        if not client_id:
            self._mark(quotation, "failed")
            return PushResult(False, error="Unable to resolve Robaws client.")

        payload = self.build_payload(quotation, client_id)
        if not payload.get("lineItems"):
            return PushResult(False, error="Quotation has no Robaws-mapped articles to push.")

        key = self.idempotency_key(quotation, payload)
        action = "update" if quotation.robaws_offer_id else "create"
        try:
            if action == "update":
                response = self.client.update_offer(quotation.robaws_offer_id, payload, idempotency_key=key)
            else:
                response = self.client.create_offer(payload, idempotency_key=key)
        except RobawsApiError as exc:
            logger.error(f"Robaws {action} failed for quotation {quotation.request_number}: {exc}")
            self._mark(quotation, "failed")
            return PushResult(False, action=action, error=str(exc))

        offer_id = response.get("id") or quotation.robaws_offer_id
        offer_number = response.get("offerNumber") or response.get("number") or response.get("logicId")
        if offer_id and not offer_number:
            offer_number = self.fetch_offer_number(offer_id)
            if not offer_number:
                logger.warning(f"Robaws offer number missing for quotation {quotation.request_number} (offer {offer_id})")

        fields = {"robaws_offer_id": str(offer_id) if offer_id else quotation.robaws_offer_id}
        if offer_number:
            fields["robaws_offer_number"] = str(offer_number)
        if not quotation.robaws_client_id:
            fields["robaws_client_id"] = str(client_id)
        self._mark(quotation, "synced", **fields)

        logger.info(f"Pushed quotation {quotation.request_number} to Robaws ({action}, offer {offer_id})")
        return PushResult(True, offer_id=fields["robaws_offer_id"], offer_number=offer_number, action=action)
