from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from decimal import InvalidOperation
from typing import Dict, Iterable, List, Optional

from django.db import transaction
from django.db.models import Prefetch, Q
from django.utils import timezone
from django.utils.dateparse import parse_date

from core.models import Port, ShippingCarrier
from pricing.services.utils import parse_decimal
from robaws.client import RobawsApiClient, RobawsApiError, RobawsConfigurationError
from tariffs.models import (
    AMOUNT_FIELDS,
    LM,
    LUMPSUM,
    UNIT_FIELDS,
    CarrierArticleMapping,
    CarrierCategoryGroup,
    CarrierPurchaseTariff,
)
from tariffs.services.exceptions import TariffNotFoundError, TariffValidationError
from tariffs.services.tariff_date_sync import TariffDateSyncService

logger = logging.getLogger(__name__)

CATEGORY_ORDER = ["CAR", "SVAN", "BVAN", "LM"]
METADATA_FIELDS = ["effective_from", "effective_to", "currency", "is_active"]
EDITABLE_FIELDS = AMOUNT_FIELDS + UNIT_FIELDS + METADATA_FIELDS

_GROUP_CATEGORIES = {"CARS": "CAR", "SMALL_VANS": "SVAN", "BIG_VANS": "BVAN"}
_VEHICLE_CATEGORIES = {
    "car": "CAR",
    "small_van": "SVAN",
    "smallvan": "SVAN",
    "big_van": "BVAN",
    "bigvan": "BVAN",
    "truck": "LM",
    "truckhead": "LM",
    "trailer": "LM",
    "lm": "LM",
    "roro": "LM",
}
_POD_CODE = re.compile(r"\(([A-Z]{3,4})\)")
_TRUE = {"1", "true", "yes", "on"}


def normalize_numeric(value):
    """
    Normalize an edited amount. "1234,50" and "1234.50" are both accepted.

    Returns:
        Decimal, or None for empty input

    Raises:
        TariffValidationError: If the value is not a number
    """
    try:
        return parse_decimal(value)
    except InvalidOperation:
        raise TariffValidationError(f"Invalid number: {value!r}")


def category_for(mapping) -> Optional[str]:
    """Matrix column for a mapping: category groups first, then raw vehicle categories."""
    group_ids = mapping.category_group_ids or []
    if group_ids:
        groups = CarrierCategoryGroup.objects.filter(id__in=group_ids, carrier_id=mapping.carrier_id)
        for group in groups:
            code = (group.code or "").upper()
            if code in _GROUP_CATEGORIES:
                return _GROUP_CATEGORIES[code]
            if "LM" in code:
                return "LM"

    for category in mapping.vehicle_categories or []:
        column = _VEHICLE_CATEGORIES.get(str(category or "").strip().lower())
        if column:
            return column
    return None


def port_for(mapping) -> Optional[Port]:
    """Destination port of a mapping: article pod_code, then "(CODE)" in article pod, then the first port_ids entry."""
    article = mapping.article
    if article is not None:
        if article.pod_code:
            port = Port.objects.filter(code=article.pod_code).first()
            if port:
                return port
        if article.pod:
            match = _POD_CODE.search(article.pod)
            if match:
                port = Port.objects.filter(code=match.group(1)).first()
                if port:
                    return port

    port_ids = mapping.port_ids or []
    if port_ids:
        return Port.objects.filter(id=port_ids[0]).first()
    return None


def port_code_for(mapping) -> Optional[str]:
    port = port_for(mapping)
    return port.code if port else None


def _coerce_date(field, value):
    if value in (None, ""):
        return None
    if hasattr(value, "isoformat"):
        return value
    parsed = parse_date(str(value))
    if parsed is None:
        raise TariffValidationError(f"Field {field} must be a date (YYYY-MM-DD)")
    return parsed


@dataclass
class PortDatesResult:
    port_code: str
    updated: int
    pushed: int = 0
    failed: int = 0
    push_error: Optional[str] = None

    @property
    def message(self) -> str:
        text = f"Dates applied to {self.port_code}"
        if self.push_error:
            return f"{text}. Failed to push to Robaws: {self.push_error}"
        if self.pushed or self.failed:
            text += f". Pushed {self.pushed} article(s) to Robaws"
            if self.failed:
                text += f" ({self.failed} failed)"
        return text


class RatesOverviewService:
    """
    Purchase-rate matrix for one carrier: destination ports as rows,
    vehicle categories (CAR, SVAN, BVAN, LM) as columns, with inline editing
    of amounts and publishing of update/validity dates.
    """

    def __init__(self, carrier_code="GRIMALDI", date_sync=None, client_factory=None):
        self.carrier_code = carrier_code
        self.date_sync = date_sync or TariffDateSyncService()
        self.client_factory = client_factory or RobawsApiClient

    def carrier(self) -> ShippingCarrier:
        carrier = (
            ShippingCarrier.objects.filter(
                Q(code__iexact=self.carrier_code) | Q(name__icontains=self.carrier_code)
            )
            .order_by("id")
            .first()
        )
        if carrier is None:
            raise TariffNotFoundError(f"Carrier {self.carrier_code} not found")
        return carrier

    def _mappings(self, carrier):
        tariffs = CarrierPurchaseTariff.objects.active().order_by("-effective_from", "sort_order", "id")
        return (
            CarrierArticleMapping.objects.filter(carrier=carrier, is_active=True)
            .select_related("article")
            .prefetch_related(Prefetch("purchase_tariffs", queryset=tariffs, to_attr="active_tariffs"))
        )

    def rates_matrix(self) -> Dict:
        carrier = self.carrier()
        ports: Dict[str, Dict] = {}
        max_effective = None
        has_congestion = False
        has_iccm = False

        for mapping in self._mappings(carrier):
            port = port_for(mapping)
            if port is None:
                continue
            column = category_for(mapping)
            if column is None:
                continue

            tariff = mapping.active_tariffs[0] if mapping.active_tariffs else None
            row = ports.setdefault(port.code, {
                "code": port.code,
                "name": port.name,
                "tariff_ids": [],
                "categories": {name: None for name in CATEGORY_ORDER},
            })
            row["categories"][column] = {
                "tariff_id": tariff.id if tariff else None,
                "tariff": tariff,
                "mapping_id": mapping.id,
                "carrier_id": mapping.carrier_id,
            }
            if tariff is None:
                continue

            if tariff.id not in row["tariff_ids"]:
                row["tariff_ids"].append(tariff.id)
            if tariff.effective_from and (max_effective is None or tariff.effective_from > max_effective):
                max_effective = tariff.effective_from
            has_congestion = has_congestion or bool(tariff.congestion_surcharge_amount)
            has_iccm = has_iccm or bool(tariff.iccm_amount)

        for row in ports.values():
            row["tariff_ids"].sort()

        return {
            "ports": dict(sorted(ports.items())),
            "category_order": list(CATEGORY_ORDER),
            "effective_date": max_effective.isoformat() if max_effective else None,
            "has_congestion": has_congestion,
            "has_iccm": has_iccm,
        }

    def validate_edits(self, payload) -> Dict:
        """
        Validate one tariff's edited fields.

        Raises:
            TariffValidationError: On negative amounts, unknown units or bad dates
        """
        validated = {}
        for field, value in payload.items():
            if field not in EDITABLE_FIELDS:
                continue
            if field in AMOUNT_FIELDS:
                amount = normalize_numeric(value)
                if amount is None:
                    if field != "base_freight_amount":
                        validated[field] = None
                    continue
                if amount < 0:
                    raise TariffValidationError(f"Field {field} must be >= 0")
                validated[field] = amount
            elif field in UNIT_FIELDS:
                unit = str(value or LUMPSUM).strip().upper()
                if unit not in (LUMPSUM, LM):
                    raise TariffValidationError(f"Field {field} must be LUMPSUM or LM")
                validated[field] = unit
            elif field in ("effective_from", "effective_to"):
                validated[field] = _coerce_date(field, value)
            elif field == "currency":
                currency = str(value or "").strip().upper()
                if len(currency) != 3:
                    raise TariffValidationError("Field currency must be a 3-letter code")
                validated[field] = currency
            elif field == "is_active":
                validated[field] = value if isinstance(value, bool) else str(value).strip().lower() in _TRUE
        return validated

    def save_port(self, port_code, edits) -> int:
        """
        Apply edited values for the tariffs of one port row in a single transaction.

        Args:
            port_code: Row key from rates_matrix()
            edits: {tariff_id: {field: value}}

        Returns:
            Number of tariffs updated

        Raises:
            TariffNotFoundError: If the port is not in the matrix or a tariff is not in the row
            TariffValidationError: If any value is rejected; nothing is saved
        """
        matrix = self.rates_matrix()
        row = matrix["ports"].get(port_code)
        if row is None:
            raise TariffNotFoundError(f"Port {port_code} not found in rates matrix")

        allowed = set(row["tariff_ids"])
        pending = {}
        for tariff_id, payload in edits.items():
            try:
                tariff_id = int(tariff_id)
            except (TypeError, ValueError):
                raise TariffValidationError(f"Invalid tariff id: {tariff_id!r}")
            if tariff_id not in allowed:
                raise TariffNotFoundError(f"Tariff {tariff_id} does not belong to {port_code}")
            validated = self.validate_edits(payload or {})
            if validated:
                pending[tariff_id] = validated

        with transaction.atomic():
            for tariff_id, values in pending.items():
                tariff = CarrierPurchaseTariff.objects.select_for_update().get(pk=tariff_id)
                for field, value in values.items():
                    setattr(tariff, field, value)
                tariff.save()

        logger.info(f"Saved {len(pending)} tariff(s) for {port_code}")
        return len(pending)

    def _carrier_tariffs(self, carrier, port=None):
        qs = CarrierPurchaseTariff.objects.filter(mapping__carrier=carrier).select_related("mapping__article")
        if port is not None:
            qs = qs.filter(mapping__article__pod_code=port.code)
        return qs.order_by("id")

    def _port(self, port_code) -> Port:
        port = Port.objects.filter(code=port_code).first()
        if port is None:
            raise TariffNotFoundError(f"Port {port_code} not found")
        return port

    def _set_dates(self, tariffs: Iterable, update_date, validity_date, clear=False) -> List:
        touched = []
        with transaction.atomic():
            for tariff in tariffs:
                if clear:
                    tariff.update_date = None
                    tariff.validity_date = None
                else:
                    if update_date is not None:
                        tariff.update_date = update_date
                    if validity_date is not None:
                        tariff.validity_date = validity_date
                tariff.save(update_fields=["update_date", "validity_date", "updated_at"])
                self.date_sync.sync_tariff_dates_to_article(tariff)
                touched.append(tariff)
        return touched

    def apply_bulk_dates(self, update_date=None, validity_date=None) -> int:
        update_date = _coerce_date("update_date", update_date)
        validity_date = _coerce_date("validity_date", validity_date)
        if update_date is None and validity_date is None:
            return 0
        touched = self._set_dates(self._carrier_tariffs(self.carrier()), update_date, validity_date)
        logger.info(f"Applied bulk dates to {len(touched)} tariff(s): update={update_date} validity={validity_date}")
        return len(touched)

    def apply_port_dates(self, port_code, update_date=None, validity_date=None) -> PortDatesResult:
        update_date = _coerce_date("update_date", update_date)
        validity_date = _coerce_date("validity_date", validity_date)
        if update_date is None and validity_date is None:
            raise TariffValidationError("Please enter at least one date before applying.")

        carrier = self.carrier()
        port = self._port(port_code)
        touched = self._set_dates(self._carrier_tariffs(carrier, port), update_date, validity_date)
        result = PortDatesResult(port_code=port_code, updated=len(touched))

        articles = {}
        for tariff in touched:
            article = tariff.mapping.article
            if article.article_code and article.article_code not in articles:
                articles[article.article_code] = article
        if articles:
            try:
                result.pushed, result.failed = self.push_article_dates(articles.values())
            except RobawsConfigurationError as exc:
                logger.warning(f"Dates applied to {port_code} but not pushed: {exc}")
                result.push_error = str(exc)
        return result

    def push_article_dates(self, articles) -> tuple:
        """
        Publish effective update/validity dates of articles to Robaws as extra fields.

        Returns:
            (pushed, failed) counts
        """
        client = self.client_factory()
        pushed = failed = 0
        for article in articles:
            article.refresh_from_db()
            if not article.robaws_article_id:
                continue
            extra_fields = {}
            for label, value in (
                ("UPDATE DATE", article.effective_update_date),
                ("VALIDITY DATE", article.effective_validity_date),
            ):
                if value:
                    extra_fields[label] = {
                        "type": "TEXT",
                        "group": "IMPORTANT INFO",
                        "stringValue": value.strftime("%m/%d/%Y"),
                    }
            if not extra_fields:
                continue

            try:
                client.update_article(article.robaws_article_id, {"extraFields": extra_fields})
            except RobawsApiError as exc:
                failed += 1
                logger.error(f"Failed to push dates for article {article.robaws_article_id}: {exc}")
                continue

            pushed += 1
            article.last_pushed_dates_at = timezone.now()
            article.last_pushed_update_date = article.effective_update_date
            article.last_pushed_validity_date = article.effective_validity_date
            article.save(update_fields=[
                "last_pushed_dates_at", "last_pushed_update_date", "last_pushed_validity_date", "updated_at",
            ])
        return pushed, failed

    def clear_port_dates(self, port_code) -> int:
        port = self._port(port_code)
        touched = self._set_dates(self._carrier_tariffs(self.carrier(), port), None, None, clear=True)
        logger.info(f"Cleared date overrides for {port_code} ({len(touched)} tariff(s))")
        return len(touched)

    def clear_bulk_dates(self) -> int:
        touched = self._set_dates(self._carrier_tariffs(self.carrier()), None, None, clear=True)
        logger.info(f"Cleared all date overrides ({len(touched)} tariff(s))")
        return len(touched)
