from __future__ import annotations

import json
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, List, Optional, Tuple

from django.utils.dateparse import parse_date, parse_datetime

TEXT = "TEXT"
TEXTAREA = "TEXTAREA"
SELECT = "SELECT"
DATE = "DATE"
NUMBER = "NUMBER"
CHECKBOX = "CHECKBOX"

# Robaws offer extra field code -> field type
EXTRA_SCHEMA = {
    "POR": TEXT,
    "POL": TEXT,
    "POD": TEXT,
    "FDEST": TEXT,
    "CARGO": TEXTAREA,
    "CONTAINER_NR": TEXT,
    "TRANSPORT_COMPANY": TEXT,
    "SHIPPING_LINE": SELECT,
    "METHOD": SELECT,
    "TRANSIT_TIME": TEXT,
    "VESSEL": TEXT,
    "VOYAGE": TEXT,
    "ETC": DATE,
    "ETS": DATE,
    "ETA": DATE,
    "SEAFREIGHT": NUMBER,
    "PRE_CARRIAGE": NUMBER,
    "CUSTOMS_ORIGIN": NUMBER,
    "DESTINATION": NUMBER,
    "CUSTOMS_DEST": NUMBER,
    "ONCARRIAGE": NUMBER,
    "INSURANCE": NUMBER,
    "JSON": TEXTAREA,
    "EXTRACTED_INFORMATION": TEXTAREA,
    "URGENT": CHECKBOX,
    "FOLLOW": CHECKBOX,
    "CUSTOMER": TEXT,
    "CONTACT": TEXT,
    "CONTACT_EMAIL": TEXT,
    "CONCERNING": TEXT,
}

# Extra field code -> pricing type searched in extraction "pricing" entries
PRICE_FIELDS = {
    "SEAFREIGHT": "seafreight",
    "PRE_CARRIAGE": "pre_carriage",
    "CUSTOMS_ORIGIN": "customs_origin",
    "DESTINATION": "destination",
    "CUSTOMS_DEST": "customs_destination",
    "ONCARRIAGE": "oncarriage",
    "INSURANCE": "insurance",
}


def is_empty(value) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip() == ""
    if isinstance(value, (list, tuple, dict, set)):
        return len(value) == 0
    return False


def _to_decimal(value) -> Optional[Decimal]:
    if isinstance(value, dict):
        value = value.get("amount")
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, str):
        value = value.replace(" ", "").replace(",", ".")
        if not value:
            return None
    try:
        return Decimal(str(value))
    except InvalidOperation:
        return None


def _to_iso_date(value) -> Optional[str]:
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    text = str(value).strip()
    parsed = parse_date(text[:10]) if len(text) >= 10 else None
    if parsed is None:
        dt = parse_datetime(text)
        parsed = dt.date() if dt else None
    return parsed.isoformat() if parsed else None


def wrap_value(field_type: str, value) -> Optional[Dict[str, Any]]:
    """Wrap a raw value in the Robaws typed-value envelope; None when there is nothing to send."""
    if field_type == CHECKBOX:
        if value is None or (isinstance(value, str) and not value.strip()):
            return None
        if isinstance(value, str):
            return {"booleanValue": value.strip().lower() in ("1", "true", "yes", "on")}
        return {"booleanValue": bool(value)}

    if is_empty(value):
        return None

    if field_type == DATE:
        iso = _to_iso_date(value)
        return {"dateValue": iso} if iso else None

    if field_type == NUMBER:
        number = _to_decimal(value)
        if number is None:
            return None
        if number == number.to_integral_value():
            return {"integerValue": int(number)}
        return {"decimalValue": float(number)}

    return {"stringValue": str(value)}


def build_extra_fields(values: Dict[str, Any]) -> Dict[str, Dict[str, Any]]:
    """
    Turn {CODE: raw value} into the offer's extraFields map.

    Unknown codes are ignored; empty values are dropped, False is kept.
    """
    extra = {}
    for code, value in values.items():
        field_type = EXTRA_SCHEMA.get(code)
        if field_type is None:
            continue
        wrapped = wrap_value(field_type, value)
        if wrapped is not None:
            extra[code] = wrapped
    return extra


def format_location(location) -> str:
    if not location:
        return ""
    if isinstance(location, str):
        return location.strip()
    parts = [location.get("city"), location.get("country")]
    return ", ".join(p for p in parts if p)


def cargo_description(vehicle) -> str:
    vehicle = vehicle or {}
    parts = []
    if vehicle.get("brand"):
        parts.append(str(vehicle["brand"]))
    if vehicle.get("model"):
        parts.append(str(vehicle["model"]))
    if vehicle.get("vin"):
        parts.append(f"VIN: {vehicle['vin']}")
    if vehicle.get("year"):
        parts.append(f"Year: {vehicle['year']}")
    return " | ".join(parts) or "Vehicle"


def concerning(vehicle, shipping) -> str:
    vehicle = vehicle or {}
    shipping = shipping or {}
    parts = []
    name = " ".join(str(vehicle.get(k) or "") for k in ("brand", "model")).strip()
    if name:
        parts.append(name)
    if shipping.get("method"):
        parts.append(str(shipping["method"]).upper())
    route = shipping.get("route") or {}
    origin = format_location(route.get("origin"))
    destination = format_location(route.get("destination"))
    if origin or destination:
        parts.append(f"{origin} → {destination}")
    return " • ".join(parts)


def _dimension(dimensions, name) -> Optional[float]:
    for suffix, factor in (("_m", 1), ("_cm", 100), ("_mm", 1000)):
        value = dimensions.get(f"{name}{suffix}")
        if value not in (None, ""):
            number = _to_decimal(value)
            if number is not None:
                return float(number) / factor
    return None


def normalize_dimensions(dimensions) -> Tuple[float, float, float]:
    """(length, width, height) in metres from *_m, *_cm or *_mm keys, rounded to 2 places."""
    dimensions = dimensions or {}
    return tuple(round(_dimension(dimensions, n) or 0.0, 2) for n in ("length", "width", "height"))


def shipping_line(shipping) -> str:
    shipping = shipping or {}
    if str(shipping.get("method") or "").lower() == "roro":
        return "RoRo Service"
    return shipping.get("shipping_line") or ""


def extract_price(pricing, price_type) -> Optional[Dict[str, Any]]:
    pricing = pricing or []
    kinds = [str(price.get("type") or "").lower() for price in pricing]
    # exact type first so "destination" does not pick up "customs_destination"
    index = next((i for i, kind in enumerate(kinds) if kind == price_type), None)
    if index is None:
        index = next((i for i, kind in enumerate(kinds) if price_type in kind), None)
    if index is None:
        return None
    price = pricing[index]
    return {"amount": _to_decimal(price.get("amount")), "currency": price.get("currency") or "EUR"}


def find_date(dates, date_type) -> Optional[str]:
    for entry in dates or []:
        if str(entry.get("type") or "").lower() == date_type.lower() and entry.get("date"):
            return _to_iso_date(entry["date"])
    return None


def extracted_information(data) -> str:
    lines: List[str] = []
    vehicle = data.get("vehicle") or {}
    if vehicle:
        lines.append("Vehicle: " + " ".join(str(vehicle.get(k) or "") for k in ("brand", "model")).strip())
    shipping = data.get("shipping") or {}
    if shipping.get("route"):
        route = shipping["route"]
        lines.append(f"Route: {format_location(route.get('origin'))} → {format_location(route.get('destination'))}")
    if shipping.get("method"):
        lines.append(f"Method: {shipping['method']}")
    contact = data.get("contact") or {}
    if contact:
        lines.append(f"Contact: {contact.get('name') or ''} ({contact.get('email') or ''})")
    return "\n".join(lines)


class RobawsMapper:
    """Maps nested extraction data (vehicle, shipping, contact, dates, pricing) to offer extra fields."""

    def map_extraction(self, data: Dict[str, Any]) -> Dict[str, Any]:
        data = data or {}
        vehicle = data.get("vehicle") or {}
        shipping = data.get("shipping") or {}
        contact = data.get("contact") or {}
        shipment = data.get("shipment") or {}
        route = shipping.get("route") or {}
        timeline = shipping.get("timeline") or [{}]
        origin = format_location(route.get("origin")) or shipment.get("origin") or ""
        destination = format_location(route.get("destination")) or shipment.get("destination") or ""

        values = {
            "POR": origin,
            "POL": origin,
            "POD": destination,
            "FDEST": destination,
            "CARGO": cargo_description(vehicle),
            "CONTAINER_NR": data.get("container_number"),
            "TRANSPORT_COMPANY": shipping.get("carrier") or shipping.get("transport_company"),
            "SHIPPING_LINE": shipping_line(shipping),
            "METHOD": shipping.get("method"),
            "VESSEL": timeline[0].get("vessel"),
            "VOYAGE": timeline[0].get("voyage"),
            "ETC": find_date(data.get("dates"), "etc"),
            "ETS": find_date(data.get("dates"), "ets"),
            "ETA": find_date(data.get("dates"), "eta"),
            "CUSTOMER": contact.get("name"),
            "CONTACT": contact.get("name") or (shipping.get("contact") or {}).get("name"),
            "CONTACT_EMAIL": contact.get("email"),
            "CONCERNING": concerning(vehicle, shipping),
            "EXTRACTED_INFORMATION": extracted_information(data),
            "JSON": json.dumps(data, indent=4, ensure_ascii=False, default=str),
            "URGENT": False,
            "FOLLOW": False,
        }
        for code, price_type in PRICE_FIELDS.items():
            values[code] = extract_price(data.get("pricing"), price_type)
        return values

    def to_extra_fields(self, data: Dict[str, Any]) -> Dict[str, Dict[str, Any]]:
        return build_extra_fields(self.map_extraction(data))
