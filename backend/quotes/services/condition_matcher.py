from __future__ import annotations

import logging
import re

from pricing.services.utils import d

logger = logging.getLogger(__name__)

_PORT_CODE = re.compile(r"\(([A-Z0-9]+)\)")


def _as_list(value):
    if value is None:
        return []
    return list(value) if isinstance(value, (list, tuple, set)) else [value]


def _upper(value) -> str:
    return str(value or "").strip().upper()


class ConditionMatcher:
    """
    Decides whether a conditional child article applies to a quotation.

    Every key present in the conditions must match; empty conditions never match.
    Supported keys: commodity, dimensions, route, weight_kg_gt, carrier,
    customer_type, in_transit_to_empty, in_transit_to.
    """

    def matches(self, conditions, quotation) -> bool:
        if not conditions:
            return False

        checks = {
            "commodity": self.match_commodity,
            "dimensions": self.match_dimensions,
            "route": self.match_route,
            "weight_kg_gt": self.match_weight,
            "carrier": self.match_carrier,
            "customer_type": self.match_customer_type,
            "in_transit_to_empty": self.match_in_transit_to_empty,
            "in_transit_to": self.match_in_transit_to,
        }
        for key, check in checks.items():
            if key in conditions and not check(conditions[key], quotation):
                return False

        unknown = set(conditions) - set(checks)
        if unknown:
            logger.debug(f"Ignoring unknown condition keys: {sorted(unknown)}")
        return True

    @staticmethod
    def _items(quotation):
        if not quotation.pk:
            return []
        return list(quotation.commodity_items.all())

    def match_commodity(self, commodity_types, quotation) -> bool:
        wanted = {_upper(t) for t in _as_list(commodity_types)}
        return any(_upper(item.commodity_type) in wanted for item in self._items(quotation) if item.commodity_type)

    def match_dimensions(self, rules, quotation) -> bool:
        items = self._items(quotation)
        measured = {
            "length": max((d(i.length_cm) for i in items), default=d(0)) / 100,
            "width": max((d(i.width_cm) for i in items), default=d(0)) / 100,
            "height": max((d(i.height_cm) for i in items), default=d(0)) / 100,
        }
        for key, threshold in (rules or {}).items():
            name = next((n for n in measured if n in key), None)
            if name is None:
                return False
            if key.endswith("_gt") and not measured[name] > d(threshold):
                return False
            if key.endswith("_lt") and not measured[name] < d(threshold):
                return False
        return True

    def match_route(self, rules, quotation) -> bool:
        rules = rules or {}
        pol = _upper(quotation.pol)
        if "pol" in rules and pol:
            if not any(_upper(p) and _upper(p) in pol for p in _as_list(rules["pol"])):
                return False

        pod = _upper(quotation.pod)
        if "pod" in rules and pod:
            match = _PORT_CODE.search(pod)
            pod_code = match.group(1) if match else pod
            candidates = [_upper(p) for p in _as_list(rules["pod"])]
            if not any(c and (c == pod_code or c in pod) for c in candidates):
                return False
        return True

    def match_weight(self, threshold, quotation) -> bool:
        total = sum((d(i.weight_kg) * d(i.quantity or 1) for i in self._items(quotation)), d(0))
        return total > d(threshold)

    def match_carrier(self, carriers, quotation) -> bool:
        carrier = quotation.selected_carrier if quotation.selected_carrier_id else None
        if carrier is None:
            return False
        wanted = {_upper(c) for c in _as_list(carriers)}
        return _upper(carrier.code) in wanted or _upper(carrier.name) in wanted

    def match_customer_type(self, customer_types, quotation) -> bool:
        wanted = {_upper(t) for t in _as_list(customer_types)}
        return bool({_upper(quotation.customer_type), _upper(quotation.customer_role)} & wanted - {""})

    def match_in_transit_to_empty(self, should_be_empty, quotation) -> bool:
        is_empty = not (quotation.in_transit_to or "").strip()
        return bool(should_be_empty) == is_empty

    def match_in_transit_to(self, values, quotation) -> bool:
        current = _upper(quotation.in_transit_to)
        if not current:
            return False
        for value in _as_list(values):
            wanted = _upper(value)
            if wanted and (wanted == current or wanted in current or current in wanted):
                return True
        return False
