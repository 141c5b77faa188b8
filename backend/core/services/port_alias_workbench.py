from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional

from django.db import transaction
from django.db.models import Q

from core.models import Port, PortAlias, normalize_alias
from core.services.port_resolution import PortResolutionService

logger = logging.getLogger(__name__)

PORT_OPTIONS_LIMIT = 50


class AliasConflictError(Exception):
    """Raised when a new alias collides with an existing normalized alias"""
    pass


@dataclass
class BulkAliasResult:
    created: int = 0
    skipped: int = 0
    conflicts: List[Dict[str, str]] = field(default_factory=list)

    @property
    def message(self) -> str:
        msg = f"Created {self.created} alias(es)."
        if self.conflicts:
            tokens = ", ".join(c["token"] for c in self.conflicts)
            msg += f" {len(self.conflicts)} conflict(s): {tokens}"
        return msg


def analyze(lines: Iterable[str], split_combined: bool = True,
            resolver: Optional[PortResolutionService] = None) -> List[Dict[str, Any]]:
    """
    Resolve each input line and report what could not be matched.

    Args:
        lines: Raw port strings, one per entry (blank entries are ignored)
        split_combined: Split "CAS/TFN" style inputs into separate tokens
        resolver: Optional shared resolver (keeps its cache across calls)

    Returns:
        List of {line, ports: [{id, label}], unresolved: [token, ...]}
    """
    resolver = resolver or PortResolutionService()
    results = []
    for raw in lines:
        line = (raw or "").strip()
        if not line:
            continue

        if split_combined:
            ports, unresolved = resolver.resolve_many_with_report(line)
        else:
            port = resolver.resolve_one(line)
            ports = [port] if port else []
            unresolved = [] if port else [line]

        results.append({
            "line": line,
            "ports": [{"id": p.id, "label": p.format_full()} for p in ports],
            "unresolved": unresolved,
        })
    return results


def create_alias(port: Port, token: str, alias_type: str = "name_variant", is_active: bool = True) -> PortAlias:
    """
    Raises:
        AliasConflictError: If the normalized token already exists for any port
    """
    alias_normalized = normalize_alias(token)
    if not alias_normalized:
        raise AliasConflictError("Alias cannot be empty.")

    existing = PortAlias.objects.filter(alias_normalized=alias_normalized).select_related("port").first()
    if existing:
        raise AliasConflictError(
            f"Alias '{token}' conflicts with existing alias '{existing.alias}' "
            f"for port '{existing.port.name} ({existing.port.code})'."
        )

    alias = PortAlias.objects.create(port=port, alias=token, alias_type=alias_type, is_active=is_active)
    logger.info(f"Created port alias '{alias.alias}' for {port.code}")
    return alias


def bulk_create(mappings: Iterable[Dict[str, Any]]) -> BulkAliasResult:
    """
    Create many aliases in one transaction. Conflicts are collected, not fatal.

    Each mapping is {token, port_id, alias_type?, is_active?}; entries without a
    port_id are skipped.
    """
    result = BulkAliasResult()
    with transaction.atomic():
        for mapping in mappings:
            token = (mapping.get("token") or "").strip()
            port_id = mapping.get("port_id")
            if not token or not port_id:
                result.skipped += 1
                continue

            port = Port.objects.filter(pk=port_id).first()
            if port is None:
                result.conflicts.append({"token": token, "error": f"Port {port_id} does not exist."})
                continue

            try:
                create_alias(
                    port,
                    token,
                    alias_type=mapping.get("alias_type") or "name_variant",
                    is_active=mapping.get("is_active", True),
                )
                result.created += 1
            except AliasConflictError as exc:
                result.conflicts.append({"token": token, "error": str(exc)})

    if result.conflicts:
        logger.warning(f"Bulk alias creation finished with {len(result.conflicts)} conflict(s)")
    return result


def load_audit(audit_json: str) -> List[str]:
    """Pull unresolved inputs out of an import audit dump (order kept, duplicates dropped)."""
    data = json.loads(audit_json)
    if not isinstance(data, dict):
        raise ValueError("Invalid JSON format")

    collected: List[str] = []
    for key in ("unresolved_robaws_inputs", "unresolved"):
        for value in data.get(key) or []:
            text = str(value).strip()
            if text and text not in collected:
                collected.append(text)
    return collected


def port_options(search: str = "") -> Dict[int, str]:
    term = (search or "").strip().lower()
    qs = Port.objects.all()
    if term:
        qs = qs.filter(
            Q(name__icontains=term)
            | Q(code__icontains=term)
            | Q(aliases__alias_normalized__icontains=term, aliases__is_active=True)
        ).distinct()
    return {port.id: port.format_full() for port in qs.order_by("name")[:PORT_OPTIONS_LIMIT]}
