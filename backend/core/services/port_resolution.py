"""
Port resolution

Resolves free-text port references coming from tariffs, articles, quotation
requests and Robaws imports ("Antwerp", "BEANR", "Abidjan (ABJ)", "CAS/TFN")
to canonical Port rows. Single-token resolution never guesses: fuzzy
starts-with matches only win when they are unambiguous.
"""
from __future__ import annotations

import logging
import re
from typing import Dict, List, Optional, Tuple

from django.conf import settings

from core.models import Port, PortAlias, normalize_alias

logger = logging.getLogger(__name__)

_UNLOCODE = re.compile(r"^[A-Za-z0-9]{5}$")
_IATA = re.compile(r"^[A-Za-z]{3}$")
_ICAO = re.compile(r"^[A-Za-z]{4}$")
_EMBEDDED_CODE = re.compile(r"\(([A-Z0-9]{2,6})\)")
_CODE_LIKE = re.compile(r"^[A-Za-z0-9]{2,6}$")
_SEPARATORS = re.compile(r"\s*[/&+,]\s*|\s+and\s+", re.IGNORECASE)
_COUNTRY_CODE = re.compile(r"^[A-Za-z]{2}$")


def normalize_input(value) -> str:
    """Trim, drop surrounding quotes and collapse whitespace. Case is preserved."""
    if value is None:
        return ""
    text = str(value).strip()
    text = re.sub(r"^[\"']|[\"']$", "", text)
    text = re.sub(r"\s+", " ", text)
    return text.strip()


def split_tokens(value) -> List[str]:
    """Split combined inputs such as "CAS/TFN" or "Lagos and Tema" into unique tokens."""
    tokens: List[str] = []
    for raw in _SEPARATORS.split(value or ""):
        token = normalize_input(raw)
        if token and token not in tokens:
            tokens.append(token)
    return tokens


class PortResolutionService:
    def __init__(self) -> None:
        # Per-instance cache, keyed by the normalized input
        self._cache: Dict[str, Optional[Port]] = {}

    def resolve_one(self, value) -> Optional[Port]:
        normalized = normalize_input(value)
        if not normalized:
            return None
        if normalized in self._cache:
            return self._cache[normalized]

        port = self._lookup(normalized)
        if port is None:
            logger.debug(f"Port reference '{normalized}' could not be resolved")
        self._cache[normalized] = port
        return port

    def _lookup(self, normalized: str) -> Optional[Port]:
        upper = normalized.upper()

        if _UNLOCODE.match(normalized):
            port = Port.objects.filter(unlocode__iexact=upper).first()
            if port:
                return port

        if _IATA.match(normalized):
            port = Port.objects.filter(iata_code__iexact=upper, port_category=Port.AIRPORT).first()
            if port:
                return port

        if _ICAO.match(normalized):
            port = Port.objects.filter(icao_code__iexact=upper, port_category=Port.AIRPORT).first()
            if port:
                return port

        embedded = _EMBEDDED_CODE.search(normalized)
        if embedded:
            port = Port.objects.filter(code__iexact=embedded.group(1)).first()
            if port:
                return port

        if _CODE_LIKE.match(normalized):
            port = Port.objects.filter(code__iexact=normalized).first()
            if port:
                return port

        port = Port.objects.filter(name__iexact=normalized).first()
        if port:
            return port

        alias_key = normalize_alias(normalized)
        alias = (
            PortAlias.objects.filter(alias_normalized=alias_key, is_active=True)
            .select_related("port")
            .first()
        )
        if alias:
            return alias.port

        # Fuzzy starts-with: only accept an unambiguous hit
        name_matches = list(Port.objects.filter(name__istartswith=normalized)[:5])
        if len(name_matches) == 1:
            return name_matches[0]

        if alias_key:
            alias_port_ids = set(
                PortAlias.objects.filter(alias_normalized__startswith=alias_key, is_active=True)
                .values_list("port_id", flat=True)[:5]
            )
            if len(alias_port_ids) == 1:
                return Port.objects.filter(pk=alias_port_ids.pop()).first()

        return None

    def resolve_many(self, value) -> List[Port]:
        ports, _ = self.resolve_many_with_report(value)
        return ports

    def resolve_many_with_report(self, value) -> Tuple[List[Port], List[str]]:
        """
        Resolve a combined input token by token.

        Args:
            value: Free text that may hold several ports ("CAS/TFN", "Lagos & Tema")

        Returns:
            Tuple of (unique ports in input order, unresolved tokens)
        """
        ports: List[Port] = []
        seen_ids = set()
        unresolved: List[str] = []
        for token in split_tokens(value):
            port = self.resolve_one(token)
            if port is None:
                unresolved.append(token)
            elif port.id not in seen_ids:
                seen_ids.add(port.id)
                ports.append(port)
        return ports, unresolved

    def normalize_code(self, value) -> Optional[str]:
        port = self.resolve_one(value)
        return port.code.upper() if port else None

    def country_code_for(self, value) -> Optional[str]:
        """ISO-2 country code of the resolved port, if any."""
        port = self.resolve_one(value)
        if port is None:
            return None
        if port.country_code:
            return port.country_code.upper()
        return country_code_from_name(port.country)


def country_code_from_name(value) -> Optional[str]:
    """
    ISO-2 code for a country code or country name ("be", "Netherlands").

    Names are looked up in QUOTATION["country_names"], then on other ports that
    carry the same country name with a code. Unknown names give None; they are
    never cut down to their first two letters.
    """
    text = normalize_input(value).upper()
    if not text:
        return None
    if _COUNTRY_CODE.match(text):
        return text
    names = {str(k).upper(): v for k, v in settings.QUOTATION.get("country_names", {}).items()}
    if text in names:
        return names[text].upper()
    code = (
        Port.objects.filter(country__iexact=text)
        .exclude(country_code="")
        .values_list("country_code", flat=True)
        .first()
    )
    if code:
        return code.upper()
    logger.warning(f"Unknown country '{value}'")
    return None
