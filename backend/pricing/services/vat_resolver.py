# pricing/services/vat_resolver.py
from __future__ import annotations

import logging
from decimal import Decimal
from typing import Optional

from django.conf import settings

from core.services.port_resolution import PortResolutionService, country_code_from_name
from pricing.services.exceptions import ConfigurationError
from pricing.services.utils import d

logger = logging.getLogger(__name__)


def _config() -> dict:
    cfg = getattr(settings, "QUOTATION", None) or {}
    if "vat_codes" not in cfg or "vat_code_rates" not in cfg:
        raise ConfigurationError("QUOTATION settings must define vat_codes and vat_code_rates")
    return cfg


def _cc(value) -> Optional[str]:
    return country_code_from_name(value)


def default_vat_code() -> str:
    return _config()["vat_codes"]["standard"]


def determine_project_vat_code(pol_country, pod_country, customer_country=None) -> str:
    """
    Belgian VAT treatment of a shipment, as a Robaws project VAT code.

    Rules:
      - BE -> BE: standard 21% ("21% VF"); an EU customer established
        outside Belgium is invoiced under reverse charge ("medecontractant VF")
      - BE -> other EU member state: intra-community ("intracommunautaire VF")
      - BE -> outside the EU: export, exempt ("vrijgesteld VF")
      - outside BE -> BE: import, exempt ("vrijgesteld import VF")
      - anything else (cross trade, unknown ports): standard 21%

    Raises:
        ConfigurationError: If the QUOTATION settings lack the VAT tables
    """
    cfg = _config()
    codes = cfg["vat_codes"]
    home = cfg.get("home_country", "BE")
    eu = set(cfg.get("eu_countries", []))

    pol = _cc(pol_country)
    pod = _cc(pod_country)
    customer = _cc(customer_country)

    if pol == home and pod == home:
        if customer and customer != home and customer in eu:
            return codes["reverse_charge"]
        return codes["standard"]

    if pol == home and pod:
        if pod in eu:
            return codes["intra_eu"]
        return codes["export"]

    if pol and pol != home and pod == home:
        return codes["import"]

    return codes["standard"]


def vat_rate_for_code(code) -> Decimal:
    """Percentage charged for a project VAT code; unknown codes fall back to the standard rate."""
    cfg = _config()
    rates = cfg["vat_code_rates"]
    if code in rates:
        return d(rates[code])
    logger.warning(f"Unknown VAT code '{code}', applying standard rate {cfg.get('vat_rate', 21)}%")
    return d(cfg.get("vat_rate", 21))


class VatResolver:
    """Resolves the VAT code of a quotation request from its route and customer."""

    def __init__(self, port_resolver=None):
        self.ports = port_resolver or PortResolutionService()

    def determine_project_vat_code(self, quotation) -> str:
        pol_country = self.ports.country_code_for(quotation.pol) if quotation.pol else None
        pod_country = self.ports.country_code_for(quotation.pod) if quotation.pod else None
        customer_country = None
        if getattr(quotation, "customer_user_id", None):
            customer_country = quotation.customer_user.country_code or None
        return determine_project_vat_code(pol_country, pod_country, customer_country)
