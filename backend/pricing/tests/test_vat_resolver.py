from decimal import Decimal
from types import SimpleNamespace

import pytest
from django.test import override_settings

from core.models import Port
from core.services.port_resolution import PortResolutionService, country_code_from_name
from pricing.services.exceptions import ConfigurationError
from pricing.services.vat_resolver import VatResolver, determine_project_vat_code, vat_rate_for_code


class TestVatDecisionTable:
    def test_domestic_belgium(self):
        assert determine_project_vat_code("BE", "BE") == "21% VF"

    def test_belgium_to_eu(self):
        assert determine_project_vat_code("BE", "NL") == "intracommunautaire VF"

    def test_belgium_to_non_eu_is_export(self):
        assert determine_project_vat_code("BE", "NG") == "vrijgesteld VF"

    def test_import_into_belgium(self):
        assert determine_project_vat_code("CN", "BE") == "vrijgesteld import VF"

    def test_cross_trade_defaults_to_standard(self):
        assert determine_project_vat_code("NL", "NG") == "21% VF"

    def test_unknown_route_defaults_to_standard(self):
        assert determine_project_vat_code(None, None) == "21% VF"

    def test_lowercase_country_codes(self):
        assert determine_project_vat_code("be", "fr") == "intracommunautaire VF"

    def test_domestic_for_eu_customer_is_reverse_charge(self):
        assert determine_project_vat_code("BE", "BE", customer_country="DE") == "medecontractant VF"

    def test_domestic_for_non_eu_customer_stays_standard(self):
        assert determine_project_vat_code("BE", "BE", customer_country="US") == "21% VF"

    def test_rates(self):
        assert vat_rate_for_code("21% VF") == Decimal("21")
        assert vat_rate_for_code("vrijgesteld VF") == Decimal("0")
        assert vat_rate_for_code("something else") == Decimal("21")

    def test_country_names(self):
        assert determine_project_vat_code("Belgium", "Netherlands") == "intracommunautaire VF"
        assert determine_project_vat_code("BE", "germany") == "intracommunautaire VF"
        assert determine_project_vat_code("Belgium", "Nigeria") == "vrijgesteld VF"

    @override_settings(QUOTATION={})
    def test_missing_configuration(self):
        with pytest.raises(ConfigurationError):
            determine_project_vat_code("BE", "BE")


@pytest.mark.django_db
class TestVatResolverForQuotation:
    def test_resolves_countries_through_ports(self):
        Port.objects.create(name="Antwerp", code="ANR", country="Belgium", country_code="BE")
        Port.objects.create(name="Lagos", code="LOS", country="Nigeria", country_code="NG")
        quotation = SimpleNamespace(pol="Antwerp", pod="Lagos (LOS)", customer_user_id=None)

        assert VatResolver().determine_project_vat_code(quotation) == "vrijgesteld VF"

    def test_unresolved_ports_fall_back_to_standard(self):
        quotation = SimpleNamespace(pol="Nowhere", pod="", customer_user_id=None)
        assert VatResolver().determine_project_vat_code(quotation) == "21% VF"

    def test_port_without_country_code_uses_country_name(self):
        Port.objects.create(name="Antwerp", code="ANR", country="Belgium", country_code="BE")
        Port.objects.create(name="Rotterdam", code="RTM", country="Netherlands")
        quotation = SimpleNamespace(pol="Antwerp", pod="Rotterdam", customer_user_id=None)

        assert VatResolver().determine_project_vat_code(quotation) == "intracommunautaire VF"

    def test_country_name_learned_from_other_ports(self):
        Port.objects.create(name="Mombasa", code="MBA", country="Kenia", country_code="KE")
        Port.objects.create(name="Lamu", code="LAU", country="Kenia")

        assert PortResolutionService().country_code_for("Lamu") == "KE"

    def test_unknown_names_are_not_truncated(self):
        # "Neverland" must not turn into NE
        assert country_code_from_name("Neverland") is None
        assert determine_project_vat_code("BE", "Neverland") == "21% VF"
