import pytest

from core.models import Port, PortAlias, normalize_alias
from core.services.port_resolution import PortResolutionService, normalize_input, split_tokens

pytestmark = pytest.mark.django_db


@pytest.fixture
def ports():
    antwerp = Port.objects.create(name="Antwerp", code="ANR", country="Belgium", country_code="BE", unlocode="BEANR")
    casablanca = Port.objects.create(name="Casablanca", code="CAS", country="Morocco", country_code="MA", unlocode="MACAS")
    tanger = Port.objects.create(name="Tanger Med", code="TFN", country="Morocco", country_code="MA", unlocode="MAPTM")
    lagos = Port.objects.create(name="Lagos", code="LOS", country="Nigeria", country_code="NG", unlocode="NGLOS")
    brussels = Port.objects.create(
        name="Brussels Airport", code="BRUA", country="Belgium", country_code="BE",
        port_category=Port.AIRPORT, iata_code="BRU", icao_code="EBBR",
    )
    return {"ANR": antwerp, "CAS": casablanca, "TFN": tanger, "LOS": lagos, "BRU": brussels}


class TestNormalization:
    def test_normalize_input_strips_quotes_and_whitespace(self):
        assert normalize_input('  "Antwerp   Port" ') == "Antwerp Port"

    def test_normalize_alias_lowercases(self):
        assert normalize_alias("  Lagos,  Apapa ") == "lagos apapa"

    def test_split_tokens_on_separators(self):
        assert split_tokens("CAS/TFN & Lagos and Antwerp, CAS") == ["CAS", "TFN", "Lagos", "Antwerp"]


class TestResolveOne:
    def test_unlocode(self, ports):
        assert PortResolutionService().resolve_one("beanr") == ports["ANR"]

    def test_iata_only_matches_airports(self, ports):
        assert PortResolutionService().resolve_one("BRU") == ports["BRU"]

    def test_icao(self, ports):
        assert PortResolutionService().resolve_one("EBBR") == ports["BRU"]

    def test_embedded_code(self, ports):
        assert PortResolutionService().resolve_one("Somewhere (LOS), Nigeria") == ports["LOS"]

    def test_code_case_insensitive(self, ports):
        assert PortResolutionService().resolve_one("anr") == ports["ANR"]

    def test_exact_name(self, ports):
        assert PortResolutionService().resolve_one("casablanca") == ports["CAS"]

    def test_alias(self, ports):
        PortAlias.objects.create(port=ports["LOS"], alias="Apapa")
        assert PortResolutionService().resolve_one(" apapa ") == ports["LOS"]

    def test_inactive_alias_ignored(self, ports):
        PortAlias.objects.create(port=ports["LOS"], alias="Tin Can Island", is_active=False)
        assert PortResolutionService().resolve_one("Tin Can Island") is None

    def test_unique_name_prefix(self, ports):
        assert PortResolutionService().resolve_one("Tanger") == ports["TFN"]

    def test_ambiguous_prefix_returns_none(self, ports):
        Port.objects.create(name="Lagoa", code="LGA", country="Portugal", country_code="PT")
        assert PortResolutionService().resolve_one("Lag") is None

    def test_unknown_returns_none(self, ports):
        assert PortResolutionService().resolve_one("Atlantis") is None

    def test_blank_returns_none(self):
        assert PortResolutionService().resolve_one("  ") is None


class TestResolveMany:
    def test_combined_input(self, ports):
        result = PortResolutionService().resolve_many("CAS/TFN")
        assert [p.code for p in result] == ["CAS", "TFN"]

    def test_report_lists_unresolved(self, ports):
        found, missing = PortResolutionService().resolve_many_with_report("Antwerp + Atlantis, ANR")
        assert [p.code for p in found] == ["ANR"]
        assert missing == ["Atlantis"]

    def test_normalize_code(self, ports):
        service = PortResolutionService()
        assert service.normalize_code("Lagos") == "LOS"
        assert service.normalize_code("Atlantis") is None

    def test_country_code_for(self, ports):
        assert PortResolutionService().country_code_for("Antwerp") == "BE"


class TestPortFormatting:
    def test_formats(self, ports):
        assert ports["ANR"].format_full() == "Antwerp (ANR), Belgium"
        assert ports["ANR"].format_short() == "Antwerp (ANR)"
        assert ports["ANR"].display_name == "Antwerp – Seaport"
        assert ports["BRU"].display_name == "Brussels Airport – Airport (BRU)"
