from decimal import Decimal
from unittest.mock import patch

import pytest

from core.models import Port
from quotes.models import QuotationRequest

pytestmark = pytest.mark.django_db


@pytest.fixture(autouse=True)
def ports():
    Port.objects.create(name="Antwerp", code="ANR", country="Belgium", country_code="BE")
    Port.objects.create(name="Zeebrugge", code="ZEE", country="Belgium", country_code="BE")
    Port.objects.create(name="Valencia", code="VLC", country="Spain", country_code="ES")
    Port.objects.create(name="Lagos", code="LOS", country="Nigeria", country_code="NG")


class TestProjectVatCode:
    @pytest.mark.parametrize(
        "pol, pod, expected",
        [
            ("Antwerp", "Zeebrugge", "21% VF"),
            ("Antwerp", "Valencia", "intracommunautaire VF"),
            ("ANR", "Lagos (LOS)", "vrijgesteld VF"),
            ("Lagos", "Antwerp", "vrijgesteld import VF"),
            ("Valencia", "Lagos", "21% VF"),
        ],
    )
    def test_code_assigned_on_create(self, pol, pod, expected):
        quotation = QuotationRequest.objects.create(pol=pol, pod=pod)
        assert quotation.project_vat_code == expected

    def test_rate_follows_code(self):
        quotation = QuotationRequest.objects.create(pol="Antwerp", pod="Lagos")
        quotation.refresh_from_db()
        assert quotation.vat_rate == Decimal("0")

        quotation.pod = "Zeebrugge"
        quotation.save()
        quotation.refresh_from_db()
        assert quotation.project_vat_code == "21% VF"
        assert quotation.vat_rate == Decimal("21")

    def test_resolver_failure_falls_back(self):
        with patch("quotes.signals.VatResolver.determine_project_vat_code", side_effect=RuntimeError("boom")):
            quotation = QuotationRequest.objects.create(pol="Antwerp", pod="Lagos")
        assert quotation.project_vat_code == "21% VF"

    def test_status_only_save_skips_resolution(self):
        quotation = QuotationRequest.objects.create(pol="Antwerp", pod="Lagos")
        with patch("quotes.signals.VatResolver.determine_project_vat_code") as resolve:
            quotation.mark_quoted()
        resolve.assert_not_called()
