from datetime import date
from decimal import Decimal

import pytest
from django.core.exceptions import ValidationError

from articles.models import RobawsArticleCache
from core.models import ShippingCarrier
from tariffs.models import CarrierArticleMapping, CarrierPurchaseTariff

pytestmark = pytest.mark.django_db


class TestCarrierArticleMapping:
    def test_empty_lists_stored_as_null(self, make_mapping):
        mapping = make_mapping("GANRLOSCAR", port_ids=[], category_group_ids=[])
        mapping.refresh_from_db()
        assert mapping.port_ids is None
        assert mapping.category_group_ids is None
        assert mapping.vehicle_categories == ["car"]

    def test_saving_assigns_article_carrier(self, make_mapping, grimaldi):
        mapping = make_mapping("GANRLOSCAR")
        mapping.article.refresh_from_db()
        assert mapping.article.shipping_carrier == grimaldi

    def test_article_of_other_carrier_rejected(self, grimaldi):
        other = ShippingCarrier.objects.create(name="Sallaum", code="SALLAUM")
        article = RobawsArticleCache.objects.create(
            robaws_article_id="9", article_name="Sallaum CAR", shipping_carrier=other
        )
        with pytest.raises(ValidationError):
            CarrierArticleMapping(carrier=grimaldi, article=article).clean()

    def test_universal_article_maps_to_any_carrier(self, grimaldi):
        article = RobawsArticleCache.objects.create(robaws_article_id="10", article_name="Admin fee")
        CarrierArticleMapping(carrier=grimaldi, article=article).clean()

    def test_active_purchase_tariff_prefers_latest(self, make_mapping, make_tariff):
        mapping = make_mapping("GANRLOSCAR")
        make_tariff(mapping, effective_from=date(2025, 1, 1))
        current = make_tariff(mapping, effective_from=date(2026, 1, 1))
        make_tariff(mapping, effective_from=date(2026, 2, 1), is_active=False)

        assert mapping.active_purchase_tariff(on=date(2026, 3, 1)) == current

    def test_no_active_tariff(self, make_mapping, make_tariff):
        mapping = make_mapping("GANRLOSCAR")
        make_tariff(mapping, effective_from=date(2030, 1, 1))
        assert mapping.active_purchase_tariff(on=date(2026, 3, 1)) is None


class TestCarrierPurchaseTariff:
    def test_active_window(self, make_mapping, make_tariff):
        mapping = make_mapping("GANRLOSCAR")
        open_ended = make_tariff(mapping, effective_from=None)
        expired = make_tariff(mapping, effective_from=date(2025, 1, 1), effective_to=date(2025, 12, 31))

        active = set(CarrierPurchaseTariff.objects.active(on=date(2026, 6, 1)))
        assert open_ended in active
        assert expired not in active

    def test_total_amount_skips_nulls(self, make_mapping, make_tariff):
        tariff = make_tariff(make_mapping("GANRLOSCAR"), thc_amount=Decimal("85.50"))
        assert tariff.total_amount() == Decimal("1435.50")

    def test_negative_amount_rejected(self, make_mapping, make_tariff):
        tariff = make_tariff(make_mapping("GANRLOSCAR"))
        tariff.baf_amount = Decimal("-1")
        with pytest.raises(ValidationError) as excinfo:
            tariff.clean()
        assert excinfo.value.message_dict["baf_amount"] == ["Field baf_amount must be >= 0"]

    def test_unknown_unit_rejected(self, make_mapping, make_tariff):
        tariff = make_tariff(make_mapping("GANRLOSCAR"))
        tariff.thc_unit = "PER_UNIT"
        with pytest.raises(ValidationError):
            tariff.clean()
