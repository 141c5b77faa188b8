from datetime import date
from decimal import Decimal

import pytest

from articles.models import RobawsArticleCache
from core.models import Port, ShippingCarrier
from tariffs.models import CarrierArticleMapping, CarrierPurchaseTariff


@pytest.fixture
def grimaldi():
    return ShippingCarrier.objects.create(name="Grimaldi Lines", code="GRIMALDI")


@pytest.fixture
def ports():
    return {
        "LOS": Port.objects.create(name="Lagos", code="LOS", country="Nigeria", country_code="NG"),
        "COO": Port.objects.create(name="Cotonou", code="COO", country="Benin", country_code="BJ"),
    }


@pytest.fixture
def make_mapping(grimaldi):
    def _make(code, pod_code="LOS", category="car", **extra):
        article = RobawsArticleCache.objects.create(
            robaws_article_id=f"R-{code}",
            article_code=code,
            article_name=f"Seafreight {code}",
            pod_code=pod_code,
            pod=extra.pop("pod", ""),
        )
        return CarrierArticleMapping.objects.create(
            carrier=grimaldi, article=article, vehicle_categories=[category], **extra
        )

    return _make


@pytest.fixture
def make_tariff():
    def _make(mapping, **extra):
        values = {
            "effective_from": date(2026, 1, 1),
            "base_freight_amount": Decimal("1200.00"),
            "baf_amount": Decimal("150.00"),
        }
        values.update(extra)
        return CarrierPurchaseTariff.objects.create(mapping=mapping, **values)

    return _make


@pytest.fixture
def lagos_rates(ports, make_mapping, make_tariff):
    car = make_tariff(make_mapping("GANRLOSCAR", category="car"))
    svan = make_tariff(make_mapping("GANRLOSSV", category="small_van"), base_freight_amount=Decimal("1500.00"))
    lm = make_tariff(
        make_mapping("GANRLOSLM", category="truck"),
        base_freight_amount=Decimal("95.00"),
        base_freight_unit="LM",
        congestion_surcharge_amount=Decimal("40.00"),
    )
    return {"CAR": car, "SVAN": svan, "LM": lm}
