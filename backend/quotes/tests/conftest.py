from decimal import Decimal

import pytest

from articles.models import RobawsArticleCache
from pricing.models import PricingTier
from quotes.models import QuotationRequest


@pytest.fixture
def at_cost():
    return PricingTier.objects.create(code="NET", name="At cost", margin_percentage=Decimal("0"))


@pytest.fixture
def make_article():
    counter = {"n": 0}

    def _make(price, unit_type="UNIT", **extra):
        counter["n"] += 1
        return RobawsArticleCache.objects.create(
            robaws_article_id=str(5000 + counter["n"]),
            article_code=extra.pop("article_code", f"ART{counter['n']}"),
            article_name=extra.pop("article_name", f"Article {counter['n']}"),
            unit_type=unit_type,
            unit_price=Decimal(price),
            **extra,
        )

    return _make


@pytest.fixture
def quotation(at_cost):
    return QuotationRequest.objects.create(
        client_name="Belgaco",
        pol="Antwerp",
        pod="Dakar",
        pricing_tier=at_cost,
    )


@pytest.fixture
def create_user(django_user_model):
    def _create(username="sales", role="sales", **extra):
        return django_user_model.objects.create_user(username=username, password="secret", role=role, **extra)

    return _create
