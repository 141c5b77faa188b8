from decimal import Decimal

import pytest

from core.models import ShippingCarrier
from quotes.models import QuotationCommodityItem, QuotationRequest
from quotes.services.condition_matcher import ConditionMatcher

pytestmark = pytest.mark.django_db


@pytest.fixture
def matcher():
    return ConditionMatcher()


@pytest.fixture
def loaded(quotation):
    QuotationCommodityItem.objects.create(
        quotation=quotation,
        commodity_type="vehicles",
        quantity=2,
        length_cm=Decimal("620"),
        width_cm=Decimal("210"),
        height_cm=Decimal("190"),
        weight_kg=Decimal("1500"),
    )
    QuotationCommodityItem.objects.create(
        quotation=quotation,
        line_number=2,
        commodity_type="machinery",
        length_cm=Decimal("300"),
        width_cm=Decimal("250"),
        height_cm=Decimal("320"),
        weight_kg=Decimal("800"),
    )
    return quotation


@pytest.mark.parametrize("conditions", [None, {}])
def test_empty_conditions_never_match(matcher, quotation, conditions):
    assert matcher.matches(conditions, quotation) is False


def test_unknown_keys_are_ignored(matcher, quotation):
    assert matcher.matches({"colour": "red"}, quotation) is True


@pytest.mark.parametrize("conditions, expected", [
    ({"commodity": ["VEHICLES"]}, True),
    ({"commodity": "machinery"}, True),
    ({"commodity": ["boat", "motorcycle"]}, False),
    ({"dimensions": {"length_gt": 6}}, True),
    ({"dimensions": {"length_gt": 6.5}}, False),
    ({"dimensions": {"height_gt": 3, "width_lt": 2.6}}, True),
    ({"dimensions": {"width_lt": 2.5}}, False),
    ({"dimensions": {"volume_gt": 1}}, False),
    ({"weight_kg_gt": 3700}, True),
    ({"weight_kg_gt": 3800}, False),
    ({"commodity": "vehicles", "weight_kg_gt": 5000}, False),
])
def test_cargo_conditions(matcher, loaded, conditions, expected):
    assert matcher.matches(conditions, loaded) is expected


def test_cargo_conditions_without_items(matcher, quotation):
    assert matcher.matches({"commodity": "vehicles"}, quotation) is False
    assert matcher.matches({"weight_kg_gt": 0}, quotation) is False


@pytest.mark.parametrize("pol, pod, route, expected", [
    ("Antwerp", "Dakar (DKR)", {"pod": ["DKR"]}, True),
    ("Antwerp", "Dakar (DKR)", {"pod": "dakar"}, True),
    ("Antwerp", "Abidjan (ABJ)", {"pod": ["DKR", "LOS"]}, False),
    ("Antwerp, Belgium", "Lagos", {"pol": ["antwerp"]}, True),
    ("Zeebrugge", "Lagos", {"pol": ["Antwerp"], "pod": ["Lagos"]}, False),
    ("Antwerp", "", {"pod": ["DKR"]}, True),
])
def test_route(matcher, pol, pod, route, expected):
    quotation = QuotationRequest(pol=pol, pod=pod)
    assert matcher.matches({"route": route}, quotation) is expected


def test_carrier(matcher):
    grimaldi = ShippingCarrier.objects.create(name="Grimaldi Lines", code="GRIMALDI")
    quotation = QuotationRequest(selected_carrier=grimaldi)

    assert matcher.matches({"carrier": ["grimaldi"]}, quotation) is True
    assert matcher.matches({"carrier": "Grimaldi Lines"}, quotation) is True
    assert matcher.matches({"carrier": ["SALLAUM"]}, quotation) is False
    assert matcher.matches({"carrier": ["GRIMALDI"]}, QuotationRequest()) is False


@pytest.mark.parametrize("customer_type, customer_role, wanted, expected", [
    ("FORWARDER", "", ["forwarder"], True),
    ("", "CAR DEALER", "car dealer", True),
    ("", "", [""], False),
    ("POV", "POV", ["FORWARDER"], False),
])
def test_customer_type(matcher, customer_type, customer_role, wanted, expected):
    quotation = QuotationRequest(customer_type=customer_type, customer_role=customer_role)
    assert matcher.matches({"customer_type": wanted}, quotation) is expected


@pytest.mark.parametrize("in_transit_to, conditions, expected", [
    ("", {"in_transit_to_empty": True}, True),
    ("Bamako", {"in_transit_to_empty": True}, False),
    ("Bamako", {"in_transit_to_empty": False}, True),
    ("Bamako, Mali", {"in_transit_to": ["Bamako"]}, True),
    ("Ouagadougou", {"in_transit_to": ["Bamako", "Niamey"]}, False),
    ("", {"in_transit_to": ["Bamako"]}, False),
])
def test_in_transit_to(matcher, in_transit_to, conditions, expected):
    quotation = QuotationRequest(in_transit_to=in_transit_to)
    assert matcher.matches(conditions, quotation) is expected
