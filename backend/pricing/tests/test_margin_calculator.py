from decimal import Decimal

from django.test import TestCase
from rest_framework.test import APIClient

from accounts.models import CustomUser
from pricing.models import PricingProfile, PricingRule
from pricing.services.margin_calculator import MarginCalculator


class MarginCalculatorTests(TestCase):
    @classmethod
    def setUpTestData(cls):
        cls.profile = PricingProfile.objects.create(name="Test Profile", currency="EUR")

    def setUp(self):
        self.calculator = MarginCalculator()

    def _rule(self, category, basis, margin_type, value, is_active=True):
        return PricingRule.objects.create(
            profile=self.profile,
            vehicle_category=category,
            unit_basis=basis,
            margin_type=margin_type,
            margin_value=Decimal(value),
            is_active=is_active,
        )

    def _margin(self, base="1000.00"):
        return self.calculator.calculate_margin(self.profile.rules.all(), Decimal(base), "CAR", "UNIT")

    def test_fixed_margin(self):
        self._rule("CAR", "UNIT", PricingRule.FIXED, "50.00")
        self.assertEqual(self._margin(), Decimal("50.00"))

    def test_percent_margin(self):
        self._rule("CAR", "UNIT", PricingRule.PERCENT, "15.00")
        self.assertEqual(self._margin(), Decimal("150.00"))

    def test_percent_margin_fractional(self):
        self._rule("CAR", "UNIT", PricingRule.PERCENT, "12.50")
        self.assertEqual(self._margin("2000.00"), Decimal("250.00"))

    def test_exact_rule_beats_global(self):
        self._rule(None, None, PricingRule.FIXED, "10.00")
        self._rule("CAR", "UNIT", PricingRule.FIXED, "50.00")
        self.assertEqual(self._margin(), Decimal("50.00"))

    def test_falls_back_to_category_only(self):
        self._rule("CAR", None, PricingRule.FIXED, "40.00")
        self._rule(None, None, PricingRule.FIXED, "10.00")
        self.assertEqual(self._margin(), Decimal("40.00"))

    def test_falls_back_to_basis_only(self):
        self._rule(None, "UNIT", PricingRule.FIXED, "30.00")
        self._rule(None, None, PricingRule.FIXED, "10.00")
        self.assertEqual(self._margin(), Decimal("30.00"))

    def test_category_only_beats_basis_only(self):
        self._rule(None, "UNIT", PricingRule.FIXED, "30.00")
        self._rule("CAR", None, PricingRule.FIXED, "40.00")
        self.assertEqual(self._margin(), Decimal("40.00"))

    def test_falls_back_to_global(self):
        self._rule(None, None, PricingRule.FIXED, "20.00")
        self.assertEqual(self._margin(), Decimal("20.00"))

    def test_zero_when_only_inactive_rules(self):
        self._rule("CAR", "UNIT", PricingRule.FIXED, "50.00", is_active=False)
        self.assertEqual(self._margin(), Decimal("0"))

    def test_other_category_does_not_match(self):
        self._rule("LM", "LM", PricingRule.FIXED, "99.00")
        self.assertEqual(self._margin(), Decimal("0"))

    def test_matching_is_case_insensitive(self):
        self._rule("car", "unit", PricingRule.FIXED, "45.00")
        self.assertEqual(self._margin(), Decimal("45.00"))

    def test_no_profile_means_no_margin(self):
        self.assertEqual(self.calculator.margin_for_profile(None, Decimal("1000"), "CAR", "UNIT"), Decimal("0"))

    def test_profile_helper_uses_profile_rules(self):
        self._rule("CAR", "UNIT", PricingRule.FIXED, "50.00")
        self.assertEqual(
            self.calculator.margin_for_profile(self.profile, Decimal("1000"), "CAR", "UNIT"), Decimal("50.00")
        )

    def test_in_memory_rules(self):
        rules = [
            PricingRule(vehicle_category=None, unit_basis=None, margin_type=PricingRule.FIXED, margin_value=Decimal("5")),
            PricingRule(vehicle_category="CAR", unit_basis=None, margin_type=PricingRule.FIXED, margin_value=Decimal("8")),
        ]
        self.assertEqual(self.calculator.calculate_margin(rules, Decimal("100"), "CAR", "LM"), Decimal("8"))

    def test_blank_scope_counts_as_global(self):
        rule = self._rule("", "", PricingRule.FIXED, "50.00")
        rule.refresh_from_db()
        self.assertIsNone(rule.vehicle_category)
        self.assertIsNone(rule.unit_basis)
        self.assertEqual(self._margin(), Decimal("50.00"))

    def test_blank_scope_on_unsaved_rules(self):
        rules = [PricingRule(vehicle_category="", unit_basis=" ", margin_type=PricingRule.FIXED, margin_value=Decimal("7"))]
        self.assertEqual(self.calculator.calculate_margin(rules, Decimal("100"), "CAR", "UNIT"), Decimal("7"))

    def test_blank_scope_from_api(self):
        finance = CustomUser.objects.create_user(username="finance", password="pw", role="finance")
        client = APIClient()
        client.force_authenticate(finance)
        resp = client.post(
            "/api/pricing/rules/",
            {
                "profile": self.profile.pk, "vehicle_category": "", "unit_basis": "",
                "margin_type": PricingRule.FIXED, "margin_value": "50.00",
            },
            format="json",
        )
        self.assertEqual(resp.status_code, 201)
        self.assertEqual(self._margin(), Decimal("50.00"))
