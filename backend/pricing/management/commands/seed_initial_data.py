# backend/pricing/management/commands/seed_initial_data.py

from decimal import Decimal

from django.core.management.base import BaseCommand
from django.db import transaction

from core.models import ShippingCarrier
from pricing.models import PricingProfile, PricingRule, PricingTier

#region -------- Seed data --------
TIERS = [
    # code, name, margin %, description
    ("A", "Best price", Decimal("-5.00"), "Strategic accounts and high volume customers"),
    ("B", "Standard", Decimal("15.00"), "Default tier for regular customers"),
    ("C", "Premium", Decimal("25.00"), "One-off requests and small volumes"),
]

GLOBAL_RULES = [
    # vehicle_category, unit_basis, margin_type, value
    (None, None, PricingRule.PERCENT, Decimal("15.00")),
    ("LM", "LM", PricingRule.PERCENT, Decimal("10.00")),
    ("CAR", None, PricingRule.FIXED, Decimal("75.00")),
]
#endregion


def upsert_tier(code, name, margin, description, sort_order):
    tier, _ = PricingTier.objects.update_or_create(
        code=code,
        defaults={
            "name": name,
            "margin_percentage": margin,
            "description": description,
            "sort_order": sort_order,
            "is_active": True,
        },
    )
    return tier


class Command(BaseCommand):
    help = "Seed pricing tiers A/B/C, a global pricing profile and carrier default profiles."

    @transaction.atomic
    def handle(self, *args, **options):
        for idx, (code, name, margin, description) in enumerate(TIERS):
            upsert_tier(code, name, margin, description, idx)
        self.stdout.write(self.style.SUCCESS(f"Pricing tiers ready: {', '.join(t[0] for t in TIERS)}"))

        profile, created = PricingProfile.objects.get_or_create(
            name="Global default",
            carrier=None,
            robaws_client_id=None,
            defaults={"currency": "EUR"},
        )
        if created:
            for category, basis, margin_type, value in GLOBAL_RULES:
                PricingRule.objects.create(
                    profile=profile,
                    vehicle_category=category,
                    unit_basis=basis,
                    margin_type=margin_type,
                    margin_value=value,
                )
            self.stdout.write(self.style.SUCCESS(f"Created global profile with {len(GLOBAL_RULES)} rule(s)"))
        else:
            self.stdout.write("Global profile already exists")

        carriers = ShippingCarrier.objects.filter(is_active=True)
        made = 0
        for carrier in carriers:
            _, created = PricingProfile.objects.get_or_create(
                name=f"{carrier.name} default",
                carrier=carrier,
                robaws_client_id=None,
                defaults={"currency": "EUR"},
            )
            made += int(created)
        if made:
            self.stdout.write(self.style.SUCCESS(f"Created {made} carrier default profile(s) (no rules yet)"))
        else:
            self.stdout.write(self.style.WARNING("No new carrier profiles created."))
