from decimal import Decimal

from django.contrib import admin, messages

from pricing.models import PricingProfile, PricingRule, PricingTier
from pricing.services.profile_resolver import PricingProfileResolver


@admin.register(PricingTier)
class PricingTierAdmin(admin.ModelAdmin):
    list_display = ("code", "name", "margin_percentage", "example_price", "is_active", "sort_order")
    list_filter = ("is_active",)
    search_fields = ("code", "name")
    ordering = ("sort_order", "code")

    def example_price(self, obj):
        return obj.calculate_selling_price(Decimal("1000")).quantize(Decimal("0.01"))

    example_price.short_description = "Example (€1000 base)"


class PricingRuleInline(admin.TabularInline):
    model = PricingRule
    extra = 0
    fields = ("vehicle_category", "unit_basis", "margin_type", "margin_value", "priority", "is_active")


@admin.register(PricingProfile)
class PricingProfileAdmin(admin.ModelAdmin):
    list_display = ("name", "scope", "carrier", "robaws_client_id", "currency", "effective_from", "effective_to", "is_active")
    list_filter = ("is_active", "currency", "carrier")
    search_fields = ("name", "robaws_client_id", "carrier__name")
    inlines = [PricingRuleInline]
    actions = ["check_resolution"]

    def check_resolution(self, request, queryset):
        resolver = PricingProfileResolver()
        for profile in queryset:
            resolved = resolver.resolve(profile.carrier_id, profile.robaws_client_id)
            if resolved and resolved.pk == profile.pk:
                messages.info(request, f"{profile.name}: selected for its scope ({profile.scope}).")
            else:
                winner = resolved.name if resolved else "none"
                messages.warning(request, f"{profile.name}: not selected today, resolver picks '{winner}'.")

    check_resolution.short_description = "Check which profile the resolver selects"


@admin.register(PricingRule)
class PricingRuleAdmin(admin.ModelAdmin):
    list_display = ("profile", "vehicle_category", "unit_basis", "margin_type", "margin_value", "priority", "is_active")
    list_filter = ("margin_type", "is_active", "profile")
    search_fields = ("profile__name", "vehicle_category", "unit_basis")
