from django.contrib import admin, messages

from robaws.client import RobawsConfigurationError
from robaws.services.push_service import RobawsQuotationPushService

from .models import QuotationCommodityItem, QuotationRequest, QuotationRequestArticle


class QuotationRequestArticleInline(admin.TabularInline):
    model = QuotationRequestArticle
    fk_name = "quotation"
    extra = 0
    autocomplete_fields = ("article",)
    fields = ("article", "item_type", "parent_article", "quantity", "unit_type", "selling_price", "subtotal")
    readonly_fields = ("item_type", "parent_article", "subtotal")


class QuotationCommodityItemInline(admin.TabularInline):
    model = QuotationCommodityItem
    extra = 0
    fields = ("line_number", "category", "make", "type_model", "quantity", "length_cm", "width_cm", "height_cm", "weight_kg", "cbm", "lm")
    readonly_fields = ("cbm", "lm")


@admin.register(QuotationRequest)
class QuotationRequestAdmin(admin.ModelAdmin):
    list_display = (
        "request_number", "client_name", "route_display", "status", "source",
        "total_incl_vat", "project_vat_code", "robaws_sync_status", "created_at", "deleted_at",
    )
    list_filter = ("status", "source", "robaws_sync_status", "trade_direction", "created_at")
    search_fields = ("request_number", "client_name", "client_email", "contact_email", "customer_reference")
    date_hierarchy = "created_at"
    readonly_fields = (
        "subtotal", "discount_amount", "total_excl_vat", "vat_amount", "total_incl_vat", "project_vat_code",
        "robaws_offer_id", "robaws_offer_number", "robaws_sync_status", "robaws_synced_at",
        "quoted_at", "deleted_at", "created_at", "updated_at",
    )
    inlines = [QuotationRequestArticleInline, QuotationCommodityItemInline]
    actions = ["recalculate_totals", "push_to_robaws", "restore_quotations"]

    def get_queryset(self, request):
        # Soft-deleted requests stay visible so they can be restored.
        return QuotationRequest.all_objects.select_related("selected_carrier", "pricing_tier")

    def recalculate_totals(self, request, queryset):
        for quotation in queryset:
            quotation.calculate_totals()
        self.message_user(request, f"Recalculated {queryset.count()} quotation(s).", messages.SUCCESS)

    recalculate_totals.short_description = "Recalculate totals"

    def push_to_robaws(self, request, queryset):
        service = RobawsQuotationPushService()
        for quotation in queryset:
            try:
                result = service.push(quotation)
            except RobawsConfigurationError as exc:
                messages.error(request, f"Failed to save: {exc}")
                return
            if result.success:
                messages.success(request, f"{quotation}: {result.action} offer {result.offer_number or result.offer_id}.")
            else:
                messages.error(request, f"{quotation}: {result.error}")

    push_to_robaws.short_description = "Push to Robaws"

    def restore_quotations(self, request, queryset):
        restored = 0
        for quotation in queryset.deleted():
            quotation.restore()
            restored += 1
        self.message_user(request, f"Restored {restored} quotation(s).", messages.SUCCESS)

    restore_quotations.short_description = "Restore"
