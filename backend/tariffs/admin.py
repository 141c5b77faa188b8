import logging

from django.contrib import admin, messages
from django.db import DatabaseError

from robaws.client import RobawsApiError

from .models import CarrierArticleMapping, CarrierCategoryGroup, CarrierPurchaseTariff
from .services.rates_overview import RatesOverviewService, category_for, port_code_for
from .services.tariff_date_sync import TariffDateSyncService

logger = logging.getLogger(__name__)


@admin.register(CarrierCategoryGroup)
class CarrierCategoryGroupAdmin(admin.ModelAdmin):
    list_display = ("carrier", "code", "display_name", "vehicle_categories", "is_active", "sort_order")
    list_filter = ("carrier", "is_active")
    search_fields = ("code", "display_name")


class CarrierPurchaseTariffInline(admin.StackedInline):
    model = CarrierPurchaseTariff
    extra = 0
    fields = (
        ("effective_from", "effective_to", "currency", "is_active"),
        ("update_date", "validity_date"),
        ("base_freight_amount", "base_freight_unit"),
        ("baf_amount", "baf_unit"),
        ("ets_amount", "ets_unit"),
        ("port_additional_amount", "port_additional_unit"),
        ("admin_fxe_amount", "admin_fxe_unit"),
        ("thc_amount", "thc_unit"),
        ("measurement_costs_amount", "measurement_costs_unit"),
        ("congestion_surcharge_amount", "congestion_surcharge_unit"),
        ("iccm_amount", "iccm_unit"),
        "notes",
    )


@admin.register(CarrierArticleMapping)
class CarrierArticleMappingAdmin(admin.ModelAdmin):
    list_display = ("__str__", "carrier", "article", "port_code", "category", "is_active", "sort_order")
    list_filter = ("carrier", "is_active")
    search_fields = ("name", "article__article_code", "article__article_name")
    autocomplete_fields = ("article",)
    inlines = [CarrierPurchaseTariffInline]

    def port_code(self, obj):
        return port_code_for(obj) or "-"

    def category(self, obj):
        return category_for(obj) or "-"

    def save_formset(self, request, form, formset, change):
        super().save_formset(request, form, formset, change)
        if formset.model is not CarrierPurchaseTariff:
            return
        service = TariffDateSyncService()
        try:
            for tariff in form.instance.purchase_tariffs.active().order_by("-effective_from", "sort_order", "id")[:1]:
                service.sync_tariff_dates_to_article(tariff)
        except DatabaseError as exc:
            logger.exception(f"Date sync failed for mapping {form.instance.pk}")
            messages.error(request, f"Failed to save: {exc}")


@admin.register(CarrierPurchaseTariff)
class CarrierPurchaseTariffAdmin(admin.ModelAdmin):
    list_display = (
        "mapping", "effective_from", "effective_to", "base_freight_amount", "baf_amount",
        "total", "update_date", "validity_date", "is_active",
    )
    list_filter = ("is_active", "currency", "mapping__carrier")
    search_fields = ("mapping__name", "mapping__article__article_code", "mapping__article__article_name")
    date_hierarchy = "effective_from"
    readonly_fields = ("created_at", "updated_at")
    actions = ["sync_dates_to_articles", "push_dates_to_robaws"]

    def total(self, obj):
        return obj.total_amount()

    total.short_description = "Total"

    def save_model(self, request, obj, form, change):
        super().save_model(request, obj, form, change)
        try:
            TariffDateSyncService().sync_tariff_dates_to_article(obj)
        except DatabaseError as exc:
            logger.exception(f"Date sync failed for tariff {obj.pk}")
            messages.error(request, f"Failed to save: {exc}")

    def sync_dates_to_articles(self, request, queryset):
        service = TariffDateSyncService()
        synced = 0
        for tariff in queryset.select_related("mapping__article"):
            try:
                synced += service.sync_tariff_dates_to_article(tariff)
            except DatabaseError as exc:
                logger.exception(f"Date sync failed for tariff {tariff.pk}")
                messages.error(request, f"Failed to save: {exc}")
        messages.success(request, f"Updated dates on {synced} article(s).")

    sync_dates_to_articles.short_description = "Copy update/validity dates to articles"

    def push_dates_to_robaws(self, request, queryset):
        articles = {t.mapping.article_id: t.mapping.article for t in queryset.select_related("mapping__article")}
        try:
            pushed, failed = RatesOverviewService().push_article_dates(articles.values())
        except RobawsApiError as exc:
            messages.error(request, f"Failed to save: {exc}")
            return
        if failed:
            messages.warning(request, f"Pushed {pushed} article(s) to Robaws, {failed} failed.")
        else:
            messages.success(request, f"Pushed {pushed} article(s) to Robaws.")

    push_dates_to_robaws.short_description = "Push article dates to Robaws"

