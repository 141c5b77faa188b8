from django.contrib import admin, messages

from .models import Port, PortAlias, ShippingCarrier


class PortAliasInline(admin.TabularInline):
    model = PortAlias
    extra = 0
    fields = ("alias", "alias_type", "is_active")


@admin.register(Port)
class PortAdmin(admin.ModelAdmin):
    list_display = ("code", "name", "country", "country_code", "port_category", "unlocode", "iata_code", "is_active")
    list_filter = ("port_category", "is_active", "region", "country_code")
    search_fields = ("code", "name", "country", "unlocode", "iata_code", "icao_code", "aliases__alias")
    inlines = [PortAliasInline]


@admin.register(PortAlias)
class PortAliasAdmin(admin.ModelAdmin):
    list_display = ("alias", "alias_normalized", "port", "alias_type", "is_active")
    list_filter = ("alias_type", "is_active")
    search_fields = ("alias", "alias_normalized", "port__name", "port__code")
    autocomplete_fields = ("port",)
    readonly_fields = ("alias_normalized",)
    actions = ["deactivate_aliases"]

    def deactivate_aliases(self, request, queryset):
        updated = queryset.update(is_active=False)
        messages.info(request, f"Deactivated {updated} alias(es).")

    deactivate_aliases.short_description = "Deactivate selected aliases"


@admin.register(ShippingCarrier)
class ShippingCarrierAdmin(admin.ModelAdmin):
    list_display = ("code", "name", "is_active")
    list_filter = ("is_active",)
    search_fields = ("code", "name")
