from django.contrib import admin

from .models import ArticleChild, RobawsArticleCache


class ArticleChildInline(admin.TabularInline):
    model = ArticleChild
    fk_name = "parent"
    extra = 0
    autocomplete_fields = ("child",)
    fields = ("child", "child_type", "conditions", "default_quantity", "sort_order")


@admin.register(RobawsArticleCache)
class RobawsArticleCacheAdmin(admin.ModelAdmin):
    list_display = (
        "article_code",
        "article_name",
        "shipping_carrier",
        "pod_code",
        "vehicle_category",
        "unit_type",
        "unit_price",
        "effective_update_date",
        "effective_validity_date",
        "is_parent_item",
        "is_active",
    )
    list_filter = ("is_active", "is_parent_item", "shipping_carrier", "vehicle_category", "unit_type", "service_type")
    search_fields = ("article_code", "article_name", "robaws_article_id", "pod", "pol")
    readonly_fields = ("last_synced_at", "last_pushed_dates_at", "last_pushed_update_date", "last_pushed_validity_date")
    inlines = [ArticleChildInline]


@admin.register(ArticleChild)
class ArticleChildAdmin(admin.ModelAdmin):
    list_display = ("parent", "child", "child_type", "default_quantity", "sort_order")
    list_filter = ("child_type",)
    search_fields = ("parent__article_name", "child__article_name", "parent__article_code", "child__article_code")
