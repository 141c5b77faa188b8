from __future__ import annotations

from decimal import Decimal

from rest_framework import serializers

from articles.models import RobawsArticleCache

from .models import QuotationCommodityItem, QuotationRequest, QuotationRequestArticle


class QuotationRequestArticleSerializer(serializers.ModelSerializer):
    article_code = serializers.CharField(source="article.article_code", read_only=True)
    article_name = serializers.CharField(source="article.article_name", read_only=True)

    class Meta:
        model = QuotationRequestArticle
        fields = [
            "id", "article", "article_code", "article_name", "parent_article", "item_type",
            "quantity", "unit_type", "unit_price", "selling_price", "subtotal", "currency",
            "formula_inputs", "notes",
        ]
        read_only_fields = fields


class AddArticleSerializer(serializers.Serializer):
    article_id = serializers.PrimaryKeyRelatedField(
        queryset=RobawsArticleCache.objects.filter(is_active=True), source="article"
    )
    quantity = serializers.DecimalField(max_digits=12, decimal_places=4, min_value=Decimal("0.0001"), default=Decimal("1"))
    formula_inputs = serializers.DictField(required=False, allow_empty=True)


class QuotationCommodityItemSerializer(serializers.ModelSerializer):
    class Meta:
        model = QuotationCommodityItem
        fields = [
            "id", "line_number", "commodity_type", "category", "make", "type_model", "quantity",
            "length_cm", "width_cm", "height_cm", "weight_kg", "cbm", "lm",
            "unit_price", "line_total", "extra_info",
        ]
        read_only_fields = ["cbm", "lm", "line_total"]


class QuotationRequestSerializer(serializers.ModelSerializer):
    articles = QuotationRequestArticleSerializer(many=True, read_only=True)
    commodity_items = QuotationCommodityItemSerializer(many=True, read_only=True)
    route_display = serializers.CharField(read_only=True)

    class Meta:
        model = QuotationRequest
        fields = [
            "id", "request_number", "source", "requester_type", "status",
            "client_name", "client_email", "client_tel", "robaws_client_id",
            "contact_name", "contact_email", "contact_phone", "customer_reference", "customer_user",
            "service_type", "simple_service_type", "trade_direction",
            "por", "pol", "pod", "fdest", "in_transit_to", "route_display", "cargo_description",
            "customer_role", "customer_type", "pricing_tier", "selected_carrier",
            "subtotal", "discount_amount", "discount_percentage", "total_excl_vat",
            "vat_rate", "vat_amount", "total_incl_vat", "pricing_currency", "project_vat_code",
            "robaws_offer_id", "robaws_offer_number", "robaws_sync_status", "robaws_synced_at",
            "quoted_at", "expires_at", "created_at", "updated_at",
            "articles", "commodity_items",
        ]
        read_only_fields = [
            "subtotal", "discount_amount", "total_excl_vat", "vat_amount", "total_incl_vat",
            "project_vat_code", "robaws_offer_id", "robaws_offer_number", "robaws_sync_status",
            "robaws_synced_at", "quoted_at", "created_at", "updated_at",
        ]
        extra_kwargs = {"request_number": {"required": False}}


class CustomerQuotationRequestSerializer(QuotationRequestSerializer):
    """What a portal customer may submit and change: route, cargo and contact details."""

    class Meta(QuotationRequestSerializer.Meta):
        read_only_fields = QuotationRequestSerializer.Meta.read_only_fields + [
            "request_number", "source", "status", "robaws_client_id", "customer_user",
            "customer_role", "customer_type", "pricing_tier", "selected_carrier",
            "discount_percentage", "vat_rate", "expires_at",
        ]
        extra_kwargs = {}


class MarkQuotedSerializer(serializers.Serializer):
    expires_in_days = serializers.IntegerField(required=False, min_value=1, max_value=365)
