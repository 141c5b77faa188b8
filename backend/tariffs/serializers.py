from django.core.exceptions import ValidationError as DjangoValidationError
from rest_framework import serializers

from .models import AMOUNT_FIELDS, UNIT_FIELDS, CarrierArticleMapping, CarrierPurchaseTariff


class CarrierPurchaseTariffSerializer(serializers.ModelSerializer):
    article_code = serializers.CharField(source="mapping.article.article_code", read_only=True)
    total = serializers.DecimalField(source="total_amount", max_digits=12, decimal_places=2, read_only=True)

    class Meta:
        model = CarrierPurchaseTariff
        fields = [
            "id", "mapping", "article_code", "effective_from", "effective_to",
            "update_date", "validity_date", "currency", "is_active", "sort_order",
            *AMOUNT_FIELDS, *UNIT_FIELDS, "total",
        ]
        read_only_fields = fields


class CarrierArticleMappingSerializer(serializers.ModelSerializer):
    article_code = serializers.CharField(source="article.article_code", read_only=True)

    class Meta:
        model = CarrierArticleMapping
        fields = [
            "id", "carrier", "article", "article_code", "name", "port_ids", "port_group_ids",
            "vehicle_categories", "category_group_ids", "is_active", "sort_order",
        ]

    def validate(self, attrs):
        candidate = CarrierArticleMapping(
            carrier=attrs.get("carrier", getattr(self.instance, "carrier", None)),
            article=attrs.get("article", getattr(self.instance, "article", None)),
        )
        try:
            candidate.clean()
        except DjangoValidationError as exc:
            raise serializers.ValidationError(exc.message_dict)
        return attrs


class SavePortSerializer(serializers.Serializer):
    # {tariff_id: {field: value}}; values are validated by RatesOverviewService
    edits = serializers.DictField(child=serializers.DictField(), allow_empty=False)


class DatesSerializer(serializers.Serializer):
    update_date = serializers.DateField(required=False, allow_null=True)
    validity_date = serializers.DateField(required=False, allow_null=True)
