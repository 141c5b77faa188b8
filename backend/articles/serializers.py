from rest_framework import serializers

from .models import RobawsArticleCache


class RobawsArticleSerializer(serializers.ModelSerializer):
    effective_update_date = serializers.DateField(read_only=True)
    effective_validity_date = serializers.DateField(read_only=True)
    carrier_code = serializers.CharField(source="shipping_carrier.code", read_only=True, default=None)

    class Meta:
        model = RobawsArticleCache
        fields = [
            "id", "robaws_article_id", "article_code", "article_name", "category",
            "unit_type", "unit_price", "currency", "carrier_code", "service_type",
            "pol", "pol_code", "pod", "pod_code", "vehicle_category",
            "is_parent_item", "effective_update_date", "effective_validity_date",
        ]
