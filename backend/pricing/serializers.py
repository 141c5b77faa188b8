from rest_framework import serializers

from .models import PricingProfile, PricingRule, PricingTier


class PricingTierSerializer(serializers.ModelSerializer):
    class Meta:
        model = PricingTier
        fields = ["id", "code", "name", "description", "margin_percentage", "is_active", "sort_order"]


class PricingRuleSerializer(serializers.ModelSerializer):
    class Meta:
        model = PricingRule
        fields = ["id", "profile", "vehicle_category", "unit_basis", "margin_type", "margin_value", "priority", "is_active"]


class PricingProfileSerializer(serializers.ModelSerializer):
    rules = PricingRuleSerializer(many=True, read_only=True)
    scope = serializers.CharField(read_only=True)

    class Meta:
        model = PricingProfile
        fields = [
            "id", "name", "carrier", "robaws_client_id", "currency",
            "effective_from", "effective_to", "is_active", "notes", "scope", "rules",
        ]

    def validate(self, attrs):
        start = attrs.get("effective_from", getattr(self.instance, "effective_from", None))
        end = attrs.get("effective_to", getattr(self.instance, "effective_to", None))
        if start and end and end < start:
            raise serializers.ValidationError({"effective_to": "Must be on or after effective_from."})
        return attrs


class VatPreviewSerializer(serializers.Serializer):
    pol = serializers.CharField(required=False, allow_blank=True)
    pod = serializers.CharField(required=False, allow_blank=True)
    pol_country = serializers.CharField(required=False, allow_blank=True, max_length=2)
    pod_country = serializers.CharField(required=False, allow_blank=True, max_length=2)
    customer_country = serializers.CharField(required=False, allow_blank=True, max_length=2)
