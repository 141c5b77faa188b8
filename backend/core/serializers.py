from rest_framework import serializers

from .models import Port, PortAlias, ShippingCarrier


class PortSerializer(serializers.ModelSerializer):
    display_name = serializers.CharField(read_only=True)
    label = serializers.SerializerMethodField()

    class Meta:
        model = Port
        fields = [
            "id", "name", "code", "country", "country_code", "region",
            "unlocode", "port_category", "iata_code", "icao_code",
            "is_active", "display_name", "label",
        ]

    def get_label(self, obj):
        return obj.format_full()


class PortAliasSerializer(serializers.ModelSerializer):
    class Meta:
        model = PortAlias
        fields = ["id", "port", "alias", "alias_normalized", "alias_type", "is_active"]
        read_only_fields = ("alias_normalized",)


class ShippingCarrierSerializer(serializers.ModelSerializer):
    class Meta:
        model = ShippingCarrier
        fields = ["id", "name", "code", "service_types", "is_active"]


class AliasAnalyzeSerializer(serializers.Serializer):
    input = serializers.CharField()
    split_combined = serializers.BooleanField(default=True)


class AliasMappingSerializer(serializers.Serializer):
    token = serializers.CharField()
    port_id = serializers.IntegerField(required=False, allow_null=True)
    alias_type = serializers.ChoiceField(choices=PortAlias.TYPE_CHOICES, default="name_variant")
    is_active = serializers.BooleanField(default=True)


class AliasBulkCreateSerializer(serializers.Serializer):
    mappings = AliasMappingSerializer(many=True)


class AuditLoadSerializer(serializers.Serializer):
    audit_json = serializers.CharField()
