from rest_framework import status, views, viewsets
from rest_framework.response import Response

from accounts.permissions import CanManagePricing, IsStaffRole
from core.services.port_resolution import PortResolutionService
from pricing.models import PricingProfile, PricingRule, PricingTier
from pricing.serializers import (
    PricingProfileSerializer,
    PricingRuleSerializer,
    PricingTierSerializer,
    VatPreviewSerializer,
)
from pricing.services.exceptions import ConfigurationError
from pricing.services.vat_resolver import determine_project_vat_code, vat_rate_for_code


class PricingTierViewSet(viewsets.ModelViewSet):
    queryset = PricingTier.objects.all().order_by("sort_order", "code")
    serializer_class = PricingTierSerializer
    permission_classes = [CanManagePricing]


class PricingProfileViewSet(viewsets.ModelViewSet):
    queryset = PricingProfile.objects.all().select_related("carrier").prefetch_related("rules")
    serializer_class = PricingProfileSerializer
    permission_classes = [CanManagePricing]


class PricingRuleViewSet(viewsets.ModelViewSet):
    queryset = PricingRule.objects.all().select_related("profile")
    serializer_class = PricingRuleSerializer
    permission_classes = [CanManagePricing]


class VatPreviewView(views.APIView):
    """POST /api/pricing/vat-preview: VAT code and rate for a route, from port text or country codes."""
    permission_classes = [IsStaffRole]

    def post(self, request):
        ser = VatPreviewSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        data = ser.validated_data

        ports = PortResolutionService()
        pol_country = data.get("pol_country") or ports.country_code_for(data.get("pol"))
        pod_country = data.get("pod_country") or ports.country_code_for(data.get("pod"))
        try:
            code = determine_project_vat_code(pol_country, pod_country, data.get("customer_country"))
            rate = vat_rate_for_code(code)
        except ConfigurationError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)

        return Response({
            "pol_country": pol_country,
            "pod_country": pod_country,
            "project_vat_code": code,
            "vat_rate": str(rate),
        })
