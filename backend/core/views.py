from __future__ import annotations

import json
import logging

from django.db.models import Q
from rest_framework import status, views, viewsets
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from accounts.permissions import IsStaffRole
from core.models import Port, ShippingCarrier
from core.serializers import (
    AliasAnalyzeSerializer,
    AliasBulkCreateSerializer,
    AuditLoadSerializer,
    PortSerializer,
    ShippingCarrierSerializer,
)
from core.services import port_alias_workbench as workbench
from core.services.port_resolution import PortResolutionService

logger = logging.getLogger(__name__)


class PortViewSet(viewsets.ReadOnlyModelViewSet):
    serializer_class = PortSerializer
    permission_classes = [IsAuthenticated]

    def get_queryset(self):
        qs = Port.objects.filter(is_active=True)
        search = (self.request.query_params.get("search") or "").strip()
        if search:
            qs = qs.filter(Q(name__icontains=search) | Q(code__icontains=search)).distinct()
        category = self.request.query_params.get("category")
        if category:
            qs = qs.filter(port_category=category.upper())
        return qs.order_by("name")


class ShippingCarrierViewSet(viewsets.ReadOnlyModelViewSet):
    queryset = ShippingCarrier.objects.filter(is_active=True).order_by("name")
    serializer_class = ShippingCarrierSerializer
    permission_classes = [IsAuthenticated]


class PortResolveView(views.APIView):
    """GET /api/ports/resolve?q=CAS/TFN"""
    permission_classes = [IsAuthenticated]

    def get(self, request):
        query = request.query_params.get("q") or ""
        if not query.strip():
            return Response({"detail": "q is required"}, status=status.HTTP_400_BAD_REQUEST)

        ports, unresolved = PortResolutionService().resolve_many_with_report(query)
        return Response({
            "ports": PortSerializer(ports, many=True).data,
            "unresolved": unresolved,
        })


class PortAliasAnalyzeView(views.APIView):
    permission_classes = [IsStaffRole]

    def post(self, request):
        ser = AliasAnalyzeSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        lines = ser.validated_data["input"].splitlines()
        results = workbench.analyze(lines, split_combined=ser.validated_data["split_combined"])
        resolved = sum(1 for r in results if r["ports"])
        unresolved = sum(1 for r in results if r["unresolved"])
        return Response({
            "results": results,
            "summary": f"Processed {len(results)} line(s). {resolved} resolved, {unresolved} with unresolved tokens.",
        })


class PortAliasBulkCreateView(views.APIView):
    permission_classes = [IsStaffRole]

    def post(self, request):
        ser = AliasBulkCreateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        result = workbench.bulk_create(ser.validated_data["mappings"])
        return Response(
            {
                "created": result.created,
                "skipped": result.skipped,
                "conflicts": result.conflicts,
                "message": result.message,
            },
            status=status.HTTP_201_CREATED if result.created else status.HTTP_200_OK,
        )


class PortAliasAuditLoadView(views.APIView):
    permission_classes = [IsStaffRole]

    def post(self, request):
        ser = AuditLoadSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        try:
            tokens = workbench.load_audit(ser.validated_data["audit_json"])
        except (json.JSONDecodeError, ValueError) as exc:
            return Response({"detail": f"Failed to parse audit JSON: {exc}"}, status=status.HTTP_400_BAD_REQUEST)
        return Response({"lines": tokens, "message": f"Added {len(tokens)} unresolved token(s) to input."})


class PortOptionsView(views.APIView):
    permission_classes = [IsStaffRole]

    def get(self, request):
        options = workbench.port_options(request.query_params.get("search", ""))
        return Response([{"id": pk, "label": label} for pk, label in options.items()])
