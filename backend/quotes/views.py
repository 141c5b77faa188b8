# quotes/views.py
import logging

from django.db import transaction
from django.db.models import Q
from django.shortcuts import get_object_or_404
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from accounts.permissions import IsOwnerOrStaff, IsStaffRole
from robaws.client import RobawsConfigurationError
from robaws.services.push_service import RobawsQuotationPushService

from .models import QuotationRequest, QuotationRequestArticle
from .serializers import (
    AddArticleSerializer,
    CustomerQuotationRequestSerializer,
    MarkQuotedSerializer,
    QuotationCommodityItemSerializer,
    QuotationRequestArticleSerializer,
    QuotationRequestSerializer,
)

logger = logging.getLogger(__name__)


class QuotationRequestViewSet(viewsets.ModelViewSet):
    """
    Quotation requests. Staff see every request; customers only their own.
    Deleting a request soft-deletes it so its number is never reused.
    """
    permission_classes = [IsAuthenticated, IsOwnerOrStaff]

    def get_serializer_class(self):
        if self.request.user.is_staff_role:
            return QuotationRequestSerializer
        return CustomerQuotationRequestSerializer

    def get_queryset(self):
        user = self.request.user
        qs = (QuotationRequest.objects
              .select_related("pricing_tier", "selected_carrier", "customer_user")
              .prefetch_related("articles__article", "commodity_items"))
        if not user.is_staff_role:
            qs = qs.filter(customer_user=user)

        params = self.request.query_params
        if params.get("status"):
            qs = qs.filter(status=params["status"])
        if params.get("source"):
            qs = qs.from_source(params["source"])
        search = (params.get("search") or "").strip()
        if search:
            qs = qs.filter(
                Q(request_number__icontains=search)
                | Q(client_name__icontains=search)
                | Q(contact_email__icontains=search)
                | Q(customer_reference__icontains=search)
            )
        return qs.order_by("-created_at")

    def perform_create(self, serializer):
        user = self.request.user
        if user.is_staff_role:
            serializer.save()
            return
        serializer.save(
            customer_user=user,
            source="customer",
            robaws_client_id=user.robaws_client_id or None,
            client_name=serializer.validated_data.get("client_name") or user.company_name,
            client_email=serializer.validated_data.get("client_email") or user.email,
        )

    @action(detail=True, methods=["post"], url_path="articles")
    def add_article(self, request, pk=None):
        quotation = self.get_object()
        ser = AddArticleSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        with transaction.atomic():
            line = quotation.add_article(
                ser.validated_data["article"],
                ser.validated_data["quantity"],
                ser.validated_data.get("formula_inputs") or None,
            )
        quotation.refresh_from_db()
        return Response({
            "line": QuotationRequestArticleSerializer(line).data,
            "articles": QuotationRequestArticleSerializer(quotation.articles.all(), many=True).data,
            "total_incl_vat": str(quotation.total_incl_vat),
        }, status=status.HTTP_201_CREATED)

    @action(detail=True, methods=["delete"], url_path=r"articles/(?P<line_id>\d+)")
    def remove_article(self, request, pk=None, line_id=None):
        quotation = self.get_object()
        line = get_object_or_404(QuotationRequestArticle, pk=line_id, quotation=quotation)
        with transaction.atomic():
            line.delete()
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=True, methods=["post"], url_path="commodity-items")
    def add_commodity_item(self, request, pk=None):
        quotation = self.get_object()
        ser = QuotationCommodityItemSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        extra = {"quotation": quotation}
        if "line_number" not in request.data:
            extra["line_number"] = quotation.commodity_items.count() + 1
        with transaction.atomic():
            item = ser.save(**extra)
        return Response(QuotationCommodityItemSerializer(item).data, status=status.HTTP_201_CREATED)

    @action(detail=True, methods=["post"])
    def recalculate(self, request, pk=None):
        quotation = self.get_object()
        quotation.calculate_totals()
        return Response(self.get_serializer(quotation).data)

    @action(detail=True, methods=["post"], url_path="push-to-robaws", permission_classes=[IsStaffRole])
    def push_to_robaws(self, request, pk=None):
        quotation = self.get_object()
        try:
            result = RobawsQuotationPushService().push(quotation)
        except RobawsConfigurationError as exc:
            logger.error(f"Robaws push for {quotation.request_number} not configured: {exc}")
            return Response({"detail": str(exc)}, status=status.HTTP_502_BAD_GATEWAY)

        if not result.success:
            return Response({"detail": result.error}, status=status.HTTP_502_BAD_GATEWAY)
        return Response({
            "action": result.action,
            "robaws_offer_id": result.offer_id,
            "robaws_offer_number": result.offer_number,
        })

    @action(detail=True, methods=["post"], url_path="mark-quoted", permission_classes=[IsStaffRole])
    def mark_quoted(self, request, pk=None):
        quotation = self.get_object()
        ser = MarkQuotedSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        quotation.mark_quoted(ser.validated_data.get("expires_in_days"))
        return Response(self.get_serializer(quotation).data)
