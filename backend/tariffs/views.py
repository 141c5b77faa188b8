import logging

from django.db import DatabaseError
from rest_framework import status, views, viewsets
from rest_framework.response import Response

from accounts.permissions import CanManageTariffs

from .models import CarrierArticleMapping
from .serializers import (
    CarrierArticleMappingSerializer,
    CarrierPurchaseTariffSerializer,
    DatesSerializer,
    SavePortSerializer,
)
from .services.exceptions import TariffNotFoundError, TariffValidationError
from .services.rates_overview import RatesOverviewService

logger = logging.getLogger(__name__)


def _service(request):
    return RatesOverviewService(carrier_code=request.query_params.get("carrier") or "GRIMALDI")


def _failed(exc, code=status.HTTP_400_BAD_REQUEST):
    return Response({"detail": f"Failed to save: {exc}"}, status=code)


class CarrierArticleMappingViewSet(viewsets.ModelViewSet):
    serializer_class = CarrierArticleMappingSerializer
    permission_classes = [CanManageTariffs]

    def get_queryset(self):
        qs = CarrierArticleMapping.objects.select_related("carrier", "article")
        carrier = self.request.query_params.get("carrier")
        if carrier:
            qs = qs.filter(carrier__code__iexact=carrier)
        return qs


class RatesMatrixView(views.APIView):
    """GET /api/tariffs/rates?carrier=GRIMALDI"""
    permission_classes = [CanManageTariffs]

    def get(self, request):
        try:
            matrix = _service(request).rates_matrix()
        except TariffNotFoundError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_404_NOT_FOUND)

        for row in matrix["ports"].values():
            for column, cell in row["categories"].items():
                if cell is None:
                    continue
                tariff = cell.pop("tariff")
                cell["tariff"] = CarrierPurchaseTariffSerializer(tariff).data if tariff else None
        return Response(matrix)


class SavePortRatesView(views.APIView):
    permission_classes = [CanManageTariffs]

    def post(self, request, port_code):
        ser = SavePortSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        try:
            updated = _service(request).save_port(port_code.upper(), ser.validated_data["edits"])
        except TariffNotFoundError as exc:
            return _failed(exc, status.HTTP_404_NOT_FOUND)
        except (TariffValidationError, DatabaseError) as exc:
            logger.warning(f"Rates for {port_code} not saved: {exc}")
            return _failed(exc)
        return Response({"updated": updated, "detail": f"Saved {updated} tariff(s) for {port_code.upper()}"})


class PortDatesView(views.APIView):
    permission_classes = [CanManageTariffs]

    def post(self, request, port_code):
        ser = DatesSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        try:
            result = _service(request).apply_port_dates(port_code.upper(), **ser.validated_data)
        except TariffNotFoundError as exc:
            return _failed(exc, status.HTTP_404_NOT_FOUND)
        except TariffValidationError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)
        return Response({
            "updated": result.updated,
            "pushed": result.pushed,
            "failed": result.failed,
            "detail": result.message,
        })

    def delete(self, request, port_code):
        try:
            cleared = _service(request).clear_port_dates(port_code.upper())
        except TariffNotFoundError as exc:
            return _failed(exc, status.HTTP_404_NOT_FOUND)
        return Response({"cleared": cleared})


class BulkDatesView(views.APIView):
    permission_classes = [CanManageTariffs]

    def post(self, request):
        ser = DatesSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        try:
            updated = _service(request).apply_bulk_dates(**ser.validated_data)
        except TariffNotFoundError as exc:
            return _failed(exc, status.HTTP_404_NOT_FOUND)
        return Response({"updated": updated})

    def delete(self, request):
        try:
            cleared = _service(request).clear_bulk_dates()
        except TariffNotFoundError as exc:
            return _failed(exc, status.HTTP_404_NOT_FOUND)
        return Response({"cleared": cleared})
