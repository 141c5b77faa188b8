from django.urls import path
from rest_framework.routers import DefaultRouter

from .views import BulkDatesView, CarrierArticleMappingViewSet, PortDatesView, RatesMatrixView, SavePortRatesView

router = DefaultRouter()
router.register(r'tariffs/mappings', CarrierArticleMappingViewSet, basename='tariff-mappings')

urlpatterns = [
    path('tariffs/rates', RatesMatrixView.as_view(), name='tariff-rates'),
    path('tariffs/rates/dates', BulkDatesView.as_view(), name='tariff-bulk-dates'),
    path('tariffs/rates/<str:port_code>', SavePortRatesView.as_view(), name='tariff-port-save'),
    path('tariffs/rates/<str:port_code>/dates', PortDatesView.as_view(), name='tariff-port-dates'),
]
urlpatterns += router.urls
