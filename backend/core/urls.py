from django.urls import path
from rest_framework.routers import DefaultRouter

from .views import (
    PortAliasAnalyzeView,
    PortAliasAuditLoadView,
    PortAliasBulkCreateView,
    PortOptionsView,
    PortResolveView,
    PortViewSet,
    ShippingCarrierViewSet,
)

router = DefaultRouter()
router.register(r'ports', PortViewSet, basename='ports')
router.register(r'carriers', ShippingCarrierViewSet, basename='carriers')

urlpatterns = [
    path('ports/resolve', PortResolveView.as_view(), name='port-resolve'),
    path('port-aliases/analyze', PortAliasAnalyzeView.as_view(), name='port-alias-analyze'),
    path('port-aliases/bulk', PortAliasBulkCreateView.as_view(), name='port-alias-bulk'),
    path('port-aliases/audit', PortAliasAuditLoadView.as_view(), name='port-alias-audit'),
    path('port-aliases/port-options', PortOptionsView.as_view(), name='port-alias-port-options'),
]
urlpatterns += router.urls
