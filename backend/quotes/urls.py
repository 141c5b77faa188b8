from rest_framework.routers import DefaultRouter

from .views import QuotationRequestViewSet

router = DefaultRouter()
router.register(r'quotations', QuotationRequestViewSet, basename='quotations')

urlpatterns = router.urls
