from django.urls import path
from rest_framework.routers import DefaultRouter

from .views import PricingProfileViewSet, PricingRuleViewSet, PricingTierViewSet, VatPreviewView

router = DefaultRouter()
router.register(r'pricing/tiers', PricingTierViewSet, basename='pricing-tiers')
router.register(r'pricing/profiles', PricingProfileViewSet, basename='pricing-profiles')
router.register(r'pricing/rules', PricingRuleViewSet, basename='pricing-rules')

urlpatterns = [
    path('pricing/vat-preview', VatPreviewView.as_view(), name='pricing-vat-preview'),
]
urlpatterns += router.urls
