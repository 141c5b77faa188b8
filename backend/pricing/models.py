from decimal import Decimal

from django.db import models
from django.db.models import Q
from django.utils import timezone

from pricing.services.utils import apply_margin, d


class PricingTier(models.Model):
    """Customer pricing tier. Positive margin = markup, negative = discount."""

    code = models.CharField(max_length=10, unique=True)
    name = models.CharField(max_length=100)
    description = models.TextField(blank=True, default='')
    margin_percentage = models.DecimalField(max_digits=6, decimal_places=2, default=Decimal('0'))
    is_active = models.BooleanField(default=True)
    sort_order = models.PositiveIntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['sort_order', 'code']

    @property
    def is_discount(self) -> bool:
        return self.margin_percentage < 0

    def calculate_selling_price(self, base_price) -> Decimal:
        return apply_margin(base_price, self.margin_percentage)

    def __str__(self):
        return f"{self.code} - {self.name} ({self.margin_percentage:+}%)"


class PricingProfileQuerySet(models.QuerySet):
    def valid_on(self, on=None):
        """Active profiles whose window contains the date; open bounds are always valid."""
        on = on or timezone.localdate()
        return self.filter(is_active=True).filter(
            Q(effective_from__isnull=True) | Q(effective_from__lte=on),
            Q(effective_to__isnull=True) | Q(effective_to__gte=on),
        )


class PricingProfile(models.Model):
    name = models.CharField(max_length=255)
    carrier = models.ForeignKey(
        'core.ShippingCarrier', null=True, blank=True, on_delete=models.CASCADE, related_name='pricing_profiles'
    )
    robaws_client_id = models.CharField(max_length=64, null=True, blank=True)
    currency = models.CharField(max_length=3, default='EUR')
    effective_from = models.DateField(null=True, blank=True)
    effective_to = models.DateField(null=True, blank=True)
    is_active = models.BooleanField(default=True)
    notes = models.TextField(blank=True, default='')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = PricingProfileQuerySet.as_manager()

    class Meta:
        ordering = ['name']
        indexes = [
            models.Index(fields=['carrier', 'robaws_client_id'], name='pricing_pro_carrier_2c8f1e_idx'),
        ]

    @property
    def scope(self) -> str:
        if self.robaws_client_id:
            return 'client'
        if self.carrier_id:
            return 'carrier'
        return 'global'

    def __str__(self):
        return f"{self.name} [{self.scope}]"


class PricingRule(models.Model):
    FIXED = 'FIXED'
    PERCENT = 'PERCENT'
    MARGIN_TYPE_CHOICES = [(FIXED, 'Fixed amount'), (PERCENT, 'Percentage')]

    profile = models.ForeignKey(PricingProfile, on_delete=models.CASCADE, related_name='rules')
    vehicle_category = models.CharField(max_length=50, null=True, blank=True)
    unit_basis = models.CharField(max_length=20, null=True, blank=True)
    margin_type = models.CharField(max_length=10, choices=MARGIN_TYPE_CHOICES, default=PERCENT)
    margin_value = models.DecimalField(max_digits=12, decimal_places=2)
    priority = models.IntegerField(default=0)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-priority', 'id']

    def save(self, *args, **kwargs):
        self.vehicle_category = (self.vehicle_category or '').strip().upper() or None
        self.unit_basis = (self.unit_basis or '').strip().upper() or None
        super().save(*args, **kwargs)

    def margin_for(self, base_price) -> Decimal:
        if self.margin_type == self.FIXED:
            return d(self.margin_value)
        return d(base_price) * d(self.margin_value) / Decimal('100')

    def __str__(self):
        target = f"{self.vehicle_category or '*'}/{self.unit_basis or '*'}"
        return f"{self.profile.name}: {target} {self.margin_type} {self.margin_value}"
