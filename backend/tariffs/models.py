from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db import models
from django.db.models import Q
from django.utils import timezone

LUMPSUM = 'LUMPSUM'
LM = 'LM'
UNIT_CHOICES = [(LUMPSUM, 'Lumpsum'), (LM, 'Per LM')]

# Amount/unit column pairs on a purchase tariff, in display order.
SURCHARGE_FIELDS = [
    'base_freight',
    'baf',
    'ets',
    'port_additional',
    'admin_fxe',
    'thc',
    'measurement_costs',
    'congestion_surcharge',
    'iccm',
]
AMOUNT_FIELDS = [f"{name}_amount" for name in SURCHARGE_FIELDS]
UNIT_FIELDS = [f"{name}_unit" for name in SURCHARGE_FIELDS]


class CarrierCategoryGroup(models.Model):
    carrier = models.ForeignKey('core.ShippingCarrier', on_delete=models.CASCADE, related_name='category_groups')
    code = models.CharField(max_length=50)
    display_name = models.CharField(max_length=100)
    vehicle_categories = models.JSONField(default=list, blank=True)
    is_active = models.BooleanField(default=True)
    sort_order = models.PositiveIntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['carrier', 'sort_order', 'code']
        constraints = [
            models.UniqueConstraint(fields=['carrier', 'code'], name='uniq_carrier_category_group'),
        ]

    def __str__(self):
        return f"{self.carrier.code} {self.code}"


class CarrierArticleMapping(models.Model):
    """Links a Robaws article to a carrier, optionally narrowed to ports and vehicle categories."""

    carrier = models.ForeignKey('core.ShippingCarrier', on_delete=models.CASCADE, related_name='article_mappings')
    article = models.ForeignKey(
        'articles.RobawsArticleCache', on_delete=models.CASCADE, related_name='carrier_mappings'
    )
    name = models.CharField(max_length=255, blank=True, default='')
    port_ids = models.JSONField(null=True, blank=True)
    port_group_ids = models.JSONField(null=True, blank=True)
    vehicle_categories = models.JSONField(null=True, blank=True)
    category_group_ids = models.JSONField(null=True, blank=True)
    is_active = models.BooleanField(default=True)
    sort_order = models.PositiveIntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['carrier', 'sort_order', 'id']
        indexes = [
            models.Index(fields=['carrier', 'is_active'], name='tariffs_car_carrier_5a9d3b_idx'),
        ]

    def clean(self):
        super().clean()
        if self.article_id and self.carrier_id:
            article_carrier_id = self.article.shipping_carrier_id
            if article_carrier_id and article_carrier_id != self.carrier_id:
                raise ValidationError({
                    'article': f"Article {self.article} belongs to another carrier and cannot be mapped to {self.carrier}."
                })

    def save(self, *args, **kwargs):
        for field in ('port_ids', 'port_group_ids', 'vehicle_categories', 'category_group_ids'):
            if getattr(self, field) == []:
                setattr(self, field, None)
        super().save(*args, **kwargs)

        article = self.article
        if article.shipping_carrier_id != self.carrier_id:
            article.shipping_carrier_id = self.carrier_id
            article.save(update_fields=['shipping_carrier', 'updated_at'])

    def active_purchase_tariff(self, on=None):
        return self.purchase_tariffs.active(on).order_by('-effective_from', 'sort_order', 'id').first()

    def __str__(self):
        return self.name or f"{self.carrier.code} → {self.article}"


class TariffQuerySet(models.QuerySet):
    def active(self, on=None):
        on = on or timezone.localdate()
        return self.filter(is_active=True).filter(
            Q(effective_from__isnull=True) | Q(effective_from__lte=on),
            Q(effective_to__isnull=True) | Q(effective_to__gte=on),
        )

    def for_carrier(self, carrier):
        return self.filter(mapping__carrier=carrier)


def _amount_field():
    return models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)


def _unit_field():
    return models.CharField(max_length=10, choices=UNIT_CHOICES, default=LUMPSUM)


class CarrierPurchaseTariff(models.Model):
    """Purchase cost for one carrier mapping, valid between two dates."""

    mapping = models.ForeignKey(CarrierArticleMapping, on_delete=models.CASCADE, related_name='purchase_tariffs')
    effective_from = models.DateField(null=True, blank=True)
    effective_to = models.DateField(null=True, blank=True)
    update_date = models.DateField(null=True, blank=True)
    validity_date = models.DateField(null=True, blank=True)
    currency = models.CharField(max_length=3, default='EUR')
    is_active = models.BooleanField(default=True)
    sort_order = models.PositiveIntegerField(default=0)
    source = models.CharField(max_length=50, blank=True, default='')
    notes = models.TextField(blank=True, default='')

    base_freight_amount = _amount_field()
    base_freight_unit = _unit_field()
    baf_amount = _amount_field()
    baf_unit = _unit_field()
    ets_amount = _amount_field()
    ets_unit = _unit_field()
    port_additional_amount = _amount_field()
    port_additional_unit = _unit_field()
    admin_fxe_amount = _amount_field()
    admin_fxe_unit = _unit_field()
    thc_amount = _amount_field()
    thc_unit = _unit_field()
    measurement_costs_amount = _amount_field()
    measurement_costs_unit = _unit_field()
    congestion_surcharge_amount = _amount_field()
    congestion_surcharge_unit = _unit_field()
    iccm_amount = _amount_field()
    iccm_unit = _unit_field()

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = TariffQuerySet.as_manager()

    class Meta:
        ordering = ['-effective_from', 'sort_order', 'id']
        indexes = [
            models.Index(fields=['mapping', 'is_active', 'effective_from'], name='tariffs_car_mapping_e71c40_idx'),
        ]

    def clean(self):
        super().clean()
        errors = {}
        for field in AMOUNT_FIELDS:
            value = getattr(self, field)
            if value is not None and value < 0:
                errors[field] = f"Field {field} must be >= 0"
        for field in UNIT_FIELDS:
            if getattr(self, field) not in (LUMPSUM, LM):
                errors[field] = f"Field {field} must be LUMPSUM or LM"
        if self.effective_from and self.effective_to and self.effective_to < self.effective_from:
            errors['effective_to'] = "effective_to must not be before effective_from"
        if errors:
            raise ValidationError(errors)

    @property
    def article(self):
        return self.mapping.article

    def total_amount(self) -> Decimal:
        return sum((getattr(self, f) for f in AMOUNT_FIELDS if getattr(self, f) is not None), Decimal('0'))

    def __str__(self):
        return f"{self.mapping} from {self.effective_from or '-'}"
