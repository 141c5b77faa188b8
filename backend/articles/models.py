from decimal import Decimal

from django.conf import settings
from django.db import models

from pricing.services.utils import apply_margin, d, q2


def role_margin(role, article_margins=None) -> Decimal:
    """Profit margin (percent) for a customer role: article override, then settings, then the default."""
    cfg = settings.QUOTATION
    key = (role or '').strip().upper()
    if key and article_margins:
        for name, value in article_margins.items():
            if str(name).strip().upper() == key and value not in (None, ''):
                return d(value)
    if key and key in cfg.get('role_margins', {}):
        return d(cfg['role_margins'][key])
    return d(cfg.get('default_margin', 15))


class RobawsArticleCache(models.Model):
    """Local copy of a Robaws article, enriched with routing and carrier metadata."""

    robaws_article_id = models.CharField(max_length=64, unique=True)
    article_code = models.CharField(max_length=100, blank=True, default='')
    article_name = models.CharField(max_length=255)
    description = models.TextField(blank=True, default='')
    category = models.CharField(max_length=50, blank=True, default='')
    unit_type = models.CharField(max_length=20, blank=True, default='UNIT')
    unit_price = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0'))
    cost_price = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)
    currency = models.CharField(max_length=3, default='EUR')

    shipping_carrier = models.ForeignKey(
        'core.ShippingCarrier', null=True, blank=True, on_delete=models.SET_NULL, related_name='articles'
    )
    service_type = models.CharField(max_length=50, blank=True, default='')
    pol = models.CharField(max_length=255, blank=True, default='')
    pol_code = models.CharField(max_length=10, blank=True, default='')
    pod = models.CharField(max_length=255, blank=True, default='')
    pod_code = models.CharField(max_length=10, blank=True, default='')
    vehicle_category = models.CharField(max_length=50, blank=True, default='')
    category_group = models.CharField(max_length=50, blank=True, default='')

    is_parent_item = models.BooleanField(default=False)
    is_active = models.BooleanField(default=True)
    applicable_services = models.JSONField(default=list, blank=True)
    profit_margins = models.JSONField(default=dict, blank=True)
    # {"ocean_freight": ..., "divisor": ..., "fixed_amount": ...}
    pricing_formula = models.JSONField(null=True, blank=True)

    update_date = models.DateField(null=True, blank=True)
    validity_date = models.DateField(null=True, blank=True)
    update_date_override = models.DateField(null=True, blank=True)
    validity_date_override = models.DateField(null=True, blank=True)
    last_pushed_dates_at = models.DateTimeField(null=True, blank=True)
    last_pushed_update_date = models.DateField(null=True, blank=True)
    last_pushed_validity_date = models.DateField(null=True, blank=True)
    last_synced_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['article_name']
        indexes = [
            models.Index(fields=['article_code'], name='articles_ro_article_4b1e0c_idx'),
            models.Index(fields=['pod_code', 'vehicle_category'], name='articles_ro_pod_cod_8d2f7a_idx'),
        ]

    @property
    def effective_update_date(self):
        return self.update_date_override or self.update_date

    @property
    def effective_validity_date(self):
        return self.validity_date_override or self.validity_date

    @property
    def has_formula(self) -> bool:
        return bool(self.pricing_formula) and bool(self.pricing_formula.get('divisor'))

    def formula_price(self, inputs=None):
        """ocean_freight / divisor + fixed_amount; inputs override the stored formula values."""
        if not self.has_formula:
            return None
        formula = dict(self.pricing_formula)
        formula.update({k: v for k, v in (inputs or {}).items() if v not in (None, '')})
        divisor = d(formula.get('divisor'))
        if divisor == 0:
            return None
        return q2(d(formula.get('ocean_freight')) / divisor + d(formula.get('fixed_amount')))

    def base_price(self, formula_inputs=None) -> Decimal:
        price = self.formula_price(formula_inputs)
        return price if price is not None else d(self.unit_price)

    def price_for_role(self, role, formula_inputs=None) -> Decimal:
        margin = role_margin(role, self.profit_margins)
        return q2(apply_margin(self.base_price(formula_inputs), margin))

    def price_for_tier(self, tier, formula_inputs=None) -> Decimal:
        return q2(tier.calculate_selling_price(self.base_price(formula_inputs)))

    def __str__(self):
        return f"{self.article_code} - {self.article_name}" if self.article_code else self.article_name


class ArticleChild(models.Model):
    REQUIRED = 'required'
    OPTIONAL = 'optional'
    CONDITIONAL = 'conditional'
    CHILD_TYPE_CHOICES = [(REQUIRED, 'Required'), (OPTIONAL, 'Optional'), (CONDITIONAL, 'Conditional')]

    parent = models.ForeignKey(RobawsArticleCache, on_delete=models.CASCADE, related_name='child_links')
    child = models.ForeignKey(RobawsArticleCache, on_delete=models.CASCADE, related_name='parent_links')
    child_type = models.CharField(max_length=12, choices=CHILD_TYPE_CHOICES, default=REQUIRED)
    conditions = models.JSONField(null=True, blank=True)
    default_quantity = models.DecimalField(max_digits=12, decimal_places=4, null=True, blank=True)
    sort_order = models.PositiveIntegerField(default=0)

    class Meta:
        ordering = ['sort_order', 'id']
        constraints = [
            models.UniqueConstraint(fields=['parent', 'child'], name='uniq_article_child_link'),
        ]

    def __str__(self):
        return f"{self.parent} → {self.child} ({self.child_type})"
