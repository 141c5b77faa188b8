import logging
from datetime import timedelta
from decimal import Decimal

from django.conf import settings
from django.db import IntegrityError, models, transaction
from django.utils import timezone

from pricing.services.article_pricing import selling_price_for
from pricing.services.utils import ZERO, d, percent_of, q2, q4
from quotes.services.condition_matcher import ConditionMatcher
from quotes.services.numbering import next_request_number

logger = logging.getLogger(__name__)


class QuotationRequestQuerySet(models.QuerySet):
    def pending(self):
        return self.filter(status=QuotationRequest.PENDING)

    def processing(self):
        return self.filter(status=QuotationRequest.PROCESSING)

    def quoted(self):
        return self.filter(status=QuotationRequest.QUOTED)

    def from_source(self, source):
        return self.filter(source=source)

    def deleted(self):
        return self.filter(deleted_at__isnull=False)

    def delete(self):
        # Bulk deletes (admin "Delete selected") soft-delete too, so numbers stay reserved.
        count = self.filter(deleted_at__isnull=True).update(deleted_at=timezone.now())
        logger.info(f"Soft-deleted {count} quotation(s)")
        return count, {self.model._meta.label: count}

    delete.alters_data = True
    delete.queryset_only = True

    def hard_delete(self):
        return super().delete()

    hard_delete.alters_data = True
    hard_delete.queryset_only = True


class ActiveQuotationManager(models.Manager.from_queryset(QuotationRequestQuerySet)):
    def get_queryset(self):
        return super().get_queryset().filter(deleted_at__isnull=True)


class QuotationRequest(models.Model):
    SOURCE_CHOICES = [('prospect', 'Prospect'), ('customer', 'Customer'), ('intake', 'Intake')]
    TRADE_DIRECTION_CHOICES = [('import', 'Import'), ('export', 'Export'), ('cross_trade', 'Cross trade')]
    SYNC_CHOICES = [('pending', 'Pending'), ('synced', 'Synced'), ('failed', 'Failed')]

    PENDING = 'pending'
    PROCESSING = 'processing'
    QUOTED = 'quoted'
    ACCEPTED = 'accepted'
    REJECTED = 'rejected'
    EXPIRED = 'expired'
    STATUS_CHOICES = [
        (PENDING, 'Pending'),
        (PROCESSING, 'Processing'),
        (QUOTED, 'Quoted'),
        (ACCEPTED, 'Accepted'),
        (REJECTED, 'Rejected'),
        (EXPIRED, 'Expired'),
    ]

    request_number = models.CharField(max_length=32, unique=True, blank=True)
    source = models.CharField(max_length=20, choices=SOURCE_CHOICES, default='prospect')
    requester_type = models.CharField(max_length=20, blank=True, default='')

    client_name = models.CharField(max_length=255, blank=True, default='')
    client_email = models.EmailField(blank=True, default='')
    client_tel = models.CharField(max_length=50, blank=True, default='')
    robaws_client_id = models.CharField(max_length=64, null=True, blank=True)
    contact_name = models.CharField(max_length=255, blank=True, default='')
    contact_email = models.EmailField(blank=True, default='')
    contact_phone = models.CharField(max_length=50, blank=True, default='')
    customer_reference = models.CharField(max_length=255, blank=True, default='')
    customer_user = models.ForeignKey(
        settings.AUTH_USER_MODEL, null=True, blank=True, on_delete=models.SET_NULL, related_name='quotation_requests'
    )

    service_type = models.CharField(max_length=50, blank=True, default='')
    simple_service_type = models.CharField(max_length=50, blank=True, default='')
    trade_direction = models.CharField(max_length=20, choices=TRADE_DIRECTION_CHOICES, blank=True, default='')
    por = models.CharField(max_length=255, blank=True, default='')
    pol = models.CharField(max_length=255, blank=True, default='')
    pod = models.CharField(max_length=255, blank=True, default='')
    fdest = models.CharField(max_length=255, blank=True, default='')
    in_transit_to = models.CharField(max_length=255, blank=True, default='')
    cargo_description = models.TextField(blank=True, default='')

    customer_role = models.CharField(max_length=50, blank=True, default='')
    customer_type = models.CharField(max_length=50, blank=True, default='')
    pricing_tier = models.ForeignKey(
        'pricing.PricingTier', null=True, blank=True, on_delete=models.SET_NULL, related_name='quotation_requests'
    )
    selected_carrier = models.ForeignKey(
        'core.ShippingCarrier', null=True, blank=True, on_delete=models.SET_NULL, related_name='quotation_requests'
    )

    subtotal = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0'))
    discount_amount = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0'))
    discount_percentage = models.DecimalField(max_digits=5, decimal_places=2, default=Decimal('0'))
    total_excl_vat = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0'))
    vat_rate = models.DecimalField(max_digits=5, decimal_places=2, null=True, blank=True)
    vat_amount = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0'))
    total_incl_vat = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0'))
    pricing_currency = models.CharField(max_length=3, default='EUR')
    project_vat_code = models.CharField(max_length=50, blank=True, default='')

    robaws_offer_id = models.CharField(max_length=64, null=True, blank=True)
    robaws_offer_number = models.CharField(max_length=64, null=True, blank=True)
    robaws_sync_status = models.CharField(max_length=10, choices=SYNC_CHOICES, null=True, blank=True)
    robaws_synced_at = models.DateTimeField(null=True, blank=True)

    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=PENDING)
    quoted_at = models.DateTimeField(null=True, blank=True)
    expires_at = models.DateTimeField(null=True, blank=True)
    deleted_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = ActiveQuotationManager()
    all_objects = QuotationRequestQuerySet.as_manager()

    class Meta:
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['status', '-created_at'], name='quotes_quot_status_3c7e91_idx'),
            models.Index(fields=['customer_user', '-created_at'], name='quotes_quot_custome_a2f5d0_idx'),
        ]

    def _number_taken(self) -> bool:
        return QuotationRequest.all_objects.filter(request_number=self.request_number).exclude(pk=self.pk).exists()

    def save(self, *args, **kwargs):
        if not self.request_number or self._number_taken():
            original = self.request_number
            self.request_number = next_request_number()
            if original:
                logger.info(f"Request number {original} already used, assigned {self.request_number}")

        if not self._state.adding:
            return super().save(*args, **kwargs)

        for attempt in range(3):
            try:
                with transaction.atomic():
                    return super().save(*args, **kwargs)
            except IntegrityError:
                if attempt == 2 or not self._number_taken():
                    raise
                self.request_number = next_request_number()
                logger.warning(f"Request number collision, retrying with {self.request_number}")

    def delete(self, using=None, keep_parents=False):
        """Soft delete: the row and its request number stay reserved."""
        self.deleted_at = timezone.now()
        QuotationRequest.all_objects.filter(pk=self.pk).update(deleted_at=self.deleted_at)
        logger.info(f"Soft-deleted quotation {self.request_number}")

    def hard_delete(self, using=None, keep_parents=False):
        return super().delete(using=using, keep_parents=keep_parents)

    def restore(self):
        self.deleted_at = None
        QuotationRequest.all_objects.filter(pk=self.pk).update(deleted_at=None)

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None

    @property
    def is_expired(self) -> bool:
        return bool(self.expires_at and self.expires_at < timezone.now())

    @property
    def route_display(self) -> str:
        return f"{self.pol or 'N/A'} → {self.pod or 'N/A'}"

    def effective_vat_rate(self) -> Decimal:
        if self.vat_rate is not None:
            return d(self.vat_rate)
        return d(settings.QUOTATION.get('vat_rate', 21))

    def calculate_totals(self):
        """Recompute money totals from the article lines and persist them without firing signals."""
        subtotal = q2(sum((d(v) for v in self.articles.values_list('subtotal', flat=True)), ZERO))
        self.subtotal = subtotal
        if d(self.discount_percentage) > 0:
            self.discount_amount = q2(percent_of(subtotal, self.discount_percentage))
        self.total_excl_vat = q2(subtotal - d(self.discount_amount))
        self.vat_amount = q2(percent_of(self.total_excl_vat, self.effective_vat_rate()))
        self.total_incl_vat = q2(self.total_excl_vat + self.vat_amount)

        QuotationRequest.all_objects.filter(pk=self.pk).update(
            subtotal=self.subtotal,
            discount_amount=self.discount_amount,
            total_excl_vat=self.total_excl_vat,
            vat_rate=self.vat_rate,
            vat_amount=self.vat_amount,
            total_incl_vat=self.total_incl_vat,
            project_vat_code=self.project_vat_code,
        )

    def add_article(self, article, quantity=1, formula_inputs=None):
        price = selling_price_for(article, self, formula_inputs)
        return QuotationRequestArticle.objects.create(
            quotation=self,
            article=article,
            item_type=QuotationRequestArticle.PARENT if article.is_parent_item else QuotationRequestArticle.STANDALONE,
            quantity=q4(quantity),
            unit_type=article.unit_type,
            unit_price=article.unit_price,
            selling_price=price.selling_price,
            currency=article.currency,
            formula_inputs=formula_inputs or None,
        )

    def apply_commodity_quantities(self):
        """Non-LM lines follow the total commodity quantity; LM lines keep their measured quantity."""
        total = sum(self.commodity_items.values_list('quantity', flat=True))
        if total > 0:
            for line in self.articles.select_related('article'):
                line.quotation = self
                if (line.unit_type or '').strip().upper() != 'LM' and line.quantity != total:
                    line.quantity = Decimal(total)
                    line.save()
        self.calculate_totals()

    def sync_conditional_children(self):
        for line in self.articles.filter(item_type=QuotationRequestArticle.PARENT).select_related('article'):
            line.quotation = self
            line.sync_conditional_children()

    def mark_quoted(self, expires_in_days=None):
        self.status = self.QUOTED
        self.quoted_at = timezone.now()
        if expires_in_days:
            self.expires_at = self.quoted_at + timedelta(days=expires_in_days)
        self.save(update_fields=['status', 'quoted_at', 'expires_at', 'updated_at'])

    def __str__(self):
        return self.request_number or f"Quotation #{self.pk}"


class QuotationRequestArticle(models.Model):
    PARENT = 'parent'
    CHILD = 'child'
    STANDALONE = 'standalone'
    ITEM_TYPE_CHOICES = [(PARENT, 'Parent'), (CHILD, 'Child'), (STANDALONE, 'Standalone')]

    quotation = models.ForeignKey(QuotationRequest, on_delete=models.CASCADE, related_name='articles')
    article = models.ForeignKey('articles.RobawsArticleCache', on_delete=models.PROTECT, related_name='quotation_lines')
    parent_article = models.ForeignKey(
        'articles.RobawsArticleCache', null=True, blank=True, on_delete=models.CASCADE, related_name='+'
    )
    item_type = models.CharField(max_length=12, choices=ITEM_TYPE_CHOICES, default=STANDALONE)
    quantity = models.DecimalField(max_digits=12, decimal_places=4, default=Decimal('1'))
    unit_type = models.CharField(max_length=20, blank=True, default='')
    unit_price = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0'))
    selling_price = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0'))
    subtotal = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0'))
    currency = models.CharField(max_length=3, default='EUR')
    formula_inputs = models.JSONField(null=True, blank=True)
    notes = models.TextField(blank=True, default='')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['id']

    def save(self, *args, **kwargs):
        creating = self._state.adding
        self.quantity = q4(self.quantity)
        if self.formula_inputs and self.article.has_formula:
            self.selling_price = selling_price_for(self.article, self.quotation, self.formula_inputs).selling_price
        self.subtotal = q2(d(self.quantity) * d(self.selling_price))
        super().save(*args, **kwargs)

        if creating and self.item_type == self.PARENT:
            self.add_child_articles()
        self.quotation.calculate_totals()

    def delete(self, using=None, keep_parents=False):
        quotation = self.quotation
        if self.item_type == self.PARENT:
            self.children().delete()
        result = super().delete(using=using, keep_parents=keep_parents)
        quotation.calculate_totals()
        return result

    def children(self):
        return QuotationRequestArticle.objects.filter(
            quotation_id=self.quotation_id, parent_article_id=self.article_id, item_type=self.CHILD
        )

    def _add_child(self, link):
        child = link.child
        if self.children().filter(article=child).exists():
            return None
        return QuotationRequestArticle.objects.create(
            quotation=self.quotation,
            article=child,
            parent_article=self.article,
            item_type=self.CHILD,
            quantity=self.quantity,
            unit_type=child.unit_type,
            unit_price=child.unit_price,
            selling_price=selling_price_for(child, self.quotation).selling_price,
            currency=child.currency,
        )

    def add_child_articles(self):
        """Add required children, and conditional children whose conditions match the quotation."""
        matcher = ConditionMatcher()
        for link in self.article.child_links.select_related('child'):
            if link.child_type == link.REQUIRED:
                self._add_child(link)
            elif link.child_type == link.CONDITIONAL and matcher.matches(link.conditions, self.quotation):
                self._add_child(link)

    def sync_conditional_children(self):
        matcher = ConditionMatcher()
        for link in self.article.child_links.filter(child_type='conditional').select_related('child'):
            if matcher.matches(link.conditions, self.quotation):
                if self._add_child(link):
                    logger.info(f"Added conditional child {link.child} to {self.quotation}")
            else:
                removed, _ = self.children().filter(article=link.child).delete()
                if removed:
                    logger.info(f"Removed conditional child {link.child} from {self.quotation}")
        self.quotation.calculate_totals()

    def __str__(self):
        return f"{self.article} × {self.quantity}"


class QuotationCommodityItem(models.Model):
    MIN_LM_WIDTH_CM = Decimal('250')
    LM_DIVISOR = Decimal('2.5')

    quotation = models.ForeignKey(QuotationRequest, on_delete=models.CASCADE, related_name='commodity_items')
    line_number = models.PositiveIntegerField(default=1)
    commodity_type = models.CharField(max_length=50, blank=True, default='')
    category = models.CharField(max_length=50, blank=True, default='')
    make = models.CharField(max_length=100, blank=True, default='')
    type_model = models.CharField(max_length=100, blank=True, default='')
    quantity = models.PositiveIntegerField(default=1)
    length_cm = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)
    width_cm = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)
    height_cm = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)
    weight_kg = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)
    cbm = models.DecimalField(max_digits=12, decimal_places=4, null=True, blank=True)
    lm = models.DecimalField(max_digits=12, decimal_places=4, null=True, blank=True)
    unit_price = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)
    line_total = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)
    extra_info = models.TextField(blank=True, default='')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['line_number', 'id']

    def calculate_cbm(self) -> Decimal:
        return q4(d(self.length_cm) * d(self.width_cm) * d(self.height_cm) / Decimal('1000000'))

    def calculate_lm(self) -> Decimal:
        """Loading metres: length × max(width, 2.5 m) / 2.5."""
        width = max(d(self.width_cm), self.MIN_LM_WIDTH_CM)
        return q4((d(self.length_cm) / 100) * (width / 100) / self.LM_DIVISOR)

    def save(self, *args, **kwargs):
        if self.length_cm and self.width_cm and self.height_cm:
            self.cbm = self.calculate_cbm()
        if self.length_cm and self.width_cm:
            self.lm = self.calculate_lm()
        if self.unit_price:
            self.line_total = q2(d(self.unit_price) * self.quantity)
        super().save(*args, **kwargs)
        self.quotation.apply_commodity_quantities()

    def delete(self, using=None, keep_parents=False):
        quotation = self.quotation
        result = super().delete(using=using, keep_parents=keep_parents)
        quotation.apply_commodity_quantities()
        return result

    def __str__(self):
        return f"{self.line_number}. {self.make} {self.type_model}".strip()
