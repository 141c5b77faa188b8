import logging

from django.db.models.signals import post_save, pre_save
from django.dispatch import receiver

from pricing.services.vat_resolver import VatResolver, vat_rate_for_code
from quotes.models import QuotationRequest

logger = logging.getLogger(__name__)

FALLBACK_VAT_CODE = "21% VF"
VAT_FIELDS = ('pol', 'pod', 'robaws_client_id', 'project_vat_code')
CHILD_FIELDS = ('pod', 'in_transit_to')
# Saves restricted to these fields never touch routing or VAT.
_ROUTE_INPUTS = {'pol', 'pod', 'robaws_client_id', 'customer_user', 'in_transit_to'}


def _skip(update_fields) -> bool:
    return update_fields is not None and not (_ROUTE_INPUTS & set(update_fields))


@receiver(pre_save, sender=QuotationRequest)
def assign_project_vat_code(sender, instance, update_fields=None, raw=False, **kwargs):
    if raw or _skip(update_fields):
        return

    previous = None
    if instance.pk:
        previous = (
            QuotationRequest.all_objects.filter(pk=instance.pk)
            .values(*set(VAT_FIELDS + CHILD_FIELDS))
            .first()
        )
    instance._previous_values = previous

    try:
        instance.project_vat_code = VatResolver().determine_project_vat_code(instance)
    except Exception as exc:
        logger.warning(f"VAT code resolution failed for {instance}: {exc}; using default")
        instance.project_vat_code = FALLBACK_VAT_CODE


@receiver(post_save, sender=QuotationRequest)
def refresh_vat_and_children(sender, instance, created, update_fields=None, raw=False, **kwargs):
    if raw or _skip(update_fields):
        return

    previous = getattr(instance, '_previous_values', None) or {}
    instance._previous_values = None

    def changed(fields):
        return created or any(previous.get(f) != getattr(instance, f) for f in fields)

    if changed(VAT_FIELDS):
        try:
            instance.vat_rate = vat_rate_for_code(instance.project_vat_code)
            instance.calculate_totals()
        except Exception:
            logger.exception(f"Failed to recalculate VAT for quotation {instance.request_number}")

    if not created and changed(CHILD_FIELDS):
        try:
            instance.sync_conditional_children()
        except Exception:
            logger.exception(f"Failed to refresh conditional articles for quotation {instance.request_number}")
