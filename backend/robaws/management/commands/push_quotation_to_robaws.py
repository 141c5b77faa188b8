from django.core.management.base import BaseCommand, CommandError

from quotes.models import QuotationRequest
from robaws.client import RobawsApiClient, RobawsConfigurationError
from robaws.services.push_service import RobawsQuotationPushService


class Command(BaseCommand):
    help = "Push one quotation request (by id or request number), or every pending one, to Robaws as an offer."

    def add_arguments(self, parser):
        parser.add_argument("quotation", nargs="?", help="Quotation id or request number (QR-YYYY-NNNN)")
        parser.add_argument(
            "--pending",
            action="store_true",
            help="Push all quotations not yet synced (sync status empty, pending or failed)",
        )

    def _lookup(self, ref):
        qs = QuotationRequest.objects.all()
        quotation = qs.filter(request_number=ref).first()
        if quotation is None and str(ref).isdigit():
            quotation = qs.filter(pk=int(ref)).first()
        if quotation is None:
            raise CommandError(f"Quotation '{ref}' not found")
        return quotation

    def handle(self, *args, **options):
        ref = options.get("quotation")
        if bool(ref) == bool(options["pending"]):
            raise CommandError("Pass either a quotation id or --pending")

        if ref:
            quotations = [self._lookup(ref)]
        else:
            quotations = list(
                QuotationRequest.objects.exclude(robaws_sync_status="synced")
                .filter(articles__isnull=False)
                .distinct()
                .order_by("created_at")
            )

        try:
            service = RobawsQuotationPushService(client=RobawsApiClient())
        except RobawsConfigurationError as exc:
            raise CommandError(str(exc))

        pushed = failed = 0
        for quotation in quotations:
            result = service.push(quotation)
            if result.success:
                pushed += 1
                self.stdout.write(
                    self.style.SUCCESS(f"{quotation.request_number}: {result.action} offer {result.offer_number or result.offer_id}")
                )
            else:
                failed += 1
                self.stdout.write(self.style.ERROR(f"{quotation.request_number}: {result.error}"))

        summary = f"Pushed {pushed} quotation(s), {failed} failed."
        self.stdout.write(self.style.WARNING(summary) if failed else self.style.SUCCESS(summary))
