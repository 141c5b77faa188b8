from django.core.management.base import BaseCommand, CommandError

from tariffs.models import CarrierPurchaseTariff
from tariffs.services.tariff_date_sync import TariffDateSyncService


class Command(BaseCommand):
    help = "Copy update/validity dates of active purchase tariffs onto their mapped articles' date overrides."

    def add_arguments(self, parser):
        parser.add_argument("--carrier", help="Only tariffs of this carrier code (e.g. GRIMALDI)")
        parser.add_argument("--dry-run", action="store_true", help="Report what would change without saving")

    def handle(self, *args, **options):
        tariffs = CarrierPurchaseTariff.objects.active().select_related("mapping__article", "mapping__carrier")
        if options.get("carrier"):
            tariffs = tariffs.filter(mapping__carrier__code__iexact=options["carrier"])
            if not tariffs.exists():
                raise CommandError(f"No active tariffs for carrier {options['carrier']}")

        service = TariffDateSyncService()
        synced = 0
        seen = set()
        # the first tariff per mapping is the current one
        for tariff in tariffs.order_by("mapping_id", "-effective_from", "sort_order", "id"):
            if tariff.mapping_id in seen:
                continue
            seen.add(tariff.mapping_id)
            article = tariff.mapping.article
            differs = (
                article.update_date_override != tariff.update_date
                or article.validity_date_override != tariff.validity_date
            )
            if not differs:
                continue
            if options["dry_run"]:
                self.stdout.write(f"Would sync {article.article_code or article.pk}: {tariff.update_date} / {tariff.validity_date}")
                synced += 1
            elif service.sync_tariff_dates_to_article(tariff):
                synced += 1

        verb = "Would sync" if options["dry_run"] else "Synced"
        self.stdout.write(self.style.SUCCESS(f"{verb} dates for {synced} article(s)."))
