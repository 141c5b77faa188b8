from django.core.management.base import BaseCommand, CommandError

from articles.services.sync import ArticleSyncService
from robaws.client import RobawsApiClient, RobawsApiError


class Command(BaseCommand):
    help = "Page through the Robaws articles API and upsert the local article cache."

    def add_arguments(self, parser):
        parser.add_argument("--page-size", type=int, default=100)
        parser.add_argument(
            "--deactivate-missing",
            action="store_true",
            help="Mark cached articles that Robaws no longer returns as inactive",
        )

    def handle(self, *args, **options):
        try:
            result = ArticleSyncService(RobawsApiClient()).sync(
                page_size=options["page_size"],
                deactivate_missing=options["deactivate_missing"],
            )
        except RobawsApiError as exc:
            raise CommandError(f"Article sync failed: {exc}")

        self.stdout.write(self.style.SUCCESS(
            f"Synced articles: {result['created']} created, {result['updated']} updated, "
            f"{result['skipped']} skipped, {result['deactivated']} deactivated."
        ))
