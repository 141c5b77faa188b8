import json

from django.core.management.base import BaseCommand, CommandError

from articles.models import RobawsArticleCache
from core.services.port_resolution import PortResolutionService


class Command(BaseCommand):
    help = (
        "Resolve the POL/POD text of every cached Robaws article and report the inputs "
        "that do not map to a port. The --json output can be pasted into the alias workbench."
    )

    def add_arguments(self, parser):
        parser.add_argument("--json", action="store_true", help="Print the report as JSON")
        parser.add_argument("--output", help="Write the JSON report to this file")

    def handle(self, *args, **options):
        resolver = PortResolutionService()
        unresolved = []
        checked = 0

        articles = RobawsArticleCache.objects.filter(is_active=True).only("pol", "pod")
        for article in articles.iterator():
            for value in (article.pol, article.pod):
                if not value:
                    continue
                checked += 1
                _, missing = resolver.resolve_many_with_report(value)
                for token in missing:
                    if token not in unresolved:
                        unresolved.append(token)

        report = {"checked": checked, "unresolved_robaws_inputs": unresolved}

        if options.get("output"):
            try:
                with open(options["output"], "w", encoding="utf-8") as fh:
                    json.dump(report, fh, indent=2)
            except OSError as exc:
                raise CommandError(f"Could not write report: {exc}")
            self.stdout.write(self.style.SUCCESS(f"Report written to {options['output']}"))

        if options.get("json"):
            self.stdout.write(json.dumps(report, indent=2))
            return

        if not unresolved:
            self.stdout.write(self.style.SUCCESS(f"All {checked} port references resolved."))
            return

        self.stdout.write(self.style.WARNING(f"{len(unresolved)} unresolved port reference(s) out of {checked}:"))
        for token in unresolved:
            self.stdout.write(f"  - {token}")
