from django.core.management.base import BaseCommand, CommandError
from accounts.models import CustomUser


class Command(BaseCommand):
    help = "Link a customer portal user to a Robaws client id so pricing profiles and VAT resolve for them."

    def add_arguments(self, parser):
        parser.add_argument("--username", required=True, help="Portal username (e.g., customer_user)")
        parser.add_argument("--client-id", required=True, help="Robaws client id")
        parser.add_argument("--country", default="", help="Customer country code (ISO-2)")

    def handle(self, *args, **options):
        username = options["username"]
        try:
            user = CustomUser.objects.get(username=username)
        except CustomUser.DoesNotExist:
            raise CommandError(f"User '{username}' does not exist. Create it first (e.g., manage.py create_test_users).")

        if user.role != 'customer':
            raise CommandError(f"User '{username}' has role '{user.role}'; only customers are linked to Robaws clients.")

        user.robaws_client_id = options["client_id"]
        update_fields = ["robaws_client_id"]
        if options["country"]:
            user.country_code = options["country"].upper()[:2]
            update_fields.append("country_code")
        user.save(update_fields=update_fields)

        self.stdout.write(self.style.SUCCESS(f"Linked '{username}' to Robaws client {user.robaws_client_id}"))
