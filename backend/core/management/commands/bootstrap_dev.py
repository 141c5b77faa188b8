# backend/core/management/commands/bootstrap_dev.py
import os
from django.conf import settings
from django.core.management.base import BaseCommand
from django.contrib.auth import get_user_model
from rest_framework.authtoken.models import Token

from core.models import Port, ShippingCarrier

DEV_PORTS = [
    # code, name, country, country_code, unlocode, category, iata
    ("ANR", "Antwerp", "Belgium", "BE", "BEANR", Port.SEA_PORT, None),
    ("ZEE", "Zeebrugge", "Belgium", "BE", "BEZEE", Port.SEA_PORT, None),
    ("RTM", "Rotterdam", "Netherlands", "NL", "NLRTM", Port.SEA_PORT, None),
    ("LOS", "Lagos", "Nigeria", "NG", "NGLOS", Port.SEA_PORT, None),
    ("COO", "Cotonou", "Benin", "BJ", "BJCOO", Port.SEA_PORT, None),
    ("ABJ", "Abidjan", "Ivory Coast", "CI", "CIABJ", Port.SEA_PORT, None),
    ("DKR", "Dakar", "Senegal", "SN", "SNDKR", Port.SEA_PORT, None),
    ("BRU", "Brussels Airport", "Belgium", "BE", None, Port.AIRPORT, "BRU"),
]


class Command(BaseCommand):
    help = "Idempotently ensure a dev superuser + DRF token, known carriers and a handful of ports exist."

    def handle(self, *args, **opts):
        User = get_user_model()
        username = os.getenv("DEV_ADMIN_USER", "admin")
        email = os.getenv("DEV_ADMIN_EMAIL", "admin@example.com")
        password = os.getenv("DEV_ADMIN_PASS", "ChangeMe123!")

        user, created = User.objects.get_or_create(
            username=username,
            defaults={"email": email, "is_staff": True, "is_superuser": True, "role": "manager"},
        )
        if created:
            user.set_password(password)
            user.save()
            self.stdout.write(self.style.SUCCESS(f"Created superuser '{username}'"))
        else:
            self.stdout.write(f"Superuser '{username}' already exists")

        token, _ = Token.objects.get_or_create(user=user)
        self.stdout.write(self.style.SUCCESS(f"TOKEN: {token.key}"))

        carriers = 0
        for name in settings.QUOTATION["known_carriers"]:
            code = name.upper().replace(" ", "_")
            _, made = ShippingCarrier.objects.get_or_create(code=code, defaults={"name": name.title()})
            carriers += int(made)

        ports = 0
        for code, name, country, cc, unlocode, category, iata in DEV_PORTS:
            _, made = Port.objects.get_or_create(
                code=code,
                defaults={
                    "name": name,
                    "country": country,
                    "country_code": cc,
                    "unlocode": unlocode,
                    "port_category": category,
                    "iata_code": iata,
                },
            )
            ports += int(made)

        self.stdout.write(self.style.SUCCESS(f"Seeded {carriers} carrier(s) and {ports} port(s)."))
