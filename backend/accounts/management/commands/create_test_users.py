from django.core.management.base import BaseCommand
from django.contrib.auth.hashers import make_password
from rest_framework.authtoken.models import Token

from accounts.models import CustomUser


class Command(BaseCommand):
    help = 'Create test users for every role (staff roles plus a portal customer) and print their tokens'

    def handle(self, *args, **options):
        users_data = [
            {'username': 'sales_user', 'password': 'sales_password', 'role': 'sales'},
            {'username': 'manager_user', 'password': 'manager_password', 'role': 'manager'},
            {'username': 'finance_user', 'password': 'finance_password', 'role': 'finance'},
            {
                'username': 'customer_user',
                'password': 'customer_password',
                'role': 'customer',
                'company_name': 'Demo Customer BV',
                'country_code': 'BE',
            },
        ]

        for user_data in users_data:
            if CustomUser.objects.filter(username=user_data['username']).exists():
                self.stdout.write(
                    self.style.WARNING(f"User {user_data['username']} already exists")
                )
                continue

            password = user_data.pop('password')
            user = CustomUser.objects.create(password=make_password(password), **user_data)
            token, _ = Token.objects.get_or_create(user=user)

            self.stdout.write(
                self.style.SUCCESS(f"Created {user.role} user: {user.username} (token {token.key})")
            )

        self.stdout.write(self.style.SUCCESS("All test users created successfully!"))
