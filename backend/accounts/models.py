# backend/accounts/models.py

from django.contrib.auth.models import AbstractUser
from django.db import models

STAFF_ROLES = ('sales', 'manager', 'finance')


class CustomUser(AbstractUser):
    ROLE_CHOICES = [
        ('sales', 'Sales'),
        ('manager', 'Manager'),
        ('finance', 'Finance'),
        ('customer', 'Customer'),
    ]
    role = models.CharField(max_length=20, choices=ROLE_CHOICES, default='sales')
    # Customers are linked to their Robaws client record; staff leave it empty
    robaws_client_id = models.CharField(max_length=64, null=True, blank=True)
    company_name = models.CharField(max_length=255, blank=True, default='')
    country_code = models.CharField(max_length=2, blank=True, default='')
    phone = models.CharField(max_length=50, blank=True, default='')
    # Default tier for quotations of this customer that have none of their own
    pricing_tier = models.ForeignKey(
        'pricing.PricingTier', null=True, blank=True, on_delete=models.SET_NULL, related_name='users'
    )

    @property
    def is_customer(self) -> bool:
        return self.role == 'customer'

    @property
    def is_staff_role(self) -> bool:
        return self.is_staff or self.role in STAFF_ROLES

    def __str__(self):
        return f"{self.username} ({self.get_role_display()})"
