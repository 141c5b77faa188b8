import re

from django.db import models

_PUNCTUATION = re.compile(r"[^\w\s()]", re.UNICODE)
_WHITESPACE = re.compile(r"\s+")


def normalize_alias(value) -> str:
    """Canonical form used to match aliases: trimmed, unquoted, single-spaced, lowercase."""
    if value is None:
        return ""
    text = str(value).strip().strip("\"'").strip()
    text = _PUNCTUATION.sub(" ", text)
    text = _WHITESPACE.sub(" ", text)
    return text.strip().lower()


class Port(models.Model):
    SEA_PORT = 'SEA_PORT'
    AIRPORT = 'AIRPORT'
    CATEGORY_CHOICES = [(SEA_PORT, 'Seaport'), (AIRPORT, 'Airport')]

    name = models.CharField(max_length=255)
    code = models.CharField(max_length=10, unique=True)
    country = models.CharField(max_length=100, blank=True, default='')
    country_code = models.CharField(max_length=2, blank=True, default='')
    region = models.CharField(max_length=100, blank=True, default='')
    unlocode = models.CharField(max_length=5, blank=True, null=True)
    city_unlocode = models.CharField(max_length=5, blank=True, null=True)
    port_category = models.CharField(max_length=10, choices=CATEGORY_CHOICES, default=SEA_PORT)
    iata_code = models.CharField(max_length=3, blank=True, null=True)
    icao_code = models.CharField(max_length=4, blank=True, null=True)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['name']
        indexes = [
            models.Index(fields=['unlocode'], name='core_port_unlocod_6f1d2a_idx'),
            models.Index(fields=['iata_code'], name='core_port_iata_co_0b7c3e_idx'),
            models.Index(fields=['country_code'], name='core_port_country_9e4a51_idx'),
        ]

    @property
    def is_airport(self) -> bool:
        return self.port_category == self.AIRPORT

    def format_full(self) -> str:
        label = f"{self.name} ({self.code})"
        return f"{label}, {self.country}" if self.country else label

    def format_short(self) -> str:
        return f"{self.name} ({self.code})"

    @property
    def display_name(self) -> str:
        if self.is_airport:
            return f"{self.name} – Airport ({self.iata_code or self.code})"
        return f"{self.name} – Seaport"

    def __str__(self):
        return self.format_short()


class PortAlias(models.Model):
    TYPE_CHOICES = [
        ('name_variant', 'Name variant'),
        ('code_variant', 'Code variant'),
        ('typo', 'Typo'),
        ('other', 'Other'),
    ]

    port = models.ForeignKey(Port, on_delete=models.CASCADE, related_name='aliases')
    alias = models.CharField(max_length=255)
    alias_normalized = models.CharField(max_length=255, unique=True, editable=False)
    alias_type = models.CharField(max_length=20, choices=TYPE_CHOICES, default='name_variant')
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name_plural = 'port aliases'
        ordering = ['alias']

    def save(self, *args, **kwargs):
        self.alias = (self.alias or '').strip()
        self.alias_normalized = normalize_alias(self.alias)
        return super().save(*args, **kwargs)

    def __str__(self):
        return f"{self.alias} → {self.port.code}"


class ShippingCarrier(models.Model):
    name = models.CharField(max_length=255)
    code = models.CharField(max_length=50, unique=True)
    service_types = models.JSONField(default=list, blank=True)
    website = models.URLField(blank=True, default='')
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['name']

    def __str__(self):
        return f"{self.name} ({self.code})"
