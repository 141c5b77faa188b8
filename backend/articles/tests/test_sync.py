from datetime import date
from decimal import Decimal
from io import StringIO
from unittest.mock import MagicMock, patch

import pytest
from django.core.management import call_command
from django.core.management.base import CommandError

from articles.models import RobawsArticleCache
from articles.services.sync import ArticleSyncService, article_defaults, is_parent_item
from robaws.client import RobawsConfigurationError

pytestmark = pytest.mark.django_db

ARTICLES = [
    {"id": 101, "code": "GANRLOSCAR", "name": "Seafreight Antwerp - Lagos CAR", "salePrice": "1250,00", "unit": "unit",
     "extraFields": {"C965754A-4523-4916-A127-3522DE1A7001": {"booleanValue": True}}},
    {"id": 102, "articleNumber": "ADMIN", "description": "Admin fee", "price": 50},
    {"name": "No id"},
]


def _client(items):
    client = MagicMock()
    client.iter_articles.return_value = iter(items)
    return client


class TestDefaults:
    def test_field_fallbacks(self):
        values = article_defaults(ARTICLES[1])
        assert values["article_code"] == "ADMIN"
        assert values["article_name"] == "Admin fee"
        assert values["unit_price"] == Decimal("50")
        assert values["currency"] == "EUR"
        assert values["is_parent_item"] is False

    def test_comma_price_and_parent_flag(self):
        values = article_defaults(ARTICLES[0])
        assert values["unit_price"] == Decimal("1250.00")
        assert values["is_parent_item"] is True

    def test_parent_flag_from_custom_fields(self):
        assert is_parent_item({"custom_fields": {"parent_item": 1}}) is True


class TestArticleSync:
    def test_upserts_and_keeps_overrides(self):
        existing = RobawsArticleCache.objects.create(
            robaws_article_id="101", article_name="Old name", update_date_override=date(2026, 10, 1)
        )

        result = ArticleSyncService(_client(ARTICLES)).sync()

        assert result == {"created": 1, "updated": 1, "skipped": 1, "deactivated": 0}
        existing.refresh_from_db()
        assert existing.article_name == "Seafreight Antwerp - Lagos CAR"
        assert existing.update_date_override == date(2026, 10, 1)
        assert existing.last_synced_at is not None

    def test_deactivate_missing(self):
        stale = RobawsArticleCache.objects.create(robaws_article_id="999", article_name="Gone")
        result = ArticleSyncService(_client(ARTICLES[:2])).sync(deactivate_missing=True)

        assert result["deactivated"] == 1
        stale.refresh_from_db()
        assert stale.is_active is False


class TestCommand:
    @patch("articles.management.commands.sync_robaws_articles.RobawsApiClient")
    def test_command(self, client_cls):
        client_cls.return_value.iter_articles.return_value = iter(ARTICLES[:1])
        out = StringIO()
        call_command("sync_robaws_articles", stdout=out)
        assert "1 created" in out.getvalue()

    @patch("articles.management.commands.sync_robaws_articles.RobawsApiClient")
    def test_configuration_error(self, client_cls):
        client_cls.side_effect = RobawsConfigurationError("Robaws API key is not configured. Set ROBAWS_API_KEY.")
        with pytest.raises(CommandError):
            call_command("sync_robaws_articles")
