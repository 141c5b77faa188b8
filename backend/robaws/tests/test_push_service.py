from decimal import Decimal
from unittest.mock import MagicMock

import pytest
from django.core.management import call_command

from articles.models import RobawsArticleCache
from core.models import ShippingCarrier
from quotes.models import QuotationRequest
from robaws.client import RobawsApiError
from robaws.mapper import EXTRA_SCHEMA, build_extra_fields
from robaws.services.push_service import RobawsQuotationPushService

pytestmark = pytest.mark.django_db


@pytest.fixture
def quotation():
    carrier = ShippingCarrier.objects.create(name="Grimaldi", code="GRIMALDI")
    quotation = QuotationRequest.objects.create(
        client_name="Belgaco",
        contact_email="ops@belgaco.test",
        robaws_client_id="4242",
        pol="Antwerp",
        pod="Lagos",
        selected_carrier=carrier,
    )
    article = RobawsArticleCache.objects.create(
        robaws_article_id="1001", article_code="GANRLOSCAR", article_name="Seafreight CAR", unit_price=Decimal("900")
    )
    quotation.add_article(article, Decimal("1.5"))
    return quotation


@pytest.fixture
def client():
    return MagicMock()


@pytest.fixture
def service(client):
    svc = RobawsQuotationPushService(client=client)
    svc.offer_number_delay = 0
    return svc


class TestPayload:
    def test_payload_shape(self, service, quotation):
        payload = service.build_payload(quotation, "4242")

        assert payload["project"] == quotation.request_number
        assert payload["clientId"] == 4242
        assert payload["customerId"] == 4242
        assert payload["status"] == "Draft"
        assert payload["externalId"] == f"bconnect_quotation_{quotation.pk}"
        assert payload["lineItems"] == [{"articleId": 1001, "quantity": 1}]
        assert payload["extraFields"]["POL"] == {"stringValue": "Antwerp"}
        assert payload["extraFields"]["SHIPPING_LINE"] == {"stringValue": "Grimaldi"}

    def test_empty_values_dropped(self, service, quotation):
        payload = service.build_payload(quotation, "4242")
        assert "POR" not in payload["extraFields"]
        assert all(value not in (None, "", [], {}) for value in payload.values())

    def test_extra_field_codes_are_known_to_robaws(self, service, quotation):
        values = service.extra_field_values(quotation)
        assert set(values) <= set(EXTRA_SCHEMA)
        assert set(build_extra_fields(values)) == {k for k, v in values.items() if v}
        assert values["CUSTOMER"] == "Belgaco"
        assert values["CONTACT_EMAIL"] == "ops@belgaco.test"

    def test_idempotency_key_is_stable(self, service, quotation):
        payload = service.build_payload(quotation, "4242")
        key = service.idempotency_key(quotation, payload)
        assert key.startswith(f"quotation_{quotation.pk}_")
        assert key == service.idempotency_key(quotation, dict(reversed(list(payload.items()))))


class TestPush:
    def test_create_fetches_missing_offer_number(self, service, client, quotation):
        client.create_offer.return_value = {"id": 555}
        client.get_offer.side_effect = [{}, {"logicId": "O2026-0042"}]

        result = service.push(quotation)

        assert result.success
        assert result.action == "create"
        quotation.refresh_from_db()
        assert quotation.robaws_offer_id == "555"
        assert quotation.robaws_offer_number == "O2026-0042"
        assert quotation.robaws_sync_status == "synced"
        assert quotation.robaws_synced_at is not None

    def test_existing_offer_is_updated(self, service, client, quotation):
        QuotationRequest.objects.filter(pk=quotation.pk).update(robaws_offer_id="555")
        quotation.refresh_from_db()
        client.update_offer.return_value = {"id": 555, "offerNumber": "O2026-0042"}

        result = service.push(quotation)

        assert result.action == "update"
        assert client.update_offer.call_args.args[0] == "555"
        client.create_offer.assert_not_called()

    def test_api_failure_marks_failed(self, service, client, quotation):
        client.create_offer.side_effect = RobawsApiError("Robaws POST /api/v2/offers returned 500: Error", status_code=500)

        result = service.push(quotation)

        assert not result.success
        quotation.refresh_from_db()
        assert quotation.robaws_sync_status == "failed"

    def test_customer_client_id_used_and_stored(self, service, client, quotation, django_user_model):
        user = django_user_model.objects.create_user(username="belgaco", password="x", role="customer", robaws_client_id="7")
        QuotationRequest.objects.filter(pk=quotation.pk).update(robaws_client_id=None, customer_user=user)
        quotation.refresh_from_db()
        client.create_offer.return_value = {"id": 1, "number": "O1"}

        assert service.push(quotation).success
        assert client.create_offer.call_args.args[0]["clientId"] == 7
        quotation.refresh_from_db()
        assert quotation.robaws_client_id == "7"

    def test_unresolved_client(self, service, client, quotation):
        QuotationRequest.objects.filter(pk=quotation.pk).update(robaws_client_id=None)
        quotation.refresh_from_db()

        result = service.push(quotation)

        assert result.error == "Unable to resolve Robaws client."
        client.create_offer.assert_not_called()
        quotation.refresh_from_db()
        assert quotation.robaws_sync_status == "failed"

    def test_no_articles(self, service, client):
        result = service.push(QuotationRequest.objects.create(robaws_client_id="1"))
        assert not result.success
        client.create_offer.assert_not_called()


class TestCommand:
    def test_push_pending(self, quotation, monkeypatch):
        pushed = []

        def fake_push(self, q):
            pushed.append(q.pk)
            return MagicMock(success=True, action="create", offer_number="O1", offer_id="1")

        monkeypatch.setattr("robaws.management.commands.push_quotation_to_robaws.RobawsApiClient", MagicMock())
        monkeypatch.setattr(RobawsQuotationPushService, "push", fake_push)
        QuotationRequest.objects.create(client_name="Empty")

        call_command("push_quotation_to_robaws", "--pending")
        assert pushed == [quotation.pk]

    def test_requires_one_target(self):
        from django.core.management.base import CommandError

        with pytest.raises(CommandError):
            call_command("push_quotation_to_robaws")
