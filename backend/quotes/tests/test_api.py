from decimal import Decimal
from unittest.mock import patch

import pytest
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient

from quotes.models import QuotationRequest
from robaws.services.push_service import PushResult

pytestmark = pytest.mark.django_db


@pytest.fixture
def customer(create_user):
    return create_user("belgaco", role="customer", robaws_client_id="4242", company_name="Belgaco BV")


@pytest.fixture
def staff_client(create_user):
    client = APIClient()
    client.force_authenticate(user=create_user("sales", role="sales"))
    return client


@pytest.fixture
def customer_client(customer):
    client = APIClient()
    client.force_authenticate(user=customer)
    return client


class TestVisibility:
    def test_customers_only_see_their_own(self, customer, customer_client):
        own = QuotationRequest.objects.create(customer_user=customer, client_name="Belgaco")
        QuotationRequest.objects.create(client_name="Someone else")

        resp = customer_client.get(reverse("quotations-list"))
        assert resp.status_code == status.HTTP_200_OK
        assert [row["id"] for row in resp.data] == [own.id]

    def test_staff_see_everything(self, staff_client, customer):
        QuotationRequest.objects.create(customer_user=customer)
        QuotationRequest.objects.create()
        resp = staff_client.get(reverse("quotations-list"))
        assert len(resp.data) == 2

    def test_customer_cannot_open_foreign_request(self, customer_client):
        other = QuotationRequest.objects.create()
        resp = customer_client.get(reverse("quotations-detail", args=[other.id]))
        assert resp.status_code == status.HTTP_404_NOT_FOUND

    def test_anonymous_rejected(self):
        resp = APIClient().get(reverse("quotations-list"))
        assert resp.status_code in (status.HTTP_401_UNAUTHORIZED, status.HTTP_403_FORBIDDEN)


class TestCreate:
    def test_customer_create_is_bound_to_customer(self, customer, customer_client):
        resp = customer_client.post(
            reverse("quotations-list"),
            {"pol": "Antwerp", "pod": "Dakar", "status": "quoted", "robaws_client_id": "999"},
            format="json",
        )
        assert resp.status_code == status.HTTP_201_CREATED, resp.data

        quotation = QuotationRequest.objects.get(pk=resp.data["id"])
        assert quotation.customer_user == customer
        assert quotation.source == "customer"
        assert quotation.status == QuotationRequest.PENDING
        assert quotation.robaws_client_id == "4242"
        assert quotation.client_name == "Belgaco BV"
        assert quotation.request_number

    def test_staff_create(self, staff_client):
        resp = staff_client.post(reverse("quotations-list"), {"client_name": "Walk-in", "source": "intake"}, format="json")
        assert resp.status_code == status.HTTP_201_CREATED
        assert resp.data["source"] == "intake"

    def test_destroy_is_soft(self, staff_client):
        quotation = QuotationRequest.objects.create()
        resp = staff_client.delete(reverse("quotations-detail", args=[quotation.id]))
        assert resp.status_code == status.HTTP_204_NO_CONTENT
        assert QuotationRequest.all_objects.get(pk=quotation.id).deleted_at is not None


class TestLines:
    def test_add_and_remove_article(self, staff_client, quotation, make_article):
        article = make_article("250.00", unit_type="LM")
        url = reverse("quotations-add-article", args=[quotation.id])

        resp = staff_client.post(url, {"article_id": article.id, "quantity": "1.5000"}, format="json")
        assert resp.status_code == status.HTTP_201_CREATED, resp.data
        assert resp.data["line"]["subtotal"] == "375.00"
        assert resp.data["total_incl_vat"] == "453.75"

        line_id = resp.data["line"]["id"]
        resp = staff_client.delete(reverse("quotations-remove-article", args=[quotation.id, line_id]))
        assert resp.status_code == status.HTTP_204_NO_CONTENT
        quotation.refresh_from_db()
        assert quotation.subtotal == Decimal("0.00")

    def test_add_inactive_article_rejected(self, staff_client, quotation, make_article):
        article = make_article("10.00", is_active=False)
        resp = staff_client.post(
            reverse("quotations-add-article", args=[quotation.id]), {"article_id": article.id}, format="json"
        )
        assert resp.status_code == status.HTTP_400_BAD_REQUEST

    def test_add_commodity_item_numbers_lines(self, staff_client, quotation):
        url = reverse("quotations-add-commodity-item", args=[quotation.id])
        staff_client.post(url, {"make": "Toyota", "length_cm": "450", "width_cm": "180", "height_cm": "150"}, format="json")
        resp = staff_client.post(url, {"make": "Volvo"}, format="json")
        assert resp.status_code == status.HTTP_201_CREATED
        assert resp.data["line_number"] == 2
        assert quotation.commodity_items.first().cbm == Decimal("12.1500")


class TestStaffActions:
    def test_customer_cannot_push(self, customer, customer_client):
        quotation = QuotationRequest.objects.create(customer_user=customer)
        resp = customer_client.post(reverse("quotations-push-to-robaws", args=[quotation.id]))
        assert resp.status_code == status.HTTP_403_FORBIDDEN

    @patch("quotes.views.RobawsQuotationPushService")
    def test_push_failure_is_bad_gateway(self, service, staff_client, quotation):
        service.return_value.push.return_value = PushResult(success=False, error="Robaws API error (500)")
        resp = staff_client.post(reverse("quotations-push-to-robaws", args=[quotation.id]))
        assert resp.status_code == status.HTTP_502_BAD_GATEWAY
        assert resp.data["detail"] == "Robaws API error (500)"

    @patch("quotes.views.RobawsQuotationPushService")
    def test_push_success(self, service, staff_client, quotation):
        service.return_value.push.return_value = PushResult(
            success=True, offer_id="777", offer_number="O2026-0012", action="create"
        )
        resp = staff_client.post(reverse("quotations-push-to-robaws", args=[quotation.id]))
        assert resp.status_code == status.HTTP_200_OK
        assert resp.data == {"action": "create", "robaws_offer_id": "777", "robaws_offer_number": "O2026-0012"}

    def test_mark_quoted(self, staff_client, quotation):
        resp = staff_client.post(
            reverse("quotations-mark-quoted", args=[quotation.id]), {"expires_in_days": 30}, format="json"
        )
        assert resp.status_code == status.HTTP_200_OK
        assert resp.data["status"] == "quoted"
        assert resp.data["expires_at"] is not None
