import pytest
from django.core.management import call_command
from django.core.management.base import CommandError
from rest_framework.test import APIClient

from accounts.models import CustomUser

pytestmark = pytest.mark.django_db


class TestLogin:
    def test_login_returns_token_and_role(self):
        CustomUser.objects.create_user(username="finance", password="s3cret", role="finance")
        resp = APIClient().post("/api/auth/login/", {"username": "finance", "password": "s3cret"}, format="json")
        assert resp.status_code == 200
        body = resp.json()
        assert body["role"] == "finance"
        assert body["username"] == "finance"
        assert body["token"]

    def test_bad_credentials(self):
        resp = APIClient().post("/api/auth/login/", {"username": "nobody", "password": "x"}, format="json")
        assert resp.status_code == 401
        assert resp.json() == {"detail": "Invalid credentials"}


class TestRegister:
    def test_registered_users_are_customers(self):
        resp = APIClient().post(
            "/api/auth/register/",
            {"username": "belgaco", "password": "pw", "company_name": "Belgaco", "country_code": "nl"},
            format="json",
        )
        assert resp.status_code == 201
        user = CustomUser.objects.get(username="belgaco")
        assert user.is_customer
        assert not user.is_staff_role
        assert user.country_code == "NL"

    def test_duplicate_username(self):
        CustomUser.objects.create_user(username="belgaco", password="pw", role="customer")
        resp = APIClient().post("/api/auth/register/", {"username": "belgaco", "password": "pw"}, format="json")
        assert resp.status_code == 400


class TestLinkRobawsClient:
    def test_links_customer(self):
        CustomUser.objects.create_user(username="belgaco", password="pw", role="customer")
        call_command("link_robaws_client", "--username", "belgaco", "--client-id", "4242", "--country", "be")
        user = CustomUser.objects.get(username="belgaco")
        assert user.robaws_client_id == "4242"
        assert user.country_code == "BE"

    def test_staff_cannot_be_linked(self):
        CustomUser.objects.create_user(username="sales", password="pw", role="sales")
        with pytest.raises(CommandError):
            call_command("link_robaws_client", "--username", "sales", "--client-id", "1")
