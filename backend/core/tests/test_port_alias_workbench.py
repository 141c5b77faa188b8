import json

import pytest
from django.contrib.auth import get_user_model
from rest_framework.test import APIClient

from core.models import Port, PortAlias
from core.services import port_alias_workbench as workbench

pytestmark = pytest.mark.django_db


@pytest.fixture
def lagos():
    return Port.objects.create(name="Lagos", code="LOS", country="Nigeria", country_code="NG")


@pytest.fixture
def cotonou():
    return Port.objects.create(name="Cotonou", code="COO", country="Benin", country_code="BJ")


def _staff_client():
    User = get_user_model()
    user = User.objects.create_user(username="sales", password="pass", role="sales")
    client = APIClient()
    client.force_authenticate(user=user)
    return client


class TestWorkbenchService:
    def test_analyze_splits_combined_lines(self, lagos, cotonou):
        results = workbench.analyze(["LOS/COO", "", "Atlantis"])
        assert len(results) == 2
        assert [p["label"] for p in results[0]["ports"]] == ["Lagos (LOS), Nigeria", "Cotonou (COO), Benin"]
        assert results[1]["unresolved"] == ["Atlantis"]

    def test_analyze_without_split_keeps_whole_line(self, lagos, cotonou):
        results = workbench.analyze(["LOS/COO"], split_combined=False)
        assert results[0]["ports"] == []
        assert results[0]["unresolved"] == ["LOS/COO"]

    def test_create_alias_conflict_message(self, lagos, cotonou):
        workbench.create_alias(lagos, "Apapa")
        with pytest.raises(workbench.AliasConflictError) as exc:
            workbench.create_alias(cotonou, "  APAPA ")
        assert str(exc.value) == "Alias '  APAPA ' conflicts with existing alias 'Apapa' for port 'Lagos (LOS)'."

    def test_bulk_create_collects_conflicts(self, lagos, cotonou):
        PortAlias.objects.create(port=lagos, alias="Apapa")
        result = workbench.bulk_create([
            {"token": "Tin Can", "port_id": lagos.id},
            {"token": "apapa", "port_id": cotonou.id},
            {"token": "Porto Novo", "port_id": None},
        ])
        assert result.created == 1
        assert result.skipped == 1
        assert [c["token"] for c in result.conflicts] == ["apapa"]
        assert PortAlias.objects.filter(port=lagos).count() == 2

    def test_load_audit_merges_keys(self):
        payload = json.dumps({"unresolved_robaws_inputs": ["Apapa", "Tema"], "unresolved": ["Tema", "Onne"]})
        assert workbench.load_audit(payload) == ["Apapa", "Tema", "Onne"]

    def test_load_audit_rejects_non_object(self):
        with pytest.raises(ValueError):
            workbench.load_audit("[1, 2]")

    def test_port_options_searches_aliases(self, lagos, cotonou):
        PortAlias.objects.create(port=lagos, alias="Apapa")
        assert workbench.port_options("apa") == {lagos.id: "Lagos (LOS), Nigeria"}
        assert len(workbench.port_options("")) == 2


class TestWorkbenchApi:
    def test_analyze_endpoint(self, lagos):
        client = _staff_client()
        resp = client.post("/api/port-aliases/analyze", {"input": "Lagos\nAtlantis"}, format="json")
        assert resp.status_code == 200
        assert resp.data["summary"] == "Processed 2 line(s). 1 resolved, 1 with unresolved tokens."

    def test_bulk_endpoint(self, lagos):
        client = _staff_client()
        resp = client.post(
            "/api/port-aliases/bulk",
            {"mappings": [{"token": "Apapa", "port_id": lagos.id}]},
            format="json",
        )
        assert resp.status_code == 201
        assert resp.data["message"] == "Created 1 alias(es)."

    def test_customer_cannot_use_workbench(self, lagos):
        User = get_user_model()
        customer = User.objects.create_user(username="cust", password="pass", role="customer")
        client = APIClient()
        client.force_authenticate(user=customer)
        resp = client.post("/api/port-aliases/analyze", {"input": "Lagos"}, format="json")
        assert resp.status_code == 403

    def test_resolve_endpoint(self, lagos, cotonou):
        client = _staff_client()
        resp = client.get("/api/ports/resolve", {"q": "LOS & Atlantis"})
        assert resp.status_code == 200
        assert [p["code"] for p in resp.data["ports"]] == ["LOS"]
        assert resp.data["unresolved"] == ["Atlantis"]
