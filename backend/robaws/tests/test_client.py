from unittest.mock import MagicMock

import pytest
import requests

from robaws.client import RobawsApiClient, RobawsApiError, RobawsConfigurationError


def _response(status_code, body=None):
    resp = MagicMock()
    resp.status_code = status_code
    resp.ok = 200 <= status_code < 400
    resp.reason = "Error" if not resp.ok else "OK"
    resp.content = b"{}" if body is not None else b""
    resp.json.return_value = body if body is not None else {}
    return resp


@pytest.fixture
def session():
    s = MagicMock()
    s.headers = {}
    return s


def _client(session, **kwargs):
    options = {"base_url": "https://robaws.test/", "api_key": "secret", "max_retries": 3, "retry_delay_ms": 0}
    options.update(kwargs)
    return RobawsApiClient(session=session, **options)


class TestConfiguration:
    def test_missing_base_url(self, settings, session):
        settings.ROBAWS = {}
        with pytest.raises(RobawsConfigurationError):
            RobawsApiClient(session=session, api_key="secret")

    def test_missing_api_key(self, settings, session):
        settings.ROBAWS = {}
        with pytest.raises(RobawsConfigurationError):
            RobawsApiClient(base_url="https://robaws.test", api_key="", session=session, auth="token")

    def test_bearer_headers(self, session):
        _client(session)
        assert session.headers["Authorization"] == "Bearer secret"
        assert session.headers["Accept"] == "application/json"

    def test_basic_auth(self, session):
        _client(session, auth="basic", username="api", password="pw", api_key=None)
        assert session.auth == ("api", "pw")
        assert "Authorization" not in session.headers


class TestRequests:
    def test_create_offer_sends_idempotency_key(self, session):
        session.request.return_value = _response(201, {"id": 55})
        result = _client(session).create_offer({"title": "QR"}, idempotency_key="quotation_1_abc")

        assert result == {"id": 55}
        method, url = session.request.call_args.args
        assert (method, url) == ("POST", "https://robaws.test/api/v2/offers")
        headers = session.request.call_args.kwargs["headers"]
        assert headers["Idempotency-Key"] == "quotation_1_abc"
        assert headers["X-Request-ID"]

    def test_retries_server_errors(self, session):
        session.request.side_effect = [_response(503), _response(429), _response(200, {"id": 7})]
        assert _client(session).get_offer(7) == {"id": 7}
        assert session.request.call_count == 3

    def test_retries_connection_errors(self, session):
        session.request.side_effect = [requests.ConnectionError("reset"), _response(200, {"ok": True})]
        assert _client(session).update_article(9, {"extraFields": {}}) == {"ok": True}

    def test_client_error_not_retried(self, session):
        session.request.return_value = _response(422, {"message": "Invalid client"})
        with pytest.raises(RobawsApiError) as excinfo:
            _client(session).update_offer(3, {})
        assert excinfo.value.status_code == 422
        assert "Invalid client" in str(excinfo.value)
        assert session.request.call_count == 1

    def test_gives_up_after_max_retries(self, session):
        session.request.return_value = _response(500)
        with pytest.raises(RobawsApiError) as excinfo:
            _client(session, max_retries=2).get_offer(1)
        assert excinfo.value.status_code == 500
        assert session.request.call_count == 2

    def test_iter_articles_pages_until_short_page(self, session):
        session.request.side_effect = [
            _response(200, {"items": [{"id": 1}, {"id": 2}]}),
            _response(200, {"items": [{"id": 3}]}),
        ]
        ids = [a["id"] for a in _client(session).iter_articles(size=2)]
        assert ids == [1, 2, 3]
        assert session.request.call_args.kwargs["params"] == {"page": 1, "size": 2}
