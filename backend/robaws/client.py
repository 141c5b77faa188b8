from __future__ import annotations

import logging
import time
import uuid
from typing import Dict, Iterator, Optional

import requests
from django.conf import settings

logger = logging.getLogger(__name__)


class RobawsApiError(Exception):
    """Raised when Robaws answers with a non-retryable error or retries are exhausted"""

    def __init__(self, message, status_code=None, payload=None):
        super().__init__(message)
        self.status_code = status_code
        self.payload = payload


class RobawsConfigurationError(RobawsApiError):
    """Raised when the Robaws base URL or credentials are missing"""
    pass


class RobawsApiClient:
    """
    Thin wrapper over the Robaws REST API (offers and articles).

    Retries 408, 429 and 5xx answers as well as connection errors with
    exponential backoff: retry_delay_ms, then twice that, and so on.
    """

    RETRYABLE_STATUS = (408, 429)
    USER_AGENT = "Bconnect/1.0 (Django)"

    def __init__(
        self,
        base_url: Optional[str] = None,
        api_key: Optional[str] = None,
        auth: Optional[str] = None,
        username: Optional[str] = None,
        password: Optional[str] = None,
        timeout: Optional[int] = None,
        max_retries: Optional[int] = None,
        retry_delay_ms: Optional[int] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        cfg = getattr(settings, "ROBAWS", {})
        self.base_url = (base_url or cfg.get("base_url") or "").rstrip("/")
        self.api_key = api_key or cfg.get("api_key")
        self.auth = (auth or cfg.get("auth") or "token").lower()
        self.username = username or cfg.get("username")
        self.password = password or cfg.get("password")
        self.timeout = timeout if timeout is not None else cfg.get("timeout", 30)
        self.max_retries = max(1, max_retries if max_retries is not None else cfg.get("max_retries", 3))
        self.retry_delay_ms = retry_delay_ms if retry_delay_ms is not None else cfg.get("retry_delay_ms", 1000)

        if not self.base_url:
            raise RobawsConfigurationError("Robaws base URL is not configured. Set ROBAWS_BASE_URL.")
        if self.auth == "basic":
            if not (self.username and self.password):
                raise RobawsConfigurationError("Robaws basic auth needs ROBAWS_USERNAME and ROBAWS_PASSWORD.")
        elif not self.api_key:
            raise RobawsConfigurationError("Robaws API key is not configured. Set ROBAWS_API_KEY.")

        self.session = session or requests.Session()
        self.session.headers.update({
            "Content-Type": "application/json",
            "Accept": "application/json",
            "User-Agent": self.USER_AGENT,
        })
        if self.auth == "basic":
            self.session.auth = (self.username, self.password)
        else:
            self.session.headers["Authorization"] = f"Bearer {self.api_key}"

    def _is_retryable(self, status_code: int) -> bool:
        return status_code >= 500 or status_code in self.RETRYABLE_STATUS

    def _sleep_before_retry(self, attempt: int) -> None:
        delay_ms = self.retry_delay_ms * (2 ** (attempt - 1))
        if delay_ms > 0:
            time.sleep(delay_ms / 1000.0)

    def request(self, method: str, path: str, payload=None, params=None, headers=None) -> Dict:
        url = f"{self.base_url}{path}"
        last_error = None

        for attempt in range(1, self.max_retries + 1):
            request_headers = {"X-Request-ID": str(uuid.uuid4())}
            request_headers.update(headers or {})
            logger.debug(f"Robaws {method} {url} attempt {attempt}/{self.max_retries}")
            try:
                resp = self.session.request(
                    method, url, json=payload, params=params, headers=request_headers, timeout=self.timeout
                )
            except requests.RequestException as exc:
                logger.warning(f"Robaws {method} {path} failed on attempt {attempt}: {exc}")
                last_error = RobawsApiError(f"Robaws request failed: {exc}")
                if attempt < self.max_retries:
                    self._sleep_before_retry(attempt)
                continue

            if resp.ok:
                return resp.json() if resp.content else {}

            body = _safe_json(resp)
            message = body.get("message") if isinstance(body, dict) else None
            last_error = RobawsApiError(
                f"Robaws {method} {path} returned {resp.status_code}: {message or resp.reason}",
                status_code=resp.status_code,
                payload=body,
            )
            if not self._is_retryable(resp.status_code):
                break
            logger.warning(f"Robaws {method} {path} returned {resp.status_code}, attempt {attempt}/{self.max_retries}")
            if attempt < self.max_retries:
                self._sleep_before_retry(attempt)

        logger.error(str(last_error))
        raise last_error

    def create_offer(self, payload: Dict, idempotency_key: Optional[str] = None) -> Dict:
        headers = {"Idempotency-Key": idempotency_key} if idempotency_key else None
        return self.request("POST", "/api/v2/offers", payload=payload, headers=headers)

    def update_offer(self, offer_id, payload: Dict, idempotency_key: Optional[str] = None) -> Dict:
        headers = {"Idempotency-Key": idempotency_key} if idempotency_key else None
        return self.request("PATCH", f"/api/v2/offers/{offer_id}", payload=payload, headers=headers)

    def get_offer(self, offer_id) -> Dict:
        return self.request("GET", f"/api/v2/offers/{offer_id}")

    def update_article(self, article_id, payload: Dict) -> Dict:
        return self.request("PATCH", f"/api/v2/articles/{article_id}", payload=payload)

    def list_articles(self, page: int = 0, size: int = 100) -> Dict:
        return self.request("GET", "/api/v2/articles", params={"page": page, "size": size})

    def iter_articles(self, size: int = 100) -> Iterator[Dict]:
        """Yield every article, one page at a time, until a short page comes back."""
        page = 0
        while True:
            data = self.list_articles(page=page, size=size)
            items = data.get("items") or []
            yield from items
            if len(items) < size:
                return
            page += 1


def _safe_json(resp):
    try:
        return resp.json()
    except ValueError:
        return {"raw": resp.text[:500]}
