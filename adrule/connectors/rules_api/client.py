"""ADRULE — Rules Backend Client.

Async HTTP client for the REST backend that stores rules. Handles auth,
retries with exponential backoff and the backend's response envelope
``{success, data?, error?, details?}``.
"""

import asyncio
import time
from typing import Any, Dict, Optional

import httpx

from adrule.config import settings
from adrule.core.logging import get_logger

logger = get_logger("rules_api.client")

RETRY_BASE_DELAY = 2  # seconds


class RulesAPIError(Exception):
    """Raised when the rules backend rejects a request or cannot be reached."""

    def __init__(
        self, message: str, status_code: int = 0, details: Optional[Any] = None
    ):
        self.status_code = status_code
        self.details = details
        super().__init__(message)


class RuleLimitError(RulesAPIError):
    """HTTP 403 carrying plan usage/limit numbers."""

    def __init__(
        self,
        message: str,
        usage: int = 0,
        limit: int = 0,
        details: Optional[Any] = None,
    ):
        self.usage = usage
        self.limit = limit
        super().__init__(message, status_code=403, details=details)

    @property
    def limit_text(self) -> str:
        return "Unlimited" if self.limit == -1 else str(self.limit)

    @property
    def user_message(self) -> str:
        return (
            "Anda telah mencapai batas maksimal automation rules aktif. "
            f"Usage: {self.usage}/{self.limit_text}. "
            "Nonaktifkan rule lain atau upgrade plan."
        )


def _error_from_response(response: httpx.Response) -> RulesAPIError:
    try:
        body = response.json()
    except ValueError:
        body = {}
    if not isinstance(body, dict):
        body = {}

    message = body.get("error") or body.get("message") or response.reason_phrase
    if response.status_code == 403 and ("usage" in body or "limit" in body):
        return RuleLimitError(
            message,
            usage=body.get("usage") or 0,
            limit=body.get("limit") or 0,
            details=body.get("details"),
        )
    return RulesAPIError(message, response.status_code, body.get("details"))


class RulesAPIClient:
    """Async HTTP client for the rules backend."""

    def __init__(
        self,
        base_url: str | None = None,
        token: str | None = None,
        max_retries: int | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = (base_url or settings.rules_api_base_url).rstrip("/")
        self.token = token if token is not None else settings.rules_api_token
        self.max_retries = max_retries or settings.rules_api_max_retries
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            headers = {"Accept": "application/json"}
            if self.token:
                headers["Authorization"] = f"Bearer {self.token}"
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                headers=headers,
                timeout=settings.rules_api_timeout,
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        if self._client and not self._client.is_closed:
            await self._client.aclose()

    async def __aenter__(self) -> "RulesAPIClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    # ── Core Request Method ──

    async def request(
        self,
        method: str,
        path: str,
        json: Dict[str, Any] | None = None,
        params: Dict[str, Any] | None = None,
    ) -> Any:
        """Make a request with retry handling; returns the envelope's ``data``."""
        client = await self._get_client()
        extra = {"endpoint": path, "method": method}

        for attempt in range(1, self.max_retries + 1):
            wait = RETRY_BASE_DELAY * (2 ** (attempt - 1))
            started = time.monotonic()
            try:
                resp = await client.request(method, path, json=json, params=params)
            except httpx.RequestError as e:
                if attempt < self.max_retries:
                    logger.warning(
                        f"Request error: {e}. Retrying in {wait}s",
                        extra={**extra, "attempt": attempt},
                    )
                    await asyncio.sleep(wait)
                    continue
                raise RulesAPIError(
                    f"Connection failed after {self.max_retries} retries: {e}"
                ) from e

            duration_ms = round((time.monotonic() - started) * 1000, 1)
            retryable = resp.status_code == 429 or resp.status_code >= 500
            if retryable and attempt < self.max_retries:
                logger.warning(
                    f"Backend returned {resp.status_code}. Retrying in {wait}s "
                    f"(attempt {attempt}/{self.max_retries})",
                    extra={**extra, "status_code": resp.status_code, "attempt": attempt},
                )
                await asyncio.sleep(wait)
                continue

            if resp.is_error:
                error = _error_from_response(resp)
                logger.error(
                    f"Backend rejected {method} {path}: {error}",
                    extra={
                        **extra,
                        "status_code": resp.status_code,
                        "duration_ms": duration_ms,
                    },
                )
                raise error

            logger.info(
                f"{method} {path} → {resp.status_code}",
                extra={**extra, "status_code": resp.status_code, "duration_ms": duration_ms},
            )
            return self._unwrap(resp)

        raise RulesAPIError("Max retries exhausted")

    @staticmethod
    def _unwrap(resp: httpx.Response) -> Any:
        if resp.status_code == 204 or not resp.content:
            return None
        try:
            body = resp.json()
        except ValueError as e:
            raise RulesAPIError(
                "Backend returned a non-JSON response", 502, resp.text[:200]
            ) from e
        if isinstance(body, dict) and "success" in body:
            if not body["success"]:
                raise RulesAPIError(
                    body.get("error") or "Request failed",
                    resp.status_code,
                    body.get("details"),
                )
            return body.get("data")
        return body
