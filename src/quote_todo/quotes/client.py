# src/quote_todo/quotes/client.py

from __future__ import annotations

import logging
from typing import Any

import httpx

from ..tasks.errors import TodoError
from ..tasks.task_models import Quote

logger = logging.getLogger(__name__)


class QuoteError(TodoError):
    pass


class QuoteFetchError(QuoteError):
    """Transport failure or non-2xx response."""


class QuoteDecodeError(QuoteError):
    """The response body is not a JSON array of quote records."""


def parse_quotes(payload: Any) -> list[Quote]:
    if not isinstance(payload, list):
        raise QuoteDecodeError(f"expected a JSON array, got {type(payload).__name__}")

    out: list[Quote] = []
    for i, item in enumerate(payload):
        if not isinstance(item, dict):
            raise QuoteDecodeError(f"record {i} is not an object")
        fields = {}
        for name in ("quote", "author", "category"):
            value = item.get(name)
            if not isinstance(value, str):
                raise QuoteDecodeError(f"record {i}: field {name!r} missing or not text")
            fields[name] = value
        out.append(Quote(**fields))
    return out


def _make_timeout_obj(timeout_s: float) -> httpx.Timeout:
    return httpx.Timeout(timeout_s, connect=min(timeout_s, 5.0))


class QuoteClient:
    """
    Client for the random-quote service (RapidAPI-style).

    Credentials are passed in; they come from settings, never from code.
    An injected httpx.AsyncClient is used as-is (and not closed), which is how
    tests plug in httpx.MockTransport.
    """

    def __init__(
        self,
        *,
        url: str,
        api_key: str,
        api_host: str,
        category: str = "famous",
        count: int = 10,
        timeout_seconds: float = 10.0,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        if not url or not url.strip():
            raise ValueError("quote API url is required")
        if not api_key or not api_key.strip():
            raise ValueError("quote API key is required")
        self._url = url.strip()
        self._headers = {
            "X-RapidAPI-Key": api_key.strip(),
            "X-RapidAPI-Host": (api_host or "").strip(),
        }
        self._params = {"cat": category, "count": str(max(1, int(count)))}
        self._timeout = _make_timeout_obj(float(timeout_seconds))
        self._http_client = http_client

    @classmethod
    def from_settings(cls, settings, *, http_client: httpx.AsyncClient | None = None) -> QuoteClient:
        return cls(
            url=settings.quote_api_url,
            api_key=settings.quote_api_key or "",
            api_host=settings.quote_api_host,
            category=settings.quote_category,
            count=settings.quote_count,
            timeout_seconds=settings.quote_timeout_seconds,
            http_client=http_client,
        )

    async def _get(self, client: httpx.AsyncClient) -> httpx.Response:
        return await client.get(self._url, params=self._params, headers=self._headers, timeout=self._timeout)

    async def fetch_quotes(self) -> list[Quote]:
        try:
            if self._http_client is not None:
                resp = await self._get(self._http_client)
            else:
                async with httpx.AsyncClient() as client:
                    resp = await self._get(client)
            resp.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise QuoteFetchError(f"quote service returned HTTP {e.response.status_code}") from e
        except httpx.HTTPError as e:
            raise QuoteFetchError(f"quote service request failed: {e.__class__.__name__}") from e

        try:
            payload = resp.json()
        except ValueError as e:
            raise QuoteDecodeError("quote service returned a non-JSON body") from e

        quotes = parse_quotes(payload)
        logger.debug("Fetched %d quote(s) from %s", len(quotes), self._url)
        return quotes
