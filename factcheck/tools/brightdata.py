"""Bright Data SERP search through the super-proxy.

Google results come back as structured JSON when the request goes through
a Bright Data SERP zone with ``brd_json=1`` on the query string:
  - organic results (title, description, link, display_link, ...)
  - knowledge panel (description + key/value facts)
  - "people also ask" questions with answers

The proxy terminates TLS itself, so certificate verification is off for
this client only.

Failures are raised as distinct error kinds, never returned as strings:
  SearchConfigError      — zone credentials are not configured
  SearchTransportError   — the request never completed (DNS, proxy, timeout)
  SearchHTTPStatusError  — non-2xx response
  UnexpectedContentError — body is HTML or otherwise not a JSON object
"""

import json
import time
from typing import Any, Optional
from urllib.parse import quote_plus

import httpx
from pydantic import ValidationError

from factcheck.config import Settings
from factcheck.schemas.search import (
    Answer,
    Fact,
    KnowledgePanel,
    OrganicResult,
    RelatedQuestion,
    SearchResultBundle,
)
from factcheck.utils.logging import log, get_logger

MODULE = "search"
logger = get_logger()

GOOGLE_SEARCH_URL = "https://www.google.com/search"

HEADERS = {
    "User-Agent": (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/91.0.4472.124 Safari/537.36"
    ),
    "Accept": "application/json, text/html, */*",
    "Accept-Encoding": "gzip, deflate, br",
}


class SearchError(Exception):
    """Base class for every search failure."""

    def __init__(self, message: str, query: Optional[str] = None):
        super().__init__(message)
        self.query = query


class SearchConfigError(SearchError):
    """Raised when the SERP zone credentials are missing."""


class SearchTransportError(SearchError):
    """Raised when the request could not be completed."""


class SearchHTTPStatusError(SearchError):
    """Raised on a non-2xx response."""

    def __init__(self, message: str, status_code: int, query: Optional[str] = None):
        super().__init__(message, query=query)
        self.status_code = status_code


class UnexpectedContentError(SearchError):
    """Raised when the body is not a JSON object.

    ``is_html`` is set when the proxy handed back a rendered page, which
    almost always means the zone is not a SERP zone or brd_json was lost.
    """

    def __init__(self, message: str, is_html: bool = False, query: Optional[str] = None):
        super().__init__(message, query=query)
        self.is_html = is_html


def build_search_url(query: str) -> str:
    return f"{GOOGLE_SEARCH_URL}?q={quote_plus(query)}&brd_json=1"


def _looks_like_html(text: str) -> bool:
    head = text.lstrip()[:15].lower()
    return head.startswith("<!doctype") or head.startswith("<html")


def _split(item: dict, known: tuple[str, ...]) -> dict:
    """Keys of a provider dict that the schema does not name."""
    return {k: v for k, v in item.items() if k not in known}


def _answer_text(answer: Any) -> Optional[str]:
    if isinstance(answer, str):
        return answer
    if not isinstance(answer, dict):
        return None
    value = answer.get("value")
    if isinstance(value, dict) and value.get("text") is not None:
        return value["text"]
    return answer.get("text")


def parse_bundle(data: dict) -> SearchResultBundle:
    """Normalize Bright Data's SERP JSON into a SearchResultBundle.

    Unknown keys on organic items, the knowledge panel and related
    questions are kept as extras; malformed entries are skipped.
    """
    organic = [
        OrganicResult.model_validate(item)
        for item in data.get("organic") or []
        if isinstance(item, dict)
    ]

    knowledge = None
    kg = data.get("knowledge")
    if isinstance(kg, dict):
        knowledge = KnowledgePanel(
            description=kg.get("description"),
            facts=[
                Fact(key=f.get("key"), value=f.get("value"))
                for f in kg.get("facts") or []
                if isinstance(f, dict)
            ],
            **_split(kg, ("description", "facts")),
        )

    people_also_ask = []
    for item in data.get("people_also_ask") or []:
        if not isinstance(item, dict):
            continue
        people_also_ask.append(RelatedQuestion(
            question=item.get("question"),
            answers=[Answer(text=_answer_text(a)) for a in item.get("answers") or []],
            **_split(item, ("question", "answers")),
        ))

    return SearchResultBundle(
        organic=organic,
        knowledge=knowledge,
        people_also_ask=people_also_ask,
    )


def _log_summary(query: str, data: dict, latency_ms: int) -> None:
    organic = data.get("organic") or []
    log.info(logger, MODULE, "search_done", "Received structured SERP data",
             query=query, latency_ms=latency_ms,
             organic_count=len(organic),
             ads_count=len(data.get("ads") or []) or None,
             has_knowledge=bool(data.get("knowledge") or data.get("knowledge_graph")))
    for rank, item in enumerate(organic[:3], start=1):
        if isinstance(item, dict):
            log.debug(logger, MODULE, "top_result", f"Top result {rank}",
                      title=item.get("title") or "No title",
                      link=item.get("link") or "No link")


class BrightDataSearchClient:
    """One Google search per call, through the Bright Data super-proxy.

    Each call opens its own httpx.AsyncClient, so concurrent searches do
    not share connection state. Pass ``transport`` to route requests
    somewhere other than the proxy (tests use httpx.MockTransport).
    """

    def __init__(self, settings: Settings, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.settings = settings
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        timeout = httpx.Timeout(self.settings.search_timeout)
        if self._transport is not None:
            return httpx.AsyncClient(transport=self._transport, timeout=timeout, headers=HEADERS)
        return httpx.AsyncClient(
            proxy=self.settings.proxy_url,
            verify=False,
            timeout=timeout,
            headers=HEADERS,
        )

    async def search(self, query: str) -> SearchResultBundle:
        """Run one search and return the normalized bundle.

        Raises:
            SearchError: One of its subclasses, see the module docstring.
        """
        if not self.settings.has_search_credentials:
            raise SearchConfigError(
                "Bright Data credentials are not configured "
                "(BRIGHT_DATA_CUSTOMER_ID, BRIGHT_DATA_ZONE, BRIGHT_DATA_PASSWORD)",
                query=query,
            )

        log.info(logger, MODULE, "search_start", "Fetching search results through proxy",
                 query=query)
        t0 = time.monotonic()

        async with self._client() as client:
            try:
                resp = await client.get(build_search_url(query))
            except httpx.RequestError as e:
                log.error(logger, MODULE, "search_failed", "Proxy request failed",
                          error=str(e), error_type=type(e).__name__, query=query)
                raise SearchTransportError(f"Proxy request failed: {e}", query=query) from e

        text = resp.text
        if not resp.is_success:
            log.error(logger, MODULE, "search_failed", "Search returned an error status",
                      error=resp.reason_phrase, status_code=resp.status_code, query=query)
            raise SearchHTTPStatusError(
                f"HTTP error! Status: {resp.status_code} - {resp.reason_phrase}",
                status_code=resp.status_code,
                query=query,
            )

        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            is_html = _looks_like_html(text)
            message = (
                "Received HTML instead of JSON - proxy may not be working correctly"
                if is_html else "Response is not valid JSON"
            )
            log.error(logger, MODULE, "search_failed", message,
                      error_type="UnexpectedContentError", is_html=is_html, query=query)
            raise UnexpectedContentError(message, is_html=is_html, query=query) from e

        if not isinstance(data, dict):
            raise UnexpectedContentError(
                f"Expected a JSON object, got {type(data).__name__}", query=query,
            )

        try:
            bundle = parse_bundle(data)
        except ValidationError as e:
            log.error(logger, MODULE, "search_failed", "SERP JSON has unexpected field types",
                      error=str(e), error_type="UnexpectedContentError", query=query)
            raise UnexpectedContentError(
                f"SERP JSON has unexpected field types: {e.error_count()} error(s)", query=query,
            ) from e

        _log_summary(query, data, int((time.monotonic() - t0) * 1000))
        return bundle
