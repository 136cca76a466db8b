"""Async REST client for the hosted search service.

Wraps the index-management and document endpoints of an Azure AI
Search compatible service.  Every failure, whether an HTTP error status
or a transport problem, is raised as :class:`ServiceError` carrying the
service's own message; retries are left to the caller.

Usage::

    async with SearchServiceClient(config.service) as client:
        count = await client.get_document_count("events")
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any, TypeVar
from urllib.parse import quote

import httpx
import structlog

from eventsearch.config import ServiceConfig
from eventsearch.errors import ConfigError, ServiceError
from eventsearch.query import QueryRequest
from eventsearch.records import EventRecord
from eventsearch.results import ResultSet, parse_search_response
from eventsearch.scoring import ScoringProfile, merge_profiles

logger = structlog.get_logger()


class IndexActionType(StrEnum):
    UPLOAD = "upload"
    MERGE = "merge"
    MERGE_OR_UPLOAD = "mergeOrUpload"
    DELETE = "delete"


@dataclass(frozen=True)
class IndexAction:
    """One document operation inside a batch."""

    action: IndexActionType
    document: dict[str, object] = field(default_factory=dict)

    @classmethod
    def upload(cls, record: EventRecord) -> IndexAction:
        return cls(IndexActionType.UPLOAD, record.to_document())

    @classmethod
    def merge(cls, record: EventRecord) -> IndexAction:
        return cls(IndexActionType.MERGE, record.to_document())

    @classmethod
    def delete(cls, key: str) -> IndexAction:
        return cls(IndexActionType.DELETE, {"key": key})

    def to_dict(self) -> dict[str, object]:
        return {"@search.action": self.action.value, **self.document}


@dataclass(frozen=True)
class IndexingResult:
    """Per-document outcome of a batch submission."""

    key: str
    succeeded: bool
    status_code: int
    error_message: str | None = None


def _as_object(data: Any) -> dict[str, Any]:
    if not isinstance(data, dict):
        raise TypeError(f"expected a JSON object, got {type(data).__name__}")
    return data


T = TypeVar("T")


def _decode(
    operation: str, resp: httpx.Response, parse: Callable[[Any], T]
) -> T:
    """Decode a successful response body, mapping malformed bodies to ServiceError."""
    try:
        return parse(resp.json())
    except (ValueError, KeyError, TypeError) as exc:
        logger.warning(
            "service_bad_response",
            operation=operation,
            status=resp.status_code,
            error=str(exc),
        )
        raise ServiceError(
            f"Unexpected response body: {exc}",
            operation=operation,
            status_code=resp.status_code,
        ) from exc


def _indexing_results(data: Any) -> list[IndexingResult]:
    return [
        IndexingResult(
            key=str(item["key"]),
            succeeded=bool(item.get("status")),
            status_code=int(item.get("statusCode", 0)),
            error_message=item.get("errorMessage"),
        )
        for item in _as_object(data).get("value", [])
    ]


def _error_message(resp: httpx.Response) -> str:
    try:
        body = resp.json()
    except ValueError:
        return resp.text or resp.reason_phrase
    if isinstance(body, dict):
        err = body.get("error")
        if isinstance(err, dict) and err.get("message"):
            return str(err["message"])
    return resp.text or resp.reason_phrase


class SearchServiceClient:
    """Async client for one search service.

    Args:
        config: Service endpoint, key and API version.
        client: Optional pre-built httpx.AsyncClient (tests pass one
            with a mock transport).  The caller keeps ownership of it.
    """

    def __init__(
        self,
        config: ServiceConfig,
        *,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        if client is None and not config.is_configured:
            raise ConfigError("Search service endpoint or API key not configured")
        self._config = config
        self._own_client = client is None
        self._client = client or httpx.AsyncClient(
            base_url=config.base_url,
            headers={"api-key": config.api_key},
            timeout=config.timeout,
        )

    async def _request(
        self,
        operation: str,
        method: str,
        path: str,
        *,
        json: dict[str, Any] | None = None,
        expected: tuple[int, ...] = (200,),
    ) -> httpx.Response:
        try:
            resp = await self._client.request(
                method,
                path,
                params={"api-version": self._config.api_version},
                json=json,
            )
        except httpx.HTTPError as exc:
            logger.warning("service_unreachable", operation=operation, error=str(exc))
            raise ServiceError(str(exc), operation=operation) from exc

        if resp.status_code not in expected:
            message = _error_message(resp)
            logger.warning(
                "service_error",
                operation=operation,
                status=resp.status_code,
                message=message,
            )
            raise ServiceError(message, operation=operation, status_code=resp.status_code)
        return resp

    # ── Index management ──────────────────────────────────────────

    async def create_index(self, definition: dict[str, Any]) -> dict[str, Any]:
        resp = await self._request(
            "create_index", "POST", "/indexes", json=definition, expected=(201,)
        )
        logger.info("index_created", index=definition.get("name"))
        return _decode("create_index", resp, _as_object)

    async def list_indexes(self) -> list[str]:
        resp = await self._request("list_indexes", "GET", "/indexes")
        return _decode(
            "list_indexes",
            resp,
            lambda data: [str(idx["name"]) for idx in _as_object(data)["value"]],
        )

    async def get_index(self, index_name: str) -> dict[str, Any]:
        resp = await self._request(
            "get_index", "GET", f"/indexes/{quote(index_name, safe='')}"
        )
        return _decode("get_index", resp, _as_object)

    async def get_document_count(self, index_name: str) -> int:
        resp = await self._request(
            "get_document_count",
            "GET",
            f"/indexes/{quote(index_name, safe='')}/stats",
        )
        return _decode(
            "get_document_count",
            resp,
            lambda data: int(_as_object(data)["documentCount"]),
        )

    async def delete_index(self, index_name: str) -> None:
        await self._request(
            "delete_index",
            "DELETE",
            f"/indexes/{quote(index_name, safe='')}",
            expected=(204,),
        )
        logger.info("index_deleted", index=index_name)

    async def update_scoring_profiles(
        self, index_name: str, profiles: Iterable[ScoringProfile]
    ) -> dict[str, Any]:
        """Add or replace scoring profiles, keeping the index's other profiles."""
        profiles = list(profiles)
        definition = await self.get_index(index_name)
        definition.pop("@odata.context", None)
        definition["scoringProfiles"] = merge_profiles(
            definition.get("scoringProfiles") or [], profiles
        )
        resp = await self._request(
            "update_scoring_profiles",
            "PUT",
            f"/indexes/{quote(index_name, safe='')}",
            json=definition,
            expected=(200, 201, 204),
        )
        logger.info(
            "scoring_profiles_updated",
            index=index_name,
            profiles=[p.name for p in profiles],
        )
        if resp.status_code == 204:
            return definition
        return _decode("update_scoring_profiles", resp, _as_object)

    # ── Documents ─────────────────────────────────────────────────

    async def submit_documents(
        self, index_name: str, actions: Sequence[IndexAction]
    ) -> list[IndexingResult]:
        """Submit one batch; raises if any document in it failed."""
        resp = await self._request(
            "submit_documents",
            "POST",
            f"/indexes/{quote(index_name, safe='')}/docs/index",
            json={"value": [a.to_dict() for a in actions]},
            expected=(200, 207),
        )
        results = _decode("submit_documents", resp, _indexing_results)
        failed = [r for r in results if not r.succeeded]
        if failed:
            raise ServiceError(
                f"{len(failed)} of {len(results)} documents failed: "
                f"{failed[0].error_message}",
                operation="submit_documents",
                status_code=resp.status_code,
            )
        logger.info("documents_submitted", index=index_name, count=len(results))
        return results

    async def get_document(self, index_name: str, key: str) -> EventRecord:
        resp = await self._request(
            "get_document",
            "GET",
            f"/indexes/{quote(index_name, safe='')}/docs/{quote(key, safe='')}",
        )
        return _decode(
            "get_document",
            resp,
            lambda data: EventRecord.from_document(_as_object(data)),
        )

    async def search(self, index_name: str, request: QueryRequest) -> ResultSet:
        resp = await self._request(
            "search",
            "POST",
            f"/indexes/{quote(index_name, safe='')}/docs/search",
            json=request.to_dict(),
        )
        result = _decode(
            "search",
            resp,
            lambda data: parse_search_response(_as_object(data)),
        )
        logger.debug(
            "search_completed",
            index=index_name,
            returned=result.returned,
            total=result.total_count,
        )
        return result

    # ── Lifecycle ─────────────────────────────────────────────────

    async def aclose(self) -> None:
        if self._own_client:
            await self._client.aclose()

    async def __aenter__(self) -> SearchServiceClient:
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.aclose()
