"""Structured error codes and the exception taxonomy.

Local validation failures (``ValidationError`` and its subclasses) are
raised while a request is being built, before anything is sent.
Failures reported by the search service or the transport surface as
``ServiceError`` after the call.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum


class ErrorCategory(StrEnum):
    """Error category classification."""

    SCHEMA = "SCHEMA"
    SCORING = "SCORING"
    QUERY = "QUERY"
    SERVICE = "SERVICE"
    CONFIG = "CONFIG"
    SESSION = "SESSION"


@dataclass(frozen=True)
class ErrorInfo:
    """Structured error with code, message, and resolution."""

    code: str
    category: ErrorCategory
    message: str
    resolution: str

    def format(self) -> str:
        return f"Error [{self.code}]: {self.message}\nResolution: {self.resolution}"


# ── Pre-defined error catalog ─────────────────────────────────────

ERRORS: dict[str, ErrorInfo] = {
    "E001": ErrorInfo(
        code="EVENTSEARCH_E001",
        category=ErrorCategory.SCORING,
        message="Invalid scoring profile parameter",
        resolution="Boosts, half-lives and distances must be positive",
    ),
    "E002": ErrorInfo(
        code="EVENTSEARCH_E002",
        category=ErrorCategory.SCHEMA,
        message="Field is not part of the index schema",
        resolution="Reference one of the fields returned by build_schema()",
    ),
    "E003": ErrorInfo(
        code="EVENTSEARCH_E003",
        category=ErrorCategory.QUERY,
        message="Missing runtime input for the selected query",
        resolution=(
            "Supply the reference location (lat,lon) or favourite tag "
            "the scoring profile needs"
        ),
    ),
    "E004": ErrorInfo(
        code="EVENTSEARCH_E004",
        category=ErrorCategory.QUERY,
        message="Malformed runtime input",
        resolution="Enter the location as 'latitude,longitude', e.g. 47.6,-122.3",
    ),
    "E005": ErrorInfo(
        code="EVENTSEARCH_E005",
        category=ErrorCategory.SERVICE,
        message="The search service rejected the request",
        resolution="Check the service message; the index may not exist yet",
    ),
    "E006": ErrorInfo(
        code="EVENTSEARCH_E006",
        category=ErrorCategory.SERVICE,
        message="The search service could not be reached",
        resolution="Check service.endpoint and your network connection",
    ),
    "E007": ErrorInfo(
        code="EVENTSEARCH_E007",
        category=ErrorCategory.CONFIG,
        message="Search service endpoint or API key not configured",
        resolution=(
            "Set EVENTSEARCH_SERVICE_API_KEY and EVENTSEARCH_SERVICE_SERVICE_NAME "
            "or run 'eventsearch config set service.api_key <key>'"
        ),
    ),
    "E008": ErrorInfo(
        code="EVENTSEARCH_E008",
        category=ErrorCategory.SESSION,
        message="No index selected for this session",
        resolution="Create an index or enter an existing index name",
    ),
}


# ── Exceptions ─────────────────────────────────────────────────────


class EventSearchError(Exception):
    """Base class for every error raised by eventsearch."""

    code = "E005"

    @property
    def info(self) -> ErrorInfo:
        return ERRORS[self.code]


class ValidationError(EventSearchError):
    """A request could not be built from the given inputs."""


class InvalidParameter(ValidationError):
    """Malformed scoring-profile or query construction input."""

    code = "E001"

    def __init__(self, message: str, *, parameter: str | None = None) -> None:
        super().__init__(message)
        self.parameter = parameter


class UnknownField(InvalidParameter):
    """A referenced field does not exist in the schema."""

    code = "E002"


class MalformedInput(InvalidParameter):
    """Operator input could not be parsed."""

    code = "E004"


class MissingRuntimeInput(ValidationError):
    """A use case needs a runtime value the caller did not supply."""

    code = "E003"

    def __init__(self, parameter: str, description: str) -> None:
        super().__init__(
            f"Missing runtime input '{parameter}' ({description})",
        )
        self.parameter = parameter
        self.description = description


class ServiceError(EventSearchError):
    """Any failure signalled by the search service or the transport."""

    def __init__(
        self,
        message: str,
        *,
        operation: str,
        status_code: int | None = None,
    ) -> None:
        super().__init__(message)
        self.operation = operation
        self.status_code = status_code
        self.code = "E006" if status_code is None else "E005"

    def __str__(self) -> str:
        status = f" (HTTP {self.status_code})" if self.status_code else ""
        return f"{self.operation} failed{status}: {self.args[0]}"


class ConfigError(EventSearchError):
    """The search service connection is not configured."""

    code = "E007"


class NoIndexSelected(EventSearchError):
    """An operation needs an index but the session has none."""

    code = "E008"
