"""
Failure classification for dataset loading and user input.

The record pipeline itself never fails: filtering, consumption, sorting,
pagination and formatting are total over well-typed input. Failures only
happen at the edges, where text is read, fetched or typed in by a user.

Every such failure is a KnownError carrying a classified FailureDetail,
so the surface (the CLI today) can explain it without inspecting
exception types.
"""

from enum import Enum

from pydantic import BaseModel, Field


class FailureKind(str, Enum):
    """Classification of failure types."""

    # Input validation failures
    INVALID_INPUT = "invalid_input"

    # Resource failures
    NOT_FOUND = "not_found"
    EMPTY_RESULT = "empty_result"

    # Service failures
    EXTERNAL_API_ERROR = "external_api_error"


class FailureDetail(BaseModel):
    """Detailed information about a failure."""

    kind: FailureKind = Field(
        ...,
        description="Classification of the failure",
    )
    message: str = Field(
        ...,
        description="User-appropriate explanation of what went wrong",
    )
    detail: str | None = Field(
        default=None,
        description="Additional technical detail (optional)",
    )
    suggestion: str | None = Field(
        default=None,
        description="Suggested action for the user",
    )


class KnownError(Exception):
    """
    Base class for exceptions that represent known, explainable failures.

    Subclass this for errors where the system knows exactly what went wrong.
    """

    def __init__(
        self,
        kind: FailureKind,
        message: str,
        detail: str | None = None,
        suggestion: str | None = None,
    ):
        self.kind = kind
        self.message = message
        self.detail = detail
        self.suggestion = suggestion
        super().__init__(message)

    def to_detail(self) -> FailureDetail:
        """Convert to a FailureDetail."""
        return FailureDetail(
            kind=self.kind,
            message=self.message,
            detail=self.detail,
            suggestion=self.suggestion,
        )


class LoadError(KnownError):
    """
    Raised when a dataset cannot be read, fetched or parsed.

    Loading is all-or-nothing: when this is raised, no records reach the
    session and the previously loaded dataset stays in place.
    """

    def __init__(
        self,
        kind: FailureKind,
        message: str,
        source: str | None = None,
        detail: str | None = None,
        suggestion: str | None = None,
    ):
        self.source = source
        super().__init__(
            kind=kind,
            message=message,
            detail=detail,
            suggestion=suggestion or "Check the file or URL and try loading again.",
        )
