# helpdesk/core/errors.py
from collections.abc import Iterable
from http import HTTPStatus

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class ApiError(Exception):
    """Base of the closed set of failures the API reports: NotFound,
    ValidationFailed and Unexpected. Anything else is turned into
    Unexpected at the boundary."""


class NotFound(ApiError):
    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationFailed(ApiError):
    def __init__(self, errors: dict[str, list[str]]):
        super().__init__("Validation failed")
        self.errors = errors


class Unexpected(ApiError):
    def __init__(self):
        super().__init__("Unexpected error occurred.")


class ErrorResponse(BaseModel):
    title: str = "An error occurred"
    status: int
    detail: str | None = None
    trace_id: str
    errors: dict[str, list[str]] | None = None

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


def error_body(status: int, title: str, detail: str | None, trace_id: str, errors=None) -> dict:
    body = ErrorResponse(title=title, status=status, detail=detail, trace_id=trace_id, errors=errors)
    return body.model_dump(by_alias=True)


def render_error(error: ApiError, trace_id: str) -> tuple[int, dict]:
    match error:
        case NotFound():
            status, title, detail, errors = 404, "Resource not found", error.message, None
        case ValidationFailed():
            status, title, detail, errors = 400, "Validation error", str(error), error.errors
        case Unexpected():
            status, title, detail, errors = 500, "Internal server error", str(error), None
        case _:
            raise TypeError(f"Unmapped error kind: {type(error).__name__}")

    return status, error_body(status, title, detail, trace_id, errors)


def render_http_error(status: int, detail: str, trace_id: str) -> tuple[int, dict]:
    """Routing-level failures raised by the framework (unknown path, wrong method)."""
    if status == 404:
        return render_error(NotFound(detail), trace_id)
    return status, error_body(status, HTTPStatus(status).phrase, detail, trace_id)


def field_errors(raw_errors: Iterable[dict]) -> ValidationFailed:
    """Group pydantic error dicts by field, keyed by the wire (camelCase) name."""
    errors: dict[str, list[str]] = {}
    for err in raw_errors:
        loc = [part for part in err.get("loc", ()) if isinstance(part, str)]
        # ("body", "title") -> "title"; ("body",) -> "body"
        field = loc[-1] if loc else "request"
        if "_" in field:
            field = to_camel(field)
        errors.setdefault(field, []).append(err.get("msg", "Invalid value."))
    return ValidationFailed(errors)
