# helpdesk/ticket/validators.py
from pydantic import AfterValidator
from pydantic_core import PydanticCustomError

from helpdesk.ticket.models import MAX_PAGE_SIZE, SORT_KEYS


def required_text(label: str, max_length: int | None = None) -> AfterValidator:
    """Non-blank after trimming, optionally capped. A missing field is
    defaulted to None by the schema, so it lands here too and gets the
    same message as a blank one."""

    def check(value: str | None) -> str:
        if value is None or not value.strip():
            raise PydanticCustomError("required", "{label} is required.", {"label": label})
        if max_length is not None and len(value) > max_length:
            raise PydanticCustomError(
                "max_length",
                "{label} can be max {max_length} characters.",
                {"label": label, "max_length": max_length},
            )
        return value

    return AfterValidator(check)


def optional_text(label: str, max_length: int) -> AfterValidator:
    def check(value: str | None) -> str | None:
        if value is not None and value.strip() and len(value) > max_length:
            raise PydanticCustomError(
                "max_length",
                "{label} can be max {max_length} characters.",
                {"label": label, "max_length": max_length},
            )
        return value

    return AfterValidator(check)


def check_page(value: int) -> int:
    if value <= 0:
        raise PydanticCustomError("page", "Page must be greater than 0.")
    return value


def check_page_size(value: int) -> int:
    if not 1 <= value <= MAX_PAGE_SIZE:
        raise PydanticCustomError(
            "page_size", "Page size must be between 1 and {max}.", {"max": MAX_PAGE_SIZE}
        )
    return value


def check_sort(value: str | None) -> str | None:
    # Blank counts as absent; keys are case-insensitive
    if value is None or not value.strip():
        return None
    if value.strip().lower() not in SORT_KEYS:
        raise PydanticCustomError(
            "sort", "Sort must be one of: {allowed}.", {"allowed": ", ".join(SORT_KEYS.values())}
        )
    return value
