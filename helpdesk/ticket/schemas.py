# helpdesk/ticket/schemas.py
from datetime import datetime
from typing import Annotated, Generic, TypeVar

from pydantic import AfterValidator, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from helpdesk.ticket.models import (
    ASSIGNEE_MAX_LENGTH,
    AUTHOR_MAX_LENGTH,
    DEFAULT_PAGE,
    DEFAULT_PAGE_SIZE,
    DEFAULT_SORT,
    MESSAGE_MAX_LENGTH,
    TAGS_MAX_LENGTH,
    TITLE_MAX_LENGTH,
    TicketPriority,
    TicketStatus,
)
from helpdesk.ticket.validators import (
    check_page,
    check_page_size,
    check_sort,
    optional_text,
    required_text,
)

T = TypeVar("T")

Title = Annotated[str | None, required_text("Title", TITLE_MAX_LENGTH)]
Description = Annotated[str | None, required_text("Description")]
Assignee = Annotated[str | None, optional_text("Assignee", ASSIGNEE_MAX_LENGTH)]
Tags = Annotated[str | None, optional_text("Tags", TAGS_MAX_LENGTH)]
Author = Annotated[str | None, required_text("Author", AUTHOR_MAX_LENGTH)]
Message = Annotated[str | None, required_text("Message", MESSAGE_MAX_LENGTH)]


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class TicketBase(CamelModel):
    # Required text defaults to None and validates that default, so a missing
    # field fails with the same message as a blank one
    title: Title = Field(default=None, validate_default=True)
    description: Description = Field(default=None, validate_default=True)
    priority: TicketPriority = TicketPriority.MEDIUM
    assignee: Assignee = None
    tags: Tags = None


class TicketCreate(TicketBase):
    pass


class TicketUpdate(TicketBase):
    status: TicketStatus
    priority: TicketPriority


class TicketOut(CamelModel):
    id: int
    title: str
    description: str
    status: TicketStatus
    priority: TicketPriority
    created_at: datetime
    updated_at: datetime
    assignee: str | None = None
    tags: str | None = None


class TicketQuery(CamelModel):
    search: str | None = None
    status: TicketStatus | None = None
    priority: TicketPriority | None = None
    sort: Annotated[str | None, AfterValidator(check_sort)] = DEFAULT_SORT
    page: Annotated[int, AfterValidator(check_page)] = DEFAULT_PAGE
    page_size: Annotated[int, AfterValidator(check_page_size)] = DEFAULT_PAGE_SIZE


class Page(CamelModel, Generic[T]):
    items: list[T]
    page: int
    page_size: int
    total_count: int


class CommentCreate(CamelModel):
    author: Author = Field(default=None, validate_default=True)
    message: Message = Field(default=None, validate_default=True)


class CommentUpdate(CamelModel):
    message: Message = Field(default=None, validate_default=True)


class CommentOut(CamelModel):
    id: int
    ticket_id: int
    author: str
    message: str
    created_at: datetime


class StatusCount(CamelModel):
    status: TicketStatus
    count: int = Field(ge=0)


class PriorityCount(CamelModel):
    priority: TicketPriority
    count: int = Field(ge=0)
