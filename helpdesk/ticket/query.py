# helpdesk/ticket/query.py
import logging
from typing import NamedTuple

from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session

from helpdesk.core.errors import NotFound
from helpdesk.ticket.models import (
    DEFAULT_PAGE,
    DEFAULT_PAGE_SIZE,
    DEFAULT_SORT,
    MAX_PAGE_SIZE,
    SORT_KEYS,
    Ticket,
)
from helpdesk.ticket.schemas import TicketQuery

logger = logging.getLogger(__name__)


class SortOrder(NamedTuple):
    key: str
    field: str
    descending: bool


class TicketPage:
    """One slice of the filtered set; items stay ORM objects for the response model."""

    def __init__(self, items: list[Ticket], page: int, page_size: int, total_count: int):
        self.items = items
        self.page = page
        self.page_size = page_size
        self.total_count = total_count


def normalize_paging(page: int | None, page_size: int | None) -> tuple[int, int]:
    page = page if page is not None and page >= 1 else DEFAULT_PAGE
    if page_size is None or page_size < 1:
        page_size = DEFAULT_PAGE_SIZE
    return page, min(page_size, MAX_PAGE_SIZE)


def resolve_sort(sort: str | None) -> SortOrder:
    """Map a sort key to its column and direction.

    Keys are case-insensitive. Unknown keys and None resolve to
    createdAtDesc; TicketQuery validation rejects unknown explicit keys
    before they get here, so this only matters to direct callers.
    """
    key = SORT_KEYS.get((sort or "").strip().lower(), DEFAULT_SORT)
    field = "created_at" if key.startswith("created") else "updated_at"
    return SortOrder(key=key, field=field, descending=key.endswith("Desc"))


def _escape_like(text: str) -> str:
    return text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def search_clause(search: str | None):
    """None when the search is blank, so the caller skips filtering."""
    if search is None or not search.strip():
        return None
    pattern = f"%{_escape_like(search.strip())}%"
    return or_(
        Ticket.title.ilike(pattern, escape="\\"),
        Ticket.description.ilike(pattern, escape="\\"),
        Ticket.assignee.is_not(None) & Ticket.assignee.ilike(pattern, escape="\\"),
        Ticket.tags.is_not(None) & Ticket.tags.ilike(pattern, escape="\\"),
    )


def _order_by(order: SortOrder):
    column = getattr(Ticket, order.field)
    # id breaks timestamp ties so sequential pages never overlap
    if order.descending:
        return column.desc(), Ticket.id.desc()
    return column.asc(), Ticket.id.asc()


def list_tickets(db: Session, query: TicketQuery) -> TicketPage:
    page, page_size = normalize_paging(query.page, query.page_size)

    stmt = select(Ticket)
    clause = search_clause(query.search)
    if clause is not None:
        stmt = stmt.where(clause)
    if query.status is not None:
        stmt = stmt.where(Ticket.status == query.status)
    if query.priority is not None:
        stmt = stmt.where(Ticket.priority == query.priority)

    total_count = db.scalar(select(func.count()).select_from(stmt.subquery()))

    stmt = stmt.order_by(*_order_by(resolve_sort(query.sort)))
    stmt = stmt.offset((page - 1) * page_size).limit(page_size)
    items = list(db.scalars(stmt))

    return TicketPage(items=items, page=page, page_size=page_size, total_count=total_count)


def get_ticket(db: Session, ticket_id: int) -> Ticket:
    ticket = db.get(Ticket, ticket_id)
    if ticket is None:
        logger.warning("Ticket %s not found", ticket_id)
        raise NotFound(f"Ticket not found. Id={ticket_id}")
    return ticket
