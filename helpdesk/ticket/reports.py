# helpdesk/ticket/reports.py
from collections.abc import Mapping

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from helpdesk.ticket.models import Ticket, TicketPriority, TicketStatus
from helpdesk.ticket.schemas import PriorityCount, StatusCount


def _grouped_counts(db: Session, column) -> dict:
    rows = db.execute(select(column, func.count(Ticket.id)).group_by(column))
    return {key: count for key, count in rows}


def count_by_status(db: Session) -> list[StatusCount]:
    """Only statuses that occur in the data get a row."""
    counts = _grouped_counts(db, Ticket.status)
    return [StatusCount(status=s, count=counts[s]) for s in TicketStatus if s in counts]


def fill_priority_counts(raw: Mapping[TicketPriority, int]) -> list[PriorityCount]:
    """Every priority gets a row, zero when absent, in declaration order."""
    return [PriorityCount(priority=p, count=raw.get(p, 0)) for p in TicketPriority]


def count_by_priority(db: Session) -> list[PriorityCount]:
    return fill_priority_counts(_grouped_counts(db, Ticket.priority))
