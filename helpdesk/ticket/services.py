# helpdesk/ticket/services.py
import logging
from contextlib import contextmanager

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from helpdesk.core.errors import NotFound
from helpdesk.ticket.models import Ticket, TicketComment, TicketStatus, utcnow
from helpdesk.ticket.query import get_ticket
from helpdesk.ticket.schemas import CommentCreate, CommentUpdate, TicketCreate, TicketUpdate

logger = logging.getLogger(__name__)


@contextmanager
def _transaction(db: Session):
    """One commit per write; a failed commit leaves nothing behind."""
    try:
        yield
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise


def _ensure_ticket_exists(db: Session, ticket_id: int) -> None:
    exists = db.scalar(select(Ticket.id).where(Ticket.id == ticket_id))
    if exists is None:
        logger.warning("Ticket %s not found", ticket_id)
        raise NotFound(f"Ticket not found. Id={ticket_id}")


def get_comment(db: Session, comment_id: int) -> TicketComment:
    comment = db.get(TicketComment, comment_id)
    if comment is None:
        logger.warning("Comment %s not found", comment_id)
        raise NotFound(f"Comment not found. Id={comment_id}")
    return comment


def create_ticket(db: Session, payload: TicketCreate) -> Ticket:
    now = utcnow()
    db_ticket = Ticket(
        title=payload.title,
        description=payload.description,
        priority=payload.priority,
        assignee=payload.assignee,
        tags=payload.tags,
        status=TicketStatus.OPEN,
        created_at=now,
        updated_at=now,
    )
    with _transaction(db):
        db.add(db_ticket)
    db.refresh(db_ticket)
    logger.info("Created ticket %s", db_ticket.id)
    return db_ticket


def update_ticket(db: Session, ticket_id: int, payload: TicketUpdate) -> Ticket:
    db_ticket = get_ticket(db, ticket_id)
    with _transaction(db):
        db_ticket.title = payload.title
        db_ticket.description = payload.description
        db_ticket.status = payload.status
        db_ticket.priority = payload.priority
        db_ticket.assignee = payload.assignee
        db_ticket.tags = payload.tags
        db_ticket.updated_at = max(utcnow(), db_ticket.created_at)
    db.refresh(db_ticket)
    logger.info("Updated ticket %s", ticket_id)
    return db_ticket


def delete_ticket(db: Session, ticket_id: int) -> Ticket:
    db_ticket = get_ticket(db, ticket_id)
    # Comments go in the same flush as the ticket; reload them so none are missed
    db.expire(db_ticket, ["comments"])
    with _transaction(db):
        db.delete(db_ticket)
    logger.info("Deleted ticket %s", ticket_id)
    return db_ticket


def get_comments(db: Session, ticket_id: int) -> list[TicketComment]:
    _ensure_ticket_exists(db, ticket_id)
    stmt = (
        select(TicketComment)
        .where(TicketComment.ticket_id == ticket_id)
        .order_by(TicketComment.created_at.desc(), TicketComment.id.desc())
    )
    return list(db.scalars(stmt))


def add_comment(db: Session, ticket_id: int, payload: CommentCreate) -> TicketComment:
    _ensure_ticket_exists(db, ticket_id)
    comment = TicketComment(
        ticket_id=ticket_id,
        author=payload.author.strip(),
        message=payload.message.strip(),
        created_at=utcnow(),
    )
    with _transaction(db):
        db.add(comment)
    db.refresh(comment)
    logger.info("Added comment %s to ticket %s", comment.id, ticket_id)
    return comment


def update_comment(db: Session, comment_id: int, payload: CommentUpdate) -> TicketComment:
    comment = get_comment(db, comment_id)
    with _transaction(db):
        comment.message = payload.message.strip()
    db.refresh(comment)
    logger.info("Updated comment %s", comment_id)
    return comment


def delete_comment(db: Session, comment_id: int) -> TicketComment:
    comment = get_comment(db, comment_id)
    with _transaction(db):
        db.delete(comment)
    logger.info("Deleted comment %s", comment_id)
    return comment
