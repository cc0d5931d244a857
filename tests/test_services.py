# tests/test_services.py
import pytest
from sqlalchemy import func, select

from helpdesk.core.errors import NotFound
from helpdesk.ticket import services as ticket_service
from helpdesk.ticket.models import TicketComment, TicketPriority, TicketStatus
from helpdesk.ticket.schemas import CommentCreate, CommentUpdate, TicketCreate, TicketUpdate


def _comment_count(db, ticket_id=None):
    stmt = select(func.count(TicketComment.id))
    if ticket_id is not None:
        stmt = stmt.where(TicketComment.ticket_id == ticket_id)
    return db.scalar(stmt)


def test_create_sets_server_defaults(db, clock):
    payload = TicketCreate.model_validate({"title": "T", "description": "D", "status": "Closed"})
    ticket = ticket_service.create_ticket(db, payload)

    assert ticket.id is not None
    assert ticket.status == TicketStatus.OPEN
    assert ticket.priority == TicketPriority.MEDIUM
    assert ticket.created_at == ticket.updated_at
    assert ticket.created_at.tzinfo is not None


def test_update_overwrites_fields_and_refreshes_updated_at(db, clock):
    ticket = ticket_service.create_ticket(db, TicketCreate(title="T", description="D", assignee="amy"))
    created_at = ticket.created_at

    updated = ticket_service.update_ticket(
        db,
        ticket.id,
        TicketUpdate(title="T2", description="D2", status=TicketStatus.IN_PROGRESS, priority=TicketPriority.URGENT),
    )

    assert updated.title == "T2"
    assert updated.status == TicketStatus.IN_PROGRESS
    assert updated.priority == TicketPriority.URGENT
    assert updated.assignee is None
    assert updated.created_at == created_at
    assert updated.updated_at > created_at


def test_update_missing_ticket(db):
    payload = TicketUpdate(title="T", description="D", status=TicketStatus.OPEN, priority=TicketPriority.LOW)
    with pytest.raises(NotFound):
        ticket_service.update_ticket(db, 99, payload)


def test_delete_cascades_to_comments(db):
    ticket = ticket_service.create_ticket(db, TicketCreate(title="T", description="D"))
    other = ticket_service.create_ticket(db, TicketCreate(title="O", description="D"))
    for i in range(3):
        ticket_service.add_comment(db, ticket.id, CommentCreate(author="a", message=f"m{i}"))
    ticket_service.add_comment(db, other.id, CommentCreate(author="a", message="keep"))
    ticket_id = ticket.id

    ticket_service.delete_ticket(db, ticket_id)

    assert _comment_count(db, ticket_id) == 0
    assert _comment_count(db) == 1
    with pytest.raises(NotFound):
        ticket_service.get_comments(db, ticket_id)


def test_delete_missing_ticket(db):
    with pytest.raises(NotFound):
        ticket_service.delete_ticket(db, 5)


def test_add_comment_trims_and_orders_newest_first(db, clock):
    ticket = ticket_service.create_ticket(db, TicketCreate(title="T", description="D"))
    first = ticket_service.add_comment(db, ticket.id, CommentCreate(author=" amy ", message=" hi "))
    second = ticket_service.add_comment(db, ticket.id, CommentCreate(author="bob", message="hello"))

    assert first.author == "amy"
    assert first.message == "hi"
    assert [c.id for c in ticket_service.get_comments(db, ticket.id)] == [second.id, first.id]


def test_add_comment_to_missing_ticket_creates_nothing(db):
    with pytest.raises(NotFound, match="Ticket not found. Id=77"):
        ticket_service.add_comment(db, 77, CommentCreate(author="a", message="m"))
    assert _comment_count(db) == 0


def test_update_comment_changes_message_only(db):
    ticket = ticket_service.create_ticket(db, TicketCreate(title="T", description="D"))
    comment = ticket_service.add_comment(db, ticket.id, CommentCreate(author="amy", message="old"))

    updated = ticket_service.update_comment(db, comment.id, CommentUpdate(message="  new  "))

    assert updated.message == "new"
    assert updated.author == "amy"
    assert updated.ticket_id == ticket.id


def test_comment_not_found(db):
    with pytest.raises(NotFound, match="Comment not found. Id=3"):
        ticket_service.update_comment(db, 3, CommentUpdate(message="m"))
    with pytest.raises(NotFound):
        ticket_service.delete_comment(db, 3)


def test_delete_comment(db):
    ticket = ticket_service.create_ticket(db, TicketCreate(title="T", description="D"))
    comment = ticket_service.add_comment(db, ticket.id, CommentCreate(author="amy", message="m"))

    ticket_service.delete_comment(db, comment.id)

    assert ticket_service.get_comments(db, ticket.id) == []
