# helpdesk/ticket/routes.py
from typing import Annotated

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from helpdesk.core.database import get_db
from helpdesk.ticket import reports
from helpdesk.ticket import services as ticket_service
from helpdesk.ticket.query import get_ticket, list_tickets
from helpdesk.ticket.schemas import (
    CommentCreate,
    CommentOut,
    CommentUpdate,
    Page,
    PriorityCount,
    StatusCount,
    TicketCreate,
    TicketOut,
    TicketQuery,
    TicketUpdate,
)

router = APIRouter(prefix="/api/tickets", tags=["Tickets"])


@router.get("", response_model=Page[TicketOut])
def list_all(query: Annotated[TicketQuery, Query()], db: Session = Depends(get_db)):
    return list_tickets(db, query)


@router.post("", response_model=TicketOut, status_code=201)
def create(ticket: TicketCreate, db: Session = Depends(get_db)):
    return ticket_service.create_ticket(db, ticket)


# Reports and comment paths are declared before "/{ticket_id}" routes
@router.get("/reports/status", response_model=list[StatusCount], tags=["Reports"])
def report_by_status(db: Session = Depends(get_db)):
    return reports.count_by_status(db)


@router.get("/reports/priority", response_model=list[PriorityCount], tags=["Reports"])
def report_by_priority(db: Session = Depends(get_db)):
    return reports.count_by_priority(db)


@router.put("/comments/{comment_id}", response_model=CommentOut)
def update_comment(comment_id: int, comment: CommentUpdate, db: Session = Depends(get_db)):
    return ticket_service.update_comment(db, comment_id, comment)


@router.delete("/comments/{comment_id}", response_model=CommentOut)
def delete_comment(comment_id: int, db: Session = Depends(get_db)):
    return ticket_service.delete_comment(db, comment_id)


@router.get("/{ticket_id}", response_model=TicketOut)
def get(ticket_id: int, db: Session = Depends(get_db)):
    return get_ticket(db, ticket_id)


@router.put("/{ticket_id}", response_model=TicketOut)
def update(ticket_id: int, ticket: TicketUpdate, db: Session = Depends(get_db)):
    return ticket_service.update_ticket(db, ticket_id, ticket)


@router.delete("/{ticket_id}", response_model=TicketOut)
def delete(ticket_id: int, db: Session = Depends(get_db)):
    return ticket_service.delete_ticket(db, ticket_id)


@router.get("/{ticket_id}/comments", response_model=list[CommentOut])
def list_comments(ticket_id: int, db: Session = Depends(get_db)):
    return ticket_service.get_comments(db, ticket_id)


@router.post("/{ticket_id}/comments", response_model=CommentOut, status_code=201)
def add_comment(ticket_id: int, comment: CommentCreate, db: Session = Depends(get_db)):
    return ticket_service.add_comment(db, ticket_id, comment)
