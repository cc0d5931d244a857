# helpdesk/ticket/models.py
import enum
from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Enum, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship
from sqlalchemy.types import TypeDecorator

from helpdesk.core.database import Base

TITLE_MAX_LENGTH = 150
ASSIGNEE_MAX_LENGTH = 100
TAGS_MAX_LENGTH = 250
AUTHOR_MAX_LENGTH = 80
MESSAGE_MAX_LENGTH = 500

DEFAULT_PAGE = 1
DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100

DEFAULT_SORT = "createdAtDesc"

# lower-cased key -> canonical spelling
SORT_KEYS = {
    "createdatasc": "createdAtAsc",
    "createdatdesc": "createdAtDesc",
    "updatedatasc": "updatedAtAsc",
    "updatedatdesc": "updatedAtDesc",
}


class TicketStatus(str, enum.Enum):
    OPEN = "Open"
    IN_PROGRESS = "InProgress"
    RESOLVED = "Resolved"
    CLOSED = "Closed"


# Member order is the reporting order
class TicketPriority(str, enum.Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"
    URGENT = "Urgent"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class UTCDateTime(TypeDecorator):
    """Timezone-aware datetime that survives stores without offset support."""

    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        if value.tzinfo is None:
            raise ValueError("naive datetime given for a UTC column")
        return value.astimezone(timezone.utc)

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)


def _enum_column(enum_cls):
    return Enum(
        enum_cls,
        values_callable=lambda members: [m.value for m in members],
        native_enum=False,
        validate_strings=True,
        length=20,
    )


class Ticket(Base):
    __tablename__ = "tickets"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(TITLE_MAX_LENGTH), nullable=False)
    description = Column(Text, nullable=False)
    status = Column(_enum_column(TicketStatus), nullable=False, default=TicketStatus.OPEN, index=True)
    priority = Column(_enum_column(TicketPriority), nullable=False, default=TicketPriority.MEDIUM, index=True)
    created_at = Column(UTCDateTime, nullable=False)
    updated_at = Column(UTCDateTime, nullable=False)
    assignee = Column(String(ASSIGNEE_MAX_LENGTH), nullable=True)
    tags = Column(String(TAGS_MAX_LENGTH), nullable=True)

    comments = relationship(
        "TicketComment",
        back_populates="ticket",
        cascade="all, delete-orphan",
        order_by="TicketComment.created_at",
    )


class TicketComment(Base):
    __tablename__ = "ticket_comments"

    id = Column(Integer, primary_key=True, index=True)
    ticket_id = Column(Integer, ForeignKey("tickets.id", ondelete="CASCADE"), nullable=False, index=True)
    author = Column(String(AUTHOR_MAX_LENGTH), nullable=False)
    message = Column(String(MESSAGE_MAX_LENGTH), nullable=False)
    created_at = Column(UTCDateTime, nullable=False)

    ticket = relationship("Ticket", back_populates="comments")
