"""
Durable Store Models

Users, events, event participants and event comments. Foreign keys and
the participant uniqueness constraint are enforced by the database, not
by application code.
"""

from datetime import datetime, timezone

from sqlalchemy import (
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from .database import Base


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True)
    handle = Column(String(50), unique=True, index=True, nullable=False)
    display_name = Column(String(50), nullable=False)

    comments = relationship("Comment", back_populates="author")


class Event(Base):
    __tablename__ = "events"
    __table_args__ = (
        Index("host_index", "host_handle"),
        Index("start_date_index", "start_date"),
    )

    id = Column(Integer, primary_key=True)
    title = Column(String(100), nullable=False)
    description = Column(Text)
    start_date = Column(DateTime(timezone=True), nullable=False)
    end_date = Column(DateTime(timezone=True), nullable=False)
    host_handle = Column(
        String(50),
        ForeignKey("users.handle", ondelete="CASCADE"),
        nullable=False,
    )
    created_at = Column(DateTime(timezone=True), default=utc_now, nullable=False)

    participants = relationship("Participant", back_populates="event")
    comments = relationship("Comment", back_populates="event")


class Participant(Base):
    __tablename__ = "participants"
    __table_args__ = (
        UniqueConstraint("event_id", "user_handle", name="uq_participant_event_user"),
        Index("event_participants_index", "event_id"),
        Index("user_participants_index", "user_handle"),
    )

    id = Column(Integer, primary_key=True)
    event_id = Column(
        Integer, ForeignKey("events.id", ondelete="CASCADE"), nullable=False
    )
    user_handle = Column(
        String(50),
        ForeignKey("users.handle", ondelete="CASCADE"),
        nullable=False,
    )
    joined_at = Column(DateTime(timezone=True), default=utc_now, nullable=False)

    event = relationship("Event", back_populates="participants")


class Comment(Base):
    __tablename__ = "comments"
    __table_args__ = (Index("event_comments_index", "event_id"),)

    id = Column(Integer, primary_key=True)
    event_id = Column(
        Integer, ForeignKey("events.id", ondelete="CASCADE"), nullable=False
    )
    user_handle = Column(
        String(50),
        ForeignKey("users.handle", ondelete="CASCADE"),
        nullable=False,
    )
    content = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utc_now, nullable=False)

    event = relationship("Event", back_populates="comments")
    author = relationship("User", back_populates="comments")
