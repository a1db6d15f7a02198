"""
Durable Store Package

This package holds the relational store for users, events, participants
and comments, and the Comment Persistence Bridge that creates and lists
comments on top of it.
"""

from .comments import CommentBridge, CommentEnvelope
from .database import (
    Base,
    DEFAULT_DATABASE_URL,
    create_db_engine,
    create_session_factory,
    create_tables,
)
from .directory import create_event, create_user
from .errors import ChatStoreError, StorageFailure, ValidationError
from .participants import ParticipantService
from .validation import MAX_COMMENT_LENGTH, MIN_COMMENT_LENGTH

__all__ = [
    "CommentBridge",
    "CommentEnvelope",
    "ParticipantService",
    "Base",
    "DEFAULT_DATABASE_URL",
    "create_db_engine",
    "create_session_factory",
    "create_tables",
    "create_event",
    "create_user",
    "ChatStoreError",
    "StorageFailure",
    "ValidationError",
    "MAX_COMMENT_LENGTH",
    "MIN_COMMENT_LENGTH",
]
