"""
UI Package for the Event Chat Client

This package contains the Textual-based terminal chat view.
"""

from .app import EventChatApp

__all__ = ["EventChatApp"]
