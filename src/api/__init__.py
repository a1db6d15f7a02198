"""
Comment API Package

HTTP boundary in front of the durable store: comment history, comment
creation and event join/leave.
"""

from .app import create_app

__all__ = ["create_app"]
