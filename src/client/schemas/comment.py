"""
Comment Schema Definitions

The comment envelope as seen by clients, both in API responses and in
relayed receive_message frames.
"""

from dataclasses import dataclass, replace
from typing import Any, Dict

from .base import BaseResponse


@dataclass(frozen=True)
class Comment(BaseResponse):
    """
    A stored event comment.

    Attributes:
        id: Identifier assigned by the durable store
        content: Comment text
        created_at: ISO 8601 timestamp assigned by the durable store
        user_handle: Handle of the author
        display_name: Display name of the author (may be empty when the
                      write response did not include it)
    """

    id: int
    content: str
    created_at: str
    user_handle: str
    display_name: str = ""

    @classmethod
    def _from_data(cls, data: Dict[str, Any]) -> "Comment":
        """Create from the camelCase wire representation."""
        return cls(
            id=data["id"],
            content=data["content"],
            created_at=data["createdAt"],
            user_handle=data["userHandle"],
            display_name=data.get("displayName") or "",
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the camelCase wire representation."""
        return {
            "id": self.id,
            "content": self.content,
            "createdAt": self.created_at,
            "userHandle": self.user_handle,
            "displayName": self.display_name,
        }

    def with_display_name(self, display_name: str) -> "Comment":
        """Return a copy carrying the given display name."""
        return replace(self, display_name=display_name)
