"""
Comment API Client

HTTP client for the durable side of the chat: loading an event's
comment history, storing a new comment, and joining or leaving an
event.
"""

import logging
from typing import Dict, List, Optional

import httpx

from .schemas import Comment

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10.0


class CommentApiError(Exception):
    """Raised when the comment API cannot be reached or fails."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class CommentRejectedError(CommentApiError):
    """
    Raised when the API rejects a request as invalid (HTTP 400).

    Attributes:
        detail: Field-level detail returned by the API
    """

    def __init__(self, message: str, detail: Optional[Dict] = None):
        super().__init__(message, status_code=400)
        self.detail = detail or {}


class CommentsApiClient:
    """
    Async client for the comment and membership endpoints.

    Attributes:
        base_url: Base URL of the API (e.g., http://localhost:8000)
    """

    def __init__(
        self,
        base_url: str,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        """
        Initialize the API client.

        Args:
            base_url: Base URL of the API
            transport: Optional httpx transport (for testing)
            timeout: Request timeout in seconds
        """
        self.base_url = base_url
        self._client = httpx.AsyncClient(
            base_url=base_url, transport=transport, timeout=timeout
        )

    async def close(self) -> None:
        await self._client.aclose()

    async def _request(self, method: str, path: str, **kwargs) -> httpx.Response:
        try:
            response = await self._client.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            logger.error(f"{method} {path} failed: {e}")
            raise CommentApiError(f"Request to {path} failed: {e}") from e

        if response.status_code == 400:
            body = _json_or_empty(response)
            raise CommentRejectedError(
                body.get("error", "Invalid request"), detail=body.get("detail")
            )
        if response.is_error:
            logger.error(f"{method} {path} returned {response.status_code}")
            raise CommentApiError(
                f"{method} {path} returned {response.status_code}",
                status_code=response.status_code,
            )
        return response

    async def fetch_comments(self, event_id: str) -> List[Comment]:
        """
        Load an event's comments, oldest first.

        Raises:
            CommentApiError: If the request fails
        """
        response = await self._request("GET", f"/events/{event_id}/comments")
        comments = [Comment.from_dict(c) for c in response.json()["comments"]]
        logger.info(f"Fetched {len(comments)} comments for event {event_id}")
        return comments

    async def post_comment(
        self, event_id: str, user_handle: str, content: str
    ) -> Comment:
        """
        Store a new comment.

        Returns:
            Comment: The stored comment with its id and timestamp

        Raises:
            CommentRejectedError: If the API rejects the content or handle
            CommentApiError: If the write fails
        """
        response = await self._request(
            "POST",
            f"/events/{event_id}/comments",
            json={"content": content, "userHandle": user_handle},
        )
        return Comment.from_dict(response.json()["comment"])

    async def join_event(self, event_id: str, user_handle: str) -> bool:
        response = await self._request(
            "POST", f"/events/{event_id}/join", json={"userHandle": user_handle}
        )
        return bool(response.json().get("joined"))

    async def leave_event(self, event_id: str, user_handle: str) -> bool:
        response = await self._request(
            "DELETE", f"/events/{event_id}/join", json={"userHandle": user_handle}
        )
        return bool(response.json().get("left"))


def _json_or_empty(response: httpx.Response) -> Dict:
    try:
        body = response.json()
    except ValueError:
        return {}
    return body if isinstance(body, dict) else {}
