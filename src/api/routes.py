import logging

from fastapi import APIRouter, Depends, Request, status

from store import CommentBridge, ParticipantService

from .schemas import (
    CommentCreateRequest,
    CommentCreatedResponse,
    CommentListResponse,
    CommentOut,
    EventMembershipRequest,
    JoinedResponse,
    LeftResponse,
)

logger = logging.getLogger(__name__)

events_router = APIRouter(prefix="/events", tags=["events"])


def get_comment_bridge(request: Request) -> CommentBridge:
    return request.app.state.comment_bridge


def get_participant_service(request: Request) -> ParticipantService:
    return request.app.state.participant_service


@events_router.get("/{event_id}/comments", response_model=CommentListResponse)
def list_comments(
    event_id: str, bridge: CommentBridge = Depends(get_comment_bridge)
):
    """Get all comments of an event, oldest first."""
    comments = bridge.list_comments(event_id)
    return CommentListResponse(
        comments=[CommentOut.model_validate(c.to_dict()) for c in comments]
    )


@events_router.post(
    "/{event_id}/comments",
    response_model=CommentCreatedResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_comment(
    event_id: str,
    body: CommentCreateRequest,
    bridge: CommentBridge = Depends(get_comment_bridge),
):
    """
    Post a comment to an event.

    The comment is stored only; clients relay it to the live room
    themselves once this returns.
    """
    comment = bridge.create_comment(event_id, body.user_handle, body.content)
    return CommentCreatedResponse(
        comment=CommentOut.model_validate(comment.to_dict())
    )


@events_router.post("/{event_id}/join", response_model=JoinedResponse)
def join_event(
    event_id: str,
    body: EventMembershipRequest,
    participants: ParticipantService = Depends(get_participant_service),
):
    participants.join_event(event_id, body.user_handle)
    return JoinedResponse(joined=True)


@events_router.delete("/{event_id}/join", response_model=LeftResponse)
def leave_event(
    event_id: str,
    body: EventMembershipRequest,
    participants: ParticipantService = Depends(get_participant_service),
):
    participants.leave_event(event_id, body.user_handle)
    return LeftResponse(left=True)
