from typing import List

from pydantic import BaseModel, ConfigDict, Field


class CommentCreateRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    # Length rules live in the bridge so HTTP and direct callers share them
    content: str
    user_handle: str = Field(alias="userHandle")


class EventMembershipRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    user_handle: str = Field(alias="userHandle")


class CommentOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: int
    content: str
    created_at: str = Field(alias="createdAt")
    user_handle: str = Field(alias="userHandle")
    display_name: str = Field(alias="displayName")


class CommentCreatedResponse(BaseModel):
    comment: CommentOut


class CommentListResponse(BaseModel):
    comments: List[CommentOut]


class JoinedResponse(BaseModel):
    joined: bool


class LeftResponse(BaseModel):
    left: bool
