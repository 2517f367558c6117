"""Like and comment Pydantic schemas."""

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class CommentCreate(BaseModel):
    """Schema for adding a comment; length bounds are enforced after trimming."""

    content: str = Field(..., description="Comment text")


class CommentResponse(BaseModel):
    """A single comment."""

    id: uuid.UUID
    post_id: uuid.UUID
    author_id: uuid.UUID
    content: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class LikeToggleResponse(BaseModel):
    """Like count and caller membership after a toggle."""

    count: int
    liked_by_caller: bool

    model_config = ConfigDict(from_attributes=True)


class CommentAddedResponse(BaseModel):
    """Newly created comment and the updated comment count."""

    comment: CommentResponse
    comment_count: int

    model_config = ConfigDict(from_attributes=True)


class CommentRemovedResponse(BaseModel):
    """Comment count after a deletion."""

    remaining_count: int

    model_config = ConfigDict(from_attributes=True)


class EngagementResponse(BaseModel):
    """Read-only projection of a post's likes and comments."""

    like_count: int = 0
    liked_by_caller: bool = False
    comment_count: int = 0
    comments: list[CommentResponse] = Field(default_factory=list)

    model_config = ConfigDict(from_attributes=True)
