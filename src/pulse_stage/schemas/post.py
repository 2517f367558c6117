"""Post-related Pydantic schemas."""

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from .engagement import EngagementResponse


class PostResponse(BaseModel):
    """Post payload merged with its engagement projection."""

    id: uuid.UUID
    author_id: uuid.UUID
    author_email: str | None = None
    content: str
    image_urls: list[str] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime
    engagement: EngagementResponse = Field(default_factory=EngagementResponse)

    model_config = ConfigDict(from_attributes=True)


class PaginationInfo(BaseModel):
    """Page position within the feed."""

    current_page: int
    limit: int
    total: int
    total_pages: int


class PostListResponse(BaseModel):
    """One feed page."""

    posts: list[PostResponse]
    pagination: PaginationInfo
