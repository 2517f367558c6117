"""
Pydantic schemas for API request/response models.

These schemas define the structure of API data for serialization and validation.
"""

from .engagement import (
    CommentAddedResponse,
    CommentCreate,
    CommentRemovedResponse,
    CommentResponse,
    EngagementResponse,
    LikeToggleResponse,
)
from .error_log import ErrorReport
from .post import PaginationInfo, PostListResponse, PostResponse
from .user import AuthResponse, LoginRequest, RegisterRequest, UserResponse

__all__ = [
    "AuthResponse", "LoginRequest", "RegisterRequest", "UserResponse",
    "CommentAddedResponse", "CommentCreate", "CommentRemovedResponse", "CommentResponse",
    "EngagementResponse", "LikeToggleResponse",
    "ErrorReport",
    "PaginationInfo", "PostListResponse", "PostResponse",
]
