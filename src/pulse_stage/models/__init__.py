"""SQLAlchemy models for the Pulse Stage application."""

from .engagement import PostComment, PostCommentList, PostLike, PostLikeSet
from .error_log import ErrorLog
from .post import Post, PostImage
from .user import User

__all__ = [
    "ErrorLog",
    "Post", "PostImage",
    "PostComment", "PostCommentList", "PostLike", "PostLikeSet",
    "User",
]
