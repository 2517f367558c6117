"""Data access helpers."""

from .engagement_repo import EngagementRepository

__all__ = ["EngagementRepository"]
