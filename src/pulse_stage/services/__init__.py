"""Business logic services for the Pulse Stage application."""

from .engagement import EngagementLedger
from .storage import ObjectStorage

__all__ = [
    "EngagementLedger",
    "ObjectStorage",
]
