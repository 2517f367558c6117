"""Pulse Stage: social posting API with a like/comment engagement ledger."""

__version__ = "0.1.0"
