"""Database engine, sessions and shared column helpers."""

from .session import Base, SessionLocal, build_engine, create_tables, get_db

__all__ = ["Base", "SessionLocal", "build_engine", "create_tables", "get_db"]
