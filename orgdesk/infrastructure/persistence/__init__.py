"""Persistence: SQLAlchemy engine/session, ORM models and cached repositories."""
