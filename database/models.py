"""
SQLAlchemy ORM models for the credential store.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Index, String, Uuid, func
from sqlalchemy.orm import DeclarativeBase


USERNAME_INDEX = "idx_users_username_lower"
EMAIL_INDEX = "idx_users_email_lower"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    pass


class User(Base):
    __tablename__ = "users"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    username = Column(String(30), nullable=False)        # lowercase form
    display_name = Column(String(30), nullable=False)    # as typed at registration
    email = Column(String(320), nullable=False)
    password_hash = Column(String(255), nullable=False)
    hash_algorithm = Column(String(20), nullable=False, default="bcrypt")
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow)
    last_login = Column(DateTime(timezone=True), nullable=True)

    __table_args__ = (
        Index(USERNAME_INDEX, func.lower(username), unique=True),
        Index(EMAIL_INDEX, func.lower(email), unique=True),
    )

    def __repr__(self) -> str:
        return f"<User id={self.id} username={self.username!r}>"
