"""
Credential store — persistence of ``User`` records.

Every method opens its own short-lived session, so callers never hold a
pooled connection between store calls.  Case-insensitive uniqueness of
username and email is enforced by the unique functional indexes declared on
``User``; ``insert_user`` turns a violation into ``UniqueConstraintError``.
"""

from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import func, or_, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from database.models import EMAIL_INDEX, USERNAME_INDEX, User
from database.session import build_engine, build_session_factory, init_db

logger = logging.getLogger(__name__)


class UniqueConstraintError(Exception):
    """An insert collided with an existing username or email."""

    def __init__(self, field: Optional[str] = None) -> None:
        self.field = field
        super().__init__(f"unique constraint violated on {field or 'unknown column'}")


def _to_uuid(value: str | uuid.UUID) -> uuid.UUID:
    return uuid.UUID(value) if isinstance(value, str) else value


_INDEX_FIELDS = {USERNAME_INDEX: "username", EMAIL_INDEX: "email"}


def _conflicting_field(exc: IntegrityError) -> Optional[str]:
    text = str(exc.orig).lower()
    if "unique" not in text and "duplicate" not in text:
        raise exc
    # The violated index is named ahead of any DETAIL line echoing the key value.
    hits = sorted((text.find(name), field) for name, field in _INDEX_FIELDS.items() if name in text)
    return hits[0][1] if hits else None


class CredentialStore:
    """Handle over the ``users`` table, owning the engine and its pool."""

    def __init__(
        self,
        engine: AsyncEngine,
        session_factory: Optional[async_sessionmaker[AsyncSession]] = None,
    ) -> None:
        self._engine = engine
        self._session_factory = session_factory or build_session_factory(engine)

    @classmethod
    def from_url(cls, database_url: str, **engine_kwargs) -> "CredentialStore":
        return cls(build_engine(database_url, **engine_kwargs))

    async def create_schema(self) -> None:
        await init_db(self._engine)

    async def close(self) -> None:
        await self._engine.dispose()
        logger.info("Credential store connection pool closed")

    # ── Writes ───────────────────────────────────────────────────────────

    async def insert_user(
        self,
        *,
        username: str,
        display_name: str,
        email: str,
        password_hash: str,
        hash_algorithm: str,
    ) -> User:
        """
        Insert a new user row and return it.

        Raises ``UniqueConstraintError`` (with ``field`` set to ``"username"``
        or ``"email"`` when it can be told apart) if a case-insensitive
        duplicate already exists, including one committed by a concurrent
        request after the caller's own existence check.
        """
        if not password_hash:
            raise ValueError("password_hash must not be empty")
        user = User(
            username=username,
            display_name=display_name,
            email=email,
            password_hash=password_hash,
            hash_algorithm=hash_algorithm,
        )
        async with self._session_factory() as session:
            session.add(user)
            try:
                await session.commit()
            except IntegrityError as exc:
                await session.rollback()
                raise UniqueConstraintError(_conflicting_field(exc)) from exc
        return user

    async def update_last_login(self, user_id: str | uuid.UUID) -> datetime:
        """Stamp ``last_login`` with the current time; never moves it backwards."""
        uid = _to_uuid(user_id)
        now = datetime.now(timezone.utc)
        async with self._session_factory() as session:
            await session.execute(
                update(User)
                .where(
                    User.id == uid,
                    or_(User.last_login.is_(None), User.last_login <= now),
                )
                .values(last_login=now, updated_at=now)
            )
            await session.commit()
        return now

    # ── Reads ────────────────────────────────────────────────────────────

    async def find_by_lower_username(self, username: str) -> Optional[User]:
        return await self._find_one(func.lower(User.username) == username.lower())

    async def find_by_lower_email(self, email: str) -> Optional[User]:
        return await self._find_one(func.lower(User.email) == email.lower())

    async def find_by_id(self, user_id: str | uuid.UUID) -> Optional[User]:
        try:
            uid = _to_uuid(user_id)
        except ValueError:
            return None
        return await self._find_one(User.id == uid)

    async def _find_one(self, condition) -> Optional[User]:
        async with self._session_factory() as session:
            result = await session.execute(select(User).where(condition))
            return result.scalar_one_or_none()
