"""
Constant-time authentication gate — registration and login orchestration.

Every login and registration attempt that passes input validation is
padded to the same minimum latency (``timing_floor_ms``), and a login for
an unknown identifier still pays for one bcrypt verification against a
dummy digest of the same cost.  Together these keep "no such account" and
"wrong password" indistinguishable by response time, and login failures
share one message so they are indistinguishable by content as well.

The gate never holds a database session while it sleeps: each store call
opens and releases its own.
"""

from __future__ import annotations

import asyncio
import logging
import time
from datetime import datetime
from typing import Any, Awaitable, Callable, Dict, Mapping, Optional

from auth.errors import (
    AuthError,
    AuthenticationFailure,
    DuplicateIdentifierError,
    InternalError,
    ValidationError,
)
from auth.identity import resolve_identity
from auth.jwt import TokenClaims, TokenIssuer
from auth.password import DEFAULT_ROUNDS, HASH_ALGORITHM, hash_password, verify_password
from config.settings import DEFAULT_TIMING_FLOOR_MS
from database.models import User
from database.store import CredentialStore, UniqueConstraintError
from utils.schemas import AuthResult
from utils.validators import normalize_identifier, validate_login, validate_registration

logger = logging.getLogger(__name__)

_DUMMY_PASSWORD = "dummy-password-for-timing"


def _isoformat(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value is not None else None


def _failure(error: AuthError) -> AuthResult:
    return AuthResult.failure(error.status_code, error.message, error.errors)


def _user_payload(user: User) -> Dict[str, Any]:
    return {
        "id": str(user.id),
        "username": user.username,
        "displayName": user.display_name,
        "email": user.email,
    }


class AuthGate:
    def __init__(
        self,
        store: CredentialStore,
        tokens: TokenIssuer,
        *,
        bcrypt_rounds: int = DEFAULT_ROUNDS,
        timing_floor_ms: int = DEFAULT_TIMING_FLOOR_MS,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self.store = store
        self.tokens = tokens
        self.bcrypt_rounds = bcrypt_rounds
        self.timing_floor = timing_floor_ms / 1000.0
        self._sleep = sleep
        self._dummy_hash = hash_password(_DUMMY_PASSWORD, bcrypt_rounds)

    async def _hold(self, started: float) -> None:
        """Sleep until ``timing_floor`` seconds have passed since ``started``."""
        delay = self.timing_floor - (time.perf_counter() - started)
        if delay > 0:
            await self._sleep(delay)

    # ── Registration ─────────────────────────────────────────────────────

    async def register(self, payload: Optional[Mapping[str, Any]]) -> AuthResult:
        validation = validate_registration(payload)
        if not validation.ok:
            return _failure(ValidationError(validation.errors))

        started = time.perf_counter()
        try:
            result = await self._register(**validation.fields)
        except DuplicateIdentifierError as exc:
            logger.info("Registration rejected: duplicate %s", exc.field)
            result = _failure(exc)
        except Exception:
            logger.exception("Registration error")
            result = _failure(InternalError("Internal server error during registration"))

        await self._hold(started)
        return result

    async def _register(self, *, username: str, email: str, password: str) -> AuthResult:
        display_name = username
        normalized_username = normalize_identifier(username)
        normalized_email = normalize_identifier(email)

        # Early exit only; the unique indexes are what actually prevent duplicates.
        if await self.store.find_by_lower_username(normalized_username) is not None:
            raise DuplicateIdentifierError("username")
        if await self.store.find_by_lower_email(normalized_email) is not None:
            raise DuplicateIdentifierError("email")

        password_hash = await asyncio.to_thread(hash_password, password, self.bcrypt_rounds)
        try:
            user = await self.store.insert_user(
                username=normalized_username,
                display_name=display_name,
                email=normalized_email,
                password_hash=password_hash,
                hash_algorithm=HASH_ALGORITHM,
            )
        except UniqueConstraintError as exc:
            raise DuplicateIdentifierError(
                exc.field or await self._taken_field(normalized_username)
            ) from exc

        token = self._issue(user)
        logger.info("Registered user %s", user.id)
        return AuthResult.ok(
            "User registered successfully",
            {"user": _user_payload(user), "token": token},
            status_code=201,
        )

    async def _taken_field(self, normalized_username: str) -> str:
        if await self.store.find_by_lower_username(normalized_username) is not None:
            return "username"
        return "email"

    # ── Login ────────────────────────────────────────────────────────────

    async def login(self, payload: Optional[Mapping[str, Any]]) -> AuthResult:
        validation = validate_login(payload)
        if not validation.ok:
            return _failure(ValidationError(validation.errors))

        started = time.perf_counter()
        try:
            result = await self._login(**validation.fields)
        except AuthenticationFailure as exc:
            result = _failure(exc)
        except Exception:
            logger.exception("Login error")
            result = _failure(InternalError("Internal server error during login"))

        await self._hold(started)
        return result

    async def _login(self, *, identifier: str, password: str) -> AuthResult:
        user = await resolve_identity(self.store, identifier)
        if user is None:
            # Same bcrypt cost as a real check, so absence is not visible in timing.
            await asyncio.to_thread(verify_password, password, self._dummy_hash)
            raise AuthenticationFailure()

        if not await asyncio.to_thread(verify_password, password, user.password_hash):
            logger.info("Failed login for user %s", user.id)
            raise AuthenticationFailure()

        previous_login = user.last_login
        await self.store.update_last_login(user.id)
        token = self._issue(user)
        logger.info("Login: %s", user.id)

        return AuthResult.ok(
            "Login successful",
            {
                "user": {**_user_payload(user), "lastLogin": _isoformat(previous_login)},
                "token": token,
            },
        )

    # ── Profile ──────────────────────────────────────────────────────────

    async def current_user(self, claims: TokenClaims) -> AuthResult:
        """Load the account behind a verified token."""
        try:
            user = await self.store.find_by_id(claims.user_id)
        except Exception:
            logger.exception("Get current user error")
            return _failure(InternalError())

        if user is None:
            return AuthResult.failure(404, "User not found")

        return AuthResult.ok(
            "User retrieved",
            {
                "user": {
                    **_user_payload(user),
                    "createdAt": _isoformat(user.created_at),
                    "lastLogin": _isoformat(user.last_login),
                }
            },
        )

    def _issue(self, user: User) -> str:
        return self.tokens.issue(
            user_id=str(user.id),
            username=user.username,
            display_name=user.display_name,
            email=user.email,
        )
