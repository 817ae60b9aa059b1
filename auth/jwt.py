"""
JWT token creation and verification.

Tokens are compact HS256 JWTs: base64url JSON header and claims, signed
with HMAC-SHA256.  The secret comes from ``config.jwt_secret`` (env var:
``JWT_SECRET``); verification needs nothing but the token and that secret,
so sessions cannot be revoked before they expire.
"""

from __future__ import annotations

import hashlib
import hmac
import json
import logging
import secrets
import time
from base64 import urlsafe_b64decode, urlsafe_b64encode
from typing import Any, Callable, Dict

from pydantic import BaseModel, ConfigDict, Field

from auth.errors import InvalidOrExpiredToken
from config.settings import Settings

logger = logging.getLogger(__name__)

_ALGORITHM = "HS256"
_HEADER = {"alg": _ALGORITHM, "typ": "JWT"}


class TokenClaims(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    user_id: str = Field(alias="userId")
    username: str
    display_name: str = Field(alias="displayName")
    email: str
    iat: int
    exp: int


def _b64encode(raw: bytes) -> str:
    return urlsafe_b64encode(raw).rstrip(b"=").decode()


def _b64decode(segment: str) -> bytes:
    return urlsafe_b64decode(segment + "=" * (-len(segment) % 4))


def _encode_segment(data: Dict[str, Any]) -> str:
    return _b64encode(json.dumps(data, separators=(",", ":")).encode())


class TokenIssuer:
    """Issues and verifies signed, self-expiring session tokens."""

    def __init__(
        self,
        secret: str,
        expiry_seconds: int = 86400,
        clock: Callable[[], float] = time.time,
    ) -> None:
        if not secret:
            raise ValueError("Token secret must not be empty")
        self._secret = secret.encode()
        self.expiry_seconds = expiry_seconds
        self._clock = clock

    def _sign(self, signing_input: str) -> str:
        return _b64encode(hmac.new(self._secret, signing_input.encode(), hashlib.sha256).digest())

    def issue(self, *, user_id: str, username: str, display_name: str, email: str) -> str:
        """Create a signed token carrying the identity claims and a 24h expiry."""
        now = int(self._clock())
        claims = TokenClaims(
            user_id=str(user_id),
            username=username,
            display_name=display_name,
            email=email,
            iat=now,
            exp=now + self.expiry_seconds,
        )
        signing_input = _encode_segment(_HEADER) + "." + _encode_segment(claims.model_dump(by_alias=True))
        return signing_input + "." + self._sign(signing_input)

    def verify(self, token: str) -> TokenClaims:
        """
        Verify token and return its claims.

        Raises ``InvalidOrExpiredToken`` on malformed, tampered or expired
        tokens; the reason is only logged.
        """
        try:
            parts = token.split(".")
            if len(parts) != 3:
                raise ValueError("bad format")
            header_segment, payload_segment, signature = parts
            header = json.loads(_b64decode(header_segment))
            if header.get("alg") != _ALGORITHM:
                raise ValueError("unsupported algorithm")
            expected_sig = self._sign(header_segment + "." + payload_segment)
            if not hmac.compare_digest(signature, expected_sig):
                raise ValueError("bad signature")
            claims = TokenClaims.model_validate(json.loads(_b64decode(payload_segment)))
            if claims.exp <= self._clock():
                raise ValueError("token expired")
            return claims
        except (ValueError, TypeError, AttributeError, RecursionError) as exc:
            logger.debug("Token rejected: %s", exc)
            raise InvalidOrExpiredToken() from exc


def resolve_token_secret(settings: Settings) -> str:
    """
    Return the configured signing secret.

    Production-like environments are refused at settings load time when the
    secret is missing; anywhere else an ephemeral secret is generated, which
    invalidates every token on restart.
    """
    if settings.jwt_secret:
        return settings.jwt_secret
    logger.warning(
        "JWT_SECRET not set — using an ephemeral signing secret (environment=%s). "
        "Issued tokens will not survive a restart.",
        settings.environment,
    )
    return secrets.token_urlsafe(32)
