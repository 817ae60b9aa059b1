"""
FastAPI dependencies for authentication.

Provides ``get_gate`` and ``get_current_claims`` dependencies that
are used across all protected routes.
"""

from __future__ import annotations

from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from auth.errors import MissingToken
from auth.gate import AuthGate
from auth.jwt import TokenClaims, TokenIssuer

_bearer_scheme = HTTPBearer(auto_error=False)


def get_gate(request: Request) -> AuthGate:
    return request.app.state.gate


def get_token_issuer(request: Request) -> TokenIssuer:
    return request.app.state.gate.tokens


async def get_current_claims(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(_bearer_scheme),
    tokens: TokenIssuer = Depends(get_token_issuer),
) -> TokenClaims:
    """
    Extract and verify the Bearer token, returning its claims.

    A missing header (or a non-Bearer scheme) raises ``MissingToken`` (401);
    a bad or expired token raises ``InvalidOrExpiredToken`` (403).
    """
    if credentials is None or not credentials.credentials:
        raise MissingToken()
    return tokens.verify(credentials.credentials)
