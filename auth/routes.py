"""
Auth API routes — register, login, logout, current user.

Route prefix: /auth
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from auth.dependencies import get_current_claims, get_gate
from auth.gate import AuthGate
from auth.jwt import TokenClaims
from utils.schemas import AuthResult, LoginRequest, RegisterRequest

logger = logging.getLogger(__name__)

router = APIRouter(tags=["auth"])


def _respond(result: AuthResult) -> JSONResponse:
    return JSONResponse(status_code=result.status_code, content=result.to_body())


@router.post("/register")
async def register(
    req: RegisterRequest,
    gate: AuthGate = Depends(get_gate),
) -> JSONResponse:
    """Register a new user."""
    return _respond(await gate.register(req.model_dump()))


@router.post("/login")
async def login(
    req: LoginRequest,
    gate: AuthGate = Depends(get_gate),
) -> JSONResponse:
    """Login with username or email + password."""
    return _respond(await gate.login(req.model_dump()))


@router.post("/logout")
async def logout(claims: TokenClaims = Depends(get_current_claims)) -> JSONResponse:
    """Tokens are stateless; the client discards its copy."""
    logger.info("Logout: %s", claims.user_id)
    return _respond(AuthResult.ok("Logout successful"))


@router.get("/me")
async def me(
    claims: TokenClaims = Depends(get_current_claims),
    gate: AuthGate = Depends(get_gate),
) -> JSONResponse:
    return _respond(await gate.current_user(claims))
