"""
REST API routes outside the auth prefix — health and dashboard.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict

from fastapi import APIRouter, Depends

from auth.dependencies import get_current_claims
from auth.jwt import TokenClaims

router = APIRouter()


@router.get("/health")
async def health() -> Dict[str, Any]:
    return {
        "success": True,
        "message": "Server is healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


@router.get("/dashboard")
async def dashboard(claims: TokenClaims = Depends(get_current_claims)) -> Dict[str, Any]:
    """Protected page; everything shown comes from the verified token."""
    return {
        "success": True,
        "message": "Welcome to your dashboard!",
        "data": {
            "user": {
                "id": claims.user_id,
                "username": claims.username,
                "displayName": claims.display_name,
                "email": claims.email,
            },
            "dashboardData": {
                "accessedAt": datetime.now(timezone.utc).isoformat(),
                "message": "You have successfully accessed the protected dashboard.",
            },
        },
    }
