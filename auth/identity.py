"""
Identity resolution — map a login identifier to at most one user.
"""

from __future__ import annotations

from typing import Optional, Tuple

from database.models import User
from database.store import CredentialStore
from utils.validators import normalize_identifier

EMAIL = "email"
USERNAME = "username"


def classify_identifier(identifier: str) -> Tuple[str, str]:
    """Return ``(kind, normalized)``; anything containing ``@`` is an email."""
    kind = EMAIL if "@" in identifier else USERNAME
    return kind, normalize_identifier(identifier)


async def resolve_identity(store: CredentialStore, identifier: str) -> Optional[User]:
    kind, normalized = classify_identifier(identifier)
    if kind == EMAIL:
        return await store.find_by_lower_email(normalized)
    return await store.find_by_lower_username(normalized)
