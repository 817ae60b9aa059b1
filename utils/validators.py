"""
Input validation and sanitisation for registration and login bodies.

Validation never raises on bad input: every problem becomes a
``FieldError`` and the caller receives either the normalised fields or the
error list, never both.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

from utils.schemas import FieldError
from utils.wordlists import (
    COMMON_PASSWORDS,
    RESERVED_SUBSTRINGS,
    SEQUENTIAL_PATTERNS,
    USERNAME_BLACKLIST,
)

MAX_INPUT_LENGTH = 1000

USERNAME_MIN_LENGTH = 3
USERNAME_MAX_LENGTH = 30
EMAIL_MAX_LENGTH = 320
EMAIL_LOCAL_MAX_LENGTH = 64
PASSWORD_MIN_LENGTH = 8
PASSWORD_MAX_LENGTH = 128
IDENTIFIER_MAX_LENGTH = 320

_SCRIPT_RE = re.compile(r"<script\b[^<]*(?:(?!</script>)<[^<]*)*</script>", re.IGNORECASE)
_ANGLE_RE = re.compile(r"[<>]")

_USERNAME_CHARSET_RE = re.compile(r"^[a-zA-Z0-9_-]+$")
_USERNAME_EDGE_RE = re.compile(r"^[_-]|[_-]$")
_USERNAME_CONSECUTIVE_RE = re.compile(r"[_-]{2,}")
_EMAIL_RE = re.compile(r"^[a-zA-Z0-9.-]{1,64}@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$")

_INVALID_EMAIL = "Please enter a valid email address"
_USERNAME_UNAVAILABLE = "This username is not available"


@dataclass
class ValidationOutcome:
    fields: Optional[Dict[str, str]] = None
    errors: List[FieldError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


def normalize_identifier(value: str) -> str:
    """Lowercasing rule shared by writes (registration) and reads (login)."""
    return value.lower()


# ── Sanitisation ──────────────────────────────────────────────────────────


def sanitize_input(value: Any) -> Any:
    """Strip script blocks and angle brackets, cap length.  Non-strings pass through."""
    if not isinstance(value, str):
        return value
    value = _SCRIPT_RE.sub("", value)
    value = _ANGLE_RE.sub("", value)
    return value[:MAX_INPUT_LENGTH]


def sanitize_payload(payload: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    return {key: sanitize_input(value) for key, value in (payload or {}).items()}


def _text(payload: Mapping[str, Any], key: str) -> str:
    value = payload.get(key)
    return value if isinstance(value, str) else ""


# ── Field rules ───────────────────────────────────────────────────────────


def validate_username(username: str) -> List[str]:
    problems: List[str] = []
    if not USERNAME_MIN_LENGTH <= len(username) <= USERNAME_MAX_LENGTH:
        problems.append("Username must be 3-30 characters long")
    if not _USERNAME_CHARSET_RE.match(username):
        problems.append("Username can only contain letters, numbers, hyphens, and underscores")
    if _USERNAME_EDGE_RE.search(username):
        problems.append("Username cannot start or end with special characters")
    if _USERNAME_CONSECUTIVE_RE.search(username):
        problems.append("Username cannot contain consecutive special characters")

    lowered = username.lower()
    if lowered in USERNAME_BLACKLIST or any(s in lowered for s in RESERVED_SUBSTRINGS):
        problems.append(_USERNAME_UNAVAILABLE)
    return problems


def validate_email(email: str) -> List[str]:
    if not email:
        return ["Email address is required"]

    problems: List[str] = []
    if len(email) > EMAIL_MAX_LENGTH:
        problems.append("Email address must not exceed 320 characters")
    if not _is_well_formed_email(email):
        problems.append(_INVALID_EMAIL)
    return problems


def _is_well_formed_email(email: str) -> bool:
    if not _EMAIL_RE.match(email) or ".." in email:
        return False
    local, _, domain = email.partition("@")
    if local.startswith(".") or local.endswith("."):
        return False
    if len(local) > EMAIL_LOCAL_MAX_LENGTH:
        return False
    return bool(domain) and not domain.startswith(".") and not domain.endswith(".")


def validate_password(password: str, username: str = "", email: str = "") -> List[str]:
    """
    Length problems are reported on their own line; the remaining content
    rules stop at the first hit.
    """
    problems: List[str] = []
    if len(password) < PASSWORD_MIN_LENGTH:
        problems.append("Password must be at least 8 characters long")
    elif len(password) > PASSWORD_MAX_LENGTH:
        problems.append("Password must not exceed 128 characters")

    content_problem = _password_content_problem(password.lower(), username, email)
    if content_problem:
        problems.append(content_problem)
    return problems


def _password_content_problem(lowered: str, username: str, email: str) -> Optional[str]:
    if lowered in COMMON_PASSWORDS:
        return "This password is too common"
    if username and lowered == username.lower():
        return "Password cannot be the same as your username"
    if email and lowered == email.split("@")[0].lower():
        return "Password cannot be the same as your email"
    if any(pattern in lowered for pattern in SEQUENTIAL_PATTERNS):
        return "Password cannot contain sequential characters"
    return None


def validate_identifier(identifier: str) -> List[str]:
    if not identifier:
        return ["Username or email is required"]

    problems: List[str] = []
    if len(identifier) > IDENTIFIER_MAX_LENGTH:
        problems.append("Input too long")
    if any(ch in identifier for ch in "<>&"):
        problems.append("Invalid characters in input")
    return problems


# ── Whole-body validation ─────────────────────────────────────────────────


def _collect(errors: List[FieldError], name: str, problems: List[str]) -> None:
    errors.extend(FieldError(field=name, message=message) for message in problems)


def validate_registration(payload: Optional[Mapping[str, Any]]) -> ValidationOutcome:
    """
    Sanitise and validate a registration body.

    On success ``fields`` holds ``username`` (trimmed, original case),
    ``email`` (trimmed, lowercase) and ``password`` (untouched beyond
    sanitisation).
    """
    body = sanitize_payload(payload)
    username = _text(body, "username").strip()
    email = _text(body, "email").strip()
    password = _text(body, "password")

    errors: List[FieldError] = []
    _collect(errors, "username", validate_username(username))
    _collect(errors, "email", validate_email(email))
    _collect(errors, "password", validate_password(password, username, email))
    if errors:
        return ValidationOutcome(errors=errors)

    return ValidationOutcome(
        fields={
            "username": username,
            "email": normalize_identifier(email),
            "password": password,
        }
    )


def validate_login(payload: Optional[Mapping[str, Any]]) -> ValidationOutcome:
    body = sanitize_payload(payload)
    identifier = _text(body, "identifier").strip()
    password = _text(body, "password")

    errors: List[FieldError] = []
    _collect(errors, "identifier", validate_identifier(identifier))
    if not password:
        errors.append(FieldError(field="password", message="Password is required"))
    if errors:
        return ValidationOutcome(errors=errors)

    return ValidationOutcome(fields={"identifier": identifier, "password": password})
