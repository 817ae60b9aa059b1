"""
Tests for the credential store and identity resolution against SQLite.
"""

import uuid

import pytest
from sqlalchemy.exc import IntegrityError

from auth.identity import classify_identifier, resolve_identity
from database.store import UniqueConstraintError, _conflicting_field


async def _insert(store, username="alice", display_name="Alice", email="alice@example.com"):
    return await store.insert_user(
        username=username,
        display_name=display_name,
        email=email,
        password_hash="$2b$04$placeholderplaceholderplaceholderplaceholderpl",
        hash_algorithm="bcrypt",
    )


class TestCredentialStore:
    @pytest.mark.asyncio
    async def test_insert_assigns_id_and_timestamps(self, store):
        user = await _insert(store)
        assert isinstance(user.id, uuid.UUID)
        assert user.created_at is not None
        assert user.last_login is None
        assert user.hash_algorithm == "bcrypt"

    @pytest.mark.asyncio
    async def test_username_unique_case_insensitively(self, store):
        await _insert(store)
        with pytest.raises(UniqueConstraintError) as excinfo:
            await _insert(store, username="ALICE", display_name="ALICE", email="other@example.com")
        assert excinfo.value.field == "username"

    @pytest.mark.asyncio
    async def test_email_unique_case_insensitively(self, store):
        await _insert(store)
        with pytest.raises(UniqueConstraintError) as excinfo:
            await _insert(store, username="bob", display_name="bob", email="ALICE@example.com")
        assert excinfo.value.field == "email"

    @pytest.mark.asyncio
    async def test_empty_hash_refused(self, store):
        with pytest.raises(ValueError):
            await store.insert_user(
                username="carol", display_name="carol", email="carol@example.com",
                password_hash="", hash_algorithm="bcrypt",
            )

    @pytest.mark.asyncio
    async def test_lookups(self, store):
        user = await _insert(store)
        assert (await store.find_by_lower_username("ALICE")).id == user.id
        assert (await store.find_by_lower_email("Alice@Example.com")).id == user.id
        assert (await store.find_by_id(str(user.id))).display_name == "Alice"
        assert await store.find_by_lower_username("bob") is None
        assert await store.find_by_id("not-a-uuid") is None

    @pytest.mark.asyncio
    async def test_last_login_is_monotonic(self, store):
        user = await _insert(store)
        await store.update_last_login(user.id)
        first = (await store.find_by_id(user.id)).last_login
        await store.update_last_login(user.id)
        second = (await store.find_by_id(user.id)).last_login
        assert first is not None
        assert second >= first


class TestIdentityResolver:
    def test_classify(self):
        assert classify_identifier("Alice@Example.com") == ("email", "alice@example.com")
        assert classify_identifier("ALICE") == ("username", "alice")

    @pytest.mark.asyncio
    async def test_resolves_any_case(self, store):
        user = await _insert(store)
        for identifier in ("alice", "ALICE", "alice@example.com", "Alice@EXAMPLE.com"):
            assert (await resolve_identity(store, identifier)).id == user.id

    @pytest.mark.asyncio
    async def test_email_shaped_identifier_does_not_match_username(self, store):
        await _insert(store)
        assert await resolve_identity(store, "alice@") is None
        assert await resolve_identity(store, "nobody") is None


def _integrity_error(message: str) -> IntegrityError:
    return IntegrityError("INSERT INTO users ...", {}, Exception(message))


class TestConflictingField:
    def test_postgres_detail_echoing_other_column_name(self):
        error = _integrity_error(
            "<class 'asyncpg.exceptions.UniqueViolationError'>: duplicate key value violates "
            'unique constraint "idx_users_email_lower"\n'
            "DETAIL:  Key (lower(email::text))=(myusername@example.com) already exists."
        )
        assert _conflicting_field(error) == "email"

    def test_postgres_username_index(self):
        error = _integrity_error(
            'duplicate key value violates unique constraint "idx_users_username_lower"\n'
            "DETAIL:  Key (lower(username::text))=(alice) already exists."
        )
        assert _conflicting_field(error) == "username"

    def test_sqlite_index_message(self):
        error = _integrity_error("UNIQUE constraint failed: index 'idx_users_email_lower'")
        assert _conflicting_field(error) == "email"

    def test_unnamed_violation_is_undetermined(self):
        assert _conflicting_field(_integrity_error("UNIQUE constraint failed")) is None

    def test_other_integrity_errors_propagate(self):
        error = _integrity_error('null value in column "email" violates not-null constraint')
        with pytest.raises(IntegrityError):
            _conflicting_field(error)
