"""Tests for login sessions and password hashing."""

from datetime import datetime, timedelta, timezone

import jwt
import pytest

from barangay.domain.errors import InvalidSessionError, SessionExpiredError
from barangay.domain.session import SessionStore
from barangay.infrastructure.security.passwords import hash_password, verify_password


@pytest.fixture
def store():
    return SessionStore(secret="unit-test", ttl_minutes=30)


class TestSessionStore:
    """Sessions are created at login and destroyed at logout or expiry."""

    def test_open_and_resolve(self, store):
        ctx = store.open(7, "clerk", "admin")
        resolved = store.resolve(ctx.token)
        assert resolved is ctx
        assert resolved.user_id == 7
        assert len(store) == 1

    def test_token_claims(self, store):
        ctx = store.open(7, "clerk", "admin")
        claims = jwt.decode(ctx.token, "unit-test", algorithms=["HS256"])
        assert claims["sub"] == "7"
        assert claims["jti"] == ctx.token_id
        assert claims["role"] == "admin"

    def test_close_ends_session(self, store):
        ctx = store.open(7, "clerk", "admin")
        assert store.close(ctx.token_id) is True
        with pytest.raises(InvalidSessionError):
            store.resolve(ctx.token)
        assert store.close(ctx.token_id) is False

    def test_expired_token(self, store):
        issued = datetime.now(timezone.utc) - timedelta(hours=2)
        ctx = store.open(7, "clerk", "admin", now=issued)
        with pytest.raises(SessionExpiredError):
            store.resolve(ctx.token)
        assert len(store) == 0

    def test_foreign_signature_rejected(self, store):
        other = SessionStore(secret="someone-else")
        ctx = other.open(7, "clerk", "admin")
        with pytest.raises(InvalidSessionError):
            store.resolve(ctx.token)

    def test_garbage_token(self, store):
        with pytest.raises(InvalidSessionError):
            store.resolve("not-a-jwt")

    def test_close_for_user(self, store):
        store.open(7, "clerk", "admin")
        store.open(7, "clerk", "admin")
        keep = store.open(8, "other", "staff")
        assert store.close_for_user(7) == 2
        assert store.resolve(keep.token) is keep

    def test_open_sweeps_expired_sessions(self, store):
        stale = datetime.now(timezone.utc) - timedelta(hours=2)
        for user_id in range(50):
            store.open(user_id, "clerk", "staff", now=stale)
        live = store.open(99, "clerk", "staff")
        assert len(store) == 1
        assert store.purge_expired() == 0
        assert store.resolve(live.token) is live

    def test_purge_expired(self, store):
        store.open(7, "clerk", "admin", now=datetime.now(timezone.utc) - timedelta(hours=2))
        assert len(store) == 0
        assert store.purge_expired() == 1
        assert store.purge_expired() == 0


class TestPasswords:
    """Salted PBKDF2 password hashes."""

    def test_verify(self):
        stored = hash_password("s3cret")
        assert verify_password("s3cret", stored)
        assert not verify_password("wrong", stored)

    def test_salted(self):
        assert hash_password("s3cret") != hash_password("s3cret")

    def test_malformed_hash(self):
        assert not verify_password("s3cret", "plaintext")
        assert not verify_password("s3cret", "")
