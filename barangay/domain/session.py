# barangay/domain/session.py
"""Explicit login sessions.

A ``SessionContext`` is created at login, resolved from the bearer token on
every request and destroyed at logout or when it expires.
"""
import secrets
import threading
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Dict, Optional

import jwt

from barangay.domain.errors import InvalidSessionError, SessionExpiredError


@dataclass
class SessionContext:
    token_id: str
    user_id: int
    username: str
    role: str
    issued_at: datetime
    expires_at: datetime
    token: str = field(default="", repr=False)

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        return (now or datetime.now(timezone.utc)) >= self.expires_at


class SessionStore:
    def __init__(self, secret: str, algorithm: str = "HS256", ttl_minutes: int = 480):
        self.secret = secret
        self.algorithm = algorithm
        self.ttl = timedelta(minutes=ttl_minutes)
        self._lock = threading.Lock()
        self._sessions: Dict[str, SessionContext] = {}

    def __len__(self) -> int:
        now = datetime.now(timezone.utc)
        with self._lock:
            return sum(1 for ctx in self._sessions.values() if not ctx.is_expired(now))

    def open(self, user_id: int, username: str, role: str, now: Optional[datetime] = None) -> SessionContext:
        issued = now or datetime.now(timezone.utc)
        expires = issued + self.ttl
        token_id = secrets.token_hex(16)
        claims = {
            "sub": str(user_id),
            "jti": token_id,
            "username": username,
            "role": role,
            "iat": int(issued.timestamp()),
            "exp": int(expires.timestamp()),
        }
        ctx = SessionContext(
            token_id=token_id,
            user_id=user_id,
            username=username,
            role=role,
            issued_at=issued,
            expires_at=expires,
            token=jwt.encode(claims, self.secret, algorithm=self.algorithm),
        )
        with self._lock:
            self._sweep(datetime.now(timezone.utc))
            self._sessions[token_id] = ctx
        return ctx

    def resolve(self, token: str) -> SessionContext:
        try:
            claims = jwt.decode(token, self.secret, algorithms=[self.algorithm])
        except jwt.ExpiredSignatureError as e:
            self._drop(self._unverified_jti(token))
            raise SessionExpiredError("Session expired, please log in again") from e
        except jwt.InvalidTokenError as e:
            raise InvalidSessionError("Invalid token") from e

        token_id = claims.get("jti")
        with self._lock:
            ctx = self._sessions.get(token_id)
        if ctx is None:
            raise InvalidSessionError("Session has ended")
        if ctx.is_expired():
            self._drop(token_id)
            raise SessionExpiredError("Session expired, please log in again")
        return ctx

    def close(self, token_id: str) -> bool:
        return self._drop(token_id)

    def close_for_user(self, user_id: int) -> int:
        with self._lock:
            stale = [tid for tid, ctx in self._sessions.items() if ctx.user_id == user_id]
            for tid in stale:
                del self._sessions[tid]
        return len(stale)

    def purge_expired(self, now: Optional[datetime] = None) -> int:
        with self._lock:
            return self._sweep(now or datetime.now(timezone.utc))

    def _sweep(self, now: datetime) -> int:
        # caller holds the lock
        stale = [tid for tid, ctx in self._sessions.items() if ctx.is_expired(now)]
        for tid in stale:
            del self._sessions[tid]
        return len(stale)

    def _drop(self, token_id: Optional[str]) -> bool:
        if not token_id:
            return False
        with self._lock:
            return self._sessions.pop(token_id, None) is not None

    def _unverified_jti(self, token: str) -> Optional[str]:
        try:
            return jwt.decode(token, options={"verify_signature": False}).get("jti")
        except jwt.InvalidTokenError:
            return None
