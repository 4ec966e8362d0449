"""CSRF tokens bound to a user id.

A token is ``<token_id>.<secret>``. It stays valid for repeated use until it
expires; it is not a single-use nonce.
"""
from __future__ import annotations

import hmac
import secrets
import time
from dataclasses import dataclass
from threading import Lock
from typing import Callable

from app.utils.logging import get_logger

logger = get_logger("rentals.csrf")

ANONYMOUS_USER = "anonymous"


@dataclass(frozen=True)
class _IssuedToken:
    secret: str
    user_id: str
    issued_at: float


class CSRFTokenService:
    def __init__(self, ttl_seconds: float = 24 * 60 * 60, clock: Callable[[], float] = time.time) -> None:
        self._ttl = float(ttl_seconds)
        self._clock = clock
        self._lock = Lock()
        self._tokens: dict[str, _IssuedToken] = {}

    def generate(self, user_id: str) -> str:
        token_id = secrets.token_urlsafe(16)
        secret = secrets.token_urlsafe(32)
        now = self._clock()
        with self._lock:
            self._sweep(now)
            self._tokens[token_id] = _IssuedToken(secret=secret, user_id=user_id, issued_at=now)
        return f"{token_id}.{secret}"

    def validate(self, token: str | None, user_id: str) -> bool:
        if not token or not isinstance(token, str):
            return False
        parts = token.split(".")
        if len(parts) != 2:
            return False
        token_id, secret = parts

        with self._lock:
            issued = self._tokens.get(token_id)
            if issued is None:
                return False
            if self._clock() - issued.issued_at > self._ttl:
                del self._tokens[token_id]
                return False

        if not hmac.compare_digest(issued.secret.encode("utf-8"), secret.encode("utf-8")):
            return False
        if issued.user_id != user_id:
            logger.warning("csrf_user_mismatch", token_id=token_id)
            return False
        return True

    def _sweep(self, now: float) -> None:
        expired = [tid for tid, t in self._tokens.items() if now - t.issued_at > self._ttl]
        for tid in expired:
            del self._tokens[tid]

    def __len__(self) -> int:
        with self._lock:
            return len(self._tokens)
