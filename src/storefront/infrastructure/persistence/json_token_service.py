"""JSON-file-backed TokenService.

Tokens are random strings; only their SHA-256 digest is written to disk,
together with the owner and an expiry time.  Issuing rewrites the file
under its inter-process lock.
"""

from __future__ import annotations

import hashlib
import secrets
from collections.abc import Callable
from datetime import datetime, timedelta, timezone
from pathlib import Path

from storefront.application.auth import TokenService
from storefront.domain.model.user import User
from storefront.infrastructure.persistence.json_file import JsonFile


class JsonTokenService(TokenService):

    def __init__(
        self,
        file_path: Path,
        ttl: timedelta = timedelta(minutes=60),
        clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    ) -> None:
        self._file = JsonFile(file_path)
        self._ttl = ttl
        self._clock = clock

    def issue(self, user: User) -> str:
        token = secrets.token_urlsafe(32)
        now = self._clock()
        with self._file.locked():
            # Drop expired entries while we are rewriting the file anyway
            records = [r for r in self._file.read() if not self._expired(r, now)]
            records.append(
                {
                    "digest": _digest(token),
                    "user_id": user.id,
                    "expires_at": (now + self._ttl).isoformat(),
                }
            )
            self._file.write(records)
        return token

    def verify(self, token: str) -> int | None:
        if not isinstance(token, str) or not token:
            return None
        digest = _digest(token)
        now = self._clock()
        for record in self._file.read():
            if secrets.compare_digest(record["digest"], digest):
                return None if self._expired(record, now) else record["user_id"]
        return None

    @staticmethod
    def _expired(record: dict, now: datetime) -> bool:
        return datetime.fromisoformat(record["expires_at"]) <= now


def _digest(token: str) -> str:
    return hashlib.sha256(token.encode("utf-8")).hexdigest()
