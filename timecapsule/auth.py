"""
Bearer token verification.

Tokens are issued by the external auth service and signed with a shared
secret. The ``Authorization`` header carries the raw token, not the
``Bearer <token>`` form.
"""

from __future__ import annotations

import time
from typing import Optional

import jwt

from timecapsule.errors import InvalidCredential, Unauthenticated

SUBJECT_CLAIM = "id"


class TokenVerifier:
    """Verifies signed tokens and extracts the subject id."""

    def __init__(self, secret: str, algorithm: str = "HS256"):
        if not secret:
            raise ValueError("JWT_SECRET is required for TokenVerifier")
        self.secret = secret
        self.algorithm = algorithm

    def verify(self, token: Optional[str]) -> str:
        if not token:
            raise Unauthenticated()
        try:
            payload = jwt.decode(token, self.secret, algorithms=[self.algorithm])
        except jwt.PyJWTError as exc:
            raise InvalidCredential() from exc
        subject = payload.get(SUBJECT_CLAIM)
        if subject is None:
            raise InvalidCredential()
        return str(subject)

    def issue(self, user_id: str, expires_in: Optional[int] = None) -> str:
        """Mint a token compatible with ``verify`` (used by the auth service and tests)."""
        now = int(time.time())
        payload = {SUBJECT_CLAIM: user_id, "iat": now}
        if expires_in is not None:
            payload["exp"] = now + expires_in
        return jwt.encode(payload, self.secret, algorithm=self.algorithm)
