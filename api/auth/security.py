"""
Auth security helpers: password hashing and access tokens.
"""

from __future__ import annotations

import time
from collections.abc import Callable
from typing import Any

import bcrypt
import jwt

from core.errors import BadSignatureError, ExpiredTokenError, InvalidTokenError, ValidationError

# bcrypt only looks at the first 72 bytes; newer releases reject longer input.
BCRYPT_MAX_BYTES = 72

ACCESS_TOKEN_TTL_S = 60 * 60


class PasswordHasher:
    def __init__(self, rounds: int = 12) -> None:
        self.rounds = rounds

    def hash(self, plain_password: str) -> str:
        password = (plain_password or "").encode("utf-8")
        if len(password) > BCRYPT_MAX_BYTES:
            raise ValidationError(f"Password must be at most {BCRYPT_MAX_BYTES} bytes.")
        return bcrypt.hashpw(password, bcrypt.gensalt(rounds=self.rounds)).decode("utf-8")

    def verify(self, plain_password: str, password_hash: str) -> bool:
        password = (plain_password or "").encode("utf-8")
        hashed = (password_hash or "").encode("utf-8")
        if not hashed or len(password) > BCRYPT_MAX_BYTES:
            return False
        try:
            return bcrypt.checkpw(password, hashed)
        except ValueError:
            return False


class TokenService:
    """
    Stateless signed access tokens.

    A token carries the user id as `sub` and expires `ACCESS_TOKEN_TTL_S`
    seconds after issuance. Nothing is stored server-side, so a token stays
    valid until it expires.
    """

    def __init__(
        self,
        secret: str,
        *,
        algorithm: str = "HS256",
        clock: Callable[[], float] = time.time,
    ) -> None:
        if not secret:
            raise ValueError("Token secret is empty.")
        self._secret = secret
        self._algorithm = algorithm
        self._clock = clock

    def issue(self, subject_id: str) -> str:
        subject = str(subject_id or "").strip()
        if not subject:
            raise ValueError("Token subject is empty.")

        issued_at = int(self._clock())
        payload = {
            "sub": subject,
            "type": "access",
            "iat": issued_at,
            "exp": issued_at + ACCESS_TOKEN_TTL_S,
        }
        return jwt.encode(payload, self._secret, algorithm=self._algorithm)

    def decode(self, token: str) -> dict[str, Any]:
        raw = (token or "").strip()
        if not raw:
            raise InvalidTokenError("Access token is empty.")

        # Time claims are checked against this service's clock, not PyJWT's.
        try:
            payload = jwt.decode(
                raw,
                self._secret,
                algorithms=[self._algorithm],
                options={"require": ["exp", "iat", "sub"], "verify_exp": False, "verify_iat": False},
            )
        except jwt.InvalidSignatureError as exc:
            raise BadSignatureError("Access token signature is invalid.") from exc
        except jwt.InvalidTokenError as exc:
            raise InvalidTokenError("Invalid access token.") from exc

        try:
            expires_at = int(payload["exp"])
        except (TypeError, ValueError) as exc:
            raise InvalidTokenError("Invalid access token expiry.") from exc
        if expires_at <= int(self._clock()):
            raise ExpiredTokenError("Access token has expired.")
        return payload

    def verify(self, token: str) -> str:
        payload = self.decode(token)

        token_type = str(payload.get("type") or "").strip().lower()
        if token_type != "access":
            raise InvalidTokenError("Token is not an access token.")

        subject = str(payload.get("sub") or "").strip()
        if not subject:
            raise InvalidTokenError("Invalid access token subject.")
        return subject
