"""
Auth security helpers.
"""

from __future__ import annotations

import hmac
import time
from dataclasses import dataclass
from typing import Any

import bcrypt
import jwt

from core.settings import Settings

BCRYPT_PREFIXES = ("$2a$", "$2b$", "$2y$")


class AuthSecurityError(RuntimeError):
    pass


def now_epoch_s() -> int:
    return int(time.time())


def hash_password(plain_password: str) -> str:
    password = (plain_password or "").encode("utf-8")
    if not password:
        raise AuthSecurityError("Password is empty.")
    return bcrypt.hashpw(password, bcrypt.gensalt()).decode("utf-8")


def is_password_hash(stored: str) -> bool:
    return (stored or "").startswith(BCRYPT_PREFIXES)


def verify_password(plain_password: str, password_hash: str) -> bool:
    password = (plain_password or "").encode("utf-8")
    hashed = (password_hash or "").encode("utf-8")
    if not password or not hashed:
        return False
    try:
        return bcrypt.checkpw(password, hashed)
    except ValueError:
        return False


def verify_legacy_password(plain_password: str, stored: str) -> bool:
    """
    Constant-time compare against a credential stored before hashing existed.
    """
    password = (plain_password or "").encode("utf-8")
    stored_bytes = (stored or "").encode("utf-8")
    if not password or not stored_bytes:
        return False
    return hmac.compare_digest(password, stored_bytes)


@dataclass(frozen=True)
class TokenClaims:
    subject: str
    username: str
    issued_at: int
    expires_at: int


class TokenService:
    """
    Issues and verifies signed bearer tokens.

    The key and algorithm are fixed for the lifetime of the instance. Decoding
    only accepts the configured algorithm.
    """

    def __init__(self, secret: str, *, algorithm: str = "HS256", expire_days: int = 7) -> None:
        if not secret:
            raise AuthSecurityError("Token secret is empty.")
        self._secret = secret
        self._algorithm = algorithm
        self._ttl_s = expire_days * 24 * 60 * 60

    @classmethod
    def from_settings(cls, settings: Settings) -> "TokenService":
        return cls(
            settings.jwt_secret,
            algorithm=settings.jwt_algorithm,
            expire_days=settings.token_expire_days,
        )

    @property
    def ttl_s(self) -> int:
        return self._ttl_s

    def issue(self, *, subject: Any, username: str, issued_at: int | None = None) -> str:
        issued_at = now_epoch_s() if issued_at is None else issued_at
        payload = {
            "sub": str(subject),
            "username": username,
            "iat": issued_at,
            "exp": issued_at + self._ttl_s,
        }
        return jwt.encode(payload, self._secret, algorithm=self._algorithm)

    def verify(self, token: str) -> TokenClaims:
        raw = (token or "").strip()
        if not raw:
            raise AuthSecurityError("Token is empty.")

        try:
            payload = jwt.decode(
                raw,
                self._secret,
                algorithms=[self._algorithm],
                options={"require": ["exp", "sub"]},
            )
        except jwt.InvalidTokenError as exc:
            raise AuthSecurityError("Invalid token.") from exc

        subject = str(payload.get("sub") or "").strip()
        if not subject:
            raise AuthSecurityError("Token has no subject.")

        return TokenClaims(
            subject=subject,
            username=str(payload.get("username") or ""),
            issued_at=int(payload.get("iat") or 0),
            expires_at=int(payload["exp"]),
        )
