"""
Auth business logic.
"""

from __future__ import annotations

import logging

from core.db import Database
from core.errors import InvalidCredentials, StorageError, Unauthenticated

from . import repository, schemas, security

logger = logging.getLogger(__name__)


async def _check_password(
    database: Database,
    profile: dict,
    password: str,
    *,
    allow_legacy: bool,
) -> bool:
    stored = str(profile.get("password_hash") or "")
    if security.is_password_hash(stored):
        return security.verify_password(password, stored)

    if not allow_legacy or not security.verify_legacy_password(password, stored):
        return False

    # Legacy plaintext row: replace it with a bcrypt hash now that we know
    # the password. A failed upgrade must not block the login itself.
    try:
        await repository.update_password_hash(
            database,
            user_id=profile["id"],
            password_hash=security.hash_password(password),
        )
        logger.info("password_hash_upgraded user_id=%s", profile["id"])
    except StorageError:
        logger.warning("password_hash_upgrade_failed user_id=%s", profile["id"])
    return True


async def login(
    database: Database,
    tokens: security.TokenService,
    payload: schemas.LoginRequest,
    *,
    allow_legacy: bool = True,
) -> schemas.LoginResponse:
    profile = await repository.get_profile_by_username(database, payload.username)
    if profile is None:
        logger.info("login_failed reason=unknown_user")
        raise InvalidCredentials()

    if not await _check_password(database, profile, payload.password, allow_legacy=allow_legacy):
        logger.info("login_failed reason=bad_password user_id=%s", profile["id"])
        raise InvalidCredentials()

    user_id = str(profile["id"])
    username = str(profile["username"])
    token = tokens.issue(subject=user_id, username=username)
    return schemas.LoginResponse(
        token=token,
        user=schemas.UserResponse(id=user_id, username=username),
    )


def claims_from_token(tokens: security.TokenService, token: str) -> security.TokenClaims:
    try:
        return tokens.verify(token)
    except security.AuthSecurityError as exc:
        raise Unauthenticated("Invalid token") from exc


def me(claims: security.TokenClaims) -> schemas.MeResponse:
    return schemas.MeResponse(userId=claims.subject, username=claims.username)
