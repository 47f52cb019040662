"""
Auth dependencies for protected FastAPI routes.
"""

from __future__ import annotations

from fastapi import Depends, Header, Request

from core.errors import Unauthenticated

from . import security, service


def _extract_bearer_token(authorization: str | None) -> str:
    raw = (authorization or "").strip()
    parts = raw.split(" ", 1)
    if len(parts) != 2:
        raise Unauthenticated("Missing token")

    scheme, token = parts[0].strip().lower(), parts[1].strip()
    if scheme != "bearer" or not token:
        raise Unauthenticated("Missing token")
    return token


def get_token_service(request: Request) -> security.TokenService:
    return request.app.state.tokens


async def get_bearer_token(authorization: str | None = Header(default=None)) -> str:
    return _extract_bearer_token(authorization)


async def get_current_claims(
    access_token: str = Depends(get_bearer_token),
    tokens: security.TokenService = Depends(get_token_service),
) -> security.TokenClaims:
    return service.claims_from_token(tokens, access_token)
