"""
Auth API endpoints.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends, Request

from core.db import Database, get_database
from core.validation import validate

from . import dependencies, schemas, security, service

router = APIRouter()


@router.post("/auth/login")
async def login(
    request: Request,
    body: Any = Body(default=None),
    database: Database = Depends(get_database),
    tokens: security.TokenService = Depends(dependencies.get_token_service),
) -> schemas.LoginResponse:
    payload = validate(body, schemas.LoginRequest, message="Invalid input")
    settings = request.app.state.settings
    return await service.login(
        database,
        tokens,
        payload,
        allow_legacy=settings.allow_legacy_plaintext_passwords,
    )


@router.get("/me")
async def me(
    claims: security.TokenClaims = Depends(dependencies.get_current_claims),
) -> schemas.MeResponse:
    return service.me(claims)
