"""Shared route dependencies: DB-backed services and bearer-token authorization."""

from typing import Any

from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from player_api.config import Settings
from player_api.context import get_app_settings
from player_api.core.security import InvalidToken, decode_access_token, has_claim
from player_api.db.database import get_db
from player_api.db.repositories.player import PlayerRepository
from player_api.services.identity_service import IdentityOptions, IdentityService

DELETE_PLAYER_CLAIM = "DeletePlayerClaim"

# auto_error off so missing credentials give 401, not the default 403
bearer = HTTPBearer(auto_error=False)


def get_player_repository(db: AsyncSession = Depends(get_db)) -> PlayerRepository:
    return PlayerRepository(db)


def get_identity_service(
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
) -> IdentityService:
    return IdentityService(db, IdentityOptions.from_settings(settings))


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(status_code=401, detail=detail, headers={"WWW-Authenticate": "Bearer"})


async def require_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer),
    settings: Settings = Depends(get_app_settings),
) -> dict[str, Any]:
    """Require a valid bearer token; returns its claims."""
    if credentials is None:
        raise _unauthorized("Not authenticated")
    try:
        return decode_access_token(credentials.credentials, settings)
    except InvalidToken:
        raise _unauthorized("Invalid token")


def require_claim(claim_type: str, value: str | None = None):
    """Dependency factory: valid token that also carries ``claim_type``."""

    async def _require(claims: dict[str, Any] = Depends(require_user)) -> dict[str, Any]:
        if not has_claim(claims, claim_type, value):
            raise HTTPException(status_code=403, detail="Forbidden")
        return claims

    return _require
