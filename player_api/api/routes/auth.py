"""User endpoints - registration and login, both answering with a bearer token."""

from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException

from player_api.api.deps import get_identity_service
from player_api.config import Settings
from player_api.context import get_app_settings
from player_api.core.validation import validate_or_raise
from player_api.schemas.auth import LoginUser, RegisterUser, UserResponse
from player_api.services.identity_service import IdentityService
from player_api.services.token_service import issue_token

router = APIRouter(tags=["user"])

USER_NOT_DEFINED = "User not defined"
USER_BLOCKED = "User is blocked"
INVALID_CREDENTIALS = "Invalid user name or password"


@router.post("/registration", response_model=UserResponse, name="UserRegistration")
async def register(
    payload: dict[str, Any] | None = Body(default=None),
    identity: IdentityService = Depends(get_identity_service),
    settings: Settings = Depends(get_app_settings),
):
    """Create a confirmed user and sign them straight in."""
    if payload is None:
        raise HTTPException(status_code=400, detail=USER_NOT_DEFINED)
    data = validate_or_raise(RegisterUser, payload)

    result = await identity.create_user(data.email, data.password)
    if not result.succeeded:
        raise HTTPException(status_code=400, detail=[e.to_dict() for e in result.errors])

    return await issue_token(identity, result.user, settings)


@router.post("/login", response_model=UserResponse, name="UserLogin")
async def login(
    payload: dict[str, Any] | None = Body(default=None),
    identity: IdentityService = Depends(get_identity_service),
    settings: Settings = Depends(get_app_settings),
):
    if payload is None:
        raise HTTPException(status_code=400, detail=USER_NOT_DEFINED)
    data = validate_or_raise(LoginUser, payload)

    result = await identity.password_sign_in(data.email, data.password, lockout_on_failure=True)
    if result.is_locked_out:
        raise HTTPException(status_code=400, detail=USER_BLOCKED)
    if not result.succeeded:
        raise HTTPException(status_code=400, detail=INVALID_CREDENTIALS)

    return await issue_token(identity, result.user, settings)
