"""Token service - resolves a user's claims and roles into a signed token response."""

from player_api.config import Settings
from player_api.core.security import TokenRequest, build_user_response
from player_api.models.identity import User
from player_api.schemas.auth import UserResponse
from player_api.services.identity_service import IdentityService


async def issue_token(identity: IdentityService, user: User, settings: Settings) -> UserResponse:
    request = TokenRequest(
        settings=settings,
        user_id=user.id,
        email=user.email,
        claims=await identity.get_claims(user),
        roles=await identity.get_roles(user),
    )
    return build_user_response(request)
