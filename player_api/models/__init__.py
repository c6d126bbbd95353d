"""Database models package."""

from player_api.models.identity import Role, User, UserClaim, UserRole
from player_api.models.player import Player

__all__ = ["Player", "User", "UserClaim", "Role", "UserRole"]
