"""Data access repositories."""

from player_api.db.repositories.player import PlayerRepository

__all__ = ["PlayerRepository"]
