"""Player repository for data access.

Write operations flush immediately and return the number of rows affected
(the saved-count); callers treat 0 as a failed save.
"""

import uuid

from sqlalchemy import delete, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from player_api.models.player import Player


class PlayerRepository:
    """Pure data access for Player entities."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def list_players(self) -> list[Player]:
        result = await self.session.execute(select(Player))
        return list(result.scalars().all())

    async def get_player(self, player_id: uuid.UUID) -> Player | None:
        """Get a player by ID."""
        return await self.session.get(Player, player_id)

    async def create_player(self, player: Player) -> int:
        """Insert a new player, generating its id if absent."""
        if player.id is None:
            player.id = uuid.uuid4()
        elif await self.session.get(Player, player.id) is not None:
            return 0
        self.session.add(player)
        try:
            await self.session.flush()
        except IntegrityError:
            # A concurrent insert took the id between the check and the flush.
            # The insert is the request's only write, so drop the whole unit of work.
            await self.session.rollback()
            return 0
        return 1

    async def update_player(self, player: Player) -> int:
        """Replace the stored row's mutable fields with the given player's."""
        result = await self.session.execute(
            update(Player)
            .where(Player.id == player.id)
            .values(name=player.name)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    async def delete_player(self, player: Player) -> int:
        result = await self.session.execute(
            delete(Player)
            .where(Player.id == player.id)
            .execution_options(synchronize_session=False)
        )
        # Keep the identity map from handing back a row that no longer exists
        if player in self.session:
            self.session.expunge(player)
        return result.rowcount
