"""Player endpoints - list, fetch, create, replace and delete players."""

import uuid
from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException, Response

from player_api.api.deps import (
    DELETE_PLAYER_CLAIM,
    get_player_repository,
    require_claim,
    require_user,
)
from player_api.core.errors import SAVE_FAILED, NotFound
from player_api.core.validation import validate_or_raise
from player_api.db.repositories.player import PlayerRepository
from player_api.models.player import Player
from player_api.schemas.player import PlayerIn, PlayerOut

router = APIRouter(prefix="/player", tags=["player"])


async def _get_player_or_404(player_id: uuid.UUID, repo: PlayerRepository) -> Player:
    player = await repo.get_player(player_id)
    if player is None:
        raise NotFound()
    return player


def _save_failed() -> HTTPException:
    return HTTPException(status_code=400, detail=SAVE_FAILED)


@router.get("", response_model=list[PlayerOut], name="GetPlayer")
async def list_players(repo: PlayerRepository = Depends(get_player_repository)):
    return await repo.list_players()


@router.get(
    "/{player_id}",
    response_model=PlayerOut,
    name="GetPlayerById",
    dependencies=[Depends(require_user)],
)
async def get_player(player_id: uuid.UUID, repo: PlayerRepository = Depends(get_player_repository)):
    return await _get_player_or_404(player_id, repo)


@router.post(
    "",
    response_model=PlayerOut,
    status_code=201,
    name="PostPlayer",
    dependencies=[Depends(require_user)],
)
async def create_player(
    response: Response,
    payload: dict[str, Any] | None = Body(default=None),
    repo: PlayerRepository = Depends(get_player_repository),
):
    """Create a player; the id is generated unless the client supplies one."""
    data = validate_or_raise(PlayerIn, payload)

    player = Player(id=data.id, name=data.name)
    if await repo.create_player(player) <= 0:
        raise _save_failed()

    response.headers["Location"] = f"/player/{player.id}"
    return player


@router.put(
    "/{player_id}",
    status_code=204,
    response_class=Response,
    name="PutPlayer",
    dependencies=[Depends(require_user)],
)
async def update_player(
    player_id: uuid.UUID,
    payload: dict[str, Any] | None = Body(default=None),
    repo: PlayerRepository = Depends(get_player_repository),
):
    """Replace a player wholesale. The path id wins over any id in the body."""
    await _get_player_or_404(player_id, repo)
    data = validate_or_raise(PlayerIn, payload)

    if await repo.update_player(Player(id=player_id, name=data.name)) <= 0:
        raise _save_failed()
    return Response(status_code=204)


@router.delete(
    "/{player_id}",
    status_code=204,
    response_class=Response,
    name="DeletePlayer",
    dependencies=[Depends(require_claim(DELETE_PLAYER_CLAIM))],
)
async def delete_player(player_id: uuid.UUID, repo: PlayerRepository = Depends(get_player_repository)):
    player = await _get_player_or_404(player_id, repo)
    if await repo.delete_player(player) <= 0:
        raise _save_failed()
    return Response(status_code=204)
