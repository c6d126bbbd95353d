"""Player-related Pydantic schemas."""

import uuid

from pydantic import BaseModel, Field, field_validator

from player_api.models.player import NAME_MAX_LENGTH


class PlayerIn(BaseModel):
    """Incoming Player payload for create and update."""

    id: uuid.UUID | None = None
    name: str = Field(min_length=1, max_length=NAME_MAX_LENGTH)

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("The name field is required")
        return value


class PlayerOut(BaseModel):
    id: uuid.UUID
    name: str

    model_config = {"from_attributes": True}
