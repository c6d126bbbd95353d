"""Player model - the single resource exposed over CRUD."""

import uuid

from sqlalchemy import String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from player_api.db.database import Base

NAME_MAX_LENGTH = 200


class Player(Base):
    __tablename__ = "Players"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(NAME_MAX_LENGTH), nullable=False)

    def __repr__(self) -> str:
        return f"Player(id={self.id!s}, name={self.name!r})"
