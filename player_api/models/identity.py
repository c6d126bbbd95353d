"""Identity store models - users, their claims and roles.

Player rows never reference these tables; resource ownership is not tracked.
"""

import uuid
from datetime import datetime

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from player_api.db.database import Base


def _new_id() -> str:
    return str(uuid.uuid4())


class User(Base):
    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    user_name: Mapped[str] = mapped_column(String(256))
    normalized_user_name: Mapped[str] = mapped_column(String(256), unique=True, index=True)
    email: Mapped[str] = mapped_column(String(256))
    email_confirmed: Mapped[bool] = mapped_column(Boolean, default=False)
    password_hash: Mapped[str] = mapped_column(Text)

    # Lockout bookkeeping
    access_failed_count: Mapped[int] = mapped_column(Integer, default=0)
    lockout_enabled: Mapped[bool] = mapped_column(Boolean, default=True)
    lockout_end: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    claims: Mapped[list["UserClaim"]] = relationship(
        back_populates="user", cascade="all, delete-orphan", lazy="selectin"
    )
    roles: Mapped[list["Role"]] = relationship(secondary="user_roles", lazy="selectin")


class UserClaim(Base):
    __tablename__ = "user_claims"

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[str] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"))
    claim_type: Mapped[str] = mapped_column(String(256))
    claim_value: Mapped[str] = mapped_column(String(256), default="")

    user: Mapped[User] = relationship(back_populates="claims")


class Role(Base):
    __tablename__ = "roles"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    name: Mapped[str] = mapped_column(String(256), unique=True)


class UserRole(Base):
    __tablename__ = "user_roles"

    user_id: Mapped[str] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), primary_key=True)
    role_id: Mapped[str] = mapped_column(ForeignKey("roles.id", ondelete="CASCADE"), primary_key=True)
