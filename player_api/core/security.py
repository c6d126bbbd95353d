"""Password hashing and bearer token encoding.

Token building is a pure function over a ``TokenRequest``: same inputs
(including ``issued_at`` and ``token_id``) give the same token.
"""

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any

import bcrypt
from jose import JWTError, jwt

from player_api.config import Settings
from player_api.schemas.auth import UserClaim, UserResponse, UserToken

ROLE_CLAIM = "role"

# Registered JWT claims that are not copied into the user token claim list
_RESERVED_CLAIMS = {"sub", "email", "jti", "nbf", "iat", "exp", "iss", "aud"}


class InvalidToken(Exception):
    """Bearer token failed signature, expiry, issuer or audience checks."""


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, hashed: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode("utf-8"), hashed.encode("utf-8"))
    except ValueError:
        # Malformed stored hash
        return False


@dataclass(frozen=True)
class TokenRequest:
    settings: Settings
    user_id: str
    email: str
    claims: list[tuple[str, str]] = field(default_factory=list)
    roles: list[str] = field(default_factory=list)
    issued_at: datetime | None = None
    token_id: str | None = None


def _merge_claim(payload: dict[str, Any], claim_type: str, value: str) -> None:
    """Add a claim; repeated types become a list."""
    if claim_type not in payload:
        payload[claim_type] = value
    elif isinstance(payload[claim_type], list):
        payload[claim_type].append(value)
    else:
        payload[claim_type] = [payload[claim_type], value]


def build_user_response(req: TokenRequest) -> UserResponse:
    """Encode a signed access token for the user and describe it."""
    settings = req.settings
    issued_at = req.issued_at or datetime.now(timezone.utc)
    lifetime = timedelta(hours=settings.JWT_EXPIRATION_HOURS)
    iat = int(issued_at.timestamp())

    payload: dict[str, Any] = {
        "sub": req.user_id,
        "email": req.email,
        "jti": req.token_id or str(uuid.uuid4()),
        "nbf": iat,
        "iat": iat,
        "exp": int((issued_at + lifetime).timestamp()),
        "iss": settings.JWT_ISSUER,
        "aud": settings.JWT_AUDIENCE,
    }
    for claim_type, value in req.claims:
        if claim_type in _RESERVED_CLAIMS:
            continue
        _merge_claim(payload, claim_type, value)
    for role in req.roles:
        _merge_claim(payload, ROLE_CLAIM, role)

    token = jwt.encode(payload, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)

    claims = [UserClaim(type=t, value=v) for t, v in req.claims if t not in _RESERVED_CLAIMS]
    claims += [UserClaim(type=ROLE_CLAIM, value=role) for role in req.roles]

    return UserResponse(
        access_token=token,
        expires_in=lifetime.total_seconds(),
        user_token=UserToken(id=req.user_id, email=req.email, claims=claims),
    )


def decode_access_token(token: str, settings: Settings) -> dict[str, Any]:
    """Verify a bearer token and return its claims."""
    try:
        return jwt.decode(
            token,
            settings.JWT_SECRET_KEY,
            algorithms=[settings.JWT_ALGORITHM],
            audience=settings.JWT_AUDIENCE,
            issuer=settings.JWT_ISSUER,
        )
    except JWTError as exc:
        raise InvalidToken(str(exc)) from exc


def has_claim(claims: dict[str, Any], claim_type: str, value: str | None = None) -> bool:
    """Check a decoded claim set for ``claim_type`` (optionally with ``value``)."""
    if claim_type not in claims:
        return False
    if value is None:
        return True
    present = claims[claim_type]
    values = present if isinstance(present, list) else [present]
    return value in values
