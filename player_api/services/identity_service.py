"""Identity service - user creation, password sign-in with lockout, claims and roles."""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.concurrency import run_in_threadpool

from player_api.config import Settings
from player_api.core.security import hash_password, verify_password
from player_api.models.identity import Role, User, UserClaim

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class IdentityOptions:
    password_required_length: int = 6
    password_require_digit: bool = True
    password_require_lowercase: bool = True
    password_require_uppercase: bool = True
    password_require_non_alphanumeric: bool = True
    max_failed_access_attempts: int = 5
    lockout_minutes: int = 5

    @classmethod
    def from_settings(cls, settings: Settings) -> "IdentityOptions":
        return cls(
            password_required_length=settings.PASSWORD_REQUIRED_LENGTH,
            password_require_digit=settings.PASSWORD_REQUIRE_DIGIT,
            password_require_lowercase=settings.PASSWORD_REQUIRE_LOWERCASE,
            password_require_uppercase=settings.PASSWORD_REQUIRE_UPPERCASE,
            password_require_non_alphanumeric=settings.PASSWORD_REQUIRE_NON_ALPHANUMERIC,
            max_failed_access_attempts=settings.LOCKOUT_MAX_FAILED_ATTEMPTS,
            lockout_minutes=settings.LOCKOUT_MINUTES,
        )


@dataclass(frozen=True)
class IdentityError:
    code: str
    description: str

    def to_dict(self) -> dict[str, str]:
        return {"code": self.code, "description": self.description}


@dataclass(frozen=True)
class IdentityResult:
    succeeded: bool
    errors: list[IdentityError] = field(default_factory=list)
    user: User | None = None


@dataclass(frozen=True)
class SignInResult:
    succeeded: bool = False
    is_locked_out: bool = False
    user: User | None = None


def normalize(name: str) -> str:
    return name.strip().upper()


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


class IdentityService:
    def __init__(self, db: AsyncSession, options: IdentityOptions | None = None):
        self.db = db
        self.options = options or IdentityOptions()

    def validate_password(self, password: str) -> list[IdentityError]:
        """Check a password against the configured policy."""
        opts = self.options
        errors = []
        if len(password) < opts.password_required_length:
            errors.append(IdentityError(
                "PasswordTooShort",
                f"Passwords must be at least {opts.password_required_length} characters.",
            ))
        if opts.password_require_non_alphanumeric and all(c.isalnum() for c in password):
            errors.append(IdentityError(
                "PasswordRequiresNonAlphanumeric",
                "Passwords must have at least one non alphanumeric character.",
            ))
        if opts.password_require_digit and not any(c.isdigit() for c in password):
            errors.append(IdentityError(
                "PasswordRequiresDigit",
                "Passwords must have at least one digit ('0'-'9').",
            ))
        if opts.password_require_lowercase and not any(c.islower() for c in password):
            errors.append(IdentityError(
                "PasswordRequiresLower",
                "Passwords must have at least one lowercase ('a'-'z').",
            ))
        if opts.password_require_uppercase and not any(c.isupper() for c in password):
            errors.append(IdentityError(
                "PasswordRequiresUpper",
                "Passwords must have at least one uppercase ('A'-'Z').",
            ))
        return errors

    async def find_by_email(self, email: str) -> User | None:
        result = await self.db.execute(
            select(User).where(User.normalized_user_name == normalize(email))
        )
        return result.scalar_one_or_none()

    async def create_user(self, email: str, password: str) -> IdentityResult:
        """Create a confirmed user whose user name is its email."""
        errors = []
        if await self.find_by_email(email) is not None:
            errors.append(IdentityError("DuplicateUserName", f"Username '{email}' is already taken."))
        errors.extend(self.validate_password(password))
        if errors:
            return IdentityResult(succeeded=False, errors=errors)

        user = User(
            user_name=email,
            normalized_user_name=normalize(email),
            email=email,
            email_confirmed=True,
            password_hash=await run_in_threadpool(hash_password, password),
            access_failed_count=0,
            lockout_enabled=True,
            claims=[],
            roles=[],
        )
        self.db.add(user)
        try:
            await self.db.flush()
        except IntegrityError:
            # Lost a race with a concurrent registration of the same name
            await self.db.rollback()
            return IdentityResult(
                succeeded=False,
                errors=[IdentityError("DuplicateUserName", f"Username '{email}' is already taken.")],
            )
        logger.info("Registered user %s", user.id)
        return IdentityResult(succeeded=True, user=user)

    def is_locked_out(self, user: User) -> bool:
        return (
            user.lockout_enabled
            and user.lockout_end is not None
            and _as_utc(user.lockout_end) > _utcnow()
        )

    async def password_sign_in(
        self, email: str, password: str, lockout_on_failure: bool
    ) -> SignInResult:
        """Check credentials, tracking failures toward a lockout.

        Failure bookkeeping is committed right away so it survives the
        request being answered with an error.
        """
        user = await self.find_by_email(email)
        if user is None:
            return SignInResult()

        if self.is_locked_out(user):
            return SignInResult(is_locked_out=True, user=user)

        if await run_in_threadpool(verify_password, password, user.password_hash):
            user.access_failed_count = 0
            user.lockout_end = None
            await self.db.flush()
            return SignInResult(succeeded=True, user=user)

        if lockout_on_failure and user.lockout_enabled:
            user.access_failed_count += 1
            if user.access_failed_count >= self.options.max_failed_access_attempts:
                user.lockout_end = _utcnow() + timedelta(minutes=self.options.lockout_minutes)
                user.access_failed_count = 0
                await self.db.commit()
                logger.warning("User %s locked out until %s", user.id, user.lockout_end)
                return SignInResult(is_locked_out=True, user=user)
            await self.db.commit()

        return SignInResult(user=user)

    async def get_claims(self, user: User) -> list[tuple[str, str]]:
        await self.db.refresh(user, ["claims"])
        return [(c.claim_type, c.claim_value) for c in user.claims]

    async def get_roles(self, user: User) -> list[str]:
        await self.db.refresh(user, ["roles"])
        return [r.name for r in user.roles]

    async def add_claim(self, email: str, claim_type: str, claim_value: str = "") -> IdentityResult:
        user = await self.find_by_email(email)
        if user is None:
            return IdentityResult(False, [IdentityError("UserNotFound", f"User '{email}' not found.")])
        user.claims.append(UserClaim(claim_type=claim_type, claim_value=claim_value))
        await self.db.flush()
        logger.info("Granted claim %s to user %s", claim_type, user.id)
        return IdentityResult(succeeded=True, user=user)

    async def add_to_role(self, email: str, role_name: str) -> IdentityResult:
        user = await self.find_by_email(email)
        if user is None:
            return IdentityResult(False, [IdentityError("UserNotFound", f"User '{email}' not found.")])

        result = await self.db.execute(select(Role).where(Role.name == role_name))
        role = result.scalar_one_or_none()
        if role is None:
            role = Role(name=role_name)
            self.db.add(role)
        if role in user.roles:
            return IdentityResult(
                False, [IdentityError("UserAlreadyInRole", f"User already in role '{role_name}'.")]
            )
        user.roles.append(role)
        await self.db.flush()
        logger.info("Added user %s to role %s", user.id, role_name)
        return IdentityResult(succeeded=True, user=user)
