"""Tests for the identity service - password policy, sign-in, claims and roles."""

from datetime import datetime, timedelta, timezone

from player_api.services.identity_service import IdentityOptions, IdentityService

PASSWORD = "Passw0rd!"


def _service(db, **overrides):
    return IdentityService(db, IdentityOptions(**overrides))


def test_password_policy_all_rules():
    errors = _service(None).validate_password("abc")
    assert {e.code for e in errors} == {
        "PasswordTooShort",
        "PasswordRequiresNonAlphanumeric",
        "PasswordRequiresDigit",
        "PasswordRequiresUpper",
    }


def test_password_policy_relaxed():
    service = _service(
        None,
        password_require_digit=False,
        password_require_non_alphanumeric=False,
        password_require_uppercase=False,
    )
    assert service.validate_password("lowercase") == []


async def test_create_user(db):
    service = _service(db)
    result = await service.create_user("a@example.com", PASSWORD)

    assert result.succeeded
    user = result.user
    assert user.user_name == "a@example.com"
    assert user.email_confirmed is True
    assert user.password_hash != PASSWORD
    assert await service.find_by_email("A@EXAMPLE.COM") is user


async def test_create_duplicate_user(db):
    service = _service(db)
    await service.create_user("a@example.com", PASSWORD)

    result = await service.create_user("a@example.com", PASSWORD)
    assert not result.succeeded
    assert result.errors[0].to_dict() == {
        "code": "DuplicateUserName",
        "description": "Username 'a@example.com' is already taken.",
    }


async def test_sign_in(db):
    service = _service(db)
    await service.create_user("a@example.com", PASSWORD)

    result = await service.password_sign_in("a@example.com", PASSWORD, lockout_on_failure=True)
    assert result.succeeded
    assert not result.is_locked_out


async def test_failures_without_lockout_never_lock(db):
    service = _service(db, max_failed_access_attempts=2)
    await service.create_user("a@example.com", PASSWORD)

    for _ in range(5):
        result = await service.password_sign_in("a@example.com", "nope", lockout_on_failure=False)
        assert not result.succeeded
        assert not result.is_locked_out


async def test_lockout_expires(db):
    service = _service(db, max_failed_access_attempts=1)
    created = await service.create_user("a@example.com", PASSWORD)

    result = await service.password_sign_in("a@example.com", "nope", lockout_on_failure=True)
    assert result.is_locked_out

    created.user.lockout_end = datetime.now(timezone.utc) - timedelta(seconds=1)
    result = await service.password_sign_in("a@example.com", PASSWORD, lockout_on_failure=True)
    assert result.succeeded


async def test_claims_and_roles(db):
    service = _service(db)
    created = await service.create_user("a@example.com", PASSWORD)

    assert (await service.add_claim("a@example.com", "DeletePlayerClaim")).succeeded
    assert (await service.add_to_role("a@example.com", "Admin")).succeeded
    assert not (await service.add_to_role("a@example.com", "Admin")).succeeded

    assert await service.get_claims(created.user) == [("DeletePlayerClaim", "")]
    assert await service.get_roles(created.user) == ["Admin"]


async def test_add_claim_unknown_user(db):
    result = await _service(db).add_claim("ghost@example.com", "DeletePlayerClaim")
    assert not result.succeeded
    assert result.errors[0].code == "UserNotFound"


async def test_create_user_conflicting_insert(db, ctx, monkeypatch):
    """A user name taken after the duplicate check is still reported as a duplicate."""
    async with ctx.session() as other:
        await IdentityService(other).create_user("a@example.com", PASSWORD)

    service = _service(db)

    async def _not_found(email):
        return None

    monkeypatch.setattr(service, "find_by_email", _not_found)
    result = await service.create_user("a@example.com", PASSWORD)

    assert not result.succeeded
    assert [e.code for e in result.errors] == ["DuplicateUserName"]
