"""Tests for the validation layer and payload schemas."""

import uuid

from player_api.core.validation import ROOT_FIELD, collect_errors, try_validate
from player_api.schemas.auth import LoginUser, RegisterUser
from player_api.schemas.player import PlayerIn


def test_valid_player():
    player, errors = try_validate(PlayerIn, {"name": "Alice"})
    assert errors == {}
    assert player.name == "Alice"
    assert player.id is None


def test_player_id_parsed():
    player_id = uuid.uuid4()
    player, _ = try_validate(PlayerIn, {"id": str(player_id), "name": "Alice"})
    assert player.id == player_id


def test_player_name_bounds():
    assert try_validate(PlayerIn, {"name": "x" * 200})[1] == {}

    player, errors = try_validate(PlayerIn, {"name": "x" * 201})
    assert player is None
    assert list(errors) == ["name"]

    _, errors = try_validate(PlayerIn, {"name": ""})
    assert list(errors) == ["name"]


def test_none_payload_reports_root():
    player, errors = try_validate(PlayerIn, None)
    assert player is None
    assert ROOT_FIELD in errors


def test_errors_grouped_per_field():
    _, errors = try_validate(RegisterUser, {"email": "nope", "password": "abc"})
    assert set(errors) == {"email", "password", "confirmPassword"}
    assert all(isinstance(msgs, list) and msgs for msgs in errors.values())


def test_register_accepts_camel_case():
    data, errors = try_validate(
        RegisterUser,
        {"email": "a@example.com", "password": "Passw0rd!", "confirmPassword": "Passw0rd!"},
    )
    assert errors == {}
    assert data.confirm_password == "Passw0rd!"


def test_login_password_length():
    _, errors = try_validate(LoginUser, {"email": "a@example.com", "password": "x" * 101})
    assert list(errors) == ["password"]


def test_collect_errors_strips_request_location():
    errors = collect_errors([
        {"loc": ("body", "name"), "msg": "too long"},
        {"loc": ("body", "name"), "msg": "still too long"},
        {"loc": ("path", "player_id"), "msg": "bad uuid"},
        {"loc": ("body",), "msg": "not an object"},
    ])
    assert errors == {
        "name": ["too long", "still too long"],
        "player_id": ["bad uuid"],
        ROOT_FIELD: ["not an object"],
    }
