"""Authorization policy and role parsing."""

import uuid

import pytest

from coursehub.auth.dependencies import Identity
from coursehub.auth.policy import Role, is_admin, is_owner_or_admin, parse_registration_role


def _identity(role: str, user_id: uuid.UUID | None = None) -> Identity:
    return Identity(id=user_id or uuid.uuid4(), name="N", email="n@example.com", role=role)


def test_is_admin():
    assert is_admin(_identity("admin"))
    for role in ("teacher", "learner", "user", "Admin"):
        assert not is_admin(_identity(role))
    assert not is_admin(None)


def test_owner_or_admin_owner():
    me = uuid.uuid4()
    assert is_owner_or_admin(_identity("learner", me), me)


def test_owner_or_admin_stranger():
    assert not is_owner_or_admin(_identity("teacher"), uuid.uuid4())


def test_owner_or_admin_admin_owns_everything():
    assert is_owner_or_admin(_identity("admin"), uuid.uuid4())


def test_owner_or_admin_missing_owner():
    assert not is_owner_or_admin(_identity("learner"), None)
    assert not is_owner_or_admin(None, uuid.uuid4())


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("teacher", Role.TEACHER),
        ("learner", Role.LEARNER),
        (" Teacher ", Role.TEACHER),
        (None, Role.LEARNER),
        ("", Role.LEARNER),
        ("admin", Role.LEARNER),
        ("user", Role.LEARNER),
        ("wizard", Role.LEARNER),
    ],
)
def test_parse_registration_role(raw, expected):
    assert parse_registration_role(raw) is expected
