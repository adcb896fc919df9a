"""Roles and the authorization policy.

Two roles matter to the policy: admins may act on everything, everyone
else only on what they own. The other role values (teacher, learner,
user) are labels carried on the account.
"""

import enum
import uuid
from typing import Any, Optional


class Role(str, enum.Enum):
    ADMIN = "admin"
    TEACHER = "teacher"
    LEARNER = "learner"
    USER = "user"


# Roles a visitor may pick for themselves on the registration form
SELF_SERVICE_ROLES = frozenset({Role.TEACHER, Role.LEARNER})
DEFAULT_REGISTRATION_ROLE = Role.LEARNER
DEFAULT_API_ROLE = Role.USER


def parse_registration_role(raw: Optional[str]) -> Role:
    """Map untrusted registration input onto a self-service role.

    Anything unrecognised, including "admin", becomes the default.
    """
    if raw is None:
        return DEFAULT_REGISTRATION_ROLE
    try:
        role = Role(raw.strip().lower())
    except ValueError:
        return DEFAULT_REGISTRATION_ROLE
    if role not in SELF_SERVICE_ROLES:
        return DEFAULT_REGISTRATION_ROLE
    return role


def is_admin(identity: Any) -> bool:
    return identity is not None and identity.role == Role.ADMIN.value


def is_owner_or_admin(identity: Any, owner_id: Optional[uuid.UUID]) -> bool:
    if identity is None:
        return False
    return is_admin(identity) or (owner_id is not None and identity.id == owner_id)
