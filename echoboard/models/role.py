"""Collaboration roles and the capability lookup used for permission checks."""

from typing import Literal, get_args

from pydantic import BaseModel

from echoboard.errors import ValidationError


Role = Literal["DEVELOPER", "DESIGNER", "PRODUCT_OWNER", "STAKEHOLDER"]

ROLES: tuple[Role, ...] = get_args(Role)


class RoleInfo(BaseModel):
    """Human-readable metadata for a role."""

    name: Role
    display_name: str
    description: str


ROLE_INFO: dict[Role, RoleInfo] = {
    "DEVELOPER": RoleInfo(
        name="DEVELOPER",
        display_name="Developer",
        description="Focus on code while staying aligned with design intent",
    ),
    "DESIGNER": RoleInfo(
        name="DESIGNER",
        display_name="Designer",
        description="See implementations in real-time, provide contextual feedback",
    ),
    "PRODUCT_OWNER": RoleInfo(
        name="PRODUCT_OWNER",
        display_name="Product Owner",
        description="Track progress visually, understand technical constraints",
    ),
    # May go unused in very small teams.
    "STAKEHOLDER": RoleInfo(
        name="STAKEHOLDER",
        display_name="Stakeholder",
        description="Stay informed without technical complexity",
    ),
}


def parse_role(name: str) -> Role:
    """Look up a role by name, e.g. ``"PRODUCT_OWNER"``."""
    if name not in ROLES:
        raise ValidationError(
            entity="role",
            field="role",
            constraint="unknown_role",
            message=f"Unknown role: {name!r}",
        )
    return name  # type: ignore[return-value]


def display_name(role: Role) -> str:
    return ROLE_INFO[role].display_name


def description(role: Role) -> str:
    return ROLE_INFO[role].description


def is_allowed(role: Role, action: str, resource_type: str) -> bool:
    """Capability lookup keyed by (role, action, resource_type).

    Current stage: every role may perform every action on every resource type.
    Per-resource rules (e.g. only PRODUCT_OWNER may edit projects) belong here.
    """
    return True


def can_view(role: Role, resource_type: str) -> bool:
    """Whether a role may view resources of the given type."""
    return is_allowed(role, "view", resource_type)
