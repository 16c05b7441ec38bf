"""Membership of a user in a project, with its lifecycle and permission check."""

from __future__ import annotations
from datetime import datetime
from typing import TYPE_CHECKING, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from echoboard.errors import (
    CapacityExceeded,
    DuplicateMembership,
    InvalidStateTransition,
    ValidationError,
)
from echoboard.models.role import Role, is_allowed
from echoboard.utils.timezone import utc_now

if TYPE_CHECKING:
    # This prevents circular imports at runtime.
    from echoboard.models.project import Project
    from echoboard.models.user import User


MemberStatus = Literal["ACTIVE", "LEFT", "SUSPENDED"]
JoinMethod = Literal["DIRECT", "INVITED", "OAUTH_SYNC"]


class ProjectMember(BaseModel):
    """One user's membership in one project.

    There is at most one row per (project, user) pair. A member who left is
    brought back with ``reactivate()`` on the same row, never a new one.

    State machine::

        ACTIVE --leave()----> LEFT
        ACTIVE --suspend()--> SUSPENDED
        LEFT | SUSPENDED --reactivate()--> ACTIVE
    """

    model_config = ConfigDict(validate_assignment=True)

    id: Optional[int] = None
    project_id: int
    user_id: int
    project_role: Role
    status: MemberStatus = "ACTIVE"
    join_method: JoinMethod = "DIRECT"
    invited_by_id: Optional[int] = None  # only set for INVITED members
    joined_at: datetime = Field(default_factory=utc_now)
    left_at: Optional[datetime] = None

    @classmethod
    def create_direct(cls, project: Project, user: User, role: Role) -> ProjectMember:
        """Create a membership for a user who joined the project directly.

        ``project.members`` must hold every membership row of the project,
        whatever its status.

        Raises:
            DuplicateMembership: If the user already has a row in the project.
            CapacityExceeded: If the project has no free seat.
        """
        return cls._build(project, user, role, join_method="DIRECT")

    @classmethod
    def create_invited(
        cls, project: Project, user: User, role: Role, invited_by: User
    ) -> ProjectMember:
        """Create a membership for a user invited by another user."""
        if invited_by is None or invited_by.id is None:
            raise ValidationError(
                entity="project_member",
                field="invited_by_id",
                constraint="required",
                message="Invited memberships require a persisted inviter",
            )
        return cls._build(
            project, user, role, join_method="INVITED", invited_by_id=invited_by.id
        )

    @classmethod
    def create_oauth_sync(
        cls, project: Project, user: User, role: Role
    ) -> ProjectMember:
        """Create a membership mirrored from an OAuth provider's team roster."""
        return cls._build(project, user, role, join_method="OAUTH_SYNC")

    @classmethod
    def _build(
        cls,
        project: Project,
        user: User,
        role: Role,
        join_method: JoinMethod,
        invited_by_id: Optional[int] = None,
    ) -> ProjectMember:
        # Any existing row counts, LEFT and SUSPENDED included.
        if project.find_member(user.id) is not None:
            raise DuplicateMembership(project.id, user.id)
        if not project.can_add_more_members():
            raise CapacityExceeded(project.id, project.max_members)
        try:
            return cls(
                project_id=project.id,
                user_id=user.id,
                project_role=role,
                join_method=join_method,
                invited_by_id=invited_by_id,
            )
        except PydanticValidationError as e:
            raise ValidationError.from_pydantic("project_member", e) from e

    @property
    def is_active(self) -> bool:
        return self.status == "ACTIVE"

    def leave(self) -> None:
        """Mark this member as having left the project."""
        self._require_status("ACTIVE", attempted="leave")
        self.status = "LEFT"
        self.left_at = utc_now()

    def suspend(self) -> None:
        """Suspend an active member."""
        self._require_status("ACTIVE", attempted="suspend")
        self.status = "SUSPENDED"
        self.left_at = utc_now()

    def reactivate(self) -> None:
        """Bring a LEFT or SUSPENDED member back to ACTIVE."""
        self._require_status("LEFT", "SUSPENDED", attempted="reactivate")
        self.status = "ACTIVE"
        self.left_at = None

    def change_role(self, role: Role) -> None:
        """Set the role held in this project; the user's global role is unaffected."""
        try:
            self.project_role = role
        except PydanticValidationError as e:
            raise ValidationError.from_pydantic("project_member", e) from e

    def has_permission(self, action: str, resource_type: str) -> bool:
        """Whether this member may perform ``action`` on ``resource_type``."""
        # Inactive memberships carry no permissions at all.
        if self.status != "ACTIVE":
            return False
        # Every active member may view everything.
        if action == "view":
            return True
        return is_allowed(self.project_role, action, resource_type)

    def _require_status(self, *allowed: MemberStatus, attempted: str) -> None:
        if self.status not in allowed:
            raise InvalidStateTransition(
                entity="project_member",
                entity_id=self.id,
                current=self.status,
                attempted=attempted,
            )
