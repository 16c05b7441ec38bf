"""Membership lifecycle and permission queries.

Every mutation runs in a single transaction that first locks the project row,
so the duplicate and capacity checks cannot race with a concurrent add to the
same project. The ``UNIQUE (project_id, user_id)`` constraint backs the
duplicate check at the storage level.

Memberships of a DELETED project are frozen. New and returning members are
only accepted while the project is ACTIVE.
"""

import logging
from typing import Callable, Optional

from echoboard.db.connection import get_db_cursor
from echoboard.db.project_members import (
    create_member,
    get_member,
    get_members_by_project,
    get_members_by_user,
    update_member,
)
from echoboard.db.projects import get_project_by_id
from echoboard.db.users import get_user_by_id
from echoboard.errors import (
    CapacityExceeded,
    DuplicateMembership,
    InvalidStateTransition,
    NotFound,
)
from echoboard.models.project import Project, ProjectStatus
from echoboard.models.project_member import MemberStatus, ProjectMember
from echoboard.models.role import Role
from echoboard.models.user import User

logger = logging.getLogger(__name__)


def add_member(
    project_id: int,
    user_id: int,
    role: Role,
    invited_by_id: Optional[int] = None,
) -> ProjectMember:
    """Add a user to a project, directly or on someone's invitation.

    A user who previously left must be brought back with
    ``reactivate_member`` instead; their old row still counts as a duplicate.

    Raises:
        NotFound: If the project, user, or inviter does not exist.
        InvalidStateTransition: If the project is not ACTIVE.
        DuplicateMembership: If any membership row exists for the pair.
        CapacityExceeded: If the project already has ``max_members`` active members.
    """
    with get_db_cursor() as cursor:
        project, user = _load_for_join(project_id, user_id, cursor)
        inviter = None
        if invited_by_id is not None:
            inviter = get_user_by_id(invited_by_id, cursor=cursor)
            if inviter is None:
                raise NotFound("user", invited_by_id)
        try:
            if inviter is None:
                member = ProjectMember.create_direct(project, user, role)
            else:
                member = ProjectMember.create_invited(project, user, role, inviter)
        except (DuplicateMembership, CapacityExceeded) as e:
            logger.warning(f"Join of user {user_id} to project {project_id} rejected: {e}")
            raise
        return create_member(member, cursor=cursor)


def sync_oauth_member(project_id: int, user_id: int, role: Role) -> ProjectMember:
    """Add a member mirrored from an OAuth provider's team (join method OAUTH_SYNC).

    Same checks as ``add_member``.
    """
    with get_db_cursor() as cursor:
        project, user = _load_for_join(project_id, user_id, cursor)
        try:
            member = ProjectMember.create_oauth_sync(project, user, role)
        except (DuplicateMembership, CapacityExceeded) as e:
            logger.warning(f"OAuth sync of user {user_id} to project {project_id} rejected: {e}")
            raise
        return create_member(member, cursor=cursor)


def leave_project(project_id: int, user_id: int) -> ProjectMember:
    """ACTIVE -> LEFT. Allowed in ACTIVE and ARCHIVED projects."""
    return _transition(project_id, user_id, ProjectMember.leave, "leave_project")


def suspend_member(project_id: int, user_id: int) -> ProjectMember:
    """ACTIVE -> SUSPENDED. Allowed in ACTIVE and ARCHIVED projects."""
    return _transition(project_id, user_id, ProjectMember.suspend, "suspend_member")


def reactivate_member(project_id: int, user_id: int) -> ProjectMember:
    """LEFT | SUSPENDED -> ACTIVE on the existing row.

    Raises:
        InvalidStateTransition: If the project is not ACTIVE, or the member
            is already ACTIVE.
        CapacityExceeded: If rejoining would exceed the project's capacity.
    """
    with get_db_cursor() as cursor:
        project = _lock_project(project_id, cursor)
        _require_project_status(project, "ACTIVE", attempted="reactivate_member")
        project.members = get_members_by_project(project_id, cursor=cursor)
        member = project.find_member(user_id)
        if member is None:
            raise NotFound("project_member", f"{project_id}/{user_id}")
        # A LEFT/SUSPENDED row doesn't hold a seat, so check before it takes one.
        if not member.is_active and not project.can_add_more_members():
            logger.warning(f"Reactivation rejected, project {project_id} is full")
            raise CapacityExceeded(project_id, project.max_members)
        member.reactivate()
        logger.info(f"Reactivated membership of user {user_id} in project {project_id}")
        return update_member(member, cursor=cursor)


def change_member_role(project_id: int, user_id: int, role: Role) -> ProjectMember:
    """Set the role a member holds in this project."""
    with get_db_cursor() as cursor:
        project = _lock_project(project_id, cursor)
        _require_project_status(
            project, "ACTIVE", "ARCHIVED", attempted="change_member_role"
        )
        member = _require_member(project_id, user_id, cursor)
        member.change_role(role)
        logger.info(f"User {user_id} is now {role} in project {project_id}")
        return update_member(member, cursor=cursor)


def get_membership(project_id: int, user_id: int) -> ProjectMember:
    """Get the membership row for a pair, whatever its status.

    Raises:
        NotFound: If the user has never been a member of the project.
    """
    member = get_member(project_id, user_id)
    if member is None:
        raise NotFound("project_member", f"{project_id}/{user_id}")
    return member


def list_members(
    project_id: int,
    status: Optional[MemberStatus] = None,
    role: Optional[Role] = None,
) -> list[ProjectMember]:
    """List a project's memberships, optionally filtered by status and role."""
    with get_db_cursor() as cursor:
        if get_project_by_id(project_id, cursor=cursor) is None:
            raise NotFound("project", project_id)
        return get_members_by_project(project_id, status=status, role=role, cursor=cursor)


def list_user_memberships(
    user_id: int, status: Optional[MemberStatus] = None
) -> list[ProjectMember]:
    with get_db_cursor() as cursor:
        if get_user_by_id(user_id, cursor=cursor) is None:
            raise NotFound("user", user_id)
        return get_members_by_user(user_id, status=status, cursor=cursor)


def is_active_member(project_id: int, user_id: int) -> bool:
    member = get_member(project_id, user_id)
    return member is not None and member.is_active


def check_permission(
    project_id: int, user_id: int, action: str, resource_type: str
) -> bool:
    """Whether a user may perform ``action`` on ``resource_type`` in a project.

    Deactivated accounts get no permissions even if their membership row is
    still ACTIVE. Only the project role is consulted, never the global role.
    """
    with get_db_cursor() as cursor:
        member = get_member(project_id, user_id, cursor=cursor)
        if member is None:
            logger.debug(f"User {user_id} has no membership in project {project_id}")
            return False
        user = get_user_by_id(user_id, cursor=cursor)
        if user is None or not user.is_active:
            return False
        return member.has_permission(action, resource_type)


def _load_for_join(project_id: int, user_id: int, cursor) -> tuple[Project, User]:
    """Lock the project and load everything the membership constructors check.

    Duplicate and capacity checks happen in the ``ProjectMember`` constructors,
    against the full member list loaded here.
    """
    project = _lock_project(project_id, cursor)
    _require_project_status(project, "ACTIVE", attempted="add_member")
    user = get_user_by_id(user_id, cursor=cursor)
    if user is None:
        raise NotFound("user", user_id)
    project.members = get_members_by_project(project_id, cursor=cursor)
    return project, user


def _transition(
    project_id: int,
    user_id: int,
    apply: Callable[[ProjectMember], None],
    attempted: str,
) -> ProjectMember:
    with get_db_cursor() as cursor:
        project = _lock_project(project_id, cursor)
        _require_project_status(project, "ACTIVE", "ARCHIVED", attempted=attempted)
        member = _require_member(project_id, user_id, cursor)
        apply(member)
        logger.info(
            f"Membership of user {user_id} in project {project_id} is now {member.status}"
        )
        return update_member(member, cursor=cursor)


def _lock_project(project_id: int, cursor) -> Project:
    project = get_project_by_id(project_id, for_update=True, cursor=cursor)
    if project is None:
        raise NotFound("project", project_id)
    return project


def _require_project_status(
    project: Project, *allowed: ProjectStatus, attempted: str
) -> None:
    if project.status not in allowed:
        logger.warning(
            f"Rejected {attempted} on project {project.id} while {project.status}"
        )
        raise InvalidStateTransition(
            entity="project",
            entity_id=project.id,
            current=project.status,
            attempted=attempted,
        )


def _require_member(project_id: int, user_id: int, cursor) -> ProjectMember:
    member = get_member(project_id, user_id, cursor=cursor)
    if member is None:
        raise NotFound("project_member", f"{project_id}/{user_id}")
    return member
