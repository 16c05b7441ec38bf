"""Project membership routes."""

from fastapi import APIRouter

from echoboard.directory.memberships import (
    add_member,
    change_member_role,
    check_permission,
    get_membership,
    leave_project,
    list_members,
    reactivate_member,
    suspend_member,
)
from echoboard.models.project_member import MemberStatus, ProjectMember
from echoboard.models.role import Role
from echoboard.app.models import (
    AddMemberRequest,
    PermissionResponse,
    UpdateMemberRequest,
)

router = APIRouter(prefix="/projects/{project_id}/members", tags=["members"])


@router.get("/", response_model=list[ProjectMember])
def read_members(
    project_id: int,
    status: MemberStatus | None = None,
    role: Role | None = None,
) -> list[ProjectMember]:
    """List a project's memberships.

    Args:
        status: Only return members in this state.
        role: Only return members holding this project role.
    """
    return list_members(project_id, status=status, role=role)


@router.post("/", response_model=ProjectMember, status_code=201)
def create_member(project_id: int, request: AddMemberRequest) -> ProjectMember:
    """Add a member directly, or as an invitation when `invited_by_id` is set.

    Returns 409 if the user already has a membership row (use
    `POST /{user_id}/reactivate` for members who left) or the project is full.
    """
    return add_member(
        project_id,
        request.user_id,
        request.role,
        invited_by_id=request.invited_by_id,
    )


@router.get("/{user_id}", response_model=ProjectMember)
def read_member(project_id: int, user_id: int) -> ProjectMember:
    return get_membership(project_id, user_id)


@router.patch("/{user_id}", response_model=ProjectMember)
def update_member(
    project_id: int, user_id: int, request: UpdateMemberRequest
) -> ProjectMember:
    return change_member_role(project_id, user_id, request.role)


@router.post("/{user_id}/leave", response_model=ProjectMember)
def leave(project_id: int, user_id: int) -> ProjectMember:
    return leave_project(project_id, user_id)


@router.post("/{user_id}/suspend", response_model=ProjectMember)
def suspend(project_id: int, user_id: int) -> ProjectMember:
    return suspend_member(project_id, user_id)


@router.post("/{user_id}/reactivate", response_model=ProjectMember)
def reactivate(project_id: int, user_id: int) -> ProjectMember:
    return reactivate_member(project_id, user_id)


@router.get("/{user_id}/permissions", response_model=PermissionResponse)
def read_permission(
    project_id: int,
    user_id: int,
    action: str = "view",
    resource_type: str = "project",
) -> PermissionResponse:
    """Check whether a user may perform an action on a resource type."""
    allowed = check_permission(project_id, user_id, action, resource_type)
    return PermissionResponse(
        project_id=project_id,
        user_id=user_id,
        action=action,
        resource_type=resource_type,
        allowed=allowed,
    )
