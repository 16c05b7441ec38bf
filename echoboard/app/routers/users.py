"""User registration and account status routes."""

from fastapi import APIRouter

from echoboard.directory.memberships import list_user_memberships
from echoboard.directory.projects import list_user_projects
from echoboard.directory.users import (
    deactivate_user,
    find_user_by_email,
    get_user,
    list_users,
    reactivate_user,
    register_user,
)
from echoboard.models.project import Project
from echoboard.models.project_member import MemberStatus, ProjectMember
from echoboard.models.role import Role
from echoboard.models.user import User
from echoboard.app.models import RegisterUserRequest

router = APIRouter(prefix="/users", tags=["users"])


@router.post("/register", response_model=User, status_code=201)
def register(request: RegisterUserRequest) -> User:
    """Register a new local account.

    Returns 409 if the email is already registered (case-insensitive).
    """
    return register_user(request.email, request.name, request.role)


@router.get("/", response_model=list[User])
def read_users(role: Role | None = None, active: bool | None = None) -> list[User]:
    """All users by name, optionally filtered by global role and active flag."""
    return list_users(role=role, active=active)


@router.get("/active", response_model=list[User])
def read_active_users() -> list[User]:
    return list_users(active=True)


@router.get("/role/{role}", response_model=list[User])
def read_users_by_role(role: Role) -> list[User]:
    return list_users(role=role)


@router.get("/email/{email}", response_model=User)
def read_user_by_email(email: str) -> User:
    return find_user_by_email(email)


@router.get("/{user_id}", response_model=User)
def read_user(user_id: int) -> User:
    return get_user(user_id)


@router.post("/{user_id}/deactivate", response_model=User)
def deactivate(user_id: int) -> User:
    """Deactivate an account. Memberships are kept but grant no permissions."""
    return deactivate_user(user_id)


@router.post("/{user_id}/reactivate", response_model=User)
def reactivate(user_id: int) -> User:
    return reactivate_user(user_id)


@router.get("/{user_id}/projects", response_model=list[Project])
def read_user_projects(user_id: int) -> list[Project]:
    """ACTIVE projects in which the user is an ACTIVE member."""
    return list_user_projects(user_id)


@router.get("/{user_id}/memberships", response_model=list[ProjectMember])
def read_user_memberships(
    user_id: int, status: MemberStatus | None = None
) -> list[ProjectMember]:
    """All memberships held by the user, optionally filtered by status."""
    return list_user_memberships(user_id, status=status)
