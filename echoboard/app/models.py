from typing import Optional

from pydantic import BaseModel

from echoboard.models.project import DEFAULT_MAX_MEMBERS
from echoboard.models.role import Role

from .env_loader import EnvironmentName


class RegisterUserRequest(BaseModel):
    """Request model for registering a local account."""

    email: str
    name: str
    role: Role


class CreateProjectRequest(BaseModel):
    """Request model for creating a project."""

    name: str
    description: Optional[str] = None
    created_by_id: int
    max_members: int = DEFAULT_MAX_MEMBERS
    is_public: bool = False


class LinkGithubRequest(BaseModel):
    """Request model for linking a GitHub repository to a project."""

    url: str
    owner: str
    name: str


class LinkFigmaRequest(BaseModel):
    url: str
    key: str


class AddMemberRequest(BaseModel):
    """Request model for adding a member; set ``invited_by_id`` for invitations."""

    user_id: int
    role: Role
    invited_by_id: Optional[int] = None


class UpdateMemberRequest(BaseModel):
    """Request model for changing a member's project role via PATCH."""

    role: Role


class PermissionResponse(BaseModel):
    project_id: int
    user_id: int
    action: str
    resource_type: str
    allowed: bool


class EnvironmentResponse(BaseModel):
    """Response model for the environment endpoint."""

    environment: EnvironmentName
