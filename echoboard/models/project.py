"""Projects: named workspaces owned by a creator, with a membership cap."""

from __future__ import annotations
from datetime import datetime
from typing import TYPE_CHECKING, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from echoboard.errors import InvalidStateTransition, ValidationError
from echoboard.models.project_member import ProjectMember
from echoboard.utils.timezone import utc_now

if TYPE_CHECKING:
    from echoboard.models.user import User


ProjectStatus = Literal["ACTIVE", "ARCHIVED", "DELETED"]

DEFAULT_MAX_MEMBERS = 10


class Project(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True, validate_assignment=True)

    id: Optional[int] = None
    name: str = Field(min_length=2, max_length=100)
    description: Optional[str] = Field(default=None, max_length=500)
    status: ProjectStatus = "ACTIVE"
    created_by_id: int

    # Third-party integrations, stored as given.
    github_repo_url: Optional[str] = None
    github_repo_owner: Optional[str] = None
    github_repo_name: Optional[str] = None
    figma_file_url: Optional[str] = None
    figma_file_key: Optional[str] = None

    is_public: bool = False
    max_members: int = Field(default=DEFAULT_MAX_MEMBERS, ge=1)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    # Loaded membership rows; not a column on the projects table.
    members: list[ProjectMember] = Field(default_factory=list)

    @classmethod
    def create(
        cls,
        name: str,
        description: Optional[str],
        created_by: User,
        max_members: int = DEFAULT_MAX_MEMBERS,
        is_public: bool = False,
    ) -> Project:
        """Create a new ACTIVE project.

        Name uniqueness is checked by ``echoboard.directory.projects.create_project``.

        Raises:
            ValidationError: If the name is not 2-100 characters, the
                description exceeds 500 characters, the creator is missing,
                or ``max_members`` is below 1.
        """
        if created_by is None or created_by.id is None:
            raise ValidationError(
                entity="project",
                field="created_by_id",
                constraint="required",
                message="Project creator cannot be blank",
            )
        try:
            return cls(
                name=name,
                description=description,
                created_by_id=created_by.id,
                max_members=max_members,
                is_public=is_public,
            )
        except PydanticValidationError as e:
            raise ValidationError.from_pydantic("project", e) from e

    @property
    def has_github_integration(self) -> bool:
        return (
            self.github_repo_url is not None
            and self.github_repo_owner is not None
            and self.github_repo_name is not None
        )

    @property
    def has_figma_integration(self) -> bool:
        return self.figma_file_url is not None and self.figma_file_key is not None

    @property
    def member_count(self) -> int:
        """Number of ACTIVE memberships; LEFT and SUSPENDED rows don't hold a seat."""
        return sum(1 for member in self.members if member.is_active)

    def can_add_more_members(self) -> bool:
        return self.member_count < self.max_members

    def find_member(self, user_id: int) -> Optional[ProjectMember]:
        """The membership row for a user, whatever its status."""
        for member in self.members:
            if member.user_id == user_id:
                return member
        return None

    def link_github(self, url: str, owner: str, name: str) -> None:
        """Point the project at a GitHub repository, replacing any previous link."""
        self._require_status("ACTIVE", "ARCHIVED", attempted="link_github")
        self.github_repo_url = url
        self.github_repo_owner = owner
        self.github_repo_name = name
        self.touch()

    def link_figma(self, url: str, key: str) -> None:
        self._require_status("ACTIVE", "ARCHIVED", attempted="link_figma")
        self.figma_file_url = url
        self.figma_file_key = key
        self.touch()

    def archive(self) -> None:
        """Archive an active project. Memberships are preserved."""
        self._require_status("ACTIVE", attempted="archive")
        self.status = "ARCHIVED"
        self.touch()

    def restore(self) -> None:
        """Bring an archived project back to ACTIVE."""
        self._require_status("ARCHIVED", attempted="restore")
        self.status = "ACTIVE"
        self.touch()

    def mark_deleted(self) -> None:
        """Move the project to the terminal DELETED state.

        Use ``echoboard.directory.projects.delete_project`` so memberships are
        deactivated in the same transaction.
        """
        self._require_status("ACTIVE", "ARCHIVED", attempted="delete")
        self.status = "DELETED"
        self.touch()

    def touch(self) -> None:
        self.updated_at = utc_now()

    def _require_status(self, *allowed: ProjectStatus, attempted: str) -> None:
        if self.status not in allowed:
            raise InvalidStateTransition(
                entity="project",
                entity_id=self.id,
                current=self.status,
                attempted=attempted,
            )
