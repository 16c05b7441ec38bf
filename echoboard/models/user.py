"""User accounts, registered locally or provisioned through an OAuth provider."""

from __future__ import annotations
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from echoboard.errors import ValidationError
from echoboard.models.role import Role
from echoboard.utils.timezone import utc_now

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"


class User(BaseModel):
    """An account in the directory.

    ``role`` is the account-level default role. The role a user holds inside a
    given project lives on that project's membership row instead.
    """

    model_config = ConfigDict(str_strip_whitespace=True, validate_assignment=True)

    id: Optional[int] = None
    email: str = Field(pattern=EMAIL_PATTERN, max_length=255)
    name: str = Field(min_length=2, max_length=50)
    avatar_url: Optional[str] = None
    role: Role
    oauth_provider: Optional[str] = None  # "github", "google", "figma", ...
    oauth_id: Optional[str] = None  # user id on the provider
    oauth_username: Optional[str] = None
    is_active: bool = True
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    @classmethod
    def create(cls, email: str, name: str, role: Role) -> User:
        """Create a locally registered user.

        Email uniqueness is not checked here; see
        ``echoboard.directory.users.register_user``.

        Raises:
            ValidationError: If the email is malformed, the name is not 2-50
                characters long, or the role is missing or unknown.
        """
        try:
            return cls(email=email, name=name, role=role)
        except PydanticValidationError as e:
            raise ValidationError.from_pydantic("user", e) from e

    @classmethod
    def create_oauth(
        cls,
        email: str,
        name: str,
        role: Role,
        provider: str,
        external_id: str,
        external_username: Optional[str] = None,
    ) -> User:
        """Create a user linked to an OAuth identity.

        Raises:
            ValidationError: As for ``create``, or if ``provider`` or
                ``external_id`` is empty.
        """
        _require_oauth_identity(provider, external_id)
        try:
            return cls(
                email=email,
                name=name,
                role=role,
                oauth_provider=provider,
                oauth_id=external_id,
                oauth_username=external_username,
            )
        except PydanticValidationError as e:
            raise ValidationError.from_pydantic("user", e) from e

    @property
    def is_oauth_linked(self) -> bool:
        return self.oauth_provider is not None and self.oauth_id is not None

    @property
    def display_name(self) -> str:
        return self.name if self.name else self.email

    def link_oauth(
        self,
        provider: str,
        external_id: str,
        external_username: Optional[str] = None,
    ) -> None:
        """Attach an OAuth identity to an existing account."""
        _require_oauth_identity(provider, external_id)
        self.oauth_provider = provider.strip()
        self.oauth_id = external_id.strip()
        self.oauth_username = external_username
        self.touch()

    def deactivate(self) -> None:
        """Disable the account. Existing memberships are left untouched."""
        self.is_active = False
        self.touch()

    def reactivate(self) -> None:
        self.is_active = True
        self.touch()

    def touch(self) -> None:
        self.updated_at = utc_now()


def _require_oauth_identity(provider: Optional[str], external_id: Optional[str]) -> None:
    for field, value in (("oauth_provider", provider), ("oauth_id", external_id)):
        if value is None or not value.strip():
            raise ValidationError(
                entity="user",
                field=field,
                constraint="required",
                message=f"OAuth users require a non-empty {field}",
            )
