"""User registration, OAuth provisioning and account status."""

import logging
from typing import Optional

from echoboard.db.connection import get_db_cursor
from echoboard.db.users import (
    create_user,
    get_user_by_email,
    get_user_by_id,
    get_user_by_oauth_identity,
    get_users,
    update_user,
)
from echoboard.errors import NotFound, ValidationError
from echoboard.models.role import Role
from echoboard.models.user import User

logger = logging.getLogger(__name__)


def register_user(email: str, name: str, role: Role) -> User:
    """Register a local account.

    Raises:
        ValidationError: On invalid fields, or if the email is already taken
            (compared case-insensitively).
    """
    user = User.create(email, name, role)
    with get_db_cursor() as cursor:
        if get_user_by_email(user.email, cursor=cursor) is not None:
            logger.warning(f"Registration rejected, email already exists: {user.email}")
            raise _email_taken(user.email)
        return create_user(user, cursor=cursor)


def provision_oauth_user(
    email: str,
    name: str,
    role: Role,
    provider: str,
    external_id: str,
    external_username: Optional[str] = None,
) -> User:
    """Get or create the account for an OAuth identity.

    This is the entry point used after a successful third-party login.
    An existing account linked to ``(provider, external_id)`` is returned as-is.
    A local account with the same email gets the OAuth identity attached.
    Otherwise a new OAuth-linked account is created.
    """
    candidate = User.create_oauth(
        email, name, role, provider, external_id, external_username
    )
    with get_db_cursor() as cursor:
        existing = get_user_by_oauth_identity(
            candidate.oauth_provider, candidate.oauth_id, cursor=cursor
        )
        if existing is not None:
            return existing

        by_email = get_user_by_email(candidate.email, cursor=cursor)
        if by_email is not None:
            if by_email.is_oauth_linked:
                # The email belongs to a different provider identity.
                raise _email_taken(candidate.email)
            logger.info(f"Linking {provider} identity to existing user {by_email.id}")
            by_email.link_oauth(provider, external_id, external_username)
            return update_user(by_email, cursor=cursor)

        return create_user(candidate, cursor=cursor)


def get_user(user_id: int) -> User:
    """Get a user by id.

    Raises:
        NotFound: If no such user exists.
    """
    user = get_user_by_id(user_id)
    if user is None:
        raise NotFound("user", user_id)
    return user


def find_user_by_email(email: str) -> User:
    """Get a user by email, ignoring case.

    Raises:
        NotFound: If no user has this email.
    """
    user = get_user_by_email(email)
    if user is None:
        raise NotFound("user", email)
    return user


def list_users(
    role: Optional[Role] = None, active: Optional[bool] = None
) -> list[User]:
    """List user accounts by name, optionally only those with a global role or active flag."""
    return get_users(role=role, is_active=active)


def deactivate_user(user_id: int) -> User:
    """Disable an account. Its memberships are kept but grant no permissions."""
    with get_db_cursor() as cursor:
        user = _require_user(user_id, cursor)
        user.deactivate()
        logger.info(f"Deactivated user {user_id}")
        return update_user(user, cursor=cursor)


def reactivate_user(user_id: int) -> User:
    with get_db_cursor() as cursor:
        user = _require_user(user_id, cursor)
        user.reactivate()
        logger.info(f"Reactivated user {user_id}")
        return update_user(user, cursor=cursor)


def _require_user(user_id: int, cursor) -> User:
    user = get_user_by_id(user_id, cursor=cursor)
    if user is None:
        raise NotFound("user", user_id)
    return user


def _email_taken(email: str) -> ValidationError:
    return ValidationError(
        entity="user",
        field="email",
        constraint="unique",
        message=f"Email already exists: {email}",
    )
