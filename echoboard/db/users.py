"""Database operations for user accounts."""

import logging
from typing import Optional

import psycopg
from psycopg import sql
from psycopg.errors import UniqueViolation

from echoboard.errors import NotFound, ValidationError
from echoboard.models.role import Role
from echoboard.models.user import User
from echoboard.utils.timezone import ensure_utc
from .connection import use_cursor

logger = logging.getLogger(__name__)

USER_COLUMNS = """
    id, email, name, avatar_url, role, oauth_provider, oauth_id,
    oauth_username, is_active, created_at, updated_at
"""


def get_user_by_id(
    user_id: int, cursor: Optional[psycopg.Cursor] = None
) -> Optional[User]:
    """Get a user by surrogate id."""
    with use_cursor(cursor) as cur:
        cur.execute(
            f"SELECT {USER_COLUMNS} FROM users WHERE id = %s",
            (user_id,),
        )
        row = cur.fetchone()
        return _row_to_user(row) if row else None


def get_user_by_email(
    email: str, cursor: Optional[psycopg.Cursor] = None
) -> Optional[User]:
    """Get a user by email, ignoring case."""
    with use_cursor(cursor) as cur:
        cur.execute(
            f"SELECT {USER_COLUMNS} FROM users WHERE LOWER(email) = LOWER(%s)",
            (email.strip(),),
        )
        row = cur.fetchone()
        return _row_to_user(row) if row else None


def get_user_by_oauth_identity(
    provider: str, external_id: str, cursor: Optional[psycopg.Cursor] = None
) -> Optional[User]:
    """Get the user linked to an OAuth provider account."""
    with use_cursor(cursor) as cur:
        cur.execute(
            f"""
            SELECT {USER_COLUMNS} FROM users
            WHERE oauth_provider = %s AND oauth_id = %s
            """,
            (provider, external_id),
        )
        row = cur.fetchone()
        return _row_to_user(row) if row else None


def get_users(
    role: Optional[Role] = None,
    is_active: Optional[bool] = None,
    cursor: Optional[psycopg.Cursor] = None,
) -> list[User]:
    """Get users ordered by name, optionally filtered by global role and active flag."""
    conditions: list[sql.Composable] = []
    params: list = []
    if role is not None:
        conditions.append(sql.SQL("role = %s"))
        params.append(role)
    if is_active is not None:
        conditions.append(sql.SQL("is_active = %s"))
        params.append(is_active)

    query = sql.SQL("""
        SELECT {columns}
        FROM users
        WHERE {where_clause}
        ORDER BY LOWER(name), id
    """).format(
        columns=sql.SQL(USER_COLUMNS),
        where_clause=sql.SQL(" AND ").join(conditions) if conditions else sql.SQL("TRUE"),
    )
    with use_cursor(cursor) as cur:
        cur.execute(query, params)
        return [_row_to_user(row) for row in cur.fetchall()]


def create_user(user: User, cursor: Optional[psycopg.Cursor] = None) -> User:
    """Insert a new user and return it with its assigned id.

    Raises:
        ValidationError: If another user already has this email (any case).
    """
    logger.info(f"Creating user email={user.email} role={user.role}")
    with use_cursor(cursor) as cur:
        try:
            cur.execute(
                f"""
                INSERT INTO users (
                    email, name, avatar_url, role, oauth_provider, oauth_id,
                    oauth_username, is_active, created_at, updated_at
                )
                VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s)
                RETURNING {USER_COLUMNS}
                """,
                (
                    user.email,
                    user.name,
                    user.avatar_url,
                    user.role,
                    user.oauth_provider,
                    user.oauth_id,
                    user.oauth_username,
                    user.is_active,
                    user.created_at,
                    user.updated_at,
                ),
            )
        except UniqueViolation as e:
            raise ValidationError(
                entity="user",
                field="email",
                constraint="unique",
                message=f"Email already exists: {user.email}",
            ) from e
        created = _row_to_user(cur.fetchone())
        logger.info(f"Created user id={created.id}")
        return created


def update_user(user: User, cursor: Optional[psycopg.Cursor] = None) -> User:
    """Persist the mutable fields of an existing user."""
    with use_cursor(cursor) as cur:
        cur.execute(
            f"""
            UPDATE users
            SET name = %s, avatar_url = %s, role = %s, oauth_provider = %s,
                oauth_id = %s, oauth_username = %s, is_active = %s
            WHERE id = %s
            RETURNING {USER_COLUMNS}
            """,
            (
                user.name,
                user.avatar_url,
                user.role,
                user.oauth_provider,
                user.oauth_id,
                user.oauth_username,
                user.is_active,
                user.id,
            ),
        )
        row = cur.fetchone()
        if row is None:
            raise NotFound("user", user.id)
        return _row_to_user(row)


def _row_to_user(row) -> User:
    """Convert a database row to a User object."""
    (
        id,
        email,
        name,
        avatar_url,
        role,
        oauth_provider,
        oauth_id,
        oauth_username,
        is_active,
        created_at,
        updated_at,
    ) = row
    return User(
        id=id,
        email=email,
        name=name,
        avatar_url=avatar_url,
        role=role,
        oauth_provider=oauth_provider,
        oauth_id=oauth_id,
        oauth_username=oauth_username,
        is_active=is_active,
        created_at=ensure_utc(created_at),
        updated_at=ensure_utc(updated_at),
    )
