"""Database operations for project memberships."""

import logging
from typing import Optional

import psycopg
from psycopg import sql
from psycopg.errors import UniqueViolation

from echoboard.errors import DuplicateMembership, NotFound
from echoboard.models.project_member import MemberStatus, ProjectMember
from echoboard.models.role import Role
from echoboard.utils.timezone import ensure_utc
from .connection import use_cursor

logger = logging.getLogger(__name__)

MEMBER_COLUMNS = """
    id, project_id, user_id, project_role, status, join_method, invited_by,
    joined_at, left_at
"""


def get_member(
    project_id: int, user_id: int, cursor: Optional[psycopg.Cursor] = None
) -> Optional[ProjectMember]:
    """Get the membership row for a (project, user) pair, whatever its status."""
    with use_cursor(cursor) as cur:
        cur.execute(
            f"""
            SELECT {MEMBER_COLUMNS} FROM project_members
            WHERE project_id = %s AND user_id = %s
            """,
            (project_id, user_id),
        )
        row = cur.fetchone()
        return _row_to_member(row) if row else None


def get_members_by_project(
    project_id: int,
    status: Optional[MemberStatus] = None,
    role: Optional[Role] = None,
    cursor: Optional[psycopg.Cursor] = None,
) -> list[ProjectMember]:
    """Get a project's memberships, most recently joined first.

    Args:
        project_id: The project to list.
        status: If given, only rows with this status.
        role: If given, only rows holding this project role.
        cursor: Optional cursor of an enclosing transaction.
    """
    conditions: list[sql.Composable] = [sql.SQL("project_id = %s")]
    params: list = [project_id]
    if status is not None:
        conditions.append(sql.SQL("status = %s"))
        params.append(status)
    if role is not None:
        conditions.append(sql.SQL("project_role = %s"))
        params.append(role)

    query = sql.SQL("""
        SELECT {columns}
        FROM project_members
        WHERE {where_clause}
        ORDER BY joined_at DESC
    """).format(
        columns=sql.SQL(MEMBER_COLUMNS),
        where_clause=sql.SQL(" AND ").join(conditions),
    )
    with use_cursor(cursor) as cur:
        cur.execute(query, params)
        return [_row_to_member(row) for row in cur.fetchall()]


def get_members_by_user(
    user_id: int,
    status: Optional[MemberStatus] = None,
    cursor: Optional[psycopg.Cursor] = None,
) -> list[ProjectMember]:
    """Get all memberships held by a user."""
    with use_cursor(cursor) as cur:
        if status is None:
            cur.execute(
                f"""
                SELECT {MEMBER_COLUMNS} FROM project_members
                WHERE user_id = %s
                ORDER BY joined_at DESC
                """,
                (user_id,),
            )
        else:
            cur.execute(
                f"""
                SELECT {MEMBER_COLUMNS} FROM project_members
                WHERE user_id = %s AND status = %s
                ORDER BY joined_at DESC
                """,
                (user_id, status),
            )
        return [_row_to_member(row) for row in cur.fetchall()]


def create_member(
    member: ProjectMember, cursor: Optional[psycopg.Cursor] = None
) -> ProjectMember:
    """Insert a membership row.

    Raises:
        DuplicateMembership: If the (project, user) pair already has a row.
            This is the storage-level guard behind the directory's own check.
    """
    with use_cursor(cursor) as cur:
        try:
            cur.execute(
                f"""
                INSERT INTO project_members (
                    project_id, user_id, project_role, status, join_method,
                    invited_by, joined_at, left_at
                )
                VALUES (%s, %s, %s, %s, %s, %s, %s, %s)
                RETURNING {MEMBER_COLUMNS}
                """,
                (
                    member.project_id,
                    member.user_id,
                    member.project_role,
                    member.status,
                    member.join_method,
                    member.invited_by_id,
                    member.joined_at,
                    member.left_at,
                ),
            )
        except UniqueViolation as e:
            raise DuplicateMembership(member.project_id, member.user_id) from e
        created = _row_to_member(cur.fetchone())
        logger.info(
            f"Created membership id={created.id} project={created.project_id} "
            f"user={created.user_id} via {created.join_method}"
        )
        return created


def update_member(
    member: ProjectMember, cursor: Optional[psycopg.Cursor] = None
) -> ProjectMember:
    """Persist role and status changes of an existing membership.

    ``project_id``, ``user_id``, ``join_method`` and ``joined_at`` are immutable
    and never written here.
    """
    with use_cursor(cursor) as cur:
        cur.execute(
            f"""
            UPDATE project_members
            SET project_role = %s, status = %s, left_at = %s
            WHERE id = %s
            RETURNING {MEMBER_COLUMNS}
            """,
            (member.project_role, member.status, member.left_at, member.id),
        )
        row = cur.fetchone()
        if row is None:
            raise NotFound("project_member", member.id)
        return _row_to_member(row)


def deactivate_all_project_members(
    project_id: int, cursor: Optional[psycopg.Cursor] = None
) -> int:
    """Move every ACTIVE membership of a project to LEFT. Returns the row count."""
    with use_cursor(cursor) as cur:
        cur.execute(
            """
            UPDATE project_members
            SET status = 'LEFT', left_at = CURRENT_TIMESTAMP
            WHERE project_id = %s AND status = 'ACTIVE'
            """,
            (project_id,),
        )
        logger.info(f"Deactivated {cur.rowcount} members of project {project_id}")
        return cur.rowcount


def _row_to_member(row) -> ProjectMember:
    """Convert a database row to a ProjectMember object."""
    (
        id,
        project_id,
        user_id,
        project_role,
        status,
        join_method,
        invited_by,
        joined_at,
        left_at,
    ) = row
    return ProjectMember(
        id=id,
        project_id=project_id,
        user_id=user_id,
        project_role=project_role,
        status=status,
        join_method=join_method,
        invited_by_id=invited_by,
        joined_at=ensure_utc(joined_at),
        left_at=ensure_utc(left_at),
    )
