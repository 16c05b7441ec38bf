"""Database operations for projects."""

import logging
from typing import Optional

import psycopg
from psycopg import sql
from psycopg.errors import UniqueViolation

from echoboard.errors import NotFound, ValidationError
from echoboard.models.project import Project
from echoboard.utils.timezone import ensure_utc
from .connection import use_cursor

logger = logging.getLogger(__name__)

PROJECT_COLUMNS = """
    id, name, description, status, created_by, github_repo_url,
    github_repo_owner, github_repo_name, figma_file_url, figma_file_key,
    is_public, max_members, created_at, updated_at
"""


def get_project_by_id(
    project_id: int,
    for_update: bool = False,
    cursor: Optional[psycopg.Cursor] = None,
) -> Optional[Project]:
    """Get a project by id.

    Args:
        project_id: The project's surrogate id.
        for_update: Lock the row until the surrounding transaction ends. Used to
            serialize membership changes on the same project.
        cursor: Optional cursor of an enclosing transaction.
    """
    query = sql.SQL("SELECT {columns} FROM projects WHERE id = %s {lock}").format(
        columns=sql.SQL(PROJECT_COLUMNS),
        lock=sql.SQL("FOR UPDATE") if for_update else sql.SQL(""),
    )
    with use_cursor(cursor) as cur:
        cur.execute(query, (project_id,))
        row = cur.fetchone()
        return _row_to_project(row) if row else None


def get_project_by_name(
    name: str, cursor: Optional[psycopg.Cursor] = None
) -> Optional[Project]:
    """Get a project by name, ignoring case."""
    with use_cursor(cursor) as cur:
        cur.execute(
            f"SELECT {PROJECT_COLUMNS} FROM projects WHERE LOWER(name) = LOWER(%s)",
            (name.strip(),),
        )
        row = cur.fetchone()
        return _row_to_project(row) if row else None


def get_project_by_github_repo(
    owner: str, name: str, cursor: Optional[psycopg.Cursor] = None
) -> Optional[Project]:
    """Get the project linked to a GitHub repository; the lowest id wins if several are."""
    with use_cursor(cursor) as cur:
        cur.execute(
            f"""
            SELECT {PROJECT_COLUMNS} FROM projects
            WHERE github_repo_owner = %s AND github_repo_name = %s
            ORDER BY id
            LIMIT 1
            """,
            (owner, name),
        )
        row = cur.fetchone()
        return _row_to_project(row) if row else None


def get_project_by_figma_file_key(
    key: str, cursor: Optional[psycopg.Cursor] = None
) -> Optional[Project]:
    with use_cursor(cursor) as cur:
        cur.execute(
            f"""
            SELECT {PROJECT_COLUMNS} FROM projects
            WHERE figma_file_key = %s
            ORDER BY id
            LIMIT 1
            """,
            (key,),
        )
        row = cur.fetchone()
        return _row_to_project(row) if row else None


def get_active_projects_for_user(
    user_id: int, cursor: Optional[psycopg.Cursor] = None
) -> list[Project]:
    """ACTIVE projects in which the user holds an ACTIVE membership."""
    with use_cursor(cursor) as cur:
        cur.execute(
            """
            SELECT DISTINCT p.id, p.name, p.description, p.status, p.created_by,
                p.github_repo_url, p.github_repo_owner, p.github_repo_name,
                p.figma_file_url, p.figma_file_key, p.is_public, p.max_members,
                p.created_at, p.updated_at
            FROM projects p
            JOIN project_members pm ON pm.project_id = p.id
            WHERE pm.user_id = %s
              AND pm.status = 'ACTIVE'
              AND p.status = 'ACTIVE'
            ORDER BY p.name
            """,
            (user_id,),
        )
        return [_row_to_project(row) for row in cur.fetchall()]


def create_project(
    project: Project, cursor: Optional[psycopg.Cursor] = None
) -> Project:
    """Insert a new project and return it with its assigned id.

    Raises:
        ValidationError: If a project with the same name (any case) exists.
    """
    logger.info(f"Creating project name={project.name!r} by user {project.created_by_id}")
    with use_cursor(cursor) as cur:
        try:
            cur.execute(
                f"""
                INSERT INTO projects (
                    name, description, status, created_by, github_repo_url,
                    github_repo_owner, github_repo_name, figma_file_url,
                    figma_file_key, is_public, max_members, created_at, updated_at
                )
                VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s)
                RETURNING {PROJECT_COLUMNS}
                """,
                (
                    project.name,
                    project.description,
                    project.status,
                    project.created_by_id,
                    project.github_repo_url,
                    project.github_repo_owner,
                    project.github_repo_name,
                    project.figma_file_url,
                    project.figma_file_key,
                    project.is_public,
                    project.max_members,
                    project.created_at,
                    project.updated_at,
                ),
            )
        except UniqueViolation as e:
            raise ValidationError(
                entity="project",
                field="name",
                constraint="unique",
                message=f"Project name already exists: {project.name}",
            ) from e
        created = _row_to_project(cur.fetchone())
        logger.info(f"Created project id={created.id}")
        return created


def update_project(
    project: Project, cursor: Optional[psycopg.Cursor] = None
) -> Project:
    """Persist the mutable fields of an existing project.

    ``created_by`` is never updated. Loaded members are carried over to the
    returned object unchanged.
    """
    with use_cursor(cursor) as cur:
        cur.execute(
            f"""
            UPDATE projects
            SET description = %s, status = %s, github_repo_url = %s,
                github_repo_owner = %s, github_repo_name = %s,
                figma_file_url = %s, figma_file_key = %s, is_public = %s,
                max_members = %s
            WHERE id = %s
            RETURNING {PROJECT_COLUMNS}
            """,
            (
                project.description,
                project.status,
                project.github_repo_url,
                project.github_repo_owner,
                project.github_repo_name,
                project.figma_file_url,
                project.figma_file_key,
                project.is_public,
                project.max_members,
                project.id,
            ),
        )
        row = cur.fetchone()
        if row is None:
            raise NotFound("project", project.id)
        updated = _row_to_project(row)
        updated.members = project.members
        return updated


def _row_to_project(row) -> Project:
    """Convert a database row to a Project object."""
    (
        id,
        name,
        description,
        status,
        created_by,
        github_repo_url,
        github_repo_owner,
        github_repo_name,
        figma_file_url,
        figma_file_key,
        is_public,
        max_members,
        created_at,
        updated_at,
    ) = row
    return Project(
        id=id,
        name=name,
        description=description,
        status=status,
        created_by_id=created_by,
        github_repo_url=github_repo_url,
        github_repo_owner=github_repo_owner,
        github_repo_name=github_repo_name,
        figma_file_url=figma_file_url,
        figma_file_key=figma_file_key,
        is_public=is_public,
        max_members=max_members,
        created_at=ensure_utc(created_at),
        updated_at=ensure_utc(updated_at),
    )
