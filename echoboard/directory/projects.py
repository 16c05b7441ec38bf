"""Project creation and the project status lifecycle."""

import logging
from typing import Optional

from echoboard.db.connection import get_db_cursor
from echoboard.db.project_members import (
    deactivate_all_project_members,
    get_members_by_project,
)
from echoboard.db.projects import (
    create_project as insert_project,
    get_active_projects_for_user,
    get_project_by_figma_file_key,
    get_project_by_github_repo,
    get_project_by_id,
    get_project_by_name,
    update_project,
)
from echoboard.db.users import get_user_by_id
from echoboard.errors import NotFound, ValidationError
from echoboard.models.project import DEFAULT_MAX_MEMBERS, Project

logger = logging.getLogger(__name__)


def create_project(
    name: str,
    description: Optional[str],
    created_by_id: int,
    max_members: int = DEFAULT_MAX_MEMBERS,
    is_public: bool = False,
) -> Project:
    """Create an ACTIVE project owned by ``created_by_id``.

    Raises:
        NotFound: If the creator does not exist.
        ValidationError: On invalid fields, or if another project already uses
            this name (compared case-insensitively).
    """
    with get_db_cursor() as cursor:
        creator = get_user_by_id(created_by_id, cursor=cursor)
        if creator is None:
            raise NotFound("user", created_by_id)

        project = Project.create(
            name, description, creator, max_members=max_members, is_public=is_public
        )
        if get_project_by_name(project.name, cursor=cursor) is not None:
            logger.warning(f"Project creation rejected, name taken: {project.name!r}")
            raise ValidationError(
                entity="project",
                field="name",
                constraint="unique",
                message=f"Project name already exists: {project.name}",
            )
        return insert_project(project, cursor=cursor)


def get_project(project_id: int, include_members: bool = False) -> Project:
    """Get a project, optionally with all of its membership rows loaded.

    Raises:
        NotFound: If no such project exists.
    """
    with get_db_cursor() as cursor:
        project = get_project_by_id(project_id, cursor=cursor)
        if project is None:
            raise NotFound("project", project_id)
        if include_members:
            project.members = get_members_by_project(project_id, cursor=cursor)
        return project


def archive_project(project_id: int) -> Project:
    """ACTIVE -> ARCHIVED. Memberships are left as they are."""
    with get_db_cursor() as cursor:
        project = _lock_project(project_id, cursor)
        project.archive()
        logger.info(f"Archived project {project_id}")
        return update_project(project, cursor=cursor)


def restore_project(project_id: int) -> Project:
    """ARCHIVED -> ACTIVE."""
    with get_db_cursor() as cursor:
        project = _lock_project(project_id, cursor)
        project.restore()
        logger.info(f"Restored project {project_id}")
        return update_project(project, cursor=cursor)


def delete_project(project_id: int) -> Project:
    """Move a project to DELETED and every ACTIVE member to LEFT, atomically.

    Raises:
        NotFound: If no such project exists.
        InvalidStateTransition: If the project is already DELETED.
    """
    with get_db_cursor() as cursor:
        project = _lock_project(project_id, cursor)
        project.mark_deleted()
        deleted = update_project(project, cursor=cursor)
        count = deactivate_all_project_members(project_id, cursor=cursor)
        logger.info(f"Deleted project {project_id}, {count} members moved to LEFT")
        deleted.members = get_members_by_project(project_id, cursor=cursor)
        return deleted


def link_github_repo(project_id: int, url: str, owner: str, name: str) -> Project:
    """Link a GitHub repository to the project, replacing any earlier link.

    Raises:
        NotFound: If no such project exists.
        InvalidStateTransition: If the project is DELETED.
    """
    with get_db_cursor() as cursor:
        project = _lock_project(project_id, cursor)
        project.link_github(url, owner, name)
        logger.info(f"Linked GitHub repo {owner}/{name} to project {project_id}")
        return update_project(project, cursor=cursor)


def link_figma_file(project_id: int, url: str, key: str) -> Project:
    """Link a Figma file to the project, replacing any earlier link."""
    with get_db_cursor() as cursor:
        project = _lock_project(project_id, cursor)
        project.link_figma(url, key)
        logger.info(f"Linked Figma file {key} to project {project_id}")
        return update_project(project, cursor=cursor)


def find_project_by_github_repo(owner: str, name: str) -> Project:
    project = get_project_by_github_repo(owner, name)
    if project is None:
        raise NotFound("project", f"github:{owner}/{name}")
    return project


def find_project_by_figma_file(key: str) -> Project:
    project = get_project_by_figma_file_key(key)
    if project is None:
        raise NotFound("project", f"figma:{key}")
    return project


def list_user_projects(user_id: int) -> list[Project]:
    """ACTIVE projects in which the user is an ACTIVE member."""
    with get_db_cursor() as cursor:
        if get_user_by_id(user_id, cursor=cursor) is None:
            raise NotFound("user", user_id)
        return get_active_projects_for_user(user_id, cursor=cursor)


def _lock_project(project_id: int, cursor) -> Project:
    project = get_project_by_id(project_id, for_update=True, cursor=cursor)
    if project is None:
        raise NotFound("project", project_id)
    return project
