"""Tests for project database operations."""

from datetime import datetime
from unittest.mock import MagicMock, patch

import pytest
from psycopg.errors import UniqueViolation

from echoboard.db.projects import (
    create_project,
    get_active_projects_for_user,
    get_project_by_figma_file_key,
    get_project_by_github_repo,
    get_project_by_id,
    get_project_by_name,
    update_project,
)
from echoboard.errors import NotFound, ValidationError
from tests._factories import ProjectFactory, ProjectMemberFactory

CREATED = datetime(2026, 1, 16, 9, 0, 0)


def make_row(**overrides):
    row = {
        "id": 10,
        "name": "Board",
        "description": "desc",
        "status": "ACTIVE",
        "created_by": 1,
        "github_repo_url": None,
        "github_repo_owner": None,
        "github_repo_name": None,
        "figma_file_url": None,
        "figma_file_key": None,
        "is_public": False,
        "max_members": 10,
        "created_at": CREATED,
        "updated_at": CREATED,
    }
    row.update(overrides)
    return tuple(row.values())


class TestGetProjectById:
    @patch("echoboard.db.projects.use_cursor")
    def test_returns_project(self, mock_use_cursor):
        mock_cursor = MagicMock()
        mock_cursor.fetchone.return_value = make_row()
        mock_use_cursor.return_value.__enter__.return_value = mock_cursor

        project = get_project_by_id(10)

        assert project is not None
        assert project.id == 10
        assert project.created_by_id == 1
        assert project.members == []
        query = mock_cursor.execute.call_args[0][0]
        assert "FOR UPDATE" not in repr(query)

    def test_for_update_locks_the_row(self):
        mock_cursor = MagicMock()
        mock_cursor.fetchone.return_value = make_row()

        get_project_by_id(10, for_update=True, cursor=mock_cursor)

        query, params = mock_cursor.execute.call_args[0]
        assert "FOR UPDATE" in repr(query)
        assert params == (10,)

    def test_missing_returns_none(self):
        mock_cursor = MagicMock()
        mock_cursor.fetchone.return_value = None

        assert get_project_by_id(99, cursor=mock_cursor) is None


def test_get_project_by_name_ignores_case():
    mock_cursor = MagicMock()
    mock_cursor.fetchone.return_value = make_row()

    project = get_project_by_name(" board ", cursor=mock_cursor)

    assert project is not None
    call_args = mock_cursor.execute.call_args[0]
    assert "LOWER(name) = LOWER(%s)" in call_args[0]
    assert call_args[1] == ("board",)


def test_get_active_projects_for_user_filters_on_both_statuses():
    mock_cursor = MagicMock()
    mock_cursor.fetchall.return_value = [make_row(), make_row(id=11, name="Other")]

    projects = get_active_projects_for_user(1, cursor=mock_cursor)

    assert [p.id for p in projects] == [10, 11]
    query = mock_cursor.execute.call_args[0][0]
    assert "pm.status = 'ACTIVE'" in query
    assert "p.status = 'ACTIVE'" in query


class TestIntegrationLookups:
    def test_by_github_repo(self):
        mock_cursor = MagicMock()
        mock_cursor.fetchone.return_value = make_row(
            github_repo_url="https://github.com/acme/board",
            github_repo_owner="acme",
            github_repo_name="board",
        )

        project = get_project_by_github_repo("acme", "board", cursor=mock_cursor)

        assert project is not None
        assert project.has_github_integration is True
        query, params = mock_cursor.execute.call_args[0]
        assert "github_repo_owner = %s AND github_repo_name = %s" in query
        assert "ORDER BY id" in query
        assert params == ("acme", "board")

    def test_by_figma_file_key(self):
        mock_cursor = MagicMock()
        mock_cursor.fetchone.return_value = make_row(
            figma_file_url="https://figma.com/file/abc", figma_file_key="abc"
        )

        project = get_project_by_figma_file_key("abc", cursor=mock_cursor)

        assert project is not None
        assert project.figma_file_key == "abc"
        assert mock_cursor.execute.call_args[0][1] == ("abc",)

    def test_unlinked_returns_none(self):
        mock_cursor = MagicMock()
        mock_cursor.fetchone.return_value = None

        assert get_project_by_figma_file_key("nope", cursor=mock_cursor) is None
        assert get_project_by_github_repo("acme", "nope", cursor=mock_cursor) is None


class TestCreateProject:
    def test_returns_project_with_assigned_id(self, project_factory: ProjectFactory):
        mock_cursor = MagicMock()
        mock_cursor.fetchone.return_value = make_row(id=12)

        created = create_project(project_factory.make({"id": None}), cursor=mock_cursor)

        assert created.id == 12
        call_args = mock_cursor.execute.call_args[0]
        assert "INSERT INTO projects" in call_args[0]
        assert call_args[1][3] == 1

    def test_duplicate_name_is_a_validation_error(self, project_factory: ProjectFactory):
        mock_cursor = MagicMock()
        mock_cursor.execute.side_effect = UniqueViolation("duplicate key")

        with pytest.raises(ValidationError) as exc_info:
            create_project(project_factory.make({"id": None}), cursor=mock_cursor)

        assert exc_info.value.entity == "project"
        assert exc_info.value.field == "name"
        assert exc_info.value.constraint == "unique"


class TestUpdateProject:
    def test_carries_loaded_members_over(
        self, project_factory: ProjectFactory, member_factory: ProjectMemberFactory
    ):
        mock_cursor = MagicMock()
        mock_cursor.fetchone.return_value = make_row(status="ARCHIVED")
        project = project_factory.make({"status": "ARCHIVED"}, members=[member_factory.make()])

        updated = update_project(project, cursor=mock_cursor)

        assert updated.status == "ARCHIVED"
        assert updated.member_count == 1
        call_args = mock_cursor.execute.call_args[0]
        assert "created_by" not in call_args[0].split("RETURNING")[0]
        assert call_args[1][-1] == 10

    def test_missing_row_raises_not_found(self, project_factory: ProjectFactory):
        mock_cursor = MagicMock()
        mock_cursor.fetchone.return_value = None

        with pytest.raises(NotFound):
            update_project(project_factory.make(), cursor=mock_cursor)
