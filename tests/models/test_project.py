"""Tests for the Project model."""

import pytest

from echoboard.errors import InvalidStateTransition, ValidationError
from echoboard.models.project import Project
from tests._factories import ProjectFactory, ProjectMemberFactory, UserFactory


class TestCreate:
    def test_defaults(self, user_factory: UserFactory):
        alice = user_factory.make()
        project = Project.create("Board", "desc", alice)

        assert project.name == "Board"
        assert project.description == "desc"
        assert project.created_by_id == alice.id
        assert project.status == "ACTIVE"
        assert project.is_public is False
        assert project.max_members == 10
        assert project.members == []
        assert project.member_count == 0

    def test_description_is_optional(self, user_factory: UserFactory):
        project = Project.create("Board", None, user_factory.make())
        assert project.description is None

    @pytest.mark.parametrize("name", ["B", "", "x" * 101])
    def test_name_length_out_of_range_is_rejected(self, name, user_factory: UserFactory):
        with pytest.raises(ValidationError) as exc_info:
            Project.create(name, "desc", user_factory.make())
        assert exc_info.value.entity == "project"
        assert exc_info.value.field == "name"

    def test_description_too_long_is_rejected(self, user_factory: UserFactory):
        with pytest.raises(ValidationError) as exc_info:
            Project.create("Board", "d" * 501, user_factory.make())
        assert exc_info.value.field == "description"

    def test_description_at_limit_is_accepted(self, user_factory: UserFactory):
        project = Project.create("Board", "d" * 500, user_factory.make())
        assert len(project.description or "") == 500

    def test_missing_creator_is_rejected(self):
        with pytest.raises(ValidationError) as exc_info:
            Project.create("Board", "desc", None)  # type: ignore[arg-type]
        assert exc_info.value.field == "created_by_id"

    def test_unsaved_creator_is_rejected(self, user_factory: UserFactory):
        with pytest.raises(ValidationError):
            Project.create("Board", "desc", user_factory.make({"id": None}))

    def test_max_members_must_be_positive(self, user_factory: UserFactory):
        with pytest.raises(ValidationError) as exc_info:
            Project.create("Board", "desc", user_factory.make(), max_members=0)
        assert exc_info.value.field == "max_members"


class TestIntegrations:
    def test_github_requires_all_three_fields(self, project_factory: ProjectFactory):
        project = project_factory.make(
            {"github_repo_url": "https://github.com/o/r", "github_repo_owner": "o"}
        )
        assert project.has_github_integration is False

        project.link_github("https://github.com/o/r", "o", "r")
        assert project.has_github_integration is True

    def test_figma_requires_url_and_key(self, project_factory: ProjectFactory):
        project = project_factory.make({"figma_file_key": "abc"})
        assert project.has_figma_integration is False

        project.link_figma("https://figma.com/file/abc", "abc")
        assert project.has_figma_integration is True

    def test_archived_project_can_be_linked(self, project_factory: ProjectFactory):
        project = project_factory.make({"status": "ARCHIVED"})
        project.link_figma("https://figma.com/file/abc", "abc")
        assert project.figma_file_key == "abc"

    @pytest.mark.parametrize(
        "method,args",
        [
            ("link_github", ("https://github.com/o/r", "o", "r")),
            ("link_figma", ("https://figma.com/file/abc", "abc")),
        ],
    )
    def test_deleted_project_cannot_be_linked(
        self, method, args, project_factory: ProjectFactory
    ):
        project = project_factory.make({"status": "DELETED"})

        with pytest.raises(InvalidStateTransition) as exc_info:
            getattr(project, method)(*args)

        assert exc_info.value.attempted == method
        assert project.has_github_integration is False
        assert project.has_figma_integration is False


class TestMembership:
    def test_member_count_ignores_inactive_rows(
        self, project_factory: ProjectFactory, member_factory: ProjectMemberFactory
    ):
        project = project_factory.make(
            members=[
                member_factory.make({"id": 1, "user_id": 1}),
                member_factory.make({"id": 2, "user_id": 2, "status": "LEFT"}),
                member_factory.make({"id": 3, "user_id": 3, "status": "SUSPENDED"}),
                member_factory.make({"id": 4, "user_id": 4}),
            ]
        )
        assert project.member_count == 2

    def test_can_add_more_members_until_capacity(
        self, project_factory: ProjectFactory, member_factory: ProjectMemberFactory
    ):
        project = project_factory.make(
            {"max_members": 2},
            members=[member_factory.make({"id": 1, "user_id": 1})],
        )
        assert project.can_add_more_members() is True

        project.members.append(member_factory.make({"id": 2, "user_id": 2}))
        assert project.can_add_more_members() is False

        project.members[0].leave()
        assert project.can_add_more_members() is True

    def test_find_member_returns_row_regardless_of_status(
        self, project_factory: ProjectFactory, member_factory: ProjectMemberFactory
    ):
        left = member_factory.make({"user_id": 7, "status": "LEFT"})
        project = project_factory.make(members=[left])

        assert project.find_member(7) == left
        assert project.find_member(8) is None


class TestStatusTransitions:
    def test_archive_and_restore(self, project_factory: ProjectFactory):
        project = project_factory.make()

        project.archive()
        assert project.status == "ARCHIVED"

        project.restore()
        assert project.status == "ACTIVE"

    def test_archive_preserves_members(
        self, project_factory: ProjectFactory, member_factory: ProjectMemberFactory
    ):
        project = project_factory.make(members=[member_factory.make()])
        project.archive()
        assert project.members[0].status == "ACTIVE"

    @pytest.mark.parametrize("status", ["ACTIVE", "ARCHIVED"])
    def test_delete_from_active_or_archived(
        self, status, project_factory: ProjectFactory
    ):
        project = project_factory.make({"status": status})
        project.mark_deleted()
        assert project.status == "DELETED"

    def test_deleted_is_terminal(self, project_factory: ProjectFactory):
        project = project_factory.make({"status": "DELETED"})

        for transition in (project.archive, project.restore, project.mark_deleted):
            with pytest.raises(InvalidStateTransition):
                transition()
        assert project.status == "DELETED"

    def test_restore_requires_archived(self, project_factory: ProjectFactory):
        project = project_factory.make()
        with pytest.raises(InvalidStateTransition) as exc_info:
            project.restore()
        assert exc_info.value.current == "ACTIVE"
        assert exc_info.value.attempted == "restore"
