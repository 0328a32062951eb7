# boards/tests/unit/test_service_project.py
import uuid
from unittest.mock import patch

import pytest
from rest_framework.exceptions import ValidationError

from boards.models import Project, ProjectMember, Task, TaskList
from boards.services.errors import (AccessForbidden, InvalidAssignment,
                                    MembershipConflict, ResourceNotFound)
from boards.services.project_service import ProjectService
from users.access_levels import AccessLevel

from ..factories import (ProjectFactory, TaskListFactory,
                         WorkspaceMemberFactory)


@pytest.mark.django_db
class TestCreateProject:
    def setup_method(self):
        self.service = ProjectService()

    def test_creator_becomes_project_owner(self, test_workspace, test_user, owner_membership):
        project = self.service.create_project(
            {"workspace_id": test_workspace.id, "name": "Website Redesign"}, test_user.id, None
        )

        member = ProjectMember.objects.get(project=project)
        assert member.workspace_member == owner_membership
        assert member.access_level == AccessLevel.OWNER

    def test_optional_fields(self, test_workspace, test_user):
        project = self.service.create_project(
            {
                "workspace_id": test_workspace.id,
                "name": "Launch",
                "description": "Q4 launch",
                "status": "InProgress",
            },
            test_user.id,
            None,
        )
        assert project.description == "Q4 launch"
        assert project.status == "InProgress"

    def test_outsider_cannot_create(self, test_workspace, test_user2):
        with pytest.raises(AccessForbidden):
            self.service.create_project(
                {"workspace_id": test_workspace.id, "name": "Sneaky"}, test_user2.id, None
            )
        assert not Project.objects.exists()

    def test_missing_workspace(self, test_user):
        with pytest.raises(ResourceNotFound):
            self.service.create_project({"workspace_id": uuid.uuid4(), "name": "X"}, test_user.id, None)

    def test_admin_without_membership_gets_no_project_member(self, test_workspace, admin_user):
        project = self.service.create_project(
            {"workspace_id": test_workspace.id, "name": "Admin project"},
            admin_user.id,
            AccessLevel.ADMIN,
        )
        assert not ProjectMember.objects.filter(project=project).exists()


@pytest.mark.django_db
class TestProjectLifecycle:
    def setup_method(self):
        self.service = ProjectService()

    def test_get_by_workspace_member(self, test_project, workspace_member):
        project = self.service.get_project(test_project.id, workspace_member.user_id, None)
        assert project == test_project

    def test_get_by_outsider(self, test_project, test_user2):
        with pytest.raises(AccessForbidden):
            self.service.get_project(test_project.id, test_user2.id, None)

    def test_get_missing(self, test_user):
        with pytest.raises(ResourceNotFound) as exc_info:
            self.service.get_project(uuid.uuid4(), test_user.id, None)
        assert "Project not found" in str(exc_info.value)

    def test_list_by_project_membership(self, test_project, project_member, test_workspace):
        ProjectFactory(workspace=test_workspace)
        projects = self.service.list_projects(project_member.workspace_member.user_id, None)
        assert list(projects) == [test_project]

    def test_update_by_owner(self, test_project, test_user):
        project = self.service.update_project(
            test_project.id, {"name": "Renamed", "status": "Completed"}, test_user.id, None
        )
        assert project.name == "Renamed"
        assert project.status == "Completed"

    def test_update_by_member_denied(self, test_project, project_member):
        with pytest.raises(AccessForbidden):
            self.service.update_project(
                test_project.id, {"name": "Nope"}, project_member.workspace_member.user_id, None
            )

    def test_delete_by_admin(self, test_project, admin_user):
        self.service.delete_project(test_project.id, admin_user.id, AccessLevel.ADMIN)
        assert not Project.objects.filter(id=test_project.id).exists()


@pytest.mark.django_db
class TestAddProjectMember:
    def setup_method(self):
        self.service = ProjectService()

    def test_add_member(self, test_project, test_user, workspace_member):
        member = self.service.add_project_member(
            test_project.id, workspace_member.id, AccessLevel.MEMBER, test_user.id, None
        )
        assert member.workspace_member == workspace_member
        assert member.access_level == AccessLevel.MEMBER

    def test_duplicate(self, test_project, test_user, project_member):
        with pytest.raises(MembershipConflict) as exc_info:
            self.service.add_project_member(
                test_project.id,
                project_member.workspace_member_id,
                AccessLevel.MEMBER,
                test_user.id,
                None,
            )
        assert "Member already exists in project" in str(exc_info.value)

    def test_target_workspace_ceiling(self, test_project, test_user, workspace_member):
        with pytest.raises(InvalidAssignment) as exc_info:
            self.service.add_project_member(
                test_project.id, workspace_member.id, AccessLevel.OWNER, test_user.id, None
            )
        assert "higher than user's workspace access level" in str(exc_info.value)
        assert not ProjectMember.objects.filter(workspace_member=workspace_member).exists()

    def test_target_workspace_ceiling_binds_admin(self, test_project, admin_user, workspace_member):
        with pytest.raises(InvalidAssignment):
            self.service.add_project_member(
                test_project.id, workspace_member.id, AccessLevel.OWNER, admin_user.id, AccessLevel.ADMIN
            )

    def test_actor_ceiling(self, test_project, test_workspace, test_user, owner_project_member):
        # project Owner whose workspace level is only Member
        owner_membership = owner_project_member.workspace_member
        owner_membership.access_level = AccessLevel.MEMBER
        owner_membership.save()
        target = WorkspaceMemberFactory(workspace=test_workspace, access_level=AccessLevel.OWNER)

        with pytest.raises(InvalidAssignment) as exc_info:
            self.service.add_project_member(
                test_project.id, target.id, AccessLevel.OWNER, test_user.id, None
            )
        assert "higher than your own" in str(exc_info.value)

    def test_actor_ceiling_logged_once(self, test_project, test_workspace, test_user, owner_project_member):
        owner_membership = owner_project_member.workspace_member
        owner_membership.access_level = AccessLevel.MEMBER
        owner_membership.save()
        target = WorkspaceMemberFactory(workspace=test_workspace, access_level=AccessLevel.OWNER)

        with patch("boards.services.project_service.logger") as mock_logger:
            with pytest.raises(InvalidAssignment):
                self.service.add_project_member(
                    test_project.id, target.id, AccessLevel.OWNER, test_user.id, None
                )

        warnings = [call[1]["extra"] for call in mock_logger.warning.call_args_list]
        assert len(warnings) == 1
        assert warnings[0]["action"] == "project_member_add_ceiling_denied"
        assert warnings[0]["reason"] == "Cannot assign access level higher than your own"

    def test_missing_target_reported_before_ceilings(self, test_project, test_user):
        with pytest.raises(ResourceNotFound) as exc_info:
            self.service.add_project_member(
                test_project.id, uuid.uuid4(), AccessLevel.ADMIN, test_user.id, None
            )
        assert "Workspace member not found" in str(exc_info.value)

    def test_actor_outside_workspace(self, test_project, test_user2):
        target = WorkspaceMemberFactory(workspace=test_project.workspace)
        with pytest.raises(AccessForbidden):
            self.service.add_project_member(
                test_project.id, target.id, AccessLevel.GUEST, test_user2.id, None
            )

    def test_actor_cannot_manage(self, test_project, project_member, test_workspace):
        target = WorkspaceMemberFactory(workspace=test_workspace)
        with pytest.raises(AccessForbidden):
            self.service.add_project_member(
                test_project.id,
                target.id,
                AccessLevel.GUEST,
                project_member.workspace_member.user_id,
                None,
            )

    def test_target_from_other_workspace(self, test_project, test_user):
        foreign = WorkspaceMemberFactory(access_level=AccessLevel.MEMBER)
        with pytest.raises(ValidationError):
            self.service.add_project_member(
                test_project.id, foreign.id, AccessLevel.MEMBER, test_user.id, None
            )

    def test_missing_target(self, test_project, test_user):
        with pytest.raises(ResourceNotFound):
            self.service.add_project_member(
                test_project.id, uuid.uuid4(), AccessLevel.MEMBER, test_user.id, None
            )

    def test_missing_project(self, test_user, workspace_member):
        with pytest.raises(ResourceNotFound):
            self.service.add_project_member(
                uuid.uuid4(), workspace_member.id, AccessLevel.MEMBER, test_user.id, None
            )


@pytest.mark.django_db
class TestUpdateProjectMemberAccess:
    def setup_method(self):
        self.service = ProjectService()

    def test_owner_demotes_member(self, test_user, project_member):
        member = self.service.update_member_access(
            project_member.id, AccessLevel.GUEST, test_user.id, None
        )
        assert member.access_level == AccessLevel.GUEST

    def test_member_cannot_self_elevate(self, project_member):
        project_member.workspace_member.access_level = AccessLevel.OWNER
        project_member.workspace_member.save()

        with pytest.raises(AccessForbidden) as exc_info:
            self.service.update_member_access(
                project_member.id,
                AccessLevel.OWNER,
                project_member.workspace_member.user_id,
                None,
            )
        assert "Insufficient permissions" in str(exc_info.value)
        project_member.refresh_from_db()
        assert project_member.access_level == AccessLevel.MEMBER

    def test_workspace_ceiling(self, test_user, project_member):
        with pytest.raises(InvalidAssignment) as exc_info:
            self.service.update_member_access(
                project_member.id, AccessLevel.OWNER, test_user.id, None
            )
        assert "Cannot exceed workspace access level" in str(exc_info.value)

    def test_workspace_ceiling_binds_admin(self, admin_user, project_member):
        with pytest.raises(InvalidAssignment):
            self.service.update_member_access(
                project_member.id, AccessLevel.OWNER, admin_user.id, AccessLevel.ADMIN
            )

    def test_actor_ceiling(self, test_user, project_member, owner_project_member):
        project_member.workspace_member.access_level = AccessLevel.ADMIN
        project_member.workspace_member.save()

        with pytest.raises(InvalidAssignment) as exc_info:
            self.service.update_member_access(
                project_member.id, AccessLevel.ADMIN, test_user.id, None
            )
        assert "Cannot assign higher access level than your own" in str(exc_info.value)

    def test_missing_member(self, test_user):
        with pytest.raises(ResourceNotFound) as exc_info:
            self.service.update_member_access(uuid.uuid4(), AccessLevel.MEMBER, test_user.id, None)
        assert "Project member not found" in str(exc_info.value)

    def test_rejection_logged(self, test_user, project_member):
        with patch("boards.services.project_service.logger") as mock_logger:
            with pytest.raises(InvalidAssignment):
                self.service.update_member_access(
                    project_member.id, AccessLevel.OWNER, test_user.id, None
                )

        extra = mock_logger.warning.call_args[1]["extra"]
        assert extra["action"] == "project_member_access_update_denied"
        assert extra["reason"] == "Cannot exceed workspace access level"


@pytest.mark.django_db
class TestProjectLists:
    def setup_method(self):
        self.service = ProjectService()

    def test_first_list_at_zero(self, test_project, test_user):
        task_list = self.service.create_list(test_project.id, {"name": "Backlog"}, test_user.id, None)
        assert task_list.position == 0

    def test_next_list_after_max(self, test_project, test_user):
        TaskListFactory(project=test_project, position=4)
        task_list = self.service.create_list(test_project.id, {"name": "Done"}, test_user.id, None)
        assert task_list.position == 5

    def test_initial_tasks(self, test_project, test_user):
        task_list = self.service.create_list(
            test_project.id,
            {"name": "Sprint", "tasks": [{"name": "Setup CI"}, {"name": "Write docs", "priority": "High"}]},
            test_user.id,
            None,
        )
        tasks = Task.objects.filter(list=task_list).order_by("name")
        assert [t.name for t in tasks] == ["Setup CI", "Write docs"]
        assert all(t.project_id == test_project.id for t in tasks)

    def test_guest_cannot_create_list(self, test_project, project_member):
        project_member.access_level = AccessLevel.GUEST
        project_member.save()

        with pytest.raises(AccessForbidden) as exc_info:
            self.service.create_list(
                test_project.id, {"name": "Nope"}, project_member.workspace_member.user_id, None
            )
        assert "User does not have required access level: Member" in str(exc_info.value)

    def test_get_lists_ordered(self, test_project, project_member):
        TaskListFactory(project=test_project, name="Second", position=1)
        TaskListFactory(project=test_project, name="First", position=0)

        lists = self.service.get_lists(test_project.id, project_member.workspace_member.user_id, None)
        assert [tl.name for tl in lists] == ["First", "Second"]

    def test_get_lists_outsider(self, test_project, workspace_member):
        with pytest.raises(AccessForbidden):
            self.service.get_lists(test_project.id, workspace_member.user_id, None)

    def test_admin_creates_list(self, test_project, admin_user):
        self.service.create_list(test_project.id, {"name": "Ops"}, admin_user.id, AccessLevel.ADMIN)
        assert TaskList.objects.filter(project=test_project, name="Ops").exists()
