# boards/tests/unit/test_service_task.py
import uuid
from unittest.mock import patch

import pytest
from rest_framework.exceptions import ValidationError

from boards.models import Comment, Task, TaskAssignee
from boards.services.errors import AccessForbidden, ResourceNotFound
from boards.services.task_service import TaskService
from users.access_levels import AccessLevel

from ..factories import (ProjectFactory, TaskAssigneeFactory, TaskFactory,
                         TaskListFactory, UserFactory)


@pytest.fixture
def guest_member(project_member):
    project_member.access_level = AccessLevel.GUEST
    project_member.save()
    return project_member.workspace_member.user


@pytest.fixture
def member_user(project_member):
    return project_member.workspace_member.user


@pytest.mark.django_db
class TestEnsureProjectAccess:
    def setup_method(self):
        self.service = TaskService()

    def test_guest_reads(self, task, guest_member):
        assert self.service.get_task(task.id, guest_member.id, None) == task

    def test_guest_cannot_update(self, task, guest_member):
        with pytest.raises(AccessForbidden) as exc_info:
            self.service.update_task(task.id, {"name": "Nope"}, guest_member.id, None)
        assert "User does not have required access level: Member" in str(exc_info.value)

    def test_outsider_cannot_read(self, task, test_user2):
        with pytest.raises(AccessForbidden) as exc_info:
            self.service.get_task(task.id, test_user2.id, None)
        assert "required access level: Guest" in str(exc_info.value)

    def test_admin_bypass(self, task, admin_user):
        with patch.object(self.service.authorization, "authorize_project_access") as check:
            self.service.get_task(task.id, admin_user.id, AccessLevel.ADMIN)
        check.assert_not_called()

    def test_missing_task(self, test_user):
        with pytest.raises(ResourceNotFound) as exc_info:
            self.service.get_task(uuid.uuid4(), test_user.id, None)
        assert "Task not found" in str(exc_info.value)

    def test_denial_logged(self, task, test_user2):
        with patch("boards.services.task_service.logger") as mock_logger:
            with pytest.raises(AccessForbidden):
                self.service.delete_task(task.id, test_user2.id, None)

        extra = mock_logger.warning.call_args[1]["extra"]
        assert extra["action"] == "task_access_denied"
        assert extra["required_level"] == "Member"


@pytest.mark.django_db
class TestTaskMutations:
    def setup_method(self):
        self.service = TaskService()

    def test_update(self, task, member_user):
        updated = self.service.update_task(
            task.id, {"status": "InProgress", "priority": "High"}, member_user.id, None
        )
        assert updated.status == "InProgress"
        assert updated.priority == "High"

    def test_delete(self, task, member_user):
        self.service.delete_task(task.id, member_user.id, None)
        assert not Task.objects.filter(id=task.id).exists()

    def test_list_tasks_scoped(self, task, test_user):
        TaskFactory(list=TaskListFactory(project=ProjectFactory()))
        assert list(self.service.list_tasks(test_user.id, None)) == [task]

    def test_move_within_project(self, task, member_user, test_project):
        done = TaskListFactory(project=test_project, name="Done", position=1)
        moved = self.service.move_task(task.id, done.id, member_user.id, None)
        assert moved.list_id == done.id

    def test_move_across_projects(self, task, test_user):
        foreign = TaskListFactory()
        with pytest.raises(ValidationError) as exc_info:
            self.service.move_task(task.id, foreign.id, test_user.id, None)
        assert "different project" in str(exc_info.value)

    def test_move_to_missing_list(self, task, test_user):
        with pytest.raises(ResourceNotFound):
            self.service.move_task(task.id, uuid.uuid4(), test_user.id, None)


@pytest.mark.django_db
class TestTaskComments:
    def setup_method(self):
        self.service = TaskService()

    def test_guest_comments(self, task, guest_member):
        comment = self.service.add_comment(task.id, "Looks good", guest_member.id, None)
        assert comment.user_id == guest_member.id

    def test_outsider_cannot_comment(self, task, test_user2):
        with pytest.raises(AccessForbidden):
            self.service.add_comment(task.id, "Hi", test_user2.id, None)
        assert not Comment.objects.exists()

    def test_get_comments(self, task, test_user):
        self.service.add_comment(task.id, "First", test_user.id, None)
        self.service.add_comment(task.id, "Second", test_user.id, None)
        assert self.service.get_comments(task.id, test_user.id, None).count() == 2


@pytest.mark.django_db
class TestTaskAssignees:
    def setup_method(self):
        self.service = TaskService()

    def test_assign_project_member(self, task, test_user, member_user):
        assignment = self.service.assign_user(task.id, member_user.id, test_user.id, None)
        assert assignment.user_id == member_user.id

    def test_assign_twice(self, task, test_user, member_user):
        self.service.assign_user(task.id, member_user.id, test_user.id, None)
        with pytest.raises(ValidationError) as exc_info:
            self.service.assign_user(task.id, member_user.id, test_user.id, None)
        assert "already assigned" in str(exc_info.value)

    def test_assign_non_member(self, task, test_user, test_user2):
        with pytest.raises(ValidationError) as exc_info:
            self.service.assign_user(task.id, test_user2.id, test_user.id, None)
        assert "Assignee must be a member of the project" in str(exc_info.value)

    def test_admin_assigns_anyone(self, task, admin_user):
        outsider = UserFactory()
        self.service.assign_user(task.id, outsider.id, admin_user.id, AccessLevel.ADMIN)
        assert TaskAssignee.objects.filter(task=task, user=outsider).exists()

    def test_assign_unknown_user(self, task, test_user):
        with pytest.raises(ResourceNotFound):
            self.service.assign_user(task.id, uuid.uuid4(), test_user.id, None)

    def test_guest_cannot_assign(self, task, guest_member, test_user):
        with pytest.raises(AccessForbidden):
            self.service.assign_user(task.id, test_user.id, guest_member.id, None)

    def test_unassign(self, task, test_user, member_user):
        TaskAssigneeFactory(task=task, user=member_user)
        self.service.unassign_user(task.id, member_user.id, test_user.id, None)
        assert not TaskAssignee.objects.filter(task=task).exists()

    def test_guest_unassigns_self(self, task, guest_member):
        TaskAssigneeFactory(task=task, user=guest_member)
        self.service.unassign_user(task.id, guest_member.id, guest_member.id, None)
        assert not TaskAssignee.objects.filter(task=task).exists()

    def test_guest_cannot_unassign_others(self, task, guest_member, test_user):
        TaskAssigneeFactory(task=task, user=test_user)
        with pytest.raises(AccessForbidden):
            self.service.unassign_user(task.id, test_user.id, guest_member.id, None)

    def test_unassign_not_assigned(self, task, test_user, member_user):
        with pytest.raises(ResourceNotFound) as exc_info:
            self.service.unassign_user(task.id, member_user.id, test_user.id, None)
        assert "User is not assigned to this task" in str(exc_info.value)
