# boards/tests/unit/test_service_task_list.py
import uuid

import pytest
from rest_framework.exceptions import ValidationError

from boards.models import TaskList
from boards.services.errors import AccessForbidden, ResourceNotFound
from boards.services.task_list_service import TaskListService
from users.access_levels import AccessLevel

from ..factories import ProjectFactory, TaskFactory, TaskListFactory


@pytest.fixture
def board(test_project):
    """Four lists at positions 0..3"""
    return [
        TaskListFactory(project=test_project, name=name, position=position)
        for position, name in enumerate(["Backlog", "Todo", "Doing", "Done"])
    ]


def names_by_position(project):
    return list(TaskList.objects.filter(project=project).order_by("position").values_list("name", flat=True))


@pytest.mark.django_db
class TestTaskListReads:
    def setup_method(self):
        self.service = TaskListService()

    def test_get_list_member(self, task_list, project_member):
        result = self.service.get_list(task_list.id, project_member.workspace_member.user_id, None)
        assert result == task_list

    def test_get_list_outsider(self, task_list, test_user2):
        with pytest.raises(AccessForbidden):
            self.service.get_list(task_list.id, test_user2.id, None)

    def test_get_list_missing(self, test_user):
        with pytest.raises(ResourceNotFound) as exc_info:
            self.service.get_list(uuid.uuid4(), test_user.id, None)
        assert "List not found" in str(exc_info.value)

    def test_list_lists_scoped(self, task_list, test_user):
        TaskListFactory(project=ProjectFactory())
        assert list(self.service.list_lists(test_user.id, None)) == [task_list]

    def test_list_lists_admin(self, task_list, admin_user):
        TaskListFactory(project=ProjectFactory())
        assert self.service.list_lists(admin_user.id, AccessLevel.ADMIN).count() == 2

    def test_get_tasks(self, task, test_user):
        assert list(self.service.get_tasks(task.list_id, test_user.id, None)) == [task]


@pytest.mark.django_db
class TestTaskListWrites:
    def setup_method(self):
        self.service = TaskListService()

    def test_rename(self, task_list, project_member):
        result = self.service.update_list(
            task_list.id, {"name": "Icebox"}, project_member.workspace_member.user_id, None
        )
        assert result.name == "Icebox"

    def test_guest_cannot_rename(self, task_list, project_member):
        project_member.access_level = AccessLevel.GUEST
        project_member.save()
        with pytest.raises(AccessForbidden):
            self.service.update_list(
                task_list.id, {"name": "Icebox"}, project_member.workspace_member.user_id, None
            )

    def test_create_task_inherits_project(self, task_list, test_user):
        task = self.service.create_task(
            task_list.id, {"name": "Ship it", "priority": "Urgent"}, test_user.id, None
        )
        assert task.project_id == task_list.project_id
        assert task.list_id == task_list.id
        assert task.priority == "Urgent"


@pytest.mark.django_db
class TestTaskListPosition:
    def setup_method(self):
        self.service = TaskListService()

    def test_move_forward(self, board, test_user, test_project):
        self.service.update_position(board[0].id, 2, test_user.id, None)
        assert names_by_position(test_project) == ["Todo", "Doing", "Backlog", "Done"]

    def test_move_backward(self, board, test_user, test_project):
        self.service.update_position(board[3].id, 1, test_user.id, None)
        assert names_by_position(test_project) == ["Backlog", "Done", "Todo", "Doing"]

    def test_positions_stay_contiguous(self, board, test_user, test_project):
        self.service.update_position(board[1].id, 3, test_user.id, None)
        positions = list(
            TaskList.objects.filter(project=test_project).order_by("position").values_list("position", flat=True)
        )
        assert positions == [0, 1, 2, 3]

    def test_same_position_is_noop(self, board, test_user, test_project):
        self.service.update_position(board[2].id, 2, test_user.id, None)
        assert names_by_position(test_project) == ["Backlog", "Todo", "Doing", "Done"]

    @pytest.mark.parametrize("position", [-1, 4, 100])
    def test_out_of_range(self, board, test_user, position):
        with pytest.raises(ValidationError) as exc_info:
            self.service.update_position(board[0].id, position, test_user.id, None)
        assert "Invalid position" in str(exc_info.value)

    def test_other_projects_untouched(self, board, test_user):
        other = TaskListFactory(position=1)
        self.service.update_position(board[0].id, 3, test_user.id, None)
        other.refresh_from_db()
        assert other.position == 1

    def test_outsider_cannot_reorder(self, board, test_user2):
        with pytest.raises(AccessForbidden):
            self.service.update_position(board[0].id, 1, test_user2.id, None)

    def test_tasks_follow_their_list(self, board, test_user):
        task = TaskFactory(list=board[0])
        self.service.update_position(board[0].id, 3, test_user.id, None)
        task.refresh_from_db()
        assert task.list_id == board[0].id
