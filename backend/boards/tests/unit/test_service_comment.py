# boards/tests/unit/test_service_comment.py
import uuid
from datetime import timedelta
from unittest.mock import patch

import pytest
from django.utils import timezone

from boards.models import Comment
from boards.services.comment_service import CommentService
from boards.services.errors import AccessForbidden, ResourceNotFound
from users.access_levels import AccessLevel

from ..factories import CommentFactory


@pytest.mark.django_db
class TestCommentReads:
    def setup_method(self):
        self.service = CommentService()

    def test_list_newest_first(self, task, test_user):
        older = CommentFactory(task=task, user=test_user)
        newer = CommentFactory(task=task, user=test_user)
        Comment.objects.filter(id=older.id).update(created_date=timezone.now() - timedelta(hours=1))

        assert list(self.service.list_comments(test_user.id, None)) == [newer, older]

    def test_list_scoped_to_membership(self, task, test_user, test_user2):
        CommentFactory(task=task, user=test_user)
        CommentFactory()

        assert self.service.list_comments(test_user.id, None).count() == 1
        assert self.service.list_comments(test_user2.id, None).count() == 0

    def test_list_filtered_by_task(self, task, test_user):
        CommentFactory(task=task, user=test_user)
        assert self.service.list_comments(test_user.id, None, task_id=task.id).count() == 1
        assert self.service.list_comments(test_user.id, None, task_id=uuid.uuid4()).count() == 0
        assert self.service.list_comments(test_user.id, None, task_id="garbage").count() == 0

    def test_list_admin_sees_all(self, admin_user):
        CommentFactory()
        CommentFactory()
        assert self.service.list_comments(admin_user.id, AccessLevel.ADMIN).count() == 2

    def test_get_by_project_member(self, task, test_user):
        comment = CommentFactory(task=task, user=test_user)
        assert self.service.get_comment(comment.id, test_user.id, None) == comment

    def test_get_by_outsider(self, task, test_user, test_user2):
        comment = CommentFactory(task=task, user=test_user)
        with pytest.raises(AccessForbidden):
            self.service.get_comment(comment.id, test_user2.id, None)

    def test_get_by_outsider_logged(self, task, test_user, test_user2):
        comment = CommentFactory(task=task, user=test_user)
        with patch("boards.services.comment_service.logger") as mock_logger:
            with pytest.raises(AccessForbidden):
                self.service.get_comment(comment.id, test_user2.id, None)

        extra = mock_logger.warning.call_args[1]["extra"]
        assert extra["action"] == "comment_access_denied"
        assert extra["comment_id"] == str(comment.id)

    def test_get_missing(self, test_user):
        with pytest.raises(ResourceNotFound):
            self.service.get_comment(uuid.uuid4(), test_user.id, None)


@pytest.mark.django_db
class TestCommentWrites:
    def setup_method(self):
        self.service = CommentService()

    def test_create(self, task, test_user):
        comment = self.service.create_comment(task.id, "Ready for review", test_user.id, None)
        assert comment.task_id == task.id
        assert comment.user_id == test_user.id

    def test_create_outsider(self, task, test_user2):
        with pytest.raises(AccessForbidden):
            self.service.create_comment(task.id, "Hello", test_user2.id, None)

    def test_create_missing_task(self, test_user):
        with pytest.raises(ResourceNotFound) as exc_info:
            self.service.create_comment(uuid.uuid4(), "Hello", test_user.id, None)
        assert "Task not found" in str(exc_info.value)

    def test_author_updates(self, task, test_user):
        comment = CommentFactory(task=task, user=test_user)
        updated = self.service.update_comment(comment.id, "Edited", test_user.id, None)
        assert updated.content == "Edited"

    def test_project_owner_cannot_edit_others(self, task, test_user, project_member):
        comment = CommentFactory(task=task, user=project_member.workspace_member.user)
        with pytest.raises(AccessForbidden) as exc_info:
            self.service.update_comment(comment.id, "Hijacked", test_user.id, None)
        assert "Only the comment owner or an admin can update this comment" in str(exc_info.value)

    def test_admin_deletes(self, task, test_user, admin_user):
        comment = CommentFactory(task=task, user=test_user)
        self.service.delete_comment(comment.id, admin_user.id, AccessLevel.ADMIN)
        assert not Comment.objects.filter(id=comment.id).exists()

    def test_non_author_cannot_delete(self, task, test_user, test_user2):
        comment = CommentFactory(task=task, user=test_user)
        with pytest.raises(AccessForbidden) as exc_info:
            self.service.delete_comment(comment.id, test_user2.id, None)
        assert "can delete this comment" in str(exc_info.value)

    def test_denied_update_logged(self, task, test_user, test_user2):
        comment = CommentFactory(task=task, user=test_user)
        with patch("boards.services.comment_service.logger") as mock_logger:
            with pytest.raises(AccessForbidden):
                self.service.update_comment(comment.id, "Hijacked", test_user2.id, None)

        extra = mock_logger.warning.call_args[1]["extra"]
        assert extra["action"] == "comment_update_denied"
        assert extra["component"] == "CommentService"
        assert extra["severity"] == "high"
