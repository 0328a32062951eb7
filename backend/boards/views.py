"""
API views for workspaces, projects, lists, tasks and comments.

THIN ViewSets: serializers validate payloads, services decide access.
Every service call receives the acting user id and system access level
from the request principal.
"""

import logging

from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from core.mixins.principal_context import PrincipalContextMixin
from core.mixins.service_exception_handler import ServiceExceptionHandlerMixin
from users.permissions import HasIdentityClaim

from .serializers import (AddProjectMemberSerializer,
                          AddWorkspaceMemberSerializer, AssignUserSerializer,
                          CommentCreateSerializer, CommentSerializer,
                          ListPositionSerializer, MemberAccessSerializer,
                          MoveTaskSerializer, ProjectCreateSerializer,
                          ProjectMemberSerializer, ProjectSerializer,
                          TaskAssigneeSerializer, TaskListSerializer,
                          TaskSerializer, WorkspaceMemberSerializer,
                          WorkspaceSerializer)
from .services.comment_service import CommentService
from .services.project_service import ProjectService
from .services.task_list_service import TaskListService
from .services.task_service import TaskService
from .services.workspace_service import WorkspaceService

logger = logging.getLogger(__name__)


class BoardsViewSet(PrincipalContextMixin, ServiceExceptionHandlerMixin, viewsets.ViewSet):
    """Shared plumbing: authentication gate and principal-aware service calls."""

    permission_classes = [IsAuthenticated, HasIdentityClaim]

    def call_service(self, service_call, *args, **kwargs):
        """Run ``service_call(*args, user_id, system_access_level, **kwargs)``."""
        principal = self.get_principal()
        return self.handle_service_call(
            service_call,
            *args,
            principal.user_id,
            principal.system_access_level,
            **kwargs,
        )

    @staticmethod
    def validated(serializer_class, data, **kwargs):
        serializer = serializer_class(data=data, **kwargs)
        serializer.is_valid(raise_exception=True)
        return serializer.validated_data


# -------------------------------------------------------------------
# WORKSPACES
# -------------------------------------------------------------------


class WorkspaceViewSet(BoardsViewSet):
    """THIN workspace ViewSet - delegates to WorkspaceService."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.workspace_service = WorkspaceService()

    def list(self, request):
        workspaces = self.call_service(self.workspace_service.list_workspaces)
        return Response(WorkspaceSerializer(workspaces, many=True).data)

    def create(self, request):
        data = self.validated(WorkspaceSerializer, request.data)
        workspace = self.call_service(self.workspace_service.create_workspace, data["name"])
        return Response(WorkspaceSerializer(workspace).data, status=status.HTTP_201_CREATED)

    def retrieve(self, request, pk=None):
        workspace = self.call_service(self.workspace_service.get_workspace, pk)
        return Response(WorkspaceSerializer(workspace).data)

    def update(self, request, pk=None):
        return self._update(request, pk, partial=False)

    def partial_update(self, request, pk=None):
        return self._update(request, pk, partial=True)

    def destroy(self, request, pk=None):
        self.call_service(self.workspace_service.delete_workspace, pk)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=True, methods=["get", "post"])
    def members(self, request, pk=None):
        """GET lists members, POST adds one."""
        if request.method == "GET":
            members = self.call_service(self.workspace_service.get_members, pk)
            return Response(WorkspaceMemberSerializer(members, many=True).data)

        data = self.validated(AddWorkspaceMemberSerializer, request.data)
        member = self.call_service(
            self.workspace_service.add_member, pk, data["user_id"], data["access_level"]
        )
        return Response(WorkspaceMemberSerializer(member).data, status=status.HTTP_201_CREATED)

    @action(detail=True, methods=["delete"], url_path=r"members/(?P<member_id>[^/.]+)")
    def remove_member(self, request, pk=None, member_id=None):
        self.call_service(self.workspace_service.remove_member, pk, member_id)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=False, methods=["put"], url_path="members/access")
    def member_access(self, request):
        data = self.validated(MemberAccessSerializer, request.data)
        member = self.call_service(
            self.workspace_service.update_member_access, data["member_id"], data["access_level"]
        )
        return Response(WorkspaceMemberSerializer(member).data)

    @action(detail=True, methods=["get"])
    def projects(self, request, pk=None):
        projects = self.call_service(self.workspace_service.get_workspace_projects, pk)
        return Response(ProjectSerializer(projects, many=True).data)

    def _update(self, request, pk, partial):
        data = self.validated(WorkspaceSerializer, request.data, partial=partial)
        workspace = self.call_service(self.workspace_service.update_workspace, pk, data)
        return Response(WorkspaceSerializer(workspace).data)


# -------------------------------------------------------------------
# PROJECTS
# -------------------------------------------------------------------


class ProjectViewSet(BoardsViewSet):
    """THIN project ViewSet - delegates to ProjectService."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.project_service = ProjectService()

    def list(self, request):
        projects = self.call_service(self.project_service.list_projects)
        return Response(ProjectSerializer(projects, many=True).data)

    def create(self, request):
        data = self.validated(ProjectCreateSerializer, request.data)
        project = self.call_service(self.project_service.create_project, data)
        return Response(ProjectSerializer(project).data, status=status.HTTP_201_CREATED)

    def retrieve(self, request, pk=None):
        project = self.call_service(self.project_service.get_project, pk)
        return Response(ProjectSerializer(project).data)

    def update(self, request, pk=None):
        return self._update(request, pk, partial=False)

    def partial_update(self, request, pk=None):
        return self._update(request, pk, partial=True)

    def destroy(self, request, pk=None):
        self.call_service(self.project_service.delete_project, pk)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=False, methods=["post"], url_path="members")
    def add_member(self, request):
        data = self.validated(AddProjectMemberSerializer, request.data)
        member = self.call_service(
            self.project_service.add_project_member,
            data["project_id"],
            data["workspace_member_id"],
            data["access_level"],
        )
        return Response(ProjectMemberSerializer(member).data, status=status.HTTP_201_CREATED)

    @action(detail=False, methods=["put"], url_path="members/access")
    def member_access(self, request):
        data = self.validated(MemberAccessSerializer, request.data)
        member = self.call_service(
            self.project_service.update_member_access, data["member_id"], data["access_level"]
        )
        return Response(ProjectMemberSerializer(member).data)

    @action(detail=True, methods=["get"])
    def members(self, request, pk=None):
        members = self.call_service(self.project_service.get_members, pk)
        return Response(ProjectMemberSerializer(members, many=True).data)

    @action(detail=True, methods=["get", "post"])
    def lists(self, request, pk=None):
        """GET lists by position, POST appends a list."""
        if request.method == "GET":
            lists = self.call_service(self.project_service.get_lists, pk)
            return Response(TaskListSerializer(lists, many=True).data)

        data = self.validated(TaskListSerializer, request.data)
        task_list = self.call_service(self.project_service.create_list, pk, data)
        return Response(TaskListSerializer(task_list).data, status=status.HTTP_201_CREATED)

    def _update(self, request, pk, partial):
        data = self.validated(ProjectSerializer, request.data, partial=partial)
        project = self.call_service(self.project_service.update_project, pk, data)
        return Response(ProjectSerializer(project).data)


# -------------------------------------------------------------------
# LISTS
# -------------------------------------------------------------------


class TaskListViewSet(BoardsViewSet):
    """THIN list ViewSet - delegates to TaskListService."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.list_service = TaskListService()

    def list(self, request):
        lists = self.call_service(self.list_service.list_lists)
        return Response(TaskListSerializer(lists, many=True).data)

    def retrieve(self, request, pk=None):
        task_list = self.call_service(self.list_service.get_list, pk)
        return Response(TaskListSerializer(task_list).data)

    def update(self, request, pk=None):
        return self._update(request, pk, partial=False)

    def partial_update(self, request, pk=None):
        return self._update(request, pk, partial=True)

    @action(detail=True, methods=["put"])
    def position(self, request, pk=None):
        data = self.validated(ListPositionSerializer, request.data)
        task_list = self.call_service(self.list_service.update_position, pk, data["position"])
        return Response(TaskListSerializer(task_list).data)

    @action(detail=True, methods=["get", "post"])
    def tasks(self, request, pk=None):
        if request.method == "GET":
            tasks = self.call_service(self.list_service.get_tasks, pk)
            return Response(TaskSerializer(tasks, many=True).data)

        data = self.validated(TaskSerializer, request.data)
        task = self.call_service(self.list_service.create_task, pk, data)
        return Response(TaskSerializer(task).data, status=status.HTTP_201_CREATED)

    def _update(self, request, pk, partial):
        data = self.validated(TaskListSerializer, request.data, partial=partial)
        task_list = self.call_service(self.list_service.update_list, pk, data)
        return Response(TaskListSerializer(task_list).data)


# -------------------------------------------------------------------
# TASKS
# -------------------------------------------------------------------


class TaskViewSet(BoardsViewSet):
    """THIN task ViewSet - delegates to TaskService."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.task_service = TaskService()

    def list(self, request):
        tasks = self.call_service(self.task_service.list_tasks)
        return Response(TaskSerializer(tasks, many=True).data)

    def retrieve(self, request, pk=None):
        task = self.call_service(self.task_service.get_task, pk)
        return Response(TaskSerializer(task).data)

    def update(self, request, pk=None):
        return self._update(request, pk, partial=False)

    def partial_update(self, request, pk=None):
        return self._update(request, pk, partial=True)

    def destroy(self, request, pk=None):
        self.call_service(self.task_service.delete_task, pk)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=True, methods=["put"])
    def move(self, request, pk=None):
        data = self.validated(MoveTaskSerializer, request.data)
        task = self.call_service(self.task_service.move_task, pk, data["list_id"])
        return Response(TaskSerializer(task).data)

    @action(detail=True, methods=["get", "post"])
    def comments(self, request, pk=None):
        if request.method == "GET":
            comments = self.call_service(self.task_service.get_comments, pk)
            return Response(CommentSerializer(comments, many=True).data)

        data = self.validated(CommentSerializer, request.data)
        comment = self.call_service(self.task_service.add_comment, pk, data["content"])
        return Response(CommentSerializer(comment).data, status=status.HTTP_201_CREATED)

    @action(detail=True, methods=["post"])
    def assign(self, request, pk=None):
        data = self.validated(AssignUserSerializer, request.data)
        assignment = self.call_service(self.task_service.assign_user, pk, data["user_id"])
        return Response(TaskAssigneeSerializer(assignment).data, status=status.HTTP_201_CREATED)

    @action(detail=True, methods=["delete"], url_path=r"assign/(?P<user_id>[^/.]+)")
    def unassign(self, request, pk=None, user_id=None):
        self.call_service(self.task_service.unassign_user, pk, user_id)
        return Response(status=status.HTTP_204_NO_CONTENT)

    def _update(self, request, pk, partial):
        data = self.validated(TaskSerializer, request.data, partial=partial)
        task = self.call_service(self.task_service.update_task, pk, data)
        return Response(TaskSerializer(task).data)


# -------------------------------------------------------------------
# COMMENTS
# -------------------------------------------------------------------


class CommentViewSet(BoardsViewSet):
    """THIN comment ViewSet - delegates to CommentService."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.comment_service = CommentService()

    def list(self, request):
        comments = self.call_service(
            self.comment_service.list_comments,
            task_id=request.query_params.get("task_id"),
        )
        return Response(CommentSerializer(comments, many=True).data)

    def create(self, request):
        data = self.validated(CommentCreateSerializer, request.data)
        comment = self.call_service(
            self.comment_service.create_comment, data["task_id"], data["content"]
        )
        return Response(CommentSerializer(comment).data, status=status.HTTP_201_CREATED)

    def retrieve(self, request, pk=None):
        comment = self.call_service(self.comment_service.get_comment, pk)
        return Response(CommentSerializer(comment).data)

    def update(self, request, pk=None):
        return self._update(request, pk)

    def partial_update(self, request, pk=None):
        return self._update(request, pk)

    def destroy(self, request, pk=None):
        self.call_service(self.comment_service.delete_comment, pk)
        return Response(status=status.HTTP_204_NO_CONTENT)

    def _update(self, request, pk):
        data = self.validated(CommentSerializer, request.data)
        comment = self.call_service(self.comment_service.update_comment, pk, data["content"])
        return Response(CommentSerializer(comment).data)
