"""
Database models for the Taskboard boards application.

Workspaces own members and projects; projects own project members and
lists; lists own tasks; tasks own assignees and comments. Every child is
deleted with its parent.
"""

import uuid

from django.conf import settings
from django.db import models

from users.access_levels import AccessLevel

# -------------------------------------------------------------------
# WORKSPACES
# -------------------------------------------------------------------


class Workspace(models.Model):
    """
    Top-level tenant. The creator is the owner and is enrolled as an Owner member.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=100)
    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="owned_workspaces",
    )
    members = models.ManyToManyField(
        settings.AUTH_USER_MODEL,
        through="WorkspaceMember",
        through_fields=("workspace", "user"),
        related_name="workspaces",
    )
    created_date = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["name"]
        indexes = [
            models.Index(fields=["owner"], name="boards_work_owner_i_5c1f0a_idx"),
            models.Index(fields=["created_date"], name="boards_work_created_8d2e4b_idx"),
        ]

    def __str__(self):
        return self.name


class WorkspaceMember(models.Model):
    """
    A user's authority within one workspace.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    workspace = models.ForeignKey(
        Workspace, on_delete=models.CASCADE, related_name="memberships"
    )
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="workspace_memberships",
    )
    access_level = models.IntegerField(
        choices=AccessLevel.choices, default=AccessLevel.MEMBER
    )
    created_date = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["created_date"]
        constraints = [
            models.UniqueConstraint(
                fields=["workspace", "user"], name="unique_workspace_member"
            )
        ]
        indexes = [
            models.Index(fields=["user", "access_level"], name="boards_work_user_id_3a7c91_idx"),
        ]

    def __str__(self):
        return f"{self.user_id} in {self.workspace_id} as {AccessLevel(self.access_level).label}"


# -------------------------------------------------------------------
# PROJECTS
# -------------------------------------------------------------------


class ProjectStatus(models.TextChoices):
    NOT_STARTED = "NotStarted", "Not started"
    IN_PROGRESS = "InProgress", "In progress"
    COMPLETED = "Completed", "Completed"


class Project(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    workspace = models.ForeignKey(
        Workspace, on_delete=models.CASCADE, related_name="projects"
    )
    name = models.CharField(max_length=200)
    description = models.TextField(blank=True, default="")
    start_date = models.DateTimeField(null=True, blank=True)
    end_date = models.DateTimeField(null=True, blank=True)
    status = models.CharField(
        max_length=20, choices=ProjectStatus.choices, default=ProjectStatus.NOT_STARTED
    )
    created_date = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["created_date"]

    def __str__(self):
        return self.name


class ProjectMember(models.Model):
    """
    A workspace member's authority within one project of that workspace.

    Always references a WorkspaceMember, never a user directly; its level is
    capped by the workspace member's level.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    project = models.ForeignKey(
        Project, on_delete=models.CASCADE, related_name="members"
    )
    workspace_member = models.ForeignKey(
        WorkspaceMember, on_delete=models.CASCADE, related_name="project_memberships"
    )
    access_level = models.IntegerField(
        choices=AccessLevel.choices, default=AccessLevel.MEMBER
    )
    created_date = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["created_date"]
        constraints = [
            models.UniqueConstraint(
                fields=["project", "workspace_member"], name="unique_project_member"
            )
        ]

    def __str__(self):
        return f"{self.workspace_member_id} in {self.project_id} as {AccessLevel(self.access_level).label}"


# -------------------------------------------------------------------
# LISTS, TASKS, COMMENTS
# -------------------------------------------------------------------


class TaskList(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    project = models.ForeignKey(
        Project, on_delete=models.CASCADE, related_name="lists"
    )
    name = models.CharField(max_length=200)
    position = models.PositiveIntegerField(default=0)
    created_date = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["position", "created_date"]
        indexes = [
            models.Index(fields=["project", "position"], name="boards_task_project_6e0b2d_idx"),
        ]

    def __str__(self):
        return f"{self.name} (#{self.position})"


class TaskStatus(models.TextChoices):
    NOT_STARTED = "NotStarted", "Not started"
    IN_PROGRESS = "InProgress", "In progress"
    COMPLETED = "Completed", "Completed"


class Priority(models.TextChoices):
    LOW = "Low", "Low"
    MEDIUM = "Medium", "Medium"
    HIGH = "High", "High"
    URGENT = "Urgent", "Urgent"


class Task(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    project = models.ForeignKey(
        Project, on_delete=models.CASCADE, related_name="tasks"
    )
    list = models.ForeignKey(
        TaskList, on_delete=models.CASCADE, related_name="tasks"
    )
    name = models.CharField(max_length=200)
    description = models.TextField(blank=True, default="")
    status = models.CharField(
        max_length=20, choices=TaskStatus.choices, default=TaskStatus.NOT_STARTED
    )
    priority = models.CharField(
        max_length=10, choices=Priority.choices, default=Priority.MEDIUM
    )
    deadline = models.DateTimeField(null=True, blank=True)
    created_date = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["created_date"]

    def __str__(self):
        return self.name


class TaskAssignee(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    task = models.ForeignKey(
        Task, on_delete=models.CASCADE, related_name="assignees"
    )
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="assigned_tasks",
    )
    assigned_date = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["assigned_date"]
        constraints = [
            models.UniqueConstraint(fields=["task", "user"], name="unique_task_assignee")
        ]

    def __str__(self):
        return f"{self.user_id} on {self.task_id}"


class Comment(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    task = models.ForeignKey(
        Task, on_delete=models.CASCADE, related_name="comments"
    )
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="comments",
    )
    content = models.TextField()
    created_date = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_date"]

    def __str__(self):
        return f"Comment {self.id} on {self.task_id}"
