from django.contrib import admin

from .models import (Comment, Project, ProjectMember, Task, TaskAssignee,
                     TaskList, Workspace, WorkspaceMember)


class WorkspaceMemberInline(admin.TabularInline):
    model = WorkspaceMember
    extra = 0
    raw_id_fields = ("user",)


@admin.register(Workspace)
class WorkspaceAdmin(admin.ModelAdmin):
    list_display = ("name", "owner", "created_date")
    search_fields = ("name", "owner__username")
    inlines = [WorkspaceMemberInline]


@admin.register(WorkspaceMember)
class WorkspaceMemberAdmin(admin.ModelAdmin):
    list_display = ("user", "workspace", "access_level", "created_date")
    list_filter = ("access_level",)
    raw_id_fields = ("user", "workspace")


class ProjectMemberInline(admin.TabularInline):
    model = ProjectMember
    extra = 0
    raw_id_fields = ("workspace_member",)


@admin.register(Project)
class ProjectAdmin(admin.ModelAdmin):
    list_display = ("name", "workspace", "status", "start_date", "end_date")
    list_filter = ("status",)
    search_fields = ("name",)
    inlines = [ProjectMemberInline]


@admin.register(ProjectMember)
class ProjectMemberAdmin(admin.ModelAdmin):
    list_display = ("workspace_member", "project", "access_level")
    list_filter = ("access_level",)


@admin.register(TaskList)
class TaskListAdmin(admin.ModelAdmin):
    list_display = ("name", "project", "position")
    ordering = ("project", "position")


@admin.register(Task)
class TaskAdmin(admin.ModelAdmin):
    list_display = ("name", "list", "status", "priority", "deadline")
    list_filter = ("status", "priority")
    search_fields = ("name", "description")


@admin.register(TaskAssignee)
class TaskAssigneeAdmin(admin.ModelAdmin):
    list_display = ("task", "user", "assigned_date")


@admin.register(Comment)
class CommentAdmin(admin.ModelAdmin):
    list_display = ("task", "user", "created_date")
    search_fields = ("content",)
