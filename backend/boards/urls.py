"""
URL configuration for the boards API.
"""

from django.urls import include, path
from rest_framework.routers import DefaultRouter

from .views import (CommentViewSet, ProjectViewSet, TaskListViewSet,
                    TaskViewSet, WorkspaceViewSet)

router = DefaultRouter()
router.register(r"workspaces", WorkspaceViewSet, basename="workspace")
router.register(r"projects", ProjectViewSet, basename="project")
router.register(r"lists", TaskListViewSet, basename="list")
router.register(r"tasks", TaskViewSet, basename="task")
router.register(r"comments", CommentViewSet, basename="comment")

urlpatterns = [
    path("", include(router.urls)),
]
