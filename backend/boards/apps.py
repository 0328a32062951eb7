"""
Django AppConfig for the boards application.
"""

from django.apps import AppConfig


class BoardsConfig(AppConfig):
    """Workspaces, projects, lists, tasks and comments."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "boards"
    verbose_name = "Boards"
