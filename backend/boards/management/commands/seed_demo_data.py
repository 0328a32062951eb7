from datetime import timedelta

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand
from django.db import transaction
from django.utils import timezone

from boards.models import (Comment, Priority, Project, ProjectMember,
                           ProjectStatus, Task, TaskList, TaskStatus,
                           Workspace, WorkspaceMember)
from users.access_levels import AccessLevel

User = get_user_model()

USERS = [
    ("john", "john@example.com", "John Doe", AccessLevel.OWNER),
    ("jane", "jane@example.com", "Jane Smith", AccessLevel.MEMBER),
    ("sarah", "sarah@example.com", "Sarah Johnson", AccessLevel.MEMBER),
    ("mike", "mike@example.com", "Mike Wilson", AccessLevel.MEMBER),
    ("admin", "admin@example.com", "Administrator", AccessLevel.ADMIN),
]

# (name, owner, extra members as (username, level))
WORKSPACES = [
    ("Development Team", "john", [("jane", AccessLevel.MEMBER), ("sarah", AccessLevel.GUEST)]),
    ("Marketing Team", "jane", [("sarah", AccessLevel.MEMBER)]),
    ("Design Team", "sarah", [("mike", AccessLevel.MEMBER)]),
    ("Sales Team", "mike", [("john", AccessLevel.MEMBER)]),
    ("Product Team", "john", []),
]

# (workspace, name, description, months, status, lists)
PROJECTS = [
    ("Development Team", "Website Redesign", "Redesign company website", 3,
     ProjectStatus.IN_PROGRESS, ["Backlog", "In Progress"]),
    ("Development Team", "Mobile App Development", "Develop mobile application", 6,
     ProjectStatus.IN_PROGRESS, ["Mobile Backlog", "Mobile In Progress", "Mobile Done"]),
    ("Marketing Team", "Marketing Campaign", "Q4 Marketing Campaign", 4,
     ProjectStatus.NOT_STARTED, ["Ideas"]),
    ("Design Team", "Brand Refresh", "Company brand refresh", 2,
     ProjectStatus.IN_PROGRESS, ["To Do"]),
    ("Sales Team", "Sales Strategy", "New sales strategy implementation", 5,
     ProjectStatus.NOT_STARTED, ["To Do"]),
]

TASK_NAMES = [
    "Design Homepage", "Backend API", "UI Design", "Database Schema Design",
    "User Authentication", "Payment Integration", "Email Notifications",
    "Search Functionality", "Analytics Dashboard", "Performance Optimization",
    "Security Audit", "Documentation", "Unit Testing", "Integration Testing",
    "Deployment Pipeline", "Error Handling", "Logging System",
    "Mobile Responsiveness", "API Documentation", "Code Review",
]

PRIORITIES = [Priority.HIGH, Priority.MEDIUM, Priority.LOW]


class Command(BaseCommand):
    help = "Load a small demo dataset of users, workspaces, projects, lists and tasks"

    def add_arguments(self, parser):
        parser.add_argument(
            "--force",
            action="store_true",
            help="Seed even when users already exist",
        )
        parser.add_argument(
            "--password",
            default="DemoPass!2024",
            help="Password given to every demo user",
        )

    def handle(self, *args, **options):
        if User.objects.exists() and not options["force"]:
            self.stdout.write(
                self.style.WARNING("Users already exist, skipping. Run with --force to seed anyway.")
            )
            return

        with transaction.atomic():
            users = self._seed_users(options["password"])
            members = self._seed_workspaces(users)
            task_count = self._seed_projects(users, members)

        self.stdout.write("\n" + "=" * 50)
        self.stdout.write(
            self.style.SUCCESS(
                f"Seeded {len(users)} users, {len(WORKSPACES)} workspaces, "
                f"{len(PROJECTS)} projects and {task_count} tasks"
            )
        )

    def _seed_users(self, password):
        users = {}
        for username, email, name, level in USERS:
            user = User.objects.filter(username=username).first()
            if user is None:
                user = User.objects.create_user(
                    username=username, email=email, password=password, name=name, access_level=level
                )
                self.stdout.write(self.style.SUCCESS(f"Created user {username} ({level.label})"))
            else:
                self.stdout.write(f"User {username} exists, reusing")
            users[username] = user
        return users

    def _seed_workspaces(self, users):
        members = {}
        for name, owner, extra in WORKSPACES:
            workspace = Workspace.objects.create(name=name, owner=users[owner])
            members[(name, owner)] = WorkspaceMember.objects.create(
                workspace=workspace, user=users[owner], access_level=AccessLevel.OWNER
            )
            for username, level in extra:
                members[(name, username)] = WorkspaceMember.objects.create(
                    workspace=workspace, user=users[username], access_level=level
                )
            self.stdout.write(f"Workspace {name}: {1 + len(extra)} members")
        return members

    def _seed_projects(self, users, members):
        now = timezone.now()
        task_index = 0

        for workspace_name, name, description, months, status, list_names in PROJECTS:
            workspace_members = [m for (ws, _), m in members.items() if ws == workspace_name]
            project = Project.objects.create(
                workspace=workspace_members[0].workspace,
                name=name,
                description=description,
                start_date=now,
                end_date=now + timedelta(days=30 * months),
                status=status,
            )

            # project level never exceeds the workspace level
            for member in workspace_members:
                ProjectMember.objects.create(
                    project=project, workspace_member=member, access_level=member.access_level
                )

            lists = [
                TaskList.objects.create(project=project, name=list_name, position=position)
                for position, list_name in enumerate(list_names)
            ]

            per_project = len(TASK_NAMES) // len(PROJECTS)
            for offset in range(per_project):
                task_name = TASK_NAMES[task_index]
                task = Task.objects.create(
                    project=project,
                    list=lists[offset % len(lists)],
                    name=task_name,
                    description=f"Task description for {task_name}",
                    status=TaskStatus.NOT_STARTED if task_index % 2 == 0 else TaskStatus.IN_PROGRESS,
                    priority=PRIORITIES[task_index % 3],
                    deadline=now + timedelta(days=7 + task_index),
                )
                if offset == 0:
                    Comment.objects.create(
                        task=task,
                        user=workspace_members[0].user,
                        content=f"Kicking off {task_name}",
                    )
                task_index += 1

            self.stdout.write(f"Project {name}: {len(lists)} lists, {per_project} tasks")

        return task_index
