# boards/tests/unit/test_seed_demo_data.py
from io import StringIO

import pytest
from django.core.management import call_command

from boards.models import (Comment, Project, ProjectMember, Task, TaskList,
                           Workspace, WorkspaceMember)
from users.access_levels import AccessLevel

from ..factories import UserFactory


@pytest.mark.django_db
class TestSeedDemoData:
    def test_seeds_dataset(self):
        out = StringIO()
        call_command("seed_demo_data", stdout=out)

        assert Workspace.objects.count() == 5
        assert Project.objects.count() == 5
        assert TaskList.objects.count() == 8
        assert Task.objects.count() == 20
        assert Comment.objects.count() == 5
        assert "Seeded 5 users" in out.getvalue()

    def test_project_levels_within_workspace_levels(self):
        call_command("seed_demo_data", stdout=StringIO())

        for member in ProjectMember.objects.select_related("workspace_member"):
            assert member.access_level <= member.workspace_member.access_level

    def test_owners_enrolled(self):
        call_command("seed_demo_data", stdout=StringIO())

        for workspace in Workspace.objects.all():
            owner = WorkspaceMember.objects.get(workspace=workspace, user=workspace.owner)
            assert owner.access_level == AccessLevel.OWNER

    def test_skips_when_users_exist(self):
        UserFactory()
        out = StringIO()
        call_command("seed_demo_data", stdout=out)

        assert not Workspace.objects.exists()
        assert "skipping" in out.getvalue()

    def test_force_reuses_existing_users(self):
        UserFactory(username="john")
        call_command("seed_demo_data", "--force", stdout=StringIO())

        assert Workspace.objects.filter(owner__username="john").count() == 2
