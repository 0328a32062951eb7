# boards/tests/conftest.py
import pytest

from boards.models import (Project, ProjectMember, Task, TaskList, Workspace,
                           WorkspaceMember)
from users.access_levels import AccessLevel

# =============================================================================
# WORKSPACE FIXTURES
# =============================================================================


@pytest.fixture
def test_workspace(db, test_user):
    """Workspace owned by test_user, owner enrolled as Owner"""
    workspace = Workspace.objects.create(name="Test Workspace", owner=test_user)
    WorkspaceMember.objects.create(
        workspace=workspace, user=test_user, access_level=AccessLevel.OWNER
    )
    return workspace


@pytest.fixture
def owner_membership(test_workspace, test_user):
    return WorkspaceMember.objects.get(workspace=test_workspace, user=test_user)


@pytest.fixture
def workspace_member(test_workspace, test_user2):
    """test_user2 enrolled as Member"""
    return WorkspaceMember.objects.create(
        workspace=test_workspace, user=test_user2, access_level=AccessLevel.MEMBER
    )


# =============================================================================
# PROJECT FIXTURES
# =============================================================================


@pytest.fixture
def test_project(test_workspace, owner_membership):
    """Project in test_workspace with test_user as Owner project member"""
    project = Project.objects.create(workspace=test_workspace, name="Test Project")
    ProjectMember.objects.create(
        project=project, workspace_member=owner_membership, access_level=AccessLevel.OWNER
    )
    return project


@pytest.fixture
def owner_project_member(test_project, owner_membership):
    return ProjectMember.objects.get(project=test_project, workspace_member=owner_membership)


@pytest.fixture
def project_member(test_project, workspace_member):
    """test_user2 as Member of test_project"""
    return ProjectMember.objects.create(
        project=test_project, workspace_member=workspace_member, access_level=AccessLevel.MEMBER
    )


@pytest.fixture
def task_list(test_project):
    return TaskList.objects.create(project=test_project, name="Backlog", position=0)


@pytest.fixture
def task(task_list):
    return Task.objects.create(project=task_list.project, list=task_list, name="Write tests")
