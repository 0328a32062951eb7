# conftest.py
import pytest
from django.contrib.auth import get_user_model

from users.access_levels import AccessLevel
from users.tests.factories import TEST_PASSWORD

User = get_user_model()

# =============================================================================
# USER FIXTURES
# =============================================================================


@pytest.fixture
def test_user(db):
    """Primary test user, Guest system level"""
    return User.objects.create_user(
        username="testuser", email="test@example.com", password=TEST_PASSWORD, name="Test User"
    )


@pytest.fixture
def test_user2(db):
    """Second test user, Guest system level"""
    return User.objects.create_user(
        username="testuser2", email="test2@example.com", password=TEST_PASSWORD, name="Test User 2"
    )


@pytest.fixture
def admin_user(db):
    """System Admin"""
    return User.objects.create_user(
        username="sysadmin",
        email="sysadmin@example.com",
        password=TEST_PASSWORD,
        access_level=AccessLevel.ADMIN,
    )


@pytest.fixture
def superuser(db):
    return User.objects.create_superuser(
        username="superuser", email="admin@example.com", password=TEST_PASSWORD
    )
