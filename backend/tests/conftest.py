"""
Shared test fixtures and configuration.

Environment variables are set BEFORE any app imports to prevent
accidental connections to real databases.
"""

import os
import sys

# Ensure the backend package is importable
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

# Override settings before any app code imports the settings singleton
os.environ["SECRET_KEY"] = "test-secret-key-for-unit-tests"
os.environ["ALGORITHM"] = "HS256"
os.environ["MONGODB_URL"] = "mongodb://localhost:27017"
os.environ["DATABASE_NAME"] = "test_teamhub"
os.environ["MONGODB_TRANSACTIONS"] = "false"
os.environ.pop("PUSH_WEBHOOK_URL", None)

import pytest  # noqa: E402

from teamhub.core.constants import TeamVisibility  # noqa: E402
from teamhub.models.user import User  # noqa: E402
from tests.mocks.teams import make_team  # noqa: E402


@pytest.fixture
def team():
    """Public team: owner-1 owns it, admin-1/admin-2 are admins, member-1/member-2 are members."""
    return make_team(admins=("admin-1", "admin-2"), members=("member-1", "member-2"))


@pytest.fixture
def private_team():
    return make_team(id="team-private", visibility=TeamVisibility.PRIVATE, members=("member-1",))


@pytest.fixture
def owner_user():
    return User(id="owner-1", name="Olivia Owner", email="owner@test.com")


@pytest.fixture
def admin_user():
    return User(id="admin-1", name="Adam Admin", email="admin@test.com")


@pytest.fixture
def member_user():
    return User(id="member-1", name="Mia Member", nickname="mia", email="member@test.com")


@pytest.fixture
def outsider_user():
    return User(id="outsider-1", name="Oscar Outsider", email="outsider@test.com")
