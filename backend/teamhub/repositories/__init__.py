"""
Repository Pattern for Database Access

Provides a clean abstraction layer over MongoDB collections,
centralizing database operations and reducing code duplication.
"""

from teamhub.repositories.base import BaseRepository
from teamhub.repositories.join_requests import JoinRequestRepository
from teamhub.repositories.notifications import NotificationRepository
from teamhub.repositories.team_events import TeamEventRepository
from teamhub.repositories.team_invites import TeamInviteRepository
from teamhub.repositories.teams import TeamRepository
from teamhub.repositories.users import UserRepository

__all__ = [
    "BaseRepository",
    "JoinRequestRepository",
    "NotificationRepository",
    "TeamEventRepository",
    "TeamInviteRepository",
    "TeamRepository",
    "UserRepository",
]
