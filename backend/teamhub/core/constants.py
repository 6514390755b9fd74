"""
Shared Constants

Closed value sets used across models, schemas and the role authority.
All enums subclass ``str`` so they round-trip through MongoDB as plain strings.
"""

from enum import Enum
from typing import FrozenSet


class TeamRole(str, Enum):
    OWNER = "owner"
    ADMIN = "admin"
    MEMBER = "member"


class TeamVisibility(str, Enum):
    PUBLIC = "public"
    PRIVATE = "private"


class JoinRequestStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class JoinRequestAction(str, Enum):
    APPROVE = "approve"
    REJECT = "reject"


class ParticipationStatus(str, Enum):
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"


class NotificationType(str, Enum):
    TEAM_JOIN_REQUEST = "team_join_request"
    TEAM_JOIN_APPROVED = "team_join_approved"
    TEAM_JOIN_REJECTED = "team_join_rejected"
    TEAM_MEMBER_LEFT = "team_member_left"
    TEAM_MEMBER_REMOVED = "team_member_removed"
    TEAM_ROLE_CHANGED = "team_role_changed"
    TEAM_EVENT_CREATED = "team_event_created"
    EVENT_JOINED = "event_joined"
    EVENT_CANCELLED = "event_cancelled"


# Roles allowed to manage the team (approve requests, edit details, create events)
TEAM_MANAGER_ROLES: FrozenSet[TeamRole] = frozenset({TeamRole.OWNER, TeamRole.ADMIN})

# Roles that can be assigned through a role change. Ownership is never reassigned here.
ASSIGNABLE_ROLES: FrozenSet[TeamRole] = frozenset({TeamRole.ADMIN, TeamRole.MEMBER})

# Error messages shared between the role authority and the workflows
MSG_OWNER_PROTECTED = "Cannot remove the team owner. Transfer ownership or delete the team instead."
MSG_OWNER_ROLE_PROTECTED = "Cannot change the owner's role. Transfer ownership instead."
MSG_ALREADY_PROCESSED = "Join request has already been processed"
MSG_EVENT_FULL = "Event is full"
MSG_ALREADY_PARTICIPATING = "You are already participating in this event"
