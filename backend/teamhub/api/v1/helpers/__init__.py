"""
API v1 Helper Functions

Shared helper functions extracted from endpoint modules.
"""

from teamhub.api.v1.helpers.teams import (
    build_event_response,
    build_invite_response,
    build_join_request_response,
    build_member_list,
    build_member_response,
    build_participant_response,
    build_team_response,
    get_team_or_404,
    load_users,
    manager_ids,
)

__all__ = [
    "build_event_response",
    "build_invite_response",
    "build_join_request_response",
    "build_member_list",
    "build_member_response",
    "build_participant_response",
    "build_team_response",
    "get_team_or_404",
    "load_users",
    "manager_ids",
]
