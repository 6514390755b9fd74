"""Title and body text for each notification type."""

from typing import Tuple

from teamhub.core.constants import TeamRole


def join_request_received(requester_name: str, team_name: str) -> Tuple[str, str]:
    return "New join request", f"{requester_name} wants to join \"{team_name}\""


def join_request_decided(team_name: str, approved: bool) -> Tuple[str, str]:
    if approved:
        return "Join request approved", f"Your request to join \"{team_name}\" was approved"
    return "Join request rejected", f"Your request to join \"{team_name}\" was rejected"


def member_left(member_name: str, team_name: str) -> Tuple[str, str]:
    return "Member left", f"{member_name} left \"{team_name}\""


def member_removed(team_name: str) -> Tuple[str, str]:
    return "Removed from team", f"You were removed from \"{team_name}\""


def role_changed(team_name: str, role: TeamRole) -> Tuple[str, str]:
    return "Role changed", f"Your role in \"{team_name}\" is now {TeamRole(role).value}"


def team_event_created(team_name: str, event_title: str) -> Tuple[str, str]:
    return "New team event", f"\"{event_title}\" was scheduled in \"{team_name}\""


def event_joined(participant_name: str, event_title: str) -> Tuple[str, str]:
    return "New participant", f"{participant_name} joined \"{event_title}\""


def event_cancelled(participant_name: str, event_title: str) -> Tuple[str, str]:
    return "Participation cancelled", f"{participant_name} cancelled their participation in \"{event_title}\""
