"""
Team Role Authority

Pure decision functions answering "may this user do X to this team?".

Every function takes the team (with its member list) and the acting user id
explicitly, returns ``None`` when the action is permitted and raises a domain
error otherwise. Nothing here touches the database or request state, so the
same inputs always produce the same decision.
"""

from typing import Optional

from teamhub.core.constants import (
    MSG_OWNER_PROTECTED,
    MSG_OWNER_ROLE_PROTECTED,
    TEAM_MANAGER_ROLES,
    TeamRole,
    TeamVisibility,
)
from teamhub.core.exceptions import Forbidden, PermissionDenied
from teamhub.models.team import Team
from teamhub.models.team_event import TeamEvent


def is_owner(team: Team, user_id: Optional[str]) -> bool:
    return user_id is not None and user_id == team.owner_id


def is_manager(team: Team, user_id: Optional[str]) -> bool:
    """Owner or admin of the team."""
    return team.role_of(user_id) in TEAM_MANAGER_ROLES


def ensure_not_owner_target(team: Team, target_user_id: str, removing: bool = True) -> None:
    """
    Reject any action aimed at the owner's membership.

    Checked before the acting user's rights so the owner-specific error is
    returned no matter who asks.
    """
    if target_user_id == team.owner_id or team.role_of(target_user_id) == TeamRole.OWNER:
        raise Forbidden(MSG_OWNER_PROTECTED if removing else MSG_OWNER_ROLE_PROTECTED)


def can_change_role(team: Team, acting_user_id: str) -> None:
    """Only the owner assigns admin/member roles."""
    if not is_owner(team, acting_user_id):
        raise PermissionDenied("Only the team owner can change member roles")


def can_approve_join_request(team: Team, acting_user_id: str) -> None:
    if not is_manager(team, acting_user_id):
        raise PermissionDenied("Only owner and admin can approve join requests")


def can_remove_member(team: Team, acting_user_id: str, target_user_id: str) -> None:
    """
    Decide whether ``acting_user_id`` may remove ``target_user_id``.

    - The owner can never be removed.
    - The owner can remove anyone else.
    - An admin can remove members and themself, but not other admins.
    - Anyone can remove themself (leave the team).
    """
    ensure_not_owner_target(team, target_user_id)

    if is_owner(team, acting_user_id):
        return

    is_self = acting_user_id == target_user_id

    if team.role_of(acting_user_id) == TeamRole.ADMIN:
        if team.role_of(target_user_id) == TeamRole.ADMIN and not is_self:
            raise Forbidden("Admins cannot remove other admins")
        return

    if is_self:
        return

    raise Forbidden("You do not have permission to remove this member")


def can_view_members(team: Team, acting_user_id: Optional[str]) -> None:
    """Public teams are visible to everyone, private teams to members only."""
    if team.visibility == TeamVisibility.PUBLIC:
        return
    if team.is_member(acting_user_id):
        return
    raise Forbidden("This team is private")


def can_manage_team(team: Team, acting_user_id: str) -> None:
    """Edit team details, list join requests, create team events."""
    if not is_manager(team, acting_user_id):
        raise PermissionDenied("Only owner and admin can manage this team")


def can_delete_team(team: Team, acting_user_id: str) -> None:
    if not is_owner(team, acting_user_id):
        raise PermissionDenied("Only the team owner can delete the team")


def can_participate(team: Team, acting_user_id: str) -> None:
    if not team.is_member(acting_user_id):
        raise PermissionDenied("Only team members can join team events")


def can_view_events(team: Team, acting_user_id: str) -> None:
    """Events and their participant lists are shown to team members only."""
    if not team.is_member(acting_user_id):
        raise PermissionDenied("Only team members can view team events")


def can_edit_event(team: Team, event: TeamEvent, acting_user_id: str) -> None:
    """The event's creator, the owner and admins may edit or delete an event."""
    if event.created_by == acting_user_id or is_manager(team, acting_user_id):
        return
    raise PermissionDenied("Only the event creator, owner or admin can modify this event")
