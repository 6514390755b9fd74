"""
Helpers shared by the team endpoints: loading a team and turning stored
documents into response schemas enriched with user profiles.
"""

from typing import Dict, Iterable, List, Optional

from teamhub.core.constants import TEAM_MANAGER_ROLES, TeamRole
from teamhub.core.exceptions import NotFound
from teamhub.models.join_request import TeamJoinRequest
from teamhub.models.team import Team, TeamMember
from teamhub.models.team_event import EventParticipant, TeamEvent
from teamhub.models.team_invite import TeamInvite
from teamhub.models.user import User
from teamhub.repositories import TeamRepository, UserRepository
from teamhub.schemas.common import UserSummary
from teamhub.schemas.join_request import JoinRequestResponse
from teamhub.schemas.team import TeamBrief, TeamMemberResponse, TeamResponse
from teamhub.schemas.team_event import ParticipantResponse, TeamEventResponse
from teamhub.schemas.team_invite import TeamInviteResponse

UserMap = Dict[str, User]


async def get_team_or_404(team_repo: TeamRepository, team_id: str) -> Team:
    team = await team_repo.get_by_id(team_id)
    if not team:
        raise NotFound("Team not found")
    return team


async def load_users(user_repo: UserRepository, user_ids: Iterable[str]) -> UserMap:
    return await user_repo.get_map(list(user_ids))


def manager_ids(team: Team) -> List[str]:
    """User ids of the owner and admins."""
    return [m.user_id for m in team.members if TeamRole(m.role) in TEAM_MANAGER_ROLES]


def build_member_response(member: TeamMember, users: UserMap) -> TeamMemberResponse:
    return TeamMemberResponse(
        id=member.id,
        user_id=member.user_id,
        role=member.role,
        joined_at=member.joined_at,
        user=UserSummary.from_user(users.get(member.user_id)),
    )


def build_member_list(team: Team, users: UserMap) -> List[TeamMemberResponse]:
    """Members ordered by join time, oldest first."""
    members = sorted(team.members, key=lambda m: m.joined_at)
    return [build_member_response(m, users) for m in members]


def build_team_response(team: Team, users: UserMap) -> TeamResponse:
    return TeamResponse(
        id=team.id,
        name=team.name,
        description=team.description,
        icon_image=team.icon_image,
        visibility=team.visibility,
        owner_id=team.owner_id,
        member_count=len(team.members),
        members=build_member_list(team, users),
        created_at=team.created_at,
        updated_at=team.updated_at,
    )


def build_join_request_response(
    join_request: TeamJoinRequest,
    users: UserMap,
    team: Optional[Team] = None,
) -> JoinRequestResponse:
    return JoinRequestResponse(
        id=join_request.id,
        team_id=join_request.team_id,
        user_id=join_request.user_id,
        status=join_request.status,
        created_at=join_request.created_at,
        updated_at=join_request.updated_at,
        user=UserSummary.from_user(users.get(join_request.user_id)),
        team=TeamBrief(id=team.id, name=team.name, icon_image=team.icon_image) if team else None,
    )


def build_participant_response(participant: EventParticipant, users: UserMap) -> ParticipantResponse:
    return ParticipantResponse(
        id=participant.id,
        user_id=participant.user_id,
        status=participant.status,
        joined_at=participant.joined_at,
        user=UserSummary.from_user(users.get(participant.user_id)),
    )


def build_event_response(event: TeamEvent, users: UserMap) -> TeamEventResponse:
    return TeamEventResponse(
        id=event.id,
        team_id=event.team_id,
        title=event.title,
        description=event.description,
        location=event.location,
        starts_at=event.starts_at,
        ends_at=event.ends_at,
        max_participants=event.max_participants,
        confirmed_count=event.confirmed_count,
        created_by=event.created_by,
        participants=[build_participant_response(p, users) for p in event.participants],
        created_at=event.created_at,
    )


def build_invite_response(invite: TeamInvite, users: UserMap, url: str) -> TeamInviteResponse:
    return TeamInviteResponse(
        id=invite.id,
        team_id=invite.team_id,
        token=invite.token,
        invite_url=url,
        expires_at=invite.expires_at,
        used_at=invite.used_at,
        created_at=invite.created_at,
        created_by=UserSummary.from_user(users.get(invite.created_by)),
        used_by=UserSummary.from_user(users.get(invite.used_by)) if invite.used_by else None,
    )
