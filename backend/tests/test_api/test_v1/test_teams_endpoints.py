"""Tests for team API endpoints.

Tests creation, visibility rules, updates and cascade deletion.
"""

import asyncio
from contextlib import asynccontextmanager
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from teamhub.core.constants import TeamVisibility
from teamhub.core.exceptions import Forbidden, NotFound, PermissionDenied
from teamhub.schemas.team import TeamCreate, TeamUpdate

MODULE = "teamhub.api.v1.endpoints.teams"


def _team_repo(team=None, teams=None):
    repo = MagicMock()
    repo.get_by_id = AsyncMock(return_value=team)
    repo.find_visible = AsyncMock(return_value=teams or [])
    repo.create = AsyncMock()
    repo.update_details = AsyncMock(return_value=team)
    repo.delete = AsyncMock(return_value=True)
    return repo


def _user_repo(users=None):
    repo = MagicMock()
    repo.get_map = AsyncMock(return_value=users or {})
    return repo


class TestCreateTeam:
    def test_creator_becomes_owner(self, member_user):
        from teamhub.api.v1.endpoints.teams import create_team

        mock_repo = _team_repo()

        with patch(f"{MODULE}.TeamRepository", return_value=mock_repo):
            result = asyncio.run(
                create_team(
                    team_in=TeamCreate(name="New Team", description="desc"),
                    current_user=member_user,
                    db=MagicMock(),
                )
            )

        assert result.name == "New Team"
        assert result.owner_id == member_user.id
        assert result.member_count == 1
        assert result.members[0].role == "owner"
        assert result.members[0].user.nickname == "mia"
        mock_repo.create.assert_called_once()

    def test_private_team(self, member_user):
        from teamhub.api.v1.endpoints.teams import create_team

        with patch(f"{MODULE}.TeamRepository", return_value=_team_repo()):
            result = asyncio.run(
                create_team(
                    team_in=TeamCreate(name="Hidden", visibility=TeamVisibility.PRIVATE),
                    current_user=member_user,
                    db=MagicMock(),
                )
            )

        assert result.visibility == TeamVisibility.PRIVATE


class TestListTeams:
    def test_anonymous_caller(self, team):
        from teamhub.api.v1.endpoints.teams import list_teams

        repo = _team_repo(teams=[team])

        with patch(f"{MODULE}.TeamRepository", return_value=repo), patch(
            f"{MODULE}.UserRepository", return_value=_user_repo()
        ):
            result = asyncio.run(list_teams(search=None, skip=0, limit=10, current_user=None, db=MagicMock()))

        assert len(result) == 1
        repo.find_visible.assert_called_once_with(None, search=None, skip=0, limit=10)

    def test_authenticated_caller_passes_id(self, member_user):
        from teamhub.api.v1.endpoints.teams import list_teams

        repo = _team_repo()

        with patch(f"{MODULE}.TeamRepository", return_value=repo), patch(
            f"{MODULE}.UserRepository", return_value=_user_repo()
        ):
            asyncio.run(list_teams(search="core", skip=0, limit=10, current_user=member_user, db=MagicMock()))

        repo.find_visible.assert_called_once_with("member-1", search="core", skip=0, limit=10)


class TestGetTeam:
    def test_private_team_hidden_from_outsider(self, private_team, outsider_user):
        from teamhub.api.v1.endpoints.teams import get_team

        with patch(f"{MODULE}.TeamRepository", return_value=_team_repo(private_team)):
            with pytest.raises(Forbidden):
                asyncio.run(get_team(team_id="team-private", current_user=outsider_user, db=MagicMock()))

    def test_not_found(self):
        from teamhub.api.v1.endpoints.teams import get_team

        with patch(f"{MODULE}.TeamRepository", return_value=_team_repo(None)):
            with pytest.raises(NotFound):
                asyncio.run(get_team(team_id="missing", current_user=None, db=MagicMock()))

    def test_members_sorted_by_join_time(self, team):
        from teamhub.api.v1.endpoints.teams import get_team

        team.members.reverse()

        with patch(f"{MODULE}.TeamRepository", return_value=_team_repo(team)), patch(
            f"{MODULE}.UserRepository", return_value=_user_repo()
        ):
            result = asyncio.run(get_team(team_id="team-1", current_user=None, db=MagicMock()))

        joined = [m.joined_at for m in result.members]
        assert joined == sorted(joined)


class TestUpdateTeam:
    def test_admin_updates(self, team, admin_user):
        from teamhub.api.v1.endpoints.teams import update_team

        repo = _team_repo(team)

        with patch(f"{MODULE}.TeamRepository", return_value=repo), patch(
            f"{MODULE}.UserRepository", return_value=_user_repo()
        ):
            asyncio.run(
                update_team(
                    team_id="team-1",
                    team_in=TeamUpdate(description="new", visibility=TeamVisibility.PRIVATE),
                    current_user=admin_user,
                    db=MagicMock(),
                )
            )

        repo.update_details.assert_called_once_with("team-1", {"description": "new", "visibility": "private"})

    def test_explicit_null_name_ignored(self, team, owner_user):
        from teamhub.api.v1.endpoints.teams import update_team

        repo = _team_repo(team)

        with patch(f"{MODULE}.TeamRepository", return_value=repo), patch(
            f"{MODULE}.UserRepository", return_value=_user_repo()
        ):
            asyncio.run(
                update_team(team_id="team-1", team_in=TeamUpdate(name=None), current_user=owner_user, db=MagicMock())
            )

        repo.update_details.assert_not_called()

    def test_member_cannot_update(self, team, member_user):
        from teamhub.api.v1.endpoints.teams import update_team

        with patch(f"{MODULE}.TeamRepository", return_value=_team_repo(team)):
            with pytest.raises(PermissionDenied):
                asyncio.run(
                    update_team(team_id="team-1", team_in=TeamUpdate(name="x"), current_user=member_user, db=MagicMock())
                )


class TestDeleteTeam:
    @staticmethod
    def _cascade_repos(event_delete=None):
        request_repo = MagicMock(delete_by_team=AsyncMock(return_value=2))
        event_repo = MagicMock(delete_by_team=event_delete or AsyncMock(return_value=1))
        invite_repo = MagicMock(delete_by_team=AsyncMock(return_value=3))
        return request_repo, event_repo, invite_repo

    def test_owner_deletes_with_cascade(self, team, owner_user):
        from teamhub.api.v1.endpoints.teams import delete_team

        team_repo = _team_repo(team)
        request_repo, event_repo, invite_repo = self._cascade_repos()

        with patch(f"{MODULE}.TeamRepository", return_value=team_repo), patch(
            f"{MODULE}.JoinRequestRepository", return_value=request_repo
        ), patch(f"{MODULE}.TeamEventRepository", return_value=event_repo), patch(
            f"{MODULE}.TeamInviteRepository", return_value=invite_repo
        ):
            result = asyncio.run(delete_team(team_id="team-1", current_user=owner_user, db=MagicMock()))

        assert result == {"message": "Team deleted successfully"}
        # Transactions are disabled in the test settings
        request_repo.delete_by_team.assert_called_once_with("team-1", session=None)
        event_repo.delete_by_team.assert_called_once_with("team-1", session=None)
        invite_repo.delete_by_team.assert_called_once_with("team-1", session=None)
        team_repo.delete.assert_called_once_with("team-1", session=None)

    def test_cascade_shares_one_transaction(self, team, owner_user):
        from teamhub.api.v1.endpoints.teams import delete_team

        team_repo = _team_repo(team)
        request_repo, event_repo, invite_repo = self._cascade_repos()
        session = MagicMock(name="session")

        @asynccontextmanager
        async def fake_transaction(db):
            yield session

        with patch(f"{MODULE}.TeamRepository", return_value=team_repo), patch(
            f"{MODULE}.JoinRequestRepository", return_value=request_repo
        ), patch(f"{MODULE}.TeamEventRepository", return_value=event_repo), patch(
            f"{MODULE}.TeamInviteRepository", return_value=invite_repo
        ), patch(f"{MODULE}.transaction", fake_transaction):
            asyncio.run(delete_team(team_id="team-1", current_user=owner_user, db=MagicMock()))

        request_repo.delete_by_team.assert_called_once_with("team-1", session=session)
        event_repo.delete_by_team.assert_called_once_with("team-1", session=session)
        invite_repo.delete_by_team.assert_called_once_with("team-1", session=session)
        team_repo.delete.assert_called_once_with("team-1", session=session)

    def test_failure_mid_cascade_leaves_team_in_place(self, team, owner_user):
        from teamhub.api.v1.endpoints.teams import delete_team

        team_repo = _team_repo(team)
        request_repo, event_repo, invite_repo = self._cascade_repos(
            event_delete=AsyncMock(side_effect=RuntimeError("connection reset"))
        )
        exits = []

        @asynccontextmanager
        async def fake_transaction(db):
            try:
                yield MagicMock(name="session")
            except Exception as e:
                exits.append(type(e))
                raise

        with patch(f"{MODULE}.TeamRepository", return_value=team_repo), patch(
            f"{MODULE}.JoinRequestRepository", return_value=request_repo
        ), patch(f"{MODULE}.TeamEventRepository", return_value=event_repo), patch(
            f"{MODULE}.TeamInviteRepository", return_value=invite_repo
        ), patch(f"{MODULE}.transaction", fake_transaction):
            with pytest.raises(RuntimeError):
                asyncio.run(delete_team(team_id="team-1", current_user=owner_user, db=MagicMock()))

        assert exits == [RuntimeError]
        team_repo.delete.assert_not_called()
        invite_repo.delete_by_team.assert_not_called()

    def test_admin_cannot_delete(self, team, admin_user):
        from teamhub.api.v1.endpoints.teams import delete_team

        team_repo = _team_repo(team)

        with patch(f"{MODULE}.TeamRepository", return_value=team_repo):
            with pytest.raises(PermissionDenied):
                asyncio.run(delete_team(team_id="team-1", current_user=admin_user, db=MagicMock()))

        team_repo.delete.assert_not_called()
