"""Tests for team invite link endpoints."""

import asyncio
from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from fastapi import BackgroundTasks

from teamhub.core.constants import NotificationType
from teamhub.core.exceptions import BadRequest, PermissionDenied
from teamhub.models.team_invite import TeamInvite
from tests.mocks.teams import make_join_request

MODULE = "teamhub.api.v1.endpoints.team_invites"


def _invite(**overrides):
    data = {
        "team_id": "team-1",
        "created_by": "owner-1",
        "expires_at": datetime.now(timezone.utc) + timedelta(hours=24),
    }
    data.update(overrides)
    return TeamInvite(**data)


def _patch_service(**methods):
    service = MagicMock()
    for name, value in methods.items():
        setattr(service, name, AsyncMock(**value) if isinstance(value, dict) else AsyncMock(return_value=value))
    return patch(f"{MODULE}.TeamInviteService", return_value=service), service


class TestCreateInvite:
    def test_returns_link(self, owner_user):
        from teamhub.api.v1.endpoints.team_invites import create_invite

        invite = _invite()
        patcher, service = _patch_service(create=invite)

        with patcher:
            result = asyncio.run(create_invite(team_id="team-1", current_user=owner_user, db=MagicMock()))

        service.create.assert_called_once_with("team-1", "owner-1")
        assert result.token == invite.token
        assert result.invite_url.endswith(f"/invite/{invite.token}")
        assert result.created_by.id == "owner-1"
        assert result.used_at is None

    def test_member_denied(self, member_user):
        from teamhub.api.v1.endpoints.team_invites import create_invite

        patcher, _ = _patch_service(create={"side_effect": PermissionDenied()})

        with patcher, pytest.raises(PermissionDenied):
            asyncio.run(create_invite(team_id="team-1", current_user=member_user, db=MagicMock()))


class TestListInvites:
    def test_enriches_creator_and_redeemer(self, admin_user, owner_user, outsider_user):
        from teamhub.api.v1.endpoints.team_invites import list_invites

        used = _invite(used_at=datetime.now(timezone.utc), used_by="outsider-1")
        unused = _invite()
        patcher, _ = _patch_service(list_for_team=[used, unused])
        user_repo = MagicMock(get_map=AsyncMock(return_value={"owner-1": owner_user, "outsider-1": outsider_user}))

        with patcher, patch(f"{MODULE}.UserRepository", return_value=user_repo):
            result = asyncio.run(list_invites(team_id="team-1", current_user=admin_user, db=MagicMock()))

        assert result[0].used_by.id == "outsider-1"
        assert result[0].created_by.name == "Olivia Owner"
        assert result[1].used_by is None
        assert sorted(user_repo.get_map.call_args[0][0]) == ["outsider-1", "owner-1", "owner-1"]


class TestPreviewInvite:
    def test_valid(self, team):
        from teamhub.api.v1.endpoints.team_invites import preview_invite

        patcher, _ = _patch_service(preview=(None, team))

        with patcher:
            result = asyncio.run(preview_invite(token="tok", db=MagicMock()))

        assert result.valid is True
        assert result.error is None
        assert result.team.id == "team-1"
        assert result.team.member_count == len(team.members)

    def test_invalid_reports_reason(self):
        from teamhub.api.v1.endpoints.team_invites import preview_invite

        patcher, _ = _patch_service(preview=("Invite link has already been used", None))

        with patcher:
            result = asyncio.run(preview_invite(token="tok", db=MagicMock()))

        assert result.valid is False
        assert result.error == "Invite link has already been used"
        assert result.team is None


class TestAcceptInvite:
    def test_files_request_and_notifies_managers(self, team, outsider_user):
        from teamhub.api.v1.endpoints.team_invites import accept_invite

        patcher, service = _patch_service(accept=(team, make_join_request()))
        bg_tasks = BackgroundTasks()

        with patcher:
            result = asyncio.run(
                accept_invite(token="tok", background_tasks=bg_tasks, current_user=outsider_user, db=MagicMock())
            )

        service.accept.assert_called_once_with("tok", "outsider-1")
        assert result["message"] == "Join request submitted successfully"
        assert result["join_request"].status == "pending"
        assert result["join_request"].team.id == "team-1"
        assert bg_tasks.tasks[0].args[2] == NotificationType.TEAM_JOIN_REQUEST
        assert sorted(bg_tasks.tasks[0].args[1]) == ["admin-1", "admin-2", "owner-1"]

    def test_used_link_notifies_nobody(self, outsider_user):
        from teamhub.api.v1.endpoints.team_invites import accept_invite

        patcher, _ = _patch_service(accept={"side_effect": BadRequest("Invite link has already been used")})
        bg_tasks = BackgroundTasks()

        with patcher, pytest.raises(BadRequest):
            asyncio.run(
                accept_invite(token="tok", background_tasks=bg_tasks, current_user=outsider_user, db=MagicMock())
            )

        assert bg_tasks.tasks == []
