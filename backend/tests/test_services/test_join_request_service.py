"""Tests for the join request workflow.

Repositories are replaced with mocks; the decisions under test are the order
of checks and the pending -> approved | rejected state machine.
"""

import asyncio
from contextlib import asynccontextmanager
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from pymongo.errors import DuplicateKeyError

from teamhub.core.constants import MSG_ALREADY_PROCESSED, JoinRequestAction, JoinRequestStatus, TeamRole
from teamhub.core.exceptions import BadRequest, Conflict, NotFound, PermissionDenied
from teamhub.services.join_requests import MSG_PENDING_EXISTS, JoinRequestService
from tests.mocks.teams import make_join_request, make_team

MODULE = "teamhub.services.join_requests"


def _service(team=None, join_request=None, transitioned="approved", added=True):
    """Service wired to mocked repositories.

    ``transitioned`` is the status the compare-and-set write lands on, or None
    when the request was no longer pending.
    """
    service = JoinRequestService(MagicMock())

    service.team_repo = MagicMock()
    service.team_repo.get_by_id = AsyncMock(return_value=team)
    service.team_repo.add_member = AsyncMock(return_value=added)

    service.request_repo = MagicMock()
    service.request_repo.get_by_id = AsyncMock(return_value=join_request)
    service.request_repo.get_pending = AsyncMock(return_value=None)
    service.request_repo.create = AsyncMock()
    service.request_repo.restore_pending = AsyncMock(return_value=True)
    updated = None
    if transitioned and join_request:
        updated = join_request.model_copy(update={"status": transitioned})
    service.request_repo.transition_from_pending = AsyncMock(return_value=updated)
    return service


class TestSubmit:
    def test_creates_pending_request(self, team):
        service = _service(team=team)

        result_team, request = asyncio.run(service.submit("team-1", "outsider-1"))

        assert result_team is team
        assert request.status == JoinRequestStatus.PENDING.value
        assert request.user_id == "outsider-1"
        service.request_repo.create.assert_called_once()

    def test_team_not_found(self):
        with pytest.raises(NotFound):
            asyncio.run(_service(team=None).submit("missing", "outsider-1"))

    def test_existing_member_rejected(self, team):
        with pytest.raises(BadRequest) as exc_info:
            asyncio.run(_service(team=team).submit("team-1", "member-1"))
        assert "already a member" in exc_info.value.detail

    def test_existing_pending_request_rejected(self, team):
        service = _service(team=team)
        service.request_repo.get_pending = AsyncMock(return_value=make_join_request())

        with pytest.raises(BadRequest) as exc_info:
            asyncio.run(service.submit("team-1", "outsider-1"))
        assert exc_info.value.detail == MSG_PENDING_EXISTS

    def test_concurrent_duplicate_hits_unique_index(self, team):
        service = _service(team=team)
        service.request_repo.create = AsyncMock(side_effect=DuplicateKeyError("dup"))

        with pytest.raises(BadRequest) as exc_info:
            asyncio.run(service.submit("team-1", "outsider-1"))
        assert exc_info.value.detail == MSG_PENDING_EXISTS


class TestApprove:
    def test_approve_creates_member(self, team):
        service = _service(team=team, join_request=make_join_request())

        _, updated = asyncio.run(service.approve("team-1", "req-1", "admin-1"))

        assert updated.status == "approved"
        service.request_repo.transition_from_pending.assert_called_once_with(
            "req-1", JoinRequestStatus.APPROVED, session=None
        )
        member = service.team_repo.add_member.call_args[0][1]
        assert member.user_id == "outsider-1"
        assert member.role == TeamRole.MEMBER.value

    def test_non_member_approver_gets_403(self, team):
        service = _service(team=team, join_request=make_join_request())

        with pytest.raises(PermissionDenied) as exc_info:
            asyncio.run(service.approve("team-1", "req-1", "stranger"))

        assert exc_info.value.status_code == 403
        service.request_repo.transition_from_pending.assert_not_called()
        service.team_repo.add_member.assert_not_called()

    def test_plain_member_cannot_approve(self, team):
        service = _service(team=team, join_request=make_join_request())
        with pytest.raises(PermissionDenied):
            asyncio.run(service.approve("team-1", "req-1", "member-1"))

    def test_approved_twice(self, team):
        pending = make_join_request()
        service = _service(team=team, join_request=pending)

        asyncio.run(service.approve("team-1", "req-1", "owner-1"))

        # The stored request is now approved
        service.request_repo.get_by_id = AsyncMock(return_value=make_join_request(status=JoinRequestStatus.APPROVED))
        with pytest.raises(BadRequest) as exc_info:
            asyncio.run(service.approve("team-1", "req-1", "owner-1"))

        assert exc_info.value.detail == MSG_ALREADY_PROCESSED
        assert service.team_repo.add_member.call_count == 1

    def test_lost_race_reports_already_processed(self, team):
        service = _service(team=team, join_request=make_join_request(), transitioned=None)

        with pytest.raises(BadRequest) as exc_info:
            asyncio.run(service.approve("team-1", "req-1", "owner-1"))

        assert exc_info.value.detail == MSG_ALREADY_PROCESSED
        service.team_repo.add_member.assert_not_called()

    def test_request_not_found(self, team):
        with pytest.raises(NotFound) as exc_info:
            asyncio.run(_service(team=team).approve("team-1", "req-x", "owner-1"))
        assert exc_info.value.detail == "Join request not found"

    def test_request_of_other_team_checked_before_permission(self, team):
        service = _service(team=team, join_request=make_join_request(team_id="team-2"))

        with pytest.raises(BadRequest) as exc_info:
            asyncio.run(service.approve("team-1", "req-1", "stranger"))
        assert exc_info.value.detail == "Join request does not belong to this team"

    def test_member_conflict_restores_pending_without_transaction(self, team):
        service = _service(team=team, join_request=make_join_request(), added=False)

        with pytest.raises(Conflict):
            asyncio.run(service.approve("team-1", "req-1", "owner-1"))

        service.request_repo.restore_pending.assert_called_once_with("req-1", JoinRequestStatus.APPROVED)

    def test_transaction_session_is_used_for_both_writes(self, team):
        session = MagicMock(name="session")

        @asynccontextmanager
        async def fake_transaction(database):
            yield session

        service = _service(team=team, join_request=make_join_request(), added=False)

        with patch(f"{MODULE}.transaction", fake_transaction):
            with pytest.raises(Conflict):
                asyncio.run(service.approve("team-1", "req-1", "owner-1"))

        assert service.request_repo.transition_from_pending.call_args.kwargs["session"] is session
        assert service.team_repo.add_member.call_args.kwargs["session"] is session
        # Rollback is left to the aborted transaction
        service.request_repo.restore_pending.assert_not_called()


class TestReject:
    def test_reject_creates_no_member(self, team):
        service = _service(team=team, join_request=make_join_request(), transitioned="rejected")

        _, updated = asyncio.run(service.reject("team-1", "req-1", "admin-1"))

        assert updated.status == "rejected"
        service.team_repo.add_member.assert_not_called()

    def test_rejected_request_cannot_be_approved(self, team):
        service = _service(team=team, join_request=make_join_request(status=JoinRequestStatus.REJECTED))

        with pytest.raises(BadRequest) as exc_info:
            asyncio.run(service.approve("team-1", "req-1", "owner-1"))
        assert exc_info.value.detail == MSG_ALREADY_PROCESSED


class TestDecide:
    def test_dispatches_on_action(self, team):
        service = _service(team=team, join_request=make_join_request(), transitioned="rejected")

        asyncio.run(service.decide("team-1", "req-1", "owner-1", JoinRequestAction.REJECT))

        service.request_repo.transition_from_pending.assert_called_once_with("req-1", JoinRequestStatus.REJECTED)


class TestListPending:
    def test_requires_manager(self, team):
        service = _service(team=team)
        service.request_repo.find_pending_for_team = AsyncMock(return_value=[])

        with pytest.raises(PermissionDenied):
            asyncio.run(service.list_pending("team-1", "member-1"))

        _, pending = asyncio.run(service.list_pending("team-1", "admin-1"))
        assert pending == []
