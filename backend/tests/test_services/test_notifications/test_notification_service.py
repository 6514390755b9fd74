"""Tests for in-app notification storage, push forwarding and fire-and-forget dispatch."""

import asyncio
from unittest.mock import AsyncMock, MagicMock, patch

from teamhub.core.constants import NotificationType
from teamhub.services.notifications import dispatch_notification
from teamhub.services.notifications.service import NotificationService

MODULE = "teamhub.services.notifications.service"


def _push(enabled=False, delivered=True):
    provider = MagicMock()
    provider.enabled = enabled
    provider.send = AsyncMock(return_value=delivered)
    return provider


def _repo(created=None):
    repo = MagicMock()
    repo.create_many = AsyncMock(side_effect=lambda items: created if created is not None else len(items))
    return repo


class TestNotify:
    def test_stores_one_notification_per_recipient(self):
        repo = _repo()
        service = NotificationService(push_provider=_push())

        with patch(f"{MODULE}.NotificationRepository", return_value=repo):
            created = asyncio.run(
                service.notify(
                    MagicMock(),
                    ["user-1", "user-2", "user-1", None],
                    NotificationType.TEAM_JOIN_REQUEST,
                    "New join request",
                    "Mia wants to join",
                    related_id="req-1",
                )
            )

        assert created == 2
        notifications = repo.create_many.call_args[0][0]
        assert [n.user_id for n in notifications] == ["user-1", "user-2"]
        assert notifications[0].type == "team_join_request"
        assert notifications[0].related_id == "req-1"
        assert notifications[0].is_read is False

    def test_no_recipients_writes_nothing(self):
        repo = _repo()
        service = NotificationService(push_provider=_push())

        with patch(f"{MODULE}.NotificationRepository", return_value=repo):
            assert asyncio.run(service.notify(MagicMock(), [], NotificationType.EVENT_JOINED, "t", "m")) == 0

        repo.create_many.assert_not_called()

    def test_push_forwarded_when_enabled(self):
        push = _push(enabled=True)
        service = NotificationService(push_provider=push)

        with patch(f"{MODULE}.NotificationRepository", return_value=_repo()):
            asyncio.run(service.notify(MagicMock(), ["user-1"], NotificationType.TEAM_ROLE_CHANGED, "t", "m", "team-1"))

        destinations, title, message = push.send.call_args[0]
        assert destinations == ["user-1"]
        assert push.send.call_args.kwargs["data"] == {"type": "team_role_changed", "related_id": "team-1"}

    def test_push_skipped_when_disabled(self):
        push = _push(enabled=False)
        service = NotificationService(push_provider=push)

        with patch(f"{MODULE}.NotificationRepository", return_value=_repo()):
            asyncio.run(service.notify(MagicMock(), ["user-1"], NotificationType.TEAM_ROLE_CHANGED, "t", "m"))

        push.send.assert_not_called()


class TestDispatchNotification:
    def test_failure_is_swallowed_and_logged(self, caplog):
        failing = MagicMock()
        failing.notify = AsyncMock(side_effect=RuntimeError("mongo down"))

        with patch(f"{MODULE}.notification_service", failing):
            result = asyncio.run(
                dispatch_notification(MagicMock(), ["user-1"], NotificationType.TEAM_JOIN_APPROVED, "t", "m", "team-1")
            )

        assert result is None
        assert "team_join_approved" in caplog.text

    def test_delegates_to_service(self):
        service = MagicMock()
        service.notify = AsyncMock(return_value=1)
        db = MagicMock()

        with patch(f"{MODULE}.notification_service", service):
            asyncio.run(dispatch_notification(db, ["user-1"], NotificationType.TEAM_MEMBER_LEFT, "t", "m", "team-1"))

        service.notify.assert_called_once_with(db, ["user-1"], NotificationType.TEAM_MEMBER_LEFT, "t", "m", "team-1")
