"""
Tests for the pending-issue notification poller
"""
import asyncio
from datetime import datetime, timedelta
from unittest.mock import MagicMock
import httpx
import pytest
from rich.console import Console

from reportverse_client.api import ApiClient
from reportverse_client.config import Credentials
from reportverse_client.notifications import (
    ConsoleNotifier,
    IssueNotificationPoller,
    count_overdue,
    pending_age_days,
    reminder_message,
)
from reportverse_client.resources import MentorSession
from reportverse_client.schemas import Issue
from tests.client.conftest import envelope, issue_payload


class IssueFeed:
    """Mock transport serving a mutable mentor issue list"""

    def __init__(self, issues):
        self.issues = issues
        self.calls = 0
        self.fail = False

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.calls += 1
        if self.fail:
            return httpx.Response(500, json={"success": False, "error": "Server Error"})
        return httpx.Response(200, json=envelope(self.issues, count=len(self.issues)))


@pytest.fixture
def feed():
    return IssueFeed([])


@pytest.fixture
async def session(config, feed):
    client = ApiClient(config=config, credentials=Credentials(token="tok"), transport=httpx.MockTransport(feed))
    session = MentorSession(client)
    yield session
    await session.close()


class TestAgeRules:

    def test_age_rounds_up(self):
        now = datetime(2024, 5, 10, 12, 0)

        assert pending_age_days(now - timedelta(hours=1), now) == 1
        assert pending_age_days(now - timedelta(days=2, hours=1), now) == 3
        assert pending_age_days(now - timedelta(days=2), now) == 2

    def test_only_pending_statuses_count(self):
        now = datetime.utcnow()
        old = timedelta(days=4)
        issues = [
            Issue.model_validate(issue_payload("Open", old)),
            Issue.model_validate(issue_payload("Under Review", old)),
            Issue.model_validate(issue_payload("Resolved", old)),
            Issue.model_validate(issue_payload("Closed", old)),
            Issue.model_validate(issue_payload("Open", timedelta(hours=5))),
        ]

        assert count_overdue(issues, now, threshold_days=3) == 2

    def test_message(self):
        assert reminder_message(1, 3) == "You have 1 issue pending for more than 3 days"
        assert reminder_message(4, 3) == "You have 4 issues pending for more than 3 days"


class TestPoller:

    @pytest.mark.asyncio
    async def test_notifies_once_per_session(self, session, feed):
        feed.issues = [issue_payload("Open", timedelta(days=5)), issue_payload("Under Review", timedelta(days=3))]
        notify = MagicMock()
        poller = IssueNotificationPoller(session, notify=notify)

        assert await poller.check() == 2
        assert await poller.check() == 2

        notify.assert_called_once_with("You have 2 issues pending for more than 3 days")
        assert feed.calls == 2

    @pytest.mark.asyncio
    async def test_quiet_when_nothing_overdue(self, session, feed):
        feed.issues = [issue_payload("Open", timedelta(hours=2)), issue_payload("Closed", timedelta(days=9))]
        notify = MagicMock()
        poller = IssueNotificationPoller(session, notify=notify)

        assert await poller.check() == 0

        notify.assert_not_called()
        assert poller.has_notified is False

    @pytest.mark.asyncio
    async def test_loop_checks_immediately_and_keeps_polling(self, session, feed):
        feed.issues = [issue_payload("Open", timedelta(days=4))]
        notify = MagicMock()
        poller = IssueNotificationPoller(session, notify=notify, interval=0.01)

        await poller.start()
        await asyncio.sleep(0.1)
        await poller.stop()

        assert feed.calls >= 2
        notify.assert_called_once()
        assert poller.running is False

    @pytest.mark.asyncio
    async def test_loop_survives_failed_checks(self, session, feed):
        feed.fail = True
        notify = MagicMock()
        poller = IssueNotificationPoller(session, notify=notify, interval=0.01)

        await poller.start()
        await asyncio.sleep(0.05)
        feed.fail = False
        feed.issues = [issue_payload("Open", timedelta(days=4))]
        await asyncio.sleep(0.05)
        await poller.stop()

        notify.assert_called_once()

    @pytest.mark.asyncio
    async def test_start_twice_is_harmless(self, session):
        poller = IssueNotificationPoller(session, notify=MagicMock(), interval=10)

        await poller.start()
        task = poller._task
        await poller.start()

        assert poller._task is task
        await poller.stop()

    @pytest.mark.asyncio
    async def test_threshold_from_config(self, session):
        poller = IssueNotificationPoller(session, notify=MagicMock())

        assert poller.interval == 3600
        assert poller.threshold_days == 3


class TestConsoleNotifier:

    def test_prints_message(self):
        console = Console(record=True, width=100)

        ConsoleNotifier(console)("You have 2 issues pending for more than 3 days")

        assert "You have 2 issues pending for more than 3 days" in console.export_text()
