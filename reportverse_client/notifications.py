"""
Pending-issue reminders for mentors.

``IssueNotificationPoller`` checks the mentor's issue list once on start and
then on a fixed interval. Issues still Open or Under Review whose age, in
days rounded up, reaches the threshold are counted, and a single reminder
covering all of them is raised. After the first reminder the poller keeps
running but stays quiet for the rest of the session.
"""

import asyncio
import logging
import math
from datetime import datetime, timezone
from typing import Callable, Iterable, Optional

from rich.console import Console
from rich.panel import Panel

from reportverse_client.resources import MentorSession
from reportverse_client.schemas import Issue

logger = logging.getLogger(__name__)

SECONDS_PER_DAY = 24 * 60 * 60


def pending_age_days(created_at: datetime, now: datetime) -> int:
    """Whole days since ``created_at``, rounded up. Naive values are UTC."""
    if created_at.tzinfo is not None:
        created_at = created_at.astimezone(timezone.utc).replace(tzinfo=None)
    return math.ceil(abs((now - created_at).total_seconds()) / SECONDS_PER_DAY)


def count_overdue(issues: Iterable[Issue], now: datetime, threshold_days: int) -> int:
    return sum(
        1 for issue in issues
        if issue.is_pending and pending_age_days(issue.created_at, now) >= threshold_days
    )


def reminder_message(count: int, threshold_days: int) -> str:
    noun = "issue" if count == 1 else "issues"
    return f"You have {count} {noun} pending for more than {threshold_days} days"


class ConsoleNotifier:
    """Prints reminders to the terminal"""

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console()

    def __call__(self, message: str) -> None:
        self.console.print(Panel(
            f"[bold]{message}[/bold]\n[dim]Open your issue list to review and resolve them[/dim]",
            title="[yellow]Pending issues[/yellow]",
            border_style="yellow",
        ))


class IssueNotificationPoller:
    """
    Usage:
        poller = IssueNotificationPoller(mentor_session)
        await poller.start()
        ...
        await poller.stop()
    """

    def __init__(
        self,
        session: MentorSession,
        notify: Optional[Callable[[str], None]] = None,
        interval: Optional[float] = None,
        threshold_days: Optional[int] = None,
        now: Callable[[], datetime] = datetime.utcnow,
    ):
        self.session = session
        self.notify = notify or ConsoleNotifier()
        self.interval = session.config.poll_interval if interval is None else interval
        self.threshold_days = (
            session.config.pending_days_threshold if threshold_days is None else threshold_days
        )
        self._now = now
        self.running = False
        self.has_notified = False
        self._task: Optional[asyncio.Task] = None

    async def check(self) -> int:
        """Fetch the issue list and raise the reminder if it is due. Returns the overdue count."""
        issues = await self.session.issues(force=True)
        overdue = count_overdue(issues, self._now(), self.threshold_days)

        if overdue and not self.has_notified:
            self.notify(reminder_message(overdue, self.threshold_days))
            self.has_notified = True
            logger.info(f"[IssuePoller] Reminded mentor about {overdue} pending issue(s)")
        return overdue

    async def start(self):
        if self.running:
            logger.warning("[IssuePoller] Poller already running")
            return

        self.running = True
        self._task = asyncio.create_task(self._poll_loop())
        logger.info(f"[IssuePoller] Started (interval: {self.interval}s)")

    async def stop(self):
        self.running = False
        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None
        logger.info("[IssuePoller] Stopped")

    async def _poll_loop(self):
        while self.running:
            try:
                await self.check()
            except Exception as e:
                logger.error(f"[IssuePoller] Check failed: {e}", exc_info=True)

            await asyncio.sleep(self.interval)
