"""
Cached resource facades for a logged-in mentor or mentee.

Reads go through the session's ``QueryCache``. Mutations patch the affected
cached list and detail with the server's answer straight away, then schedule
a background refresh of the same keys so the cache converges on what the
server holds.
"""

import asyncio
import logging
from typing import Any, Dict, List, Optional, Set

from reportverse_client.api import ApiClient, MenteeApi, MentorApi
from reportverse_client.cache import CacheKey, Loader, QueryCache
from reportverse_client.schemas import Achievement, Comment, Issue, MenteeSummary

logger = logging.getLogger(__name__)


def _replace_issue(issues: Optional[List[Issue]], issue: Issue) -> List[Issue]:
    issues = list(issues or [])
    for index, existing in enumerate(issues):
        if existing.id == issue.id:
            issues[index] = issue
            return issues
    return [issue] + issues


def _prepend(items: Optional[list], item: Any) -> list:
    return [item] + list(items or [])


class _Session:
    def __init__(self, client: ApiClient, cache: Optional[QueryCache] = None):
        self.client = client
        self.config = client.config
        self.cache = cache or QueryCache(default_ttl=self.config.default_cache_ttl)
        self._background: Set[asyncio.Task] = set()

    def _reconcile(self, key: CacheKey, loader: Loader) -> asyncio.Task:
        task = asyncio.create_task(self.cache.refresh(key, loader))
        self._background.add(task)
        task.add_done_callback(self._on_background_done)
        return task

    def _on_background_done(self, task: asyncio.Task) -> None:
        self._background.discard(task)
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            # The entry keeps its optimistic data and records the error
            logger.warning(f"Background refresh failed: {error}")

    async def wait_for_background(self) -> None:
        """Wait until every scheduled reconcile has finished"""
        while self._background:
            await asyncio.gather(*list(self._background), return_exceptions=True)

    async def close(self) -> None:
        for task in list(self._background):
            task.cancel()
        if self._background:
            await asyncio.gather(*list(self._background), return_exceptions=True)
        await self.client.close()


class MentorSession(_Session):
    ISSUES = ("mentor", "issues")
    DASHBOARD = ("mentor", "dashboard")
    MENTEES = ("mentor", "mentees")
    ACHIEVEMENTS = ("mentor", "achievements")

    def __init__(self, client: ApiClient, cache: Optional[QueryCache] = None):
        super().__init__(client, cache)
        self.api = MentorApi(client)

    # ==================== Reads ====================

    async def issues(self, force: bool = False) -> List[Issue]:
        return await self.cache.fetch(self.ISSUES, self.api.issues, force=force)

    async def issue(self, issue_id: str, force: bool = False) -> Issue:
        return await self.cache.fetch(
            ("mentor", "issue", issue_id), lambda: self.api.issue(issue_id), force=force
        )

    async def dashboard(self, force: bool = False):
        return await self.cache.fetch(
            self.DASHBOARD, self.api.dashboard, ttl=self.config.dashboard_cache_ttl, force=force
        )

    async def mentees(self, force: bool = False) -> List[MenteeSummary]:
        return await self.cache.fetch(self.MENTEES, self.api.mentees, force=force)

    async def mentee_profile(self, mentee_id: str, force: bool = False) -> Dict[str, Any]:
        return await self.cache.fetch(
            ("mentor", "mentee-profile", mentee_id),
            lambda: self.api.mentee_profile(mentee_id),
            force=force,
        )

    async def mentee_academics(self, mentee_id: str, force: bool = False) -> Dict[str, Any]:
        return await self.cache.fetch(
            ("mentor", "mentee-academics", mentee_id),
            lambda: self.api.mentee_academics(mentee_id),
            force=force,
        )

    async def mentee_achievements(self, mentee_id: str, force: bool = False) -> List[Achievement]:
        return await self.cache.fetch(
            ("mentor", "mentee-achievements", mentee_id),
            lambda: self.api.mentee_achievements(mentee_id),
            force=force,
        )

    async def achievements(self, type: Optional[str] = None, position: Optional[str] = None,
                           sort: Optional[str] = None, force: bool = False) -> List[Achievement]:
        return await self.cache.fetch(
            self.ACHIEVEMENTS + (type, position, sort),
            lambda: self.api.achievements(type=type, position=position, sort=sort),
            force=force,
        )

    # ==================== Mutations ====================

    def _reconcile_issues(self, issue_id: Optional[str] = None) -> None:
        self._reconcile(self.ISSUES, self.api.issues)
        self._reconcile(self.DASHBOARD, self.api.dashboard)
        if issue_id:
            self._reconcile(("mentor", "issue", issue_id), lambda: self.api.issue(issue_id))

    async def add_comment(self, issue_id: str, text: str, new_status: Optional[str] = None) -> Issue:
        issue = await self.api.add_comment(issue_id, text, new_status=new_status)
        self.cache.set(("mentor", "issue", issue_id), issue)
        self.cache.patch(self.ISSUES, lambda issues: _replace_issue(issues, issue))
        self._reconcile_issues(issue_id)
        return issue

    async def create_issue(self, mentee_id: str, issue_type: str, description: str) -> Issue:
        issue = await self.api.create_issue(mentee_id, issue_type, description)
        self.cache.set(("mentor", "issue", issue.id), issue)
        self.cache.patch(self.ISSUES, lambda issues: _prepend(issues, issue))
        self._reconcile_issues()
        return issue

    async def assign_mentee(self, email: str) -> MenteeSummary:
        mentee = await self.api.assign_mentee(email)
        summary = MenteeSummary(id=mentee.id, email=mentee.email, name=mentee.name)
        self.cache.patch(self.MENTEES, lambda mentees: list(mentees or []) + [summary])
        self._reconcile(self.MENTEES, self.api.mentees)
        self._reconcile(self.DASHBOARD, self.api.dashboard)
        return summary

    async def create_achievement(self, mentee_id: str, type: str, description: str,
                                 **fields) -> Achievement:
        achievement = await self.api.create_achievement(mentee_id, type, description, **fields)
        # Filtered listings cannot be patched without re-applying the filter
        self.cache.invalidate(self.ACHIEVEMENTS)
        key = ("mentor", "mentee-achievements", mentee_id)
        self.cache.patch(key, lambda achievements: _prepend(achievements, achievement))
        self._reconcile(key, lambda: self.api.mentee_achievements(mentee_id))
        return achievement


class MenteeSession(_Session):
    ISSUES = ("mentee", "issues")
    DASHBOARD = ("mentee", "dashboard")
    ACHIEVEMENTS = ("mentee", "achievements")
    PROFILE = ("mentee", "profile")
    ACADEMICS = ("mentee", "academics")

    def __init__(self, client: ApiClient, cache: Optional[QueryCache] = None):
        super().__init__(client, cache)
        self.api = MenteeApi(client)

    async def issues(self, force: bool = False) -> List[Issue]:
        return await self.cache.fetch(self.ISSUES, self.api.issues, force=force)

    async def issue(self, issue_id: str, force: bool = False) -> Issue:
        return await self.cache.fetch(
            ("mentee", "issue", issue_id), lambda: self.api.issue(issue_id), force=force
        )

    async def dashboard(self, force: bool = False):
        return await self.cache.fetch(self.DASHBOARD, self.api.dashboard, force=force)

    async def achievements(self, force: bool = False) -> List[Achievement]:
        return await self.cache.fetch(self.ACHIEVEMENTS, self.api.achievements, force=force)

    async def profile(self, force: bool = False):
        return await self.cache.fetch(self.PROFILE, self.api.profile, force=force)

    async def academics(self, force: bool = False):
        return await self.cache.fetch(self.ACADEMICS, self.api.academics, force=force)

    async def add_comment(self, issue_id: str, text: str) -> Comment:
        comment = await self.api.add_comment(issue_id, text)
        key = ("mentee", "issue", issue_id)

        def append(issue: Issue) -> Issue:
            return issue.model_copy(update={"comments": list(issue.comments) + [comment]})

        if self.cache.patch(key, append):
            patched = self.cache.get(key)
            self.cache.patch(self.ISSUES, lambda issues: _replace_issue(issues, patched))
        self._reconcile(key, lambda: self.api.issue(issue_id))
        self._reconcile(self.ISSUES, self.api.issues)
        return comment

    async def create_issue(self, issue_type: str, description: str) -> Issue:
        issue = await self.api.create_issue(issue_type, description)
        self.cache.set(("mentee", "issue", issue.id), issue)
        self.cache.patch(self.ISSUES, lambda issues: _prepend(issues, issue))
        self._reconcile(self.ISSUES, self.api.issues)
        self._reconcile(self.DASHBOARD, self.api.dashboard)
        return issue

    async def create_achievement(self, type: str, description: str, **fields) -> Achievement:
        achievement = await self.api.create_achievement(type, description, **fields)
        self.cache.patch(self.ACHIEVEMENTS, lambda achievements: _prepend(achievements, achievement))
        self._reconcile(self.ACHIEVEMENTS, self.api.achievements)
        self._reconcile(self.DASHBOARD, self.api.dashboard)
        return achievement

    async def save_profile(self, profile: dict, create: bool = False):
        saved = await self.api.save_profile(profile, create=create)
        self.cache.set(self.PROFILE, saved)
        self._reconcile(self.DASHBOARD, self.api.dashboard)
        return saved

    async def save_academics(self, academics: dict):
        saved = await self.api.save_academics(academics)
        self.cache.set(self.ACADEMICS, saved)
        self._reconcile(self.DASHBOARD, self.api.dashboard)
        return saved
