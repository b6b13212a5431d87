"""
Issue Lifecycle Service
Creates issues, lists them per tenant, appends comments and moves status
"""

from typing import List, Optional, Tuple

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from reportverse.core.exceptions import (
    AuthorizationError,
    ConcurrentModificationError,
    ResourceNotFoundError,
    UnassignedMenteeError,
    ValidationError,
)
from reportverse.core.logging_config import logger
from reportverse.core.types import utcnow
from reportverse.models.issue import Issue, IssueComment, IssueType
from reportverse.models.user import User
from reportverse.modules.issues.lifecycle import apply_transition, ensure_open_for_comments, parse_status
from reportverse.services.identity_service import IdentityService


class IssueService:
    """Service for the issue-and-comment lifecycle"""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.identity = IdentityService(db)

    async def _load(self, issue_id: str) -> Optional[Issue]:
        result = await self.db.execute(
            select(Issue)
            .where(Issue.id == issue_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def _insert(self, mentee_id: str, mentor_id: str, issue_type: IssueType, description: str) -> Issue:
        issue = Issue(
            mentee_id=mentee_id,
            mentor_id=mentor_id,
            issue_type=issue_type,
            description=description,
        )
        self.db.add(issue)
        await self.db.commit()
        logger.log_issue_event("created", issue.id, mentee_id=mentee_id, mentor_id=mentor_id,
                               issue_type=issue_type.value)
        return await self._load(issue.id)

    # =====================================================
    # CREATE
    # =====================================================

    async def create(self, mentee: User, issue_type: IssueType, description: str) -> Issue:
        """Raise an issue to the mentee's current mentor"""
        mentor_id = await self.identity.get_assigned_mentor_id(mentee.id)
        if mentor_id is None:
            raise UnassignedMenteeError()
        return await self._insert(mentee.id, mentor_id, issue_type, description)

    async def create_for_mentee(
        self, mentor: User, mentee_id: str, issue_type: IssueType, description: str
    ) -> Issue:
        """Mentor files an issue on behalf of a mentee on their roster"""
        if not await self.identity.is_in_roster(mentor.id, mentee_id):
            raise AuthorizationError("Not authorized to create issues for this mentee")
        return await self._insert(mentee_id, mentor.id, issue_type, description)

    # =====================================================
    # READ
    # =====================================================

    async def list_for_mentee(self, mentee_id: str) -> List[Issue]:
        result = await self.db.execute(
            select(Issue).where(Issue.mentee_id == mentee_id).order_by(Issue.created_at.desc())
        )
        return list(result.scalars().all())

    async def list_for_mentor(self, mentor_id: str) -> List[Issue]:
        result = await self.db.execute(
            select(Issue).where(Issue.mentor_id == mentor_id).order_by(Issue.created_at.desc())
        )
        return list(result.scalars().all())

    async def get(self, issue_id: str, caller: User) -> Issue:
        issue = await self._load(issue_id)
        if issue is None:
            raise ResourceNotFoundError("Issue not found", resource_type="issue")
        if caller.id not in (issue.mentee_id, issue.mentor_id):
            raise AuthorizationError("Not authorized to access this issue")
        return issue

    # =====================================================
    # COMMENTS & STATUS
    # =====================================================

    async def add_comment(
        self,
        issue_id: str,
        caller: User,
        text: Optional[str],
        new_status: Optional[str] = None,
    ) -> Tuple[Issue, IssueComment]:
        """
        Append a comment and optionally move the issue to ``new_status``.

        Returns the reloaded issue and the new comment, which is always the
        last element of ``issue.comments``.
        """
        if not text or not text.strip():
            raise ValidationError("Comment text is required", field="text")

        issue = await self.get(issue_id, caller)
        ensure_open_for_comments(issue.status)

        transition = None
        if new_status is not None:
            requested = parse_status(new_status)
            if requested is None:
                logger.warning(
                    f"Ignoring unknown status '{new_status}' for issue {issue.id}",
                    extra={"event_type": "issue", "issue_id": issue.id}
                )
            else:
                transition = apply_transition(issue.status, requested)

        comment = IssueComment(
            issue_id=issue.id,
            author_id=caller.id,
            position=len(issue.comments),
            text=text,
        )
        self.db.add(comment)
        if transition is not None and transition.changed:
            issue.status = transition.to_status
        issue.updated_at = utcnow()

        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise ConcurrentModificationError()

        logger.log_issue_event("commented", issue_id, author_id=caller.id, position=comment.position)
        if transition is not None and transition.changed:
            logger.log_issue_event(
                f"status {transition.from_status.value} -> {transition.to_status.value}",
                issue_id, author_id=caller.id,
            )

        issue = await self._load(issue_id)
        return issue, issue.comments[-1]
