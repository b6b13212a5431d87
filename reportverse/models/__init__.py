# Re-export all models for convenient imports
from reportverse.models.user import User, UserRole
from reportverse.models.mentor_assignment import MentorAssignment
from reportverse.models.issue import Issue, IssueComment, IssueStatus, IssueType, PENDING_STATUSES
from reportverse.models.achievement import Achievement, AchievementPosition, AchievementType
from reportverse.models.academic_record import AcademicRecord
from reportverse.models.mentee_profile import MenteeProfile

__all__ = [
    # User
    "User",
    "UserRole",
    "MentorAssignment",
    # Issues
    "Issue",
    "IssueComment",
    "IssueStatus",
    "IssueType",
    "PENDING_STATUSES",
    # Mentee records
    "Achievement",
    "AchievementPosition",
    "AchievementType",
    "AcademicRecord",
    "MenteeProfile",
]
