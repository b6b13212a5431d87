"""
Custom Exceptions for ReportVerse
=================================

Services raise these instead of HTTPException so the same rules apply
no matter which endpoint calls them. The handlers registered in
``reportverse.main`` turn every ReportVerseError into the standard
error envelope::

    {"success": false, "error": "<message>"}

Usage:
    from reportverse.core.exceptions import ResourceNotFoundError

    if not issue:
        raise ResourceNotFoundError("Issue not found")
"""

from typing import Optional, Any, Dict


class ReportVerseError(Exception):
    """Base exception for all ReportVerse errors"""

    status_code: int = 500

    def __init__(
        self,
        message: str,
        code: str = "INTERNAL_ERROR",
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(self.message)


# ============================================
# Authentication & Authorization Errors
# ============================================

class AuthenticationError(ReportVerseError):
    """Caller could not be identified"""

    status_code = 401

    def __init__(self, message: str = "Not authorized to access this route"):
        super().__init__(message, code="AUTH_FAILED")


class InvalidCredentialsError(AuthenticationError):
    """Unknown email or wrong password. Both cases look the same to the caller."""

    def __init__(self):
        super().__init__("Invalid credentials")
        self.code = "INVALID_CREDENTIALS"


class TokenExpiredError(AuthenticationError):
    """JWT token has expired"""

    def __init__(self):
        super().__init__("Your token has expired. Please log in again.")
        self.code = "TOKEN_EXPIRED"


class InvalidTokenError(AuthenticationError):
    """JWT token is invalid"""

    def __init__(self):
        super().__init__("Invalid token. Please log in again.")
        self.code = "INVALID_TOKEN"


class AuthorizationError(ReportVerseError):
    """User not authorized for this action"""

    status_code = 403

    def __init__(self, message: str = "Not authorized"):
        super().__init__(message, code="NOT_AUTHORIZED")


# ============================================
# Resource Errors (404-type)
# ============================================

class ResourceNotFoundError(ReportVerseError):
    """Requested resource does not exist"""

    status_code = 404

    def __init__(self, message: str, resource_type: Optional[str] = None):
        details = {"resource_type": resource_type} if resource_type else {}
        super().__init__(message, code="NOT_FOUND", details=details)


# ============================================
# Validation Errors (400-type)
# ============================================

class ValidationError(ReportVerseError):
    """Input validation failed"""

    status_code = 400

    def __init__(self, message: str, field: Optional[str] = None):
        details = {"field": field} if field else {}
        super().__init__(message, code="VALIDATION_ERROR", details=details)


class UnassignedMenteeError(ValidationError):
    """Mentee has no assigned mentor, so nothing can be routed to one"""

    def __init__(self):
        super().__init__("No assigned mentor found")
        self.code = "UNASSIGNED"


class InvalidTransitionError(ValidationError):
    """Requested issue status is not reachable from the current one"""

    def __init__(self, current: str, requested: str):
        super().__init__(f"Cannot change issue status from {current} to {requested}")
        self.code = "INVALID_TRANSITION"
        self.details = {"current_status": current, "requested_status": requested}


class IssueClosedError(ValidationError):
    """Closed issues accept no further comments"""

    def __init__(self):
        super().__init__("Issue is closed")
        self.code = "ISSUE_CLOSED"


# ============================================
# Conflict Errors
# ============================================

class ConflictError(ReportVerseError):
    """Write would violate a uniqueness rule"""

    status_code = 400

    def __init__(self, message: str, code: str = "CONFLICT"):
        super().__init__(message, code=code)


class DuplicateEmailError(ConflictError):
    def __init__(self):
        super().__init__("Email already in use", code="DUPLICATE_EMAIL")


class AlreadyAssignedError(ConflictError):
    def __init__(self, to_caller: bool = False):
        message = (
            "Mentee is already assigned to you"
            if to_caller
            else "Mentee is already assigned to a mentor"
        )
        super().__init__(message, code="ALREADY_ASSIGNED")


class ProfileExistsError(ConflictError):
    def __init__(self):
        super().__init__("Profile already exists", code="PROFILE_EXISTS")


class ConcurrentModificationError(ReportVerseError):
    """Two writers raced on the same record; the caller may retry"""

    status_code = 409

    def __init__(self, message: str = "Resource was modified concurrently, please retry"):
        super().__init__(message, code="CONCURRENT_MODIFICATION")


# ============================================
# Infrastructure Errors
# ============================================

class DatabaseUnavailableError(ReportVerseError):
    """Database could not be reached after all retries"""

    status_code = 500

    def __init__(self, attempts: int, last_error: Optional[str] = None):
        super().__init__(
            f"Database unavailable after {attempts} attempts",
            code="DATABASE_UNAVAILABLE",
            details={"attempts": attempts, "last_error": last_error},
        )


# ============================================
# Helper function for API responses
# ============================================

def error_response(error: ReportVerseError) -> Dict[str, Any]:
    """Convert exception to API error response format"""
    return {
        "success": False,
        "error": error.message
    }
