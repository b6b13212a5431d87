"""
ReportVerse client: typed API access, a per-session query cache and the
pending-issue notification poller.
"""

from reportverse_client.api import ApiClient, AuthApi, MenteeApi, MentorApi
from reportverse_client.cache import CacheEntry, QueryCache
from reportverse_client.config import ClientConfig, Credentials
from reportverse_client.errors import ApiError, MalformedResponseError, UnauthenticatedError
from reportverse_client.notifications import ConsoleNotifier, IssueNotificationPoller
from reportverse_client.resources import MenteeSession, MentorSession

__all__ = [
    "ApiClient",
    "AuthApi",
    "MenteeApi",
    "MentorApi",
    "CacheEntry",
    "QueryCache",
    "ClientConfig",
    "Credentials",
    "ApiError",
    "MalformedResponseError",
    "UnauthenticatedError",
    "ConsoleNotifier",
    "IssueNotificationPoller",
    "MenteeSession",
    "MentorSession",
]
