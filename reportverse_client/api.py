"""
ReportVerse HTTP client.

``ApiClient`` owns the httpx connection, injects the bearer token, parses the
``{success, data, ...}`` envelope into typed models and maps failures onto
``reportverse_client.errors``. The endpoint groups (``AuthApi``, ``MenteeApi``,
``MentorApi``) are thin and stateless; caching lives in ``resources``.
"""

import json
import logging
from typing import Any, Dict, List, Optional, Type

import httpx
from pydantic import ValidationError

from reportverse_client.config import ClientConfig, Credentials
from reportverse_client.errors import (
    ApiError,
    MalformedResponseError,
    NetworkError,
    UnauthenticatedError,
    error_for_status,
)
from reportverse_client.schemas import (
    Achievement,
    AuthUser,
    Envelope,
    ErrorBody,
    Issue,
    Comment,
    Me,
    MenteeDashboard,
    MenteeSummary,
    MentorDashboard,
    UserRef,
)

logger = logging.getLogger(__name__)


class ApiClient:
    """Async client for the ReportVerse API. One instance per session."""

    def __init__(
        self,
        config: Optional[ClientConfig] = None,
        credentials: Optional[Credentials] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.config = config or ClientConfig.load_default()
        if credentials is None and self.config.token:
            credentials = Credentials(token=self.config.token)
        self.credentials = credentials
        self._client = httpx.AsyncClient(
            base_url=self.config.api_base_url,
            timeout=self.config.timeout,
            transport=transport,
        )

    @classmethod
    def from_saved_credentials(cls, config: Optional[ClientConfig] = None, **kwargs) -> "ApiClient":
        config = config or ClientConfig.load_default()
        return cls(config=config, credentials=config.load_credentials(), **kwargs)

    @property
    def is_authenticated(self) -> bool:
        return self.credentials is not None

    def get_auth_headers(self) -> Dict[str, str]:
        if not self.credentials:
            return {}
        return {"Authorization": f"Bearer {self.credentials.token}"}

    def set_credentials(self, credentials: Credentials, persist: bool = True) -> None:
        self.credentials = credentials
        if persist:
            self.config.save_credentials(credentials)

    def clear_credentials(self) -> None:
        self.credentials = None
        self.config.clear_credentials()

    async def close(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "ApiClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    # ==================== Transport ====================

    async def request(
        self,
        method: str,
        path: str,
        model: Any = None,
        json_body: Optional[Dict[str, Any]] = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> Envelope:
        """Send one request and return the parsed envelope, or raise ``ApiError``"""
        if params:
            params = {k: v for k, v in params.items() if v is not None}

        try:
            response = await self._client.request(
                method,
                path,
                json=json_body,
                params=params or None,
                headers=self.get_auth_headers(),
            )
        except httpx.TimeoutException as e:
            raise NetworkError(f"Request to {path} timed out") from e
        except httpx.HTTPError as e:
            raise NetworkError(f"Could not reach server: {e}") from e

        if response.status_code >= 400:
            raise self._error_from(response)

        try:
            envelope = Envelope[model or Any].model_validate(response.json())
        except (json.JSONDecodeError, ValidationError) as e:
            raise MalformedResponseError(
                f"Unexpected response from {method} {path}", response.status_code
            ) from e

        if not envelope.success:
            raise ApiError(envelope.error or "Request failed", response.status_code)
        return envelope

    def _error_from(self, response: httpx.Response) -> ApiError:
        try:
            message = ErrorBody.model_validate(response.json()).error
        except (json.JSONDecodeError, ValidationError):
            message = response.text or response.reason_phrase

        error = error_for_status(response.status_code, message)
        if isinstance(error, UnauthenticatedError) and self.credentials is not None:
            logger.info("Server rejected the stored token; clearing credentials")
            self.clear_credentials()
        return error

    async def get(self, path: str, model: Any = None, **params) -> Envelope:
        return await self.request("GET", path, model, params=params)

    async def post(self, path: str, body: Dict[str, Any], model: Any = None) -> Envelope:
        return await self.request("POST", path, model, json_body=body)

    async def put(self, path: str, body: Dict[str, Any], model: Any = None) -> Envelope:
        return await self.request("PUT", path, model, json_body=body)


class AuthApi:
    def __init__(self, client: ApiClient):
        self.client = client

    async def _authenticate(self, path: str, body: Dict[str, Any]) -> AuthUser:
        envelope = await self.client.post(path, body, AuthUser)
        if not envelope.token:
            raise MalformedResponseError(f"No token in response from {path}")
        user = envelope.data
        self.client.set_credentials(
            Credentials(token=envelope.token, user_id=user.id, email=user.email, role=user.role)
        )
        return user

    async def register_mentor(self, email: str, password: str, name: Optional[str] = None,
                              phone: Optional[str] = None) -> AuthUser:
        return await self._authenticate(
            "/auth/register/mentor",
            {"email": email, "password": password, "name": name, "phone": phone},
        )

    async def register_mentee(self, email: str, password: str, name: Optional[str] = None,
                              phone: Optional[str] = None, mentor_id: Optional[str] = None) -> AuthUser:
        return await self._authenticate(
            "/auth/register/mentee",
            {"email": email, "password": password, "name": name, "phone": phone, "mentorId": mentor_id},
        )

    async def login(self, email: str, password: str) -> AuthUser:
        return await self._authenticate("/auth/login", {"email": email, "password": password})

    def logout(self) -> None:
        self.client.clear_credentials()

    async def me(self) -> Me:
        return (await self.client.get("/auth/me", Me)).data


class MenteeApi:
    def __init__(self, client: ApiClient):
        self.client = client

    async def dashboard(self) -> MenteeDashboard:
        return (await self.client.get("/mentee/dashboard", MenteeDashboard)).data

    async def issues(self) -> List[Issue]:
        return (await self.client.get("/mentee/issues", List[Issue])).data or []

    async def issue(self, issue_id: str) -> Issue:
        return (await self.client.get(f"/mentee/issues/{issue_id}", Issue)).data

    async def create_issue(self, issue_type: str, description: str) -> Issue:
        body = {"issueType": issue_type, "description": description}
        return (await self.client.post("/mentee/issues", body, Issue)).data

    async def add_comment(self, issue_id: str, text: str) -> Comment:
        body = {"text": text}
        return (await self.client.post(f"/mentee/issues/{issue_id}/comments", body, Comment)).data

    async def achievements(self) -> List[Achievement]:
        return (await self.client.get("/mentee/achievements", List[Achievement])).data or []

    async def create_achievement(self, type: str, description: str, position: str = "N/A",
                                 date_of_achievement: Optional[str] = None, is_completed: bool = True) -> Achievement:
        body = {
            "type": type,
            "position": position,
            "description": description,
            "dateOfAchievement": date_of_achievement,
            "isCompleted": is_completed,
        }
        return (await self.client.post("/mentee/achievements", body, Achievement)).data

    async def profile(self) -> Dict[str, Any]:
        return (await self.client.get("/mentee/profile")).data

    async def save_profile(self, profile: Dict[str, Any], create: bool = False) -> Dict[str, Any]:
        if create:
            return (await self.client.post("/mentee/profile", profile)).data
        return (await self.client.put("/mentee/profile", profile)).data

    async def academics(self) -> Dict[str, Any]:
        return (await self.client.get("/mentee/academics")).data

    async def save_academics(self, academics: Dict[str, Any]) -> Dict[str, Any]:
        return (await self.client.post("/mentee/academics", academics)).data


class MentorApi:
    def __init__(self, client: ApiClient):
        self.client = client

    async def dashboard(self) -> MentorDashboard:
        return (await self.client.get("/mentor/dashboard", MentorDashboard)).data

    async def mentees(self) -> List[MenteeSummary]:
        return (await self.client.get("/mentor/mentees", List[MenteeSummary])).data or []

    async def assign_mentee(self, email: str) -> UserRef:
        return (await self.client.post("/mentor/mentees/assign", {"email": email}, UserRef)).data

    async def mentee_profile(self, mentee_id: str) -> Dict[str, Any]:
        """The profile, or a placeholder with ``profileCompleted: false`` when none exists"""
        envelope = await self.client.get(f"/mentor/mentees/{mentee_id}/profile")
        profile = dict(envelope.data or {})
        profile["profileCompleted"] = bool(envelope.profile_completed)
        return profile

    async def mentee_academics(self, mentee_id: str) -> Dict[str, Any]:
        return (await self.client.get(f"/mentor/mentees/{mentee_id}/academics")).data

    async def mentee_achievements(self, mentee_id: str) -> List[Achievement]:
        path = f"/mentor/mentees/{mentee_id}/achievements"
        return (await self.client.get(path, List[Achievement])).data or []

    async def issues(self) -> List[Issue]:
        return (await self.client.get("/mentor/issues", List[Issue])).data or []

    async def issue(self, issue_id: str) -> Issue:
        return (await self.client.get(f"/mentor/issues/{issue_id}", Issue)).data

    async def create_issue(self, mentee_id: str, issue_type: str, description: str) -> Issue:
        body = {"menteeId": mentee_id, "issueType": issue_type, "description": description}
        return (await self.client.post("/mentor/issues", body, Issue)).data

    async def add_comment(self, issue_id: str, text: str, new_status: Optional[str] = None) -> Issue:
        body = {"text": text, "newStatus": new_status}
        return (await self.client.post(f"/mentor/issues/{issue_id}/comment", body, Issue)).data

    async def achievements(self, type: Optional[str] = None, position: Optional[str] = None,
                           sort: Optional[str] = None) -> List[Achievement]:
        envelope = await self.client.get(
            "/mentor/achievements", List[Achievement], type=type, position=position, sort=sort
        )
        return envelope.data or []

    async def create_achievement(self, mentee_id: str, type: str, description: str,
                                 position: str = "N/A", date_of_achievement: Optional[str] = None,
                                 is_completed: bool = True) -> Achievement:
        body = {
            "menteeId": mentee_id,
            "type": type,
            "position": position,
            "description": description,
            "dateOfAchievement": date_of_achievement,
            "isCompleted": is_completed,
        }
        return (await self.client.post("/mentor/achievements", body, Achievement)).data
