"""
Tests for ApiClient and the endpoint groups, against httpx.MockTransport
"""
import json
import httpx
import pytest

from reportverse_client.api import ApiClient, AuthApi, MenteeApi, MentorApi
from reportverse_client.config import ClientConfig, Credentials
from reportverse_client.errors import (
    ApiError,
    ConflictError,
    ForbiddenError,
    MalformedResponseError,
    NetworkError,
    NotFoundError,
    RequestRejectedError,
    ServerError,
    UnauthenticatedError,
)
from reportverse_client.schemas import Issue
from tests.client.conftest import envelope, issue_payload, user_payload


class Recorder:
    """Mock transport handler that remembers requests and replays one response"""

    def __init__(self, status_code=200, body=None, content=None):
        self.requests = []
        self.status_code = status_code
        self.body = body
        self.content = content

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.content is not None:
            return httpx.Response(self.status_code, content=self.content)
        return httpx.Response(self.status_code, json=self.body)


def make_client(config, handler, token="t1") -> ApiClient:
    credentials = Credentials(token=token) if token else None
    return ApiClient(config=config, credentials=credentials, transport=httpx.MockTransport(handler))


class TestRequests:

    @pytest.mark.asyncio
    async def test_bearer_and_envelope(self, config):
        recorder = Recorder(body=envelope([issue_payload()], count=1))
        client = make_client(config, recorder)

        issues = await MentorApi(client).issues()

        request = recorder.requests[0]
        assert request.url.path == "/api/mentor/issues"
        assert request.headers["Authorization"] == "Bearer t1"
        assert len(issues) == 1
        assert isinstance(issues[0], Issue)
        assert issues[0].is_pending
        await client.close()

    @pytest.mark.asyncio
    async def test_no_header_without_credentials(self, config):
        recorder = Recorder(body=envelope(user_payload("mentor"), token="tok"))
        client = make_client(config, recorder, token=None)

        await AuthApi(client).login("m@x.com", "secret123")

        assert "Authorization" not in recorder.requests[0].headers
        assert json.loads(recorder.requests[0].content) == {"email": "m@x.com", "password": "secret123"}
        await client.close()

    @pytest.mark.asyncio
    async def test_none_params_are_dropped(self, config):
        recorder = Recorder(body=envelope([]))
        client = make_client(config, recorder)

        await MentorApi(client).achievements(type="Sports")

        assert dict(recorder.requests[0].url.params) == {"type": "Sports"}
        await client.close()

    @pytest.mark.asyncio
    async def test_comment_body(self, config):
        recorder = Recorder(body=envelope(issue_payload(status="Under Review")))
        client = make_client(config, recorder)

        issue = await MentorApi(client).add_comment("abc", "please elaborate", new_status="Under Review")

        request = recorder.requests[0]
        assert request.url.path == "/api/mentor/issues/abc/comment"
        assert json.loads(request.content) == {"text": "please elaborate", "newStatus": "Under Review"}
        assert issue.status == "Under Review"
        await client.close()


class TestCredentials:

    @pytest.mark.asyncio
    async def test_login_persists_token(self, config):
        user = user_payload("mentee")
        client = make_client(config, Recorder(body=envelope(user, token="tok")), token=None)

        result = await AuthApi(client).login(user["email"], "secret123")

        saved = config.load_credentials()
        assert result.id == user["id"]
        assert client.is_authenticated
        assert saved.token == "tok"
        assert saved.role == "mentee"
        await client.close()

    @pytest.mark.asyncio
    async def test_401_purges_stored_credentials(self, config):
        config.save_credentials(Credentials(token="stale"))
        recorder = Recorder(401, {"success": False, "error": "Invalid token. Please log in again."})
        client = ApiClient.from_saved_credentials(config, transport=httpx.MockTransport(recorder))
        assert client.is_authenticated

        with pytest.raises(UnauthenticatedError) as exc_info:
            await MenteeApi(client).issues()

        assert exc_info.value.message == "Invalid token. Please log in again."
        assert client.credentials is None
        assert config.load_credentials() is None
        await client.close()

    def test_logout(self, config):
        config.save_credentials(Credentials(token="tok"))
        client = ApiClient.from_saved_credentials(config)

        AuthApi(client).logout()

        assert not client.is_authenticated
        assert config.load_credentials() is None


class TestErrors:

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status_code,error_cls", [
        (400, RequestRejectedError),
        (403, ForbiddenError),
        (404, NotFoundError),
        (409, ConflictError),
        (500, ServerError),
        (429, ApiError),
    ])
    async def test_status_mapping(self, config, status_code, error_cls):
        client = make_client(config, Recorder(status_code, {"success": False, "error": "nope"}))

        with pytest.raises(error_cls) as exc_info:
            await MentorApi(client).issue("abc")

        assert exc_info.value.status_code == status_code
        assert exc_info.value.message == "nope"
        await client.close()

    @pytest.mark.asyncio
    async def test_non_json_error_body(self, config):
        client = make_client(config, Recorder(502, content=b"Bad Gateway"))

        with pytest.raises(ServerError) as exc_info:
            await MentorApi(client).issues()

        assert exc_info.value.message == "Bad Gateway"
        await client.close()

    @pytest.mark.asyncio
    async def test_payload_with_wrong_shape(self, config):
        client = make_client(config, Recorder(body=envelope({"id": "abc"})))

        with pytest.raises(MalformedResponseError):
            await MentorApi(client).issue("abc")
        await client.close()

    @pytest.mark.asyncio
    async def test_body_that_is_not_json(self, config):
        client = make_client(config, Recorder(content=b"<html>"))

        with pytest.raises(MalformedResponseError):
            await MentorApi(client).dashboard()
        await client.close()

    @pytest.mark.asyncio
    async def test_unsuccessful_envelope(self, config):
        client = make_client(config, Recorder(body={"success": False, "error": "Server said no"}))

        with pytest.raises(ApiError) as exc_info:
            await MentorApi(client).mentees()

        assert exc_info.value.message == "Server said no"
        await client.close()

    @pytest.mark.asyncio
    async def test_login_without_token(self, config):
        client = make_client(config, Recorder(body=envelope(user_payload())), token=None)

        with pytest.raises(MalformedResponseError):
            await AuthApi(client).login("a@x.com", "secret123")
        await client.close()

    @pytest.mark.asyncio
    async def test_connection_refused(self, config):
        def refuse(request):
            raise httpx.ConnectError("connection refused", request=request)

        client = make_client(config, refuse)

        with pytest.raises(NetworkError):
            await MentorApi(client).issues()
        await client.close()


class TestClientConfig:

    def test_env_overrides(self, monkeypatch):
        monkeypatch.setenv("REPORTVERSE_API_URL", "https://reportverse.example/api")
        monkeypatch.setenv("REPORTVERSE_TOKEN", "env-token")
        monkeypatch.setenv("REPORTVERSE_POLL_INTERVAL", "60")
        monkeypatch.setenv("REPORTVERSE_PENDING_DAYS", "5")

        config = ClientConfig.load_default()

        assert config.api_base_url == "https://reportverse.example/api"
        assert config.poll_interval == 60.0
        assert config.pending_days_threshold == 5
        assert ApiClient(config=config).get_auth_headers() == {"Authorization": "Bearer env-token"}

    def test_defaults(self, config):
        assert config.default_cache_ttl == 300
        assert config.dashboard_cache_ttl == 30
        assert config.poll_interval == 3600
        assert config.pending_days_threshold == 3
        assert config.load_credentials() is None
