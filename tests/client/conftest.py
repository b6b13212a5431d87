"""
Fixtures for the client package: a config pointed at a temp directory and
canned API payloads
"""
import uuid
from datetime import datetime, timedelta
from typing import Optional
import pytest

from reportverse_client.config import ClientConfig


@pytest.fixture
def config(tmp_path) -> ClientConfig:
    return ClientConfig(api_base_url="http://test/api", config_dir=str(tmp_path))


def user_payload(role: str = "mentee", email: Optional[str] = None) -> dict:
    return {
        "id": str(uuid.uuid4()),
        "email": email or f"{role}@x.com",
        "role": role,
        "name": role.title(),
    }


def issue_payload(status: str = "Open", age: timedelta = timedelta(0), **overrides) -> dict:
    created = datetime.utcnow() - age
    data = {
        "id": str(uuid.uuid4()),
        "mentee": user_payload("mentee"),
        "mentor": user_payload("mentor"),
        "issueType": "Academic",
        "description": "Need help",
        "status": status,
        "comments": [],
        "createdAt": created.isoformat(),
        "updatedAt": created.isoformat(),
    }
    data.update(overrides)
    return data


def envelope(data=None, **extra) -> dict:
    body = {"success": True}
    if data is not None:
        body["data"] = data
    body.update(extra)
    return body
