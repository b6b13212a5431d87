from pydantic import BaseModel
from pydantic.alias_generators import to_camel
from typing import Any, Dict, Optional
from datetime import datetime


class CamelModel(BaseModel):
    """Base for every API schema: snake_case in Python, camelCase on the wire"""

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True


class UserRef(CamelModel):
    """A user as seen from inside another resource"""
    id: str
    email: str
    role: str
    name: Optional[str] = None


def dump(value: Any) -> Any:
    """Serialize schemas (or lists of them) the way the API sends them"""
    if isinstance(value, BaseModel):
        return value.model_dump(by_alias=True, mode="json")
    if isinstance(value, list):
        return [dump(item) for item in value]
    return value


def success(data: Any = None, **extra: Any) -> Dict[str, Any]:
    """Build the ``{success: true, data, ...}`` envelope"""
    body: Dict[str, Any] = {"success": True}
    if data is not None:
        body["data"] = dump(data)
    body.update(extra)
    return body


def iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


def user_ref(user) -> UserRef:
    return UserRef(id=user.id, email=user.email, role=user.role.value, name=user.name)
