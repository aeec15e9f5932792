from typing import Any, Dict, Optional

from pydantic import BaseModel, Field


class UserResponse(BaseModel):
    """A user as shown on the admin surface (the access token is left out)."""

    key: str
    login: Optional[str] = None
    name: Optional[str] = None
    profile: Dict[str, Any] = Field(default_factory=dict)
