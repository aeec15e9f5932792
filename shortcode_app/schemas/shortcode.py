from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from shortcode_app.storage.strategies import StoredRecord


class ShortcodeResponse(BaseModel):
    """Public shape of a shortcode, whatever the stored representation."""

    shortcode: str
    redirect: str
    status: int


class RequestContext(BaseModel):
    """
    Requester metadata captured for creation and invocation audit entries.

    Field aliases keep the stored documents camelCased (``baseUrl``).
    """

    protocol: str
    ip: Optional[str] = None
    method: str
    path: str
    base_url: str = Field("", alias="baseUrl")
    params: Dict[str, Any] = Field(default_factory=dict)
    query: Dict[str, Any] = Field(default_factory=dict)
    body: Dict[str, Any] = Field(default_factory=dict)

    model_config = ConfigDict(populate_by_name=True)

    def to_props(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)


class ShortcodeStats(ShortcodeResponse):
    """Admin view of a shortcode with its audit trail."""

    creation: Optional[Dict[str, Any]] = None
    invocations: List[Dict[str, Any]] = Field(default_factory=list)


def format_shortcode_record(record: StoredRecord) -> ShortcodeResponse:
    """Normalize a stored shortcode record into ``{shortcode, redirect, status}``."""
    return ShortcodeResponse(
        shortcode=record.key,
        redirect=record.props["redirect"],
        status=int(record.props["status"]),
    )
