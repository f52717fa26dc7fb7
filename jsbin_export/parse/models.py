"""Data models for the exported list."""
from datetime import datetime, timezone
from typing import Any, Optional, Union

import orjson
from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, model_validator


def utc_now_iso() -> str:
    """Current UTC time as ISO-8601 with millisecond precision and a Z suffix."""
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


class ListItem(BaseModel):
    """One saved bin as returned by the list endpoint."""

    # Fields the service adds (summary, visibility, ...) are kept as-is
    model_config = ConfigDict(extra="allow", frozen=True)

    url: str = Field(..., description="Path of the bin, e.g. /abc/3")
    code: str
    revision: Union[int, str]
    last_updated: Optional[str] = Field(default=None, description="ISO-8601 timestamp")

    # Key order of the payload the item was built from
    _keys: tuple[str, ...] = PrivateAttr(default=())

    @model_validator(mode="wrap")
    @classmethod
    def remember_key_order(cls, data: Any, handler):
        item = handler(data)
        if isinstance(data, dict):
            item._keys = tuple(data)
        return item

    @property
    def filename(self) -> str:
        return f"{self.code}-{self.revision}.html"

    @property
    def label(self) -> str:
        return f"{self.code}/{self.revision}"

    def to_dict(self) -> dict:
        """The item as the service sent it: same keys, same order."""
        data = self.model_dump(mode="json", exclude_unset=True)
        position = {key: i for i, key in enumerate(self._keys)}
        return dict(sorted(data.items(), key=lambda kv: position.get(kv[0], len(position))))


class ExportSnapshot(BaseModel):
    """Everything known about one export run, saved as data.json."""

    model_config = ConfigDict(populate_by_name=True)

    username: str
    last_exported: str = Field(default_factory=utc_now_iso)
    items: list[ListItem] = Field(default_factory=list, alias="list")

    def to_dict(self) -> dict:
        data = self.model_dump(mode="json", by_alias=True, exclude={"items"})
        data["list"] = [item.to_dict() for item in self.items]
        return data

    def to_json(self) -> bytes:
        """Pretty-printed JSON, two-space indent."""
        return orjson.dumps(self.to_dict(), option=orjson.OPT_INDENT_2)
