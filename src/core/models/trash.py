"""Pydantic models for trash listings and purge results."""

from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class TrashMetadata(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    deleted_at: str = ""
    deleted_by: str | None = None
    expires_at: str = ""
    original_key: str | None = None


class TrashItem(BaseModel):
    """Display projection of a tombstone; type-specific fields come from its backup."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    user_id: str
    record_type: str
    metadata: TrashMetadata
    details: dict[str, Any] = {}

    def to_dict(self) -> dict[str, Any]:
        out = self.model_dump(by_alias=True, exclude={"details"}, exclude_none=True)
        out.update(self.details)
        return out


class PurgeSummary(BaseModel):
    checked: int = 0
    deleted: int = 0
    errors: int = 0
