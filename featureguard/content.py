"""
Content schema - structural check for content read outputs.

Content reads don't use an allow-list; the record is validated against this
model and returned with unknown keys dropped. Fields that are not present
on the source stay absent in the result.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, ValidationError

from featureguard.guard import violation


class ContentStatus(str, Enum):
    """Lifecycle of a content item."""

    DRAFT = "draft"
    PUBLISHED = "published"
    DELETED = "deleted"


class ContentRecord(BaseModel):
    """A content item as it may leave the API."""

    model_config = ConfigDict(extra="ignore", from_attributes=True)

    # Storage drivers hand back UUID objects, API fixtures use strings
    id: UUID | str
    owner_id: UUID | str
    parent_id: UUID | str | None = None
    slug: str
    title: str | None = None
    body: str | None = None
    status: ContentStatus
    source_url: str | None = None

    # Timestamps
    created_at: datetime
    updated_at: datetime
    published_at: datetime | None = None
    deleted_at: datetime | None = None

    # Joined fields
    owner_username: str | None = None
    tabcoins: int | None = None
    children_deep_count: int | None = None


def validate_content(content: Any) -> dict[str, Any]:
    """
    Validate one content record and return its known fields.

    Raises ContractViolation when the record does not fit the schema; a
    malformed record coming out of storage is a caller bug, not a user error.
    """
    try:
        record = ContentRecord.model_validate(content)
    except ValidationError as e:
        raise violation(
            "Content output does not match the content schema.",
            context={"errors": e.errors(include_url=False)},
        ) from e

    return record.model_dump(mode="json", exclude_unset=True)
