"""Pydantic models for API requests and responses."""

from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

# =============================================================================
# NYX Models
# =============================================================================


class Mode(str, Enum):
    """How the assistant's suggestion is handled."""

    SUGGEST = "SUGGEST"
    APPLY = "APPLY"


class ThinkRequest(BaseModel):
    """Request to the NYX assistant."""

    prompt: str
    context: Any = None
    mode: Mode
    target_table: str | None = None
    target_id: str | None = None


class ThinkResponse(BaseModel):
    """Assistant output and whether a mutation was applied."""

    result: str
    mode: Mode
    executed: bool


# =============================================================================
# Sync Models
# =============================================================================


class LocalChange(BaseModel):
    """A single record edited while the client was offline.

    ``data`` is kept free-form; ``id`` and ``last_modified`` are checked per
    change so one bad entry cannot fail the whole batch.
    """

    table: str
    data: dict[str, Any]


class SyncRequest(BaseModel):
    """Batch of offline edits to reconcile."""

    model_config = ConfigDict(populate_by_name=True)

    local_changes: list[LocalChange] = Field(..., alias="localChanges")


SyncStatus = Literal["synced", "conflict_ignored", "error"]


class SyncOutcome(BaseModel):
    """Result of reconciling one change."""

    table: str
    id: str | None
    status: SyncStatus
    error: str | None = None


class SyncResponse(BaseModel):
    """Response from a sync batch."""

    status: str = "Synchronization Complete"
    results: list[SyncOutcome]


# =============================================================================
# Import Models
# =============================================================================


class ScrapeRequest(BaseModel):
    """Request to import course modules from a web page or playlist."""

    model_config = ConfigDict(populate_by_name=True)

    url: str = Field(..., min_length=1)
    type: str | None = None  # "youtube_playlist" or anything else for HTML
    course_id: str | int = Field(..., alias="courseId")


class ScrapeResponse(BaseModel):
    """Imported modules."""

    message: str
    modules: list[dict[str, Any]]
    source: str | None = None
