"""Internal types for the NYX mutation pipeline."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

# Reserved persona that disables APPLY for the user
PAUSED = "PAUSED"
DEFAULT_PERSONA = "DEFAULT"


@dataclass
class UserProfile:
    """The slice of ``profiles`` the pipeline reads."""

    id: str
    active_persona: str = DEFAULT_PERSONA
    stats: Any = field(default_factory=dict)

    @property
    def is_paused(self) -> bool:
        return self.active_persona == PAUSED

    @classmethod
    def from_row(cls, user_id: str, row: dict | None) -> "UserProfile":
        """Build from a Store row; a missing row is an unpaused default profile."""
        if not row:
            return cls(id=user_id)
        return cls(
            id=row.get("id") or user_id,
            active_persona=row.get("active_persona") or DEFAULT_PERSONA,
            stats=row.get("stats") if row.get("stats") is not None else {},
        )


@dataclass
class Action:
    """A mutation extracted from the assistant's output."""

    table: str = ""
    id: str = ""
    data: dict[str, Any] = field(default_factory=dict)
    reasoning: str = ""

    @property
    def is_applicable(self) -> bool:
        return bool(self.table) and bool(self.data)


@dataclass
class ApplyResult:
    """Outcome of one pipeline invocation."""

    executed: bool
    result_text: str


@dataclass
class AuditLogEntry:
    """One append-only ``audit_logs`` row."""

    user_id: str
    action: str
    ai_reasoning: str
    snapshot_before: dict[str, Any] = field(default_factory=dict)
    snapshot_table_name: str | None = None
    snapshot_table_id: str = "N/A"
    created_at: str = field(default_factory=lambda: datetime.now(timezone.utc).isoformat())

    def to_row(self) -> dict[str, Any]:
        return {
            "user_id": self.user_id,
            "action": self.action,
            "ai_reasoning": self.ai_reasoning,
            "snapshot_before": self.snapshot_before,
            "snapshot_table_name": self.snapshot_table_name,
            "snapshot_table_id": self.snapshot_table_id,
            "created_at": self.created_at,
        }
