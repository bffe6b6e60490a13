"""Durable audit trail for the mutation pipeline."""

from typing import Any

from supabase import Client

from ..database import insert_audit_log
from ..errors import AuditWriteFailed
from ..logging_config import get_logger
from ..models import Mode
from .models import AuditLogEntry

logger = get_logger("cortex.nyx.audit")

GENERAL_TARGET = "GENERAL"


def action_label(mode: Mode | str, target_table: str | None) -> str:
    """``{mode}_{table}``, e.g. ``APPLY_tasks`` or ``SUGGEST_GENERAL``."""
    mode_value = mode.value if isinstance(mode, Mode) else str(mode)
    return f"{mode_value}_{target_table or GENERAL_TARGET}"


def build_entry(
    user_id: str,
    mode: Mode | str,
    target_table: str | None,
    target_id: str | None,
    reasoning: str,
    raw_text: str,
    snapshot: dict[str, Any] | None,
) -> AuditLogEntry:
    return AuditLogEntry(
        user_id=user_id,
        action=action_label(mode, target_table),
        ai_reasoning=reasoning or raw_text,
        snapshot_before=snapshot or {},
        snapshot_table_name=target_table,
        snapshot_table_id=target_id or "N/A",
    )


class AuditRecorder:
    """Writes exactly one ``audit_logs`` row per call to :meth:`record`."""

    def __init__(self, db: Client):
        self._db = db

    async def record(self, entry: AuditLogEntry) -> dict | None:
        """Persist the entry.

        Raises:
            AuditWriteFailed: on any Store error or timeout. Callers must not
                mutate anything after this is raised.
        """
        try:
            return await insert_audit_log(self._db, entry.to_row())
        except Exception as e:
            logger.error(f"Audit write failed for {entry.user_id} ({entry.action}): {e}")
            raise AuditWriteFailed(f"Audit log write failed: {e}") from e
