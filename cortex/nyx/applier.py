"""Mutation applier: the audited path from an assistant action to the Store.

Per invocation::

    START -> PAUSE_CHECK -> SNAPSHOT -> AUDIT -> [APPLY] -> DONE

The pause check is the only exit that skips the audit row. Once the audit
row is written it stands, whatever happens to the apply step.
"""

from datetime import datetime, timezone
from typing import Any

from supabase import Client

from ..config import Settings
from ..database import get_record, upsert_record
from ..errors import ApplyFailed, AuditWriteFailed, Forbidden
from ..logging_config import get_logger, log_mutation_event
from ..models import Mode
from .audit import AuditRecorder, action_label, build_entry
from .models import Action, ApplyResult, UserProfile

logger = get_logger("cortex.nyx.applier")

PAUSED_MESSAGE = "System PAUSED. Cannot APPLY changes."


def ensure_not_paused(profile: UserProfile, mode: Mode | str) -> None:
    """Raise :class:`Forbidden` when an APPLY is attempted on a paused profile."""
    if profile.is_paused and Mode(mode) == Mode.APPLY:
        raise Forbidden(PAUSED_MESSAGE)


def build_mutation(action: Action, user_id: str) -> dict[str, Any]:
    """Record to upsert for an action; ``last_modified`` is always ours."""
    record = dict(action.data)
    if action.id and "id" not in record:
        record["id"] = action.id
    record["user_id"] = user_id
    record["last_modified"] = datetime.now(timezone.utc).isoformat()
    return record


class MutationApplier:
    """Applies (or just audits) one assistant action for one user."""

    def __init__(self, db: Client, settings: Settings, recorder: AuditRecorder | None = None):
        self._db = db
        self._settings = settings
        self._recorder = recorder or AuditRecorder(db)

    async def snapshot(self, target_table: str | None, target_id: str | None) -> dict[str, Any]:
        """Current state of the target record.

        ``{}`` when untargeted, absent, or unreadable; a failed read is logged
        and the call carries on to the audit step.
        """
        if not (target_table and target_id):
            return {}
        try:
            record = await get_record(self._db, target_table, target_id)
        except Exception as e:
            logger.warning(f"Snapshot of {target_table}/{target_id} failed: {type(e).__name__}: {e}")
            return {}
        return record or {}

    async def apply(
        self,
        user_id: str,
        profile: UserProfile,
        mode: Mode | str,
        target_table: str | None,
        target_id: str | None,
        action: Action,
        raw_text: str = "",
    ) -> ApplyResult:
        """Run the pipeline for one action.

        Raises:
            Forbidden: APPLY while the profile is paused. Nothing is written.
            AuditWriteFailed: the audit row could not be persisted.
            ApplyFailed: the Store rejected the mutation; the audit row stands.
        """
        mode = Mode(mode)
        label = action_label(mode, target_table)

        ensure_not_paused(profile, mode)

        snapshot = await self.snapshot(target_table, target_id)

        entry = build_entry(
            user_id=user_id,
            mode=mode,
            target_table=target_table,
            target_id=target_id,
            reasoning=action.reasoning,
            raw_text=raw_text,
            snapshot=snapshot,
        )
        try:
            await self._recorder.record(entry)
        except AuditWriteFailed as e:
            log_mutation_event(user_id, label, "audit", False, e.message)
            raise
        log_mutation_event(user_id, label, "audit", True)

        if mode != Mode.APPLY or not action.is_applicable:
            return ApplyResult(executed=False, result_text=raw_text)

        if not self._settings.is_writable_table(action.table):
            log_mutation_event(user_id, label, "apply", False, f"table not writable: {action.table}")
            raise ApplyFailed(f"Table '{action.table}' is not writable")

        try:
            await upsert_record(self._db, action.table, build_mutation(action, user_id))
        except Exception as e:
            logger.error(f"Apply to {action.table} failed for {user_id}: {e}")
            log_mutation_event(user_id, label, "apply", False, str(e))
            raise ApplyFailed(str(e)) from e

        log_mutation_event(user_id, label, "apply", True)
        return ApplyResult(executed=True, result_text=raw_text)
