"""Last-write-wins reconciliation of offline client edits.

Changes are applied strictly in input order, each as its own unit of work:
a failure is reported in that change's outcome and the batch continues.
There is no lock between the ``last_modified`` read and the upsert, so two
devices syncing the same record concurrently can both win; the later write
silently replaces the earlier one.
"""

from datetime import datetime, timezone
from typing import Any

from dateutil.parser import parse
from supabase import Client

from ..config import Settings
from ..database import get_last_modified, upsert_record
from ..logging_config import get_logger, log_sync_operation
from ..models import LocalChange, SyncOutcome

logger = get_logger("cortex.sync.engine")


class InvalidChange(ValueError):
    """A change that cannot be reconciled as submitted."""


def parse_timestamp(value: Any) -> datetime:
    """Parse an ISO-8601 timestamp; naive values are taken as UTC."""
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str) and value.strip():
        try:
            parsed = parse(value)
        except (ValueError, OverflowError) as e:
            raise InvalidChange(f"Invalid last_modified: {value!r}") from e
    else:
        raise InvalidChange("Missing last_modified")
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def server_wins(server_last_modified: Any, client_last_modified: datetime) -> bool:
    """True iff the server copy is strictly newer than the client's."""
    return parse_timestamp(server_last_modified) > client_last_modified


def _record_id(data: dict[str, Any]) -> str | None:
    record_id = data.get("id")
    if record_id is None or record_id == "":
        return None
    return str(record_id)


class ReconciliationEngine:
    """Applies a client's batch of changes against server state."""

    def __init__(self, db: Client, settings: Settings):
        self._db = db
        self._settings = settings

    async def reconcile(self, user_id: str, changes: list[LocalChange]) -> list[SyncOutcome]:
        """One outcome per change, in input order."""
        outcomes: list[SyncOutcome] = []
        for change in changes:
            outcome = await self._reconcile_one(user_id, change)
            log_sync_operation(user_id, outcome.table, outcome.id, outcome.status, outcome.error)
            outcomes.append(outcome)
        return outcomes

    async def _reconcile_one(self, user_id: str, change: LocalChange) -> SyncOutcome:
        table = change.table
        data = change.data
        record_id = _record_id(data)
        try:
            if record_id is None:
                raise InvalidChange("Missing record id")
            if not self._settings.is_writable_table(table):
                raise InvalidChange(f"Table '{table}' is not writable")
            client_time = parse_timestamp(data.get("last_modified"))

            server = await get_last_modified(self._db, table, record_id)
            if server is not None and server.get("last_modified") is not None:
                if server_wins(server["last_modified"], client_time):
                    return SyncOutcome(table=table, id=record_id, status="conflict_ignored")

            record = {
                **data,
                "user_id": user_id,
                "last_modified": datetime.now(timezone.utc).isoformat(),
            }
            await upsert_record(self._db, table, record)
            return SyncOutcome(table=table, id=record_id, status="synced")
        except InvalidChange as e:
            return SyncOutcome(table=table, id=record_id, status="error", error=str(e))
        except Exception as e:
            logger.error(f"Sync of {table}/{record_id} failed: {type(e).__name__}: {e}")
            return SyncOutcome(table=table, id=record_id, status="error", error=str(e) or type(e).__name__)
