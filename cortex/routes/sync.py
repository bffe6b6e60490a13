"""Offline sync route."""

from typing import Annotated

from fastapi import APIRouter, Depends

from ..auth import CurrentUser
from ..config import Settings, get_settings
from ..database import Database
from ..logging_config import get_logger
from ..models import SyncRequest, SyncResponse
from ..sync import ReconciliationEngine

logger = get_logger("cortex.sync")
router = APIRouter(prefix="/api", tags=["sync"])


@router.post("/sync", response_model=SyncResponse, response_model_exclude_none=True)
async def sync_changes(
    request: SyncRequest,
    auth: CurrentUser,
    db: Database,
    settings: Annotated[Settings, Depends(get_settings)],
):
    """
    Reconcile offline edits using last-write-wins.

    Every change gets an outcome (synced, conflict_ignored or error) in the
    order submitted; per-change failures never fail the request.
    """
    logger.info(f"SYNC | {auth.user_id} | {len(request.local_changes)} changes")

    engine = ReconciliationEngine(db, settings)
    results = await engine.reconcile(auth.user_id, request.local_changes)

    errors = sum(1 for r in results if r.status == "error")
    conflicts = sum(1 for r in results if r.status == "conflict_ignored")
    logger.info(
        f"SYNC COMPLETE | {auth.user_id} | synced={len(results) - errors - conflicts} "
        f"conflicts={conflicts} errors={errors}"
    )
    return SyncResponse(results=results)
