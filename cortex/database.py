"""Database utilities for Supabase integration.

The ``supabase`` client is synchronous; every call goes through
:func:`run_store_call`, which runs it off the event loop with a timeout.
"""

import asyncio
from collections.abc import Callable
from typing import Annotated, Any, TypeVar

from fastapi import Depends

from supabase import Client, create_client

from .config import Settings, get_settings
from .errors import StoreTimeout

T = TypeVar("T")

_supabase_client: Client | None = None


def get_supabase_client(settings: Settings | None = None) -> Client:
    """Get cached Supabase client."""
    global _supabase_client
    if _supabase_client is None:
        if settings is None:
            settings = get_settings()
        # Prefer new secret key, fall back to legacy service_role_key
        api_key = settings.supabase_secret_key or settings.supabase_service_role_key
        if not api_key:
            raise ValueError("Either SUPABASE_SECRET_KEY or SUPABASE_SERVICE_ROLE_KEY must be set")
        _supabase_client = create_client(settings.supabase_url, api_key)
    return _supabase_client


def get_db(settings: Annotated[Settings, Depends(get_settings)]) -> Client:
    """FastAPI dependency for Supabase client."""
    return get_supabase_client(settings)


# Type alias for dependency injection
Database = Annotated[Client, Depends(get_db)]


# =============================================================================
# Table Names
# =============================================================================

PROFILES_TABLE = "profiles"
AUDIT_LOGS_TABLE = "audit_logs"
MODULES_TABLE = "modules"


# =============================================================================
# Call wrapper
# =============================================================================


async def run_store_call(fn: Callable[[], T], timeout: float | None = None) -> T:
    """Run a blocking Store call in a worker thread.

    Raises:
        StoreTimeout: if ``timeout`` seconds elapse first.
    """
    if timeout is None:
        timeout = get_settings().store_timeout_seconds
    try:
        return await asyncio.wait_for(asyncio.to_thread(fn), timeout=timeout)
    except asyncio.TimeoutError:
        raise StoreTimeout(f"Store call timed out after {timeout}s") from None


# =============================================================================
# Record Operations
# =============================================================================


async def get_profile(db: Client, user_id: str) -> dict | None:
    """Fetch the user's profile (persona and stats)."""

    def _query():
        return (
            db.table(PROFILES_TABLE)
            .select("id, active_persona, stats")
            .eq("id", user_id)
            .limit(1)
            .execute()
        )

    result = await run_store_call(_query)
    return result.data[0] if result.data else None


async def get_record(db: Client, table: str, record_id: str) -> dict | None:
    """Point-read a full record by id."""

    def _query():
        return db.table(table).select("*").eq("id", record_id).limit(1).execute()

    result = await run_store_call(_query)
    return result.data[0] if result.data else None


async def get_last_modified(db: Client, table: str, record_id: str) -> dict | None:
    """Point-read only the ``last_modified`` column of a record."""

    def _query():
        return db.table(table).select("last_modified").eq("id", record_id).limit(1).execute()

    result = await run_store_call(_query)
    return result.data[0] if result.data else None


async def upsert_record(db: Client, table: str, record: dict[str, Any]) -> dict | None:
    """Insert or update a record, resolving conflicts on ``id``."""

    def _upsert():
        return db.table(table).upsert(record, on_conflict="id").execute()

    result = await run_store_call(_upsert)
    return result.data[0] if result.data else None


async def insert_audit_log(db: Client, entry: dict[str, Any]) -> dict | None:
    """Append one row to the audit log."""

    def _insert():
        return db.table(AUDIT_LOGS_TABLE).insert(entry).execute()

    result = await run_store_call(_insert)
    return result.data[0] if result.data else None


async def insert_modules(db: Client, modules: list[dict[str, Any]]) -> list[dict]:
    """Bulk-insert imported course modules."""
    if not modules:
        return []

    def _insert():
        return db.table(MODULES_TABLE).insert(modules).execute()

    result = await run_store_call(_insert)
    return result.data or []
