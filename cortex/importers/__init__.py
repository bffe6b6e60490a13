"""Course content import from web pages and YouTube playlists."""

from typing import Any

import httpx
from supabase import Client

from ..config import Settings
from ..database import insert_modules
from ..errors import ImportFailed
from ..logging_config import get_logger
from .web import fetch_page_modules, modules_from_html
from .youtube import PLAYLIST_TYPE, fetch_playlist_modules, playlist_id_from_url

logger = get_logger("cortex.importers")


async def import_content(
    db: Client,
    settings: Settings,
    url: str,
    source_type: str | None,
    course_id: Any,
    transport: httpx.AsyncBaseTransport | None = None,
) -> list[dict[str, Any]]:
    """Fetch modules from ``url`` and insert them for ``course_id``.

    Raises:
        ImportFailed: on fetch, API, or insert errors.
    """
    try:
        if source_type == PLAYLIST_TYPE:
            modules = await fetch_playlist_modules(settings, url, course_id, transport)
        else:
            modules = await fetch_page_modules(settings, url, course_id, transport)
    except ImportFailed:
        raise
    except (httpx.HTTPError, ValueError) as e:
        logger.error(f"Import fetch failed for {url}: {type(e).__name__}: {e}")
        raise ImportFailed(str(e) or type(e).__name__) from e

    try:
        await insert_modules(db, modules)
    except Exception as e:
        logger.error(f"Module insert failed for course {course_id}: {e}")
        raise ImportFailed(str(e)) from e

    logger.info(f"Imported {len(modules)} modules for course {course_id} from {url}")
    return modules


__all__ = [
    "PLAYLIST_TYPE",
    "fetch_page_modules",
    "fetch_playlist_modules",
    "import_content",
    "modules_from_html",
    "playlist_id_from_url",
]
