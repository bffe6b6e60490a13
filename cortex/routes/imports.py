"""Course content import route."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status

from ..auth import CurrentUser
from ..config import Settings, get_settings
from ..database import Database
from ..errors import CortexError
from ..importers import PLAYLIST_TYPE, import_content
from ..logging_config import get_logger
from ..models import ScrapeRequest, ScrapeResponse

logger = get_logger("cortex.importers")
router = APIRouter(prefix="/api", tags=["import"])


@router.post("/scrape", response_model=ScrapeResponse, response_model_exclude_none=True)
async def scrape(
    request: ScrapeRequest,
    auth: CurrentUser,
    db: Database,
    settings: Annotated[Settings, Depends(get_settings)],
):
    """Import modules for a course from a YouTube playlist or a web page's headings."""
    logger.info(f"SCRAPE | {auth.user_id} | type={request.type} course={request.course_id}")
    try:
        modules = await import_content(db, settings, request.url, request.type, request.course_id)
    except CortexError as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Scraping failed: {e.message}",
        )

    return ScrapeResponse(
        message=f"Successfully imported {len(modules)} modules.",
        modules=modules,
        source=None if request.type == PLAYLIST_TYPE else request.url,
    )
