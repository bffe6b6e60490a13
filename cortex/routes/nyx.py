"""NYX assistant routes."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Request, status

from ..auth import CurrentUser
from ..config import Settings, get_settings
from ..database import Database
from ..errors import CortexError, Forbidden
from ..logging_config import get_logger
from ..models import ThinkRequest, ThinkResponse
from ..nyx import think
from ..rate_limit import limiter

logger = get_logger("cortex.nyx")
router = APIRouter(prefix="/api/nyx", tags=["nyx"])


@router.post("/think", response_model=ThinkResponse)
@limiter.limit(lambda: get_settings().think_rate_limit)
async def nyx_think(
    request: Request,
    think_request: ThinkRequest,
    auth: CurrentUser,
    db: Database,
    settings: Annotated[Settings, Depends(get_settings)],
):
    """
    Ask the assistant for a suggestion, optionally applying it.

    - SUGGEST: the suggestion is audited, nothing else is written.
    - APPLY: the suggestion is audited, then its action is upserted.

    APPLY is refused with 403 while the user's persona is PAUSED.
    """
    logger.info(
        f"THINK | {auth.user_id} | mode={think_request.mode.value} "
        f"target={think_request.target_table}/{think_request.target_id}"
    )
    try:
        return await think(db, settings, auth.user_id, think_request)
    except Forbidden:
        raise
    except CortexError as e:
        logger.error(f"NYX Core Error: {type(e).__name__}: {e.message}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"NYX Core Failure: {e.message}",
        )
    except Exception as e:
        logger.exception("NYX Core Error")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"NYX Core Failure: {e}",
        )
