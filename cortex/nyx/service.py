"""NYX think flow: profile -> generator -> planner -> applier."""

from supabase import Client

from ..config import Settings
from ..database import get_profile
from ..models import ThinkRequest, ThinkResponse
from .applier import MutationApplier, ensure_not_paused
from .generator import SuggestionGenerator
from .models import UserProfile
from .planner import plan


async def load_profile(db: Client, user_id: str) -> UserProfile:
    """Read the profile fresh; the pause flag is never cached."""
    return UserProfile.from_row(user_id, await get_profile(db, user_id))


async def think(
    db: Client,
    settings: Settings,
    user_id: str,
    request: ThinkRequest,
    generator: SuggestionGenerator | None = None,
) -> ThinkResponse:
    """Handle one assistant request end to end."""
    profile = await load_profile(db, user_id)
    # Checked again by the applier; failing here avoids a wasted generator call
    ensure_not_paused(profile, request.mode)

    generator = generator or SuggestionGenerator(settings)
    raw_text = await generator.generate(
        profile, request.mode.value, request.prompt, request.context
    )

    action = plan(raw_text)
    result = await MutationApplier(db, settings).apply(
        user_id=user_id,
        profile=profile,
        mode=request.mode,
        target_table=request.target_table,
        target_id=request.target_id,
        action=action,
        raw_text=raw_text,
    )
    return ThinkResponse(result=raw_text, mode=request.mode, executed=result.executed)
