"""NYX assistant: suggestion planning and the audited mutation pipeline."""

from .applier import MutationApplier, ensure_not_paused
from .audit import AuditRecorder, action_label
from .generator import SuggestionGenerator
from .models import PAUSED, Action, ApplyResult, AuditLogEntry, UserProfile
from .planner import plan
from .service import load_profile, think

__all__ = [
    "PAUSED",
    "Action",
    "ApplyResult",
    "AuditLogEntry",
    "UserProfile",
    "AuditRecorder",
    "MutationApplier",
    "SuggestionGenerator",
    "action_label",
    "ensure_not_paused",
    "load_profile",
    "plan",
    "think",
]
