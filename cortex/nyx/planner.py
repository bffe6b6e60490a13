"""Extract a structured action from free-form assistant output.

The model is asked for ``{"reasoning": ..., "action_type": ..., "payload": ...}``
but routinely wraps it in prose or code fences, nests the action fields
inside ``payload`` (sometimes as a JSON string) or puts them at the top
level. Extraction is best-effort: :func:`plan` never raises.
"""

import json
import re
from typing import Any

from ..logging_config import get_logger
from .models import Action

logger = get_logger("cortex.nyx.planner")

# Widest span from the first brace to the last one with "payload" in between
_PAYLOAD_SPAN = re.compile(r'\{[\s\S]*"payload"[\s\S]*\}', re.IGNORECASE)

_decoder = json.JSONDecoder()


def _candidate_fragments(text: str):
    """Yield JSON objects embedded in ``text`` that mention a payload."""
    match = _PAYLOAD_SPAN.search(text)
    if match:
        try:
            parsed = json.loads(match.group(0))
            if isinstance(parsed, dict):
                yield parsed
        except ValueError:
            pass

    # Fallback: decode a balanced object at every opening brace
    for index, char in enumerate(text):
        if char != "{":
            continue
        try:
            parsed, _ = _decoder.raw_decode(text, index)
        except ValueError:
            continue
        if isinstance(parsed, dict) and "payload" in parsed:
            yield parsed


def _action_source(fragment: dict[str, Any]) -> dict[str, Any]:
    """Pick where the table/id/data fields live."""
    payload = fragment.get("payload")
    if isinstance(payload, str):
        try:
            payload = json.loads(payload)
        except ValueError:
            payload = None
    if isinstance(payload, dict) and ("table" in payload or "data" in payload):
        return payload
    return fragment


def _as_text(value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return ""


def extract_fragment(raw_text: str) -> dict[str, Any] | None:
    """Return the first parseable payload-bearing object, or None."""
    if not raw_text:
        return None
    return next(_candidate_fragments(raw_text), None)


def plan(raw_text: str) -> Action:
    """Turn raw generator output into an :class:`Action`.

    Falls back to an empty action whose reasoning is the raw text.
    """
    try:
        fragment = extract_fragment(raw_text or "")
    except Exception as e:
        logger.warning(f"Action extraction failed: {type(e).__name__}: {e}")
        fragment = None

    if fragment is None:
        return Action(reasoning=raw_text or "")

    source = _action_source(fragment)
    data = source.get("data")
    return Action(
        table=_as_text(source.get("table")).strip(),
        id=_as_text(source.get("id") or fragment.get("id")),
        data=data if isinstance(data, dict) else {},
        reasoning=_as_text(fragment.get("reasoning") or source.get("reasoning")),
    )
