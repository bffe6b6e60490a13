"""Suggestion generator backed by a Hugging Face text-generation endpoint."""

import json
from typing import Any

import httpx

from ..config import Settings
from ..errors import SuggestionUnavailable
from ..logging_config import get_logger
from .models import UserProfile

logger = get_logger("cortex.nyx.generator")

# Returned when the endpoint answers without usable text, whatever its status
EMPTY_SUGGESTION = "{}"


def build_system_prompt(profile: UserProfile, mode: str) -> str:
    """System prompt carrying persona, user stats and the output contract."""
    return (
        f"You are NYX, the logic core. Persona: {profile.active_persona}.\n"
        f"Objective: Fulfill the user request. Analyze user context "
        f"({json.dumps(profile.stats, default=str)}) to suggest optimal actions.\n"
        f"Mode: {mode}. If APPLY, output a single, clean JSON object "
        '{ "table": "...", "id": "...", "data": {...} } for database update.\n'
        'Output Format: JSON only { "reasoning": "...", "action_type": "...", "payload": "..." }'
    )


def build_inputs(system_prompt: str, prompt: str, context: Any = None) -> str:
    inputs = f"{system_prompt}\n\n"
    if context is not None:
        inputs += f"Request Context: {json.dumps(context, default=str)}\n"
    return inputs + f"User Request: {prompt}"


def extract_generated_text(body: Any) -> str:
    """Pull ``generated_text`` out of an inference response body.

    Accepts both the list form (``[{"generated_text": ...}]``) and a bare
    object. Anything else degrades to :data:`EMPTY_SUGGESTION`.
    """
    if isinstance(body, list) and body:
        body = body[0]
    if isinstance(body, dict):
        text = body.get("generated_text")
        if isinstance(text, str) and text:
            return text
    return EMPTY_SUGGESTION


class SuggestionGenerator:
    """Calls the inference endpoint; one instance per request is fine."""

    def __init__(self, settings: Settings, transport: httpx.AsyncBaseTransport | None = None):
        self._settings = settings
        self._transport = transport

    async def generate(
        self,
        profile: UserProfile,
        mode: str,
        prompt: str,
        context: Any = None,
    ) -> str:
        """Return the raw generated text.

        Raises:
            SuggestionUnavailable: on connection errors or timeouts. An error
                status or malformed body degrades to :data:`EMPTY_SUGGESTION`.
        """
        settings = self._settings
        payload = {
            "inputs": build_inputs(build_system_prompt(profile, mode), prompt, context),
            "parameters": {
                "max_new_tokens": settings.hf_max_new_tokens,
                "temperature": settings.hf_temperature,
            },
        }
        headers = {"Content-Type": "application/json"}
        if settings.hf_token:
            headers["Authorization"] = f"Bearer {settings.hf_token}"

        try:
            async with httpx.AsyncClient(
                timeout=settings.suggestion_timeout_seconds,
                transport=self._transport,
            ) as client:
                response = await client.post(settings.hf_model_url, json=payload, headers=headers)
        except httpx.TimeoutException as e:
            logger.error(f"Suggestion request timed out: {e}")
            raise SuggestionUnavailable(
                f"Suggestion generator timed out after {settings.suggestion_timeout_seconds}s"
            ) from e
        except httpx.RequestError as e:
            logger.error(f"Suggestion request failed: {type(e).__name__}: {e}")
            raise SuggestionUnavailable(f"Suggestion generator unreachable: {e}") from e

        if response.status_code >= 400:
            logger.warning(
                f"Suggestion generator returned HTTP {response.status_code}: {response.text[:200]}"
            )

        try:
            body = response.json()
        except ValueError:
            logger.warning("Suggestion generator returned a non-JSON body")
            return EMPTY_SUGGESTION
        return extract_generated_text(body)
