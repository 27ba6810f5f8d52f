import json, logging
from collections.abc import Mapping
from typing import Any, Protocol
import google.generativeai as genai
from google.generativeai.types import GenerationConfig
from .config import Settings

log = logging.getLogger(__name__)

# Gemini response-schema dialect: objects only ever carry their declared
# properties, so there is no additionalProperties switch to set.
OUTPUT_SCHEMA: dict = {
    "type": "object",
    "properties": {
        "narratives": {
            "type": "object",
            "properties": {
                "clinical": {"type": "string"},
                "operations": {"type": "string"},
                "financial": {"type": "string"},
                "executive": {"type": "string"},
            },
            "required": ["clinical", "operations", "financial", "executive"],
        },
        "assumptions_and_caveats": {
            "type": "array", "min_items": 5, "max_items": 10, "items": {"type": "string"},
        },
        "clinical_validation_checklist": {
            "type": "array", "min_items": 5, "max_items": 10, "items": {"type": "string"},
        },
        "next_best_actions": {
            "type": "array", "min_items": 3, "max_items": 3, "items": {"type": "string"},
        },
    },
    "required": [
        "narratives", "assumptions_and_caveats",
        "clinical_validation_checklist", "next_best_actions",
    ],
}


class GenerationError(RuntimeError):
    """The external text-generation call could not be made or failed."""


class NarrativeGenerator(Protocol):
    async def generate(self, *, system: str, user: str, schema: dict) -> Any: ...


def _gen_config(schema: dict, temp: float = 0.2) -> GenerationConfig:
    return GenerationConfig(
        response_mime_type="application/json",
        response_schema=schema,
        temperature=temp,
    )


class GeminiGenerator:
    """Single schema-constrained call to Gemini. No retry, SDK default timeout."""

    def __init__(self, settings: Settings):
        self.settings = settings
        if settings.api_key:
            genai.configure(api_key=settings.api_key)

    async def generate(self, *, system: str, user: str, schema: dict) -> Any:
        if not self.settings.api_key:
            raise GenerationError("GEMINI_API_KEY is not set; add it to .env or the environment.")
        model = genai.GenerativeModel(self.settings.model_name, system_instruction=system)
        return await model.generate_content_async([user], generation_config=_gen_config(schema))


def _extract_text(resp) -> str | None:
    """
    Gemini sometimes returns no quick .text (safety / finish_reason), and the
    accessor raises instead of returning None; pull from candidates/parts then.
    """
    try:
        t = getattr(resp, "text", None)
    except ValueError:
        t = None
    if t:
        return t
    cand = getattr(resp, "candidates", None)
    if cand:
        content = getattr(cand[0], "content", None)
        if content and getattr(content, "parts", None):
            return "".join(getattr(p, "text", "") for p in content.parts if getattr(p, "text", None))
    return None


def parse_json_safely(text: str | bytes | None) -> Any:
    if isinstance(text, bytes):
        text = text.decode("utf-8", errors="replace")
    if not isinstance(text, str):
        return None
    trimmed = text.strip()
    if not trimmed:
        return None
    try:
        return json.loads(trimmed)
    except (ValueError, RecursionError):
        log.warning("Model returned non-JSON text (%d chars)", len(trimmed))
        return None


def extract_payload(resp: Any) -> Any:
    """Structured result if the transport parsed one, else strict-parse the raw text, else None."""
    if resp is None:
        return None
    if isinstance(resp, Mapping):
        return resp
    parsed = getattr(resp, "parsed", None)
    if isinstance(parsed, Mapping):
        return parsed
    if isinstance(resp, (str, bytes)):
        return parse_json_safely(resp)
    txt = _extract_text(resp)
    if txt is None:
        log.warning("Model response carried no text content")
    return parse_json_safely(txt)
