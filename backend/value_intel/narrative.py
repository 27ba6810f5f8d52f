import logging
from .llm import OUTPUT_SCHEMA, NarrativeGenerator, extract_payload
from .models import FinancialProjection, NarrativeOutput, RequestInput
from .normalize import filter_audiences, normalize_output
from .prompts import SYSTEM_PROMPT, build_user_prompt

log = logging.getLogger(__name__)


async def build_and_normalize(
    req: RequestInput, fin: FinancialProjection, generator: NarrativeGenerator
) -> NarrativeOutput:
    """
    One generation call, then coerce whatever came back into shape.
    Generator faults propagate; malformed output never does.
    """
    user = build_user_prompt(req, fin)
    resp = await generator.generate(system=SYSTEM_PROMPT, user=user, schema=OUTPUT_SCHEMA)

    payload = extract_payload(resp)
    if payload is None:
        log.warning("No usable JSON from model for %s; returning empty narratives", req.customer_name)

    return filter_audiences(normalize_output(payload), req.audiences)
