import pytest

from tests.fakes import FakeGenerator
from value_intel.financials import compute_financials
from value_intel.llm import OUTPUT_SCHEMA, GenerationError
from value_intel.models import RequestInput
from value_intel.narrative import build_and_normalize
from value_intel.normalize import FILLER_ACTION
from value_intel.prompts import SYSTEM_PROMPT


async def _run(request: dict, generator: FakeGenerator):
    req = RequestInput.model_validate(request)
    return await build_and_normalize(req, compute_financials(req), generator)


@pytest.mark.asyncio
async def test_single_call_with_schema_and_prompts(acme_request, model_payload):
    gen = FakeGenerator(model_payload)
    await _run(acme_request, gen)
    assert len(gen.calls) == 1
    call = gen.calls[0]
    assert call["system"] == SYSTEM_PROMPT
    assert call["schema"] is OUTPUT_SCHEMA
    assert "Acme Clinic" in call["user"]


@pytest.mark.asyncio
async def test_only_requested_audiences_survive(acme_request, model_payload):
    out = await _run(acme_request, FakeGenerator(model_payload))
    assert out.narratives.financial == "Finance story."
    assert out.narratives.clinical == out.narratives.operations == out.narratives.executive == ""
    assert len(out.assumptions_and_caveats) == 6
    assert out.next_best_actions == model_payload["next_best_actions"]


@pytest.mark.asyncio
@pytest.mark.parametrize("response", [None, "", "definitely not json", {"narratives": None}])
async def test_malformed_model_output_is_absorbed(acme_request, response):
    out = await _run(acme_request, FakeGenerator(response))
    assert out.narratives.financial == ""
    assert out.next_best_actions == [FILLER_ACTION] * 3


@pytest.mark.asyncio
async def test_raw_json_text_is_parsed(acme_request):
    out = await _run(acme_request, FakeGenerator('{"narratives": {"financial": "From text."}}'))
    assert out.narratives.financial == "From text."


@pytest.mark.asyncio
async def test_generator_fault_propagates(acme_request):
    gen = FakeGenerator(error=GenerationError("quota exceeded"))
    with pytest.raises(GenerationError, match="quota"):
        await _run(acme_request, gen)


@pytest.mark.asyncio
async def test_deterministic_for_same_input_and_response(acme_request, model_payload):
    first = await _run(acme_request, FakeGenerator(model_payload))
    second = await _run(acme_request, FakeGenerator(model_payload))
    assert first.model_dump_json() == second.model_dump_json()
