"""
Hard guards between the model and the caller.

``normalize_output`` is total: whatever tree comes back from the model (None,
wrong types, missing keys, extra keys) maps to a well-formed NarrativeOutput.
"""
from collections.abc import Iterable, Mapping
from typing import Any
from .models import AUDIENCES, NarrativeOutput, Narratives

FILLER_ACTION = "Validate baseline + data provenance."
MAX_LIST_ITEMS = 10
NEXT_ACTIONS = 3


def _as_mapping(x: Any) -> Mapping:
    return x if isinstance(x, Mapping) else {}


def _as_str(x: Any) -> str:
    return x if isinstance(x, str) else ""


def _clean_list(x: Any, limit: int) -> list[str]:
    items = x if isinstance(x, list) else []
    return [s for s in items if isinstance(s, str) and s.strip()][:limit]


def normalize_output(raw: Any) -> NarrativeOutput:
    out = _as_mapping(raw)
    narratives = _as_mapping(out.get("narratives"))

    actions = _clean_list(out.get("next_best_actions"), NEXT_ACTIONS)
    actions += [FILLER_ACTION] * (NEXT_ACTIONS - len(actions))

    return NarrativeOutput(
        narratives=Narratives(**{k: _as_str(narratives.get(k)) for k in AUDIENCES}),
        assumptions_and_caveats=_clean_list(out.get("assumptions_and_caveats"), MAX_LIST_ITEMS),
        clinical_validation_checklist=_clean_list(out.get("clinical_validation_checklist"), MAX_LIST_ITEMS),
        next_best_actions=actions,
    )


def filter_audiences(output: NarrativeOutput, audiences: Iterable[str]) -> NarrativeOutput:
    """Only requested audiences keep their text; everything else becomes ''."""
    keep = set(audiences)
    narratives = Narratives(**{
        k: getattr(output.narratives, k) if k in keep else "" for k in AUDIENCES
    })
    return output.model_copy(update={"narratives": narratives})
