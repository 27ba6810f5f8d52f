from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from typing import Any, List, Literal, Optional

Audience = Literal["clinical", "operations", "financial", "executive"]
AUDIENCES: tuple[str, ...] = ("clinical", "operations", "financial", "executive")


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


class AssumptionOverrides(_CamelModel):
    # left loose on purpose: compute_financials parses or falls back
    physician_hourly_rate: Any = None
    reimbursement_per_visit: Any = None
    suki_cost_per_physician_per_month: Any = None
    work_days_per_year: Any = None


class RequestInput(_CamelModel):
    customer_name: str = Field(min_length=1)
    specialty: str = Field(min_length=1)
    physician_count: Any = None
    time_saved_hrs_per_day: Any = None
    patient_increase_per_day: Any = None
    adoption_rate_pct: Any = None
    nps_score: Any = None
    burnout_improvement: Optional[str] = None
    clinical_context: Optional[str] = None
    audiences: List[Audience] = Field(min_length=1)
    clinical_validation_mode: bool = False
    assumptions: Optional[AssumptionOverrides] = None
    telemetry_summary: Any = None
    epic_mapping: Any = None


class AssumptionsUsed(_CamelModel):
    fully_loaded_physician_rate: float
    reimbursement_per_visit: float
    suki_cost_per_physician_per_month: float
    work_days: float


class FinancialProjection(_CamelModel):
    assumptions_used: AssumptionsUsed
    annual_labor_value: float
    annual_revenue_uplift: float
    annual_suki_cost: float
    annual_total_value: float
    roi_x: Optional[float] = None


class Narratives(BaseModel):
    model_config = ConfigDict(frozen=True)

    clinical: str = ""
    operations: str = ""
    financial: str = ""
    executive: str = ""


class NarrativeOutput(BaseModel):
    model_config = ConfigDict(frozen=True)

    narratives: Narratives = Field(default_factory=Narratives)
    assumptions_and_caveats: List[str] = Field(default_factory=list)
    clinical_validation_checklist: List[str] = Field(default_factory=list)
    next_best_actions: List[str] = Field(default_factory=list)


class TelemetrySummaryRequest(BaseModel):
    format: str
    content: str
    mapping: dict[str, str] = Field(default_factory=dict)
