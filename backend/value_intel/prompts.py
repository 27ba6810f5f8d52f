import json
from typing import Any
from .financials import money, safe_num
from .models import FinancialProjection, RequestInput

SYSTEM_PROMPT = """
You are "Suki Value Intelligence", a Customer Value & Clinical Impact narrative generator for a healthcare ambient documentation AI platform.

Rules:
- Be specific, executive-ready, and non-hype.
- Avoid medical claims. Do not claim improved clinical outcomes; focus on workflow/time/revenue-integrity mechanics.
- Clearly label any estimates as "illustrative unless validated by telemetry."
- If clinicalValidationMode=true, use conservative language and explicitly recommend validation steps.
- If telemetrySummary is present, treat it as higher-confidence evidence; still call out limitations.
- If epicMapping is present, reference it as provenance ("based on mapped fields from Epic exports") without revealing PHI.
- Output STRICT JSON ONLY that matches the schema provided. No markdown. No extra keys.

Constraints:
- If an audience is not requested, set that narrative to an empty string.
- Requested narratives should be 250-450 words with short headers + bullets.
- assumptions_and_caveats: 5-8 bullets
- clinical_validation_checklist: 5-8 bullets
- next_best_actions: EXACTLY 3 bullets
"""

USER_TEMPLATE = """
INPUT
Customer:
- Name: {customer_name}
- Specialty: {specialty}
- Physicians using solution: {physician_count}
- Time saved per physician per day (hours): {time_saved}
- Additional patient capacity per physician per day: {patient_increase}
- Burnout improvement: {burnout}
- Adoption rate (%): {adoption}
- NPS: {nps}
- Clinical context: {clinical_context}

Requested audiences:
{audiences}

Flags:
- clinicalValidationMode: {validation_mode}

Telemetry summary (optional; may be mock):
{telemetry}

Epic column mapping (optional):
{epic_mapping}

ILLUSTRATIVE FINANCIALS (unless validated by telemetry):
- Fully-loaded physician rate: ${rate}/hr
- Reimbursement per visit: ${reimbursement}
- Suki cost per physician per month: ${monthly_cost}
- Work days per year: {work_days}

Calculated (illustrative):
- Annual labor productivity value: {labor}
- Annual revenue opportunity: {revenue}
- Annual Suki cost: {cost}
- Annual total value: {total}
- ROI multiple: {roi}

IMPORTANT:
- Generate only requested audiences; set others to empty string.
- Return STRICT JSON only.
"""


def _num(n: float) -> str:
    return str(int(n)) if float(n).is_integer() else str(n)


def _as_json(blob: Any) -> str:
    if blob is None or blob == "":
        return "None"
    return json.dumps(blob, indent=2, default=str)


def format_roi(roi_x: float | None) -> str:
    return "N/A" if roi_x is None else f"{roi_x:.1f}x"


def build_user_prompt(req: RequestInput, fin: FinancialProjection) -> str:
    used = fin.assumptions_used
    return USER_TEMPLATE.format(
        customer_name=req.customer_name,
        specialty=req.specialty,
        physician_count=_num(safe_num(req.physician_count)),
        time_saved=_num(safe_num(req.time_saved_hrs_per_day)),
        patient_increase=_num(safe_num(req.patient_increase_per_day)),
        burnout=req.burnout_improvement or "Not provided",
        adoption=_num(safe_num(req.adoption_rate_pct)),
        nps=_num(safe_num(req.nps_score)),
        clinical_context=(req.clinical_context or "").strip() or "None",
        audiences=", ".join(req.audiences),
        validation_mode="true" if req.clinical_validation_mode else "false",
        telemetry=_as_json(req.telemetry_summary),
        epic_mapping=_as_json(req.epic_mapping),
        rate=_num(used.fully_loaded_physician_rate),
        reimbursement=_num(used.reimbursement_per_visit),
        monthly_cost=_num(used.suki_cost_per_physician_per_month),
        work_days=_num(used.work_days),
        labor=money(fin.annual_labor_value),
        revenue=money(fin.annual_revenue_uplift),
        cost=money(fin.annual_suki_cost),
        total=money(fin.annual_total_value),
        roi=format_roi(fin.roi_x),
    )
