"""
Illustrative ROI math. Conservative defaults; every figure is illustrative
unless telemetry validates it.
"""
import math
from typing import Any
from .models import AssumptionsUsed, FinancialProjection, RequestInput

# name -> (default, min, max)
ASSUMPTION_BOUNDS = {
    "physician_hourly_rate": (200.0, 80.0, 600.0),
    "reimbursement_per_visit": (150.0, 40.0, 1000.0),
    "suki_cost_per_physician_per_month": (300.0, 50.0, 2000.0),
    "work_days_per_year": (250.0, 180.0, 365.0),
}
PHYSICIAN_BOUNDS = (1.0, 1.0, 200000.0)
TIME_SAVED_BOUNDS = (0.0, 0.0, 8.0)
PATIENT_INCREASE_BOUNDS = (0.0, 0.0, 30.0)


def safe_num(value: Any, fallback: float = 0.0) -> float:
    if isinstance(value, bool):
        return float(value)
    try:
        if isinstance(value, (int, float)):
            n = float(value)
        elif isinstance(value, str) and value.strip():
            n = float(value.strip())
        else:
            return fallback
    except (ValueError, OverflowError):
        return fallback
    return n if math.isfinite(n) else fallback


def clamp(n: float, lo: float, hi: float) -> float:
    return min(hi, max(lo, n))


def _bounded(value: Any, bounds: tuple[float, float, float]) -> float:
    fallback, lo, hi = bounds
    return clamp(safe_num(value, fallback), lo, hi)


def money(n: float) -> str:
    # half-up, like a spreadsheet would round
    return f"${math.floor(n + 0.5):,}"


def compute_financials(req: RequestInput) -> FinancialProjection:
    """Pure and total: any input maps to a projection with clamped assumptions."""
    overrides = req.assumptions
    def override(name: str) -> float:
        raw = getattr(overrides, name) if overrides is not None else None
        return _bounded(raw, ASSUMPTION_BOUNDS[name])

    physicians = _bounded(req.physician_count, PHYSICIAN_BOUNDS)
    time_saved = _bounded(req.time_saved_hrs_per_day, TIME_SAVED_BOUNDS)
    patient_increase = _bounded(req.patient_increase_per_day, PATIENT_INCREASE_BOUNDS)

    rate = override("physician_hourly_rate")
    reimbursement = override("reimbursement_per_visit")
    monthly_cost = override("suki_cost_per_physician_per_month")
    work_days = override("work_days_per_year")

    labor = physicians * time_saved * rate * work_days
    revenue = physicians * patient_increase * reimbursement * work_days
    cost = physicians * monthly_cost * 12
    total = labor + revenue

    return FinancialProjection(
        assumptions_used=AssumptionsUsed(
            fully_loaded_physician_rate=rate,
            reimbursement_per_visit=reimbursement,
            suki_cost_per_physician_per_month=monthly_cost,
            work_days=work_days,
        ),
        annual_labor_value=labor,
        annual_revenue_uplift=revenue,
        annual_suki_cost=cost,
        annual_total_value=total,
        roi_x=total / cost if cost > 0 else None,
    )
