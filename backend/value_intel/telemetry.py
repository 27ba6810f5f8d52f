"""
Small evidence summary built from an uploaded telemetry sample (CSV or JSON).

Only a sample is read (first 50 rows). The result is what callers pass back
as ``telemetrySummary`` when asking for narratives.
"""
import csv, json
from typing import Any
from .financials import safe_num

MAX_ROWS = 50
MAX_COLUMNS = 40
NOTES = [
    "Telemetry summary is derived from uploaded sample rows only.",
    "All values are demo-safe; do not upload PHI.",
]


class TelemetryParseError(ValueError):
    pass


def parse_csv(text: str) -> tuple[list[str], list[dict]]:
    lines = [ln for ln in text.splitlines() if ln]
    if len(lines) < 2:
        return [], []
    reader = csv.reader(lines)
    columns = [c.strip() for c in next(reader)]
    rows = []
    for parts in reader:
        if len(rows) >= MAX_ROWS:
            break
        parts = [p.strip() for p in parts]
        rows.append({c: parts[i] if i < len(parts) else "" for i, c in enumerate(columns)})
    return columns, rows


def parse_json(text: str) -> tuple[list[str], list[dict]]:
    try:
        data = json.loads(text)
    except (ValueError, RecursionError) as e:
        raise TelemetryParseError(f"Invalid JSON telemetry: {e}") from e

    if isinstance(data, dict) and isinstance(data.get("rows"), list):
        data = data["rows"]
    elif isinstance(data, dict):
        return list(data.keys()), [data]

    if isinstance(data, list):
        rows = [r for r in data[:MAX_ROWS] if isinstance(r, dict)]
        columns = list(rows[0].keys()) if rows else []
        return columns, rows
    return [], []


def _finite(x: Any) -> float | None:
    n = safe_num(x, float("nan"))
    return None if n != n else n


def _avg(vals: list[float]) -> float | None:
    return sum(vals) / len(vals) if vals else None


def summarize_telemetry(columns: list[str], rows: list[dict], mapping: dict[str, str]) -> dict:
    def values(key: str) -> list[float]:
        col = mapping.get(key)
        if not col:
            return []
        return [v for v in (_finite(r.get(col)) for r in rows) if v is not None]

    n = len(rows)

    def per_row(key: str) -> float | None:
        return sum(values(key)) / n if n else None

    return {
        "loaded_rows": n,
        "columns_detected": columns[:MAX_COLUMNS],
        "mapping_used": mapping,
        "encounter_total_sample": sum(values("encounters")) or None,
        "doc_minutes_baseline_avg_sample": per_row("doc_minutes_before"),
        "doc_minutes_post_avg_sample": per_row("doc_minutes_after"),
        "after_hours_minutes_baseline_avg_sample": per_row("after_hours_minutes_before"),
        "after_hours_minutes_post_avg_sample": per_row("after_hours_minutes_after"),
        "adoption_rate_avg_sample": _avg(values("adoption_rate")),
        "nps_avg_sample": _avg(values("nps")),
        "notes": list(NOTES),
    }


def summarize_upload(fmt: str, content: str, mapping: dict[str, str]) -> dict:
    if fmt == "csv":
        columns, rows = parse_csv(content)
    elif fmt == "json":
        columns, rows = parse_json(content)
    else:
        raise TelemetryParseError(f"Unsupported telemetry format: {fmt!r}")
    return summarize_telemetry(columns, rows, mapping)
