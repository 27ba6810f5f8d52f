import logging, time
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from .config import Settings
from .financials import compute_financials
from .llm import GeminiGenerator, NarrativeGenerator
from .models import RequestInput, TelemetrySummaryRequest
from .narrative import build_and_normalize
from .telemetry import TelemetryParseError, summarize_upload

log = logging.getLogger(__name__)

MISSING_FIELDS = "Missing required fields (customerName, specialty, audiences[])."


def _has_required(payload) -> bool:
    if not isinstance(payload, dict):
        return False
    audiences = payload.get("audiences")
    return bool(
        payload.get("customerName") and payload.get("specialty")
        and isinstance(audiences, list) and audiences
    )


def _error(status: int, error: str, message: str | None = None) -> JSONResponse:
    body = {"ok": False, "error": error}
    if message is not None:
        body["message"] = message
    return JSONResponse(status_code=status, content=body)


def create_app(settings: Settings | None = None, generator: NarrativeGenerator | None = None) -> FastAPI:
    settings = settings or Settings.from_env()

    app = FastAPI(title="Suki Value Intelligence")
    app.add_middleware(CORSMiddleware, allow_origins=["*"], allow_methods=["*"], allow_headers=["*"])
    app.state.settings = settings
    app.state.generator = generator or GeminiGenerator(settings)

    @app.on_event("startup")
    async def _start():
        if not settings.api_key:
            log.warning("GEMINI_API_KEY not set. Add it to .env or the environment; generation calls will fail.")
        log.info("Suki Value Intelligence ready (model=%s, port=%d)", settings.model_name, settings.port)

    @app.get("/health")
    async def health():
        return {"ok": True}

    @app.post("/api/suki-value-intelligence/translate")
    async def translate(request: Request):
        t0 = time.perf_counter()
        try:
            payload = await request.json()
        except ValueError:
            payload = None

        if not _has_required(payload):
            return _error(400, MISSING_FIELDS)
        try:
            req = RequestInput.model_validate(payload)
        except ValidationError as ve:
            return _error(400, "Invalid request fields.", str(ve))

        try:
            financials = compute_financials(req)
            output = await build_and_normalize(req, financials, request.app.state.generator)
        except Exception as e:
            log.exception("Suki Value Intelligence error for %s", req.customer_name)
            return _error(500, "Suki Value Intelligence failed", str(e) or "Unknown error")

        return {
            "ok": True,
            "model": settings.model_name,
            "latency_ms": round((time.perf_counter() - t0) * 1000),
            "financials": financials.model_dump(by_alias=True),
            "output": output.model_dump(),
        }

    @app.post("/api/suki-value-intelligence/telemetry/summary")
    async def telemetry_summary(body: TelemetrySummaryRequest):
        try:
            summary = summarize_upload(body.format, body.content, body.mapping)
        except TelemetryParseError as e:
            return _error(400, "Could not parse telemetry sample.", str(e))
        return {"ok": True, "summary": summary}

    return app


_app: FastAPI | None = None


def __getattr__(name: str):
    # `uvicorn value_intel.main:app` builds the app on first lookup, not at import
    global _app
    if name == "app":
        if _app is None:
            _app = create_app()
        return _app
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
