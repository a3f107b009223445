from __future__ import annotations

import logging
import os

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse

from .analytics.aggregator import compute_analytics
from .analytics.store import get_events
from .llm.errors import ConfigurationError, ProviderError
from .recommendations.config import DEFAULT_RECOMMENDATION_CONFIG
from .recommendations.data_store import get_catalog
from .recommendations.models import ReportRequest, UserProfile
from .recommendations.pipeline import generate_recommendations
from .recommendations.suggestions import generate_suggestions
from .report.render import render_report, report_filename

logging.basicConfig(
    level=os.environ.get("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

GENERIC_FAILURE = "Failed to generate neighborhood analysis. Please try again."

app = FastAPI(title="SmartHood Neighborhood Recommendation API", version="1.0.0")
app.add_middleware(
    CORSMiddleware,
    allow_origins=[o.strip() for o in os.environ.get("CORS_ORIGINS", "*").split(",") if o.strip()],
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["X-Recommendation-Source"],
)


# ── Error handlers ───────────────────────────────────────────────────────


@app.exception_handler(ConfigurationError)
async def configuration_error_handler(request: Request, exc: ConfigurationError) -> JSONResponse:
    return JSONResponse(status_code=503, content={"error": "API key not configured"})


@app.exception_handler(ProviderError)
async def provider_error_handler(request: Request, exc: ProviderError) -> JSONResponse:
    return JSONResponse(
        status_code=500,
        content={"error": GENERIC_FAILURE, "details": exc.message},
    )


# ── Public endpoints ─────────────────────────────────────────────────────


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@app.get("/metadata")
def metadata() -> dict:
    return {
        "cities": get_catalog().cities,
        "default_city": DEFAULT_RECOMMENDATION_CONFIG.default_city,
        "default_state": DEFAULT_RECOMMENDATION_CONFIG.default_state,
    }


# ── Assessment endpoints ─────────────────────────────────────────────────


@app.post("/recommendations")
async def recommendations(profile: UserProfile) -> JSONResponse:
    result = await generate_recommendations(profile)
    return JSONResponse(
        content=result.neighborhoods,
        headers={"X-Recommendation-Source": result.source},
    )


@app.post("/suggestions")
async def suggestions(profile: UserProfile) -> list[dict]:
    return await generate_suggestions(profile)


@app.post("/report")
def report(body: ReportRequest) -> PlainTextResponse:
    filename = report_filename(body.profile)
    return PlainTextResponse(
        render_report(body.profile, body.neighborhoods),
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


# ── Diagnostics ──────────────────────────────────────────────────────────


@app.get("/analytics")
def analytics() -> dict:
    return compute_analytics(get_events())
