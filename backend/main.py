"""Brand evaluation FastAPI application entry point."""
import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from backend.limits import limiter
from backend.routers import config, evaluate
from backend.services.evaluator import get_settings
from brand_safety.errors import ValidationError

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    try:
        from observability.tracing import setup_tracing
        setup_tracing(service_name="brand-evaluation", attributes=get_settings().trace_attributes())
        logger.info("OTEL tracing configured")
    except Exception as e:
        logger.warning(f"OTEL tracing not configured: {e}")

    yield

    from observability.tracing import shutdown_tracing
    shutdown_tracing()
    logger.info("Brand evaluation service shutting down")


app = FastAPI(
    title="Brand Evaluation Service",
    description=(
        "Brand safety risk assessment, brand-guideline compliance scoring "
        "and combined batch evaluation of marketing content."
    ),
    version="0.1.0",
    lifespan=lifespan,
)
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)


@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
    return JSONResponse(status_code=422, content={"detail": str(exc), "field": exc.field})


allowed_origins = [
    "http://localhost:3000",
    os.environ.get("FRONTEND_URL", "http://localhost:3000"),
]

app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(evaluate.router)
app.include_router(config.router)


@app.get("/health")
async def health() -> dict:
    return {"status": "ok"}


@app.get("/")
async def root() -> dict:
    return {
        "service": "brand-evaluation",
        "docs": "/docs",
        "health": "/health",
    }
