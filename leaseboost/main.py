from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from leaseboost.api.routes import enrichment, events, geocode, health, maps, places
from leaseboost.core.config import settings
from leaseboost.core.errors import LeaseBoostError
from leaseboost.core.logging import get_logger


log = get_logger("app")


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Log environment mode
    log.info(f"Starting application in {settings.ENV.upper()} mode")
    if settings.is_production:
        log.info("Production mode: Debug disabled, docs disabled, stricter logging")
    else:
        log.info("Development mode: Debug enabled, docs available")

    providers = settings.enabled_providers
    if providers:
        log.info(f"Configured providers: {', '.join(providers)}")
    else:
        log.warning("No provider credentials configured; nearby search will serve sample data")

    yield

    log.info("Application shutdown complete")


# Configure FastAPI based on environment
app = FastAPI(
    title="LeaseBoost Location Intelligence API",
    description="Nearby businesses, community events and contact enrichment for a property address",
    version="1.0.0",
    lifespan=lifespan,
    # Disable docs in production for security
    docs_url="/docs" if settings.docs_enabled else None,
    redoc_url="/redoc" if settings.docs_enabled else None,
    openapi_url="/openapi.json" if settings.docs_enabled else None,
    # Debug mode only in development
    debug=settings.debug_enabled,
)


@app.exception_handler(LeaseBoostError)
async def leaseboost_error_handler(request: Request, exc: LeaseBoostError) -> JSONResponse:
    if exc.status_code >= 500:
        log.error(f"{request.method} {request.url.path} failed: {exc.message}")
    else:
        log.info(f"{request.method} {request.url.path} rejected: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    details = "; ".join(
        f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}" for error in exc.errors()
    )
    return JSONResponse(status_code=400, content={"error": f"Invalid request: {details}"})


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    log.exception(f"Unhandled error on {request.method} {request.url.path}: {exc!r}")
    return JSONResponse(status_code=500, content={"error": "Internal server error"})


app.include_router(geocode.router)
app.include_router(places.router)
app.include_router(events.router)
app.include_router(enrichment.router)
app.include_router(maps.router)
app.include_router(health.router)
