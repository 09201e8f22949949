"""
TokenVault - Tokenization and detokenization service.

Features:
- Deterministic tokens for sensitive payloads, encrypted at rest
- Pluggable token store (in-memory or Redis)
- Structured logging with correlation IDs
- Prometheus metrics
- Health checks (liveness and readiness)
"""
from fastapi import FastAPI
from fastapi.responses import JSONResponse
from prometheus_client import make_asgi_app
from .config import get_settings
from .logging import setup_logging, get_logger
from .api.errors import register_error_handlers
from .api.token_router import router as token_router, get_vault_service, set_vault_service
from .middleware import CorrelationIdMiddleware, MetricsMiddleware
from .metrics import Metrics
from .health import HealthChecker
from .services.vault import VaultService

VERSION = "0.1.0"

# Initialize configuration
settings = get_settings()

# Setup logging
setup_logging(json_output=settings.LOG_JSON, service_name="tokenvault", level=settings.LOG_LEVEL)
logger = get_logger()

# Initialize metrics
metrics = Metrics(service_name="tokenvault", version=VERSION)

# Initialize health checker
health_checker = HealthChecker(service_name="tokenvault", version=VERSION)

# Vault service backed by the configured store
set_vault_service(VaultService(metrics=metrics))

# Create FastAPI app
app = FastAPI(
    title="TokenVault",
    version=VERSION,
    description="Tokenize sensitive payloads and store them encrypted",
)

# Starlette runs the last-added middleware first: correlation ID wraps metrics
app.add_middleware(MetricsMiddleware, metrics=metrics)
app.add_middleware(CorrelationIdMiddleware)

register_error_handlers(app)

# Include API routes
app.include_router(token_router)

# Mount Prometheus metrics endpoint
metrics_app = make_asgi_app(registry=metrics.registry)
app.mount("/metrics", metrics_app)


@app.get("/health")
async def health():
    """
    Liveness probe - basic health check.

    Returns 200 if service is running.
    """
    logger.debug("health_check_liveness")
    return health_checker.liveness()


@app.get("/health/ready")
async def health_ready():
    """
    Readiness probe - comprehensive health check.

    Checks:
    - Token store connectivity
    - Disk space availability
    - Memory availability

    Returns:
        200: Service is ready to handle traffic
        503: Service is not ready
    """
    logger.debug("health_check_readiness")
    metrics.update_system_metrics()
    result = await health_checker.readiness(get_vault_service().store)

    status_code = 200 if result["status"] == "ready" else 503

    return JSONResponse(content=result, status_code=status_code)


@app.on_event("startup")
async def startup_event():
    """
    Startup event handler.

    Logs service startup.
    """
    logger.info(
        "service_starting",
        version=VERSION,
        env=settings.ENV,
        store_backend=type(get_vault_service().store).__name__,
        auth_required=settings.REQUIRE_AUTH,
    )


@app.on_event("shutdown")
async def shutdown_event():
    """
    Shutdown event handler.

    Closes the token store and marks the service down.
    """
    logger.info("service_stopping")
    await get_vault_service().store.close()
    metrics.app_up.labels(service="tokenvault", version=VERSION).set(0)


def run():
    """Run the service under uvicorn; SIGINT/SIGTERM trigger graceful shutdown."""
    import uvicorn

    uvicorn.run(
        "tokenvault.main:app",
        host="0.0.0.0",
        port=settings.SERVICE_PORT,
    )


if __name__ == "__main__":
    run()
