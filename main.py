"""
FastAPI Application Entry Point

Integrates:
  - WhatsApp status webhook (handshake + delivery-status reconciliation)
  - Health checks
  - Middleware for logging & error handling

Run: uvicorn main:app --host 0.0.0.0 --port 4000
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from config import Config
from infra.bootstrap import bootstrap_infrastructure
from transport.whatsapp.webhook import router as whatsapp_router

# Setup logging
logging.basicConfig(
    level=getattr(logging, Config.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan: startup and shutdown handlers.
    """
    # Startup
    logger.info("=" * 60)
    logger.info("WhatsApp status webhook starting up...")
    logger.info(f"Environment: {Config.ENVIRONMENT}")
    logger.info(f"Display timezone: {Config.DISPLAY_TIMEZONE}")
    logger.info(f"Verify token: {'set' if Config.VERIFY_TOKEN else 'MISSING'}")
    logger.info("=" * 60)

    yield

    # Shutdown
    logger.info("WhatsApp status webhook shutting down...")


# Create FastAPI app
app = FastAPI(
    title="WhatsApp Status Webhook",
    description="Reconciles WhatsApp delivery statuses with stored message logs",
    version="1.0.0",
    lifespan=lifespan,
)


# Middleware for logging
@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log all requests."""
    logger.debug(f"{request.method} {request.url.path}")
    try:
        response = await call_next(request)
        return response
    except Exception as e:
        logger.error(f"Request error: {str(e)}", exc_info=True)
        return JSONResponse(
            status_code=500,
            content={"detail": "Internal server error"},
        )


# Include routers
app.include_router(whatsapp_router)


# Health check endpoints
@app.get("/health/live")
async def health_live():
    """Live health check (Kubernetes liveness probe)."""
    return {"status": "alive"}


@app.get("/health/ready")
async def health_ready():
    """Readiness health check (Kubernetes readiness probe)."""
    if not Config.validate():
        return {"status": "not_ready", "reason": "VERIFY_TOKEN not configured"}
    try:
        infra = bootstrap_infrastructure()
    except Exception as e:
        return {"status": "not_ready", "reason": str(e)}
    return {"status": "ready", "store": infra.get_store().backend_name}


@app.get("/")
async def root():
    """Root endpoint with API info."""
    return {
        "name": "WhatsApp Status Webhook",
        "version": "1.0.0",
        "status": "running",
        "endpoints": {
            "webhook_verify": "GET /webhook",
            "webhook_status": "POST /webhook",
            "health_live": "GET /health/live",
            "health_ready": "GET /health/ready",
        },
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=Config.PORT,
        reload=Config.ENVIRONMENT == "development",
    )
