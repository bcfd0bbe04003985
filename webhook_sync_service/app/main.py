# FastAPI Application Entry Point
from fastapi import FastAPI

# Configuration and Observability
from webhook_sync_service.app.config import settings
from webhook_sync_service.app.observability import setup_opentelemetry, logger

# Initialize OpenTelemetry
setup_opentelemetry(service_name=settings.SERVICE_NAME_API)

# Import instrumentors after OTel SDK is initialized
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.instrumentation.pymongo import PymongoInstrumentor

# Database connection
from webhook_sync_service.infrastructure.database.connection import connect_to_mongo, close_mongo_connection

# API Routers
from webhook_sync_service.app.api.v1.endpoints import health as health_router
from webhook_sync_service.app.api.v1.endpoints import webhooks as webhooks_router

# --- FastAPI Application Instance ---
app = FastAPI(
    title="Webhook Sync Service",
    description="Verifies e-commerce platform webhooks and projects them into MongoDB collections.",
    version="0.1.0"
)

# --- Event Handlers for DB Connection & OTel Instrumentation ---
@app.on_event("startup")
async def startup_event():
    logger.info("FastAPI application startup...")
    if not settings.WEBHOOK_SHARED_SECRET:
        logger.error("WEBHOOK_SHARED_SECRET is not configured; every webhook will be refused.")
    try:
        await connect_to_mongo()
        logger.info("MongoDB connection established.")

        # Motor drives pymongo underneath, so this covers every store call.
        PymongoInstrumentor().instrument()
        logger.info("PyMongo instrumentation complete.")
    except Exception as e:
        logger.error(f"Failed during startup: {e}", exc_info=True)

@app.on_event("shutdown")
async def shutdown_event():
    logger.info("FastAPI application shutdown...")
    close_mongo_connection()

FastAPIInstrumentor.instrument_app(app)
logger.info("FastAPI instrumentation complete.")

# Include API Routers
app.include_router(health_router.router)
app.include_router(webhooks_router.router, prefix="/api/v1")

logger.info("API routers included. Application setup complete.")

# To run: uvicorn webhook_sync_service.app.main:app --port 8000
