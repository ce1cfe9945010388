"""
Main entry point for the FastAPI backend server.

This module creates a FastAPI application, configures CORS, loads the
accident tables at startup and includes the analytics router.

Run the server with:
    uvicorn accident_analytics.main:app --reload
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .api.analytics import router as analytics_router
from .core.config import settings
from .engines import AnalysisEngineError
from .services.pipeline import build_dashboard, load_dataset
from .sources import DataSourceError, create_sources_from_settings

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for application startup and shutdown.

    Loads every table and builds the dashboard once. A failure leaves the
    app running but every analytics endpoint reports the load error.
    """
    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    logger.info("Starting UK Accident Analytics API...")

    app.state.dashboard = None
    app.state.load_error = None
    try:
        dataset = load_dataset(settings=settings)
        app.state.dashboard = build_dashboard(dataset, settings=settings)
        logger.info("✓ Dashboard ready")
    except (DataSourceError, AnalysisEngineError) as e:
        logger.error(f"Failed to build dashboard: {e}")
        app.state.load_error = str(e)

    yield  # Application is running

    logger.info("Shutting down UK Accident Analytics API...")


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.
    """
    app = FastAPI(
        title=settings.PROJECT_NAME,
        version=settings.VERSION,
        description="Hot spots, trends, statistics and correlations over UK accident records.",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(analytics_router, prefix="/api/v1")

    @app.get("/health", tags=["Health"])
    async def health_check() -> dict:
        """
        Health-check endpoint used by monitoring tools.
        Returns status of the service and of each source table.
        """
        sources = {
            name: source.health_check().model_dump(mode="json")
            for name, source in create_sources_from_settings(settings).items()
        }
        response = {
            "status": "ok",
            "version": settings.VERSION,
            "dashboard_loaded": getattr(app.state, "dashboard", None) is not None,
            "sources": sources,
        }

        load_error = getattr(app.state, "load_error", None)
        if load_error:
            response["status"] = "error"
            response["error"] = load_error
        elif not all(s["healthy"] for s in sources.values()):
            response["status"] = "degraded"

        return response

    return app


# Instantiate the FastAPI app
app = create_app()

# If this file is executed directly, run the server with uvicorn
if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "accident_analytics.main:app",
        host="0.0.0.0",
        port=8080,
        reload=settings.DEBUG,
    )
