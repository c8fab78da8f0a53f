"""FastAPI application factory"""

from fastapi import FastAPI
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from debt_planner.api.middleware import RequestIDMiddleware, MetricsMiddleware
from debt_planner.api.v1 import consolidation, milestones, plans, risk
from debt_planner.infrastructure.observability.logging import setup_logging
from debt_planner.config import settings

# Setup structured logging
setup_logging(settings.log_level)


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title="Debt Planner",
        description="Debt repayment planning, consolidation and debt-to-income analysis",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # Add middleware (order matters: last added = first executed)
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # Health check endpoint
    @app.get("/health")
    def health_check():
        return {"status": "ok", "service": settings.service_name}

    # Prometheus metrics endpoint
    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    # Register API routers
    app.include_router(plans.router, prefix="/v1", tags=["plans"])
    app.include_router(consolidation.router, prefix="/v1", tags=["consolidation"])
    app.include_router(risk.router, prefix="/v1", tags=["risk"])
    app.include_router(milestones.router, prefix="/v1", tags=["milestones"])

    return app


app = create_app()
