"""FastAPI application factory"""

from fastapi import FastAPI
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from applehub_checkout.api.middleware import RequestIDMiddleware, MetricsMiddleware
from applehub_checkout.api.v1 import checkout, coupons, credit, freight, installment_settings, reports
from applehub_checkout.infrastructure.observability.logging import setup_logging
from applehub_checkout.config import settings

# Setup structured logging
setup_logging(settings.log_level)


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title="AppleHub Checkout",
        description="Checkout pricing, coupons, credit approval and financing service",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # Add middleware (order matters: last added = first executed)
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    @app.get("/health")
    def health_check():
        return {"status": "ok", "service": settings.service_name}

    # Prometheus metrics endpoint
    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    # Register API routers
    app.include_router(coupons.router, prefix="/v1", tags=["coupons"])
    app.include_router(checkout.router, prefix="/v1", tags=["checkout"])
    app.include_router(credit.router, prefix="/v1", tags=["credit"])
    app.include_router(freight.router, prefix="/v1", tags=["freight"])
    app.include_router(installment_settings.router, prefix="/v1", tags=["settings"])
    app.include_router(reports.router, prefix="/v1", tags=["reports"])

    return app


app = create_app()
