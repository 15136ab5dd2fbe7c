"""FastAPI application factory"""

import logging
import threading
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI
from fastapi.responses import JSONResponse
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from starlette.responses import Response

from allowance_ledger.api.middleware import MetricsMiddleware, RequestIDMiddleware
from allowance_ledger.api.v1 import account, account_settings, goals, recalculate, transactions
from allowance_ledger.api.v1.schemas import HealthResponse
from allowance_ledger.config import settings
from allowance_ledger.infrastructure.database.session import check_db, get_db, init_db
from allowance_ledger.infrastructure.observability.logging import setup_logging
from allowance_ledger.utils.clock import ScheduleThrottle, SystemClock

# Setup structured logging
setup_logging(settings.log_level)


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    yield


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title="Allowance Ledger",
        description="Savings account with weekly allowance, weekly interest and goal projections",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    # Per-app collaborators, overridable in tests
    app.state.clock = SystemClock(settings.timezone)
    app.state.schedule_throttle = ScheduleThrottle(settings.schedule_cooldown_seconds, app.state.clock)
    app.state.account_lock = threading.Lock()

    # Add middleware (order matters: last added = first executed)
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # Health check endpoint
    @app.get("/health", response_model=HealthResponse)
    def health_check(db: Session = Depends(get_db)):
        try:
            check_db(db)
        except SQLAlchemyError as e:
            logging.error(f"Storage health check failed: {e}")
            return JSONResponse(
                status_code=503,
                content={"status": "degraded", "service": settings.service_name, "storage": "failed"},
            )
        return HealthResponse(status="ok", service=settings.service_name, storage="ok")

    # Prometheus metrics endpoint
    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    # Register API routers
    app.include_router(account.router, prefix="/v1", tags=["account"])
    app.include_router(account_settings.router, prefix="/v1", tags=["settings"])
    app.include_router(transactions.router, prefix="/v1", tags=["transactions"])
    app.include_router(goals.router, prefix="/v1", tags=["goals"])
    app.include_router(recalculate.router, prefix="/v1", tags=["maintenance"])

    return app


app = create_app()
