from typing import Dict

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

import logging
from alerts.alerts_routes import router as alerts_router
from alerts.session_registry import get_session_registry
from budgets.budget_routes import router as budget_router
from db.postgres import close_postgres, init_postgres
from notifications.notification_routes import router as notifications_router
from settings.logging_config import configure_logging
from transactions.transaction_routes import router as transactions_router

logger = logging.getLogger(__name__)


def get_app() -> FastAPI:
    configure_logging()
    logger.info("Starting UPI Wallet alerts API")
    app = FastAPI(title="UPI Wallet Alerts API")

    # CORS: enable permissive defaults for local development
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # DB lifecycle
    @app.on_event("startup")
    async def on_startup() -> None:
        logger.info("Initializing database")
        await init_postgres()

    @app.on_event("shutdown")
    async def on_shutdown() -> None:
        logger.info("Ending alert sessions")
        await get_session_registry().shutdown()
        logger.info("Closing database")
        await close_postgres()

    # Routers
    app.include_router(budget_router)
    app.include_router(transactions_router)
    app.include_router(notifications_router)
    app.include_router(alerts_router)
    logger.info("Routers initialized successfully")

    # Health
    @app.get("/health")
    async def health_check() -> Dict[str, str]:
        return {"status": "ok"}

    return app


# ASGI app instance
app = get_app()
