"""
Controlled Substance Inventory API.

ARCHITECTURE:
- InventoryService: catalog + append-only ledger, held in process memory
- Classifier: Groq LLM assigns the DEA schedule and formats names on registration
- FastAPI: thin HTTP layer for the pharmacy stock page and transaction log

State lives only as long as the process. Restarting the server starts from
the seed catalog and an empty ledger.
"""
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from csinventory.api.routes import drugs, transactions
from csinventory.core.config import settings
from csinventory.services.inventory_service import InventoryService
from csinventory.services.seed import seed_catalog

logger = logging.getLogger(__name__)


def configure_logging():
    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Startup:
    1. Configure logging
    2. Create the inventory service (unless one was injected)
    3. Load the starter catalog when SEED_INITIAL_DRUGS is on
    """
    configure_logging()
    if getattr(app.state, "inventory", None) is None:
        app.state.inventory = InventoryService()
        if settings.SEED_INITIAL_DRUGS:
            seed_catalog(app.state.inventory)
    logger.info(f"Inventory ready: {len(app.state.inventory.catalog)} drugs in catalog")

    yield

    logger.info(f"Shutting down; {app.state.inventory.ledger.count()} transactions discarded")


def create_app(inventory: Optional[InventoryService] = None) -> FastAPI:
    app = FastAPI(
        title="Controlled Substance Inventory API",
        description="Pharmacy stock, unit distributions and the transaction log.",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.inventory = inventory

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "POST", "DELETE", "OPTIONS"],
        allow_headers=[
            "Content-Type",
            "Accept",
            "Origin",
            "X-Delete-Authorization",
        ],
        max_age=600,
    )

    @app.middleware("http")
    async def add_security_headers(request, call_next):
        response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        return response

    app.include_router(drugs.router, prefix="/drugs", tags=["drugs"])
    app.include_router(transactions.router, prefix="/transactions", tags=["transactions"])

    @app.get("/health")
    def health():
        return {"status": "ok"}

    return app


app = create_app()
