# supplier_webhooks/main.py

from contextlib import asynccontextmanager

from fastapi import FastAPI

from supplier_webhooks.core.config import get_settings
from supplier_webhooks.core.logging_config import configure_logging
from supplier_webhooks.routes import health, inventory, webhooks
from supplier_webhooks.services.ingestion import WebhookIngestionService
from supplier_webhooks.services.snapshot_store import InMemorySnapshotStore
from supplier_webhooks.services.webhook_processor import WebhookProcessor


def build_ingestion_service() -> WebhookIngestionService:
    return WebhookIngestionService(WebhookProcessor(InMemorySnapshotStore()))


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging()
    if not hasattr(app.state, "ingestion_service"):
        app.state.ingestion_service = build_ingestion_service()
    yield


def create_app() -> FastAPI:
    settings = get_settings()
    app = FastAPI(
        title="Supplier Inventory Webhooks",
        debug=settings.DEBUG,
        lifespan=lifespan,
    )
    app.include_router(health.router)
    app.include_router(webhooks.router)
    app.include_router(inventory.router)
    return app


app = create_app()
