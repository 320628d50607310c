from fastapi import Request

from supplier_webhooks.services.ingestion import WebhookIngestionService


def get_ingestion_service(request: Request) -> WebhookIngestionService:
    """The ingestion service created at startup (override in tests)"""
    return request.app.state.ingestion_service
