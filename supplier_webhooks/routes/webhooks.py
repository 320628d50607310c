import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends, HTTPException, Query

from supplier_webhooks.core.config import get_settings
from supplier_webhooks.core.enums import SupplierSource, WebhookEventType
from supplier_webhooks.core.exceptions import (
    RecordNotFoundError,
    UnknownSupplierError,
    WebhookRejectedError,
)
from supplier_webhooks.routes.dependencies import get_ingestion_service
from supplier_webhooks.services import analytics
from supplier_webhooks.services.ingestion import WebhookIngestionService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/webhooks", tags=["webhooks"])


def _summary(event, result) -> Dict[str, Any]:
    return {
        "eventId": event.id,
        "status": event.status.value,
        "retryCount": event.retry_count,
        "success": result.success,
        "notifications": len(result.notifications),
        "alerts": len(result.alerts),
    }


@router.get("/events")
async def list_events(service: WebhookIngestionService = Depends(get_ingestion_service)):
    """Received events, newest first"""
    events = sorted(service.events.all(), key=lambda e: e.received_at, reverse=True)
    return [event.to_wire() for event in events]


@router.get("/analytics")
async def webhook_analytics(
    hours: Optional[float] = Query(None, gt=0),
    supplier: Optional[SupplierSource] = None,
    service: WebhookIngestionService = Depends(get_ingestion_service),
):
    """Reliability metrics over the received events"""
    events = analytics.filter_events(service.events.all(), hours=hours, supplier=supplier)
    overall = analytics.overall_metrics(events)
    return {
        "overall": overall.model_dump(mode="json"),
        "rating": analytics.reliability_rating(overall.success_rate),
        "suppliers": [m.model_dump(mode="json") for m in analytics.supplier_metrics(events)],
        "eventTypes": [{"type": t, "count": c} for t, c in analytics.event_type_breakdown(events)],
    }


@router.post("/events/{event_id}/retry")
async def retry_event(event_id: str, service: WebhookIngestionService = Depends(get_ingestion_service)):
    try:
        result = await service.retry(event_id)
    except RecordNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return _summary(service.events.get(event_id), result)


@router.post("/{source}")
async def receive_webhook(
    source: str,
    payload: Any = Body(...),
    event_type: Optional[WebhookEventType] = Query(None, alias="eventType"),
    service: WebhookIngestionService = Depends(get_ingestion_service),
):
    """Endpoint suppliers post inventory changes to"""
    event_type = event_type or WebhookEventType(get_settings().DEFAULT_EVENT_TYPE)
    try:
        event = service.receive(source, payload, event_type)
    except UnknownSupplierError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except WebhookRejectedError as e:
        logger.warning(str(e))
        raise HTTPException(status_code=409, detail=str(e))

    result = await service.run(event.id)
    return _summary(event, result)
