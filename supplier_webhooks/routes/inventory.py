from typing import Optional

from fastapi import APIRouter, Depends, HTTPException

from supplier_webhooks.core.enums import SupplierSource
from supplier_webhooks.core.exceptions import RecordNotFoundError
from supplier_webhooks.routes.dependencies import get_ingestion_service
from supplier_webhooks.schemas.base import BaseSchema
from supplier_webhooks.services.ingestion import WebhookIngestionService

router = APIRouter(prefix="/inventory", tags=["inventory"])


class AcknowledgeRequest(BaseSchema):
    acknowledged_by: str


@router.get("/snapshots")
async def list_snapshots(
    supplier: Optional[SupplierSource] = None,
    service: WebhookIngestionService = Depends(get_ingestion_service),
):
    snapshots = await service.processor.get_all_inventory_snapshots()
    if supplier is not None:
        snapshots = [s for s in snapshots if s.supplier == supplier]
    return [s.to_wire() for s in snapshots]


@router.get("/snapshots/{supplier}/{style_id}/{color_id}/{size_id}")
async def get_snapshot(
    supplier: SupplierSource,
    style_id: str,
    color_id: str,
    size_id: str,
    service: WebhookIngestionService = Depends(get_ingestion_service),
):
    snapshot = await service.processor.get_inventory_snapshot(supplier, style_id, color_id, size_id)
    if snapshot is None:
        raise HTTPException(status_code=404, detail="No snapshot for this inventory unit")
    return snapshot.to_wire()


@router.get("/alerts")
async def list_alerts(
    include_acknowledged: bool = False,
    service: WebhookIngestionService = Depends(get_ingestion_service),
):
    alerts = service.alerts if include_acknowledged else service.unacknowledged_alerts()
    return [a.to_wire() for a in alerts]


@router.post("/alerts/{alert_id}/acknowledge")
async def acknowledge_alert(
    alert_id: str,
    body: AcknowledgeRequest,
    service: WebhookIngestionService = Depends(get_ingestion_service),
):
    try:
        alert = service.acknowledge_alert(alert_id, body.acknowledged_by)
    except RecordNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return alert.to_wire()


@router.get("/notifications")
async def list_notifications(
    unread_only: bool = False,
    service: WebhookIngestionService = Depends(get_ingestion_service),
):
    notifications = service.unread_notifications() if unread_only else service.notifications
    return [n.to_wire() for n in notifications]


@router.post("/notifications/{notification_id}/read")
async def mark_notification_read(
    notification_id: str,
    service: WebhookIngestionService = Depends(get_ingestion_service),
):
    try:
        notification = service.mark_notification_read(notification_id)
    except RecordNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return notification.to_wire()
