"""
Webhook ingestion service.

Sits between the HTTP routes and the processor: normalizes raw supplier
bodies into pending events, runs them through the processor, moves each
event through its status lifecycle, and keeps the notifications and alerts
produced so far for the dashboard to read.

Processing is serialized behind one lock. The processor reads, diffs and
writes each snapshot across await points, so two overlapping deliveries for
the same SKU must not interleave.
"""
import asyncio
import logging
from typing import Any, Dict, Iterable, List, Optional

from supplier_webhooks.core.enums import SupplierSource, WebhookEventType, WebhookStatus
from supplier_webhooks.core.exceptions import (
    RecordNotFoundError,
    UnknownSupplierError,
    WebhookEventNotFoundError,
    WebhookRejectedError,
)
from supplier_webhooks.schemas.webhook import (
    InventoryAlert,
    WebhookConfig,
    WebhookEvent,
    WebhookNotification,
    utc_now,
)
from supplier_webhooks.services.normalizers import TaggedPayload, normalize_payload
from supplier_webhooks.services.webhook_processor import EventProcessingResult, WebhookProcessor

logger = logging.getLogger(__name__)


class WebhookEventLog:
    """Received events by id, in arrival order"""

    def __init__(self):
        self._events: Dict[str, WebhookEvent] = {}

    def add(self, event: WebhookEvent) -> None:
        self._events[event.id] = event

    def get(self, event_id: str) -> WebhookEvent:
        try:
            return self._events[event_id]
        except KeyError:
            raise WebhookEventNotFoundError(f"Webhook event {event_id} not found")

    def all(self) -> List[WebhookEvent]:
        return list(self._events.values())

    def __len__(self) -> int:
        return len(self._events)


class WebhookIngestionService:

    def __init__(self, processor: WebhookProcessor, configs: Optional[Iterable[WebhookConfig]] = None):
        self.processor = processor
        self.events = WebhookEventLog()
        self.notifications: List[WebhookNotification] = []
        self.alerts: List[InventoryAlert] = []
        self.configs: Dict[SupplierSource, WebhookConfig] = {c.source: c for c in configs or []}
        self._lock = asyncio.Lock()

    # ------------------------------------------------------------------
    # Intake
    # ------------------------------------------------------------------
    def receive(
        self,
        source: SupplierSource,
        raw_body: Any,
        event_type: WebhookEventType = WebhookEventType.INVENTORY_UPDATED,
    ) -> WebhookEvent:
        """Normalize a raw body and record it as a pending event"""
        try:
            source = SupplierSource(source)
        except ValueError:
            raise UnknownSupplierError(f"Unknown supplier source: {source!r}")
        try:
            event_type = WebhookEventType(event_type)
        except ValueError:
            raise WebhookRejectedError(f"Unknown event type: {event_type!r}")

        config = self.configs.get(source)
        if config is not None:
            if not config.accepts(event_type):
                raise WebhookRejectedError(
                    f"Webhook config {config.name!r} does not accept {event_type.value} from {source.value}"
                )
            config.last_triggered_at = utc_now()

        payload = normalize_payload(TaggedPayload(source=source, body=raw_body))
        event = WebhookEvent(source=source, event_type=event_type, payload=payload)
        self.events.add(event)

        logger.info(f"Received {source.value} webhook {event.id} with {len(payload.products)} product(s)")
        return event

    def add_event(self, event: WebhookEvent) -> WebhookEvent:
        """Record an event that was built elsewhere (tests, sample data)"""
        self.events.add(event)
        return event

    # ------------------------------------------------------------------
    # Processing
    # ------------------------------------------------------------------
    async def run(self, event_id: str) -> EventProcessingResult:
        event = self.events.get(event_id)
        event.mark_processing()

        async with self._lock:
            result = await self.processor.process_webhook_event(
                event,
                on_notification=self.notifications.append,
                on_alert=self.alerts.append,
            )

        if result.success:
            event.mark_completed()
        else:
            # Snapshots written before the failure stay stored, so a retry
            # will not detect these transitions again.
            self.notifications.extend(result.notifications)
            self.alerts.extend(result.alerts)
            event.mark_failed("; ".join(result.errors) or "Processing failed")
            logger.warning(f"Webhook event {event.id} failed (attempt {event.retry_count + 1})")

        return result

    async def ingest(
        self,
        source: SupplierSource,
        raw_body: Any,
        event_type: WebhookEventType = WebhookEventType.INVENTORY_UPDATED,
    ) -> EventProcessingResult:
        event = self.receive(source, raw_body, event_type)
        return await self.run(event.id)

    async def retry(self, event_id: str) -> EventProcessingResult:
        """Run an event again; scheduling and backoff are up to the caller"""
        event = self.events.get(event_id)
        event.mark_retrying()
        logger.info(f"Retrying webhook event {event.id} (retry {event.retry_count})")
        return await self.run(event_id)

    # ------------------------------------------------------------------
    # Dashboard queries
    # ------------------------------------------------------------------
    def pending_events(self) -> List[WebhookEvent]:
        return [
            e for e in self.events.all()
            if e.status in (WebhookStatus.PENDING, WebhookStatus.PROCESSING)
        ]

    def unread_notifications(self) -> List[WebhookNotification]:
        return [n for n in self.notifications if not n.read]

    def unacknowledged_alerts(self) -> List[InventoryAlert]:
        return [a for a in self.alerts if not a.is_acknowledged]

    def mark_notification_read(self, notification_id: str) -> WebhookNotification:
        for notification in self.notifications:
            if notification.id == notification_id:
                notification.mark_read()
                return notification
        raise RecordNotFoundError(f"Notification {notification_id} not found")

    def acknowledge_alert(self, alert_id: str, by: str) -> InventoryAlert:
        for alert in self.alerts:
            if alert.id == alert_id:
                alert.acknowledge(by)
                return alert
        raise RecordNotFoundError(f"Alert {alert_id} not found")
