"""
Supplier webhook event processor.

Takes one normalized ``WebhookEvent``, writes a fresh snapshot for every size
variant it mentions, and compares each against the snapshot stored before it
to spot stock transitions:

- in stock -> out of stock: ``out_of_stock`` notification (warning)
- out of stock -> in stock: ``restocked`` notification (info)
- not low -> low stock: ``low_stock`` notification (warning)

Discontinued products and price updates always produce a notification.
Independently, every size left out of stock or low on stock after the update
produces an ``InventoryAlert``.

"Previous" always means the processor's own stored snapshot, never the
``previous_quantity`` a supplier reports. A first sighting has nothing to
diff against and yields no transition notification.

Failures are caught per event: the result comes back with ``success=False``
and whatever was collected before the error. Store writes already made are
not rolled back, so a failed event should be re-delivered as a whole.
"""
import logging
from typing import Any, Callable, Dict, List, Optional

from supplier_webhooks.core.enums import (
    LOW_STOCK_THRESHOLD,
    AlertType,
    NotificationSeverity,
    NotificationType,
    SupplierSource,
)
from supplier_webhooks.schemas.webhook import (
    InventoryAlert,
    InventorySnapshot,
    ProductInventoryUpdate,
    SizeInventoryUpdate,
    WebhookEvent,
    WebhookNotification,
)
from supplier_webhooks.services.snapshot_store import InventorySnapshotStore

logger = logging.getLogger(__name__)

NotificationCallback = Callable[[WebhookNotification], Any]
AlertCallback = Callable[[InventoryAlert], Any]


class EventProcessingResult:
    """Result of processing a webhook event"""
    def __init__(self, event_id: str):
        self.event_id: str = event_id
        self.success: bool = False
        self.notifications: List[WebhookNotification] = []
        self.alerts: List[InventoryAlert] = []
        self.errors: List[str] = []

    def to_dict(self) -> Dict[str, Any]:
        return {
            "eventId": self.event_id,
            "success": self.success,
            "notifications": [n.to_wire() for n in self.notifications],
            "alerts": [a.to_wire() for a in self.alerts],
            "errors": self.errors,
        }


class WebhookProcessor:
    """Reconciles supplier inventory events against a snapshot store"""

    def __init__(self, store: InventorySnapshotStore, low_stock_threshold: int = LOW_STOCK_THRESHOLD):
        self.store = store
        self.low_stock_threshold = low_stock_threshold

    async def process_webhook_event(
        self,
        event: WebhookEvent,
        on_notification: Optional[NotificationCallback] = None,
        on_alert: Optional[AlertCallback] = None,
    ) -> EventProcessingResult:
        """
        Process one webhook event.

        Args:
            event: Normalized event to apply
            on_notification: Called once per notification, in emission order,
                after every product has been processed
            on_alert: Called once per alert, in emission order, after the
                notification callbacks

        Returns:
            EventProcessingResult with the success flag and everything collected
        """
        result = EventProcessingResult(event.id)

        try:
            logger.info(
                f"Processing webhook event {event.id}: {event.event_type.value} from {event.source.value} "
                f"({len(event.payload.products)} product(s))"
            )

            for product in event.payload.products:
                await self._process_product_update(event, product, result.notifications)
                await self._generate_alerts(event.source, product, result.alerts)

            if on_notification:
                for notification in result.notifications:
                    on_notification(notification)

            if on_alert:
                for alert in result.alerts:
                    on_alert(alert)

            result.success = True
            logger.info(
                f"Webhook event {event.id} processed: "
                f"{len(result.notifications)} notification(s), {len(result.alerts)} alert(s)"
            )

        except Exception as e:
            logger.error(f"Error processing webhook event {event.id}: {e}", exc_info=True)
            result.errors.append(str(e))

        return result

    # ------------------------------------------------------------------
    # Per product
    # ------------------------------------------------------------------
    async def _process_product_update(
        self,
        event: WebhookEvent,
        product: ProductInventoryUpdate,
        notifications: List[WebhookNotification],
    ) -> None:
        """Append this product's notifications as they are detected"""
        supplier = event.source

        if product.discontinued:
            notifications.append(self._create_notification(
                event.id,
                NotificationType.DISCONTINUED,
                "Product Discontinued",
                f"{product.style_name} ({product.color_name}) has been discontinued by {supplier.value.upper()}",
                NotificationSeverity.ERROR,
                product,
            ))

        if product.price_update is not None:
            notifications.append(self._create_notification(
                event.id,
                NotificationType.PRICE_CHANGE,
                "Price Change",
                f"{product.style_name} ({product.color_name}) price updated to ${product.price_update:.2f}",
                NotificationSeverity.INFO,
                product,
            ))

        for size_update in product.size_updates:
            previous = await self.store.get(
                supplier, product.style_id, product.color_id, size_update.size_id
            )
            snapshot = self._build_snapshot(supplier, product, size_update, previous)
            await self.store.upsert(snapshot)

            if previous is not None:
                transition = self._detect_transition(event.id, product, size_update, previous, snapshot)
                if transition is not None:
                    logger.info(f"{transition.type.value}: {snapshot.key} {previous.quantity} -> {snapshot.quantity}")
                    notifications.append(transition)

    def _build_snapshot(
        self,
        supplier: SupplierSource,
        product: ProductInventoryUpdate,
        size_update: SizeInventoryUpdate,
        previous: Optional[InventorySnapshot],
    ) -> InventorySnapshot:
        if product.price_update is not None:
            price = product.price_update
        elif previous is not None:
            price = previous.price
        else:
            price = 0.0

        return InventorySnapshot(
            sku=product.sku,
            style_id=product.style_id,
            color_id=product.color_id,
            size_id=size_update.size_id,
            quantity=size_update.current_quantity,
            price=price,
            supplier=supplier,
            updated_at=size_update.timestamp,
            low_stock_threshold=self.low_stock_threshold,
        )

    def _detect_transition(
        self,
        event_id: str,
        product: ProductInventoryUpdate,
        size_update: SizeInventoryUpdate,
        previous: InventorySnapshot,
        current: InventorySnapshot,
    ) -> Optional[WebhookNotification]:
        """At most one transition per size; the first matching rule wins"""
        label = f"{product.style_name} - {product.color_name} ({size_update.size_name})"

        if previous.quantity > 0 and current.is_out_of_stock:
            return self._create_notification(
                event_id,
                NotificationType.OUT_OF_STOCK,
                "Out of Stock",
                f"{label} is now out of stock",
                NotificationSeverity.WARNING,
                product,
                {"size": size_update.size_name, "color": product.color_name},
            )

        if previous.is_out_of_stock and not current.is_out_of_stock:
            return self._create_notification(
                event_id,
                NotificationType.RESTOCKED,
                "Restocked",
                f"{label} is back in stock ({current.quantity} available)",
                NotificationSeverity.INFO,
                product,
                {"size": size_update.size_name, "color": product.color_name, "quantity": current.quantity},
            )

        if not previous.is_low_stock and current.is_low_stock:
            return self._create_notification(
                event_id,
                NotificationType.LOW_STOCK,
                "Low Stock Alert",
                f"{label} is running low ({current.quantity} remaining)",
                NotificationSeverity.WARNING,
                product,
                {"size": size_update.size_name, "color": product.color_name, "quantity": current.quantity},
            )

        return None

    async def _generate_alerts(
        self,
        supplier: SupplierSource,
        product: ProductInventoryUpdate,
        alerts: List[InventoryAlert],
    ) -> None:
        # Only adverse states raise alerts; restocking is covered by notifications.
        for size_update in product.size_updates:
            snapshot = await self.store.get(
                supplier, product.style_id, product.color_id, size_update.size_id
            )
            if snapshot is None:
                continue

            if snapshot.is_out_of_stock:
                alert_type, threshold = AlertType.OUT_OF_STOCK, None
            elif snapshot.is_low_stock:
                alert_type, threshold = AlertType.LOW_STOCK, snapshot.low_stock_threshold
            else:
                continue

            alerts.append(InventoryAlert(
                sku=product.sku,
                style_id=product.style_id,
                style_name=product.style_name,
                color_id=product.color_id,
                color_name=product.color_name,
                size_id=size_update.size_id,
                size_name=size_update.size_name,
                alert_type=alert_type,
                current_quantity=snapshot.quantity,
                threshold=threshold,
                supplier=supplier,
            ))

    @staticmethod
    def _create_notification(
        event_id: str,
        notification_type: NotificationType,
        title: str,
        message: str,
        severity: NotificationSeverity,
        product: ProductInventoryUpdate,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> WebhookNotification:
        return WebhookNotification(
            event_id=event_id,
            type=notification_type,
            title=title,
            message=message,
            severity=severity,
            product_sku=product.sku,
            product_name=product.style_name,
            metadata=metadata,
        )

    # ------------------------------------------------------------------
    # Snapshot queries
    # ------------------------------------------------------------------
    async def get_inventory_snapshot(
        self,
        supplier: SupplierSource,
        style_id: str,
        color_id: str,
        size_id: str,
    ) -> Optional[InventorySnapshot]:
        return await self.store.get(supplier, style_id, color_id, size_id)

    async def get_all_inventory_snapshots(self) -> List[InventorySnapshot]:
        return await self.store.get_all()

    async def clear_inventory_cache(self) -> None:
        await self.store.clear()
