"""
Pydantic models for supplier webhook events and the inventory state derived
from them.

One ``WebhookEvent`` owns one ``WebhookPayload``, which holds many
``ProductInventoryUpdate`` entries, each holding many ``SizeInventoryUpdate``
entries. Every size update maps to exactly one ``InventorySnapshot`` key.
"""
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from pydantic import ConfigDict, Field, NonNegativeInt, computed_field, field_validator

from supplier_webhooks.core.enums import (
    LOW_STOCK_THRESHOLD,
    AlertType,
    NotificationSeverity,
    NotificationType,
    SupplierSource,
    WebhookEventType,
    WebhookStatus,
)
from supplier_webhooks.schemas.base import BaseSchema


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def new_id(prefix: str) -> str:
    return f"{prefix}_{uuid.uuid4().hex[:12]}"


def make_inventory_key(supplier: SupplierSource, style_id: str, color_id: str, size_id: str) -> str:
    """Key of one inventory unit: ``supplier:style_id:color_id:size_id``"""
    supplier_value = supplier.value if isinstance(supplier, SupplierSource) else supplier
    return f"{supplier_value}:{style_id}:{color_id}:{size_id}"


class SizeInventoryUpdate(BaseSchema):
    size_id: str
    size_name: str
    # Supplier-reported, informational only. Diffing uses the stored snapshot.
    previous_quantity: Optional[int] = None
    current_quantity: NonNegativeInt
    price_change: Optional[float] = None
    timestamp: datetime = Field(default_factory=utc_now)


class ProductInventoryUpdate(BaseSchema):
    """One product/color combination reported by a supplier"""
    sku: str
    style_id: str
    style_name: str
    brand_name: str
    color_id: str
    color_name: str
    color_code: Optional[str] = None
    size_updates: List[SizeInventoryUpdate] = Field(default_factory=list)
    price_update: Optional[float] = None
    discontinued: bool = False


class WebhookPayload(BaseSchema):
    products: List[ProductInventoryUpdate] = Field(default_factory=list)
    timestamp: datetime = Field(default_factory=utc_now)
    batch_id: Optional[str] = None


class WebhookEvent(BaseSchema):
    """One received webhook call and its processing lifecycle"""
    id: str = Field(default_factory=lambda: new_id("webhook"))
    source: SupplierSource
    event_type: WebhookEventType = WebhookEventType.INVENTORY_UPDATED
    payload: WebhookPayload
    status: WebhookStatus = WebhookStatus.PENDING
    received_at: datetime = Field(default_factory=utc_now)
    processed_at: Optional[datetime] = None
    retry_count: int = 0
    error: Optional[str] = None
    metadata: Optional[Dict[str, Any]] = None

    @field_validator("received_at", "processed_at")
    @classmethod
    def _assume_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        # Naive timestamps from suppliers are UTC.
        if value is not None and value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value

    def mark_processing(self) -> None:
        self.status = WebhookStatus.PROCESSING

    def mark_completed(self) -> None:
        self.status = WebhookStatus.COMPLETED
        self.processed_at = utc_now()
        self.error = None

    def mark_failed(self, error: str) -> None:
        self.status = WebhookStatus.FAILED
        self.processed_at = utc_now()
        self.error = error

    def mark_retrying(self) -> None:
        self.status = WebhookStatus.RETRYING
        self.retry_count += 1

    @property
    def response_time_ms(self) -> Optional[float]:
        if self.processed_at is None:
            return None
        return (self.processed_at - self.received_at).total_seconds() * 1000


class InventorySnapshot(BaseSchema):
    """Last known state of one (supplier, style, color, size) unit.

    The stock flags are computed from ``quantity`` and ``low_stock_threshold``
    on every access and cannot be assigned.
    """
    model_config = ConfigDict(validate_assignment=True)

    id: str = Field(default_factory=lambda: new_id("inv"))
    sku: str
    style_id: str
    color_id: str
    size_id: str
    quantity: NonNegativeInt
    price: float = 0.0
    supplier: SupplierSource
    updated_at: datetime = Field(default_factory=utc_now)
    low_stock_threshold: int = LOW_STOCK_THRESHOLD

    @computed_field
    @property
    def is_low_stock(self) -> bool:
        return 0 < self.quantity <= self.low_stock_threshold

    @computed_field
    @property
    def is_out_of_stock(self) -> bool:
        return self.quantity == 0

    @property
    def key(self) -> str:
        return make_inventory_key(self.supplier, self.style_id, self.color_id, self.size_id)


class WebhookNotification(BaseSchema):
    """Human-readable record of a detected transition or fact"""
    id: str = Field(default_factory=lambda: new_id("notif"))
    event_id: str
    type: NotificationType
    title: str
    message: str
    severity: NotificationSeverity
    product_sku: str
    product_name: str
    read: bool = False
    created_at: datetime = Field(default_factory=utc_now)
    metadata: Optional[Dict[str, Any]] = None

    def mark_read(self) -> None:
        self.read = True


class InventoryAlert(BaseSchema):
    """Structured record of a current adverse stock state"""
    id: str = Field(default_factory=lambda: new_id("alert"))
    sku: str
    style_id: str
    style_name: str
    color_id: str
    color_name: str
    size_id: str
    size_name: str
    alert_type: AlertType
    current_quantity: int
    threshold: Optional[int] = None
    supplier: SupplierSource
    # Filled in by whatever links alerts to open quotes and jobs.
    affected_quotes: Optional[List[str]] = None
    affected_jobs: Optional[List[str]] = None
    created_at: datetime = Field(default_factory=utc_now)
    acknowledged_at: Optional[datetime] = None
    acknowledged_by: Optional[str] = None

    @property
    def is_acknowledged(self) -> bool:
        return self.acknowledged_at is not None

    def acknowledge(self, by: str) -> None:
        self.acknowledged_at = utc_now()
        self.acknowledged_by = by


class WebhookConfig(BaseSchema):
    """Per-supplier subscription settings"""
    id: str = Field(default_factory=lambda: new_id("webhook_config"))
    name: str
    source: SupplierSource
    is_active: bool = True
    endpoint_url: Optional[str] = None
    events: List[WebhookEventType] = Field(default_factory=lambda: list(WebhookEventType))
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)
    last_triggered_at: Optional[datetime] = None

    def accepts(self, event_type: WebhookEventType) -> bool:
        return self.is_active and event_type in self.events
