"""
Shared enums and constants used across the application.
"""

from enum import Enum

# Applied to every snapshot regardless of supplier or SKU.
LOW_STOCK_THRESHOLD = 10


class SupplierSource(str, Enum):
    SSACTIVEWEAR = "ssactivewear"
    SANMAR = "sanmar"
    MANUAL = "manual"

    @property
    def display_name(self):
        return {
            "ssactivewear": "S&S Activewear",
            "sanmar": "SanMar",
            "manual": "Manual",
        }[self.value]


class WebhookEventType(str, Enum):
    INVENTORY_UPDATED = "inventory.updated"
    INVENTORY_LOW_STOCK = "inventory.low_stock"
    INVENTORY_OUT_OF_STOCK = "inventory.out_of_stock"
    INVENTORY_RESTOCKED = "inventory.restocked"
    PRODUCT_UPDATED = "product.updated"
    PRODUCT_DISCONTINUED = "product.discontinued"
    PRICING_UPDATED = "pricing.updated"


class WebhookStatus(str, Enum):
    """Lifecycle of a received webhook call"""
    PENDING = "pending"          # Received, not yet picked up
    PROCESSING = "processing"    # Processor is running
    COMPLETED = "completed"
    FAILED = "failed"
    RETRYING = "retrying"        # Waiting for another attempt


class NotificationType(str, Enum):
    LOW_STOCK = "low_stock"
    OUT_OF_STOCK = "out_of_stock"
    RESTOCKED = "restocked"
    PRICE_CHANGE = "price_change"
    DISCONTINUED = "discontinued"


class NotificationSeverity(str, Enum):
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class AlertType(str, Enum):
    LOW_STOCK = "low_stock"
    OUT_OF_STOCK = "out_of_stock"
    RESTOCKED = "restocked"
