"""
Core module exports.
"""
from .enums import (
    LOW_STOCK_THRESHOLD,
    SupplierSource,
    WebhookEventType,
    WebhookStatus,
    NotificationType,
    NotificationSeverity,
    AlertType
)

from .exceptions import (
    BaseServiceError,
    WebhookServiceError,
    UnknownSupplierError,
    WebhookRejectedError,
    RecordNotFoundError,
    WebhookEventNotFoundError,
    SnapshotStoreError
)
