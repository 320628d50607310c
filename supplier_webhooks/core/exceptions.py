class BaseServiceError(Exception):
    """Base exception for all service-related errors."""
    pass

class WebhookServiceError(BaseServiceError):
    """Base exception for webhook ingestion errors."""
    pass

class UnknownSupplierError(WebhookServiceError):
    """Raised when no normalizer is registered for a supplier tag."""
    pass

class WebhookRejectedError(WebhookServiceError):
    """Raised when a supplier's webhook config does not accept the event."""
    pass

class RecordNotFoundError(WebhookServiceError):
    """Raised when an event, notification or alert id is unknown."""
    pass

class WebhookEventNotFoundError(RecordNotFoundError):
    """Raised when a webhook event id is not in the event log."""
    pass

class SnapshotStoreError(BaseServiceError):
    """Raised when the inventory snapshot store cannot read or write."""
    pass
