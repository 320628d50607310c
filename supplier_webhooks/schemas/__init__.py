from .base import BaseSchema
from .webhook import (
    SizeInventoryUpdate,
    ProductInventoryUpdate,
    WebhookPayload,
    WebhookEvent,
    InventorySnapshot,
    WebhookNotification,
    InventoryAlert,
    WebhookConfig,
    make_inventory_key,
)
