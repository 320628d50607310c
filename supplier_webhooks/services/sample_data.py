"""
Synthetic webhook events for demos and the analytics views.

Nothing here feeds the processor in production; these streams stand in for
a live supplier feed. Every generator accepts an optional ``random.Random``
so tests can pin the output with a seed.
"""
import random
from datetime import datetime, timedelta
from typing import List, Optional

from supplier_webhooks.core.enums import SupplierSource, WebhookEventType, WebhookStatus
from supplier_webhooks.schemas.webhook import (
    ProductInventoryUpdate,
    SizeInventoryUpdate,
    WebhookEvent,
    WebhookPayload,
    new_id,
    utc_now,
)

EVENT_TYPES = list(WebhookEventType)
SUPPLIERS = list(SupplierSource)

STYLES = [
    {"id": "G500", "name": "Gildan 5000 Heavy Cotton T-Shirt", "brand": "Gildan"},
    {"id": "PC61", "name": "Port & Company Essential T-Shirt", "brand": "Port & Company"},
    {"id": "18500", "name": "Gildan Heavy Blend Hooded Sweatshirt", "brand": "Gildan"},
    {"id": "PC54", "name": "Port & Company Core Cotton Tee", "brand": "Port & Company"},
    {"id": "ST350", "name": "Sport-Tek PosiCharge Tee", "brand": "Sport-Tek"},
]

COLORS = [
    {"id": "1", "name": "Black", "code": "#000000"},
    {"id": "12", "name": "Navy", "code": "#000080"},
    {"id": "23", "name": "Red", "code": "#FF0000"},
    {"id": "45", "name": "White", "code": "#FFFFFF"},
    {"id": "67", "name": "Royal Blue", "code": "#4169E1"},
]

SIZES = ["S", "M", "L", "XL", "2XL"]

FAILURE_CAUSES = ["Timeout", "Invalid payload", "Network error"]


def _random_date(rng: random.Random, days_ago: float, now: datetime) -> datetime:
    return now - timedelta(days=rng.random() * days_ago)


def _random_status(rng: random.Random) -> WebhookStatus:
    """80% completed, 5% each of the other states"""
    rand = rng.random()
    if rand > 0.95:
        return WebhookStatus.FAILED
    if rand > 0.90:
        return WebhookStatus.RETRYING
    if rand > 0.85:
        return WebhookStatus.PROCESSING
    if rand > 0.80:
        return WebhookStatus.PENDING
    return WebhookStatus.COMPLETED


def _generate_mock_product(rng: random.Random) -> ProductInventoryUpdate:
    style = rng.choice(STYLES)
    color = rng.choice(COLORS)
    now = utc_now()

    return ProductInventoryUpdate(
        sku=f"{style['id']}-{color['name'].upper()}-{rng.choice(SIZES)}",
        style_id=style["id"],
        style_name=style["name"],
        brand_name=style["brand"],
        color_id=color["id"],
        color_name=color["name"],
        color_code=color["code"],
        size_updates=[
            SizeInventoryUpdate(
                size_id=size,
                size_name=size,
                previous_quantity=rng.randrange(200),
                current_quantity=rng.randrange(150),
                timestamp=now,
            )
            for size in SIZES
        ],
        price_update=rng.random() * 20 + 5 if rng.random() > 0.8 else None,
        discontinued=rng.random() > 0.95,
    )


def generate_mock_webhook_event(supplier: SupplierSource) -> WebhookEvent:
    """The fixed two-product event used by "test webhook" buttons"""
    now = utc_now()

    payload = WebhookPayload(
        products=[
            ProductInventoryUpdate(
                sku="G500-NAVY-L",
                style_id="G500",
                style_name="Gildan 5000 Heavy Cotton T-Shirt",
                brand_name="Gildan",
                color_id="12",
                color_name="Navy",
                color_code="#000080",
                size_updates=[
                    SizeInventoryUpdate(size_id="L", size_name="Large", previous_quantity=150,
                                        current_quantity=45, timestamp=now),
                    SizeInventoryUpdate(size_id="XL", size_name="X-Large", previous_quantity=200,
                                        current_quantity=8, timestamp=now),
                ],
            ),
            ProductInventoryUpdate(
                sku="PC61-BLACK-M",
                style_id="PC61",
                style_name="Port & Company Essential T-Shirt",
                brand_name="Port & Company",
                color_id="1",
                color_name="Black",
                color_code="#000000",
                size_updates=[
                    SizeInventoryUpdate(size_id="M", size_name="Medium", previous_quantity=100,
                                        current_quantity=0, timestamp=now),
                ],
            ),
        ],
        timestamp=now,
        batch_id=new_id("batch"),
    )

    return WebhookEvent(
        source=supplier,
        event_type=WebhookEventType.INVENTORY_UPDATED,
        payload=payload,
        status=WebhookStatus.PENDING,
        received_at=now,
        retry_count=0,
    )


def generate_sample_webhook_events(
    count: int,
    days_back: int = 30,
    rng: Optional[random.Random] = None,
    now: Optional[datetime] = None,
) -> List[WebhookEvent]:
    """
    Random events spread over the last ``days_back`` days, newest first.

    Only completed and failed events get ``processed_at`` (200-3200 ms after
    receipt). Retrying events carry 1-3 retries; failed ones an error string.
    """
    rng = rng or random.Random()
    now = now or utc_now()
    events: List[WebhookEvent] = []

    for i in range(count):
        status = _random_status(rng)
        received_at = _random_date(rng, days_back, now)
        processing_ms = rng.random() * 3000 + 200

        processed_at = None
        if status in (WebhookStatus.COMPLETED, WebhookStatus.FAILED):
            processed_at = received_at + timedelta(milliseconds=processing_ms)

        events.append(WebhookEvent(
            id=f"webhook_{i}_{new_id('s')}",
            source=rng.choice(SUPPLIERS),
            event_type=rng.choice(EVENT_TYPES),
            payload=WebhookPayload(
                products=[_generate_mock_product(rng) for _ in range(rng.randint(1, 3))],
                timestamp=received_at,
                batch_id=new_id("batch"),
            ),
            status=status,
            received_at=received_at,
            processed_at=processed_at,
            retry_count=rng.randint(1, 3) if status == WebhookStatus.RETRYING else 0,
            error=f"Processing error: {rng.choice(FAILURE_CAUSES)}" if status == WebhookStatus.FAILED else None,
        ))

    return sorted(events, key=lambda e: e.received_at, reverse=True)


def _scenario_events(
    rng: random.Random,
    now: datetime,
    source: SupplierSource,
    id_prefix: str,
    count: int,
    failure_rate: float,
    failure_message: Optional[str],
    min_ms: float,
    spread_ms: float,
    max_products: int,
) -> List[WebhookEvent]:
    events = []
    for i in range(count):
        received_at = _random_date(rng, 7, now)
        failed = rng.random() > 1 - failure_rate if failure_rate else False
        processing_ms = rng.random() * spread_ms + min_ms

        events.append(WebhookEvent(
            id=f"webhook_{id_prefix}_{i}",
            source=source,
            event_type=rng.choice(EVENT_TYPES),
            payload=WebhookPayload(
                products=[_generate_mock_product(rng) for _ in range(rng.randint(1, max_products))],
                timestamp=received_at,
                batch_id=f"batch_{id_prefix}_{i}",
            ),
            status=WebhookStatus.FAILED if failed else WebhookStatus.COMPLETED,
            received_at=received_at,
            processed_at=received_at + timedelta(milliseconds=processing_ms),
            retry_count=0,
            error=failure_message if failed else None,
        ))
    return events


def generate_realistic_webhook_scenario(
    rng: Optional[random.Random] = None,
    now: Optional[datetime] = None,
) -> List[WebhookEvent]:
    """
    A week of traffic shaped like production: S&S is busiest and most
    reliable, SanMar slower with more failures, manual entries rare.
    """
    rng = rng or random.Random()
    now = now or utc_now()

    events = (
        _scenario_events(rng, now, SupplierSource.SSACTIVEWEAR, "ss", rng.randint(100, 149),
                         0.02, "API timeout", 150, 800, 5)
        + _scenario_events(rng, now, SupplierSource.SANMAR, "sm", rng.randint(80, 119),
                           0.04, "Invalid response", 200, 1200, 4)
        + _scenario_events(rng, now, SupplierSource.MANUAL, "manual", rng.randint(5, 14),
                           0.0, None, 100, 500, 1)
    )

    return sorted(events, key=lambda e: e.received_at, reverse=True)
