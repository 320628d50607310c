# tests/integration/test_ingestion_service.py
import asyncio

import pytest

from supplier_webhooks.core.enums import (
    AlertType,
    NotificationType,
    SupplierSource,
    WebhookEventType,
    WebhookStatus,
)
from supplier_webhooks.core.exceptions import (
    RecordNotFoundError,
    UnknownSupplierError,
    WebhookEventNotFoundError,
    WebhookRejectedError,
)
from supplier_webhooks.schemas.webhook import WebhookConfig
from supplier_webhooks.services.ingestion import WebhookIngestionService
from supplier_webhooks.services.sample_data import generate_mock_webhook_event
from supplier_webhooks.services.webhook_processor import WebhookProcessor
from tests.mocks.failing_store import FailingSnapshotStore


def _sanmar_body(quantity):
    return {
        "items": [{
            "productKey": "PC61",
            "productName": "Port & Company Essential T-Shirt",
            "colorId": 1,
            "colorName": "Black",
            "inventory": [{"sizeCode": "M", "sizeDescription": "Medium", "quantity": quantity}],
        }],
    }


def test_receive_records_pending_event(ingestion_service, ssactivewear_payload):
    event = ingestion_service.receive(SupplierSource.SSACTIVEWEAR, ssactivewear_payload)

    assert event.status == WebhookStatus.PENDING
    assert event.retry_count == 0
    assert ingestion_service.events.get(event.id) is event
    assert ingestion_service.pending_events() == [event]

@pytest.mark.asyncio
async def test_stock_runs_down_then_back_up(ingestion_service):
    await ingestion_service.ingest("sanmar", _sanmar_body(50))
    out = await ingestion_service.ingest("sanmar", _sanmar_body(0))
    back = await ingestion_service.ingest("sanmar", _sanmar_body(30))

    assert [n.type for n in out.notifications] == [NotificationType.OUT_OF_STOCK]
    assert [n.type for n in back.notifications] == [NotificationType.RESTOCKED]
    assert [n.type for n in ingestion_service.notifications] == [
        NotificationType.OUT_OF_STOCK,
        NotificationType.RESTOCKED,
    ]
    assert [a.alert_type for a in ingestion_service.alerts] == [AlertType.OUT_OF_STOCK]
    assert all(e.status == WebhookStatus.COMPLETED for e in ingestion_service.events.all())
    assert all(e.processed_at is not None for e in ingestion_service.events.all())

@pytest.mark.asyncio
async def test_failed_event_then_successful_retry(ssactivewear_payload):
    store = FailingSnapshotStore(failing_styles={"G500"})
    service = WebhookIngestionService(WebhookProcessor(store))
    event = service.receive(SupplierSource.SSACTIVEWEAR, ssactivewear_payload)

    result = await service.run(event.id)
    assert result.success is False
    assert event.status == WebhookStatus.FAILED
    assert event.error == "write rejected for ssactivewear:G500:12:L"
    assert service.notifications == []

    store.failing_styles.clear()
    result = await service.retry(event.id)

    assert result.success is True
    assert event.status == WebhookStatus.COMPLETED
    assert event.retry_count == 1
    assert event.error is None
    assert [a.alert_type for a in service.alerts] == [AlertType.LOW_STOCK]

@pytest.mark.asyncio
async def test_partial_results_of_failed_event_survive_retry(product_factory, event_factory):
    store = FailingSnapshotStore(failing_styles=set())
    service = WebhookIngestionService(WebhookProcessor(store))
    first = service.add_event(event_factory(product_factory([("L", 50)])))
    await service.run(first.id)

    store.failing_styles.add("PC61")
    batch = service.add_event(event_factory(
        product_factory([("L", 0)]),
        product_factory([("M", 5)], sku="PC61-BLACK", style_id="PC61", color_id="1"),
    ))
    result = await service.run(batch.id)

    assert result.success is False
    assert batch.status == WebhookStatus.FAILED
    assert batch.error == "write rejected for ssactivewear:PC61:1:M"
    assert [n.type for n in service.notifications] == [NotificationType.OUT_OF_STOCK]
    assert [a.alert_type for a in service.alerts] == [AlertType.OUT_OF_STOCK]

    store.failing_styles.clear()
    retried = await service.retry(batch.id)

    assert retried.success is True
    assert retried.notifications == []
    assert [n.type for n in service.notifications] == [NotificationType.OUT_OF_STOCK]
    assert [a.alert_type for a in service.alerts] == [
        AlertType.OUT_OF_STOCK,
        AlertType.OUT_OF_STOCK,
        AlertType.LOW_STOCK,
    ]

@pytest.mark.asyncio
async def test_concurrent_deliveries_are_serialized(ingestion_service):
    await ingestion_service.ingest("sanmar", _sanmar_body(50))
    first = ingestion_service.receive("sanmar", _sanmar_body(0))
    second = ingestion_service.receive("sanmar", _sanmar_body(0))

    results = await asyncio.gather(ingestion_service.run(first.id), ingestion_service.run(second.id))

    # Only one of the two sees the 50 -> 0 transition.
    transitions = [n for r in results for n in r.notifications]
    assert [n.type for n in transitions] == [NotificationType.OUT_OF_STOCK]

@pytest.mark.asyncio
async def test_mock_event_through_service(ingestion_service):
    event = ingestion_service.add_event(generate_mock_webhook_event(SupplierSource.SSACTIVEWEAR))

    result = await ingestion_service.run(event.id)

    assert result.success is True
    assert result.notifications == []
    assert sorted(a.alert_type.value for a in result.alerts) == ["low_stock", "out_of_stock"]

def test_unknown_source_rejected(ingestion_service):
    with pytest.raises(UnknownSupplierError):
        ingestion_service.receive("alphabroder", {})

def test_config_filters_event_types(processor, sanmar_payload):
    config = WebhookConfig(
        name="SanMar stock",
        source=SupplierSource.SANMAR,
        events=[WebhookEventType.INVENTORY_UPDATED],
    )
    service = WebhookIngestionService(processor, configs=[config])

    with pytest.raises(WebhookRejectedError):
        service.receive(SupplierSource.SANMAR, sanmar_payload, WebhookEventType.PRICING_UPDATED)

    service.receive(SupplierSource.SANMAR, sanmar_payload)
    assert config.last_triggered_at is not None
    assert len(service.events) == 1

def test_inactive_config_rejects_everything(processor, sanmar_payload):
    config = WebhookConfig(name="SanMar", source=SupplierSource.SANMAR, is_active=False)
    service = WebhookIngestionService(processor, configs=[config])

    with pytest.raises(WebhookRejectedError):
        service.receive(SupplierSource.SANMAR, sanmar_payload)

@pytest.mark.asyncio
async def test_missing_event_raises(ingestion_service):
    with pytest.raises(WebhookEventNotFoundError):
        await ingestion_service.retry("webhook_missing")

@pytest.mark.asyncio
async def test_read_and_acknowledge(ingestion_service):
    await ingestion_service.ingest("sanmar", _sanmar_body(50))
    await ingestion_service.ingest("sanmar", _sanmar_body(0))
    notification = ingestion_service.notifications[0]
    alert = ingestion_service.alerts[0]

    ingestion_service.mark_notification_read(notification.id)
    ingestion_service.acknowledge_alert(alert.id, "production-manager")

    assert ingestion_service.unread_notifications() == []
    assert ingestion_service.unacknowledged_alerts() == []
    assert alert.acknowledged_by == "production-manager"

    with pytest.raises(RecordNotFoundError):
        ingestion_service.acknowledge_alert("alert_missing", "someone")
