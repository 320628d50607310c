# tests/unit/services/test_analytics.py
from datetime import datetime, timedelta, timezone

import pytest

from supplier_webhooks.core.enums import SupplierSource, WebhookEventType, WebhookStatus
from supplier_webhooks.schemas.webhook import WebhookEvent, WebhookPayload
from supplier_webhooks.services import analytics

NOW = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)


def _event(source, status, hours_ago=1, response_ms=None, event_type=WebhookEventType.INVENTORY_UPDATED):
    received_at = NOW - timedelta(hours=hours_ago)
    return WebhookEvent(
        source=source,
        event_type=event_type,
        payload=WebhookPayload(),
        status=status,
        received_at=received_at,
        processed_at=received_at + timedelta(milliseconds=response_ms) if response_ms is not None else None,
    )


@pytest.fixture
def events():
    return [
        _event(SupplierSource.SSACTIVEWEAR, WebhookStatus.COMPLETED, 1, 200),
        _event(SupplierSource.SSACTIVEWEAR, WebhookStatus.COMPLETED, 2, 400),
        _event(SupplierSource.SSACTIVEWEAR, WebhookStatus.FAILED, 3, 600, WebhookEventType.PRICING_UPDATED),
        _event(SupplierSource.SSACTIVEWEAR, WebhookStatus.RETRYING, 48),
        _event(SupplierSource.SANMAR, WebhookStatus.FAILED, 30, 1000),
    ]


def test_supplier_metrics(events):
    metrics = {m.supplier: m for m in analytics.supplier_metrics(events, now=NOW)}

    ss = metrics[SupplierSource.SSACTIVEWEAR]
    assert ss.total_events == 4
    assert (ss.successful, ss.failed, ss.retrying) == (2, 1, 1)
    assert ss.success_rate == pytest.approx(50.0)
    assert ss.avg_response_time_ms == pytest.approx(400.0)
    assert ss.recent_failures == 1
    assert ss.uptime == pytest.approx(75.0)
    assert ss.last_event_at == NOW - timedelta(hours=1)

    sanmar = metrics[SupplierSource.SANMAR]
    assert sanmar.recent_failures == 0  # older than 24 hours
    assert sanmar.uptime == pytest.approx(0.0)

def test_supplier_without_events_reports_defaults(events):
    manual = {m.supplier: m for m in analytics.supplier_metrics(events, now=NOW)}[SupplierSource.MANUAL]

    assert manual.total_events == 0
    assert manual.success_rate == 0.0
    assert manual.uptime == 100.0
    assert manual.avg_response_time_ms == 0.0
    assert manual.last_event_at is None

def test_overall_metrics(events):
    overall = analytics.overall_metrics(events)

    assert overall.total == 5
    assert overall.successful == 2
    assert overall.failed == 2
    assert overall.success_rate == pytest.approx(40.0)
    assert overall.avg_response_time_ms == pytest.approx(550.0)

def test_overall_metrics_empty():
    overall = analytics.overall_metrics([])

    assert overall.total == 0
    assert overall.success_rate == 0.0

def test_filter_events(events):
    assert len(analytics.filter_events(events, hours=24, now=NOW)) == 3
    assert len(analytics.filter_events(events, supplier=SupplierSource.SANMAR, now=NOW)) == 1
    assert len(analytics.filter_events(events, now=NOW)) == 5

def test_event_type_breakdown(events):
    assert analytics.event_type_breakdown(events) == [
        ("inventory.updated", 4),
        ("pricing.updated", 1),
    ]

@pytest.mark.parametrize("rate,rating", [
    (100, "Excellent"),
    (99, "Excellent"),
    (97.5, "Good"),
    (90, "Fair"),
    (89.9, "Poor"),
])
def test_reliability_rating(rate, rating):
    assert analytics.reliability_rating(rate) == rating

def test_format_response_time():
    assert analytics.format_response_time(450.4) == "450ms"
    assert analytics.format_response_time(1500) == "1.50s"
