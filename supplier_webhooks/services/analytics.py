"""
Reliability metrics over received webhook events.

Pure functions; callers pass in whatever events they hold (the ingestion
log, or one of the sample generators).
"""
from collections import Counter
from datetime import datetime, timedelta
from typing import Iterable, List, Optional, Tuple

from pydantic import BaseModel

from supplier_webhooks.core.enums import SupplierSource, WebhookStatus
from supplier_webhooks.schemas.webhook import WebhookEvent, utc_now


class SupplierMetrics(BaseModel):
    supplier: SupplierSource
    total_events: int
    successful: int
    failed: int
    retrying: int
    success_rate: float
    avg_response_time_ms: float
    recent_failures: int
    uptime: float
    last_event_at: Optional[datetime] = None


class OverallMetrics(BaseModel):
    total: int
    successful: int
    failed: int
    retrying: int
    success_rate: float
    avg_response_time_ms: float


def filter_events(
    events: Iterable[WebhookEvent],
    hours: Optional[float] = None,
    supplier: Optional[SupplierSource] = None,
    now: Optional[datetime] = None,
) -> List[WebhookEvent]:
    """Events received in the last ``hours`` (all time when None) from ``supplier`` (all when None)"""
    now = now or utc_now()
    cutoff = now - timedelta(hours=hours) if hours is not None else None

    return [
        event for event in events
        if (cutoff is None or event.received_at >= cutoff)
        and (supplier is None or event.source == supplier)
    ]


def _counts(events: List[WebhookEvent]) -> Tuple[int, int, int]:
    statuses = Counter(event.status for event in events)
    return (
        statuses[WebhookStatus.COMPLETED],
        statuses[WebhookStatus.FAILED],
        statuses[WebhookStatus.RETRYING],
    )


def _avg_response_time_ms(events: List[WebhookEvent]) -> float:
    times = [e.response_time_ms for e in events if e.response_time_ms is not None]
    return sum(times) / len(times) if times else 0.0


def supplier_metrics(events: Iterable[WebhookEvent], now: Optional[datetime] = None) -> List[SupplierMetrics]:
    """One entry per supplier, including suppliers with no events"""
    now = now or utc_now()
    events = list(events)
    metrics = []

    for supplier in SupplierSource:
        supplier_events = [e for e in events if e.source == supplier]
        total = len(supplier_events)
        successful, failed, retrying = _counts(supplier_events)

        recent = filter_events(supplier_events, hours=24, now=now)
        recent_failures = sum(1 for e in recent if e.status == WebhookStatus.FAILED)

        metrics.append(SupplierMetrics(
            supplier=supplier,
            total_events=total,
            successful=successful,
            failed=failed,
            retrying=retrying,
            success_rate=(successful / total) * 100 if total else 0.0,
            avg_response_time_ms=_avg_response_time_ms(supplier_events),
            recent_failures=recent_failures,
            uptime=((successful + retrying) / total) * 100 if total else 100.0,
            last_event_at=max((e.received_at for e in supplier_events), default=None),
        ))

    return metrics


def overall_metrics(events: Iterable[WebhookEvent]) -> OverallMetrics:
    events = list(events)
    total = len(events)
    successful, failed, retrying = _counts(events)

    return OverallMetrics(
        total=total,
        successful=successful,
        failed=failed,
        retrying=retrying,
        success_rate=(successful / total) * 100 if total else 0.0,
        avg_response_time_ms=_avg_response_time_ms(events),
    )


def event_type_breakdown(events: Iterable[WebhookEvent]) -> List[Tuple[str, int]]:
    """(event type, count) pairs, most frequent first"""
    counts = Counter(event.event_type.value for event in events)
    return sorted(counts.items(), key=lambda item: item[1], reverse=True)


def reliability_rating(rate: float) -> str:
    if rate >= 99:
        return "Excellent"
    if rate >= 95:
        return "Good"
    if rate >= 90:
        return "Fair"
    return "Poor"


def format_response_time(ms: float) -> str:
    if ms < 1000:
        return f"{round(ms)}ms"
    return f"{ms / 1000:.2f}s"
