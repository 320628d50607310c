# supplier_webhooks/cli/simulate.py
import asyncio
import random

import click

from supplier_webhooks.core.config import get_settings
from supplier_webhooks.core.logging_config import configure_logging
from supplier_webhooks.services import analytics
from supplier_webhooks.services.sample_data import (
    generate_realistic_webhook_scenario,
    generate_sample_webhook_events,
)
from supplier_webhooks.services.snapshot_store import InMemorySnapshotStore
from supplier_webhooks.services.webhook_processor import WebhookProcessor


async def _replay(events):
    """Feed events oldest first through a fresh processor"""
    store = InMemorySnapshotStore()
    processor = WebhookProcessor(store)
    notifications = alerts = failures = 0

    for event in sorted(events, key=lambda e: e.received_at):
        result = await processor.process_webhook_event(event)
        notifications += len(result.notifications)
        alerts += len(result.alerts)
        failures += 0 if result.success else 1

    return notifications, alerts, failures, len(store)


@click.command()
@click.option('--scenario', type=click.Choice(['sample', 'realistic']), default='realistic', show_default=True)
@click.option('--count', default=100, show_default=True, help='Number of events for the sample scenario')
@click.option('--days-back', type=int, default=None, help='Spread of sample events (defaults to SAMPLE_DAYS_BACK)')
@click.option('--seed', type=int, default=None, help='Seed for reproducible output')
@click.option('--process/--no-process', default=True, help='Replay payloads through the processor')
def simulate(scenario, count, days_back, seed, process):
    """Generate synthetic supplier webhook traffic and summarise it"""
    configure_logging("WARNING")
    rng = random.Random(seed)

    if scenario == 'sample':
        days_back = days_back or get_settings().SAMPLE_DAYS_BACK
        events = generate_sample_webhook_events(count, days_back=days_back, rng=rng)
    else:
        events = generate_realistic_webhook_scenario(rng=rng)

    click.echo(f"Generated {len(events)} {scenario} events")

    overall = analytics.overall_metrics(events)
    click.echo(
        f"Overall: {overall.success_rate:.1f}% success "
        f"({analytics.reliability_rating(overall.success_rate)}), "
        f"avg response {analytics.format_response_time(overall.avg_response_time_ms)}"
    )

    click.echo(f"{'Supplier':<16}{'Events':>8}{'Failed':>8}{'Success':>10}{'Avg time':>10}")
    for m in analytics.supplier_metrics(events):
        click.echo(
            f"{m.supplier.display_name:<16}{m.total_events:>8}{m.failed:>8}"
            f"{m.success_rate:>9.1f}%{analytics.format_response_time(m.avg_response_time_ms):>10}"
        )

    if process:
        notifications, alerts, failures, snapshots = asyncio.run(_replay(events))
        click.echo(
            f"Processed: {notifications} notifications, {alerts} alerts, "
            f"{snapshots} snapshots, {failures} failed events"
        )


if __name__ == "__main__":
    simulate()
