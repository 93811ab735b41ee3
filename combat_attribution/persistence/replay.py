"""Utility for deterministic replay of recorded combat logs."""

from __future__ import annotations

import logging
from typing import Callable

from ..config import AttributionConfig
from ..systems.spender_analysis import SpenderAttribution
from ..trackers import RecordedResourceTracker
from .event_log import CombatLog

logger = logging.getLogger(__name__)

# Called after every processed event; used by tests and the CLI for tracing.
EventHook = Callable[[SpenderAttribution, int], None]


def replay(
    log: CombatLog,
    settings: AttributionConfig,
    on_event: EventHook | None = None,
) -> SpenderAttribution:
    """Run one full attribution pass over ``log`` with fresh state.

    Spend records are applied to a fresh resource tracker as soon as the
    replay reaches their timestamp, so the tracker reflects what it knew when
    each cast was processed. A truncated log yields a partial aggregate.

    Parameters
    ----------
    log:
        Recorded events, their link graph and spend records.
    settings:
        Actor, abilities and link types to attribute.
    on_event:
        Optional callback invoked with the analyzer and event index.

    Returns
    -------
    SpenderAttribution
        The analyzer after the last event, holding the aggregate.
    """

    log.graph.freeze()
    tracker = RecordedResourceTracker()
    analysis = SpenderAttribution(log.graph, settings, tracker)

    spends = iter(log.spends)
    next_spend = next(spends, None)
    for idx, event in enumerate(log.events):
        while next_spend is not None and next_spend.timestamp <= event.timestamp:
            tracker.record_spend(next_spend.ability_id, next_spend.amount)
            next_spend = next(spends, None)
        analysis.process(event)
        if on_event is not None:
            on_event(analysis, idx)

    # Spends recorded after the final event still count toward totals.
    while next_spend is not None:
        tracker.record_spend(next_spend.ability_id, next_spend.amount)
        next_spend = next(spends, None)

    logger.info(
        "Replayed %d events; %d abilities attributed, %d chain(s) resolved.",
        analysis.events_processed,
        len(analysis.aggregator.records),
        len(analysis.chains),
    )
    return analysis


def verify_determinism(log: CombatLog, settings: AttributionConfig) -> bool:
    """Replay ``log`` twice with fresh state and compare per-ability totals."""

    first = replay(log, settings).totals()
    second = replay(log, settings).totals()
    if first != second:
        logger.error("Replay is not deterministic: %r != %r", first, second)
    return first == second


__all__ = ["replay", "verify_determinism", "EventHook"]
