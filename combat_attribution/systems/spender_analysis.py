"""Attribute resource spends of the tracked actor to their outcomes."""

from __future__ import annotations

import logging
from collections import Counter
from typing import Dict, List, Mapping

from ..config import AttributionConfig
from ..core.events import Event, EventKind
from ..core.link_graph import LinkGraph
from ..trackers import AbilityCatalog, RecordedResourceTracker, ResourceTracker
from .aggregator import AbilityReport, Aggregator
from .chain_resolver import ChainAttributionResolver, ChainResolution
from .spend_flag import SpendFlagStateMachine

logger = logging.getLogger(__name__)


class AbilityCastTracker:
    """Count casts per ability for the tracked actor."""

    def __init__(self) -> None:
        self._casts: Counter[int] = Counter()

    def record(self, ability_id: int) -> None:
        self._casts[ability_id] += 1

    def casts(self, ability_id: int) -> int:
        return self._casts[ability_id]


class SpenderAttribution:
    """Route each qualifying event through the spend-flag or chain path.

    A cast of the chain-sensitive ability that belongs to a chain is handled
    by :class:`ChainAttributionResolver` and disarms the spend flag; every
    other qualifying cast re-evaluates the flag. Each cast therefore feeds
    exactly one of the two paths.
    """

    def __init__(
        self,
        graph: LinkGraph,
        settings: AttributionConfig,
        resources: ResourceTracker | None = None,
    ) -> None:
        self.graph = graph
        self.settings = settings
        self.resources: ResourceTracker = (
            resources if resources is not None else RecordedResourceTracker()
        )
        self.aggregator = Aggregator()
        self.cast_counter = AbilityCastTracker()
        self.spend_flag = SpendFlagStateMachine(
            graph, settings.spender_link, settings.substitute
        )
        self.chain_resolver: ChainAttributionResolver | None = None
        if (
            settings.chain_sensitive_ability is not None
            and settings.chain_proxy_ability is not None
        ):
            self.chain_resolver = ChainAttributionResolver(
                graph,
                settings.chain_link,
                settings.outcome_link,
                settings.chain_proxy_ability,
            )
        self.chains: List[ChainResolution] = []
        self.events_processed = 0

    # ------------------------------------------------------------------
    # Event handling
    # ------------------------------------------------------------------
    def qualifies(self, event: Event) -> bool:
        return (
            event.source == self.settings.tracked_actor
            and event.ability_id in self.settings.eligible_abilities
        )

    def process(self, event: Event) -> None:
        """Handle one event of the replayed stream."""

        self.events_processed += 1
        if event.kind is EventKind.CAST and event.source == self.settings.tracked_actor:
            self.cast_counter.record(event.ability_id)

        if not self.qualifies(event):
            return

        if event.kind is EventKind.CAST:
            self.on_cast(event)
        else:
            self.on_spender(event)

    def on_cast(self, event: Event) -> None:
        resolution = self._resolve_chain(event)
        if resolution is None:
            self.spend_flag.on_cast(event)
            return

        self.spend_flag.disarm()
        if resolution.attributed:
            proxy = self.settings.chain_proxy_ability
            self.aggregator.accumulate(proxy, resolution.amount)
            self.aggregator.add_chained_resource(proxy, resolution.resource_amount)
            self.chains.append(resolution)
            logger.debug(
                "Chain headed by cast %s: %d extra hit(s) worth %d attributed to %s.",
                resolution.head.event_id,
                len(resolution.hits),
                resolution.amount,
                proxy,
            )

    def on_spender(self, event: Event) -> None:
        ability_id = self.spend_flag.on_outcome(event)
        if ability_id is None:
            return
        self.aggregator.accumulate(ability_id, event.amount or 0)

    def _resolve_chain(self, event: Event) -> ChainResolution | None:
        if (
            self.chain_resolver is None
            or event.ability_id != self.settings.chain_sensitive_ability
        ):
            return None
        return self.chain_resolver.resolve(event, self.resources.last_spend_amount)

    # ------------------------------------------------------------------
    # Output
    # ------------------------------------------------------------------
    def statistic(self, catalog: AbilityCatalog | None = None) -> Mapping[int, AbilityReport]:
        """Return the read-only per-ability efficiency report."""

        return self.aggregator.report(self.resources, self.cast_counter, catalog)

    def totals(self) -> Dict[int, tuple[int, float]]:
        return self.aggregator.totals()

    @property
    def pending_spend(self) -> bool:
        return self.spend_flag.pending_spend


__all__ = ["AbilityCastTracker", "SpenderAttribution"]
