"""Resolve triggered-cast chains back to the ability that started them."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Set, Tuple

from ..core.events import Event, is_cast, is_damage
from ..core.link_graph import LinkGraph

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ChainResolution:
    """Outcome of walking one chain.

    ``attributed`` is ``False`` when the chain was already resolved by an
    earlier cast in it, or when it produced too few hits to count.
    """

    head: Event
    triggered: Tuple[Event, ...]
    hits: Tuple[Event, ...]
    amount: int
    resource_amount: float
    attributed: bool


class ChainAttributionResolver:
    """Walk ``cast -> head -> triggered casts -> damage`` for one ability.

    The first damage event of a chain is the baseline hit that would have
    happened without the chain head, so it is excluded. The remaining hits
    are folded into ``proxy_ability``.
    """

    def __init__(
        self,
        graph: LinkGraph,
        chain_link: str,
        outcome_link: str,
        proxy_ability: int,
    ) -> None:
        self.graph = graph
        self.chain_link = chain_link
        self.outcome_link = outcome_link
        self.proxy_ability = proxy_ability
        self._resolved_heads: Set[int] = set()

    def collect_hits(self, triggered: Tuple[Event, ...]) -> List[Event]:
        """Return damage events of all ``triggered`` casts in registration order."""

        hits: List[Event] = []
        for cast in triggered:
            hits.extend(self.graph.get_related_events(cast, self.outcome_link, is_damage))
        return hits

    def resolve(self, cast: Event, last_spend_amount: float = 0) -> ChainResolution | None:
        """Resolve the chain ``cast`` belongs to.

        Returns ``None`` if ``cast`` is not part of a chain with at least two
        triggered casts; the caller then treats it as an ordinary cast.
        """

        head = self.graph.get_related_event(cast, self.chain_link, is_cast)
        if head is None:
            return None

        triggered = tuple(self.graph.get_related_events(head, self.chain_link, is_cast))
        if len(triggered) <= 1:
            return None

        if head.event_id in self._resolved_heads:
            return ChainResolution(head, triggered, (), 0, 0, attributed=False)
        self._resolved_heads.add(head.event_id)

        hits = self.collect_hits(triggered)
        if len(hits) <= 1:
            logger.debug(
                "Chain headed by cast %s produced %d hit(s); not counted.",
                head.event_id,
                len(hits),
            )
            return ChainResolution(head, triggered, tuple(hits), 0, 0, attributed=False)

        # The first hit is the baseline one.
        extra = tuple(hits[1:])
        amount = sum(hit.amount or 0 for hit in extra)
        return ChainResolution(
            head,
            triggered,
            extra,
            amount,
            last_spend_amount,
            attributed=True,
        )

    def reset(self) -> None:
        self._resolved_heads.clear()


__all__ = ["ChainResolution", "ChainAttributionResolver"]
