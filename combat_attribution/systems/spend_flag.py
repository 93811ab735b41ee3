"""Flag-then-consume matching of resource spenders to their outcome."""

from __future__ import annotations

import logging
from enum import Enum
from typing import Callable

from ..core.events import Event, is_cast, is_outcome
from ..core.link_graph import LinkGraph

logger = logging.getLogger(__name__)


class SpendState(Enum):
    IDLE = "idle"
    ARMED = "armed"


class SpendFlagStateMachine:
    """Single pending-attribution slot for one tracked actor.

    Only one slot exists per actor, not per ability: a spender cast arms it
    and the next outcome event consumes it. A new cast always re-evaluates the
    slot, so an armed flag whose outcome never arrived is overwritten and that
    spend is lost from attribution.
    """

    def __init__(
        self,
        graph: LinkGraph,
        spender_link: str,
        substitute: Callable[[int], int] | None = None,
    ) -> None:
        self.graph = graph
        self.spender_link = spender_link
        self._substitute = substitute or (lambda ability_id: ability_id)
        self.state = SpendState.IDLE
        self._armed_by: Event | None = None

    @property
    def pending_spend(self) -> bool:
        return self.state is SpendState.ARMED

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------
    def on_cast(self, cast: Event) -> SpendState:
        """Re-evaluate the slot for ``cast`` and return the new state."""

        if not is_cast(cast):
            raise ValueError(f"on_cast expects a cast event, got {cast.kind.value}")

        if self.pending_spend and self._armed_by is not None:
            logger.debug(
                "Spend flag from cast %s (ability %s) dropped by cast %s before any outcome.",
                self._armed_by.event_id,
                self._armed_by.ability_id,
                cast.event_id,
            )

        if self.graph.has_related_event(cast, self.spender_link):
            self.state = SpendState.ARMED
            self._armed_by = cast
        else:
            self.state = SpendState.IDLE
            self._armed_by = None
        return self.state

    def disarm(self) -> None:
        """Return to idle without consuming anything."""

        self.state = SpendState.IDLE
        self._armed_by = None

    def on_outcome(self, event: Event) -> int | None:
        """Consume the slot with ``event``.

        Returns the ability id the outcome amount should be attributed to, or
        ``None`` when no spend was pending.
        """

        if not is_outcome(event):
            raise ValueError(f"on_outcome expects damage or heal, got {event.kind.value}")
        if not self.pending_spend:
            return None
        self.disarm()
        return self._substitute(event.ability_id)

    def reset(self) -> None:
        self.disarm()


__all__ = ["SpendState", "SpendFlagStateMachine"]
