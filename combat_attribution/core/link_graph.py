"""Directed, named relations between combat events."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterator, List, Tuple

from ..errors import LinkGraphError
from .events import Event, EventPredicate


@dataclass(frozen=True, slots=True)
class Link:
    """``from_id --link_type--> to_id``."""

    from_id: int
    link_type: str
    to_id: int


class LinkGraph:
    """Relation index keyed by ``(event_id, link_type)``.

    Targets are kept in link-registration order, which is the order every
    query returns them in. A link registered early may point at an event that
    occurs later in the log (and vice versa), so callers must not assume
    chronological order.
    """

    def __init__(self) -> None:
        # Mapping of (event id, link type) -> ordered target events
        self._targets: Dict[Tuple[int, str], List[Event]] = {}
        self._events: Dict[int, Event] = {}
        self._links: List[Link] = []
        self._frozen = False

    # ------------------------------------------------------------------
    # Registration API (upstream ingester)
    # ------------------------------------------------------------------
    def add_link(self, from_event: Event, link_type: str, to_event: Event) -> None:
        """Register ``from_event --link_type--> to_event``.

        Links are write-once: an identical link registered twice is ignored.
        """

        if self._frozen:
            raise LinkGraphError("link graph is frozen for the current replay pass")
        self._register(from_event)
        self._register(to_event)

        targets = self._targets.setdefault((from_event.event_id, link_type), [])
        if any(t.event_id == to_event.event_id for t in targets):
            return
        targets.append(to_event)
        self._links.append(Link(from_event.event_id, link_type, to_event.event_id))

    def link_both(self, a: Event, link_type: str, b: Event) -> None:
        """Register ``link_type`` in both directions between ``a`` and ``b``."""

        self.add_link(a, link_type, b)
        self.add_link(b, link_type, a)

    def freeze(self) -> None:
        """Reject further registrations; queries stay stable from here on."""

        self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    def _register(self, event: Event) -> None:
        known = self._events.get(event.event_id)
        if known is None:
            self._events[event.event_id] = event
        elif known != event:
            raise LinkGraphError(
                f"event id {event.event_id} already registered as a different event"
            )

    # ------------------------------------------------------------------
    # Query API
    # ------------------------------------------------------------------
    def has_related_event(self, event: Event, link_type: str) -> bool:
        """Return ``True`` if any ``link_type`` link originates at ``event``."""

        return bool(self._targets.get((event.event_id, link_type)))

    def get_related_events(
        self,
        event: Event,
        link_type: str,
        predicate: EventPredicate | None = None,
    ) -> Iterator[Event]:
        """Yield linked events matching ``predicate`` in registration order."""

        for target in self._targets.get((event.event_id, link_type), ()):
            if predicate is None or predicate(target):
                yield target

    def get_related_event(
        self,
        event: Event,
        link_type: str,
        predicate: EventPredicate | None = None,
    ) -> Event | None:
        """Return the first linked event matching ``predicate`` or ``None``."""

        return next(self.get_related_events(event, link_type, predicate), None)

    # ------------------------------------------------------------------
    # Introspection helpers
    # ------------------------------------------------------------------
    @property
    def links(self) -> Tuple[Link, ...]:
        return tuple(self._links)

    def __len__(self) -> int:  # pragma: no cover - trivial
        return len(self._links)


__all__ = ["Link", "LinkGraph"]
