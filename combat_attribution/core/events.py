"""Event dataclasses replayed by the attribution systems."""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict

from ..errors import EventError


class EventKind(Enum):
    """Enumerate the combat event types consumed by the pipeline."""

    CAST = "cast"
    DAMAGE = "damage"
    HEAL = "heal"


@dataclass(frozen=True, slots=True)
class Event:
    """Single immutable element of a recorded combat stream.

    ``amount`` is only present on damage and heal events. ``event_id`` is the
    identity used to index links and is unique within one log.
    """

    event_id: int
    kind: EventKind
    ability_id: int
    timestamp: int
    source: int
    amount: int | None = None

    def __post_init__(self) -> None:
        if self.kind is EventKind.CAST and self.amount is not None:
            raise EventError(f"cast event {self.event_id} carries an amount")
        if self.kind is not EventKind.CAST and self.amount is None:
            raise EventError(f"{self.kind.value} event {self.event_id} has no amount")

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "id": self.event_id,
            "kind": self.kind.value,
            "ability": self.ability_id,
            "timestamp": self.timestamp,
            "source": self.source,
        }
        if self.amount is not None:
            data["amount"] = self.amount
        return data


EventPredicate = Callable[[Event], bool]


def _integral(value: Any, name: str) -> int:
    """Return ``value`` as an int, rejecting fractional or non-finite numbers."""

    if isinstance(value, bool):
        raise EventError(f"{name} must be an integer, got {value!r}")
    if isinstance(value, float) and not (math.isfinite(value) and value.is_integer()):
        raise EventError(f"{name} must be an integer, got {value!r}")
    return int(value)


def event_from_dict(data: Dict[str, Any]) -> Event:
    """Reconstruct an :class:`Event` from :meth:`Event.to_dict` output."""

    try:
        kind = EventKind(data["kind"])
        amount = data.get("amount")
        return Event(
            event_id=_integral(data["id"], "id"),
            kind=kind,
            ability_id=_integral(data["ability"], "ability"),
            timestamp=_integral(data["timestamp"], "timestamp"),
            source=_integral(data["source"], "source"),
            amount=_integral(amount, "amount") if amount is not None else None,
        )
    except EventError:
        raise
    except (KeyError, TypeError, ValueError, OverflowError) as exc:
        raise EventError(f"malformed event record {data!r}: {exc}") from exc


def cast_event(event_id: int, ability_id: int, timestamp: int, source: int) -> Event:
    return Event(event_id, EventKind.CAST, ability_id, timestamp, source)


def damage_event(
    event_id: int, ability_id: int, timestamp: int, source: int, amount: int
) -> Event:
    return Event(event_id, EventKind.DAMAGE, ability_id, timestamp, source, amount)


def heal_event(
    event_id: int, ability_id: int, timestamp: int, source: int, amount: int
) -> Event:
    return Event(event_id, EventKind.HEAL, ability_id, timestamp, source, amount)


# ----------------------------------------------------------------------
# Capability predicates
# ----------------------------------------------------------------------
def of_kind(*kinds: EventKind) -> EventPredicate:
    """Return a predicate matching events whose kind is one of ``kinds``."""

    wanted = frozenset(kinds)

    def _match(event: Event) -> bool:
        return event.kind in wanted

    return _match


is_cast = of_kind(EventKind.CAST)
is_damage = of_kind(EventKind.DAMAGE)
is_outcome = of_kind(EventKind.DAMAGE, EventKind.HEAL)


__all__ = [
    "Event",
    "EventKind",
    "EventPredicate",
    "event_from_dict",
    "cast_event",
    "damage_event",
    "heal_event",
    "of_kind",
    "is_cast",
    "is_damage",
    "is_outcome",
]
