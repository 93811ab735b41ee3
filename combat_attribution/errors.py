"""Exception hierarchy for combat_attribution."""

from __future__ import annotations


class CombatAttributionError(Exception):
    """Base class for all errors raised by this package."""


class EventError(CombatAttributionError, ValueError):
    """An event record is inconsistent with its kind."""


class LinkGraphError(CombatAttributionError):
    """A link could not be registered in the graph."""


class CombatLogError(CombatAttributionError):
    """A recorded combat log could not be read or written."""


__all__ = [
    "CombatAttributionError",
    "EventError",
    "LinkGraphError",
    "CombatLogError",
]
