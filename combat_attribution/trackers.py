"""Boundary objects for collaborators outside the attribution core.

The real resource tracker and ability metadata live upstream. This module
defines the slice of their interface the core consumes, together with small
in-memory implementations used when replaying recorded logs.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Mapping, Protocol

import yaml

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class SpenderStats:
    """Casts of an ability that spent resource, and how much they spent."""

    casts: int
    spent: float


class ResourceTracker(Protocol):
    """Read-only view of the resource tracker used by the core."""

    def spender(self, ability_id: int) -> SpenderStats | None:
        ...

    @property
    def last_spend_amount(self) -> float:
        ...


class CastCounter(Protocol):
    def casts(self, ability_id: int) -> int:
        ...


class RecordedResourceTracker:
    """Resource tracker replayed from already recorded spend records."""

    def __init__(self) -> None:
        # Mapping of ability id -> [casts, total spent]
        self._spenders: Dict[int, list[float]] = {}
        self._last_spend = 0.0

    def record_spend(self, ability_id: int, amount: float) -> None:
        """Register a spend of ``amount`` resource on ``ability_id``."""

        entry = self._spenders.setdefault(ability_id, [0, 0.0])
        entry[0] += 1
        entry[1] += amount
        self._last_spend = amount

    def spender(self, ability_id: int) -> SpenderStats | None:
        entry = self._spenders.get(ability_id)
        if entry is None:
            return None
        return SpenderStats(casts=int(entry[0]), spent=entry[1])

    @property
    def last_spend_amount(self) -> float:
        """Amount consumed by the most recent spend, ``0`` before any spend."""

        return self._last_spend

    def reset(self) -> None:
        self._spenders.clear()
        self._last_spend = 0.0


class AbilityCatalog:
    """Map ability ids to human readable labels."""

    def __init__(self, labels: Mapping[int, str] | None = None) -> None:
        self._labels: Dict[int, str] = dict(labels or {})

    @classmethod
    def from_yaml(cls, path: str | Path) -> "AbilityCatalog":
        """Load ``id: label`` pairs from ``path``; a missing file is empty."""

        p = Path(path)
        if not p.exists():
            logger.warning("Ability catalog %s not found; labels unavailable.", p)
            return cls()
        data = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
        if not isinstance(data, dict):
            logger.warning("Ability catalog %s is not a mapping; ignoring.", p)
            return cls()
        labels: Dict[int, str] = {}
        for key, value in data.items():
            try:
                labels[int(key)] = str(value)
            except (TypeError, ValueError):
                logger.warning("Ignoring catalog entry with non-numeric id %r.", key)
        return cls(labels)

    def label(self, ability_id: int) -> str | None:
        return self._labels.get(ability_id)

    def __contains__(self, ability_id: object) -> bool:
        return ability_id in self._labels

    def __len__(self) -> int:  # pragma: no cover - trivial
        return len(self._labels)


__all__ = [
    "SpenderStats",
    "ResourceTracker",
    "CastCounter",
    "RecordedResourceTracker",
    "AbilityCatalog",
]
