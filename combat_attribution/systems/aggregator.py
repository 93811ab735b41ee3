"""Per-ability accumulation of attributed amounts and derived efficiency."""

from __future__ import annotations

import math
from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, Mapping

from ..trackers import AbilityCatalog, CastCounter, ResourceTracker


class _Undefined:
    """Sentinel for a metric whose divisor is zero."""

    _instance: "_Undefined | None" = None

    def __new__(cls) -> "_Undefined":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNDEFINED"

    def __bool__(self) -> bool:
        return False


UNDEFINED = _Undefined()


def safe_ratio(numerator: float, denominator: float) -> float | _Undefined:
    """Return ``numerator / denominator``.

    A zero divisor or a non-finite operand gives :data:`UNDEFINED`.
    """

    if not denominator or not (math.isfinite(numerator) and math.isfinite(denominator)):
        return UNDEFINED
    return numerator / denominator


@dataclass
class SpendRecord:
    attributed_amount: int = 0
    chained_resource_amount: float = 0


@dataclass(frozen=True)
class AbilityReport:
    """One row of the efficiency report."""

    ability_id: int
    attributed_amount: int
    casts: int
    total_spent: float
    amount_per_resource_unit: float | _Undefined
    resource_units_per_cast: float | _Undefined
    amount_per_cast: float | _Undefined
    label: str | None = None


class Aggregator:
    """Own the per-ability :class:`SpendRecord` mapping for one replay pass."""

    def __init__(self) -> None:
        self._records: Dict[int, SpendRecord] = {}

    # ------------------------------------------------------------------
    # Mutation (attribution core only)
    # ------------------------------------------------------------------
    def accumulate(self, ability_id: int, amount: int) -> SpendRecord:
        """Add ``amount`` to ``ability_id``'s total, creating the record if needed."""

        record = self._records.setdefault(ability_id, SpendRecord())
        record.attributed_amount += amount
        return record

    def add_chained_resource(self, ability_id: int, amount: float) -> SpendRecord:
        record = self._records.setdefault(ability_id, SpendRecord())
        record.chained_resource_amount += amount
        return record

    def reset(self) -> None:
        self._records.clear()

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------
    @property
    def records(self) -> Mapping[int, SpendRecord]:
        return MappingProxyType(self._records)

    def total_attributed(self) -> int:
        return sum(r.attributed_amount for r in self._records.values())

    def totals(self) -> Dict[int, tuple[int, float]]:
        """Return plain ``(attributed, chained resource)`` tuples per ability."""

        return {
            ability_id: (r.attributed_amount, r.chained_resource_amount)
            for ability_id, r in self._records.items()
        }

    def report(
        self,
        resources: ResourceTracker,
        abilities: CastCounter,
        catalog: AbilityCatalog | None = None,
    ) -> Mapping[int, AbilityReport]:
        """Join attributed amounts with spend counts into report rows.

        Abilities the resource tracker does not know about fall back to the
        chained resource amount and the cast counter; this is how the chain
        proxy gets a row. With a ``catalog``, abilities without a label are
        left out of the result but keep their record.
        """

        rows: Dict[int, AbilityReport] = {}
        for ability_id, record in self._records.items():
            label = None
            if catalog is not None:
                if ability_id not in catalog:
                    continue
                label = catalog.label(ability_id)

            stats = resources.spender(ability_id)
            if stats is not None:
                casts, spent = stats.casts, stats.spent
            else:
                casts = abilities.casts(ability_id)
                spent = record.chained_resource_amount

            amount = record.attributed_amount
            rows[ability_id] = AbilityReport(
                ability_id=ability_id,
                attributed_amount=amount,
                casts=casts,
                total_spent=spent,
                amount_per_resource_unit=safe_ratio(amount, spent),
                resource_units_per_cast=safe_ratio(spent, casts),
                amount_per_cast=safe_ratio(amount, casts),
                label=label,
            )
        return MappingProxyType(rows)


__all__ = [
    "UNDEFINED",
    "safe_ratio",
    "SpendRecord",
    "AbilityReport",
    "Aggregator",
]
