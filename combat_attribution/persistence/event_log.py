"""JSON-lines storage for recorded, already linked combat logs."""

from __future__ import annotations

import json
import logging
import math
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, Iterator, List

from ..core.events import Event, event_from_dict
from ..core.link_graph import LinkGraph
from ..errors import CombatLogError, EventError

logger = logging.getLogger(__name__)

# Record type constants
EVENT = "event"
LINK = "link"
SPEND = "spend"


@dataclass(frozen=True, slots=True)
class SpendEntry:
    """A resource spend recorded by the upstream resource tracker."""

    timestamp: int
    ability_id: int
    amount: float


@dataclass
class CombatLog:
    """Events in replay order together with their link graph and spends."""

    events: List[Event] = field(default_factory=list)
    graph: LinkGraph = field(default_factory=LinkGraph)
    spends: List[SpendEntry] = field(default_factory=list)


def append_record(
    dest: str | Path | List[Dict[str, Any]], record_type: str, data: Dict[str, Any]
) -> None:
    """Append a record to ``dest`` which may be a path or in-memory list."""

    record = {"type": record_type}
    record.update(data)
    if isinstance(dest, list):
        dest.append(record)
        return

    p = Path(dest)
    if not p.parent.exists():
        p.parent.mkdir(parents=True, exist_ok=True)

    with p.open("a", encoding="utf-8") as fh:
        fh.write(json.dumps(record, ensure_ascii=False) + "\n")


def iter_records(path: str | Path) -> Iterator[Dict[str, Any]]:
    """Yield records from ``path`` in the order they were written."""

    p = Path(path)
    if not p.exists():
        return

    with p.open("r", encoding="utf-8") as fh:
        for lineno, line in enumerate(fh, start=1):
            line = line.strip()
            if not line:
                continue
            try:
                record = json.loads(line)
            except json.JSONDecodeError:
                logger.warning("%s:%d: skipping malformed line.", p, lineno)
                continue
            if not isinstance(record, dict):
                logger.warning("%s:%d: skipping non-object record.", p, lineno)
                continue
            yield record


def build_combat_log(records: Iterable[Dict[str, Any]]) -> CombatLog:
    """Assemble a :class:`CombatLog` from raw records.

    Links may reference events declared later in the stream, so they are
    registered once every event is known. Events are sorted by timestamp
    (stable, so ties keep their recorded order).
    """

    events: Dict[int, Event] = {}
    pending_links: List[Dict[str, Any]] = []
    spends: List[SpendEntry] = []

    for record in records:
        record_type = record.get("type")
        if record_type == EVENT:
            try:
                event = event_from_dict(record)
            except EventError as exc:
                logger.warning("Skipping event record: %s", exc)
                continue
            if event.event_id in events:
                logger.warning("Duplicate event id %s; keeping the first.", event.event_id)
                continue
            events[event.event_id] = event
        elif record_type == LINK:
            pending_links.append(record)
        elif record_type == SPEND:
            try:
                spend = SpendEntry(
                    timestamp=int(record["timestamp"]),
                    ability_id=int(record["ability"]),
                    amount=float(record["amount"]),
                )
            except (KeyError, TypeError, ValueError, OverflowError):
                logger.warning("Skipping malformed spend record %r.", record)
                continue
            if not math.isfinite(spend.amount):
                logger.warning("Skipping spend record with non-finite amount %r.", record)
                continue
            spends.append(spend)
        else:
            logger.debug("Ignoring record of unknown type %r.", record_type)

    graph = LinkGraph()
    for record in pending_links:
        from_id, to_id = record.get("from"), record.get("to")
        if not all(isinstance(v, int) and not isinstance(v, bool) for v in (from_id, to_id)):
            logger.warning("Skipping link with non-integer endpoint: %r", record)
            continue
        src = events.get(from_id)
        dst = events.get(to_id)
        link_type = record.get("link")
        if src is None or dst is None or not isinstance(link_type, str):
            logger.warning("Skipping link with unknown endpoint: %r", record)
            continue
        graph.add_link(src, link_type, dst)

    ordered = list(events.values())
    if any(a.timestamp > b.timestamp for a, b in zip(ordered, ordered[1:])):
        logger.info("Events were recorded out of timestamp order; sorting.")
        ordered.sort(key=lambda e: e.timestamp)
    spends.sort(key=lambda s: s.timestamp)

    return CombatLog(events=ordered, graph=graph, spends=spends)


def load_combat_log(path: str | Path) -> CombatLog:
    """Read the combat log stored at ``path``."""

    p = Path(path)
    if not p.is_file():
        raise CombatLogError(f"combat log {p} does not exist")
    try:
        return build_combat_log(iter_records(p))
    except (OSError, UnicodeDecodeError) as exc:
        raise CombatLogError(f"could not read combat log {p}: {exc}") from exc


def combat_log_records(log: CombatLog) -> List[Dict[str, Any]]:
    """Return ``log`` flattened into serialisable records."""

    out: List[Dict[str, Any]] = []
    for event in log.events:
        append_record(out, EVENT, event.to_dict())
    for link in log.graph.links:
        append_record(
            out, LINK, {"from": link.from_id, "link": link.link_type, "to": link.to_id}
        )
    for spend in log.spends:
        append_record(
            out,
            SPEND,
            {"timestamp": spend.timestamp, "ability": spend.ability_id, "amount": spend.amount},
        )
    return out


def write_combat_log(path: str | Path, log: CombatLog) -> None:
    """Write ``log`` to ``path``, replacing any existing file."""

    p = Path(path)
    if p.exists():
        p.unlink()
    for record in combat_log_records(log):
        append_record(p, record.pop("type"), record)


__all__ = [
    "EVENT",
    "LINK",
    "SPEND",
    "SpendEntry",
    "CombatLog",
    "append_record",
    "iter_records",
    "build_combat_log",
    "load_combat_log",
    "combat_log_records",
    "write_combat_log",
]
