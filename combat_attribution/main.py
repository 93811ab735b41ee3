"""Command line entry point: replay a recorded log and print the report."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

import yaml

from .config import CONFIG, CONFIG_PATH, Config, LoggingConfig, load_config
from .errors import CombatLogError
from .persistence.event_log import load_combat_log
from .persistence.replay import replay, verify_determinism
from .systems.aggregator import UNDEFINED, AbilityReport
from .trackers import AbilityCatalog

EXIT_OK = 0
EXIT_BAD_LOG = 1
EXIT_NONDETERMINISTIC = 2


def configure_logging(cfg: LoggingConfig) -> None:
    """Apply the global and per-module levels from ``cfg``."""

    numeric_level = getattr(logging, cfg.global_level, logging.INFO)
    logging.basicConfig(
        level=numeric_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        force=True,
    )
    for module_name, level_str in cfg.module_levels.items():
        module_numeric_level = getattr(logging, level_str.upper(), None)
        if module_numeric_level is not None:
            logging.getLogger(module_name).setLevel(module_numeric_level)
        else:
            logger.warning(
                "Invalid log level '%s' for module '%s' in config.", level_str, module_name
            )


logger = logging.getLogger(__name__)
configure_logging(CONFIG.logging)


def _metric(value: Any) -> Any:
    if value is UNDEFINED:
        return "undefined"
    return round(value, 2)


def report_to_dict(rows: Mapping[int, AbilityReport]) -> List[Dict[str, Any]]:
    """Convert report rows into plain data for YAML output."""

    out: List[Dict[str, Any]] = []
    for ability_id, row in rows.items():
        out.append(
            {
                "ability": ability_id,
                "label": row.label,
                "casts": row.casts,
                "attributed_amount": row.attributed_amount,
                "total_spent": row.total_spent,
                "amount_per_resource_unit": _metric(row.amount_per_resource_unit),
                "resource_units_per_cast": _metric(row.resource_units_per_cast),
                "amount_per_cast": _metric(row.amount_per_cast),
            }
        )
    return out


def _load_catalog(cfg: Config, config_path: Path) -> AbilityCatalog | None:
    if not cfg.paths.ability_catalog:
        return None
    path = Path(cfg.paths.ability_catalog)
    if not path.is_absolute():
        path = config_path.resolve().parent / path
    return AbilityCatalog.from_yaml(path)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="combat-attribution",
        description="Attribute resource spends in a recorded combat log.",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    rp = sub.add_parser("replay", help="replay a JSON-lines combat log")
    rp.add_argument("log", type=Path, help="recorded combat log (.jsonl)")
    rp.add_argument("--config", type=Path, default=CONFIG_PATH)
    rp.add_argument(
        "--check-determinism",
        action="store_true",
        help="replay twice and fail if the totals differ",
    )
    rp.add_argument(
        "--all-abilities",
        action="store_true",
        help="include abilities missing from the ability catalog",
    )
    return parser


def run_replay(args: argparse.Namespace) -> int:
    cfg = load_config(args.config)
    configure_logging(cfg.logging)

    try:
        log = load_combat_log(args.log)
    except CombatLogError as exc:
        logger.error("%s", exc)
        return EXIT_BAD_LOG

    if args.check_determinism and not verify_determinism(log, cfg.attribution):
        return EXIT_NONDETERMINISTIC

    analysis = replay(log, cfg.attribution)
    catalog = None if args.all_abilities else _load_catalog(cfg, args.config)
    rows = analysis.statistic(catalog)
    yaml.safe_dump(report_to_dict(rows), sys.stdout, sort_keys=False)
    return EXIT_OK


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    if args.command == "replay":
        return run_replay(args)
    return EXIT_OK  # pragma: no cover - argparse enforces a command


if __name__ == "__main__":  # pragma: no cover - manual execution
    sys.exit(main())
