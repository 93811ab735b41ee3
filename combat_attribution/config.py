"""Simple configuration loader for combat_attribution."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, FrozenSet, Mapping, Optional

import yaml


CONFIG_PATH = Path(__file__).resolve().parents[1] / "config.yaml"


@dataclass(frozen=True)
class AttributionConfig:
    """Which actor, abilities and link types the attribution pass looks at."""

    tracked_actor: int = 1
    eligible_abilities: FrozenSet[int] = frozenset()
    spender_link: str = "maelstrom-spender"
    chain_link: str = "primordial-wave"
    outcome_link: str = "lightning-bolt"
    chain_sensitive_ability: Optional[int] = None
    chain_proxy_ability: Optional[int] = None
    # Raw effect id -> id the amount is aggregated under.
    id_substitutions: Mapping[int, int] = field(default_factory=dict)

    def substitute(self, ability_id: int) -> int:
        """Return the id ``ability_id`` is aggregated under."""

        return self.id_substitutions.get(ability_id, ability_id)


@dataclass
class LoggingConfig:
    """Logging levels applied by :mod:`combat_attribution.main`."""

    global_level: str = "INFO"
    module_levels: Dict[str, str] = field(default_factory=dict)


@dataclass
class PathsConfig:
    """Filesystem locations of auxiliary data."""

    ability_catalog: Optional[str] = None


@dataclass
class Config:
    """Top level configuration dataclass."""

    attribution: AttributionConfig
    logging: LoggingConfig
    paths: PathsConfig


def _parse_attribution(data: dict[str, Any]) -> AttributionConfig:
    chain_sensitive = data.get("chain_sensitive_ability")
    proxy = data.get("chain_proxy_ability")
    return AttributionConfig(
        tracked_actor=int(data.get("tracked_actor", 1)),
        eligible_abilities=frozenset(int(a) for a in data.get("eligible_abilities") or []),
        spender_link=str(data.get("spender_link", "maelstrom-spender")),
        chain_link=str(data.get("chain_link", "primordial-wave")),
        outcome_link=str(data.get("outcome_link", "lightning-bolt")),
        chain_sensitive_ability=int(chain_sensitive) if chain_sensitive is not None else None,
        chain_proxy_ability=int(proxy) if proxy is not None else None,
        id_substitutions={
            int(k): int(v) for k, v in (data.get("id_substitutions") or {}).items()
        },
    )


def _parse_config(data: dict[str, Any]) -> Config:
    """Convert raw ``data`` into :class:`Config`."""

    attribution = _parse_attribution(data.get("attribution") or {})

    logging_data = data.get("logging") or {}
    logging_cfg = LoggingConfig(
        global_level=str(logging_data.get("global_level", "INFO")).upper(),
        module_levels={
            str(k): str(v) for k, v in (logging_data.get("module_levels") or {}).items()
        },
    )

    paths_data = data.get("paths") or {}
    paths = PathsConfig(ability_catalog=paths_data.get("ability_catalog"))

    return Config(attribution=attribution, logging=logging_cfg, paths=paths)


def load_config(path: Path = CONFIG_PATH) -> Config:
    """Load configuration from ``path`` and return a :class:`Config`."""

    path = Path(path)
    if path.is_file():
        raw = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    else:
        raw = {}
    return _parse_config(raw)


# Load configuration at module import time.
CONFIG = load_config()


__all__ = [
    "CONFIG",
    "CONFIG_PATH",
    "Config",
    "AttributionConfig",
    "LoggingConfig",
    "PathsConfig",
    "load_config",
]
