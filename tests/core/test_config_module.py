from pathlib import Path

from combat_attribution.config import (
    CONFIG,
    AttributionConfig,
    LoggingConfig,
    PathsConfig,
    load_config,
)


def test_config_module_loads_config():
    assert isinstance(CONFIG.attribution, AttributionConfig)
    assert isinstance(CONFIG.logging, LoggingConfig)
    assert isinstance(CONFIG.paths, PathsConfig)
    assert CONFIG.attribution.chain_sensitive_ability == 188196
    assert CONFIG.attribution.chain_proxy_ability == 375982
    assert 51505 in CONFIG.attribution.eligible_abilities
    assert CONFIG.attribution.substitute(285452) == 51505


def test_missing_config_uses_defaults(tmp_path: Path):
    cfg = load_config(tmp_path / "missing.yaml")
    assert cfg.attribution.tracked_actor == 1
    assert cfg.attribution.eligible_abilities == frozenset()
    assert cfg.attribution.chain_proxy_ability is None
    assert cfg.logging.global_level == "INFO"
    assert cfg.paths.ability_catalog is None


def test_custom_config_parsed(tmp_path: Path):
    path = tmp_path / "config.yaml"
    path.write_text(
        """
attribution:
  tracked_actor: 42
  eligible_abilities: [10, 11]
  spender_link: spend
  chain_sensitive_ability: 10
  chain_proxy_ability: 99
  id_substitutions:
    "11": 10
logging:
  global_level: debug
  module_levels:
    combat_attribution.systems: WARNING
"""
    )
    cfg = load_config(path)
    assert cfg.attribution.tracked_actor == 42
    assert cfg.attribution.eligible_abilities == frozenset({10, 11})
    assert cfg.attribution.spender_link == "spend"
    assert cfg.attribution.substitute(11) == 10
    assert cfg.attribution.substitute(12) == 12
    assert cfg.logging.global_level == "DEBUG"
    assert cfg.logging.module_levels == {"combat_attribution.systems": "WARNING"}
