from pathlib import Path

from combat_attribution.trackers import AbilityCatalog, RecordedResourceTracker, SpenderStats


def test_recorded_tracker_accumulates_spends():
    tracker = RecordedResourceTracker()
    assert tracker.spender(188196) is None
    assert tracker.last_spend_amount == 0

    tracker.record_spend(188196, 5)
    tracker.record_spend(188196, 8)
    tracker.record_spend(51505, 2)

    assert tracker.spender(188196) == SpenderStats(casts=2, spent=13)
    assert tracker.last_spend_amount == 2

    tracker.reset()
    assert tracker.spender(188196) is None
    assert tracker.last_spend_amount == 0


def test_catalog_from_yaml(tmp_path: Path):
    path = tmp_path / "abilities.yaml"
    path.write_text("188196: Lightning Bolt\nnot-a-number: Oops\n")
    catalog = AbilityCatalog.from_yaml(path)
    assert catalog.label(188196) == "Lightning Bolt"
    assert catalog.label(1) is None
    assert 188196 in catalog
    assert len(catalog) == 1


def test_catalog_missing_or_invalid_file(tmp_path: Path):
    assert len(AbilityCatalog.from_yaml(tmp_path / "missing.yaml")) == 0
    bad = tmp_path / "list.yaml"
    bad.write_text("- 1\n- 2\n")
    assert len(AbilityCatalog.from_yaml(bad)) == 0


def test_bundled_catalog_has_proxy_label():
    path = Path(__file__).resolve().parents[1] / "combat_attribution" / "data" / "abilities.yaml"
    catalog = AbilityCatalog.from_yaml(path)
    assert catalog.label(375982).startswith("Primordial Wave")
