import pytest

from combat_attribution.core.events import cast_event, damage_event, is_cast, is_damage
from combat_attribution.core.link_graph import Link, LinkGraph
from combat_attribution.errors import LinkGraphError


def _events():
    cast = cast_event(1, 188196, 100, 1)
    late_hit = damage_event(2, 188196, 900, 1, 50)
    early_hit = damage_event(3, 188196, 150, 1, 70)
    return cast, late_hit, early_hit


def test_has_related_event():
    graph = LinkGraph()
    cast, late_hit, _ = _events()
    assert not graph.has_related_event(cast, "lightning-bolt")
    graph.add_link(cast, "lightning-bolt", late_hit)
    assert graph.has_related_event(cast, "lightning-bolt")
    assert not graph.has_related_event(cast, "other")
    # Links are directed
    assert not graph.has_related_event(late_hit, "lightning-bolt")


def test_registration_order_not_timestamp_order():
    graph = LinkGraph()
    cast, late_hit, early_hit = _events()
    graph.add_link(cast, "lightning-bolt", late_hit)
    graph.add_link(cast, "lightning-bolt", early_hit)

    assert graph.get_related_event(cast, "lightning-bolt") is late_hit
    assert list(graph.get_related_events(cast, "lightning-bolt")) == [late_hit, early_hit]


def test_predicate_filters_matches():
    graph = LinkGraph()
    cast, late_hit, _ = _events()
    other_cast = cast_event(4, 375982, 50, 1)
    graph.add_link(cast, "primordial-wave", late_hit)
    graph.add_link(cast, "primordial-wave", other_cast)

    assert graph.get_related_event(cast, "primordial-wave", is_cast) is other_cast
    assert list(graph.get_related_events(cast, "primordial-wave", is_damage)) == [late_hit]


def test_missing_link_is_absent():
    graph = LinkGraph()
    cast, _, _ = _events()
    assert graph.get_related_event(cast, "lightning-bolt") is None
    assert list(graph.get_related_events(cast, "lightning-bolt")) == []


def test_queries_are_repeatable():
    graph = LinkGraph()
    cast, late_hit, early_hit = _events()
    graph.add_link(cast, "lightning-bolt", late_hit)
    graph.add_link(cast, "lightning-bolt", early_hit)

    first = graph.get_related_events(cast, "lightning-bolt")
    next(first)
    # A fresh query starts from the beginning again.
    assert list(graph.get_related_events(cast, "lightning-bolt")) == [late_hit, early_hit]


def test_duplicate_link_ignored():
    graph = LinkGraph()
    cast, late_hit, _ = _events()
    graph.add_link(cast, "lightning-bolt", late_hit)
    graph.add_link(cast, "lightning-bolt", late_hit)
    assert graph.links == (Link(1, "lightning-bolt", 2),)


def test_link_both_registers_two_directions():
    graph = LinkGraph()
    head = cast_event(1, 375982, 0, 1)
    bolt = cast_event(2, 188196, 10, 1)
    graph.link_both(head, "primordial-wave", bolt)
    assert graph.get_related_event(head, "primordial-wave") is bolt
    assert graph.get_related_event(bolt, "primordial-wave") is head


def test_conflicting_event_id_rejected():
    graph = LinkGraph()
    cast, late_hit, _ = _events()
    graph.add_link(cast, "lightning-bolt", late_hit)
    impostor = damage_event(2, 51505, 10, 1, 5)
    with pytest.raises(LinkGraphError):
        graph.add_link(cast, "lightning-bolt", impostor)


def test_frozen_graph_rejects_links():
    graph = LinkGraph()
    cast, late_hit, _ = _events()
    graph.freeze()
    assert graph.frozen
    with pytest.raises(LinkGraphError):
        graph.add_link(cast, "lightning-bolt", late_hit)
