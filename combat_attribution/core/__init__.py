"""core package."""

from .events import Event, EventKind
from .link_graph import Link, LinkGraph

__all__ = ["Event", "EventKind", "Link", "LinkGraph"]
