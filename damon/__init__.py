"""Cluster state, watchers, filters and view logic for a terminal Nomad dashboard."""

__version__ = "0.1.0"
__all__ = [
    "activity",
    "filters",
    "history",
    "refresher",
    "screens",
    "state",
    "styles",
    "version",
    "view",
    "watcher",
]