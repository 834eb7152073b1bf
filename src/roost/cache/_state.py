"""Lifecycle states shared by cached pages and modules."""

from enum import Enum


class LoadState(Enum):
    """Where a page or module instance is in its lifecycle.

    ``UNLOADED → LOADING → LOADED ⇄ SHOWN ⇄ HIDDEN``; a failed load ends
    in ``FAILED`` and the entry is evicted so the next attempt starts over.
    """

    UNLOADED = "unloaded"
    LOADING = "loading"
    LOADED = "loaded"
    SHOWN = "shown"
    HIDDEN = "hidden"
    FAILED = "failed"

    @property
    def is_ready(self) -> bool:
        """True once ``load()`` succeeded."""
        return self in (LoadState.LOADED, LoadState.SHOWN, LoadState.HIDDEN)
