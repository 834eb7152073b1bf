"""Instance caches — pages by route key, global modules by name."""

from roost.cache._state import LoadState
from roost.cache.modules import GlobalModuleRegistry, ModuleEntry
from roost.cache.pages import PageCache, PageEntry

__all__ = ["GlobalModuleRegistry", "LoadState", "ModuleEntry", "PageCache", "PageEntry"]
