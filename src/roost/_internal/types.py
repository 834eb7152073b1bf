"""Shared type aliases used across roost modules."""

from collections.abc import Callable
from typing import Any, TypeAlias

# Router callback: receives the router first, sync or async
Callback: TypeAlias = Callable[..., Any]

# Options handed to a page or module constructor
Options: TypeAlias = dict[str, Any]
