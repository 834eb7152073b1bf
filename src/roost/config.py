"""Router configuration.

RouterConfig is a frozen dataclass — immutable after creation, IDE-autocompletable,
no string-key dict lookups. Route and module tables are passed to the
``Router`` itself; this holds the tunables.
"""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class RouterConfig:
    """Router configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = RouterConfig(show_delay=0.0, page_class="screen")
    """

    # Pause between composing a page and calling show() on it
    show_delay: float = 0.005

    # CSS classes handed to every page
    page_class: str = "page"
    active_class: str = "page-active"
    loaded_class: str = "page-loaded"
    disabled_class: str = "page-disabled"
    error_class: str = "page-error"

    # Route <a> clicks inside the visible page through trigger_route()
    intercept_links: bool = True

    # Log each navigation at INFO (DEBUG otherwise)
    log_navigation: bool = False

    def page_class_options(self) -> dict[str, str]:
        """Class options passed to every page constructor."""
        return {
            "active_class": self.active_class,
            "loaded_class": self.loaded_class,
            "disabled_class": self.disabled_class,
            "error_class": self.error_class,
        }
