"""Path helpers and immutable query string parameters.

Paths handed to the router are relative (``"profile/32"``). A single
leading slash is tolerated and dropped; the query string and fragment
never take part in route matching.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from urllib.parse import parse_qs, urlsplit


def strip_leading_slash(path: str) -> str:
    """Drop one leading ``/`` from *path*."""
    return path[1:] if path.startswith("/") else path


def route_key(path: str) -> str:
    """Canonical cache key for *path*.

    Examples::

        "/profile/32"        -> "profile/32"
        "profile/32?tab=bio" -> "profile/32"
        "docs#intro"         -> "docs"
    """
    path = strip_leading_slash(path)
    for sep in ("?", "#"):
        path = path.split(sep, 1)[0]
    return path


def split_params(path: str) -> list[str]:
    """Split a relative path into its non-empty segments."""
    return [part for part in route_key(path).split("/") if part]


def query_string(url: str) -> str:
    """Return the raw query string of *url* (without ``?``)."""
    return urlsplit(url).query


class QueryParams(Mapping[str, str]):
    """Read-only view of a query string.

    Indexing gives the first value of a repeated key; ``get_list`` gives
    every value. Blank values are kept (``"flag="`` maps ``flag`` to ``""``).
    """

    __slots__ = ("_raw", "_values")

    def __init__(self, query: str = "") -> None:
        self._raw = query.removeprefix("?")
        self._values: dict[str, list[str]] = parse_qs(self._raw, keep_blank_values=True)

    @classmethod
    def from_url(cls, url: str) -> QueryParams:
        """Parameters of a full or relative URL."""
        return cls(query_string(url))

    def __getitem__(self, key: str) -> str:
        return self._values[key][0]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._raw!r})"

    @property
    def raw(self) -> str:
        """The query string without its ``?``."""
        return self._raw

    def get_list(self, key: str) -> list[str]:
        """Every value given for *key*, in order."""
        return list(self._values.get(key, ()))
