"""In-memory URL query store with browser-like history semantics."""

from __future__ import annotations

from typing import List, Optional
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

from .base import QueryStore


class UrlQueryStore(QueryStore):
    """Query parameters of ``url``; ``history`` holds one entry per navigation.

    ``delete`` only edits the pending parameters. ``replace`` writes them over
    the current history entry, so no back-navigation entry is added.
    """

    def __init__(self, url: str) -> None:
        self.history: List[str] = [url]
        self._parts = urlsplit(url)
        self._params = parse_qsl(self._parts.query, keep_blank_values=True)

    @property
    def url(self) -> str:
        return self.history[-1]

    def get(self, key: str) -> Optional[str]:
        for name, value in self._params:
            if name == key:
                return value
        return None

    def delete(self, key: str) -> None:
        self._params = [(name, value) for name, value in self._params if name != key]

    def to_query_string(self) -> str:
        return urlencode(self._params)

    def replace(self) -> None:
        self._parts = self._parts._replace(query=self.to_query_string())
        self.history[-1] = urlunsplit(self._parts)
