from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, Mapping, Optional
from urllib.parse import parse_qsl, urlencode, urlsplit

from runtime_bus import topics

logger = logging.getLogger(__name__)

NAV_CLIENT = "client"
NAV_LOCATION = "location"
NAV_FAILED = "failed"

NavigateFn = Callable[[str, Dict[str, str]], object]


@dataclass(frozen=True)
class Route:
    path: str = "/"
    query: Dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_url(cls, url: str) -> "Route":
        parts = urlsplit(url or "/")
        return cls(path=parts.path or "/", query=dict(parse_qsl(parts.query)))

    def to_url(self) -> str:
        return build_url(self.path, self.query)

    def get(self, key: str) -> Optional[str]:
        return self.query.get(key)


def stringify_query(query: Optional[Mapping[str, object]]) -> Dict[str, str]:
    return {str(key): str(value) for key, value in (query or {}).items() if value is not None}


def build_url(path: str, query: Optional[Mapping[str, object]] = None) -> str:
    params = stringify_query(query)
    if not params:
        return path
    return f"{path}?{urlencode(params)}"


class Location:
    """Direct location holder; assigning ``href`` is a full page transition."""

    def __init__(self, href: str = "/", on_reload: Optional[Callable[[str], None]] = None) -> None:
        self.href = href
        self._on_reload = on_reload

    def assign(self, href: str) -> None:
        self.href = href
        if self._on_reload is not None:
            self._on_reload(href)


class Navigator:
    """Routes navigation through the client router, falling back to ``Location``.

    ``navigate`` never raises; it returns which tier handled the request.
    """

    def __init__(
        self,
        navigate_fn: Optional[NavigateFn] = None,
        *,
        location: Optional[Location] = None,
        bus=None,
        initial: Optional[Route] = None,
        source: str = "navigator",
    ) -> None:
        self._navigate_fn = navigate_fn
        self._location = location
        self._bus = bus
        self._source = source
        self._current = initial or Route()
        self._commits = 0

    @property
    def current_route(self) -> Route:
        return self._current

    def set_navigate_fn(self, navigate_fn: Optional[NavigateFn]) -> None:
        self._navigate_fn = navigate_fn

    def navigate(self, path: str, query: Optional[Mapping[str, object]] = None) -> str:
        params = stringify_query(query)
        commits = self._commits
        mode = self._dispatch(path, params)
        if mode == NAV_FAILED:
            return mode
        if self._commits != commits:
            # a navigation triggered from inside the router already landed
            logger.debug("navigation to %s superseded by a nested navigation", path)
            return mode
        self._commits += 1
        self._current = Route(path=path, query=params)
        self._announce()
        return mode

    def _dispatch(self, path: str, params: Dict[str, str]) -> str:
        if self._navigate_fn is not None:
            try:
                self._navigate_fn(path, dict(params))
                return NAV_CLIENT
            except Exception:
                logger.warning("client navigation to %s failed, using location", path, exc_info=True)
        url = build_url(path, params)
        if self._location is None:
            logger.error("navigation to %s dropped: no router or location available", url)
            return NAV_FAILED
        try:
            self._location.assign(url)
        except Exception:
            logger.exception("location assignment to %s failed", url)
            return NAV_FAILED
        return NAV_LOCATION

    def _announce(self) -> None:
        if self._bus is None:
            return
        payload = {"path": self._current.path, "query": dict(self._current.query)}
        self._bus.publish(topics.NAV_ROUTE_CHANGED, payload, source=self._source)


__all__ = [
    "Location",
    "NAV_CLIENT",
    "NAV_FAILED",
    "NAV_LOCATION",
    "Navigator",
    "Route",
    "build_url",
    "stringify_query",
]
