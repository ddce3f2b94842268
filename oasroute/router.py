"""Matching of HTTP method and path against the routes of a spec."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Iterable

from .spec import RouteMeta


@dataclass
class RouteMatch:
    """A route that matched a request, with the values it captured."""

    route: RouteMeta
    path_params: dict[str, str]
    handler_name: str
    query_params: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class _CompiledRoute:
    method: str
    pattern: re.Pattern[str]
    meta: RouteMeta
    param_names: tuple[str, ...]


def _path_to_regex(path: str) -> tuple[re.Pattern[str], tuple[str, ...]]:
    parts: list[str] = []
    param_names: list[str] = []
    for segment in path.split("/"):
        if segment.startswith("{") and segment.endswith("}"):
            parts.append("/([^/]+)")
            param_names.append(segment.lstrip("{").rstrip("}"))
        elif segment:
            parts.append("/" + re.escape(segment))
    return re.compile("".join(parts)), tuple(param_names)


class Router:
    """Matches requests to routes in the order the routes were given."""

    def __init__(self, routes: Iterable[RouteMeta]) -> None:
        self._routes: list[_CompiledRoute] = []
        for meta in routes:
            pattern, names = _path_to_regex(meta.path_pattern)
            self._routes.append(_CompiledRoute(meta.method.upper(), pattern, meta, names))

    def route(self, method: str, path: str) -> RouteMatch | None:
        """Return the first route matching ``method`` and ``path``, or None."""
        method = str(method).upper()
        for compiled in self._routes:
            if compiled.method != method:
                continue
            found = compiled.pattern.fullmatch(path)
            if found is None:
                continue
            params = {
                name: value
                for name, value in zip(compiled.param_names, found.groups())
                if value is not None
            }
            return RouteMatch(
                route=compiled.meta,
                path_params=params,
                handler_name=compiled.meta.handler_name,
            )
        return None