import logging
import re
from dataclasses import dataclass, field
from typing import Callable

logger = logging.getLogger(__name__)

PROTECTED_PREFIXES = ("/business/", "/freelancer/", "/admin/", "/profile", "/messages/")

_PARAM = re.compile(r":(\w+)")


@dataclass(frozen=True)
class RouteMatch:
    pattern: str
    handler: Callable
    params: dict[str, str] = field(default_factory=dict)


def normalize_path(path: str) -> str:
    """'#/jobs' and 'jobs' both become '/jobs'; empty becomes '/'."""
    path = (path or "").strip()
    if path.startswith("#"):
        path = path[1:]
    if not path.startswith("/"):
        path = "/" + path
    return path


def _compile(pattern: str) -> re.Pattern:
    return re.compile("^" + _PARAM.sub(r"([^/]+)", pattern) + "$")


class Router:
    """Maps hash paths (with `:param` segments) to view functions."""

    def __init__(self, routes: dict[str, Callable], *, protected_prefixes=PROTECTED_PREFIXES):
        self.routes = dict(routes)
        self.protected_prefixes = tuple(protected_prefixes)
        self._compiled = [(p, _compile(p), _PARAM.findall(p), h) for p, h in self.routes.items()]

    def match(self, path: str) -> RouteMatch | None:
        path = normalize_path(path)
        # Exact match first, then parameterized patterns in declaration order.
        if path in self.routes:
            return RouteMatch(path, self.routes[path])
        for pattern, regex, names, handler in self._compiled:
            m = regex.match(path)
            if m:
                return RouteMatch(pattern, handler, dict(zip(names, m.groups())))
        return None

    def is_protected(self, path: str) -> bool:
        return normalize_path(path).startswith(self.protected_prefixes)
