"""
Построители маршрутов в стиле Django: path() и include().

    urlpatterns = [
        path("", home, name="home"),
        path("assets/:id/", asset_detail, name="asset-detail"),
        path("api/", include(api_urls)),
        include("admin/", admin_urls),
    ]
"""

from __future__ import annotations

from typing import List, Optional, Sequence, Union, overload

from .errors import UrlConfigurationError
from .types import URLPattern, View

PathTarget = Union[View, Sequence[URLPattern]]


def _is_pattern_list(target: object) -> bool:
    return isinstance(target, (list, tuple)) and all(isinstance(p, URLPattern) for p in target)


def path(route: str, target: PathTarget, name: Optional[str] = None) -> URLPattern:
    """
    Связывает маршрут с view или с вложенными паттернами.

    Если target — список URLPattern (например, результат include(patterns)),
    создаётся групповой узел; иначе target должен быть вызываемым view.
    """
    if _is_pattern_list(target):
        return URLPattern(pattern=route, children=tuple(target), name=name)
    if callable(target):
        return URLPattern(pattern=route, view=target, name=name)
    raise UrlConfigurationError(
        f"path({route!r}): target must be a view callable or a list of URL patterns"
    )


@overload
def include(route_or_patterns: Sequence[URLPattern]) -> List[URLPattern]: ...


@overload
def include(
    route_or_patterns: str,
    patterns: Sequence[URLPattern],
    name: Optional[str] = None,
) -> URLPattern: ...


def include(route_or_patterns, patterns=None, name=None):
    """
    include(patterns) — возвращает паттерны как есть, для path(route, include(...)).
    include(route, patterns, name=None) — сразу создаёт групповой узел с префиксом.
    """
    if isinstance(route_or_patterns, str):
        if patterns is None:
            raise UrlConfigurationError(
                f"include({route_or_patterns!r}) requires a list of URL patterns"
            )
        return path_include(route_or_patterns, patterns, name=name)
    return list(route_or_patterns)


def path_include(route: str, patterns: Sequence[URLPattern], name: Optional[str] = None) -> URLPattern:
    """Групповой узел: все patterns монтируются под префиксом route."""
    return URLPattern(pattern=route, children=tuple(patterns), name=name)


__all__ = ["path", "include", "path_include"]
