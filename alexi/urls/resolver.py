"""
Разрешение URL.

resolve() сопоставляет путь с деревом паттернов и находит view,
reverse() строит путь по имени маршрута и параметрам.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from .errors import MissingRouteParameter, NoReverseMatch
from .types import CompiledPattern, CompiledSegment, ResolveResult, URLPattern

logger = logging.getLogger(__name__)


def _split_path(value: str) -> List[str]:
    """Убирает любое число ведущих/завершающих слешей и делит на сегменты."""
    normalized = value.strip("/")
    return normalized.split("/") if normalized else []


@lru_cache(maxsize=1024)
def compile_pattern(pattern: str) -> Tuple[CompiledSegment, ...]:
    """
    Компилирует строку паттерна в сегменты.

    "users/:user_id/posts/" -> (users), (:user_id), (posts)
    """
    return tuple(
        CompiledSegment(is_param=True, value=seg[1:]) if seg.startswith(":")
        else CompiledSegment(is_param=False, value=seg)
        for seg in _split_path(pattern)
    )


def compile_patterns(patterns: Sequence[URLPattern]) -> Tuple[CompiledPattern, ...]:
    """Рекурсивно компилирует дерево паттернов."""
    return tuple(
        CompiledPattern(
            original=p.pattern,
            segments=compile_pattern(p.pattern),
            view=p.view,
            children=compile_patterns(p.children) if p.children is not None else None,
            name=p.name,
        )
        for p in patterns
    )


# ======= resolve =======

def _match(
    url_segments: Sequence[str],
    pattern: CompiledPattern,
    params: Dict[str, str],
) -> Optional[ResolveResult]:
    segments = pattern.segments
    if len(segments) > len(url_segments):
        return None

    bound = dict(params)
    for seg, url_seg in zip(segments, url_segments):
        if seg.is_param:
            bound[seg.value] = url_seg
        elif seg.value != url_seg:
            return None

    remaining = url_segments[len(segments):]

    if pattern.view is not None:
        # Лист требует полного совпадения пути
        if remaining:
            return None
        return ResolveResult(view=pattern.view, params=bound, name=pattern.name)

    for child in pattern.children or ():
        result = _match(remaining, child, bound)
        if result is not None:
            return result
    return None


def resolve(url: str, patterns: Sequence[URLPattern]) -> Optional[ResolveResult]:
    """
    Находит view для пути.

    Паттерны обходятся в глубину в порядке объявления: побеждает первый
    подходящий, поэтому литеральные маршруты ("add/") нужно объявлять
    раньше параметризованных (":id/"). Отсутствие совпадения — это None,
    а не ошибка.
    """
    url_segments = _split_path(url)
    for pattern in compile_patterns(patterns):
        result = _match(url_segments, pattern, {})
        if result is not None:
            logger.debug("Resolved %r -> %s %s", url, result.name or "<unnamed>", result.params)
            return result
    logger.debug("No route matches %r", url)
    return None


# ======= reverse =======

@dataclass(frozen=True)
class NamedRoute:
    """Именованный маршрут с полным (склеенным с префиксами) паттерном."""
    name: str
    pattern: str
    segments: Tuple[CompiledSegment, ...]

    @property
    def param_names(self) -> List[str]:
        return [s.value for s in self.segments if s.is_param]


RouteRegistry = Dict[str, NamedRoute]


def build_route_registry(patterns: Sequence[URLPattern], prefix: str = "") -> RouteRegistry:
    """
    Плоский реестр именованных маршрутов.

    Обход в глубину в порядке объявления; при повторении имени
    остаётся первое определение. Префикс и паттерн потомка склеиваются
    по сегментам, как их сопоставляет resolve().
    """
    registry: RouteRegistry = {}
    _collect_routes(patterns, compile_pattern(prefix), registry)
    return registry


def _pattern_text(segments: Tuple[CompiledSegment, ...]) -> str:
    text = "/".join(":" + s.value if s.is_param else s.value for s in segments)
    return text + "/" if text else ""


def _collect_routes(
    patterns: Sequence[URLPattern],
    prefix: Tuple[CompiledSegment, ...],
    registry: RouteRegistry,
) -> None:
    for p in patterns:
        segments = prefix + compile_pattern(p.pattern)
        if p.name and p.name not in registry:
            registry[p.name] = NamedRoute(name=p.name, pattern=_pattern_text(segments), segments=segments)
        if p.children is not None:
            _collect_routes(p.children, segments, registry)


# Кэшируется реестр только последнего списка паттернов (по идентичности)
_registry_cache: Dict[int, Tuple[Sequence[URLPattern], RouteRegistry]] = {}


def get_route_registry(patterns: Sequence[URLPattern]) -> RouteRegistry:
    cached = _registry_cache.get(id(patterns))
    if cached is not None and cached[0] is patterns:
        return cached[1]
    registry = build_route_registry(patterns)
    _registry_cache.clear()
    _registry_cache[id(patterns)] = (patterns, registry)
    return registry


def clear_registry_cache() -> None:
    """Сбрасывает кэш реестров (после изменения паттернов во время работы)."""
    _registry_cache.clear()


def reverse(
    name: str,
    params: Optional[Mapping[str, Any]] = None,
    patterns: Sequence[URLPattern] = (),
) -> str:
    """
    Строит путь по имени маршрута.

    Returns:
        Абсолютный путь вида "/a/b/" или "/" для пустого паттерна

    Raises:
        NoReverseMatch: Маршрута с таким именем нет
        MissingRouteParameter: Не передан параметр (первый по порядку сегментов)
    """
    route = get_route_registry(patterns).get(name)
    if route is None:
        raise NoReverseMatch(name)

    params = params or {}
    parts: List[str] = []
    for seg in route.segments:
        if seg.is_param:
            if seg.value not in params:
                raise MissingRouteParameter(seg.value, name)
            parts.append(str(params[seg.value]))
        else:
            parts.append(seg.value)

    return "/" + "/".join(parts) + "/" if parts else "/"


def iter_named_routes(patterns: Sequence[URLPattern]) -> List[NamedRoute]:
    """Все именованные маршруты в порядке объявления."""
    return list(get_route_registry(patterns).values())


__all__ = [
    "compile_pattern",
    "compile_patterns",
    "resolve",
    "reverse",
    "NamedRoute",
    "build_route_registry",
    "get_route_registry",
    "clear_registry_cache",
    "iter_named_routes",
]
