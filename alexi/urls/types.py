"""
Типы маршрутизации URL.

URLPattern — декларативное описание маршрута: либо лист с view,
либо группа с вложенными паттернами (результат include).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, Optional, Tuple, Union

from .errors import UrlConfigurationError

# View принимает запрос и параметры URL, возвращает ответ (или awaitable с ответом)
View = Callable[[Any, Dict[str, str]], Union[Any, Awaitable[Any]]]


@dataclass(frozen=True)
class URLPattern:
    """
    Маршрут: строка паттерна ("assets/:id/") плюс ровно одно из view/children.

    name используется для обратного разрешения (reverse).
    """
    pattern: str
    view: Optional[View] = None
    children: Optional[Tuple[URLPattern, ...]] = None
    name: Optional[str] = None

    def __post_init__(self) -> None:
        if (self.view is None) == (self.children is None):
            raise UrlConfigurationError(
                f"URL pattern {self.pattern!r} must have exactly one of view or children"
            )
        if self.children is not None and not isinstance(self.children, tuple):
            object.__setattr__(self, "children", tuple(self.children))

    @property
    def is_leaf(self) -> bool:
        return self.view is not None


@dataclass(frozen=True)
class ResolveResult:
    """Результат resolve(): найденный view, параметры и имя маршрута."""
    view: View
    params: Dict[str, str] = field(default_factory=dict)
    name: Optional[str] = None


@dataclass(frozen=True)
class CompiledSegment:
    """Сегмент паттерна: литерал или параметр (:id -> value='id')."""
    is_param: bool
    value: str


@dataclass(frozen=True)
class CompiledPattern:
    """Скомпилированное дерево паттернов для сопоставления."""
    original: str
    segments: Tuple[CompiledSegment, ...]
    view: Optional[View] = None
    children: Optional[Tuple[CompiledPattern, ...]] = None
    name: Optional[str] = None


__all__ = ["View", "URLPattern", "ResolveResult", "CompiledSegment", "CompiledPattern"]
