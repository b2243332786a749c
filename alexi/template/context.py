"""
Контекст рендеринга шаблона.

Контекст — это структурное отображение «строковый ключ -> значение»,
где значение принадлежит закрытому набору типов (строка, число, булево,
None, вложенное отображение, последовательность). Рендерер только читает
контекст; циклы создают поверх него новые слои, не изменяя исходный.
"""

from __future__ import annotations

from collections import ChainMap
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Dict, Iterator, Optional, Union


class _Missing:
    """
    Маркер отсутствующего значения (аналог undefined).

    Выводится как пустая строка и всегда ложен.
    """

    _instance: Optional[_Missing] = None

    def __new__(cls) -> _Missing:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __str__(self) -> str:
        return ""

    def __repr__(self) -> str:
        return "MISSING"


MISSING = _Missing()

ContextValue = Union[
    str, int, float, bool, None,
    Mapping[str, "ContextValue"],
    Sequence["ContextValue"],
]


@dataclass(frozen=True)
class ForLoop:
    """
    Метаданные текущей итерации цикла, доступные в шаблоне как forloop.*
    """
    counter: int        # Номер итерации, начиная с 1
    counter0: int       # Номер итерации, начиная с 0
    revcounter: int     # Сколько итераций осталось, включая текущую
    revcounter0: int    # Сколько итераций осталось после текущей
    first: bool
    last: bool

    @classmethod
    def at(cls, index: int, length: int) -> ForLoop:
        """Создаёт метаданные для итерации index из length."""
        return cls(
            counter=index + 1,
            counter0=index,
            revcounter=length - index,
            revcounter0=length - index - 1,
            first=index == 0,
            last=index == length - 1,
        )


class TemplateContext(Mapping):
    """
    Слоистый контекст шаблона.

    Обёртка над ChainMap: поиск идёт от самого нового слоя к исходным
    данным. push() возвращает новый контекст с дополнительным слоем,
    исходный при этом не меняется (copy-on-write для итераций цикла).
    """

    def __init__(self, data: Optional[Mapping[str, Any]] = None, *, _chain: Optional[ChainMap] = None):
        if _chain is not None:
            self._chain = _chain
        else:
            self._chain = ChainMap(dict(data) if data else {})

    @classmethod
    def wrap(cls, data: Union[TemplateContext, Mapping[str, Any], None]) -> TemplateContext:
        """Приводит произвольное отображение к TemplateContext."""
        if isinstance(data, TemplateContext):
            return data
        return cls(data)

    def push(self, **values: Any) -> TemplateContext:
        """Возвращает дочерний контекст с новым слоем значений."""
        return TemplateContext(_chain=self._chain.new_child(dict(values)))

    @property
    def depth(self) -> int:
        """Количество слоёв контекста."""
        return len(self._chain.maps)

    def resolve(self, path: str) -> Any:
        """Разрешает точечный путь в этом контексте."""
        return resolve_path(path, self)

    def flatten(self) -> Dict[str, Any]:
        """Плоская копия всех слоёв (верхние слои перекрывают нижние)."""
        return dict(self._chain)

    def __getitem__(self, key: str) -> Any:
        return self._chain[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._chain)

    def __len__(self) -> int:
        return len(self._chain)

    def __repr__(self) -> str:
        return f"TemplateContext({self.flatten()!r})"


def _lookup(value: Any, part: str) -> Any:
    """Один шаг разрешения пути: ключ, индекс или атрибут."""
    if value is None or value is MISSING:
        return MISSING

    if isinstance(value, Mapping):
        return value.get(part, MISSING)

    if isinstance(value, (str, bytes)):
        # У строк нет свойств, доступных из шаблона
        return MISSING

    if isinstance(value, Sequence):
        if part.isascii() and part.isdecimal():
            index = int(part)
            return value[index] if index < len(value) else MISSING
        return MISSING

    # Приватные и служебные атрибуты из шаблона недоступны
    if part.startswith("_"):
        return MISSING
    return getattr(value, part, MISSING)


def resolve_path(path: str, context: Mapping[str, Any]) -> Any:
    """
    Разрешает точечный путь в контексте, например user.profile.name.

    Любое отсутствующее промежуточное звено даёт MISSING;
    функция никогда не выбрасывает исключений.
    """
    value: Any = context
    for part in path.split("."):
        value = _lookup(value, part)
        if value is MISSING:
            return MISSING
    return value


def is_truthy(value: Any) -> bool:
    """
    Истинность в стиле Django.

    Ложны: False, None, MISSING, 0, "", пустые последовательности
    и пустые отображения. Всё остальное истинно.
    """
    if value is None or value is MISSING or value is False:
        return False
    if isinstance(value, (int, float)) and value == 0:
        return False
    if isinstance(value, (str, Mapping, Sequence)):
        return len(value) > 0
    return True


def is_iterable_value(value: Any) -> bool:
    """Можно ли обходить значение в {% for %} (строки и отображения нельзя)."""
    return (
        isinstance(value, Sequence)
        and not isinstance(value, (str, bytes))
    )


__all__ = [
    "MISSING",
    "ContextValue",
    "ForLoop",
    "TemplateContext",
    "resolve_path",
    "is_truthy",
    "is_iterable_value",
]
