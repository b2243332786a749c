"""
Загрузчики шаблонов.

Реализации протокола TemplateLoader:
- MemoryTemplateLoader — шаблоны в памяти (регистрация при старте, тесты);
- FilesystemTemplateLoader — поиск файлов по упорядоченному списку директорий;
- ChainTemplateLoader — перебор нескольких загрузчиков по очереди;
- CachedTemplateLoader — кэширующая обёртка со сбросом для hot-reload.

Плюс процессный реестр по умолчанию с явными функциями инициализации
и сброса (для изоляции тестов).
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Union
from urllib.parse import unquote, urlparse

from .errors import TemplateNotFoundError
from .protocols import TemplateLoader

logger = logging.getLogger(__name__)

DirLike = Union[str, Path]


class MemoryTemplateLoader:
    """
    Загрузчик шаблонов из памяти.

    Шаблоны регистрируются программно:
        loader.register("notes/note_list.html", "<ul>...</ul>")
    """

    def __init__(self, templates: Optional[Mapping[str, str]] = None):
        self._templates: Dict[str, str] = dict(templates) if templates else {}

    def register(self, name: str, source: str) -> None:
        """Регистрирует (или заменяет) шаблон по имени."""
        self._templates[name] = source

    def register_all(self, entries: Mapping[str, str]) -> None:
        """Регистрирует несколько шаблонов сразу."""
        self._templates.update(entries)

    def has(self, name: str) -> bool:
        """Проверяет, зарегистрирован ли шаблон."""
        return name in self._templates

    def names(self) -> List[str]:
        """Отсортированный список имён зарегистрированных шаблонов."""
        return sorted(self._templates)

    def clear(self) -> None:
        """Удаляет все зарегистрированные шаблоны."""
        self._templates.clear()

    async def load(self, name: str) -> str:
        try:
            return self._templates[name]
        except KeyError:
            raise TemplateNotFoundError(name) from None


def _normalize_dir(directory: DirLike) -> Path:
    """Приводит file:// URL или строку к Path без завершающего слеша."""
    if isinstance(directory, str) and directory.startswith("file://"):
        return Path(unquote(urlparse(directory).path))
    return Path(directory)


class FilesystemTemplateLoader:
    """
    Загрузчик шаблонов из файловой системы.

    Директории просматриваются по порядку, побеждает первое совпадение.
    Поддерживается django-подобное пространство имён: шаблон
    "notes/note_list.html" ищется как <dir>/notes/note_list.html.
    Имена, выходящие за пределы корневой директории, не находятся.
    """

    def __init__(self, dirs: Iterable[DirLike] = (), encoding: str = "utf-8"):
        self.dirs: List[Path] = [_normalize_dir(d) for d in dirs]
        self.encoding = encoding

    def add_dir(self, directory: DirLike) -> None:
        """Добавляет директорию в конец пути поиска."""
        self.dirs.append(_normalize_dir(directory))

    def candidates(self, name: str) -> List[Path]:
        """Пути-кандидаты для имени шаблона в порядке поиска."""
        out: List[Path] = []
        for root in self.dirs:
            candidate = (root / name).resolve()
            try:
                candidate.relative_to(root.resolve())
            except ValueError:
                logger.debug("Template name %r escapes %s, skipped", name, root)
                continue
            out.append(candidate)
        return out

    def list_templates(self) -> List[str]:
        """Имена всех шаблонов во всех директориях (без дублей, POSIX)."""
        seen: Dict[str, None] = {}
        for root in self.dirs:
            if not root.is_dir():
                continue
            for p in sorted(root.rglob("*")):
                if p.is_file():
                    seen.setdefault(p.relative_to(root).as_posix(), None)
        return list(seen)

    def _read_first(self, name: str) -> Optional[str]:
        for candidate in self.candidates(name):
            if candidate.is_file():
                logger.debug("Loading template %r from %s", name, candidate)
                return candidate.read_text(encoding=self.encoding)
        return None

    async def load(self, name: str) -> str:
        source = await asyncio.to_thread(self._read_first, name)
        if source is None:
            raise TemplateNotFoundError(name, [d.as_posix() for d in self.dirs])
        return source


class ChainTemplateLoader:
    """
    Цепочка загрузчиков: каждый пробуется по очереди.

    Удобно для слоя переопределений в памяти поверх файловой системы.
    Дальше по цепочке проходит только TemplateNotFoundError, остальные
    ошибки распространяются сразу.
    """

    def __init__(self, loaders: Sequence[TemplateLoader]):
        self.loaders: List[TemplateLoader] = list(loaders)

    async def load(self, name: str) -> str:
        last_error: Optional[TemplateNotFoundError] = None
        for loader in self.loaders:
            try:
                return await loader.load(name)
            except TemplateNotFoundError as e:
                last_error = e
        if last_error is None:
            raise TemplateNotFoundError(name)
        raise last_error


class CachedTemplateLoader:
    """
    Кэширующая обёртка над загрузчиком.

    Кэш живёт до явного сброса: invalidate(name) для одного шаблона
    или clear() для всех (hot-reload в режиме разработки).
    """

    def __init__(self, inner: TemplateLoader):
        self.inner = inner
        self._cache: Dict[str, str] = {}

    async def load(self, name: str) -> str:
        cached = self._cache.get(name)
        if cached is not None:
            return cached
        source = await self.inner.load(name)
        self._cache[name] = source
        return source

    def invalidate(self, name: str) -> None:
        """Удаляет один шаблон из кэша."""
        self._cache.pop(name, None)

    def clear(self) -> None:
        """Очищает весь кэш."""
        self._cache.clear()

    def __contains__(self, name: str) -> bool:
        return name in self._cache


# ======= Реестр по умолчанию =======

_registry: Optional[MemoryTemplateLoader] = None


def get_template_registry() -> MemoryTemplateLoader:
    """
    Возвращает процессный реестр шаблонов, создавая его при первом обращении.

    Реестр заполняется при старте приложения и дальше только читается;
    для рендеринга его можно передать как обычный загрузчик.
    """
    global _registry
    if _registry is None:
        _registry = MemoryTemplateLoader()
    return _registry


def init_template_registry(loader: Optional[MemoryTemplateLoader] = None) -> MemoryTemplateLoader:
    """Устанавливает новый реестр по умолчанию (переданный или пустой)."""
    global _registry
    _registry = loader if loader is not None else MemoryTemplateLoader()
    return _registry


def reset_template_registry() -> None:
    """Сбрасывает реестр по умолчанию (teardown тестов, hot-reload)."""
    global _registry
    if _registry is not None:
        _registry.clear()
    _registry = None


__all__ = [
    "MemoryTemplateLoader",
    "FilesystemTemplateLoader",
    "ChainTemplateLoader",
    "CachedTemplateLoader",
    "get_template_registry",
    "init_template_registry",
    "reset_template_registry",
]
