"""
Протоколы шаблонизатора.

Определяет интерфейс загрузчика шаблонов, через который рендерер
получает исходные тексты для extends и include.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class TemplateLoader(Protocol):
    """
    Протокол загрузчика шаблонов.

    Единственный асинхронный метод превращает имя шаблона в исходный текст.
    Загрузчики можно объединять в цепочки (ChainTemplateLoader).
    """

    async def load(self, name: str) -> str:
        """
        Загружает исходный текст шаблона.

        Args:
            name: Имя шаблона, например "notes/note_list.html"

        Raises:
            TemplateNotFoundError: Если шаблон не найден
        """
        ...


__all__ = ["TemplateLoader"]
