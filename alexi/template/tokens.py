"""
Лексические типы.

Определяет типы токенов и сам токен, которые производит лексер
и потребляет парсер.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass


class TokenType(enum.Enum):
    """Типы токенов в шаблоне."""
    TEXT = "text"                  # Обычный текст / HTML
    VARIABLE = "variable"          # {{ expression }}
    BLOCK_START = "block_start"    # {% tag ... %}
    COMMENT = "comment"            # {# comment #}


@dataclass(frozen=True)
class Token:
    """
    Токен с позиционной информацией для точной диагностики ошибок.

    value — содержимое без разделителей (обрезанное по краям),
    raw — исходный текст вместе с разделителями. Для текстовых
    токенов оба поля совпадают.
    """
    type: TokenType
    value: str
    raw: str
    position: int = 0    # Позиция в исходном тексте
    line: int = 1        # Номер строки (начиная с 1)
    column: int = 1      # Номер колонки (начиная с 1)

    @property
    def tag_name(self) -> str:
        """Первое слово содержимого тега ({% for x in y %} -> 'for')."""
        parts = self.value.split(None, 1)
        return parts[0] if parts else ""

    def __repr__(self) -> str:
        return f"Token({self.type.name}, {self.value!r}, {self.line}:{self.column})"


__all__ = ["TokenType", "Token"]
