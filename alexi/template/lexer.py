"""
Лексический анализатор шаблонов.

Токенизирует исходный текст шаблона в плоскую последовательность токенов
для последующего синтаксического анализа:
- {{ expr }}  -> VARIABLE
- {% tag %}   -> BLOCK_START
- {# text #}  -> COMMENT
- всё прочее  -> TEXT

Лексер никогда не выбрасывает ошибок: незакрытые разделители
остаются обычным текстом.
"""

from __future__ import annotations

import re
from typing import List

from .tokens import Token, TokenType


class TemplateLexer:
    """
    Лексический анализатор шаблонов.

    Один проход регулярным выражением слева направо. Внутреннее
    совпадение нежадное, поэтому побеждает первый закрывающий
    разделитель: вложенные конструкции одного вида не поддерживаются
    ({{ "}}" }} обрывается на первом }}).
    """

    # Порядок альтернатив задаёт приоритет: {{ }}, затем {% %}, затем {# #}
    _PATTERN = re.compile(r'(\{\{[\s\S]*?\}\}|\{%[\s\S]*?%\}|\{#[\s\S]*?#\})')

    _DELIMITED_TYPES = {
        "{{": TokenType.VARIABLE,
        "{%": TokenType.BLOCK_START,
        "{#": TokenType.COMMENT,
    }

    def __init__(self, text: str):
        self.text = text
        # Позиция, до которой подсчитаны строки/колонки
        self._counted = 0
        self._line = 1
        self._column = 1

    def tokenize(self) -> List[Token]:
        """
        Токенизирует весь исходный текст и возвращает список токенов.

        Пустые текстовые промежутки между конструкциями отбрасываются.
        """
        tokens: List[Token] = []
        last_index = 0

        for match in self._PATTERN.finditer(self.text):
            start = match.start()
            if start > last_index:
                tokens.append(self._text_token(last_index, start))

            raw = match.group(0)
            line, column = self._locate(start)
            tokens.append(Token(
                type=self._DELIMITED_TYPES[raw[:2]],
                value=raw[2:-2].strip(),
                raw=raw,
                position=start,
                line=line,
                column=column,
            ))
            last_index = match.end()

        if last_index < len(self.text):
            tokens.append(self._text_token(last_index, len(self.text)))

        return tokens

    def _text_token(self, start: int, end: int) -> Token:
        """Создаёт текстовый токен для промежутка [start, end)."""
        value = self.text[start:end]
        line, column = self._locate(start)
        return Token(TokenType.TEXT, value, value, start, line, column)

    def _locate(self, position: int) -> tuple[int, int]:
        """
        Возвращает (строка, колонка) для позиции.

        Позиции запрашиваются монотонно, поэтому счёт ведётся
        инкрементально от последней вычисленной позиции.
        """
        chunk = self.text[self._counted:position]
        newlines = chunk.count("\n")
        if newlines:
            self._line += newlines
            self._column = len(chunk) - chunk.rfind("\n")
        else:
            self._column += len(chunk)
        self._counted = position
        return self._line, self._column


def tokenize_template(text: str) -> List[Token]:
    """
    Удобная функция для токенизации шаблона.

    Args:
        text: Исходный текст шаблона

    Returns:
        Список токенов в порядке следования в исходном тексте
    """
    lexer = TemplateLexer(text)
    return lexer.tokenize()


__all__ = ["TemplateLexer", "tokenize_template"]
