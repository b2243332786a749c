"""
Парсер условных выражений.

Грамматика намеренно минимальна и разбирается регулярными выражениями:

condition  → "not" operand
           | operand OPERATOR operand
           | operand
OPERATOR   → "==" | "!=" | ">=" | "<=" | ">" | "<"
operand    → STRING | NUMBER | "true" | "false" | "null" | "None" | PATH

Левый операнд сравнения захватывается нежадно, поэтому побеждает
первый встреченный оператор. После "not" всегда идёт одиночный
операнд: "not a == b" — это отрицание пути "a == b", а не сравнения.
"""

from __future__ import annotations

import re
from functools import lru_cache

from .model import (
    ComparisonCondition,
    ComparisonOperator,
    Condition,
    LiteralOperand,
    NotCondition,
    Operand,
    PathOperand,
    TruthyCondition,
)


class ParseError(ValueError):
    """Ошибка парсинга условного выражения."""
    pass


_NOT_RE = re.compile(r'not\s+(.+)')
_BINARY_RE = re.compile(r'(.+?)\s*(==|!=|>=|<=|>|<)\s*(.+)')
_NUMBER_RE = re.compile(r'-?\d+(\.\d+)?')

_KEYWORD_LITERALS = {
    "true": True,
    "false": False,
    "null": None,
    "None": None,
}


def parse_operand(token: str) -> Operand:
    """
    Разбирает одиночный операнд.

    Порядок проверки: строка в кавычках, число, ключевой литерал,
    иначе путь в контексте.
    """
    if len(token) >= 2 and token[0] == token[-1] and token[0] in ('"', "'"):
        return LiteralOperand(token[1:-1])

    number = _NUMBER_RE.fullmatch(token)
    if number:
        return LiteralOperand(float(token) if number.group(1) else int(token))

    if token in _KEYWORD_LITERALS:
        return LiteralOperand(_KEYWORD_LITERALS[token])

    return PathOperand(token)


@lru_cache(maxsize=512)
def _parse_cached(text: str) -> Condition:
    not_match = _NOT_RE.fullmatch(text)
    if not_match:
        return NotCondition(operand=parse_operand(not_match.group(1).strip()))

    binary_match = _BINARY_RE.fullmatch(text)
    if binary_match:
        return ComparisonCondition(
            left=parse_operand(binary_match.group(1).strip()),
            operator=ComparisonOperator(binary_match.group(2)),
            right=parse_operand(binary_match.group(3).strip()),
        )

    return TruthyCondition(operand=parse_operand(text))


class ConditionParser:
    """
    Парсер условных выражений.

    Разобранные условия кэшируются по тексту: одно и то же условие
    в цикле или в часто рендеримом шаблоне разбирается один раз.
    """

    def parse(self, condition_str: str) -> Condition:
        """
        Парсит строку условия в AST.

        Raises:
            ParseError: Если условие пустое
        """
        text = condition_str.strip()
        if not text:
            raise ParseError("Empty condition")
        return _parse_cached(text)


__all__ = ["ConditionParser", "ParseError", "parse_operand"]
