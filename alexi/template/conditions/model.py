"""
Модели данных для системы условий.

Содержит классы для представления условий тегов {% if %} и их операндов.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Union


class ConditionType(Enum):
    """Типы условий в системе."""
    TRUTHY = "truthy"
    NOT = "not"
    COMPARISON = "comparison"


class ComparisonOperator(Enum):
    """Бинарные операторы сравнения."""
    EQ = "=="
    NE = "!="
    GT = ">"
    GE = ">="
    LT = "<"
    LE = "<="


LiteralValue = Union[str, int, float, bool, None]


@dataclass(frozen=True)
class LiteralOperand:
    """Литерал: строка в кавычках, число, true/false/null/None."""
    value: LiteralValue

    def __str__(self) -> str:
        if isinstance(self.value, str):
            return f'"{self.value}"'
        if self.value is None:
            return "null"
        if isinstance(self.value, bool):
            return "true" if self.value else "false"
        return str(self.value)


@dataclass(frozen=True)
class PathOperand:
    """Точечный путь в контексте шаблона."""
    path: str

    def __str__(self) -> str:
        return self.path


Operand = Union[LiteralOperand, PathOperand]


@dataclass(frozen=True)
class Condition(ABC):
    """Базовый абстрактный класс для всех условий."""

    @abstractmethod
    def get_type(self) -> ConditionType:
        """Возвращает тип условия."""
        pass

    def __str__(self) -> str:
        """Строковое представление условия."""
        return self._to_string()

    @abstractmethod
    def _to_string(self) -> str:
        """Внутренний метод для создания строкового представления."""
        pass


@dataclass(frozen=True)
class TruthyCondition(Condition):
    """
    Проверка на истинность: {% if items %}

    Истинно по правилам Django (пустые коллекции, 0, "" и None ложны).
    """
    operand: Operand

    def get_type(self) -> ConditionType:
        return ConditionType.TRUTHY

    def _to_string(self) -> str:
        return str(self.operand)


@dataclass(frozen=True)
class NotCondition(Condition):
    """
    Отрицание: {% if not user %}

    Операнд — одиночное значение, а не вложенное условие.
    """
    operand: Operand

    def get_type(self) -> ConditionType:
        return ConditionType.NOT

    def _to_string(self) -> str:
        return f"not {self.operand}"


@dataclass(frozen=True)
class ComparisonCondition(Condition):
    """Сравнение: {% if status == "open" %}"""
    left: Operand
    operator: ComparisonOperator
    right: Operand

    def get_type(self) -> ConditionType:
        return ConditionType.COMPARISON

    def _to_string(self) -> str:
        return f"{self.left} {self.operator.value} {self.right}"
