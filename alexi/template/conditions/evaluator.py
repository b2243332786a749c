"""
Вычислитель условных выражений.

Проходит по AST условия и вычисляет его значение в контексте шаблона.
"""

from __future__ import annotations

import math
from typing import Any, Mapping, Optional, cast

from .model import (
    ComparisonCondition,
    ComparisonOperator,
    Condition,
    ConditionType,
    LiteralOperand,
    NotCondition,
    Operand,
    TruthyCondition,
)
from .parser import ConditionParser
from ..context import MISSING, is_truthy, resolve_path


class EvaluationError(Exception):
    """Ошибка при вычислении условного выражения."""
    pass


def _as_number(value: Any) -> Optional[float]:
    """Приводит значение к числу: числа, булевы и числовые строки. Иначе None."""
    if isinstance(value, bool):
        return float(value)
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            number = float(text)
        except ValueError:
            return None
        return None if math.isnan(number) else number
    return None


def loose_equals(left: Any, right: Any) -> bool:
    """
    Нестрогое равенство.

    - None и MISSING равны друг другу и ничему больше;
    - если хотя бы одна сторона число (или булево), вторая приводится к числу;
    - иначе обычное сравнение ==.
    """
    if left is MISSING:
        left = None
    if right is MISSING:
        right = None

    if left is None or right is None:
        return left is None and right is None

    if isinstance(left, (int, float)) or isinstance(right, (int, float)):
        left_num, right_num = _as_number(left), _as_number(right)
        if left_num is not None and right_num is not None:
            return left_num == right_num

    return bool(left == right)


def _compare_ordered(left: Any, right: Any, operator: ComparisonOperator) -> bool:
    """
    Упорядочивающее сравнение.

    Две строки сравниваются лексикографически, во всех остальных
    случаях операнды приводятся к числам. Если привести не удалось,
    результат ложен.
    """
    if isinstance(left, str) and isinstance(right, str):
        a: Any = left
        b: Any = right
    else:
        a, b = _as_number(left), _as_number(right)
        if a is None or b is None:
            return False

    if operator == ComparisonOperator.GT:
        return a > b
    elif operator == ComparisonOperator.GE:
        return a >= b
    elif operator == ComparisonOperator.LT:
        return a < b
    elif operator == ComparisonOperator.LE:
        return a <= b
    raise EvaluationError(f"Not an ordering operator: {operator.value}")


class ConditionEvaluator:
    """
    Вычислитель условных выражений.

    Принимает AST условия и контекст шаблона, возвращает булево значение.
    Отсутствующие пути в контексте не являются ошибкой: они просто ложны.
    """

    def __init__(self, context: Mapping[str, Any]):
        """
        Инициализирует вычислитель с контекстом.

        Args:
            context: Контекст шаблона (любое отображение)
        """
        self.context = context

    def evaluate(self, condition: Condition) -> bool:
        """
        Вычисляет значение условия.

        Raises:
            EvaluationError: При неизвестном типе условия
        """
        condition_type = condition.get_type()

        if condition_type == ConditionType.TRUTHY:
            return is_truthy(self.resolve(cast(TruthyCondition, condition).operand))
        elif condition_type == ConditionType.NOT:
            return not is_truthy(self.resolve(cast(NotCondition, condition).operand))
        elif condition_type == ConditionType.COMPARISON:
            return self._evaluate_comparison(cast(ComparisonCondition, condition))
        else:
            raise EvaluationError(f"Unknown condition type: {condition_type}")

    def resolve(self, operand: Operand) -> Any:
        """Возвращает значение операнда: литерал или значение пути в контексте."""
        if isinstance(operand, LiteralOperand):
            return operand.value
        return resolve_path(operand.path, self.context)

    def _evaluate_comparison(self, condition: ComparisonCondition) -> bool:
        left = self.resolve(condition.left)
        right = self.resolve(condition.right)

        if condition.operator == ComparisonOperator.EQ:
            return loose_equals(left, right)
        elif condition.operator == ComparisonOperator.NE:
            return not loose_equals(left, right)
        return _compare_ordered(left, right, condition.operator)


def evaluate_condition_string(condition_str: str, context: Mapping[str, Any]) -> bool:
    """
    Удобная функция для вычисления условия из строки.

    Raises:
        ParseError: Если условие пустое
    """
    parser = ConditionParser()
    ast = parser.parse(condition_str)

    evaluator = ConditionEvaluator(context)
    return evaluator.evaluate(ast)


__all__ = ["ConditionEvaluator", "EvaluationError", "evaluate_condition_string", "loose_equals"]
