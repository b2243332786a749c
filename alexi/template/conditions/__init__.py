"""
Система условий для тегов {% if %} / {% elif %}.

Маленькая грамматика: отрицание, сравнения и проверка на истинность.
"""

from __future__ import annotations

from .evaluator import ConditionEvaluator, evaluate_condition_string
from .model import (
    ComparisonCondition,
    ComparisonOperator,
    Condition,
    ConditionType,
    LiteralOperand,
    NotCondition,
    Operand,
    PathOperand,
    TruthyCondition,
)
from .parser import ConditionParser

__all__ = [
    "ComparisonCondition",
    "ComparisonOperator",
    "Condition",
    "ConditionEvaluator",
    "ConditionParser",
    "ConditionType",
    "LiteralOperand",
    "NotCondition",
    "Operand",
    "PathOperand",
    "TruthyCondition",
    "evaluate_condition_string",
]
