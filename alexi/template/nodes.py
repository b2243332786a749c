"""
AST-узлы шаблона.

Неизменяемые классы узлов, которые строит парсер и обходит рендерер.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Tuple


@dataclass(frozen=True)
class TemplateNode:
    """Базовый класс для всех узлов AST шаблона."""
    pass


@dataclass(frozen=True)
class TextNode(TemplateNode):
    """
    Обычный текстовый контент в шаблоне.

    Выводится в результат как есть. Сюда же попадают
    неизвестные теги (в исходном виде, вместе с разделителями).
    """
    content: str


@dataclass(frozen=True)
class VariableNode(TemplateNode):
    """{{ path }} — точечный путь в контексте, например user.profile.name."""
    path: str


@dataclass(frozen=True)
class BlockNode(TemplateNode):
    """{% block name %}...{% endblock %} — переопределяемая секция."""
    name: str
    body: Tuple[TemplateNode, ...] = ()


@dataclass(frozen=True)
class ForNode(TemplateNode):
    """
    {% for item in items %}...{% empty %}...{% endfor %}

    empty_body рендерится, когда итерируемое значение пусто
    или не является последовательностью.
    """
    variable: str
    iterable: str
    body: Tuple[TemplateNode, ...] = ()
    empty_body: Tuple[TemplateNode, ...] = ()


@dataclass(frozen=True)
class IfBranch:
    """Ветка условного блока. condition=None означает ветку else."""
    condition: Optional[str]
    body: Tuple[TemplateNode, ...] = ()

    @property
    def is_else(self) -> bool:
        return self.condition is None


@dataclass(frozen=True)
class IfNode(TemplateNode):
    """{% if %}...{% elif %}...{% else %}...{% endif %}"""
    branches: Tuple[IfBranch, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class ExtendsNode(TemplateNode):
    """{% extends "base.html" %} — должен быть первым значимым узлом."""
    template_name: str


@dataclass(frozen=True)
class IncludeNode(TemplateNode):
    """{% include "partial.html" %}"""
    template_name: str


@dataclass(frozen=True)
class CommentNode(TemplateNode):
    """{# comment #} — ничего не выводит."""
    pass


# Алиас для списка узлов (AST)
TemplateAST = List[TemplateNode]


__all__ = [
    "TemplateNode",
    "TextNode",
    "VariableNode",
    "BlockNode",
    "ForNode",
    "IfBranch",
    "IfNode",
    "ExtendsNode",
    "IncludeNode",
    "CommentNode",
    "TemplateAST",
]
