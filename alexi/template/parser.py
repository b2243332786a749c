"""
Парсер шаблонов.

Преобразует последовательность токенов в AST (абстрактное синтаксическое дерево)
с поддержкой наследования (extends/block), циклов, условий и включений.
"""

from __future__ import annotations

import logging
import re
from typing import FrozenSet, List, Optional, Tuple

from .errors import TemplateParseError
from .lexer import tokenize_template
from .nodes import (
    TemplateNode, TemplateAST, TextNode, VariableNode, BlockNode, ForNode,
    IfBranch, IfNode, ExtendsNode, IncludeNode, CommentNode,
)
from .tokens import Token, TokenType

logger = logging.getLogger(__name__)


# Минимальные грамматики тегов (регулярные выражения, без полноценных выражений)
_EXTENDS_RE = re.compile(r'extends\s+["\'](.+?)["\']', re.ASCII)
_BLOCK_RE = re.compile(r'block\s+(\w+)', re.ASCII)
_FOR_RE = re.compile(r'for\s+(\w+)\s+in\s+(\S+)', re.ASCII)
_INCLUDE_RE = re.compile(r'include\s+["\'](.+?)["\']', re.ASCII)

# Закрывающие теги, встреченные без открывающего
_ORPHAN_CLOSERS = frozenset({"endblock", "endfor", "endif"})

_STOP_ENDBLOCK = frozenset({"endblock"})
_STOP_FOR_BODY = frozenset({"endfor", "empty"})
_STOP_ENDFOR = frozenset({"endfor"})
_STOP_IF_BRANCH = frozenset({"elif", "else", "endif"})
_STOP_ENDIF = frozenset({"endif"})


class TemplateParser:
    """
    Рекурсивный парсер для шаблонов.

    Работает по явному курсору над неизменяемым списком токенов.
    Каждый вызов _parse_body получает собственный набор стоп-тегов:
    стоп-тег только просматривается, но не потребляется — его
    потребляет тот, кто открыл блок. Так цепочки elif/else и
    необязательный {% empty %} распознаются без отката.
    """

    def __init__(self, tokens: List[Token]):
        self.tokens: Tuple[Token, ...] = tuple(tokens)
        self.position = 0

    def parse(self) -> TemplateAST:
        """
        Парсит всю последовательность токенов в AST.

        Returns:
            Список корневых узлов AST

        Raises:
            TemplateParseError: При ошибке синтаксического анализа
        """
        self.position = 0
        return self._parse_body(None)

    # ======= Навигация по токенам =======

    def _current_token(self) -> Optional[Token]:
        """Возвращает текущий токен или None в конце потока."""
        if self.position >= len(self.tokens):
            return None
        return self.tokens[self.position]

    def _advance(self) -> Token:
        """Продвигается к следующему токену и возвращает предыдущий."""
        token = self.tokens[self.position]
        self.position += 1
        return token

    def _is_at_end(self) -> bool:
        return self.position >= len(self.tokens)

    def _check_tag(self, tag_name: str) -> bool:
        """Проверяет, является ли текущий токен тегом с указанным именем."""
        token = self._current_token()
        return (
            token is not None
            and token.type == TokenType.BLOCK_START
            and token.tag_name == tag_name
        )

    def _consume_tag(self, tag_name: str, opener: Token) -> Token:
        """
        Потребляет закрывающий тег.

        Raises:
            TemplateParseError: Если поток закончился или тег другой
        """
        token = self._current_token()
        if token is None:
            raise TemplateParseError(
                f"Unexpected end of template, expected {{% {tag_name} %}} "
                f"to close {opener.raw}",
                opener,
            )
        if not self._check_tag(tag_name):
            raise TemplateParseError(
                f"Expected {{% {tag_name} %}} but got {token.raw}", token
            )
        return self._advance()

    # ======= Разбор тела =======

    def _parse_body(self, stop_tags: Optional[FrozenSet[str]]) -> List[TemplateNode]:
        """
        Разбирает узлы до первого стоп-тега (не потребляя его) или конца потока.
        """
        nodes: List[TemplateNode] = []

        while not self._is_at_end():
            token = self._current_token()
            assert token is not None

            if token.type == TokenType.TEXT:
                self._advance()
                nodes.append(TextNode(content=token.value))
            elif token.type == TokenType.COMMENT:
                self._advance()
                nodes.append(CommentNode())
            elif token.type == TokenType.VARIABLE:
                self._advance()
                nodes.append(VariableNode(path=token.value))
            else:
                tag_name = token.tag_name
                if stop_tags is not None and tag_name in stop_tags:
                    return nodes
                self._advance()
                nodes.append(self._parse_tag(token, tag_name))

        return nodes

    def _parse_tag(self, token: Token, tag_name: str) -> TemplateNode:
        """Разбирает тег {% ... %} по его имени."""
        if tag_name == "extends":
            return self._parse_extends(token)
        elif tag_name == "block":
            return self._parse_block(token)
        elif tag_name == "for":
            return self._parse_for(token)
        elif tag_name == "if":
            return self._parse_if(token)
        elif tag_name == "include":
            return self._parse_include(token)
        elif tag_name in _ORPHAN_CLOSERS:
            raise TemplateParseError(
                f'Unexpected tag "{tag_name}" with no matching opening tag', token
            )
        # Неизвестные теги выводятся как есть, чтобы не исчезать молча
        return TextNode(content=token.raw)

    # ======= Теги =======

    def _parse_extends(self, token: Token) -> ExtendsNode:
        """{% extends "base.html" %} или {% extends 'base.html' %}"""
        match = _EXTENDS_RE.fullmatch(token.value)
        if not match:
            raise TemplateParseError(f"Invalid extends tag: {token.raw}", token)
        return ExtendsNode(template_name=match.group(1))

    def _parse_block(self, token: Token) -> BlockNode:
        """{% block name %}...{% endblock %}"""
        match = _BLOCK_RE.fullmatch(token.value)
        if not match:
            raise TemplateParseError(f"Invalid block tag: {token.raw}", token)

        body = self._parse_body(_STOP_ENDBLOCK)
        self._consume_tag("endblock", token)
        return BlockNode(name=match.group(1), body=tuple(body))

    def _parse_for(self, token: Token) -> ForNode:
        """{% for item in items %}...[{% empty %}...]{% endfor %}"""
        match = _FOR_RE.fullmatch(token.value)
        if not match:
            raise TemplateParseError(f"Invalid for tag: {token.raw}", token)

        body = self._parse_body(_STOP_FOR_BODY)

        empty_body: List[TemplateNode] = []
        if self._check_tag("empty"):
            self._advance()
            empty_body = self._parse_body(_STOP_ENDFOR)

        self._consume_tag("endfor", token)
        return ForNode(
            variable=match.group(1),
            iterable=match.group(2),
            body=tuple(body),
            empty_body=tuple(empty_body),
        )

    def _parse_if(self, token: Token) -> IfNode:
        """
        {% if cond %}...{% elif cond %}...{% else %}...{% endif %}

        Условие остаётся строкой: его разбирает и вычисляет рендерер.
        """
        condition = self._tag_argument(token)
        if not condition:
            raise TemplateParseError(f"Empty if condition: {token.raw}", token)

        branches: List[IfBranch] = [
            IfBranch(condition=condition, body=tuple(self._parse_body(_STOP_IF_BRANCH)))
        ]

        while True:
            current = self._current_token()
            if current is None:
                raise TemplateParseError(
                    f"Unexpected end of template, expected {{% endif %}} to close {token.raw}",
                    token,
                )

            tag_name = current.tag_name
            self._advance()

            if tag_name == "endif":
                break
            elif tag_name == "elif":
                elif_condition = self._tag_argument(current)
                if not elif_condition:
                    raise TemplateParseError(f"Empty elif condition: {current.raw}", current)
                body = self._parse_body(_STOP_IF_BRANCH)
                branches.append(IfBranch(condition=elif_condition, body=tuple(body)))
            else:
                # else: тело до endif, сам endif потребляется на следующей итерации
                body = self._parse_body(_STOP_ENDIF)
                branches.append(IfBranch(condition=None, body=tuple(body)))

        return IfNode(branches=tuple(branches))

    def _parse_include(self, token: Token) -> IncludeNode:
        """{% include "partial.html" %} или {% include 'partial.html' %}"""
        match = _INCLUDE_RE.fullmatch(token.value)
        if not match:
            raise TemplateParseError(f"Invalid include tag: {token.raw}", token)
        return IncludeNode(template_name=match.group(1))

    @staticmethod
    def _tag_argument(token: Token) -> str:
        """Всё содержимое тега после имени ({% if a == b %} -> 'a == b')."""
        parts = token.value.split(None, 1)
        return parts[1].strip() if len(parts) > 1 else ""


def parse_template(text: str) -> TemplateAST:
    """
    Удобная функция: токенизирует и парсит исходный текст шаблона.

    Raises:
        TemplateParseError: При ошибке синтаксического анализа
    """
    tokens = tokenize_template(text)
    ast = TemplateParser(tokens).parse()
    logger.debug("Parsed template: %d tokens -> %d nodes", len(tokens), len(ast))
    return ast


__all__ = ["TemplateParser", "parse_template"]
