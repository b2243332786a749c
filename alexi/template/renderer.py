"""
Рендерер шаблонов.

Обходит AST в контексте шаблона: разрешает цепочки наследования
(extends/block), включения, циклы и условия.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

from .conditions.evaluator import ConditionEvaluator
from .conditions.parser import ConditionParser
from .context import MISSING, ForLoop, TemplateContext, is_iterable_value, resolve_path
from .errors import TemplateRenderError
from .nodes import (
    TemplateNode, TextNode, VariableNode, BlockNode, ForNode, IfNode,
    ExtendsNode, IncludeNode, CommentNode,
)
from .parser import parse_template
from .protocols import TemplateLoader

logger = logging.getLogger(__name__)

# Карта переопределений блоков: имя -> самое глубокое определение в цепочке
BlockMap = Dict[str, BlockNode]

ContextLike = Union[TemplateContext, Mapping[str, Any], None]

DEFAULT_MAX_DEPTH = 50


def format_value(value: Any) -> str:
    """
    Приводит значение переменной к строке для вывода.

    MISSING и None выводятся пустой строкой, булевы — как true/false,
    целочисленные float — без дробной части.
    """
    if value is None or value is MISSING:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _first_significant(nodes: Sequence[TemplateNode]) -> Optional[TemplateNode]:
    """Первый узел, не являющийся пробельным текстом."""
    for node in nodes:
        if isinstance(node, TextNode) and not node.content.strip():
            continue
        return node
    return None


class TemplateRenderer:
    """
    Рендерер шаблонов.

    Загрузчик передаётся явно: никакого глобального состояния
    рендерер не использует. Каждый вызов render независим,
    общим может быть только загрузчик.
    """

    def __init__(self, loader: TemplateLoader, max_depth: int = DEFAULT_MAX_DEPTH):
        """
        Args:
            loader: Загрузчик для корневого шаблона, extends и include
            max_depth: Максимальная глубина вложенности extends/include
        """
        self.loader = loader
        self.max_depth = max_depth
        self.condition_parser = ConditionParser()

    async def render(self, template_name: str, context: ContextLike = None) -> str:
        """
        Загружает и рендерит шаблон по имени.

        Raises:
            TemplateNotFoundError: Если загрузчик не нашёл шаблон
            TemplateParseError: При синтаксической ошибке в любом шаблоне цепочки
            TemplateRenderError: При неверном размещении extends или слишком глубокой вложенности
        """
        logger.debug("Rendering template %r", template_name)
        source = await self.loader.load(template_name)
        return await self.render_string(source, context, template_name=template_name)

    async def render_string(
        self,
        source: str,
        context: ContextLike = None,
        template_name: str = "<string>",
    ) -> str:
        """Рендерит шаблон из исходного текста."""
        nodes = parse_template(source)
        return await self._render_template(nodes, TemplateContext.wrap(context), {}, 0, template_name)

    # ======= Внутренние методы =======

    async def _render_template(
        self,
        nodes: Sequence[TemplateNode],
        ctx: TemplateContext,
        blocks: BlockMap,
        depth: int,
        template_name: str,
    ) -> str:
        """Рендерит загруженный шаблон целиком: extends распознаётся только здесь."""
        first = _first_significant(nodes)
        if isinstance(first, ExtendsNode):
            return await self._render_extends(first, nodes, ctx, blocks, depth, template_name)
        return await self._render_nodes(nodes, ctx, blocks, depth, template_name)

    async def _render_nodes(
        self,
        nodes: Sequence[TemplateNode],
        ctx: TemplateContext,
        blocks: BlockMap,
        depth: int,
        template_name: str,
    ) -> str:
        parts: List[str] = []
        for node in nodes:
            parts.append(await self._render_node(node, ctx, blocks, depth, template_name))
        return "".join(parts)

    async def _render_node(
        self,
        node: TemplateNode,
        ctx: TemplateContext,
        blocks: BlockMap,
        depth: int,
        template_name: str,
    ) -> str:
        if isinstance(node, TextNode):
            return node.content
        elif isinstance(node, CommentNode):
            return ""
        elif isinstance(node, VariableNode):
            return format_value(resolve_path(node.path, ctx))
        elif isinstance(node, BlockNode):
            override = blocks.get(node.name)
            body = override.body if override is not None else node.body
            return await self._render_nodes(body, ctx, blocks, depth, template_name)
        elif isinstance(node, ForNode):
            return await self._render_for(node, ctx, blocks, depth, template_name)
        elif isinstance(node, IfNode):
            return await self._render_if(node, ctx, blocks, depth, template_name)
        elif isinstance(node, IncludeNode):
            return await self._render_include(node, ctx, blocks, depth, template_name)
        elif isinstance(node, ExtendsNode):
            raise TemplateRenderError(
                "{% extends %} must be the first tag in a template", template_name
            )
        return ""

    def _check_depth(self, depth: int, target: str, template_name: str) -> None:
        if depth > self.max_depth:
            raise TemplateRenderError(
                f"Template nesting deeper than {self.max_depth} levels "
                f"while loading {target!r} (recursive extends/include?)",
                template_name,
            )

    async def _render_extends(
        self,
        extends_node: ExtendsNode,
        child_nodes: Sequence[TemplateNode],
        ctx: TemplateContext,
        inherited_blocks: BlockMap,
        depth: int,
        template_name: str,
    ) -> str:
        """
        Рендерит родительский шаблон с переопределениями блоков потомка.

        Блоки верхнего уровня потомка добавляются в карту, только если
        имя ещё не занято: определение самого глубокого потомка,
        попавшее в карту первым, побеждает на любой глубине цепочки.
        """
        child_blocks: BlockMap = dict(inherited_blocks)
        for node in child_nodes:
            if isinstance(node, BlockNode) and node.name not in child_blocks:
                child_blocks[node.name] = node

        parent_name = extends_node.template_name
        self._check_depth(depth + 1, parent_name, template_name)
        logger.debug("Template %r extends %r", template_name, parent_name)

        parent_source = await self.loader.load(parent_name)
        parent_nodes = parse_template(parent_source)
        return await self._render_template(parent_nodes, ctx, child_blocks, depth + 1, parent_name)

    async def _render_for(
        self,
        node: ForNode,
        ctx: TemplateContext,
        blocks: BlockMap,
        depth: int,
        template_name: str,
    ) -> str:
        iterable = resolve_path(node.iterable, ctx)
        if not is_iterable_value(iterable) or len(iterable) == 0:
            if node.empty_body:
                return await self._render_nodes(node.empty_body, ctx, blocks, depth, template_name)
            return ""

        items = list(iterable)
        length = len(items)
        parts: List[str] = []
        for index, item in enumerate(items):
            loop_ctx = ctx.push(**{
                node.variable: item,
                "forloop": ForLoop.at(index, length),
            })
            parts.append(await self._render_nodes(node.body, loop_ctx, blocks, depth, template_name))
        return "".join(parts)

    async def _render_if(
        self,
        node: IfNode,
        ctx: TemplateContext,
        blocks: BlockMap,
        depth: int,
        template_name: str,
    ) -> str:
        evaluator = ConditionEvaluator(ctx)
        for branch in node.branches:
            if branch.condition is None or evaluator.evaluate(self.condition_parser.parse(branch.condition)):
                return await self._render_nodes(branch.body, ctx, blocks, depth, template_name)
        return ""

    async def _render_include(
        self,
        node: IncludeNode,
        ctx: TemplateContext,
        blocks: BlockMap,
        depth: int,
        template_name: str,
    ) -> str:
        """Загружает и парсит включаемый шаблон заново при каждом рендеринге."""
        self._check_depth(depth + 1, node.template_name, template_name)
        logger.debug("Template %r includes %r", template_name, node.template_name)

        source = await self.loader.load(node.template_name)
        nodes = parse_template(source)
        return await self._render_template(nodes, ctx, blocks, depth + 1, node.template_name)


async def render(
    template_name: str,
    context: ContextLike,
    loader: TemplateLoader,
    *,
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> str:
    """
    Удобная функция: рендерит шаблон по имени указанным загрузчиком.

    Ошибки парсинга и загрузки распространяются к вызывающему коду.
    """
    return await TemplateRenderer(loader, max_depth=max_depth).render(template_name, context)


async def render_string(
    source: str,
    context: ContextLike,
    loader: TemplateLoader,
    *,
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> str:
    """Удобная функция: рендерит шаблон из исходного текста."""
    return await TemplateRenderer(loader, max_depth=max_depth).render_string(source, context)


__all__ = ["TemplateRenderer", "render", "render_string", "format_value", "DEFAULT_MAX_DEPTH"]
