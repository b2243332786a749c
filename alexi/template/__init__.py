"""
Шаблонизатор в стиле Django.

Лексер -> парсер -> AST -> асинхронный рендерер с наследованием
(extends/block), включениями, циклами и условиями.
"""

from __future__ import annotations

from .context import MISSING, ForLoop, TemplateContext, is_truthy, resolve_path
from .errors import TemplateError, TemplateNotFoundError, TemplateParseError, TemplateRenderError
from .loaders import (
    CachedTemplateLoader,
    ChainTemplateLoader,
    FilesystemTemplateLoader,
    MemoryTemplateLoader,
    get_template_registry,
    init_template_registry,
    reset_template_registry,
)
from .parser import TemplateParser, parse_template
from .protocols import TemplateLoader
from .renderer import TemplateRenderer, render, render_string

__all__ = [
    "MISSING",
    "ForLoop",
    "TemplateContext",
    "is_truthy",
    "resolve_path",
    "TemplateError",
    "TemplateNotFoundError",
    "TemplateParseError",
    "TemplateRenderError",
    "CachedTemplateLoader",
    "ChainTemplateLoader",
    "FilesystemTemplateLoader",
    "MemoryTemplateLoader",
    "get_template_registry",
    "init_template_registry",
    "reset_template_registry",
    "TemplateParser",
    "parse_template",
    "TemplateLoader",
    "TemplateRenderer",
    "render",
    "render_string",
]
