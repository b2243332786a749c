"""
Маршрутизация URL в стиле Django: path/include, resolve/reverse.
"""

from __future__ import annotations

from .errors import MissingRouteParameter, NoReverseMatch, UrlConfigurationError
from .path import include, path, path_include
from .redirect import RedirectResponse, is_redirect_response, redirect
from .resolver import clear_registry_cache, iter_named_routes, resolve, reverse
from .types import CompiledPattern, CompiledSegment, ResolveResult, URLPattern, View

__all__ = [
    "MissingRouteParameter",
    "NoReverseMatch",
    "UrlConfigurationError",
    "include",
    "path",
    "path_include",
    "RedirectResponse",
    "is_redirect_response",
    "redirect",
    "clear_registry_cache",
    "iter_named_routes",
    "resolve",
    "reverse",
    "CompiledPattern",
    "CompiledSegment",
    "ResolveResult",
    "URLPattern",
    "View",
]
