from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional

from ..template.renderer import DEFAULT_MAX_DEPTH


def _assert_only_keys(d: Dict[str, Any] | None, allowed: Iterable[str], *, ctx: str) -> None:
    if d is None:
        return
    extra = set(d.keys()) - set(allowed)
    if extra:
        raise ValueError(f"{ctx}: unknown key(s): {', '.join(sorted(extra))}")


def _as_mapping(value: Any, *, ctx: str) -> Dict[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise TypeError(f"{ctx} must be a mapping")
    return value


@dataclass
class TemplatesSettings:
    # Директории шаблонов в порядке поиска (относительно корня проекта)
    dirs: List[str] = field(default_factory=lambda: ["templates"])
    # Кэшировать исходные тексты шаблонов (выключать для hot-reload)
    cache: bool = True
    max_depth: int = DEFAULT_MAX_DEPTH

    @staticmethod
    def from_dict(d: Optional[Dict[str, Any]]) -> TemplatesSettings:
        d = _as_mapping(d, ctx="templates")
        _assert_only_keys(d, ["dirs", "cache", "max_depth"], ctx="templates")

        dirs = d.get("dirs", ["templates"])
        if isinstance(dirs, str):
            dirs = [dirs]
        if not isinstance(dirs, list) or not all(isinstance(x, str) for x in dirs):
            raise TypeError("templates.dirs must be a string or a list of strings")

        cache = d.get("cache", True)
        if not isinstance(cache, bool):
            raise TypeError("templates.cache must be a boolean")

        max_depth = d.get("max_depth", DEFAULT_MAX_DEPTH)
        if isinstance(max_depth, bool) or not isinstance(max_depth, int) or max_depth < 1:
            raise ValueError(f"templates.max_depth must be a positive integer, got: {max_depth!r}")

        return TemplatesSettings(dirs=list(dirs), cache=cache, max_depth=max_depth)


@dataclass
class UrlsSettings:
    # Модуль с атрибутом urlpatterns, например "myapp.urls"
    module: Optional[str] = None

    @staticmethod
    def from_dict(d: Optional[Dict[str, Any]]) -> UrlsSettings:
        d = _as_mapping(d, ctx="urls")
        _assert_only_keys(d, ["module"], ctx="urls")
        module = d.get("module")
        if module is not None and (not isinstance(module, str) or not module):
            raise ValueError("urls.module must be a non-empty dotted module name")
        return UrlsSettings(module=module)


@dataclass
class Settings:
    templates: TemplatesSettings = field(default_factory=TemplatesSettings)
    urls: UrlsSettings = field(default_factory=UrlsSettings)
    debug: bool = False

    @staticmethod
    def from_dict(d: Optional[Dict[str, Any]]) -> Settings:
        d = _as_mapping(d, ctx="settings")
        _assert_only_keys(d, ["templates", "urls", "debug"], ctx="settings")
        debug = d.get("debug", False)
        if not isinstance(debug, bool):
            raise TypeError("debug must be a boolean")
        return Settings(
            templates=TemplatesSettings.from_dict(d.get("templates")),
            urls=UrlsSettings.from_dict(d.get("urls")),
            debug=debug,
        )


__all__ = ["Settings", "TemplatesSettings", "UrlsSettings"]
