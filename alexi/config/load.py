"""
Загрузка настроек проекта из alexi.yaml и сборка объектов по ним.
"""

from __future__ import annotations

import importlib
import logging
import sys
from pathlib import Path
from typing import List, Sequence

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from ..errors import AlexiUserError
from ..template.loaders import CachedTemplateLoader, FilesystemTemplateLoader
from ..template.protocols import TemplateLoader
from ..urls.types import URLPattern
from .model import Settings
from .paths import config_path, resolve_dir

logger = logging.getLogger(__name__)

_yaml = YAML(typ="safe")


class ConfigLoadError(AlexiUserError):
    """Settings file is unreadable or invalid."""
    pass


def _read_yaml_map(path: Path) -> dict:
    """Читает YAML файл и возвращает словарь."""
    if not path.is_file():
        return {}
    try:
        raw = _yaml.load(path.read_text(encoding="utf-8")) or {}
    except YAMLError as e:
        raise ConfigLoadError(f"Invalid YAML in {path}: {e}") from e
    if not isinstance(raw, dict):
        raise ConfigLoadError(f"YAML must be a mapping: {path}")
    return raw


def load_settings(root: Path) -> Settings:
    """
    Загружает настройки проекта.

    Отсутствующий alexi.yaml означает настройки по умолчанию.

    Raises:
        ConfigLoadError: Файл не является YAML-отображением или содержит неверные значения
    """
    path = config_path(root)
    raw = _read_yaml_map(path)
    try:
        settings = Settings.from_dict(raw)
    except (TypeError, ValueError) as e:
        raise ConfigLoadError(f"{path}: {e}") from e
    logger.debug("Loaded settings from %s (exists=%s)", path, path.is_file())
    return settings


def build_template_loader(settings: Settings, root: Path) -> TemplateLoader:
    """Файловый загрузчик по templates.dirs, при templates.cache — с кэшем."""
    fs = FilesystemTemplateLoader(resolve_dir(root, d) for d in settings.templates.dirs)
    if settings.templates.cache:
        return CachedTemplateLoader(fs)
    return fs


def load_urlpatterns(settings: Settings, root: Path) -> List[URLPattern]:
    """
    Импортирует urls.module и возвращает его urlpatterns.

    Корень проекта добавляется в sys.path, чтобы модуль проекта был импортируем.
    """
    module_name = settings.urls.module
    if not module_name:
        raise ConfigLoadError("urls.module is not configured in alexi.yaml")

    root_str = str(root.resolve())
    if root_str not in sys.path:
        sys.path.insert(0, root_str)

    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise ConfigLoadError(f"Cannot import URL module {module_name!r}: {e}") from e

    patterns = getattr(module, "urlpatterns", None)
    if not isinstance(patterns, Sequence) or not all(isinstance(p, URLPattern) for p in patterns):
        raise ConfigLoadError(f"{module_name}.urlpatterns must be a list of URL patterns")
    return list(patterns)


__all__ = ["ConfigLoadError", "load_settings", "build_template_loader", "load_urlpatterns"]
