from __future__ import annotations

from .load import ConfigLoadError, build_template_loader, load_settings, load_urlpatterns
from .model import Settings, TemplatesSettings, UrlsSettings
from .paths import CONFIG_FILE, config_path

__all__ = [
    "ConfigLoadError",
    "build_template_loader",
    "load_settings",
    "load_urlpatterns",
    "Settings",
    "TemplatesSettings",
    "UrlsSettings",
    "CONFIG_FILE",
    "config_path",
]
