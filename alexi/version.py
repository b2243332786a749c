from __future__ import annotations

from importlib import metadata

DIST_NAME = "alexi-core"


def tool_version() -> str:
    """Версия установленного дистрибутива alexi-core (0.0.0 для неустановленного дерева)."""
    try:
        return metadata.version(DIST_NAME)
    except metadata.PackageNotFoundError:
        return "0.0.0"


__all__ = ["DIST_NAME", "tool_version"]
