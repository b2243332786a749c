from __future__ import annotations

from pathlib import Path

# Single source of truth for the settings file location.
CONFIG_FILE = "alexi.yaml"


def config_path(root: Path) -> Path:
    """Path to the settings file <root>/alexi.yaml."""
    return (root / CONFIG_FILE).resolve()


def resolve_dir(root: Path, directory: str) -> Path:
    """
    Template directory from settings → absolute path.
    Relative entries are taken relative to the project root.
    """
    p = Path(directory).expanduser()
    return p if p.is_absolute() else (root / p).resolve()


__all__ = ["CONFIG_FILE", "config_path", "resolve_dir"]
