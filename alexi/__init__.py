"""
Alexi — Django-style template engine and URL router.
"""

from __future__ import annotations

from .version import tool_version

__all__ = ["tool_version"]
