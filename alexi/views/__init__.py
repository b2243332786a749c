from __future__ import annotations

from .template import HTML_CONTENT_TYPE, TEXT_CONTENT_TYPE, HttpResponse, template_view

__all__ = ["HttpResponse", "template_view", "HTML_CONTENT_TYPE", "TEXT_CONTENT_TYPE"]
