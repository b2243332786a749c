"""JSON report models for the CLI (pydantic)."""

from __future__ import annotations

from typing import Dict, List, Optional

from pydantic import BaseModel, Field


class RouteMatch(BaseModel):
    """A resolved route."""

    name: Optional[str] = Field(None, description="Route name, if the pattern is named")
    view: str = Field(..., description="Qualified name of the view callable")
    params: Dict[str, str] = Field(default_factory=dict)


class ResolveReport(BaseModel):
    path: str
    match: Optional[RouteMatch] = None


class RouteInfo(BaseModel):
    name: str
    pattern: str = Field(..., description="Full pattern with all include prefixes")
    params: List[str] = Field(default_factory=list)


class RoutesList(BaseModel):
    routes: List[RouteInfo] = Field(default_factory=list)


class TemplatesList(BaseModel):
    templates: List[str] = Field(default_factory=list)


__all__ = ["RouteMatch", "ResolveReport", "RouteInfo", "RoutesList", "TemplatesList"]
