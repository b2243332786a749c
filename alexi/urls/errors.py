"""
URL routing errors.

Raised only by reverse(): resolve() reports "no match" by returning None.
"""

from __future__ import annotations

from ..errors import AlexiUserError


class UrlConfigurationError(AlexiUserError):
    """Base class for problems in URL configuration and reversal."""
    pass


class NoReverseMatch(UrlConfigurationError):
    """No pattern with the requested name exists."""

    def __init__(self, name: str):
        super().__init__(f"No route found with name: {name}")
        self.name = name


class MissingRouteParameter(UrlConfigurationError):
    """A ':param' placeholder of the named route has no value."""

    def __init__(self, param: str, route_name: str):
        super().__init__(f"Missing required parameter '{param}' for route '{route_name}'")
        self.param = param
        self.route_name = route_name


__all__ = ["UrlConfigurationError", "NoReverseMatch", "MissingRouteParameter"]
