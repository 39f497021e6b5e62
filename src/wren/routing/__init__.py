"""Routing — route templates, the build-once registry, and the matcher.

Routes are registered during setup and frozen before the first match.
"""

from wren.routing.matcher import RouteMatcher, parse_query, split_target
from wren.routing.pattern import PathPattern, PathSegment, parse_pattern
from wren.routing.registry import RouteRegistry
from wren.routing.route import MatchResult, RouteEntry

__all__ = [
    "MatchResult",
    "PathPattern",
    "PathSegment",
    "RouteEntry",
    "RouteMatcher",
    "RouteRegistry",
    "parse_pattern",
    "parse_query",
    "split_target",
]
