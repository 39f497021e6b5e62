"""Route templates — parsed once at registration, immutable afterwards."""

from collections.abc import Sequence
from dataclasses import dataclass

from wren.errors import InvalidPatternError


@dataclass(frozen=True, slots=True)
class PathSegment:
    """A parsed segment of a route template.

    Literal:   ``users``  (is_variable=False)
    Variable:  ``{id}``   (is_variable=True, name="id")
    """

    value: str
    is_variable: bool = False
    name: str | None = None


@dataclass(frozen=True, slots=True)
class PathPattern:
    """An ordered, fixed-length sequence of literal and variable segments."""

    template: str
    segments: tuple[PathSegment, ...]

    def __len__(self) -> int:
        return len(self.segments)

    @property
    def variable_names(self) -> tuple[str, ...]:
        """Variable names in template order."""
        return tuple(seg.name for seg in self.segments if seg.name is not None)

    def match_segments(self, parts: Sequence[str]) -> dict[str, str] | None:
        """Compare split path *parts* against this pattern.

        Returns the captured variables on a match, ``None`` otherwise.
        Literal segments compare case-sensitively; variable segments
        capture the raw candidate text.
        """
        if len(parts) != len(self.segments):
            return None

        captured: dict[str, str] = {}
        for seg, part in zip(self.segments, parts, strict=True):
            if seg.is_variable:
                captured[seg.name or ""] = part
            elif seg.value != part:
                return None
        return captured


def parse_pattern(template: str) -> PathPattern:
    """Parse a route template into segments.

    The template is split on ``/`` as-is, so a leading slash yields an
    empty first segment::

        "/users"       -> ["", "users"]
        "/users/{id}"  -> ["", "users", {id}]
        "users/{id}"   -> ["users", {id}]

    Raises ``InvalidPatternError`` for an empty variable (``{}``) or a
    variable name used twice. Names compare case-insensitively because
    captured variables are looked up that way.
    """
    segments: list[PathSegment] = []
    seen: set[str] = set()

    for part in template.split("/"):
        if part.startswith("{") and part.endswith("}"):
            name = part[1:-1]
            if not name:
                raise InvalidPatternError(template, "empty variable segment '{}'")
            key = name.casefold()
            if key in seen:
                raise InvalidPatternError(template, f"variable {name!r} appears more than once")
            seen.add(key)
            segments.append(PathSegment(value=part, is_variable=True, name=name))
        else:
            segments.append(PathSegment(value=part))

    return PathPattern(template=template, segments=tuple(segments))
