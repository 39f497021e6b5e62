"""Case-insensitive string mapping for route variables.

Implements ``Mapping[str, str]``. Keys keep the spelling they were first
stored with; lookups ignore case.
"""

from collections.abc import Iterable, Iterator, Mapping


class Variables(Mapping[str, str]):
    """Immutable, case-insensitive variable map.

    Built from ``(name, value)`` pairs in order; a later pair replaces the
    value of an earlier pair with the same (case-folded) name.
    """

    _data: dict[str, tuple[str, str]]

    __slots__ = ("_data",)

    def __init__(self, pairs: Iterable[tuple[str, str]] | Mapping[str, str] = ()) -> None:
        if isinstance(pairs, Mapping):
            pairs = pairs.items()
        data: dict[str, tuple[str, str]] = {}
        for name, value in pairs:
            key = name.casefold()
            original = data[key][0] if key in data else name
            data[key] = (original, value)
        object.__setattr__(self, "_data", data)

    def __getitem__(self, key: str) -> str:
        return self._data[key.casefold()][1]

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and key.casefold() in self._data

    def __iter__(self) -> Iterator[str]:
        return (original for original, _ in self._data.values())

    def __len__(self) -> int:
        return len(self._data)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Mapping):
            return dict(self.items()) == dict(other.items())
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        items = ", ".join(f"{k!r}: {self[k]!r}" for k in self)
        return f"Variables({{{items}}})"

    def merged(self, pairs: Iterable[tuple[str, str]]) -> "Variables":
        """Return a new map with *pairs* laid over this one."""
        return Variables([*self.items(), *pairs])
