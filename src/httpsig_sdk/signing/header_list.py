"""
Ordered list of (pseudo-)header names covered by a signature
"""

from typing import Iterable, Iterator, List, Optional, Tuple


class HeaderList:
    """
    Normalized (lower-cased) header names in signing-string order.

    ``explicit`` records whether the list is serialized as the ``headers``
    signature parameter. It is False for the implicit defaults and for an
    empty list.
    """

    __slots__ = ('_names', '_explicit')

    def __init__(self, names: Optional[Iterable[str]] = None, explicit: bool = True):
        normalized = tuple(name.strip().lower() for name in (names or ()) if name and name.strip())
        self._names: Tuple[str, ...] = normalized
        self._explicit = bool(normalized) and explicit

    @classmethod
    def from_string(cls, value: str, explicit: bool = True) -> 'HeaderList':
        """Parse a space-separated ``headers`` parameter value."""
        return cls(value.split(), explicit)

    @property
    def names(self) -> List[str]:
        return list(self._names)

    @property
    def explicit(self) -> bool:
        return self._explicit

    def string(self) -> str:
        """Space-separated form used in the ``headers`` parameter."""
        return ' '.join(self._names)

    def with_name(self, name: str) -> 'HeaderList':
        """
        Return a list that also covers ``name``.

        The result is explicit, since a header added to the defaults must be
        announced to the verifier.
        """
        if name.lower() in self._names:
            return self
        return HeaderList(self._names + (name,), explicit=True)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name.lower() in self._names

    def __iter__(self) -> Iterator[str]:
        return iter(self._names)

    def __len__(self) -> int:
        return len(self._names)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, HeaderList):
            return NotImplemented
        return self._names == other._names and self._explicit == other._explicit

    def __hash__(self) -> int:
        return hash((self._names, self._explicit))

    def __repr__(self) -> str:
        return f"HeaderList({list(self._names)!r}, explicit={self._explicit})"
