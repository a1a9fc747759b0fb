"""Attribute path resolution against records.

A record is any mapping, possibly nested. An attribute is addressed either by
a single key or by a list/tuple of keys that descends into nested mappings
and, by integer index, into nested lists and tuples:

```python
record = {"email": "a@b.com", "address": {"street": "Main"}}

get_path(record, "email")                  # "a@b.com"
get_path(record, ["address", "street"])    # "Main"
get_path(record, ["address", "zip"])       # MISSING
get_path({"tags": ["a", "b"]}, ["tags", 1]) # "b"
```

Resolution never raises for a mapping record; a path that cannot be followed
resolves to the ``MISSING`` marker.
"""

from __future__ import annotations

from collections.abc import Hashable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any


class _Missing:
    """Marker type for a value that could not be resolved."""

    _instance: _Missing | None = None

    def __new__(cls) -> _Missing:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False

    def __reduce__(self) -> str:
        return "MISSING"


MISSING: Any = _Missing()


def is_absent(value: Any) -> bool:
    """Check whether a resolved value counts as "no value".

    Both an unresolvable path and a stored ``None`` are absent. Other falsy
    values such as ``False``, ``0`` and ``""`` are present.
    """
    return value is MISSING or value is None


def _is_index(container: Any, key: Any) -> bool:
    return (
        isinstance(container, Sequence)
        and not isinstance(container, (str, bytes, bytearray))
        and isinstance(key, int)
        and not isinstance(key, bool)
        and 0 <= key < len(container)
    )


def is_path_sequence(identifier: Any) -> bool:
    """Return True if the identifier is a sequence of keys rather than one key."""
    return isinstance(identifier, (list, tuple))


@dataclass(frozen=True)
class AttributePath:
    """Normalized attribute identifier: a non-empty tuple of hashable keys."""

    keys: tuple[Hashable, ...]

    def __post_init__(self) -> None:
        if not self.keys:
            raise ValueError("Attribute path must contain at least one key")
        for key in self.keys:
            try:
                hash(key)
            except TypeError as e:
                raise TypeError(f"Attribute path key is not hashable: {key!r}") from e

    @classmethod
    def of(cls, identifier: Any) -> AttributePath:
        """Normalize a scalar key, a key sequence or an existing path.

        Args:
            identifier: A single key, or a list/tuple of keys

        Returns:
            AttributePath for the identifier

        Raises:
            ValueError: If the identifier is an empty sequence
            TypeError: If any key is unhashable
        """
        if isinstance(identifier, AttributePath):
            return identifier
        if is_path_sequence(identifier):
            return cls(tuple(identifier))
        return cls((identifier,))

    @property
    def key(self) -> Hashable:
        """Key under which this path is reported.

        A one-key path reports under the bare key, so ``"email"`` and
        ``["email"]`` are interchangeable everywhere.
        """
        if len(self.keys) == 1:
            return self.keys[0]
        return self.keys

    def resolve(self, record: Any) -> Any:
        """Resolve this path against a record, returning MISSING if unreachable.

        Mappings are looked up by key. Lists and tuples are indexed by
        non-negative integer keys; strings and bytes are never descended into.
        """
        current = record
        for key in self.keys:
            if isinstance(current, Mapping) and key in current:
                current = current[key]
            elif _is_index(current, key):
                current = current[key]
            else:
                return MISSING
        return current

    def __str__(self) -> str:
        return ".".join(str(key) for key in self.keys)


def get_path(record: Any, identifier: Any) -> Any:
    """Resolve an attribute identifier against a record.

    Args:
        record: Mapping to read from (never modified)
        identifier: A single key, a list/tuple of keys, or an AttributePath

    Returns:
        The resolved value, or MISSING when any level is absent or cannot be descended into
    """
    return AttributePath.of(identifier).resolve(record)
