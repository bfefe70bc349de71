"""
OidKey: dotted-numeric OID value type with SNMP ordering.
"""
from __future__ import annotations

from functools import total_ordering
from typing import Any, Iterable, Tuple

from pyasn1.error import PyAsn1Error
from pyasn1.type.univ import ObjectIdentifier


@total_ordering
class OidKey:
    """An OID kept both as its canonical string (``.1.3.6``) and as a tuple of ints.

    Keys compare component by component, numerically, and a key sorts before
    any key it is a prefix of.
    """

    __slots__ = ('_parts', '_text')

    def __init__(self, value: str | Iterable[int] | 'OidKey') -> None:
        if isinstance(value, OidKey):
            parts = value.parts
        else:
            parts = self._parse(value)
        self._parts: Tuple[int, ...] = parts
        self._text = '.' + '.'.join(str(p) for p in parts)

    @staticmethod
    def _parse(value: Any) -> Tuple[int, ...]:
        if isinstance(value, str):
            text = value.strip()
            if not text.strip('.'):
                raise ValueError(f"Empty OID: {value!r}")
            if not all(part.isdigit() for part in text.lstrip('.').split('.')):
                raise ValueError(f"Not a dotted-numeric OID: {value!r}")
            value = text
        try:
            parts = tuple(ObjectIdentifier(value))
        except (PyAsn1Error, TypeError) as e:
            raise ValueError(f"Invalid OID {value!r}: {e}") from e
        if not parts:
            raise ValueError(f"Empty OID: {value!r}")
        return parts

    @classmethod
    def canonical(cls, value: str) -> str:
        return str(cls(value))

    @property
    def parts(self) -> Tuple[int, ...]:
        return self._parts

    def compare(self, other: 'OidKey') -> int:
        """Three-way comparison: -1, 0 or 1."""
        if self._parts < other._parts:
            return -1
        if self._parts > other._parts:
            return 1
        return 0

    def startswith(self, prefix: 'OidKey | str') -> bool:
        """True dotted-prefix containment (``.1.3`` is a prefix of ``.1.3.6``, not of ``.1.30``)."""
        prefix_parts = OidKey(prefix).parts
        return self._parts[:len(prefix_parts)] == prefix_parts

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, OidKey):
            return NotImplemented
        return self._parts == other._parts

    def __lt__(self, other: 'OidKey') -> bool:
        if not isinstance(other, OidKey):
            return NotImplemented
        return self._parts < other._parts

    def __hash__(self) -> int:
        return hash(self._parts)

    def __len__(self) -> int:
        return len(self._parts)

    def __str__(self) -> str:
        return self._text

    def __repr__(self) -> str:
        return f"OidKey('{self._text}')"


def sort_oids(oids: Iterable[str]) -> list[str]:
    """Sort dotted OID strings into SNMP order, keeping their original spelling."""
    return sorted(oids, key=lambda oid: OidKey(oid).parts)
