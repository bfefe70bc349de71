"""
OidStore: the ordered OID -> (type, value) tree served by the agent.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, Iterator, List, Mapping, NamedTuple, Optional, Tuple

from passpersist.oid import OidKey
from passpersist.snmp_types import ValueType

logger = logging.getLogger(__name__)


class OidEntry(NamedTuple):
    oid: str
    type: ValueType
    value: str

    def lines(self) -> List[str]:
        """The three response lines for a get: oid, type token, value."""
        return [self.oid, self.type.value, self.value]


class OidStore:
    """Mapping of canonical OID strings to entries, iterated in OID order.

    The sorted key list is rebuilt lazily after a mutation, so repeated
    lookups against an unchanged tree do not re-sort it.
    """

    def __init__(self, entries: Optional[Mapping[str, Any]] = None) -> None:
        self._entries: Dict[str, OidEntry] = {}
        self._sorted: Optional[List[str]] = None
        if entries:
            self.merge(entries)

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def insert(self, oid: str, type: Any, value: Any) -> OidEntry:
        """Add or overwrite one entry.

        Raises:
            ValueError: ``oid`` is not a dotted-numeric OID.
        """
        entry = self._make_entry(oid, type, value)
        self._entries[entry.oid] = entry
        self._sorted = None
        return entry

    def merge(self, entries: Mapping[str, Any]) -> None:
        """Upsert many entries at once.

        Values may be ``OidEntry`` objects, ``(type, value)`` pairs or
        ``{"type": ..., "value": ...}`` mappings. Every entry is checked
        before any is applied.
        """
        prepared = [self._make_entry(oid, *self._split_item(oid, item)) for oid, item in entries.items()]
        for entry in prepared:
            self._entries[entry.oid] = entry
        self._sorted = None
        logger.debug("Merged %d entries, store now holds %d", len(prepared), len(self._entries))

    def remove(self, oid: str) -> bool:
        key = self._canonical(oid)
        if key is None or key not in self._entries:
            return False
        del self._entries[key]
        self._sorted = None
        return True

    def clear(self) -> None:
        self._entries.clear()
        self._sorted = None

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def lookup_exact(self, oid: str) -> Optional[OidEntry]:
        if oid in self._entries:
            return self._entries[oid]
        key = self._canonical(oid)
        if key is None:
            return None
        return self._entries.get(key)

    def lookup_first(self) -> Optional[OidEntry]:
        keys = self.sorted_keys()
        if not keys:
            return None
        return self._entries[keys[0]]

    def lookup_successor(self, oid: str) -> Optional[OidEntry]:
        """Entry following ``oid`` in OID order, or None past the end.

        An exact match selects the entry right after it. Without one, the
        first key that contains ``oid`` as a substring counts as the branch
        being asked for, and that key itself is returned. A request matching
        nothing starts from the beginning of the tree.
        """
        keys = self.sorted_keys()
        request = self._canonical(oid) or oid
        current = -1
        recorded = False
        for i, key in enumerate(keys):
            if key == request:
                current = i
                break
            if not recorded and request in key:
                current = i - 1
                recorded = True
        following = current + 1
        if following >= len(keys):
            return None
        return self._entries[keys[following]]

    def sorted_keys(self) -> List[str]:
        if self._sorted is None:
            self._sorted = sorted(self._entries, key=lambda k: OidKey(k).parts)
        return self._sorted

    def items(self) -> Iterator[Tuple[str, OidEntry]]:
        for key in self.sorted_keys():
            yield key, self._entries[key]

    def __iter__(self) -> Iterator[str]:
        return iter(list(self.sorted_keys()))

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, oid: object) -> bool:
        return isinstance(oid, str) and self.lookup_exact(oid) is not None

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _canonical(oid: str) -> Optional[str]:
        try:
            return OidKey.canonical(oid)
        except ValueError:
            return None

    @staticmethod
    def _make_entry(oid: str, type: Any, value: Any) -> OidEntry:
        return OidEntry(OidKey.canonical(oid), ValueType.from_tag(type), str(value))

    @staticmethod
    def _split_item(oid: str, item: Any) -> Tuple[Any, Any]:
        if isinstance(item, OidEntry):
            return item.type, item.value
        if isinstance(item, Mapping):
            if 'value' not in item:
                raise ValueError(f"Entry for {oid} has no value")
            return item.get('type'), item['value']
        if isinstance(item, (tuple, list)) and len(item) == 2:
            return item[0], item[1]
        raise ValueError(f"Entry for {oid} must be a (type, value) pair, got {item!r}")
