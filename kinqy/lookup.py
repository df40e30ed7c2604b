from __future__ import annotations

from typing import Any, Dict, Generic, Hashable, Iterable, Iterator, List, Optional, Tuple

from .strategies import EqualityComparer, Selector
from .types import K, V


class _Entry(Generic[K, V]):
    __slots__ = ('key', 'elements')

    def __init__(self, key: K):
        self.key = key
        self.elements: List[V] = []


class HashLookup(Generic[K, V]):
    """
    ordered multimap keyed through an equality comparer.
    keys are bucketed by comparer.hash and disambiguated with comparer.equals;
    iteration yields (key, elements) in first-seen key order.
    """

    def __init__(self, comparer: EqualityComparer):
        self._comparer = comparer
        self._buckets: Dict[Hashable, List[_Entry[K, V]]] = {}
        self._entries: List[_Entry[K, V]] = []

    @classmethod
    def build(cls, pairs: Iterable[Tuple[Any, Any]], key_selector: Selector,
              comparer: EqualityComparer, element_selector: Optional[Selector] = None) -> HashLookup:
        """index (key, value) pairs by key_selector(value, key); elements are element_selector(value, key)"""
        lookup = cls(comparer)
        for key, value in pairs:
            element = (key, value) if element_selector is None else element_selector(value, key)
            lookup.add(key_selector(value, key), element)
        return lookup

    def _find_entry(self, key: K, bucket_key: Hashable) -> Optional[_Entry[K, V]]:
        for entry in self._buckets.get(bucket_key, ()):
            if self._comparer.equals(entry.key, key):
                return entry
        return None

    def _entry_for(self, key: K) -> Tuple[_Entry[K, V], bool]:
        bucket_key = self._comparer.hash(key)
        entry = self._find_entry(key, bucket_key)
        if entry is not None:
            return entry, False
        entry = _Entry(key)
        self._buckets.setdefault(bucket_key, []).append(entry)
        self._entries.append(entry)
        return entry, True

    def add(self, key: K, element: V) -> None:
        entry, _ = self._entry_for(key)
        entry.elements.append(element)

    def add_key(self, key: K) -> bool:
        """register key without an element. true when it was not present yet."""
        _, created = self._entry_for(key)
        return created

    def find(self, key: K) -> Optional[List[V]]:
        entry = self._find_entry(key, self._comparer.hash(key))
        return None if entry is None else entry.elements

    def __contains__(self, key: K) -> bool:
        return self._find_entry(key, self._comparer.hash(key)) is not None

    def __iter__(self) -> Iterator[Tuple[K, List[V]]]:
        for entry in self._entries:
            yield entry.key, entry.elements

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"HashLookup(keys={len(self._entries)}, buckets={len(self._buckets)})"
