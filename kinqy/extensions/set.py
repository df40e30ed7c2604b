from __future__ import annotations
import typing
from itertools import chain
from typing import Any, Generic, Iterable

from ..lookup import HashLookup
from ..parsers import parse_equality_comparer
from ..types import K, V, Spec

if typing.TYPE_CHECKING:
    from ..sequence import Sequence


class _SetOperations(Generic[K, V]):
    """
    set algebra over values, membership decided by an equality comparer.
    every operation keeps first-seen order and the original keys of the pairs it emits.
    """

    def distinct(self: 'Sequence[K, V]', equality_comparer: Spec = None) -> 'Sequence[K, V]':
        """first occurrence of each equality class; streams"""
        self._require_finite('distinct')
        comparer = parse_equality_comparer(equality_comparer)

        def distinct_pairs():
            seen = HashLookup(comparer)
            for key, value in self.items():
                if seen.add_key(value):
                    yield key, value
        return self._derive(distinct_pairs)

    def union(self: 'Sequence[K, V]', rhs: Iterable[Any], equality_comparer: Spec = None) -> 'Sequence[K, V]':
        """this sequence then rhs, each equality class once"""
        from ..factories import from_
        other = from_(rhs, engine=self.engine)
        self._require_finite('union')
        other._require_finite('union')
        comparer = parse_equality_comparer(equality_comparer)

        def union_pairs():
            seen = HashLookup(comparer)
            # chain pulls from rhs only after this sequence is exhausted
            for key, value in chain(self.items(), other.items()):
                if seen.add_key(value):
                    yield key, value
        return self._derive(union_pairs)

    def intersect(self: 'Sequence[K, V]', rhs: Iterable[Any], equality_comparer: Spec = None) -> 'Sequence[K, V]':
        """elements of this sequence whose class also occurs in rhs, each class once"""
        from ..factories import from_
        other = from_(rhs, engine=self.engine)
        self._require_finite('intersect')
        other._require_finite('intersect')
        comparer = parse_equality_comparer(equality_comparer)

        def intersect_pairs():
            members = _value_lookup(other, comparer)
            emitted = HashLookup(comparer)
            for key, value in self.items():
                if value in members and emitted.add_key(value):
                    yield key, value
        return self._derive(intersect_pairs)

    def except_(self: 'Sequence[K, V]', rhs: Iterable[Any], equality_comparer: Spec = None) -> 'Sequence[K, V]':
        """elements of this sequence whose class does not occur in rhs, each class once"""
        from ..factories import from_
        other = from_(rhs, engine=self.engine)
        self._require_finite('except_')
        other._require_finite('except_')
        comparer = parse_equality_comparer(equality_comparer)

        def except_pairs():
            excluded = _value_lookup(other, comparer)
            emitted = HashLookup(comparer)
            for key, value in self.items():
                if value not in excluded and emitted.add_key(value):
                    yield key, value
        return self._derive(except_pairs)


def _value_lookup(sequence: 'Sequence', comparer) -> HashLookup:
    lookup = HashLookup(comparer)
    for value in sequence.values():
        lookup.add_key(value)
    return lookup
