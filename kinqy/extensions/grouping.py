from __future__ import annotations
import logging
import typing
from typing import Generic

from ..lookup import HashLookup
from ..parsers import parse_equality_comparer, parse_selector
from ..types import K, V, Spec

if typing.TYPE_CHECKING:
    from ..sequence import Sequence, Grouping

logger = logging.getLogger(__name__)


class _GroupingOperations(Generic[K, V]):
    def group_by(self: 'Sequence[K, V]', key_selector: Spec, element_selector: Spec = None,
                 equality_comparer: Spec = None) -> 'Sequence[object, Grouping]':
        """
        group pairs by key_selector(value, key) in a single pass.
        groups come out in first-seen key order, each keyed by its group key; inside a
        group the elements keep their source order and source keys.
        """
        from ..sequence import Grouping
        self._require_finite('group_by')
        key_of = parse_selector(key_selector)
        element_of = parse_selector(element_selector)
        comparer = parse_equality_comparer(equality_comparer)
        engine = self.engine

        def group_pairs():
            lookup = HashLookup(comparer)
            for key, value in self.items():
                lookup.add(key_of(value, key), (key, element_of(value, key)))
            logger.debug("group_by built %d groups", len(lookup))
            for group_key, pairs in lookup:
                yield group_key, Grouping(group_key, pairs, engine)
        return self._derive(group_pairs)

    def to_lookup(self: 'Sequence[K, V]', key_selector: Spec, element_selector: Spec = None,
                  equality_comparer: Spec = None) -> HashLookup:
        """eager counterpart of group_by: the hash lookup itself, for repeated probing"""
        self._require_finite('to_lookup')
        return HashLookup.build(self.items(), parse_selector(key_selector),
                                parse_equality_comparer(equality_comparer),
                                parse_selector(element_selector))
