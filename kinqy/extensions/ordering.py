from __future__ import annotations
import typing
from typing import Generic

from ..parsers import parse_comparer, parse_selector
from ..strategies import DEFAULT_COMPARER
from ..types import K, V, Spec

if typing.TYPE_CHECKING:
    from ..sequence import OrderedSequence


class _OrderingOperations(Generic[K, V]):
    def order_by(self, key_selector: Spec = None, comparer: Spec = None) -> 'OrderedSequence[K, V]':
        """stable sort by key_selector(value, key) ascending; keys of the pairs are preserved"""
        from ..sequence import OrderedSequence
        self._require_finite('order_by')
        selector = parse_selector(key_selector)
        return OrderedSequence(self, (parse_comparer(comparer, DEFAULT_COMPARER).project(selector),))

    def order_by_desc(self, key_selector: Spec = None, comparer: Spec = None) -> 'OrderedSequence[K, V]':
        """stable sort by key_selector(value, key) descending"""
        from ..sequence import OrderedSequence
        self._require_finite('order_by_desc')
        selector = parse_selector(key_selector)
        return OrderedSequence(self, (parse_comparer(comparer, DEFAULT_COMPARER).project(selector).reverse(),))
