from __future__ import annotations

import logging
import typing
from itertools import chain, count, islice, takewhile, dropwhile
from typing import Any, Callable, Generic, Iterable

from ..parsers import parse_join_selector, parse_predicate, parse_selector
from ..strategies import (
    KEY_JOIN_SELECTOR, KEY_SELECTOR, VALUE_JOIN_SELECTOR, VALUE_SELECTOR
)
from ..types import K, V, PairCache, Spec

if typing.TYPE_CHECKING:
    from ..sequence import Sequence

logger = logging.getLogger(__name__)


class _CoreOperations(Generic[K, V]):
    def select(self: 'Sequence[K, V]', value_selector: Spec = None, key_selector: Spec = None) -> 'Sequence':
        """project each pair to a new value and/or key"""
        value_of = parse_selector(value_selector, VALUE_SELECTOR)
        key_of = parse_selector(key_selector, KEY_SELECTOR)

        def select_pairs():
            for key, value in self.items():
                yield key_of(value, key), value_of(value, key)
        return self._derive(select_pairs, length_func=self._length_func)

    def where(self: 'Sequence[K, V]', predicate: Spec) -> 'Sequence[K, V]':
        """keep pairs satisfying predicate(value, key); keys and order preserved"""
        accept = parse_predicate(predicate)

        def filter_pairs():
            return ((key, value) for key, value in self.items() if accept(value, key))
        return self._derive(filter_pairs)

    def take(self: 'Sequence[K, V]', n: int) -> 'Sequence[K, V]':
        """first n pairs; stops pulling from the source once n are produced"""
        if n <= 0:
            return self._derive(lambda: iter(()), infinite=False, length_func=lambda: 0)
        return self._derive(lambda: islice(self.items(), n), infinite=False)

    def drop(self: 'Sequence[K, V]', n: int) -> 'Sequence[K, V]':
        """skip the first n pairs"""
        return self._derive(lambda: islice(self.items(), max(n, 0), None))

    def take_while(self: 'Sequence[K, V]', predicate: Spec) -> 'Sequence[K, V]':
        """
        pairs up to (not including) the first that fails predicate.
        the result counts as bounded: the predicate is what ends an unbounded source.
        """
        accept = parse_predicate(predicate)
        # itertools.takewhile is the most efficient implementation for this
        return self._derive(lambda: takewhile(lambda pair: accept(pair[1], pair[0]), self.items()),
                            infinite=False)

    def drop_while(self: 'Sequence[K, V]', predicate: Spec) -> 'Sequence[K, V]':
        """pairs from the first that fails predicate onwards"""
        accept = parse_predicate(predicate)
        return self._derive(lambda: dropwhile(lambda pair: accept(pair[1], pair[0]), self.items()))

    def concat(self: 'Sequence[K, V]', rhs: Iterable[Any]) -> 'Sequence[K, V]':
        """all of this sequence, then all of rhs. keys are kept as they are."""
        from ..factories import from_
        other = from_(rhs, engine=self.engine)
        # itertools.chain pulls from the right side only after the left is exhausted
        return self._derive(lambda: chain(self.items(), other.items()),
                            infinite=self.is_infinite or other.is_infinite)

    def select_many(self: 'Sequence[K, V]', many_selector: Spec, result_value_selector: Spec = None,
                    result_key_selector: Spec = None) -> 'Sequence':
        """
        flatten the sequences produced by many_selector(value, key).
        without result selectors the inner pairs are emitted as-is (their keys repeat
        across outer elements; call renum() for unique keys). with result selectors each
        (outer, inner) combination goes through (outer_value, inner_value, outer_key, inner_key).
        """
        from ..factories import from_
        many_of = parse_selector(many_selector)
        engine = self.engine

        if result_value_selector is None and result_key_selector is None:
            def flat_pairs():
                for key, value in self.items():
                    yield from from_(many_of(value, key), engine=engine).items()
            return self._derive(flat_pairs)

        value_of = parse_join_selector(result_value_selector, VALUE_JOIN_SELECTOR)
        key_of = parse_join_selector(result_key_selector, KEY_JOIN_SELECTOR)

        def joined_pairs():
            for outer_key, outer_value in self.items():
                for inner_key, inner_value in from_(many_of(outer_value, outer_key), engine=engine).items():
                    yield (key_of(outer_value, inner_value, outer_key, inner_key),
                           value_of(outer_value, inner_value, outer_key, inner_key))
        return self._derive(joined_pairs)

    def zip(self: 'Sequence[K, V]', rhs: Iterable[Any], result_value_selector: Spec,
            result_key_selector: Spec = None) -> 'Sequence':
        """pair elements positionally; stops with the shorter side"""
        from ..factories import from_
        other = from_(rhs, engine=self.engine)
        value_of = parse_join_selector(result_value_selector, VALUE_JOIN_SELECTOR)
        key_of = parse_join_selector(result_key_selector, KEY_JOIN_SELECTOR)

        def zip_pairs():
            for (k0, v0), (k1, v1) in zip(self.items(), other.items()):
                yield key_of(v0, v1, k0, k1), value_of(v0, v1, k0, k1)
        return self._derive(zip_pairs, infinite=self.is_infinite and other.is_infinite)

    def reverse(self: 'Sequence[K, V]') -> 'Sequence[K, V]':
        """
        inverts the order of the pairs. buffers the whole source on first
        iteration of each pass, so the source must be finite.
        """
        self._require_finite('reverse')

        def reverse_pairs():
            buffered = list(self.items())
            logger.debug("reverse buffered %d pairs", len(buffered))
            return reversed(buffered)
        return self._derive(reverse_pairs, length_func=self._length_func)

    def renum(self: 'Sequence[K, V]') -> 'Sequence[int, V]':
        """re-key with 0, 1, 2, ... keeping order"""
        return self._derive(lambda: zip(count(), self.values()), length_func=self._length_func)

    def each(self: 'Sequence[K, V]', action: Callable[[Any, Any], Any]) -> 'Sequence[K, V]':
        """
        calls action(value, key) for each pair as it passes through, without changing it.
        lazy: nothing happens until the result is iterated.
        """
        act = parse_selector(action)

        def tapped_pairs():
            for key, value in self.items():
                act(value, key)
                yield key, value
        return self._derive(tapped_pairs, length_func=self._length_func)

    def memoize(self: 'Sequence[K, V]') -> 'Sequence[K, V]':
        """
        cache the first enumeration and replay it afterwards. the source is pulled
        lazily; a half-finished first pass is continued by whichever reader needs more.
        """
        self._require_finite('memoize')
        cache: PairCache = PairCache(self._pair_func)
        return self._derive(lambda: iter(cache))
