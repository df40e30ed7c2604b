from __future__ import annotations
import typing
from typing import Any, Callable, Dict, Generic, Iterable, List, Optional, Tuple

import numpy as np
import pandas as pd

from ..errors import EmptySequence, IndexOutOfRange, NoMatch, UnreduceableEmptySequence
from ..parsers import parse_equality_comparer, parse_predicate
from ..strategies import DEFAULT_EQUALITY
from ..types import K, V, Accumulator, Spec

if typing.TYPE_CHECKING:
    from ..sequence import Sequence

_MISSING = object()


class _TerminalOperations(Generic[K, V]):
    """operations that iterate the sequence and return a plain result"""

    # --- quantifiers ---

    def any(self: 'Sequence[K, V]', predicate: Spec = None) -> bool:
        """true if any pair satisfies predicate (or, without one, if there is any pair)"""
        if predicate is None:
            return next(iter(self.items()), _MISSING) is not _MISSING
        accept = parse_predicate(predicate)
        return any(accept(value, key) for key, value in self.items())

    def all(self: 'Sequence[K, V]', predicate: Spec) -> bool:
        """true if every pair satisfies predicate. stops at the first failure."""
        accept = parse_predicate(predicate)
        return all(accept(value, key) for key, value in self.items())

    def count(self: 'Sequence[K, V]', predicate: Spec = None) -> int:
        self._require_finite('count')
        if predicate is None:
            length = self._static_length()
            if length is not None:
                return length
            return sum(1 for _ in self.items())
        accept = parse_predicate(predicate)
        return sum(1 for key, value in self.items() if accept(value, key))

    def contains(self: 'Sequence[K, V]', value: Any) -> bool:
        return any(DEFAULT_EQUALITY.equals(v, value) for v in self.values())

    def contains_key(self: 'Sequence[K, V]', key: Any) -> bool:
        return any(DEFAULT_EQUALITY.equals(k, key) for k in self.keys())

    # --- element access ---

    def _first_pair(self: 'Sequence[K, V]', predicate: Spec) -> Optional[Tuple[K, V]]:
        if predicate is None:
            return next(iter(self.items()), None)
        accept = parse_predicate(predicate)
        return next(((k, v) for k, v in self.items() if accept(v, k)), None)

    def _last_pair(self: 'Sequence[K, V]', predicate: Spec) -> Optional[Tuple[K, V]]:
        self._require_finite('last')
        accept = parse_predicate(predicate) if predicate is not None else None
        found = None
        for key, value in self.items():
            if accept is None or accept(value, key):
                found = (key, value)
        return found

    def first(self: 'Sequence[K, V]', predicate: Spec = None) -> V:
        """first value (optionally the first satisfying predicate)"""
        pair = self._first_pair(predicate)
        if pair is None:
            raise EmptySequence() if predicate is None else NoMatch()
        return pair[1]

    def first_or_else(self: 'Sequence[K, V]', default: Any, predicate: Spec = None) -> Any:
        pair = self._first_pair(predicate)
        return default if pair is None else pair[1]

    def last(self: 'Sequence[K, V]', predicate: Spec = None) -> V:
        """last value (optionally the last satisfying predicate)"""
        pair = self._last_pair(predicate)
        if pair is None:
            raise EmptySequence() if predicate is None else NoMatch()
        return pair[1]

    def last_or_else(self: 'Sequence[K, V]', default: Any, predicate: Spec = None) -> Any:
        pair = self._last_pair(predicate)
        return default if pair is None else pair[1]

    def else_if_zero(self: 'Sequence[K, V]', default: Any) -> 'Sequence':
        """this sequence when it has elements, else a one-element sequence holding default"""
        if self.any():
            return self
        from ..factories import repeat
        return repeat(default, 1, engine=self.engine)

    def _pair_at(self: 'Sequence[K, V]', index: int) -> Tuple[K, V]:
        if index < 0:
            raise IndexOutOfRange(index)
        length = self._static_length()
        if length is not None and index >= length:
            raise IndexOutOfRange(index)
        position = -1
        for position, pair in enumerate(self.items()):
            if position == index:
                return pair
        if position < 0:
            raise EmptySequence()
        raise IndexOutOfRange(index)

    def value_at(self: 'Sequence[K, V]', index: int) -> V:
        return self._pair_at(index)[1]

    def value_at_or_else(self: 'Sequence[K, V]', index: int, default: Any) -> Any:
        try:
            return self._pair_at(index)[1]
        except (EmptySequence, IndexOutOfRange):
            return default

    def key_at(self: 'Sequence[K, V]', index: int) -> K:
        return self._pair_at(index)[0]

    def key_at_or_else(self: 'Sequence[K, V]', index: int, default: Any) -> Any:
        try:
            return self._pair_at(index)[0]
        except (EmptySequence, IndexOutOfRange):
            return default

    # --- folds ---

    def fold_left(self: 'Sequence[K, V]', seed: Any, operator: Accumulator) -> Any:
        """operator(acc, value, key) from the first pair to the last"""
        self._require_finite('fold_left')
        acc = seed
        for key, value in self.items():
            acc = operator(acc, value, key)
        return acc

    aggregate = fold_left

    def fold_right(self: 'Sequence[K, V]', seed: Any, operator: Accumulator) -> Any:
        """operator(acc, value, key) from the last pair to the first"""
        return self.reverse().fold_left(seed, operator)

    def _reduce(self, pairs: Iterable[Tuple[K, V]], operator: Accumulator) -> Any:
        iterator = iter(pairs)
        first = next(iterator, None)
        if first is None:
            raise UnreduceableEmptySequence()
        acc = first[1]
        for key, value in iterator:
            acc = operator(acc, value, key)
        return acc

    def reduce_left(self: 'Sequence[K, V]', operator: Accumulator) -> Any:
        """fold seeded with the first value"""
        self._require_finite('reduce_left')
        return self._reduce(self.items(), operator)

    def reduce_right(self: 'Sequence[K, V]', operator: Accumulator) -> Any:
        """fold seeded with the last value, walking backwards"""
        return self._reduce(self.reverse().items(), operator)

    def sequence_equals(self: 'Sequence[K, V]', rhs: Iterable[Any], equality_comparer: Spec = None) -> bool:
        """same length and pairwise-equal values"""
        from ..factories import from_
        other = from_(rhs, engine=self.engine)
        comparer = parse_equality_comparer(equality_comparer)
        lhs_len, rhs_len = self._static_length(), other._static_length()
        if lhs_len is not None and rhs_len is not None and lhs_len != rhs_len:
            return False
        left, right = self.values(), other.values()
        for value in left:
            other_value = next(right, _MISSING)
            if other_value is _MISSING or not comparer.equals(value, other_value):
                return False
        return next(right, _MISSING) is _MISSING


class TerminalAccessor(Generic[K, V]):
    """materialization helpers: seq.to.list(), seq.to.dict(), seq.to.series(), ..."""

    def __init__(self, sequence_instance: 'Sequence[K, V]'):
        self._sequence = sequence_instance

    def _pairs(self, operation: str) -> List[Tuple[K, V]]:
        self._sequence._require_finite(operation)
        return list(self._sequence.items())

    def list(self) -> List[V]:
        """values as a list"""
        return [value for _, value in self._pairs('to.list')]

    def pairs(self) -> List[Tuple[K, V]]:
        """(key, value) pairs as a list"""
        return self._pairs('to.pairs')

    def keys(self) -> List[K]:
        return [key for key, _ in self._pairs('to.keys')]

    def dict(self, combiner: Optional[Callable[[Any, Any, Any], Any]] = None) -> Dict[K, V]:
        """
        convert to a dictionary. duplicate keys overwrite earlier ones unless
        combiner(existing_value, value, key) says how to merge them.
        """
        result: Dict[K, V] = {}
        for key, value in self._pairs('to.dict'):
            if combiner is not None and key in result:
                result[key] = combiner(result[key], value, key)
            else:
                result[key] = value
        return result

    def list_rec(self, depth: Optional[int] = None) -> List[Any]:
        """values as a list, materializing nested sequences down to depth levels (all when None)"""
        from ..sequence import Sequence

        def materialize(sequence: 'Sequence', level: Optional[int]) -> List[Any]:
            result = []
            for value in sequence.to.list():
                if isinstance(value, Sequence) and (level is None or level > 0):
                    result.append(materialize(value, None if level is None else level - 1))
                else:
                    result.append(value)
            return result

        return materialize(self._sequence, depth)

    def array(self) -> np.ndarray:
        """convert values to a numpy array"""
        return np.array(self.list())

    def series(self) -> pd.Series:
        """convert to a pandas series indexed by the sequence keys"""
        pairs = self._pairs('to.series')
        return pd.Series([value for _, value in pairs], index=[key for key, _ in pairs], dtype=None if pairs else object)

    def frame(self) -> pd.DataFrame:
        """convert dict-like values to a pandas dataframe indexed by the sequence keys"""
        pairs = self._pairs('to.frame')
        return pd.DataFrame([value for _, value in pairs], index=[key for key, _ in pairs])
