"""
strategy objects: immutable wrappers around the small functions that drive
every combinator (selectors, predicates, comparers, equality comparers and
join selectors), plus the default ordering and equality used when the caller
supplies none.
"""
from __future__ import annotations

import numbers
from decimal import Decimal
from fractions import Fraction
from collections.abc import Mapping, Set as AbstractSet, Iterable as AbstractIterable
from typing import Any, Callable, Hashable, Optional, Sequence as TSequence

import numpy as np

from .types import SelectorFunc, PredicateFunc, CompareFunc, JoinFunc


# --- default ordering and equality ---

def _type_rank(value: Any) -> int:
    if value is None:
        return 0
    if isinstance(value, (numbers.Number, Decimal, Fraction, np.number)):
        return 1
    if isinstance(value, str):
        return 2
    if isinstance(value, (bytes, bytearray)):
        return 3
    return 4


def default_compare(x: Any, y: Any) -> int:
    """
    total pre-order used when no comparer is given.
    native `<` first; values python refuses to order are ranked
    none < numbers < str < bytes < everything else, the last group by type name then repr.
    """
    # arrays order lexicographically by their elements
    if isinstance(x, np.ndarray):
        x = x.tolist()
    if isinstance(y, np.ndarray):
        y = y.tolist()
    try:
        if x < y:
            return -1
        if y < x:
            return 1
        return 0
    except TypeError:
        pass
    rank_x, rank_y = _type_rank(x), _type_rank(y)
    if rank_x != rank_y:
        return -1 if rank_x < rank_y else 1
    if rank_x == 0:
        return 0
    fallback_x = (type(x).__name__, repr(x))
    fallback_y = (type(y).__name__, repr(y))
    if fallback_x < fallback_y:
        return -1
    if fallback_y < fallback_x:
        return 1
    return 0


def default_equals(x: Any, y: Any) -> bool:
    """python ==, except that an array only equals another array with the same shape and elements"""
    x_array, y_array = isinstance(x, np.ndarray), isinstance(y, np.ndarray)
    if x_array or y_array:
        return x_array and y_array and bool(np.array_equal(x, y))
    return bool(x == y)


def default_hash(value: Any) -> Hashable:
    """
    bucket key consistent with default_equals: values that compare equal get equal keys.
    sets are keyed by content whether or not they are hashable (frozenset({1}) == {1});
    other unhashable containers get a structural key.
    """
    if isinstance(value, AbstractSet):
        return ('__set__', frozenset(default_hash(v) for v in value))
    if isinstance(value, np.ndarray):
        return ('__array__', value.shape, tuple(default_hash(v) for v in value.ravel().tolist()))
    # (1, {1}) == (1, frozenset({1})), so tuples are keyed by their elements' keys too
    if isinstance(value, tuple):
        return ('__seq__', tuple(default_hash(v) for v in value))
    try:
        hash(value)
        return value
    except TypeError:
        pass
    if isinstance(value, Mapping):
        return ('__mapping__', frozenset((default_hash(k), default_hash(v)) for k, v in value.items()))
    if isinstance(value, AbstractIterable):
        return ('__seq__', tuple(default_hash(v) for v in value))
    return ('__id__', id(value))


# --- strategy classes ---

class Selector:
    """(value, key) -> anything"""
    __slots__ = ('_fn', '_name')

    def __init__(self, fn: SelectorFunc, name: Optional[str] = None):
        self._fn = fn
        self._name = name

    def __call__(self, value: Any, key: Any) -> Any:
        return self._fn(value, key)

    def __repr__(self) -> str:
        return f"Selector({self._name or getattr(self._fn, '__name__', 'fn')})"


class Predicate:
    """(value, key) -> bool. composes with &, | and ~."""
    __slots__ = ('_fn', '_name')

    def __init__(self, fn: PredicateFunc, name: Optional[str] = None):
        self._fn = fn
        self._name = name

    def __call__(self, value: Any, key: Any) -> bool:
        return bool(self._fn(value, key))

    def __and__(self, other: Predicate) -> Predicate:
        return Predicate(lambda v, k: self(v, k) and other(v, k), f"({self!r} & {other!r})")

    def __or__(self, other: Predicate) -> Predicate:
        return Predicate(lambda v, k: self(v, k) or other(v, k), f"({self!r} | {other!r})")

    def __invert__(self) -> Predicate:
        return Predicate(lambda v, k: not self(v, k), f"~{self!r}")

    def __repr__(self) -> str:
        return self._name or f"Predicate({getattr(self._fn, '__name__', 'fn')})"


class JoinSelector:
    """(outer_value, inner_value, outer_key, inner_key) -> anything"""
    __slots__ = ('_fn', '_name')

    def __init__(self, fn: JoinFunc, name: Optional[str] = None):
        self._fn = fn
        self._name = name

    def __call__(self, outer_value: Any, inner_value: Any, outer_key: Any, inner_key: Any) -> Any:
        return self._fn(outer_value, inner_value, outer_key, inner_key)

    def __repr__(self) -> str:
        return f"JoinSelector({self._name or getattr(self._fn, '__name__', 'fn')})"


class Comparer:
    """
    three-way comparison of two values. keys are accepted so projections can
    look at them; the plain comparer ignores them.
    """
    __slots__ = ('_fn',)

    def __init__(self, fn: CompareFunc):
        self._fn = fn

    def __call__(self, x: Any, y: Any, key_x: Any = None, key_y: Any = None) -> int:
        return self._fn(x, y)

    def project(self, selector: Selector) -> ProjectionComparer:
        return ProjectionComparer(selector, self)

    def reverse(self) -> ReverseComparer:
        return ReverseComparer(self)

    def then(self, tie_break: Comparer) -> ChainedComparer:
        return ChainedComparer((self, tie_break))

    def __repr__(self) -> str:
        return f"Comparer({getattr(self._fn, '__name__', 'fn')})"


class ProjectionComparer(Comparer):
    """compare selector(value, key) instead of the value itself"""
    __slots__ = ('_selector', '_inner')

    def __init__(self, selector: Selector, inner: Comparer):
        self._selector = selector
        self._inner = inner

    def __call__(self, x: Any, y: Any, key_x: Any = None, key_y: Any = None) -> int:
        return self._inner(self._selector(x, key_x), self._selector(y, key_y))

    def __repr__(self) -> str:
        return f"ProjectionComparer({self._selector!r}, {self._inner!r})"


class ReverseComparer(Comparer):
    __slots__ = ('_inner',)

    def __init__(self, inner: Comparer):
        self._inner = inner

    def __call__(self, x: Any, y: Any, key_x: Any = None, key_y: Any = None) -> int:
        return -self._inner(x, y, key_x, key_y)

    def __repr__(self) -> str:
        return f"ReverseComparer({self._inner!r})"


class ChainedComparer(Comparer):
    """primary comparer first, later ones only break ties"""
    __slots__ = ('_comparers',)

    def __init__(self, comparers: TSequence[Comparer]):
        self._comparers = tuple(comparers)

    @property
    def comparers(self) -> tuple:
        return self._comparers

    def then(self, tie_break: Comparer) -> ChainedComparer:
        return ChainedComparer(self._comparers + (tie_break,))

    def __call__(self, x: Any, y: Any, key_x: Any = None, key_y: Any = None) -> int:
        for comparer in self._comparers:
            result = comparer(x, y, key_x, key_y)
            if result != 0:
                return result
        return 0

    def __repr__(self) -> str:
        return f"ChainedComparer({len(self._comparers)} levels)"


class EqualityComparer:
    """
    equals(x, y) -> bool plus hash(x) -> hashable bucket key.
    equal values must land in the same bucket; buckets may be shared by unequal values.
    """
    __slots__ = ('_equals', '_hash')

    def __init__(self, equals: Callable[[Any, Any], bool], hash_func: Callable[[Any], Hashable]):
        self._equals = equals
        self._hash = hash_func

    def equals(self, x: Any, y: Any) -> bool:
        return bool(self._equals(x, y))

    def hash(self, value: Any) -> Hashable:
        return self._hash(value)

    @classmethod
    def by_key(cls, key_func: Callable[[Any], Any]) -> EqualityComparer:
        """values are equal when their projected keys are equal under the default equality"""
        return cls(lambda x, y: default_equals(key_func(x), key_func(y)),
                   lambda x: default_hash(key_func(x)))

    def __repr__(self) -> str:
        return f"EqualityComparer({getattr(self._equals, '__name__', 'fn')})"


# --- defaults ---

VALUE_SELECTOR = Selector(lambda value, key: value, 'value')
KEY_SELECTOR = Selector(lambda value, key: key, 'key')
ALWAYS_TRUE = Predicate(lambda value, key: True, 'always')
VALUE_JOIN_SELECTOR = JoinSelector(lambda outer_value, inner_value, outer_key, inner_key: inner_value, 'inner_value')
KEY_JOIN_SELECTOR = JoinSelector(lambda outer_value, inner_value, outer_key, inner_key: outer_key, 'outer_key')
DEFAULT_COMPARER = Comparer(default_compare)
DEFAULT_EQUALITY = EqualityComparer(default_equals, default_hash)
