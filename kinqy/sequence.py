from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from functools import cmp_to_key
from typing import Any, Callable, Generic, Iterator, List, Optional, Tuple

from .config import Engine, DEFAULT_ENGINE
from .parsers import parse_comparer, parse_selector
from .strategies import Comparer, ChainedComparer, DEFAULT_COMPARER
from .types import K, V, PairFunc, Cursor, Spec

# --- combinators ---
from .extensions.core import _CoreOperations
from .extensions.ordering import _OrderingOperations
from .extensions.grouping import _GroupingOperations
from .extensions.join import _JoinOperations
from .extensions.set import _SetOperations
from .extensions.terminal import _TerminalOperations

# --- accessors ---
from .extensions.terminal import TerminalAccessor
from .extensions.stats import StatsAccessor

logger = logging.getLogger(__name__)


# --- abstract base class ---

class ISequence(ABC, Generic[K, V]):
    @abstractmethod
    def items(self) -> Iterator[Tuple[K, V]]:
        """produce the (key, value) pairs of one iteration pass"""
        pass


# --- base sequence implementation ---

class _BaseSequence(ISequence[K, V]):
    def __init__(self, pair_func: PairFunc, *, infinite: bool = False,
                 length_func: Optional[Callable[[], int]] = None,
                 engine: Optional[Engine] = None):
        """init with a function that starts a fresh pass over the pairs each time it is called"""
        self._pair_func = pair_func
        self._infinite = infinite
        self._length_func = length_func
        self._engine = engine or DEFAULT_ENGINE

    @property
    def is_infinite(self) -> bool:
        """true when the source is documented as unbounded (range/repeat/cycle without limits)"""
        return self._infinite

    @property
    def engine(self) -> Engine:
        return self._engine

    def items(self) -> Iterator[Tuple[K, V]]:
        return iter(self._pair_func())

    def keys(self) -> Iterator[K]:
        return (key for key, _ in self.items())

    def values(self) -> Iterator[V]:
        return (value for _, value in self.items())

    def __iter__(self) -> Iterator[V]:
        return self.values()

    def cursor(self) -> Cursor[K, V]:
        """forward cursor (rewind / valid / current / key / next) over this sequence"""
        return Cursor(self._pair_func)

    def _static_length(self) -> Optional[int]:
        """length when it is knowable without iterating, else None"""
        return self._length_func() if self._length_func is not None else None

    def _derive(self, pair_func: PairFunc, *, infinite: Optional[bool] = None,
                length_func: Optional[Callable[[], int]] = None) -> 'Sequence':
        """new sequence on the same engine; infinity is inherited unless overridden"""
        return Sequence(pair_func,
                        infinite=self._infinite if infinite is None else infinite,
                        length_func=length_func,
                        engine=self._engine)

    def _require_finite(self, operation: str) -> None:
        self._engine.check_finite(self, operation)

    def call(self, name: str, *args, **kwargs) -> Any:
        """invoke an extension registered on this sequence's engine"""
        return self._engine.registry.invoke(name, self, *args, **kwargs)

    def __repr__(self) -> str:
        kind = "infinite" if self._infinite else "finite"
        return f"{type(self).__name__}({kind})"


# --- main sequence class ---

class Sequence(
    _BaseSequence[K, V],
    _CoreOperations[K, V],
    _OrderingOperations[K, V],
    _GroupingOperations[K, V],
    _JoinOperations[K, V],
    _SetOperations[K, V],
    _TerminalOperations[K, V]
):
    """a lazy, linq-inspired sequence of (key, value) pairs."""

    def __init__(self, pair_func: PairFunc, *, infinite: bool = False,
                 length_func: Optional[Callable[[], int]] = None,
                 engine: Optional[Engine] = None):
        super().__init__(pair_func, infinite=infinite, length_func=length_func, engine=engine)
        # --- initialize accessors ---
        self.to = TerminalAccessor(self)
        self.stats = StatsAccessor(self)


# --- ordered sequence class ---

class OrderedSequence(Sequence[K, V]):
    """a sequence sorted on iteration by a comparer chain, open to further then_by() tie-breaks."""

    def __init__(self, source: Sequence[K, V], comparers: Tuple[Comparer, ...]):
        self._source = source
        self._comparers = tuple(comparers)
        super().__init__(self._sorted_pairs, infinite=False,
                         length_func=source._length_func, engine=source.engine)

    @property
    def comparer(self) -> ChainedComparer:
        return ChainedComparer(self._comparers)

    def _sorted_pairs(self) -> Iterator[Tuple[K, V]]:
        chain = self.comparer
        buffered = list(self._source.items())
        logger.debug("sorting %d pairs over %d comparer level(s)", len(buffered), len(self._comparers))
        # sorted() is stable, so pairs comparing equal under the whole chain keep source order
        ordered = sorted(buffered, key=cmp_to_key(lambda a, b: chain(a[1], b[1], a[0], b[0])))
        return iter(ordered)

    def _then(self, comparer: Comparer) -> OrderedSequence[K, V]:
        return OrderedSequence(self._source, self._comparers + (comparer,))

    def then_by(self, key_selector: Spec = None, comparer: Spec = None) -> OrderedSequence[K, V]:
        """secondary sort ascending"""
        selector = parse_selector(key_selector)
        return self._then(parse_comparer(comparer, DEFAULT_COMPARER).project(selector))

    def then_by_desc(self, key_selector: Spec = None, comparer: Spec = None) -> OrderedSequence[K, V]:
        """secondary sort descending"""
        selector = parse_selector(key_selector)
        return self._then(parse_comparer(comparer, DEFAULT_COMPARER).project(selector).reverse())


# --- grouping ---

class Grouping(Sequence[K, V]):
    """a group key plus the (key, value) pairs that share it; re-queryable like any sequence."""

    def __init__(self, key: Any, pairs: List[Tuple[K, V]], engine: Optional[Engine] = None):
        self._key = key
        self._pairs = tuple(pairs)
        super().__init__(lambda: iter(self._pairs), length_func=lambda: len(self._pairs), engine=engine)

    @property
    def key(self) -> Any:
        return self._key

    def __len__(self) -> int:
        return len(self._pairs)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Grouping):
            return NotImplemented
        return self._key == other._key and self._pairs == other._pairs

    __hash__ = None

    def __repr__(self) -> str:
        return f"Grouping(key={self._key!r}, items={len(self._pairs)})"
