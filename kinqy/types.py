import logging
from typing import TypeVar, Generic, Callable, Iterator, Any, Optional, Union, List, Tuple

from .errors import IndexOutOfRange

logger = logging.getLogger(__name__)

T = TypeVar('T')
U = TypeVar('U')
K = TypeVar('K')
V = TypeVar('V')

Pair = Tuple[K, V]
PairFunc = Callable[[], Iterator[Tuple[Any, Any]]]

# raw callables accepted by the strategy parser
SelectorFunc = Callable[[Any, Any], Any]
PredicateFunc = Callable[[Any, Any], bool]
CompareFunc = Callable[[Any, Any], int]
JoinFunc = Callable[[Any, Any, Any, Any], Any]
Accumulator = Callable[[Any, Any, Any], Any]

# anything the strategy parser can resolve: None, key name, index, strategy or callable
Spec = Union[None, str, int, Callable[..., Any], Any]


class PairCache(Generic[K, V]):
    """
    append-only cache over a single forward-only enumeration.
    every reader walks the buffer by position and pulls from the source only
    when it runs past the end, so interleaved readers share cache growth
    without skipping or duplicating pairs.
    """

    def __init__(self, pair_func: PairFunc):
        self._source_func = pair_func
        self._cache: List[Tuple[K, V]] = []
        self._source_iterator: Optional[Iterator[Tuple[K, V]]] = None
        self._is_fully_enumerated = False

    @property
    def is_fully_enumerated(self) -> bool:
        return self._is_fully_enumerated

    def __len__(self) -> int:
        """number of pairs cached so far (does not force enumeration)"""
        return len(self._cache)

    def _pull(self) -> bool:
        """pull one pair from the source into the cache. false once the source is done."""
        if self._is_fully_enumerated:
            return False
        if self._source_iterator is None:
            self._source_iterator = iter(self._source_func())
        try:
            pair = next(self._source_iterator)
        except StopIteration:
            self._is_fully_enumerated = True
            self._source_iterator = None
            logger.debug("memo cache complete with %d pairs", len(self._cache))
            return False
        self._cache.append(pair)
        return True

    def __iter__(self) -> Iterator[Tuple[K, V]]:
        position = 0
        while True:
            if position < len(self._cache):
                yield self._cache[position]
                position += 1
            elif not self._pull():
                return

    def __repr__(self) -> str:
        state = "complete" if self._is_fully_enumerated else "partial"
        return f"PairCache(cached={len(self._cache)}, {state})"


class Cursor(Generic[K, V]):
    """
    forward cursor over a sequence: rewind / valid / current / key / next.
    lets terminal consumers drive a sequence without touching its internals.
    """

    def __init__(self, pairs: Callable[[], Iterator[Tuple[K, V]]]):
        self._pairs = pairs
        self._iterator: Optional[Iterator[Tuple[K, V]]] = None
        self._pair: Optional[Tuple[K, V]] = None
        self._index = -1
        self.rewind()

    def rewind(self) -> None:
        self._iterator = iter(self._pairs())
        self._index = -1
        self.next()

    def next(self) -> None:
        if self._iterator is None:
            return
        try:
            self._pair = next(self._iterator)
            self._index += 1
        except StopIteration:
            self._iterator = None
            self._pair = None

    def valid(self) -> bool:
        return self._pair is not None

    def current(self) -> V:
        if self._pair is None:
            raise IndexOutOfRange(self._index + 1, "cursor is past the end of the sequence")
        return self._pair[1]

    def key(self) -> K:
        if self._pair is None:
            raise IndexOutOfRange(self._index + 1, "cursor is past the end of the sequence")
        return self._pair[0]

    def __repr__(self) -> str:
        return f"Cursor(position={self._index}, valid={self.valid()})"
