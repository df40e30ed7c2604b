import numbers
import typing
from collections.abc import Iterator as AbstractIterator, Mapping, Sized
from itertools import count as _count, repeat as _repeat
from typing import Any, Iterable, Optional

import numpy as np
import pandas as pd

from .config import Engine
from .errors import InvalidSpecification

if typing.TYPE_CHECKING:
    from .sequence import Sequence


def from_(source: Iterable[Any], engine: Optional[Engine] = None) -> 'Sequence':
    """
    create a sequence from any iterable.
    mappings and pandas series keep their keys/index; dataframes yield one dict per row
    keyed by the index; everything else is keyed 0, 1, 2, ...
    iterators and generators are single-pass: wrap them with memoize() to replay.
    """
    from .sequence import Sequence
    if isinstance(source, Sequence):
        return source
    if isinstance(source, pd.DataFrame):
        frame = source
        return Sequence(lambda: zip(frame.index, frame.to_dict('records')),
                        length_func=lambda: len(frame), engine=engine)
    if isinstance(source, pd.Series):
        series = source
        return Sequence(lambda: iter(series.items()), length_func=lambda: len(series), engine=engine)
    if isinstance(source, np.ndarray):
        array = source
        return Sequence(lambda: enumerate(array.tolist()), length_func=lambda: len(array), engine=engine)
    if isinstance(source, Mapping):
        mapping = source
        return Sequence(lambda: iter(mapping.items()), length_func=lambda: len(mapping), engine=engine)
    if isinstance(source, AbstractIterator):
        # one shared enumeration, so a second pass continues where the first stopped
        shared = enumerate(source)
        return Sequence(lambda: shared, engine=engine)
    if isinstance(source, Iterable):
        iterable = source
        length_func = (lambda: len(iterable)) if isinstance(iterable, Sized) else None
        return Sequence(lambda: enumerate(iterable), length_func=length_func, engine=engine)
    raise InvalidSpecification(f"cannot build a sequence from {type(source).__name__}")


def zero(engine: Optional[Engine] = None) -> 'Sequence':
    """create empty sequence"""
    from .sequence import Sequence
    return Sequence(lambda: iter(()), length_func=lambda: 0, engine=engine)


def range(start, stop=None, step=1, engine: Optional[Engine] = None) -> 'Sequence':
    """
    numbers from start (inclusive) to stop (exclusive) by step, keyed 0, 1, 2, ...
    without stop the sequence is infinite.
    """
    from .sequence import Sequence
    for name, value in (('start', start), ('step', step)):
        if isinstance(value, bool) or not isinstance(value, numbers.Number):
            raise InvalidSpecification(f"range() numeric {name} expected, got {value!r}")
    if step == 0:
        raise InvalidSpecification("range() step must not be zero")
    if stop is None:
        return Sequence(lambda: enumerate(_count(start, step)), infinite=True, engine=engine)
    if isinstance(stop, bool) or not isinstance(stop, numbers.Number):
        raise InvalidSpecification(f"range() numeric stop expected, got {stop!r}")

    def bounded():
        current = start
        while (current < stop) if step > 0 else (current > stop):
            yield current
            current += step
    return Sequence(lambda: enumerate(bounded()), engine=engine)


def repeat(element: Any, count: Optional[int] = None, engine: Optional[Engine] = None) -> 'Sequence':
    """element over and over, count times or forever when count is None"""
    from .sequence import Sequence
    if count is None:
        return Sequence(lambda: enumerate(_repeat(element)), infinite=True, engine=engine)
    times = max(count, 0)
    return Sequence(lambda: enumerate(_repeat(element, times)), length_func=lambda: times, engine=engine)


def cycle(source: Iterable[Any], engine: Optional[Engine] = None) -> 'Sequence':
    """
    the pairs of source over and over, keys included. the first lap is cached, so
    single-pass sources cycle too. an empty source gives an empty sequence.
    """
    from .sequence import Sequence
    base = from_(source, engine=engine)
    if base.is_infinite:
        return base

    def cycle_pairs():
        lap = []
        for pair in base.items():
            lap.append(pair)
            yield pair
        if not lap:
            return
        while True:
            yield from lap

    empty = base._static_length() == 0
    return Sequence(cycle_pairs, infinite=not empty, engine=engine)


# --- aliases ---
from_iterable = from_
Q = from_
