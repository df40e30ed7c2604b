from __future__ import annotations
import typing
import math
from functools import cmp_to_key
from typing import Any, Generic, List, Union

import numpy as np

from ..errors import EmptySequence
from ..parsers import parse_selector
from ..strategies import DEFAULT_COMPARER
from ..types import K, V, Spec

if typing.TYPE_CHECKING:
    from ..sequence import Sequence

Number = Union[int, float]


class StatsAccessor(Generic[K, V]):
    """numeric folds over the (optionally projected) values of a finite sequence"""

    def __init__(self, sequence_instance: 'Sequence[K, V]'):
        self._sequence = sequence_instance

    def _get_values(self, selector: Spec, operation: str) -> List[Any]:
        """helper to project values for an aggregate"""
        self._sequence._require_finite(operation)
        select = parse_selector(selector)
        return [select(value, key) for key, value in self._sequence.items()]

    def sum(self, selector: Spec = None) -> Number:
        """calc sum (0 for an empty sequence)"""
        values = self._get_values(selector, 'sum')
        if not values:
            return 0
        if all(isinstance(v, int) for v in values):
            # object dtype keeps python's unbounded ints instead of wrapping at int64
            return np.sum(np.asarray(values, dtype=object))
        try:
            result = np.sum(values)
            return result.item() if hasattr(result, 'item') else result
        except (TypeError, ValueError):
            return sum(values)

    def average(self, selector: Spec = None) -> float:
        """calc average"""
        values = self._get_values(selector, 'average')
        if not values:
            raise EmptySequence("cannot calculate average of empty sequence")
        return float(np.mean(values))

    def std_dev(self, selector: Spec = None) -> float:
        """population standard deviation (ddof=0, as numpy and pandas default)"""
        values = self._get_values(selector, 'std_dev')
        if not values:
            raise EmptySequence("cannot calculate standard deviation of empty sequence")
        return math.sqrt(float(np.var(values)))

    def min(self, selector: Spec = None) -> Any:
        """smallest projected value under the default ordering"""
        values = self._get_values(selector, 'min')
        if not values:
            raise EmptySequence("cannot find minimum of empty sequence")
        return min(values, key=cmp_to_key(DEFAULT_COMPARER))

    def max(self, selector: Spec = None) -> Any:
        """largest projected value under the default ordering"""
        values = self._get_values(selector, 'max')
        if not values:
            raise EmptySequence("cannot find maximum of empty sequence")
        return max(values, key=cmp_to_key(DEFAULT_COMPARER))
