from __future__ import annotations
import logging
import typing
from typing import Any, Generic, Iterable

from ..lookup import HashLookup
from ..parsers import parse_equality_comparer, parse_join_selector, parse_selector
from ..strategies import KEY_JOIN_SELECTOR, VALUE_JOIN_SELECTOR
from ..types import K, V, Spec

if typing.TYPE_CHECKING:
    from ..sequence import Sequence

logger = logging.getLogger(__name__)


class _JoinOperations(Generic[K, V]):
    def join(self: 'Sequence[K, V]', inner: Iterable[Any], outer_key_selector: Spec, inner_key_selector: Spec,
             result_value_selector: Spec, result_key_selector: Spec = None,
             equality_comparer: Spec = None) -> 'Sequence':
        """
        inner hash join. the inner side is indexed once per pass; this sequence is
        streamed and probed, so outer elements without a match produce nothing.
        result selectors receive (outer_value, inner_value, outer_key, inner_key).
        """
        from ..factories import from_
        inner_seq = from_(inner, engine=self.engine)
        inner_seq._require_finite('join')
        outer_key_of = parse_selector(outer_key_selector)
        inner_key_of = parse_selector(inner_key_selector)
        value_of = parse_join_selector(result_value_selector, VALUE_JOIN_SELECTOR)
        key_of = parse_join_selector(result_key_selector, KEY_JOIN_SELECTOR)
        comparer = parse_equality_comparer(equality_comparer)

        def join_pairs():
            lookup = HashLookup.build(inner_seq.items(), inner_key_of, comparer)
            logger.debug("join indexed %d inner keys", len(lookup))
            for outer_key, outer_value in self.items():
                matches = lookup.find(outer_key_of(outer_value, outer_key))
                if not matches:
                    continue
                for inner_key, inner_value in matches:
                    yield (key_of(outer_value, inner_value, outer_key, inner_key),
                           value_of(outer_value, inner_value, outer_key, inner_key))
        return self._derive(join_pairs)

    def group_join(self: 'Sequence[K, V]', inner: Iterable[Any], outer_key_selector: Spec,
                   inner_key_selector: Spec, result_value_selector: Spec, result_key_selector: Spec = None,
                   equality_comparer: Spec = None) -> 'Sequence':
        """
        like join, but exactly one row per outer element, paired with the Grouping of
        all matching inner pairs (empty when nothing matches). result selectors receive
        (outer_value, inner_group, outer_key, join_key).
        """
        from ..factories import from_
        from ..sequence import Grouping
        inner_seq = from_(inner, engine=self.engine)
        inner_seq._require_finite('group_join')
        outer_key_of = parse_selector(outer_key_selector)
        inner_key_of = parse_selector(inner_key_selector)
        value_of = parse_join_selector(result_value_selector, VALUE_JOIN_SELECTOR)
        key_of = parse_join_selector(result_key_selector, KEY_JOIN_SELECTOR)
        comparer = parse_equality_comparer(equality_comparer)
        engine = self.engine

        def group_join_pairs():
            lookup = HashLookup.build(inner_seq.items(), inner_key_of, comparer)
            logger.debug("group_join indexed %d inner keys", len(lookup))
            for outer_key, outer_value in self.items():
                join_key = outer_key_of(outer_value, outer_key)
                group = Grouping(join_key, lookup.find(join_key) or [], engine)
                yield (key_of(outer_value, group, outer_key, join_key),
                       value_of(outer_value, group, outer_key, join_key))
        return self._derive(group_join_pairs)
