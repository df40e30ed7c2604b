import warnings

import numpy as np
import pandas as pd

import suite
from dgen import from_schema
from kinqy import (
    Q, Sequence, Engine, from_, zero, range as krange, repeat, cycle,
    InvalidSpecification, IndexOutOfRange
)

test = suite.test
assert_that = suite.assert_that
assert_raises = suite.assert_raises

# test data schemas
person_schema = {
    'id': ('pyint', {'min_value': 1, 'max_value': 100}),
    'name': 'word',
    'age': ('pyint', {'min_value': 18, 'max_value': 65}),
    'department': {'_qen_provider': 'choice', 'from': ['eng', 'sales', 'hr', 'marketing']},
}

# helper data
numbers = Q(list(krange(1, 11)))  # 1 through 10
words = Q(['apple', 'banana', 'cherry', 'date', 'elderberry'])
nested_data = Q([[1, 2], [3, 4, 5], [], [6]])


# --- construction ---

@test("from_ keys lists by position")
def test_from_list():
    assert_that(words.to.pairs()[:2] == [(0, 'apple'), (1, 'banana')], "list keys should be 0, 1, ...")


@test("from_ keeps mapping keys")
def test_from_mapping():
    pairs = from_({'a': 1, 'b': 2}).to.pairs()
    assert_that(pairs == [('a', 1), ('b', 2)], "dict keys should be preserved")


@test("from_ returns an existing sequence unchanged")
def test_from_sequence():
    assert_that(from_(words) is words, "no re-wrapping")


@test("from_ reads numpy arrays and pandas objects")
def test_from_numpy_pandas():
    assert_that(from_(np.array([3, 4])).to.pairs() == [(0, 3), (1, 4)], "array elements keyed by position")
    series = pd.Series([10, 20], index=['x', 'y'])
    assert_that(from_(series).to.pairs() == [('x', 10), ('y', 20)], "series index becomes keys")
    frame = pd.DataFrame({'a': [1, 2], 'b': [3, 4]}, index=['r1', 'r2'])
    rows = from_(frame).to.pairs()
    assert_that(rows == [('r1', {'a': 1, 'b': 3}), ('r2', {'a': 2, 'b': 4})], "one dict per row")


@test("from_ over a generator is single pass")
def test_from_generator():
    seq = from_(x * 2 for x in [1, 2, 3])
    assert_that(seq.to.list() == [2, 4, 6], "first pass sees everything")
    assert_that(seq.to.list() == [], "second pass finds the generator exhausted")


@test("from_ rejects non-iterables")
def test_from_invalid():
    assert_raises(InvalidSpecification, lambda: from_(42))


@test("zero is empty")
def test_zero():
    assert_that(zero().to.list() == [], "zero should be empty")
    assert_that(zero().count() == 0, "zero should count 0")


# --- select / where ---

@test("select transforms values and keeps keys")
def test_select_basic():
    squares = numbers.select(lambda x: x * x)
    assert_that(squares.to.list() == [1, 4, 9, 16, 25, 36, 49, 64, 81, 100], "should square all numbers")
    assert_that(squares.to.keys() == list(krange(0, 10)), "keys unchanged")


@test("select computes keys independently")
def test_select_keys():
    result = words.select(lambda w, k: k, lambda w: w[0]).to.pairs()
    assert_that(result[0] == ('a', 0) and result[1] == ('b', 1), "key from first letter, value from key")


@test("select accepts key names and indexes")
def test_select_field_specs():
    people = Q([{'name': 'ann', 'tags': ['x', 'y']}, {'name': 'bob', 'tags': ['z']}])
    assert_that(people.select('name').to.list() == ['ann', 'bob'], "string spec reads a mapping key")
    assert_that(Q([(1, 'a'), (2, 'b')]).select(1).to.list() == ['a', 'b'], "int spec reads an index")


@test("where filters and keeps original keys")
def test_where_basic():
    evens = numbers.where(lambda x: x % 2 == 0)
    assert_that(evens.to.list() == [2, 4, 6, 8, 10], "should filter even numbers")
    assert_that(evens.to.keys() == [1, 3, 5, 7, 9], "keys come from the source")


@test("where can look at keys")
def test_where_key():
    assert_that(words.where(lambda w, k: k >= 3).to.list() == ['date', 'elderberry'], "filter by key")


@test("where with data from a schema")
def test_where_schema():
    people = from_schema(person_schema, seed=42).take(20)
    senior = people.where(lambda p: p['age'] > 40).to.list()
    assert_that(all(p['age'] > 40 for p in senior), "all should be over 40")
    assert_that(len(people.to.list()) == 20, "take bounds the generated stream")


@test("schema sequences replay the same records")
def test_schema_replay():
    people = from_schema(person_schema, seed=7).take(5)
    assert_that(people.to.list() == people.to.list(), "each pass re-seeds the generator")


@test("failing strategies only fail on iteration")
def test_deferred_errors():
    def boom(value):
        raise RuntimeError("boom")
    filtered = numbers.where(boom)
    assert_raises(RuntimeError, lambda: filtered.to.list())


@test("nothing is pulled before iteration")
def test_laziness():
    pulled = []
    seq = numbers.each(lambda v: pulled.append(v)).select(lambda v: v + 1).where(lambda v: v > 3)
    assert_that(pulled == [], "building the chain pulls nothing")
    seq.first()
    assert_that(pulled == [1, 2, 3], "first() pulls only what it needs")


# --- take / drop ---

@test("take and drop slice by position")
def test_take_drop():
    assert_that(numbers.take(3).to.list() == [1, 2, 3], "take 3")
    assert_that(numbers.drop(7).to.list() == [8, 9, 10], "drop 7")
    assert_that(numbers.drop(7).to.keys() == [7, 8, 9], "drop keeps keys")


@test("take of zero or less is empty")
def test_take_zero():
    assert_that(numbers.take(0).to.list() == [], "take(0) empty")
    assert_that(numbers.take(-2).to.list() == [], "take(-2) empty")


@test("drop beyond the length is empty")
def test_drop_all():
    assert_that(numbers.drop(10).to.list() == [], "drop(len) empty")
    assert_that(numbers.drop(50).to.list() == [], "drop past end empty")
    assert_that(numbers.drop(-1).to.list() == numbers.to.list(), "negative drop keeps everything")


@test("take short-circuits an infinite source")
def test_take_infinite():
    pulled = []
    result = krange(0).each(lambda v: pulled.append(v)).take(4).to.list()
    assert_that(result == [0, 1, 2, 3], "first four naturals")
    assert_that(len(pulled) == 4, "no extra element is pulled")


@test("take_while and drop_while split at the first failure")
def test_take_drop_while():
    data = Q([1, 2, 5, 1, 7])
    assert_that(data.take_while(lambda x: x < 3).to.list() == [1, 2], "take_while stops at 5")
    assert_that(data.drop_while(lambda x: x < 3).to.list() == [5, 1, 7], "drop_while starts at 5")
    assert_that(krange(1).take_while(lambda x: x * x < 30).to.list() == [1, 2, 3, 4, 5],
                "take_while bounds an infinite range")


# --- concat / select_many / zip ---

@test("concat keeps duplicate keys")
def test_concat():
    joined = Q(['a', 'b']).concat(['c'])
    assert_that(joined.to.pairs() == [(0, 'a'), (1, 'b'), (0, 'c')], "keys are not renumbered")
    assert_that(joined.renum().to.keys() == [0, 1, 2], "renum makes keys sequential")


@test("select_many flattens inner sequences")
def test_select_many_basic():
    flattened = nested_data.select_many(lambda x: x)
    assert_that(flattened.to.list() == [1, 2, 3, 4, 5, 6], "should flatten all sublists")
    assert_that(flattened.to.keys() == [0, 1, 0, 1, 2, 0], "inner keys come through as-is")


@test("select_many with result selectors")
def test_select_many_result():
    data = Q({'ann': ['a', 'b'], 'bob': ['c']})
    result = data.select_many(lambda tags: tags,
                              lambda owner, tag, owner_key, tag_key: f"{owner_key}:{tag}",
                              lambda owner, tag, owner_key, tag_key: tag_key).to.pairs()
    assert_that(result == [(0, 'ann:a'), (1, 'ann:b'), (0, 'bob:c')], "combined outer and inner")


@test("select_many keys results by the outer key unless told otherwise")
def test_select_many_default_key():
    data = Q({'ann': ['a', 'b'], 'bob': ['c']})
    result = data.select_many(lambda tags: tags, lambda owner, tag: tag.upper()).to.pairs()
    assert_that(result == [('ann', 'A'), ('ann', 'B'), ('bob', 'C')], "outer keys, as join does")
    only_key = data.select_many(lambda tags: tags, result_key_selector=lambda o, t, ok, ik: ik).to.pairs()
    assert_that(only_key == [(0, 'a'), (1, 'b'), (0, 'c')], "inner values by default")


@test("zip stops at the shorter side")
def test_zip():
    pairs = Q([1, 2, 3]).zip(['a', 'b'], lambda n, s: f"{n}{s}").to.list()
    assert_that(pairs == ['1a', '2b'], "two results")
    with_inf = krange(10).zip(['x', 'y', 'z'], lambda n, s: (n, s))
    assert_that(not with_inf.is_infinite, "bounded by the finite side")
    assert_that(with_inf.to.list() == [(10, 'x'), (11, 'y'), (12, 'z')], "zip with infinite range")


# --- reverse / renum ---

@test("reverse twice is the identity")
def test_reverse_twice():
    seq = Q({'a': 1, 'b': 2, 'c': 3})
    assert_that(seq.reverse().to.pairs() == [('c', 3), ('b', 2), ('a', 1)], "reversed with keys")
    assert_that(seq.reverse().reverse().to.pairs() == seq.to.pairs(), "double reverse restores order")


@test("renum re-keys from zero")
def test_renum():
    assert_that(numbers.where(lambda x: x > 8).renum().to.pairs() == [(0, 9), (1, 10)], "sequential keys")


# --- generators ---

@test("range is exclusive and supports negative steps")
def test_range():
    assert_that(krange(0, 5).to.list() == [0, 1, 2, 3, 4], "0..4")
    assert_that(krange(5, 0, -2).to.list() == [5, 3, 1], "descending")
    assert_that(krange(0, 1, 0.25).to.list() == [0, 0.25, 0.5, 0.75], "float steps")
    assert_that(krange(3).is_infinite, "no stop means infinite")


@test("range rejects bad arguments")
def test_range_invalid():
    assert_raises(InvalidSpecification, lambda: krange('a'))
    assert_raises(InvalidSpecification, lambda: krange(0, 10, 0))


@test("repeat with and without a count")
def test_repeat():
    assert_that(repeat('x', 3).to.list() == ['x', 'x', 'x'], "three copies")
    assert_that(repeat('x', 0).to.list() == [], "zero copies")
    assert_that(repeat('x').take(2).to.list() == ['x', 'x'], "infinite repeat bounded by take")


@test("cycle repeats pairs with their keys")
def test_cycle():
    cycled = cycle(['a', 'b']).take(5)
    assert_that(cycled.to.list() == ['a', 'b', 'a', 'b', 'a'], "wraps around")
    assert_that(cycled.to.keys() == [0, 1, 0, 1, 0], "keys come from the source")
    assert_that(cycle(iter([1, 2])).take(4).to.list() == [1, 2, 1, 2], "single-pass sources cycle too")
    assert_that(cycle([]).to.list() == [], "empty source gives empty sequence")


# --- infinite safety ---

@test("buffering combinators reject infinite sequences")
def test_infinite_rejected():
    assert_raises(InvalidSpecification, lambda: krange(0).reverse())
    assert_raises(InvalidSpecification, lambda: repeat(1).order_by())
    assert_raises(InvalidSpecification, lambda: cycle([1]).distinct())
    assert_raises(InvalidSpecification, lambda: krange(0).group_by(lambda x: x % 2))
    assert_raises(InvalidSpecification, lambda: krange(0).memoize())
    assert_raises(InvalidSpecification, lambda: krange(0).to.list())


@test("a warning engine lets buffering combinators through")
def test_engine_warn():
    engine = Engine(on_infinite='warn')
    with warnings.catch_warnings(record=True) as caught:
        warnings.simplefilter("always")
        seq = engine.range(0).reverse()
    assert_that(isinstance(seq, Sequence), "combinator still built")
    assert_that(any(issubclass(w.category, RuntimeWarning) for w in caught), "warning was emitted")


@test("engine entry points carry the engine")
def test_engine_entry_points():
    engine = Engine()
    seq = engine.from_([1, 2, 3]).select(lambda x: x + 1)
    assert_that(seq.engine is engine, "derived sequences keep their engine")
    assert_that(engine.zero().to.list() == [], "zero")
    assert_that(engine.repeat(0, 2).to.list() == [0, 0], "repeat")
    assert_that(engine.cycle([1]).take(2).to.list() == [1, 1], "cycle")
    assert_raises(InvalidSpecification, lambda: Engine(on_infinite='ignore'))


# --- cursor ---

@test("cursor walks pairs with rewind/valid/current/key/next")
def test_cursor():
    cursor = Q({'a': 1, 'b': 2}).cursor()
    seen = []
    while cursor.valid():
        seen.append((cursor.key(), cursor.current()))
        cursor.next()
    assert_that(seen == [('a', 1), ('b', 2)], "all pairs in order")
    assert_raises(IndexOutOfRange, cursor.current)
    cursor.rewind()
    assert_that(cursor.valid() and cursor.current() == 1, "rewind starts over")


@test("cursor on an empty sequence is never valid")
def test_cursor_empty():
    assert_that(not zero().cursor().valid(), "empty cursor")


@test("operation mixins load from the extensions directory")
def test_extension_modules():
    from kinqy.extensions.core import _CoreOperations
    from kinqy.extensions.terminal import TerminalAccessor
    assert_that(issubclass(Sequence, _CoreOperations), "core operations mixed into Sequence")
    assert_that(isinstance(Q([1]).to, TerminalAccessor), "accessor wired on construction")


if __name__ == "__main__":
    suite.run(title="kinqy core operations test suite")
