import suite
from dgen import from_schema
from kinqy import Q, OrderedSequence, ChainedComparer, repeat, InvalidSpecification

test = suite.test
assert_that = suite.assert_that
assert_raises = suite.assert_raises

employee_schema = {
    'name': 'first_name',
    'age': ('pyint', {'min_value': 20, 'max_value': 60}),
    'department': {'_qen_provider': 'choice', 'from': ['eng', 'sales', 'hr']},
}

people = Q([
    {'name': 'cy', 'dept': 'eng', 'age': 40},
    {'name': 'ann', 'dept': 'hr', 'age': 30},
    {'name': 'bob', 'dept': 'eng', 'age': 25},
    {'name': 'dee', 'dept': 'hr', 'age': 30},
])


@test("order_by is stable for equal keys")
def test_order_by_stable():
    source = Q([{'k': 1, 'v': 'a'}, {'k': 1, 'v': 'b'}])
    assert_that(source.order_by('k').select('v').to.list() == ['a', 'b'], "source order kept for ties")


@test("order_by sorts ascending and keeps keys")
def test_order_by_basic():
    ordered = Q({'x': 3, 'y': 1, 'z': 2}).order_by()
    assert_that(isinstance(ordered, OrderedSequence), "ordered sequence returned")
    assert_that(ordered.to.pairs() == [('y', 1), ('z', 2), ('x', 3)], "pairs move with their keys")


@test("order_by_desc sorts descending and stays stable")
def test_order_by_desc():
    names = people.order_by_desc('age').select('name').to.list()
    assert_that(names == ['cy', 'ann', 'dee', 'bob'], "ann before dee as in the source")


@test("then_by breaks ties only")
def test_then_by():
    names = people.order_by('dept').then_by_desc('age').then_by('name').select('name').to.list()
    assert_that(names == ['cy', 'bob', 'ann', 'dee'], "dept, then age desc, then name")
    chain = people.order_by('dept').then_by('age').comparer
    assert_that(isinstance(chain, ChainedComparer) and len(chain.comparers) == 2, "two levels")


@test("order_by accepts a custom comparer")
def test_order_by_comparer():
    words = Q(['ccc', 'a', 'bb', 'dd'])
    result = words.order_by(comparer=lambda a, b: len(a) - len(b)).to.list()
    assert_that(result == ['a', 'bb', 'dd', 'ccc'], "sorted by length, ties stable")


@test("order_by can sort on keys")
def test_order_by_key():
    result = Q({'b': 1, 'a': 2, 'c': 0}).order_by(lambda v, k: k).to.list()
    assert_that(result == [2, 1, 0], "ordered by key name")


@test("default ordering handles mixed types")
def test_order_by_mixed():
    result = Q([3, 'a', None, 1.5]).order_by().to.list()
    assert_that(result == [None, 1.5, 3, 'a'], "none, numbers, strings")


@test("sorting happens again on each pass")
def test_order_by_per_pass():
    source = [3, 1]
    ordered = Q(source).order_by()
    assert_that(ordered.to.list() == [1, 3], "first pass")
    source.append(2)
    assert_that(ordered.to.list() == [1, 2, 3], "second pass sees the new element")


@test("order_by over generated records")
def test_order_by_schema():
    staff = from_schema(employee_schema, seed=3).take(30)
    ages = staff.order_by('age').select('age').to.list()
    assert_that(all(a <= b for a, b in zip(ages, ages[1:])), "ages non-decreasing")
    assert_that(len(ages) == 30, "all records kept")


@test("ordering rejects infinite sources")
def test_order_by_infinite():
    assert_raises(InvalidSpecification, lambda: repeat(1).order_by_desc())


if __name__ == "__main__":
    suite.run(title="kinqy ordering test suite")
