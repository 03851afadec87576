#!/usr/bin/env python3
"""
Tests for the built-in stage catalogue.
"""

import re
import math
import unittest

from rq_pipeline import Pipeline, PipelineConfig


def run(values, *steps):
    return Pipeline.from_iterable(values, *steps).run()


USERS = [
    {"u": "b", "g": 36, "a": True},
    {"u": "f", "g": 40, "a": False},
]

PEOPLE = [
    {"u": "f", "g": 48},
    {"u": "b", "g": 36},
    {"u": "f", "g": 40},
    {"u": "b", "g": 34},
]


class TestStreamingStages(unittest.TestCase):
    """Element-at-a-time stages."""

    def test_select(self):
        self.assertEqual(run([{"a": {"b": {"c": 3}}}], ("select", "/a/b")), [{"c": 3}])
        self.assertEqual(run([{"a": {"b": {"c": 3}}}], ("select", "/a/x")), [])
        self.assertEqual(run([{"a": [10, 20]}], ("select", "/a/1")), [20])
        self.assertEqual(run([{"a": [10, 20]}], ("select", "/a/-1")), [])
        self.assertEqual(run([{"a": [10, 20]}], ("select", "/a/+1")), [])

    def test_modify(self):
        value = {"a": {"b": 2, "c": True}}
        self.assertEqual(run([value], ("modify", "/a/b", lambda n: n + 2)),
                         [{"a": {"b": 4, "c": True}}])
        self.assertEqual(run([{"a": {"b": 2}}], ("modify", "/a/x", lambda n: n + 2)),
                         [{"a": {"b": 2}}])
        self.assertEqual(run([{"a": [1, 2]}], ("modify", "/a/-1", lambda n: n + 2)),
                         [{"a": [1, 2]}])

    def test_spread(self):
        self.assertEqual(run([[1, 2], [3, 4], 5], "spread"), [1, 2, 3, 4, 5])

    def test_map(self):
        self.assertEqual(run([4, 8], ("map", lambda x: x * x)), [16, 64])
        self.assertEqual(run([4, 8], ("map", lambda x, i: x + i)), [4, 9])
        self.assertEqual(run([{"u": "b"}, {"u": "f"}], ("map", "u")), ["b", "f"])

    def test_filter_shorthands(self):
        self.assertEqual(run(["a", "ab", "abc"], ("filter", lambda s, i: i % 2 == 0)), ["a", "abc"])
        self.assertEqual(run(USERS, ("filter", {"g": 36, "a": True})), [USERS[0]])
        self.assertEqual(run(USERS, ("filter", ["a", False])), [USERS[1]])
        self.assertEqual(run(USERS, ("filter", "a")), [USERS[0]])

    def test_reject_and_compact(self):
        self.assertEqual(run(USERS, ("reject", "a")), [USERS[1]])
        self.assertEqual(run([0, 1, False, 2, "", 3, None, math.nan], "compact"), [1, 2, 3])

    def test_take(self):
        self.assertEqual(run([1, 2, 3], "take"), [1])
        self.assertEqual(run([1, 2, 3], ("take", 2)), [1, 2])
        self.assertEqual(run([1, 2, 3], ("take", 5)), [1, 2, 3])
        self.assertEqual(run([1, 2, 3], ("take", 0)), [])

    def test_drop(self):
        self.assertEqual(run([1, 2, 3], "drop"), [2, 3])
        self.assertEqual(run([1, 2, 3], ("drop", 2)), [3])
        self.assertEqual(run([1, 2, 3], ("drop", 5)), [])
        self.assertEqual(run([1, 2, 3], ("drop", 0)), [1, 2, 3])

    def test_take_while_and_drop_while(self):
        users = [{"u": "b", "a": False}, {"u": "f", "a": False}, {"u": "p", "a": True}]
        self.assertEqual(run(users, ("take_while", lambda o: not o["a"])), users[:2])
        self.assertEqual(run(users, ("takeWhile", "a")), [])
        self.assertEqual(run(users, ("drop_while", lambda o: not o["a"])), users[2:])
        self.assertEqual(run([1, 2, 3, 1], ("drop_while", lambda x: x < 2)), [2, 3, 1])

    def test_chunk(self):
        letters = ["a", "b", "c", "d"]
        self.assertEqual(run(letters, "chunk"), [["a"], ["b"], ["c"], ["d"]])
        self.assertEqual(run(letters, ("chunk", 2)), [["a", "b"], ["c", "d"]])
        self.assertEqual(run(letters, ("chunk", 3)), [["a", "b", "c"], ["d"]])
        self.assertEqual(run(letters, ("chunk", -1)), [])
        self.assertEqual(run(letters, ("chunk", 0)), [])

    def test_every_some_find(self):
        self.assertEqual(run([True, 1, None, "yes"], ("every", bool)), [False])
        self.assertEqual(run([1, 2, 3], ("all", lambda x, i: i + 1 == x)), [True])
        self.assertEqual(run([None, 0, "yes", False], ("some", bool)), [True])
        self.assertEqual(run([5, 1, 8], ("any", lambda x, i: i == x)), [True])
        self.assertEqual(run([], "every"), [True])
        self.assertEqual(run([], "some"), [False])
        self.assertEqual(run(USERS, ("find", ["a", False])), [USERS[1]])
        self.assertEqual(run(USERS, ("find", {"u": "z"})), [])

    def test_comparisons(self):
        self.assertEqual(run([2, 3], ("eq", 2)), [True, False])
        self.assertEqual(run(["a", "b"], ("eq", "a")), [True, False])
        self.assertEqual(run([{}], ("eq", {})), [False])
        self.assertEqual(run([math.nan], ("eq", math.nan)), [True])
        self.assertEqual(run([{"a": [1]}], ("is_equal", {"a": [1]})), [True])
        self.assertEqual(run([1, 2, 3], ("gt", 2)), [False, False, True])
        self.assertEqual(run([1, 2, 3], ("gte", 2)), [False, True, True])
        self.assertEqual(run([1, 2, 3], ("lt", 2)), [True, False, False])
        self.assertEqual(run([1, 2, 3], ("lte", 2)), [True, True, False])
        self.assertEqual(run(["a", "c"], ("gt", "b")), [False, True])

    def test_predicates_returning_python_objects(self):
        words = ["apple", "bob", "avocado"]
        self.assertEqual(run(words, ("filter", lambda s: re.match("a", s))), ["apple", "avocado"])
        self.assertEqual(run(words, ("reject", lambda s: re.match("a", s))), ["bob"])
        self.assertEqual(run(words, ("take_while", lambda s: re.match("a", s))), ["apple"])
        self.assertEqual(run(words, ("some", lambda s: re.search("v", s))), [True])
        self.assertEqual(run([1, 2, 3], ("find", lambda v: {v} & {2})), [2])
        self.assertEqual(run([1, 2, 3], ("every", lambda v: {v} & {2})), [False])

    def test_comparisons_coerce_numeric_strings_strictly(self):
        self.assertEqual(run(["1_000", "inf", "nan"], ("gt", 999)), [False, False, False])
        self.assertEqual(run(["1000", "Infinity", "0x10"], ("gt", 15)), [True, True, True])


class TestBulkStages(unittest.TestCase):
    """Stages that materialize their whole input."""

    def setUp(self):
        PipelineConfig.reset_defaults()

    def tearDown(self):
        PipelineConfig.reset_defaults()

    def test_collect_and_count(self):
        self.assertEqual(run([True, [], 1], "collect"), [[True, [], 1]])
        self.assertEqual(run([], "collect"), [[]])
        self.assertEqual(run([6.1, 4.2, 6.3], "count"), [3])
        self.assertEqual(run(["one", "two"], "size"), [2])

    def test_sort(self):
        self.assertEqual(run([3, 1, 2], "sort"), [1, 2, 3])
        self.assertEqual(run([None, "b", 2, True, "a", 1], "sort"), [True, 1, 2, "a", "b", None])

    def test_sort_by(self):
        self.assertEqual(run(PEOPLE, ("sort_by", ["u", "g"])),
                         [PEOPLE[3], PEOPLE[1], PEOPLE[2], PEOPLE[0]])
        self.assertEqual(run(PEOPLE, ("sortBy", lambda o: o["u"])),
                         [PEOPLE[1], PEOPLE[3], PEOPLE[0], PEOPLE[2]])

    def test_order_by(self):
        self.assertEqual(run(PEOPLE, ("order_by", ["u", "g"], ["asc", "desc"])),
                         [PEOPLE[1], PEOPLE[3], PEOPLE[0], PEOPLE[2]])
        self.assertEqual(run([1, 3, 2], ("orderBy", None, "desc")), [3, 2, 1])

    def test_uniq(self):
        self.assertEqual(run([2, 1, 2], "uniq"), [2, 1])
        self.assertEqual(run([0, -0.0, 1, 1.0, math.nan, math.nan], "uniq")[:2], [0, 1])
        self.assertEqual(run([2.1, 1.2, 2.3], ("uniq_by", math.floor)), [2.1, 1.2])
        self.assertEqual(run([{"x": 1}, {"x": 2}, {"x": 1}], ("uniqBy", "x")), [{"x": 1}, {"x": 2}])

    def test_tuple_keys(self):
        values = [{"a": 2, "b": 1}, {"a": 1, "b": 2}, {"a": 2, "b": 0}]
        self.assertEqual(run(values, ("sort_by", lambda u: (u["a"], u["b"]))),
                         [values[1], values[2], values[0]])
        self.assertEqual(run(values, ("order_by", lambda u: (u["a"], u["b"]), "desc")),
                         [values[0], values[2], values[1]])
        self.assertEqual(run(values, ("uniq_by", lambda u: (u["a"],))), values[:2])
        self.assertEqual(run(values, ("count_by", lambda u: (u["a"],))), [{"(2,)": 2, "(1,)": 1}])

    def test_uniq_keeps_distinct_maps(self):
        # SameValueZero: separately built maps are different values
        self.assertEqual(run([{"a": 1}, {"a": 1}], "uniq"), [{"a": 1}, {"a": 1}])

    def test_flatten_family(self):
        values = [1, [2, [3, [4]], 5]]
        self.assertEqual(run(values, "flatten"), [1, 2, [3, [4]], 5])
        self.assertEqual(run(values, "flatten_deep"), [1, 2, 3, 4, 5])
        self.assertEqual(run(values, ("flatten_depth", 1)), [1, 2, [3, [4]], 5])
        self.assertEqual(run(values, ("flattenDepth", 2)), [1, 2, 3, [4], 5])

    def test_slicing(self):
        self.assertEqual(run([1, 2, 3], "reverse"), [3, 2, 1])
        self.assertEqual(run([1, 2, 3], "take_right"), [3])
        self.assertEqual(run([1, 2, 3], ("take_right", 2)), [2, 3])
        self.assertEqual(run([1, 2, 3], ("take_right", 0)), [])
        self.assertEqual(run([1, 2, 3], "drop_right"), [1, 2])
        self.assertEqual(run([1, 2, 3], ("dropRight", 5)), [])
        self.assertEqual(run([1, 2, 3], ("drop_right", 0)), [1, 2, 3])

    def test_element_access(self):
        self.assertEqual(run([1, 2, 3], "head"), [1])
        self.assertEqual(run([], "head"), [None])
        self.assertEqual(run([1, 2, 3], "last"), [3])
        self.assertEqual(run(["a", "b", "c", "d"], ("nth", 1)), ["b"])
        self.assertEqual(run(["a", "b", "c", "d"], ("nth", -2)), ["c"])
        self.assertEqual(run(["a"], ("nth", 4)), [None])

    def test_set_operations(self):
        self.assertEqual(run([2, 1], ("difference", [2, 3])), [1])
        self.assertEqual(run([2], ("union", [1, 2])), [2, 1])

    def test_grouping(self):
        self.assertEqual(run([6.1, 4.2, 6.3], ("group_by", math.floor)),
                         [{"6": [6.1, 6.3], "4": [4.2]}])
        self.assertEqual(run([6.1, 4.2, 6.3], ("countBy", math.floor)), [{"4": 1, "6": 2}])
        self.assertEqual(run(["one", "two", "three"], ("count_by", len)), [{"3": 2, "5": 1}])

    def test_statistics(self):
        self.assertEqual(run([4, 2, 8, 6], "sum"), [20])
        self.assertEqual(run([4, 2, 8, 6], "mean"), [5])
        self.assertEqual(run([], "mean"), [None])
        self.assertEqual(run([4, 2, 8, 6], "min"), [2])
        self.assertEqual(run([4, 2, 8, 6], "max"), [8])
        self.assertEqual(run([], "max"), [None])

    def test_random_bulk_stages(self):
        PipelineConfig.set_defaults(random_seed=7)
        shuffled = run(list(range(20)), "shuffle")
        self.assertEqual(sorted(shuffled), list(range(20)))

        PipelineConfig.set_defaults(random_seed=7)
        self.assertEqual(run(list(range(20)), "shuffle"), shuffled)

        sample = run([1, 2, 3], "sample")[0]
        self.assertIn(sample, [1, 2, 3])
        picked = run([1, 2, 3], ("sample_size", 2))[0]
        self.assertEqual(len(picked), 2)
        self.assertTrue(set(picked) <= {1, 2, 3})
        self.assertEqual(sorted(run([1, 2, 3], ("sampleSize", 4))[0]), [1, 2, 3])


class TestGeneratorStages(unittest.TestCase):
    """Unbounded generators bounded downstream."""

    def setUp(self):
        PipelineConfig.reset_defaults()

    def tearDown(self):
        PipelineConfig.reset_defaults()

    def test_random_integers(self):
        result = Pipeline.build([("random", 0, 5), ("take", 50)]).run()
        self.assertEqual(len(result), 50)
        self.assertTrue(all(isinstance(x, int) and 0 <= x <= 5 for x in result))

    def test_random_floats(self):
        result = Pipeline.build([("random", 1.2, 1.5), ("take", 20)]).run()
        self.assertTrue(all(isinstance(x, float) and 1.2 <= x <= 1.5 for x in result))

        result = Pipeline.build([("random", 5, True), ("take", 20)]).run()
        self.assertTrue(all(isinstance(x, float) and 0 <= x <= 5 for x in result))

    def test_random_is_reproducible_with_seed(self):
        PipelineConfig.set_defaults(random_seed=123)
        first = Pipeline.build([("random", 0, 1000), ("take", 10)]).run()
        PipelineConfig.set_defaults(random_seed=123)
        second = Pipeline.build([("random", 0, 1000), ("take", 10)]).run()
        self.assertEqual(first, second)

    def test_now_is_monotonic_enough(self):
        first, second = Pipeline.build(["now", ("take", 2)]).run()
        self.assertLessEqual(first, second)


if __name__ == "__main__":
    unittest.main()
