import unittest

from hypothesis import given, settings, strategies as st

import nonvalid
from nonvalid import END, OTHER, ContextError, Marker, ProtocolError


class TestOutOfContext(unittest.TestCase):
    def test_outside_validation(self) -> None:
        cases = [
            ("value", (), "value() called outside of any context."),
            ("root", (), "root() called outside of any mapping or sequence."),
            ("up", (), "up() call navigates above any mapping or sequence."),
            ("key", (), "key() called outside of any context."),
            ("index", (), "index() called outside of any context."),
        ]
        for name, args, message in cases:
            with self.subTest(name=name):
                nv = nonvalid.instance()
                with self.assertRaises(ContextError) as ctx:
                    getattr(nv, name)(*args)
                self.assertEqual(str(ctx.exception), message)

    def test_root_callback_has_no_container(self) -> None:
        cases = [
            (lambda nv: nv.root(), "root() called outside of any mapping or sequence."),
            (lambda nv: nv.up(), "up() call navigates above any mapping or sequence."),
            (lambda nv: nv.key(), "key() called outside of any context."),
            (lambda nv: nv.index(), "index() called outside of any context."),
        ]
        for navigate, message in cases:
            with self.subTest(message=message):
                nv = nonvalid.instance()
                with self.assertRaises(ContextError) as ctx:
                    nv(5, lambda: navigate(nv))
                self.assertEqual(str(ctx.exception), message)
                self.assertIsNone(nv.error_path())

    def test_index_in_mappings(self) -> None:
        marker = Marker("m")
        for schema_key, value in (("a", {"a": 1}), (marker, {marker: 1}), (OTHER, {"b": 1})):
            with self.subTest(key=schema_key):
                nv = nonvalid.instance()
                with self.assertRaises(ContextError) as ctx:
                    nv(value, {schema_key: lambda: nv.index()})
                self.assertEqual(str(ctx.exception), "index() can be called for sequences only.")

    def test_key_in_sequences(self) -> None:
        builders = (
            lambda nv: [lambda: nv.key()],
            lambda nv: [END, lambda: nv.key()],
        )
        for build in builders:
            with self.subTest(build=build):
                nv = nonvalid.instance()
                with self.assertRaises(ContextError) as ctx:
                    nv([1], build(nv))
                self.assertEqual(str(ctx.exception), "key() can be called for mappings only.")

    def test_up_rejects_bad_levels(self) -> None:
        for levels in (-1, "1", 1.0, True):
            with self.subTest(levels=levels):
                nv = nonvalid.instance()
                with self.assertRaises(ProtocolError) as ctx:
                    nv({"a": 1}, {"a": lambda: nv.up(levels)})
                self.assertEqual(str(ctx.exception), "up() expects a non-negative integer.")


class TestLiveNavigation(unittest.TestCase):
    def test_callback_receives_value_and_key(self) -> None:
        marker = Marker("m")
        seen = []

        def record(value, key):
            seen.append((value, key))
            return False

        nv = nonvalid.instance()
        self.assertIs(nv({"x": 3, marker: "y", "z": [4, 5]}, {
            "x": record,
            marker: record,
            OTHER: lambda: nv(nv.value(), [END, record]),
        }), False)
        self.assertEqual(seen, [(3, "x"), ("y", marker), (4, 0), (5, 1)])

    def test_key_and_index(self) -> None:
        marker = Marker("m")
        keys = []
        nv = nonvalid.instance()
        schema = {
            "a": lambda: keys.append(nv.key()),
            marker: lambda: keys.append(nv.key()),
            OTHER: lambda: nv([END, lambda: keys.append(nv.index())]),
        }
        self.assertIs(nv({"a": 0, marker: 0, "list": ["p", "q"]}, schema), False)
        self.assertEqual(keys, ["a", marker, 0, 1])

    def test_value_root_and_up(self) -> None:
        data = {"a": [{"b": 1}]}
        seen = {}

        def at_b():
            seen["value"] = nv.value()
            seen["root"] = nv.root()
            seen["up"] = [nv.up(), nv.up(0), nv.up(1), nv.up(2)]
            return False

        nv = nonvalid.instance()
        self.assertIs(nv(data, {"a": [{"b": at_b}]}), False)
        self.assertEqual(seen["value"], 1)
        self.assertIs(seen["root"], data)
        inner = data["a"][0]
        self.assertEqual([id(item) for item in seen["up"]], [id(inner), id(inner), id(data["a"]), id(data)])

        nv = nonvalid.instance()
        with self.assertRaises(ContextError) as ctx:
            nv(data, {"a": [{"b": lambda: nv.up(3)}]})
        self.assertEqual(str(ctx.exception), "up() call navigates above any mapping or sequence.")

    def test_navigation_across_recursive_calls(self) -> None:
        data = {"a": {"b": 1}}
        seen = []

        def at_b():
            seen.extend([nv.up(), nv.up(1), nv.root(), nv.path()])
            return False

        nv = nonvalid.instance()
        self.assertIs(nv(data, {"a": lambda: nv({"b": at_b})}), False)
        self.assertIs(seen[0], data["a"])
        self.assertIs(seen[1], data)
        self.assertIs(seen[2], data)
        self.assertEqual(seen[3], ["a", "b"])

    def test_nested_callbacks_see_their_own_value(self) -> None:
        nv = nonvalid.instance()
        data = {"a": 1}

        def outer():
            error = nv({"a": lambda: nv.value() != 1})
            return error or nv.value() is not data

        self.assertIs(nv(data, outer), False)

    def test_validating_an_unrelated_value(self) -> None:
        nv = nonvalid.instance()
        self.assertIs(nv({"a": 1}, {"a": lambda: nv({"x": 2}, {"x": 2})}), False)


_CONTAINERS = st.sampled_from(["mapping", "sequence"])


class TestUpProperty(unittest.TestCase):
    @staticmethod
    def _build(kinds, leaf_schema):
        value = "leaf"
        schema = leaf_schema
        containers = []
        for kind in reversed(kinds):
            if kind == "mapping":
                value = {"k": value}
                schema = {"k": schema}
            else:
                value = [value]
                schema = [schema]
            containers.insert(0, value)
        return value, schema, containers

    @settings(max_examples=60, deadline=None)
    @given(st.lists(_CONTAINERS, min_size=1, max_size=6))
    def test_up_walks_towards_the_root(self, kinds) -> None:
        seen = []

        def at_leaf():
            seen.extend(nv.up(n) for n in range(len(kinds)))
            return False

        nv = nonvalid.instance()
        value, schema, containers = self._build(kinds, at_leaf)
        self.assertIs(nv(value, schema), False)
        self.assertEqual([id(item) for item in seen], [id(item) for item in reversed(containers)])

    @settings(max_examples=30, deadline=None)
    @given(st.lists(_CONTAINERS, max_size=6), st.integers(min_value=0, max_value=3))
    def test_up_beyond_the_root_raises(self, kinds, extra) -> None:
        nv = nonvalid.instance()
        value, schema, _ = self._build(kinds, lambda: nv.up(len(kinds) + extra))
        with self.assertRaises(ContextError):
            nv(value, schema)
        self.assertIsNone(nv.error_path())


if __name__ == "__main__":
    unittest.main()
