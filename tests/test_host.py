"""
Tests for the host runtime model (values, tables, state operators).
"""

import math
import pytest

from scriptbridge.errors import HostRuntimeError
from scriptbridge.host import (
    HostState, LNil, LBool, LTrue, LFalse, LNumber, LString, LTable,
    from_python, number_to_string, string_to_number,
)


@pytest.fixture
def state():
    return HostState()


# --- Value Tests ---

class TestHostValues:
    """Test host value kinds and truthiness."""

    def test_truthiness(self):
        """Only nil and false are false."""
        assert not LNil.is_truthy()
        assert not LFalse.is_truthy()
        assert LTrue.is_truthy()
        assert LNumber(0).is_truthy()
        assert LString("").is_truthy()
        assert LTable().is_truthy()

    def test_kind_names(self):
        """Kind names are the ones scripts see."""
        assert LNil.kind_name == "nil"
        assert LNumber(1).kind_name == "number"
        assert LTable().kind_name == "table"

    def test_numbers_are_floats(self):
        """Numbers are doubles; equal numbers are the same key."""
        assert LNumber(1) == LNumber(1.0)
        assert LNumber(2).is_integer()
        assert not LNumber(2.5).is_integer()

    def test_from_python(self):
        """Plain Python data maps onto host values."""
        table = from_python({"name": "web", "ports": [80, 443], "on": True})
        assert isinstance(table, LTable)
        assert table.get_field("name") == LString("web")
        assert table.get_field("on") == LTrue
        ports = table.get_field("ports")
        assert ports.get_index(0) == LNumber(80)
        assert ports.get_index(1) == LNumber(443)
        assert from_python(None) is LNil

    def test_from_python_rejects_unknown(self):
        """Objects without a host equivalent are rejected."""
        with pytest.raises(ValueError, match="no host equivalent"):
            from_python(object())


class TestTables:
    """Test host tables."""

    def test_key_order(self):
        """Numbers, then strings, then booleans."""
        table = LTable()
        for key in (LString("b"), LTrue, LNumber(2), LString("a"), LFalse, LNumber(1)):
            table.raw_set(key, LNumber(0))
        assert table.keys() == [
            LNumber(1), LNumber(2), LString("a"), LString("b"), LFalse, LTrue,
        ]

    def test_reference_keys_in_insertion_order(self):
        """Reference keys iterate last, in insertion order."""
        first, second = LTable(), LTable()
        table = LTable()
        table.raw_set(second, LNumber(1))
        table.raw_set(first, LNumber(2))
        table.raw_set(LString("x"), LNumber(3))
        assert table.keys() == [LString("x"), second, first]

    def test_nil_value_deletes(self):
        """Setting a key to nil removes it."""
        table = from_python({"a": 1})
        table.set_field("a", LNil)
        assert len(table) == 0
        assert table.get_field("a") is LNil

    def test_invalid_keys(self):
        """Nil and NaN cannot be keys."""
        table = LTable()
        with pytest.raises(ValueError, match="table index is nil"):
            table.raw_set(LNil, LNumber(1))
        with pytest.raises(ValueError, match="NaN"):
            table.raw_set(LNumber(math.nan), LNumber(1))

    def test_border_length(self):
        """Length counts consecutive positions from the origin."""
        table = from_python(["a", "b", "c"])
        assert table.length() == 3
        table.raw_set(LNumber(1), LNil)
        assert table.length() == 1
        assert len(table) == 2

    def test_append(self):
        """append fills the first free position."""
        table = LTable()
        table.append(LString("a"))
        table.append(LString("b"))
        assert table.get_index(1) == LString("b")

    def test_for_each(self):
        """for_each visits entries in key order."""
        seen = []
        from_python({"b": 2, "a": 1}).for_each(lambda k, v: seen.append(k.value))
        assert seen == ["a", "b"]


# --- State Tests ---

class TestNumberStrings:
    """Test number formatting and numeral coercion."""

    def test_number_to_string(self):
        """Integers print without a fraction."""
        assert number_to_string(3.0) == "3"
        assert number_to_string(0.5) == "0.5"
        assert number_to_string(math.inf) == "inf"

    def test_string_to_number(self):
        """Numeral strings coerce; everything else doesn't."""
        assert string_to_number(" 12 ") == 12.0
        assert string_to_number("0x10") == 16.0
        assert string_to_number("1e2") == 100.0
        assert string_to_number("inf") is None
        assert string_to_number("1_000") is None
        assert string_to_number("abc") is None


class TestHostOperators:
    """Test native operator evaluation."""

    def test_arithmetic_coerces_numerals(self, state):
        """Numeral strings take part in arithmetic."""
        assert state.add(LNumber(1), LString("2")) == LNumber(3)
        assert state.mul(LNumber(2), LNumber(4)) == LNumber(8)

    def test_arithmetic_error(self, state):
        """Non-numeric operands raise host errors."""
        with pytest.raises(HostRuntimeError, match="arithmetic on a boolean value"):
            state.add(LNumber(1), LTrue)
        with pytest.raises(HostRuntimeError, match="arithmetic on a table value"):
            state.unm(LTable())

    def test_floored_modulo(self, state):
        """Native modulo is floored."""
        assert state.mod(LNumber(-7), LNumber(2)) == LNumber(1)

    def test_float_division(self, state):
        """Division by zero gives infinity."""
        assert state.div(LNumber(1), LNumber(0)) == LNumber(math.inf)
        assert math.isnan(state.div(LNumber(0), LNumber(0)).value)

    def test_string_length_in_bytes(self, state):
        """Native string length counts bytes."""
        assert state.length(LString("h\u00e9llo")) == LNumber(6)
        assert state.length(from_python([1, 2])) == LNumber(2)
        with pytest.raises(HostRuntimeError, match="length of a number value"):
            state.length(LNumber(1))

    def test_concat(self, state):
        """Strings and numbers concatenate."""
        assert state.concat(LString("a"), LNumber(1)) == LString("a1")
        with pytest.raises(HostRuntimeError, match="concatenate a nil value"):
            state.concat(LString("a"), LNil)

    def test_equality(self, state):
        """Primitive equality is by content, tables by identity."""
        assert state.equals(LNumber(1), LNumber(1.0))
        assert not state.equals(LString("1"), LNumber(1))
        assert not state.equals(LTable(), LTable())
        table = LTable()
        assert state.equals(table, table)

    def test_ordering(self, state):
        """Numbers and strings order natively."""
        assert state.less_than(LNumber(1), LNumber(2))
        assert state.less_equal(LString("a"), LString("a"))
        assert state.greater_than(LNumber(3), LNumber(2))
        with pytest.raises(HostRuntimeError, match="compare number with string"):
            state.less_than(LNumber(1), LString("2"))
        with pytest.raises(HostRuntimeError, match="compare two table values"):
            state.less_than(LTable(), LTable())

    def test_index_fallback(self, state):
        """__index tables supply missing keys."""
        table = state.new_table()
        table.metatable = state.new_table({"__index": {"x": 1}})
        assert state.get_attr(table, "x") == LNumber(1)
        assert state.get_attr(table, "y") is LNil
        with pytest.raises(HostRuntimeError, match="index a number value"):
            state.index(LNumber(1), LString("x"))

    def test_metamethod_dispatch(self, state):
        """Metatable handlers run for non-native operands."""
        meta = state.new_table()
        meta.set_field("__add", state.new_function(lambda st, args: [LString("added")]))
        obj = state.new_userdata("payload", meta)
        assert state.add(obj, LNumber(1)) == LString("added")
        assert state.add(LNumber(1), obj) == LString("added")

    def test_calls(self, state):
        """Functions receive their arguments as a list."""
        fn = state.new_function(lambda st, args: [LNumber(len(args))], name="count")
        assert state.call1(fn, LNil, LNil) == LNumber(2)
        with pytest.raises(HostRuntimeError, match="call a number value"):
            state.call(LNumber(1))

    def test_globals(self, state):
        """Globals live in a table."""
        state.set_global("answer", LNumber(42))
        assert state.get_global("answer") == LNumber(42)
        assert state.get_global("missing") is LNil

    def test_tostring(self, state):
        """Test host string rendering."""
        assert state.tostring(LTrue) == "true"
        assert state.tostring(LNumber(2)) == "2"
        assert state.tostring(LNil) == "nil"
        assert state.tostring(LTable()).startswith("table: 0x")

    def test_raise_error_carries_value(self, state):
        """Host errors carry their message as a host string."""
        with pytest.raises(HostRuntimeError) as exc:
            state.raise_error("boom")
        assert exc.value.value == LString("boom")
        assert str(exc.value) == "boom"

    def test_new_table_requires_container(self, state):
        """Tables are built from lists, tuples or dicts."""
        with pytest.raises(ValueError, match="table data"):
            state.new_table(5)

    def test_bool_constants(self):
        """LBool values compare by content."""
        assert LBool(True) == LTrue
