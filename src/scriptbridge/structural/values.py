"""
Structural values.

A Value pairs immutable data with exactly one structural type. A value can
also be null (typed absence) or unknown (not yet determined).

Data representation by type:
    bool            -> bool
    number          -> decimal.Decimal (50 significant digits)
    string          -> str, NFC-normalized
    list/tuple/set  -> tuple of Value
    map/object      -> dict of str to Value (never mutated after construction)
"""

import decimal
import re
import unicodedata
from dataclasses import dataclass
from typing import Any, Iterable, List, Mapping, Optional, Tuple, Union

from ..errors import OperationError
from .path import ROOT
from .types import (
    Type, PrimitiveType, ListType, SetType, MapType,
    ObjectType, TupleType,
    BOOL, NUMBER, STRING, DYNAMIC, EMPTY_OBJECT, EMPTY_TUPLE,
    make_object_type, make_tuple_type, is_dynamic,
)


NUMBER_CONTEXT = decimal.Context(
    prec=50,
    rounding=decimal.ROUND_HALF_EVEN,
    traps=[decimal.InvalidOperation, decimal.DivisionByZero, decimal.Overflow],
)

_NUMBER_LITERAL = re.compile(r"^[-+]?(\d+(\.\d*)?|\.\d+)([eE][-+]?\d+)?$")

Number = Union[int, float, str, decimal.Decimal]


@dataclass(frozen=True, eq=False)
class Value:
    """
    A structural value with its type.

    `data` is None for null and unknown values.
    """
    type: Type
    data: Any = None
    is_known: bool = True

    @property
    def is_null(self) -> bool:
        return self.is_known and self.data is None

    def __repr__(self) -> str:
        if not self.is_known:
            return f"Value(unknown {self.type})"
        if self.data is None:
            return f"Value(null {self.type})"
        return f"Value({self.type}: {self.to_python()!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Value):
            return NotImplemented
        return self.raw_equals(other)

    __hash__ = None

    # --- Equality ---

    def raw_equals(self, other: "Value") -> bool:
        """
        Exact comparison, including type, nullness and unknownness.

        Unlike `equals`, this always produces a definite answer.
        """
        if self.type != other.type or self.is_known != other.is_known:
            return False
        if not self.is_known or self.data is None or other.data is None:
            return self.data is other.data
        if isinstance(self.type, SetType):
            return _same_members(self.data, other.data, lambda a, b: a.raw_equals(b))
        if isinstance(self.data, tuple):
            return len(self.data) == len(other.data) and all(
                a.raw_equals(b) for a, b in zip(self.data, other.data))
        if isinstance(self.data, dict):
            return self.data.keys() == other.data.keys() and all(
                v.raw_equals(other.data[k]) for k, v in self.data.items())
        return self.data == other.data

    def equals(self, other: "Value") -> "Value":
        """
        Deep structural equality.

        The result is an unknown bool if either side (or any nested element
        needed to decide) is unknown. Values of different types are unequal.
        """
        if not self.is_known or not other.is_known:
            return unknown_val(BOOL)
        if self.is_null or other.is_null:
            return bool_val(self.is_null and other.is_null)
        if self.type != other.type:
            return FALSE

        if isinstance(self.type, PrimitiveType):
            return bool_val(self.data == other.data)

        if isinstance(self.type, SetType):
            if any(not v.is_known for v in self.data + other.data):
                return unknown_val(BOOL)
            return bool_val(_same_members(
                self.data, other.data, lambda a, b: a.raw_equals(b)))

        if isinstance(self.data, tuple):
            if len(self.data) != len(other.data):
                return FALSE
            pairs = list(zip(self.data, other.data))
        else:
            if self.data.keys() != other.data.keys():
                return FALSE
            pairs = [(v, other.data[k]) for k, v in self.data.items()]

        saw_unknown = False
        for a, b in pairs:
            result = a.equals(b)
            if not result.is_known:
                saw_unknown = True
            elif not result.data:
                return FALSE
        return unknown_val(BOOL) if saw_unknown else TRUE

    # --- Accessors ---

    def true(self) -> bool:
        """Return the Python bool of a known, non-null bool value."""
        if self.type != BOOL or not self.is_known or self.data is None:
            raise ValueError(f"not a known bool: {self!r}")
        return self.data

    def as_string(self) -> str:
        if self.type != STRING or self.data is None:
            raise ValueError(f"not a known string: {self!r}")
        return self.data

    def as_decimal(self) -> decimal.Decimal:
        if self.type != NUMBER or self.data is None:
            raise ValueError(f"not a known number: {self!r}")
        return self.data

    def length(self) -> "Value":
        """
        Number of elements, or of Unicode code points for strings.
        """
        if not isinstance(self.type, (ListType, SetType, MapType, TupleType)) \
                and self.type != STRING:
            raise OperationError(ROOT, f"cannot take the length of a {self.type} value")
        if self.is_null:
            raise OperationError(ROOT, "argument must not be null")
        if isinstance(self.type, TupleType):
            return number_val(len(self.type.element_types))
        if not self.is_known:
            return unknown_val(NUMBER)
        return number_val(len(self.data))

    def index(self, key: "Value") -> "Value":
        """
        Look up a list/tuple element by position or a map element by key.
        """
        if self.is_null:
            raise OperationError(ROOT, "cannot index a null value")
        if isinstance(self.type, (ListType, TupleType)):
            if key.type != NUMBER or not key.is_known or key.data is None:
                raise OperationError(ROOT, "a number is required")
            position = key.data
            if position != position.to_integral_value():
                raise OperationError(ROOT, "key must be a whole number")
            position = int(position)
            if isinstance(self.type, TupleType):
                if not 0 <= position < len(self.type.element_types):
                    raise OperationError(ROOT, "index out of range")
                if not self.is_known:
                    return unknown_val(self.type.element_types[position])
            elif not self.is_known:
                return unknown_val(self.type.element_type)
            if not 0 <= position < len(self.data):
                raise OperationError(ROOT, "index out of range")
            return self.data[position]

        if isinstance(self.type, MapType):
            if key.type != STRING or not key.is_known or key.data is None:
                raise OperationError(ROOT, "a string is required")
            if not self.is_known:
                return unknown_val(self.type.element_type)
            if key.data not in self.data:
                raise OperationError(ROOT, "key does not exist")
            return self.data[key.data]

        raise OperationError(ROOT, f"cannot index a {self.type} value")

    def get_attr(self, name: str) -> "Value":
        """Look up an object attribute by name."""
        if not isinstance(self.type, ObjectType):
            raise OperationError(ROOT, f"cannot access attributes of a {self.type} value")
        attr_type = self.type.attribute_type(name)
        if attr_type is None:
            raise OperationError(ROOT, f'unsupported attribute "{name}"')
        if not self.is_known:
            return unknown_val(attr_type)
        if self.data is None:
            raise OperationError(ROOT, "cannot access attributes of a null value")
        return self.data[name]

    def to_python(self) -> Any:
        """Convert to plain Python data (lists, dicts, Decimal, ...)."""
        if not self.is_known:
            raise ValueError("unknown values have no Python equivalent")
        if self.data is None:
            return None
        if isinstance(self.data, tuple):
            return [v.to_python() for v in self.data]
        if isinstance(self.data, dict):
            return {k: v.to_python() for k, v in self.data.items()}
        return self.data


def _same_members(a: Tuple[Value, ...], b: Tuple[Value, ...], same) -> bool:
    if len(a) != len(b):
        return False
    return all(any(same(x, y) for y in b) for x in a)


# Convenience constructors

def null_val(t: Type) -> Value:
    """Create a null value of type `t`."""
    return Value(t, None, True)


def unknown_val(t: Type) -> Value:
    """Create an unknown value of type `t`."""
    return Value(t, None, False)


def bool_val(b: bool) -> Value:
    return Value(BOOL, bool(b))


def number_val(n: Number) -> Value:
    """Create a number value from an int, float, Decimal or numeral string."""
    return Value(NUMBER, _to_decimal(n))


def string_val(s: str) -> Value:
    """Create a string value (normalized to NFC)."""
    return Value(STRING, unicodedata.normalize("NFC", str(s)))


def list_val(items: Iterable[Value], element_type: Optional[Type] = None) -> Value:
    """Create a list value; `element_type` is required for empty lists."""
    items = tuple(items)
    element_type = _element_type(items, element_type, "list")
    return Value(ListType(element_type), items)


def set_val(items: Iterable[Value], element_type: Optional[Type] = None) -> Value:
    """Create a set value, dropping duplicate elements."""
    unique: List[Value] = []
    for item in items:
        if not any(item.raw_equals(u) for u in unique):
            unique.append(item)
    element_type = _element_type(unique, element_type, "set")
    return Value(SetType(element_type), tuple(unique))


def map_val(items: Mapping[str, Value], element_type: Optional[Type] = None) -> Value:
    """Create a map value; `element_type` is required for empty maps."""
    items = dict(items)
    element_type = _element_type(list(items.values()), element_type, "map")
    return Value(MapType(element_type), items)


def object_val(attributes: Mapping[str, Value]) -> Value:
    """Create an object value whose type is implied by its attributes."""
    attributes = dict(attributes)
    obj_type = make_object_type({k: v.type for k, v in attributes.items()})
    return Value(obj_type, attributes)


def tuple_val(items: Iterable[Value]) -> Value:
    items = tuple(items)
    return Value(make_tuple_type(v.type for v in items), items)


def _element_type(items, element_type: Optional[Type], what: str) -> Type:
    if element_type is None:
        if not items:
            raise ValueError(f"an empty {what} requires an explicit element type")
        element_type = items[0].type
    for item in items:
        if item.type != element_type and not is_dynamic(element_type):
            raise ValueError(
                f"{what} element of type {item.type} does not match {element_type}")
    return element_type


# --- Numbers ---

def _to_decimal(n: Number) -> decimal.Decimal:
    if isinstance(n, bool):
        raise ValueError("bool is not a number")
    if isinstance(n, decimal.Decimal):
        if n.is_nan():
            raise ValueError("NaN is not a valid number")
        return n
    if isinstance(n, int):
        return decimal.Decimal(n)
    if isinstance(n, float):
        if n != n:
            raise ValueError("NaN is not a valid number")
        if n in (float("inf"), float("-inf")):
            return decimal.Decimal(n)
        if n.is_integer():
            return decimal.Decimal(int(n))
        return decimal.Decimal(repr(n))
    return parse_number(str(n))


def parse_number(text: str) -> decimal.Decimal:
    """Parse a numeral string, rejecting anything that isn't a finite decimal."""
    if not _NUMBER_LITERAL.match(text):
        raise ValueError(f"{text!r} is not a number")
    try:
        return NUMBER_CONTEXT.create_decimal(text)
    except decimal.DecimalException as exc:
        raise ValueError(f"{text!r} is out of range") from exc


def format_number(n: decimal.Decimal) -> str:
    """Render a number the way it converts to a string."""
    if n.is_infinite():
        return "Infinity" if n > 0 else "-Infinity"
    if n == n.to_integral_value():
        return str(int(n))
    return format(n.normalize(NUMBER_CONTEXT), "f")


# Common values

TRUE = bool_val(True)
FALSE = bool_val(False)
ZERO = number_val(0)
EMPTY_OBJECT_VAL = Value(EMPTY_OBJECT, {})
EMPTY_TUPLE_VAL = Value(EMPTY_TUPLE, ())
DYNAMIC_VAL = unknown_val(DYNAMIC)
