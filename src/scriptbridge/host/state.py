"""
Host runtime state.

HostState is the embedding surface of the scripting host: it creates values,
raises host-visible errors, calls functions, and evaluates the host's
operators. Operators follow the scripting language's rules: native operands
are handled natively, otherwise the operand's metatable is consulted for an
event handler (`__add`, `__eq`, `__index`, ...).
"""

import math
from typing import Any, Callable, Dict, List, Optional, Sequence

from ..errors import HostRuntimeError
from .values import (
    LValue, LNil, LBool, LNumber, LString, LTable, LFunction, LUserData,
    LTrue, LFalse, from_python,
)


ARITHMETIC_EVENTS = ("__add", "__sub", "__mul", "__div", "__mod")

_NATIVE_ARITHMETIC: Dict[str, Callable[[float, float], float]] = {
    "__add": lambda a, b: a + b,
    "__sub": lambda a, b: a - b,
    "__mul": lambda a, b: a * b,
    "__div": lambda a, b: _float_divide(a, b),
    "__mod": lambda a, b: _float_modulo(a, b),
}


def _float_divide(a: float, b: float) -> float:
    if b == 0:
        if a == 0 or math.isnan(a):
            return math.nan
        return math.copysign(math.inf, a) * math.copysign(1.0, b)
    return a / b


def _float_modulo(a: float, b: float) -> float:
    if b == 0:
        return math.nan
    return a - math.floor(a / b) * b


def number_to_string(n: float) -> str:
    """Format a host number the way the scripting language prints it."""
    if math.isnan(n):
        return "nan" if math.copysign(1.0, n) > 0 else "-nan"
    if math.isinf(n):
        return "inf" if n > 0 else "-inf"
    if n.is_integer() and abs(n) < 1e15:
        return str(int(n))
    return "%.14g" % n


def string_to_number(s: str) -> Optional[float]:
    """Parse a numeral string the way arithmetic coercion does, or None."""
    text = s.strip().lower()
    if "inf" in text or "nan" in text or "_" in text:
        return None
    try:
        if text.lstrip("+-").startswith("0x"):
            return float(int(text, 16))
        return float(text)
    except ValueError:
        return None


class HostState:
    """
    One host runtime instance.

    Values created by one state may be used freely with it; handlers
    installed in metatables run synchronously on the caller's stack.
    """

    def __init__(self):
        self.globals = LTable()

    # --- Value construction ---

    def new_table(self, data: Any = None) -> LTable:
        """Create a table, optionally populated from plain Python data."""
        if data is None:
            return LTable()
        table = from_python(data)
        if not isinstance(table, LTable):
            raise ValueError("table data must be a list, tuple or dict")
        return table

    def new_userdata(self, value: Any = None, metatable: Optional[LTable] = None) -> LUserData:
        return LUserData(value, metatable)

    def new_function(self, fn: Callable[["HostState", List[LValue]], Sequence[LValue]],
                     name: str = "?") -> LFunction:
        return LFunction(fn, name)

    def set_global(self, name: str, value: LValue) -> None:
        self.globals.set_field(name, value)

    def get_global(self, name: str) -> LValue:
        return self.globals.get_field(name)

    # --- Errors ---

    def raise_error(self, message: str) -> None:
        """Raise a host-visible runtime error, aborting the evaluation."""
        raise HostRuntimeError(message, LString(message))

    # --- Metatables ---

    def get_metatable(self, value: LValue) -> Optional[LTable]:
        if isinstance(value, (LTable, LUserData)):
            return value.metatable
        return None

    def get_metafield(self, value: LValue, event: str) -> LValue:
        metatable = self.get_metatable(value)
        if metatable is None:
            return LNil
        return metatable.raw_get(LString(event))

    def _metamethod(self, event: str, a: LValue, b: LValue) -> LValue:
        handler = self.get_metafield(a, event)
        if handler is LNil:
            handler = self.get_metafield(b, event)
        return handler

    # --- Calls ---

    def call(self, fn: LValue, *args: LValue) -> List[LValue]:
        """Call a host function, returning its list of results."""
        if isinstance(fn, LFunction):
            results = fn.fn(self, list(args))
            return list(results) if results is not None else []
        handler = self.get_metafield(fn, "__call")
        if handler is not LNil:
            return self.call(handler, fn, *args)
        self.raise_error(f"attempt to call a {fn.kind_name} value")

    def call1(self, fn: LValue, *args: LValue) -> LValue:
        """Call a host function and keep only its first result."""
        results = self.call(fn, *args)
        return results[0] if results else LNil

    # --- Operators ---

    def to_number(self, value: LValue) -> Optional[float]:
        """Coerce a number or numeral string; None if not possible."""
        if isinstance(value, LNumber):
            return value.value
        if isinstance(value, LString):
            return string_to_number(value.value)
        return None

    def arith(self, event: str, a: LValue, b: LValue) -> LValue:
        """Evaluate a binary arithmetic operator (`__add`, `__sub`, ...)."""
        if event not in ARITHMETIC_EVENTS:
            raise ValueError(f"unknown arithmetic event {event!r}")
        x, y = self.to_number(a), self.to_number(b)
        if x is not None and y is not None:
            return LNumber(_NATIVE_ARITHMETIC[event](x, y))
        handler = self._metamethod(event, a, b)
        if handler is LNil:
            culprit = b if x is not None else a
            self.raise_error(f"attempt to perform arithmetic on a {culprit.kind_name} value")
        return self.call1(handler, a, b)

    def add(self, a: LValue, b: LValue) -> LValue:
        return self.arith("__add", a, b)

    def sub(self, a: LValue, b: LValue) -> LValue:
        return self.arith("__sub", a, b)

    def mul(self, a: LValue, b: LValue) -> LValue:
        return self.arith("__mul", a, b)

    def div(self, a: LValue, b: LValue) -> LValue:
        return self.arith("__div", a, b)

    def mod(self, a: LValue, b: LValue) -> LValue:
        return self.arith("__mod", a, b)

    def unm(self, a: LValue) -> LValue:
        """Evaluate unary minus."""
        x = self.to_number(a)
        if x is not None:
            return LNumber(-x)
        handler = self.get_metafield(a, "__unm")
        if handler is LNil:
            self.raise_error(f"attempt to perform arithmetic on a {a.kind_name} value")
        return self.call1(handler, a, a)

    def concat(self, a: LValue, b: LValue) -> LValue:
        if isinstance(a, (LString, LNumber)) and isinstance(b, (LString, LNumber)):
            return LString(self.tostring(a) + self.tostring(b))
        handler = self._metamethod("__concat", a, b)
        if handler is LNil:
            culprit = b if isinstance(a, (LString, LNumber)) else a
            self.raise_error(f"attempt to concatenate a {culprit.kind_name} value")
        return self.call1(handler, a, b)

    def length(self, a: LValue) -> LValue:
        if isinstance(a, LString):
            return LNumber(len(a.value.encode("utf-8")))
        handler = self.get_metafield(a, "__len")
        if handler is not LNil:
            return self.call1(handler, a)
        if isinstance(a, LTable):
            return LNumber(a.length())
        self.raise_error(f"attempt to get length of a {a.kind_name} value")

    def raw_equals(self, a: LValue, b: LValue) -> bool:
        if a is b:
            return True
        if isinstance(a, (LTable, LUserData, LFunction)) or a is LNil:
            return False
        return a == b

    def equals(self, a: LValue, b: LValue) -> bool:
        """
        Evaluate `a == b`.

        The `__eq` handler is only consulted when both operands are tables
        or both are userdata and they aren't the same object.
        """
        if self.raw_equals(a, b):
            return True
        both_tables = isinstance(a, LTable) and isinstance(b, LTable)
        both_userdata = isinstance(a, LUserData) and isinstance(b, LUserData)
        if not (both_tables or both_userdata):
            return False
        handler = self._metamethod("__eq", a, b)
        if handler is LNil:
            return False
        return self.call1(handler, a, b).is_truthy()

    def less_than(self, a: LValue, b: LValue) -> bool:
        return self._compare("__lt", a, b)

    def less_equal(self, a: LValue, b: LValue) -> bool:
        return self._compare("__le", a, b)

    def greater_than(self, a: LValue, b: LValue) -> bool:
        return self._compare("__lt", b, a)

    def greater_equal(self, a: LValue, b: LValue) -> bool:
        return self._compare("__le", b, a)

    def _compare(self, event: str, a: LValue, b: LValue) -> bool:
        if isinstance(a, LNumber) and isinstance(b, LNumber) or \
                isinstance(a, LString) and isinstance(b, LString):
            if event == "__lt":
                return a.value < b.value
            return a.value <= b.value
        handler = self._metamethod(event, a, b)
        if handler is LNil:
            if a.kind == b.kind:
                self.raise_error(f"attempt to compare two {a.kind_name} values")
            self.raise_error(f"attempt to compare {a.kind_name} with {b.kind_name}")
        return self.call1(handler, a, b).is_truthy()

    def index(self, obj: LValue, key: LValue) -> LValue:
        """Evaluate `obj[key]` (and `obj.name`, which is `obj["name"]`)."""
        if isinstance(obj, LTable):
            value = obj.raw_get(key)
            if value is not LNil:
                return value
        handler = self.get_metafield(obj, "__index")
        if handler is LNil:
            if isinstance(obj, LTable):
                return LNil
            self.raise_error(f"attempt to index a {obj.kind_name} value")
        if isinstance(handler, LFunction):
            return self.call1(handler, obj, key)
        return self.index(handler, key)

    def get_attr(self, obj: LValue, name: str) -> LValue:
        return self.index(obj, LString(name))

    def tostring(self, value: LValue) -> str:
        if isinstance(value, LString):
            return value.value
        if isinstance(value, LNumber):
            return number_to_string(value.value)
        if isinstance(value, LBool):
            return "true" if value.value else "false"
        if value is LNil:
            return "nil"
        handler = self.get_metafield(value, "__tostring")
        if handler is not LNil:
            result = self.call1(handler, value)
            if not isinstance(result, LString):
                self.raise_error("'__tostring' must return a string")
            return result.value
        return f"{value.kind_name}: 0x{id(value):08x}"


def boolean(flag: bool) -> LBool:
    return LTrue if flag else LFalse
