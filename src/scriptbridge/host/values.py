"""
Host runtime values.

The scripting host's values form a closed set of kinds: nil, boolean,
number, string, table, function and userdata. Primitive values compare and
hash by content; tables, functions and userdata by identity.

Tables iterate in a deterministic key order: numbers ascending, then strings
lexicographically, then booleans (false first), then reference keys in
insertion order. Array positions start at 0.
"""

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, Iterator, List, Optional, Sequence, Tuple


class HostKind(Enum):
    """The kind of a host value, named as scripts see it."""
    NIL = "nil"
    BOOLEAN = "boolean"
    NUMBER = "number"
    STRING = "string"
    TABLE = "table"
    FUNCTION = "function"
    USERDATA = "userdata"


ARRAY_ORIGIN = 0


class LValue:
    """Base class for host values."""

    kind: HostKind

    def is_truthy(self) -> bool:
        """Everything is true except nil and false."""
        return True

    @property
    def kind_name(self) -> str:
        return self.kind.value


class _Nil(LValue):
    kind = HostKind.NIL

    def is_truthy(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "LNil"


LNil = _Nil()


@dataclass(frozen=True)
class LBool(LValue):
    value: bool
    kind = HostKind.BOOLEAN

    def is_truthy(self) -> bool:
        return self.value


LTrue = LBool(True)
LFalse = LBool(False)


@dataclass(frozen=True)
class LNumber(LValue):
    """A double-precision number."""
    value: float
    kind = HostKind.NUMBER

    def __post_init__(self):
        object.__setattr__(self, "value", float(self.value))

    def is_integer(self) -> bool:
        return self.value.is_integer()


@dataclass(frozen=True)
class LString(LValue):
    value: str
    kind = HostKind.STRING


@dataclass(eq=False)
class LFunction(LValue):
    """
    A host-callable procedure.

    `fn` receives the host state and the argument list, and returns the list
    of results.
    """
    fn: Callable[[Any, List[LValue]], Sequence[LValue]]
    name: str = "?"
    kind = HostKind.FUNCTION

    def __repr__(self) -> str:
        return f"LFunction({self.name})"


@dataclass(eq=False)
class LUserData(LValue):
    """An opaque payload with an optional metatable."""
    value: Any = None
    metatable: Optional["LTable"] = None
    kind = HostKind.USERDATA

    def __repr__(self) -> str:
        return f"LUserData({self.value!r})"


@dataclass(eq=False)
class LTable(LValue):
    """
    A mutable association of host keys to host values.

    Setting a key to nil removes it.
    """
    _entries: Dict[LValue, LValue] = field(default_factory=dict)
    metatable: Optional["LTable"] = None
    kind = HostKind.TABLE

    def __repr__(self) -> str:
        return f"LTable({len(self._entries)} entries)"

    def raw_get(self, key: LValue) -> LValue:
        if key is LNil:
            return LNil
        return self._entries.get(key, LNil)

    def raw_set(self, key: LValue, value: LValue) -> None:
        if key is LNil:
            raise ValueError("table index is nil")
        if isinstance(key, LNumber) and math.isnan(key.value):
            raise ValueError("table index is NaN")
        if value is LNil:
            self._entries.pop(key, None)
        else:
            self._entries[key] = value

    def get_field(self, name: str) -> LValue:
        return self.raw_get(LString(name))

    def set_field(self, name: str, value: LValue) -> None:
        self.raw_set(LString(name), value)

    def get_index(self, index: int) -> LValue:
        return self.raw_get(LNumber(index))

    def append(self, value: LValue) -> None:
        """Set the value at the first free array position."""
        self.raw_set(LNumber(self.length()), value)

    def length(self) -> int:
        """Count of consecutive array positions present from the origin."""
        n = 0
        while LNumber(ARRAY_ORIGIN + n) in self._entries:
            n += 1
        return n

    def __len__(self) -> int:
        return len(self._entries)

    def __bool__(self) -> bool:
        return True

    def keys(self) -> List[LValue]:
        positions = {key: i for i, key in enumerate(self._entries)}
        return sorted(self._entries, key=lambda k: _key_order(k, positions[k]))

    def items(self) -> Iterator[Tuple[LValue, LValue]]:
        """Iterate entries in the deterministic key order."""
        for key in self.keys():
            yield key, self._entries[key]

    def for_each(self, callback: Callable[[LValue, LValue], None]) -> None:
        for key, value in self.items():
            callback(key, value)


def _key_order(key: LValue, position: int) -> Tuple:
    if isinstance(key, LNumber):
        return (0, key.value, "")
    if isinstance(key, LString):
        return (1, 0.0, key.value)
    if isinstance(key, LBool):
        return (2, float(key.value), "")
    return (3, float(position), "")


# Boundary mapping from plain Python data

def from_python(data: Any) -> LValue:
    """
    Map plain Python data onto host values.

    None -> nil, bool/int/float/str -> primitives, list/tuple -> table with
    positions from the array origin, dict -> table.
    Host values pass through unchanged.
    """
    if isinstance(data, LValue):
        return data
    if data is None:
        return LNil
    if isinstance(data, bool):
        return LBool(data)
    if isinstance(data, (int, float)):
        return LNumber(data)
    if isinstance(data, str):
        return LString(data)
    if isinstance(data, (list, tuple)):
        table = LTable()
        for i, item in enumerate(data):
            table.raw_set(LNumber(ARRAY_ORIGIN + i), from_python(item))
        return table
    if isinstance(data, dict):
        table = LTable()
        for key, item in data.items():
            table.raw_set(from_python(key), from_python(item))
        return table
    raise ValueError(f"no host equivalent for {type(data).__name__}")
