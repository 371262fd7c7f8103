"""
Operator handlers for wrapped structural values.

The host consults a wrapped value's metatable when one of its operators is
applied to it. Each handler receives the raw host operands, which may or may
not be wrapped values (or may be another library's userdata), converts them
through the Converter, applies the structural operation and wraps the result.

Failures surface as host runtime errors, except for equality and indexing,
which always produce a result (false and nil respectively).
"""

import logging
from typing import Callable, Dict, List, NoReturn

from ..config import NullIndex, StringLength
from ..errors import BridgeError, ConversionError, OperationError
from ..host import HostState, LValue, LNil, LString, LTable, boolean
from ..structural import (
    Value, ListType, SetType, MapType, ObjectType, TupleType,
    NUMBER, STRING, number_val, operations,
)

logger = logging.getLogger(__name__)

Handler = Callable[[HostState, List[LValue]], List[LValue]]

_LENGTH_TYPES = (ListType, SetType, MapType, TupleType)


class OperatorHandlers:
    """The handlers installed in the shared metatable of one Converter."""

    def __init__(self, converter):
        self.converter = converter

    def dispatch_table(self) -> Dict[str, Handler]:
        """Metatable event name -> handler."""
        return {
            "__eq": self.eq,
            "__add": self._arithmetic(operations.add),
            "__sub": self._arithmetic(operations.subtract),
            "__mul": self._arithmetic(operations.multiply),
            "__div": self._arithmetic(operations.divide),
            "__mod": self._arithmetic(operations.modulo),
            "__unm": self.unm,
            "__concat": self.concat,
            "__len": self.length,
            "__index": self.index,
            "__lt": self._ordering(operations.less_than),
            "__le": self._ordering(operations.less_than_or_equal),
        }

    # --- Helpers ---

    def _fail(self, state: HostState, err: BridgeError) -> NoReturn:
        logger.debug("operator failed: %s", err)
        state.raise_error(str(err))

    def _operand(self, state: HostState, value: LValue, ty) -> Value:
        try:
            return self.converter.convert(value, ty)
        except ConversionError as err:
            self._fail(state, err)

    def _result(self, value: Value) -> List[LValue]:
        return [self.converter.wrap(value)]

    # --- Handlers ---

    def eq(self, state: HostState, args: List[LValue]) -> List[LValue]:
        a, b = _args(args, 2)
        left, right = self.converter.unwrap(a), self.converter.unwrap(b)
        if left is None or right is None:
            return [boolean(False)]
        result = left.equals(right)
        # the host has no unknown bool
        return [boolean(result.is_known and result.true())]

    def _arithmetic(self, op: operations.BinaryOperation) -> Handler:
        def handler(state: HostState, args: List[LValue]) -> List[LValue]:
            a, b = _args(args, 2)
            left = self._operand(state, a, NUMBER)
            right = self._operand(state, b, NUMBER)
            try:
                return self._result(op(left, right))
            except OperationError as err:
                self._fail(state, err)
        return handler

    def unm(self, state: HostState, args: List[LValue]) -> List[LValue]:
        (a,) = _args(args, 1)
        operand = self._operand(state, a, NUMBER)
        try:
            return self._result(operations.negate(operand))
        except OperationError as err:
            self._fail(state, err)

    def concat(self, state: HostState, args: List[LValue]) -> List[LValue]:
        a, b = _args(args, 2)
        left = self._operand(state, a, STRING)
        right = self._operand(state, b, STRING)
        try:
            return self._result(operations.join_strings(left, right))
        except OperationError as err:
            self._fail(state, err)

    def length(self, state: HostState, args: List[LValue]) -> List[LValue]:
        (a,) = _args(args, 1)
        value = self.converter.unwrap(a)
        if value is None or not (value.type == STRING or isinstance(value.type, _LENGTH_TYPES)):
            kind = value.type.name if value is not None else a.kind_name
            article = "an" if kind[0] in "aeiou" else "a"
            state.raise_error(f"attempt to get length of {article} {kind} value")
        try:
            if (value.type == STRING and value.is_known and not value.is_null
                    and self.converter.config.string_length == StringLength.UTF8):
                return self._result(number_val(len(value.data.encode("utf-8"))))
            return self._result(value.length())
        except OperationError as err:
            self._fail(state, err)

    def index(self, state: HostState, args: List[LValue]) -> List[LValue]:
        obj, key = _args(args, 2)
        value = self.converter.unwrap(obj)
        if value is None or value.is_null:
            return [LNil]
        try:
            if isinstance(value.type, ObjectType):
                name = self.converter.convert(key, STRING)
                element = value.get_attr(name.as_string())
            elif isinstance(value.type, MapType):
                element = value.index(self.converter.convert(key, STRING))
            elif isinstance(value.type, (ListType, TupleType)):
                element = value.index(self.converter.convert(key, NUMBER))
            else:
                return [LNil]
        except (ConversionError, OperationError, ValueError):
            return [LNil]

        if element.is_null and self.converter.config.null_index_result == NullIndex.NIL:
            return [LNil]
        return self._result(element)

    def _ordering(self, op: operations.BinaryOperation) -> Handler:
        def handler(state: HostState, args: List[LValue]) -> List[LValue]:
            a, b = _args(args, 2)
            ty = NUMBER
            if self.converter.config.string_ordering and self._is_string(a) and self._is_string(b):
                ty = STRING
            left = self._operand(state, a, ty)
            right = self._operand(state, b, ty)
            try:
                result = op(left, right)
            except OperationError as err:
                self._fail(state, err)
            if not result.is_known:
                state.raise_error("cannot compare unknown values")
            return [boolean(result.true())]
        return handler

    def _is_string(self, value: LValue) -> bool:
        if isinstance(value, LString):
            return True
        payload = self.converter.unwrap(value)
        return payload is not None and payload.type == STRING


def _args(args: List[LValue], count: int) -> List[LValue]:
    """The first `count` arguments, padding missing ones with nil."""
    return (list(args) + [LNil] * count)[:count]


def build_metatable(converter) -> LTable:
    """Build the metatable shared by every value wrapped by `converter`."""
    state = converter.state
    table = state.new_table()
    for event, handler in OperatorHandlers(converter).dispatch_table().items():
        table.raw_set(LString(event), state.new_function(handler, name=event))
    return table
