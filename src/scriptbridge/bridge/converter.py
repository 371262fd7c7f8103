"""
Conversion between host values and structural values.

A Converter is bound to one HostState. It converts host values to structural
values of a requested type (inferring the type when the dynamic pseudo-type
is requested), and wraps structural values as host userdata whose metatable
delegates the host's operators to the structural system.
"""

import logging
from typing import Dict, List, Optional, Tuple, Union

from ..config import BridgeConfig
from ..errors import (
    ConversionError,
    error_values_not_allowed, error_keys_must_be_strings, error_unexpected_key,
    error_index_out_of_range, error_missing_index, error_duplicate_key,
    error_inconsistent_types,
)
from ..host import (
    HostState, LValue, LNil, LBool, LNumber, LString, LTable, LFunction,
    LUserData, ARRAY_ORIGIN,
)
from ..structural import (
    Type, ListType, SetType, MapType, ObjectType, TupleType,
    BOOL, NUMBER, STRING, DYNAMIC,
    Path, ROOT, Value, Function,
    convert, is_dynamic, has_dynamic_types, make_object_type,
    null_val, bool_val, number_val, string_val, list_val, set_val, map_val,
)

logger = logging.getLogger(__name__)


class Converter:
    """
    Bridges one host runtime instance and the structural value system.

    The metatable shared by every wrapped value is built on first use and
    cached here, so independent host states never share it.
    """

    def __init__(self, state: HostState, config: Optional[BridgeConfig] = None):
        self.state = state
        self.config = config or BridgeConfig()
        self._metatable: Optional[LTable] = None

    @property
    def metatable(self) -> LTable:
        if self._metatable is None:
            from .operators import build_metatable
            self._metatable = build_metatable(self)
            logger.debug("built wrapped-value metatable for %r", self.state)
        return self._metatable

    # --- Public API ---

    def convert(self, value: LValue, target: Type) -> Value:
        """
        Convert a host value to a structural value of type `target`.

        With DYNAMIC as the target the type is inferred from the value;
        tables always infer to object types. Raises ConversionError, whose
        path locates the failure inside nested tables.
        """
        return self._to_structural(value, target, ROOT)

    def infer_type(self, value: LValue) -> Type:
        """Infer the structural type a host value would convert to."""
        return self._implied_type(value, ROOT)

    def wrap(self, value: Value) -> LUserData:
        """
        Wrap a structural value as host userdata.

        The result compares, computes and indexes through the structural
        system. It does not compare equal to native host values.
        """
        return self.state.new_userdata(value, self.metatable)

    def unwrap(self, value: LValue) -> Optional[Value]:
        """The structural payload of a wrapped value, or None for anything else."""
        if isinstance(value, LUserData) and isinstance(value.value, Value):
            return value.value
        return None

    def wrap_function(self, function: Function, name: Optional[str] = None) -> LFunction:
        """Expose a structural function as a host function."""
        from .functions import wrap_function
        return wrap_function(self, function, name)

    # --- Conversion ---

    def _to_structural(self, val: LValue, ty: Type, path: Path) -> Value:
        if val is LNil:
            return null_val(ty)

        if is_dynamic(ty):
            ty = self._implied_type(val, path)

        if isinstance(val, LUserData):
            payload = self.unwrap(val)
            if payload is None:
                raise error_values_not_allowed(val.kind_name, path)
            try:
                return convert(payload, ty)
            except ConversionError as err:
                raise err.prefixed(path) from None

        if isinstance(val, LFunction):
            raise error_values_not_allowed(val.kind_name, path)

        if ty == BOOL:
            return bool_val(val.is_truthy())

        if ty == NUMBER:
            if isinstance(val, LNumber):
                try:
                    return number_val(val.value)
                except ValueError as exc:
                    raise path.new_error(str(exc)) from None
            return self._convert_via_inference(val, NUMBER, path)

        if ty == STRING:
            if isinstance(val, LString):
                return string_val(val.value)
            return self._convert_via_inference(val, STRING, path)

        if isinstance(val, LTable):
            if isinstance(ty, ObjectType):
                return self._table_to_object(val, ty, path)
            if isinstance(ty, TupleType):
                return self._table_to_tuple(val, ty, path)
            if isinstance(ty, MapType):
                return self._table_to_map(val, ty, path)
            if isinstance(ty, (ListType, SetType)):
                return self._table_to_sequence(val, ty, path)

        raise error_values_not_allowed(val.kind_name, path)

    def _convert_via_inference(self, val: LValue, ty: Type, path: Path) -> Value:
        inferred = self._to_structural(val, DYNAMIC, path)
        try:
            return convert(inferred, ty)
        except ConversionError as err:
            raise err.prefixed(path) from None

    def _table_to_object(self, table: LTable, ty: ObjectType, path: Path) -> Value:
        # keys match by their string form, as in inference
        entries = self._string_keyed(table, path)
        attributes = {}
        for name, attr_type in ty.attributes:
            item = entries.pop(name, LNil)
            attributes[name] = self._to_structural(item, attr_type, path.get_attr(name))

        if entries:
            raise error_unexpected_key(next(iter(entries)), path)

        obj_type = ObjectType(tuple((name, attributes[name].type) for name, _ in ty.attributes))
        return Value(obj_type, attributes)

    def _table_to_tuple(self, table: LTable, ty: TupleType, path: Path) -> Value:
        elements = [
            self._to_structural(table.get_index(ARRAY_ORIGIN + i), element_type, path.index(i))
            for i, element_type in enumerate(ty.element_types)
        ]

        for key in table.keys():
            position = _array_position(key)
            if position is None:
                raise error_unexpected_key(self._key_string(key, path), path)
            if not 0 <= position < len(ty.element_types):
                raise error_index_out_of_range(position, path)

        return Value(TupleType(tuple(e.type for e in elements)), tuple(elements))

    def _table_to_map(self, table: LTable, ty: MapType, path: Path) -> Value:
        entries = list(self._string_keyed(table, path).items())
        values, element_type = self._convert_elements(entries, ty.element_type, path)
        return map_val(dict(zip((name for name, _ in entries), values)), element_type)

    def _table_to_sequence(self, table: LTable, ty: Union[ListType, SetType], path: Path) -> Value:
        count = len(table)
        for key in table.keys():
            position = _array_position(key)
            if position is None:
                raise error_unexpected_key(self._key_string(key, path), path)
            if position < 0:
                raise error_index_out_of_range(position, path)
            if position >= count:
                missing = next(
                    i for i in range(count)
                    if table.get_index(ARRAY_ORIGIN + i) is LNil
                )
                raise error_missing_index(missing, path)

        entries = [(i, table.get_index(ARRAY_ORIGIN + i)) for i in range(count)]
        values, element_type = self._convert_elements(entries, ty.element_type, path)
        if isinstance(ty, SetType):
            return set_val(values, element_type)
        return list_val(values, element_type)

    def _convert_elements(self, entries, element_type: Type, path: Path) -> Tuple[List[Value], Type]:
        """
        Convert collection elements to one element type.

        An element type containing dynamic parts is fixed by the first
        element; every later element must convert to exactly that type.
        """
        dynamic = has_dynamic_types(element_type)
        fixed: Optional[Type] = None if dynamic else element_type
        values: List[Value] = []
        for key, item in entries:
            item_path = path.index(key)
            if fixed is None:
                value = self._to_structural(item, element_type, item_path)
                fixed = value.type
            elif dynamic:
                value = self._to_structural(item, element_type, item_path)
                if value.type != fixed:
                    raise error_inconsistent_types(path)
            else:
                value = self._to_structural(item, fixed, item_path)
            values.append(value)
        return values, fixed if fixed is not None else element_type

    def _string_keyed(self, table: LTable, path: Path) -> Dict[str, LValue]:
        """Table entries by stringified key, in table iteration order."""
        entries: Dict[str, LValue] = {}
        for key, item in table.items():
            name = self._key_string(key, path)
            if name in entries:
                raise error_duplicate_key(name, path)
            entries[name] = item
        return entries

    def _key_string(self, key: LValue, path: Path) -> str:
        """Stringify a table key the way a string-target conversion would."""
        if isinstance(key, LString):
            return key.value
        try:
            return self._to_structural(key, STRING, path).as_string()
        except ConversionError:
            raise error_keys_must_be_strings(path) from None

    # --- Type inference ---

    def _implied_type(self, val: LValue, path: Path) -> Type:
        if val is LNil:
            return DYNAMIC
        if isinstance(val, LBool):
            return BOOL
        if isinstance(val, LNumber):
            return NUMBER
        if isinstance(val, LString):
            return STRING

        if isinstance(val, LUserData):
            payload = self.unwrap(val)
            if payload is None:
                raise error_values_not_allowed(val.kind_name, path)
            return payload.type

        if isinstance(val, LTable):
            return make_object_type({
                name: self._implied_type(item, path.get_attr(name))
                for name, item in self._string_keyed(val, path).items()
            })

        raise error_values_not_allowed(val.kind_name, path)


def _array_position(key: LValue) -> Optional[int]:
    """The array position of an integer key, or None for any other key."""
    if isinstance(key, LNumber) and key.is_integer():
        return int(key.value) - ARRAY_ORIGIN
    return None
