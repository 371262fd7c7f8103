"""
Generic conversion between structural types.

`convert(value, type)` handles the coercions the structural system allows on
its own: number/bool to string and back, widening and narrowing between
compatible collections (tuple to list, list to set, object to map, map to
object, ...), and picking concrete element types where the target asks for a
dynamic one. Errors carry the path to the offending element.
"""

from typing import Dict, List, Tuple

from ..errors import (
    ConversionError, ErrorKind,
    error_inconsistent_types, error_required,
)
from .path import Path, ROOT
from .types import (
    Type, ListType, SetType, MapType, ObjectType, TupleType,
    BOOL, NUMBER, STRING,
    is_dynamic, has_dynamic_types, unify,
)
from .values import (
    Value, null_val, unknown_val, bool_val, number_val, string_val,
    list_val, set_val, map_val, format_number, parse_number,
)


def convert(value: Value, want: Type) -> Value:
    """
    Convert `value` to type `want`.

    Raises ConversionError (path relative to `value`) if no conversion exists.
    """
    return _convert(value, want, ROOT)


def can_convert(have: Type, want: Type) -> bool:
    """Check whether values of type `have` may convert to type `want`."""
    if have == want or is_dynamic(have) or is_dynamic(want):
        return True

    if have.is_primitive() and want.is_primitive():
        # number and bool only meet through string
        return STRING in (have, want)

    if isinstance(want, (ListType, SetType)):
        if isinstance(have, (ListType, SetType)):
            return can_convert(have.element_type, want.element_type)
        if isinstance(have, TupleType):
            return _elements_convert(list(have.element_types), want.element_type)
        return False

    if isinstance(want, TupleType):
        if isinstance(have, TupleType):
            return len(have.element_types) == len(want.element_types) and all(
                can_convert(h, w) for h, w in zip(have.element_types, want.element_types))
        if isinstance(have, (ListType, SetType)):
            return all(can_convert(have.element_type, w) for w in want.element_types)
        return False

    if isinstance(want, MapType):
        if isinstance(have, MapType):
            return can_convert(have.element_type, want.element_type)
        if isinstance(have, ObjectType):
            return _elements_convert([t for _, t in have.attributes], want.element_type)
        return False

    if isinstance(want, ObjectType):
        if isinstance(have, ObjectType):
            have_attrs = have.attribute_types
            return all(
                name in have_attrs and can_convert(have_attrs[name], attr_type)
                for name, attr_type in want.attributes)
        if isinstance(have, MapType):
            return all(can_convert(have.element_type, t) for _, t in want.attributes)
        return False

    return False


def _elements_convert(types: List[Type], element_type: Type) -> bool:
    if is_dynamic(element_type):
        return unify(types) is not None
    return all(can_convert(t, element_type) for t in types)


def _convert(val: Value, want: Type, path: Path) -> Value:
    if is_dynamic(want) or val.type == want:
        return val

    if not val.is_known or val.is_null:
        if not can_convert(val.type, want):
            raise _mismatch(want, path)
        if has_dynamic_types(want):
            # keeps a concrete type for the caller to unify
            return val
        return unknown_val(want) if not val.is_known else null_val(want)

    if want.is_primitive():
        return _convert_primitive(val, want, path)
    if isinstance(want, (ListType, SetType)):
        return _convert_to_collection(val, want, path)
    if isinstance(want, TupleType):
        return _convert_to_tuple(val, want, path)
    if isinstance(want, MapType):
        return _convert_to_map(val, want, path)
    if isinstance(want, ObjectType):
        return _convert_to_object(val, want, path)
    raise _mismatch(want, path)


def _convert_primitive(val: Value, want: Type, path: Path) -> Value:
    if want == STRING:
        if val.type == NUMBER:
            return string_val(format_number(val.data))
        if val.type == BOOL:
            return string_val("true" if val.data else "false")
    elif want == NUMBER:
        if val.type == STRING:
            try:
                return number_val(parse_number(val.data))
            except ValueError:
                raise _mismatch(want, path) from None
    elif want == BOOL:
        if val.type == STRING:
            if val.data == "true":
                return bool_val(True)
            if val.data == "false":
                return bool_val(False)
    raise _mismatch(want, path)


def _convert_to_collection(val: Value, want: Type, path: Path) -> Value:
    if not isinstance(val.type, (ListType, SetType, TupleType)):
        raise _mismatch(want, path)

    default = want.element_type
    if is_dynamic(default) and not isinstance(val.type, TupleType):
        default = val.type.element_type

    elements, element_type = _convert_elements(
        list(enumerate(val.data)), want.element_type, default, path)
    if isinstance(want, SetType):
        return set_val(elements, element_type)
    return list_val(elements, element_type)


def _convert_to_tuple(val: Value, want: TupleType, path: Path) -> Value:
    if not isinstance(val.type, (ListType, SetType, TupleType)):
        raise _mismatch(want, path)
    if len(val.data) != len(want.element_types):
        raise ConversionError(
            path, f"a tuple of {len(want.element_types)} elements is required",
            ErrorKind.SHAPE_MISMATCH)

    elements = [
        _convert(item, element_type, path.index(i))
        for i, (item, element_type) in enumerate(zip(val.data, want.element_types))
    ]
    return Value(TupleType(tuple(e.type for e in elements)), tuple(elements))


def _convert_to_map(val: Value, want: MapType, path: Path) -> Value:
    if not isinstance(val.type, (MapType, ObjectType)):
        raise _mismatch(want, path)

    default = want.element_type
    if is_dynamic(default) and isinstance(val.type, MapType):
        default = val.type.element_type

    entries = list(val.data.items())
    elements, element_type = _convert_elements(entries, want.element_type, default, path)
    return map_val(dict(zip((key for key, _ in entries), elements)), element_type)


def _convert_elements(entries, element_type: Type, default: Type,
                      path: Path) -> Tuple[List[Value], Type]:
    """
    Convert keyed elements to a single element type.

    Where `element_type` has dynamic parts, the converted elements must agree
    on one concrete type (see unify); `default` applies when there are none.
    """
    if not has_dynamic_types(element_type):
        return [_convert(item, element_type, path.index(key)) for key, item in entries], element_type
    if not entries:
        return [], default

    converted = [_convert(item, element_type, path.index(key)) for key, item in entries]
    concrete = unify(v.type for v in converted)
    if concrete is None:
        raise error_inconsistent_types(path)
    return [
        _convert(v, concrete, path.index(key))
        for (key, _), v in zip(entries, converted)
    ], concrete


def _convert_to_object(val: Value, want: ObjectType, path: Path) -> Value:
    if not isinstance(val.type, (MapType, ObjectType)):
        raise _mismatch(want, path)

    if isinstance(val.type, MapType):
        for key in val.data:
            if not want.has_attribute(key):
                raise ConversionError(
                    path, f'unsupported attribute "{key}"', ErrorKind.SHAPE_MISMATCH)

    attributes: Dict[str, Value] = {}
    for name, attr_type in want.attributes:
        if name not in val.data:
            raise error_required(f'attribute "{name}"', path)
        attributes[name] = _convert(val.data[name], attr_type, path.get_attr(name))

    obj_type = ObjectType(tuple((name, attributes[name].type) for name, _ in want.attributes))
    return Value(obj_type, attributes)


def _mismatch(want: Type, path: Path) -> ConversionError:
    article = "an" if want.name[0] in "aeiou" else "a"
    return error_required(f"{article} {want.name}", path)
