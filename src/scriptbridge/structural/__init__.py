"""
Structural value system.

This package provides:
- Types: primitives, list/set/map collections, object/tuple structures and
  the dynamic pseudo-type
- Values: immutable typed values, including null and unknown values
- Paths: locating a position inside nested values
- convert: generic conversion between compatible types
- operations: typed arithmetic and comparison
- Function: typed functions over structural values
"""

from .types import (
    Type,
    TypeKind,
    PrimitiveType,
    DynamicPseudoType,
    ListType,
    SetType,
    MapType,
    ObjectType,
    TupleType,
    BOOL,
    NUMBER,
    STRING,
    DYNAMIC,
    EMPTY_OBJECT,
    EMPTY_TUPLE,
    make_list_type,
    make_set_type,
    make_map_type,
    make_object_type,
    make_tuple_type,
    is_dynamic,
    has_dynamic_types,
    unify,
)

from .path import (
    Path,
    PathStep,
    GetAttrStep,
    IndexStep,
    ROOT,
)

from .values import (
    Value,
    NUMBER_CONTEXT,
    null_val,
    unknown_val,
    bool_val,
    number_val,
    string_val,
    list_val,
    set_val,
    map_val,
    object_val,
    tuple_val,
    parse_number,
    format_number,
    TRUE,
    FALSE,
    ZERO,
    EMPTY_OBJECT_VAL,
    EMPTY_TUPLE_VAL,
    DYNAMIC_VAL,
)

from .convert import (
    convert,
    can_convert,
)

from .function import (
    Function,
    Parameter,
)

from .stdlib import (
    FunctionRegistry,
    get_function_registry,
    get_function,
)

from . import operations

__all__ = [
    # Types
    'Type',
    'TypeKind',
    'PrimitiveType',
    'DynamicPseudoType',
    'ListType',
    'SetType',
    'MapType',
    'ObjectType',
    'TupleType',
    'BOOL',
    'NUMBER',
    'STRING',
    'DYNAMIC',
    'EMPTY_OBJECT',
    'EMPTY_TUPLE',
    'make_list_type',
    'make_set_type',
    'make_map_type',
    'make_object_type',
    'make_tuple_type',
    'is_dynamic',
    'has_dynamic_types',
    'unify',

    # Paths
    'Path',
    'PathStep',
    'GetAttrStep',
    'IndexStep',
    'ROOT',

    # Values
    'Value',
    'NUMBER_CONTEXT',
    'null_val',
    'unknown_val',
    'bool_val',
    'number_val',
    'string_val',
    'list_val',
    'set_val',
    'map_val',
    'object_val',
    'tuple_val',
    'parse_number',
    'format_number',
    'TRUE',
    'FALSE',
    'ZERO',
    'EMPTY_OBJECT_VAL',
    'EMPTY_TUPLE_VAL',
    'DYNAMIC_VAL',

    # Conversion
    'convert',
    'can_convert',

    # Functions
    'Function',
    'Parameter',
    'FunctionRegistry',
    'get_function_registry',
    'get_function',

    'operations',
]
