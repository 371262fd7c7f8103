"""
scriptbridge: structural values for an embedded scripting host.

This module provides:
- Converter: turns host values (nil, booleans, numbers, strings, tables) into
  typed structural values, inferring the type when asked for `DYNAMIC`
- Wrapped values: structural values handed to scripts as userdata whose
  operators (==, +, -, *, /, %, unary -, .., #, indexing, <, <=) delegate to
  the structural system
- Wrapped functions: structural functions callable from scripts

Usage:
    from scriptbridge import Converter, HostState, DYNAMIC, string_val

    state = HostState()
    conv = Converter(state)

    table = state.new_table({"name": "web", "port": 8080})
    value = conv.convert(table, DYNAMIC)      # object with name, port
    conv.infer_type(table)                    # object type

    greeting = conv.wrap(string_val("hello"))
    state.set_global("greeting", greeting)
"""

from .errors import (
    ErrorKind,
    BridgeError,
    PathError,
    ConversionError,
    OperationError,
    FunctionArgumentError,
    HostRuntimeError,
    ConfigError,
)

from .config import (
    BridgeConfig,
    StringLength,
    NullIndex,
    load_config,
)

from .structural import (
    Type,
    ListType,
    SetType,
    MapType,
    ObjectType,
    TupleType,
    BOOL,
    NUMBER,
    STRING,
    DYNAMIC,
    make_list_type,
    make_set_type,
    make_map_type,
    make_object_type,
    make_tuple_type,
    Path,
    Value,
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
    convert,
    Function,
    Parameter,
    get_function,
)

from .host import (
    HostState,
    HostKind,
    LValue,
    LNil,
    LBool,
    LNumber,
    LString,
    LTable,
    LFunction,
    LUserData,
    from_python,
)

from .bridge import (
    Converter,
    wrap_function,
)

__version__ = "0.1.0"

__all__ = [
    # Errors
    'ErrorKind',
    'BridgeError',
    'PathError',
    'ConversionError',
    'OperationError',
    'FunctionArgumentError',
    'HostRuntimeError',
    'ConfigError',

    # Config
    'BridgeConfig',
    'StringLength',
    'NullIndex',
    'load_config',

    # Structural types and values
    'Type',
    'ListType',
    'SetType',
    'MapType',
    'ObjectType',
    'TupleType',
    'BOOL',
    'NUMBER',
    'STRING',
    'DYNAMIC',
    'make_list_type',
    'make_set_type',
    'make_map_type',
    'make_object_type',
    'make_tuple_type',
    'Path',
    'Value',
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
    'convert',
    'Function',
    'Parameter',
    'get_function',

    # Host
    'HostState',
    'HostKind',
    'LValue',
    'LNil',
    'LBool',
    'LNumber',
    'LString',
    'LTable',
    'LFunction',
    'LUserData',
    'from_python',

    # Bridge
    'Converter',
    'wrap_function',
]
