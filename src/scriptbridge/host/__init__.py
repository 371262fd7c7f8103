"""
Host runtime model.

This module provides:
- Host values: nil, boolean, number, string, table, function, userdata
- HostState: value construction, host errors, calls and operator evaluation
- from_python: maps plain Python data onto host values
"""

from .values import (
    HostKind,
    LValue,
    LNil,
    LBool,
    LTrue,
    LFalse,
    LNumber,
    LString,
    LTable,
    LFunction,
    LUserData,
    ARRAY_ORIGIN,
    from_python,
)

from .state import (
    HostState,
    boolean,
    number_to_string,
    string_to_number,
)

__all__ = [
    'HostKind',
    'LValue',
    'LNil',
    'LBool',
    'LTrue',
    'LFalse',
    'LNumber',
    'LString',
    'LTable',
    'LFunction',
    'LUserData',
    'ARRAY_ORIGIN',
    'from_python',
    'HostState',
    'boolean',
    'number_to_string',
    'string_to_number',
]
