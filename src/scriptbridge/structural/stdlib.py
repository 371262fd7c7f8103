"""
Built-in structural function registry.

A small standard library of functions over structural values, ready to be
exposed to host scripts through the function wrapper.
"""

from typing import Dict, List, Optional

from ..errors import FunctionArgumentError
from .function import Function, Parameter
from .types import Type, ListType, NUMBER, STRING, DYNAMIC
from .values import (
    Value, NUMBER_CONTEXT, number_val, string_val,
)


class FunctionRegistry:
    """
    Registry of structural functions, looked up by name.
    """

    def __init__(self):
        self._functions: Dict[str, Function] = {}
        self._register_all()

    def get_function(self, name: str) -> Optional[Function]:
        """Look up a function by name."""
        return self._functions.get(name)

    def register(self, func: Function) -> None:
        """Register a function."""
        self._functions[func.name] = func

    def names(self) -> List[str]:
        return sorted(self._functions)

    def _register_all(self) -> None:
        self._register_string_functions()
        self._register_number_functions()
        self._register_collection_functions()

    # --- String Functions ---

    def _register_string_functions(self) -> None:

        def _upper(args: List[Value], ret: Type) -> Value:
            return string_val(args[0].data.upper())

        def _lower(args: List[Value], ret: Type) -> Value:
            return string_val(args[0].data.lower())

        def _join(args: List[Value], ret: Type) -> Value:
            separator, items = args
            for i, item in enumerate(items.data):
                if item.is_null:
                    raise FunctionArgumentError(1, f"element {i} is null")
            return string_val(separator.data.join(item.data for item in items.data))

        self.register(Function(
            name="upper",
            params=[Parameter("str", STRING)],
            return_type=STRING,
            implementation=_upper,
            doc="Convert letters in a string to uppercase.",
        ))
        self.register(Function(
            name="lower",
            params=[Parameter("str", STRING)],
            return_type=STRING,
            implementation=_lower,
            doc="Convert letters in a string to lowercase.",
        ))
        self.register(Function(
            name="join",
            params=[Parameter("separator", STRING), Parameter("list", ListType(STRING))],
            return_type=STRING,
            implementation=_join,
            doc="Concatenate a list of strings with a separator.",
        ))

    # --- Number Functions ---

    def _register_number_functions(self) -> None:

        def _extremum(pick):
            def impl(args: List[Value], ret: Type) -> Value:
                if not args:
                    raise FunctionArgumentError(0, "must pass at least one number")
                return number_val(pick(a.data for a in args))
            return impl

        def _abs(args: List[Value], ret: Type) -> Value:
            return number_val(NUMBER_CONTEXT.abs(args[0].data))

        self.register(Function(
            name="max",
            params=[],
            var_param=Parameter("numbers", NUMBER),
            return_type=NUMBER,
            implementation=_extremum(max),
            doc="Return the greatest of the given numbers.",
        ))
        self.register(Function(
            name="min",
            params=[],
            var_param=Parameter("numbers", NUMBER),
            return_type=NUMBER,
            implementation=_extremum(min),
            doc="Return the smallest of the given numbers.",
        ))
        self.register(Function(
            name="abs",
            params=[Parameter("num", NUMBER)],
            return_type=NUMBER,
            implementation=_abs,
            doc="Return the absolute value of a number.",
        ))

    # --- Collection Functions ---

    def _register_collection_functions(self) -> None:

        def _length(args: List[Value], ret: Type) -> Value:
            return args[0].length()

        self.register(Function(
            name="length",
            params=[Parameter("value", DYNAMIC, allow_unknown=True)],
            return_type=NUMBER,
            implementation=_length,
            doc="Number of elements in a collection, or characters in a string.",
        ))


_registry: Optional[FunctionRegistry] = None


def get_function_registry() -> FunctionRegistry:
    """Get the shared function registry."""
    global _registry
    if _registry is None:
        _registry = FunctionRegistry()
    return _registry


def get_function(name: str) -> Optional[Function]:
    return get_function_registry().get_function(name)
