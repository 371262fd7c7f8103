"""
Structural functions: typed parameters, an optional variadic parameter, a
return type and a Python implementation.
"""

from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence, Union

from ..errors import ConversionError, FunctionArgumentError
from .convert import convert
from .types import Type, is_dynamic
from .values import Value, unknown_val


@dataclass
class Parameter:
    """A function parameter and its null/unknown policy."""
    name: str
    type: Type
    allow_null: bool = False
    allow_unknown: bool = False


ReturnType = Union[Type, Callable[[List[Value]], Type]]


@dataclass
class Function:
    """
    A function over structural values.

    `return_type` is either a fixed type or a callable computing it from the
    converted arguments. `implementation` receives the converted arguments
    and the resolved return type.
    """
    name: str
    params: List[Parameter]
    return_type: ReturnType
    implementation: Callable[[List[Value], Type], Value]
    var_param: Optional[Parameter] = None
    doc: str = ""

    @property
    def is_variadic(self) -> bool:
        return self.var_param is not None

    def param_for(self, index: int) -> Optional[Parameter]:
        """The parameter that receives the positional argument at `index`."""
        if index < len(self.params):
            return self.params[index]
        return self.var_param

    def resolve_return_type(self, args: List[Value]) -> Type:
        if callable(self.return_type):
            return self.return_type(args)
        return self.return_type

    def call(self, args: Sequence[Value]) -> Value:
        """
        Call the function.

        Arguments are converted to their parameter types first. If any
        argument is unknown (and its parameter doesn't accept unknowns) the
        result is unknown without running the implementation.
        """
        if len(args) < len(self.params):
            missing = self.params[len(args)]
            raise FunctionArgumentError(
                len(args), f'missing argument "{missing.name}"')
        if len(args) > len(self.params) and not self.is_variadic:
            raise FunctionArgumentError(
                len(self.params),
                f"too many arguments; only {len(self.params)} allowed")

        converted: List[Value] = []
        short_circuit = False
        for i, arg in enumerate(args):
            param = self.param_for(i)
            try:
                arg = convert(arg, param.type)
            except ConversionError as err:
                raise FunctionArgumentError(i, err.message, err.path) from None
            if arg.is_null and not param.allow_null:
                raise FunctionArgumentError(i, "argument must not be null")
            if not arg.is_known and not param.allow_unknown:
                short_circuit = True
            converted.append(arg)

        ret_type = self.resolve_return_type(converted)
        if short_circuit:
            return unknown_val(ret_type)

        result = self.implementation(converted, ret_type)
        if not is_dynamic(ret_type) and result.type != ret_type:
            result = convert(result, ret_type)
        return result
