"""
Expose structural functions to host scripts.
"""

import logging
from typing import List, Optional

from ..errors import ConversionError, FunctionArgumentError, OperationError
from ..host import HostState, LFunction, LValue, LNil
from ..structural import Function

logger = logging.getLogger(__name__)


def wrap_function(converter, function: Function, name: Optional[str] = None) -> LFunction:
    """
    Adapt a structural function into a host function.

    Each host argument is converted to its parameter's type (a variadic
    parameter's type applies to every remaining argument). Missing trailing
    arguments are nil, as in any host call. Failures raise host runtime
    errors; on success the result comes back wrapped.
    """
    name = name or function.name

    def call(state: HostState, args: List[LValue]) -> List[LValue]:
        args = list(args)
        if len(args) < len(function.params):
            args += [LNil] * (len(function.params) - len(args))
        if len(args) > len(function.params) and not function.is_variadic:
            state.raise_error(
                f"bad argument #{len(function.params) + 1} to '{name}' "
                f"(too many arguments; only {len(function.params)} allowed)")

        values = []
        for i, arg in enumerate(args):
            param = function.param_for(i)
            try:
                values.append(converter.convert(arg, param.type))
            except ConversionError as err:
                logger.debug("argument %d to %s rejected: %s", i + 1, name, err)
                state.raise_error(f"bad argument #{i + 1} to '{name}' ({err})")

        try:
            result = function.call(values)
        except FunctionArgumentError as err:
            logger.debug("%s rejected argument %d: %s", name, err.index + 1, err)
            state.raise_error(f"bad argument #{err.index + 1} to '{name}' ({err})")
        except (ConversionError, OperationError) as err:
            logger.debug("%s failed: %s", name, err)
            state.raise_error(f"{name}: {err}")

        return [converter.wrap(result)]

    return converter.state.new_function(call, name=name)
