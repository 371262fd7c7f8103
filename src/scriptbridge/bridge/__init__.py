"""
The bridge between host values and structural values.

This module provides:
- Converter: host value -> structural value conversion, type inference,
  wrapping of structural values and functions
- OperatorHandlers: the metatable handlers behind wrapped values
- wrap_function: structural function -> host function adapter
"""

from .converter import Converter
from .operators import OperatorHandlers, build_metatable
from .functions import wrap_function

__all__ = [
    'Converter',
    'OperatorHandlers',
    'build_metatable',
    'wrap_function',
]
