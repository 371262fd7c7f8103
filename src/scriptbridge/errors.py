"""
Bridge-specific exceptions and error helpers.

Error kinds follow the failure taxonomy of the bridge:
- TYPE_MISMATCH: a value cannot become the requested (or inferred) type
- SHAPE_MISMATCH: a table does not fit the declared collection shape
- UNSUPPORTED_KIND: a host value kind with no structural counterpart
- OPERATION_FAILED: the structural system rejected an operation

Messages are written for script authors and never mention implementation
details.
"""

from enum import Enum
from typing import TYPE_CHECKING, Any, Optional

if TYPE_CHECKING:
    from .structural.path import Path


class ErrorKind(Enum):
    """Classification of bridge failures."""
    TYPE_MISMATCH = "type-mismatch"
    SHAPE_MISMATCH = "shape-mismatch"
    UNSUPPORTED_KIND = "unsupported-kind"
    OPERATION_FAILED = "operation-failed"


class BridgeError(Exception):
    """Base exception for all scriptbridge errors."""
    pass


class PathError(BridgeError):
    """
    An error located at a path inside a nested value.

    The path is empty when the failure concerns the value as a whole.
    """

    def __init__(self, path: "Path", message: str,
                 kind: ErrorKind = ErrorKind.TYPE_MISMATCH):
        self.path = path
        self.message = message
        self.kind = kind
        super().__init__(message)

    def prefixed(self, path: "Path") -> "PathError":
        """Return a copy of this error re-rooted beneath `path`."""
        return type(self)(path.extend(self.path), self.message, self.kind)

    def __str__(self) -> str:
        if not self.path:
            return self.message
        return f"{self.path}: {self.message}"

    def to_json(self) -> dict:
        """Convert to JSON-serializable dict for tooling integration."""
        return {
            "kind": self.kind.value,
            "message": self.message,
            "path": self.path.to_json(),
        }


class ConversionError(PathError):
    """A value could not be converted or its type could not be inferred."""
    pass


class OperationError(PathError):
    """A structural operation (arithmetic, comparison, call) failed."""

    def __init__(self, path: "Path", message: str,
                 kind: ErrorKind = ErrorKind.OPERATION_FAILED):
        super().__init__(path, message, kind)


class FunctionArgumentError(OperationError):
    """A structural function rejected one of its arguments."""

    def __init__(self, index: int, message: str, path: Optional["Path"] = None):
        from .structural.path import Path
        self.index = index
        super().__init__(path if path is not None else Path(), message)

    def prefixed(self, path: "Path") -> "FunctionArgumentError":
        return FunctionArgumentError(self.index, self.message, path.extend(self.path))


class HostRuntimeError(BridgeError):
    """
    A runtime error visible to the host script.

    Raising it aborts the current host evaluation.
    """

    def __init__(self, message: str, value: Any = None):
        self.message = message
        self.value = value
        super().__init__(message)


class ConfigError(BridgeError):
    """Invalid bridge configuration."""
    pass


# --- Conversion errors ---

def error_values_not_allowed(kind_name: str, path: "Path") -> ConversionError:
    """A host value kind that has no structural counterpart here."""
    return ConversionError(path, f"{kind_name} values are not allowed",
                           ErrorKind.UNSUPPORTED_KIND)


def error_keys_must_be_strings(path: "Path") -> ConversionError:
    return ConversionError(path, "all table keys must be strings",
                           ErrorKind.SHAPE_MISMATCH)


def error_unexpected_key(key: str, path: "Path") -> ConversionError:
    return ConversionError(path, f"unexpected key {_quote(key)}",
                           ErrorKind.SHAPE_MISMATCH)


def error_index_out_of_range(index: int, path: "Path") -> ConversionError:
    return ConversionError(path, f"index {index} out of range",
                           ErrorKind.SHAPE_MISMATCH)


def error_missing_index(index: int, path: "Path") -> ConversionError:
    return ConversionError(path, f"missing element at index {index}",
                           ErrorKind.SHAPE_MISMATCH)


def error_duplicate_key(key: str, path: "Path") -> ConversionError:
    return ConversionError(path, f"duplicate key {_quote(key)}",
                           ErrorKind.SHAPE_MISMATCH)


def error_inconsistent_types(path: "Path") -> ConversionError:
    return ConversionError(path, "all values must be of the same type",
                           ErrorKind.SHAPE_MISMATCH)


def error_required(what: str, path: "Path") -> ConversionError:
    """E.g. 'a number is required'."""
    return ConversionError(path, f"{what} is required", ErrorKind.TYPE_MISMATCH)


def _quote(text: str) -> str:
    escaped = text.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'
