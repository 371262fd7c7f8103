"""
Paths locating a position inside a nested structural value.

A path is an immutable sequence of steps. Descending one level returns a new
path, so sibling conversions never observe each other's steps.
"""

import re
from dataclasses import dataclass
from typing import Iterator, Tuple, Union

from ..errors import ConversionError, ErrorKind


_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


@dataclass(frozen=True)
class GetAttrStep:
    """Access to a named object attribute."""
    name: str

    def render(self) -> str:
        if _IDENTIFIER.match(self.name):
            return f".{self.name}"
        return f"[{_render_key(self.name)}]"


@dataclass(frozen=True)
class IndexStep:
    """Access to a sequence position (int) or map key (str)."""
    key: Union[int, str]

    def render(self) -> str:
        return f"[{_render_key(self.key)}]"


PathStep = Union[GetAttrStep, IndexStep]


@dataclass(frozen=True)
class Path:
    """An ordered, immutable sequence of access steps."""
    steps: Tuple[PathStep, ...] = ()

    def get_attr(self, name: str) -> "Path":
        """Return a new path one attribute step deeper."""
        return Path(self.steps + (GetAttrStep(name),))

    def index(self, key: Union[int, str]) -> "Path":
        """Return a new path one index step deeper."""
        return Path(self.steps + (IndexStep(key),))

    def extend(self, other: "Path") -> "Path":
        return Path(self.steps + other.steps)

    def new_error(self, message: str,
                  kind: ErrorKind = ErrorKind.TYPE_MISMATCH) -> ConversionError:
        """Create a conversion error located at this path."""
        return ConversionError(self, message, kind)

    def to_json(self) -> list:
        return [
            {"attr": s.name} if isinstance(s, GetAttrStep) else {"index": s.key}
            for s in self.steps
        ]

    def __len__(self) -> int:
        return len(self.steps)

    def __iter__(self) -> Iterator[PathStep]:
        return iter(self.steps)

    def __str__(self) -> str:
        return "".join(step.render() for step in self.steps)


ROOT = Path()


def _render_key(key: Union[int, str]) -> str:
    if isinstance(key, int):
        return str(key)
    escaped = key.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'
