"""
Type system definitions for structural values.

The type system is organized into kinds:
    Primitives: bool, number, string
    Collections (uniform element type): list, set, map
    Structural (per-field types): object, tuple
    Dynamic: a placeholder meaning "infer the concrete type"
"""

from dataclasses import dataclass
from typing import Dict, Iterable, Mapping, Optional, Tuple
from enum import Enum
from abc import ABC, abstractmethod


class TypeKind(Enum):
    """Kind classification for structural types."""
    PRIMITIVE = 1
    COLLECTION = 2
    STRUCTURAL = 3
    DYNAMIC = 0


# =============================================================================
# Type Classes
# =============================================================================

@dataclass(frozen=True)
class Type(ABC):
    """Base class for all structural types."""

    @property
    @abstractmethod
    def name(self) -> str:
        """The friendly type name for display/errors."""
        pass

    @property
    @abstractmethod
    def kind(self) -> TypeKind:
        pass

    def is_primitive(self) -> bool:
        return self.kind == TypeKind.PRIMITIVE

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class PrimitiveType(Type):
    """A primitive type (bool, number, string)."""
    _name: str

    @property
    def name(self) -> str:
        return self._name

    @property
    def kind(self) -> TypeKind:
        return TypeKind.PRIMITIVE


@dataclass(frozen=True)
class DynamicPseudoType(Type):
    """
    The dynamic pseudo-type.

    Only meaningful as a conversion target (or element type) where it means
    "pick the concrete type from the input".
    """

    @property
    def name(self) -> str:
        return "dynamic"

    @property
    def kind(self) -> TypeKind:
        return TypeKind.DYNAMIC


@dataclass(frozen=True)
class ListType(Type):
    """An ordered sequence with a uniform element type."""
    element_type: Type

    @property
    def name(self) -> str:
        return f"list of {self.element_type.name}"

    @property
    def kind(self) -> TypeKind:
        return TypeKind.COLLECTION


@dataclass(frozen=True)
class SetType(Type):
    """An unordered collection of distinct values with a uniform element type."""
    element_type: Type

    @property
    def name(self) -> str:
        return f"set of {self.element_type.name}"

    @property
    def kind(self) -> TypeKind:
        return TypeKind.COLLECTION


@dataclass(frozen=True)
class MapType(Type):
    """A string-keyed association with a uniform element type."""
    element_type: Type

    @property
    def name(self) -> str:
        return f"map of {self.element_type.name}"

    @property
    def kind(self) -> TypeKind:
        return TypeKind.COLLECTION


@dataclass(frozen=True)
class ObjectType(Type):
    """
    A fixed set of named attributes, each with its own type.

    Attributes are held sorted by name so that two object types with the same
    attributes compare equal regardless of declaration order.
    """
    attributes: Tuple[Tuple[str, Type], ...] = ()

    def __post_init__(self):
        object.__setattr__(
            self, "attributes", tuple(sorted(self.attributes, key=lambda item: item[0])))

    @property
    def name(self) -> str:
        return "object"

    @property
    def kind(self) -> TypeKind:
        return TypeKind.STRUCTURAL

    @property
    def attribute_types(self) -> Dict[str, Type]:
        return dict(self.attributes)

    def attribute_type(self, name: str) -> Optional[Type]:
        for attr_name, attr_type in self.attributes:
            if attr_name == name:
                return attr_type
        return None

    def has_attribute(self, name: str) -> bool:
        return self.attribute_type(name) is not None


@dataclass(frozen=True)
class TupleType(Type):
    """A fixed-length sequence with a type per position."""
    element_types: Tuple[Type, ...] = ()

    @property
    def name(self) -> str:
        return "tuple"

    @property
    def kind(self) -> TypeKind:
        return TypeKind.STRUCTURAL

    @property
    def length(self) -> int:
        return len(self.element_types)


# =============================================================================
# Built-in Type Instances
# =============================================================================

BOOL = PrimitiveType("bool")
NUMBER = PrimitiveType("number")
STRING = PrimitiveType("string")
DYNAMIC = DynamicPseudoType()

EMPTY_OBJECT = ObjectType()
EMPTY_TUPLE = TupleType()


def make_list_type(element_type: Type) -> ListType:
    return ListType(element_type)


def make_set_type(element_type: Type) -> SetType:
    return SetType(element_type)


def make_map_type(element_type: Type) -> MapType:
    return MapType(element_type)


def make_object_type(attributes: Mapping[str, Type]) -> ObjectType:
    """Create an object type; attribute order is irrelevant."""
    return ObjectType(tuple(attributes.items()))


def make_tuple_type(element_types: Iterable[Type]) -> TupleType:
    return TupleType(tuple(element_types))


# =============================================================================
# Type Helpers
# =============================================================================

def is_dynamic(t: Type) -> bool:
    return isinstance(t, DynamicPseudoType)


def has_dynamic_types(t: Type) -> bool:
    """Check if the dynamic pseudo-type appears anywhere within `t`."""
    if is_dynamic(t):
        return True
    if isinstance(t, (ListType, SetType, MapType)):
        return has_dynamic_types(t.element_type)
    if isinstance(t, ObjectType):
        return any(has_dynamic_types(at) for _, at in t.attributes)
    if isinstance(t, TupleType):
        return any(has_dynamic_types(et) for et in t.element_types)
    return False


def unify(types: Iterable[Type]) -> Optional[Type]:
    """
    Find a single type that every one of `types` converts to.

    Identical types unify to themselves; mixed primitives unify to string.
    Returns None if no such type exists.
    """
    distinct = []
    for t in types:
        if is_dynamic(t):
            continue
        if t not in distinct:
            distinct.append(t)

    if not distinct:
        return DYNAMIC
    if len(distinct) == 1:
        return distinct[0]
    if all(t.is_primitive() for t in distinct):
        return STRING
    return None
