"""Value model for structures and caps

Every value kind is its own frozen dataclass and `Value` is the union of
them. Consumers dispatch with isinstance checks; an object outside the union
is a programming error and is rejected with TypeError.

Type inference order (when no explicit type is given):
    int -> double -> fraction -> flags -> boolean -> string

Examples:
- `IntValue(1920)`                        width=1920
- `FractionValue(30, 1)`                  framerate=30/1
- `FlagsValue(("flush", "accurate"))`     flags=flush+accurate
- `RangeValue(IntValue(1), IntValue(100))` r=[1, 100]
"""

import re
from dataclasses import dataclass
from types import MappingProxyType
from typing import ClassVar, Iterable, Mapping, Optional, Tuple, Union

from gststructure.config import BITMASK_MAX


_NAME_START_RE = re.compile(r"[A-Za-z_]")


# =============================================================================
# SCALARS
# =============================================================================

@dataclass(frozen=True)
class IntValue:
    """An integer (gint, guint, gint64, ...)"""
    value: int

    kind: ClassVar[str] = "int"


@dataclass(frozen=True)
class DoubleValue:
    """A floating-point number (gdouble, gfloat)"""
    value: float

    kind: ClassVar[str] = "double"


@dataclass(frozen=True)
class StringValue:
    """A string (gchararray)"""
    value: str

    kind: ClassVar[str] = "string"


@dataclass(frozen=True)
class BooleanValue:
    """A boolean (gboolean)"""
    value: bool

    kind: ClassVar[str] = "boolean"


@dataclass(frozen=True)
class FractionValue:
    """An exact numerator/denominator pair (GstFraction)

    Kept unreduced: 2/4 stays 2/4.
    """
    numerator: int
    denominator: int

    kind: ClassVar[str] = "fraction"

    def __post_init__(self):
        if self.numerator < 0 or self.denominator < 0:
            raise ValueError(
                f"Fraction members must be non-negative, got {self.numerator}/{self.denominator}"
            )


@dataclass(frozen=True)
class BitmaskValue:
    """A 64-bit unsigned bitmask (GstBitmask)"""
    value: int

    kind: ClassVar[str] = "bitmask"

    def __post_init__(self):
        if not 0 <= self.value <= BITMASK_MAX:
            raise ValueError(f"Bitmask out of 64-bit range: {self.value}")


@dataclass(frozen=True)
class FlagsValue:
    """Two or more named flags combined with '+' (flush+accurate)"""
    flags: Tuple[str, ...]

    kind: ClassVar[str] = "flags"

    def __post_init__(self):
        object.__setattr__(self, "flags", tuple(self.flags))
        if len(self.flags) < 2:
            raise ValueError(f"Flags need at least two members, got {list(self.flags)}")


# =============================================================================
# CONTAINERS
# =============================================================================

@dataclass(frozen=True)
class ListValue:
    """A GstValueList: { item1, item2, ... }"""
    items: Tuple["Value", ...]

    kind: ClassVar[str] = "list"

    def __post_init__(self):
        object.__setattr__(self, "items", tuple(self.items))


@dataclass(frozen=True)
class ArrayValue:
    """A GstValueArray: < item1, item2, ... >"""
    items: Tuple["Value", ...]

    kind: ClassVar[str] = "array"

    def __post_init__(self):
        object.__setattr__(self, "items", tuple(self.items))


@dataclass(frozen=True)
class RangeValue:
    """A range: [ min, max ] or [ min, max, step ]

    Bounds are typed independently; no agreement between them is enforced.
    """
    min: "Value"
    max: "Value"
    step: Optional["Value"] = None

    kind: ClassVar[str] = "range"


@dataclass(frozen=True)
class StructureValue:
    """A nested structure"""
    value: "Structure"

    kind: ClassVar[str] = "structure"


@dataclass(frozen=True)
class CapsValue:
    """A nested caps"""
    value: "Caps"

    kind: ClassVar[str] = "caps"


@dataclass(frozen=True)
class TypedValue:
    """A value carrying a type tag the coercion table does not know

    The tag is kept with its original spelling so the value serializes back
    unchanged, e.g. `(GstVideoFormat)I420`.
    """
    type_name: str
    value: "Value"

    kind: ClassVar[str] = "typed"


Value = Union[
    IntValue,
    DoubleValue,
    StringValue,
    BooleanValue,
    FractionValue,
    BitmaskValue,
    FlagsValue,
    ListValue,
    ArrayValue,
    RangeValue,
    StructureValue,
    CapsValue,
    TypedValue,
]

VALUE_TYPES = (
    IntValue,
    DoubleValue,
    StringValue,
    BooleanValue,
    FractionValue,
    BitmaskValue,
    FlagsValue,
    ListValue,
    ArrayValue,
    RangeValue,
    StructureValue,
    CapsValue,
    TypedValue,
)


# =============================================================================
# STRUCTURE
# =============================================================================

@dataclass(frozen=True, init=False)
class Structure:
    """A named collection of key/value fields

    The name starts with a letter or underscore and may contain letters,
    digits, hyphens, underscores, dots, colons and slashes (video/x-raw).
    Fields keep their insertion order, which is also the serialization order.
    The field mapping is read-only.
    """
    name: str
    fields: Mapping[str, Value]

    def __init__(self, name: str, fields: Union[Mapping[str, Value], Iterable[Tuple[str, Value]], None] = None):
        if not name or not _NAME_START_RE.match(name):
            raise ValueError(f"Structure name must start with a letter or underscore, got {name!r}")
        object.__setattr__(self, "name", name)
        object.__setattr__(self, "fields", MappingProxyType(dict(fields or ())))

    def __repr__(self) -> str:
        return f"Structure({self.name!r}, {dict(self.fields)!r})"

    def __hash__(self) -> int:
        return hash((self.name, tuple(self.fields.items())))


# =============================================================================
# CAPS
# =============================================================================

@dataclass(frozen=True)
class CapsEntry:
    """One structure in a caps with its capability features (memory:DMABuf)"""
    structure: Structure
    features: Tuple[str, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "features", tuple(self.features))


@dataclass(frozen=True)
class CapsAny:
    """Caps matching anything, serialized as ANY"""

    kind: ClassVar[str] = "any"


@dataclass(frozen=True)
class CapsEmpty:
    """Caps matching nothing, serialized as EMPTY (NONE is accepted on input)"""

    kind: ClassVar[str] = "empty"


@dataclass(frozen=True)
class CapsStructures:
    """Caps made of one or more structures"""
    entries: Tuple[CapsEntry, ...]

    kind: ClassVar[str] = "structures"

    def __post_init__(self):
        object.__setattr__(self, "entries", tuple(self.entries))
        if not self.entries:
            raise ValueError("Caps structures need at least one entry; use CapsEmpty for no caps")


Caps = Union[CapsAny, CapsEmpty, CapsStructures]
