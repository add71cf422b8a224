"""Field access over a parsed structure

GstStructure wraps a Structure and hands out plain Python values instead of
the typed value tree. Use `get_typed()` when the kind matters, e.g. to tell
an int from a double.

Example:
    s = GstStructure.from_string("video/x-raw, format=I420, width=1920")
    s.name              # "video/x-raw"
    s.get("width")      # 1920
    s.get("format")     # "I420"
    s.get_typed("width")  # IntValue(1920)
    list(s.keys())      # ["format", "width"]
"""

from typing import Any, Iterator, KeysView, List, Mapping, Optional, Tuple

from gststructure.grammar.parser import Parser
from gststructure.serializer import structure_to_string
from gststructure.types import (
    ArrayValue,
    BitmaskValue,
    BooleanValue,
    CapsValue,
    DoubleValue,
    FlagsValue,
    FractionValue,
    IntValue,
    ListValue,
    RangeValue,
    StringValue,
    Structure,
    StructureValue,
    TypedValue,
    Value,
)


def unwrap_value(v: Value) -> Any:
    """Convert a typed value to its plain Python form

    | kind                                  | result                         |
    |---------------------------------------|--------------------------------|
    | int, double, string, boolean, bitmask | int / float / str / bool / int |
    | fraction                              | (numerator, denominator)       |
    | flags                                 | list of str                    |
    | list, array                           | list (recursively unwrapped)   |
    | range                                 | dict with min, max [, step]    |
    | structure                             | GstStructure                   |
    | caps                                  | GstCaps                        |
    | typed                                 | the unwrapped inner value      |
    """
    if isinstance(v, (IntValue, DoubleValue, StringValue, BooleanValue, BitmaskValue)):
        return v.value
    if isinstance(v, FractionValue):
        return (v.numerator, v.denominator)
    if isinstance(v, FlagsValue):
        return list(v.flags)
    if isinstance(v, (ListValue, ArrayValue)):
        return [unwrap_value(item) for item in v.items]
    if isinstance(v, RangeValue):
        bounds = {"min": unwrap_value(v.min), "max": unwrap_value(v.max)}
        if v.step is not None:
            bounds["step"] = unwrap_value(v.step)
        return bounds
    if isinstance(v, StructureValue):
        return GstStructure(v.value)
    if isinstance(v, CapsValue):
        from gststructure.caps import GstCaps

        return GstCaps(v.value)
    if isinstance(v, TypedValue):
        return unwrap_value(v.value)
    raise TypeError(f"Not a structure value: {v!r}")


class GstStructure:
    """A structure with explicit field accessors

    Field names never shadow attributes: a field called "name" is read with
    `get("name")`, while `.name` is always the structure name.
    """

    def __init__(self, structure: Structure):
        self._structure = structure

    @classmethod
    def from_string(cls, s: str) -> "GstStructure":
        """Parse a structure string

        Raises ParseError if the string is invalid.
        """
        return cls(Parser(s.strip()).parse_structure())

    @property
    def name(self) -> str:
        return self._structure.name

    @property
    def fields(self) -> Mapping[str, Value]:
        """The typed, read-only field mapping"""
        return self._structure.fields

    @property
    def structure(self) -> Structure:
        return self._structure

    def get(self, key: str, default: Any = None) -> Any:
        """Get the unwrapped value of a field, or default if absent"""
        v = self._structure.fields.get(key)
        if v is None:
            return default
        return unwrap_value(v)

    def get_typed(self, key: str) -> Optional[Value]:
        """Get the typed value of a field, or None if absent"""
        return self._structure.fields.get(key)

    def keys(self) -> KeysView[str]:
        return self._structure.fields.keys()

    def items(self) -> List[Tuple[str, Any]]:
        """(name, unwrapped value) pairs in field order"""
        return [(k, unwrap_value(v)) for k, v in self._structure.fields.items()]

    def to_string(self) -> str:
        return structure_to_string(self._structure)

    def __contains__(self, key: object) -> bool:
        return key in self._structure.fields

    def __len__(self) -> int:
        return len(self._structure.fields)

    def __iter__(self) -> Iterator[str]:
        return iter(self._structure.fields)

    def __str__(self) -> str:
        return self.to_string()

    def __repr__(self) -> str:
        return f"GstStructure('{self.to_string()}')"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, GstStructure):
            return False
        return self._structure == other._structure

    def __hash__(self) -> int:
        return hash(self._structure)
