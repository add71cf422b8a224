"""gststructure - parser and serializer for GStreamer structure and caps text

Reads and writes the textual structure/caps format without depending on the
multimedia framework that defines it.

Example:
    from gststructure import parse_structure, structure_to_string

    s = parse_structure("seek, start=5.0, flags=flush+accurate")
    s.fields["start"]        # DoubleValue(5.0)
    s.fields["flags"]        # FlagsValue(("flush", "accurate"))
    structure_to_string(s)   # "seek, start=(double)5.0, flags=flush+accurate"
"""

from gststructure.types import (
    Value,
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
    Structure,
    CapsEntry,
    Caps,
    CapsAny,
    CapsEmpty,
    CapsStructures,
)

from gststructure.errors import ParseError

from gststructure.config import (
    DEFAULT_MAX_DEPTH,
    BITMASK_BITS,
    get_max_depth,
)

from gststructure.grammar import (
    infer_type,
    interpret_typed,
)

from gststructure.parser import (
    parse_structure,
    parse_structure_or_throw,
    parse_caps,
    parse_caps_or_throw,
)

from gststructure.serializer import (
    value_to_string,
    value_to_string_bare,
    structure_to_string,
    caps_to_string,
)

from gststructure.structure import (
    GstStructure,
    unwrap_value,
)

from gststructure.caps import GstCaps

__all__ = [
    # Value model
    "Value",
    "IntValue",
    "DoubleValue",
    "StringValue",
    "BooleanValue",
    "FractionValue",
    "BitmaskValue",
    "FlagsValue",
    "ListValue",
    "ArrayValue",
    "RangeValue",
    "StructureValue",
    "CapsValue",
    "TypedValue",
    "Structure",
    "CapsEntry",
    "Caps",
    "CapsAny",
    "CapsEmpty",
    "CapsStructures",
    # Errors
    "ParseError",
    # Configuration
    "DEFAULT_MAX_DEPTH",
    "BITMASK_BITS",
    "get_max_depth",
    # Parsing
    "infer_type",
    "interpret_typed",
    "parse_structure",
    "parse_structure_or_throw",
    "parse_caps",
    "parse_caps_or_throw",
    # Serialization
    "value_to_string",
    "value_to_string_bare",
    "structure_to_string",
    "caps_to_string",
    # Accessors
    "GstStructure",
    "GstCaps",
    "unwrap_value",
]
