"""Canonical serialization of values, structures and caps

The output re-parses to an equal tree. Every scalar except flags carries an
explicit `(type)` prefix so that inference cannot change its kind on the way
back in; doubles always contain a decimal point or an exponent.

Examples:
- `value_to_string(IntValue(42))`        -> `(int)42`
- `value_to_string(DoubleValue(5.0))`    -> `(double)5.0`
- `value_to_string_bare(DoubleValue(5))` -> `5.0`
- `structure_to_string(...)`             -> `video/x-raw, width=(int)1920`
- `caps_to_string(CapsAny())`            -> `ANY`
"""

import math

from gststructure.types import (
    ArrayValue,
    BitmaskValue,
    BooleanValue,
    Caps,
    CapsAny,
    CapsEmpty,
    CapsStructures,
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


_STRING_ESCAPES = {
    "\\": "\\\\",
    '"': '\\"',
    "\n": "\\n",
    "\t": "\\t",
    "\r": "\\r",
}


def escape_string(s: str) -> str:
    """Escape backslash, double quote, newline, tab and carriage return"""
    return "".join(_STRING_ESCAPES.get(ch, ch) for ch in s)


def quote_string(s: str) -> str:
    return f'"{escape_string(s)}"'


def format_int(value: int) -> str:
    """Decimal, or 0x hex when the value has too many digits for decimal"""
    try:
        return str(value)
    except ValueError:
        sign = "-" if value < 0 else ""
        return f"{sign}0x{abs(value):x}"


def format_double(value: float) -> str:
    """Render a double so it cannot be mistaken for an int on re-parse"""
    text = repr(float(value))
    if not math.isfinite(value):
        return text
    if "." in text or "e" in text or "E" in text:
        return text
    return text + ".0"


def _join(values) -> str:
    return ", ".join(value_to_string(v) for v in values)


def value_to_string(v: Value) -> str:
    """Serialize a value with its explicit type prefix"""
    if isinstance(v, IntValue):
        return f"(int){format_int(v.value)}"
    if isinstance(v, DoubleValue):
        return f"(double){format_double(v.value)}"
    if isinstance(v, StringValue):
        return f"(string){quote_string(v.value)}"
    if isinstance(v, BooleanValue):
        return f"(boolean){'true' if v.value else 'false'}"
    if isinstance(v, FractionValue):
        return f"(fraction){v.numerator}/{v.denominator}"
    if isinstance(v, BitmaskValue):
        return f"(bitmask)0x{v.value:x}"
    if isinstance(v, FlagsValue):
        return "+".join(v.flags)
    if isinstance(v, ListValue):
        return f"{{ {_join(v.items)} }}" if v.items else "{ }"
    if isinstance(v, ArrayValue):
        return f"< {_join(v.items)} >" if v.items else "< >"
    if isinstance(v, RangeValue):
        bounds = [v.min, v.max] if v.step is None else [v.min, v.max, v.step]
        return f"[ {_join(bounds)} ]"
    if isinstance(v, StructureValue):
        return f'(GstStructure)"{escape_string(structure_to_string(v.value))};"'
    if isinstance(v, CapsValue):
        return f'(GstCaps)"{escape_string(caps_to_string(v.value))}"'
    if isinstance(v, TypedValue):
        return f"({v.type_name}){_typed_payload(v.value)}"
    raise TypeError(f"Not a structure value: {v!r}")


def value_to_string_bare(v: Value) -> str:
    """Like value_to_string, without the prefix for int, double, boolean and fraction"""
    if isinstance(v, IntValue):
        return format_int(v.value)
    if isinstance(v, DoubleValue):
        return format_double(v.value)
    if isinstance(v, BooleanValue):
        return "true" if v.value else "false"
    if isinstance(v, FractionValue):
        return f"{v.numerator}/{v.denominator}"
    return value_to_string(v)


def _typed_payload(v: Value) -> str:
    # The tag in front already names the type; a second prefix would not re-parse
    if isinstance(v, StringValue):
        return quote_string(v.value)
    return value_to_string_bare(v)


def structure_to_string(s: Structure) -> str:
    """Serialize a structure: `name, key1=value1, key2=value2`"""
    parts = [s.name]
    for key, value in s.fields.items():
        parts.append(f"{key}={value_to_string(value)}")
    return ", ".join(parts)


def caps_to_string(caps: Caps) -> str:
    """Serialize caps: `ANY`, `EMPTY`, or entries joined by `; `"""
    if isinstance(caps, CapsAny):
        return "ANY"
    if isinstance(caps, CapsEmpty):
        return "EMPTY"
    if not isinstance(caps, CapsStructures):
        raise TypeError(f"Not a caps value: {caps!r}")

    entries = []
    for entry in caps.entries:
        text = entry.structure.name
        if entry.features:
            text += f"({', '.join(entry.features)})"
        for key, value in entry.structure.fields.items():
            text += f", {key}={value_to_string(value)}"
        entries.append(text)
    return "; ".join(entries)
