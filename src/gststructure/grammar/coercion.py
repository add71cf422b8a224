"""Explicit type tag coercion

When a value carries a `(typeName)` tag, the raw parsed value is converted to
the kind the tag names. Type names are matched case-insensitively against the
alias families below. Unknown names produce a TypedValue that keeps the tag
for a lossless round-trip.

A conversion that cannot produce the target kind returns the raw value
unchanged instead of failing the enclosing parse. This covers malformed
bitmask literals, numeric strings that do not parse, and string payloads that
are not valid caps or structure text.
"""

import logging
import re
from typing import Callable, Optional

from gststructure.config import BITMASK_MAX
from gststructure.errors import ParseError
from gststructure.serializer import value_to_string_bare
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
    StructureValue,
    TypedValue,
    Value,
)

logger = logging.getLogger(__name__)


# =============================================================================
# ALIAS FAMILIES
# =============================================================================

INT_TYPES = frozenset([
    "int", "gint", "uint", "guint",
    "gint8", "gint16", "gint32", "gint64",
    "guint8", "guint16", "guint32", "guint64",
    "int64", "uint64",
])
DOUBLE_TYPES = frozenset(["double", "gdouble", "float", "gfloat"])
BOOLEAN_TYPES = frozenset(["boolean", "gboolean", "bool"])
STRING_TYPES = frozenset(["string", "gchararray"])
BITMASK_TYPES = frozenset(["bitmask", "gstbitmask"])
FRACTION_TYPES = frozenset(["fraction", "gstfraction"])
CAPS_TYPES = frozenset(["gstcaps", "caps"])
STRUCTURE_TYPES = frozenset(["gststructure"])

BOOLEAN_TRUE_STRINGS = ("true", "yes", "t", "1")

INT_TEXT_RE = re.compile(r"([+-]?)(?:0[xX]([0-9a-fA-F]+)|([0-9]+))")
DOUBLE_TEXT_RE = re.compile(r"[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")
NON_FINITE_RE = re.compile(r"[+-]?(?:inf|infinity|nan)", re.IGNORECASE)


def interpret_typed(type_name: str, raw: Value, max_depth: Optional[int] = None, depth: int = 0) -> Value:
    """Convert a raw value to the kind named by an explicit type tag

    max_depth and depth bound the nesting of caps and structure payloads
    parsed out of strings.
    """
    name = type_name.lower()

    if name in INT_TYPES:
        return coerce_int(raw)
    if name in DOUBLE_TYPES:
        return coerce_double(raw)
    if name in BOOLEAN_TYPES:
        return coerce_boolean(raw)
    if name in STRING_TYPES:
        return coerce_string(raw)
    if name in BITMASK_TYPES:
        return coerce_bitmask(raw)
    if name in FRACTION_TYPES:
        return raw
    if name in CAPS_TYPES:
        return coerce_caps(raw, max_depth, depth)
    if name in STRUCTURE_TYPES:
        return coerce_structure(raw, max_depth, depth)

    return TypedValue(type_name, raw)


# =============================================================================
# SCALAR COERCIONS
# =============================================================================

def _each(raw: Value, coerce: Callable[[Value], Value]) -> Optional[Value]:
    """Apply a scalar coercion to every member of a list, array or range"""
    if isinstance(raw, ListValue):
        return ListValue(tuple(coerce(item) for item in raw.items))
    if isinstance(raw, ArrayValue):
        return ArrayValue(tuple(coerce(item) for item in raw.items))
    if isinstance(raw, RangeValue):
        step = coerce(raw.step) if raw.step is not None else None
        return RangeValue(coerce(raw.min), coerce(raw.max), step)
    return None


def _parse_int_text(text: str, leading: bool = False) -> Optional[int]:
    """Parse hex (0x prefix) or decimal integer text, None if malformed

    With leading=True only a prefix has to be an integer, so "3.9" reads
    as 3. Digit group underscores are never accepted.
    """
    text = text.strip()
    match = INT_TEXT_RE.match(text) if leading else INT_TEXT_RE.fullmatch(text)
    if not match:
        return None
    sign, hex_digits, dec_digits = match.groups()
    try:
        value = int(hex_digits, 16) if hex_digits is not None else int(dec_digits, 10)
    except ValueError:
        # More digits than the interpreter converts
        return None
    return -value if sign == "-" else value


def _parse_double_text(text: str) -> Optional[float]:
    """Parse the leading number of text as a double, None if there is none"""
    text = text.strip()
    if NON_FINITE_RE.fullmatch(text):
        return float(text)
    match = DOUBLE_TEXT_RE.match(text)
    if not match:
        return None
    return float(match.group(0))


def coerce_int(raw: Value) -> Value:
    if isinstance(raw, IntValue):
        return raw
    if isinstance(raw, DoubleValue):
        try:
            return IntValue(int(raw.value))
        except (OverflowError, ValueError):
            logger.debug("Cannot truncate %r to int; keeping raw value", raw.value)
            return raw
    if isinstance(raw, BooleanValue):
        return IntValue(1 if raw.value else 0)
    if isinstance(raw, StringValue):
        parsed = _parse_int_text(raw.value, leading=True)
        if parsed is None:
            logger.debug("Cannot parse %r as int; keeping raw string", raw.value)
            return raw
        return IntValue(parsed)
    return _each(raw, coerce_int) or raw


def coerce_double(raw: Value) -> Value:
    if isinstance(raw, DoubleValue):
        return raw
    if isinstance(raw, IntValue):
        try:
            return DoubleValue(float(raw.value))
        except OverflowError:
            logger.debug("Integer %r does not fit a double; keeping raw value", raw.value)
            return raw
    if isinstance(raw, StringValue):
        parsed = _parse_double_text(raw.value)
        if parsed is None:
            logger.debug("Cannot parse %r as double; keeping raw string", raw.value)
            return raw
        return DoubleValue(parsed)
    return _each(raw, coerce_double) or raw


def coerce_boolean(raw: Value) -> Value:
    if isinstance(raw, BooleanValue):
        return raw
    if isinstance(raw, IntValue):
        return BooleanValue(raw.value != 0)
    if isinstance(raw, StringValue):
        return BooleanValue(raw.value.lower() in BOOLEAN_TRUE_STRINGS)
    return _each(raw, coerce_boolean) or raw


def coerce_string(raw: Value) -> Value:
    if isinstance(raw, StringValue):
        return raw
    if isinstance(raw, (IntValue, DoubleValue, BooleanValue, FractionValue, FlagsValue)):
        return StringValue(value_to_string_bare(raw))
    return _each(raw, coerce_string) or raw


def coerce_bitmask(raw: Value) -> Value:
    if isinstance(raw, BitmaskValue):
        return raw
    if isinstance(raw, IntValue):
        bits = raw.value
    elif isinstance(raw, StringValue):
        bits = _parse_int_text(raw.value)
    else:
        return _each(raw, coerce_bitmask) or raw

    if bits is None or not 0 <= bits <= BITMASK_MAX:
        logger.debug("Bitmask literal %r is malformed or exceeds 64 bits; keeping raw value", raw)
        return raw
    return BitmaskValue(bits)


# =============================================================================
# NESTED PAYLOADS
# =============================================================================

def coerce_caps(raw: Value, max_depth: Optional[int] = None, depth: int = 0) -> Value:
    if isinstance(raw, CapsValue):
        return raw
    if isinstance(raw, StringValue):
        from gststructure.grammar.parser import Parser

        try:
            caps = Parser(raw.value, max_depth=max_depth, depth=depth).parse_caps()
        except ParseError as e:
            logger.debug("String payload is not valid caps (%s); keeping raw string", e)
            return raw
        return CapsValue(caps)
    return raw


def coerce_structure(raw: Value, max_depth: Optional[int] = None, depth: int = 0) -> Value:
    if isinstance(raw, StructureValue):
        return raw
    if isinstance(raw, StringValue):
        from gststructure.grammar.parser import Parser

        try:
            structure = Parser(raw.value, max_depth=max_depth, depth=depth).parse_structure()
        except ParseError as e:
            logger.debug("String payload is not a valid structure (%s); keeping raw string", e)
            return raw
        return StructureValue(structure)
    return raw
