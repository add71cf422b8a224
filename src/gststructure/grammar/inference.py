"""Type inference for unquoted tokens

An unquoted token without an explicit `(type)` tag is classified by trying
the rules below strictly in order; the first match wins.

1. `0x`/`0X` hex literal            -> int
2. signed decimal integer           -> int
3. decimal point and/or exponent    -> double
4. `digits/digits`                  -> fraction
5. identifiers joined by `+`        -> flags
6. true|false|yes|no|t|f (any case) -> boolean
7. anything else                    -> string (verbatim)

The order matters: `30/1` must not split into two integers, `flush+accurate`
must not fall through to a string, and a single flag-shaped word without a
`+` is a plain string.
"""

import re

from gststructure.types import (
    BooleanValue,
    DoubleValue,
    FlagsValue,
    FractionValue,
    IntValue,
    StringValue,
    Value,
)


HEX_INT_RE = re.compile(r"0[xX][0-9a-fA-F]+")
DECIMAL_INT_RE = re.compile(r"[+-]?[0-9]+")
POINT_DOUBLE_RE = re.compile(r"[+-]?(?:[0-9]+\.[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")
EXPONENT_DOUBLE_RE = re.compile(r"[+-]?[0-9]+[eE][+-]?[0-9]+")
FRACTION_RE = re.compile(r"([0-9]+)/([0-9]+)")
FLAGS_RE = re.compile(r"[a-zA-Z_][a-zA-Z0-9_-]*(?:\+[a-zA-Z_][a-zA-Z0-9_-]*)+")
BOOLEAN_RE = re.compile(r"(?:true|false|yes|no|t|f)", re.IGNORECASE)

TRUE_WORDS = ("true", "yes", "t")


def infer_type(raw: str) -> Value:
    """Convert an unquoted token to the value it most likely denotes"""
    if HEX_INT_RE.fullmatch(raw):
        return IntValue(int(raw, 16))

    # Decimal literals longer than the interpreter's int conversion limit
    # stay strings
    if DECIMAL_INT_RE.fullmatch(raw):
        try:
            return IntValue(int(raw, 10))
        except ValueError:
            return StringValue(raw)

    if POINT_DOUBLE_RE.fullmatch(raw) or EXPONENT_DOUBLE_RE.fullmatch(raw):
        return DoubleValue(float(raw))

    fraction = FRACTION_RE.fullmatch(raw)
    if fraction:
        try:
            return FractionValue(int(fraction.group(1)), int(fraction.group(2)))
        except ValueError:
            return StringValue(raw)

    if FLAGS_RE.fullmatch(raw):
        return FlagsValue(tuple(raw.split("+")))

    if BOOLEAN_RE.fullmatch(raw):
        return BooleanValue(raw.lower() in TRUE_WORDS)

    return StringValue(raw)
