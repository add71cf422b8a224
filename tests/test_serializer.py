"""Tests for canonical serialization and round-trips"""

import sys

import pytest
from gststructure import (
    parse_structure,
    parse_caps,
    value_to_string,
    value_to_string_bare,
    structure_to_string,
    caps_to_string,
    Structure,
    CapsAny,
    CapsEmpty,
    CapsEntry,
    CapsStructures,
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
from gststructure.serializer import escape_string, format_double


# Interpreters since 3.11 refuse int/str conversion past a digit limit (4300 by default)
INT_DIGITS_LIMIT = getattr(sys, "get_int_max_str_digits", lambda: 0)()
requires_int_digits_limit = pytest.mark.skipif(
    not 0 < INT_DIGITS_LIMIT < 4800, reason="int/str conversion has no digit limit below 4800"
)


# TEST300: Test scalars carry an explicit type prefix
def test_300_scalar_prefixes():
    assert value_to_string(IntValue(42)) == "(int)42"
    assert value_to_string(IntValue(-1)) == "(int)-1"
    assert value_to_string(DoubleValue(3.14)) == "(double)3.14"
    assert value_to_string(StringValue("I420")) == '(string)"I420"'
    assert value_to_string(BooleanValue(True)) == "(boolean)true"
    assert value_to_string(BooleanValue(False)) == "(boolean)false"
    assert value_to_string(FractionValue(30, 1)) == "(fraction)30/1"
    assert value_to_string(BitmaskValue(0x67)) == "(bitmask)0x67"


# TEST301: Test flags are emitted without a prefix
def test_301_flags_unprefixed():
    assert value_to_string(FlagsValue(("flush", "accurate"))) == "flush+accurate"


# TEST302: Test doubles always contain a point or an exponent
def test_302_double_format():
    assert format_double(5.0) == "5.0"
    assert format_double(0.5) == "0.5"
    assert format_double(1e20) == "1e+20"
    assert format_double(float("inf")) == "inf"
    assert value_to_string(DoubleValue(5)) == "(double)5.0"


# TEST303: Test containers render each member fully prefixed
def test_303_containers():
    assert value_to_string(ListValue((IntValue(1), IntValue(2)))) == "{ (int)1, (int)2 }"
    assert value_to_string(ArrayValue((StringValue("a"),))) == '< (string)"a" >'
    assert value_to_string(ListValue(())) == "{ }"
    assert value_to_string(ArrayValue(())) == "< >"


# TEST304: Test ranges render with and without a step
def test_304_ranges():
    assert value_to_string(RangeValue(IntValue(1), IntValue(100))) == "[ (int)1, (int)100 ]"
    stepped = RangeValue(IntValue(0), IntValue(10), IntValue(2))
    assert value_to_string(stepped) == "[ (int)0, (int)10, (int)2 ]"


# TEST305: Test only backslash, quote, newline, tab and CR are escaped
def test_305_escaping():
    assert escape_string('a"b\\c\nd\te\rf') == 'a\\"b\\\\c\\nd\\te\\rf'
    assert escape_string("café/x") == "café/x"
    assert value_to_string(StringValue('say "hi"')) == '(string)"say \\"hi\\""'


# TEST306: Test nested structures and caps serialize as escaped quoted payloads
def test_306_nested_payloads():
    inner = Structure("inner-struct", {"s": StringValue("x")})
    assert value_to_string(StructureValue(inner)) == '(GstStructure)"inner-struct, s=(string)\\"x\\";"'

    caps = CapsStructures((CapsEntry(Structure("video/x-raw")),))
    assert value_to_string(CapsValue(caps)) == '(GstCaps)"video/x-raw"'
    assert value_to_string(CapsValue(CapsAny())) == '(GstCaps)"ANY"'


# TEST307: Test unknown type tags are kept with a bare payload
def test_307_typed_values():
    assert value_to_string(TypedValue("GstVideoFormat", StringValue("I420"))) == '(GstVideoFormat)"I420"'
    assert value_to_string(TypedValue("MyEnum", IntValue(3))) == "(MyEnum)3"


# TEST308: Test the bare form drops the prefix for int, double, boolean and fraction only
def test_308_bare():
    assert value_to_string_bare(IntValue(42)) == "42"
    assert value_to_string_bare(DoubleValue(5.0)) == "5.0"
    assert value_to_string_bare(BooleanValue(True)) == "true"
    assert value_to_string_bare(FractionValue(1, 2)) == "1/2"
    assert value_to_string_bare(StringValue("x")) == '(string)"x"'
    assert value_to_string_bare(BitmaskValue(1)) == "(bitmask)0x1"


# TEST309: Test objects outside the value union are rejected
def test_309_unknown_value_rejected():
    with pytest.raises(TypeError):
        value_to_string(42)
    with pytest.raises(TypeError):
        caps_to_string("ANY")


# TEST310: Test structure serialization keeps field insertion order
def test_310_structure_to_string():
    s = parse_structure("seek, start=5.0, flags=flush+accurate")
    assert structure_to_string(s) == "seek, start=(double)5.0, flags=flush+accurate"
    assert structure_to_string(parse_structure("play")) == "play"


# TEST311: Test caps serialization for keywords, features and multiple entries
def test_311_caps_to_string():
    assert caps_to_string(CapsAny()) == "ANY"
    assert caps_to_string(CapsEmpty()) == "EMPTY"
    assert caps_to_string(parse_caps("NONE")) == "EMPTY"

    caps = parse_caps("video/x-raw(memory:DMABuf), format=NV12; audio/x-raw")
    assert caps_to_string(caps) == 'video/x-raw(memory:DMABuf), format=(string)"NV12"; audio/x-raw'


# TEST312: Test structures re-parse to an equal tree
@pytest.mark.parametrize("text", [
    "play",
    "seek, start=5.0, flags=flush+accurate",
    "foo, a=5, b=-42, c=0xFF, d=3.0, e=true, f=30/1, g=(bitmask)0x67",
    r'foo, s="line1\nline2 \"quoted\" back\\slash \q"',
    "foo, opts={1, 2.5, abc}, arr=<1, 2, 3>, empty={ }",
    "foo, r=[1, 100], stepped=[0, 255, 2], fps=[15/1, 60/1]",
    'outer, inner=(GstStructure)"inner-struct, n=(int)1, s=\\"x\\";"',
    "set-caps, caps=(GstCaps)[video/x-raw, width=[1, 1920]]",
    "foo, fmt=(GstVideoFormat)I420, n=(MyEnum)3, l=(MyEnum){1, 2}",
    "check, element::property=50, compositor.sink_0::xpos=100",
])
def test_312_structure_round_trip(text):
    s = parse_structure(text)
    assert s is not None
    again = parse_structure(structure_to_string(s))
    assert again == s


# TEST313: Test caps re-parse to an equal tree
@pytest.mark.parametrize("text", [
    "ANY",
    "EMPTY",
    "video/x-raw, format=I420; audio/x-raw, rate=44100",
    "video/x-raw(memory:DMABuf, meta:Foo), format=NV12, framerate=[0/1, 60/1]",
])
def test_313_caps_round_trip(text):
    caps = parse_caps(text)
    assert caps is not None
    assert parse_caps(caps_to_string(caps)) == caps


# TEST314: Test serialization is stable after one round-trip
def test_314_serialization_is_stable():
    s = parse_structure('foo, a=1, b="x", c={1, <2, 3>}, d=(GstCaps)"video/x-raw, w=[1, 2]"')
    once = structure_to_string(s)
    twice = structure_to_string(parse_structure(once))
    assert once == twice


# TEST315: Test very large ints round-trip
def test_315_large_int_round_trip():
    big = int("f" * 4000, 16)
    s = Structure("foo", {"a": IntValue(big), "b": IntValue(-big)})
    assert parse_structure(structure_to_string(s)) == s


# TEST316: Test ints past the decimal conversion limit serialize as hex
@requires_int_digits_limit
def test_316_overlong_int_as_hex():
    big = int("f" * 4000, 16)
    s = Structure("foo", {"a": IntValue(big), "b": IntValue(-big)})
    text = structure_to_string(s)
    assert text.startswith("foo, a=(int)0xfff")
    assert ", b=(int)-0xfff" in text
    assert value_to_string_bare(IntValue(big)).startswith("0xfff")
