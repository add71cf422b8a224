"""Tests for the value model"""

import dataclasses

import pytest
from gststructure import (
    Structure,
    CapsEntry,
    CapsStructures,
    IntValue,
    DoubleValue,
    FractionValue,
    BitmaskValue,
    FlagsValue,
    ListValue,
    ArrayValue,
    RangeValue,
)


# TEST600: Test every kind exposes its tag
def test_600_kinds():
    assert IntValue(1).kind == "int"
    assert DoubleValue(1.0).kind == "double"
    assert ListValue(()).kind == "list"
    assert RangeValue(IntValue(1), IntValue(2)).kind == "range"


# TEST601: Test fractions stay unreduced and reject negative members
def test_601_fraction():
    assert FractionValue(2, 4) != FractionValue(1, 2)
    with pytest.raises(ValueError):
        FractionValue(-1, 2)


# TEST602: Test bitmasks are limited to 64 unsigned bits
def test_602_bitmask_range():
    assert BitmaskValue(2 ** 64 - 1).value == 2 ** 64 - 1
    with pytest.raises(ValueError):
        BitmaskValue(2 ** 64)
    with pytest.raises(ValueError):
        BitmaskValue(-1)


# TEST603: Test flags need at least two members
def test_603_flags_minimum():
    assert FlagsValue(["a", "b"]).flags == ("a", "b")
    with pytest.raises(ValueError):
        FlagsValue(("a",))


# TEST604: Test containers normalize their members to tuples
def test_604_container_tuples():
    assert ListValue([IntValue(1)]) == ListValue((IntValue(1),))
    assert ArrayValue([IntValue(1)]).items == (IntValue(1),)
    assert ListValue(()) != ArrayValue(())


# TEST605: Test values are immutable
def test_605_values_frozen():
    v = IntValue(1)
    with pytest.raises(dataclasses.FrozenInstanceError):
        v.value = 2


# TEST606: Test structure names must start with a letter or underscore
@pytest.mark.parametrize("name", ["", "1abc", "-x", "=bad"])
def test_606_structure_name_validated(name):
    with pytest.raises(ValueError):
        Structure(name)


# TEST607: Test structure fields are read-only and keep insertion order
def test_607_structure_fields_read_only():
    s = Structure("foo", [("b", IntValue(1)), ("a", IntValue(2))])
    assert list(s.fields) == ["b", "a"]
    with pytest.raises(TypeError):
        s.fields["c"] = IntValue(3)


# TEST608: Test structures copy their input mapping
def test_608_structure_copies_fields():
    fields = {"a": IntValue(1)}
    s = Structure("foo", fields)
    fields["b"] = IntValue(2)
    assert "b" not in s.fields


# TEST609: Test structures and caps compare and hash by content
def test_609_structure_equality():
    a = Structure("foo", {"x": IntValue(1)})
    b = Structure("foo", {"x": IntValue(1)})
    assert a == b
    assert hash(a) == hash(b)
    assert a != Structure("foo", {"x": IntValue(2)})
    assert repr(a) == "Structure('foo', {'x': IntValue(value=1)})"

    caps = CapsStructures([CapsEntry(a, ["memory:DMABuf"])])
    assert caps.entries[0].features == ("memory:DMABuf",)
    assert caps == CapsStructures((CapsEntry(b, ("memory:DMABuf",)),))


# TEST610: Test caps structures need at least one entry
def test_610_caps_structures_not_empty():
    with pytest.raises(ValueError):
        CapsStructures(())
