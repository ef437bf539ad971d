import enum
import struct
from dataclasses import dataclass

import pytest

from pgwire.containers import ArrayType, CompositeType, EnumType, TupleType
from pgwire.errors import BadConversion, UnexpectedData
from pgwire.sqltypes import BoolType, Int4Type, OptionalType, TextType


@dataclass
class Widget:
    id: int
    name: str


class Color(enum.Enum):
    RED = "red"
    GREEN = "green"


def widget_type():
    return CompositeType(Widget, "widget", [("id", Int4Type()), ("name", TextType())])


def test_empty_array_wire_bytes():
    array = ArrayType(Int4Type())
    assert array.encode([]) == struct.pack(">iii", 0, 0, 23)
    assert array.size([]) == 12


def test_int_array_wire_bytes():
    array = ArrayType(Int4Type())
    expected = struct.pack(">iiiii", 1, 0, 23, 2, 1) + struct.pack(
        ">ii", 4, 7
    ) + struct.pack(">ii", 4, 9)
    assert array.encode([7, 9]) == expected


@pytest.mark.parametrize("values", [[], [1], [1, -2, 3], [2**31 - 1, -(2**31)]])
def test_array_round_trip(values):
    array = ArrayType(Int4Type())
    data = array.encode(values)
    assert array.decode(data) == values
    assert array.size(values) == len(data)


def test_text_array_round_trip():
    array = ArrayType(TextType())
    values = ["hello", "", "world"]
    assert array.decode(array.encode(values)) == values


def test_array_with_nulls_sets_flag():
    array = ArrayType(OptionalType(TextType()))
    values = ["a", None, "b"]
    data = array.encode(values)
    assert struct.unpack(">i", data[4:8])[0] == 1
    assert array.decode(data) == values
    assert array.size(values) == len(data)


def test_array_without_nulls_clears_flag():
    array = ArrayType(OptionalType(TextType()))
    data = array.encode(["a"])
    assert struct.unpack(">i", data[4:8])[0] == 0


def test_array_rejects_multiple_dimensions():
    array = ArrayType(Int4Type())
    with pytest.raises(BadConversion, match="invalid number of dimensions: 2"):
        array.decode(struct.pack(">iii", 2, 0, 23))


def test_array_null_element_for_non_nullable_type():
    array = ArrayType(Int4Type())
    data = struct.pack(">iiiiii", 1, 1, 23, 1, 1, -1)
    with pytest.raises(UnexpectedData):
        array.decode(data)


def test_array_truncated_data():
    array = ArrayType(Int4Type())
    with pytest.raises(UnexpectedData):
        array.decode(array.encode([1, 2])[:-2])


def test_array_null_and_is_null():
    array = ArrayType(Int4Type())
    assert array.null() == []
    assert array.is_null([]) is False
    assert array.oid == -1


def test_composite_round_trip():
    composite = widget_type()
    value = Widget(42, "bar")
    data = composite.encode(value)
    assert composite.decode(data) == value
    assert composite.size(value) == len(data)


def test_composite_wire_layout():
    composite = widget_type()
    data = composite.encode(Widget(42, "bar"))
    assert data[:4] == struct.pack(">i", 2)
    assert data[4:8] == struct.pack(">i", 23)
    assert data.endswith(b"bar")


def test_composite_decode_row():
    composite = widget_type()
    row = [Int4Type().encode(5), b"foo"]
    assert composite.decode_row(row) == Widget(5, "foo")


def test_composite_missing_field():
    composite = widget_type()
    with pytest.raises(UnexpectedData, match="missing field"):
        composite.decode_row([Int4Type().encode(5)])
    with pytest.raises(UnexpectedData, match="missing field"):
        composite.decode(struct.pack(">i", 0))


def test_tuple_decode_row():
    row_type = TupleType(Int4Type(), TextType(), OptionalType(BoolType()))
    assert row_type.decode_row([Int4Type().encode(1), b"x", None]) == (1, "x", None)


def test_tuple_decode_record_from_composite():
    row_type = TupleType(Int4Type(), TextType())
    data = widget_type().encode(Widget(42, "bar"))
    assert row_type.decode(data) == (42, "bar")


def test_tuple_missing_field():
    row_type = TupleType(Int4Type(), TextType())
    with pytest.raises(UnexpectedData, match="missing field"):
        row_type.decode_row([Int4Type().encode(1)])
    record = struct.pack(">i", 1) + struct.pack(">i", 23) + _value(Int4Type().encode(1))
    with pytest.raises(UnexpectedData, match="missing field"):
        row_type.decode(record + struct.pack(">i", 25))


def _value(data):
    return struct.pack(">i", len(data)) + data


def test_tuple_null_for_non_nullable():
    with pytest.raises(UnexpectedData):
        TupleType(Int4Type()).decode_row([None])


def test_enum_round_trip():
    colors = EnumType(Color, "color")
    assert colors.encode(Color.GREEN) == b"green"
    assert colors.decode(b"red") is Color.RED
    assert colors.size(Color.GREEN) == len(b"green")


def test_enum_unknown_label():
    colors = EnumType(Color, "color")
    with pytest.raises(BadConversion):
        colors.decode(b"blue")


def test_enum_custom_mapping():
    colors = EnumType(
        Color,
        "color",
        to_string=lambda member: member.name,
        from_string=lambda label: Color[label],
    )
    assert colors.encode(Color.RED) == b"RED"
    assert colors.decode(b"GREEN") is Color.GREEN


def test_enum_array_round_trip():
    array = ArrayType(EnumType(Color, "color"))
    values = [Color.RED, Color.GREEN, Color.RED]
    assert array.decode(array.encode(values)) == values
    assert array.name == "_color"