import pytest

from esrdecode.decode.model import FieldInfo
from esrdecode.errors import DecodeError


def test_get_extracts_bit_range():
    field = FieldInfo.get(0x96000050, "EC", "Exception Class", 26, 32)
    assert (field.start, field.width, field.end, field.value) == (26, 6, 32, 0x25)


def test_get_bit():
    field = FieldInfo.get_bit(0x96000050, "WnR", None, 6)
    assert field.width == 1
    assert field.value == 1


def test_value_strings():
    field = FieldInfo.get(0x410FD034, "PartNum", None, 4, 16)
    assert field.value_string() == "0xd03"
    assert field.value_binary_string() == "0b110100000011"
    assert FieldInfo.get(0, "Z", None, 0, 5).value_binary_string() == "0b00000"


def test_describe_helpers_return_copies():
    field = FieldInfo.get_bit(1, "IL", None, 0)
    described = field.describe_bit(lambda v: "set." if v else "clear.")
    assert described.description == "set."
    assert field.description is None
    assert FieldInfo.get(6, "N", None, 0, 4).describe(lambda v: f"{v} items.").description == "6 items."


def test_with_subfields_is_a_tuple():
    child = FieldInfo.get_bit(1, "A", None, 0)
    parent = FieldInfo.get(1, "P", None, 0, 4).with_subfields([child])
    assert parent.subfields == (child,)


def test_check_res0():
    assert FieldInfo.get(0, "RES0", None, 32, 64).check_res0().value == 0
    with pytest.raises(DecodeError, match="32..63"):
        FieldInfo.get(1 << 40, "RES0", None, 32, 64).check_res0()
