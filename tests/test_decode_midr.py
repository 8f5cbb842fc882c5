import pytest

from esrdecode.decode.midr import decode_midr
from esrdecode.errors import DecodeError


def _by_name(fields):
    return {f.name: f for f in fields}


def test_cortex_a53():
    fields = decode_midr(0x410FD034)
    assert [f.name for f in fields] == ["RES0", "Implementer", "Variant", "Architecture", "PartNum", "Revision"]
    top = _by_name(fields)
    assert top["Implementer"].value == 0x41
    assert top["Implementer"].description == "Arm Limited."
    assert top["Variant"].value == 0
    assert top["Architecture"].value == 0xF
    assert top["PartNum"].value == 0xD03
    assert top["PartNum"].description == "Cortex-A53."
    assert top["Revision"].value == 4
    assert top["Revision"].description == "r0p4."


def test_unknown_part_has_no_description():
    top = _by_name(decode_midr(0x410F1234))
    assert top["PartNum"].description is None


def test_part_numbers_are_per_implementer():
    # 0xD03 is only a Cortex-A53 when Arm made it
    top = _by_name(decode_midr(0x510FD030))
    assert top["Implementer"].description == "Qualcomm Inc."
    assert top["PartNum"].description is None


def test_unknown_implementer():
    top = _by_name(decode_midr(0x7F000000))
    assert top["Implementer"].description is None


def test_upper_bits_must_be_zero():
    with pytest.raises(DecodeError):
        decode_midr(1 << 32 | 0x410FD034)
