import pytest

from esrdecode.decode.esr import decode_esr
from esrdecode.errors import DecodeError


def _by_name(fields):
    return {f.name: f for f in fields}


def test_top_level_layout():
    fields = decode_esr(0x96000050)
    assert [(f.name, f.start, f.width) for f in fields] == [
        ("RES0", 37, 27),
        ("ISS2", 32, 5),
        ("EC", 26, 6),
        ("IL", 25, 1),
        ("ISS", 0, 25),
    ]


def test_data_abort_same_el():
    top = _by_name(decode_esr(0x96000050))
    assert top["EC"].value == 0x25
    assert top["EC"].description == "Data Abort taken without a change in Exception level."
    assert top["IL"].description == "32-bit instruction trapped."

    iss = _by_name(top["ISS"].subfields)
    assert iss["ISV"].value == 0
    assert iss["IS"].subfields == ()
    assert iss["WnR"].value == 1
    assert iss["WnR"].description == "Abort caused by writing to memory."
    assert iss["DFSC"].value == 0x10
    assert iss["DFSC"].description.startswith("Synchronous External abort, not on translation table walk")
    assert top["ISS"].description == iss["DFSC"].description


def test_data_abort_with_instruction_syndrome():
    top = _by_name(decode_esr(0x93C58047))
    assert top["EC"].value == 0x24
    iss = _by_name(top["ISS"].subfields)
    assert iss["ISV"].value == 1
    syndrome = iss["IS"]
    assert syndrome.description == "64-bit access using register x5."
    sub = _by_name(syndrome.subfields)
    assert sub["SAS"].value == 0b11
    assert sub["SRT"].value == 5
    assert sub["SF"].value == 1
    assert iss["DFSC"].description == "Translation fault, level 3."


def test_data_abort_32_bit_register():
    # ISV set, SAS=word, SRT=31, SF clear
    top = _by_name(decode_esr(0x92000000 | (1 << 24) | (2 << 22) | (31 << 16) | 0x07))
    syndrome = _by_name(top["ISS"].subfields)["IS"]
    assert syndrome.description == "32-bit access using register wzr."


def test_svc():
    top = _by_name(decode_esr(0x56000000 | 0x1234))
    assert top["EC"].value == 0x15
    assert top["EC"].description == "SVC instruction execution in AArch64 state."
    (imm16,) = top["ISS"].subfields
    assert imm16.name == "imm16"
    assert imm16.value == 0x1234


def test_msr_trap_names_register():
    top = _by_name(decode_esr(0x62300001))
    assert top["EC"].value == 0x18
    assert top["ISS"].description == "MRS x0, MIDR_EL1"
    names = [f.name for f in top["ISS"].subfields]
    assert names == ["Op0", "Op2", "Op1", "CRn", "Rt", "CRm", "Direction"]


def test_msr_trap_unknown_register_write():
    # op0=3 op1=7 CRn=15 CRm=15 op2=7, Rt=2, write
    iss = (3 << 20) | (7 << 17) | (7 << 14) | (15 << 10) | (2 << 5) | (15 << 1)
    top = _by_name(decode_esr((0x18 << 26) | (1 << 25) | iss))
    assert top["ISS"].description == "MSR S3_7_C15_C15_7, x2"


def test_brk_comment():
    top = _by_name(decode_esr(0xF2000800))
    assert top["EC"].value == 0x3C
    (comment,) = top["ISS"].subfields
    assert comment.value == 0x800


def test_wfi_trap():
    top = _by_name(decode_esr((0x01 << 26) | (1 << 25) | (1 << 24) | (0xE << 20)))
    iss = _by_name(top["ISS"].subfields)
    assert iss["CV"].value == 1
    assert iss["COND"].description == "Condition AL."
    assert iss["TI"].description == "WFI trapped."


def test_class_without_iss_decoding_has_no_subfields():
    top = _by_name(decode_esr(0x8A000000))
    assert top["EC"].value == 0x22
    assert top["ISS"].subfields == ()
    assert top["ISS"].description is None


def test_iss2_is_reported():
    top = _by_name(decode_esr((0x1F << 32) | 0x96000050))
    assert top["ISS2"].value == 0x1F


@pytest.mark.parametrize(
    "esr",
    [
        1 << 37,
        1 << 63,
        0x02 << 26,
        0x10 << 26,
        0x9600003F,
        0xC2000000 | 0x3F,
    ],
)
def test_invalid_encodings(esr):
    with pytest.raises(DecodeError):
        decode_esr(esr)
