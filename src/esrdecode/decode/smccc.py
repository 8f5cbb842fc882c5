from __future__ import annotations

from typing import Optional

from esrdecode.decode.model import FieldInfo
from esrdecode.utils.logger import get_logger

log = get_logger(__name__)

OEN_ARM = 0
OEN_STANDARD_SECURE = 4
OEN_STANDARD_HYPERVISOR = 5

_ARM_FUNCTIONS: dict[int, str] = {
    0x0000: "SMCCC_VERSION",
    0x0001: "SMCCC_ARCH_FEATURES",
    0x0002: "SMCCC_ARCH_SOC_ID",
    0x3FFF: "SMCCC_ARCH_WORKAROUND_3",
    0x7FFF: "SMCCC_ARCH_WORKAROUND_2",
    0x8000: "SMCCC_ARCH_WORKAROUND_1",
}

_PSCI_FUNCTIONS: dict[int, str] = {
    0x00: "PSCI_VERSION",
    0x01: "CPU_SUSPEND",
    0x02: "CPU_OFF",
    0x03: "CPU_ON",
    0x04: "AFFINITY_INFO",
    0x05: "MIGRATE",
    0x06: "MIGRATE_INFO_TYPE",
    0x07: "MIGRATE_INFO_UP_CPU",
    0x08: "SYSTEM_OFF",
    0x09: "SYSTEM_RESET",
    0x0A: "PSCI_FEATURES",
    0x0B: "CPU_FREEZE",
    0x0C: "CPU_DEFAULT_SUSPEND",
    0x0D: "NODE_HW_STATE",
    0x0E: "SYSTEM_SUSPEND",
    0x0F: "PSCI_SET_SUSPEND_MODE",
    0x10: "PSCI_STAT_RESIDENCY",
    0x11: "PSCI_STAT_COUNT",
    0x12: "SYSTEM_RESET2",
    0x13: "MEM_PROTECT",
    0x14: "MEM_PROTECT_CHECK_RANGE",
    0x15: "SYSTEM_OFF2",
}

_TRNG_FUNCTIONS: dict[int, str] = {
    0x50: "TRNG_VERSION",
    0x51: "TRNG_FEATURES",
    0x52: "TRNG_GET_UUID",
    0x53: "TRNG_RND",
}

_HYPERVISOR_FUNCTIONS: dict[int, str] = {
    0x20: "PV_TIME_FEATURES",
    0x21: "PV_TIME_ST",
}

# general service queries, valid for every owning entity
_SERVICE_QUERIES: dict[int, str] = {
    0xFF00: "Call Count Query (deprecated)",
    0xFF01: "Call UID Query",
    0xFF03: "Revision Query",
}


def describe_oen(oen: int) -> str:
    if oen <= 7:
        return (
            "Arm Architecture Calls.",
            "CPU Service Calls.",
            "SiP Service Calls.",
            "OEM Service Calls.",
            "Standard Secure Service Calls.",
            "Standard Hypervisor Service Calls.",
            "Vendor Specific Hypervisor Service Calls.",
            "Vendor Specific EL3 Monitor Calls.",
        )[oen]
    if oen <= 47:
        return "Reserved for future expansion."
    if oen <= 49:
        return "Trusted Application Calls."
    return "Trusted OS Calls."


def describe_function(oen: int, number: int) -> Optional[str]:
    if number in _SERVICE_QUERIES:
        return f"{_SERVICE_QUERIES[number]}."
    if oen == OEN_ARM:
        name = _ARM_FUNCTIONS.get(number)
    elif oen == OEN_STANDARD_SECURE:
        if number <= 0x1F:
            name = _PSCI_FUNCTIONS.get(number, "PSCI call")
        elif number <= 0x3F:
            name = "SDEI call"
        elif 0x50 <= number <= 0x5F:
            name = _TRNG_FUNCTIONS.get(number, "TRNG call")
        elif 0x60 <= number <= 0xFF:
            name = "FF-A call"
        else:
            name = None
    elif oen == OEN_STANDARD_HYPERVISOR:
        name = _HYPERVISOR_FUNCTIONS.get(number)
    else:
        name = None
    return f"{name}." if name else None


def decode_smccc(smccc: int) -> list[FieldInfo]:
    """
    Decode an SMC/HVC function identifier.
    The upper 32 bits must be zero: function IDs are 32-bit in both calling conventions.
    """
    log.debug("decoding SMCCC function ID 0x%08X", smccc)
    res0 = FieldInfo.get(smccc, "RES0", "Reserved", 32, 64).check_res0()
    call_type = FieldInfo.get_bit(smccc, "Call type", None, 31).describe_bit(
        lambda fast: "Fast call." if fast else "Yielding call."
    )
    convention = FieldInfo.get_bit(smccc, "Convention", "Calling convention", 30).describe_bit(
        lambda sixty_four: "SMC64/HVC64." if sixty_four else "SMC32/HVC32."
    )
    oen = FieldInfo.get(smccc, "OEN", "Owning Entity Number", 24, 30).describe(describe_oen)

    if not call_type.value:
        number = FieldInfo.get(smccc, "Function number", None, 0, 24)
        return [res0, call_type, convention, oen, number]

    reserved = FieldInfo.get(smccc, "RES0", "Reserved", 17, 24).check_res0()
    sve_hint = FieldInfo.get_bit(smccc, "SVE hint", "SVE live state hint", 16).describe_bit(
        lambda hint: "Caller has no live SVE state." if hint else None
    )
    number = FieldInfo.get(smccc, "Function number", None, 0, 16)
    number = number.with_description(describe_function(oen.value, number.value))
    return [res0, call_type, convention, oen, reserved, sve_hint, number]
