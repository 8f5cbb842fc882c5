from __future__ import annotations

from typing import Optional

from esrdecode.decode.model import FieldInfo
from esrdecode.utils.logger import get_logger

log = get_logger(__name__)

_IMPLEMENTERS: dict[int, str] = {
    0x00: "Reserved for software use",
    0x41: "Arm Limited",
    0x42: "Broadcom Corporation",
    0x43: "Cavium Inc.",
    0x44: "Digital Equipment Corporation",
    0x46: "Fujitsu Ltd.",
    0x48: "HiSilicon Technologies",
    0x49: "Infineon Technologies AG",
    0x4D: "Motorola or Freescale Semiconductor Inc.",
    0x4E: "NVIDIA Corporation",
    0x50: "Applied Micro Circuits Corporation",
    0x51: "Qualcomm Inc.",
    0x56: "Marvell International Ltd.",
    0x61: "Apple Inc.",
    0x69: "Intel Corporation",
    0x6D: "Microsoft Corporation",
    0xC0: "Ampere Computing",
}

# (implementer, part number) -> core name
_PARTS: dict[tuple[int, int], str] = {
    (0x41, 0xD02): "Cortex-A34",
    (0x41, 0xD03): "Cortex-A53",
    (0x41, 0xD04): "Cortex-A35",
    (0x41, 0xD05): "Cortex-A55",
    (0x41, 0xD07): "Cortex-A57",
    (0x41, 0xD08): "Cortex-A72",
    (0x41, 0xD09): "Cortex-A73",
    (0x41, 0xD0A): "Cortex-A75",
    (0x41, 0xD0B): "Cortex-A76",
    (0x41, 0xD0C): "Neoverse N1",
    (0x41, 0xD0D): "Cortex-A77",
    (0x41, 0xD40): "Neoverse V1",
    (0x41, 0xD41): "Cortex-A78",
    (0x41, 0xD44): "Cortex-X1",
    (0x41, 0xD46): "Cortex-A510",
    (0x41, 0xD47): "Cortex-A710",
    (0x41, 0xD48): "Cortex-X2",
    (0x41, 0xD49): "Neoverse N2",
    (0x41, 0xD4F): "Neoverse V2",
    (0x41, 0xD4D): "Cortex-A715",
    (0x41, 0xD4E): "Cortex-X3",
    (0x41, 0xD80): "Cortex-A520",
    (0x41, 0xD81): "Cortex-A720",
    (0x41, 0xD82): "Cortex-X4",
    (0x51, 0x800): "Kryo 2XX Gold",
    (0x51, 0x801): "Kryo 2XX Silver",
    (0x51, 0x802): "Kryo 3XX Gold",
    (0x51, 0x803): "Kryo 3XX Silver",
    (0x51, 0x804): "Kryo 4XX Gold",
    (0x51, 0x805): "Kryo 4XX Silver",
    (0x61, 0x022): "M1 Icestorm",
    (0x61, 0x023): "M1 Firestorm",
    (0x61, 0x032): "M2 Blizzard",
    (0x61, 0x033): "M2 Avalanche",
}


def _sentence(text: str) -> str:
    return text if text.endswith(".") else f"{text}."


def _describe_architecture(architecture: int) -> Optional[str]:
    return {
        0b0001: "Armv4.",
        0b0010: "Armv4T.",
        0b0011: "Armv5 (obsolete).",
        0b0100: "Armv5T.",
        0b0101: "Armv5TE.",
        0b0110: "Armv5TEJ.",
        0b0111: "Armv6.",
        0b1111: "Architectural features are individually identified in the ID registers.",
    }.get(architecture)


def decode_midr(midr: int) -> list[FieldInfo]:
    log.debug("decoding MIDR 0x%016X", midr)
    res0 = FieldInfo.get(midr, "RES0", "Reserved", 32, 64).check_res0()
    implementer = FieldInfo.get(midr, "Implementer", None, 24, 32)
    implementer = implementer.with_description(
        _sentence(_IMPLEMENTERS[implementer.value]) if implementer.value in _IMPLEMENTERS else None
    )
    variant = FieldInfo.get(midr, "Variant", None, 20, 24)
    architecture = FieldInfo.get(midr, "Architecture", None, 16, 20).describe(_describe_architecture)
    part_num = FieldInfo.get(midr, "PartNum", "Primary part number", 4, 16)
    part = _PARTS.get((implementer.value, part_num.value))
    if part is not None:
        part_num = part_num.with_description(f"{part}.")
    revision = FieldInfo.get(midr, "Revision", None, 0, 4)

    # Arm's rNpM convention: variant is N, revision is M
    revision = revision.with_description(f"r{variant.value}p{revision.value}.")

    return [res0, implementer, variant, architecture, part_num, revision]
