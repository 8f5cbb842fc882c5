from __future__ import annotations

from typing import Callable, List, Optional, Tuple

from esrdecode.decode.model import FieldInfo
from esrdecode.decode.sysreg import sysreg_name
from esrdecode.errors import DecodeError
from esrdecode.utils.logger import get_logger

log = get_logger(__name__)

# ISS -> (subfields, description of the ISS as a whole)
IssDecoder = Callable[[int], Tuple[List[FieldInfo], Optional[str]]]

_CONDITIONS = (
    "EQ", "NE", "CS", "CC", "MI", "PL", "VS", "VC",
    "HI", "LS", "GE", "LT", "GT", "LE", "AL", "NV",
)

_FAULT_STATUS: dict[int, str] = {
    0b000000: "Address size fault, level 0 of translation or translation table base register.",
    0b000001: "Address size fault, level 1.",
    0b000010: "Address size fault, level 2.",
    0b000011: "Address size fault, level 3.",
    0b000100: "Translation fault, level 0.",
    0b000101: "Translation fault, level 1.",
    0b000110: "Translation fault, level 2.",
    0b000111: "Translation fault, level 3.",
    0b001000: "Access flag fault, level 0.",
    0b001001: "Access flag fault, level 1.",
    0b001010: "Access flag fault, level 2.",
    0b001011: "Access flag fault, level 3.",
    0b001100: "Permission fault, level 0.",
    0b001101: "Permission fault, level 1.",
    0b001110: "Permission fault, level 2.",
    0b001111: "Permission fault, level 3.",
    0b010000: "Synchronous External abort, not on translation table walk or hardware update of translation table.",
    0b010001: "Synchronous Tag Check Fault.",
    0b010011: "Synchronous External abort on translation table walk or hardware update of translation table, level -1.",
    0b010100: "Synchronous External abort on translation table walk or hardware update of translation table, level 0.",
    0b010101: "Synchronous External abort on translation table walk or hardware update of translation table, level 1.",
    0b010110: "Synchronous External abort on translation table walk or hardware update of translation table, level 2.",
    0b010111: "Synchronous External abort on translation table walk or hardware update of translation table, level 3.",
    0b011000: "Synchronous parity or ECC error on memory access, not on translation table walk.",
    0b011011: "Synchronous parity or ECC error on translation table walk or hardware update of translation table, level -1.",
    0b011100: "Synchronous parity or ECC error on translation table walk or hardware update of translation table, level 0.",
    0b011101: "Synchronous parity or ECC error on translation table walk or hardware update of translation table, level 1.",
    0b011110: "Synchronous parity or ECC error on translation table walk or hardware update of translation table, level 2.",
    0b011111: "Synchronous parity or ECC error on translation table walk or hardware update of translation table, level 3.",
    0b100001: "Alignment fault.",
    0b100011: "Granule Protection Fault on translation table walk or hardware update of translation table, level -1.",
    0b100100: "Granule Protection Fault on translation table walk or hardware update of translation table, level 0.",
    0b100101: "Granule Protection Fault on translation table walk or hardware update of translation table, level 1.",
    0b100110: "Granule Protection Fault on translation table walk or hardware update of translation table, level 2.",
    0b100111: "Granule Protection Fault on translation table walk or hardware update of translation table, level 3.",
    0b101000: "Granule Protection Fault, not on translation table walk or hardware update of translation table.",
    0b101001: "Address size fault, level -1.",
    0b101011: "Translation fault, level -1.",
    0b110000: "TLB conflict abort.",
    0b110001: "Unsupported atomic hardware update fault.",
    0b110100: "IMPLEMENTATION DEFINED fault (Lockdown).",
    0b110101: "IMPLEMENTATION DEFINED fault (Unsupported Exclusive or Atomic access).",
}

_DEBUG_STATUS = 0b100010


def describe_fault_status(code: int) -> str:
    try:
        return _FAULT_STATUS[code]
    except KeyError:
        raise DecodeError(f"invalid fault status code {code:#08b}") from None


def describe_debug_status(code: int) -> str:
    if code != _DEBUG_STATUS:
        raise DecodeError(f"invalid debug fault status code {code:#08b}")
    return "Debug exception."


def describe_il(il: bool) -> str:
    return "32-bit instruction trapped." if il else "16-bit instruction trapped."


def _describe_cv(cv: bool) -> str:
    return "COND is valid." if cv else "COND is not valid."


def _describe_cond(cond: int) -> str:
    return f"Condition {_CONDITIONS[cond]}."


def _describe_direction(read: bool) -> str:
    return "Read from system register (MRS or MRC)." if read else "Write to system register (MSR or MCR)."


def _describe_fnv(fnv: bool) -> str:
    if fnv:
        return "FAR is not valid. #It holds an UNKNOWN value and must not be trusted."
    return "FAR is valid."


def _describe_ea(ea: bool) -> str:
    return "External abort." if ea else "Not an external abort."


def _describe_s1ptw(s1ptw: bool) -> str:
    if s1ptw:
        return "Stage 2 fault on an access made for a stage 1 translation table walk."
    return "Fault not on a stage 2 translation for a stage 1 translation table walk."


def _describe_wnr(wnr: bool) -> str:
    return "Abort caused by writing to memory." if wnr else "Abort caused by reading from memory."


def _describe_cm(cm: bool) -> str:
    if cm:
        return "Abort caused by a cache maintenance or address translation instruction."
    return "Abort not caused by a cache maintenance instruction."


def _describe_set(value: int) -> str:
    return {
        0b00: "Recoverable state (UER).",
        0b10: "Uncontainable (UC).",
        0b11: "Restartable state (UEO).",
    }.get(value, "Reserved.")


def _xreg(index: int) -> str:
    return "xzr" if index == 31 else f"x{index}"


def _wreg(index: int) -> str:
    return "wzr" if index == 31 else f"w{index}"


def _cv_cond(iss: int) -> list[FieldInfo]:
    return [
        FieldInfo.get_bit(iss, "CV", "Condition code valid", 24).describe_bit(_describe_cv),
        FieldInfo.get(iss, "COND", "Condition code", 20, 24).describe(_describe_cond),
    ]


def _decode_iss_wf(iss: int):
    ti_names = {0b00: "WFI trapped.", 0b01: "WFE trapped.", 0b10: "WFIT trapped.", 0b11: "WFET trapped."}
    fields = _cv_cond(iss) + [
        FieldInfo.get(iss, "RN", "Register number", 5, 10),
        FieldInfo.get_bit(iss, "RV", "Register field valid", 2).describe_bit(
            lambda rv: "RN holds the timeout register." if rv else "RN is not valid."
        ),
        FieldInfo.get(iss, "TI", "Trapped instruction", 0, 2).describe(ti_names.get),
    ]
    return fields, None


def _decode_iss_mcr(iss: int):
    fields = _cv_cond(iss) + [
        FieldInfo.get(iss, "Opc2", None, 17, 20),
        FieldInfo.get(iss, "Opc1", None, 14, 17),
        FieldInfo.get(iss, "CRn", None, 10, 14),
        FieldInfo.get(iss, "Rt", "General-purpose register", 5, 10),
        FieldInfo.get(iss, "CRm", None, 1, 5),
        FieldInfo.get_bit(iss, "Direction", None, 0).describe_bit(_describe_direction),
    ]
    return fields, None


def _decode_iss_mcrr(iss: int):
    fields = _cv_cond(iss) + [
        FieldInfo.get(iss, "Opc1", None, 16, 20),
        FieldInfo.get(iss, "Rt2", "Second general-purpose register", 10, 15),
        FieldInfo.get(iss, "Rt", "General-purpose register", 5, 10),
        FieldInfo.get(iss, "CRm", None, 1, 5),
        FieldInfo.get_bit(iss, "Direction", None, 0).describe_bit(_describe_direction),
    ]
    return fields, None


def _decode_iss_ldc(iss: int):
    fields = _cv_cond(iss) + [
        FieldInfo.get(iss, "imm8", "Immediate offset", 12, 20),
        FieldInfo.get(iss, "Rn", "Base register", 5, 10),
        FieldInfo.get_bit(iss, "Offset", None, 4).describe_bit(
            lambda add: "Offset is added." if add else "Offset is subtracted."
        ),
        FieldInfo.get(iss, "AM", "Addressing mode", 1, 4),
        FieldInfo.get_bit(iss, "Direction", None, 0).describe_bit(
            lambda read: "Read from memory (LDC)." if read else "Write to memory (STC)."
        ),
    ]
    return fields, None


def _decode_iss_cv_only(iss: int):
    return _cv_cond(iss), None


def _decode_iss_bti(iss: int):
    btype = FieldInfo.get(iss, "BTYPE", "Branch type", 0, 2)
    return [btype], f"Branch type {btype.value:#04b} in PSTATE."


def _decode_iss_hvc(iss: int):
    imm16 = FieldInfo.get(iss, "imm16", "Value of the immediate field", 0, 16)
    return [imm16], None


def _decode_iss_msr(iss: int):
    op0 = FieldInfo.get(iss, "Op0", None, 20, 22)
    op2 = FieldInfo.get(iss, "Op2", None, 17, 20)
    op1 = FieldInfo.get(iss, "Op1", None, 14, 17)
    crn = FieldInfo.get(iss, "CRn", None, 10, 14)
    rt = FieldInfo.get(iss, "Rt", "General-purpose register", 5, 10)
    crm = FieldInfo.get(iss, "CRm", None, 1, 5)
    direction = FieldInfo.get_bit(iss, "Direction", None, 0).describe_bit(_describe_direction)

    name = sysreg_name(op0.value, op1.value, crn.value, crm.value, op2.value)
    reg = _xreg(rt.value)
    if op0.value == 1:
        description = f"SYSL {reg}, {name}" if direction.value else f"{name}, {reg}"
    elif direction.value:
        description = f"MRS {reg}, {name}"
    else:
        description = f"MSR {name}, {reg}"

    return [op0, op2, op1, crn, rt, crm, direction], description


def _decode_iss_abort_common(iss: int) -> list[FieldInfo]:
    return [
        FieldInfo.get(iss, "SET", "Synchronous Error Type", 11, 13).describe(_describe_set),
        FieldInfo.get_bit(iss, "FnV", "FAR not Valid", 10).describe_bit(_describe_fnv),
        FieldInfo.get_bit(iss, "EA", "External abort type", 9).describe_bit(_describe_ea),
    ]


def _decode_iss_instruction_abort(iss: int):
    ifsc = FieldInfo.get(iss, "IFSC", "Instruction Fault Status Code", 0, 6).describe(describe_fault_status)
    fields = _decode_iss_abort_common(iss) + [
        FieldInfo.get_bit(iss, "S1PTW", "Stage-1 translation table walk", 7).describe_bit(_describe_s1ptw),
        ifsc,
    ]
    return fields, ifsc.description


def _decode_instruction_syndrome(iss: int) -> FieldInfo:
    isv = (iss >> 24) & 1
    syndrome = FieldInfo.get(iss, "IS", "Instruction Syndrome", 14, 24)
    if not isv:
        return syndrome.with_description("No valid instruction syndrome.")

    sas = FieldInfo.get(iss, "SAS", "Syndrome Access Size", 22, 24).describe(
        lambda v: ("Byte.", "Halfword.", "Word.", "Doubleword.")[v]
    )
    sse = FieldInfo.get_bit(iss, "SSE", "Syndrome Sign Extend", 21).describe_bit(
        lambda v: "Sign-extension required." if v else "Sign-extension not required."
    )
    srt = FieldInfo.get(iss, "SRT", "Syndrome Register Transfer", 16, 21)
    sf = FieldInfo.get_bit(iss, "SF", "Sixty-Four", 15).describe_bit(
        lambda v: "64-bit register." if v else "32-bit register."
    )
    ar = FieldInfo.get_bit(iss, "AR", "Acquire/Release", 14).describe_bit(
        lambda v: "Acquire/release semantics." if v else "No acquire/release semantics."
    )
    width = ("8", "16", "32", "64")[sas.value]
    reg = _xreg(srt.value) if sf.value else _wreg(srt.value)
    return syndrome.with_subfields([sas, sse, srt, sf, ar]).with_description(
        f"{width}-bit access using register {reg}."
    )


def _decode_iss_data_abort(iss: int):
    dfsc = FieldInfo.get(iss, "DFSC", "Data Fault Status Code", 0, 6).describe(describe_fault_status)
    fields = [
        FieldInfo.get_bit(iss, "ISV", "Instruction Syndrome Valid", 24).describe_bit(
            lambda v: "ISS[23:14] hold a valid instruction syndrome." if v else "ISS[23:14] are not valid."
        ),
        _decode_instruction_syndrome(iss),
        FieldInfo.get_bit(iss, "VNCR", None, 13).describe_bit(
            lambda v: "Fault from use of VNCR_EL2." if v else None
        ),
    ] + _decode_iss_abort_common(iss) + [
        FieldInfo.get_bit(iss, "CM", "Cache Maintenance", 8).describe_bit(_describe_cm),
        FieldInfo.get_bit(iss, "S1PTW", "Stage-1 translation table walk", 7).describe_bit(_describe_s1ptw),
        FieldInfo.get_bit(iss, "WnR", "Write not Read", 6).describe_bit(_describe_wnr),
        dfsc,
    ]
    return fields, dfsc.description


def _decode_iss_fp(iss: int):
    tfv = FieldInfo.get_bit(iss, "TFV", "Trapped Fault Valid", 23).describe_bit(
        lambda v: "Trapped exception flags are valid." if v else "#Trapped exception flags are UNKNOWN."
    )
    fields = [
        tfv,
        FieldInfo.get(iss, "VECITR", "Vector iteration", 8, 11),
        FieldInfo.get_bit(iss, "IDF", "Input Denormal", 7),
        FieldInfo.get_bit(iss, "IXF", "Inexact", 4),
        FieldInfo.get_bit(iss, "UFF", "Underflow", 3),
        FieldInfo.get_bit(iss, "OFF", "Overflow", 2),
        FieldInfo.get_bit(iss, "DZF", "Divide by Zero", 1),
        FieldInfo.get_bit(iss, "IOF", "Invalid Operation", 0),
    ]
    return fields, None


def _decode_iss_serror(iss: int):
    ids = FieldInfo.get_bit(iss, "IDS", "IMPLEMENTATION DEFINED syndrome", 24)
    if ids.value:
        impdef = FieldInfo.get(iss, "IMPDEF", "IMPLEMENTATION DEFINED", 0, 24)
        return [ids, impdef], "IMPLEMENTATION DEFINED syndrome."

    aet_names = {
        0b000: "Uncontainable (UC).",
        0b001: "Unrecoverable state (UEU).",
        0b010: "Restartable state (UEO).",
        0b011: "Recoverable state (UER).",
        0b110: "Corrected (CE).",
    }
    dfsc = FieldInfo.get(iss, "DFSC", "Data Fault Status Code", 0, 6).describe(
        lambda v: {0b000000: "Uncategorized error.", 0b010001: "Asynchronous SError interrupt."}.get(v)
    )
    fields = [
        ids,
        FieldInfo.get_bit(iss, "IESB", "Implicit error synchronization barrier", 13),
        FieldInfo.get(iss, "AET", "Asynchronous Error Type", 10, 13).describe(aet_names.get),
        FieldInfo.get_bit(iss, "EA", "External abort type", 9).describe_bit(_describe_ea),
        dfsc,
    ]
    return fields, None


def _decode_iss_breakpoint(iss: int):
    ifsc = FieldInfo.get(iss, "IFSC", "Instruction Fault Status Code", 0, 6).describe(describe_debug_status)
    return [ifsc], None


def _decode_iss_software_step(iss: int):
    ifsc = FieldInfo.get(iss, "IFSC", "Instruction Fault Status Code", 0, 6).describe(describe_debug_status)
    fields = [
        FieldInfo.get_bit(iss, "ISV", "Instruction Syndrome Valid", 24).describe_bit(
            lambda v: "EX bit is valid." if v else "EX bit is RES0."
        ),
        FieldInfo.get_bit(iss, "EX", "Exclusive operation", 6).describe_bit(
            lambda v: "A Load-Exclusive instruction was stepped." if v else None
        ),
        ifsc,
    ]
    return fields, None


def _decode_iss_watchpoint(iss: int):
    dfsc = FieldInfo.get(iss, "DFSC", "Data Fault Status Code", 0, 6).describe(describe_debug_status)
    fields = [
        FieldInfo.get_bit(iss, "CM", "Cache Maintenance", 8).describe_bit(_describe_cm),
        FieldInfo.get_bit(iss, "WnR", "Write not Read", 6).describe_bit(
            lambda v: "Watchpoint caused by writing to memory." if v else "Watchpoint caused by reading from memory."
        ),
        dfsc,
    ]
    return fields, None


def _decode_iss_comment(iss: int):
    comment = FieldInfo.get(iss, "Comment", "Instruction comment field", 0, 16)
    return [comment], None


_EXCEPTION_CLASSES: dict[int, tuple[str, Optional[IssDecoder]]] = {
    0x00: ("Unknown reason", None),
    0x01: ("Wrapped WF* instruction execution", _decode_iss_wf),
    0x03: ("Trapped MCR or MRC access with coproc=0b1111", _decode_iss_mcr),
    0x04: ("Trapped MCRR or MRRC access with coproc=0b1111", _decode_iss_mcrr),
    0x05: ("Trapped MCR or MRC access with coproc=0b1110", _decode_iss_mcr),
    0x06: ("Trapped LDC or STC access", _decode_iss_ldc),
    0x07: ("Trapped access to SVE, Advanced SIMD or floating point", _decode_iss_cv_only),
    0x08: ("Trapped VMRS access, from ID group trap", _decode_iss_cv_only),
    0x09: ("Trapped use of a Pointer authentication instruction", None),
    0x0A: ("Trapped execution of an LD64B or ST64B* instruction", None),
    0x0C: ("Trapped MRRC access with coproc=0b1110", _decode_iss_mcrr),
    0x0D: ("Branch Target Exception", _decode_iss_bti),
    0x0E: ("Illegal Execution state", None),
    0x11: ("SVC instruction execution in AArch32 state", _decode_iss_hvc),
    0x12: ("HVC instruction execution in AArch32 state", _decode_iss_hvc),
    0x13: ("SMC instruction execution in AArch32 state", _decode_iss_hvc),
    0x15: ("SVC instruction execution in AArch64 state", _decode_iss_hvc),
    0x16: ("HVC instruction execution in AArch64 state", _decode_iss_hvc),
    0x17: ("SMC instruction execution in AArch64 state", _decode_iss_hvc),
    0x18: ("Trapped MSR, MRS or System instruction execution in AArch64 state", _decode_iss_msr),
    0x19: ("Access to SVE functionality trapped", None),
    0x1A: ("Trapped ERET, ERETAA or ERETAB instruction execution", None),
    0x1B: ("Exception from an access to a TSTART instruction", None),
    0x1C: ("Exception from a Pointer Authentication instruction authentication failure", None),
    0x1D: ("Exception from an access to SME functionality", None),
    0x1E: ("Exception from a Granule Protection Check", None),
    0x1F: ("IMPLEMENTATION DEFINED exception to EL3", None),
    0x20: ("Instruction Abort from a lower Exception level", _decode_iss_instruction_abort),
    0x21: ("Instruction Abort taken without a change in Exception level", _decode_iss_instruction_abort),
    0x22: ("PC alignment fault exception", None),
    0x24: ("Data Abort from a lower Exception level", _decode_iss_data_abort),
    0x25: ("Data Abort taken without a change in Exception level", _decode_iss_data_abort),
    0x26: ("SP alignment fault exception", None),
    0x27: ("Memory Operation Exception", None),
    0x28: ("Trapped floating-point exception taken from AArch32 state", _decode_iss_fp),
    0x2C: ("Trapped floating-point exception taken from AArch64 state", _decode_iss_fp),
    0x2F: ("SError interrupt", _decode_iss_serror),
    0x30: ("Breakpoint exception from a lower Exception level", _decode_iss_breakpoint),
    0x31: ("Breakpoint exception taken without a change in Exception level", _decode_iss_breakpoint),
    0x32: ("Software Step exception from a lower Exception level", _decode_iss_software_step),
    0x33: ("Software Step exception taken without a change in Exception level", _decode_iss_software_step),
    0x34: ("Watchpoint exception from a lower Exception level", _decode_iss_watchpoint),
    0x35: ("Watchpoint exception taken without a change in Exception level", _decode_iss_watchpoint),
    0x38: ("BKPT instruction execution in AArch32 state", _decode_iss_comment),
    0x3A: ("Vector Catch exception from AArch32 state", None),
    0x3C: ("BRK instruction execution in AArch64 state", _decode_iss_comment),
}


def decode_esr(esr: int) -> list[FieldInfo]:
    """
    Decode an ESR_ELx value into its top-level fields.
    Raises DecodeError for set RES0 bits or an unallocated exception class.
    """
    log.debug("decoding ESR 0x%016X", esr)
    res0 = FieldInfo.get(esr, "RES0", "Reserved", 37, 64).check_res0()
    iss2 = FieldInfo.get(esr, "ISS2", "Instruction Specific Syndrome 2", 32, 37)
    ec = FieldInfo.get(esr, "EC", "Exception Class", 26, 32)
    il = FieldInfo.get_bit(esr, "IL", "Instruction Length", 25).describe_bit(describe_il)
    iss = FieldInfo.get(esr, "ISS", "Instruction Specific Syndrome", 0, 25)

    entry = _EXCEPTION_CLASSES.get(ec.value)
    if entry is None:
        raise DecodeError(f"unallocated exception class {ec.value:#04x}")
    class_name, iss_decoder = entry
    ec = ec.with_description(f"{class_name}.")

    if iss_decoder is not None:
        subfields, iss_description = iss_decoder(iss.value)
        iss = iss.with_subfields(subfields).with_description(iss_description)
    log.debug("EC %#04x: %s", ec.value, class_name)

    return [res0, iss2, ec, il, iss]
