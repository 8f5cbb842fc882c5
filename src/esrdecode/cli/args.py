from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Sequence

from esrdecode.errors import UsageError


class Mode(enum.Enum):
    ESR = "esr"
    MIDR = "midr"
    SMCCC = "smccc"


@dataclass(frozen=True)
class Args:
    verbose: bool
    mode: Mode
    value: str


_MODE_WORDS = {
    "midr": Mode.MIDR,
    "smccc": Mode.SMCCC,
}


def usage(prog: str) -> str:
    return "\n".join(
        [
            "Usage:",
            f"  {prog} [-v] <ESR value>",
            f"  {prog} [-v] midr <MIDR value>",
            f"  {prog} [-v] smccc <SMCCC function ID>",
        ]
    )


def resolve_args(argv: Sequence[str]) -> Args:
    """
    Match argv (argv[0] is the program name) against the accepted shapes:
    [-v] <value>, [-v] midr <value>, [-v] smccc <value>.
    Anything else raises UsageError.
    """
    prog = argv[0] if argv else "esrdecode"
    rest = list(argv[1:])

    verbose = False
    if len(rest) > 1 and rest[0] == "-v":
        verbose = True
        rest = rest[1:]

    if len(rest) == 1:
        return Args(verbose=verbose, mode=Mode.ESR, value=rest[0])
    if len(rest) == 2 and rest[0] in _MODE_WORDS:
        return Args(verbose=verbose, mode=_MODE_WORDS[rest[0]], value=rest[1])

    raise UsageError(usage(prog))
