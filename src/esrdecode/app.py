from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional

from rich.console import Console
from rich.style import Style
from rich.text import Text

from esrdecode.cli.args import Args, Mode
from esrdecode.decode.esr import decode_esr
from esrdecode.decode.midr import decode_midr
from esrdecode.decode.model import FieldInfo
from esrdecode.decode.smccc import decode_smccc
from esrdecode.render.tree import print_fields
from esrdecode.utils.logger import get_logger, setup_logging
from esrdecode.utils.numbers import parse_number

log = get_logger(__name__)

LABEL_STYLE = Style(color="cyan", bold=True)
VALUE_STYLE = Style(color="yellow", bold=True)


@dataclass(frozen=True)
class ModeSpec:
    label: str
    hex_digits: int
    decode: Callable[[int], list[FieldInfo]]


MODES: dict[Mode, ModeSpec] = {
    Mode.ESR: ModeSpec(label="ESR", hex_digits=16, decode=decode_esr),
    Mode.MIDR: ModeSpec(label="MIDR", hex_digits=16, decode=decode_midr),
    Mode.SMCCC: ModeSpec(label="SMC ID", hex_digits=8, decode=decode_smccc),
}


def header(mode: Mode, value: int) -> Text:
    spec = MODES[mode]
    line = Text()
    line.append(spec.label, style=LABEL_STYLE)
    line.append(" ")
    line.append(f"{value:#0{spec.hex_digits + 2}x}", style=VALUE_STYLE)
    line.append(":")
    return line


def run_app(
    args: Args,
    log_level: str = "WARNING",
    quiet: bool = False,
    console: Optional[Console] = None,
) -> None:
    setup_logging(level=log_level, quiet=quiet)
    if console is None:
        console = Console(highlight=False)

    log.info("mode=%s value=%s verbose=%s", args.mode.name, args.value, args.verbose)
    value = parse_number(args.value)

    # Decode before printing anything so a bad value leaves stdout empty
    decoded = MODES[args.mode].decode(value)
    log.info("decoded %d top-level fields", len(decoded))

    console.print(header(args.mode, value), soft_wrap=True)
    print_fields(console, decoded, args.verbose)
