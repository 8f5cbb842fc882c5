from __future__ import annotations

import sys
from typing import Optional, Sequence

from esrdecode.app import run_app
from esrdecode.cli.args import resolve_args
from esrdecode.config import Settings
from esrdecode.errors import DecodeError, ParseError, UsageError
from esrdecode.utils.logger import get_logger

log = get_logger("esrdecode")

EXIT_USAGE = 1
EXIT_FAILURE = 2


def main(argv: Optional[Sequence[str]] = None) -> int:
    argv = list(sys.argv if argv is None else argv)
    try:
        args = resolve_args(argv)
    except UsageError as e:
        print(e.usage, file=sys.stderr)
        return EXIT_USAGE

    settings = Settings.from_env()
    try:
        run_app(args, log_level=settings.log_level, quiet=settings.quiet)
    except (ParseError, DecodeError) as e:
        log.error("%s", e)
        return EXIT_FAILURE
    return 0


if __name__ == "__main__":
    sys.exit(main())
