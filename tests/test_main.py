import io

import pytest
from rich.console import Console

from esrdecode import app
from esrdecode.__main__ import EXIT_FAILURE, EXIT_USAGE, main
from esrdecode.cli.args import Args, Mode
from esrdecode.config import Settings


@pytest.fixture(autouse=True)
def plain_terminal(monkeypatch):
    monkeypatch.delenv("FORCE_COLOR", raising=False)
    monkeypatch.setenv("NO_COLOR", "1")
    monkeypatch.delenv("ESRDECODE_LOG_LEVEL", raising=False)
    monkeypatch.delenv("ESRDECODE_QUIET", raising=False)


def test_single_value_selects_esr(monkeypatch):
    seen = []
    monkeypatch.setattr("esrdecode.__main__.run_app", lambda args, **kwargs: seen.append(args))
    assert main(["esrdecode", "0x96000050"]) == 0
    assert seen == [Args(verbose=False, mode=Mode.ESR, value="0x96000050")]


def test_verbose_midr_selects_midr(monkeypatch):
    seen = []
    monkeypatch.setattr("esrdecode.__main__.run_app", lambda args, **kwargs: seen.append(args))
    assert main(["esrdecode", "-v", "midr", "0x410FD034"]) == 0
    assert seen == [Args(verbose=True, mode=Mode.MIDR, value="0x410FD034")]


def test_esr_output(capsys):
    assert main(["esrdecode", "0x96000050"]) == 0
    lines = capsys.readouterr().out.splitlines()
    assert lines[0] == "ESR 0x0000000096000050:"
    assert lines[1] == "37..63 RES0: 0x0 0b000000000000000000000000000"
    assert "26..31 EC: 0x25 0b100101" in lines
    assert "  # Data Abort taken without a change in Exception level." in lines
    assert "25     IL: true" in lines
    assert "  06     WnR: true" in lines
    assert "  00..05 DFSC: 0x10 0b010000" in lines


def test_verbose_midr_output(capsys):
    assert main(["esrdecode", "-v", "midr", "0x410FD034"]) == 0
    lines = capsys.readouterr().out.splitlines()
    assert lines[0] == "MIDR 0x00000000410fd034:"
    assert "04..15 PartNum: 0xd03 0b110100000011 (Primary part number)" in lines
    assert "  # Cortex-A53." in lines


def test_smccc_header_is_narrower(capsys):
    assert main(["esrdecode", "smccc", "0x84000000"]) == 0
    lines = capsys.readouterr().out.splitlines()
    assert lines[0] == "SMC ID 0x84000000:"
    assert "00..15 Function number: 0x0 0b0000000000000000" in lines
    assert "  # PSCI_VERSION." in lines


def test_usage_error(capsys):
    assert main(["esrdecode"]) == EXIT_USAGE
    captured = capsys.readouterr()
    assert captured.out == ""
    assert captured.err.splitlines()[0] == "Usage:"
    assert "  esrdecode [-v] smccc <SMCCC function ID>" in captured.err


def test_parse_error(capsys):
    assert main(["esrdecode", "0xnope"]) == EXIT_FAILURE
    captured = capsys.readouterr()
    assert captured.out == ""
    assert "0xnope" in captured.err


def test_decode_error_prints_nothing_to_stdout(capsys):
    assert main(["esrdecode", "0x08000000"]) == EXIT_FAILURE
    captured = capsys.readouterr()
    assert captured.out == ""
    assert "unallocated exception class" in captured.err


def test_header_width():
    assert app.header(Mode.ESR, 0x96000050).plain == "ESR 0x0000000096000050:"
    assert app.header(Mode.SMCCC, 0x84000000).plain == "SMC ID 0x84000000:"


def test_every_mode_has_a_decoder():
    assert set(app.MODES) == set(Mode)


def test_settings_from_env():
    assert Settings.from_env({}) == Settings(log_level="WARNING", quiet=False)
    assert Settings.from_env({"ESRDECODE_LOG_LEVEL": "debug", "ESRDECODE_QUIET": "1"}) == Settings(
        log_level="DEBUG", quiet=True
    )
    assert Settings.from_env({"ESRDECODE_LOG_LEVEL": "loud"}).log_level == "WARNING"


def test_run_app_colors_on_a_terminal():
    buf = io.StringIO()
    console = Console(file=buf, force_terminal=True, color_system="truecolor", no_color=False, width=200)
    app.run_app(Args(verbose=False, mode=Mode.ESR, value="0x96000050"), console=console)
    out = buf.getvalue()
    assert "\x1b[" in out
    # accented description text
    assert "38;2;255;140;0" in out
