"""Tests for the command line front ends."""

import pytest
from chip8core.cli import build_parser, main


@pytest.fixture
def source_file(tmp_path):
    path = tmp_path / "prog.asm"
    path.write_text("CLS\nLD V0 2A\nLD F V0\nDRW V1 V2 5\nJP 206\n")
    return path


class TestParser:
    """Test argument defaults."""

    def test_run_defaults(self):
        args = build_parser().parse_args(["run", "game.ch8"])
        assert args.frames == 100
        assert args.cycles == 8
        assert args.seed == 0
        assert args.color_scheme == "classic"
        assert args.screenshot is None
        assert not args.trace
        assert not args.progress
        assert not args.no_keypad
        assert not args.smpte

    def test_log_level_is_case_insensitive(self):
        args = build_parser().parse_args(["--log-level", "debug", "asm", "a", "b"])
        assert args.log_level == "DEBUG"

    def test_command_required(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args([])


class TestCommands:
    """Test asm, deasm and run end to end."""

    def test_asm(self, source_file, tmp_path, capsys):
        rom = tmp_path / "prog.ch8"

        assert main(["asm", str(source_file), str(rom)]) == 0

        assert rom.read_bytes() == b"\x00\xe0\x60\x2a\xf0\x29\xd1\x25\x12\x06"
        out = capsys.readouterr().out
        assert " us -> " in out
        assert str(rom) in out

    def test_deasm(self, source_file, tmp_path):
        rom = tmp_path / "prog.ch8"
        text = tmp_path / "prog.txt"

        main(["asm", str(source_file), str(rom)])
        assert main(["deasm", str(rom), str(text)]) == 0

        assert text.read_text() == source_file.read_text()

    def test_run(self, source_file, tmp_path, capsys):
        rom = tmp_path / "prog.ch8"
        shot = tmp_path / "shot.png"
        main(["asm", str(source_file), str(rom)])

        code = main(["run", str(rom), "--frames", "3", "--screenshot", str(shot), "--no-keypad"])

        assert code == 0
        assert shot.exists()
        out = capsys.readouterr().out
        assert "BEEP─○" in out
        assert "╭───╮" not in out

    def test_run_with_trace(self, source_file, tmp_path, capsys):
        rom = tmp_path / "prog.ch8"
        main(["asm", str(source_file), str(rom)])

        code = main(["--log-level", "DEBUG", "run", str(rom), "--frames", "1", "--cycles", "4", "--trace"])

        assert code == 0
        out = capsys.readouterr().out
        assert "200: CLS" in out
        assert "206: DRW V1 V2 5" in out
        assert "╭───╮" in out

    def test_missing_input(self, tmp_path, capsys):
        code = main(["asm", str(tmp_path / "missing.asm"), str(tmp_path / "out.ch8")])

        assert code == 1
        assert "missing.asm" in capsys.readouterr().out

    def test_rom_too_large(self, tmp_path, capsys):
        rom = tmp_path / "big.ch8"
        rom.write_bytes(b"\x00" * 4000)

        assert main(["run", str(rom), "--frames", "1"]) == 1
        assert "maximum" in capsys.readouterr().out

    def test_bad_color_scheme(self, source_file, tmp_path, capsys):
        rom = tmp_path / "prog.ch8"
        main(["asm", str(source_file), str(rom)])

        code = main(["run", str(rom), "--frames", "1", "--screenshot", str(tmp_path / "x.png"),
                     "--color-scheme", "plaid"])

        assert code == 1
        assert "Unknown color scheme" in capsys.readouterr().out

    def test_run_smpte(self, source_file, tmp_path, capsys):
        rom = tmp_path / "prog.ch8"
        main(["asm", str(source_file), str(rom)])

        assert main(["run", str(rom), "--frames", "1", "--no-keypad", "--smpte"]) == 0

        out = capsys.readouterr().out
        assert "││\033[37m" in out
        assert "\033[0m││" in out
