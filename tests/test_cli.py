"""Tests for the command line interface."""

from pathlib import Path

import pytest

from hexmate.__main__ import main


@pytest.fixture
def source(tmp_path: Path) -> Path:
    path = tmp_path / "source.c"
    path.write_text("return 10; x=10;\n", encoding="utf-8")
    return path


def test_convert(capsys: pytest.CaptureFixture) -> None:
    assert main(["convert", "0xFF"]) == 0

    out = capsys.readouterr().out
    assert "Dec: 255" in out
    assert "  Little: FF 00 00 00" in out


def test_convert_rejects_garbage(capsys: pytest.CaptureFixture) -> None:
    assert main(["convert", "zz"]) == 1
    assert "Error:" in capsys.readouterr().err


@pytest.mark.parametrize("value", ["0x1_0", "0x-1", "0b 1"])
def test_convert_rejects_python_only_spellings(value: str, capsys: pytest.CaptureFixture) -> None:
    assert main(["convert", value]) == 1
    assert "Error:" in capsys.readouterr().err


def test_scan(tmp_path: Path, capsys: pytest.CaptureFixture) -> None:
    path = tmp_path / "values.txt"
    path.write_text("a=10\nb=0x1F\n", encoding="utf-8")

    assert main(["scan", str(path)]) == 0
    assert capsys.readouterr().out.splitlines() == ["1:3 10 10", "2:3 0x1F 31"]


def test_replace_all_respects_skip_contexts(source: Path, capsys: pytest.CaptureFixture) -> None:
    assert main(["replace", str(source), "10", "--to", "hex", "--all"]) == 0
    assert capsys.readouterr().out == "return 10; x=0xA;\n"


def test_replace_at_offset_in_place(source: Path) -> None:
    assert main(["replace", str(source), "10", "--to", "bin", "--at", "13", "--in-place"]) == 0
    assert source.read_text(encoding="utf-8") == "return 10; x=0b1010;\n"


def test_replace_first_occurrence(source: Path, capsys: pytest.CaptureFixture) -> None:
    assert main(["replace", str(source), "10", "--to", "oct"]) == 0
    assert capsys.readouterr().out == "return 0o12; x=10;\n"


def test_replace_uses_config(source: Path, tmp_path: Path, capsys: pytest.CaptureFixture) -> None:
    config = tmp_path / "settings.yaml"
    config.write_text("skipContexts: []\n", encoding="utf-8")

    assert main(["--config", str(config), "replace", str(source), "10", "--to", "hex", "--all"]) == 0
    assert capsys.readouterr().out == "return 0xA; x=0xA;\n"


def test_replace_stale_offset_fails(source: Path, capsys: pytest.CaptureFixture) -> None:
    assert main(["replace", str(source), "10", "--to", "hex", "--at", "100"]) == 1
    assert "Error:" in capsys.readouterr().err
    assert source.read_text(encoding="utf-8") == "return 10; x=10;\n"


def test_cycle(source: Path, capsys: pytest.CaptureFixture) -> None:
    assert main(["cycle", str(source), "--to", "bin"]) == 0
    assert capsys.readouterr().out == "return 0b1010; x=0b1010;\n"


def test_bits_with_bitfields(tmp_path: Path, capsys: pytest.CaptureFixture) -> None:
    config = tmp_path / "settings.yaml"
    config.write_text(
        "bitfields:\n  STATUS:\n    0: Carry\n    1:\n      label: Zero\n      doc: Result was zero\n",
        encoding="utf-8",
    )

    assert main(["--config", str(config), "bits", "0b10"]) == 0
    assert capsys.readouterr().out.splitlines() == [
        "Bits: " + "0" * 30 + "10",
        "STATUS",
        "  Carry: 0",
        "  Zero: 1 - Result was zero",
    ]


def test_bad_config_is_reported(tmp_path: Path, capsys: pytest.CaptureFixture) -> None:
    config = tmp_path / "settings.yaml"
    config.write_text("dualDisplay: maybe\n", encoding="utf-8")

    assert main(["--config", str(config), "bits", "1"]) == 1
    assert "dualDisplay" in capsys.readouterr().err


def test_equivalent_needs_all(source: Path, capsys: pytest.CaptureFixture) -> None:
    with pytest.raises(SystemExit) as exc_info:
        main(["replace", str(source), "10", "--to", "hex", "--equivalent"])

    assert exc_info.value.code == 2
    assert "--equivalent needs --all" in capsys.readouterr().err
    assert source.read_text(encoding="utf-8") == "return 10; x=10;\n"


def test_equivalent_with_all(source: Path, capsys: pytest.CaptureFixture) -> None:
    source.write_text("a=10 b=0xA\n", encoding="utf-8")

    assert main(["replace", str(source), "10", "--to", "bin", "--all", "--equivalent"]) == 0
    assert capsys.readouterr().out == "a=0b1010 b=0b1010\n"
