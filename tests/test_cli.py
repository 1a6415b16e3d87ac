from __future__ import annotations

import io
from pathlib import Path

import pytest

from brainfuck.cli import EXIT_ERROR, EXIT_INFRA, EXIT_OK, main


def _run(args: list[str], data: bytes = b"") -> tuple[int, bytes]:
    out = io.BytesIO()
    code = main(args, stdin=io.BytesIO(data), stdout=out)
    return code, out.getvalue()


def _script(tmp_path: Path, code: str) -> str:
    p = tmp_path / "prog.b"
    p.write_text(code, encoding="utf-8")
    return str(p)


def test_cli_hello_world(examples_dir):
    code, out = _run([str(examples_dir / "hello_world.b")])
    assert code == EXIT_OK
    assert out == b"Hello World!\n"


def test_cli_reads_stdin(tmp_path):
    code, out = _run([_script(tmp_path, ",+.,+.")], b"ab")
    assert code == EXIT_OK
    assert out == b"bc"


def test_cli_input_file(tmp_path):
    data = tmp_path / "in.bin"
    data.write_bytes(b"Z")
    code, out = _run([_script(tmp_path, ",."), "--input", str(data)], b"ignored")
    assert code == EXIT_OK
    assert out == b"Z"


def test_cli_parse_error(tmp_path, capsys):
    code, out = _run([_script(tmp_path, "+[")])
    assert code == EXIT_ERROR
    assert out == b""
    assert "Error: '[' was never closed" in capsys.readouterr().err


def test_cli_runtime_error(tmp_path, capsys):
    code, out = _run([_script(tmp_path, "+.<")])
    assert code == EXIT_ERROR
    assert out == b"\x01"
    assert "tape underflow" in capsys.readouterr().err


def test_cli_missing_file(tmp_path, capsys):
    code, _ = _run([str(tmp_path / "missing.b")])
    assert code == EXIT_INFRA
    assert "Error:" in capsys.readouterr().err


def test_cli_bad_config(tmp_path, capsys):
    cfg = tmp_path / "bf.yaml"
    cfg.write_text("tape_size: -1\n", encoding="utf-8")
    code, _ = _run([_script(tmp_path, "+."), "--config", str(cfg)])
    assert code == EXIT_INFRA
    assert "tape_size" in capsys.readouterr().err


def test_cli_config_file(tmp_path):
    cfg = tmp_path / "bf.yaml"
    cfg.write_text("tape_size: 2\nflush_output: false\n", encoding="utf-8")
    code, out = _run([_script(tmp_path, ">>>>+."), "--config", str(cfg)])
    assert code == EXIT_OK
    assert out == b"\x01"


def test_cli_trace(tmp_path, capsys):
    code, out = _run([_script(tmp_path, "+."), "--trace"])
    assert code == EXIT_OK
    assert out == b"\x01"
    err = capsys.readouterr().err
    assert "BRAINFUCK DEBUGGER" in err
    assert "FINAL RESULT: halted" in err


def test_cli_trace_from_environment(tmp_path, capsys, monkeypatch):
    monkeypatch.setenv("BF_TRACE", "1")
    code, _ = _run([_script(tmp_path, "+")])
    assert code == EXIT_OK
    assert "BRAINFUCK DEBUGGER" in capsys.readouterr().err


def test_cli_version(capsys):
    with pytest.raises(SystemExit) as exc:
        main(["--version"])
    assert exc.value.code == 0
    assert "0.1.0" in capsys.readouterr().out


def test_cli_malformed_config(tmp_path, capsys):
    cfg = tmp_path / "bf.yaml"
    cfg.write_text("tape_size: [1\n", encoding="utf-8")
    code, out = _run([_script(tmp_path, "+."), "--config", str(cfg)])
    assert code == EXIT_INFRA
    assert out == b""
    assert "Error:" in capsys.readouterr().err


def test_cli_unknown_encoding(tmp_path, capsys):
    cfg = tmp_path / "bf.yaml"
    cfg.write_text("encoding: no-such-codec\n", encoding="utf-8")
    code, _ = _run([_script(tmp_path, "+."), "--config", str(cfg)])
    assert code == EXIT_INFRA
    assert "no-such-codec" in capsys.readouterr().err


def test_cli_version_is_the_package_version(capsys):
    from brainfuck.cli import __version__

    pyproject = (Path(__file__).resolve().parents[1] / "pyproject.toml").read_text(encoding="utf-8")
    assert 'attr = "brainfuck.cli.__version__"' in pyproject
    with pytest.raises(SystemExit):
        main(["--version"])
    assert __version__ in capsys.readouterr().out
