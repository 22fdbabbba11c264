# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

import io
import json
import os
import subprocess
import sys
from pathlib import Path

import pytest

from hareunused.unused import main

ROOT = Path(__file__).resolve().parents[3]

_SOURCE = """use fmt;
use io;

export fn main() void = {
	fmt::println("hello world")!;
};
"""
_REWRITTEN = _SOURCE.replace("use io;\n", "")


def test_missing_operands_is_a_usage_error(capsys):
	with pytest.raises(SystemExit) as excinfo:
		main([])

	assert excinfo.value.code == 2
	assert "usage:" in capsys.readouterr().err


def test_help_exits_zero(capsys):
	with pytest.raises(SystemExit) as excinfo:
		main(["-h"])

	assert excinfo.value.code == 0
	assert "--in-place" in capsys.readouterr().out


def test_warnings_mode_prints_unused_imports(hare_file, capsys):
	path = hare_file(_SOURCE)

	assert main(["-w", str(path)]) == 0

	captured = capsys.readouterr()
	assert captured.err == f"{path}:2:1: warning: unused import io\n"
	assert captured.out == ""


def test_warnings_take_precedence_over_in_place(hare_file, capsys):
	path = hare_file(_SOURCE)

	assert main(["-i", "-w", str(path)]) == 0

	assert path.read_text() == _SOURCE
	assert "unused import io" in capsys.readouterr().err


def test_in_place_rewrites_every_operand(hare_file, capsys):
	first = hare_file(_SOURCE, "a.ha")
	second = hare_file("use b;\nuse a;\n\nfn f() void = a::g();\n", "b.ha")

	assert main(["-i", str(first), str(second)]) == 0

	assert first.read_text() == _REWRITTEN
	assert second.read_text() == "use a;\n\nfn f() void = a::g();\n"
	captured = capsys.readouterr()
	assert captured.out == ""
	assert captured.err == ""


def test_rewrite_goes_to_stdout(hare_file, monkeypatch):
	path = hare_file(_SOURCE)
	buf = io.BytesIO()
	monkeypatch.setattr(sys, "stdout", io.TextIOWrapper(buf, encoding="utf-8"))

	assert main([str(path)]) == 0

	assert buf.getvalue() == _REWRITTEN.encode()
	assert path.read_text() == _SOURCE


def test_parse_error_stops_the_run(hare_file, capsys):
	bad = hare_file("use io;\nfn f() void = $;\n", "bad.ha")
	good = hare_file(_SOURCE, "good.ha")

	assert main(["-i", str(bad), str(good)]) == 1

	err = capsys.readouterr().err
	assert err == f"{bad}:2:15: error: unexpected character '$'\n"
	assert good.read_text() == _SOURCE


def test_parse_error_keeps_earlier_in_place_rewrites(hare_file, capsys):
	good = hare_file(_SOURCE, "good.ha")
	bad = hare_file("use io;\nfn f() void = $;\n", "bad.ha")

	assert main(["-i", str(good), str(bad)]) == 1

	assert good.read_text() == _REWRITTEN
	assert bad.read_text() == "use io;\nfn f() void = $;\n"
	err = capsys.readouterr().err
	assert err == f"{bad}:2:15: error: unexpected character '$'\n"


def test_parse_error_keeps_earlier_stdout_output(hare_file, capsys, monkeypatch):
	good = hare_file(_SOURCE, "good.ha")
	bad = hare_file("use io;\nfn f() void = $;\n", "bad.ha")
	buf = io.BytesIO()
	monkeypatch.setattr(sys, "stdout", io.TextIOWrapper(buf, encoding="utf-8"))

	assert main([str(good), str(bad)]) == 1

	assert buf.getvalue() == _REWRITTEN.encode()
	err = capsys.readouterr().err
	assert err == f"{bad}:2:15: error: unexpected character '$'\n"


def test_missing_file_is_an_error(tmp_path: Path, capsys):
	missing = tmp_path / "missing.ha"

	assert main(["-w", str(missing)]) == 1

	err = capsys.readouterr().err
	assert err.startswith(f"{missing}:?:?: error: ")


def test_json_warnings(hare_file, capsys):
	path = hare_file(_SOURCE)

	assert main(["-w", "--json", str(path)]) == 0

	payload = json.loads(capsys.readouterr().out)
	assert payload == {
		"file": str(path),
		"exit_code": 0,
		"diagnostics": [
			{
				"phase": "imports",
				"message": "unused import io",
				"severity": "warning",
				"file": str(path),
				"line": 2,
				"column": 1,
				"notes": [],
			}
		],
	}


def test_json_parse_error(hare_file, capsys):
	path = hare_file("use io\n")

	assert main(["--json", "-w", str(path)]) == 1

	payload = json.loads(capsys.readouterr().out)
	assert payload["exit_code"] == 1
	diag = payload["diagnostics"][0]
	assert diag["phase"] == "parser"
	assert diag["severity"] == "error"
	assert diag["message"] == "unexpected end of file"


def test_python_dash_m_entrypoint(hare_file):
	path = hare_file(_SOURCE)
	env = dict(os.environ)
	env["PYTHONPATH"] = str(ROOT) + os.pathsep + env.get("PYTHONPATH", "")

	proc = subprocess.run(
		[sys.executable, "-m", "hareunused", str(path)],
		capture_output=True,
		cwd=ROOT,
		env=env,
	)

	assert proc.returncode == 0, proc.stderr.decode()
	assert proc.stdout == _REWRITTEN.encode()
