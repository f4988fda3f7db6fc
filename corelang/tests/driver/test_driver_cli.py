# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

import json
from pathlib import Path

import pytest

from corelang.diagnostics import Diagnostic
from corelang.driver import main

COUNTDOWN = "program int N, I; begin read N; I = 0; while (N > 0) loop I = I + 1; N = N - 1; end; write I; end"
COUNTDOWN_FORMATTED = "\n".join(
	[
		"program",
		"    int N, I;",
		"begin",
		"    read N;",
		"    I = 0;",
		"    while (N > 0) loop",
		"        I = I + 1;",
		"        N = N - 1;",
		"    end;",
		"    write I;",
		"end",
		"",
	]
)


def _write(tmp_path: Path, src: str, data: str = "") -> tuple[Path, Path]:
	src_path = tmp_path / "prog.core"
	data_path = tmp_path / "prog.data"
	src_path.write_text(src)
	data_path.write_text(data)
	return src_path, data_path


def test_prints_program_then_runs_it(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
	src, data = _write(tmp_path, COUNTDOWN, "4\n")
	rc = main([str(src), str(data)])
	out, err = capsys.readouterr()
	assert rc == 0
	assert err == ""
	assert out == COUNTDOWN_FORMATTED + "\n" + "I = 4\n"


def test_static_error_prints_nothing_to_stdout(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
	src, data = _write(tmp_path, "program int A, A; begin A = 1; end")
	rc = main([str(src), str(data)])
	out, err = capsys.readouterr()
	assert rc == 1
	assert out == ""
	assert err.strip() == f"{src}:1:16: error: Duplicate variable A"


def test_lex_error_location(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
	src, data = _write(tmp_path, "program\n  int a;")
	rc = main([str(src), str(data)])
	_out, err = capsys.readouterr()
	assert rc == 1
	assert err.strip() == f"{src}:2:7: error: Invalid token: a"


def test_runtime_error_keeps_earlier_output(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
	src, data = _write(tmp_path, "program int A, B; begin A = 1; write A; write B; end")
	rc = main([str(src), str(data)])
	out, err = capsys.readouterr()
	assert rc == 2
	assert out.endswith("end\n\nA = 1\n")
	assert "error: Uninitialized variable B" in err


def test_bad_data_reports_data_file(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
	src, data = _write(tmp_path, "program int A, B; begin read A, B; end", "1\nzz\n")
	rc = main([str(src), str(data)])
	_out, err = capsys.readouterr()
	assert rc == 2
	assert err.strip() == f"{data}:2:1: error: Input is not an integer."


def test_missing_data_file(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
	src, _data = _write(tmp_path, "program int A; begin A = 1; end")
	missing = tmp_path / "nope.data"
	rc = main([str(src), str(missing)])
	out, err = capsys.readouterr()
	assert rc == 4
	# The program is printed before the data file is opened.
	assert out.startswith("program\n")
	assert err.strip() == f"{missing}:?:?: error: Input file not found."


def test_missing_source_file(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
	missing = tmp_path / "nope.core"
	rc = main([str(missing), str(tmp_path / "nope.data")])
	out, err = capsys.readouterr()
	assert rc == 4
	assert out == ""
	assert "error: Error opening file." in err


def test_json_diagnostics(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
	src, data = _write(tmp_path, "program int A, A; begin A = 1; end")
	rc = main([str(src), str(data), "--json"])
	out, err = capsys.readouterr()
	assert rc == 1
	assert err == ""
	payload = json.loads(out)
	assert payload["exit_code"] == 1
	(diag,) = payload["diagnostics"]
	assert diag["phase"] == "checker"
	assert diag["code"] == "duplicate-declaration"
	assert diag["message"] == "Duplicate variable A"
	assert diag["severity"] == "error"
	assert diag["file"] == str(src)
	assert (diag["line"], diag["column"]) == (1, 16)


def test_int_bits_option(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
	src, data = _write(tmp_path, "program int A; begin A = 65536 * 65536; write A; end")
	assert main([str(src), str(data)]) == 0
	assert capsys.readouterr().out.endswith("A = 0\n")
	assert main([str(src), str(data), "--int-bits", "64"]) == 0
	assert capsys.readouterr().out.endswith("A = 4294967296\n")


def test_int_bits_rejects_unsupported_width(tmp_path: Path) -> None:
	src, data = _write(tmp_path, "program int A; begin A = 1; end")
	with pytest.raises(SystemExit) as info:
		main([str(src), str(data), "--int-bits", "16"])
	assert info.value.code == 2


def test_node_capacity_option(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
	src, data = _write(tmp_path, COUNTDOWN, "1")
	rc = main([str(src), str(data), "--max-nodes", "10"])
	out, err = capsys.readouterr()
	assert rc == 3
	assert out == ""
	assert "error: Parse Tree is out of memory." in err


def test_node_capacity_must_be_positive(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
	src, data = _write(tmp_path, COUNTDOWN, "1")
	assert main([str(src), str(data), "--max-nodes", "0"]) == 2
	assert "--max-nodes must be at least 1" in capsys.readouterr().err


def test_deep_nesting_is_a_resource_error(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
	depth = 5000
	src, data = _write(tmp_path, "program int A; begin A = " + "(" * depth + "1" + ")" * depth + "; end")
	rc = main([str(src), str(data), "--max-nodes", "100000"])
	_out, err = capsys.readouterr()
	assert rc == 3
	assert "Program nesting too deep." in err


def test_grammar_check_passes_for_printed_program(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
	src, data = _write(tmp_path, COUNTDOWN, "2")
	rc = main([str(src), str(data), "--grammar-check"])
	out, err = capsys.readouterr()
	assert rc == 0
	assert err == ""
	assert out.endswith("I = 2\n")


def _reject_everything(text: str, file: str | None = None) -> list[Diagnostic]:
	return [Diagnostic(message="reference grammar rejected text: boom", code="grammar-mismatch", phase="grammar-check")]


def test_grammar_check_warn_mode_continues(
	tmp_path: Path, capsys: pytest.CaptureFixture[str], monkeypatch: pytest.MonkeyPatch
) -> None:
	monkeypatch.setattr("corelang.driver.conformance_errors", _reject_everything)
	src, data = _write(tmp_path, COUNTDOWN, "1")
	rc = main([str(src), str(data), "--grammar-check", "--grammar-check-mode", "warn"])
	out, err = capsys.readouterr()
	assert rc == 0
	assert "[grammar-check] warning: reference grammar rejected text: boom" in err
	assert out.endswith("I = 1\n")


def test_grammar_check_fail_mode_stops_before_printing(
	tmp_path: Path, capsys: pytest.CaptureFixture[str], monkeypatch: pytest.MonkeyPatch
) -> None:
	monkeypatch.setattr("corelang.driver.conformance_errors", _reject_everything)
	src, data = _write(tmp_path, COUNTDOWN, "1")
	rc = main([str(src), str(data), "--grammar-check"])
	out, err = capsys.readouterr()
	assert rc == 3
	assert out == ""
	assert "error: reference grammar rejected text: boom" in err


def test_grammar_check_is_off_by_default(
	tmp_path: Path, capsys: pytest.CaptureFixture[str], monkeypatch: pytest.MonkeyPatch
) -> None:
	monkeypatch.setattr("corelang.driver.conformance_errors", _reject_everything)
	src, data = _write(tmp_path, COUNTDOWN, "1")
	assert main([str(src), str(data)]) == 0
	assert capsys.readouterr().err == ""


def test_json_fills_in_source_file_for_unlocated_errors(
	tmp_path: Path, capsys: pytest.CaptureFixture[str], monkeypatch: pytest.MonkeyPatch
) -> None:
	monkeypatch.setattr("corelang.driver.conformance_errors", _reject_everything)
	src, data = _write(tmp_path, COUNTDOWN, "1")
	rc = main([str(src), str(data), "--grammar-check", "--json"])
	out, _err = capsys.readouterr()
	assert rc == 3
	diag = json.loads(out)["diagnostics"][0]
	assert diag["phase"] == "internal"
	assert diag["code"] == "grammar-mismatch"
	assert diag["file"] == str(src)
	assert diag["line"] is None


def test_overlong_literal_is_reported(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
	src, data = _write(tmp_path, "program int A; begin A = " + "9" * 5000 + "; end")
	rc = main([str(src), str(data), "--int-bits", "0"])
	out, err = capsys.readouterr()
	assert rc == 1
	assert out == ""
	assert f"{src}:1:26: error: Integer literal out of range: " in err


def test_overlong_data_word_is_reported(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
	src, data = _write(tmp_path, "program int A; begin read A; end", "9" * 5000)
	rc = main([str(src), str(data)])
	_out, err = capsys.readouterr()
	assert rc == 2
	assert err.strip() == f"{data}:1:1: error: Input is not an integer."


def test_undecodable_source_is_a_lex_error(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
	src, data = _write(tmp_path, "")
	src.write_bytes(b"program int A; begin A = 1; end \xff")
	rc = main([str(src), str(data)])
	out, err = capsys.readouterr()
	assert rc == 1
	assert out == ""
	assert err.strip() == f"{src}:?:?: error: Invalid character: 0xff"


def test_undecodable_data_is_not_an_integer(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
	src, data = _write(tmp_path, "program int A; begin read A; write A; end")
	data.write_bytes(b"\xff 5\n")
	rc = main([str(src), str(data), "--json"])
	out, _err = capsys.readouterr()
	assert rc == 2
	# The printed program comes first; the JSON payload is the last line.
	payload = json.loads(out.strip().splitlines()[-1])
	(diag,) = payload["diagnostics"]
	assert diag["phase"] == "runtime"
	assert diag["message"] == "Input is not an integer."
	assert diag["file"] == str(data)
