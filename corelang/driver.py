# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
`corei`: run a Core program.

Sequences the pipeline over two files:

  source -> Lexer -> Parser (sealed tree) -> Printer -> Evaluator <- data

Every pass raises a `CoreError` subclass on its first problem; `main` is the
only place that catches them. It renders one diagnostic (human-readable on
stderr, or JSON on stdout with --json) and returns the exit code of the
error's category. Output already written before a runtime error stays.
"""

from __future__ import annotations

import argparse
import json
import sys
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterator, TextIO

from .data_stream import DataStream
from .diagnostics import Diagnostic, Span
from .errors import CoreError, ExecutionError, InternalError, LexError, ResourceError, SourceIOError
from .evaluator import Evaluator
from .grammar_check import conformance_errors
from .integers import DEFAULT_INT_BITS, SUPPORTED_INT_BITS, IntPolicy
from .lexer import Lexer
from .parser import ParsedProgram, Parser
from .printer import Printer, format_program
from .syntax_tree import DEFAULT_NODE_CAPACITY, SyntaxTree


@dataclass(frozen=True)
class RunOptions:
	max_nodes: int = DEFAULT_NODE_CAPACITY
	int_bits: int = DEFAULT_INT_BITS
	grammar_check: bool = False
	grammar_check_mode: str = "fail"
	json: bool = False

	@property
	def int_policy(self) -> IntPolicy:
		return IntPolicy(self.int_bits)


@contextmanager
def open_text(
	path: Path,
	error_message: str,
	decode_error: Callable[[UnicodeDecodeError], CoreError],
) -> Iterator[TextIO]:
	"""
	Open `path` for reading as UTF-8.

	An unreadable file becomes a SourceIOError; bytes that do not decode while
	the block reads the file become whatever `decode_error` builds.
	"""
	try:
		handle = path.open("r", encoding="utf-8")
	except OSError as exc:
		raise SourceIOError(error_message, span=Span(file=str(path)), reason_code="open-failed") from exc
	with handle:
		try:
			yield handle
		except UnicodeDecodeError as exc:
			raise decode_error(exc) from exc


def source_decode_error(path: Path) -> Callable[[UnicodeDecodeError], CoreError]:
	def build(exc: UnicodeDecodeError) -> CoreError:
		byte = exc.object[exc.start]
		return LexError(f"Invalid character: 0x{byte:02x}", span=Span(file=str(path)), reason_code="invalid-character")

	return build


def data_decode_error(path: Path) -> Callable[[UnicodeDecodeError], CoreError]:
	def build(_exc: UnicodeDecodeError) -> CoreError:
		return ExecutionError("Input is not an integer.", span=Span(file=str(path)), reason_code="data-not-integer")

	return build


def parse_source(source_path: Path, options: RunOptions) -> ParsedProgram:
	with open_text(source_path, "Error opening file.", source_decode_error(source_path)) as src:
		lexer = Lexer(src, file=str(source_path), int_policy=options.int_policy)
		return Parser(lexer, tree=SyntaxTree(options.max_nodes)).parse()


def run(
	source_path: Path,
	data_path: Path,
	options: RunOptions,
	out: TextIO | None = None,
	err: TextIO | None = None,
) -> None:
	"""Parse, print and execute one program; raises CoreError on failure."""
	out = out or sys.stdout
	err = err or sys.stderr
	program = parse_source(source_path, options)
	if options.grammar_check:
		_run_grammar_check(format_program(program), source_path, options, err)
	Printer(out).print(program)
	with open_text(data_path, "Input file not found.", data_decode_error(data_path)) as data_file:
		data = DataStream(data_file, file=str(data_path), int_policy=options.int_policy)
		Evaluator(program, data, out, int_policy=options.int_policy).execute()


def _run_grammar_check(text: str, source_path: Path, options: RunOptions, err: TextIO) -> None:
	"""Validate the printer's output against the reference grammar."""
	diags = conformance_errors(text, file=f"{source_path} (printed)")
	if not diags:
		return
	if options.grammar_check_mode == "warn":
		for d in diags:
			print(f"[grammar-check] warning: {d.message}", file=err)
		return
	raise InternalError(diags[0].message, span=diags[0].span, reason_code="grammar-mismatch")


def _diag_to_json(d: Diagnostic, default_file: Path) -> dict[str, object]:
	payload = d.to_json()
	if payload["file"] is None:
		payload["file"] = str(default_file)
	return payload


def _report(exc: CoreError, source_path: Path, options: RunOptions) -> int:
	diag = exc.to_diagnostic()
	sys.stdout.flush()
	if options.json:
		print(json.dumps({"exit_code": exc.exit_code, "diagnostics": [_diag_to_json(diag, source_path)]}))
	else:
		print(diag.format_human(diag.span.file or str(source_path)), file=sys.stderr)
	return exc.exit_code


def build_arg_parser() -> argparse.ArgumentParser:
	ap = argparse.ArgumentParser(prog="corei", description="Parse, pretty-print and run a Core program")
	ap.add_argument("source", type=Path, help="Core source file")
	ap.add_argument("data", type=Path, help="Data file read by `read` statements")
	ap.add_argument(
		"--max-nodes",
		type=int,
		default=DEFAULT_NODE_CAPACITY,
		help=f"Parse tree capacity in nodes (default: {DEFAULT_NODE_CAPACITY})",
	)
	ap.add_argument(
		"--int-bits",
		type=int,
		choices=SUPPORTED_INT_BITS,
		default=DEFAULT_INT_BITS,
		help="Integer width with wrap-around arithmetic; 0 means unbounded (default: 32)",
	)
	ap.add_argument(
		"--grammar-check",
		action="store_true",
		help="Check the pretty-printed program against the reference grammar before running it",
	)
	ap.add_argument(
		"--grammar-check-mode",
		choices=["fail", "warn"],
		default="fail",
		help="When --grammar-check is enabled: fail on a mismatch (default) or warn and continue",
	)
	ap.add_argument(
		"--json",
		action="store_true",
		help="Emit diagnostics as JSON (phase/message/severity/file/line/column)",
	)
	return ap


def main(argv: list[str] | None = None) -> int:
	args = build_arg_parser().parse_args(argv)
	if args.max_nodes < 1:
		print("corei: --max-nodes must be at least 1", file=sys.stderr)
		return 2
	options = RunOptions(
		max_nodes=args.max_nodes,
		int_bits=args.int_bits,
		grammar_check=args.grammar_check,
		grammar_check_mode=args.grammar_check_mode,
		json=args.json,
	)
	try:
		run(args.source, args.data, options)
	except CoreError as exc:
		return _report(exc, args.source, options)
	except RecursionError:
		exc = ResourceError("Program nesting too deep.", reason_code="recursion-limit")
		return _report(exc, args.source, options)
	return 0


if __name__ == "__main__":
	raise SystemExit(main())
