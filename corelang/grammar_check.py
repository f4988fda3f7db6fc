# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Reference-grammar conformance check.

`grammar.lark` restates the Core grammar for lark's LALR parser. It is an
independent second reading of the language, so feeding it the pretty-printer's
output is a cheap self-check of the printer (`corei --grammar-check`) and a
convenient oracle for tests.
"""

from __future__ import annotations

from pathlib import Path

from lark import Lark, Tree, UnexpectedInput

from .diagnostics import Diagnostic, Span

_GRAMMAR_PATH = Path(__file__).with_name("grammar.lark")
_GRAMMAR_SRC = _GRAMMAR_PATH.read_text()

_PARSER = Lark(
	_GRAMMAR_SRC,
	parser="lalr",
	start="start",
	propagate_positions=True,
	maybe_placeholders=False,
)


def check_source(text: str) -> Tree:
	"""Parse `text` with the reference grammar; raises lark.UnexpectedInput."""
	return _PARSER.parse(text)


def conformance_errors(text: str, file: str | None = None) -> list[Diagnostic]:
	try:
		check_source(text)
	except UnexpectedInput as err:
		summary = str(err).strip().splitlines()[0] if str(err).strip() else type(err).__name__
		return [
			Diagnostic(
				message=f"reference grammar rejected text: {summary}",
				code="grammar-mismatch",
				phase="grammar-check",
				span=Span.from_loc(err).in_file(file),
				notes=[f"lark: {type(err).__name__}"],
			)
		]
	return []


__all__ = ["check_source", "conformance_errors"]
