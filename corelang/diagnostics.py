# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Diagnostic records shared by every pass of the Core toolchain.

A Diagnostic is what the driver renders for the user: a message plus a
best-effort source span and the phase that produced it. Passes never print
diagnostics themselves; they raise `CoreError` subclasses which the driver
converts with `CoreError.to_diagnostic()`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional


@dataclass(frozen=True)
class Span:
	"""Represents a source location (best-effort file/line/column)."""

	file: Optional[str] = None
	line: Optional[int] = None
	column: Optional[int] = None

	@classmethod
	def from_loc(cls, loc: Any) -> "Span":
		"""
		Construct a Span from any object exposing line/column attributes.

		A Span is returned unchanged; lark tokens and exceptions work too since
		they carry `line`/`column`.
		"""
		if loc is None:
			return cls()
		if isinstance(loc, cls):
			return loc
		return cls(
			file=getattr(loc, "file", None),
			line=getattr(loc, "line", None),
			column=getattr(loc, "column", None),
		)

	def in_file(self, file: str | None) -> "Span":
		return Span(file=file, line=self.line, column=self.column)

	def format_loc(self) -> str:
		line = self.line if self.line is not None else "?"
		column = self.column if self.column is not None else "?"
		return f"{line}:{column}"


@dataclass
class Diagnostic:
	"""Represents a toolchain diagnostic (error/warning)."""

	message: str
	code: str | None = None
	# Pipeline phase that detected the problem: lexer, parser, checker,
	# runtime, internal or io.
	phase: str | None = None
	severity: str = "error"
	span: Span = field(default_factory=Span)  # Span() denotes unknown.
	notes: list[str] = field(default_factory=list)

	def __post_init__(self) -> None:
		if self.span is None:  # type: ignore[unreachable]
			self.span = Span()

	def format_human(self, file: str | None = None) -> str:
		where = file or self.span.file or "<input>"
		return f"{where}:{self.span.format_loc()}: {self.severity}: {self.message}"

	def to_json(self, file: str | None = None) -> dict[str, Any]:
		return {
			"phase": self.phase,
			"code": self.code,
			"message": self.message,
			"severity": self.severity,
			"file": file or self.span.file,
			"line": self.span.line,
			"column": self.span.column,
			"notes": list(self.notes),
		}


__all__ = ["Span", "Diagnostic"]
