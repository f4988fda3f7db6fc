# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Exception taxonomy for the Core toolchain.

Every failure is fatal: the pass that detects it raises one of these and the
driver turns it into a Diagnostic plus an exit code. Nothing below the driver
catches them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import ClassVar

from .diagnostics import Diagnostic, Span

EXIT_STATIC = 1
EXIT_RUNTIME = 2
EXIT_INTERNAL = 3
EXIT_IO = 4


@dataclass(eq=False)
class CoreError(Exception):
	"""
	A structured, fatal toolchain error.

	`message` keeps the user-facing wording; `reason_code` is a stable
	machine-readable label surfaced in JSON diagnostics.
	"""

	message: str
	span: Span = field(default_factory=Span)
	reason_code: str = "error"

	phase: ClassVar[str] = "internal"
	exit_code: ClassVar[int] = EXIT_INTERNAL

	def __str__(self) -> str:
		return self.message

	def to_diagnostic(self) -> Diagnostic:
		return Diagnostic(message=self.message, code=self.reason_code, phase=self.phase, span=self.span)


@dataclass(eq=False)
class LexError(CoreError):
	phase: ClassVar[str] = "lexer"
	exit_code: ClassVar[int] = EXIT_STATIC


@dataclass(eq=False)
class ParseError(CoreError):
	phase: ClassVar[str] = "parser"
	exit_code: ClassVar[int] = EXIT_STATIC


@dataclass(eq=False)
class SemanticError(CoreError):
	"""Duplicate declaration or use of an undeclared identifier."""

	phase: ClassVar[str] = "checker"
	exit_code: ClassVar[int] = EXIT_STATIC


@dataclass(eq=False)
class ExecutionError(CoreError):
	"""Uninitialized variable read or a bad data stream during `read`."""

	phase: ClassVar[str] = "runtime"
	exit_code: ClassVar[int] = EXIT_RUNTIME


@dataclass(eq=False)
class ResourceError(CoreError):
	phase: ClassVar[str] = "internal"
	exit_code: ClassVar[int] = EXIT_INTERNAL


@dataclass(eq=False)
class InternalError(CoreError):
	"""Broken traversal invariant (e.g. ascending past the root)."""

	phase: ClassVar[str] = "internal"
	exit_code: ClassVar[int] = EXIT_INTERNAL


@dataclass(eq=False)
class SourceIOError(CoreError):
	phase: ClassVar[str] = "io"
	exit_code: ClassVar[int] = EXIT_IO


__all__ = [
	"CoreError",
	"LexError",
	"ParseError",
	"SemanticError",
	"ExecutionError",
	"ResourceError",
	"InternalError",
	"SourceIOError",
	"EXIT_STATIC",
	"EXIT_RUNTIME",
	"EXIT_INTERNAL",
	"EXIT_IO",
]
