# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Whitespace-separated integer input for `read` statements.
"""

from __future__ import annotations

import io
import re
from typing import Iterator, TextIO

from .diagnostics import Span
from .errors import ExecutionError
from .integers import IntPolicy

_WORD_RE = re.compile(r"\S+")
_INT_RE = re.compile(r"[+-]?[0-9]+")


class DataStream:
	"""Hands out integers one at a time, reading the stream lazily."""

	def __init__(self, stream: TextIO, *, file: str | None = None, int_policy: IntPolicy | None = None) -> None:
		self._stream = stream
		self._file = file
		self._int_policy = int_policy or IntPolicy()
		self._words = self._iter_words()
		self.consumed = 0

	@classmethod
	def from_text(cls, text: str, **kwargs) -> "DataStream":
		return cls(io.StringIO(text), **kwargs)

	def _iter_words(self) -> Iterator[tuple[str, Span]]:
		for line_no, line in enumerate(self._stream, start=1):
			for m in _WORD_RE.finditer(line):
				yield m.group(), Span(file=self._file, line=line_no, column=m.start() + 1)

	def next_int(self) -> int:
		item = next(self._words, None)
		if item is None:
			raise ExecutionError("Input is empty.", span=Span(file=self._file), reason_code="data-exhausted")
		word, span = item
		value = self._int_policy.parse(word) if _INT_RE.fullmatch(word) else None
		if value is None:
			raise ExecutionError("Input is not an integer.", span=span, reason_code="data-not-integer")
		self.consumed += 1
		return value


__all__ = ["DataStream"]
