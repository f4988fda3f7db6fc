# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Name tables for the single flat Core namespace.

`SymbolTable` is filled by the parser (declare/resolve checks). `Environment`
is created from a finished SymbolTable and holds one optional integer per
declared name for the evaluator; every occurrence of a name shares that slot.
"""

from __future__ import annotations

from typing import Iterator, Optional

from .errors import InternalError
from .syntax_tree import Cursor


class SymbolTable:
	def __init__(self) -> None:
		self._names: dict[str, None] = {}

	def declare(self, name: str) -> bool:
		"""Register `name`; False if it was already declared."""
		if name in self._names:
			return False
		self._names[name] = None
		return True

	def resolve(self, name: str) -> bool:
		return name in self._names

	def __iter__(self) -> Iterator[str]:
		return iter(self._names)


class Environment:
	"""Variable values for one run, keyed by declared name."""

	def __init__(self, symbols: SymbolTable) -> None:
		self._values: dict[str, Optional[int]] = {name: None for name in symbols}

	def get_value(self, name: str) -> Optional[int]:
		self._check_declared(name)
		return self._values[name]

	def set_value(self, name: str, value: int) -> None:
		self._check_declared(name)
		self._values[name] = value

	def set_value_at(self, cursor: Cursor, value: int) -> None:
		"""Assign to the identifier leaf under `cursor`."""
		self.set_value(cursor.name(), value)

	def snapshot(self) -> dict[str, Optional[int]]:
		return dict(self._values)

	def _check_declared(self, name: str) -> None:
		if name not in self._values:
			raise InternalError(f"Name not in ids: {name}", reason_code="unknown-name")


__all__ = ["SymbolTable", "Environment"]
