# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Integer width policy.

Core has one integer type. Its width is a run option: 32 bits (default) or
64 bits with two's-complement wrap-around on arithmetic, or 0 for unbounded
Python integers. Literals and data values that do not fit are rejected rather
than wrapped.
"""

from __future__ import annotations

from dataclasses import dataclass

DEFAULT_INT_BITS = 32
SUPPORTED_INT_BITS = (32, 64, 0)
# CPython refuses longer decimal strings by default (sys.int_info).
MAX_DECIMAL_DIGITS = 4300


@dataclass(frozen=True)
class IntPolicy:
	bits: int = DEFAULT_INT_BITS

	def __post_init__(self) -> None:
		if self.bits not in SUPPORTED_INT_BITS:
			raise ValueError(f"unsupported integer width: {self.bits}")

	@property
	def bounded(self) -> bool:
		return self.bits != 0

	@property
	def min_value(self) -> int | None:
		return -(1 << (self.bits - 1)) if self.bounded else None

	@property
	def max_value(self) -> int | None:
		return (1 << (self.bits - 1)) - 1 if self.bounded else None

	def fits(self, value: int) -> bool:
		if not self.bounded:
			return True
		return self.min_value <= value <= self.max_value  # type: ignore[operator]

	def parse(self, text: str) -> int | None:
		"""Convert a signed decimal string; None if it is too long or does not fit."""
		digits = text.lstrip("+-").lstrip("0")
		limit = MAX_DECIMAL_DIGITS if not self.bounded else len(str(1 << self.bits))
		if len(digits) > limit:
			return None
		try:
			value = int(text)
		except ValueError:
			return None
		return value if self.fits(value) else None

	def wrap(self, value: int) -> int:
		"""Reduce `value` to the policy width (two's complement)."""
		if not self.bounded:
			return value
		mask = (1 << self.bits) - 1
		value &= mask
		if value >> (self.bits - 1):
			value -= 1 << self.bits
		return value


__all__ = ["IntPolicy", "DEFAULT_INT_BITS", "SUPPORTED_INT_BITS", "MAX_DECIMAL_DIGITS"]
