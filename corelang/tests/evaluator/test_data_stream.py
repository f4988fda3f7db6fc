# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

import pytest

from corelang.data_stream import DataStream
from corelang.errors import ExecutionError
from corelang.integers import IntPolicy


def test_integers_across_lines_and_signs() -> None:
	data = DataStream.from_text("5 7\n-3   +4\n\n  12\n")
	assert [data.next_int() for _ in range(5)] == [5, 7, -3, 4, 12]
	assert data.consumed == 5


def test_exhausted_stream() -> None:
	data = DataStream.from_text("1\n", file="in.txt")
	data.next_int()
	with pytest.raises(ExecutionError, match="Input is empty.") as info:
		data.next_int()
	assert info.value.span.file == "in.txt"
	assert info.value.reason_code == "data-exhausted"


def test_empty_stream() -> None:
	with pytest.raises(ExecutionError, match="Input is empty."):
		DataStream.from_text("").next_int()


@pytest.mark.parametrize("word", ["x", "1.5", "1_000", "0x10", "--1", "3000000000"])
def test_non_integers_are_rejected(word: str) -> None:
	with pytest.raises(ExecutionError, match="Input is not an integer."):
		DataStream.from_text(word).next_int()


def test_error_points_at_offending_word() -> None:
	data = DataStream.from_text("1 2\n  oops\n", file="in.txt")
	data.next_int()
	data.next_int()
	with pytest.raises(ExecutionError) as info:
		data.next_int()
	span = info.value.span
	assert (span.file, span.line, span.column) == ("in.txt", 2, 3)
	assert data.consumed == 2


def test_range_follows_policy() -> None:
	assert DataStream.from_text("3000000000", int_policy=IntPolicy(64)).next_int() == 3000000000
	assert DataStream.from_text("-2147483648").next_int() == -2147483648
	big = "1" + "0" * 30
	assert DataStream.from_text(big, int_policy=IntPolicy(0)).next_int() == 10**30


@pytest.mark.parametrize("bits", [32, 64, 0])
def test_overlong_data_word_is_not_an_integer(bits: int) -> None:
	data = DataStream.from_text("7 " + "9" * 5000, int_policy=IntPolicy(bits))
	assert data.next_int() == 7
	with pytest.raises(ExecutionError, match="Input is not an integer."):
		data.next_int()
