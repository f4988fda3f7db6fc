# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

import pytest

from corelang.lexer import Lexer, Token, TokenKind


def _tokens(text: str) -> list[Token]:
	lexer = Lexer.from_text(text)
	out = [lexer.current()]
	while out[-1].kind is not TokenKind.EOF:
		lexer.advance()
		out.append(lexer.current())
	return out


def _kinds(text: str) -> list[TokenKind]:
	return [tok.kind for tok in _tokens(text)]


def test_program_header_tokens() -> None:
	assert _kinds("program int A; begin") == [
		TokenKind.PROGRAM,
		TokenKind.INT,
		TokenKind.IDENTIFIER,
		TokenKind.SEMICOLON,
		TokenKind.BEGIN,
		TokenKind.EOF,
	]


def test_all_keywords() -> None:
	text = "program begin end int if then else while loop read write"
	assert [int(k) for k in _kinds(text)] == list(range(1, 12)) + [33]


@pytest.mark.parametrize(
	"text, kind",
	[
		("!=", TokenKind.NE),
		("==", TokenKind.EQ),
		("<=", TokenKind.LE),
		(">=", TokenKind.GE),
		("&&", TokenKind.AND),
		("||", TokenKind.OR),
		("<", TokenKind.LT),
		(">", TokenKind.GT),
		("=", TokenKind.ASSIGN),
		("!", TokenKind.NOT),
	],
)
def test_symbols_prefer_two_characters(text: str, kind: TokenKind) -> None:
	toks = _tokens(text)
	assert toks[0].kind is kind
	assert toks[0].text == text
	assert toks[1].kind is TokenKind.EOF


def test_adjacent_symbols_split_when_pair_is_unknown() -> None:
	assert _kinds("!([") == [TokenKind.NOT, TokenKind.LPAREN, TokenKind.LBRACKET, TokenKind.EOF]
	assert _kinds(");") == [TokenKind.RPAREN, TokenKind.SEMICOLON, TokenKind.EOF]


def test_symbols_need_no_surrounding_whitespace() -> None:
	assert _kinds("A<=B1;") == [
		TokenKind.IDENTIFIER,
		TokenKind.LE,
		TokenKind.IDENTIFIER,
		TokenKind.SEMICOLON,
		TokenKind.EOF,
	]


def test_integer_and_identifier_payloads() -> None:
	lexer = Lexer.from_text("42 XY7")
	assert lexer.current().kind is TokenKind.INTEGER
	assert lexer.literal_value() == 42
	assert lexer.identifier_name() is None
	lexer.advance()
	assert lexer.current().kind is TokenKind.IDENTIFIER
	assert lexer.identifier_name() == "XY7"
	assert lexer.literal_value() == -1


def test_eof_is_repeatable() -> None:
	lexer = Lexer.from_text("end")
	lexer.advance()
	assert lexer.current().kind is TokenKind.EOF
	lexer.advance()
	lexer.advance()
	assert lexer.current().kind is TokenKind.EOF
	assert lexer.current().text == "EOF"


def test_empty_input_is_just_eof() -> None:
	assert _kinds("") == [TokenKind.EOF]
	assert _kinds(" \t\r\n\x0b\x0c") == [TokenKind.EOF]


def test_token_spans_track_lines_and_columns() -> None:
	toks = _tokens("program\n  int A;\n")
	assert (toks[0].span.line, toks[0].span.column) == (1, 1)
	assert (toks[1].span.line, toks[1].span.column) == (2, 3)
	assert (toks[2].span.line, toks[2].span.column) == (2, 7)
	assert (toks[3].span.line, toks[3].span.column) == (2, 8)


def test_span_carries_file_name() -> None:
	lexer = Lexer.from_text("program", file="prog.core")
	assert lexer.current().span.file == "prog.core"


def test_leading_zeros_are_plain_integers() -> None:
	toks = _tokens("007")
	assert toks[0].value == 7
	assert toks[0].text == "007"
