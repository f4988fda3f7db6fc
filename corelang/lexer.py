# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Core lexer.

Pulls characters from a text stream on demand and produces one token at a
time. The parser only ever sees `current()` and calls `advance()` once it has
consumed that token; there is no buffering beyond the single lookahead
character needed to tell `<` from `<=`.

Classification of the next run of characters, in priority order:

- lowercase letters   -> keyword (must be one of KEYWORDS)
- ASCII punctuation   -> symbol, two-character symbols preferred
- digits              -> integer literal
- uppercase letter    -> identifier: uppercase letters followed by digits

Keywords, integers and identifiers must be followed by whitespace, a
punctuation character or end of input.
"""

from __future__ import annotations

import io
import re
import string
from dataclasses import dataclass, field
from enum import IntEnum
from typing import TextIO

from .diagnostics import Span
from .errors import InternalError, LexError
from .integers import IntPolicy


class TokenKind(IntEnum):
	"""Token kinds; the numeric values are the codes printed by `coretok`."""

	PROGRAM = 1
	BEGIN = 2
	END = 3
	INT = 4
	IF = 5
	THEN = 6
	ELSE = 7
	WHILE = 8
	LOOP = 9
	READ = 10
	WRITE = 11
	SEMICOLON = 12
	COMMA = 13
	ASSIGN = 14
	NOT = 15
	LBRACKET = 16
	RBRACKET = 17
	AND = 18
	OR = 19
	LPAREN = 20
	RPAREN = 21
	PLUS = 22
	MINUS = 23
	STAR = 24
	NE = 25
	EQ = 26
	LT = 27
	GT = 28
	LE = 29
	GE = 30
	INTEGER = 31
	IDENTIFIER = 32
	EOF = 33


KEYWORDS: dict[str, TokenKind] = {
	"program": TokenKind.PROGRAM,
	"begin": TokenKind.BEGIN,
	"end": TokenKind.END,
	"int": TokenKind.INT,
	"if": TokenKind.IF,
	"then": TokenKind.THEN,
	"else": TokenKind.ELSE,
	"while": TokenKind.WHILE,
	"loop": TokenKind.LOOP,
	"read": TokenKind.READ,
	"write": TokenKind.WRITE,
}

SYMBOLS: dict[str, TokenKind] = {
	";": TokenKind.SEMICOLON,
	",": TokenKind.COMMA,
	"=": TokenKind.ASSIGN,
	"!": TokenKind.NOT,
	"[": TokenKind.LBRACKET,
	"]": TokenKind.RBRACKET,
	"&&": TokenKind.AND,
	"||": TokenKind.OR,
	"(": TokenKind.LPAREN,
	")": TokenKind.RPAREN,
	"+": TokenKind.PLUS,
	"-": TokenKind.MINUS,
	"*": TokenKind.STAR,
	"!=": TokenKind.NE,
	"==": TokenKind.EQ,
	"<": TokenKind.LT,
	">": TokenKind.GT,
	"<=": TokenKind.LE,
	">=": TokenKind.GE,
}

# Spelling of every fixed token, used in parser messages.
SPELLING: dict[TokenKind, str] = {
	**{kind: text for text, kind in KEYWORDS.items()},
	**{kind: text for text, kind in SYMBOLS.items()},
}

_LOWER = frozenset(string.ascii_lowercase)
_UPPER = frozenset(string.ascii_uppercase)
_DIGITS = frozenset(string.digits)
_PUNCT = frozenset(string.punctuation)
_WHITESPACE = frozenset(string.whitespace)
_ID_CHARS = _UPPER | _DIGITS
_ID_RE = re.compile(r"[A-Z]+[0-9]*")


@dataclass(frozen=True)
class Token:
	kind: TokenKind
	text: str
	value: int | None = None
	name: str | None = None
	span: Span = field(default_factory=Span)

	def __str__(self) -> str:
		return self.text


class Lexer:
	"""
	One-token-lookahead tokenizer over a text stream.

	The first token is produced by the constructor, so a lexical error at the
	very start of the input surfaces as soon as the lexer is built.
	"""

	def __init__(self, stream: TextIO, *, file: str | None = None, int_policy: IntPolicy | None = None) -> None:
		self._stream = stream
		self._file = file
		self._int_policy = int_policy or IntPolicy()
		self._line = 1
		self._column = 0
		self._ch = ""
		self._ch_span = Span()
		self._next_char()
		self._token = self._produce()

	@classmethod
	def from_text(cls, text: str, **kwargs) -> "Lexer":
		return cls(io.StringIO(text), **kwargs)

	def current(self) -> Token:
		return self._token

	def advance(self) -> None:
		if self._token.kind is not TokenKind.EOF:
			self._token = self._produce()

	def literal_value(self) -> int:
		if self._token.kind is TokenKind.INTEGER:
			if self._token.value is None:
				raise InternalError("Integer token without a value.", span=self._token.span, reason_code="bad-token")
			return self._token.value
		return -1

	def identifier_name(self) -> str | None:
		if self._token.kind is TokenKind.IDENTIFIER:
			return self._token.name
		return None

	# -- character level -------------------------------------------------

	def _next_char(self) -> None:
		if self._ch == "\n":
			self._line += 1
			self._column = 0
		self._ch = self._stream.read(1)
		if self._ch:
			self._column += 1
			self._ch_span = Span(file=self._file, line=self._line, column=self._column)

	def _take_run(self, allowed: frozenset[str]) -> str:
		buf: list[str] = []
		while self._ch and self._ch in allowed:
			buf.append(self._ch)
			self._next_char()
		return "".join(buf)

	# -- token level -----------------------------------------------------

	def _produce(self) -> Token:
		while self._ch and self._ch in _WHITESPACE:
			self._next_char()
		if not self._ch:
			return Token(TokenKind.EOF, "EOF", span=Span(file=self._file, line=self._line, column=self._column + 1))

		span = self._ch_span
		ch = self._ch
		if ch in _LOWER:
			token = self._scan_keyword(span)
		elif ch in _PUNCT:
			return self._scan_symbol(span)
		elif ch in _DIGITS:
			token = self._scan_integer(span)
		elif ch in _UPPER:
			token = self._scan_identifier(span)
		else:
			raise LexError(f"Invalid character: {ch}", span=span, reason_code="invalid-character")
		self._require_separator(token)
		return token

	def _require_separator(self, token: Token) -> None:
		if self._ch and self._ch not in _WHITESPACE and self._ch not in _PUNCT:
			raise LexError(
				f"Whitespace required after {token.text} token.",
				span=self._ch_span,
				reason_code="missing-whitespace",
			)

	def _scan_keyword(self, span: Span) -> Token:
		word = self._take_run(_LOWER)
		kind = KEYWORDS.get(word)
		if kind is None:
			raise LexError(f"Invalid token: {word}", span=span, reason_code="invalid-token")
		return Token(kind, word, span=span)

	def _scan_symbol(self, span: Span) -> Token:
		first = self._ch
		self._next_char()
		if self._ch and self._ch in _PUNCT and first + self._ch in SYMBOLS:
			pair = first + self._ch
			self._next_char()
			return Token(SYMBOLS[pair], pair, span=span)
		kind = SYMBOLS.get(first)
		if kind is None:
			raise LexError(f"Invalid token: {first}", span=span, reason_code="invalid-token")
		return Token(kind, first, span=span)

	def _scan_integer(self, span: Span) -> Token:
		digits = self._take_run(_DIGITS)
		value = self._int_policy.parse(digits)
		if value is None:
			shown = digits if len(digits) <= 40 else f"{digits[:20]}... ({len(digits)} digits)"
			raise LexError(f"Integer literal out of range: {shown}", span=span, reason_code="int-out-of-range")
		return Token(TokenKind.INTEGER, digits, value=value, span=span)

	def _scan_identifier(self, span: Span) -> Token:
		run = self._take_run(_ID_CHARS)
		if not _ID_RE.fullmatch(run):
			raise LexError(f"Invalid token: {run}", span=span, reason_code="invalid-token")
		return Token(TokenKind.IDENTIFIER, run, name=run, span=span)


__all__ = ["TokenKind", "Token", "Lexer", "KEYWORDS", "SYMBOLS", "SPELLING"]
