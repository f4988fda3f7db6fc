# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Recursive-descent parser and static checker for Core.

One method per nonterminal, one token of lookahead. Each method is entered
with the cursor on a freshly attached node for its nonterminal; it tags the
node, attaches and fills children, records the alternative it took and
consumes the tokens its production ends with.

Declarations are parsed in full before any statement, so a single pass is
enough to check that every used identifier was declared and that no name is
declared twice.

`expr` and `term` are right-recursive: `10 - 3 - 2` parses as `10 - (3 - 2)`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, NoReturn

from .errors import InternalError, ParseError, SemanticError
from .integers import IntPolicy
from .lexer import SPELLING, Lexer, Token, TokenKind
from .symbols import SymbolTable
from .syntax_tree import (
	DEFAULT_NODE_CAPACITY,
	Alt,
	CompOpAlt,
	CondAlt,
	Cursor,
	ExprAlt,
	IfAlt,
	NodeTag,
	OperandAlt,
	SeqAlt,
	StmtAlt,
	SyntaxTree,
	TermAlt,
)

_STMT_START = frozenset(
	{TokenKind.IDENTIFIER, TokenKind.IF, TokenKind.WHILE, TokenKind.READ, TokenKind.WRITE}
)

_COMP_OPS: dict[TokenKind, CompOpAlt] = {
	TokenKind.NE: CompOpAlt.NE,
	TokenKind.EQ: CompOpAlt.EQ,
	TokenKind.LT: CompOpAlt.LT,
	TokenKind.GT: CompOpAlt.GT,
	TokenKind.LE: CompOpAlt.LE,
	TokenKind.GE: CompOpAlt.GE,
}


@dataclass(frozen=True)
class ParsedProgram:
	"""A sealed tree plus the names it declares."""

	tree: SyntaxTree
	symbols: SymbolTable


class Parser:
	def __init__(
		self,
		lexer: Lexer,
		*,
		tree: SyntaxTree | None = None,
		symbols: SymbolTable | None = None,
	) -> None:
		self._lexer = lexer
		self._tree = tree if tree is not None else SyntaxTree()
		self._symbols = symbols if symbols is not None else SymbolTable()
		self._cursor = Cursor(self._tree)
		self._stmt_handlers: dict[TokenKind, tuple[StmtAlt, Callable[[], None]]] = {
			TokenKind.IDENTIFIER: (StmtAlt.ASSIGN, self._parse_assign),
			TokenKind.IF: (StmtAlt.IF, self._parse_if),
			TokenKind.WHILE: (StmtAlt.WHILE, self._parse_while),
			TokenKind.READ: (StmtAlt.INPUT, self._parse_input),
			TokenKind.WRITE: (StmtAlt.OUTPUT, self._parse_output),
		}

	def parse(self) -> ParsedProgram:
		"""Parse a whole program; raises on the first error."""
		c = self._cursor
		tok = self._tok
		if tok.kind is not TokenKind.PROGRAM:
			self._fail(f"Expecting \"program\" at {tok}")
		c.set_span(tok.span)
		c.set_tag(NodeTag.PROGRAM)
		c.set_alt(Alt.ONLY)
		self._advance()

		self._attach(1)
		with c.down(1):
			self._parse_decl_seq()
		self._expect(TokenKind.BEGIN)
		self._attach(2)
		with c.down(2):
			self._parse_stmt_seq()
		self._expect(TokenKind.END)
		if self._tok.kind is not TokenKind.EOF:
			self._fail("No tokens allowed after program end")

		self._tree.seal()
		return ParsedProgram(tree=self._tree, symbols=self._symbols)

	# -- helpers ---------------------------------------------------------

	@property
	def _tok(self) -> Token:
		return self._lexer.current()

	def _advance(self) -> None:
		self._lexer.advance()

	def _attach(self, slot: int) -> int:
		return self._cursor.attach_child(slot, self._tok.span)

	def _fail(self, message: str) -> NoReturn:
		raise ParseError(message, span=self._tok.span, reason_code="unexpected-token")

	def _expect(self, kind: TokenKind) -> None:
		if self._tok.kind is not kind:
			self._fail(f"Expecting \"{SPELLING[kind]}\" at {self._tok}")
		self._advance()

	def _bind_identifier(self, declaring: bool) -> None:
		"""Fill the identifier leaf under the cursor from the current token."""
		tok = self._tok
		name = tok.name
		if name is None:
			raise InternalError(f"Expecting an identifier token, found {tok}.", span=tok.span, reason_code="bad-token")
		if declaring:
			if not self._symbols.declare(name):
				raise SemanticError(f"Duplicate variable {name}", span=tok.span, reason_code="duplicate-declaration")
		elif not self._symbols.resolve(name):
			raise SemanticError(f"Undeclared variable {name}", span=tok.span, reason_code="undeclared-identifier")
		c = self._cursor
		c.set_tag(NodeTag.ID)
		c.set_alt(Alt.ONLY)
		c.set_name(name)

	# -- declarations ----------------------------------------------------

	def _parse_decl_seq(self) -> None:
		c = self._cursor
		c.set_tag(NodeTag.DECL_SEQ)
		self._attach(1)
		with c.down(1):
			self._parse_decl()
		if self._tok.kind is TokenKind.INT:
			self._attach(2)
			with c.down(2):
				self._parse_decl_seq()
			c.set_alt(SeqAlt.MORE)
		else:
			c.set_alt(SeqAlt.ONE)

	def _parse_decl(self) -> None:
		if self._tok.kind is not TokenKind.INT:
			self._fail(f"Expecting at least one declaration at {self._tok}")
		c = self._cursor
		c.set_tag(NodeTag.DECL)
		c.set_alt(Alt.ONLY)
		self._advance()
		self._attach(1)
		with c.down(1):
			self._parse_id_list(declaring=True)
		self._expect(TokenKind.SEMICOLON)

	def _parse_id_list(self, declaring: bool) -> None:
		if self._tok.kind is not TokenKind.IDENTIFIER:
			self._fail(f"Expecting an identifier at {self._tok}")
		c = self._cursor
		c.set_tag(NodeTag.ID_LIST)
		self._attach(1)
		with c.down(1):
			self._bind_identifier(declaring)
		self._advance()

		if self._tok.kind is TokenKind.COMMA:
			self._advance()
			self._attach(2)
			with c.down(2):
				self._parse_id_list(declaring)
			c.set_alt(SeqAlt.MORE)
		else:
			c.set_alt(SeqAlt.ONE)

	# -- statements ------------------------------------------------------

	def _parse_stmt_seq(self) -> None:
		c = self._cursor
		c.set_tag(NodeTag.STMT_SEQ)
		self._attach(1)
		with c.down(1):
			self._parse_stmt()
		if self._tok.kind in _STMT_START:
			self._attach(2)
			with c.down(2):
				self._parse_stmt_seq()
			c.set_alt(SeqAlt.MORE)
		else:
			c.set_alt(SeqAlt.ONE)

	def _parse_stmt(self) -> None:
		c = self._cursor
		c.set_tag(NodeTag.STMT)
		handler = self._stmt_handlers.get(self._tok.kind)
		if handler is None:
			self._fail(f"Expecting at least one statement at {self._tok}")
		alt, parse_fn = handler
		self._attach(1)
		with c.down(1):
			parse_fn()
		c.set_alt(alt)

	def _parse_assign(self) -> None:
		if self._tok.kind is not TokenKind.IDENTIFIER:
			self._fail(f"Expecting an identifier at {self._tok}")
		c = self._cursor
		c.set_tag(NodeTag.ASSIGN)
		c.set_alt(Alt.ONLY)
		self._attach(1)
		with c.down(1):
			self._bind_identifier(declaring=False)
		self._advance()
		self._expect(TokenKind.ASSIGN)
		self._attach(2)
		with c.down(2):
			self._parse_expr()
		self._expect(TokenKind.SEMICOLON)

	def _parse_if(self) -> None:
		c = self._cursor
		self._expect(TokenKind.IF)
		c.set_tag(NodeTag.IF)
		self._attach(1)
		with c.down(1):
			self._parse_cond()
		self._expect(TokenKind.THEN)
		self._attach(2)
		with c.down(2):
			self._parse_stmt_seq()

		if self._tok.kind is TokenKind.ELSE:
			self._advance()
			self._attach(3)
			with c.down(3):
				self._parse_stmt_seq()
			c.set_alt(IfAlt.THEN_ELSE)
		elif self._tok.kind is TokenKind.END:
			c.set_alt(IfAlt.THEN)
		else:
			self._fail(f"Expecting \"else\" or \"end\" at {self._tok}")
		self._expect(TokenKind.END)
		self._expect(TokenKind.SEMICOLON)

	def _parse_while(self) -> None:
		c = self._cursor
		self._expect(TokenKind.WHILE)
		c.set_tag(NodeTag.WHILE)
		c.set_alt(Alt.ONLY)
		self._attach(1)
		with c.down(1):
			self._parse_cond()
		self._expect(TokenKind.LOOP)
		self._attach(2)
		with c.down(2):
			self._parse_stmt_seq()
		self._expect(TokenKind.END)
		self._expect(TokenKind.SEMICOLON)

	def _parse_input(self) -> None:
		self._parse_io(TokenKind.READ, NodeTag.INPUT)

	def _parse_output(self) -> None:
		self._parse_io(TokenKind.WRITE, NodeTag.OUTPUT)

	def _parse_io(self, keyword: TokenKind, tag: NodeTag) -> None:
		c = self._cursor
		self._expect(keyword)
		c.set_tag(tag)
		c.set_alt(Alt.ONLY)
		self._attach(1)
		with c.down(1):
			self._parse_id_list(declaring=False)
		self._expect(TokenKind.SEMICOLON)

	# -- conditions ------------------------------------------------------

	def _parse_cond(self) -> None:
		c = self._cursor
		c.set_tag(NodeTag.COND)
		kind = self._tok.kind
		if kind is TokenKind.NOT:
			self._advance()
			self._attach(1)
			with c.down(1):
				self._parse_cond()
			c.set_alt(CondAlt.NOT)
		elif kind is TokenKind.LBRACKET:
			self._advance()
			self._attach(1)
			with c.down(1):
				self._parse_cond()
			if self._tok.kind is TokenKind.AND:
				c.set_alt(CondAlt.AND)
			elif self._tok.kind is TokenKind.OR:
				c.set_alt(CondAlt.OR)
			else:
				self._fail(f"Expecting \"&&\" or \"||\" at {self._tok}")
			self._advance()
			self._attach(2)
			with c.down(2):
				self._parse_cond()
			self._expect(TokenKind.RBRACKET)
		else:
			self._attach(1)
			with c.down(1):
				self._parse_comparison()
			c.set_alt(CondAlt.COMPARISON)

	def _parse_comparison(self) -> None:
		if self._tok.kind is not TokenKind.LPAREN:
			self._fail(f"Expecting a comparison condition at {self._tok}")
		c = self._cursor
		c.set_tag(NodeTag.COMPARISON)
		c.set_alt(Alt.ONLY)
		self._advance()
		self._attach(1)
		with c.down(1):
			self._parse_operand()
		self._attach(2)
		with c.down(2):
			self._parse_comp_op()
		self._attach(3)
		with c.down(3):
			self._parse_operand()
		self._expect(TokenKind.RPAREN)

	def _parse_comp_op(self) -> None:
		c = self._cursor
		c.set_tag(NodeTag.COMP_OP)
		alt = _COMP_OPS.get(self._tok.kind)
		if alt is None:
			self._fail(f"Expecting a comparison operator at {self._tok}")
		c.set_alt(alt)
		self._advance()

	# -- expressions -----------------------------------------------------

	def _parse_expr(self) -> None:
		c = self._cursor
		c.set_tag(NodeTag.EXPR)
		self._attach(1)
		with c.down(1):
			self._parse_term()
		kind = self._tok.kind
		if kind in (TokenKind.PLUS, TokenKind.MINUS):
			self._advance()
			self._attach(2)
			with c.down(2):
				self._parse_expr()
			c.set_alt(ExprAlt.ADD if kind is TokenKind.PLUS else ExprAlt.SUB)
		else:
			c.set_alt(ExprAlt.TERM)

	def _parse_term(self) -> None:
		c = self._cursor
		c.set_tag(NodeTag.TERM)
		self._attach(1)
		with c.down(1):
			self._parse_operand()
		if self._tok.kind is TokenKind.STAR:
			self._advance()
			self._attach(2)
			with c.down(2):
				self._parse_term()
			c.set_alt(TermAlt.MUL)
		else:
			c.set_alt(TermAlt.OPERAND)

	def _parse_operand(self) -> None:
		c = self._cursor
		c.set_tag(NodeTag.OPERAND)
		tok = self._tok
		if tok.kind is TokenKind.INTEGER:
			self._attach(1)
			with c.down(1):
				c.set_tag(NodeTag.INT)
				c.set_alt(Alt.ONLY)
				c.set_literal(self._lexer.literal_value())
			c.set_alt(OperandAlt.INT)
			self._advance()
		elif tok.kind is TokenKind.IDENTIFIER:
			self._attach(1)
			with c.down(1):
				self._bind_identifier(declaring=False)
			c.set_alt(OperandAlt.ID)
			self._advance()
		elif tok.kind is TokenKind.LPAREN:
			self._advance()
			self._attach(1)
			with c.down(1):
				self._parse_expr()
			c.set_alt(OperandAlt.PAREN)
			self._expect(TokenKind.RPAREN)
		else:
			self._fail(f"Expecting an integer, an identifier, or an expression at {tok}")


def parse_program(source: str, *, file: str | None = None, capacity: int = DEFAULT_NODE_CAPACITY, int_policy: IntPolicy | None = None) -> ParsedProgram:
	"""Parse Core source text into a sealed tree."""
	lexer = Lexer.from_text(source, file=file, int_policy=int_policy)
	return Parser(lexer, tree=SyntaxTree(capacity)).parse()


__all__ = ["Parser", "ParsedProgram", "parse_program"]
