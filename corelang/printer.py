# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Pretty-printer: walks a sealed tree and re-emits canonical Core source.

Statement sequences are indented four spaces per nesting level; parentheses
and brackets appear exactly where the grammar requires them. The printer only
reads the tree, never variable values.
"""

from __future__ import annotations

import io
import sys
from typing import TextIO

from .errors import InternalError
from .parser import ParsedProgram
from .syntax_tree import (
	CompOpAlt,
	CondAlt,
	Cursor,
	ExprAlt,
	IfAlt,
	NodeTag,
	OperandAlt,
	SeqAlt,
	StmtAlt,
	TermAlt,
)

INDENT = 4

COMP_OP_TEXT: dict[int, str] = {
	CompOpAlt.NE: "!=",
	CompOpAlt.EQ: "==",
	CompOpAlt.LT: "<",
	CompOpAlt.GT: ">",
	CompOpAlt.LE: "<=",
	CompOpAlt.GE: ">=",
}


class Printer:
	def __init__(self, out: TextIO | None = None, indent: int = INDENT) -> None:
		self.out = out or sys.stdout
		self.step = indent

	def print(self, program: ParsedProgram) -> None:
		"""Write the program followed by a blank separator line."""
		self.out.write(format_program(program, indent=self.step))
		self.out.write("\n")


def format_program(program: ParsedProgram, indent: int = INDENT) -> str:
	if not program.tree.sealed:
		raise InternalError("Cannot print an unfinished parse tree.", reason_code="unsealed-tree")
	buf = io.StringIO()
	_TreeWriter(Cursor(program.tree), buf, indent).program()
	return buf.getvalue()


class _TreeWriter:
	def __init__(self, cursor: Cursor, out: TextIO, step: int) -> None:
		self.c = cursor
		self.out = out
		self.step = step
		self.level = 0

	def _emit(self, text: str) -> None:
		self.out.write(text)

	def _pad(self) -> None:
		self.out.write(" " * self.level)

	def program(self) -> None:
		c = self.c
		c.expect(NodeTag.PROGRAM)
		self._emit("program\n")
		self.level = self.step
		with c.down(1):
			self.decl_seq()
		self._emit("begin\n")
		with c.down(2):
			self.stmt_seq()
		self._emit("end\n")

	def decl_seq(self) -> None:
		c = self.c
		c.expect(NodeTag.DECL_SEQ)
		with c.down(1):
			self._pad()
			self.decl()
		if c.current_alt() == SeqAlt.MORE:
			with c.down(2):
				self.decl_seq()

	def decl(self) -> None:
		self._emit("int ")
		with self.c.down(1):
			self.id_list()
		self._emit(";\n")

	def id_list(self) -> None:
		c = self.c
		c.expect(NodeTag.ID_LIST)
		with c.down(1):
			self._emit(c.name())
		if c.current_alt() == SeqAlt.MORE:
			self._emit(", ")
			with c.down(2):
				self.id_list()

	def stmt_seq(self) -> None:
		c = self.c
		c.expect(NodeTag.STMT_SEQ)
		with c.down(1):
			self._pad()
			self.stmt()
		if c.current_alt() == SeqAlt.MORE:
			with c.down(2):
				self.stmt_seq()

	def stmt(self) -> None:
		c = self.c
		c.expect(NodeTag.STMT)
		alt = c.current_alt()
		with c.down(1):
			if alt == StmtAlt.ASSIGN:
				self.assign()
			elif alt == StmtAlt.IF:
				self.if_stmt()
			elif alt == StmtAlt.WHILE:
				self.while_stmt()
			elif alt == StmtAlt.INPUT:
				self.io_stmt("read")
			else:
				self.io_stmt("write")

	def assign(self) -> None:
		c = self.c
		with c.down(1):
			self._emit(c.name())
		self._emit(" = ")
		with c.down(2):
			self.expr()
		self._emit(";\n")

	def if_stmt(self) -> None:
		c = self.c
		self._emit("if ")
		with c.down(1):
			self.cond()
		self._emit(" then\n")
		self._block(2)
		if c.current_alt() == IfAlt.THEN_ELSE:
			self._pad()
			self._emit("else\n")
			self._block(3)
		self._pad()
		self._emit("end;\n")

	def while_stmt(self) -> None:
		c = self.c
		self._emit("while ")
		with c.down(1):
			self.cond()
		self._emit(" loop\n")
		self._block(2)
		self._pad()
		self._emit("end;\n")

	def _block(self, slot: int) -> None:
		self.level += self.step
		with self.c.down(slot):
			self.stmt_seq()
		self.level -= self.step

	def io_stmt(self, keyword: str) -> None:
		self._emit(f"{keyword} ")
		with self.c.down(1):
			self.id_list()
		self._emit(";\n")

	def cond(self) -> None:
		c = self.c
		c.expect(NodeTag.COND)
		alt = c.current_alt()
		if alt == CondAlt.COMPARISON:
			with c.down(1):
				self.comparison()
		elif alt == CondAlt.NOT:
			self._emit("!")
			with c.down(1):
				self.cond()
		else:
			self._emit("[")
			with c.down(1):
				self.cond()
			self._emit(" && " if alt == CondAlt.AND else " || ")
			with c.down(2):
				self.cond()
			self._emit("]")

	def comparison(self) -> None:
		c = self.c
		self._emit("(")
		with c.down(1):
			self.operand()
		with c.down(2):
			self._emit(f" {COMP_OP_TEXT[c.current_alt()]} ")
		with c.down(3):
			self.operand()
		self._emit(")")

	def expr(self) -> None:
		c = self.c
		c.expect(NodeTag.EXPR)
		with c.down(1):
			self.term()
		alt = c.current_alt()
		if alt != ExprAlt.TERM:
			self._emit(" + " if alt == ExprAlt.ADD else " - ")
			with c.down(2):
				self.expr()

	def term(self) -> None:
		c = self.c
		with c.down(1):
			self.operand()
		if c.current_alt() == TermAlt.MUL:
			self._emit(" * ")
			with c.down(2):
				self.term()

	def operand(self) -> None:
		c = self.c
		c.expect(NodeTag.OPERAND)
		alt = c.current_alt()
		with c.down(1):
			if alt == OperandAlt.INT:
				self._emit(str(c.literal()))
			elif alt == OperandAlt.ID:
				self._emit(c.name())
			else:
				self._emit("(")
				self.expr()
				self._emit(")")


__all__ = ["Printer", "format_program", "INDENT"]
