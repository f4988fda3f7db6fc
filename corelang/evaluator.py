# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Tree-walking evaluator for Core.

Mirrors the parser: one method per nonterminal, each entered with the cursor
on the node it evaluates. Variable values live in an `Environment` built from
the parser's SymbolTable; `read` pulls integers from a DataStream and `write`
prints `NAME = value` lines.

Both operands of `&&` and `||` are always evaluated before they are combined.
Arithmetic wraps to the configured integer width.
"""

from __future__ import annotations

import operator
import sys
from typing import Callable, TextIO

from .data_stream import DataStream
from .errors import ExecutionError, InternalError
from .integers import IntPolicy
from .parser import ParsedProgram
from .symbols import Environment
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

COMPARATORS: dict[int, Callable[[int, int], bool]] = {
	CompOpAlt.NE: operator.ne,
	CompOpAlt.EQ: operator.eq,
	CompOpAlt.LT: operator.lt,
	CompOpAlt.GT: operator.gt,
	CompOpAlt.LE: operator.le,
	CompOpAlt.GE: operator.ge,
}


class Evaluator:
	def __init__(
		self,
		program: ParsedProgram,
		data: DataStream,
		out: TextIO | None = None,
		*,
		env: Environment | None = None,
		int_policy: IntPolicy | None = None,
	) -> None:
		if not program.tree.sealed:
			raise InternalError("Cannot execute an unfinished parse tree.", reason_code="unsealed-tree")
		self.program = program
		self.data = data
		self.out = out or sys.stdout
		self.env = env if env is not None else Environment(program.symbols)
		self.int_policy = int_policy or IntPolicy()
		self._cursor = Cursor(program.tree)

	def execute(self) -> Environment:
		"""Run the statement sequence; declarations need no execution."""
		c = self._cursor
		c.expect(NodeTag.PROGRAM)
		with c.down(2):
			self._exec_stmt_seq()
		return self.env

	# -- statements ------------------------------------------------------

	def _exec_stmt_seq(self) -> None:
		c = self._cursor
		c.expect(NodeTag.STMT_SEQ)
		with c.down(1):
			self._exec_stmt()
		if c.current_alt() == SeqAlt.MORE:
			with c.down(2):
				self._exec_stmt_seq()

	def _exec_stmt(self) -> None:
		c = self._cursor
		c.expect(NodeTag.STMT)
		alt = c.current_alt()
		with c.down(1):
			if alt == StmtAlt.ASSIGN:
				self._exec_assign()
			elif alt == StmtAlt.IF:
				self._exec_if()
			elif alt == StmtAlt.WHILE:
				self._exec_while()
			elif alt == StmtAlt.INPUT:
				self._exec_input()
			else:
				self._exec_output()

	def _exec_assign(self) -> None:
		c = self._cursor
		with c.down(2):
			value = self._eval_expr()
		with c.down(1):
			self.env.set_value_at(c, value)

	def _exec_if(self) -> None:
		c = self._cursor
		with c.down(1):
			taken = self._eval_cond()
		if taken:
			with c.down(2):
				self._exec_stmt_seq()
		elif c.current_alt() == IfAlt.THEN_ELSE:
			with c.down(3):
				self._exec_stmt_seq()

	def _exec_while(self) -> None:
		c = self._cursor
		with c.down(1):
			running = self._eval_cond()
		while running:
			with c.down(2):
				self._exec_stmt_seq()
			with c.down(1):
				running = self._eval_cond()

	def _exec_input(self) -> None:
		with self._cursor.down(1):
			names = self._id_list()
		for name in names:
			self.env.set_value(name, self.data.next_int())

	def _exec_output(self) -> None:
		c = self._cursor
		span = c.node.span
		with c.down(1):
			names = self._id_list()
		for name in names:
			value = self.env.get_value(name)
			if value is None:
				raise ExecutionError(f"Uninitialized variable {name}", span=span, reason_code="uninitialized")
			print(f"{name} = {value}", file=self.out)

	def _id_list(self) -> list[str]:
		c = self._cursor
		names: list[str] = []
		c.expect(NodeTag.ID_LIST)
		with c.down(1):
			names.append(c.name())
		if c.current_alt() == SeqAlt.MORE:
			with c.down(2):
				names.extend(self._id_list())
		return names

	# -- conditions ------------------------------------------------------

	def _eval_cond(self) -> bool:
		c = self._cursor
		c.expect(NodeTag.COND)
		alt = c.current_alt()
		if alt == CondAlt.COMPARISON:
			with c.down(1):
				return self._eval_comparison()
		if alt == CondAlt.NOT:
			with c.down(1):
				return not self._eval_cond()
		with c.down(1):
			left = self._eval_cond()
		with c.down(2):
			right = self._eval_cond()
		if alt == CondAlt.AND:
			return left and right
		return left or right

	def _eval_comparison(self) -> bool:
		c = self._cursor
		c.expect(NodeTag.COMPARISON)
		with c.down(1):
			lhs = self._eval_operand()
		with c.down(2):
			compare = COMPARATORS[c.current_alt()]
		with c.down(3):
			rhs = self._eval_operand()
		return compare(lhs, rhs)

	# -- expressions -----------------------------------------------------

	def _eval_expr(self) -> int:
		c = self._cursor
		c.expect(NodeTag.EXPR)
		with c.down(1):
			value = self._eval_term()
		alt = c.current_alt()
		if alt == ExprAlt.TERM:
			return value
		with c.down(2):
			rest = self._eval_expr()
		if alt == ExprAlt.ADD:
			return self.int_policy.wrap(value + rest)
		return self.int_policy.wrap(value - rest)

	def _eval_term(self) -> int:
		c = self._cursor
		c.expect(NodeTag.TERM)
		with c.down(1):
			value = self._eval_operand()
		if c.current_alt() == TermAlt.MUL:
			with c.down(2):
				value = self.int_policy.wrap(value * self._eval_term())
		return value

	def _eval_operand(self) -> int:
		c = self._cursor
		c.expect(NodeTag.OPERAND)
		alt = c.current_alt()
		with c.down(1):
			if alt == OperandAlt.INT:
				return c.literal()
			if alt == OperandAlt.ID:
				name = c.name()
				value = self.env.get_value(name)
				if value is None:
					raise ExecutionError(f"Uninitialized variable {name}", span=c.node.span, reason_code="uninitialized")
				return value
			return self._eval_expr()


def run_program(program: ParsedProgram, data_text: str = "", out: TextIO | None = None, **kwargs) -> Environment:
	"""Execute `program` against an in-memory data stream."""
	int_policy = kwargs.get("int_policy")
	data = DataStream.from_text(data_text, int_policy=int_policy)
	return Evaluator(program, data, out, **kwargs).execute()


__all__ = ["Evaluator", "COMPARATORS", "run_program"]
