# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Positional parse tree shared by the parser, printer and evaluator.

The tree is an append-only arena of `SyntaxNode`s addressed by integer ids
(the root is id 0). Each node records its nonterminal tag, the alternative
(production) that built it, up to three child slots and, for leaves, an
integer literal or identifier name.

Passes never hold parent pointers. They navigate with a `Cursor`: the current
node id plus a stack of ancestor ids. The parser uses a cursor to populate the
tree; the printer and evaluator use their own cursors to read it.

Slot occupancy is a function of `(tag, alt)` only; `PRODUCTION_SLOTS` is the
single table describing it, and `SyntaxTree.seal()` checks every node against
it once parsing has finished. A sealed tree rejects further writes.
"""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Iterator, Optional

from .diagnostics import Span
from .errors import InternalError, ResourceError

DEFAULT_NODE_CAPACITY = 1000
SLOT_COUNT = 3


class NodeTag(Enum):
	PROGRAM = "program"
	DECL_SEQ = "decl-seq"
	STMT_SEQ = "stmt-seq"
	DECL = "decl"
	ID_LIST = "id-list"
	STMT = "stmt"
	ASSIGN = "assign"
	IF = "if"
	WHILE = "while"
	INPUT = "input"
	OUTPUT = "output"
	COND = "cond"
	COMPARISON = "comparison"
	EXPR = "expr"
	TERM = "term"
	OPERAND = "operand"
	COMP_OP = "comp-op"
	# Leaves.
	INT = "integer-literal"
	ID = "identifier"


class Alt(IntEnum):
	"""Alternative of a nonterminal with a single production."""

	ONLY = 1


class SeqAlt(IntEnum):
	"""decl-seq, stmt-seq and id-list: one item, or one item then the rest."""

	ONE = 1
	MORE = 2


class StmtAlt(IntEnum):
	ASSIGN = 1
	IF = 2
	WHILE = 3
	INPUT = 4
	OUTPUT = 5


class IfAlt(IntEnum):
	THEN = 1
	THEN_ELSE = 2


class CondAlt(IntEnum):
	COMPARISON = 1
	NOT = 2
	AND = 3
	OR = 4


class ExprAlt(IntEnum):
	TERM = 1
	ADD = 2
	SUB = 3


class TermAlt(IntEnum):
	OPERAND = 1
	MUL = 2


class OperandAlt(IntEnum):
	INT = 1
	ID = 2
	PAREN = 3


class CompOpAlt(IntEnum):
	NE = 1
	EQ = 2
	LT = 3
	GT = 4
	LE = 5
	GE = 6


# Number of occupied child slots (always a prefix: 1, 1-2 or 1-3) for every
# legal (tag, alternative) pair. Anything missing from the table is illegal.
PRODUCTION_SLOTS: dict[tuple[NodeTag, int], int] = {
	(NodeTag.PROGRAM, Alt.ONLY): 2,
	(NodeTag.DECL_SEQ, SeqAlt.ONE): 1,
	(NodeTag.DECL_SEQ, SeqAlt.MORE): 2,
	(NodeTag.STMT_SEQ, SeqAlt.ONE): 1,
	(NodeTag.STMT_SEQ, SeqAlt.MORE): 2,
	(NodeTag.DECL, Alt.ONLY): 1,
	(NodeTag.ID_LIST, SeqAlt.ONE): 1,
	(NodeTag.ID_LIST, SeqAlt.MORE): 2,
	**{(NodeTag.STMT, alt): 1 for alt in StmtAlt},
	(NodeTag.ASSIGN, Alt.ONLY): 2,
	(NodeTag.IF, IfAlt.THEN): 2,
	(NodeTag.IF, IfAlt.THEN_ELSE): 3,
	(NodeTag.WHILE, Alt.ONLY): 2,
	(NodeTag.INPUT, Alt.ONLY): 1,
	(NodeTag.OUTPUT, Alt.ONLY): 1,
	(NodeTag.COND, CondAlt.COMPARISON): 1,
	(NodeTag.COND, CondAlt.NOT): 1,
	(NodeTag.COND, CondAlt.AND): 2,
	(NodeTag.COND, CondAlt.OR): 2,
	(NodeTag.COMPARISON, Alt.ONLY): 3,
	(NodeTag.EXPR, ExprAlt.TERM): 1,
	(NodeTag.EXPR, ExprAlt.ADD): 2,
	(NodeTag.EXPR, ExprAlt.SUB): 2,
	(NodeTag.TERM, TermAlt.OPERAND): 1,
	(NodeTag.TERM, TermAlt.MUL): 2,
	**{(NodeTag.OPERAND, alt): 1 for alt in OperandAlt},
	**{(NodeTag.COMP_OP, alt): 0 for alt in CompOpAlt},
	(NodeTag.INT, Alt.ONLY): 0,
	(NodeTag.ID, Alt.ONLY): 0,
}


@dataclass
class SyntaxNode:
	tag: Optional[NodeTag] = None
	alt: int = 0
	children: list[Optional[int]] = field(default_factory=lambda: [None] * SLOT_COUNT)
	literal: Optional[int] = None
	name: Optional[str] = None
	span: Span = field(default_factory=Span)


class SyntaxTree:
	"""Bounded, append-only arena of syntax nodes."""

	ROOT = 0

	def __init__(self, capacity: int = DEFAULT_NODE_CAPACITY) -> None:
		if capacity < 1:
			raise ValueError("tree capacity must be at least 1")
		self.capacity = capacity
		self._nodes: list[SyntaxNode] = [SyntaxNode()]
		self._sealed = False

	def __len__(self) -> int:
		return len(self._nodes)

	@property
	def sealed(self) -> bool:
		return self._sealed

	def node(self, node_id: int) -> SyntaxNode:
		return self._nodes[node_id]

	def new_node(self, span: Span | None = None) -> int:
		self._check_writable()
		if len(self._nodes) >= self.capacity:
			raise ResourceError("Parse Tree is out of memory.", span=span or Span(), reason_code="tree-capacity")
		self._nodes.append(SyntaxNode(span=span or Span()))
		return len(self._nodes) - 1

	def cursor(self) -> "Cursor":
		return Cursor(self)

	def seal(self) -> None:
		"""Verify every node against PRODUCTION_SLOTS and freeze the tree."""
		for node_id, node in enumerate(self._nodes):
			if node.tag is None:
				raise InternalError(f"node {node_id} was never tagged", span=node.span, reason_code="bad-shape")
			expected = PRODUCTION_SLOTS.get((node.tag, node.alt))
			if expected is None:
				raise InternalError(
					f"node {node_id}: {node.tag.value} has no alternative {node.alt}",
					span=node.span,
					reason_code="bad-shape",
				)
			occupied = [slot is not None for slot in node.children]
			if occupied != [i < expected for i in range(SLOT_COUNT)]:
				raise InternalError(
					f"node {node_id}: {node.tag.value}/{node.alt} has slots {occupied}",
					span=node.span,
					reason_code="bad-shape",
				)
			if node.tag is NodeTag.INT and node.literal is None:
				raise InternalError(f"node {node_id}: integer leaf without a value", reason_code="bad-shape")
			if node.tag is NodeTag.ID and node.name is None:
				raise InternalError(f"node {node_id}: identifier leaf without a name", reason_code="bad-shape")
		self._sealed = True

	def _check_writable(self) -> None:
		if self._sealed:
			raise InternalError("Parse tree is read-only once sealed.", reason_code="sealed-tree")


class Cursor:
	"""Current node plus ancestor stack over one SyntaxTree."""

	def __init__(self, tree: SyntaxTree) -> None:
		self.tree = tree
		self.current = SyntaxTree.ROOT
		self._ancestors: list[int] = []

	@property
	def depth(self) -> int:
		return len(self._ancestors)

	@property
	def node(self) -> SyntaxNode:
		return self.tree.node(self.current)

	# -- writes (parser) -------------------------------------------------

	def set_tag(self, tag: NodeTag) -> None:
		self.tree._check_writable()
		self.node.tag = tag

	def set_alt(self, alt: int) -> None:
		self.tree._check_writable()
		self.node.alt = int(alt)

	def attach_child(self, slot: int, span: Span | None = None) -> int:
		"""Allocate a node and record it in `slot` of the current node."""
		self._check_slot(slot)
		child = self.tree.new_node(span)
		self.node.children[slot - 1] = child
		return child

	def set_literal(self, value: int) -> None:
		self.tree._check_writable()
		self.node.literal = value

	def set_name(self, name: str) -> None:
		self.tree._check_writable()
		self.node.name = name

	def set_span(self, span: Span) -> None:
		self.tree._check_writable()
		self.node.span = span

	# -- reads -----------------------------------------------------------

	def current_tag(self) -> Optional[NodeTag]:
		return self.node.tag

	def current_alt(self) -> int:
		return self.node.alt

	def literal(self) -> int:
		node = self.node
		if node.tag is not NodeTag.INT or node.literal is None:
			raise InternalError(f"Expecting <int> node, found {_tag_name(node)}.", reason_code="bad-cursor")
		return node.literal

	def name(self) -> str:
		node = self.node
		if node.tag is not NodeTag.ID or node.name is None:
			raise InternalError(f"Expecting <id> node, found {_tag_name(node)}.", reason_code="bad-cursor")
		return node.name

	def expect(self, tag: NodeTag) -> None:
		if self.node.tag is not tag:
			raise InternalError(f"Expecting <{tag.value}>, found {_tag_name(self.node)}.", reason_code="bad-cursor")

	# -- navigation ------------------------------------------------------

	def descend(self, slot: int) -> None:
		self._check_slot(slot)
		child = self.node.children[slot - 1]
		if child is None:
			raise InternalError(
				f"No child in slot {slot} of <{_tag_name(self.node)}>.", span=self.node.span, reason_code="bad-cursor"
			)
		self._ancestors.append(self.current)
		self.current = child

	def ascend(self) -> None:
		if not self._ancestors:
			raise InternalError("Empty parents stack", reason_code="bad-cursor")
		self.current = self._ancestors.pop()

	@contextmanager
	def down(self, slot: int) -> Iterator["Cursor"]:
		"""Descend into `slot` for the duration of the block."""
		self.descend(slot)
		try:
			yield self
		finally:
			self.ascend()

	@staticmethod
	def _check_slot(slot: int) -> None:
		if not 1 <= slot <= SLOT_COUNT:
			raise InternalError(f"Invalid child slot {slot}.", reason_code="bad-cursor")


def _tag_name(node: SyntaxNode) -> str:
	return node.tag.value if node.tag is not None else "<untagged>"


__all__ = [
	"NodeTag",
	"Alt",
	"SeqAlt",
	"StmtAlt",
	"IfAlt",
	"CondAlt",
	"ExprAlt",
	"TermAlt",
	"OperandAlt",
	"CompOpAlt",
	"PRODUCTION_SLOTS",
	"DEFAULT_NODE_CAPACITY",
	"SyntaxNode",
	"SyntaxTree",
	"Cursor",
]
