# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Core language toolchain: lexer, parser/static checker, pretty-printer and
tree-walking evaluator sharing one positional parse tree.

The CLI entrypoints are `corelang.driver:main` (`corei`) and
`corelang.tokdump:main` (`coretok`).
"""

from .errors import CoreError
from .evaluator import Evaluator, run_program
from .parser import ParsedProgram, Parser, parse_program
from .printer import Printer, format_program

__all__ = [
	"CoreError",
	"Evaluator",
	"ParsedProgram",
	"Parser",
	"Printer",
	"format_program",
	"parse_program",
	"run_program",
]
