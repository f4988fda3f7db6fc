# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
`coretok`: dump the token stream of a Core source file.

Prints one token kind code per line, ending with the EOF code (33). With
--names each line is `KIND text` instead. Only the lexer's current()/advance()
interface is used.
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import TextIO

from .driver import open_text, source_decode_error
from .errors import CoreError
from .lexer import Lexer, TokenKind


def dump_tokens(lexer: Lexer, out: TextIO, names: bool = False) -> int:
	"""Write the remaining tokens of `lexer` to `out`; returns the count written."""
	count = 0
	while True:
		tok = lexer.current()
		print(f"{tok.kind.name} {tok.text}" if names else int(tok.kind), file=out)
		count += 1
		if tok.kind is TokenKind.EOF:
			return count
		lexer.advance()


def main(argv: list[str] | None = None) -> int:
	ap = argparse.ArgumentParser(prog="coretok", description="Print the token kinds of a Core source file")
	ap.add_argument("source", type=Path, help="Core source file")
	ap.add_argument("--names", action="store_true", help="Print kind names and token text instead of codes")
	args = ap.parse_args(argv)

	try:
		with open_text(args.source, "Error opening file.", source_decode_error(args.source)) as src:
			dump_tokens(Lexer(src, file=str(args.source)), sys.stdout, names=args.names)
	except CoreError as exc:
		sys.stdout.flush()
		diag = exc.to_diagnostic()
		print(diag.format_human(diag.span.file or str(args.source)), file=sys.stderr)
		return exc.exit_code
	return 0


if __name__ == "__main__":
	raise SystemExit(main())
