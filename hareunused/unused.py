# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
hare-unused: drop unused `use` directives from Hare source files.

By default each file is rewritten to stdout with its import block sorted and
unused imports removed. `-i` writes the result back into the file; `-w` only
reports unused imports and takes precedence over `-i`.
"""

from __future__ import annotations

import argparse
import sys
from typing import List

from hareunused.core import Diagnostic, Span
from hareunused.parser import ParseError, parse_error_diagnostic
from hareunused.pipeline import Options, process_file
from hareunused.report import print_diagnostics, print_json_report


def _parse_args(argv: list[str] | None) -> tuple[Options, List[str]]:
	parser = argparse.ArgumentParser(
		prog="hare-unused",
		description="Remove unused imports from Hare source files",
	)
	parser.add_argument("files", nargs="+", metavar="file", help="Hare source file(s)")
	parser.add_argument(
		"-i",
		"--in-place",
		action="store_true",
		help="Overwrite each input file instead of writing to stdout",
	)
	parser.add_argument(
		"-w",
		"--warnings",
		action="store_true",
		help="Print unused imports as warnings; no file is modified (overrides -i)",
	)
	parser.add_argument(
		"--json",
		action="store_true",
		help="Emit diagnostics as JSON (phase/message/severity/file/line/column)",
	)
	args = parser.parse_args(argv)
	opts = Options(in_place=args.in_place, warnings_only=args.warnings, json=args.json)
	return opts, list(args.files)


def _fail(path: str, diag: Diagnostic, opts: Options) -> int:
	if opts.json:
		print_json_report([diag], file=path, exit_code=1)
	else:
		print_diagnostics([diag], default_file=path)
	return 1


def main(argv: list[str] | None = None) -> int:
	"""
	Process every file operand in order.

	The first file that cannot be read, written or parsed stops the run with
	exit code 1; earlier files keep whatever output they already produced.
	"""
	opts, files = _parse_args(argv)
	for path in files:
		if not opts.warnings_only and not opts.rewrites_in_place:
			sys.stdout.flush()
		try:
			diags = process_file(path, opts, stdout=sys.stdout.buffer)
		except ParseError as err:
			return _fail(path, parse_error_diagnostic(err, path), opts)
		except OSError as err:
			msg = err.strerror or str(err)
			return _fail(path, Diagnostic(message=msg, phase="io", span=Span(file=path)), opts)
		if opts.json:
			if opts.warnings_only or opts.rewrites_in_place:
				print_json_report(diags, file=path, exit_code=0)
		else:
			print_diagnostics(diags, default_file=path)
	sys.stdout.flush()
	return 0


__all__ = ["main"]
