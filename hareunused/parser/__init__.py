# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Hare front end: lark grammar, syntax tree, and import rendering.

`parse_unit` is the entry point; parse failures surface as `ParseError`, which
`parse_error_diagnostic` lifts into a parser-phase `Diagnostic`.
"""

from __future__ import annotations

from typing import Optional

from hareunused.core import Diagnostic, Span

from . import ast
from .parser import ParseError, parse_unit
from .unparse import render_ident, render_import


def parse_error_diagnostic(err: ParseError, path: Optional[str] = None) -> Diagnostic:
	"""Convert a `ParseError` into a diagnostic anchored at the error location."""
	file = path if path is not None else err.path
	return Diagnostic(
		message=str(err),
		phase="parser",
		severity="error",
		span=Span.from_loc(err.loc, file=file),
	)


__all__ = [
	"ast",
	"ParseError",
	"parse_unit",
	"parse_error_diagnostic",
	"render_ident",
	"render_import",
]
