# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Per-file pipeline: parse -> collect imports -> walk -> {splice | report}.

Each file gets a fresh `FileContext`; nothing is shared between files.
`ParseError` and `OSError` propagate to the caller, which decides how to
report them.
"""

from __future__ import annotations

import io
from dataclasses import dataclass
from typing import BinaryIO, List, Optional

from hareunused.core import Diagnostic
from hareunused.imports import ImportRegistry
from hareunused.parser import parse_unit
from hareunused.parser.ast import SubUnit
from hareunused.report import unused_import_diagnostics
from hareunused.splice import LineRange, import_block, sort_imports, splice
from hareunused.walker import walk_unit


@dataclass(frozen=True)
class Options:
	in_place: bool = False
	warnings_only: bool = False
	json: bool = False

	@property
	def rewrites_in_place(self) -> bool:
		# Warnings mode never touches the file, even with -i.
		return self.in_place and not self.warnings_only


@dataclass
class FileContext:
	path: str
	unit: SubUnit
	registry: ImportRegistry
	# Lines of the original import block; None when the file has no imports.
	block: Optional[LineRange]

	def unused_diagnostics(self) -> List[Diagnostic]:
		return unused_import_diagnostics(self.registry, self.path)


def analyze(path: str, source: bytes) -> FileContext:
	"""Parse `source` and mark every import referenced by its declarations."""
	unit = parse_unit(source, path)
	registry = ImportRegistry.from_unit(unit)
	block = import_block(registry.records)
	walk_unit(unit, registry)
	return FileContext(path=path, unit=unit, registry=registry, block=block)


def rewrite(ctx: FileContext, source: BinaryIO, out: BinaryIO) -> None:
	splice(source, ctx.block, sort_imports(ctx.registry), out)


def process_file(path: str, opts: Options, *, stdout: Optional[BinaryIO] = None) -> List[Diagnostic]:
	"""
	Run the pipeline on one file.

	Returns the unused-import warnings in warnings mode and an empty list
	otherwise. In rewrite mode the result goes to `stdout`, or back into the
	file with `-i`.
	"""
	with open(path, "rb") as f:
		data = f.read()
	ctx = analyze(path, data)
	if opts.warnings_only:
		return ctx.unused_diagnostics()
	if opts.rewrites_in_place:
		buf = io.BytesIO()
		with open(path, "rb") as src:
			rewrite(ctx, src, buf)
		with open(path, "wb") as dst:
			dst.write(buf.getvalue())
		return []
	if stdout is None:
		raise ValueError("stdout stream is required when not rewriting in place")
	with open(path, "rb") as src:
		rewrite(ctx, src, stdout)
	return []


__all__ = ["Options", "FileContext", "analyze", "rewrite", "process_file"]
