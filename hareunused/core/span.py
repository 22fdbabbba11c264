# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Source span representation used by diagnostics.

A Span carries best-effort file/line/column info; any parser location object
with `line`/`column` (and optionally `end_line`/`end_column`) can be lifted
into one with `Span.from_loc`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional


@dataclass(frozen=True)
class Span:
	"""Represents a source span (best-effort file/line/column)."""

	file: Optional[str] = None
	line: Optional[int] = None
	column: Optional[int] = None
	end_line: Optional[int] = None
	end_column: Optional[int] = None

	@classmethod
	def from_loc(cls, loc: Any, *, file: Optional[str] = None) -> "Span":
		"""
		Construct a Span from a parser location object.

		If `loc` is already a Span it is returned unchanged (with `file` filled in
		when it was missing).
		"""
		if loc is None:
			return cls(file=file)
		if isinstance(loc, cls):
			if loc.file is None and file is not None:
				return cls(file, loc.line, loc.column, loc.end_line, loc.end_column)
			return loc
		return cls(
			file=file,
			line=getattr(loc, "line", None),
			column=getattr(loc, "column", None),
			end_line=getattr(loc, "end_line", None),
			end_column=getattr(loc, "end_column", None),
		)

	def short(self) -> str:
		"""`line:column`, with `?` standing in for unknown parts."""
		line = "?" if self.line is None else str(self.line)
		column = "?" if self.column is None else str(self.column)
		return f"{line}:{column}"


__all__ = ["Span"]
