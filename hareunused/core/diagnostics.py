# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Common diagnostic structure for the parser and the unused-import reporter.

A diagnostic is a message plus a span and a severity. The driver renders them
either as `file:line:col: severity: message` lines or as JSON objects.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from .span import Span


@dataclass
class Diagnostic:
	"""Represents a tool diagnostic (error/warning)."""

	message: str
	# Pipeline phase that produced the diagnostic ("parser", "imports", "io").
	phase: str | None = None
	severity: str = "error"
	span: Span = field(default_factory=Span)
	notes: list[str] = field(default_factory=list)

	def __post_init__(self) -> None:
		if self.span is None:  # type: ignore[unreachable]
			self.span = Span()

	def to_json(self, *, default_file: str | None = None) -> dict:
		"""Render to a structured JSON-friendly dict."""
		return {
			"phase": self.phase,
			"message": self.message,
			"severity": self.severity,
			"file": self.span.file if self.span.file is not None else default_file,
			"line": self.span.line,
			"column": self.span.column,
			"notes": list(self.notes),
		}


def format_diagnostic(diag: Diagnostic, *, default_file: str | None = None) -> str:
	"""Human-readable one-line form: `file:line:col: severity: message`."""
	file = diag.span.file if diag.span.file is not None else default_file
	return f"{file}:{diag.span.short()}: {diag.severity}: {diag.message}"


__all__ = ["Diagnostic", "format_diagnostic"]
