# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""Shared plumbing (spans, diagnostics) used by the parser and the driver."""

from .diagnostics import Diagnostic, format_diagnostic
from .span import Span

__all__ = ["Diagnostic", "Span", "format_diagnostic"]
