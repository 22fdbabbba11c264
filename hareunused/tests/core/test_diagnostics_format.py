# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

from hareunused.core import Diagnostic, Span, format_diagnostic
from hareunused.parser.ast import Located


def test_format_diagnostic_uses_span_file_and_position():
	diag = Diagnostic(
		message="unused import io",
		phase="imports",
		severity="warning",
		span=Span.from_loc(Located(line=2, column=1), file="main.ha"),
	)

	assert format_diagnostic(diag) == "main.ha:2:1: warning: unused import io"


def test_format_diagnostic_falls_back_to_default_file_and_unknown_position():
	diag = Diagnostic(message="No such file or directory", phase="io")

	assert format_diagnostic(diag, default_file="missing.ha") == "missing.ha:?:?: error: No such file or directory"


def test_to_json_fields():
	diag = Diagnostic(message="boom", phase="parser", span=Span(line=3, column=7))

	assert diag.to_json(default_file="a.ha") == {
		"phase": "parser",
		"message": "boom",
		"severity": "error",
		"file": "a.ha",
		"line": 3,
		"column": 7,
		"notes": [],
	}


def test_span_from_loc_keeps_existing_span():
	span = Span(line=1, column=2)

	assert Span.from_loc(span) is span
	assert Span.from_loc(span, file="x.ha").file == "x.ha"
	assert Span.from_loc(None, file="x.ha") == Span(file="x.ha")
