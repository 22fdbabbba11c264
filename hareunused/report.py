# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Unused-import diagnostics and their two output forms.

Text form goes to stderr as `file:line:col: severity: message`, one line per
diagnostic. JSON form is one object per file on stdout:
`{"file", "exit_code", "diagnostics": [...]}`.
"""

from __future__ import annotations

import json
import sys
from typing import Iterable, List, Optional, TextIO

from hareunused.core import Diagnostic, Span, format_diagnostic
from hareunused.imports import ImportRecord
from hareunused.splice import sort_imports


def unused_import_diagnostics(records: Iterable[ImportRecord], path: str) -> List[Diagnostic]:
	"""One warning per unused import, in sorted path order."""
	return [
		Diagnostic(
			message=f"unused import {record.render_path()}",
			phase="imports",
			severity="warning",
			span=Span.from_loc(record.loc, file=path),
		)
		for record in sort_imports(records)
		if not record.used
	]


def print_diagnostics(diags: Iterable[Diagnostic], *, default_file: str, stream: Optional[TextIO] = None) -> None:
	out = stream if stream is not None else sys.stderr
	for diag in diags:
		print(format_diagnostic(diag, default_file=default_file), file=out)


def print_json_report(
	diags: Iterable[Diagnostic],
	*,
	file: str,
	exit_code: int,
	stream: Optional[TextIO] = None,
) -> None:
	out = stream if stream is not None else sys.stdout
	payload = {
		"file": file,
		"exit_code": exit_code,
		"diagnostics": [d.to_json(default_file=file) for d in diags],
	}
	print(json.dumps(payload), file=out)


__all__ = ["unused_import_diagnostics", "print_diagnostics", "print_json_report"]
