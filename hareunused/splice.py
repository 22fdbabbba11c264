# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Rewrite the import block of a source file.

The block spans from the first `use` directive's line through the last one's
end line. It is replaced by the used imports, sorted by path, one directive per
line. Every line outside the block is copied byte for byte.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import BinaryIO, Iterable, List, Optional, Sequence

from hareunused.imports import ImportRecord
from hareunused.parser.unparse import render_import


@dataclass(frozen=True)
class LineRange:
	"""Half-open range of 1-based line numbers `[start, stop)`."""

	start: int
	stop: int

	def __contains__(self, lineno: int) -> bool:
		return self.start <= lineno < self.stop


def import_block(records: Sequence[ImportRecord]) -> Optional[LineRange]:
	"""Line range covered by `records` (source order), or None without imports."""
	if not records:
		return None
	return LineRange(records[0].loc.line, records[-1].end.line + 1)


def sort_imports(records: Iterable[ImportRecord]) -> List[ImportRecord]:
	# Code point order on the rendered path; equal paths keep source order.
	return sorted(records, key=lambda r: r.render_path())


def splice(source: BinaryIO, block: Optional[LineRange], imports: Sequence[ImportRecord], out: BinaryIO) -> None:
	"""
	Copy `source` to `out`, replacing the lines in `block` with `imports`.

	`imports` must already be sorted; unused records are dropped here. A line
	that is not valid UTF-8 ends the output at that point. Without a block the
	input is copied unchanged. Rendered imports reuse the line terminator of
	the block's first line (`\r\n` or `\n`).
	"""
	if block is None:
		for chunk in source:
			out.write(chunk)
		return
	for lineno, line in enumerate(source, start=1):
		try:
			line.decode("utf-8")
		except UnicodeDecodeError:
			return
		if lineno not in block:
			out.write(line)
			continue
		if lineno == block.start:
			eol = b"\r\n" if line.endswith(b"\r\n") else b"\n"
			for record in imports:
				if record.used:
					out.write(render_import(record.node).encode("utf-8") + eol)


__all__ = ["LineRange", "import_block", "sort_imports", "splice"]
