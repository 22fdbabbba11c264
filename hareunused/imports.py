# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Import registry: one record per `use` directive plus a used flag.

References found by the walker are fed to `ImportRegistry.register`, which
marks every import the reference could have come through. A reference
`a::b::c` is satisfied by an import when:

- the import path is a prefix of the reference minus its final segment
  (`use a::b;` for `a::b::c`), or
- the first reference segment is the import's last path segment
  (`use x::a;` for `a::b::c`), or its alias (`use a = x::y;`).

Single-segment references are local names and never mark anything.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Sequence

from hareunused.parser.ast import Import, ImportMode, Located, SubUnit
from hareunused.parser.unparse import render_ident

# Imports that bring names into scope without a qualifying prefix. Usage cannot
# be attributed to them, so they are always kept.
_ALWAYS_USED = {ImportMode.WILDCARD, ImportMode.MEMBERS}


@dataclass
class ImportRecord:
	node: Import
	used: bool = False

	@property
	def path(self) -> List[str]:
		return self.node.ident

	@property
	def alias(self) -> Optional[str]:
		return self.node.alias

	@property
	def loc(self) -> Located:
		return self.node.loc

	@property
	def end(self) -> Located:
		return self.node.end

	def render_path(self) -> str:
		return render_ident(self.node.ident)

	def matches(self, reference: Sequence[str]) -> bool:
		path = self.node.ident
		qualifier = reference[:-1]
		if len(path) <= len(qualifier) and list(qualifier[: len(path)]) == path:
			return True
		if reference[0] == path[-1]:
			return True
		return self.node.alias is not None and reference[0] == self.node.alias


class ImportRegistry:
	"""Import records of one sub-unit, in source order."""

	def __init__(self, records: List[ImportRecord]) -> None:
		self.records = records

	@classmethod
	def from_unit(cls, unit: SubUnit) -> "ImportRegistry":
		return cls(getimp(unit.imports))

	def register(self, reference: Sequence[str]) -> bool:
		"""
		Mark every import that could supply `reference`.

		Returns True when at least one import matched, or when the reference is
		a bare local name. Unmatched references are not an error.
		"""
		if len(reference) == 1:
			return True
		found = False
		for record in self.records:
			if record.matches(reference):
				record.used = True
				found = True
		return found

	def unused(self) -> List[ImportRecord]:
		return [r for r in self.records if not r.used]

	def __len__(self) -> int:
		return len(self.records)

	def __iter__(self):
		return iter(self.records)


def getimp(imports: Sequence[Import]) -> List[ImportRecord]:
	return [ImportRecord(node=imp, used=imp.mode in _ALWAYS_USED) for imp in imports]


__all__ = ["ImportRecord", "ImportRegistry", "getimp"]
