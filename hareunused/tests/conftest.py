# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

from pathlib import Path
from typing import Callable

import pytest


@pytest.fixture
def hare_file(tmp_path: Path) -> Callable[..., Path]:
	"""Write Hare source (str or bytes) under tmp_path and return its path."""

	def _write(content: str | bytes, name: str = "main.ha") -> Path:
		path = tmp_path / name
		path.parent.mkdir(parents=True, exist_ok=True)
		if isinstance(content, str):
			content = content.encode("utf-8")
		path.write_bytes(content)
		return path

	return _write
