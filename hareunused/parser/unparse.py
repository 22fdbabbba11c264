# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""Render identifiers and `use` directives back to Hare source text."""

from __future__ import annotations

from typing import Sequence

from .ast import Import, ImportMode


def render_ident(path: Sequence[str]) -> str:
	return "::".join(path)


def render_import(imp: Import) -> str:
	"""
	Render one import as a `use` directive, without a line terminator.

	Member lists keep their source order; `d = e` members keep their alias.
	"""
	path = render_ident(imp.ident)
	if imp.mode is ImportMode.IDENT:
		return f"use {path};"
	if imp.mode is ImportMode.ALIAS:
		return f"use {imp.alias} = {path};"
	if imp.mode is ImportMode.MEMBERS:
		members = ", ".join(name if alias is None else f"{alias} = {name}" for alias, name in imp.members)
		return f"use {path}::{{{members}}};"
	if imp.mode is ImportMode.WILDCARD:
		return f"use {path}::*;"
	raise NotImplementedError(f"Unsupported import mode: {imp.mode}")
