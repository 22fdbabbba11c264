# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

import dataclasses
import inspect

import pytest

from hareunused import walker
from hareunused.imports import ImportRegistry
from hareunused.parser import ast as A
from hareunused.parser import parse_unit
from hareunused.walker import walk_unit


def _is_used(source: str) -> bool:
	"""Walk `use mod::a;` + source and report whether the import got marked."""
	unit = parse_unit("use mod::a;\n" + source)
	reg = ImportRegistry.from_unit(unit)
	walk_unit(unit, reg)
	return reg.records[0].used


@pytest.mark.parametrize(
	"expr",
	[
		"let x: a::t = 0",
		"let (p, q) = a::pair()",
		"let x = 1, y = a::v",
		"def N = a::v",
		"static let x = a::v",
		"x = a::v",
		"*a::ptr += 1",
		"a::f(1, 2)",
		"f(1, a::rest...)",
		"y[a::idx]",
		"y[a::lo..]",
		"y[..a::hi]",
		"a::v.field",
		"a::v.0",
		"(1, a::v)",
		"[1, a::v...]",
		"a::point { x = 1, ... }",
		"struct { x: a::t = 1 }",
		"struct { x: int = 1, a::inner { y = 2 } }",
		"x: a::t",
		"x as a::t",
		"x is a::t",
		"size(a::t)",
		"align(a::t)",
		"len(a::v)",
		"offset(a::v.f)",
		"alloc(a::v)",
		"alloc([1], a::n)",
		"alloc(a::v...)",
		"append(xs, a::v)",
		"static append(xs, 1, a::rest...)",
		"insert(xs[0], a::v)",
		"delete(xs[a::i])",
		"free(a::p)",
		"assert(a::ok)",
		"assert(true, a::msg)",
		"static assert(a::ok)",
		"abort(a::msg)",
		"if (a::ok) 1 else 2",
		"if (true) void else a::v",
		"for (let i = 0z; i < a::n; i += 1) void",
		"for (let x .. a::items) void",
		"for (let x: a::t .. items) void",
		"for (let x &.. a::items) void",
		"for (let x => a::next()) void",
		"for (true) a::tick()",
		"switch (x) { case a::ONE, 2 => void; case => void; }",
		"switch (x) { case 1 => a::f(); }",
		"match (x) { case a::t => void; case => void; }",
		"match (x) { case let y: a::t => void; }",
		"match (x) { case => a::f(); }",
		"defer a::cleanup()",
		"return a::v",
		"yield a::v",
		":blk { yield :blk, a::v; }",
		"{ a::v; }",
		"-a::v",
		"!a::ok",
		"1 + a::v",
		"x == a::v || y",
		"a::v?",
		"a::v!",
		"vaarg(a::ap)",
		"vaarg(ap, a::t)",
		"vaend(a::ap)",
	],
)
def test_expression_references_mark_import(expr: str) -> None:
	assert _is_used(f"fn f() void = {{ {expr}; }};\n")


@pytest.mark.parametrize(
	"decl",
	[
		"let x: a::t;",
		"let x = a::v;",
		"let @threadlocal x: a::t = 0;",
		"const x: int = a::v;",
		"def X: int = a::v;",
		"def X: a::t = 1;",
		"type t = a::t;",
		"type t = *a::t;",
		"type t = nullable *a::t;",
		"type t = []a::t;",
		"type t = [a::N]int;",
		"type t = [*]a::t;",
		"type t = [_]a::t;",
		"type t = const a::t;",
		"type t = !a::t;",
		"type t = (int | a::t);",
		"type t = (int | ...a::t);",
		"type t = (int, a::t);",
		"type t = struct { x: a::t };",
		"type t = struct { @offset(a::off) x: int };",
		"type t = struct { a::base, y: int };",
		"type t = struct { union { x: a::t } };",
		"type t = union { x: a::t };",
		"type t = enum { X = a::v };",
		"type t = fn(x: a::t) void;",
		"type t = fn(a::t) void;",
		"type t = fn() a::t;",
		"fn f(x: a::t) void;",
		"export fn f() a::t;",
		"fn f() void = a::setup();",
		"@init fn init() void = a::setup();",
		"static assert(a::ok);",
	],
)
def test_declaration_references_mark_import(decl: str) -> None:
	assert _is_used(decl + "\n")


@pytest.mark.parametrize(
	"source",
	[
		"fn f() void = void;\n",
		# single-segment names are local even when they spell the import
		"fn f(a: int) int = a;\n",
		"type t = a;\n",
		"fn f() void = b::a();\n",
		'fn f() str = "a::v";\n',
	],
)
def test_non_references_leave_import_unused(source: str) -> None:
	assert not _is_used(source)


def test_enum_case_named_like_import_marks_it_used():
	# Accepted false positive: `color::RED` refers to the local enum, but the
	# short-form rule cannot tell it apart from the imported module.
	source = """use hare::color;

type color = enum { RED, GREEN };

fn pick() color = color::RED;
"""
	unit = parse_unit(source)
	reg = ImportRegistry.from_unit(unit)
	walk_unit(unit, reg)

	assert reg.records[0].used


def _walked_node_classes() -> set[str]:
	bases = (A.Expr, A.TypeExpr, A.Decl)
	names = set()
	for name, cls in inspect.getmembers(A, inspect.isclass):
		if cls.__module__ != A.__name__ or not dataclasses.is_dataclass(cls):
			continue
		if issubclass(cls, bases) or cls in (A.StructField, A.StructEmbedded, A.StructAlias, A.StructValue):
			names.add(name)
	return names


def test_walker_names_every_node_class():
	src = inspect.getsource(walker)
	missing = sorted(name for name in _walked_node_classes() if f"A.{name}" not in src)

	assert missing == []
