# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Hare syntax tree produced by `hareunused.parser.parser`.

The node set is closed: every declaration, type and expression form the
grammar accepts maps to exactly one dataclass below. Consumers dispatch with
isinstance chains that end in `NotImplementedError`, so adding a node here
without teaching the walker about it fails loudly instead of silently
dropping references.

Identifiers are kept as lists of segments (`fmt::println` ->
`["fmt", "println"]`).
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import List, Optional, Tuple, Union


@dataclass(frozen=True)
class Located:
	line: int
	column: int


Ident = List[str]


# --- imports ----------------------------------------------------------------


class ImportMode(enum.Enum):
	IDENT = "ident"  # use a::b;
	ALIAS = "alias"  # use x = a::b;
	MEMBERS = "members"  # use a::b::{c, d = e};
	WILDCARD = "wildcard"  # use a::b::*;


@dataclass
class Import:
	loc: Located
	end: Located
	mode: ImportMode
	ident: Ident
	alias: Optional[str] = None
	# (alias, name) pairs; alias is None for plain members.
	members: List[Tuple[Optional[str], str]] = field(default_factory=list)


# --- types ------------------------------------------------------------------


class TypeExpr:
	loc: Located


@dataclass
class BuiltinType(TypeExpr):
	loc: Located
	name: str


@dataclass
class AliasType(TypeExpr):
	loc: Located
	ident: Ident
	# `...alias` unwraps the aliased type.
	unwrap: bool = False


@dataclass
class ConstType(TypeExpr):
	loc: Located
	inner: TypeExpr


@dataclass
class ErrorType(TypeExpr):
	loc: Located
	inner: TypeExpr


@dataclass
class PointerType(TypeExpr):
	loc: Located
	referent: TypeExpr
	nullable: bool = False


class ListKind(enum.Enum):
	SLICE = "slice"  # []T
	ARRAY = "array"  # [N]T
	UNBOUNDED = "unbounded"  # [*]T
	CONTEXT = "context"  # [_]T


@dataclass
class ListType(TypeExpr):
	loc: Located
	kind: ListKind
	member: TypeExpr
	length: Optional["Expr"] = None


@dataclass
class StructField:
	loc: Located
	name: str
	type_expr: TypeExpr
	offset: Optional["Expr"] = None


@dataclass
class StructEmbedded:
	"""Anonymous struct/union embedded in a struct."""

	loc: Located
	type_expr: TypeExpr
	offset: Optional["Expr"] = None


@dataclass
class StructAlias:
	"""Embedded type alias (`struct { io::stream, ... }`)."""

	loc: Located
	ident: Ident
	offset: Optional["Expr"] = None


StructMember = Union[StructField, StructEmbedded, StructAlias]


@dataclass
class StructType(TypeExpr):
	loc: Located
	members: List[StructMember]
	is_union: bool = False
	packed: bool = False


@dataclass
class TaggedType(TypeExpr):
	loc: Located
	members: List[TypeExpr]


@dataclass
class TupleType(TypeExpr):
	loc: Located
	members: List[TypeExpr]


@dataclass
class FuncParam:
	loc: Located
	name: Optional[str]
	type_expr: TypeExpr


class Variadism(enum.Enum):
	NONE = "none"
	C = "c"  # fn(x: int, ...)
	HARE = "hare"  # fn(x: int...)


@dataclass
class FuncType(TypeExpr):
	loc: Located
	params: List[FuncParam]
	result: TypeExpr
	variadism: Variadism = Variadism.NONE


@dataclass
class EnumField:
	loc: Located
	name: str
	value: Optional["Expr"] = None


@dataclass
class EnumType(TypeExpr):
	loc: Located
	values: List[EnumField]
	storage: Optional[str] = None


# --- expressions ------------------------------------------------------------


class Expr:
	loc: Located


@dataclass
class IdentExpr(Expr):
	loc: Located
	ident: Ident


@dataclass
class IndexAccess(Expr):
	loc: Located
	array: Expr
	index: Expr


@dataclass
class FieldAccess(Expr):
	loc: Located
	object: Expr
	field: str


@dataclass
class TupleAccess(Expr):
	loc: Located
	tuple: Expr
	value: str


@dataclass
class Alloc(Expr):
	loc: Located
	init: Expr
	capacity: Optional[Expr] = None
	# alloc(slice...) copies an existing slice.
	copy: bool = False


@dataclass
class Append(Expr):
	loc: Located
	object: Expr
	values: List[Expr]
	# Trailing `values...` spread, kept apart from the plain values.
	variadic: Optional[Expr] = None
	is_static: bool = False


@dataclass
class Insert(Expr):
	loc: Located
	object: Expr
	values: List[Expr]
	variadic: Optional[Expr] = None
	is_static: bool = False


@dataclass
class Assert(Expr):
	"""`assert(cond, msg)`; `abort(msg)` is an assertion without a condition."""

	loc: Located
	cond: Optional[Expr]
	message: Optional[Expr] = None
	is_static: bool = False


@dataclass
class Assign(Expr):
	loc: Located
	target: Expr
	value: Expr
	# None for plain `=`, otherwise the arithmetic operator (`+` for `+=`).
	op: Optional[str] = None


@dataclass
class Binarithm(Expr):
	loc: Located
	op: str
	left: Expr
	right: Expr


@dataclass
class BindingItem:
	loc: Located
	# A single name, or the names of a tuple unpacking `let (a, b) = ...`.
	name: Union[str, List[str]]
	type_expr: Optional[TypeExpr]
	init: Optional[Expr]


@dataclass
class Binding(Expr):
	loc: Located
	kind: str  # "let", "const" or "def"
	bindings: List[BindingItem]
	is_static: bool = False


@dataclass
class Break(Expr):
	loc: Located
	label: Optional[str] = None


@dataclass
class Continue(Expr):
	loc: Located
	label: Optional[str] = None


@dataclass
class Return(Expr):
	loc: Located
	value: Optional[Expr] = None


@dataclass
class Yield(Expr):
	loc: Located
	label: Optional[str] = None
	value: Optional[Expr] = None


@dataclass
class Call(Expr):
	loc: Located
	callee: Expr
	args: List[Expr]
	# Last argument is spread with `...`.
	variadic: bool = False


@dataclass
class Cast(Expr):
	loc: Located
	kind: str  # ":", "as" or "is"
	value: Expr
	type_expr: TypeExpr


@dataclass
class Literal(Expr):
	"""Scalar constant; `value` is the source spelling (strings concatenated)."""

	loc: Located
	kind: str  # "number", "string", "rune", "bool", "null", "void", "done"
	value: str


@dataclass
class ArrayLiteral(Expr):
	loc: Located
	values: List[Expr]
	# `[a, b...]` repeats the last value to fill the array.
	expand: bool = False


@dataclass
class StructValue:
	loc: Located
	name: str
	type_expr: Optional[TypeExpr]
	init: Expr


@dataclass
class StructLiteral(Expr):
	loc: Located
	# None for `struct { ... }`, the alias identifier for `foo::bar { ... }`.
	alias: Optional[Ident]
	fields: List[Union[StructValue, "StructLiteral"]]
	autofill: bool = False


@dataclass
class TupleLiteral(Expr):
	loc: Located
	values: List[Expr]


@dataclass
class Compound(Expr):
	loc: Located
	exprs: List[Expr]
	label: Optional[str] = None


@dataclass
class Defer(Expr):
	loc: Located
	expr: Expr


@dataclass
class Delete(Expr):
	loc: Located
	object: Expr
	is_static: bool = False


@dataclass
class Free(Expr):
	loc: Located
	expr: Expr


class ForKind(enum.Enum):
	ACCUMULATOR = "accumulator"  # for (let i = 0; i < n; i += 1)
	EACH_VALUE = "each-value"  # for (let x .. items)
	EACH_POINTER = "each-pointer"  # for (let x &.. items)
	ITERATOR = "iterator"  # for (let x => next())


@dataclass
class For(Expr):
	loc: Located
	kind: ForKind
	bindings: Optional[Binding]
	cond: Optional[Expr]
	afterthought: Optional[Expr]
	body: Expr
	label: Optional[str] = None


@dataclass
class If(Expr):
	loc: Located
	cond: Expr
	tbranch: Expr
	fbranch: Optional[Expr] = None


@dataclass
class MatchCase:
	"""`case let name: T =>`, `case T =>`, or the default `case =>`."""

	loc: Located
	name: Optional[str]
	type_expr: Optional[TypeExpr]
	exprs: List[Expr]


@dataclass
class Match(Expr):
	loc: Located
	value: Expr
	cases: List[MatchCase]


@dataclass
class SwitchCase:
	"""`case a, b =>`; empty `options` is the default case."""

	loc: Located
	options: List[Expr]
	exprs: List[Expr]


@dataclass
class Switch(Expr):
	loc: Located
	value: Expr
	cases: List[SwitchCase]


@dataclass
class Len(Expr):
	loc: Located
	value: Expr


@dataclass
class Size(Expr):
	loc: Located
	type_expr: TypeExpr


@dataclass
class Align(Expr):
	loc: Located
	type_expr: TypeExpr


@dataclass
class Offset(Expr):
	loc: Located
	value: Expr


@dataclass
class Propagate(Expr):
	"""`expr?` propagates errors; `expr!` (is_abort) asserts there are none."""

	loc: Located
	expr: Expr
	is_abort: bool = False


@dataclass
class Slice(Expr):
	loc: Located
	object: Expr
	start: Optional[Expr] = None
	end: Optional[Expr] = None


@dataclass
class Unarithm(Expr):
	loc: Located
	op: str
	operand: Expr


@dataclass
class VaStart(Expr):
	loc: Located


@dataclass
class VaArg(Expr):
	loc: Located
	ap: Expr
	type_expr: Optional[TypeExpr] = None


@dataclass
class VaEnd(Expr):
	loc: Located
	ap: Expr


# --- declarations -----------------------------------------------------------


class Decl:
	loc: Located
	exported: bool


@dataclass
class DeclGlobal(Decl):
	loc: Located
	ident: Ident
	type_expr: Optional[TypeExpr]
	init: Optional[Expr]
	is_const: bool = False
	is_threadlocal: bool = False
	symbol: Optional[str] = None
	exported: bool = False


@dataclass
class DeclConst(Decl):
	loc: Located
	ident: Ident
	type_expr: Optional[TypeExpr]
	init: Expr
	exported: bool = False


@dataclass
class DeclType(Decl):
	loc: Located
	ident: Ident
	type_expr: TypeExpr
	exported: bool = False


@dataclass
class DeclFunc(Decl):
	loc: Located
	ident: Ident
	prototype: FuncType
	body: Optional[Expr]
	attrs: List[str] = field(default_factory=list)
	symbol: Optional[str] = None
	exported: bool = False


@dataclass
class DeclAssert(Decl):
	"""Top-level `static assert(...)`."""

	loc: Located
	assertion: Assert
	exported: bool = False


@dataclass
class SubUnit:
	imports: List[Import]
	decls: List[Decl]

