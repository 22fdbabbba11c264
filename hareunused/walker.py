# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Usage walker: feed every qualified name in a sub-unit to the import registry.

Each node family has one dispatcher ending in `NotImplementedError`; a new AST
node that is not handled here fails the walk instead of being skipped.
"""

from __future__ import annotations

from typing import Optional

from hareunused.imports import ImportRegistry
from hareunused.parser import ast as A


def walk_unit(unit: A.SubUnit, registry: ImportRegistry) -> None:
	for decl in unit.decls:
		_walk_decl(decl, registry)


def _walk_decl(decl: A.Decl, reg: ImportRegistry) -> None:
	if isinstance(decl, A.DeclGlobal):
		_walk_opt_type(decl.type_expr, reg)
		_walk_opt_expr(decl.init, reg)
	elif isinstance(decl, A.DeclConst):
		_walk_opt_type(decl.type_expr, reg)
		_walk_expr(decl.init, reg)
	elif isinstance(decl, A.DeclType):
		_walk_type(decl.type_expr, reg)
	elif isinstance(decl, A.DeclFunc):
		_walk_type(decl.prototype, reg)
		_walk_opt_expr(decl.body, reg)
	elif isinstance(decl, A.DeclAssert):
		_walk_expr(decl.assertion, reg)
	else:
		raise NotImplementedError(f"Unsupported declaration: {type(decl).__name__}")


def _walk_type(ty: A.TypeExpr, reg: ImportRegistry) -> None:
	if isinstance(ty, A.BuiltinType):
		return
	if isinstance(ty, A.AliasType):
		reg.register(ty.ident)
	elif isinstance(ty, (A.ConstType, A.ErrorType)):
		_walk_type(ty.inner, reg)
	elif isinstance(ty, A.PointerType):
		_walk_type(ty.referent, reg)
	elif isinstance(ty, A.ListType):
		_walk_opt_expr(ty.length, reg)
		_walk_type(ty.member, reg)
	elif isinstance(ty, A.StructType):
		for member in ty.members:
			_walk_struct_member(member, reg)
	elif isinstance(ty, (A.TaggedType, A.TupleType)):
		for member_ty in ty.members:
			_walk_type(member_ty, reg)
	elif isinstance(ty, A.FuncType):
		for param in ty.params:
			_walk_type(param.type_expr, reg)
		_walk_type(ty.result, reg)
	elif isinstance(ty, A.EnumType):
		for value in ty.values:
			_walk_opt_expr(value.value, reg)
	else:
		raise NotImplementedError(f"Unsupported type expression: {type(ty).__name__}")


def _walk_struct_member(member: A.StructMember, reg: ImportRegistry) -> None:
	_walk_opt_expr(member.offset, reg)
	if isinstance(member, (A.StructField, A.StructEmbedded)):
		_walk_type(member.type_expr, reg)
	elif isinstance(member, A.StructAlias):
		reg.register(member.ident)
	else:
		raise NotImplementedError(f"Unsupported struct member: {type(member).__name__}")


def _walk_expr(expr: A.Expr, reg: ImportRegistry) -> None:
	if isinstance(expr, A.IdentExpr):
		reg.register(expr.ident)
	elif isinstance(expr, (A.Literal, A.Break, A.Continue, A.VaStart)):
		return
	elif isinstance(expr, A.IndexAccess):
		_walk_expr(expr.array, reg)
		_walk_expr(expr.index, reg)
	elif isinstance(expr, A.FieldAccess):
		_walk_expr(expr.object, reg)
	elif isinstance(expr, A.TupleAccess):
		_walk_expr(expr.tuple, reg)
	elif isinstance(expr, A.Alloc):
		_walk_expr(expr.init, reg)
		_walk_opt_expr(expr.capacity, reg)
	elif isinstance(expr, (A.Append, A.Insert)):
		_walk_expr(expr.object, reg)
		for value in expr.values:
			_walk_expr(value, reg)
		_walk_opt_expr(expr.variadic, reg)
	elif isinstance(expr, A.Assert):
		_walk_opt_expr(expr.cond, reg)
		_walk_opt_expr(expr.message, reg)
	elif isinstance(expr, A.Assign):
		_walk_expr(expr.target, reg)
		_walk_expr(expr.value, reg)
	elif isinstance(expr, A.Binarithm):
		_walk_expr(expr.left, reg)
		_walk_expr(expr.right, reg)
	elif isinstance(expr, A.Binding):
		for item in expr.bindings:
			_walk_opt_type(item.type_expr, reg)
			_walk_opt_expr(item.init, reg)
	elif isinstance(expr, A.Return):
		_walk_opt_expr(expr.value, reg)
	elif isinstance(expr, A.Yield):
		_walk_opt_expr(expr.value, reg)
	elif isinstance(expr, A.Call):
		_walk_expr(expr.callee, reg)
		for arg in expr.args:
			_walk_expr(arg, reg)
	elif isinstance(expr, A.Cast):
		_walk_expr(expr.value, reg)
		_walk_type(expr.type_expr, reg)
	elif isinstance(expr, (A.ArrayLiteral, A.TupleLiteral)):
		for value in expr.values:
			_walk_expr(value, reg)
	elif isinstance(expr, A.StructLiteral):
		_walk_struct_literal(expr, reg)
	elif isinstance(expr, A.Compound):
		for sub in expr.exprs:
			_walk_expr(sub, reg)
	elif isinstance(expr, A.Defer):
		_walk_expr(expr.expr, reg)
	elif isinstance(expr, A.Delete):
		_walk_expr(expr.object, reg)
	elif isinstance(expr, A.Free):
		_walk_expr(expr.expr, reg)
	elif isinstance(expr, A.For):
		if expr.bindings is not None:
			_walk_expr(expr.bindings, reg)
		_walk_opt_expr(expr.cond, reg)
		_walk_opt_expr(expr.afterthought, reg)
		_walk_expr(expr.body, reg)
	elif isinstance(expr, A.If):
		_walk_expr(expr.cond, reg)
		_walk_expr(expr.tbranch, reg)
		_walk_opt_expr(expr.fbranch, reg)
	elif isinstance(expr, A.Match):
		_walk_expr(expr.value, reg)
		for case in expr.cases:
			_walk_opt_type(case.type_expr, reg)
			for sub in case.exprs:
				_walk_expr(sub, reg)
	elif isinstance(expr, A.Switch):
		_walk_expr(expr.value, reg)
		for case in expr.cases:
			for option in case.options:
				_walk_expr(option, reg)
			for sub in case.exprs:
				_walk_expr(sub, reg)
	elif isinstance(expr, (A.Len, A.Offset)):
		_walk_expr(expr.value, reg)
	elif isinstance(expr, (A.Size, A.Align)):
		_walk_type(expr.type_expr, reg)
	elif isinstance(expr, A.Propagate):
		_walk_expr(expr.expr, reg)
	elif isinstance(expr, A.Slice):
		_walk_expr(expr.object, reg)
		_walk_opt_expr(expr.start, reg)
		_walk_opt_expr(expr.end, reg)
	elif isinstance(expr, A.Unarithm):
		_walk_expr(expr.operand, reg)
	elif isinstance(expr, A.VaArg):
		_walk_expr(expr.ap, reg)
		_walk_opt_type(expr.type_expr, reg)
	elif isinstance(expr, A.VaEnd):
		_walk_expr(expr.ap, reg)
	else:
		raise NotImplementedError(f"Unsupported expression: {type(expr).__name__}")


def _walk_struct_literal(lit: A.StructLiteral, reg: ImportRegistry) -> None:
	if lit.alias is not None:
		reg.register(lit.alias)
	for field in lit.fields:
		if isinstance(field, A.StructLiteral):
			_walk_struct_literal(field, reg)
		elif isinstance(field, A.StructValue):
			_walk_opt_type(field.type_expr, reg)
			_walk_expr(field.init, reg)
		else:
			raise NotImplementedError(f"Unsupported struct literal field: {type(field).__name__}")


def _walk_opt_expr(expr: Optional[A.Expr], reg: ImportRegistry) -> None:
	if expr is not None:
		_walk_expr(expr, reg)


def _walk_opt_type(ty: Optional[A.TypeExpr], reg: ImportRegistry) -> None:
	if ty is not None:
		_walk_type(ty, reg)


__all__ = ["walk_unit"]
