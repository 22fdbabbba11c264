# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Hare sub-unit parser.

The grammar lives in `grammar.lark` next to this module and is parsed with
lark's LALR parser. `parse_unit` turns the lark tree into the dataclass AST in
`hareunused.parser.ast`; the `_build_*` helpers below mirror the grammar rule
names one-to-one.
"""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional

from lark import Lark, Token, Tree
from lark.exceptions import UnexpectedCharacters, UnexpectedEOF, UnexpectedInput, UnexpectedToken

from .ast import (
	AliasType,
	Align,
	Alloc,
	Append,
	ArrayLiteral,
	Assert,
	Assign,
	Binarithm,
	Binding,
	BindingItem,
	Break,
	BuiltinType,
	Call,
	Cast,
	Compound,
	ConstType,
	Continue,
	Decl,
	DeclAssert,
	DeclConst,
	DeclFunc,
	DeclGlobal,
	DeclType,
	Defer,
	Delete,
	EnumField,
	EnumType,
	ErrorType,
	Expr,
	FieldAccess,
	For,
	ForKind,
	Free,
	FuncParam,
	FuncType,
	IdentExpr,
	If,
	Import,
	ImportMode,
	IndexAccess,
	Insert,
	Len,
	ListKind,
	ListType,
	Literal,
	Located,
	Match,
	MatchCase,
	Offset,
	PointerType,
	Propagate,
	Return,
	Size,
	Slice,
	StructAlias,
	StructEmbedded,
	StructField,
	StructLiteral,
	StructType,
	StructValue,
	SubUnit,
	Switch,
	SwitchCase,
	TaggedType,
	TupleAccess,
	TupleLiteral,
	TupleType,
	TypeExpr,
	Unarithm,
	VaArg,
	VaEnd,
	VaStart,
	Variadism,
	Yield,
)

_GRAMMAR_PATH = Path(__file__).with_name("grammar.lark")
_GRAMMAR_SRC = _GRAMMAR_PATH.read_text()

_PARSER = Lark(
	_GRAMMAR_SRC,
	parser="lalr",
	lexer="basic",
	start="sub_unit",
	propagate_positions=True,
	maybe_placeholders=False,
)

# Rule names (after aliasing) that produce type expressions. Everything else
# reaching `_build_expr` is an expression.
_TYPE_RULES = {
	"builtin_type",
	"alias_type",
	"unwrapped_alias_type",
	"const_type",
	"error_type",
	"pointer_type",
	"nullable_pointer_type",
	"slice_type",
	"array_type",
	"unbounded_array_type",
	"tuple_type",
	"tagged_type",
	"struct_type",
	"union_type",
	"enum_type",
	"fn_type",
}

_PROTOTYPE_RULES = {"prototype", "hare_variadic_prototype", "c_variadic_prototype"}

_FOR_EACH_KINDS = {
	"..": ForKind.EACH_VALUE,
	"&..": ForKind.EACH_POINTER,
	"=>": ForKind.ITERATOR,
}


class ParseError(ValueError):
	"""
	User-facing parse failure with a source location.

	Raised for lexer/parser rejections and for input that is not valid UTF-8.
	The driver turns it into a parser-phase diagnostic.
	"""

	def __init__(self, message: str, *, loc: Optional[Located], path: Optional[str] = None) -> None:
		super().__init__(message)
		self.loc = loc
		self.path = path


def parse_unit(source: str | bytes, path: Optional[str] = None) -> SubUnit:
	"""Parse one Hare source file into a `SubUnit`."""
	if isinstance(source, bytes):
		source = _decode_source(source, path)
	try:
		tree = _PARSER.parse(source)
	except UnexpectedInput as exc:
		raise ParseError(_describe_unexpected(exc), loc=_loc_from_error(exc, source), path=path) from exc
	return _build_sub_unit(tree)


def _decode_source(data: bytes, path: Optional[str]) -> str:
	try:
		return data.decode("utf-8")
	except UnicodeDecodeError as exc:
		prefix = data[: exc.start]
		line = prefix.count(b"\n") + 1
		column = exc.start - (prefix.rfind(b"\n") + 1) + 1
		raise ParseError("invalid UTF-8 in source file", loc=Located(line=line, column=column), path=path) from exc


def _describe_unexpected(exc: UnexpectedInput) -> str:
	if isinstance(exc, UnexpectedCharacters):
		return f"unexpected character {exc.char!r}"
	if isinstance(exc, UnexpectedEOF):
		return "unexpected end of file"
	if isinstance(exc, UnexpectedToken):
		if exc.token.type == "$END":
			return "unexpected end of file"
		return f"unexpected {exc.token.type} {exc.token.value!r}"
	return str(exc)


def _loc_from_error(exc: UnexpectedInput, source: str) -> Located:
	line = getattr(exc, "line", None)
	column = getattr(exc, "column", None)
	if isinstance(line, int) and line > 0 and isinstance(column, int) and column > 0:
		return Located(line=line, column=column)
	# End-of-input errors carry no position; point past the last line.
	lines = source.split("\n")
	return Located(line=len(lines), column=len(lines[-1]) + 1)


# --- sub-unit and imports ---------------------------------------------------


def _build_sub_unit(tree: Tree) -> SubUnit:
	imports: List[Import] = []
	decls: List[Decl] = []
	for child in tree.children:
		if not isinstance(child, Tree):
			continue
		kind = _name(child)
		if kind == "declaration":
			decls.extend(_build_declaration(child))
		else:
			imports.append(_build_import(child))
	return SubUnit(imports=imports, decls=decls)


def _build_import(tree: Tree) -> Import:
	kind = _name(tree)
	loc = _loc(tree)
	end = Located(line=tree.meta.end_line, column=tree.meta.end_column)
	if kind == "use_ident":
		return Import(loc=loc, end=end, mode=ImportMode.IDENT, ident=_ident(tree.children[0]))
	if kind == "use_alias":
		alias_tok, ident_node = tree.children
		return Import(loc=loc, end=end, mode=ImportMode.ALIAS, ident=_ident(ident_node), alias=alias_tok.value)
	if kind == "use_members":
		ident_node, group = tree.children
		members = []
		for member in _flatten(group.children[0], "use_member_list"):
			names = [tok.value for tok in member.children]
			if _name(member) == "use_member_alias":
				members.append((names[0], names[1]))
			else:
				members.append((None, names[0]))
		return Import(loc=loc, end=end, mode=ImportMode.MEMBERS, ident=_ident(ident_node), members=members)
	if kind == "use_wildcard":
		return Import(loc=loc, end=end, mode=ImportMode.WILDCARD, ident=_ident(tree.children[0]))
	raise NotImplementedError(f"Unsupported use directive: {kind}")


# --- declarations -----------------------------------------------------------


def _build_declaration(tree: Tree) -> List[Decl]:
	exported = any(isinstance(c, Token) and c.type == "EXPORT" for c in tree.children)
	body = next(c for c in tree.children if isinstance(c, Tree))
	kind = _name(body)
	if kind == "global_decl":
		return _build_global_decl(body, exported)
	if kind == "const_decl":
		return [_build_const_binding(b, exported) for b in _flatten(body, "const_decl")]
	if kind == "type_decl":
		return [_build_type_binding(b, exported) for b in _flatten(body, "type_decl")]
	if kind == "func_decl":
		return [_build_func_decl(body, exported)]
	if kind == "static_assert_decl":
		exprs = _subtrees(body)
		assertion = Assert(
			loc=_loc(body),
			cond=_build_expr(exprs[0]),
			message=_build_expr(exprs[1]) if len(exprs) > 1 else None,
			is_static=True,
		)
		return [DeclAssert(loc=_loc(body), assertion=assertion, exported=exported)]
	raise NotImplementedError(f"Unsupported declaration: {kind}")


def _build_global_decl(tree: Tree, exported: bool) -> List[Decl]:
	items = _flatten(tree, "global_decl")
	is_const = items[0].children[0].value == "const"
	decls: List[Decl] = []
	for binding in items[1:]:
		symbol: Optional[str] = None
		threadlocal = False
		ident: List[str] = []
		type_expr: Optional[TypeExpr] = None
		init: Optional[Expr] = None
		for child in _subtrees(binding):
			kind = _name(child)
			if kind == "decl_attr":
				attr = child.children[0]
				if attr.type == "ATTR_SYMBOL":
					symbol = _string_value(child.children[1])
				else:
					threadlocal = True
			elif kind == "ident":
				ident = _ident(child)
			elif kind in _TYPE_RULES:
				type_expr = _build_type(child)
			else:
				init = _build_expr(child)
		decls.append(
			DeclGlobal(
				loc=_loc(binding),
				ident=ident,
				type_expr=type_expr,
				init=init,
				is_const=is_const,
				is_threadlocal=threadlocal,
				symbol=symbol,
				exported=exported,
			)
		)
	return decls


def _build_const_binding(tree: Tree, exported: bool) -> DeclConst:
	parts = _subtrees(tree)
	type_expr = _build_type(parts[1]) if len(parts) == 3 else None
	return DeclConst(
		loc=_loc(tree),
		ident=_ident(parts[0]),
		type_expr=type_expr,
		init=_build_expr(parts[-1]),
		exported=exported,
	)


def _build_type_binding(tree: Tree, exported: bool) -> DeclType:
	ident_node, type_node = _subtrees(tree)
	return DeclType(loc=_loc(tree), ident=_ident(ident_node), type_expr=_build_type(type_node), exported=exported)


def _build_func_decl(tree: Tree, exported: bool) -> DeclFunc:
	attrs: List[str] = []
	symbol: Optional[str] = None
	ident: List[str] = []
	prototype: Optional[FuncType] = None
	body: Optional[Expr] = None
	for child in _subtrees(tree):
		kind = _name(child)
		if kind == "fn_attr":
			attr = child.children[0]
			attrs.append(attr.value)
			if attr.type == "ATTR_SYMBOL":
				symbol = _string_value(child.children[1])
		elif kind == "ident":
			ident = _ident(child)
		elif kind in _PROTOTYPE_RULES:
			prototype = _build_prototype(child)
		else:
			body = _build_expr(child)
	if prototype is None:
		raise TypeError(f"function declaration without prototype: {tree!r}")
	return DeclFunc(
		loc=_loc(tree),
		ident=ident,
		prototype=prototype,
		body=body,
		attrs=attrs,
		symbol=symbol,
		exported=exported,
	)


def _build_prototype(tree: Tree) -> FuncType:
	kind = _name(tree)
	variadism = Variadism.NONE
	if kind == "hare_variadic_prototype":
		variadism = Variadism.HARE
	elif kind == "c_variadic_prototype":
		variadism = Variadism.C
	parts = _subtrees(tree)
	params: List[FuncParam] = []
	if len(parts) == 2:
		for param in _flatten(parts[0], "param_list"):
			if _name(param) == "unnamed_param":
				params.append(FuncParam(loc=_loc(param), name=None, type_expr=_build_type(param.children[0])))
			else:
				name_tok, type_node = param.children
				params.append(FuncParam(loc=_loc(param), name=name_tok.value, type_expr=_build_type(type_node)))
	return FuncType(loc=_loc(tree), params=params, result=_build_type(parts[-1]), variadism=variadism)


# --- types ------------------------------------------------------------------


def _build_type(tree: Tree) -> TypeExpr:
	kind = _name(tree)
	loc = _loc(tree)
	parts = _subtrees(tree)
	if kind == "builtin_type":
		return BuiltinType(loc=loc, name=tree.children[0].value)
	if kind == "alias_type":
		return AliasType(loc=loc, ident=_ident(parts[0]))
	if kind == "unwrapped_alias_type":
		return AliasType(loc=loc, ident=_ident(parts[0]), unwrap=True)
	if kind == "const_type":
		return ConstType(loc=loc, inner=_build_type(parts[0]))
	if kind == "error_type":
		return ErrorType(loc=loc, inner=_build_type(parts[0]))
	if kind == "pointer_type":
		return PointerType(loc=loc, referent=_build_type(parts[0]))
	if kind == "nullable_pointer_type":
		return PointerType(loc=loc, referent=_build_type(parts[0]), nullable=True)
	if kind == "slice_type":
		return ListType(loc=loc, kind=ListKind.SLICE, member=_build_type(parts[0]))
	if kind == "unbounded_array_type":
		return ListType(loc=loc, kind=ListKind.UNBOUNDED, member=_build_type(parts[0]))
	if kind == "array_type":
		length = _build_expr(parts[0])
		if isinstance(length, IdentExpr) and length.ident == ["_"]:
			return ListType(loc=loc, kind=ListKind.CONTEXT, member=_build_type(parts[1]))
		return ListType(loc=loc, kind=ListKind.ARRAY, member=_build_type(parts[1]), length=length)
	if kind == "tuple_type":
		return TupleType(loc=loc, members=[_build_type(parts[0])] + _build_type_list(parts[1]))
	if kind == "tagged_type":
		return TaggedType(loc=loc, members=[_build_type(parts[0])] + _build_type_list(parts[1]))
	if kind in {"struct_type", "union_type"}:
		packed = any(isinstance(c, Token) and c.type == "ATTR_PACKED" for c in tree.children)
		members = [_build_struct_member(m) for m in _flatten(parts[-1].children[0], "struct_member_list")]
		return StructType(loc=loc, members=members, is_union=kind == "union_type", packed=packed)
	if kind == "enum_type":
		storage = None
		if _name(parts[0]) == "builtin_type":
			storage = parts[0].children[0].value
		values = []
		for value in _flatten(parts[-1].children[0], "enum_value_list"):
			name_tok = value.children[0]
			init = _build_expr(value.children[1]) if len(value.children) > 1 else None
			values.append(EnumField(loc=_loc(value), name=name_tok.value, value=init))
		return EnumType(loc=loc, values=values, storage=storage)
	if kind == "fn_type":
		return _build_prototype(parts[0])
	raise NotImplementedError(f"Unsupported type expression: {kind}")


def _build_type_list(tree: Tree) -> List[TypeExpr]:
	"""Right-recursive `type_comma_list` / `type_bar_list`."""
	members: List[TypeExpr] = []
	node: Optional[Tree] = tree
	while node is not None:
		parts = _subtrees(node)
		members.append(_build_type(parts[0]))
		node = parts[1] if len(parts) > 1 else None
	return members


def _build_struct_member(tree: Tree):
	kind = _name(tree)
	offset: Optional[Expr] = None
	parts = _subtrees(tree)
	if parts and _name(parts[0]) == "offset_attr":
		offset = _build_expr(_subtrees(parts[0])[0])
		parts = parts[1:]
	if kind == "struct_field":
		name_tok = next(c for c in tree.children if isinstance(c, Token) and c.type == "NAME")
		return StructField(loc=_loc(tree), name=name_tok.value, type_expr=_build_type(parts[0]), offset=offset)
	if kind == "struct_embedded":
		return StructEmbedded(loc=_loc(tree), type_expr=_build_type(parts[0]), offset=offset)
	if kind == "struct_alias":
		return StructAlias(loc=_loc(tree), ident=_ident(parts[0]), offset=offset)
	raise NotImplementedError(f"Unsupported struct member: {kind}")


# --- expressions ------------------------------------------------------------


def _build_expr(tree: Tree) -> Expr:
	if not isinstance(tree, Tree):
		raise TypeError(f"Unexpected node type: {type(tree)}")
	kind = _name(tree)
	loc = _loc(tree)
	parts = _subtrees(tree)

	if kind == "ident_expr":
		return IdentExpr(loc=loc, ident=_ident(parts[0]))
	if kind in {"number_literal", "rune_literal", "bool_literal", "null_literal", "void_literal", "done_literal"}:
		return Literal(loc=loc, kind=kind[: -len("_literal")], value=tree.children[0].value)
	if kind == "string_literal":
		return Literal(loc=loc, kind="string", value="".join(_string_value(tok) for tok in tree.children))
	if kind == "binarithm":
		left, op, right = tree.children
		return Binarithm(loc=loc, op=op.value, left=_build_expr(left), right=_build_expr(right))
	if kind == "unarithm":
		op, operand = tree.children
		return Unarithm(loc=loc, op=op.value, operand=_build_expr(operand))
	if kind == "assignment":
		target, op_node, value = parts
		op = op_node.children[0].value
		return Assign(
			loc=loc,
			target=_build_expr(target),
			value=_build_expr(value),
			op=None if op == "=" else op[:-1],
		)
	if kind == "binding":
		return _build_binding(tree)
	if kind in {"cast_colon", "cast_as", "cast_is"}:
		cast_kind = {"cast_colon": ":", "cast_as": "as", "cast_is": "is"}[kind]
		return Cast(loc=loc, kind=cast_kind, value=_build_expr(parts[0]), type_expr=_build_type(parts[1]))
	if kind == "call":
		args: List[Expr] = []
		variadic = False
		if len(parts) > 1:
			args, variadic = _build_arg_list(parts[1])
		return Call(loc=loc, callee=_build_expr(parts[0]), args=args, variadic=variadic)
	if kind == "index_access":
		return IndexAccess(loc=loc, array=_build_expr(parts[0]), index=_build_expr(parts[1]))
	if kind == "slice":
		start = end = None
		for part in parts[1:]:
			if _name(part) == "slice_start":
				start = _build_expr(part.children[0])
			else:
				end = _build_expr(part.children[0])
		return Slice(loc=loc, object=_build_expr(parts[0]), start=start, end=end)
	if kind == "field_access":
		return FieldAccess(loc=loc, object=_build_expr(parts[0]), field=tree.children[1].value)
	if kind == "tuple_access":
		return TupleAccess(loc=loc, tuple=_build_expr(parts[0]), value=tree.children[1].value)
	if kind == "propagate":
		return Propagate(loc=loc, expr=_build_expr(parts[0]))
	if kind == "error_assert":
		return Propagate(loc=loc, expr=_build_expr(parts[0]), is_abort=True)
	if kind == "tuple_literal":
		values = [_build_expr(parts[0])]
		node: Optional[Tree] = parts[1]
		while node is not None:
			items = _subtrees(node)
			values.append(_build_expr(items[0]))
			node = items[1] if len(items) > 1 else None
		return TupleLiteral(loc=loc, values=values)
	if kind == "array_literal":
		if not parts:
			return ArrayLiteral(loc=loc, values=[])
		values, expand = _build_arg_list(parts[0])
		return ArrayLiteral(loc=loc, values=values, expand=expand)
	if kind == "struct_literal":
		return _build_struct_literal(tree)
	if kind == "if_expr":
		fbranch = _build_expr(parts[2]) if len(parts) > 2 else None
		return If(loc=loc, cond=_build_expr(parts[0]), tbranch=_build_expr(parts[1]), fbranch=fbranch)
	if kind == "for_expr":
		return _build_for(tree)
	if kind == "match_expr":
		return Match(loc=loc, value=_build_expr(parts[0]), cases=[_build_match_case(c) for c in parts[1:]])
	if kind == "switch_expr":
		return Switch(loc=loc, value=_build_expr(parts[0]), cases=[_build_switch_case(c) for c in parts[1:]])
	if kind == "compound_expr":
		label = None
		if parts and _name(parts[0]) == "label":
			label = _label(parts[0])
			parts = parts[1:]
		return Compound(loc=loc, exprs=[_build_expr(p) for p in parts], label=label)
	if kind == "defer_expr":
		return Defer(loc=loc, expr=_build_expr(parts[0]))
	if kind == "break_expr":
		return Break(loc=loc, label=_label(parts[0]) if parts else None)
	if kind == "continue_expr":
		return Continue(loc=loc, label=_label(parts[0]) if parts else None)
	if kind == "return_expr":
		return Return(loc=loc, value=_build_expr(parts[0]) if parts else None)
	if kind == "yield_expr":
		label = None
		if parts and _name(parts[0]) == "label":
			label = _label(parts[0])
			parts = parts[1:]
		return Yield(loc=loc, label=label, value=_build_expr(parts[0]) if parts else None)
	if kind == "alloc_expr":
		capacity = _build_expr(parts[1]) if len(parts) > 1 else None
		return Alloc(loc=loc, init=_build_expr(parts[0]), capacity=capacity)
	if kind == "alloc_copy_expr":
		return Alloc(loc=loc, init=_build_expr(parts[0]), copy=True)
	if kind in {"append_expr", "insert_expr"}:
		values, spread = _build_arg_list(parts[1])
		variadic = values.pop() if spread else None
		node_type = Append if kind == "append_expr" else Insert
		return node_type(
			loc=loc,
			object=_build_expr(parts[0]),
			values=values,
			variadic=variadic,
			is_static=_is_static(tree),
		)
	if kind == "delete_expr":
		return Delete(loc=loc, object=_build_expr(parts[0]), is_static=_is_static(tree))
	if kind == "free_expr":
		return Free(loc=loc, expr=_build_expr(parts[0]))
	if kind == "assert_expr":
		message = _build_expr(parts[1]) if len(parts) > 1 else None
		return Assert(loc=loc, cond=_build_expr(parts[0]), message=message, is_static=_is_static(tree))
	if kind == "abort_expr":
		return Assert(loc=loc, cond=None, message=_build_expr(parts[0]) if parts else None)
	if kind == "len_expr":
		return Len(loc=loc, value=_build_expr(parts[0]))
	if kind == "size_expr":
		return Size(loc=loc, type_expr=_build_type(parts[0]))
	if kind == "align_expr":
		return Align(loc=loc, type_expr=_build_type(parts[0]))
	if kind == "offset_expr":
		return Offset(loc=loc, value=_build_expr(parts[0]))
	if kind == "vastart_expr":
		return VaStart(loc=loc)
	if kind == "vaarg_expr":
		type_expr = _build_type(parts[1]) if len(parts) > 1 else None
		return VaArg(loc=loc, ap=_build_expr(parts[0]), type_expr=type_expr)
	if kind == "vaend_expr":
		return VaEnd(loc=loc, ap=_build_expr(parts[0]))
	raise NotImplementedError(f"Unsupported expression: {kind}")


def _build_arg_list(tree: Tree) -> tuple[List[Expr], bool]:
	"""`call_args` / `array_items` / `append_values`: values plus trailing `...`."""
	spread = any(isinstance(c, Token) and c.type == "ELLIPSIS" for c in tree.children)
	arg_list = next(c for c in tree.children if isinstance(c, Tree))
	return [_build_expr(arg) for arg in _flatten(arg_list, "arg_list")], spread


def _build_binding(tree: Tree) -> Binding:
	# Left-recursive: the innermost `binding` node carries `static` and the kind.
	items = _flatten(tree, "binding")
	is_static = any(isinstance(c, Token) and c.type == "STATIC" for c in items)
	kind_node = next(c for c in items if isinstance(c, Tree) and _name(c) == "binding_kind")
	bindings = [_build_binding_item(c) for c in items if isinstance(c, Tree) and _name(c) == "binding_item"]
	return Binding(loc=_loc(tree), kind=kind_node.children[0].value, bindings=bindings, is_static=is_static)


def _build_binding_item(tree: Tree) -> BindingItem:
	parts = _subtrees(tree)
	type_expr = _build_type(parts[1]) if len(parts) == 3 else None
	return BindingItem(loc=_loc(tree), name=_binding_name(parts[0]), type_expr=type_expr, init=_build_expr(parts[-1]))


def _binding_name(tree: Tree):
	if _name(tree) == "unpack_target":
		return [tok.value for tok in tree.scan_values(lambda v: isinstance(v, Token) and v.type == "NAME")]
	return tree.children[0].value


def _build_struct_literal(tree: Tree) -> StructLiteral:
	parts = _subtrees(tree)
	alias = None
	if _name(parts[0]) == "ident":
		alias = _ident(parts[0])
		parts = parts[1:]
	fields: list = []
	autofill = False
	for field_node in _flatten(parts[0].children[0], "field_value_list"):
		kind = _name(field_node)
		if kind == "struct_autofill":
			autofill = True
		elif kind == "struct_literal":
			fields.append(_build_struct_literal(field_node))
		else:
			value_parts = _subtrees(field_node)
			type_expr = _build_type(value_parts[0]) if len(value_parts) == 2 else None
			fields.append(
				StructValue(
					loc=_loc(field_node),
					name=field_node.children[0].value,
					type_expr=type_expr,
					init=_build_expr(value_parts[-1]),
				)
			)
	return StructLiteral(loc=_loc(tree), alias=alias, fields=fields, autofill=autofill)


def _build_for(tree: Tree) -> For:
	parts = _subtrees(tree)
	label = None
	if _name(parts[0]) == "label":
		label = _label(parts[0])
		parts = parts[1:]
	header, body_node = parts
	body = _build_expr(body_node)
	kind = _name(header)
	exprs = [_build_expr(p) for p in _subtrees(header)] if kind != "for_each" else []
	if kind == "for_cond":
		return For(loc=_loc(tree), kind=ForKind.ACCUMULATOR, bindings=None, cond=exprs[0], afterthought=None, body=body, label=label)
	if kind == "for_two":
		if isinstance(exprs[0], Binding):
			return For(loc=_loc(tree), kind=ForKind.ACCUMULATOR, bindings=exprs[0], cond=exprs[1], afterthought=None, body=body, label=label)
		return For(loc=_loc(tree), kind=ForKind.ACCUMULATOR, bindings=None, cond=exprs[0], afterthought=exprs[1], body=body, label=label)
	if kind == "for_three":
		bindings = exprs[0]
		if not isinstance(bindings, Binding):
			raise ParseError("for loop initializer must be a binding", loc=bindings.loc)
		return For(loc=_loc(tree), kind=ForKind.ACCUMULATOR, bindings=bindings, cond=exprs[1], afterthought=exprs[2], body=body, label=label)
	if kind == "for_each":
		header_parts = _subtrees(header)
		kind_node, target = header_parts[0], header_parts[1]
		type_expr = _build_type(header_parts[2]) if len(header_parts) == 5 else None
		op = header_parts[-2].children[0].value
		item = BindingItem(loc=_loc(target), name=_binding_name(target), type_expr=type_expr, init=_build_expr(header_parts[-1]))
		bindings = Binding(loc=_loc(header), kind=kind_node.children[0].value, bindings=[item])
		return For(loc=_loc(tree), kind=_FOR_EACH_KINDS[op], bindings=bindings, cond=None, afterthought=None, body=body, label=label)
	raise NotImplementedError(f"Unsupported for loop header: {kind}")


def _build_match_case(tree: Tree) -> MatchCase:
	kind = _name(tree)
	parts = _subtrees(tree)
	exprs = [_build_expr(e) for e in parts[-1].children]
	if kind == "match_binding_case":
		name_tok = tree.children[0]
		return MatchCase(loc=_loc(tree), name=name_tok.value, type_expr=_build_type(parts[0]), exprs=exprs)
	if kind == "match_type_case":
		return MatchCase(loc=_loc(tree), name=None, type_expr=_build_type(parts[0]), exprs=exprs)
	if kind == "match_default_case":
		return MatchCase(loc=_loc(tree), name=None, type_expr=None, exprs=exprs)
	raise NotImplementedError(f"Unsupported match case: {kind}")


def _build_switch_case(tree: Tree) -> SwitchCase:
	parts = _subtrees(tree)
	exprs = [_build_expr(e) for e in parts[-1].children]
	options: List[Expr] = []
	if _name(tree) == "switch_case":
		options = [_build_expr(o) for o in _flatten(parts[0].children[0], "switch_option_list")]
	return SwitchCase(loc=_loc(tree), options=options, exprs=exprs)


# --- helpers ----------------------------------------------------------------


def _flatten(tree: Tree, list_name: str) -> list:
	"""Unroll a left-recursive list rule into its items, in source order."""
	items: list = []
	for child in tree.children:
		if isinstance(child, Tree) and _name(child) == list_name:
			items.extend(_flatten(child, list_name))
		else:
			items.append(child)
	return items


def _subtrees(tree: Tree) -> List[Tree]:
	return [c for c in tree.children if isinstance(c, Tree)]


def _ident(tree: Tree) -> List[str]:
	return [tok.value for tok in tree.scan_values(lambda v: isinstance(v, Token) and v.type == "NAME")]


def _label(tree: Tree) -> str:
	return tree.children[0].value


def _is_static(tree: Tree) -> bool:
	return any(isinstance(c, Token) and c.type == "STATIC" for c in tree.children)


def _string_value(tok: Token) -> str:
	"""Strip the quotes of a STRING token; escapes are kept as written."""
	return tok.value[1:-1]


def _loc(tree: Tree) -> Located:
	meta = tree.meta
	return Located(line=getattr(meta, "line", 0), column=getattr(meta, "column", 0))


def _name(node: Tree | Token) -> str:
	if isinstance(node, Tree):
		data = node.data
		if isinstance(data, Token):
			return data.value
		return data
	if isinstance(node, Token):
		return node.type
	return str(node)
