# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

import io

from hareunused.pipeline import analyze, rewrite
from hareunused.splice import LineRange, import_block, sort_imports, splice


def _rewrite(source: bytes) -> bytes:
	ctx = analyze("main.ha", source)
	out = io.BytesIO()
	rewrite(ctx, io.BytesIO(source), out)
	return out.getvalue()


def test_line_range_is_half_open():
	block = LineRange(2, 4)

	assert 1 not in block
	assert 2 in block and 3 in block
	assert 4 not in block


def test_import_block_spans_first_to_last_directive():
	ctx = analyze("main.ha", b"// header\nuse a;\nuse b::{\n\tc,\n};\nfn f() void = a::g();\n")

	assert import_block(ctx.registry.records) == LineRange(2, 6)
	assert import_block([]) is None


def test_unused_imports_are_dropped_and_rest_preserved():
	source = b"""// SPDX header
// second line

use io;
use fmt;

export fn main() void = {
	fmt::println("hello")!;
};
"""
	expected = b"""// SPDX header
// second line

use fmt;

export fn main() void = {
	fmt::println("hello")!;
};
"""
	assert _rewrite(source) == expected


def test_block_with_comments_and_multiline_members_is_rebuilt_sorted():
	source = b"""use c; // trailing note
// dropped with the block
use a::{
	x,
	y,
};
use b;

fn f() void = b::g(c::h);
"""
	expected = b"""use a::{x, y};
use b;
use c;

fn f() void = b::g(c::h);
"""
	assert _rewrite(source) == expected


def test_missing_final_newline_is_preserved():
	source = b"use a;\nuse b;\n\nfn f() void = b::x();"

	assert _rewrite(source) == b"use b;\n\nfn f() void = b::x();"


def test_last_line_import_without_newline():
	assert _rewrite(b"use b;\nuse a;") == b""
	assert _rewrite(b"use a::*;") == b"use a::*;\n"


def test_file_without_imports_is_copied_unchanged():
	source = b"// nothing to do\nfn f() void = void;\n\n\n"

	assert _rewrite(source) == source


def test_sort_is_by_rendered_path_in_code_point_order():
	source = b"""use zeta;
use a::b;
use a;
use Alpha;
use m;

fn f() void = {
	zeta::x();
	a::b::c();
	a::y();
	Alpha::z();
	m::q();
};
"""
	out = _rewrite(source)

	assert out.split(b"\n\n")[0] == b"use Alpha;\nuse a;\nuse a::b;\nuse m;\nuse zeta;"


def test_duplicate_paths_are_kept_adjacent():
	out = _rewrite(b"use b;\nuse a;\nuse b;\n\nfn f() void = b::x(a::y);\n")

	assert out == b"use a;\nuse b;\nuse b;\n\nfn f() void = b::x(a::y);\n"


def test_rewrite_is_idempotent():
	source = b"""use strings;
use io;
use fmt;
use os::*;

fn main() void = {
	const s = strings::concat("a", "b");
	fmt::println(s)!;
};
"""
	once = _rewrite(source)

	assert once != source
	assert _rewrite(once) == once


def test_invalid_utf8_line_truncates_output():
	valid = b"use a;\nuse b;\nfn f() void = a::x();\n"
	ctx = analyze("main.ha", valid)
	out = io.BytesIO()

	splice(
		io.BytesIO(valid + b"\xff\xfe\nnever written\n"),
		ctx.block,
		sort_imports(ctx.registry),
		out,
	)

	assert out.getvalue() == b"use a;\nfn f() void = a::x();\n"


def test_splice_without_block_copies_input():
	out = io.BytesIO()

	splice(io.BytesIO(b"a\nb"), None, [], out)

	assert out.getvalue() == b"a\nb"


def test_splice_without_block_keeps_invalid_utf8():
	source = b"fn f() void = void;\n\xff\xfe\n"
	out = io.BytesIO()

	splice(io.BytesIO(source), None, [], out)

	assert out.getvalue() == source


def test_crlf_block_keeps_crlf_terminators():
	source = b"use b;\r\nuse a;\r\n\r\nfn f() void = a::x();\r\n"

	assert _rewrite(source) == b"use a;\r\n\r\nfn f() void = a::x();\r\n"
