# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Unused-import remover for Hare sources (`hare-unused`).

The pipeline lives in `hareunused.pipeline`; the CLI entrypoint is
`hareunused.unused:main`.
"""

__all__ = []
