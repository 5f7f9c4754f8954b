"""Patch script lexer module.

Exports the ``Lexer`` class, the ``tokenize`` convenience function and
the argument splitter.
"""
from __future__ import annotations

from patchlang.errors import LexError
from patchlang.lexer.lexer import Lexer, SplitArguments, split_arguments, tokenize

__all__ = ["Lexer", "tokenize", "LexError", "SplitArguments", "split_arguments"]
