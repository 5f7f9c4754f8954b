"""Patch script lexer: splits one script line into raw string tokens.

The lexer is a single-pass character scanner over one line.  It knows
nothing about verbs, operations or parameters; it only decides where
tokens start and end.

Rules
-----
- Whitespace separates tokens.
- A token that *starts* with ``"`` or ``'`` is a quoted span: the quotes
  are stripped and internal whitespace is preserved.
- A token of the form ``key="..."`` (quote directly after the first
  ``=``) is also a quoted span; the result is ``key=...`` with the
  quotes stripped.
- Inside a quoted span, ``\\"``, ``\\'`` and ``\\\\`` are unescaped; any
  other backslash is kept literally.
- A quote anywhere else inside a token is an ordinary character.
- A closing quote ends the token even when non-whitespace follows it.

Blank lines and ``#`` comment lines never reach the lexer; the parser
filters them out first.
"""
from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from typing import Final

from patchlang.errors import LexError

_QUOTES: Final[frozenset[str]] = frozenset({'"', "'"})
_ESCAPABLE: Final[frozenset[str]] = frozenset({'"', "'", "\\"})


class Lexer:
    """Single-pass tokenizer for one patch script line.

    Parameters
    ----------
    line:
        A trimmed, non-empty, non-comment script line.
    """

    __slots__ = ("_line", "_pos", "_tokens")

    def __init__(self, line: str) -> None:
        self._line: str = line
        self._pos: int = 0
        self._tokens: list[str] = []

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def tokenize(self) -> list[str]:
        """Scan the whole line and return its tokens in order.

        Raises
        ------
        LexError
            If a quoted span is never closed.
        """
        while self._pos < len(self._line):
            if self._current().isspace():
                self._pos += 1
                continue
            self._scan_token()
        return self._tokens

    # ------------------------------------------------------------------
    # Internal scanner
    # ------------------------------------------------------------------

    def _current(self) -> str:
        return self._line[self._pos] if self._pos < len(self._line) else ""

    def _scan_token(self) -> None:
        ch = self._current()
        if ch in _QUOTES:
            self._tokens.append(self._scan_quoted())
            return

        buf: list[str] = []
        seen_eq = False
        while self._pos < len(self._line):
            ch = self._current()
            if ch.isspace():
                break
            if ch == "=" and not seen_eq:
                seen_eq = True
                buf.append(ch)
                self._pos += 1
                if self._current() in _QUOTES:
                    buf.append(self._scan_quoted())
                    break
                continue
            buf.append(ch)
            self._pos += 1
        self._tokens.append("".join(buf))

    def _scan_quoted(self) -> str:
        """Consume a quoted span starting at the current quote character."""
        quote = self._current()
        start_col = self._pos + 1
        self._pos += 1  # opening quote
        buf: list[str] = []
        while self._pos < len(self._line):
            ch = self._current()
            if ch == quote:
                self._pos += 1  # closing quote
                return "".join(buf)
            if ch == "\\" and self._pos + 1 < len(self._line):
                nxt = self._line[self._pos + 1]
                if nxt in _ESCAPABLE:
                    buf.append(nxt)
                    self._pos += 2
                    continue
            buf.append(ch)
            self._pos += 1
        raise LexError(f"unterminated quoted value (missing {quote})", start_col)


# ---------------------------------------------------------------------------
# Argument splitting
# ---------------------------------------------------------------------------


@dataclass
class SplitArguments:
    """Tokens partitioned into named and positional arguments.

    ``positional`` is a queue: the binder pops from the left in
    parameter order.
    """

    named: dict[str, str] = field(default_factory=dict)
    positional: deque[str] = field(default_factory=deque)


def split_arguments(tokens: list[str]) -> SplitArguments:
    """Classify each token as named (``key=value``) or positional.

    A token is named when it contains ``=`` at an index greater than
    zero; the key is the text before the first ``=`` and the value the
    text after it, both stripped.  A later duplicate key overwrites an
    earlier one.  Every other token is positional, kept in encounter
    order.
    """
    result = SplitArguments()
    for token in tokens:
        eq = token.find("=")
        if eq > 0:
            result.named[token[:eq].strip()] = token[eq + 1 :].strip()
        else:
            result.positional.append(token)
    return result


# ---------------------------------------------------------------------------
# Module-level convenience function
# ---------------------------------------------------------------------------


def tokenize(line: str) -> list[str]:
    """Tokenize one patch script line.

    Example
    -------
    ::

        from patchlang.lexer import tokenize
        tokenize('rename channel 111111111111111111 name="Lounge Room"')
        # ['rename', 'channel', '111111111111111111', 'name=Lounge Room']
    """
    return Lexer(line).tokenize()
