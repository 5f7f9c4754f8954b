#!/usr/bin/env python3
"""Example: Quickstart for patchlang

Minimal working example: parse a patch script against the built-in
operation map and print the resolved actions and diagnostics.

Usage:
    python examples/01_quickstart.py

Requirements:
    pip install patchlang
"""
from __future__ import annotations

import patchlang

SCRIPT = '''
# Tidy up the text channels
rename channel 700000000000000002 "general chat"
topic channel 700000000000000003 topic="Anything goes"
perm:set channel=700000000000000002 role=700000000000000010 allow=ManageMessages,ViewChannel
slowmode channel 700000000000000003 fast
frobnicate channel 700000000000000004
'''


def main() -> None:
    print(f"patchlang version: {patchlang.__version__}")

    # Step 1: Parse the script; nothing touches a graph yet
    result = patchlang.parse(SCRIPT)
    print(f"Resolved {len(result.actions)} action(s), ok={result.ok}")
    for action in result.actions:
        args = ", ".join(f"{k}={v!r}" for k, v in action.arguments.items())
        print(f"  L{action.line} {action.handler_id}({args})")

    # Step 2: Diagnostics carry a stable code, a line and an optional hint
    for diag in result.diagnostics:
        hint = f" (hint: {diag.suggestion})" if diag.suggestion else ""
        print(f"  [{diag.severity.name}] {diag.code} line {diag.line}: {diag.message}{hint}")


if __name__ == "__main__":
    main()
