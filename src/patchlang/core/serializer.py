"""Serialization of ``ParseResult`` objects to JSON and YAML.

Used by ``patchlang parse`` to dump what a script resolves to.  The
serialized form is a plain dict/list structure::

    {
      "ok": true,
      "actions": [{"line": 1, "verb": "rename", "type": "channel",
                   "handler": "channel.rename", "destructive": false,
                   "arguments": {"id": "...", "name": "..."}}],
      "diagnostics": [{"severity": "ERROR", "code": "PL002", ...}]
    }
"""
from __future__ import annotations

import json
from typing import Any

import yaml

from patchlang.core.diagnostics import Diagnostic
from patchlang.core.models import Action, ParseResult


class ParseResultSerializer:
    """Converts ``ParseResult`` objects to plain dicts, JSON or YAML."""

    def to_dict(self, result: ParseResult) -> dict[str, Any]:
        return {
            "ok": result.ok,
            "actions": [self._action_to_dict(a) for a in result.actions],
            "diagnostics": [self._diagnostic_to_dict(d) for d in result.diagnostics],
        }

    def _action_to_dict(self, action: Action) -> dict[str, Any]:
        return {
            "line": action.line,
            "verb": action.verb,
            "type": action.resource_type,
            "handler": action.handler_id,
            "destructive": action.destructive,
            "arguments": dict(action.arguments),
        }

    def _diagnostic_to_dict(self, diagnostic: Diagnostic) -> dict[str, Any]:
        data: dict[str, Any] = {
            "severity": diagnostic.severity.name,
            "code": diagnostic.code,
            "line": diagnostic.line,
            "message": diagnostic.message,
        }
        if diagnostic.suggestion:
            data["suggestion"] = diagnostic.suggestion
        return data

    def to_json(self, result: ParseResult, indent: int = 2) -> str:
        return json.dumps(self.to_dict(result), indent=indent, ensure_ascii=False)

    def to_yaml(self, result: ParseResult) -> str:
        return yaml.safe_dump(self.to_dict(result), sort_keys=False, allow_unicode=True)
