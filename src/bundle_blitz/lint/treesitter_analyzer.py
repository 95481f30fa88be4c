"""Static analysis of JavaScript bundles on top of tree-sitter.

Reports parse errors plus a handful of rules in the spirit of the usual
browser lint presets: ``no-debugger``, ``no-console`` and ``eqeqeq``.
Severities follow the ESLint convention (2 = error, 1 = warning).
"""

from __future__ import annotations

from typing import cast

from tree_sitter import Node, Parser
from tree_sitter_language_pack import SupportedLanguage, get_parser

from bundle_blitz.core.exceptions import CollaboratorError
from bundle_blitz.models import StaticLintMessage

_LOOSE_EQUALITY = {"==": "===", "!=": "!=="}


def _line(node: Node) -> int:
    return node.start_point[0] + 1


def _check_call(node: Node) -> StaticLintMessage | None:
    function = node.child_by_field_name("function")
    if function is None or function.type != "member_expression":
        return None
    target = function.child_by_field_name("object")
    if target is None or target.type != "identifier" or target.text != b"console":
        return None
    return StaticLintMessage(line=_line(node), severity=1, message="Unexpected console statement.", rule_id="no-console")


def _check_binary(node: Node) -> StaticLintMessage | None:
    operator = node.child_by_field_name("operator")
    if operator is None or operator.type not in _LOOSE_EQUALITY:
        return None
    return StaticLintMessage(
        line=_line(node),
        severity=1,
        message=f"Expected '{_LOOSE_EQUALITY[operator.type]}' and instead saw '{operator.type}'.",
        rule_id="eqeqeq",
    )


class TreeSitterAnalyzer:
    def __init__(self, language: str = "javascript") -> None:
        self._language = language
        self._parser: Parser | None = None

    def _get_parser(self) -> Parser:
        if self._parser is None:
            try:
                self._parser = get_parser(cast(SupportedLanguage, self._language))
            except Exception as exc:  # language pack raises LookupError or its own errors
                raise CollaboratorError(f"No tree-sitter grammar for '{self._language}': {exc}") from exc
        return self._parser

    def verify(self, code: str) -> list[StaticLintMessage]:
        tree = self._get_parser().parse(code.encode("utf-8"))
        messages: list[StaticLintMessage] = []
        stack = [tree.root_node]
        while stack:
            node = stack.pop()
            if node.type == "ERROR":
                messages.append(
                    StaticLintMessage(line=_line(node), severity=2, message="Parsing error.", rule_id="syntax")
                )
                continue
            if node.is_missing:
                messages.append(
                    StaticLintMessage(
                        line=_line(node), severity=2, message=f"Missing '{node.type}'.", rule_id="syntax"
                    )
                )
                continue
            if node.type == "debugger_statement":
                messages.append(
                    StaticLintMessage(
                        line=_line(node), severity=2, message="Unexpected 'debugger' statement.", rule_id="no-debugger"
                    )
                )
            elif node.type == "call_expression":
                found = _check_call(node)
                if found:
                    messages.append(found)
            elif node.type == "binary_expression":
                found = _check_binary(node)
                if found:
                    messages.append(found)
            stack.extend(reversed(node.children))
        return sorted(messages, key=lambda m: m.line)
