from __future__ import annotations

import threading
from functools import cache
from typing import Any, Protocol, cast

import tree_sitter_javascript
from tree_sitter import Language, Parser


class SyntaxTree(Protocol):
    # tree-sitter Tree exposes `root_node`; we treat nodes structurally.
    root_node: Any


class TreeSitterError(RuntimeError):
    """Raised when the JavaScript grammar cannot be loaded or source cannot be parsed."""


@cache
def _javascript() -> Language:
    try:
        return Language(tree_sitter_javascript.language())
    except (TypeError, ValueError, RuntimeError) as exc:  # pragma: no cover (depends on installed grammar)
        raise TreeSitterError("tree-sitter JavaScript grammar failed to load") from exc


_PARSER_LOCAL = threading.local()


def _parser() -> Parser:
    """
    Return this thread's JavaScript parser.

    tree-sitter Parser objects must not be shared between threads, so each
    worker thread builds its own on first use.
    """

    parser: Parser | None = getattr(_PARSER_LOCAL, "parser", None)
    if parser is None:
        parser = Parser(_javascript())
        _PARSER_LOCAL.parser = parser
    return parser


def parse(source: str) -> SyntaxTree:
    """
    Parse JavaScript source.

    tree-sitter recovers from syntax errors, so a tree is returned even for
    broken input; check `tree.root_node.has_error` to detect that case.
    """

    try:
        tree = _parser().parse(source.encode("utf-8", errors="replace"))
    except (ValueError, TypeError, RuntimeError) as exc:  # pragma: no cover (parser internals)
        raise TreeSitterError("tree-sitter failed to parse JavaScript source") from exc
    return cast(SyntaxTree, tree)
