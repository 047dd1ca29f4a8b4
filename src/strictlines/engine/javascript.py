from __future__ import annotations

import re
from bisect import bisect_left
from collections.abc import Iterator
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any

from strictlines.engine.nodes import (
    BlockStatement,
    Comment,
    CommentKind,
    Expression,
    ExpressionStatement,
    FunctionKind,
    FunctionLike,
    Literal,
    OtherExpression,
    OtherStatement,
    Program,
    Scope,
    Span,
    Statement,
    Token,
)
from strictlines.engine.source import SourceCode
from strictlines.engine.tree_sitter import SyntaxTree, parse

_COMMENT_TYPES = {"comment", "html_comment"}
_HASH_BANG = "hash_bang_line"

# tree-sitter node type -> ESTree function type. Method bodies are
# FunctionExpressions in ESTree.
_FUNCTION_KINDS: dict[str, FunctionKind] = {
    "function_declaration": "FunctionDeclaration",
    "generator_function_declaration": "FunctionDeclaration",
    "function_expression": "FunctionExpression",
    "function": "FunctionExpression",
    "generator_function": "FunctionExpression",
    "method_definition": "FunctionExpression",
    "arrow_function": "ArrowFunctionExpression",
}

_ESTREE_TYPES = {
    "lexical_declaration": "VariableDeclaration",
    "statement_block": "BlockStatement",
    "string": "Literal",
    "number": "Literal",
    "true": "Literal",
    "false": "Literal",
    "null": "Literal",
    "regex": "Literal",
    "template_string": "TemplateLiteral",
    "ERROR": "Error",
}

_KEYWORD_LITERALS: dict[str, object] = {"true": True, "false": False, "null": None}


@dataclass(frozen=True, slots=True)
class ParsedSource:
    program: Program
    scopes: tuple[Scope, ...]  # source order, program first
    source_code: SourceCode
    has_syntax_errors: bool = False


def parse_javascript(text: str) -> ParsedSource:
    return build_parsed_source(parse(text), text)


def build_parsed_source(tree: SyntaxTree, text: str) -> ParsedSource:
    """
    Convert a tree-sitter JavaScript tree into the ESTree-shaped node model.

    Comments are attached the way ESLint's parser attaches them to statements:
    a comment between two sibling statements is trailing for the first and
    leading for the second; comments between the opening of a body (start of
    file or `{`) and its first statement lead that statement.
    """

    return _Builder(text.encode("utf-8", errors="replace")).build(tree.root_node)


class _Builder:
    def __init__(self, source: bytes) -> None:
        self._source = source
        self._tokens: list[Token] = []
        self._comments: list[Comment] = []
        self._leading: dict[object, tuple[Comment, ...]] = {}
        self._trailing: dict[object, tuple[Comment, ...]] = {}
        self._token_starts: list[int] = []
        self._comment_starts: list[int] = []

    def build(self, root: Any) -> ParsedSource:
        self._collect_lexemes(root)
        self._token_starts = [t.span.start_offset for t in self._tokens]
        self._comment_starts = [c.span.start_offset for c in self._comments]

        program = Program(
            body=self._body(root, region=(0, len(self._source))),
            span=_span(root),
        )
        scopes: list[Scope] = [program]
        for node in _iter_nodes(root):
            kind = _FUNCTION_KINDS.get(node.type)
            if kind is not None and node.is_named:
                scopes.append(self._function(node, kind))

        source_code = SourceCode(
            tokens=tuple(self._tokens),
            leading=MappingProxyType(self._leading),
            trailing=MappingProxyType(self._trailing),
            comments=tuple(self._comments),
        )
        return ParsedSource(
            program=program,
            scopes=tuple(scopes),
            source_code=source_code,
            has_syntax_errors=bool(getattr(root, "has_error", False)),
        )

    def _collect_lexemes(self, root: Any) -> None:
        for node in _iter_nodes(root):
            if node.type in _COMMENT_TYPES or node.type == _HASH_BANG:
                self._comments.append(self._comment(node))
                continue
            if node.children or node.start_byte >= node.end_byte:
                continue
            self._tokens.append(Token(type=node.type, value=self._text(node), span=_span(node)))

    def _comment(self, node: Any) -> Comment:
        text = self._text(node)
        kind: CommentKind
        if node.type == _HASH_BANG:
            kind, value = "Shebang", text[2:]
        elif text.startswith("/*"):
            kind, value = "Block", text[2:-2]
        elif text.startswith("<!--"):
            kind, value = "Line", text[4:]
        elif text.startswith("-->"):
            kind, value = "Line", text[3:]
        else:
            kind, value = "Line", text[2:]
        return Comment(kind=kind, value=value, span=_span(node))

    def _function(self, node: Any, kind: FunctionKind) -> FunctionLike:
        name_node = node.child_by_field_name("name")
        body_node = node.child_by_field_name("body")
        body: BlockStatement | Expression
        if body_node is None:
            body = BlockStatement(body=(), span=_span(node))
        elif body_node.type == "statement_block":
            body = BlockStatement(body=self._body(body_node, region=_block_region(body_node)), span=_span(body_node))
        else:
            body = self._expression(body_node)
        return FunctionLike(
            kind=kind,
            body=body,
            span=_span(node),
            name=self._text(name_node) if name_node is not None else None,
        )

    def _body(self, container: Any, *, region: tuple[int, int]) -> tuple[Statement, ...]:
        nodes = [
            child
            for child in container.named_children
            if child.type not in _COMMENT_TYPES and child.type != _HASH_BANG
        ]
        statements = tuple(self._statement(n) for n in nodes)

        region_start, region_end = region
        for idx, stmt in enumerate(statements):
            prev_end = statements[idx - 1].span.end_offset if idx > 0 else region_start
            next_start = statements[idx + 1].span.start_offset if idx + 1 < len(statements) else region_end
            leading = self._comments_between(prev_end, stmt.span.start_offset)
            trailing = self._comments_between(stmt.span.end_offset, next_start)
            if leading:
                self._leading[stmt] = leading
            if trailing:
                self._trailing[stmt] = trailing
        return statements

    def _comments_between(self, start: int, end: int) -> tuple[Comment, ...]:
        found: list[Comment] = []
        idx = bisect_left(self._comment_starts, start)
        while idx < len(self._comments):
            comment = self._comments[idx]
            if comment.span.end_offset > end:
                break
            found.append(comment)
            idx += 1
        return tuple(found)

    def _statement(self, node: Any) -> Statement:
        span = self._content_span(node)
        if node.type == "expression_statement":
            expr_nodes = [c for c in node.named_children if c.type not in _COMMENT_TYPES]
            if expr_nodes:
                return ExpressionStatement(expression=self._expression(expr_nodes[0]), span=span)
        return OtherStatement(kind=_estree_type(node.type), span=span)

    def _expression(self, node: Any) -> Expression:
        while node.type == "parenthesized_expression":
            inner = [c for c in node.named_children if c.type not in _COMMENT_TYPES]
            if not inner:
                break
            node = inner[0]

        if node.type == "string":
            raw = self._text(node)
            return Literal(value=_cook_string(raw), raw=raw, span=_span(node))
        if node.type in _KEYWORD_LITERALS:
            return Literal(value=_KEYWORD_LITERALS[node.type], raw=self._text(node), span=_span(node))
        kind = _FUNCTION_KINDS.get(node.type)
        return OtherExpression(kind=kind or _estree_type(node.type), span=_span(node))

    def _content_span(self, node: Any) -> Span:
        """
        Span from the first to the last non-comment token inside `node`.

        tree-sitter may fold adjacent comments into a statement node; ESTree
        statement locations never include them.
        """

        first = bisect_left(self._token_starts, node.start_byte)
        last = bisect_left(self._token_starts, node.end_byte) - 1
        if first > last:
            return _span(node)
        start = self._tokens[first].span
        end = self._tokens[last].span
        return Span(
            start_line=start.start_line,
            start_col=start.start_col,
            end_line=end.end_line,
            end_col=end.end_col,
            start_offset=start.start_offset,
            end_offset=end.end_offset,
        )

    def _text(self, node: Any) -> str:
        return self._source[node.start_byte : node.end_byte].decode("utf-8", errors="replace")


def _iter_nodes(node: Any) -> Iterator[Any]:
    stack = [node]
    while stack:
        n = stack.pop()
        yield n
        stack.extend(reversed(getattr(n, "children", [])))


def _span(node: Any) -> Span:
    start_row, start_col = node.start_point
    end_row, end_col = node.end_point
    return Span(
        start_line=start_row + 1,
        start_col=start_col + 1,
        end_line=end_row + 1,
        end_col=end_col + 1,
        start_offset=node.start_byte,
        end_offset=node.end_byte,
    )


def _block_region(block: Any) -> tuple[int, int]:
    children = block.children
    start = children[0].end_byte if children and children[0].type == "{" else block.start_byte
    end = children[-1].start_byte if children and children[-1].type == "}" else block.end_byte
    return start, end


def _estree_type(ts_type: str) -> str:
    mapped = _ESTREE_TYPES.get(ts_type)
    if mapped is not None:
        return mapped
    return "".join(part.capitalize() for part in ts_type.split("_"))


_SINGLE_CHAR_ESCAPES = {"b": "\b", "f": "\f", "n": "\n", "r": "\r", "t": "\t", "v": "\v"}
_ESCAPE_RE = re.compile(
    r"\\(?:"
    r"x(?P<hex2>[0-9a-fA-F]{2})"
    r"|u\{(?P<code_point>[0-9a-fA-F]+)\}"
    r"|u(?P<hex4>[0-9a-fA-F]{4})"
    r"|(?P<octal>[0-3][0-7]{0,2}|[4-7][0-7]?)"
    r"|(?P<line_break>\r\n|[\n\r\u2028\u2029])"
    r"|(?P<char>[\s\S])"
    r")"
)


def _unescape(match: re.Match[str]) -> str:
    if match["hex2"] or match["hex4"]:
        return chr(int(match["hex2"] or match["hex4"], 16))
    if match["code_point"]:
        code_point = int(match["code_point"], 16)
        return chr(code_point) if code_point <= 0x10FFFF else match[0]
    if match["octal"]:
        return chr(int(match["octal"], 8))
    if match["line_break"]:
        # Line continuation.
        return ""
    char = match["char"]
    return _SINGLE_CHAR_ESCAPES.get(char, char)


def _cook_string(raw: str) -> str:
    """
    Return the value of a JavaScript string literal given its source text.

    Any escape JavaScript does not define (`\\d`, `\\N`, `\\U`) stands for the
    escaped character itself.
    """

    return _ESCAPE_RE.sub(_unescape, raw[1:-1])
