from __future__ import annotations

import pytest

from strictlines.engine.javascript import parse_javascript
from strictlines.engine.nodes import BlockStatement, ExpressionStatement, Literal, OtherStatement, scope_body


def _literal_value(code: str) -> object:
    stmt = parse_javascript(code).program.body[0]
    assert isinstance(stmt, ExpressionStatement)
    assert isinstance(stmt.expression, Literal)
    return stmt.expression.value


def test_scopes_are_listed_in_source_order() -> None:
    code = (
        "function a() {}\n"
        "var b = function () {};\n"
        "var c = () => 1;\n"
        "class D { m() {} }\n"
        "function* e() {}\n"
    )
    parsed = parse_javascript(code)
    assert [s.type for s in parsed.scopes] == [
        "Program",
        "FunctionDeclaration",
        "FunctionExpression",
        "ArrowFunctionExpression",
        "FunctionExpression",
        "FunctionDeclaration",
    ]
    assert parsed.scopes[1].name == "a"  # type: ignore[union-attr]


def test_arrow_expression_body_has_no_statements() -> None:
    parsed = parse_javascript('() => "use strict";')
    arrow = parsed.scopes[1]
    assert arrow.type == "ArrowFunctionExpression"
    assert scope_body(arrow) is None
    assert isinstance(arrow.body, Literal)  # type: ignore[union-attr]


def test_program_body_excludes_comments() -> None:
    parsed = parse_javascript("// a\n'use strict';\n/* b */\nvar foo;\n")
    body = parsed.program.body
    assert len(body) == 2
    assert isinstance(body[0], ExpressionStatement)
    assert isinstance(body[1], OtherStatement)
    assert body[1].type == "VariableDeclaration"


def test_directive_literal_value_and_span() -> None:
    parsed = parse_javascript("\n  'use strict';\n")
    stmt = parsed.program.body[0]
    assert isinstance(stmt, ExpressionStatement)
    assert isinstance(stmt.expression, Literal)
    assert stmt.expression.value == "use strict"
    assert stmt.expression.raw == "'use strict'"
    assert (stmt.span.start_line, stmt.span.start_col, stmt.span.end_line) == (2, 3, 2)


@pytest.mark.parametrize(
    ("code", "value"),
    [
        (r"'use\x20strict';", "use strict"),
        (r"'use strict';", "use strict"),
        (r"'use\u{20}strict';", "use strict"),
        (r"'use\u{0000020}strict';", "use strict"),
        (r"'use\40strict';", "use strict"),
        (r"'a\tb\n';", "a\tb\n"),
        (r"'\0';", "\0"),
        (r"'\'';", "'"),
        (r'"\d\8";', "d8"),
        ("'use \\\nstrict';", "use strict"),
        ("'use \\\r\nstrict';", "use strict"),
    ],
)
def test_javascript_escapes_are_cooked(code: str, value: str) -> None:
    assert _literal_value(code) == value


@pytest.mark.parametrize(
    ("code", "value"),
    [
        (r"'use\N{SPACE}strict';", "useN{SPACE}strict"),
        (r"'use\U00000020strict';", "useU00000020strict"),
        (r"'\a';", "a"),
    ],
)
def test_escapes_javascript_does_not_define_stand_for_the_character(code: str, value: str) -> None:
    assert _literal_value(code) == value


def test_parenthesized_string_is_unwrapped() -> None:
    parsed = parse_javascript("('use strict');\n")
    stmt = parsed.program.body[0]
    assert isinstance(stmt, ExpressionStatement)
    assert isinstance(stmt.expression, Literal)


def test_leading_and_trailing_comments_are_attached_between_siblings() -> None:
    parsed = parse_javascript("#!/usr/bin/env node\n// a\n'use strict';\n// b\n/* c */\nvar foo;\n")
    source = parsed.source_code
    directive, declaration = parsed.program.body

    leading = source.leading_comments(directive)
    assert [c.kind for c in leading] == ["Shebang", "Line"]
    assert [c.span.start_line for c in leading] == [1, 2]

    trailing = source.trailing_comments(directive)
    assert [(c.kind, c.value) for c in trailing] == [("Line", " b"), ("Block", " c ")]
    assert [c.value for c in source.leading_comments(declaration)] == [" b", " c "]
    assert source.trailing_comments(declaration) == ()
    assert [c.value for c in source.comments] == ["/usr/bin/env node", " a", " b", " c "]


def test_comments_outside_a_function_body_do_not_lead_its_statements() -> None:
    parsed = parse_javascript("/** doc */\nfunction foo() {\n  // inner\n  'use strict';\n}\n")
    fn = parsed.scopes[1]
    assert isinstance(fn.body, BlockStatement)  # type: ignore[union-attr]
    directive = fn.body.body[0]  # type: ignore[union-attr]
    assert [c.value for c in parsed.source_code.leading_comments(directive)] == [" inner"]
    # The closing brace is the next token, but the directive is the last statement.
    token = parsed.source_code.token_after(directive)
    assert token is not None
    assert token.value == "}"
    assert token.span.start_line == 5


def test_token_after_skips_comments() -> None:
    parsed = parse_javascript("'use strict'; // note\n\nfoo();\n")
    directive = parsed.program.body[0]
    token = parsed.source_code.token_after(directive)
    assert token is not None
    assert token.value == "foo"
    assert token.span.start_line == 3


def test_syntax_errors_are_reported_but_tree_is_built() -> None:
    parsed = parse_javascript("'use strict';\nvar = ;\n")
    assert parsed.has_syntax_errors is True
    assert parsed.program.body
    assert parse_javascript("'use strict';\n").has_syntax_errors is False
