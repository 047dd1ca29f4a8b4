from __future__ import annotations

import threading
from concurrent.futures import ThreadPoolExecutor

import strictlines.engine.tree_sitter as ts


def test_parser_is_reused_per_thread(monkeypatch) -> None:
    class DummyParser:
        def __init__(self, language: object) -> None:
            self.language = language

        def parse(self, _source: bytes) -> int:
            return id(self)

    monkeypatch.setattr(ts, "Parser", DummyParser)
    monkeypatch.setattr(ts, "_javascript", lambda: object())
    monkeypatch.setattr(ts, "_PARSER_LOCAL", threading.local())

    assert ts.parse("var a;") == ts.parse("var b;")

    barrier = threading.Barrier(2)

    def worker() -> int:
        barrier.wait()
        return int(ts.parse("var a;"))  # type: ignore[call-overload]

    with ThreadPoolExecutor(max_workers=2) as executor:
        a, b = list(executor.map(lambda _: worker(), range(2)))

    assert a != b


def test_parse_recovers_from_syntax_errors() -> None:
    tree = ts.parse("function (")
    assert tree.root_node.has_error
    assert not ts.parse("'use strict';\n").root_node.has_error
