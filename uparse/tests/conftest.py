# uparse/tests/conftest.py
from __future__ import annotations
from typing import Any

import pytest

from uparse import ParseSession, load_rules


def _rules(rules: Any) -> Any:
    return load_rules(rules) if isinstance(rules, str) else rules


@pytest.fixture
def run():
    """run(input, rules, **options) -> ParseOutcome; ``rules`` may be rule text."""
    def _run(input: Any, rules: Any, **options):
        return ParseSession(input, _rules(rules), **options).run()
    return _run


@pytest.fixture
def rules_file(tmp_path):
    """Write rule source to a file and return its path as a string."""
    def _write(src: str, name: str = "rules.r") -> str:
        path = tmp_path / name
        path.write_text(src, encoding="utf-8")
        return str(path)
    return _write
