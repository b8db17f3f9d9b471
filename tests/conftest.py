"""Pytest configuration.

`envline` is expected to be installed (`pip install -e .[test]`). We
intentionally do not prepend `ROOT/src` to `sys.path`, to avoid testing a
different copy than the installed one by accident.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from envline import Line

RESOURCES = Path(__file__).resolve().parent / "resources"


@pytest.fixture
def env_test_path() -> Path:
    return RESOURCES / "env.test"


@pytest.fixture
def env_test_bytes(env_test_path: Path) -> bytes:
    return env_test_path.read_bytes()


@pytest.fixture
def expected_lines() -> list[Line]:
    # Expected parse of resources/env.test.
    return [
        Line("NODE_ENV", "development"),
        Line("BASIC", "basic"),
        Line("AFTER_LINE", "after_line"),
        Line("UNDEFINED_EXPAND", "$TOTALLY_UNDEFINED_ENV_KEY"),
        Line("EMPTY", ""),
        Line("SINGLE_QUOTES", "single_quotes"),
        Line("DOUBLE_QUOTES", "double_quotes"),
        Line("EXPAND_NEWLINES", "expand\nnewlines"),
        Line("DONT_EXPAND_NEWLINES_1", "dontexpand\\nnewlines"),
        Line("DONT_EXPAND_NEWLINES_2", "dontexpand\\nnewlines"),
        Line("EQUAL_SIGNS", "equals=="),
        Line("RETAIN_INNER_QUOTES", '{"foo": "bar"}'),
        Line("RETAIN_INNER_QUOTES_AS_STRING", '{"foo": "bar"}'),
        Line("INCLUDE_SPACE", "some spaced out string"),
        Line("USERNAME", "therealnerdybeast@example.tld"),
    ]
