#!/usr/bin/env python3
"""
Source preprocessing: embedded input split, comment stripping, bracket checks.
"""

import sys
import os
sys.path.append(os.path.join(os.path.dirname(__file__), '..', 'src'))

import pytest

from gamefuck.errors import PreprocessError, UnmatchedBracketError, UnmatchedCommentError
from gamefuck.lexer import check_brackets, preprocess, split_input, strip_source


def test_split_on_first_bang():
    assert split_input("+.!abc") == ("+.", b"abc")
    assert split_input(",!a!b") == (",", b"a!b")
    assert split_input("!") == ("", b"")


def test_no_bang_means_stdin():
    assert split_input("+.") == ("+.", None)


def test_strip_whitespace_and_nested_comments():
    code, warnings = strip_source("+ + {comment {nested} still\n} -\n\t.")
    assert code == "++-."
    assert warnings == []


def test_strip_is_identity_without_whitespace_or_comments():
    src = "+-<>[].,#p:;rludP'xyz"
    assert strip_source(src) == (src, [])


def test_comment_hides_brackets():
    program = preprocess("{]]}+{[}")
    assert program.source == "+"


def test_unmatched_close_comment_is_fatal():
    with pytest.raises(UnmatchedCommentError) as exc:
        strip_source("++}--")
    assert exc.value.position == 2
    assert str(exc.value).startswith("unmatched }")


def test_unmatched_open_comment_only_warns():
    code, warnings = strip_source("+ . { - never closed")
    assert code == "+."
    assert warnings == ["unmatched {"]


def test_unmatched_close_bracket():
    with pytest.raises(UnmatchedBracketError) as exc:
        check_brackets("+][")
    assert exc.value.position == 1
    assert str(exc.value).startswith("unmatched ]")


def test_unmatched_open_bracket():
    with pytest.raises(UnmatchedBracketError) as exc:
        check_brackets("[[]+")
    assert exc.value.position == 0
    assert str(exc.value).startswith("unmatched [")


def test_bracket_errors_are_preprocess_errors():
    with pytest.raises(PreprocessError):
        preprocess("]")


def test_error_message_has_context_and_hint():
    with pytest.raises(UnmatchedBracketError) as exc:
        preprocess("++++]")
    text = str(exc.value)
    assert "offset 4" in text
    assert "++++]" in text
    assert "    ^" in text
    assert "Hint:" in text


def test_preprocess_pipeline():
    program = preprocess("{read} , .\n[-]!Hi there")
    assert program.source == ",.[-]"
    assert program.embedded_input == b"Hi there"
    assert program.warnings == ()


def test_bang_splits_before_comments_are_seen():
    program = preprocess("+{!}")
    assert program.source == "+"
    assert program.embedded_input == b"}"
    assert program.warnings == ("unmatched {",)
