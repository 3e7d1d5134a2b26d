from __future__ import annotations

from topic_tags.tags import (
    TAG_PATTERN,
    find_all_tags,
    format_tag_marker,
    format_tag_pattern,
    indexer_regex_rule,
    is_valid_tag_value,
)


def test_tag_pattern_requires_whitespace_on_both_sides() -> None:
    assert TAG_PATTERN.search("<:tight:>") is None
    assert TAG_PATTERN.search("<: left:>") is None
    assert TAG_PATTERN.search("<:right :>") is None
    match = TAG_PATTERN.search("x <:\tspaced  :> y")
    assert match is not None
    assert match.group(1) == "spaced"


def test_tag_pattern_does_not_span_lines() -> None:
    assert TAG_PATTERN.search("<: split\n :>") is None
    assert TAG_PATTERN.search("<:\nsplit :>") is None


def test_format_tag_pattern_treats_value_literally() -> None:
    pattern = format_tag_pattern("a.b*")

    assert pattern.search("<: a.b* :>") is not None
    assert pattern.search("<: axbb :>") is None


def test_format_tag_pattern_matches_only_that_value() -> None:
    pattern = format_tag_pattern("db")

    assert pattern.search("<: db2 :>") is None
    assert pattern.search("<: xdb :>") is None
    match = pattern.search("; <: db :> tuning")
    assert match is not None
    assert match.span() == (2, 10)


def test_extracted_tags_reformat_to_the_original_spans() -> None:
    text = ";; <: alpha :> one\n# <:  beta\t:> two <: gamma-1 :>\n"
    original_spans = [match.span() for match in TAG_PATTERN.finditer(text)]

    rematched = []
    position = 0
    for value in find_all_tags(text):
        match = format_tag_pattern(value).search(text, position)
        assert match is not None
        rematched.append(match.span())
        position = match.end()

    assert rematched == original_spans


def test_format_tag_marker_round_trips() -> None:
    marker = format_tag_marker("todo")

    assert marker == "<: todo :>"
    assert find_all_tags(marker) == ["todo"]


def test_is_valid_tag_value() -> None:
    assert is_valid_tag_value("topic-1") is True
    assert is_valid_tag_value("") is False
    assert is_valid_tag_value("two words") is False


def test_indexer_regex_rule_mirrors_marker_grammar() -> None:
    assert indexer_regex_rule() == "/<:[ \t]+\\([^ \t]+\\)[ \t]+:>/\\1/"
