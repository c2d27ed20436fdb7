from __future__ import annotations

import pytest

from uparse import RuleError, Word


def test_collect_without_keep_is_empty(run):
    outcome = run("abc", "collect []")
    assert outcome.matched
    assert outcome.synthesized == []


def test_collect_keeps_values(run):
    assert run("aab", 'collect [some keep "a" keep "b"]').synthesized == ["a", "a", "b"]


def test_failed_alternative_leaves_no_residue(run):
    outcome = run("c", '[collect [keep "a" keep "b"] | collect [keep "c"]]')
    assert outcome.synthesized == ["c"]


def test_rollback_inside_one_collect(run):
    outcome = run("ab", 'collect [keep "a" keep "x" | keep "a" keep "b"]')
    assert outcome.synthesized == ["a", "b"]


def test_nested_collects_are_separate(run):
    outcome = run("ab", 'collect [keep "a" keep collect [keep "b"]]')
    assert outcome.synthesized == ["a", ["b"]]


def test_failed_inner_collect_does_not_leak(run):
    outcome = run("ab", 'collect [keep "a" opt collect [keep "b" "x"] keep "b"]')
    assert outcome.synthesized == ["a", "b"]


def test_failed_step_leaves_no_residue(run):
    def pair(a, b):
        return a, b
    rules = [Word("collect"), [Word("opt"), pair, Word("keep"), "a", "x", Word("keep"), "a"]]
    assert run("ab", rules).synthesized == ["a"]


def test_keep_outside_collect_is_a_usage_error(run):
    with pytest.raises(RuleError, match="outside of any collect"):
        run("a", 'keep "a"')
    # not recovered by the alternative that would match
    with pytest.raises(RuleError):
        run("a", 'keep "a" | "a"')


def test_gather_builds_a_mapping(run):
    outcome = run("ab", 'gather [emit x "a" emit y "b"]')
    assert outcome.synthesized == {"x": "a", "y": "b"}
    assert outcome.accruals == {}


def test_gather_rollback(run):
    outcome = run("ab", 'gather [emit a "a" emit b "x" | emit a "a" emit c "b"]')
    assert outcome.synthesized == {"a": "a", "c": "b"}


def test_emit_without_gather_records_accruals(run):
    outcome = run("ab", 'emit first "a" emit second: "b"')
    assert outcome.accruals == {"first": "a", "second": "b"}


def test_accruals_are_rolled_back_too(run):
    outcome = run("ab", 'emit a "a" "x" | "a"')
    assert outcome.matched
    assert outcome.accruals == {}


def test_emit_of_invisible_rule_is_a_usage_error(run):
    with pytest.raises(RuleError):
        run("a", 'emit x elide "a"')


def test_set_word_assigns_variables(run):
    variables = {}
    outcome = run("ab", 'x: "a" y: across "b"', variables=variables)
    assert outcome.matched
    assert variables == {"x": "a", "y": "b"}


def test_set_word_over_invisible_rule_is_a_usage_error(run):
    with pytest.raises(RuleError, match="no value"):
        run("a", 'x: elide "a"')
