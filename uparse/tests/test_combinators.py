from __future__ import annotations

import pytest

from uparse import (
    parse, load_rules, Word, SetWord, Group, GetGroup, Bitset, DATATYPES, NOT_MATCHED,
    RuleError,
)
from uparse.series import Cursor, TextSeries


# ---- leaves ----

@pytest.mark.parametrize("text, matched", [("abc", True), ("abcd", False), ("ab", False)])
def test_end_tag_matches_only_at_tail(text, matched):
    assert (parse(text, ["abc", load_rules("<end>")[0]]) is not None) is matched


def test_end_alone(run):
    assert run("", "<end>").matched
    assert not run("x", "<end>").matched


def test_text_literal_synthesizes_the_matched_input(run):
    outcome = run("ABC", '"ab"')
    assert outcome.synthesized == "AB"
    assert outcome.remainder == 2


def test_case_sensitive_session(run):
    assert run("ABC", '"abc"').matched
    assert not run("ABC", '"abc"', case_sensitive=True).matched


def test_token_and_char_literals(run):
    assert run("ABC", "#abc <end>").matched
    assert run("x", '#"x" <end>').matched


def test_binary_literal_and_skip():
    data = b"\x01\x02\x03"
    assert parse(data, load_rules("#{0102} skip <end>")) == data


def test_binary_literal_against_text(run):
    assert run("abc", [b"ab"]).remainder == 2
    assert not run("abc", [b"\xff"]).matched


def test_bitset(run):
    digits = Bitset.charset(("0", "9"))
    outcome = run("123a", [Word("some"), digits])
    assert outcome.remainder == 3
    assert outcome.synthesized == "3"


def test_quoted_matches_words_in_arrays(run):
    outcome = run([Word("foo"), 1], "'foo 1 skip <end>")
    assert outcome.matched
    assert outcome.synthesized == 1


def test_literal_matches_an_integer_element(run):
    assert run([3], "literal 3 <end>").matched
    assert run([3], "lit 3").synthesized == 3


def test_datatype_in_array(run):
    outcome = run([1, 2, "x"], "some integer! | text!")
    assert outcome.synthesized == 2
    assert outcome.remainder == 2


def test_datatype_scans_text(run):
    outcome = run("12 abc", "integer!")
    assert outcome.synthesized == 12
    assert outcome.remainder == 2
    assert not run("abc", "integer!").matched


def test_typeset(run):
    assert run([2.5], "any-number!").synthesized == 2.5
    assert not run(["x"], "any-number!").matched


def test_datatype_on_binary_is_a_usage_error(run):
    with pytest.raises(RuleError):
        run(b"12", "integer!")


def test_logic_and_null(run):
    assert run("a", 'true "a"').matched
    assert not run("a", 'false "a"').matched
    assert run("a", [None, "a"]).remainder == 1


def test_skip_and_fail(run):
    assert run([None], "skip <end>").matched
    assert not run("", "skip").matched
    assert not run("a", "fail").matched


def test_position_tags(run):
    assert run("abc", '"ab" <index>').synthesized == 2
    assert run("abc", '"a" <input>').synthesized == "abc"
    here = run("abc", '"a" <here>').synthesized
    assert isinstance(here, Cursor) and here.index == 1


# ---- structural ----

@pytest.mark.parametrize("text", ["", "x", "abc"])
def test_opt_never_fails(run, text):
    outcome = run(text, 'opt "a"')
    assert outcome.matched
    assert outcome.remainder == (1 if text.startswith("a") else 0)


@pytest.mark.parametrize("text", ["abc", "xbc", ""])
def test_not_never_advances(run, text):
    outcome = run(text, 'not "a" <index>')
    if text.startswith("a"):
        assert not outcome.matched
    else:
        assert outcome.synthesized == 0


def test_not_synthesizes_a_sentinel(run):
    assert run("abc", 'not "x"').synthesized is NOT_MATCHED


def test_ahead_and_further(run):
    assert run("a", 'ahead "a" "a" <end>').matched
    assert not run("abc", 'further opt "x"').matched
    assert run("abc", 'further "a"').remainder == 1


def test_elide_and_comment(run):
    assert run("ab", '"a" elide "b"').synthesized == "a"
    assert run("ab", 'elide "a"').synthesized is None
    assert run("a", 'comment "zzz" "a" <end>').matched


# ---- iteration ----

def test_some_versus_while(run):
    assert run("bbb", 'while "a"').remainder == 0
    assert not run("bbb", 'some "a"').matched
    outcome = run("aab", 'some "a"')
    assert outcome.remainder == 2
    assert outcome.synthesized == "a"


def test_any_is_while(run):
    assert run("bbb", 'any "a"').matched


def test_while_stops_on_zero_width_matches(run):
    assert run("abc", 'while opt "x"').remainder == 0


def test_tally(run):
    outcome = run("aab", 'tally "a"')
    assert outcome.synthesized == 2
    assert outcome.remainder == 2


def test_invisible_iterations_keep_the_earlier_value(run):
    assert run("abb", '"a" some elide "b"').synthesized == "a"
    assert run("abb", '"a" while elide "b"').synthesized == "a"
    # zero iterations still synthesize null
    assert run("a", '"a" while "x"').synthesized is None


@pytest.mark.parametrize("rules, text, remainder", [
    ('repeat 2 "a"', "aaa", 2),
    ('2 "a"', "aaa", 2),
    ('repeat [2 _] "a"', "aaaa", 4),
    ('repeat [1 3] "a"', "aaaa", 3),
    ('repeat [_ 2] "a"', "b", 0),
    ('repeat n "a"', "aaa", 2),
])
def test_repeat(run, rules, text, remainder):
    assert run(text, rules, variables={"n": 2}).remainder == remainder


@pytest.mark.parametrize("rules, text", [
    ('3 "a"', "aa"),
    ('repeat [2 3] "a"', "a"),
])
def test_repeat_too_few(run, rules, text):
    assert not run(text, rules).matched


@pytest.mark.parametrize("rules", ['repeat "x" "a"', 'repeat [3 1] "a"', 'repeat [-1 2] "a"'])
def test_repeat_bad_counts(run, rules):
    with pytest.raises(RuleError):
        run("aaa", rules)


def test_break_ends_the_loop_successfully(run):
    outcome = run("aa.b", 'some ["a" | "." break] "b" <end>')
    assert outcome.matched
    assert outcome.synthesized == "b"

    outcome = run("aaXa", 'tally ["a" | "X" break]')
    assert outcome.synthesized == 3
    assert outcome.remainder == 3


def test_accept_satisfies_a_repeat_minimum(run):
    outcome = run("ab", 'repeat 3 ["a" | "b" accept]')
    assert outcome.matched
    assert outcome.remainder == 2


def test_reject_fails_the_enclosing_loop(run):
    assert run("aaX", 'while ["a" | "X" reject] | "aa"').remainder == 2
    outcome = run("aX", 'collect [opt some [keep "a" | "X" reject] keep "a"]')
    assert outcome.synthesized == ["a"]
    assert outcome.remainder == 1


def test_loop_control_outside_a_loop_ends_the_parse(run):
    outcome = run("abc", '"a" accept "zzz"')
    assert outcome.matched
    assert outcome.remainder == 1
    assert not run("abc", '"a" reject | "abc"').matched


def test_into_bounds_loop_control(run):
    outcome = run([["a", "b"], "c"], 'into skip ["a" accept] "c"')
    assert outcome.matched
    assert outcome.remainder == 2
    assert run([["a"], "c"], 'into skip [reject] | skip "c"').remainder == 2


# ---- seeking ----

def test_to_and_thru(run):
    to = run("xxxb", 'to "b"')
    assert to.remainder == 3
    assert to.synthesized == "b"
    assert run("xxxb", 'thru "b"').remainder == 4
    assert not run("xxx", 'to "b"').matched


def test_to_end(run):
    assert run("abc", "to <end>").remainder == 3


def test_across(run):
    outcome = run("aaab", 'across some "a"')
    assert outcome.synthesized == "aaa"
    assert outcome.remainder == 3


def test_copy_is_across_over_arrays(run):
    assert run([1, 2, "x"], "copy some integer!").synthesized == [1, 2]


def test_between(run):
    outcome = run("<abc>d", 'between "<" ">"')
    assert outcome.synthesized == "abc"
    assert outcome.remainder == 5
    assert not run("abc>", 'between "<" ">"').matched


def test_seek_to_a_saved_position(run):
    outcome = run("abc", '"a" pos: <here> "bc" seek (pos) "b"')
    assert outcome.remainder == 2


def test_seek_clamps(run):
    assert run("abc", "seek (99)").remainder == 3
    assert run("abc", '"ab" seek (-5) <index>').synthesized == 0


def test_seek_usage_errors(run):
    with pytest.raises(RuleError):
        run("abc", 'seek ("x")')
    foreign = Cursor(TextSeries("zz"), 0)
    with pytest.raises(RuleError):
        run("abc", [Word("seek"), Group(lambda: foreign)])


def test_into_nested_block(run):
    data = [["a", "b"], "c"]
    assert run(data, 'into block! ["a" "b"] "c" <end>').matched
    assert not run(data, 'into block! ["a"] "c"').matched


def test_into_text_inside_an_array(run):
    outcome = run(["abc", 1], 'into text! [some "a" across "bc"] integer!')
    assert outcome.matched
    assert outcome.remainder == 2


def test_into_rejects_non_series(run):
    assert not run([5], "into integer! [skip]").matched


# ---- escapes ----

def test_group_value_and_null(run):
    assert run("", [Group(lambda: 42)]).synthesized == 42
    outcome = run("", [Group(lambda: None)])
    assert outcome.matched and outcome.synthesized is None


def test_scanned_group_calls_a_variable(run):
    outcome = run("", "(add 1 2)", variables={"add": lambda a, b: a + b})
    assert outcome.synthesized == 3


def test_action_takes_one_parser_per_argument(run):
    def add(a, b):
        return a + b
    integer = DATATYPES["integer!"]
    outcome = run([1, 2], [add, integer, integer])
    assert outcome.synthesized == 3
    assert outcome.remainder == 2


def test_action_fails_when_an_argument_fails(run):
    assert not run([1, "x"], [lambda a, b: a, DATATYPES["integer!"], DATATYPES["integer!"]]).matched


def test_get_word_and_get_group_resolve_when_reached(run):
    assert run("ab", ":pat <end>", variables={"pat": "ab"}).matched
    assert run("a", ':("a") <end>').matched
    # the variable is bound earlier in the same parse
    assert run("aa", "c: skip :c <end>").matched
    assert not run("ab", "c: skip :c <end>").matched


def test_get_group_guards_on_values_bound_earlier():
    variables = {"x": 0}
    rules = [SetWord("x"), DATATYPES["integer!"], GetGroup(fn=lambda: variables["x"] > 3)]
    assert parse([5], rules, variables=variables) == [5]
    assert parse([2], rules, variables=variables) is None


def test_scanned_get_group_guard(run):
    variables = {"big": lambda v: v > 3}
    assert run([7], "n: integer! :(big n)", variables=variables).matched
    assert not run([1], "n: integer! :(big n)", variables=variables).matched


def test_unset_get_word_is_a_usage_error(run):
    with pytest.raises(RuleError, match="has no value"):
        run("a", '"a" :nope')


def test_if_continues_only_on_a_truthy_condition(run):
    variables = {"big": lambda v: v > 3}
    outcome = run([7], "n: integer! if (big n)", variables=variables)
    assert outcome.matched
    assert outcome.synthesized == 7
    assert not run([1], "n: integer! if (big n)", variables=variables).matched
    with pytest.raises(RuleError, match="group condition"):
        run("a", 'if "a"')


def test_rule_variables_may_recurse(run):
    nested = load_rules('"(" opt nested ")"')
    assert run("(())", "nested <end>", variables={"nested": nested}).matched
    assert not run("(()", "nested <end>", variables={"nested": nested}).matched


def test_unknown_word_is_a_usage_error(run):
    with pytest.raises(RuleError, match="neither a combinator nor a rule variable"):
        run("a", "nope")
