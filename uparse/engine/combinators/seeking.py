# uparse/engine/combinators/seeking.py
"""Seeking combinators: scan forward, capture spans, reposition, recurse."""

from __future__ import annotations

from ...rules.values import RuleError
from ...series import Cursor, make_series
from ..combinator import combinator, PARSER
from ..state import FAILURE, INVISIBLE, AcceptSignal, RejectSignal, Value, unwrap


def _scan_for(state, input, pos, parser):
    """First position at or after pos where parser matches: (start, result, end)."""
    cur = pos
    while cur <= len(input):
        result, end = parser(state, input, cur)
        if result is not FAILURE:
            return cur, result, end
        cur += 1
    return None


@combinator("Advance to the first position where the parser matches", PARSER,
            returns="parser's result; position is before the match")
def to(state, input, pos, parser):
    found = _scan_for(state, input, pos, parser)
    if found is None:
        return FAILURE, pos
    start, result, _ = found
    return result, start


@combinator("Advance past the first match of the parser", PARSER,
            returns="parser's result; position is after the match")
def thru(state, input, pos, parser):
    found = _scan_for(state, input, pos, parser)
    if found is None:
        return FAILURE, pos
    _, result, end = found
    return result, end


@combinator("Jump to the index or cursor the parser synthesizes", PARSER,
            returns="invisible")
def seek(state, input, pos, parser):
    result, _ = parser(state, input, pos)
    if result is FAILURE:
        return FAILURE, pos
    where = unwrap(result)
    if isinstance(where, Cursor):
        if where.series is not input:
            raise RuleError("seek: cursor belongs to a different series than the one being parsed")
        where = where.index
    if not isinstance(where, int) or isinstance(where, bool):
        raise RuleError(f"seek needs an integer or a cursor, got {where!r}")
    return INVISIBLE, max(0, min(where, len(input)))


@combinator("Match LEFT here, then scan for RIGHT", PARSER, PARSER,
            returns="copy of the input between LEFT's end and RIGHT's start")
def between(state, input, pos, left, right):
    result, start = left(state, input, pos)
    if result is FAILURE:
        return FAILURE, pos
    found = _scan_for(state, input, start, right)
    if found is None:
        return FAILURE, pos
    stop, _, end = found
    return Value(input.slice(start, stop)), end


@combinator("Match the parser", PARSER,
            returns="copy of the input the parser consumed")
def across(state, input, pos, parser):
    result, end = parser(state, input, pos)
    if result is FAILURE:
        return FAILURE, pos
    return Value(input.slice(pos, end)), end


@combinator("Synthesize a series with SHAPE, then match SUBPARSER against all of it",
            PARSER, PARSER, returns="subparser's result")
def into(state, input, pos, shape, subparser):
    outer, end = shape(state, input, pos)
    if outer is FAILURE:
        return FAILURE, pos
    value = unwrap(outer)
    if isinstance(value, Cursor):
        sub, start = value.series, value.index
    else:
        sub, start = make_series(value), 0
        if sub is None:
            return FAILURE, pos
    # accept/reject outside any loop of the subparse end it here
    try:
        result, sub_end = subparser(state, sub, start)
    except AcceptSignal:
        return INVISIBLE, end
    except RejectSignal:
        return FAILURE, pos
    if result is FAILURE or sub_end != len(sub):
        return FAILURE, pos
    return result, end
