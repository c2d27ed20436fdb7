# uparse/engine/combinators/structural.py
"""Structural combinators: change how another parser's outcome counts."""

from __future__ import annotations

from ..combinator import combinator, PARSER, LITERAL
from ..state import FAILURE, INVISIBLE, NOT_MATCHED, Value


@combinator("Match the parser if possible", PARSER,
            returns="parser's result, or null when it did not match")
def opt(state, input, pos, parser):
    result, end = parser(state, input, pos)
    if result is FAILURE:
        return Value(None), pos
    return result, end


@combinator("Succeed only where the parser fails; never consumes", PARSER,
            returns="~not~ sentinel")
def not_(state, input, pos, parser):
    result, _ = parser(state, input, pos)
    if result is FAILURE:
        return Value(NOT_MATCHED), pos
    return FAILURE, pos


@combinator("Match the parser without consuming input", PARSER,
            returns="parser's result")
def ahead(state, input, pos, parser):
    result, _ = parser(state, input, pos)
    return result, pos


@combinator("Match the parser, failing if it did not advance", PARSER,
            returns="parser's result")
def further(state, input, pos, parser):
    result, end = parser(state, input, pos)
    if result is FAILURE or end == pos:
        return FAILURE, pos
    return result, end


@combinator("Match the parser but discard its value", PARSER, returns="invisible")
def elide(state, input, pos, parser):
    result, end = parser(state, input, pos)
    if result is FAILURE:
        return FAILURE, pos
    return INVISIBLE, end


@combinator("Ignore the next rule element entirely", LITERAL, returns="invisible")
def comment(state, input, pos, ignored):
    return INVISIBLE, pos
