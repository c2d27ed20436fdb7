# uparse/engine/combinators/leaf.py
"""Leaf combinators: literal and typed matches, logic, tags, single skips."""

from __future__ import annotations

from ...series import Cursor, bitset_matcher
from ..combinator import combinator, LITERAL
from ..state import FAILURE, INVISIBLE, Value


def _match_literal(state, input, pos, value):
    end = input.match_run(pos, value, state.case_sensitive)
    if end is None:
        return FAILURE, pos
    return Value(input.take(pos, end)), end


@combinator("Match text literally (case-insensitive unless the session says otherwise)",
            LITERAL, returns="the matched input")
def text(state, input, pos, value):
    return _match_literal(state, input, pos, value)

@combinator("Match a token's characters (text) or an equal token (array)",
            LITERAL, returns="the matched input")
def token(state, input, pos, value):
    return _match_literal(state, input, pos, value)

@combinator("Match bytes literally", LITERAL, returns="the matched input")
def binary(state, input, pos, value):
    return _match_literal(state, input, pos, value)

@combinator("Match the quoted value itself", LITERAL, returns="the matched input")
def quoted(state, input, pos, value):
    return _match_literal(state, input, pos, value)

@combinator("Match one element verbatim, even one that would otherwise be a rule",
            LITERAL, returns="the matched input")
def literal(state, input, pos, value):
    return _match_literal(state, input, pos, value)


@combinator("Match one character/byte/element that is in the bitset",
            LITERAL, returns="the matched item")
def bitset(state, input, pos, value):
    end = input.match_one(pos, bitset_matcher(value, state.case_sensitive))
    if end is None:
        return FAILURE, pos
    return Value(input.take(pos, end)), end


def _match_type(input, pos, value):
    found = input.scan_value(pos)
    if found is None or not value.matches(found[0]):
        return FAILURE, pos
    return Value(found[0]), found[1]

@combinator("Match an element of the datatype (arrays) or scan one from text",
            LITERAL, returns="the matched or scanned value")
def datatype(state, input, pos, value):
    return _match_type(input, pos, value)

@combinator("Match an element of any datatype in the typeset",
            LITERAL, returns="the matched or scanned value")
def typeset(state, input, pos, value):
    return _match_type(input, pos, value)


@combinator("true continues, false fails; never consumes input", LITERAL,
            returns="invisible")
def logic(state, input, pos, value):
    return (INVISIBLE if value else FAILURE), pos


@combinator("An absent rule element: always matches, consumes nothing", LITERAL,
            returns="invisible", name="null")
def null_rule(state, input, pos, value):
    return INVISIBLE, pos


@combinator("Match any single element", returns="the element")
def skip(state, input, pos):
    if pos >= len(input):
        return FAILURE, pos
    return Value(input.at(pos)), pos + 1


@combinator("Never match")
def fail(state, input, pos):
    return FAILURE, pos


# ---- tags ----

@combinator("Current position", returns="a cursor into the current series", name="<here>")
def here(state, input, pos):
    return Value(Cursor(input, pos)), pos

@combinator("Match only at the tail of the input", returns="invisible", name="<end>")
def end(state, input, pos):
    if pos == len(input):
        return INVISIBLE, pos
    return FAILURE, pos

@combinator("The original input of the session", returns="the input series", name="<input>")
def input_tag(state, input, pos):
    return Value(state.input.head()), pos

@combinator("Current position as an integer", returns="0-based index", name="<index>")
def index(state, input, pos):
    return Value(pos), pos
