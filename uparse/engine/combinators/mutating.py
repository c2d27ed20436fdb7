# uparse/engine/combinators/mutating.py
"""Mutating combinators: the only ones that edit the input storage.

Positions held elsewhere (an enclosing ACROSS or BETWEEN start, a <here>
cursor) are not adjusted after an edit.
"""

from __future__ import annotations

from ...rules.values import RuleError
from ..combinator import combinator, PARSER
from ..state import FAILURE, INVISIBLE


def _synthesize(state, input, pos, parser, who: str):
    result, _ = parser(state, input, pos)
    if result is FAILURE:
        return FAILURE
    if result is INVISIBLE:
        raise RuleError(f"{who}: the value rule must synthesize a value")
    return result


@combinator("Replace what PARSER matched with the value REPLACEMENT synthesizes",
            PARSER, PARSER, returns="invisible; position is after the new content")
def change(state, input, pos, parser, replacement):
    result, end = parser(state, input, pos)
    if result is FAILURE:
        return FAILURE, pos
    # the replacement rule runs where the matched extent starts
    value = _synthesize(state, input, pos, replacement, "change")
    if value is FAILURE:
        return FAILURE, pos
    return INVISIBLE, input.replace(pos, end, value.value)


@combinator("Delete what PARSER matched", PARSER, returns="invisible")
def remove(state, input, pos, parser):
    result, end = parser(state, input, pos)
    if result is FAILURE:
        return FAILURE, pos
    input.remove(pos, end)
    return INVISIBLE, pos


@combinator("Insert the value PARSER synthesizes at the current position",
            PARSER, returns="invisible; position is after the inserted content")
def insert(state, input, pos, parser):
    value = _synthesize(state, input, pos, parser, "insert")
    if value is FAILURE:
        return FAILURE, pos
    return INVISIBLE, input.insert(pos, value.value)
