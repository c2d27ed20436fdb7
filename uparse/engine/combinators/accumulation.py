# uparse/engine/combinators/accumulation.py
"""Accumulation combinators.

COLLECT/KEEP build a list, GATHER/EMIT a name->value mapping. Buffers
live on the ParseState; the block sequencer truncates them when an
alternative fails, and the owning COLLECT/GATHER trims them on return.
"""

from __future__ import annotations
from typing import Any

from ...rules.values import RuleError, SetWord, Word, Tag
from ..combinator import combinator, PARSER, LITERAL
from ..state import FAILURE, INVISIBLE, Value


@combinator("Run the parser, collecting every KEEP made inside it", PARSER,
            returns="list of kept values")
def collect(state, input, pos, parser):
    created = state.collecting is None
    if created:
        state.collecting = []
    mark = len(state.collecting)
    try:
        result, end = parser(state, input, pos)
        if result is FAILURE:
            return FAILURE, pos
        return Value(state.collecting[mark:]), end
    finally:
        if created:
            state.collecting = None
        elif state.collecting is not None:
            del state.collecting[mark:]


@combinator("Add the parser's value to the innermost COLLECT", PARSER,
            returns="parser's result")
def keep(state, input, pos, parser):
    if state.collecting is None:
        raise RuleError("keep used outside of any collect")
    result, end = parser(state, input, pos)
    if result is FAILURE:
        return FAILURE, pos
    if isinstance(result, Value):
        state.collecting.append(result.value)
    return result, end


@combinator("Run the parser, gathering every EMIT made inside it", PARSER,
            returns="dict of emitted names to values")
def gather(state, input, pos, parser):
    created = state.gathering is None
    if created:
        state.gathering = []
    mark = len(state.gathering)
    try:
        result, end = parser(state, input, pos)
        if result is FAILURE:
            return FAILURE, pos
        return Value(dict(state.gathering[mark:])), end
    finally:
        if created:
            state.gathering = None
        elif state.gathering is not None:
            del state.gathering[mark:]


def _target_name(target: Any, who: str) -> str:
    if isinstance(target, (SetWord, Word, Tag)):
        return target.name
    if isinstance(target, str):
        return target
    raise RuleError(f"{who} target must be a word or text, got {target!r}")


@combinator("Record NAME = the parser's value for GATHER (or the session accruals)",
            LITERAL, PARSER, returns="parser's result")
def emit(state, input, pos, name, parser):
    key = _target_name(name, "emit")
    result, end = parser(state, input, pos)
    if result is FAILURE:
        return FAILURE, pos
    if result is INVISIBLE:
        raise RuleError(f"emit {key}: rule synthesized no value")
    if state.gathering is None:
        state.gathering = []
    state.gathering.append((key, result.value))
    return result, end


@combinator("Assign the parser's value to a variable", LITERAL, PARSER,
            returns="parser's result")
def set_word(state, input, pos, target, parser):
    key = _target_name(target, "set-word")
    result, end = parser(state, input, pos)
    if result is FAILURE:
        return FAILURE, pos
    if result is INVISIBLE:
        raise RuleError(f"{key}: rule synthesized no value to assign")
    state.variables[key] = result.value
    return result, end
