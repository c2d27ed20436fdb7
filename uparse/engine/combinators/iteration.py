# uparse/engine/combinators/iteration.py
"""Iterative combinators: while/any, some, tally, repeat and integer counts.

Each loop is the boundary for `accept`/`break` and `reject`.
"""

from __future__ import annotations
from typing import Any, Optional, Tuple

from ...rules.values import RuleError, Word, Group
from ..combinator import combinator, PARSER, LITERAL
from ..evaluator import evaluate_group
from ..state import FAILURE, INVISIBLE, AcceptSignal, RejectSignal, Value


def _loop(state, input, pos, parser, maximum: Optional[int], require_advance: bool):
    """Run ``parser`` until it fails (or ``maximum`` is hit).

    Returns (count, last result, end, accepted). An iteration that succeeds
    without advancing ends the loop when ``require_advance`` is set, and its
    accumulation side effects are undone. ``accept``/``break`` inside an
    iteration ends the loop at its position with ``accepted`` set;
    ``reject`` makes the last result FAILURE.
    """
    count = 0
    last: Any = INVISIBLE
    cur = pos
    while maximum is None or count < maximum:
        marks = state.mark()
        try:
            result, end = parser(state, input, cur)
        except AcceptSignal as sig:
            return count + 1, last, sig.pos, True
        except RejectSignal:
            return count, FAILURE, pos, False
        if result is FAILURE:
            break
        if require_advance and end == cur:
            state.rollback(marks)
            break
        count += 1
        if isinstance(result, Value):
            last = result
        cur = end
    if count == 0:
        last = Value(None)
    return count, last, cur, False


@combinator("Match the parser zero or more times", PARSER,
            returns="last value synthesized, or null for zero matches", name="while")
def while_(state, input, pos, parser):
    _, last, end, _ = _loop(state, input, pos, parser, None, True)
    if last is FAILURE:
        return FAILURE, pos
    return last, end


@combinator("Match the parser one or more times", PARSER,
            returns="last value synthesized")
def some(state, input, pos, parser):
    count, last, end, _ = _loop(state, input, pos, parser, None, True)
    if last is FAILURE or count == 0:
        return FAILURE, pos
    return last, end


@combinator("Count how many times the parser matches in a row", PARSER,
            returns="integer count")
def tally(state, input, pos, parser):
    count, last, end, _ = _loop(state, input, pos, parser, None, True)
    if last is FAILURE:
        return FAILURE, pos
    return Value(count), end


def _resolve_times(state, times: Any) -> Tuple[int, Optional[int]]:
    if isinstance(times, Word):
        return _resolve_times(state, state.lookup(times.name))
    if isinstance(times, Group):
        return _resolve_times(state, evaluate_group(times, state.variables, state.evaluator))
    if isinstance(times, int) and not isinstance(times, bool):
        lo, hi = times, times
    elif isinstance(times, (list, tuple)) and len(times) == 2:
        lo, hi = times
        if lo is None:
            lo = 0
    else:
        raise RuleError(f"repeat count must be an integer or [min max], got {times!r}")
    if not isinstance(lo, int) or (hi is not None and not isinstance(hi, int)):
        raise RuleError(f"repeat bounds must be integers, got {times!r}")
    if lo < 0 or (hi is not None and hi < lo):
        raise RuleError(f"invalid repeat bounds {times!r}")
    return lo, hi


def _repeat(state, input, pos, times, parser):
    lo, hi = _resolve_times(state, times)
    # zero-width matches count only when the loop is bounded
    count, last, end, accepted = _loop(state, input, pos, parser, hi, hi is None)
    if last is FAILURE or (count < lo and not accepted):
        return FAILURE, pos
    return last, end


@combinator("Match the parser a number of times: N, or [min max] (max _ = unbounded)",
            LITERAL, PARSER, returns="last value synthesized, or null for zero matches")
def repeat(state, input, pos, times, parser):
    return _repeat(state, input, pos, times, parser)


@combinator("An integer N before a rule matches it exactly N times",
            LITERAL, PARSER, returns="last value synthesized, or null for zero matches")
def integer(state, input, pos, value, parser):
    return _repeat(state, input, pos, value, parser)
