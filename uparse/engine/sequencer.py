# uparse/engine/sequencer.py
from __future__ import annotations
from typing import Tuple

from .ast import RuleBlock, Sequence
from .combinator import combinator, RULES
from .state import FAILURE, INVISIBLE, ParseState, Synthesized

# Block sequencer:
# - '||' splits a block into groups matched one after another
# - '|' splits a group into alternatives; the first that matches wins
# - a failed alternative restores the position and truncates the
#   collect/gather buffers back to the marks taken when its group began
# - the block synthesizes its last non-invisible step result


def _run_sequence(state: ParseState, input, pos: int, seq: Sequence) -> Tuple[Synthesized, int]:
    last: Synthesized = INVISIBLE
    cur = pos
    for step in seq.steps:
        result, end = step(state, input, cur)
        if result is FAILURE:
            return FAILURE, pos
        if result is not INVISIBLE:
            last = result
        cur = end
    return last, cur


def run_block(state: ParseState, input, pos: int, rules: RuleBlock) -> Tuple[Synthesized, int]:
    last: Synthesized = INVISIBLE
    cur = pos
    for group in rules.groups:
        marks = state.mark()
        for seq in group.alternatives:
            result, end = _run_sequence(state, input, cur, seq)
            if result is not FAILURE:
                break
            state.rollback(marks)
        else:
            return FAILURE, pos
        if result is not INVISIBLE:
            last = result
        cur = end
    return last, cur


@combinator("Match a rule block: sequences of '|' alternatives, chained by '||'",
            RULES, returns="last value-bearing step result, or invisible", name="block")
def block(state, input, pos, rules):
    return run_block(state, input, pos, rules)
