# uparse/engine/combinators/escape.py
"""Escape hatches into host code, rule variables and RETURN."""

from __future__ import annotations
import inspect
from typing import Any, List

from ...rules.values import RuleError, Group, GetGroup, GetWord
from ..combinator import combinator, PARSER, LITERAL, Param
from ..compiler import compile_rule
from ..evaluator import evaluate_group
from ..state import (
    FAILURE, INVISIBLE, AcceptSignal, RejectSignal, ReturnSignal, Value, unwrap,
)


@combinator("Run host code without consuming input", LITERAL,
            returns="the code's result (None stays a value, not a failure)")
def group(state, input, pos, code):
    return Value(evaluate_group(code, state.variables, state.evaluator)), pos


@combinator("Resolve :word or :(code) when reached, then match the result as a rule",
            LITERAL, returns="that rule's result (false fails, true and None are invisible)",
            name="get")
def get_escape(state, input, pos, escape):
    if isinstance(escape, GetWord):
        try:
            rule = state.variables[escape.name]
        except KeyError:
            raise RuleError(f"get-word :{escape.name} has no value")
    else:
        rule = evaluate_group(escape, state.variables, state.evaluator)
    step = compile_rule(rule, state.combinators)
    return step(state, input, pos)


@combinator("Continue only if the host condition is truthy", LITERAL,
            returns="invisible", name="if")
def if_(state, input, pos, condition):
    if not isinstance(condition, (Group, GetGroup)):
        raise RuleError(f"if expects a group condition, got {condition!r}")
    if evaluate_group(condition, state.variables, state.evaluator):
        return INVISIBLE, pos
    return FAILURE, pos


@combinator("End the enclosing iteration successfully at the current position",
            returns="does not return", name="accept")
def accept(state, input, pos):
    raise AcceptSignal(input, pos)


@combinator("End the enclosing iteration with a failure",
            returns="does not return", name="reject")
def reject(state, input, pos):
    raise RejectSignal()


def _action_arity(fn: Any) -> List[Param]:
    try:
        sig = inspect.signature(fn)
    except (TypeError, ValueError):
        raise RuleError(f"cannot read the parameters of {fn!r}")
    positional = (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD)
    names = [p.name for p in sig.parameters.values()
             if p.kind in positional and p.default is inspect.Parameter.empty]
    return [(n, PARSER) for n in names]


@combinator("Call a host function; each argument is matched by the rule that follows",
            LITERAL, returns="the function's result", name="action", arity=_action_arity)
def action(state, input, pos, fn, *arg_parsers):
    cur = pos
    args = []
    for parser in arg_parsers:
        result, cur = parser(state, input, cur)
        if result is FAILURE:
            return FAILURE, pos
        args.append(unwrap(result))
    return Value(fn(*args)), cur


@combinator("A word that is no keyword: match the rule stored in that variable",
            LITERAL, returns="that rule's result", name="word")
def word_rule(state, input, pos, word):
    # compiled on every use so variables may change (or recurse) mid-parse
    step = compile_rule(state.lookup(word.name), state.combinators)
    return step(state, input, pos)


@combinator("Stop the whole parse, making the parser's value its result", PARSER,
            returns="does not return on success", name="return")
def return_(state, input, pos, parser):
    result, _ = parser(state, input, pos)
    if result is FAILURE:
        return FAILURE, pos
    raise ReturnSignal(unwrap(result))
