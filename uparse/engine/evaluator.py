# uparse/engine/evaluator.py
"""Default host evaluator for groups scanned from rule text.

Rules written in Python usually carry ``Group(fn)`` closures and never
reach this. Scanned groups carry a value list instead:

    ()              -> None
    ("x")           -> "x"           (a literal stands for itself)
    (name)          -> variables[name], called if callable
    (name a b)      -> variables[name](a, b)
"""

from __future__ import annotations
from typing import Any, Dict, List

from ..rules.values import RuleError, Word, GetWord, Group, GetGroup, Quoted


def _evaluate_one(value: Any, variables: Dict[str, Any]) -> Any:
    if isinstance(value, (Word, GetWord)):
        try:
            return variables[value.name]
        except KeyError:
            raise RuleError(f"Group refers to unset word '{value.name}'")
    if isinstance(value, (Group, GetGroup)):
        return evaluate_group(value, variables)
    if isinstance(value, Quoted):
        return value.value
    if isinstance(value, list):
        return list(value)
    return value


def default_evaluate(body: List[Any], variables: Dict[str, Any]) -> Any:
    if not body:
        return None
    head, rest = body[0], body[1:]
    if isinstance(head, Word):
        target = _evaluate_one(head, variables)
        if callable(target):
            return target(*[_evaluate_one(v, variables) for v in rest])
        if rest:
            raise RuleError(f"Cannot apply non-function '{head.name}' to arguments")
        return target
    if rest:
        raise RuleError(f"Group holds more than one expression: {body!r}")
    return _evaluate_one(head, variables)


def evaluate_group(group: Any, variables: Dict[str, Any], evaluator=None) -> Any:
    """Run a Group/GetGroup: its closure, else its body through ``evaluator``."""
    if group.fn is not None:
        return group.fn()
    return (evaluator or default_evaluate)(group.body or [], variables)
