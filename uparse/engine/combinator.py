# uparse/engine/combinator.py
"""Combinator factory.

A combinator body is a plain function::

    def body(state, input, pos, *params) -> (Synthesized, new_pos)

``@combinator(description, *kinds)`` wraps it into a ``Combinator`` that
the rule compiler knows how to feed. Each declared parameter kind says
how the compiler fills it from the rule stream:

- PARSER  : the next rule element(s), compiled into a nested invocation
- LITERAL : the next rule element, taken verbatim
- RULES   : the next rule element, a block compiled into a RuleBlock

The wrapper records the furthest input position reached by any
successful match, leaves the collect/gather buffers as it found them
when the body fails, and in verbose mode traces every invocation.
"""

from __future__ import annotations
import inspect
import sys
from typing import Any, Callable, List, Optional, Sequence, Tuple

from .state import FAILURE, INVISIBLE, Value, ParseState, Synthesized

PARSER = "parser"
LITERAL = "literal"
RULES = "rules"

Param = Tuple[str, str]  # (name, kind)


def _eprint(*args, **kw) -> None:
    print(*args, file=sys.stderr, **kw)


class Combinator:
    def __init__(self,
            name: str,
            body: Callable[..., Tuple[Synthesized, int]],
            params: Sequence[Param],
            description: str = "",
            returns: str = "",
            arity: Optional[Callable[[Any], List[Param]]] = None):
            self.name = name
            self.body = body
            self.params = list(params)
            self.description = description
            self.returns = returns
            self._arity = arity

    def params_for(self, element: Any) -> List[Param]:
        """Declared parameters; variadic combinators derive extra ones
        from the rule element that selected them."""
        if self._arity is None:
            return self.params
        return self.params + self._arity(element)

    def __call__(self, state: ParseState, input, pos: int, *args) -> Tuple[Synthesized, int]:
        if state.verbose:
            _eprint(f"[TRACE] {'  ' * state.depth}{self.name} @{pos}")
        marks = state.mark()
        state.depth += 1
        try:
            result, end = self.body(state, input, pos, *args)
        finally:
            state.depth -= 1

        if result is FAILURE:
            end = pos
            state.rollback(marks)
        elif not (result is INVISIBLE or isinstance(result, Value)):
            raise TypeError(f"combinator {self.name!r} returned {result!r}")
        else:
            state.reached(input, end)

        if state.verbose:
            outcome = "fail" if result is FAILURE else f"ok @{end} {result!r}"
            _eprint(f"[TRACE] {'  ' * state.depth}{self.name} -> {outcome}")
        return result, end

    def help(self) -> str:
        """Self-documentation: description, parameters and return contract."""
        lines = [f"{self.name}: {self.description}".rstrip()]
        for pname, kind in self.params:
            lines.append(f"    {pname} [{kind}]")
        if self._arity is not None:
            lines.append("    ... [parser] (one per argument of the action)")
        if self.returns:
            lines.append(f"    return: {self.returns}")
        return "\n".join(lines)

    def __repr__(self) -> str:
        return f"<combinator {self.name}>"


def combinator(description: str, *kinds: str, returns: str = "",
               name: Optional[str] = None,
               arity: Optional[Callable[[Any], List[Param]]] = None):
    """Decorator building a Combinator around a matcher body.

    Parameter names come from the body's signature (after ``state``,
    ``input`` and ``pos``); ``kinds`` gives one kind per parameter.
    """
    def decorator(fn: Callable[..., Tuple[Synthesized, int]]) -> Combinator:
        names = [p.name for p in inspect.signature(fn).parameters.values()
                 if p.kind is not inspect.Parameter.VAR_POSITIONAL][3:]
        if len(names) != len(kinds):
            raise TypeError(
                f"{fn.__name__}: {len(names)} parameters but {len(kinds)} kinds declared"
            )
        label = name or fn.__name__.rstrip("_").replace("_", "-")
        return Combinator(label, fn, list(zip(names, kinds)), description, returns, arity)
    return decorator
