# uparse/engine/compiler.py
from __future__ import annotations
from collections.abc import Callable as _CallableABC
from typing import Any, Dict, List, Optional

from ..rules.values import RuleError, Word, Tag, COMMA, BAR, BARBAR
from .ast import Invoke, Sequence, Alternation, RuleBlock
from .combinator import Combinator, PARSER, RULES

# Rule stream we compile:
#   block    := group ("||" group)*
#   group    := seq ("|" seq)*
#   seq      := (step | ",")*
#   step     := KEYWORD param*            (registry entry for the word)
#             | TAG                        (registry entry for the tag)
#             | VALUE param*               (registry entry for the value's type)
#
# Each combinator's declared params decide how many following elements a
# step consumes: PARSER params recurse into `step`, LITERAL params take one
# element verbatim, RULES params compile a nested block.
# :word and :(group) are VALUEs too; their escape combinator resolves them
# when the step is reached.


class _RuleStream:
    def __init__(self, rules: List[Any], combinators: Dict[Any, Any]):
        self.rules = rules
        self.i = 0
        self.n = len(rules)
        self.combinators = combinators

    def _peek(self, k: int = 0) -> Any:
        return self.rules[self.i + k]

    def _bump(self, n: int = 1) -> None:
        self.i += n

    def _eof(self) -> bool:
        return self.i >= self.n

    def _err(self, msg: str) -> RuleError:
        return RuleError(f"rule error at element {self.i} of {self.rules!r}: {msg}")

    def _is_marker(self, el: Any) -> bool:
        return el is COMMA or el == BAR or el == BARBAR

    # --- block structure ---

    def compile_block(self) -> RuleBlock:
        groups: List[Alternation] = []
        alts: List[Sequence] = []
        steps: List[Invoke] = []
        while not self._eof():
            el = self._peek()
            if el is COMMA:
                self._bump()
                continue
            if el == BAR:
                alts.append(Sequence(tuple(steps)))
                steps = []
                self._bump()
                continue
            if el == BARBAR:
                alts.append(Sequence(tuple(steps)))
                groups.append(Alternation(tuple(alts)))
                alts, steps = [], []
                self._bump()
                continue
            steps.append(self.compile_step())
        alts.append(Sequence(tuple(steps)))
        groups.append(Alternation(tuple(alts)))
        return RuleBlock(tuple(groups))

    # --- one step ---

    def compile_step(self) -> Invoke:
        if self._eof():
            raise self._err("rule ended where a parser was expected")
        el = self._peek()
        if self._is_marker(el):
            raise self._err(f"{el!r} where a parser was expected")
        self._bump()

        if isinstance(el, Combinator):
            return self._bind(el, el, [], el.name)

        if isinstance(el, Word):
            comb = self.combinators.get(el.name.lower())
            if comb is not None:
                return self._bind(comb, el, [], el.name)

        if isinstance(el, Tag):
            comb = self.combinators.get(el)
            if comb is None:
                raise self._err(f"unknown tag {el!r}")
            return self._bind(comb, el, [], repr(el))

        comb = self._dispatch(el)
        if comb is None:
            raise self._err(f"unrecognized rule element {el!r} ({type(el).__name__})")
        return self._bind(comb, el, [el], repr(el))

    def _dispatch(self, el: Any) -> Optional[Combinator]:
        for cls in type(el).__mro__:
            comb = self.combinators.get(cls)
            if comb is not None:
                return comb
        if callable(el):
            return self.combinators.get(_CallableABC)
        return None

    def _bind(self, comb: Combinator, element: Any, preset: List[Any], label: str) -> Invoke:
        args = list(preset)
        for pname, kind in comb.params_for(element)[len(preset):]:
            if kind == PARSER:
                args.append(self.compile_step())
                continue
            if self._eof():
                raise self._err(f"{comb.name} is missing its {pname!r} argument")
            args.append(self._peek())
            self._bump()
        # RULES params (including a preset block value) compile now
        params = comb.params_for(element)
        for idx, (pname, kind) in enumerate(params):
            if kind == RULES and idx < len(args) and not isinstance(args[idx], RuleBlock):
                block = args[idx]
                if not isinstance(block, list):
                    raise self._err(f"{comb.name} expects a block for {pname!r}, got {block!r}")
                args[idx] = compile_rules(block, self.combinators)
        return Invoke(comb, tuple(args), label)


def compile_rules(rules: List[Any], combinators: Dict[Any, Any]) -> RuleBlock:
    """Compile a rule block into its AST.

    Raises
    ------
    RuleError
        on unknown elements or combinators missing arguments.
    """
    ts = _RuleStream(rules, combinators)
    return ts.compile_block()


def compile_rule(value: Any, combinators: Dict[Any, Any]) -> Invoke:
    """Compile one rule value (e.g. a variable's content) into a single step."""
    ts = _RuleStream([value], combinators)
    step = ts.compile_step()
    if not ts._eof():
        raise ts._err("trailing elements after rule")
    return step
