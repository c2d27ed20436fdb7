# uparse/engine/runtime.py
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Union

from ..rules.scanner import load_rules
from ..rules.values import RuleError
from ..series import make_series
from .ast import Invoke, RuleBlock
from .compiler import compile_rules
from .registry import default_combinators
from .sequencer import block
from .state import FAILURE, INVISIBLE, AcceptSignal, ParseState, RejectSignal, ReturnSignal, unwrap


@dataclass
class RuleProgram:
    """A compiled rule block, bound to the registry it was compiled with."""
    rules: List[Any]
    block: RuleBlock
    combinators: Dict[Any, Any]

    @classmethod
    def from_rules(cls, rules: List[Any],
                   combinators: Optional[Dict[Any, Any]] = None) -> "RuleProgram":
        if not isinstance(rules, list):
            raise RuleError(f"rules must be a block (list), got {type(rules).__name__}")
        combinators = combinators if combinators is not None else default_combinators()
        return cls(rules, compile_rules(rules, combinators), combinators)

    @classmethod
    def from_source(cls, src: str,
                    combinators: Optional[Dict[Any, Any]] = None) -> "RuleProgram":
        return cls.from_rules(load_rules(src), combinators)


@dataclass
class ParseOutcome:
    """What a session reports.

    - matched    : whether the rules matched
    - value      : the input (possibly edited) or RETURN's value; None on failure
    - synthesized: the rule block's own synthesized value (None if invisible)
    - remainder  : position where matching stopped (None on failure)
    - furthest   : furthest input position any match reached
    - accruals   : EMITs made outside of any GATHER
    """
    matched: bool
    value: Any = None
    synthesized: Any = None
    remainder: Optional[int] = None
    furthest: int = 0
    accruals: Dict[str, Any] = field(default_factory=dict)


class ParseSession:
    """Run one parse of ``input`` against ``rules``.

    ``combinators`` applies when ``rules`` is a block; a RuleProgram keeps
    the registry it was compiled with, and passing another one is an error.
    """
    def __init__(self,
            input: Any,
            rules: Union[List[Any], RuleProgram],
            *,
            combinators: Optional[Dict[Any, Any]] = None,
            case_sensitive: bool = False,
            verbose: bool = False,
            variables: Optional[Dict[str, Any]] = None,
            evaluator: Optional[Callable[[List[Any], Dict[str, Any]], Any]] = None):
            self.series = make_series(input)
            if self.series is None:
                raise RuleError(f"cannot parse a {type(input).__name__}; expected a list, str or bytes")
            self.variables = variables if variables is not None else {}
            if isinstance(rules, RuleProgram):
                if combinators is not None and combinators is not rules.combinators:
                    raise RuleError("a compiled RuleProgram already carries its combinators")
                self.program = rules
            else:
                self.program = RuleProgram.from_rules(rules, combinators)
            self.state = ParseState(
                combinators=self.program.combinators,
                input=self.series,
                case_sensitive=case_sensitive,
                verbose=verbose,
                variables=self.variables,
                evaluator=evaluator,
            )

    def run(self) -> ParseOutcome:
        state = self.state
        top = Invoke(state.combinators.get(list, block), (self.program.block,), "rules")
        try:
            result, end = top(state, self.series, 0)
        except ReturnSignal as ret:
            return ParseOutcome(True, ret.value, ret.value, None, state.furthest, self._accruals())
        except AcceptSignal as sig:
            result, end = INVISIBLE, sig.pos
        except RejectSignal:
            result, end = FAILURE, 0

        if result is FAILURE:
            return ParseOutcome(False, None, None, None, state.furthest, {})
        return ParseOutcome(True, self.series.head(), unwrap(result), end,
                            state.furthest, self._accruals())

    def _accruals(self) -> Dict[str, Any]:
        return dict(self.state.gathering or [])


def parse(input: Any, rules: Union[List[Any], RuleProgram], **options) -> Any:
    """Match ``input`` against ``rules``.

    Returns the input (or the value given to RETURN) on success and None
    when no alternative matched. Reaching the end of the input is not
    required; end the rules with ``<end>`` for that.

    Raises
    ------
    RuleError
        for malformed rules (these are never treated as "no match").
    """
    return ParseSession(input, rules, **options).run().value
