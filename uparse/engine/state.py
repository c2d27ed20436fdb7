# uparse/engine/state.py
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Tuple, Union

from ..rules.values import RuleError
from ..series import SeriesView

# ---- synthesized results ----
#
# Every combinator returns (result, position) where result is one of:
#   INVISIBLE  matched, contributes no value
#   Value(v)   matched, synthesized v (v may legitimately be None)
#   FAILURE    did not match; position is the unchanged input position

class _Invisible:
    __slots__ = ()

    def __repr__(self) -> str:
        return "INVISIBLE"


class _Failure:
    __slots__ = ()

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "FAILURE"


INVISIBLE = _Invisible()
FAILURE = _Failure()


@dataclass(frozen=True)
class Value:
    value: Any


Synthesized = Union[_Invisible, Value, _Failure]


def unwrap(result: Synthesized) -> Any:
    """Payload of a successful result (None when invisible)."""
    if isinstance(result, Value):
        return result.value
    return None


class Sentinel:
    def __init__(self, name: str):
        self.name = name

    def __repr__(self) -> str:
        return f"~{self.name}~"


NOT_MATCHED = Sentinel("not")


class ReturnSignal(Exception):
    """Raised by ``return`` to end the whole session with a value."""

    def __init__(self, value: Any):
        super().__init__("return")
        self.value = value


class AcceptSignal(Exception):
    """Raised by ``accept``/``break``; the enclosing iteration succeeds at ``pos``."""

    def __init__(self, input: SeriesView, pos: int):
        super().__init__("accept")
        self.input = input
        self.pos = pos


class RejectSignal(Exception):
    """Raised by ``reject``; the enclosing iteration fails."""

    def __init__(self):
        super().__init__("reject")


@dataclass(frozen=True)
class Marks:
    """Buffer tails recorded when an alternative begins (None = no buffer)."""
    collecting: Optional[int]
    gathering: Optional[int]


@dataclass
class ParseState:
    """Shared per-session state, passed by reference to every combinator."""
    combinators: Dict[Any, Any]
    input: SeriesView
    case_sensitive: bool = False
    verbose: bool = False
    variables: Dict[str, Any] = field(default_factory=dict)
    evaluator: Optional[Callable[[List[Any], Dict[str, Any]], Any]] = None
    furthest: int = 0
    collecting: Optional[List[Any]] = None
    gathering: Optional[List[Tuple[str, Any]]] = None
    depth: int = 0

    # ---- rollback support ----
    def mark(self) -> Marks:
        return Marks(
            None if self.collecting is None else len(self.collecting),
            None if self.gathering is None else len(self.gathering),
        )

    def rollback(self, marks: Marks) -> None:
        if marks.collecting is None:
            self.collecting = None
        elif self.collecting is not None:
            del self.collecting[marks.collecting:]
        if marks.gathering is None:
            self.gathering = None
        elif self.gathering is not None:
            del self.gathering[marks.gathering:]

    def reached(self, input: SeriesView, pos: int) -> None:
        # diagnostic only; positions in sub-series (INTO) are not comparable
        if input is self.input and pos > self.furthest:
            self.furthest = pos

    def lookup(self, name: str) -> Any:
        try:
            return self.variables[name]
        except KeyError:
            raise RuleError(f"Word '{name}' is neither a combinator nor a rule variable")
