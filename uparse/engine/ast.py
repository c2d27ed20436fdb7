# uparse/engine/ast.py
from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Tuple

# ---- compiled rule AST ----
#
# A rule block compiles once into an immutable tree, then is interpreted.
#
#   RuleBlock   := Alternation ('||' Alternation)*
#   Alternation := Sequence ('|' Sequence)*
#   Sequence    := Invoke*
#   Invoke      := combinator + bound arguments (literals or Invoke/RuleBlock)

@dataclass(frozen=True, eq=False)
class Invoke:
    combinator: Any          # Combinator
    args: Tuple[Any, ...]
    label: str = ""

    def __call__(self, state, input, pos: int):
        return self.combinator(state, input, pos, *self.args)

    def __repr__(self) -> str:
        return self.label or self.combinator.name

@dataclass(frozen=True)
class Sequence:
    steps: Tuple[Invoke, ...]

@dataclass(frozen=True)
class Alternation:
    alternatives: Tuple[Sequence, ...]

@dataclass(frozen=True)
class RuleBlock:
    groups: Tuple[Alternation, ...]  # '||'-separated

    def step_count(self) -> int:
        return sum(len(seq.steps) for alt in self.groups for seq in alt.alternatives)
