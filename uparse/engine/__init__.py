# uparse/engine/__init__.py
"""Parser-combinator engine.

This package provides:
- the combinator factory and the parameter kinds it understands
- a rule compiler turning rule blocks into invocation trees
- the block sequencer (alternatives, '||' groups, buffer rollback)
- the built-in combinator registry
- a session runtime (RuleProgram / ParseSession / parse)
"""

from .state import (
    INVISIBLE, FAILURE, Value, NOT_MATCHED, ParseState, unwrap,
)
from .combinator import Combinator, combinator, PARSER, LITERAL, RULES
from .ast import Invoke, Sequence, Alternation, RuleBlock
from .compiler import compile_rules, compile_rule
from .evaluator import default_evaluate, evaluate_group
from .registry import default_combinators, describe
from .runtime import RuleProgram, ParseSession, ParseOutcome, parse
