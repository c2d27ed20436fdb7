# uparse/__init__.py
"""uparse: a dialect of composable parser combinators.

    >>> from uparse import parse, load_rules
    >>> parse("aaab", load_rules('some "a" "b" <end>'))
    'aaab'
"""

from .rules import (
    RuleError, Word, SetWord, GetWord, Tag, Token, Quoted, Group, GetGroup,
    Bitset, Datatype, Typeset, DATATYPES, TYPESETS,
    load_rules, load_rules_file,
)
from .series import Cursor
from .engine import (
    Combinator, combinator, PARSER, LITERAL, RULES,
    INVISIBLE, FAILURE, Value, NOT_MATCHED,
    default_combinators, RuleProgram, ParseSession, ParseOutcome, parse,
)

__version__ = "0.1.0"
