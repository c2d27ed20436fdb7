# uparse/engine/registry.py
"""The combinator registry: keyword/tag/datatype -> Combinator.

Keys are
- lowercase keyword strings (``"some"``),
- ``Tag`` values (``Tag("here")``),
- Python types, for rule elements dispatched on their own type
  (``str`` for text literals, ``list`` for blocks, ...),
- ``collections.abc.Callable`` for plain host functions.

Copy the defaults, add or replace entries, and hand the dict to a
session to get a customized dialect.
"""

from __future__ import annotations
from collections.abc import Callable
from typing import Any, Dict

from ..rules.values import (
    Word, SetWord, GetWord, Tag, Token, Quoted, Group, GetGroup, Bitset, Datatype, Typeset,
)
from .combinator import Combinator
from .sequencer import block
from .combinators import leaf, structural, iteration, seeking, mutating, accumulation, escape

_DEFAULTS: Dict[Any, Combinator] = {
    # structural
    "opt": structural.opt,
    "not": structural.not_,
    "ahead": structural.ahead,
    "further": structural.further,
    "elide": structural.elide,
    "comment": structural.comment,
    # iteration
    "while": iteration.while_,
    "any": iteration.while_,
    "some": iteration.some,
    "tally": iteration.tally,
    "repeat": iteration.repeat,
    # seeking
    "to": seeking.to,
    "thru": seeking.thru,
    "seek": seeking.seek,
    "between": seeking.between,
    "across": seeking.across,
    "copy": seeking.across,
    "into": seeking.into,
    # mutating
    "change": mutating.change,
    "remove": mutating.remove,
    "insert": mutating.insert,
    # accumulation
    "collect": accumulation.collect,
    "keep": accumulation.keep,
    "gather": accumulation.gather,
    "emit": accumulation.emit,
    # leaves
    "skip": leaf.skip,
    "literal": leaf.literal,
    "lit": leaf.literal,
    "fail": leaf.fail,
    "return": escape.return_,
    # host guards and loop control
    "if": escape.if_,
    "accept": escape.accept,
    "break": escape.accept,
    "reject": escape.reject,
    # tags
    Tag("here"): leaf.here,
    Tag("end"): leaf.end,
    Tag("input"): leaf.input_tag,
    Tag("index"): leaf.index,
    # rule elements by their own type
    str: leaf.text,
    Token: leaf.token,
    bytes: leaf.binary,
    bytearray: leaf.binary,
    Quoted: leaf.quoted,
    Bitset: leaf.bitset,
    Datatype: leaf.datatype,
    Typeset: leaf.typeset,
    bool: leaf.logic,
    int: iteration.integer,
    type(None): leaf.null_rule,
    list: block,
    Group: escape.group,
    GetGroup: escape.get_escape,
    GetWord: escape.get_escape,
    SetWord: accumulation.set_word,
    Word: escape.word_rule,
    Callable: escape.action,
}


def default_combinators() -> Dict[Any, Combinator]:
    """A fresh, mutable copy of the built-in registry."""
    return dict(_DEFAULTS)


def describe(combinators: Dict[Any, Combinator]) -> str:
    """Help text for every entry, keyed the way rules refer to them."""
    out = []
    for key, comb in combinators.items():
        if isinstance(key, str):
            label = key
        elif isinstance(key, Tag):
            label = repr(key)
        else:
            label = f"({getattr(key, '__name__', key)} elements)"
        out.append(f"{label} -> {comb.help()}")
    return "\n\n".join(out)
