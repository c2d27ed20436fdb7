# uparse/rules/values.py
"""uparse 규칙(rule) 값 정의

규칙은 평범한 Python ``list``이며, 원소는 호스트 값
(``str``, ``bytes``, ``int``, ``bool``, ``None``, 중첩 리스트, 호출 가능 객체)과
아래의 작은 값 타입들이 섞여 있다:

- Word / SetWord / GetWord : 키워드, 대입 대상, 변수 참조
- Group / GetGroup         : 호스트 코드로의 탈출(escape)
- Tag                      : <here>, <end> 같은 의사 키워드
- Token / Quoted / Bitset  : 리터럴 매처
- Datatype / Typeset       : 타입 기반 매처
- COMMA / BAR / BARBAR     : 스텝 구분자와 대안(alternation) 마커
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple


class RuleError(SyntaxError):
    """잘못된 규칙. 즉시 발생하며 대안(|)으로 복구되지 않는다."""


@dataclass(frozen=True)
class Word:
    name: str

    def __repr__(self) -> str:
        return self.name


@dataclass(frozen=True)
class SetWord:
    name: str

    def __repr__(self) -> str:
        return f"{self.name}:"


@dataclass(frozen=True)
class GetWord:
    name: str

    def __repr__(self) -> str:
        return f":{self.name}"


@dataclass(frozen=True)
class Tag:
    name: str

    def __repr__(self) -> str:
        return f"<{self.name}>"


@dataclass(frozen=True)
class Token:
    """``#a`` 형태의 토큰. 텍스트 입력에서는 그 문자들과 매칭된다."""
    text: str

    def __repr__(self) -> str:
        return f"#{self.text}"


@dataclass(frozen=True)
class Quoted:
    value: Any

    def __repr__(self) -> str:
        return f"'{self.value!r}"


@dataclass(frozen=True, eq=False)
class Group:
    """매칭 도중 실행되는 호스트 코드.

    ``fn``(인자 없는 callable) 또는 ``body``(세션 evaluator에 넘길
    스캔된 값들) 중 하나만 설정된다.
    """
    fn: Optional[Callable[[], Any]] = None
    body: Optional[List[Any]] = None

    def __repr__(self) -> str:
        if self.fn is not None:
            return f"({getattr(self.fn, '__name__', 'fn')})"
        return "(" + " ".join(repr(v) for v in self.body or []) + ")"


@dataclass(frozen=True, eq=False)
class GetGroup:
    """스텝에 도달했을 때 실행되는 호스트 코드. 그 결과를 규칙으로 매칭한다."""
    fn: Optional[Callable[[], Any]] = None
    body: Optional[List[Any]] = None

    def __repr__(self) -> str:
        return ":" + repr(Group(self.fn, self.body))


class _Marker:
    def __init__(self, text: str):
        self.text = text

    def __repr__(self) -> str:
        return self.text


COMMA = _Marker(",")
BAR = Word("|")
BARBAR = Word("||")


class Bitset:
    """코드포인트(텍스트) 또는 바이트 값(바이너리)의 집합."""

    def __init__(self, members: Iterable[Any] = (), negated: bool = False):
        self.members = set()
        self.negated = negated
        for m in members:
            self.add(m)

    @classmethod
    def charset(cls, *specs: Any) -> "Bitset":
        """``charset("abc", ("0", "9"), 32)``: 문자열은 각 문자를,
        쌍은 닫힌 구간을, 정수는 코드포인트 하나를 추가한다."""
        return cls(specs)

    def add(self, m: Any) -> None:
        if isinstance(m, tuple):
            lo, hi = (ord(x) if isinstance(x, str) else x for x in m)
            self.members.update(range(lo, hi + 1))
        elif isinstance(m, str):
            self.members.update(ord(c) for c in m)
        elif isinstance(m, (bytes, bytearray)):
            self.members.update(m)
        else:
            self.members.add(int(m))

    def __contains__(self, item: Any) -> bool:
        return self.matches(item, case_sensitive=True)

    def matches(self, item: Any, case_sensitive: bool = False) -> bool:
        if isinstance(item, str):
            if len(item) != 1:
                return False
            codes = {ord(item)}
            if not case_sensitive:
                codes |= {ord(item.lower()[0]), ord(item.upper()[0])}
        elif isinstance(item, int) and not isinstance(item, bool):
            codes = {item}
        else:
            return False
        hit = any(c in self.members for c in codes)
        return (not hit) if self.negated else hit

    def __repr__(self) -> str:
        neg = "not " if self.negated else ""
        return f"<bitset {neg}{len(self.members)}>"


@dataclass(frozen=True)
class Datatype:
    name: str
    test: Callable[[Any], bool] = field(compare=False, repr=False)

    def matches(self, value: Any) -> bool:
        return self.test(value)

    def __repr__(self) -> str:
        return self.name


@dataclass(frozen=True)
class Typeset:
    name: str
    types: Tuple[Datatype, ...] = field(compare=False, repr=False)

    def matches(self, value: Any) -> bool:
        return any(t.matches(value) for t in self.types)

    def __repr__(self) -> str:
        return self.name


# ---- 데이터타입 테이블 ----

def _is_integer(v: Any) -> bool:
    return isinstance(v, int) and not isinstance(v, bool)

def _is_text(v: Any) -> bool:
    return isinstance(v, str)

def _is_action(v: Any) -> bool:
    return callable(v) and not isinstance(v, (type, Datatype, Typeset, Group, GetGroup))

DATATYPES: Dict[str, Datatype] = {d.name: d for d in [
    Datatype("integer!", _is_integer),
    Datatype("decimal!", lambda v: isinstance(v, float)),
    Datatype("logic!", lambda v: isinstance(v, bool)),
    Datatype("blank!", lambda v: v is None),
    Datatype("text!", _is_text),
    Datatype("token!", lambda v: isinstance(v, Token)),
    Datatype("binary!", lambda v: isinstance(v, (bytes, bytearray))),
    Datatype("block!", lambda v: isinstance(v, (list, tuple))),
    Datatype("group!", lambda v: isinstance(v, Group)),
    Datatype("word!", lambda v: isinstance(v, Word)),
    Datatype("set-word!", lambda v: isinstance(v, SetWord)),
    Datatype("get-word!", lambda v: isinstance(v, GetWord)),
    Datatype("tag!", lambda v: isinstance(v, Tag)),
    Datatype("quoted!", lambda v: isinstance(v, Quoted)),
    Datatype("bitset!", lambda v: isinstance(v, Bitset)),
    Datatype("datatype!", lambda v: isinstance(v, Datatype)),
    Datatype("typeset!", lambda v: isinstance(v, Typeset)),
    Datatype("action!", _is_action),
]}

def _typeset(name: str, *members: str) -> Typeset:
    return Typeset(name, tuple(DATATYPES[m] for m in members))

TYPESETS: Dict[str, Typeset] = {t.name: t for t in [
    _typeset("any-number!", "integer!", "decimal!"),
    _typeset("any-string!", "text!", "tag!"),
    _typeset("any-word!", "word!", "set-word!", "get-word!"),
    _typeset("any-series!", "block!", "text!", "binary!"),
    Typeset("any-value!", tuple(DATATYPES.values())),
]}


def values_equal(a: Any, b: Any, case_sensitive: bool = False) -> bool:
    """배열 입력 매칭에 쓰는 원소 동등성"""
    if isinstance(a, bool) != isinstance(b, bool):
        return False
    if isinstance(a, str) and isinstance(b, str):
        return a == b if case_sensitive else a.lower() == b.lower()
    if type(a) is type(b) and isinstance(a, (Word, SetWord, GetWord)):
        # 워드는 철자로 비교 (다른 규칙들처럼 대소문자 무시)
        return a.name == b.name if case_sensitive else a.name.lower() == b.name.lower()
    if isinstance(a, Token) and isinstance(b, Token):
        return values_equal(a.text, b.text, case_sensitive)
    return a == b
