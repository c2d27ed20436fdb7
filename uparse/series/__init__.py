# uparse/series/__init__.py
"""uparse 입력 시리즈 뷰

모든 컴비네이터는 하나의 ``SeriesView`` 인터페이스로 입력을 본다.
리프 매처가 직접 "배열 / 텍스트 / 바이너리"를 구분하지 않는다.

종류
----
- ``ArraySeries``  : 임의 값의 ``list`` (제자리 수정)
- ``TextSeries``   : ``str`` (불변이므로 수정 시 ``data``를 다시 바인딩)
- ``BinarySeries`` : ``bytes`` (재바인딩) 또는 ``bytearray`` (제자리)

API
---
- ``len(view)`` / ``view.at(i)`` / ``view.slice(a, b)`` / ``view.head()``
- ``view.match_run(pos, literal, case_sensitive) -> Optional[int]``
- ``view.match_one(pos, predicate) -> Optional[int]``
- ``view.scan_value(pos) -> Optional[(value, end)]``
- ``view.take(pos, end)``: 리터럴 매치가 합성하는 값
- ``view.replace / insert / remove``: 수정. 새 끝 위치를 돌려준다
- ``make_series(value)``: 호스트 값에 맞는 뷰 선택
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Callable, List, Optional, Tuple

from ..rules.values import RuleError, Token, Quoted, Bitset, values_equal
from ..rules.scanner import scan_value_at


class SeriesView:
    """엔진이 입력 시리즈에 기대하는 최소 인터페이스"""
    kind = "series"

    def __init__(self, data: Any):
        self.data = data

    def __len__(self) -> int:
        return len(self.data)

    def head(self) -> Any:
        return self.data

    def at(self, i: int) -> Any:
        return self.data[i]

    def slice(self, start: int, end: int) -> Any:
        return self.data[start:end]

    def take(self, start: int, end: int) -> Any:
        return self.slice(start, end)

    def match_run(self, pos: int, literal: Any, case_sensitive: bool) -> Optional[int]:
        raise NotImplementedError

    def match_one(self, pos: int, predicate: Callable[[Any], bool]) -> Optional[int]:
        if pos < len(self) and predicate(self.at(pos)):
            return pos + 1
        return None

    def scan_value(self, pos: int) -> Optional[Tuple[Any, int]]:
        raise NotImplementedError

    def replace(self, start: int, end: int, value: Any) -> int:
        raise NotImplementedError

    def insert(self, pos: int, value: Any) -> int:
        return self.replace(pos, pos, value)

    def remove(self, start: int, end: int) -> None:
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"<{self.kind} len={len(self)}>"


@dataclass(frozen=True, eq=False)
class Cursor:
    """특정 시리즈 안의 위치 (``<here>``가 합성하는 값)"""
    series: SeriesView
    index: int

    def __eq__(self, other: Any) -> bool:
        return (isinstance(other, Cursor) and other.series is self.series
                and other.index == self.index)

    def __hash__(self) -> int:
        return hash((id(self.series), self.index))

    def rest(self) -> Any:
        return self.series.slice(self.index, len(self.series))


# --------- 핵심 구현 ---------

class ArraySeries(SeriesView):
    """배열은 리터럴을 원소 하나씩 매칭한다."""
    kind = "array"

    def take(self, start: int, end: int) -> Any:
        if end - start == 1:
            return self.data[start]
        return self.data[start:end]

    def match_run(self, pos: int, literal: Any, case_sensitive: bool) -> Optional[int]:
        if isinstance(literal, Quoted):
            literal = literal.value
        return self.match_one(pos, lambda el: values_equal(el, literal, case_sensitive))

    def scan_value(self, pos: int) -> Optional[Tuple[Any, int]]:
        if pos < len(self.data):
            return self.data[pos], pos + 1
        return None

    def replace(self, start: int, end: int, value: Any) -> int:
        self.data[start:end] = [value]
        return start + 1

    def remove(self, start: int, end: int) -> None:
        del self.data[start:end]


def _as_text(value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, Token):
        return value.text
    if isinstance(value, Quoted):
        return _as_text(value.value)
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).decode("utf-8")
    if isinstance(value, (list, tuple)):
        return "".join(_as_text(v) for v in value)
    if value is None:
        return ""
    return str(value)


class TextSeries(SeriesView):
    kind = "text"

    def match_run(self, pos: int, literal: Any, case_sensitive: bool) -> Optional[int]:
        try:
            run = _as_text(literal)
        except UnicodeDecodeError:
            # UTF-8 텍스트가 아닌 바이트는 텍스트 입력에 나올 수 없음
            return None
        end = pos + len(run)
        seg = self.data[pos:end]
        if len(seg) != len(run):
            return None
        if seg == run or (not case_sensitive and seg.lower() == run.lower()):
            return end
        return None

    def scan_value(self, pos: int) -> Optional[Tuple[Any, int]]:
        return scan_value_at(self.data, pos)

    def replace(self, start: int, end: int, value: Any) -> int:
        try:
            s = _as_text(value)
        except UnicodeDecodeError as e:
            raise RuleError(f"cannot put {value!r} into text input: {e}")
        self.data = self.data[:start] + s + self.data[end:]
        return start + len(s)

    def remove(self, start: int, end: int) -> None:
        self.data = self.data[:start] + self.data[end:]


def _as_bytes(value: Any) -> bytes:
    if isinstance(value, (bytes, bytearray)):
        return bytes(value)
    if isinstance(value, int) and not isinstance(value, bool):
        return bytes([value])
    return _as_text(value).encode("utf-8")


class BinarySeries(SeriesView):
    kind = "binary"

    def match_run(self, pos: int, literal: Any, case_sensitive: bool) -> Optional[int]:
        # 바이트 리터럴은 정확히 비교 (대소문자 무시는 텍스트에만)
        run = _as_bytes(literal)
        end = pos + len(run)
        if bytes(self.data[pos:end]) == run:
            return end
        return None

    def scan_value(self, pos: int) -> Optional[Tuple[Any, int]]:
        raise RuleError("Datatype matching is not supported on binary input")

    def replace(self, start: int, end: int, value: Any) -> int:
        b = _as_bytes(value)
        if isinstance(self.data, bytearray):
            self.data[start:end] = b
        else:
            self.data = self.data[:start] + b + self.data[end:]
        return start + len(b)

    def remove(self, start: int, end: int) -> None:
        if isinstance(self.data, bytearray):
            del self.data[start:end]
        else:
            self.data = self.data[:start] + self.data[end:]


def make_series(value: Any) -> Optional[SeriesView]:
    """호스트 값의 뷰. 시리즈가 아니면 None"""
    if isinstance(value, SeriesView):
        return value
    if isinstance(value, list):
        return ArraySeries(value)
    if isinstance(value, tuple):
        return ArraySeries(list(value))
    if isinstance(value, str):
        return TextSeries(value)
    if isinstance(value, (bytes, bytearray)):
        return BinarySeries(value)
    return None


def bitset_matcher(bitset: Bitset, case_sensitive: bool) -> Callable[[Any], bool]:
    return lambda el: bitset.matches(el, case_sensitive)
