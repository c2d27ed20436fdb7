# uparse/rules/scanner.py
"""uparse 규칙 소스 스캐너

다음과 같은 규칙 텍스트를::

    digits: some digit
    [digits "." digits | <end>]

규칙 값(list, Word, SetWord, Tag, ...)으로 바꾼다.

- ``load_rules(src)``        : 소스 전체를 하나의 규칙 블록(list)으로
- ``scan_value_at(text, i)`` : 오프셋 위치의 값 하나, 없으면 None.
  데이터타입 컴비네이터가 텍스트 입력에서 값을 "transcode"할 때 사용

어휘 형태
---------
- ``[ ... ]`` 블록, ``( ... )`` 그룹, ``:( ... )`` get-group
- ``"text"`` / ``{text}``, ``#"c"`` / ``#abc`` 토큰, ``#{DEADBEEF}`` 바이너리
- 정수, 소수, ``true`` / ``false``, ``_`` (blank/null)
- ``word``, ``word:``, ``:word``, ``'value`` (quoted), ``<tag>``
- ``name!`` 데이터타입/타입셋, ``|``, ``||``, ``,``
- ``;`` 줄 끝까지 주석
"""

from __future__ import annotations
import regex as re
from dataclasses import dataclass
from typing import Any, Iterator, List, Optional, Tuple

from .values import (
    Word, SetWord, GetWord, Tag, Token, Quoted, Group, GetGroup,
    COMMA, BAR, BARBAR, DATATYPES, TYPESETS,
)

_WORD = r"[\p{XID_Start}_!?*&=~.+\-/][\p{XID_Continue}!?*&=~.+\-/']*"

# ---- Lexer 토큰 (순서대로: 먼저 맞는 대안이 이긴다) ----
_TOKEN_SPEC = [
    ("WS",       r"[ \t\f\r]+"),
    ("NEWLINE",  r"\n"),
    ("COMMENT",  r";[^\n]*"),
    ("LBRACK",   r"\["),
    ("RBRACK",   r"\]"),
    ("GETGROUP", r":\("),
    ("LPAREN",   r"\("),
    ("RPAREN",   r"\)"),
    ("BARBAR",   r"\|\|"),
    ("BAR",      r"\|"),
    ("COMMA",    r","),
    ("BINARY",   r"#\{[0-9A-Fa-f \t\r\n]*\}"),
    ("CHAR",     r'#"(?:\\.|[^"\\])"'),
    ("TOKEN",    r"#[^\s\[\]()\";,]+"),
    ("STRING",   r'"(?:\\.|[^"\\\n])*"'),
    ("BRACESTR", r"\{[^{}]*\}"),
    ("TAG",      r"<[^<>\s=][^<>]*>"),
    ("DECIMAL",  r"[-+]?\d+\.\d+(?:[eE][-+]?\d+)?"),
    ("INTEGER",  r"[-+]?\d+"),
    ("QUOTE",    r"'"),
    ("BLANK",    r"_(?![\p{XID_Continue}!?*&=~.+\-/'])"),
    ("SETWORD",  _WORD + r":"),
    ("GETWORD",  r":" + _WORD),
    ("WORD",     _WORD),
]
MASTER_RE = re.compile("|".join(f"(?P<{n}>{p})" for n, p in _TOKEN_SPEC))

# 텍스트 입력에서 스캔한 값 뒤에 올 수 있는 문자
_DELIMITER_RE = re.compile(r"[\s\[\]()\";,]")

_SKIPPED = ("WS", "COMMENT", "NEWLINE")
_OPENERS = {"LBRACK": "RBRACK", "LPAREN": "RPAREN", "GETGROUP": "RPAREN"}


@dataclass
class Tok:
    kind: str
    lexeme: str
    start: int
    end: int
    line: int
    col: int


def _tokens(src: str, i: int = 0, line: int = 1, col: int = 1) -> Iterator[Tok]:
    """오프셋 ``i``부터 토큰 생성. 공백/주석은 **토큰 미배출**"""
    while i < len(src):
        m = MASTER_RE.match(src, i)
        if not m:
            raise SyntaxError(
                f"Unexpected char {src[i]!r} at {line}:{col}\n"
                + _snippet_caret_at_pos(src, i)
            )
        kind = m.lastgroup or ""
        lex = m.group(0)
        start, end = i, m.end()
        if kind not in _SKIPPED:
            yield Tok(kind, lex, start, end, line, col)

        nl_count = lex.count("\n")
        if nl_count:
            line += nl_count
            col = len(lex) - lex.rfind("\n")
        else:
            col += len(lex)
        i = end


def _scan(src: str) -> List[Tok]:
    toks = list(_tokens(src))
    line = src.count("\n") + 1
    toks.append(Tok("EOF", "", len(src), len(src), line, 1))
    return toks


# ---------- 에러 처리 유틸 ----------
def _line_bounds(src: str, pos: int) -> Tuple[int, int]:
    """pos가 속한 라인의 [시작, 끝) 범위"""
    start = src.rfind("\n", 0, pos)
    start = 0 if start == -1 else start + 1
    end = src.find("\n", pos)
    if end == -1:
        end = len(src)
    return start, end

def _snippet_caret_at_pos(src: str, pos: int) -> str:
    start, end = _line_bounds(src, pos)
    line_text = src[start:end]
    col = (pos - start) + 1
    caret = " " * (col - 1) + "^"
    return f"{line_text}\n{caret}"

def caret_snippet(src: str, pos: int) -> str:
    """``pos``가 속한 라인과 그 아래 캐럿"""
    return _snippet_caret_at_pos(src, pos)


# --- 토큰 스트림 ---
class _TS:
    def __init__(self, toks: List[Tok], src: str):
        self.toks = toks
        self.i = 0
        self.src = src

    def la(self) -> Tok:
        return self.toks[self.i]

    def eat_any(self) -> Tok:
        t = self.la()
        self.i += 1
        return t

    def error(self, msg: str, tok: Optional[Tok] = None) -> SyntaxError:
        t = tok or self.la()
        return SyntaxError(
            f"{msg} at {t.line}:{t.col}\n" + _snippet_caret_at_pos(self.src, t.start)
        )


def _unescape(body: str) -> str:
    out = []
    i = 0
    while i < len(body):
        c = body[i]
        if c == "\\" and i + 1 < len(body):
            nxt = body[i + 1]
            out.append({"n": "\n", "t": "\t", "r": "\r", "0": "\0"}.get(nxt, nxt))
            i += 2
            continue
        out.append(c)
        i += 1
    return "".join(out)


def _atom(ts: _TS, t: Tok) -> Any:
    k, lex = t.kind, t.lexeme
    if k == "STRING":
        return _unescape(lex[1:-1])
    if k == "BRACESTR":
        return lex[1:-1]
    if k == "CHAR":
        return Token(_unescape(lex[2:-1]))
    if k == "TOKEN":
        return Token(lex[1:])
    if k == "BINARY":
        digits = "".join(lex[2:-1].split())
        if len(digits) % 2:
            raise ts.error("Odd number of hex digits in binary", t)
        return bytes.fromhex(digits)
    if k == "INTEGER":
        return int(lex)
    if k == "DECIMAL":
        return float(lex)
    if k == "TAG":
        return Tag(lex[1:-1])
    if k == "BLANK":
        return None
    if k == "BAR":
        return BAR
    if k == "BARBAR":
        return BARBAR
    if k == "COMMA":
        return COMMA
    if k == "SETWORD":
        return SetWord(lex[:-1])
    if k == "GETWORD":
        return GetWord(lex[1:])
    if k == "WORD":
        if lex == "true":
            return True
        if lex == "false":
            return False
        if lex.endswith("!") and len(lex) > 1:
            dt = DATATYPES.get(lex) or TYPESETS.get(lex)
            if dt is None:
                raise ts.error(f"Unknown datatype {lex}", t)
            return dt
        return Word(lex)
    raise ts.error(f"Unexpected {k}", t)


def _value(ts: _TS) -> Any:
    t = ts.eat_any()
    if t.kind == "EOF":
        raise ts.error("Unexpected end of rule source", t)
    if t.kind == "QUOTE":
        return Quoted(_value(ts))
    if t.kind in _OPENERS:
        items = _values_until(ts, _OPENERS[t.kind], t)
        if t.kind == "LBRACK":
            return items
        if t.kind == "GETGROUP":
            return GetGroup(body=items)
        return Group(body=items)
    if t.kind in ("RBRACK", "RPAREN"):
        raise ts.error(f"Unbalanced {t.lexeme!r}", t)
    return _atom(ts, t)


def _values_until(ts: _TS, closer: Optional[str], opener: Optional[Tok] = None) -> List[Any]:
    out: List[Any] = []
    while True:
        t = ts.la()
        if closer is not None and t.kind == closer:
            ts.eat_any()
            return out
        if t.kind == "EOF":
            if closer is not None:
                raise ts.error(f"Missing closing for {opener.lexeme!r}", opener)
            return out
        out.append(_value(ts))


def load_rules(src: str) -> List[Any]:
    """규칙 소스를 규칙 블록으로 스캔한다.

    Raises
    ------
    SyntaxError
        잘못된 소스. 문제 라인의 캐럿 스니펫을 포함한다.
    """
    ts = _TS(_scan(src), src)
    return _values_until(ts, None)


def scan_value_at(text: str, pos: int) -> Optional[Tuple[Any, int]]:
    """``text``의 ``pos``에서 시작하는 값 정확히 하나를 스캔한다.

    ``(value, end)``를 돌려주고, 구분자로 잘 끝나는 값이 없으면 ``None``.
    앞쪽 공백은 건너뛰지 않는다.
    """
    if pos >= len(text) or text[pos].isspace():
        return None
    collected: List[Tok] = []
    depth = 0
    try:
        for tok in _tokens(text, pos):
            collected.append(tok)
            if tok.kind in _OPENERS:
                depth += 1
            elif tok.kind in ("RBRACK", "RPAREN"):
                depth -= 1
            if depth <= 0 and tok.kind != "QUOTE":
                break
        if not collected or collected[0].start != pos or depth != 0:
            return None
        end = collected[-1].end
        collected.append(Tok("EOF", "", end, end, 1, 1))
        value = _value(_TS(collected, text))
    except SyntaxError:
        # 값이 아님: 입력이 여기서 매칭되지 않을 뿐
        return None
    if end < len(text) and not _DELIMITER_RE.match(text, end):
        return None
    return value, end
