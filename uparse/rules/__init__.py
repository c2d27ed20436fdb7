# uparse/rules/__init__.py
"""uparse 규칙 dialect 값과 그 텍스트 형태

이 패키지가 제공하는 것:
- 규칙을 이루는 값 타입 (Word, SetWord, Tag, Bitset, ...)
- 타입 기반 매칭에 쓰는 datatype/typeset 테이블
- 규칙 소스 텍스트를 규칙 블록으로 바꾸는 스캐너
"""

from .values import (
    RuleError, Word, SetWord, GetWord, Tag, Token, Quoted, Group, GetGroup,
    Bitset, Datatype, Typeset, COMMA, BAR, BARBAR, DATATYPES, TYPESETS,
    values_equal,
)
from .scanner import load_rules, scan_value_at, caret_snippet
from .loader import load_rules_text, load_rules_file
