"""규칙 소스 파일 로더"""

from __future__ import annotations
from pathlib    import Path
from typing     import Any, List

from .scanner   import load_rules


def load_rules_text(path: str) -> str:
    """
    규칙 텍스트 읽기 (개행 정규화)
    """
    text = Path(path).read_text(encoding="utf-8")
    return text.replace("\r\n", "\n").replace("\r", "\n")


def load_rules_file(path: str) -> List[Any]:
    return load_rules(load_rules_text(path))
