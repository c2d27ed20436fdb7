# uparse/uparsec.py
"""uparsec – uparse CLI

사용 예)
    $ python -m uparse.uparsec check rules/csv.r -D
    $ python -m uparse.uparsec run rules/csv.r --text "a,b,c" --var sep=","
    $ python -m uparse.uparsec run rules/header.r --input data.bin --binary
    $ python -m uparse.uparsec list some

기능
----
- check : 규칙 파일을 스캔/컴파일하고 스텝 수를 출력
- run   : 텍스트(또는 파일)를 규칙 파일로 매칭
- list  : 내장 컴비네이터의 자기 문서(help) 출력

디버그 모드(-D/--debug)를 켜면 스캔된 규칙을 덤프하고 모든 컴비네이터
호출을 stderr로 추적합니다.
"""

from __future__ import annotations
import argparse
import sys
from typing import Any, Dict, List, Optional

from .rules.values import RuleError

# ------------------------------
# 헬퍼
# ------------------------------

def _eprint(*args, **kw) -> None:
    print(*args, file=sys.stderr, **kw)


def _parse_vars(specs: List[str]) -> Dict[str, Any]:
    """NAME=RULE 쌍. RULE은 규칙 소스 (값이 하나면 리스트로 감싸지 않음)"""
    from .rules.scanner import load_rules

    variables: Dict[str, Any] = {}
    for spec in specs:
        name, sep, src = spec.partition("=")
        if not sep or not name:
            raise SyntaxError(f"--var expects NAME=RULE, got {spec!r}")
        values = load_rules(src)
        variables[name] = values[0] if len(values) == 1 else values
    return variables


def _load_program(path: str, debug: bool):
    from .rules.loader import load_rules_file
    from .engine.runtime import RuleProgram

    rules = load_rules_file(path)
    if debug: _eprint(f"[DEBUG] rules scanned | values={len(rules)}")
    if debug: _eprint("[DEBUG] " + repr(rules))

    program = RuleProgram.from_rules(rules)
    if debug: _eprint(f"[DEBUG] rules compiled | groups={len(program.block.groups)} "
                      f"steps={program.block.step_count()}")
    return program


def _read_input(args) -> Any:
    if args.text is not None:
        return args.text
    if args.binary:
        with open(args.input, "rb") as f:
            return f.read()
    with open(args.input, "r", encoding="utf-8") as f:
        return f.read()

# ------------------------------
# 커맨드
# ------------------------------

def cmd_check(args) -> int:
    try:
        program = _load_program(args.file, debug=args.debug)
    except RuleError as e:
        _eprint("[RULE ERROR]")
        _eprint(str(e))
        return 2
    except SyntaxError as e:
        _eprint("[SYNTAX ERROR]")
        _eprint(str(e))
        return 2
    except OSError as e:
        _eprint("[ERROR]", type(e).__name__, str(e))
        return 2

    print(f"[CHECK OK] steps={program.block.step_count()}")
    return 0


def cmd_run(args) -> int:
    from .engine.runtime import ParseSession
    from .rules.scanner import caret_snippet

    try:
        variables = _parse_vars(args.var or [])
        program = _load_program(args.file, debug=args.debug)
        data = _read_input(args)
        session = ParseSession(data, program, case_sensitive=args.case,
                               verbose=args.debug, variables=variables)
        outcome = session.run()
    except RuleError as e:
        _eprint("[RULE ERROR]")
        _eprint(str(e))
        return 2
    except SyntaxError as e:
        _eprint("[SYNTAX ERROR]")
        _eprint(str(e))
        return 2
    except OSError as e:
        _eprint("[ERROR]", type(e).__name__, str(e))
        return 2

    if not outcome.matched:
        print(f"[NO MATCH] furthest={outcome.furthest}")
        if isinstance(data, str):
            print(caret_snippet(data, outcome.furthest))
        return 1

    print(f"[MATCH] remainder={outcome.remainder} furthest={outcome.furthest} "
          f"value={outcome.value!r}")
    if outcome.synthesized is not None:
        print(f"[RESULT] {outcome.synthesized!r}")
    for name, value in outcome.accruals.items():
        print(f"[EMIT] {name}={value!r}")
    return 0


def cmd_list(args) -> int:
    from .engine.registry import default_combinators, describe

    registry = default_combinators()
    if args.name is None:
        print(describe(registry))
        return 0
    comb = registry.get(args.name.lower())
    if comb is None:
        _eprint(f"[ERROR] no combinator named {args.name!r}")
        return 2
    print(comb.help())
    return 0

# ------------------------------
# 엔트리 포인트
# ------------------------------

def main(argv: Optional[list[str]] = None) -> int:
    ap = argparse.ArgumentParser(prog="uparsec", description="uparse parser-combinator CLI")
    sub = ap.add_subparsers(dest="cmd", required=True)

    p_check = sub.add_parser("check", help="scan and compile a rule file")
    p_check.add_argument("file", help="rule source file")
    p_check.add_argument("-D", "--debug", action="store_true", help="print debug details")
    p_check.set_defaults(func=cmd_check)

    p_run = sub.add_parser("run", help="match input against a rule file")
    p_run.add_argument("file", help="rule source file")
    src_group = p_run.add_mutually_exclusive_group(required=True)
    src_group.add_argument("--text", help="input text given inline")
    src_group.add_argument("--input", help="path of the input file")
    p_run.add_argument("--binary", action="store_true", help="read --input as bytes")
    p_run.add_argument("--case", action="store_true", help="match text case-sensitively")
    p_run.add_argument("--var", action="append", metavar="NAME=RULE",
                       help="define a rule variable (repeatable)")
    p_run.add_argument("-D", "--debug", action="store_true", help="trace combinator calls")
    p_run.set_defaults(func=cmd_run)

    p_list = sub.add_parser("list", help="describe the built-in combinators")
    p_list.add_argument("name", nargs="?", help="a single keyword to describe")
    p_list.set_defaults(func=cmd_list)

    args = ap.parse_args(argv)
    return int(args.func(args))

if __name__ == "__main__":
    sys.exit(main())
