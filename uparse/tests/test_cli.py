from __future__ import annotations

from uparse.uparsec import main


def test_check_reports_step_count(rules_file, capsys):
    path = rules_file('some "a" <end>')
    assert main(["check", path]) == 0
    assert "[CHECK OK] steps=2" in capsys.readouterr().out


def test_check_debug_dumps_rules(rules_file, capsys):
    path = rules_file('"a" | "b"')
    assert main(["check", path, "-D"]) == 0
    assert "[DEBUG] rules compiled" in capsys.readouterr().err


def test_check_syntax_error(rules_file, capsys):
    assert main(["check", rules_file("[a")]) == 2
    assert "[SYNTAX ERROR]" in capsys.readouterr().err


def test_check_rule_error(rules_file, capsys):
    assert main(["check", rules_file("some")]) == 2
    assert "[RULE ERROR]" in capsys.readouterr().err


def test_run_match(rules_file, capsys):
    path = rules_file('collect [some keep "a"] <end>')
    assert main(["run", path, "--text", "aaa"]) == 0
    out = capsys.readouterr().out
    assert "[MATCH] remainder=3 furthest=3 value='aaa'" in out
    assert "[RESULT] ['a', 'a', 'a']" in out


def test_run_no_match_points_at_furthest(rules_file, capsys):
    path = rules_file('some "a" <end>')
    assert main(["run", path, "--text", "aab"]) == 1
    out = capsys.readouterr().out
    assert "[NO MATCH] furthest=2" in out
    assert "aab\n  ^" in out


def test_run_case_flag(rules_file):
    path = rules_file('"abc"')
    assert main(["run", path, "--text", "ABC"]) == 0
    assert main(["run", path, "--text", "ABC", "--case"]) == 1


def test_run_with_variables(rules_file, capsys):
    path = rules_file("ab ab <end>")
    assert main(["run", path, "--text", "aabab", "--var", 'ab=[some "a" "b"]']) == 0
    assert "remainder=5" in capsys.readouterr().out


def test_run_bad_variable(rules_file, capsys):
    assert main(["run", rules_file('"a"'), "--text", "a", "--var", "novalue"]) == 2
    assert "[SYNTAX ERROR]" in capsys.readouterr().err


def test_run_reports_emits(rules_file, capsys):
    path = rules_file('emit name across to " " skip')
    assert main(["run", path, "--text", "bob x"]) == 0
    assert "[EMIT] name='bob'" in capsys.readouterr().out


def test_run_input_file(rules_file, tmp_path):
    data = tmp_path / "data.bin"
    data.write_bytes(b"\x00\x01")
    path = rules_file("#{0001} <end>")
    assert main(["run", path, "--input", str(data), "--binary"]) == 0


def test_run_usage_error(rules_file, capsys):
    assert main(["run", rules_file('keep "a"'), "--text", "a"]) == 2
    assert "[RULE ERROR]" in capsys.readouterr().err


def test_run_missing_file(capsys):
    assert main(["run", "does-not-exist.r", "--text", "a"]) == 2
    assert "[ERROR]" in capsys.readouterr().err


def test_list(capsys):
    assert main(["list"]) == 0
    out = capsys.readouterr().out
    assert "<here> -> <here>:" in out
    assert "some -> some:" in out

    assert main(["list", "SOME"]) == 0
    assert capsys.readouterr().out.startswith("some: ")

    assert main(["list", "nope"]) == 2
