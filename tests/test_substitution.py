import sys
from pathlib import Path

import pytest

from tosh.core.substitution import (
    SubstitutionSpan,
    evaluate,
    expand_substitution,
    find_substitution,
    strip_final_newline,
)
from tosh.errors import ProcessLaunchError


def _python(code: str) -> list[str]:
    return [sys.executable, "-c", code]


ECHO_INPUT = _python("import sys; sys.stdout.write(sys.stdin.read())")


def test_parenthesised_span() -> None:
    span = find_substitution("$(echo hi)")
    assert span == SubstitutionSpan(expr_start=2, expr_end=9, match_start=0, match_end=10)
    assert span.expression("$(echo hi)") == "echo hi"


def test_bare_word_span_runs_to_whitespace() -> None:
    arg = "a$word rest"
    span = find_substitution(arg)
    assert span is not None
    assert span.expression(arg) == "word"
    assert arg[span.match_start : span.match_end] == "$word"


def test_bare_word_span_runs_to_end() -> None:
    arg = "x$pwd"
    span = find_substitution(arg)
    assert span is not None
    assert span.expression(arg) == "pwd"


@pytest.mark.parametrize("arg", ["plain", "$", "a$ b", "$(unclosed"])
def test_no_substitution(arg: str) -> None:
    assert find_substitution(arg) is None


def test_first_closing_bracket_ends_the_expression() -> None:
    arg = "$(a (b))"
    span = find_substitution(arg)
    assert span is not None
    assert span.expression(arg) == "a (b"
    assert span.splice(arg, "X") == "X)"


def test_only_first_expression_is_located() -> None:
    arg = "$(one)$(two)"
    span = find_substitution(arg)
    assert span is not None
    assert span.expression(arg) == "one"


def test_only_one_trailing_newline_is_stripped() -> None:
    assert strip_final_newline("a\n\n") == "a\n"
    assert strip_final_newline("a\nb") == "a\nb"
    assert strip_final_newline("") == ""


def test_output_is_spliced_in_place_of_the_whole_match() -> None:
    assert expand_substitution("pre$(echo hi)post", command=ECHO_INPUT) == "preecho hipost"


def test_bare_form_is_spliced() -> None:
    assert expand_substitution("<$pwd", command=ECHO_INPUT) == "<pwd"


def test_argument_without_substitution_is_unchanged() -> None:
    assert expand_substitution("plain", command=["/nonexistent/tosh"]) == "plain"


def test_empty_expression_needs_no_subshell() -> None:
    assert expand_substitution("a$()b", command=["/nonexistent/tosh"]) == "ab"


def test_embedded_newlines_are_preserved() -> None:
    command = _python("print('one'); print('two')")
    assert evaluate("ignored", command=command) == "one\ntwo"


def test_large_output_is_read_to_the_end() -> None:
    command = _python("import sys; sys.stdin.read(); sys.stdout.write('x' * 300000 + '\\n')")
    assert evaluate("big", command=command) == "x" * 300000


def test_subshell_options_are_forced_off(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("TOSH_VERBOSE", "ON")
    monkeypatch.setenv("TOSH_DEBUG", "ON")
    command = _python("import os; print(os.environ['TOSH_VERBOSE'], os.environ['TOSH_DEBUG'])")
    assert evaluate("x", command=command) == "OFF OFF"


def test_child_that_exits_early_is_reaped() -> None:
    assert evaluate("x", command=_python("pass")) == ""


def test_missing_interpreter_is_a_launch_error() -> None:
    with pytest.raises(ProcessLaunchError) as excinfo:
        evaluate("x", command=["/nonexistent/tosh"])
    assert excinfo.value.program == "/nonexistent/tosh"


def test_subshell_runs_external_command() -> None:
    assert expand_substitution("$(echo hi)") == "hi"


def test_subshell_ignores_modules_in_working_directory(tmp_path: Path) -> None:
    shadow = "raise SystemExit('shadowed module imported')\n"
    (tmp_path / "glob.py").write_text(shadow, encoding="utf-8")
    (tmp_path / "typer.py").write_text(shadow, encoding="utf-8")
    (tmp_path / "tosh").mkdir()
    (tmp_path / "tosh" / "__init__.py").write_text(shadow, encoding="utf-8")
    assert expand_substitution("$(echo hi)") == "hi"


def test_subshell_directory_change_stays_in_the_child(tmp_path: Path) -> None:
    (tmp_path / "inner").mkdir()
    assert expand_substitution("[$(cd inner)]") == "[]"
    assert Path.cwd() == tmp_path


def test_subshell_sees_parent_directory(tmp_path: Path) -> None:
    assert expand_substitution("$(pwd)") == str(tmp_path)


def test_subshell_builtin_output_is_captured() -> None:
    assert "TOSH_VERBOSE=OFF" in expand_substitution("$(showenv)").splitlines()
