"""Tests for shell script emission."""

from __future__ import annotations

import pytest

from hop_py.shell import SCRIPT_WARNING, detect_shell, emit_script, generate_init_script, q, script_cd


def test_quote_single_quotes() -> None:
    assert q("it's") == "'it'\"'\"'s'"


def test_script_cd() -> None:
    assert script_cd("/tmp/my dir") == ["cd '/tmp/my dir'"]


def test_emit_script(capsys) -> None:
    emit_script(["cd '/a'", "echo hi"])
    assert capsys.readouterr().out == f"{SCRIPT_WARNING}\ncd '/a' && \\\n  echo hi\n"


@pytest.mark.parametrize("shell_path,expected", [("/bin/zsh", "zsh"), ("/usr/bin/fish", "fish"), ("/bin/tcsh", "bash"), ("", "bash")])
def test_detect_shell(monkeypatch: pytest.MonkeyPatch, shell_path: str, expected: str) -> None:
    monkeypatch.setenv("SHELL", shell_path)
    assert detect_shell() == expected


class TestInitScript:
    def test_bash(self) -> None:
        script = generate_init_script("bash", command="hop-bin")
        assert "hop() {" in script
        assert 'out=$(hop-bin exec "$@")' in script
        assert "complete -o dirnames hop" in script

    def test_zsh_completion(self) -> None:
        assert "compdef '_files -/' hop" in generate_init_script("zsh", command="hop-bin")

    def test_fish(self) -> None:
        script = generate_init_script("fish", command="hop-bin")
        assert "function hop" in script
        assert "hop-bin exec $argv" in script

    def test_default_command_runs_module(self) -> None:
        assert "-m hop_py exec" in generate_init_script("bash")
