import os
import signal

import pytest

from minishell.builtins import ShellExit
from minishell.shell import PLAIN_PROMPT, build_prompt, main, run_line
from minishell.state import ShellState


def _fake_input(monkeypatch, items):
    feed = iter(items)

    def fake(prompt=""):
        item = next(feed)
        if isinstance(item, BaseException):
            raise item
        return item

    monkeypatch.setattr("builtins.input", fake)


def test_build_prompt_without_cwd():
    assert build_prompt(ShellState(), None) == "minishell > "
    assert PLAIN_PROMPT == "minishell > "


def test_build_prompt_cuts_home():
    state = ShellState(envp=["HOME=/home/user"])
    assert build_prompt(state, "/home/user/projects") == "\x1b[36m~/projects $ \x1b[0m"


def test_build_prompt_without_home_shows_full_path():
    state = ShellState(envp=["PATH=/bin"])
    assert build_prompt(state, "/srv") == "\x1b[36m~/srv $ \x1b[0m"


def test_run_line_export_updates_state():
    state = ShellState(envp=["A=1"])
    assert run_line("export B=$A", state) == 0
    assert state.lookup("B") == "1"


def test_run_line_parse_error(capsys):
    state = ShellState()
    assert run_line("| echo hi", state) == 1
    assert state.errornum == 1
    assert "parse error near '|'" in capsys.readouterr().err


def test_run_line_writes_redirected_output(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    state = ShellState()
    assert run_line("echo one two > out.txt", state) == 0
    assert (tmp_path / "out.txt").read_text() == "one two\n"


def test_run_line_removes_heredoc_files(tmp_path, monkeypatch, capsys):
    monkeypatch.chdir(tmp_path)
    lines = iter(["body", "END"])
    state = ShellState()
    run_line("echo x << END", state, lambda prompt: next(lines))
    assert capsys.readouterr().out == "x\n"
    assert [p for p in os.listdir(tmp_path) if p.startswith(".tmpheredoc")] == []


def test_run_line_exit_raises():
    with pytest.raises(ShellExit) as info:
        run_line("exit 9", ShellState())
    assert info.value.status == 9


def test_main_rejects_arguments(capsys):
    assert main(["extra"]) == 0
    assert capsys.readouterr().out == "This program does not accept any input\n"


def test_main_end_of_input_prints_exit(monkeypatch, capsys):
    _fake_input(monkeypatch, [EOFError()])
    assert main([]) == 0
    assert capsys.readouterr().out.endswith("exit\n")


def test_main_exit_status(monkeypatch):
    _fake_input(monkeypatch, ["export X=5", "exit $X"])
    assert main([]) == 5


def test_main_interrupt_sets_status(monkeypatch):
    _fake_input(monkeypatch, [KeyboardInterrupt(), "exit $?"])
    assert main([]) == 128 + signal.SIGINT.value