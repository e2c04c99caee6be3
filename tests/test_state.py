import pytest

from minishell.state import ParseError, ShellState, find_env_index, report_error

ENV = ["PATH=/bin:/usr/bin", "HOME=/home/user", "EMPTY=", "A=b=c", "BARE"]


def test_find_env_index_exact_name():
    assert find_env_index(ENV, "HOME") == 1
    assert find_env_index(ENV, "PATH") == 0


@pytest.mark.parametrize("name", ["HOM", "HOMEX", "home", "NOPE", None])
def test_find_env_index_no_match(name):
    assert find_env_index(ENV, name) is None


def test_find_env_index_bare_entry():
    assert find_env_index(ENV, "BARE") == 4


def test_lookup_values():
    state = ShellState(ENV)
    assert state.lookup("HOME") == "/home/user"
    assert state.lookup("A") == "b=c"
    assert state.lookup("EMPTY") == ""
    assert state.lookup("BARE") == ""
    assert state.lookup("MISSING") is None


def test_lookup_exit_status():
    state = ShellState(ENV, errornum=42)
    assert state.lookup("?") == "42"


def test_state_copies_environment():
    env = list(ENV)
    state = ShellState(env)
    env.append("NEW=1")
    assert state.lookup("NEW") is None
    assert len(state.envp) == len(ENV)


def test_report_error_writes_stderr(capsys):
    assert report_error("minishell: command not found: ", "foo") == 1
    assert capsys.readouterr().err == "minishell: command not found: foo\n"


def test_report_error_without_subject(capsys):
    assert report_error("export malloc fail") == 1
    assert capsys.readouterr().err == "export malloc fail\n"


def test_parse_error_carries_message():
    error = ParseError("minishell: parse error near '|'")
    assert str(error) == "minishell: parse error near '|'"
    assert isinstance(error, Exception)