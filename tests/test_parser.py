import os

import pytest

from minishell.parser import (
    Command,
    Pipeline,
    extract_input_redirections,
    extract_output_redirections,
    parse_input,
)
from minishell.state import ParseError, ShellState


def make_reader(lines):
    items = iter(lines)
    return lambda prompt: next(items, None)


@pytest.fixture
def state():
    return ShellState(envp=["HOME=/home/user", "X=val", "PATH=/bin"])


def test_simple_pipeline(state):
    pipeline = parse_input("ls -l | wc", state)
    assert [c.args for c in pipeline] == [["ls", "-l"], ["wc"]]
    assert pipeline.count == 2
    assert [c.index for c in pipeline] == [0, 1]
    assert state.parse_ok is True


def test_expansion_and_quotes(state):
    pipeline = parse_input("echo $HOME 'a b' \"$X\" '$X'", state)
    assert pipeline.commands[0].args == ["echo", "/home/user", "a b", "val", "$X"]


def test_pipe_inside_quotes_is_not_split(state):
    pipeline = parse_input("echo 'a|b'", state)
    assert len(pipeline.commands) == 1
    assert pipeline.commands[0].args == ["echo", "a|b"]


def test_output_redirections(state):
    command = parse_input("echo hi > out >> log", state).commands[0]
    assert command.args == ["echo", "hi"]
    assert command.stdout == [(">", "out"), (">>", "log")]
    assert command.stdin == []


def test_input_redirection(state):
    command = parse_input("cat < in", state).commands[0]
    assert command.args == ["cat"]
    assert command.stdin == [("<", "in")]


def test_missing_output_target(state):
    with pytest.raises(ParseError, match="parse error near >"):
        parse_input("echo >", state)
    assert state.parse_ok is False


def test_missing_input_target(state):
    with pytest.raises(ParseError, match="parse error near <"):
        parse_input("cat <", state)
    assert state.parse_ok is False


def test_leading_pipe_rejected(state):
    with pytest.raises(ParseError):
        parse_input("| ls", state)
    assert state.parse_ok is False


def test_empty_line(state):
    pipeline = parse_input("", state)
    assert pipeline.commands == []
    assert pipeline.count == 0


def test_blank_segment_not_counted(state):
    pipeline = parse_input("ls |   ", state)
    assert len(pipeline.commands) == 2
    assert pipeline.commands[1].args == []
    assert pipeline.count == 1


def test_heredoc_written_and_discarded(state, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    pipeline = parse_input("cat << END", state, make_reader(["x", "y", "END"]))
    command = pipeline.commands[0]
    assert command.args == ["cat"]
    [(operator, path)] = command.stdin
    assert operator == "<<"
    assert path.startswith(".tmpheredoc")
    with open(path) as handle:
        assert handle.read() == "x\ny\n"
    pipeline.discard()
    assert not os.path.exists(path)


def test_heredoc_removed_on_later_error(state, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    with pytest.raises(ParseError):
        parse_input("cat << END | wc >", state, make_reader(["END"]))
    assert list(tmp_path.iterdir()) == []


def test_extract_output_directly():
    command = Command(text="", args=["a", ">", "f", "b"])
    extract_output_redirections(command)
    assert command.args == ["a", "b"]
    assert command.stdout == [(">", "f")]


def test_extract_input_keeps_order(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    command = Command(text="", args=["cat", "<", "one", "<<", "E", "<", "two"])
    extract_input_redirections(command, make_reader(["E"]))
    assert command.args == ["cat"]
    assert [op for op, _ in command.stdin] == ["<", "<<", "<"]
    assert command.stdin[0] == ("<", "one")
    assert command.stdin[2] == ("<", "two")
    Pipeline(commands=[command]).discard()
    assert list(tmp_path.iterdir()) == []


def test_quoted_operator_is_a_word(state):
    command = parse_input("echo '>' x", state).commands[0]
    assert command.args == ["echo", ">", "x"]
    assert command.stdout == []