"""Turning a command line into a pipeline of commands."""

from __future__ import annotations

import os
from dataclasses import dataclass, field

from .expand import expand_variables
from .heredoc import Reader, next_heredoc_name, read_heredoc
from .splitting import remove_quotes, split_outside_quotes
from .state import ParseError, ShellState
from .syntax import check_syntax

INPUT_OPERATORS = ("<", "<<")
OUTPUT_OPERATORS = (">", ">>")


@dataclass
class Command:
    """One pipeline segment: its words and its redirections in order."""

    text: str
    args: list[str] = field(default_factory=list)
    stdin: list[tuple[str, str]] = field(default_factory=list)
    stdout: list[tuple[str, str]] = field(default_factory=list)
    index: int = 0


@dataclass
class Pipeline:
    """Commands joined by pipes."""

    commands: list[Command] = field(default_factory=list)

    @property
    def count(self) -> int:
        """Number of commands that have at least one word."""
        return sum(1 for command in self.commands if command.args)

    def __iter__(self):
        return iter(self.commands)

    def discard(self) -> None:
        """Remove the here-document files created for this pipeline."""
        for command in self.commands:
            for operator, target in command.stdin:
                if operator == "<<":
                    try:
                        os.unlink(target)
                    except FileNotFoundError:
                        pass


def _take_pairs(command: Command, operators: tuple[str, ...]) -> list[tuple[str, str]]:
    kept: list[str] = []
    found: list[tuple[str, str]] = []
    words = iter(command.args)
    for word in words:
        if word in operators:
            target = next(words, None)
            if target is None:
                command.args = kept
                raise ParseError(f"parse error near {word}")
            found.append((word, target))
        else:
            kept.append(word)
    command.args = kept
    return found


def extract_output_redirections(command: Command) -> None:
    """Move ``> file`` and ``>> file`` pairs from the words to ``stdout``."""
    command.stdout.extend(_take_pairs(command, OUTPUT_OPERATORS))


def extract_input_redirections(command: Command, reader: Reader | None = None) -> None:
    """Move ``< file`` and ``<< delimiter`` pairs from the words to ``stdin``.

    A here-document is read at once into a fresh file, which is recorded
    in place of its delimiter.
    """
    for operator, target in _take_pairs(command, INPUT_OPERATORS):
        if operator == "<<":
            path = next_heredoc_name()
            command.stdin.append((operator, path))
            read_heredoc(target, path, reader)
        else:
            command.stdin.append((operator, target))


def _fill_command(command: Command, state: ShellState, reader: Reader | None) -> None:
    words = split_outside_quotes(command.text, " ")
    command.args = [expand_variables(word, state) for word in words]
    extract_output_redirections(command)
    extract_input_redirections(command, reader)
    command.args = remove_quotes(command.args)


def parse_input(line: str, state: ShellState, reader: Reader | None = None) -> Pipeline:
    """Parse ``line`` into a pipeline.

    Raises ParseError, after marking ``state`` as not parsed and removing any
    here-document files already written, when the line is malformed.
    """
    state.parse_ok = True
    pipeline = Pipeline()
    try:
        check_syntax(line)
        for segment in split_outside_quotes(line, "|"):
            command = Command(text=segment, index=pipeline.count)
            pipeline.commands.append(command)
            _fill_command(command, state, reader)
    except ParseError:
        state.parse_ok = False
        pipeline.discard()
        raise
    return pipeline