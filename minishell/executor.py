"""Running a parsed pipeline: builtins in-process, other commands as child processes."""

from __future__ import annotations

import io
import os
import subprocess
import sys
import tempfile
from typing import IO, Any

from .builtins import ShellExit, is_builtin, is_nofork_builtin, run_builtin
from .parser import Command, Pipeline
from .state import ShellState, find_env_index, report_error

NOT_FOUND = "minishell: command not found: "
INFILE_ERROR = "minishell: infile: No such file or directory: "
OUTFILE_ERROR = "minishell: outfile: error opening file: "
NOT_FOUND_STATUS = 127


def get_paths(envp: list[str]) -> list[str] | None:
    """Return the directories of ``PATH``, each ending in ``/``; None if unset."""
    index = find_env_index(envp, "PATH")
    if index is None:
        return None
    value = envp[index].partition("=")[2]
    return [d if d.endswith("/") else d + "/" for d in value.split(":") if d]


def resolve_command(name: str, envp: list[str]) -> str | None:
    """Return the file to run for ``name``: itself if it exists, else a PATH match."""
    if name and os.path.exists(name):
        return name
    if not name:
        return None
    for directory in get_paths(envp) or ():
        candidate = directory + name
        if os.path.exists(candidate):
            return candidate
    return None


def apply_redirections(command: Command, stdin: Any, stdout: Any) -> tuple[Any, Any]:
    """Open the command's redirection files and return the resulting streams.

    Each redirection replaces the stream before it, as later ones win.
    Files opened here and returned belong to the caller. Raises OSError,
    after reporting it, when a file cannot be opened.
    """
    opened: list[IO[bytes]] = []
    try:
        for _, target in command.stdin:
            try:
                handle = open(target, "rb")
            except OSError:
                report_error(INFILE_ERROR, target)
                raise
            opened.append(handle)
            stdin = handle
        for operator, target in command.stdout:
            append = operator == ">>"
            flags = os.O_RDWR | os.O_CREAT | (os.O_APPEND if append else os.O_TRUNC)
            try:
                fd = os.open(target, flags, 0o600)
            except OSError:
                report_error(OUTFILE_ERROR, target)
                raise
            handle = os.fdopen(fd, "ab" if append else "wb")
            opened.append(handle)
            stdout = handle
    except OSError:
        for handle in opened:
            handle.close()
        raise
    for handle in opened:
        if handle is not stdin and handle is not stdout:
            handle.close()
    return stdin, stdout


def _environment(envp: list[str]) -> dict[str, str]:
    env: dict[str, str] = {}
    for entry in envp:
        name, sep, value = entry.partition("=")
        if sep:
            env[name] = value
    return env


def _close(stream: Any) -> None:
    if hasattr(stream, "close"):
        stream.close()


def _builtin_in_child(args: list[str], state: ShellState) -> tuple[int, str]:
    """Run a builtin as a pipeline stage without touching the shell's own state."""
    scratch = ShellState(envp=list(state.envp), errornum=state.errornum)
    buffer = io.StringIO()
    try:
        cwd: str | None = os.getcwd()
    except OSError:
        cwd = None
    try:
        status = run_builtin(scratch, args, buffer)
    except ShellExit as exc:
        status = exc.status
    finally:
        if cwd is not None:
            try:
                os.chdir(cwd)
            except OSError:
                pass
    return status, buffer.getvalue()


def _start_stage(
    command: Command,
    state: ShellState,
    env: dict[str, str],
    stdin: Any,
    stdout: Any,
) -> tuple[Any, Any]:
    """Start one stage; return its Popen or status and the stream for the next stage."""
    if not command.args:
        return 0, None
    if is_builtin(command.args[0]):
        status, text = _builtin_in_child(command.args, state)
        if stdout is subprocess.PIPE:
            spool = tempfile.TemporaryFile()
            spool.write(text.encode())
            spool.seek(0)
            return status, spool
        if stdout is None:
            sys.stdout.write(text)
            sys.stdout.flush()
        else:
            stdout.write(text.encode())
        return status, None
    path = resolve_command(command.args[0], state.envp)
    if path is None:
        report_error(NOT_FOUND, command.args[0])
        return NOT_FOUND_STATUS, None
    executable = path if os.path.dirname(path) else os.path.join(os.curdir, path)
    sys.stdout.flush()
    try:
        process = subprocess.Popen(
            list(command.args),
            executable=executable,
            stdin=stdin,
            stdout=stdout,
            env=env,
        )
    except OSError:
        report_error(NOT_FOUND, command.args[0])
        return NOT_FOUND_STATUS, None
    return process, process.stdout


def _run_stages(commands: list[Command], state: ShellState) -> int:
    env = _environment(state.envp)
    stages: list[Any] = []
    previous: Any = None
    last = len(commands) - 1
    for position, command in enumerate(commands):
        piped = position < last
        incoming = previous
        previous = subprocess.DEVNULL if piped else None
        try:
            stage_in, stage_out = apply_redirections(command, incoming, None)
        except OSError:
            stages.append(1)
            _close(incoming)
            continue
        target = stage_out
        if target is None and piped:
            target = subprocess.PIPE
        try:
            stage, following = _start_stage(command, state, env, stage_in, target)
        finally:
            if stage_in is not incoming:
                _close(stage_in)
            _close(stage_out)
            _close(incoming)
        stages.append(stage)
        if piped and following is not None:
            previous = following
        else:
            _close(following)
    status = 0
    for stage in stages:
        if isinstance(stage, subprocess.Popen):
            code = stage.wait()
            status = code if code >= 0 else 1
        else:
            status = stage
    return status


def execute(pipeline: Pipeline, state: ShellState) -> None:
    """Run ``pipeline`` and store the exit status of its last command in ``state``.

    A single ``exit``, ``cd``, ``export`` or ``unset`` runs in the shell itself,
    so ``exit`` raises ShellExit here.
    """
    if not state.parse_ok:
        state.errornum = 1
        return
    commands = list(pipeline)
    if pipeline.count == 1 and commands and is_nofork_builtin(commands[0].args):
        state.errornum = run_builtin(state, commands[0].args)
        return
    if not commands:
        return
    state.errornum = _run_stages(commands, state)