"""Command dispatcher — maps ``timer <command> [args...]`` onto handlers."""

import sys
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, TextIO

import click

from rtimer.common.errors import (
    NotImplementedCommandError,
    TimerError,
    UnknownCommandError,
    UsageError,
)
from rtimer.common.logger import configure_logging, log
from rtimer.common.setup import PROGRAM_NAME, RuntimePaths
from rtimer.core.duration import parse_duration
from rtimer.core.store import TimerStore
from rtimer.util.misc import now_ts, validate_name

USAGE = f"""\
usage: {PROGRAM_NAME} <command> [arguments]

commands:
  start NAME DURATION   start a countdown named NAME (e.g. 30s, 5m, 1h30m)
  pause NAME            pause a running timer (not implemented)
  resume NAME           resume a paused timer (not implemented)
  remove NAME           delete a timer (alias: rm)
  is-active NAME        exit 0 if NAME is running with time left, 1 otherwise
  left NAME             print the seconds left on NAME
  duration NAME         print the total duration of NAME in seconds
  wait NAME             block until NAME expires (not implemented)
  list                  print the name of every timer (alias: ls)
  status                summarise all timers (not implemented)
  log                   show timer history (not implemented)
  help                  show this help (aliases: --help, -h)

Timers are kept in $TIMER_RUNTIME_DIR, or $XDG_RUNTIME_DIR/{PROGRAM_NAME} if that isn't set."""


class Command(Enum):
    """Every command the tool knows about, implemented or not.

    Each member carries its canonical name, any aliases, the positional
    arguments it takes and whether it is implemented yet. Unimplemented
    commands accept anything and always fail.
    """

    START = ("start", (), ("NAME", "DURATION"), True)
    PAUSE = ("pause", (), (), False)
    RESUME = ("resume", (), (), False)
    REMOVE = ("remove", ("rm",), ("NAME",), True)
    IS_ACTIVE = ("is-active", (), ("NAME",), True)
    LEFT = ("left", (), ("NAME",), True)
    DURATION = ("duration", (), ("NAME",), True)
    WAIT = ("wait", (), (), False)
    LIST = ("list", ("ls",), (), True)
    STATUS = ("status", (), (), False)
    LOG = ("log", (), (), False)
    HELP = ("help", ("--help", "-h"), (), True)

    def __init__(self, command_name, aliases, arguments, implemented):
        self.command_name = command_name
        self.aliases = aliases
        self.arguments = arguments
        self.implemented = implemented

    @classmethod
    def lookup(cls, word):
        for command in cls:
            if word == command.command_name or word in command.aliases:
                return command
        raise UnknownCommandError(word)

    # Raises a UsageError unless exactly the expected number of arguments were given.
    def check_arity(self, args):
        if len(args) != len(self.arguments):
            expected = " ".join(self.arguments) or "no arguments"
            raise UsageError(f"{self.command_name}: expected {expected}, got {len(args)} argument(s)")


# Everything a handler needs for one invocation. The store is only built on demand so commands that don't need
# storage never trip over a missing runtime directory.
@dataclass
class Session:

    paths: RuntimePaths
    out: TextIO
    clock: Callable[[], int] = now_ts
    _store: TimerStore | None = field(default=None, repr=False)

    @property
    def store(self) -> TimerStore:
        if self._store is None:
            self._store = TimerStore(self.paths.require_runtime_dir(), clock=self.clock)
        return self._store

    def echo(self, message):
        click.echo(message, file=self.out)


#region === Handlers ===

@click.group(context_settings={"help_option_names": []}, add_help_option=False)
def cli():
    pass


@cli.command("start", add_help_option=False)
@click.argument("name")
@click.argument("duration")
@click.pass_obj
def start_command(session, name, duration):
    validate_name(name)
    seconds = parse_duration(duration)
    session.store.create(name, seconds)


@cli.command("remove", add_help_option=False)
@click.argument("name")
@click.pass_obj
def remove_command(session, name):
    validate_name(name)
    session.store.remove(name)


@cli.command("is-active", add_help_option=False)
@click.argument("name")
@click.pass_obj
def is_active_command(session, name):
    validate_name(name)
    record = session.store.load(name)
    active = record.is_active(session.clock())
    log.debug(f"Timer '{name}' is {'active' if active else 'not active'}")
    return 0 if active else 1


@cli.command("left", add_help_option=False)
@click.argument("name")
@click.pass_obj
def left_command(session, name):
    validate_name(name)
    record = session.store.load(name)
    session.echo(record.left(session.clock()))


@cli.command("duration", add_help_option=False)
@click.argument("name")
@click.pass_obj
def duration_command(session, name):
    validate_name(name)
    session.echo(session.store.read_duration(name))


@cli.command("list", add_help_option=False)
@click.pass_obj
def list_command(session):
    for name in session.store.names():
        session.echo(name)


@cli.command("help", add_help_option=False)
@click.pass_obj
def help_command(session):
    session.echo(USAGE)

#endregion === Handlers ===


def dispatch(argv, session):
    """Run one command and return its exit code.

    The command word and argument count are checked here against
    :class:`Command` before click sees anything. Arguments are passed after
    ``--`` so names like ``-foo`` reach the handler (and its name validation)
    instead of being read as options.
    """
    if not argv:
        raise UsageError("no command given")
    command = Command.lookup(argv[0])
    args = list(argv[1:])
    if not command.implemented:
        raise NotImplementedCommandError(command.command_name)
    command.check_arity(args)

    log.debug(f"Dispatching '{command.command_name}' with arguments {args}")
    try:
        result = cli.main(
            args=[command.command_name, "--", *args],
            prog_name=PROGRAM_NAME,
            standalone_mode=False,
            obj=session,
        )
    except click.ClickException as e:
        raise UsageError(f"{command.command_name}: {e.format_message()}") from e
    return result or 0


# Process entry point. Builds configuration from the environment once, sets up logging, runs the command and turns
# any TimerError into a message on stderr and exit code 1.
def main(argv=None, environ=None, stdout=None, stderr=None, clock=now_ts):
    argv = sys.argv[1:] if argv is None else list(argv)
    stdout = sys.stdout if stdout is None else stdout
    stderr = sys.stderr if stderr is None else stderr

    try:
        paths = RuntimePaths.build(environ)
        configure_logging(paths.log_dir, level=paths.log_level, console=paths.debug, stream=stderr)
        for warning in paths.warnings:
            log.warning(warning)
        return dispatch(argv, Session(paths=paths, out=stdout, clock=clock))
    except TimerError as e:
        log.warning(f"'{' '.join(argv)}' failed: {e}")
        click.echo(f"{PROGRAM_NAME}: {e}", file=stderr)
        if e.show_usage:
            click.echo(USAGE, file=stderr)
        return 1
