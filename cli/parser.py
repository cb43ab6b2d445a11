"""Command parser for CLI input."""

import shlex
from typing import Optional

from cli.models import (
    CommandRequest,
    DeleteCommand,
    ExistsCommand,
    GetCommand,
    ListCommand,
    PutCommand,
    SweepCommand,
)


class ParseError(Exception):
    """Raised when command parsing fails."""

    pass


def parse_command(input_line: str) -> CommandRequest:
    """Parse user input into a CommandRequest object.

    Args:
        input_line: Raw command line

    Returns:
        CommandRequest object (one of Put/Get/List/Delete/Exists/Sweep)

    Raises:
        ParseError: If command syntax is invalid
    """
    if not input_line.strip():
        raise ParseError("Empty command")

    try:
        tokens = shlex.split(input_line)
    except ValueError as e:
        raise ParseError(f"Invalid syntax: {e}")

    if not tokens:
        raise ParseError("Empty command")

    command_name = tokens[0]

    if command_name == "put":
        return _parse_put(tokens[1:])
    elif command_name == "get":
        return _parse_get(tokens[1:])
    elif command_name == "list":
        return _parse_list(tokens[1:])
    elif command_name == "delete":
        return _parse_delete(tokens[1:])
    elif command_name == "exists":
        return _parse_exists(tokens[1:])
    elif command_name == "sweep":
        return _parse_sweep(tokens[1:])
    else:
        raise ParseError(f"Unknown command: {command_name}")


def _pop_int_option(args: list[str], name: str) -> Optional[int]:
    """Remove '<name> N' from args and return N, or None if absent."""
    if name not in args:
        return None

    index = args.index(name)
    if index + 1 >= len(args):
        raise ParseError(f"{name} requires a value")

    raw = args[index + 1]
    del args[index:index + 2]

    try:
        return int(raw)
    except ValueError:
        raise ParseError(f"{name} must be an integer, got '{raw}'")


def _parse_put(args: list[str]) -> PutCommand:
    """Parse 'put <local> [remote] [--chunk-size N]' command."""
    args = list(args)
    chunk_size = _pop_int_option(args, "--chunk-size")

    if chunk_size is not None and chunk_size <= 0:
        raise ParseError("--chunk-size must be positive")
    if not 1 <= len(args) <= 2:
        raise ParseError("put requires <local_path> [remote_filename]")

    remote = args[1] if len(args) > 1 else None
    return PutCommand(local_path=args[0], remote_filename=remote, chunk_size=chunk_size)


def _parse_get(args: list[str]) -> GetCommand:
    """Parse 'get <remote> [local] [--version N]' command."""
    args = list(args)
    version = _pop_int_option(args, "--version")

    if not 1 <= len(args) <= 2:
        raise ParseError("get requires <remote_filename> [local_path]")

    local = args[1] if len(args) > 1 else None
    return GetCommand(
        remote_filename=args[0],
        local_path=local,
        version=-1 if version is None else version,
    )


def _parse_list(args: list[str]) -> ListCommand:
    """Parse 'list [filename]' command."""
    if len(args) > 1:
        raise ParseError("list takes at most one filename")

    return ListCommand(filename=args[0] if args else None)


def _parse_delete(args: list[str]) -> DeleteCommand:
    """Parse 'delete <filename>' command."""
    if len(args) != 1:
        raise ParseError("delete requires exactly 1 argument: <filename>")

    return DeleteCommand(filename=args[0])


def _parse_exists(args: list[str]) -> ExistsCommand:
    """Parse 'exists <filename>' command."""
    if len(args) != 1:
        raise ParseError("exists requires exactly 1 argument: <filename>")

    return ExistsCommand(filename=args[0])


def _parse_sweep(args: list[str]) -> SweepCommand:
    """Parse 'sweep [--grace SECONDS]' command."""
    args = list(args)
    grace = _pop_int_option(args, "--grace")

    if args:
        raise ParseError(f"Unexpected arguments for sweep: {' '.join(args)}")
    if grace is not None and grace < 0:
        raise ParseError("--grace must be non-negative")

    return SweepCommand(grace_seconds=grace)
