"""Command request data types for CLI."""

from dataclasses import dataclass
from typing import Literal, Optional, Union


@dataclass(frozen=True)
class PutCommand:
    """Upload a local file as a new version."""

    local_path: str
    remote_filename: Optional[str] = None
    chunk_size: Optional[int] = None
    command: Literal["put"] = "put"


@dataclass(frozen=True)
class GetCommand:
    """Download one version of a file."""

    remote_filename: str
    local_path: Optional[str] = None
    version: int = -1
    command: Literal["get"] = "get"


@dataclass(frozen=True)
class ListCommand:
    """List stored versions, optionally of one filename."""

    filename: Optional[str] = None
    command: Literal["list"] = "list"


@dataclass(frozen=True)
class DeleteCommand:
    """Delete every version of a file."""

    filename: str
    command: Literal["delete"] = "delete"


@dataclass(frozen=True)
class ExistsCommand:
    """Check whether a file is stored."""

    filename: str
    command: Literal["exists"] = "exists"


@dataclass(frozen=True)
class SweepCommand:
    """Remove chunks left behind by abandoned uploads."""

    grace_seconds: Optional[int] = None
    command: Literal["sweep"] = "sweep"


CommandRequest = Union[
    PutCommand,
    GetCommand,
    ListCommand,
    DeleteCommand,
    ExistsCommand,
    SweepCommand,
]
