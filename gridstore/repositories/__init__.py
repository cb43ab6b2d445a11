"""Backing store access: document collections and server-side commands."""

from gridstore.repositories.command_runner import CommandRunner
from gridstore.repositories.document_collection import DocumentCollection

__all__ = ["CommandRunner", "DocumentCollection"]
