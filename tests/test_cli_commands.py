"""Tests for CLI command handlers."""

import io
from unittest.mock import Mock

import pytest

import cli.commands
from cli.commands import (
    handle_delete,
    handle_exists,
    handle_get,
    handle_list,
    handle_put,
    handle_sweep,
)
from cli.main import main
from cli.models import (
    DeleteCommand,
    ExistsCommand,
    GetCommand,
    ListCommand,
    PutCommand,
    SweepCommand,
)
from cli.repl import dispatch_command
from cli.utils import format_file_size
from gridstore.exceptions import BackingStoreError
from gridstore.services.grid_service import GridStore


def test_handle_delete_with_mock():
    """Test delete command handler with mocked store."""
    mock_store = Mock(spec=GridStore)
    mock_store.delete.return_value = ["id-1", "id-2"]

    result = handle_delete(DeleteCommand(filename='a.txt'), store=mock_store)

    assert result == "Deleted 2 version(s) of a.txt."
    mock_store.delete.assert_called_once_with('a.txt')


def test_handle_delete_nothing():
    mock_store = Mock(spec=GridStore)
    mock_store.delete.return_value = []

    assert 'No files named' in handle_delete(DeleteCommand(filename='a.txt'), store=mock_store)


def test_handle_exists_with_mock():
    mock_store = Mock(spec=GridStore)
    mock_store.exists.return_value = True

    assert handle_exists(ExistsCommand(filename='a.txt'), store=mock_store) == "a.txt exists."
    mock_store.exists.assert_called_once_with('a.txt')


@pytest.mark.parametrize("handler,cmd,method", [
    (handle_delete, DeleteCommand(filename='a.txt'), 'delete'),
    (handle_exists, ExistsCommand(filename='a.txt'), 'exists'),
    (handle_list, ListCommand(), 'find'),
    (handle_get, GetCommand(remote_filename='a.txt', local_path='a.txt'), 'download_file'),
])
def test_handlers_report_backing_store_errors(handler, cmd, method):
    mock_store = Mock(spec=GridStore)
    getattr(mock_store, method).side_effect = BackingStoreError("database is locked")

    result = handler(cmd, store=mock_store)

    assert result == "Error: database is locked"


def test_handle_sweep_reports_backing_store_errors(store, monkeypatch):
    def locked(field):
        raise BackingStoreError("database is locked")

    monkeypatch.setattr(store.chunks, 'distinct', locked)

    assert handle_sweep(SweepCommand(), store=store) == "Error: database is locked"


def test_get_into_unwritable_path(store, tmp_path):
    store.upload(io.BytesIO(b'payload'), 'doc.txt')

    result = handle_get(GetCommand(remote_filename='doc.txt', local_path=str(tmp_path)), store=store)

    assert result.startswith("Error:")


def test_put_and_get_round_trip(store, sample_file, tmp_path):
    result = handle_put(PutCommand(local_path=str(sample_file)), store=store)
    assert result.startswith("Stored: sample.bin")

    out = tmp_path / 'copy.bin'
    result = handle_get(GetCommand(remote_filename='sample.bin', local_path=str(out)), store=store)

    assert result.startswith("Downloaded: sample.bin")
    assert out.read_bytes() == sample_file.read_bytes()


def test_put_with_remote_name_and_chunk_size(store, sample_file):
    handle_put(PutCommand(local_path=str(sample_file), remote_filename='renamed.bin', chunk_size=7), store=store)

    file_info = store.find_one('renamed.bin')
    assert file_info.chunk_size == 7
    assert file_info.length == 30


def test_put_missing_local_file(store, tmp_path):
    result = handle_put(PutCommand(local_path=str(tmp_path / 'nope.bin')), store=store)
    assert result.startswith("Error:")
    assert store.find() == []


def test_get_missing_remote_file(store, tmp_path):
    out = tmp_path / 'out.bin'
    result = handle_get(GetCommand(remote_filename='absent.bin', local_path=str(out)), store=store)

    assert result.startswith("Error:")
    assert not out.exists()


def test_get_older_version(store, clock, tmp_path):
    store.upload(io.BytesIO(b'v1'), 'doc.txt')
    clock.advance(5)
    store.upload(io.BytesIO(b'v2'), 'doc.txt')

    out = tmp_path / 'doc.txt'
    handle_get(GetCommand(remote_filename='doc.txt', local_path=str(out), version=1), store=store)
    assert out.read_bytes() == b'v1'


def test_handle_list(store, sample_file):
    assert handle_list(ListCommand(), store=store) == "No files found."

    handle_put(PutCommand(local_path=str(sample_file)), store=store)
    result = handle_list(ListCommand(filename='sample.bin'), store=store)

    assert result.startswith("Found 1 file(s):")
    assert 'sample.bin' in result
    assert '30 B' in result


def test_handle_sweep(store):
    store.chunks.insert({"_id": "c1", "files_id": "ghost", "n": 0, "data": b"boo"})

    result = handle_sweep(SweepCommand(grace_seconds=0), store=store)

    assert "Swept 1 abandoned upload(s), removed 1 chunk(s)" in result
    assert store.chunks.count() == 0


def test_dispatch_command_routes_to_handler():
    mock_store = Mock(spec=GridStore)
    mock_store.exists.return_value = False

    result = dispatch_command(ExistsCommand(filename='x'), store=mock_store)

    assert result == "x does not exist."


def test_main_runs_single_command(store, monkeypatch, capsys):
    monkeypatch.setattr(cli.commands, '_store', store)

    assert main(['exists', 'nothing.bin']) == 0
    assert 'nothing.bin does not exist.' in capsys.readouterr().out


def test_main_reports_parse_errors(capsys):
    assert main(['frobnicate']) == 2
    assert 'Unknown command' in capsys.readouterr().err


@pytest.mark.parametrize("size,expected", [
    (0, "0 B"),
    (1023, "1023 B"),
    (1024, "1.00 KiB"),
    (1536, "1.50 KiB"),
    (5 * 1024 * 1024, "5.00 MiB"),
])
def test_format_file_size(size, expected):
    assert format_file_size(size) == expected
