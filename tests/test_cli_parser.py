"""Tests for CLI command parsing."""

import pytest

from cli.models import (
    DeleteCommand,
    ExistsCommand,
    GetCommand,
    ListCommand,
    PutCommand,
    SweepCommand,
)
from cli.parser import ParseError, parse_command


def test_parse_put_minimal():
    assert parse_command('put report.pdf') == PutCommand(local_path='report.pdf')


def test_parse_put_full():
    cmd = parse_command('put build/out.bin nightly.bin --chunk-size 1024')
    assert cmd == PutCommand(local_path='build/out.bin', remote_filename='nightly.bin', chunk_size=1024)


def test_parse_put_option_before_arguments():
    cmd = parse_command('put --chunk-size 8 a.bin')
    assert cmd.chunk_size == 8
    assert cmd.local_path == 'a.bin'


def test_parse_put_quoted_path():
    cmd = parse_command('put "my file.txt"')
    assert cmd.local_path == 'my file.txt'


@pytest.mark.parametrize("line", [
    'put',
    'put a b c',
    'put a --chunk-size',
    'put a --chunk-size big',
    'put a --chunk-size 0',
])
def test_parse_put_errors(line):
    with pytest.raises(ParseError):
        parse_command(line)


def test_parse_get_defaults_to_newest():
    cmd = parse_command('get doc.txt')
    assert cmd == GetCommand(remote_filename='doc.txt', local_path=None, version=-1)


def test_parse_get_with_version():
    cmd = parse_command('get doc.txt out/doc.txt --version 2')
    assert cmd == GetCommand(remote_filename='doc.txt', local_path='out/doc.txt', version=2)


def test_parse_get_negative_version():
    assert parse_command('get doc.txt --version -3').version == -3


def test_parse_get_errors():
    with pytest.raises(ParseError):
        parse_command('get')
    with pytest.raises(ParseError):
        parse_command('get a b c')


def test_parse_list():
    assert parse_command('list') == ListCommand()
    assert parse_command('list a.txt') == ListCommand(filename='a.txt')
    with pytest.raises(ParseError):
        parse_command('list a b')


def test_parse_delete_and_exists():
    assert parse_command('delete a.txt') == DeleteCommand(filename='a.txt')
    assert parse_command('exists a.txt') == ExistsCommand(filename='a.txt')
    with pytest.raises(ParseError):
        parse_command('delete')
    with pytest.raises(ParseError):
        parse_command('exists a b')


def test_parse_sweep():
    assert parse_command('sweep') == SweepCommand()
    assert parse_command('sweep --grace 30') == SweepCommand(grace_seconds=30)
    with pytest.raises(ParseError):
        parse_command('sweep now')
    with pytest.raises(ParseError):
        parse_command('sweep --grace -1')


def test_empty_and_unknown_commands():
    with pytest.raises(ParseError):
        parse_command('   ')
    with pytest.raises(ParseError):
        parse_command('upload a.txt')


def test_unbalanced_quotes():
    with pytest.raises(ParseError):
        parse_command('put "unterminated')
