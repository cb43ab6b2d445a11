"""Chunk document shape and the chunk sizing rules."""

from typing import Any, Dict, Mapping

from gridstore.exceptions import ChunkSizeMismatchError
from gridstore.utils import generate_id


def chunk_count(length: int, chunk_size: int) -> int:
    """
    Number of chunks needed to hold `length` bytes.

    Args:
        length: Total file length in bytes
        chunk_size: Bytes per chunk

    Returns:
        ceil(length / chunk_size)

    Raises:
        ValueError: If length is negative or chunk_size is not positive
    """
    if chunk_size <= 0:
        raise ValueError(f"chunk_size must be positive, got {chunk_size}")
    if length < 0:
        raise ValueError(f"length must be non-negative, got {length}")
    return (length + chunk_size - 1) // chunk_size


def expected_chunk_length(n: int, number_of_chunks: int, length: int, chunk_size: int) -> int:
    """
    Byte length the chunk at index `n` must have.

    Every chunk but the last is full; the last holds the remainder, or a
    full chunk when the length is an exact multiple of the chunk size.
    """
    if not 0 <= n < number_of_chunks:
        raise ValueError(f"Chunk index {n} out of range for {number_of_chunks} chunks")

    if n < number_of_chunks - 1:
        return chunk_size

    remainder = length % chunk_size
    if remainder == 0 and length > 0:
        return chunk_size
    return remainder


def build_chunk(files_id: str, n: int, data: bytes) -> Dict[str, Any]:
    """
    Build a chunk document for the given file id and sequence index.
    """
    return {
        "_id": generate_id(),
        "files_id": files_id,
        "n": n,
        "data": bytes(data),
    }


def validate_chunk(
    chunk: Mapping[str, Any],
    n: int,
    number_of_chunks: int,
    length: int,
    chunk_size: int,
    filename: str,
) -> bytes:
    """
    Check a fetched chunk against the size its position requires.

    Returns:
        The chunk payload

    Raises:
        ChunkSizeMismatchError: If the payload is absent or has the wrong length
    """
    expected = expected_chunk_length(n, number_of_chunks, length, chunk_size)
    data = chunk.get("data")

    if data is None:
        raise ChunkSizeMismatchError(n, filename, expected=expected, actual=None)

    if len(data) != expected:
        raise ChunkSizeMismatchError(n, filename, expected=expected, actual=len(data))

    return bytes(data)
