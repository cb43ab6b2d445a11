"""Custom exception classes for the grid store."""


class GridStoreException(Exception):
    """
    Base exception class for all grid store errors.
    """
    pass


class GridFileNotFoundError(GridStoreException):
    """
    Raised when no file metadata matches a selector at the requested version.
    """

    def __init__(self, selector):
        self.selector = selector
        super().__init__(f"File not found: {selector}")


class ChunkNotFoundError(GridStoreException):
    """
    Raised when a chunk expected by a file's metadata is absent.
    """

    def __init__(self, n: int, filename: str):
        self.n = n
        self.filename = filename
        super().__init__(f"Chunk {n} missing for: {filename}")


class ChunkSizeMismatchError(GridStoreException):
    """
    Raised when a chunk's payload length disagrees with its position in the file.
    """

    def __init__(self, n: int, filename: str, expected: int = None, actual: int = None):
        self.n = n
        self.filename = filename
        self.expected = expected
        self.actual = actual
        message = f"Chunk {n} for {filename} is the wrong size"
        if expected is not None:
            message += f" (expected {expected} bytes, got {actual})"
        super().__init__(message)


class BackingStoreError(GridStoreException):
    """
    Raised when the backing document store fails an operation.
    """
    pass


class InvalidQueryError(BackingStoreError):
    """
    Raised when a predicate or sort names an unknown field or direction.
    """
    pass


class UploadAbortedError(GridStoreException):
    """
    Raised when an upload's pending record or chunks vanish before its metadata is published.
    """

    def __init__(self, file_id: str, filename: str, reason: str):
        self.file_id = file_id
        self.filename = filename
        super().__init__(f"Upload of {filename} aborted [file_id={file_id}]: {reason}")
