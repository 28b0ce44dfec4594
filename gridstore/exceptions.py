"""Custom exception classes for gridstore."""


class GridStoreException(Exception):
    """
    Base exception class for all gridstore errors.
    """
    pass


class DigestUnavailableError(GridStoreException):
    """
    Raised when the content hash algorithm cannot be instantiated.
    """
    pass


class StreamClosedError(GridStoreException):
    """
    Raised when writing to or aborting an upload stream that is already closed.
    """
    pass


class InvalidArgumentError(GridStoreException, ValueError):
    """
    Raised for missing buffers, out-of-range offsets/lengths or bad options.
    """
    pass


class StoreError(GridStoreException):
    """
    Raised when the underlying document store fails an insert or delete.
    """
    pass
