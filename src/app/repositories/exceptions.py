class StorageError(Exception):
    """The persistence layer rejected a read or write."""


class DuplicateRecordError(StorageError):
    """A write violated a uniqueness constraint."""
