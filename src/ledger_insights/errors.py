from __future__ import annotations


class LedgerError(Exception):
    """Base class for every error raised by the engine."""


class InputError(LedgerError, ValueError):
    """Caller supplied something malformed: a period, a category or a setting payload."""


class SnapshotInconsistencyError(LedgerError, RuntimeError):
    """The snapshot contradicts itself, e.g. a transaction points at an unknown account."""
