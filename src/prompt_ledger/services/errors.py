"""Named failure conditions raised by the ledger.

Every error carries a stable ``code`` that the HTTP layer maps to a status
and echoes back to clients.
"""

from __future__ import annotations


class LedgerError(Exception):
    """Base class for all ledger rejections."""

    code = "ledger_error"


class ZeroIdentifierError(LedgerError):
    """The zero sentinel was supplied where a real identifier is required."""

    code = "zero_identifier"


class UnauthorizedError(LedgerError):
    """The caller does not hold the role the operation requires."""

    code = "unauthorized"


class AlreadySubmittedError(LedgerError):
    """A prompt has already been recorded for the request id."""

    code = "already_submitted"


class ResponseAlreadySetError(LedgerError):
    """A response has already been recorded for the request id."""

    code = "response_already_set"


class SessionExistsError(LedgerError):
    """A session with this id has already been created."""

    code = "session_exists"


class CapacityExceededError(LedgerError):
    """A global or per-session maximum has been reached."""

    code = "capacity_exceeded"


class InvalidSessionError(LedgerError):
    """The operation targets a session id that was never created."""

    code = "invalid_session"


class InvalidLengthError(LedgerError):
    """Batch arrays are mismatched, empty, or over the maximum size."""

    code = "invalid_length"


class InvalidIndexError(LedgerError):
    """An index read fell outside the current sequence length."""

    code = "invalid_index"


class LedgerPausedError(LedgerError):
    """An unprivileged write was attempted while the ledger is paused."""

    code = "paused"


class ReentrantCallError(LedgerError):
    """A guarded operation was invoked from within another guarded operation."""

    code = "reentrant_call"


class InvalidIdentityError(LedgerError):
    """A privileged or caller identity is the zero address or malformed."""

    code = "invalid_identity"
