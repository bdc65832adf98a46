"""
Error taxonomy for the availability core.

Validation and conflict errors are raised before a transaction begins, so nothing is ever
partially applied. TransactionError is the only retryable error; it is raised by the
transaction wrapper when the backing store aborts a write because of a concurrent one.
"""
from collections.abc import Callable


class AvailabilityError(Exception):
    """Base class for errors raised by the availability core."""


class ValidationError(AvailabilityError):
    """Caller supplied an invalid range or interval."""


class ConflictError(ValidationError):
    """A write batch is inconsistent with itself (its intervals overlap each other)."""


class TransactionError(AvailabilityError):
    """The backing store aborted the transaction because of a concurrent conflict."""

    def __init__(self, message: str, *, attempts: int = 1):
        super().__init__(message)
        self.attempts = attempts


# ---------------------------------------------------------------------------
# Retryable driver errors: list of predicates over the DBAPI exception.
# Add new rules here instead of scattering checks in the store.
# ---------------------------------------------------------------------------

# SQLSTATE: serialization_failure, deadlock_detected
RETRYABLE_SQLSTATES = frozenset({"40001", "40P01"})


def _sqlstate(orig: BaseException) -> str | None:
    # psycopg2 exposes pgcode, psycopg 3 exposes sqlstate
    return getattr(orig, "pgcode", None) or getattr(orig, "sqlstate", None)


def _is_serialization_failure(orig: BaseException) -> bool:
    return _sqlstate(orig) in RETRYABLE_SQLSTATES


def _is_sqlite_locked(orig: BaseException) -> bool:
    msg = str(orig).lower()
    return "database is locked" in msg or "database table is locked" in msg


RETRYABLE_ERROR_RULES: list[Callable[[BaseException], bool]] = [
    _is_serialization_failure,
    _is_sqlite_locked,
]


def is_retryable(exc: BaseException) -> bool:
    """
    True if a SQLAlchemy DBAPIError wraps a driver error that a retry can resolve.
    Other exceptions (including IntegrityError from bad data) are permanent.
    """
    orig = getattr(exc, "orig", None)
    if orig is None:
        return False
    return any(rule(orig) for rule in RETRYABLE_ERROR_RULES)
