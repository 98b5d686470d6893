from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy.exc import DisconnectionError, InterfaceError, OperationalError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError

from resort_deals.exceptions import RepositoryUnavailableError

# Failures that mean "the database can't answer right now", as opposed to bad
# data or bad SQL, which should surface unchanged.
UNAVAILABLE_ERRORS = (OperationalError, InterfaceError, DisconnectionError, PoolTimeoutError)


@contextmanager
def unavailable_on_error(operation: str) -> Iterator[None]:
    """Re-raise connectivity failures as RepositoryUnavailableError."""
    try:
        yield
    except UNAVAILABLE_ERRORS as exc:
        raise RepositoryUnavailableError(operation, exc) from exc
