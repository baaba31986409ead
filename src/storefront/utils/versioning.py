"""Optimistic writes on top of protean's aggregate versions."""

from protean import UnitOfWork
from protean.exceptions import ExpectedVersionError


def save_if_current(repository, aggregate) -> bool:
    """Persist ``aggregate`` unless the stored copy has moved past the version it was loaded at.

    Returns False on a version conflict, in which case nothing is written.
    """
    try:
        with UnitOfWork():
            repository.add(aggregate)
    except ExpectedVersionError:
        return False
    return True
