"""Per-company serialization of classification and posting runs."""

import threading
from contextlib import contextmanager
from typing import Iterator

_registry_lock = threading.Lock()
_company_locks: dict[int, threading.RLock] = {}


def _lock_for(company_id: int) -> threading.RLock:
    with _registry_lock:
        lock = _company_locks.get(company_id)
        if lock is None:
            lock = threading.RLock()
            _company_locks[company_id] = lock
        return lock


@contextmanager
def company_lock(company_id: int) -> Iterator[None]:
    """Hold the company's writer lock for the duration of the block.

    Re-entrant, so a posting call made from inside a reclassification run of
    the same company does not deadlock.
    """
    lock = _lock_for(company_id)
    with lock:
        yield
