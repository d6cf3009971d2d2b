"""
Revision-tagged memoization for values derived from a flat buffer.
"""

import logging
import threading
from typing import Any, Callable, Optional

logger = logging.getLogger(__name__)


class RevisionCache:
    """
    Holds one derived value together with the revision it was computed at.

    ``get(revision, compute)`` returns the stored value when the revision
    matches and otherwise calls ``compute()`` and stores the result. The
    ``(revision, value)`` pair is read and written under a lock so a
    reader never sees a value paired with the wrong revision. Computation
    itself runs outside the lock; two threads may both recompute, and the
    last one to finish wins.

    Parameters
    ----------
    name : str, optional
        Label used in debug logging.
    """

    def __init__(self, name: str = 'value'):
        self.name = name
        self._lock = threading.Lock()
        self._entry = None  # (revision, value)

    @property
    def revision(self) -> Optional[int]:
        with self._lock:
            return None if self._entry is None else self._entry[0]

    def get(self, revision: int, compute: Callable[[], Any]) -> Any:
        with self._lock:
            entry = self._entry
        if entry is not None and entry[0] == revision:
            return entry[1]

        logger.debug("Recomputing %s for revision %s", self.name, revision)
        value = compute()
        with self._lock:
            self._entry = (revision, value)
        return value

    def clear(self) -> None:
        with self._lock:
            self._entry = None
