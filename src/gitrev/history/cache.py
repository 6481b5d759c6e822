import logging
import threading
from typing import Callable, Dict, Optional

from gitrev.git_objects.identity import ObjectId
from gitrev.git_objects.models import Commit

logger = logging.getLogger(__name__)


class CommitCache:
    """Parsed commits of one repository, keyed by id.

    Commits are content addressed, so an entry never goes stale and nothing
    is evicted. The cache lives exactly as long as its Repository.
    """

    def __init__(self):
        self._commits: Dict[ObjectId, Commit] = {}
        self._lock = threading.Lock()

    def get(self, oid: ObjectId) -> Optional[Commit]:
        with self._lock:
            return self._commits.get(oid)

    def put(self, oid: ObjectId, commit: Commit) -> Commit:
        """Insert ``commit`` unless ``oid`` is already cached. Returns the cached commit."""
        with self._lock:
            return self._commits.setdefault(oid, commit)

    def get_or_load(self, oid: ObjectId, loader: Callable[[ObjectId], Commit]) -> Commit:
        commit = self.get(oid)
        if commit is not None:
            return commit
        # git runs outside the lock, two threads may both parse the same commit
        logger.debug("commit cache miss for %s", oid)
        return self.put(oid, loader(oid))

    def __contains__(self, oid: ObjectId) -> bool:
        with self._lock:
            return oid in self._commits

    def __len__(self) -> int:
        with self._lock:
            return len(self._commits)
