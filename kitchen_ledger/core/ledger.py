"""Loading and committing a user's aggregate.

Every write follows the same two steps: the operation computes a patch of
changed collections from the current snapshot, the patch is written to the
document store, and only after the write succeeds is the merged snapshot
returned.  If the write fails, StoreWriteError propagates and the caller's
snapshot is left as it was.

apply() serializes operations per user with a re-entrant lock, also taken
when the default document is created on first access, so concurrent requests
for the same aggregate cannot interleave their load/compute/write steps.
"""

import logging
import threading
from collections import defaultdict
from dataclasses import replace

from kitchen_ledger.db import documents
from kitchen_ledger.db.models import COLLECTIONS, UserData, serialize_changes

logger = logging.getLogger(__name__)

_locks: dict[int, threading.RLock] = defaultdict(threading.RLock)
_locks_guard = threading.Lock()


def _lock_for(user_id: int) -> threading.RLock:
    with _locks_guard:
        return _locks[user_id]


def get_user_data(user_id: int) -> UserData:
    """Return the user's aggregate, creating the default document on first access."""
    document = documents.load(user_id)
    if document is None:
        with _lock_for(user_id):
            document = documents.load(user_id)
            if document is None:
                data = UserData()
                documents.create(user_id, data.to_dict())
                logger.info("Created default document for user %s", user_id)
                return data
    return UserData.from_dict(document)


def commit(user_id: int, data: UserData, changes: dict) -> UserData:
    """Write changes to the store, then return data with the changes merged in."""
    unknown = set(changes) - set(COLLECTIONS)
    if unknown:
        raise ValueError(f"Unknown collections in patch: {sorted(unknown)}")
    if not changes:
        return data
    documents.patch(user_id, serialize_changes(changes))
    return replace(data, **changes)


def apply(user_id: int, operation, *args, **kwargs) -> UserData:
    """Run operation(data, *args, **kwargs) against the stored aggregate and commit its patch."""
    with _lock_for(user_id):
        data = get_user_data(user_id)
        changes = operation(data, *args, **kwargs)
        return commit(user_id, data, changes)
