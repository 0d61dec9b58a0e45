"""Per-slot mutual exclusion for the reservation check-and-write sequence"""

from collections import defaultdict
from threading import Lock


class SlotLockRegistry:
    """
    One lock per time slot id.

    Two reservations on the same slot run their conflict check and insert one
    after the other; reservations on different slots do not wait on each other.
    """

    def __init__(self):
        self._guard = Lock()
        self._locks: dict[str, Lock] = defaultdict(Lock)

    def lock_for(self, slot_id: str) -> Lock:
        with self._guard:
            return self._locks[slot_id]


slot_locks = SlotLockRegistry()
