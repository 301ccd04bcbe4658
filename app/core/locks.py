from contextlib import contextmanager
from threading import Lock
from typing import Iterator


class _SessionLock:
    def __init__(self):
        self.lock = Lock()
        self.holders = 0


class SessionLockRegistry:
    def __init__(self):
        self._lock = Lock()
        self._session_locks: dict[str, _SessionLock] = {}

    @contextmanager
    def hold(self, session_id: str) -> Iterator[None]:
        with self._lock:
            entry = self._session_locks.get(session_id)
            if entry is None:
                entry = _SessionLock()
                self._session_locks[session_id] = entry
            entry.holders += 1
        try:
            with entry.lock:
                yield
        finally:
            with self._lock:
                entry.holders -= 1
                if entry.holders == 0:
                    self._session_locks.pop(session_id, None)

    def __len__(self) -> int:
        with self._lock:
            return len(self._session_locks)


session_locks = SessionLockRegistry()
