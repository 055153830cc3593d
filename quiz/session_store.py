"""In-process session memory for quiz sessions.

Each session id maps to the one question it was started with. Entries expire
after their TTL; an expired entry is indistinguishable from one that was
never stored. State lives only in this process and is lost on restart.
"""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional


@dataclass(frozen=True)
class SessionEntry:
    session_id: str
    question_text: str
    created_at: float
    expires_at: float


class _Shard:
    __slots__ = ("lock", "entries")

    def __init__(self) -> None:
        self.lock = threading.Lock()
        self.entries: Dict[str, SessionEntry] = {}


class SessionStore:
    """TTL-bound map of session id to question text.

    Entries are spread over lock-striped shards so unrelated sessions do not
    contend on a single lock. Expiry is checked lazily on ``get``; ``sweep``
    drops everything already expired.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic, shards: int = 16) -> None:
        if shards < 1:
            raise ValueError("shards must be >= 1")
        self._clock = clock
        self._shards: List[_Shard] = [_Shard() for _ in range(shards)]

    def _shard(self, session_id: str) -> _Shard:
        return self._shards[hash(session_id) % len(self._shards)]

    def put(self, session_id: str, question_text: str, ttl: float) -> SessionEntry:
        now = self._clock()
        entry = SessionEntry(
            session_id=session_id,
            question_text=question_text,
            created_at=now,
            expires_at=now + ttl,
        )
        shard = self._shard(session_id)
        with shard.lock:
            shard.entries[session_id] = entry
        return entry

    def get_entry(self, session_id: str) -> Optional[SessionEntry]:
        shard = self._shard(session_id)
        with shard.lock:
            entry = shard.entries.get(session_id)
            if entry is None:
                return None
            if self._clock() >= entry.expires_at:
                del shard.entries[session_id]
                return None
            return entry

    def get(self, session_id: str) -> Optional[str]:
        entry = self.get_entry(session_id)
        return entry.question_text if entry else None

    def sweep(self) -> int:
        removed = 0
        for shard in self._shards:
            with shard.lock:
                now = self._clock()
                expired = [sid for sid, e in shard.entries.items() if now >= e.expires_at]
                for sid in expired:
                    del shard.entries[sid]
                removed += len(expired)
        return removed

    def __len__(self) -> int:
        total = 0
        for shard in self._shards:
            with shard.lock:
                total += len(shard.entries)
        return total
