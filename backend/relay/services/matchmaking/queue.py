import threading
from collections import OrderedDict
from dataclasses import dataclass
from typing import Dict, Optional, Tuple


@dataclass(eq=False)
class WaitingEntry:
    sid: str
    enqueued_at: float
    fallback: Optional[object] = None

    def cancel_fallback(self) -> None:
        if self.fallback is not None:
            self.fallback.cancel()


class WaitingQueue:
    """FIFO of connections waiting for a partner, keyed by connection id.

    Entries are compared by identity: a fallback timer holding an entry that
    was paired, cancelled or replaced by a fresh enqueue can never remove the
    newer entry for the same connection.
    """

    def __init__(self):
        self._entries: Dict[str, WaitingEntry] = OrderedDict()
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, sid) -> bool:
        return sid in self._entries

    def pair_or_enqueue(self, sid: str, now: float) -> Tuple[Optional[WaitingEntry], Optional[WaitingEntry]]:
        """Pop the earliest waiting partner, or enqueue ``sid`` when there is none.

        Returns ``(partner, None)`` on a pairing, ``(None, entry)`` when the
        connection was enqueued, and ``(None, None)`` when it was already
        waiting.
        """
        with self._lock:
            if sid in self._entries:
                return None, None
            if self._entries:
                _, partner = self._entries.popitem(last=False)
                return partner, None
            entry = WaitingEntry(sid=sid, enqueued_at=now)
            self._entries[sid] = entry
            return None, entry

    def remove(self, sid: str, entry: Optional[WaitingEntry] = None) -> Optional[WaitingEntry]:
        """Remove the entry for ``sid``; when ``entry`` is given, only if it is still that entry."""
        with self._lock:
            current = self._entries.get(sid)
            if current is None or (entry is not None and current is not entry):
                return None
            del self._entries[sid]
            return current

    def clear(self) -> None:
        with self._lock:
            entries = list(self._entries.values())
            self._entries.clear()
        for entry in entries:
            entry.cancel_fallback()
