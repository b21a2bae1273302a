import logging
import time

from .queue import WaitingEntry, WaitingQueue
from .registry import AI, HUMAN, SessionRegistry


def match_payload(session_id: str, kind: str) -> dict:
    return {'sessionId': session_id, 'opponent': kind, 'opponentKind': kind}


class Matchmaker:
    """Pairs waiting connections FIFO or times them out into an AI session.

    Every match is announced no earlier than ``match_delay`` seconds after
    the first party started waiting, so even an instant pairing shows the
    same perceived search time as an AI fallback.
    """

    def __init__(self, queue: WaitingQueue, registry: SessionRegistry, transport, scheduler,
                 match_delay: float = 10.0, clock=time.monotonic, logger=None):
        self.queue = queue
        self.registry = registry
        self.transport = transport
        self.scheduler = scheduler
        self.match_delay = match_delay
        self.clock = clock
        self.logger = logger or logging.getLogger(__name__)

    def find_match(self, sid: str) -> None:
        now = self.clock()
        partner, entry = self.queue.pair_or_enqueue(sid, now)
        if partner is not None:
            partner.cancel_fallback()
            self._start_human_session(partner, sid, now)
        elif entry is not None:
            entry.fallback = self.scheduler.call_later(
                self.match_delay, self._fallback_to_ai, entry, name=f"fallback:{sid}"
            )
            self.logger.info(f"[queue-join] sid={sid} waiting={len(self.queue)}")
        else:
            self.logger.debug(f"[queue-skip] sid={sid} already waiting")

    def cancel_search(self, sid: str) -> bool:
        entry = self.queue.remove(sid)
        if entry is None:
            return False
        entry.cancel_fallback()
        self.logger.info(f"[queue-cancel] sid={sid} waited={self.clock() - entry.enqueued_at:.2f}s")
        return True

    def _start_human_session(self, partner: WaitingEntry, sid: str, now: float) -> None:
        session = self.registry.create(HUMAN, (partner.sid, sid))
        room = session.session_id
        self.transport.join(partner.sid, room)
        self.transport.join(sid, room)

        remaining = max(0.0, self.match_delay - (now - partner.enqueued_at))
        task = self.scheduler.call_later(remaining, self._announce_human, room, name=f"announce:{room}")
        self.registry.attach_task(room, task)
        self.logger.info(
            f"[match-human] session={room} a={partner.sid} b={sid} announce_in={remaining:.2f}s"
        )

    def _announce_human(self, session_id: str) -> None:
        if session_id not in self.registry:
            self.logger.debug(f"[announce-skip] session={session_id} ended before announcement")
            return
        self.transport.emit('match_found', match_payload(session_id, HUMAN), to=session_id)

    def _fallback_to_ai(self, entry: WaitingEntry) -> None:
        # Identity check: the entry may have been paired, cancelled or replaced meanwhile
        if self.queue.remove(entry.sid, entry) is None:
            self.logger.debug(f"[fallback-skip] sid={entry.sid} no longer waiting")
            return
        session = self.registry.create(AI, (entry.sid,))
        self.transport.join(entry.sid, session.session_id)
        self.transport.emit('match_found', match_payload(session.session_id, AI), to=entry.sid)
        self.logger.info(f"[fallback-ai] session={session.session_id} sid={entry.sid}")
