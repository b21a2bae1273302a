import threading
import time
import uuid
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from .errors import SessionNotFound

HUMAN = 'human'
AI = 'ai'
KINDS = (HUMAN, AI)


@dataclass(eq=False)
class Session:
    session_id: str
    kind: str
    participants: Tuple[str, ...]
    guess_count: int = 0
    created_at: float = field(default_factory=time.time)
    tasks: List[object] = field(default_factory=list, repr=False)

    @property
    def expected_guesses(self) -> int:
        # One guess per human participant
        return len(self.participants)

    def other_participants(self, sid: str) -> Tuple[str, ...]:
        return tuple(p for p in self.participants if p != sid)

    def to_dict(self):
        return {
            'sessionId': self.session_id,
            'kind': self.kind,
            'participants': list(self.participants),
            'guessCount': self.guess_count,
        }


def generate_session_id() -> str:
    return str(uuid.uuid4())


class SessionRegistry:
    """In-memory map of live sessions.

    Every mutation happens under one lock; callers receive the ``Session``
    objects but only the registry changes ``guess_count`` or membership.
    """

    def __init__(self):
        self._sessions: Dict[str, Session] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, session_id) -> bool:
        return session_id in self._sessions

    def create(self, kind: str, participants) -> Session:
        if kind not in KINDS:
            raise ValueError(f"unknown session kind: {kind!r}")
        participants = tuple(participants)
        if len(participants) != (1 if kind == AI else 2):
            raise ValueError(f"{kind} session needs {1 if kind == AI else 2} participants")
        with self._lock:
            session_id = generate_session_id()
            while session_id in self._sessions:
                session_id = generate_session_id()
            session = Session(session_id=session_id, kind=kind, participants=participants)
            self._sessions[session_id] = session
            return session

    def get(self, session_id) -> Optional[Session]:
        return self._sessions.get(session_id)

    def sessions_for(self, sid: str) -> List[Session]:
        with self._lock:
            return [s for s in self._sessions.values() if sid in s.participants]

    def attach_task(self, session_id, task) -> bool:
        """Track a pending task so ending the session cancels it."""
        with self._lock:
            session = self._sessions.get(session_id)
            if session is None:
                return False
            session.tasks = [t for t in session.tasks if not (t.done or t.cancelled)]
            session.tasks.append(task)
            return True

    def record_guess(self, session_id) -> Tuple[Session, bool]:
        """Count one guess and end the session once every participant has guessed.

        Returns ``(session, ended)``. The increment and the teardown check
        form one critical section so concurrent guesses both land and the
        session is removed exactly once.
        """
        with self._lock:
            session = self._sessions.get(session_id)
            if session is None:
                raise SessionNotFound(session_id)
            session.guess_count += 1
            ended = session.kind == AI or session.guess_count >= session.expected_guesses
            if ended:
                del self._sessions[session_id]
        if ended:
            _cancel_tasks(session)
        return session, ended

    def end(self, session_id) -> Optional[Session]:
        with self._lock:
            session = self._sessions.pop(session_id, None)
        if session is not None:
            _cancel_tasks(session)
        return session

    def clear(self) -> None:
        with self._lock:
            sessions = list(self._sessions.values())
            self._sessions.clear()
        for session in sessions:
            _cancel_tasks(session)


def _cancel_tasks(session: Session) -> None:
    for task in session.tasks:
        task.cancel()
    session.tasks = []
