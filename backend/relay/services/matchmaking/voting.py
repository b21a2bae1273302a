import logging
from dataclasses import dataclass
from typing import Optional

from .registry import SessionRegistry


@dataclass(frozen=True)
class GuessResult:
    accepted: bool
    is_correct: bool
    actual_kind: str
    session_ended: bool

    def to_dict(self):
        return {
            'success': self.accepted,
            'isCorrect': self.is_correct,
            'actualKind': self.actual_kind,
            'actualIdentity': self.actual_kind,
        }


class VoteResolver:
    def __init__(self, registry: SessionRegistry, transport, logger=None):
        self.registry = registry
        self.transport = transport
        self.logger = logger or logging.getLogger(__name__)

    def submit_guess(self, session_id: str, guess: str, guesser: Optional[str] = None) -> GuessResult:
        """Record one participant's guess of the opponent's identity.

        Raises ``SessionNotFound`` if the session already ended. An AI
        session ends on its single guess; a human session stays alive after
        the first guess, and the peer is told so it can reveal its own
        guess controls.
        """
        session, ended = self.registry.record_guess(session_id)
        is_correct = session.kind.lower() == guess.lower()

        if ended:
            self.transport.close(session_id)
        else:
            self.transport.emit('opponent_guessed', {'sessionId': session_id}, to=session_id, skip_sid=guesser)

        self.logger.info(
            f"[guess] session={session_id} kind={session.kind} guess={guess[:32]!r} "
            f"correct={is_correct} count={session.guess_count} ended={ended}"
        )
        return GuessResult(accepted=True, is_correct=is_correct, actual_kind=session.kind, session_ended=ended)
