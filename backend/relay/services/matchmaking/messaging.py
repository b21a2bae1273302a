import logging

from .errors import UpstreamRejected, UpstreamUnavailable
from .registry import AI, SessionRegistry

SYSTEM_DISCONNECT_TEXT = '*System: Opponent disconnected.*'


class MessageRelay:
    def __init__(self, registry: SessionRegistry, transport, scheduler, responder,
                 typing_delay: float = 1.5, logger=None):
        self.registry = registry
        self.transport = transport
        self.scheduler = scheduler
        self.responder = responder
        self.typing_delay = typing_delay
        self.logger = logger or logging.getLogger(__name__)

    def send_message(self, session_id: str, text: str, sid: str) -> bool:
        """Relay ``text`` to the other members of the session.

        Unknown sessions are ignored: the chat may have ended while the
        message was in flight. For AI sessions the responder is asked for a
        reply in the background.
        """
        session = self.registry.get(session_id)
        if session is None:
            self.logger.debug(f"[message-skip] session={session_id} sid={sid} unknown session")
            return False

        self.transport.emit('receive_message', {'text': text, 'sender': 'them'}, to=session_id, skip_sid=sid)

        if session.kind == AI:
            self.scheduler.spawn(self._ask_responder, session_id, text, sid, name=f"responder:{session_id}")
        return True

    def _ask_responder(self, session_id: str, text: str, sid: str) -> None:
        try:
            reply = self.responder.respond(text, session_id)
        except UpstreamRejected as exc:
            self.logger.error(f"[responder-rejected] session={session_id} status={exc.status_code}")
            return
        except UpstreamUnavailable as exc:
            self.logger.error(f"[responder-error] session={session_id} error={exc}")
            if session_id in self.registry:
                self.transport.emit('receive_message', {'text': SYSTEM_DISCONNECT_TEXT, 'sender': 'system'}, to=sid)
            return

        # The session may have ended while the request was in flight
        if session_id not in self.registry:
            self.logger.debug(f"[responder-drop] session={session_id} ended during request")
            return
        self.logger.info(f"[responder-reply] session={session_id} chars={len(reply)}")
        task = self.scheduler.call_later(
            self.typing_delay, self._deliver_reply, session_id, sid, reply, name=f"typing:{session_id}"
        )
        self.registry.attach_task(session_id, task)

    def _deliver_reply(self, session_id: str, sid: str, reply: str) -> None:
        if session_id not in self.registry:
            return
        self.transport.emit('receive_message', {'text': reply, 'sender': 'them'}, to=sid)
