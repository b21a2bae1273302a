import logging
import time

from .matchmaker import Matchmaker
from .messaging import MessageRelay
from .queue import WaitingQueue
from .registry import SessionRegistry
from .responder import ResponderClient
from .transport import BackgroundScheduler, SocketIOTransport
from .voting import VoteResolver


class Lobby:
    """Owner of the waiting queue and session registry.

    Handlers and routes only talk to the lobby; the queue and registry are
    never mutated from outside it. Bind it to an app with ``init_app`` the
    same way the other Flask extensions are bound.
    """

    def __init__(self, app=None, socketio=None):
        self.queue = WaitingQueue()
        self.registry = SessionRegistry()
        self.logger = logging.getLogger(__name__)
        self.transport = None
        self.scheduler = None
        self.responder = None
        self.clock = time.monotonic
        self.match_delay = 10.0
        self.typing_delay = 1.5
        self.end_session_on_disconnect = False
        self.matchmaker = None
        self.relay = None
        self.voting = None
        if app is not None:
            self.init_app(app, socketio)

    def init_app(self, app, socketio) -> None:
        self.configure(
            transport=SocketIOTransport(socketio, namespace=app.config.get('SOCKETIO_NAMESPACE', '/')),
            scheduler=BackgroundScheduler(socketio, logger=app.logger),
            responder=ResponderClient(
                app.config.get('RESPONDER_URL'),
                path=app.config.get('RESPONDER_PATH', '/api/bot/respond'),
                timeout=float(app.config.get('RESPONDER_TIMEOUT_SEC', 10)),
            ),
            match_delay=int(app.config.get('MATCH_DELAY_MS', 10000)) / 1000.0,
            typing_delay=int(app.config.get('TYPING_DELAY_MS', 1500)) / 1000.0,
            end_session_on_disconnect=bool(app.config.get('END_SESSION_ON_DISCONNECT', False)),
            logger=app.logger,
        )
        app.extensions['lobby'] = self
        app.logger.info(
            f"[lobby-init] match_delay={self.match_delay}s typing_delay={self.typing_delay}s "
            f"responder={self.responder.url}"
        )

    def configure(self, transport=None, scheduler=None, responder=None, clock=None, match_delay=None,
                  typing_delay=None, end_session_on_disconnect=None, logger=None) -> None:
        """Swap collaborators and reset all state. Omitted arguments keep their current value."""
        self.reset()
        if transport is not None:
            self.transport = transport
        if scheduler is not None:
            self.scheduler = scheduler
        if responder is not None:
            self.responder = responder
        if clock is not None:
            self.clock = clock
        if match_delay is not None:
            self.match_delay = match_delay
        if typing_delay is not None:
            self.typing_delay = typing_delay
        if end_session_on_disconnect is not None:
            self.end_session_on_disconnect = end_session_on_disconnect
        if logger is not None:
            self.logger = logger

        self.matchmaker = Matchmaker(
            self.queue, self.registry, self.transport, self.scheduler,
            match_delay=self.match_delay, clock=self.clock, logger=self.logger,
        )
        self.relay = MessageRelay(
            self.registry, self.transport, self.scheduler, self.responder,
            typing_delay=self.typing_delay, logger=self.logger,
        )
        self.voting = VoteResolver(self.registry, self.transport, logger=self.logger)

    def reset(self) -> None:
        self.queue.clear()
        self.registry.clear()

    # ---- Operations ----

    def find_match(self, sid):
        self.matchmaker.find_match(sid)

    def cancel_search(self, sid):
        return self.matchmaker.cancel_search(sid)

    def send_message(self, session_id, text, sid):
        return self.relay.send_message(session_id, text, sid)

    def submit_guess(self, session_id, guess, guesser=None):
        return self.voting.submit_guess(session_id, guess, guesser=guesser)

    def leave_game(self, session_id, sid) -> bool:
        """End the session because ``sid`` left; pending votes do not keep it alive."""
        self.transport.emit('opponent_left', {'sessionId': session_id}, to=session_id, skip_sid=sid)
        self.transport.leave(sid, session_id)
        session = self.registry.end(session_id)
        if session is None:
            self.logger.debug(f"[leave-skip] session={session_id} sid={sid} unknown session")
            return False
        self.transport.close(session_id)
        self.logger.info(f"[leave] session={session_id} sid={sid} guesses={session.guess_count}")
        return True

    def disconnect(self, sid) -> None:
        if self.matchmaker.cancel_search(sid):
            return
        if not self.end_session_on_disconnect:
            return
        for session in self.registry.sessions_for(sid):
            self.leave_game(session.session_id, sid)

    def get_session(self, session_id):
        return self.registry.get(session_id)

    def stats(self):
        return {'waiting': len(self.queue), 'sessions': len(self.registry)}
