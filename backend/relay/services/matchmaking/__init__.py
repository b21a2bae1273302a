"""Matchmaking domain services: queue, sessions, relay and voting.

This package holds the session lifecycle logic imported by socket handlers
and HTTP routes. Transport concerns (rooms, emits, background tasks) reach
it through the adapter in ``transport`` so the state machine can be driven
without a running Socket.IO server.
"""

from .errors import SessionNotFound, UpstreamError, UpstreamRejected, UpstreamUnavailable
from .lobby import Lobby
from .registry import AI, HUMAN, Session, SessionRegistry
from .queue import WaitingEntry, WaitingQueue

__all__ = [
    'AI',
    'HUMAN',
    'Lobby',
    'Session',
    'SessionNotFound',
    'SessionRegistry',
    'UpstreamError',
    'UpstreamRejected',
    'UpstreamUnavailable',
    'WaitingEntry',
    'WaitingQueue',
]
