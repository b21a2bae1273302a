from flask import current_app, request
from flask_socketio import emit
from relay import socketio, lobby


def _get_sid() -> str:
    # type: ignore: request.sid exists in Socket.IO context
    return request.sid  # type: ignore


def _session_id_from(data):
    # leave_game may carry the bare session id instead of an object
    if isinstance(data, str):
        return data
    if not isinstance(data, dict):
        return None
    session_id = data.get('sessionId') or data.get('roomId')
    return session_id if isinstance(session_id, str) else None


def handle_connect():
    current_app.logger.info(f"[connect] sid={_get_sid()}")


def handle_disconnect(reason=None):
    sid = _get_sid()
    current_app.logger.info(f"[disconnect] sid={sid} reason={reason}")
    lobby.disconnect(sid)


def handle_find_match(data=None):
    lobby.find_match(_get_sid())


def handle_cancel_search(data=None):
    lobby.cancel_search(_get_sid())


def handle_send_message(data):
    session_id = _session_id_from(data)
    text = (data or {}).get('text') if isinstance(data, dict) else None
    if not session_id or not isinstance(text, str):
        emit('error', {'message': 'sessionId and text are required'})
        return
    lobby.send_message(session_id, text, _get_sid())


def handle_leave_game(data):
    session_id = _session_id_from(data)
    if not session_id:
        emit('error', {'message': 'sessionId is required'})
        return
    lobby.leave_game(session_id, _get_sid())


def register_socketio_handlers(namespace: str = '/') -> None:
    """Register the matchmaking Socket.IO event handlers on ``namespace``."""
    socketio.on_event('connect', handle_connect, namespace=namespace)
    socketio.on_event('disconnect', handle_disconnect, namespace=namespace)
    socketio.on_event('find_match', handle_find_match, namespace=namespace)
    socketio.on_event('cancel_search', handle_cancel_search, namespace=namespace)
    socketio.on_event('send_message', handle_send_message, namespace=namespace)
    socketio.on_event('leave_game', handle_leave_game, namespace=namespace)
