from flask import Blueprint, jsonify, request
from relay import lobby
from relay.services.matchmaking import SessionNotFound


sessions = Blueprint('sessions', __name__)


@sessions.route('/guess', methods=['POST'])
def submit_guess():
    data = request.get_json(silent=True) or {}
    session_id = data.get('sessionId') or data.get('roomId')
    guess = data.get('guess')
    if not isinstance(session_id, str) or not session_id:
        return jsonify({'error': 'sessionId must be a non-empty string'}), 400
    if not isinstance(guess, str):
        return jsonify({'error': 'guess must be a string'}), 400

    try:
        result = lobby.submit_guess(session_id, guess, guesser=data.get('socketId'))
    except SessionNotFound:
        return jsonify({'error': 'Game session not found or already ended.'}), 404

    return jsonify(result.to_dict())


@sessions.route('/sessions/<string:session_id>', methods=['GET'])
def get_session(session_id):
    session = lobby.get_session(session_id)
    if session is None:
        return jsonify({'error': 'Game session not found or already ended.'}), 404
    return jsonify(session.to_dict())
