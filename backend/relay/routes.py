from flask import Blueprint, jsonify
from relay import lobby

main = Blueprint('main', __name__)

@main.route('/')
def index():
    stats = lobby.stats()
    return jsonify({'message': 'Matchmaking relay is running.', **stats})
