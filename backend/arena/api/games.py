from flask import Blueprint, current_app, jsonify, request
from flask_login import current_user, login_required

from arena import socketio
from arena.api.schemas import SessionBody, parse_body, query_limit
from arena.services.games.integrity import validate_session

games = Blueprint('games', __name__)


def _leaderboard():
    return current_app.extensions['arena']['leaderboard']


@games.route('/session', methods=['POST'])
@login_required
def create_session():
    body = parse_body(SessionBody, request.get_json(silent=True))
    score, wave_reached, duration = body.score, body.waveReached, body.duration
    # Cheap rejection before any storage round-trip
    validate_session(score, wave_reached, duration)

    session = _leaderboard().create_game_session(current_user.id, score, wave_reached, duration)
    payload = session.to_dict()

    socketio.emit(
        'leaderboard_update',
        {'session': payload, 'username': session.user.username},
        to='leaderboard',
        namespace='/ws',
    )
    return jsonify({'message': 'Game session saved successfully', 'session': payload}), 201


@games.route('/leaderboard', methods=['GET'])
@login_required
def get_leaderboard():
    entries = _leaderboard().get_leaderboard(query_limit(request.args))
    return jsonify({'leaderboard': [entry.to_dict() for entry in entries]})


@games.route('/history', methods=['GET'])
@login_required
def get_history():
    service = _leaderboard()
    history = service.get_user_game_history(current_user.id, query_limit(request.args))
    stats = service.get_user_stats(current_user.id)
    return jsonify({
        'stats': stats.to_dict(),
        'history': [s.to_dict(include_user_id=True) for s in history],
    })
