from flask import Blueprint, current_app, jsonify, request

from arena.api.schemas import LoginBody, RegisterBody, parse_body

auth = Blueprint('auth', __name__)


def _credentials():
    return current_app.extensions['arena']['credentials']


@auth.route('/register', methods=['POST'])
def register():
    body = parse_body(RegisterBody, request.get_json(silent=True))
    result = _credentials().register(body.username, body.email, body.password)
    return jsonify({
        'message': 'User registered successfully',
        'user': result['user'],
        'token': result['token'],
    }), 201


@auth.route('/login', methods=['POST'])
def login():
    body = parse_body(LoginBody, request.get_json(silent=True))
    result = _credentials().login(body.email, body.password)
    return jsonify({
        'message': 'Login successful',
        'user': result['user'],
        'token': result['token'],
    })
