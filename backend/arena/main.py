from datetime import datetime, timezone

from flask import Blueprint, jsonify

main = Blueprint('main', __name__)


@main.route('/health')
def health():
    return jsonify({
        'status': 'ok',
        'timestamp': datetime.now(timezone.utc).isoformat().replace('+00:00', 'Z'),
    })
