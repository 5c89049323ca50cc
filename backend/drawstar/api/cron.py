from flask import Blueprint, jsonify, request, current_app
from drawstar.services.game.scheduler import run_phase_pass

cron = Blueprint('cron', __name__)


def _is_authorized_trigger() -> bool:
    header = current_app.config.get('CRON_HEADER_NAME', 'X-Vercel-Cron')
    expected = current_app.config.get('CRON_HEADER_VALUE', 'true')
    return bool(expected) and request.headers.get(header) == expected


@cron.route('/check-game-phases', methods=['GET', 'POST'])
def check_game_phases():
    if not _is_authorized_trigger():
        return jsonify({'message': 'Unauthorized'}), 401

    try:
        processed = run_phase_pass()
    except Exception:
        current_app.logger.exception("[phase-pass] failed to list expired rooms")
        return jsonify({'message': 'Server error'}), 500

    return jsonify({
        'success': True,
        'processed': processed,
        'message': f'Processed {processed} rooms',
    })
