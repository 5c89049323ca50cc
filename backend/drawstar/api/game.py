from flask import Blueprint, jsonify, current_app
from flask_login import login_required, current_user
from drawstar.models import utcnow
from drawstar.services.game.errors import NotRoomMember, RoomNotFound
from drawstar.services.game.state import get_player_state
from drawstar.services.game.store import RoomStore

game = Blueprint('game', __name__)


@game.route('/<int:room_id>/state', methods=['GET'])
@login_required
def get_game_state(room_id):
    try:
        state = get_player_state(RoomStore(), room_id, current_user.id, utcnow())
    except RoomNotFound:
        return jsonify({'message': 'Room not found'}), 404
    except NotRoomMember:
        return jsonify({'message': 'You are not in this room'}), 403
    except Exception:
        current_app.logger.exception(f"[state] room={room_id} user={current_user.id}")
        return jsonify({'message': 'Server error'}), 500
    return jsonify(state)
