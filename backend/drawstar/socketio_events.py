from flask_socketio import join_room, leave_room, emit
from drawstar import socketio


def room_channel(room_id) -> str:
    return f"room:{room_id}"


def handle_connect():
    emit('connected', {'message': 'Connected to /ws'})


def handle_join_game(data):
    room_id = (data or {}).get('room_id')
    if room_id is None:
        emit('error', {'message': 'room_id is required'})
        return
    channel = room_channel(room_id)
    join_room(channel)
    emit('joined', {'room': channel})


def handle_leave_game(data):
    room_id = (data or {}).get('room_id')
    if room_id is None:
        emit('error', {'message': 'room_id is required'})
        return
    channel = room_channel(room_id)
    leave_room(channel)
    emit('left', {'room': channel})


def handle_ping(data):
    emit('pong', data or {})


def register_socketio_handlers() -> None:
    """Register Socket.IO event handlers on namespace '/ws'.

    Clients join a room channel to be told when the scheduler moves the room
    on; the payload is only a hint to poll the state endpoint.
    """
    socketio.on_event('connect', handle_connect, namespace='/ws')
    socketio.on_event('join_game', handle_join_game, namespace='/ws')
    socketio.on_event('leave_game', handle_leave_game, namespace='/ws')
    socketio.on_event('ping', handle_ping, namespace='/ws')
