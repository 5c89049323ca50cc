import math
from datetime import datetime
from typing import Any, Dict, Optional

from flask import current_app

from .errors import NotRoomMember, RoomNotFound
from .store import RoomStore


def seconds_left(phase_end_time: Optional[datetime], now: datetime) -> int:
    if phase_end_time is None:
        return 0
    return max(0, math.floor((phase_end_time - now).total_seconds()))


def get_player_state(store: RoomStore, room_id: int, user_id: int, now: datetime) -> Dict[str, Any]:
    """Report phase, timing and submission status of a room to one player.

    Read-only with respect to phase, round and timer fields. A user who lost
    membership but already drew in the current round is quietly re-added.
    """
    found = store.get_room_with_prompt(room_id)
    if found is None:
        raise RoomNotFound(room_id)
    room, prompt_text = found

    if not store.is_member(room_id, user_id):
        if not store.has_drawing(room_id, user_id, room.current_round):
            raise NotRoomMember(room_id)
        store.add_member(room_id, user_id)
        store.commit()
        current_app.logger.info(f"[rejoin] room={room_id} user={user_id} round={room.current_round}")

    has_submitted = False
    if room.current_phase == 'drawing':
        has_submitted = store.has_drawing(room_id, user_id, room.current_round)

    return {
        'roomId': room.id,
        'phase': room.current_phase,
        'round': room.current_round,
        'totalRounds': room.rounds,
        'prompt': prompt_text,
        'timeLeft': seconds_left(room.phase_end_time, now),
        'hasSubmitted': has_submitted,
    }
