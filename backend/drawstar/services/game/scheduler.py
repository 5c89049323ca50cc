from datetime import datetime
from typing import Optional

from flask import current_app

from drawstar.models import utcnow

from .phases import advance_room
from .recovery import recover_room
from .store import RoomStore


def run_phase_pass(store: Optional[RoomStore] = None, now: Optional[datetime] = None) -> int:
    """Advance every playing room whose phase deadline has passed.

    Safe to run concurrently with itself: each write is a compare-and-set, so
    a room already moved by another pass is skipped. A failure while listing
    rooms propagates; a failure for one room is logged, handed to recovery
    and does not stop the rest. Returns the number of transitions applied.
    """
    store = store or RoomStore()
    now = now or utcnow()

    expired = store.list_expired_rooms(now)
    processed = 0
    for room in expired:
        try:
            if advance_room(store, room, now):
                processed += 1
        except Exception:
            current_app.logger.exception(
                f"[phase-error] room={room.id} phase={room.current_phase} round={room.current_round}"
            )
            recover_room(store, room, now)

    current_app.logger.info(f"[phase-pass] processed={processed} expired={len(expired)}")
    return processed
