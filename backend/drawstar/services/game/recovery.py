from datetime import datetime, timedelta

from flask import current_app

from .store import RoomSnapshot, RoomStore


def recover_room(store: RoomStore, room: RoomSnapshot, now: datetime) -> bool:
    """Best-effort self-heal after a failed transition attempt.

    If the room still shows the phase it had before the attempt, push its
    deadline out by RECOVERY_GRACE_SEC so the next pass retries the same
    transition. This is a heuristic, not a correctness guarantee: a room that
    keeps failing stalls until someone intervenes. Only the phase is compared,
    so a failure after commit on a transition that keeps the phase (the
    voting index moving on, then the broadcast failing) still gets its new
    deadline replaced by now + grace. Never raises.
    """
    try:
        store.rollback()
        current = store.get_snapshot(room.id)
        if current is None or current.current_phase != room.current_phase:
            current_app.logger.info(
                f"[recovery-skip] room={room.id} before={room.current_phase} "
                f"now={current.current_phase if current else None}"
            )
            return False

        grace = int(current_app.config.get('RECOVERY_GRACE_SEC', 30))
        extended = store.compare_and_set(
            room.id,
            current.current_phase,
            current.phase_end_time,
            {'phase_end_time': now + timedelta(seconds=grace)},
        )
        if not extended:
            store.rollback()
            return False
        store.commit()
        current_app.logger.warning(f"[recovery-extend] room={room.id} phase={room.current_phase} grace={grace}s")
        return True
    except Exception:
        current_app.logger.exception(f"[recovery-error] room={room.id}")
        try:
            store.rollback()
        except Exception:
            current_app.logger.exception(f"[recovery-error] room={room.id} rollback failed")
        return False
