from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any, Callable, Dict

from flask import current_app

from drawstar import socketio
from drawstar.socketio_events import room_channel
from .scoring import calculate_final_scores
from .store import RoomSnapshot, RoomStore


START_VOTING = 'start_voting'
NEXT_DRAWING = 'next_drawing'
NEXT_ROUND = 'next_round'
FINISH = 'finish'
FINISH_EMPTY = 'finish_empty'


@dataclass(frozen=True)
class Transition:
    kind: str
    values: Dict[str, Any] = field(default_factory=dict)

    @property
    def computes_scores(self) -> bool:
        return self.kind == FINISH


def _finalize() -> Dict[str, Any]:
    return {'current_phase': 'results', 'status': 'completed', 'phase_end_time': None}


def _next_round(room: RoomSnapshot, now: datetime, pick_prompt: Callable[[], int]) -> Dict[str, Any]:
    return {
        'current_phase': 'drawing',
        'current_round': room.current_round + 1,
        'current_prompt_id': pick_prompt(),
        'phase_end_time': now + timedelta(seconds=room.drawing_time),
    }


def decide_transition(
    room: RoomSnapshot,
    total_drawings: int,
    now: datetime,
    pick_prompt: Callable[[], int],
) -> Transition:
    """Compute the next state for a room whose phase deadline has passed.

    Pure: nothing is written here. ``pick_prompt`` is only called when a new
    round starts. Rules, in order:

    - drawing -> voting, index 0, deadline now + voting_time
    - voting with no drawings: finish on the last round, else next round
    - voting on the last drawing: score and finish on the last round, else next round
    - voting with drawings left: index + 1, deadline now + voting_time
    """
    if room.current_phase == 'drawing':
        return Transition(START_VOTING, {
            'current_phase': 'voting',
            'current_drawing_index': 0,
            'phase_end_time': now + timedelta(seconds=room.voting_time),
        })

    if room.current_phase != 'voting':
        raise ValueError(f"room {room.id} has no timed phase to advance from: {room.current_phase!r}")

    last_round = room.current_round >= room.rounds

    if total_drawings == 0:
        if last_round:
            return Transition(FINISH_EMPTY, _finalize())
        return Transition(NEXT_ROUND, _next_round(room, now, pick_prompt))

    if room.current_drawing_index >= total_drawings - 1:
        if last_round:
            return Transition(FINISH, _finalize())
        return Transition(NEXT_ROUND, _next_round(room, now, pick_prompt))

    return Transition(NEXT_DRAWING, {
        'current_drawing_index': room.current_drawing_index + 1,
        'phase_end_time': now + timedelta(seconds=room.voting_time),
    })


def apply_transition(store: RoomStore, room: RoomSnapshot, transition: Transition) -> bool:
    """Persist a transition with a compare-and-set on the snapshot's phase and deadline.

    The room row is claimed first, so a pass that lost the race sees zero
    rows and skips before touching results. Scores are then written in the
    same transaction as the final room write. Returns False, with everything
    rolled back, when another pass already moved the room. Store errors
    propagate to the caller.
    """
    applied = store.compare_and_set(room.id, room.current_phase, room.phase_end_time, transition.values)
    if not applied:
        store.rollback()
        current_app.logger.info(
            f"[phase-stale] room={room.id} phase={room.current_phase} round={room.current_round} kind={transition.kind}"
        )
        return False

    if transition.computes_scores:
        calculate_final_scores(store, room.id)

    store.commit()
    current_app.logger.info(
        f"[phase-advance] room={room.id} kind={transition.kind} from={room.current_phase} "
        f"to={transition.values.get('current_phase', room.current_phase)} "
        f"round={transition.values.get('current_round', room.current_round)}"
    )
    socketio.emit(
        'state_update',
        {'room_id': room.id, 'kind': transition.kind},
        to=room_channel(room.id),
        namespace='/ws',
    )
    return True


def advance_room(store: RoomStore, room: RoomSnapshot, now: datetime) -> bool:
    """Decide and apply the next transition for one expired room."""
    total_drawings = 0
    if room.current_phase == 'voting':
        total_drawings = store.count_drawings(room.id, room.current_round)
    transition = decide_transition(room, total_drawings, now, store.pick_random_prompt_id)
    return apply_transition(store, room, transition)
