"""Room store: the single storage boundary shared by the game services.

Every component receives a ``RoomStore`` instead of touching the session
directly, so tests can swap in a store that fails on demand. Rooms leave the
store as frozen ``RoomSnapshot`` values; writes go back through
``compare_and_set`` so a stale snapshot can never overwrite newer state.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import func
from sqlalchemy.dialects.postgresql import insert as postgresql_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert

from drawstar import db
from drawstar.models import Drawing, GameResult, Prompt, Room, RoomPlayer, Star, User, utcnow
from .errors import NoPromptAvailable


@dataclass(frozen=True)
class RoomSnapshot:
    id: int
    status: str
    current_phase: Optional[str]
    current_round: int
    rounds: int
    current_drawing_index: int
    current_prompt_id: Optional[int]
    phase_end_time: Optional[datetime]
    drawing_time: int
    voting_time: int

    @classmethod
    def from_room(cls, room: Room) -> 'RoomSnapshot':
        return cls(
            id=room.id,
            status=room.status,
            current_phase=room.current_phase,
            current_round=int(room.current_round or 1),
            rounds=int(room.rounds or 1),
            current_drawing_index=int(room.current_drawing_index or 0),
            current_prompt_id=room.current_prompt_id,
            phase_end_time=room.phase_end_time,
            drawing_time=int(room.drawing_time),
            voting_time=int(room.voting_time),
        )


class RoomStore:
    """Flask-SQLAlchemy backed store. Must be used inside an app context."""

    def __init__(self, session=None):
        self._session = session

    @property
    def session(self):
        return self._session if self._session is not None else db.session

    # ---- reads ----

    def list_expired_rooms(self, now: datetime) -> List[RoomSnapshot]:
        rooms = (
            self.session.query(Room)
            .filter(
                Room.status == 'playing',
                Room.phase_end_time.isnot(None),
                Room.phase_end_time < now,
            )
            .order_by(Room.phase_end_time)
            .all()
        )
        return [RoomSnapshot.from_room(r) for r in rooms]

    def get_snapshot(self, room_id: int) -> Optional[RoomSnapshot]:
        room = self.session.get(Room, room_id, populate_existing=True)
        return RoomSnapshot.from_room(room) if room else None

    def get_room_with_prompt(self, room_id: int) -> Optional[Tuple[RoomSnapshot, Optional[str]]]:
        row = (
            self.session.query(Room, Prompt.text)
            .outerjoin(Prompt, Room.current_prompt_id == Prompt.id)
            .filter(Room.id == room_id)
            .first()
        )
        if row is None:
            return None
        room, prompt_text = row
        return RoomSnapshot.from_room(room), prompt_text

    def count_drawings(self, room_id: int, round_number: int) -> int:
        return (
            self.session.query(func.count(Drawing.id))
            .filter(Drawing.room_id == room_id, Drawing.round_number == round_number)
            .scalar()
        ) or 0

    def has_drawing(self, room_id: int, user_id: int, round_number: int) -> bool:
        return (
            self.session.query(Drawing.id)
            .filter_by(room_id=room_id, artist_id=user_id, round_number=round_number)
            .first()
        ) is not None

    def is_member(self, room_id: int, user_id: int) -> bool:
        return (
            self.session.query(RoomPlayer.id)
            .filter_by(room_id=room_id, user_id=user_id)
            .first()
        ) is not None

    def list_members(self, room_id: int) -> List[Tuple[int, str]]:
        rows = (
            self.session.query(RoomPlayer.user_id, User.username)
            .join(User, RoomPlayer.user_id == User.id)
            .filter(RoomPlayer.room_id == room_id)
            .order_by(RoomPlayer.user_id)
            .all()
        )
        return [(user_id, username) for user_id, username in rows]

    def average_rating(self, room_id: int, user_id: int) -> Optional[float]:
        avg = (
            self.session.query(func.avg(Star.rating))
            .join(Drawing, Star.drawing_id == Drawing.id)
            .filter(Drawing.room_id == room_id, Drawing.artist_id == user_id)
            .scalar()
        )
        return float(avg) if avg is not None else None

    def pick_random_prompt_id(self) -> int:
        prompt_id = self.session.query(Prompt.id).order_by(func.random()).limit(1).scalar()
        if prompt_id is None:
            raise NoPromptAvailable('prompt pool is empty')
        return prompt_id

    # ---- writes ----

    def compare_and_set(
        self,
        room_id: int,
        expected_phase: Optional[str],
        expected_end_time: Optional[datetime],
        values: Dict[str, Any],
    ) -> bool:
        """Update the room only if it still holds the expected phase and deadline."""
        query = self.session.query(Room).filter(Room.id == room_id, Room.current_phase == expected_phase)
        if expected_end_time is None:
            query = query.filter(Room.phase_end_time.is_(None))
        else:
            query = query.filter(Room.phase_end_time == expected_end_time)
        updated = query.update(values, synchronize_session=False)
        return updated == 1

    def add_member(self, room_id: int, user_id: int) -> None:
        """Insert membership, ignoring a row another request already inserted."""
        dialect = self.session.get_bind().dialect.name
        if dialect == 'postgresql':
            insert = postgresql_insert
        elif dialect == 'sqlite':
            insert = sqlite_insert
        else:
            if not self.is_member(room_id, user_id):
                self.session.add(RoomPlayer(room_id=room_id, user_id=user_id))
            return
        stmt = (
            insert(RoomPlayer)
            .values(room_id=room_id, user_id=user_id, joined_at=utcnow())
            .on_conflict_do_nothing(index_elements=['room_id', 'user_id'])
        )
        self.session.execute(stmt)

    def upsert_result(self, room_id: int, user_id: int, username: str, score: int, rank: int) -> None:
        result = self.session.query(GameResult).filter_by(room_id=room_id, user_id=user_id).first()
        if result is None:
            result = GameResult(room_id=room_id, user_id=user_id)
        result.username = username
        result.score = score
        result.rank = rank
        self.session.add(result)
        self.session.flush()

    def commit(self) -> None:
        self.session.commit()

    def rollback(self) -> None:
        self.session.rollback()
