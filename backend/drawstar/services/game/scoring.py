import math
from typing import Dict, Optional

from .store import RoomStore

RESULT_RANK_PLACEHOLDER = 0


def score_from_average(avg_rating: Optional[float]) -> int:
    """Map a 0-5 mean star rating to a 0-100 score, rounding halves up.

    A member with no rated drawings scores 0.
    """
    if not avg_rating:
        return 0
    score = int(math.floor(avg_rating * 20 + 0.5))
    return max(0, min(100, score))


def calculate_final_scores(store: RoomStore, room_id: int) -> Dict[int, int]:
    """Upsert one GameResult per current room member.

    Rows are flushed, not committed: the caller commits them together with
    the room finalization, or rolls everything back.
    """
    scores: Dict[int, int] = {}
    for user_id, username in store.list_members(room_id):
        score = score_from_average(store.average_rating(room_id, user_id))
        store.upsert_result(room_id, user_id, username, score, RESULT_RANK_PLACEHOLDER)
        scores[user_id] = score
    return scores
