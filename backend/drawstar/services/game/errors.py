class GameError(Exception):
    """Base class for game service errors."""


class NoPromptAvailable(GameError):
    """The prompt pool is empty, so a new round cannot start."""


class RoomNotFound(GameError):
    pass


class NotRoomMember(GameError):
    """The user is not in the room and has no drawing that justifies a rejoin."""
