class RelayError(Exception):
    """Failure reported back to the channel that caused it."""

    code = "RELAY_ERROR"
    default_message = "Request failed"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_message(self) -> dict:
        return {"type": "error", "code": self.code, "message": self.message}


class Unauthorized(RelayError):
    code = "UNAUTHORIZED"
    default_message = "Unauthorized"


class RoomNotFound(RelayError):
    code = "ROOM_NOT_FOUND"
    default_message = "Room not found"


class NameInUse(RelayError):
    code = "NAME_IN_USE"
    default_message = "Name already in use"


class GameInProgress(RelayError):
    code = "GAME_IN_PROGRESS"
    default_message = "The game is currently running"


class TargetNotFound(RelayError):
    code = "TARGET_NOT_FOUND"
    default_message = "Target not found"


class TargetDisconnected(RelayError):
    code = "TARGET_DISCONNECTED"
    default_message = "Target is disconnected"


class ConnectionNotFound(RelayError):
    code = "CONNECTION_NOT_FOUND"
    default_message = "Connection not found"


class AlreadyInRoom(RelayError):
    code = "ALREADY_IN_ROOM"
    default_message = "Connection already belongs to a room"


class UnknownMessageType(RelayError):
    code = "UNKNOWN_MESSAGE_TYPE"
    default_message = "Unknown message type"


class InvalidMessageFormat(RelayError):
    code = "INVALID_MESSAGE_FORMAT"
    default_message = "Invalid message format"
