from dataclasses import dataclass
from typing import Any, Protocol, Union


class Channel(Protocol):
    """Transport side of a connection.

    ``send`` must not block; delivery happens later on the transport's own
    task. Channels are compared by identity.
    """

    def send(self, message: Any) -> None: ...

    def close(self) -> None: ...


@dataclass
class HostConnection:
    room_id: str


@dataclass
class ClientConnection:
    room_id: str
    name: str
    alive: bool = True


Connection = Union[HostConnection, ClientConnection]
